"""
Pytest configuration and shared fixtures for feedback-core tests.

Provides:
    - Simulated clock
    - Sample schemas and payloads
    - Recording plugins for ordering assertions
    - Common test utilities
"""

import asyncio
from typing import Any, Optional

import pytest
from pydantic import BaseModel, Field

from feedback_core.core.clock import ManualClock
from feedback_core.models.feedback import FeedbackItem, ValidationResult
from feedback_core.models.plugins import HandlerPlugin, TransformerPlugin, ValidatorPlugin
from feedback_core.plugins.handlers.memory import MemoryHandler


# ========== Schemas ==========


class NpsScore(BaseModel):
    """NPS payload used across tests."""

    score: int = Field(..., ge=0, le=10)
    comment: Optional[str] = None


@pytest.fixture
def nps_schema() -> type:
    """Pydantic schema for NPS payloads."""
    return NpsScore


@pytest.fixture
def sample_payload() -> dict:
    """Valid NPS payload."""
    return {"score": 9, "comment": "Great!"}


# ========== Clock Fixtures ==========


@pytest.fixture
def manual_clock() -> ManualClock:
    """
    Simulated clock starting at t=0.

    Returns:
        ManualClock instance; time only moves on ``await clock.advance(ms)``
    """
    return ManualClock()


class FixedJitter:
    """Random source whose uniform() always returns the same value."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def uniform(self, a: float, b: float) -> float:
        return self.value


@pytest.fixture
def no_jitter() -> FixedJitter:
    """Random source producing zero jitter."""
    return FixedJitter(0.0)


# ========== Plugin Fixtures ==========


class RecordingValidator(ValidatorPlugin):
    """Validator returning fixed errors, optionally after a delay."""

    def __init__(self, name: str, errors: Optional[list] = None, delay: float = 0.0, log: Optional[list] = None):
        self.name = name
        self.errors = errors or []
        self.delay = delay
        self.log = log if log is not None else []
        self.calls: list = []

    async def validate(self, data: Any) -> ValidationResult:
        self.calls.append(data)
        if self.delay:
            await asyncio.sleep(self.delay)
        self.log.append(self.name)
        return ValidationResult.from_errors(self.errors)


class FailingValidator(ValidatorPlugin):
    """Validator that raises instead of reporting."""

    def __init__(self, name: str = "broken-validator"):
        self.name = name

    def validate(self, data: Any) -> ValidationResult:
        raise RuntimeError("validator exploded")


class TagTransformer(TransformerPlugin):
    """Transformer that appends its name to metadata['tags']."""

    def __init__(self, name: str):
        self.name = name

    def transform(self, item: FeedbackItem) -> FeedbackItem:
        tags = list(item.metadata.get("tags", [])) + [self.name]
        return item.model_copy(update={"metadata": {**item.metadata, "tags": tags}})


class RecordingHandler(HandlerPlugin):
    """Async handler that records when it starts and finishes."""

    def __init__(self, name: str, started: list, finished: list, fail: bool = False):
        self.name = name
        self.started = started
        self.finished = finished
        self.fail = fail

    async def handle(self, item: FeedbackItem) -> None:
        self.started.append(self.name)
        if self.fail:
            raise RuntimeError(f"{self.name} failed")
        await asyncio.sleep(0)
        self.finished.append(self.name)


class FlakyHandler(HandlerPlugin):
    """Handler that fails a fixed number of times before succeeding."""

    def __init__(self, failures: int, name: str = "flaky-handler"):
        self.name = name
        self.failures = failures
        self.attempts = 0
        self.items: list = []

    def handle(self, item: FeedbackItem) -> None:
        self.attempts += 1
        self.items.append(item)
        if self.attempts <= self.failures:
            raise ConnectionError(f"attempt {self.attempts} failed")


@pytest.fixture
def memory_handler() -> MemoryHandler:
    """Fresh unbounded MemoryHandler."""
    return MemoryHandler()


@pytest.fixture
def sample_item() -> FeedbackItem:
    """
    Collected NPS item.

    Returns:
        FeedbackItem with fixed id and timestamp
    """
    return FeedbackItem(
        id="item-1",
        type="nps",
        data={"score": 9},
        metadata={"source": "web"},
        timestamp=1_700_000_000_000,
    )
