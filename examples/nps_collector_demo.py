"""
FeedbackCollector usage examples.

Demonstrates schema validation, plugins, lifecycle hooks and handler
retry for an NPS survey widget.
"""

import asyncio
import logging
import random
from typing import Optional

from pydantic import BaseModel, Field

from feedback_core import (
    ConsoleHandler,
    FeedbackCollector,
    FeedbackItem,
    MemoryHandler,
    RetryConfig,
    TransformerPlugin,
    ValidationError,
    create_callback_handler,
)
from feedback_core.utils.logger import setup_logger


class NpsScore(BaseModel):
    """NPS survey payload."""

    score: int = Field(..., ge=0, le=10)
    comment: Optional[str] = Field(None, max_length=500)


class NpsCategory(TransformerPlugin):
    """Tag each item as promoter, passive or detractor."""

    name = "nps-category"

    def transform(self, item: FeedbackItem) -> FeedbackItem:
        score = item.data["score"]
        if score >= 9:
            category = "promoter"
        elif score >= 7:
            category = "passive"
        else:
            category = "detractor"
        return item.model_copy(update={"metadata": {**item.metadata, "category": category}})


async def example_basic_collection():
    """Demonstrate validation, transformation and handlers."""
    print("=== Basic Collection ===\n")

    memory = MemoryHandler(max_items=100)
    collector = (
        FeedbackCollector(type="nps", schema=NpsScore, default_metadata={"source": "web"})
        .use(NpsCategory())
        .use(memory)
        .use(ConsoleHandler(prefix="[NPS]"))
    )

    print("1. Collecting a valid score...")
    item = await collector.collect({"score": 9, "comment": "Great!"}, {"user_id": "u-1"})
    print(f"   ✓ Collected {item.id} ({item.metadata['category']})\n")

    print("2. Collecting an out-of-range score...")
    try:
        await collector.collect({"score": 12})
    except ValidationError as e:
        print(f"   ✓ Rejected: {e.errors}\n")

    print(f"3. Memory handler holds {memory.count} item(s)\n")


async def example_hooks():
    """Demonstrate lifecycle hooks."""
    print("=== Lifecycle Hooks ===\n")

    blocked_users = {"u-spam"}

    def block_spam(context):
        if context.metadata.get("user_id") in blocked_users:
            print(f"   ✗ Blocking {context.metadata['user_id']}")
            return False
        return True

    def report_error(error, context):
        phase = context["phase"] if context else "unknown"
        print(f"   ! {type(error).__name__} during {phase}")

    collector = (
        FeedbackCollector(type="nps", schema=NpsScore)
        .on_before_collect(block_spam)
        .on_after_collect(lambda item: print(f"   ✓ Stored {item.id}"))
        .on_error(report_error)
    )

    await collector.collect({"score": 8}, {"user_id": "u-2"})
    try:
        await collector.collect({"score": 10}, {"user_id": "u-spam"})
    except Exception:
        pass
    print()


async def example_retry():
    """Demonstrate handler retry against an unreliable endpoint."""
    print("=== Handler Retry ===\n")

    rng = random.Random(3)

    async def post_to_api(item: FeedbackItem) -> None:
        if rng.random() < 0.6:
            raise ConnectionError("API unavailable")
        print(f"   ✓ Delivered {item.id}")

    collector = (
        FeedbackCollector(
            type="nps",
            schema=NpsScore,
            retry=RetryConfig(attempts=5, base_delay=50, backoff="exponential"),
        )
        .use(create_callback_handler(post_to_api, name="api-sink"))
        .on_retry(lambda attempt, error, delay: print(f"   ↻ Attempt {attempt} failed, retrying in {delay}ms"))
    )

    try:
        await collector.collect({"score": 6})
    except Exception as e:
        print(f"   ✗ Gave up: {e}")
    print()


async def main():
    setup_logger("feedback.handler", level=logging.INFO)

    await example_basic_collection()
    await example_hooks()
    await example_retry()


if __name__ == "__main__":
    asyncio.run(main())
