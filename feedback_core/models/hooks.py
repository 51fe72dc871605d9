"""
Lifecycle hook types for the feedback collector.

Hooks may be plain functions or coroutine functions; the collector
awaits whatever they return.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal, Optional, TypedDict, Union

from feedback_core.models.feedback import CollectionContext, FeedbackItem

ErrorPhase = Literal["validation", "transform", "handler"]


class ErrorContext(TypedDict):
    """Second argument passed to error hooks when a phase is known."""

    phase: ErrorPhase


# Returning False cancels the collection
BeforeCollectHook = Callable[[CollectionContext], Union[None, bool, Awaitable[Optional[bool]]]]

AfterCollectHook = Callable[[FeedbackItem], Union[None, Awaitable[None]]]

ErrorHook = Callable[[BaseException, Optional[ErrorContext]], Union[None, Awaitable[None]]]

# (attempt, error, next_delay_ms)
RetryHook = Callable[[int, BaseException, int], Union[None, Awaitable[None]]]


@dataclass
class HookRegistry:
    """Ordered, append-only hook lists."""

    before_collect: list[BeforeCollectHook] = field(default_factory=list)
    after_collect: list[AfterCollectHook] = field(default_factory=list)
    error: list[ErrorHook] = field(default_factory=list)
    retry: list[RetryHook] = field(default_factory=list)

    def counts(self) -> dict[str, Any]:
        return {
            "before_collect": len(self.before_collect),
            "after_collect": len(self.after_collect),
            "error": len(self.error),
            "retry": len(self.retry),
        }
