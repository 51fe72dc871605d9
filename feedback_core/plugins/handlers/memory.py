"""
Memory handler plugin for testing and prototyping.

Keeps collected items in a bounded in-process list.
"""

from typing import Callable, Optional

from feedback_core.models.feedback import FeedbackItem
from feedback_core.models.plugins import HandlerPlugin


class MemoryHandler(HandlerPlugin):
    """
    Handler that stores feedback items in memory.

    Attributes:
        max_items: Maximum number of items kept (0 = unlimited); oldest
            items are dropped first

    Example:
        >>> memory = MemoryHandler(max_items=100)
        >>> collector.use(memory)
        >>> await collector.collect({"score": 9})
        >>> memory.last.data
        {'score': 9}
    """

    name = "memory-handler"

    def __init__(self, max_items: int = 0, name: Optional[str] = None):
        if max_items < 0:
            raise ValueError("max_items must not be negative")
        self.max_items = max_items
        if name:
            self.name = name
        self._items: list[FeedbackItem] = []

    def handle(self, item: FeedbackItem) -> None:
        self._items.append(item)

        # Enforce max items limit
        if self.max_items > 0 and len(self._items) > self.max_items:
            self._items = self._items[-self.max_items:]

    @property
    def items(self) -> tuple[FeedbackItem, ...]:
        """All stored items, oldest first."""
        return tuple(self._items)

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def last(self) -> Optional[FeedbackItem]:
        """The most recent item, if any."""
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items = []

    def find(self, predicate: Callable[[FeedbackItem], bool]) -> list[FeedbackItem]:
        """Find items matching a predicate."""
        return [item for item in self._items if predicate(item)]

    def find_by_type(self, feedback_type: str) -> list[FeedbackItem]:
        return [item for item in self._items if item.type == feedback_type]
