"""
Callback handler plugin for custom integrations.

Runs a user-supplied function for each collected item.
"""

import inspect
from typing import Awaitable, Callable, Optional, Union

from feedback_core.models.feedback import FeedbackItem
from feedback_core.models.plugins import HandlerPlugin

FeedbackCallback = Callable[[FeedbackItem], Union[None, Awaitable[None]]]


class CallbackHandler(HandlerPlugin):
    """
    Handler that executes a custom function for each feedback item.

    Example:
        >>> async def post_item(item):
        ...     await session.post("/api/feedback", json=item.to_dict())
        >>> collector.use(CallbackHandler(post_item, name="api-sink"))
    """

    def __init__(self, callback: FeedbackCallback, name: str = "callback-handler"):
        self.callback = callback
        self.name = name

    async def handle(self, item: FeedbackItem) -> None:
        result = self.callback(item)
        if inspect.isawaitable(result):
            await result


def create_callback_handler(
    callback: FeedbackCallback, name: Optional[str] = None
) -> CallbackHandler:
    """Create a callback handler with a custom name."""
    return CallbackHandler(callback, name=name or "callback-handler")
