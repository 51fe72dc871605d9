"""
Console handler plugin for development and debugging.

Writes collected items to the ``feedback.handler`` logger as JSON.
"""

import logging
from typing import Any, Optional

import orjson

from feedback_core.models.feedback import FeedbackItem
from feedback_core.models.plugins import HandlerPlugin
from feedback_core.utils.logger import get_handler_logger


def _default(value: Any) -> Any:
    """Fallback serializer for payload values orjson does not know."""
    if hasattr(value, "model_dump"):
        return value.model_dump()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


class ConsoleHandler(HandlerPlugin):
    """
    Handler that logs feedback items for debugging.

    Example:
        >>> collector.use(ConsoleHandler(pretty=True, prefix="[NPS]"))
    """

    name = "console-handler"

    LEVELS = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
    }

    def __init__(
        self,
        level: str = "info",
        pretty: bool = True,
        prefix: str = "[Feedback]",
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize console handler.

        Args:
            level: Log level name (debug, info, warning)
            pretty: Indent the JSON output
            prefix: Text put in front of every message
            logger: Target logger (defaults to the feedback.handler logger)
        """
        if level not in self.LEVELS:
            raise ValueError(f"Unsupported level {level!r}; expected one of {sorted(self.LEVELS)}")
        self.level = level
        self.pretty = pretty
        self.prefix = prefix
        self.logger = logger or get_handler_logger()

    def format(self, item: FeedbackItem) -> str:
        """Serialize an item to JSON."""
        option = orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS
        if self.pretty:
            option |= orjson.OPT_INDENT_2
        return orjson.dumps(item.to_dict(), default=_default, option=option).decode("utf-8")

    def handle(self, item: FeedbackItem) -> None:
        self.logger.log(self.LEVELS[self.level], f"{self.prefix} {item.type}: {self.format(item)}")
