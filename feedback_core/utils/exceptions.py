"""
Custom exception classes for the feedback collection library.

Provides a single exception family so callers can tell collection
failures apart from unrelated errors, with context attached for debugging.
"""

from typing import Any, Optional


class FeedbackError(Exception):
    """Base exception for all feedback collection errors.

    All custom exceptions inherit from this class, allowing
    catch-all error handling when needed.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ValidationError(FeedbackError):
    """Raised when feedback validation fails.

    Attributes:
        errors: Accumulated validation messages, in validator order
    """

    def __init__(self, errors: list[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(
            message or f"Validation failed: {', '.join(self.errors)}",
            {"error_count": len(self.errors)},
        )


class PluginError(FeedbackError):
    """Raised when a plugin fails while the pipeline is calling it.

    The phase is captured at the call site so the orchestrator can
    attribute the failure without inspecting the cause.

    Attributes:
        plugin_name: Name of the plugin that failed
        phase: One of install/validate/transform/handle
        cause: Original exception raised by the plugin
    """

    PHASES = ("install", "validate", "transform", "handle")

    def __init__(
        self,
        plugin_name: str,
        phase: str,
        cause: Optional[BaseException] = None,
    ):
        if phase not in self.PHASES:
            raise ValueError(f"Unknown plugin phase: {phase!r}")

        reason = str(cause) if cause is not None else "Unknown error"
        super().__init__(
            f'Plugin "{plugin_name}" failed during {phase}: {reason}',
            {
                "plugin": plugin_name,
                "phase": phase,
                "cause_type": type(cause).__name__ if cause is not None else None,
            },
        )
        self.details = {k: v for k, v in self.details.items() if v is not None}
        self.plugin_name = plugin_name
        self.phase = phase
        self.cause = cause


class CollectionCancelledError(FeedbackError):
    """Raised when a collection is cancelled.

    Covers cancellation by a before-collect hook and pending debounced
    calls discarded through ``cancel()``.

    Attributes:
        reason: Optional cancellation reason
    """

    def __init__(self, reason: Optional[str] = None):
        super().__init__(reason or "Collection was cancelled")
        self.reason = reason


class RetryExhaustedError(FeedbackError):
    """Raised when all retry attempts fail.

    Attributes:
        attempts: Number of attempts made
        last_error: Error raised by the final attempt
    """

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(
            f"All {attempts} retry attempts exhausted. Last error: {last_error}",
            {"attempts": attempts, "last_error_type": type(last_error).__name__},
        )
        self.attempts = attempts
        self.last_error = last_error
