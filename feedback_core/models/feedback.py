"""
Core feedback data models.

Pydantic models for the items flowing through the collection pipeline
and the results produced by validation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Metadata is an open mapping; conventional keys are session_id, user_id and source
FeedbackMetadata = dict[str, Any]


class FeedbackItem(BaseModel):
    """
    A collected feedback item.

    Items are immutable once built. Transformers that need to change an
    item return a new one, typically through ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier for this item", min_length=1)
    type: str = Field(..., description="Feedback category (e.g., nps, rating, survey)")
    data: Any = Field(..., description="Feedback payload")
    metadata: FeedbackMetadata = Field(default_factory=dict, description="Associated metadata")
    timestamp: int = Field(..., description="Collection time in epoch milliseconds", ge=0)

    def to_dict(self) -> dict[str, Any]:
        """Convert item to a plain dictionary."""
        return self.model_dump()

    def __repr__(self) -> str:
        return f"FeedbackItem(id={self.id}, type={self.type}, timestamp={self.timestamp})"


class CollectionContext(BaseModel):
    """Read-only view of a collection handed to before-collect hooks."""

    model_config = ConfigDict(frozen=True)

    type: str
    data: Any
    metadata: FeedbackMetadata = Field(default_factory=dict)
    timestamp: int


class ValidationResult(BaseModel):
    """
    Result of a validation operation.

    ``valid`` is derived from ``errors`` when the result comes out of the
    pipeline; plugins may still report ``valid=False`` on their own.
    """

    valid: bool = Field(..., description="Whether validation passed")
    errors: list[str] = Field(default_factory=list, description="Validation messages")

    @model_validator(mode="after")
    def check_errors_imply_invalid(self) -> "ValidationResult":
        """A result carrying errors can never be valid."""
        if self.errors and self.valid:
            raise ValueError("ValidationResult with errors cannot be valid")
        return self

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True, errors=[])

    @classmethod
    def failed(cls, errors: list[str]) -> "ValidationResult":
        return cls(valid=False, errors=list(errors))

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        """Build a result whose validity is decided by the error list alone."""
        return cls(valid=not errors, errors=list(errors))
