"""
Pydantic schema integration for validation.

Any pydantic model class, or any type pydantic's TypeAdapter accepts
(``dict[str, int]``, ``Annotated[...]``, dataclasses, ...), can act as
a collector schema.
"""

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from feedback_core.models.feedback import ValidationResult
from feedback_core.models.plugins import ValidatorPlugin


@lru_cache(maxsize=128)
def _get_adapter(schema: Any) -> TypeAdapter:
    return TypeAdapter(schema)


def format_schema_errors(error: PydanticValidationError) -> list[str]:
    """
    Format pydantic errors into readable strings.

    Each issue becomes ``"<dotted.location>: <message>"``, or just the
    message when the issue applies to the whole payload.
    """
    messages = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        prefix = f"{location}: " if location else ""
        messages.append(f"{prefix}{issue['msg']}")
    return messages


def validate_with_schema(schema: Any, data: Any) -> ValidationResult:
    """
    Validate data against a schema.

    Args:
        schema: Pydantic model class or TypeAdapter-compatible type
        data: Payload to check

    Returns:
        Validation result with one message per schema issue
    """
    try:
        _get_adapter(schema).validate_python(data)
    except PydanticValidationError as e:
        return ValidationResult.failed(format_schema_errors(e))
    return ValidationResult.ok()


class SchemaValidator(ValidatorPlugin):
    """Validator plugin backed by a schema."""

    def __init__(self, schema: Any, name: str = "schema-validator"):
        self.schema = schema
        self.name = name

    def validate(self, data: Any) -> ValidationResult:
        return validate_with_schema(self.schema, data)


def create_schema_validator(schema: Any, name: str = "schema-validator") -> SchemaValidator:
    """
    Create a validator plugin from a schema.

    Example:
        >>> collector.use(create_schema_validator(NpsScore, name="nps-schema"))
    """
    return SchemaValidator(schema, name=name)
