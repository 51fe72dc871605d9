"""Schema validator plugin, re-exported from the core schema module."""

from feedback_core.core.schema import (
    SchemaValidator,
    create_schema_validator,
    validate_with_schema,
)

__all__ = ["SchemaValidator", "create_schema_validator", "validate_with_schema"]
