"""ID generation for feedback items and sessions."""

import secrets
import string
import uuid

_SHORT_ID_ALPHABET = string.ascii_letters + string.digits


def generate_id() -> str:
    """Generate a unique ID for a feedback item (UUID4 string)."""
    return str(uuid.uuid4())


def generate_short_id(length: int = 8) -> str:
    """Generate a short alphanumeric ID, useful for session identifiers."""
    if length < 1:
        raise ValueError("length must be at least 1")
    return "".join(secrets.choice(_SHORT_ID_ALPHABET) for _ in range(length))
