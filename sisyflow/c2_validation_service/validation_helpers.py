"""Validation helpers shared by services, routes and client forms."""

import uuid
from typing import Any, Dict, Type

from pydantic import BaseModel, ValidationError


def is_valid_uuid(value: Any) -> bool:
    """Return True if ``value`` is a canonical UUID string."""
    if not isinstance(value, str):
        return False
    try:
        return str(uuid.UUID(value)) == value.lower()
    except ValueError:
        return False


def errors_by_field(exc: ValidationError) -> Dict[str, str]:
    """
    Flatten a pydantic ValidationError into a field -> message mapping.

    Nested locations are dotted (``assignee.id``). Only the first message
    per field is kept, matching how a form shows one error under each input.

    Args:
        exc: The validation error raised by a schema

    Returns:
        Mapping of field path to its first error message
    """
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.setdefault(field, error["msg"])
    return errors


def collect_field_errors(schema: Type[BaseModel], data: Dict[str, Any]) -> Dict[str, str]:
    """Run full-schema validation and return field errors (empty when valid)."""
    try:
        schema.model_validate(data)
    except ValidationError as exc:
        return errors_by_field(exc)
    return {}


def first_error_message(exc: ValidationError) -> str:
    """Human-readable summary used for 400 responses."""
    messages = [f"{field}: {message}" for field, message in errors_by_field(exc).items()]
    return "; ".join(messages) or "Invalid request data"
