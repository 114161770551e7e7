"""C2 Validation Service - Schemas and helpers shared by server and client."""

from sisyflow.c2_validation_service.schemas import *
from sisyflow.c2_validation_service.validation_helpers import (
    collect_field_errors,
    errors_by_field,
    first_error_message,
    is_valid_uuid,
)

__all__ = ["collect_field_errors", "errors_by_field", "first_error_message", "is_valid_uuid"]
