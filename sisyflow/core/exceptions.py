"""Domain errors raised by Sisyflow services.

Each error carries the HTTP status code the routes answer with, so the
c3 layer can map any of them with a single ``except SisyflowError``.
"""


class SisyflowError(Exception):
    """Base class for expected service-level failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SisyflowError):
    """A referenced record does not exist."""

    status_code = 404


class AccessDeniedError(SisyflowError):
    """The acting user may not perform the operation."""

    status_code = 403


class AuthenticationError(SisyflowError):
    """Missing or invalid credentials."""

    status_code = 401


class ConflictError(SisyflowError):
    """The operation clashes with existing data (duplicate email, username)."""

    status_code = 409


class AISuggestionError(SisyflowError):
    """The language-model call failed; details were logged to ai_errors."""

    status_code = 502
