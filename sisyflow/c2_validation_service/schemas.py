"""Validation schemas shared by the API routes and the client controllers.

Every field error is raised as a ``PydanticCustomError`` so the message a
user sees is exactly the text below, without pydantic's "Value error, "
prefix.
"""

import re
from typing import Optional, List

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from sisyflow.c1_ticket_enums.ticket_enums import TicketType, TicketStatus, UserRole, SuggestionType
from sisyflow.c2_validation_service.validation_helpers import is_valid_uuid

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 10000
DOCUMENTATION_MAX_CHARS = 20000
MAX_SUGGESTIONS = 6
MIN_SUGGESTION_LENGTH = 10
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.]{3,30}$")
PASSWORD_MIN_LENGTH = 8

TICKET_TYPE_VALUES = tuple(t.value for t in TicketType)
TICKET_STATUS_VALUES = tuple(s.value for s in TicketStatus)
TICKET_TYPE_MESSAGE = "Type must be one of: " + ", ".join(TICKET_TYPE_VALUES)
TICKET_STATUS_MESSAGE = "Status must be one of: " + ", ".join(TICKET_STATUS_VALUES)
SORT_FIELDS = ("created_at", "updated_at", "title", "status", "type")


def _check_title(value: str, empty_message: str) -> str:
    if not value.strip():
        raise PydanticCustomError("title_required", empty_message)
    if len(value) > TITLE_MAX_LENGTH:
        raise PydanticCustomError(
            "title_too_long",
            "Title cannot exceed {max_length} characters",
            {"max_length": TITLE_MAX_LENGTH},
        )
    return value


def _check_description(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > DESCRIPTION_MAX_LENGTH:
        raise PydanticCustomError(
            "description_too_long",
            "Description cannot exceed {max_length} characters",
            {"max_length": DESCRIPTION_MAX_LENGTH},
        )
    return value


def _check_ticket_type(value):
    if isinstance(value, TicketType):
        return value
    if not isinstance(value, str) or value not in TICKET_TYPE_VALUES:
        raise PydanticCustomError("ticket_type", TICKET_TYPE_MESSAGE)
    return value


def _check_optional_uuid(value: Optional[str], message: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not is_valid_uuid(value):
        raise PydanticCustomError("uuid", message)
    return value


def _check_password_strength(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            "password_too_short",
            "Password must be at least {min_length} characters",
            {"min_length": PASSWORD_MIN_LENGTH},
        )
    if not re.search(r"[A-Z]", value):
        raise PydanticCustomError("password_uppercase", "Password must contain an uppercase letter")
    if not re.search(r"[a-z]", value):
        raise PydanticCustomError("password_lowercase", "Password must contain a lowercase letter")
    if not re.search(r"[0-9]", value):
        raise PydanticCustomError("password_digit", "Password must contain a digit")
    return value


def _check_email(value, handler) -> str:
    """Run the EmailStr check on the trimmed input and store it lower-cased."""
    if isinstance(value, str):
        value = value.strip()
    try:
        email = handler(value)
    except ValidationError:
        raise PydanticCustomError("email", "Invalid email address") from None
    return email.lower()


def _check_username(value: str) -> str:
    value = value.strip()
    if not USERNAME_PATTERN.match(value):
        raise PydanticCustomError(
            "username",
            "Username must be 3-30 characters of letters, digits, '_' or '.'",
        )
    return value


# Ticket modal buffer

class AssigneeRef(BaseModel):
    id: str
    username: str


class TicketFormData(BaseModel):
    """Edit buffer of the ticket modal."""

    title: str = ""
    description: Optional[str] = ""
    type: TicketType = TicketType.TASK
    assignee: Optional[AssigneeRef] = None
    ai_enhanced: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _check_title(value, "Title required")

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return _check_description(value)

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value):
        return _check_ticket_type(value)


# Ticket API commands

class CreateTicketCommand(BaseModel):
    title: str = Field(..., description="Ticket title")
    description: Optional[str] = Field("", description="Markdown description")
    type: TicketType = Field(..., description="BUG, IMPROVEMENT or TASK")
    assignee_id: Optional[str] = Field(None, description="Profile to assign")
    ai_enhanced: bool = Field(False, description="Whether AI suggestions were applied")

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _check_title(value, "Title cannot be empty").strip()

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return _check_description(value)

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value):
        return _check_ticket_type(value)


class UpdateTicketCommand(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[TicketType] = None
    assignee_id: Optional[str] = None
    ai_enhanced: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise PydanticCustomError("title_required", "Title cannot be empty")
        return _check_title(value, "Title cannot be empty").strip()

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return _check_description(value)

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value):
        return _check_ticket_type(value)


class UpdateTicketStatusCommand(BaseModel):
    status: TicketStatus

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, value):
        if isinstance(value, TicketStatus):
            return value
        if not isinstance(value, str) or value not in TICKET_STATUS_VALUES:
            raise PydanticCustomError("ticket_status", TICKET_STATUS_MESSAGE)
        return value


class UpdateTicketAssigneeCommand(BaseModel):
    assignee_id: Optional[str] = None


class TicketListQuery(BaseModel):
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)
    status: Optional[TicketStatus] = None
    type: Optional[TicketType] = None
    assignee_id: Optional[str] = None
    reporter_id: Optional[str] = None
    sort: str = "created_at desc"

    @field_validator("sort")
    @classmethod
    def validate_sort(cls, value: str) -> str:
        parts = value.split()
        if len(parts) != 2 or parts[0] not in SORT_FIELDS or parts[1].lower() not in ("asc", "desc"):
            raise PydanticCustomError(
                "sort",
                "Sort must be '<field> <asc|desc>' with field one of: {fields}",
                {"fields": ", ".join(SORT_FIELDS)},
            )
        return f"{parts[0]} {parts[1].lower()}"

    @property
    def sort_field(self) -> str:
        return self.sort.split()[0]

    @property
    def sort_descending(self) -> bool:
        return self.sort.split()[1] == "desc"


# AI suggestions

class AISuggestion(BaseModel):
    type: SuggestionType
    content: str = Field(..., min_length=MIN_SUGGESTION_LENGTH)
    applied: bool = False


class AIResponse(BaseModel):
    """Shape the language model must answer with."""

    suggestions: List[AISuggestion] = Field(default_factory=list, max_length=MAX_SUGGESTIONS)


class AnalyzeTicketCommand(BaseModel):
    title: str
    description: str
    ticket_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _check_title(value, "Title is required").strip()

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("description_required", "Description is required")
        return _check_description(value.strip())

    @field_validator("ticket_id")
    @classmethod
    def validate_ticket_id(cls, value: Optional[str]) -> Optional[str]:
        return _check_optional_uuid(value, "Invalid ticket ID format")


class CreateAISessionCommand(BaseModel):
    ticket_id: str
    suggestions: List[AISuggestion] = Field(..., max_length=MAX_SUGGESTIONS)
    rating: Optional[int] = Field(None, ge=1, le=5)

    @field_validator("ticket_id")
    @classmethod
    def validate_ticket_id(cls, value: str) -> str:
        if not is_valid_uuid(value):
            raise PydanticCustomError("uuid", "Invalid ticket ID format")
        return value


class UpdateRatingCommand(BaseModel):
    rating: int = Field(..., ge=1, le=5)


class UpdateSessionTicketCommand(BaseModel):
    ticket_id: str

    @field_validator("ticket_id")
    @classmethod
    def validate_ticket_id(cls, value: str) -> str:
        if not is_valid_uuid(value):
            raise PydanticCustomError("uuid", "Invalid ticket ID format")
        return value


# Admin queries

class AIErrorsQuery(BaseModel):
    limit: int = Field(50, ge=1, le=100)
    offset: int = Field(0, ge=0)
    ticket_id: Optional[str] = None
    search: Optional[str] = None

    @field_validator("ticket_id")
    @classmethod
    def validate_ticket_id(cls, value: Optional[str]) -> Optional[str]:
        return _check_optional_uuid(value, "Invalid ticket ID format")

    @field_validator("search")
    @classmethod
    def validate_search(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()


# Documentation

class UpdateDocumentationCommand(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError("content_required", "Content cannot be empty")
        if len(value) > DOCUMENTATION_MAX_CHARS:
            raise PydanticCustomError(
                "content_too_long",
                "Content cannot exceed {max_chars} characters",
                {"max_chars": DOCUMENTATION_MAX_CHARS},
            )
        return value


# Auth and users

class SignInCommand(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="wrap")
    @classmethod
    def validate_email(cls, value, handler) -> str:
        return _check_email(value, handler)


class SignUpCommand(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="wrap")
    @classmethod
    def validate_email(cls, value, handler) -> str:
        return _check_email(value, handler)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password_strength(value)


class ChangePasswordCommand(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return _check_password_strength(value)


class CreateUserCommand(BaseModel):
    email: EmailStr
    username: str
    password: str
    role: UserRole = UserRole.USER

    @field_validator("email", mode="wrap")
    @classmethod
    def validate_email(cls, value, handler) -> str:
        return _check_email(value, handler)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password_strength(value)


class UpdateProfileCommand(BaseModel):
    username: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)
