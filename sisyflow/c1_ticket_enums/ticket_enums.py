"""Ticket Enums for Sisyflow."""

from enum import Enum


class TicketType(str, Enum):
    """Kinds of work a ticket can describe."""
    BUG = "BUG"
    IMPROVEMENT = "IMPROVEMENT"
    TASK = "TASK"


class TicketStatus(str, Enum):
    """Board columns a ticket moves through."""
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"


class UserRole(str, Enum):
    """Profile roles."""
    USER = "USER"
    ADMIN = "ADMIN"


class SuggestionType(str, Enum):
    """AI suggestion kinds.

    INSERT carries text proposed for the description, QUESTION carries a
    prompt the reporter should answer.
    """
    INSERT = "INSERT"
    QUESTION = "QUESTION"


class TicketModalMode(str, Enum):
    """Modes of the ticket modal."""
    CREATE = "create"
    EDIT = "edit"
    VIEW = "view"
