"""Database models and schema for Sisyflow.

Single import point for every model and the session helpers, so services
and ``DatabaseManager.create_tables`` see all tables registered on ``Base``.
"""

from sisyflow.c1_database_session.base import Base, logger

from sisyflow.c1_user_models.user import Profile  # noqa: E402
from sisyflow.c1_ticket_models.ticket import Ticket  # noqa: E402
from sisyflow.c1_ai_models.ai import AISuggestionSession, AIError  # noqa: E402
from sisyflow.c1_documentation_models.documentation import (  # noqa: E402
    ProjectDocumentation,
    PROJECT_DOCUMENTATION_ID,
)

from sisyflow.c1_database_session.database_manager import DatabaseManager, get_db  # noqa: E402


__all__ = [
    "Base",
    "logger",
    "Profile",
    "Ticket",
    "AISuggestionSession",
    "AIError",
    "ProjectDocumentation",
    "PROJECT_DOCUMENTATION_ID",
    "DatabaseManager",
    "get_db",
]
