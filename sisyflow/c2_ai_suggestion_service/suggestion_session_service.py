"""Service layer for AI ticket analysis and suggestion sessions."""

import uuid
import logging
from typing import Callable, Dict, Any, Optional

import openai

from sisyflow.core.database import get_db, AISuggestionSession, Ticket
from sisyflow.core.exceptions import AISuggestionError, NotFoundError, AccessDeniedError
from sisyflow.c2_ai_error_service.ai_error_service import AIErrorService
from sisyflow.c2_documentation_service.documentation_service import DocumentationService
from sisyflow.c2_validation_service.schemas import AnalyzeTicketCommand, CreateAISessionCommand
from sisyflow.interfaces.llm_interface import LLMProviderInterface, LLMResponseError

logger = logging.getLogger(__name__)

FAILED_SUGGESTIONS_MESSAGE = "Failed to get AI suggestions."


def describe_failure(error: Exception) -> Dict[str, Any]:
    """
    Build the ``error_details`` payload stored with an AI error.

    Upstream HTTP failures carry a numeric ``status`` so the admin view can
    show it; other failures only carry what is known about them.
    """
    if isinstance(error, openai.APIStatusError):
        details: Dict[str, Any] = {
            "message": f"OpenRouter API error: {error.status_code}",
            "status": error.status_code,
        }
        if error.body is not None:
            details["body"] = error.body
        return details
    if isinstance(error, LLMResponseError):
        return {
            "message": str(error),
            "details": error.details,
            "receivedData": error.received,
        }
    if isinstance(error, openai.APIConnectionError):
        return {"message": "Could not reach OpenRouter", "type": type(error).__name__}
    return {"message": str(error) or type(error).__name__, "type": type(error).__name__}


class SuggestionSessionService:
    """Run ticket analysis and store how users used the suggestions."""

    @staticmethod
    async def analyze(
        command: AnalyzeTicketCommand,
        user: Dict[str, Any],
        provider_factory: Callable[[], LLMProviderInterface],
    ) -> Dict[str, Any]:
        """
        Ask the language model for suggestions on a ticket draft.

        Every failure, including a missing provider configuration, is stored
        in ai_errors before being reported to the caller.

        Args:
            command: Validated and trimmed title/description
            user: Acting user
            provider_factory: Returns the configured provider

        Returns:
            ``{"suggestions": [{type, content, applied}]}``

        Raises:
            AISuggestionError: If the provider call or reply validation failed
        """
        project_context = await DocumentationService.get_content()
        try:
            provider = provider_factory()
            result = await provider.generate_ticket_suggestions(
                command.title, command.description, project_context
            )
        except Exception as e:
            logger.error(f"AI analysis failed for user {user.get('id')}: {e}")
            await AIErrorService.record_error(
                error_message=str(e) or FAILED_SUGGESTIONS_MESSAGE,
                error_details=describe_failure(e),
                user_id=user.get("id"),
                ticket_id=command.ticket_id,
            )
            raise AISuggestionError(FAILED_SUGGESTIONS_MESSAGE) from e

        logger.info(f"AI analysis returned {len(result['suggestions'])} suggestions")
        return result

    @staticmethod
    async def create_session(command: CreateAISessionCommand, user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a finished session after its ticket was saved.

        Raises:
            NotFoundError: If the ticket does not exist
        """
        with get_db() as db:
            if not db.query(Ticket).filter_by(id=command.ticket_id).first():
                raise NotFoundError("Ticket not found")

            session = AISuggestionSession(
                id=str(uuid.uuid4()),
                ticket_id=command.ticket_id,
                user_id=user["id"],
                suggestions=[s.model_dump(mode="json") for s in command.suggestions],
                rating=command.rating,
            )
            db.add(session)
            db.flush()
            db.refresh(session)

            applied = sum(1 for s in command.suggestions if s.applied)
            logger.info(
                f"Saved AI session {session.id} for ticket {command.ticket_id} "
                f"({applied}/{len(command.suggestions)} applied, rating={command.rating})"
            )
            return session.to_dict()

    @staticmethod
    def _get_owned_session(db, session_id: str, user: Dict[str, Any]) -> AISuggestionSession:
        session = db.query(AISuggestionSession).filter_by(id=session_id).first()
        if not session:
            raise NotFoundError("AI suggestion session not found")
        if session.user_id != user["id"]:
            raise AccessDeniedError("Access denied: This AI suggestion session belongs to another user")
        return session

    @staticmethod
    async def get_session(session_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
        with get_db() as db:
            return SuggestionSessionService._get_owned_session(db, session_id, user).to_dict()

    @staticmethod
    async def update_rating(session_id: str, rating: int, user: Dict[str, Any]) -> Dict[str, Any]:
        with get_db() as db:
            session = SuggestionSessionService._get_owned_session(db, session_id, user)
            session.rating = rating
            db.flush()
            return session.to_dict()

    @staticmethod
    async def update_ticket_id(session_id: str, ticket_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
        with get_db() as db:
            session = SuggestionSessionService._get_owned_session(db, session_id, user)
            if not db.query(Ticket).filter_by(id=ticket_id).first():
                raise NotFoundError("Ticket not found")
            session.ticket_id = ticket_id
            db.flush()
            return session.to_dict()
