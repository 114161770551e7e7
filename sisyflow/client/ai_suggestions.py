"""AI suggestion flow of the ticket modal."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from sisyflow.c1_ticket_enums.ticket_enums import SuggestionType
from sisyflow.c2_validation_service.schemas import AIResponse
from sisyflow.client.api_client import REQUEST_ERRORS, SisyflowClient, failure_message
from sisyflow.client.notifications import Notifier

logger = logging.getLogger(__name__)

FILL_FIELDS_MESSAGE = "Fill title and description first"
ANALYSIS_FAILED_MESSAGE = "AI analysis failed. Contact admin if this error persists."
SESSION_SAVE_FAILED_MESSAGE = "Ticket saved, but the AI suggestions could not be stored"


def append_to_description(description: str, content: str) -> str:
    """Append suggestion text as a new paragraph."""
    if not description:
        return content
    return f"{description}\n\n{content}"


class AISuggestionFlow:
    """
    One analysis session: the suggestion list, which suggestions were
    applied, and the optional rating.

    Suggestion indexes are stable once the list is received, so they are
    used as keys for apply/toggle.
    """

    def __init__(self, client: SisyflowClient, notifier: Notifier):
        self.client = client
        self.notifier = notifier
        self.suggestions: List[Dict[str, Any]] = []
        self.rating: Optional[int] = None
        self.is_analyzing = False

    def reset(self):
        self.suggestions = []
        self.rating = None
        self.is_analyzing = False

    @staticmethod
    def can_analyze(title: str, description: Optional[str]) -> bool:
        return bool(title and title.strip()) and bool(description and description.strip())

    def analyze(self, title: str, description: Optional[str], ticket_id: Optional[str] = None) -> bool:
        """
        Request suggestions for the current title and description.

        Returns:
            True when a suggestion list was received
        """
        if not self.can_analyze(title, description):
            self.notifier.warning(FILL_FIELDS_MESSAGE)
            return False

        self.is_analyzing = True
        try:
            response = self.client.analyze_ticket(title.strip(), description.strip(), ticket_id)
            parsed = AIResponse.model_validate(response)
        except REQUEST_ERRORS as e:
            self.notifier.error(failure_message(e, ANALYSIS_FAILED_MESSAGE))
            return False
        except ValidationError as e:
            logger.error(f"Unexpected analysis response: {e}")
            self.notifier.error(ANALYSIS_FAILED_MESSAGE)
            return False
        finally:
            self.is_analyzing = False

        self.suggestions = [s.model_dump(mode="json") for s in parsed.suggestions]
        self.rating = None
        if not self.suggestions:
            self.notifier.info("No suggestions for this ticket")
        logger.info(f"Received {len(self.suggestions)} AI suggestions")
        return True

    def _suggestion(self, index: int, expected: SuggestionType) -> Dict[str, Any]:
        suggestion = self.suggestions[index]
        if suggestion["type"] != expected.value:
            raise ValueError(f"Suggestion {index} is a {suggestion['type']}, not {expected.value}")
        return suggestion

    def can_apply(self, index: int) -> bool:
        suggestion = self.suggestions[index]
        return suggestion["type"] == SuggestionType.INSERT.value and not suggestion["applied"]

    def apply_insert(self, index: int, description: str) -> str:
        """
        Apply an INSERT suggestion to ``description``.

        Returns:
            The new description; unchanged when the suggestion was already applied
        """
        suggestion = self._suggestion(index, SuggestionType.INSERT)
        if suggestion["applied"]:
            return description
        suggestion["applied"] = True
        return append_to_description(description, suggestion["content"])

    def toggle_question(self, index: int) -> bool:
        """Flip a QUESTION suggestion's applied flag and return the new value."""
        suggestion = self._suggestion(index, SuggestionType.QUESTION)
        suggestion["applied"] = not suggestion["applied"]
        return suggestion["applied"]

    def set_rating(self, rating: int) -> bool:
        """Rate the session once; later calls are ignored."""
        if not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5")
        if self.rating is not None:
            return False
        self.rating = rating
        return True

    @property
    def has_session(self) -> bool:
        return bool(self.suggestions)

    def build_session_payload(self, ticket_id: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "ticket_id": ticket_id,
            "suggestions": [dict(s) for s in self.suggestions],
        }
        if self.rating is not None:
            payload["rating"] = self.rating
        return payload

    def save_session(self, ticket_id: str) -> Optional[Dict[str, Any]]:
        """Store the session for a ticket that has just been saved."""
        if not self.has_session:
            return None
        try:
            result = self.client.save_ai_session(self.build_session_payload(ticket_id))
        except REQUEST_ERRORS as e:
            logger.error(f"Failed to save AI session for ticket {ticket_id}: {e}")
            self.notifier.error(SESSION_SAVE_FAILED_MESSAGE)
            return None
        logger.info(f"Stored AI session {result.get('session_id')} for ticket {ticket_id}")
        return result
