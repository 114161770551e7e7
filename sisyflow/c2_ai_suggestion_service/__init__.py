"""C2 AI Suggestion Service - Ticket analysis and suggestion sessions."""
from sisyflow.c2_ai_suggestion_service.suggestion_session_service import SuggestionSessionService
__all__ = ["SuggestionSessionService"]
