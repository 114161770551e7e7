"""AI suggestion session and error log models."""

from sisyflow.c1_ai_models.ai import AISuggestionSession, AIError

__all__ = ["AISuggestionSession", "AIError"]
