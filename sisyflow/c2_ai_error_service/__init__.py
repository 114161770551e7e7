"""C2 AI Error Service - Logged language-model failures."""
from sisyflow.c2_ai_error_service.ai_error_service import AIErrorService
__all__ = ["AIErrorService"]
