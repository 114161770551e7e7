"""C3 AI Routes - Suggestion sessions and the AI error log."""
from sisyflow.c3_ai_routes.ai_routes import create_ai_router
from sisyflow.c3_ai_routes.ai_error_routes import create_ai_error_router
__all__ = ["create_ai_router", "create_ai_error_router"]
