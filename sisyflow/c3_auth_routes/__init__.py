"""C3 Auth Routes - Session handling for the API and pages."""
from sisyflow.c3_auth_routes.auth_routes import create_auth_router
from sisyflow.c3_auth_routes.auth_middleware import auth_middleware
from sisyflow.c3_auth_routes.dependencies import get_current_user, require_admin
__all__ = ["create_auth_router", "auth_middleware", "get_current_user", "require_admin"]
