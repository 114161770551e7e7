"""C3 User Routes."""
from sisyflow.c3_user_routes.user_routes import create_user_router
__all__ = ["create_user_router"]
