"""C3 Profile Routes."""
from sisyflow.c3_profile_routes.profile_routes import create_profile_router
__all__ = ["create_profile_router"]
