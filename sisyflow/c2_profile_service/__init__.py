"""C2 Profile Service - The signed-in user's own profile."""
from sisyflow.c2_profile_service.profile_service import ProfileService
__all__ = ["ProfileService"]
