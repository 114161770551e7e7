"""C2 User Service - Administrator account management."""
from sisyflow.c2_user_service.user_service import UserService
__all__ = ["UserService"]
