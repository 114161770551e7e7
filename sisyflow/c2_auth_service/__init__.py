"""C2 Auth Service - Passwords, session tokens and sign-in."""

from sisyflow.c2_auth_service.auth_service import AuthService
from sisyflow.c2_auth_service.security import (
    hash_password,
    verify_password,
    create_session_token,
    verify_session_token,
)

__all__ = [
    "AuthService",
    "hash_password",
    "verify_password",
    "create_session_token",
    "verify_session_token",
]
