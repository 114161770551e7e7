"""User profile models for Sisyflow."""

from sisyflow.c1_user_models.user import Profile

__all__ = ["Profile"]
