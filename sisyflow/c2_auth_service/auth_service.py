"""Service layer for sign-in, sign-up and password changes."""

import uuid
import logging
from typing import Optional, Dict, Any

from sisyflow.core.database import get_db, Profile
from sisyflow.core.exceptions import AuthenticationError, AccessDeniedError, NotFoundError
from sisyflow.c1_ticket_enums.ticket_enums import UserRole
from sisyflow.c2_auth_service.security import (
    hash_password,
    verify_password,
    create_session_token,
    verify_session_token,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service for session-cookie authentication."""

    @staticmethod
    async def sign_in(email: str, password: str) -> Dict[str, Any]:
        """
        Check credentials and issue a session token.

        Args:
            email: Login email (already normalized to lower case)
            password: Plain-text password

        Returns:
            Dict with ``token`` and the ``user`` profile

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        with get_db() as db:
            profile = db.query(Profile).filter_by(email=email).first()
            if not profile or not verify_password(password, profile.password_hash):
                logger.warning(f"Failed sign-in for {email}")
                raise AuthenticationError("Invalid email or password")

            token = create_session_token({"sub": profile.id, "role": profile.role})
            logger.info(f"User {profile.username} signed in")
            return {"token": token, "user": profile.to_dict()}

    @staticmethod
    async def sign_up(email: str, password: str) -> Dict[str, Any]:
        """
        Register the first account, which becomes the administrator.

        Later accounts are created by an administrator through the users API.

        Raises:
            AccessDeniedError: If any profile already exists
        """
        with get_db() as db:
            if db.query(Profile).count() > 0:
                raise AccessDeniedError("Registration is closed. Ask an administrator for an account.")

            profile = Profile(
                id=str(uuid.uuid4()),
                email=email,
                username=email.split("@")[0][:30],
                password_hash=hash_password(password),
                role=UserRole.ADMIN.value,
            )
            db.add(profile)
            db.flush()

            token = create_session_token({"sub": profile.id, "role": profile.role})
            logger.info(f"Registered first administrator {profile.username}")
            return {"token": token, "user": profile.to_dict()}

    @staticmethod
    async def change_password(user_id: str, current_password: str, new_password: str) -> None:
        with get_db() as db:
            profile = db.query(Profile).filter_by(id=user_id).first()
            if not profile:
                raise NotFoundError("Profile not found")
            if not verify_password(current_password, profile.password_hash):
                raise AuthenticationError("Current password is incorrect")
            profile.password_hash = hash_password(new_password)
            logger.info(f"Password changed for {profile.username}")

    @staticmethod
    def resolve_session(token: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Turn a session cookie into the acting user's profile.

        Synchronous because the HTTP middleware calls it on every request.

        Returns:
            ``{"session": claims, "user": profile dict or None}``, or None when
            the token itself is invalid
        """
        payload = verify_session_token(token)
        if payload is None:
            return None
        with get_db() as db:
            profile = db.query(Profile).filter_by(id=payload["sub"]).first()
            return {"session": payload, "user": profile.to_dict() if profile else None}
