"""Service layer for administrator user management."""

import uuid
import logging
from typing import Dict, Any

from sisyflow.core.database import get_db, Profile
from sisyflow.core.exceptions import NotFoundError, ConflictError, AccessDeniedError
from sisyflow.c2_auth_service.security import hash_password
from sisyflow.c2_validation_service.schemas import CreateUserCommand

logger = logging.getLogger(__name__)


class UserService:
    """Create, list and delete user accounts."""

    @staticmethod
    async def list_users(limit: int = 50, offset: int = 0) -> Dict[str, Any]:
        with get_db() as db:
            q = db.query(Profile)
            total = q.count()
            profiles = q.order_by(Profile.username.asc()).offset(offset).limit(limit).all()
            return {
                "users": [profile.to_dict() for profile in profiles],
                "pagination": {"page": offset // limit + 1, "limit": limit, "total": total},
            }

    @staticmethod
    async def create_user(command: CreateUserCommand) -> Dict[str, Any]:
        """
        Create an account on behalf of an administrator.

        Raises:
            ConflictError: If the email or username is already in use
        """
        with get_db() as db:
            if db.query(Profile).filter_by(email=command.email).first():
                raise ConflictError("Email already exists")
            if db.query(Profile).filter_by(username=command.username).first():
                raise ConflictError("Username already exists")

            profile = Profile(
                id=str(uuid.uuid4()),
                email=command.email,
                username=command.username,
                password_hash=hash_password(command.password),
                role=command.role.value,
            )
            db.add(profile)
            db.flush()
            db.refresh(profile)
            logger.info(f"Created user {profile.username} with role {profile.role}")
            return profile.to_dict()

    @staticmethod
    async def delete_user(user_id: str, acting_user: Dict[str, Any]) -> None:
        """
        Delete an account.

        Tickets reported by or assigned to the user stay on the board with the
        reference cleared by the database (ON DELETE SET NULL).

        Raises:
            AccessDeniedError: If an administrator tries to delete themselves
            NotFoundError: If the user does not exist
        """
        if user_id == acting_user["id"]:
            raise AccessDeniedError("Administrators cannot delete their own account")

        with get_db() as db:
            profile = db.query(Profile).filter_by(id=user_id).first()
            if not profile:
                raise NotFoundError("User not found")
            db.delete(profile)
            logger.info(f"Deleted user {profile.username}")
