"""Service layer for the signed-in user's own profile."""

import logging
from typing import Dict, Any

from sisyflow.core.database import get_db, Profile
from sisyflow.core.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)


class ProfileService:
    """Read and rename the current profile."""

    @staticmethod
    async def get_profile(profile_id: str) -> Dict[str, Any]:
        with get_db() as db:
            profile = db.query(Profile).filter_by(id=profile_id).first()
            if not profile:
                raise NotFoundError("Profile not found")
            return profile.to_dict()

    @staticmethod
    async def update_username(profile_id: str, username: str) -> Dict[str, Any]:
        """
        Change the username shown on ticket cards.

        Raises:
            NotFoundError: If the profile does not exist
            ConflictError: If another profile already uses the username
        """
        with get_db() as db:
            profile = db.query(Profile).filter_by(id=profile_id).first()
            if not profile:
                raise NotFoundError("Profile not found")

            taken = db.query(Profile).filter(Profile.username == username, Profile.id != profile_id).first()
            if taken:
                raise ConflictError("Username already exists")

            profile.username = username
            db.flush()
            db.refresh(profile)
            logger.info(f"Profile {profile_id} renamed to {username}")
            return profile.to_dict()
