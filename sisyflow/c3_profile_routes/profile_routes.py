"""Routes for the signed-in user's profile."""

import logging
from typing import Optional, Dict, Any

from fastapi import APIRouter, HTTPException, Depends, Request
from pydantic import BaseModel

from sisyflow.core.exceptions import SisyflowError
from sisyflow.c2_profile_service.profile_service import ProfileService
from sisyflow.c2_validation_service.schemas import UpdateProfileCommand
from sisyflow.c3_auth_routes.dependencies import get_auth_state, get_current_user

logger = logging.getLogger(__name__)


class ProfileResponse(BaseModel):
    id: str
    email: str
    username: str
    role: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def create_profile_router() -> APIRouter:
    """Create profile router."""
    router = APIRouter(prefix="/api/profiles", tags=["profiles"])

    @router.get("/me", response_model=ProfileResponse)
    async def get_my_profile(request: Request):
        """Current profile; 401 without a session, 404 when the profile is gone."""
        auth = get_auth_state(request)
        if not auth:
            raise HTTPException(status_code=401, detail="Unauthorized")
        if not auth.get("user"):
            raise HTTPException(status_code=404, detail="Profile not found")
        try:
            return await ProfileService.get_profile(auth["user"]["id"])
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to load profile: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.put("/me", response_model=ProfileResponse)
    async def update_my_profile(
        command: UpdateProfileCommand,
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        try:
            return await ProfileService.update_username(user["id"], command.username)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to update profile {user['id']}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    return router
