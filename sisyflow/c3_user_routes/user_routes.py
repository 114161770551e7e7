"""Administrator routes for managing user accounts."""

import logging
from typing import List, Dict, Any

from fastapi import APIRouter, HTTPException, Depends, Query, Response
from pydantic import BaseModel

from sisyflow.core.exceptions import SisyflowError
from sisyflow.c2_user_service.user_service import UserService
from sisyflow.c2_validation_service.schemas import CreateUserCommand
from sisyflow.c3_auth_routes.dependencies import require_admin
from sisyflow.c3_profile_routes.profile_routes import ProfileResponse
from sisyflow.c3_ticket_routes.ticket_routes import Pagination

logger = logging.getLogger(__name__)


class UserListResponse(BaseModel):
    users: List[ProfileResponse]
    pagination: Pagination


def create_user_router() -> APIRouter:
    """Create user management router."""
    router = APIRouter(prefix="/api/users", tags=["users"])

    @router.get("", response_model=UserListResponse)
    async def list_users(
        limit: int = Query(50, ge=1, le=100),
        offset: int = Query(0, ge=0),
        admin: Dict[str, Any] = Depends(require_admin),
    ):
        try:
            return await UserService.list_users(limit=limit, offset=offset)
        except Exception as e:
            logger.error(f"Failed to list users: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("", response_model=ProfileResponse, status_code=201)
    async def create_user(command: CreateUserCommand, admin: Dict[str, Any] = Depends(require_admin)):
        try:
            user = await UserService.create_user(command)
            logger.info(f"Admin {admin['username']} created user {user['username']}")
            return user
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.delete("/{user_id}", status_code=204)
    async def delete_user(user_id: str, admin: Dict[str, Any] = Depends(require_admin)):
        try:
            await UserService.delete_user(user_id, admin)
            return Response(status_code=204)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    return router
