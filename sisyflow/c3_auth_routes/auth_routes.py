"""Authentication routes: sign-in, sign-out, first-admin sign-up, password change."""

import logging
from typing import Dict, Any

from fastapi import APIRouter, HTTPException, Depends, Response
from pydantic import BaseModel

from sisyflow.core.config import get_settings
from sisyflow.core.exceptions import SisyflowError
from sisyflow.c2_auth_service.auth_service import AuthService
from sisyflow.c2_validation_service.schemas import SignInCommand, SignUpCommand, ChangePasswordCommand
from sisyflow.c3_auth_routes.dependencies import get_current_user

logger = logging.getLogger(__name__)


class AuthResponse(BaseModel):
    user: Dict[str, Any]


class SuccessResponse(BaseModel):
    success: bool
    message: str


def _set_session_cookie(response: Response, token: str) -> None:
    auth_config = get_settings().auth
    response.set_cookie(
        key=auth_config.session_cookie_name,
        value=token,
        max_age=auth_config.session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=auth_config.cookie_secure,
        path="/",
    )


def create_auth_router() -> APIRouter:
    """Create auth router."""
    router = APIRouter(prefix="/api/auth", tags=["auth"])

    @router.post("/sign-in", response_model=AuthResponse)
    async def sign_in(command: SignInCommand, response: Response):
        """Check credentials and set the session cookie."""
        try:
            result = await AuthService.sign_in(command.email, command.password)
            _set_session_cookie(response, result["token"])
            return AuthResponse(user=result["user"])
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Sign-in failed: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/sign-out", response_model=SuccessResponse)
    async def sign_out(response: Response):
        response.delete_cookie(get_settings().auth.session_cookie_name, path="/")
        return SuccessResponse(success=True, message="Signed out")

    @router.post("/sign-up", response_model=AuthResponse, status_code=201)
    async def sign_up(command: SignUpCommand, response: Response):
        """Register the first administrator while no account exists."""
        try:
            result = await AuthService.sign_up(command.email, command.password)
            _set_session_cookie(response, result["token"])
            return AuthResponse(user=result["user"])
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Sign-up failed: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.patch("/password", response_model=SuccessResponse)
    async def change_password(
        command: ChangePasswordCommand,
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        try:
            await AuthService.change_password(user["id"], command.current_password, command.new_password)
            return SuccessResponse(success=True, message="Password updated")
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Password change failed for {user['id']}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    return router
