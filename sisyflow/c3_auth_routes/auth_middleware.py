"""Session middleware guarding the HTML pages."""

import logging

from fastapi import Request
from fastapi.responses import RedirectResponse

from sisyflow.core.config import get_settings
from sisyflow.c1_ticket_enums.ticket_enums import UserRole
from sisyflow.c2_auth_service.auth_service import AuthService

logger = logging.getLogger(__name__)

PUBLIC_PATHS = (
    "/login",
    "/register",
    "/api/auth/sign-in",
    "/api/auth/sign-out",
    "/api/auth/sign-up",
    "/health",
)
ADMIN_PATHS = ("/admin",)
API_PREFIX = "/api/"
LOGIN_PATH = "/login"
HOME_PATH = "/"


def _matches(path: str, prefixes) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)


def is_public_path(path: str) -> bool:
    return _matches(path, PUBLIC_PATHS)


def is_admin_path(path: str) -> bool:
    return _matches(path, ADMIN_PATHS)


async def auth_middleware(request: Request, call_next):
    """
    Attach the session to ``request.state.auth`` and guard page routes.

    Anonymous page requests are redirected to the login page and non-admins
    are sent home from admin pages. API routes are never redirected; their
    dependencies answer 401/403 instead.
    """
    token = request.cookies.get(get_settings().auth.session_cookie_name)
    auth = AuthService.resolve_session(token) if token else None
    request.state.auth = auth

    path = request.url.path
    if is_public_path(path) or path.startswith(API_PREFIX):
        return await call_next(request)

    user = auth["user"] if auth else None
    if user is None:
        logger.info(f"Redirecting anonymous request for {path} to {LOGIN_PATH}")
        return RedirectResponse(LOGIN_PATH, status_code=302)

    if is_admin_path(path) and user["role"] != UserRole.ADMIN.value:
        logger.info(f"Redirecting non-admin {user['username']} away from {path}")
        return RedirectResponse(HOME_PATH, status_code=302)

    return await call_next(request)
