"""FastAPI dependencies resolving the acting user from the session."""

from typing import Dict, Any, Optional

from fastapi import Depends, HTTPException, Request

from sisyflow.c1_ticket_enums.ticket_enums import UserRole


def get_auth_state(request: Request) -> Optional[Dict[str, Any]]:
    """Session info attached by the auth middleware, None for anonymous requests."""
    return getattr(request.state, "auth", None)


async def get_current_user(request: Request) -> Dict[str, Any]:
    auth = get_auth_state(request)
    if not auth or not auth.get("user"):
        raise HTTPException(status_code=401, detail="Authentication required")
    return auth["user"]


async def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != UserRole.ADMIN.value:
        raise HTTPException(status_code=403, detail="Access denied: Administrator role required")
    return user
