"""Password hashing and session tokens."""

import logging
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

import bcrypt
from jose import jwt, JWTError

from sisyflow.core.config import get_settings

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_session_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed session token.

    Args:
        data: Claims to embed; ``sub`` must be the profile id
        expires_delta: Lifetime override, defaults to the configured session TTL

    Returns:
        Encoded JWT string
    """
    auth_config = get_settings().auth
    if expires_delta is None:
        expires_delta = timedelta(minutes=auth_config.session_ttl_minutes)
    claims = dict(data)
    claims["exp"] = datetime.utcnow() + expires_delta
    claims["type"] = "session"
    return jwt.encode(claims, auth_config.secret_key.get_secret_value(), algorithm=auth_config.algorithm)


def verify_session_token(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Decode a session token, returning None when it is missing, expired or forged."""
    if not token:
        return None
    auth_config = get_settings().auth
    try:
        payload = jwt.decode(
            token,
            auth_config.secret_key.get_secret_value(),
            algorithms=[auth_config.algorithm],
        )
    except JWTError as e:
        logger.debug(f"Rejected session token: {e}")
        return None
    if payload.get("type") != "session" or not payload.get("sub"):
        return None
    return payload
