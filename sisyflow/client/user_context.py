"""The signed-in user as seen by the client."""

import logging
from typing import Any, Dict, Optional

from sisyflow.c1_ticket_enums.ticket_enums import UserRole
from sisyflow.client.api_client import ApiError, SisyflowClient

logger = logging.getLogger(__name__)


def is_admin(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user) and user.get("role") == UserRole.ADMIN.value


class CurrentUser:
    """Loads ``/api/profiles/me``; 401 and 404 both mean nobody is signed in."""

    def __init__(self, client: SisyflowClient):
        self.client = client
        self.profile: Optional[Dict[str, Any]] = None

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            self.profile = self.client.get_my_profile()
        except ApiError as e:
            if e.status_code not in (401, 404):
                raise
            logger.info(f"No signed-in profile ({e.status_code})")
            self.profile = None
        return self.profile

    @property
    def is_authenticated(self) -> bool:
        return self.profile is not None

    @property
    def is_admin(self) -> bool:
        return is_admin(self.profile)
