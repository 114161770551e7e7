"""Administrator user list."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from sisyflow.c2_validation_service.schemas import CreateUserCommand
from sisyflow.c2_validation_service.validation_helpers import errors_by_field
from sisyflow.client.api_client import REQUEST_ERRORS, SisyflowClient, failure_message
from sisyflow.client.notifications import Notifier

logger = logging.getLogger(__name__)


class UserManagement:
    def __init__(self, client: SisyflowClient, notifier: Notifier):
        self.client = client
        self.notifier = notifier
        self.users: List[Dict[str, Any]] = []
        self.form_errors: Dict[str, str] = {}

    def load(self) -> bool:
        try:
            self.users = self.client.list_users()["users"]
        except REQUEST_ERRORS as e:
            self.notifier.error(failure_message(e, "Failed to load users"))
            return False
        return True

    def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return next((u for u in self.users if u["username"] == username), None)

    def create_user(self, email: str, username: str, password: str, role: str = "USER") -> Optional[Dict[str, Any]]:
        """Validate locally, then create the account and refresh the list."""
        try:
            command = CreateUserCommand(email=email, username=username, password=password, role=role)
        except ValidationError as e:
            self.form_errors = errors_by_field(e)
            return None
        self.form_errors = {}

        try:
            user = self.client.create_user(command.model_dump(mode="json"))
        except REQUEST_ERRORS as e:
            self.notifier.error(failure_message(e, "Failed to create user"))
            return None
        self.notifier.success(f"User {user['username']} created")
        self.load()
        return user

    def delete_user(self, user_id: str) -> bool:
        try:
            self.client.delete_user(user_id)
        except REQUEST_ERRORS as e:
            self.notifier.error(failure_message(e, "Failed to delete user"))
            return False
        self.notifier.success("User deleted")
        self.users = [u for u in self.users if u["id"] != user_id]
        return True
