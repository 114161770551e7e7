"""Administrator editor for the shared project documentation."""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from sisyflow.c2_validation_service.schemas import DOCUMENTATION_MAX_CHARS
from sisyflow.client.api_client import REQUEST_ERRORS, SisyflowClient, failure_message
from sisyflow.client.keyboard import BeforeUnloadEvent, KeyboardDispatcher, KeyEvent
from sisyflow.client.notifications import Notifier

logger = logging.getLogger(__name__)

SAVE_SUCCESS_MESSAGE = "Project documentation updated successfully"
SAVE_FAILED_MESSAGE = "Failed to update project documentation"
LOAD_FAILED_MESSAGE = "Failed to load project documentation"
WARNING_RATIO = 0.8


class SaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SUCCESS = "success"
    ERROR = "error"


class CharCountStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    ERROR = "error"


def char_count_status(count: int, max_chars: int = DOCUMENTATION_MAX_CHARS) -> CharCountStatus:
    if count > max_chars:
        return CharCountStatus.ERROR
    if count >= max_chars * WARNING_RATIO:
        return CharCountStatus.WARNING
    return CharCountStatus.NORMAL


class DocumentationEditor:
    """
    Tracks the loaded document, the local edits and the save status.

    Status goes idle -> saving -> success|error -> idle. A failed save keeps
    the local content so the user can retry.
    """

    def __init__(self, client: SisyflowClient, notifier: Notifier, max_chars: int = DOCUMENTATION_MAX_CHARS):
        self.client = client
        self.notifier = notifier
        self.max_chars = max_chars
        self.content = ""
        self.saved_content = ""
        self.document: Optional[Dict[str, Any]] = None
        self.is_loading = False
        self.status = SaveStatus.IDLE
        self._status_listeners: List[Callable[[SaveStatus], None]] = []

    def on_status_change(self, listener: Callable[[SaveStatus], None]) -> Callable[[], None]:
        self._status_listeners.append(listener)
        return lambda: self._status_listeners.remove(listener)

    def _set_status(self, status: SaveStatus):
        self.status = status
        for listener in list(self._status_listeners):
            listener(status)

    def load(self) -> bool:
        self.is_loading = True
        try:
            self.document = self.client.get_documentation()
        except REQUEST_ERRORS as e:
            logger.error(f"Failed to load documentation: {e}")
            self.notifier.error(failure_message(e, LOAD_FAILED_MESSAGE))
            return False
        finally:
            self.is_loading = False
        self.content = self.saved_content = self.document.get("content") or ""
        return True

    def set_content(self, content: str):
        self.content = content
        if self.status in (SaveStatus.SUCCESS, SaveStatus.ERROR):
            self._set_status(SaveStatus.IDLE)

    @property
    def char_count(self) -> int:
        return len(self.content)

    @property
    def char_count_status(self) -> CharCountStatus:
        return char_count_status(self.char_count, self.max_chars)

    @property
    def is_dirty(self) -> bool:
        return self.content != self.saved_content

    @property
    def can_save(self) -> bool:
        return (
            self.is_dirty
            and bool(self.content.strip())
            and self.char_count <= self.max_chars
            and self.status != SaveStatus.SAVING
            and not self.is_loading
        )

    def save(self) -> bool:
        if not self.can_save:
            return False

        self._set_status(SaveStatus.SAVING)
        try:
            response = self.client.update_documentation(self.content)
        except REQUEST_ERRORS as e:
            logger.error(f"Failed to save documentation: {e}")
            self.notifier.error(failure_message(e, SAVE_FAILED_MESSAGE))
            self._set_status(SaveStatus.ERROR)
            return False

        self.document = response.get("data", response)
        self.content = self.saved_content = self.document.get("content", self.content)
        self._set_status(SaveStatus.SUCCESS)
        self.notifier.success(response.get("message") or SAVE_SUCCESS_MESSAGE)
        self._set_status(SaveStatus.IDLE)
        return True

    # Browser integration

    def handle_key(self, event: KeyEvent):
        """Ctrl/Cmd+S saves instead of opening the browser's save dialog."""
        if not event.is_combo("s"):
            return
        event.prevent_default()
        event.stop_propagation()
        if self.can_save:
            self.save()

    def bind_shortcuts(self, dispatcher: KeyboardDispatcher) -> Callable[[], None]:
        return dispatcher.add_listener(self.handle_key, capture=True)


class UnsavedChangesGuard:
    """Asks for confirmation before leaving the page while the editor is dirty."""

    def __init__(self, is_dirty: Callable[[], bool]):
        self.is_dirty = is_dirty

    def handle_before_unload(self, event: BeforeUnloadEvent) -> BeforeUnloadEvent:
        if self.is_dirty():
            event.prevent_default()
            # Browsers show their own text; an empty string is enough to trigger it
            event.return_value = ""
        return event
