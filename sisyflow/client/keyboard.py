"""Keyboard and page-unload events with capture/bubble dispatch."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


@dataclass
class KeyEvent:
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False
    # Focus is in an input, textarea or contenteditable element
    in_editable: bool = False
    text_selected: bool = False
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self):
        self.default_prevented = True

    def stop_propagation(self):
        self.propagation_stopped = True

    def is_combo(self, key: str) -> bool:
        """True for Ctrl+key or Cmd+key."""
        return (self.ctrl or self.meta) and self.key.lower() == key.lower()

    def is_bare(self, key: str) -> bool:
        """True for ``key`` typed without Ctrl, Cmd or Alt; Shift is allowed."""
        return not (self.ctrl or self.meta or self.alt) and self.key.lower() == key.lower()


@dataclass
class BeforeUnloadEvent:
    """Navigation away from the page; a set ``return_value`` asks the user to confirm."""

    default_prevented: bool = False
    return_value: str = ""

    def prevent_default(self):
        self.default_prevented = True

    @property
    def requires_confirmation(self) -> bool:
        return self.default_prevented


KeyHandler = Callable[[KeyEvent], None]


class KeyboardDispatcher:
    """
    Delivers key events to capture-phase handlers first, then to bubble-phase
    handlers, stopping as soon as a handler stops propagation.
    """

    def __init__(self):
        self._handlers: List[Tuple[bool, KeyHandler]] = []

    def add_listener(self, handler: KeyHandler, capture: bool = False) -> Callable[[], None]:
        entry = (capture, handler)
        self._handlers.append(entry)

        def remove():
            if entry in self._handlers:
                self._handlers.remove(entry)

        return remove

    def dispatch(self, event: KeyEvent) -> KeyEvent:
        capture = [h for is_capture, h in self._handlers if is_capture]
        bubble = [h for is_capture, h in self._handlers if not is_capture]
        for handler in capture + bubble:
            handler(event)
            if event.propagation_stopped:
                break
        return event
