"""Observer bus for opening the ticket modal from several entry points.

One bus is created per application root and passed to every entry point
(board cards, the "New ticket" button). Listeners are removed explicitly,
either through the callable returned by ``subscribe`` or by ``close``.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from sisyflow.c1_ticket_enums.ticket_enums import TicketModalMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenTicketModal:
    mode: TicketModalMode
    ticket_id: Optional[str] = None


Listener = Callable[[OpenTicketModal], None]


class TicketModalEvents:
    """Publish/subscribe channel scoped to one application root."""

    def __init__(self):
        self._listeners: List[Listener] = []
        self._closed = False

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        if self._closed:
            raise RuntimeError("Cannot subscribe to a closed event bus")
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: OpenTicketModal) -> int:
        """Deliver ``event`` to every listener; returns how many received it."""
        listeners = list(self._listeners)
        if not listeners:
            logger.debug(f"No listener for {event}")
        for listener in listeners:
            listener(event)
        return len(listeners)

    def close(self):
        self._listeners.clear()
        self._closed = True

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
