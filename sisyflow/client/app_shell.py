"""Application root: owns the shared notifier, event bus and controllers."""

import logging
from typing import Callable, List, Optional

from sisyflow.client.api_client import SisyflowClient
from sisyflow.client.events import TicketModalEvents
from sisyflow.client.kanban_board import KanbanBoard
from sisyflow.client.keyboard import KeyboardDispatcher
from sisyflow.client.notifications import Notifier
from sisyflow.client.ticket_modal import TicketModal
from sisyflow.client.user_context import CurrentUser

logger = logging.getLogger(__name__)


class AppShell:
    """
    Wires the board and the ticket modal through one event bus.

    The bus lives exactly as long as the shell; ``close`` removes every
    listener it registered.
    """

    def __init__(self, client: SisyflowClient, notifier: Optional[Notifier] = None):
        self.client = client
        self.notifier = notifier or Notifier()
        self.events = TicketModalEvents()
        self.current_user = CurrentUser(client)
        self.keyboard = KeyboardDispatcher()
        self.board = KanbanBoard(client, self.notifier, self.events, modal_is_open=lambda: self.modal.is_open)
        self.modal = TicketModal(client, self.notifier, on_saved=self.board.on_ticket_saved)
        self._unbind_keys: List[Callable[[], None]] = []

    def start(self) -> bool:
        """Load the user and the board; False when nobody is signed in."""
        user = self.current_user.load()
        self.board.user = user
        self.modal.set_user(user)
        self.modal.attach(self.events)
        if not self._unbind_keys:
            self._unbind_keys = [self.modal.bind_shortcuts(self.keyboard), self.board.bind_shortcuts(self.keyboard)]
        if user is None:
            return False
        return self.board.load()

    def close(self):
        for unbind in self._unbind_keys:
            unbind()
        self._unbind_keys = []
        self.modal.detach()
        self.modal.close()
        self.events.close()
