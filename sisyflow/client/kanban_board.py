"""Kanban board: tickets grouped into status columns."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sisyflow.c1_ticket_enums.ticket_enums import TicketModalMode, TicketStatus
from sisyflow.client.api_client import REQUEST_ERRORS, SisyflowClient, failure_message
from sisyflow.client.events import OpenTicketModal, TicketModalEvents
from sisyflow.client.keyboard import KeyboardDispatcher, KeyEvent
from sisyflow.client.notifications import Notifier
from sisyflow.client.user_context import is_admin

logger = logging.getLogger(__name__)

BOARD_FETCH_LIMIT = 100
COLUMNS = (
    (TicketStatus.OPEN.value, "Open"),
    (TicketStatus.IN_PROGRESS.value, "In Progress"),
    (TicketStatus.CLOSED.value, "Closed"),
)
UNASSIGNED_LABEL = "Unassigned"


@dataclass
class TicketCard:
    id: str
    title: str
    type: str
    status: str
    reporter_id: Optional[str]
    assignee_id: Optional[str]
    assignee_name: Optional[str]
    ai_enhanced: bool = False

    @classmethod
    def from_ticket(cls, ticket: Dict[str, Any]) -> "TicketCard":
        assignee = ticket.get("assignee")
        return cls(
            id=ticket["id"],
            title=ticket["title"],
            type=ticket["type"],
            status=ticket["status"],
            reporter_id=ticket.get("reporter_id"),
            assignee_id=ticket.get("assignee_id"),
            assignee_name=assignee["username"] if assignee else None,
            ai_enhanced=bool(ticket.get("ai_enhanced")),
        )

    @property
    def text(self) -> str:
        """Everything the card shows, in display order."""
        return " ".join([self.type, self.title, self.assignee_name or UNASSIGNED_LABEL])


class KanbanBoard:
    """Board state and the actions available on its cards."""

    def __init__(
        self,
        client: SisyflowClient,
        notifier: Notifier,
        events: TicketModalEvents,
        user: Optional[Dict[str, Any]] = None,
        modal_is_open: Optional[Callable[[], bool]] = None,
    ):
        self.client = client
        self.notifier = notifier
        self.events = events
        self.user = user
        self.modal_is_open = modal_is_open or (lambda: False)
        self.columns: Dict[str, List[TicketCard]] = {status: [] for status, _ in COLUMNS}
        self.is_loading = False

    def load(self) -> bool:
        self.is_loading = True
        try:
            response = self.client.list_tickets(limit=BOARD_FETCH_LIMIT)
        except REQUEST_ERRORS as e:
            self.notifier.error(failure_message(e, "Failed to load tickets"))
            return False
        finally:
            self.is_loading = False

        columns: Dict[str, List[TicketCard]] = {status: [] for status, _ in COLUMNS}
        for ticket in response.get("tickets", []):
            card = TicketCard.from_ticket(ticket)
            columns.get(card.status, columns[TicketStatus.OPEN.value]).append(card)
        self.columns = columns
        return True

    def column_titles(self, status: str) -> List[str]:
        return [card.title for card in self.columns[status]]

    def find_card(self, ticket_id: str) -> Optional[TicketCard]:
        for cards in self.columns.values():
            for card in cards:
                if card.id == ticket_id:
                    return card
        return None

    def can_move(self, card: TicketCard) -> bool:
        if not self.user:
            return False
        return is_admin(self.user) or self.user["id"] in (card.reporter_id, card.assignee_id)

    def move_ticket(self, ticket_id: str, status: TicketStatus) -> bool:
        """
        Move a card to another column.

        The card moves immediately and goes back to its column if the
        request fails.
        """
        status = TicketStatus(status)
        card = self.find_card(ticket_id)
        if card is None or card.status == status.value:
            return False
        if not self.can_move(card):
            self.notifier.warning("You can only move tickets you reported or are assigned to")
            return False

        old_status = card.status
        self._place(card, status.value)
        try:
            self.client.update_ticket_status(ticket_id, status.value)
        except REQUEST_ERRORS as e:
            self._place(card, old_status)
            self.notifier.error(failure_message(e, "Failed to move ticket"))
            return False
        logger.info(f"Moved ticket {ticket_id} from {old_status} to {status.value}")
        return True

    def _place(self, card: TicketCard, status: str):
        self.columns[card.status].remove(card)
        card.status = status
        self.columns[status].insert(0, card)

    def open_ticket(self, ticket_id: str):
        """Clicking a card opens it in view mode."""
        self.events.publish(OpenTicketModal(TicketModalMode.VIEW, ticket_id))

    def new_ticket(self):
        self.events.publish(OpenTicketModal(TicketModalMode.CREATE))

    def handle_key(self, event: KeyEvent):
        """A bare "C" opens the create modal, unless the user is typing or selecting text."""
        if not event.is_bare("c") or event.in_editable or event.text_selected:
            return
        if self.modal_is_open():
            return
        event.prevent_default()
        self.new_ticket()

    def bind_shortcuts(self, dispatcher: KeyboardDispatcher) -> Callable[[], None]:
        return dispatcher.add_listener(self.handle_key)

    def on_ticket_saved(self, ticket: Dict[str, Any]):
        """Reload after the modal saved, so the card shows server data."""
        self.load()
