"""Ticket modal: create, edit and view a ticket."""

import logging
from typing import Any, Callable, Dict, Optional

from sisyflow.c1_ticket_enums.ticket_enums import TicketModalMode
from sisyflow.client.ai_suggestions import AISuggestionFlow
from sisyflow.client.api_client import REQUEST_ERRORS, SisyflowClient, failure_message
from sisyflow.client.events import OpenTicketModal, TicketModalEvents
from sisyflow.client.keyboard import KeyboardDispatcher, KeyEvent
from sisyflow.client.notifications import Notifier
from sisyflow.client.ticket_form import TicketFormState, form_data_from_ticket
from sisyflow.client.ticket_permissions import TicketPermissionGuard, can_edit_ticket

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load ticket"
UNASSIGNED_LABEL = "Unassigned"
DELETED_USER_LABEL = "Deleted user"


class TicketModal:
    """
    State machine behind the ticket dialog.

    Modes are switched by the caller (``open``, ``request_edit``) or by the
    permission guard, which runs again after every change of mode, ticket or
    user and forces ``edit`` down to ``view`` when the user may not edit.
    """

    def __init__(
        self,
        client: SisyflowClient,
        notifier: Notifier,
        user: Optional[Dict[str, Any]] = None,
        on_saved: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        self.client = client
        self.notifier = notifier
        self.user = user
        self.on_saved = on_saved
        self.guard = TicketPermissionGuard(notifier)
        self.form = TicketFormState()
        self.ai = AISuggestionFlow(client, notifier)

        self.is_open = False
        self.mode = TicketModalMode.CREATE
        self.ticket_id: Optional[str] = None
        self.ticket: Optional[Dict[str, Any]] = None
        self.is_loading = False
        self.is_submitting = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    # Wiring

    def attach(self, events: TicketModalEvents):
        """Open the modal whenever an entry point publishes ``OpenTicketModal``."""
        self.detach()
        self._unsubscribe = events.subscribe(self._on_open_event)

    def detach(self):
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_open_event(self, event: OpenTicketModal):
        self.open(event.mode, event.ticket_id)

    def handle_key(self, event: KeyEvent):
        """Ctrl/Cmd+Enter submits the form; plain Enter is left to the focused field."""
        if not event.is_combo("Enter"):
            return
        if not self.is_open or self.is_read_only:
            return
        event.prevent_default()
        event.stop_propagation()
        self.save()

    def bind_shortcuts(self, dispatcher: KeyboardDispatcher) -> Callable[[], None]:
        return dispatcher.add_listener(self.handle_key, capture=True)

    # Mode transitions

    def open(self, mode: TicketModalMode, ticket_id: Optional[str] = None):
        mode = TicketModalMode(mode)
        if mode != TicketModalMode.CREATE and not ticket_id:
            raise ValueError(f"A ticket id is required to open the modal in {mode.value} mode")

        self.is_open = True
        self.mode = mode
        self.ticket_id = ticket_id if mode != TicketModalMode.CREATE else None
        self.ticket = None
        self.form.reset()
        self.ai.reset()

        if mode == TicketModalMode.CREATE:
            self._enforce_permissions()
            return
        self._load_ticket()

    def close(self):
        self.is_open = False
        self.ticket_id = None
        self.ticket = None
        self.is_loading = False
        self.form.reset()
        self.ai.reset()

    def request_edit(self) -> bool:
        """Switch from view to edit; the guard may switch straight back."""
        if not self.is_open or self.mode != TicketModalMode.VIEW:
            return False
        self.mode = TicketModalMode.EDIT
        self._enforce_permissions()
        return self.mode == TicketModalMode.EDIT

    def set_user(self, user: Optional[Dict[str, Any]]):
        self.user = user
        self._enforce_permissions()

    def on_ticket_updated(self, ticket: Dict[str, Any]):
        """A newer version of the open ticket arrived; the edit buffer is kept."""
        self._set_ticket(ticket, reset_form=False)

    def _set_ticket(self, ticket: Dict[str, Any], reset_form: bool):
        # Responses for a ticket that is no longer open are ignored
        if not self.is_open or ticket.get("id") != self.ticket_id:
            logger.debug(f"Ignoring ticket {ticket.get('id')} for modal showing {self.ticket_id}")
            return
        self.ticket = ticket
        if reset_form:
            self.form.reset(form_data_from_ticket(ticket))
        self._enforce_permissions()

    def _enforce_permissions(self):
        allowed = self.guard.evaluate(self.mode, self.ticket, self.user)
        if allowed != self.mode:
            logger.info(f"Ticket modal switched from {self.mode.value} to {allowed.value}")
            self.mode = allowed

    def _load_ticket(self):
        ticket_id = self.ticket_id
        self.is_loading = True
        try:
            ticket = self.client.get_ticket(ticket_id)
        except REQUEST_ERRORS as e:
            logger.error(f"Failed to load ticket {ticket_id}: {e}")
            self.notifier.error(LOAD_FAILED_MESSAGE)
            self.close()
            return
        finally:
            self.is_loading = False
        self._set_ticket(ticket, reset_form=True)

    # Derived state

    @property
    def is_read_only(self) -> bool:
        return self.mode == TicketModalMode.VIEW

    @property
    def can_edit(self) -> bool:
        return can_edit_ticket(self.ticket, self.user)

    @property
    def can_save(self) -> bool:
        return (
            self.is_open
            and not self.is_read_only
            and not self.is_loading
            and not self.is_submitting
            and self.form.is_valid
            and (self.mode == TicketModalMode.CREATE or self.can_edit)
        )

    @property
    def reporter_display(self) -> str:
        if self.mode == TicketModalMode.CREATE:
            return self.user["username"] if self.user else ""
        reporter = (self.ticket or {}).get("reporter")
        return reporter["username"] if reporter else DELETED_USER_LABEL

    @property
    def assignee_display(self) -> str:
        assignee = self.form.data.get("assignee")
        return assignee["username"] if assignee else UNASSIGNED_LABEL

    # Editing

    def change_field(self, **updates) -> Dict[str, str]:
        """Update the buffer and return the resulting field errors."""
        if self.is_read_only:
            logger.warning("Ignoring field change in view mode")
            return self.form.errors
        return self.form.change(**updates)

    def set_assignee(self, assignee: Optional[Dict[str, Any]]) -> Dict[str, str]:
        ref = {"id": assignee["id"], "username": assignee["username"]} if assignee else None
        return self.change_field(assignee=ref)

    def save(self) -> Optional[Dict[str, Any]]:
        """
        Submit the buffer: POST in create mode, PUT in edit mode.

        The modal closes only after a successful response. When AI
        suggestions were requested, the session is stored afterwards with the
        saved ticket's id.

        Returns:
            The saved ticket, or None if nothing was saved
        """
        if not self.can_save:
            logger.info(f"Save ignored (mode={self.mode.value}, errors={self.form.errors})")
            return None

        creating = self.mode == TicketModalMode.CREATE
        payload = self.form.to_payload()
        self.is_submitting = True
        try:
            if creating:
                ticket = self.client.create_ticket(payload)
            else:
                ticket = self.client.update_ticket(self.ticket_id, payload)
        except REQUEST_ERRORS as e:
            fallback = "Failed to create ticket" if creating else "Failed to update ticket"
            self.notifier.error(failure_message(e, fallback))
            return None
        finally:
            self.is_submitting = False

        if ticket.get("id"):
            self.ai.save_session(ticket["id"])
        self.notifier.success("Ticket created" if creating else "Ticket updated")
        self.close()
        if self.on_saved:
            self.on_saved(ticket)
        return ticket

    # Assignment shortcuts

    def assign_to_me(self) -> Optional[Dict[str, Any]]:
        if not self.user:
            return None
        return self._change_assignment(self.user, "Ticket assigned to you")

    def unassign(self) -> Optional[Dict[str, Any]]:
        return self._change_assignment(None, "Ticket unassigned")

    def _change_assignment(self, assignee: Optional[Dict[str, Any]], success_message: str):
        if not self.is_open:
            return None
        # A ticket being created only has the buffer
        if self.mode == TicketModalMode.CREATE:
            self.set_assignee(assignee)
            return None

        assignee_id = assignee["id"] if assignee else None
        try:
            ticket = self.client.update_ticket_assignee(self.ticket_id, assignee_id)
        except REQUEST_ERRORS as e:
            self.notifier.error(failure_message(e, "Failed to update assignee"))
            return None

        self.form.change(assignee=ticket.get("assignee"))
        self.on_ticket_updated(ticket)
        self.notifier.success(success_message)
        if self.on_saved:
            self.on_saved(ticket)
        return ticket

    # AI suggestions

    def analyze(self) -> bool:
        ticket_id = self.ticket_id if self.mode == TicketModalMode.EDIT else None
        return self.ai.analyze(self.form.data["title"], self.form.data.get("description"), ticket_id)

    def apply_suggestion(self, index: int) -> bool:
        """Append an INSERT suggestion to the description; False if nothing changed."""
        if self.is_read_only or not self.ai.can_apply(index):
            return False
        description = self.ai.apply_insert(index, self.form.data.get("description") or "")
        self.form.change(description=description, ai_enhanced=True)
        return True

    def toggle_question(self, index: int) -> bool:
        return self.ai.toggle_question(index)

    def set_rating(self, rating: int) -> bool:
        return self.ai.set_rating(rating)
