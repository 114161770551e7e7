"""Unit tests for the ticket modal form buffer and edit permissions."""

import pytest
from unittest.mock import MagicMock

from sisyflow.c1_ticket_enums.ticket_enums import TicketModalMode
from sisyflow.client.notifications import Notifier, NotificationLevel
from sisyflow.client.ticket_form import TicketFormState, default_form_data, form_data_from_ticket
from sisyflow.client.ticket_permissions import (
    EDIT_DENIED_MESSAGE,
    TicketPermissionGuard,
    can_edit_ticket,
)

REPORTER = {"id": "u-1", "username": "alice", "role": "USER"}
OTHER = {"id": "u-2", "username": "bob", "role": "USER"}
ADMIN = {"id": "u-3", "username": "admin", "role": "ADMIN"}
TICKET = {
    "id": "t-1",
    "title": "Fix login",
    "description": None,
    "type": "BUG",
    "status": "OPEN",
    "reporter": {"id": "u-1", "username": "alice"},
    "assignee": {"id": "u-2", "username": "bob"},
    "ai_enhanced": False,
}


class TestTicketFormState:
    def test_empty_buffer_is_invalid(self):
        form = TicketFormState()

        assert form.data == default_form_data()
        assert form.errors == {"title": "Title required"}
        assert form.is_valid is False

    def test_change_revalidates(self):
        form = TicketFormState()

        errors = form.change(title="Fix login")

        assert errors == {}
        assert form.is_valid

    def test_change_to_invalid_value(self):
        form = TicketFormState({"title": "Fix login"})

        form.change(title="x" * 201)

        assert form.errors == {"title": "Title cannot exceed 200 characters"}

    def test_unknown_field(self):
        form = TicketFormState()

        with pytest.raises(KeyError):
            form.change(priority="high")

    def test_from_ticket(self):
        data = form_data_from_ticket(TICKET)

        assert data["description"] == ""
        assert data["assignee"] == {"id": "u-2", "username": "bob"}
        assert data["assignee"] is not TICKET["assignee"]

    def test_to_payload(self):
        form = TicketFormState(form_data_from_ticket(TICKET))
        form.change(title="  Fix login page ")

        assert form.to_payload() == {
            "title": "Fix login page",
            "description": "",
            "type": "BUG",
            "assignee_id": "u-2",
            "ai_enhanced": False,
        }


class TestCanEditTicket:
    def test_reporter(self):
        assert can_edit_ticket(TICKET, REPORTER)

    def test_admin(self):
        assert can_edit_ticket(TICKET, ADMIN)

    def test_assignee_is_not_enough(self):
        assert not can_edit_ticket(TICKET, OTHER)

    def test_deleted_reporter(self):
        ticket = dict(TICKET, reporter=None)

        assert not can_edit_ticket(ticket, REPORTER)
        assert can_edit_ticket(ticket, ADMIN)

    def test_missing_data(self):
        assert not can_edit_ticket(None, ADMIN)
        assert not can_edit_ticket(TICKET, None)


class TestTicketPermissionGuard:
    def test_downgrades_edit_to_view(self):
        notifier = Notifier()
        guard = TicketPermissionGuard(notifier)

        mode = guard.evaluate(TicketModalMode.EDIT, TICKET, OTHER)

        assert mode == TicketModalMode.VIEW
        assert notifier.last.level == NotificationLevel.WARNING
        assert notifier.last.message == EDIT_DENIED_MESSAGE

    def test_keeps_allowed_edit(self):
        notifier = MagicMock()
        guard = TicketPermissionGuard(notifier)

        assert guard.evaluate(TicketModalMode.EDIT, TICKET, REPORTER) == TicketModalMode.EDIT
        notifier.warning.assert_not_called()

    def test_waits_for_ticket_and_user(self):
        guard = TicketPermissionGuard(Notifier())

        assert guard.evaluate(TicketModalMode.EDIT, None, OTHER) == TicketModalMode.EDIT
        assert guard.evaluate(TicketModalMode.EDIT, TICKET, None) == TicketModalMode.EDIT

    @pytest.mark.parametrize("mode", [TicketModalMode.CREATE, TicketModalMode.VIEW])
    def test_other_modes_untouched(self, mode):
        assert TicketPermissionGuard(Notifier()).evaluate(mode, TICKET, OTHER) == mode
