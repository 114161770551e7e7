"""Unit tests for the Kanban board controller."""

import pytest
from unittest.mock import MagicMock

from sisyflow.c1_ticket_enums.ticket_enums import TicketModalMode, TicketStatus
from sisyflow.client.api_client import ApiError, SisyflowClient
from sisyflow.client.events import TicketModalEvents
from sisyflow.client.kanban_board import BOARD_FETCH_LIMIT, KanbanBoard, TicketCard
from sisyflow.client.keyboard import KeyboardDispatcher, KeyEvent
from sisyflow.client.notifications import Notifier

ALICE = {"id": "u-1", "username": "alice", "role": "USER"}
BOB = {"id": "u-2", "username": "bob", "role": "USER"}


def _ticket(ticket_id, status="OPEN", assignee=None, reporter_id="u-1"):
    return {
        "id": ticket_id,
        "title": f"Ticket {ticket_id}",
        "type": "TASK",
        "status": status,
        "reporter_id": reporter_id,
        "assignee_id": assignee["id"] if assignee else None,
        "assignee": assignee,
        "ai_enhanced": False,
    }


@pytest.fixture
def api():
    client = MagicMock(spec=SisyflowClient)
    client.list_tickets.return_value = {
        "tickets": [
            _ticket("t-1"),
            _ticket("t-2", status="IN_PROGRESS", assignee={"id": "u-2", "username": "bob"}),
            _ticket("t-3", status="CLOSED"),
        ],
        "pagination": {"page": 1, "limit": 100, "total": 3},
    }
    return client


@pytest.fixture
def board(api):
    instance = KanbanBoard(api, Notifier(), TicketModalEvents(), user=ALICE)
    instance.load()
    return instance


class TestTicketCard:
    def test_unassigned_text(self):
        card = TicketCard.from_ticket(_ticket("t-1"))

        assert card.text == "TASK Ticket t-1 Unassigned"

    def test_assigned_text(self):
        card = TicketCard.from_ticket(_ticket("t-1", assignee={"id": "u-2", "username": "bob"}))

        assert card.assignee_name == "bob"
        assert card.text.endswith("bob")


class TestLoad:
    def test_groups_by_status(self, board, api):
        api.list_tickets.assert_called_once_with(limit=BOARD_FETCH_LIMIT)
        assert board.column_titles("OPEN") == ["Ticket t-1"]
        assert board.column_titles("IN_PROGRESS") == ["Ticket t-2"]
        assert board.column_titles("CLOSED") == ["Ticket t-3"]

    def test_load_failure(self, api):
        api.list_tickets.side_effect = ApiError(500, "Database unavailable")
        board = KanbanBoard(api, Notifier(), TicketModalEvents())

        assert board.load() is False
        assert board.notifier.last.message == "Database unavailable"


class TestMoveTicket:
    def test_move_reported_ticket(self, board, api):
        assert board.move_ticket("t-1", TicketStatus.IN_PROGRESS) is True

        api.update_ticket_status.assert_called_once_with("t-1", "IN_PROGRESS")
        assert board.column_titles("IN_PROGRESS")[0] == "Ticket t-1"
        assert board.column_titles("OPEN") == []

    def test_rollback_on_failure(self, board, api):
        api.update_ticket_status.side_effect = ApiError(403, "Access denied")

        assert board.move_ticket("t-1", "CLOSED") is False

        assert board.column_titles("OPEN") == ["Ticket t-1"]
        assert board.find_card("t-1").status == "OPEN"
        assert board.notifier.last.message == "Access denied"

    def test_unrelated_user_cannot_move(self, api):
        board = KanbanBoard(api, Notifier(), TicketModalEvents(), user=BOB)
        board.load()

        assert board.move_ticket("t-1", "CLOSED") is False
        api.update_ticket_status.assert_not_called()

    def test_assignee_can_move(self, api):
        board = KanbanBoard(api, Notifier(), TicketModalEvents(), user=BOB)
        board.load()

        assert board.move_ticket("t-2", "CLOSED") is True

    def test_same_column_is_noop(self, board, api):
        assert board.move_ticket("t-1", "OPEN") is False
        api.update_ticket_status.assert_not_called()


class TestModalEvents:
    def test_open_ticket_publishes_view(self, board):
        received = []
        board.events.subscribe(received.append)

        board.open_ticket("t-2")
        board.new_ticket()

        assert [(e.mode, e.ticket_id) for e in received] == [
            (TicketModalMode.VIEW, "t-2"),
            (TicketModalMode.CREATE, None),
        ]

    def test_saved_ticket_reloads(self, board, api):
        board.on_ticket_saved({"id": "t-1"})

        assert api.list_tickets.call_count == 2


class TestCreateShortcut:
    def _published(self, board):
        received = []
        board.events.subscribe(received.append)
        return received

    @pytest.mark.parametrize("key", ["c", "C"])
    def test_c_opens_create_modal(self, board, key):
        received = self._published(board)
        event = KeyEvent(key, shift=key == "C")

        board.handle_key(event)

        assert [(e.mode, e.ticket_id) for e in received] == [(TicketModalMode.CREATE, None)]
        assert event.default_prevented

    @pytest.mark.parametrize(
        "event",
        [
            KeyEvent("c", in_editable=True),
            KeyEvent("c", ctrl=True),
            KeyEvent("c", meta=True),
            KeyEvent("c", text_selected=True),
            KeyEvent("x"),
        ],
    )
    def test_ignored_while_typing_copying_or_other_keys(self, board, event):
        received = self._published(board)

        board.handle_key(event)

        assert received == []
        assert event.default_prevented is False

    def test_ignored_while_modal_open(self, api):
        board = KanbanBoard(api, Notifier(), TicketModalEvents(), user=ALICE, modal_is_open=lambda: True)
        received = self._published(board)

        board.handle_key(KeyEvent("c"))

        assert received == []

    def test_bound_through_dispatcher(self, board):
        received = self._published(board)
        dispatcher = KeyboardDispatcher()
        unbind = board.bind_shortcuts(dispatcher)

        dispatcher.dispatch(KeyEvent("c"))
        unbind()
        dispatcher.dispatch(KeyEvent("c"))

        assert len(received) == 1
