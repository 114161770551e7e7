"""End-to-end scenarios: client controllers driving the real app.

Each simulated browser is a SisyflowClient over its own TestClient, signed in
through the sign-in endpoint.
"""

import pytest
from unittest.mock import MagicMock

from sisyflow.c2_validation_service.schemas import DOCUMENTATION_MAX_CHARS
from tests.e2e.poms.board_page import BoardPage
from tests.e2e.poms.documentation_page import DocumentationPage

pytestmark = pytest.mark.e2e


@pytest.fixture
def board_for(browser_for):
    pages = []

    def _board_for(user):
        page = BoardPage(browser_for(user))
        assert page.open() is True
        pages.append(page)
        return page

    yield _board_for

    for page in pages:
        page.close()


class TestTicketCreation:
    def test_created_ticket_appears_in_open_column(self, board_for, regular_user):
        page = board_for(regular_user)

        ticket = page.create_ticket("Test Ticket - T", "desc")

        assert ticket is not None
        assert page.network.last("POST", "/api/tickets").status_code == 201
        assert page.column_of("Test Ticket - T") == "OPEN"
        assert page.board.column_titles("OPEN") == ["Test Ticket - T"]
        assert page.modal.is_open is False


class TestAssignment:
    def test_admin_assigns_and_unassigns(self, board_for, make_user, admin_user, regular_user):
        overlord = make_user("Overlord5866")
        reporter_page = board_for(regular_user)
        reporter_page.create_ticket("Assignment target", "desc")

        admin_page = board_for(admin_user)
        assert admin_page.edit_assignee("Assignment target", overlord) is not None
        assert admin_page.network.last("PUT", "/api/tickets/").status_code == 200

        overlord_page = board_for(overlord)
        assert "Overlord5866" in overlord_page.card_by_title("Assignment target").text

        admin_page.click_card("Assignment target")
        assert admin_page.modal.unassign() is not None
        assert admin_page.modal.assignee_display == "Unassigned"

        overlord_page.board.load()
        card = overlord_page.card_by_title("Assignment target")
        assert "Overlord5866" not in card.text
        assert card.text.endswith("Unassigned")


class TestAISuggestions:
    def test_applied_suggestions_and_rating_are_saved(self, board_for, regular_user, mock_llm_provider):
        page = board_for(regular_user)
        page.api.save_ai_session = MagicMock(wraps=page.api.save_ai_session)

        page.board.new_ticket()
        page.modal.change_field(title="AI Assisted Ticket", description="context text")
        assert page.modal.analyze() is True
        assert [s["type"] for s in page.modal.ai.suggestions] == ["INSERT", "QUESTION"]

        assert page.modal.apply_suggestion(0) is True
        assert page.modal.toggle_question(1) is True
        assert page.modal.set_rating(4) is True
        ticket = page.modal.save()

        payload = page.api.save_ai_session.call_args.args[0]
        assert payload["ticket_id"] == ticket["id"]
        assert payload["rating"] == 4
        assert [s["applied"] for s in payload["suggestions"]] == [True, True]
        assert page.network.last("POST", "/api/ai-suggestion-sessions").status_code == 201
        assert ticket["ai_enhanced"] is True
        assert mock_llm_provider.last_request["title"] == "AI Assisted Ticket"


class TestNavigation:
    def test_unauthenticated_board_redirects_to_login(self, client):
        response = client.get("/board", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/login"


class TestDocumentationEditor:
    def test_over_budget_content_disables_save(self, browser_for, admin_user):
        page = DocumentationPage(browser_for(admin_user))
        page.open()

        page.type("x" * (DOCUMENTATION_MAX_CHARS + 1))

        assert page.editor.is_dirty
        assert page.save_enabled is False
        assert page.click_save() is False
        assert page.network.last("PUT", "/api/project-documentation") is None

    def test_within_budget_saves(self, browser_for, admin_user):
        page = DocumentationPage(browser_for(admin_user))
        page.open()

        page.type("# Project\nTicket conventions")

        assert page.save_enabled
        assert page.click_save() is True
        assert page.network.last("PUT", "/api/project-documentation").status_code == 200
