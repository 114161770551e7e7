"""Tests for AI analysis and suggestion session endpoints."""

import uuid

import httpx
import openai

from sisyflow.core.database import get_db, AIError
from tests.fixtures.mock_llm_provider import DEFAULT_SUGGESTIONS

ANALYZE_URL = "/api/ai-suggestion-sessions/analyze"


def _ticket_id(client) -> str:
    response = client.post("/api/tickets", json={"title": "Slow board", "description": "Takes 5s", "type": "BUG"})
    return response.json()["id"]


def _logged_errors():
    with get_db() as db:
        return [error.to_dict() for error in db.query(AIError).all()]


class TestAnalyzeTicket:
    """POST /api/ai-suggestion-sessions/analyze"""

    def test_returns_suggestions(self, user_client, mock_llm_provider):
        response = user_client.post(ANALYZE_URL, json={"title": "  Slow board ", "description": " Takes 5s "})

        assert response.status_code == 200
        suggestions = response.json()["suggestions"]
        assert [s["type"] for s in suggestions] == ["INSERT", "QUESTION"]
        assert all(s["applied"] is False for s in suggestions)
        assert mock_llm_provider.call_count == 1
        assert mock_llm_provider.last_request["title"] == "Slow board"
        assert mock_llm_provider.last_request["description"] == "Takes 5s"

    def test_project_documentation_is_sent_as_context(self, user_client, admin_client, mock_llm_provider):
        admin_client.put("/api/project-documentation", json={"content": "# Stack\nFastAPI and SQLite"})

        user_client.post(ANALYZE_URL, json={"title": "Slow board", "description": "Takes 5s"})

        assert mock_llm_provider.last_request["project_context"] == "# Stack\nFastAPI and SQLite"

    def test_missing_description(self, user_client, mock_llm_provider):
        response = user_client.post(ANALYZE_URL, json={"title": "Slow board", "description": "   "})

        assert response.status_code == 400
        assert response.json()["details"][0]["message"] == "Description is required"
        assert mock_llm_provider.call_count == 0

    def test_invalid_ticket_id(self, user_client):
        response = user_client.post(
            ANALYZE_URL, json={"title": "Slow board", "description": "Takes 5s", "ticket_id": "not-a-uuid"}
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["message"] == "Invalid ticket ID format"

    def test_upstream_failure_is_logged(self, user_client, regular_user, mock_llm_provider):
        request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
        mock_llm_provider.error = openai.APIStatusError(
            "Service Unavailable",
            response=httpx.Response(503, request=request),
            body={"error": {"message": "overloaded"}},
        )
        ticket_id = str(uuid.uuid4())

        response = user_client.post(
            ANALYZE_URL, json={"title": "Slow board", "description": "Takes 5s", "ticket_id": ticket_id}
        )

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to get AI suggestions."
        errors = _logged_errors()
        assert len(errors) == 1
        assert errors[0]["ticket_id"] == ticket_id
        assert errors[0]["user_id"] == regular_user["id"]
        assert errors[0]["error_details"]["status"] == 503
        assert errors[0]["error_details"]["message"] == "OpenRouter API error: 503"

    def test_missing_api_key_is_logged(self, app, user_client):
        app.state.server_state.llm_provider = None

        response = user_client.post(ANALYZE_URL, json={"title": "Slow board", "description": "Takes 5s"})

        assert response.status_code == 502
        errors = _logged_errors()
        assert len(errors) == 1
        assert "API key not found" in errors[0]["error_message"]
        assert errors[0]["error_details"]["type"] == "ValueError"


class TestSuggestionSessions:
    """Sessions store the suggestions, applied flags and rating of a saved ticket."""

    def _session_payload(self, ticket_id, rating=None):
        suggestions = [dict(s) for s in DEFAULT_SUGGESTIONS]
        suggestions[0]["applied"] = True
        payload = {"ticket_id": ticket_id, "suggestions": suggestions}
        if rating is not None:
            payload["rating"] = rating
        return payload

    def test_create_and_get_session(self, user_client):
        ticket_id = _ticket_id(user_client)

        created = user_client.post("/api/ai-suggestion-sessions", json=self._session_payload(ticket_id, rating=4))

        assert created.status_code == 201
        session = created.json()
        assert session["ticket_id"] == ticket_id
        assert session["rating"] == 4
        assert session["suggestions"][0]["applied"] is True

        fetched = user_client.get(f"/api/ai-suggestion-sessions/{session['session_id']}")
        assert fetched.status_code == 200
        assert fetched.json() == session

    def test_rating_out_of_range(self, user_client):
        ticket_id = _ticket_id(user_client)

        response = user_client.post("/api/ai-suggestion-sessions", json=self._session_payload(ticket_id, rating=6))

        assert response.status_code == 400

    def test_too_many_suggestions(self, user_client):
        ticket_id = _ticket_id(user_client)
        payload = self._session_payload(ticket_id)
        payload["suggestions"] = payload["suggestions"] * 4

        response = user_client.post("/api/ai-suggestion-sessions", json=payload)

        assert response.status_code == 400

    def test_session_for_missing_ticket(self, user_client):
        response = user_client.post("/api/ai-suggestion-sessions", json=self._session_payload(str(uuid.uuid4())))

        assert response.status_code == 404

    def test_update_rating(self, user_client):
        ticket_id = _ticket_id(user_client)
        session = user_client.post("/api/ai-suggestion-sessions", json=self._session_payload(ticket_id)).json()

        response = user_client.put(f"/api/ai-suggestion-sessions/{session['session_id']}/rating", json={"rating": 2})

        assert response.status_code == 200
        assert response.json()["rating"] == 2

    def test_sessions_are_private(self, user_client, client_for, other_user):
        ticket_id = _ticket_id(user_client)
        session = user_client.post("/api/ai-suggestion-sessions", json=self._session_payload(ticket_id)).json()

        response = client_for(other_user).get(f"/api/ai-suggestion-sessions/{session['session_id']}")

        assert response.status_code == 403

    def test_relink_session_to_other_ticket(self, user_client):
        first = _ticket_id(user_client)
        second = _ticket_id(user_client)
        session = user_client.post("/api/ai-suggestion-sessions", json=self._session_payload(first)).json()

        response = user_client.patch(
            f"/api/ai-suggestion-sessions/{session['session_id']}/ticket-id", json={"ticket_id": second}
        )

        assert response.status_code == 200
        assert response.json()["ticket_id"] == second

    def test_unknown_session(self, user_client):
        response = user_client.get(f"/api/ai-suggestion-sessions/{uuid.uuid4()}")

        assert response.status_code == 404
