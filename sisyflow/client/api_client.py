"""HTTP client for the Sisyflow API used by the client controllers."""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class ApiError(Exception):
    """A non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        """Build an error carrying the most specific message the body offers."""
        message = response.reason_phrase or f"HTTP {response.status_code}"
        details = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            details = body.get("details")
            for key in ("message", "detail", "error"):
                if isinstance(body.get(key), str) and body[key]:
                    message = body[key]
                    break
        return cls(response.status_code, message, details)


def _drop_none(params: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


class SisyflowClient:
    """Thin wrapper over ``httpx.Client``, one method per endpoint.

    The session cookie lives in the underlying client's cookie jar, so one
    SisyflowClient represents one signed-in browser.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, http_client: Optional[httpx.Client] = None):
        self._http = http_client or httpx.Client(base_url=base_url)

    @property
    def http(self) -> httpx.Client:
        return self._http

    def close(self):
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = self._http.request(method, path, **kwargs)
        if not response.is_success:
            error = ApiError.from_response(response)
            logger.warning(f"{method} {path} failed with {error.status_code}: {error.message}")
            raise error
        return response

    def _json(self, method: str, path: str, **kwargs) -> Any:
        response = self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError:
            logger.warning(f"{method} {path} returned a body that is not JSON")
            raise ApiError(response.status_code, "Unexpected response from server") from None

    # Auth

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        return self._json("POST", "/api/auth/sign-in", json={"email": email, "password": password})

    def sign_out(self) -> None:
        self._request("POST", "/api/auth/sign-out")

    def get_my_profile(self) -> Dict[str, Any]:
        return self._json("GET", "/api/profiles/me")

    # Users

    def list_users(self, limit: int = 100, offset: int = 0) -> Dict[str, Any]:
        return self._json("GET", "/api/users", params={"limit": limit, "offset": offset})

    def create_user(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/api/users", json=payload)

    def delete_user(self, user_id: str) -> None:
        self._request("DELETE", f"/api/users/{user_id}")

    # Tickets

    def list_tickets(self, limit: int = 100, offset: int = 0, **filters) -> Dict[str, Any]:
        params = _drop_none({"limit": limit, "offset": offset, **filters})
        return self._json("GET", "/api/tickets", params=params)

    def get_ticket(self, ticket_id: str) -> Dict[str, Any]:
        return self._json("GET", f"/api/tickets/{ticket_id}")

    def create_ticket(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/api/tickets", json=payload)

    def update_ticket(self, ticket_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("PUT", f"/api/tickets/{ticket_id}", json=payload)

    def update_ticket_status(self, ticket_id: str, status: str) -> Dict[str, Any]:
        return self._json("PATCH", f"/api/tickets/{ticket_id}/status", json={"status": status})

    def update_ticket_assignee(self, ticket_id: str, assignee_id: Optional[str]) -> Dict[str, Any]:
        return self._json(
            "PATCH", f"/api/tickets/{ticket_id}/assignee", json={"assignee_id": assignee_id}
        )

    def delete_ticket(self, ticket_id: str) -> None:
        self._request("DELETE", f"/api/tickets/{ticket_id}")

    # AI suggestions

    def analyze_ticket(self, title: str, description: str, ticket_id: Optional[str] = None) -> Dict[str, Any]:
        payload = _drop_none({"title": title, "description": description, "ticket_id": ticket_id})
        return self._json("POST", "/api/ai-suggestion-sessions/analyze", json=payload)

    def save_ai_session(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/api/ai-suggestion-sessions", json=payload)

    def list_ai_errors(
        self,
        limit: int = 50,
        offset: int = 0,
        ticket_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = _drop_none({"limit": limit, "offset": offset, "ticket_id": ticket_id, "search": search})
        return self._json("GET", "/api/ai-errors", params=params)

    # Documentation

    def get_documentation(self) -> Dict[str, Any]:
        return self._json("GET", "/api/project-documentation")

    def update_documentation(self, content: str) -> Dict[str, Any]:
        return self._json("PUT", "/api/project-documentation", json={"content": content})


def failure_message(error: Exception, fallback: str) -> str:
    """Most specific message for a failed call, for notifications."""
    if isinstance(error, ApiError) and error.message:
        return error.message
    return fallback


# Errors every controller catches around a call: API answers and transport failures
REQUEST_ERRORS = (ApiError, httpx.HTTPError)
