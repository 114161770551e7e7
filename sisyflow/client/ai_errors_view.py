"""Administrator list of AI errors: reducer-driven state plus fetch effect."""

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple, Union

from sisyflow.client.api_client import REQUEST_ERRORS, SisyflowClient, failure_message
from sisyflow.client.notifications import Notifier

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
FETCH_FAILED_MESSAGE = "Failed to load AI errors"
UNKNOWN_STATUS = "unknown"
UNKNOWN_USER = "N/A"


def parse_http_status(details: Any) -> Optional[int]:
    """HTTP status stored in an error's details, or None when absent or malformed."""
    if not isinstance(details, dict):
        return None
    status = details.get("status")
    if isinstance(status, bool) or not isinstance(status, int):
        return None
    return status


@dataclass(frozen=True)
class AIErrorRow:
    """One error as displayed in the table and detail panel."""

    id: str
    error_message: str
    created_at: Optional[str]
    ticket_id: Optional[str] = None
    username: Optional[str] = None
    http_status: Optional[int] = None
    details: Any = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AIErrorRow":
        user = data.get("user")
        details = data.get("error_details")
        return cls(
            id=data["id"],
            error_message=data.get("error_message", ""),
            created_at=data.get("created_at"),
            ticket_id=data.get("ticket_id"),
            username=user.get("username") if isinstance(user, dict) else None,
            http_status=parse_http_status(details),
            details=details,
        )

    @property
    def status_label(self) -> str:
        return str(self.http_status) if self.http_status is not None else UNKNOWN_STATUS

    @property
    def user_label(self) -> str:
        return self.username or UNKNOWN_USER

    @property
    def details_json(self) -> str:
        return json.dumps(self.details, indent=2, sort_keys=True, default=str)


@dataclass(frozen=True)
class Filters:
    ticket_id: str = ""
    search: str = ""


@dataclass(frozen=True)
class AIErrorsState:
    errors: Tuple[AIErrorRow, ...] = ()
    page: int = 1
    limit: int = DEFAULT_LIMIT
    total: int = 0
    filters: Filters = field(default_factory=Filters)
    is_loading: bool = False
    error: Optional[str] = None
    selected_error: Optional[AIErrorRow] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def total_pages(self) -> int:
        return max(1, -(-self.total // self.limit))

    @property
    def query_key(self) -> Tuple[int, int, str, str]:
        """Everything a fetch depends on; a change re-triggers the fetch."""
        return (self.page, self.limit, self.filters.ticket_id, self.filters.search)


# Actions

@dataclass(frozen=True)
class FetchStart:
    pass


@dataclass(frozen=True)
class FetchSuccess:
    errors: Tuple[AIErrorRow, ...]
    total: int


@dataclass(frozen=True)
class FetchError:
    message: str


@dataclass(frozen=True)
class SetFilters:
    ticket_id: Optional[str] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class SetPage:
    page: int


@dataclass(frozen=True)
class SelectError:
    error: Optional[AIErrorRow]


Action = Union[FetchStart, FetchSuccess, FetchError, SetFilters, SetPage, SelectError]


def reduce(state: AIErrorsState, action: Action) -> AIErrorsState:
    """Pure transition function of the list view."""
    if isinstance(action, FetchStart):
        return replace(state, is_loading=True, error=None)
    if isinstance(action, FetchSuccess):
        return replace(state, is_loading=False, error=None, errors=tuple(action.errors), total=action.total)
    if isinstance(action, FetchError):
        return replace(state, is_loading=False, error=action.message)
    if isinstance(action, SetFilters):
        filters = Filters(
            ticket_id=state.filters.ticket_id if action.ticket_id is None else action.ticket_id.strip(),
            search=state.filters.search if action.search is None else action.search.strip(),
        )
        return replace(state, filters=filters, page=1)
    if isinstance(action, SetPage):
        return replace(state, page=max(1, action.page))
    if isinstance(action, SelectError):
        return replace(state, selected_error=action.error)
    raise TypeError(f"Unknown action: {action!r}")


class AIErrorsView:
    """
    Holds the list state and refetches whenever page, limit or a filter
    changes, so callers only dispatch actions.
    """

    def __init__(self, client: SisyflowClient, notifier: Notifier, limit: int = DEFAULT_LIMIT):
        self.client = client
        self.notifier = notifier
        self.state = AIErrorsState(limit=limit)
        self._fetched_key: Optional[Tuple[int, int, str, str]] = None

    def mount(self):
        self._fetch()

    def dispatch(self, action: Action) -> AIErrorsState:
        self.state = reduce(self.state, action)
        if self._fetched_key is not None and self.state.query_key != self._fetched_key:
            self._fetch()
        return self.state

    def _fetch(self):
        self._fetched_key = self.state.query_key
        self.state = reduce(self.state, FetchStart())
        filters = self.state.filters
        try:
            response = self.client.list_ai_errors(
                limit=self.state.limit,
                offset=self.state.offset,
                ticket_id=filters.ticket_id or None,
                search=filters.search or None,
            )
        except REQUEST_ERRORS as e:
            message = failure_message(e, FETCH_FAILED_MESSAGE)
            self.notifier.error(message)
            self.state = reduce(self.state, FetchError(message))
            return

        rows = tuple(AIErrorRow.from_api(item) for item in response.get("errors", []))
        total = response.get("pagination", {}).get("total", len(rows))
        self.state = reduce(self.state, FetchSuccess(rows, total))
        logger.debug(f"Loaded {len(rows)} AI errors (page {self.state.page})")

    # UI actions

    def apply_filters(self, ticket_id: Optional[str] = None, search: Optional[str] = None) -> AIErrorsState:
        return self.dispatch(SetFilters(ticket_id=ticket_id, search=search))

    def go_to_page(self, page: int) -> AIErrorsState:
        return self.dispatch(SetPage(page))

    def select(self, error: Optional[AIErrorRow]) -> AIErrorsState:
        return self.dispatch(SelectError(error))

    def refresh(self):
        self._fetch()
