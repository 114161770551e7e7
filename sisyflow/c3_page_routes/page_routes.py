"""Server-rendered pages. Access control happens in the auth middleware."""

import html
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from sisyflow.c1_ticket_enums.ticket_enums import TicketStatus
from sisyflow.c2_ticket_service.ticket_service import TicketService
from sisyflow.c2_validation_service.schemas import TicketListQuery
from sisyflow.c3_auth_routes.dependencies import get_auth_state

logger = logging.getLogger(__name__)

BOARD_COLUMNS = (
    (TicketStatus.OPEN.value, "Open"),
    (TicketStatus.IN_PROGRESS.value, "In Progress"),
    (TicketStatus.CLOSED.value, "Closed"),
)


def _render_page(title: str, body: str) -> HTMLResponse:
    html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <title>{html.escape(title)} - Sisyflow</title>
            <meta charset="utf-8">
        </head>
        <body>
            <h1>{html.escape(title)}</h1>
            {body}
        </body>
        </html>
        """
    return HTMLResponse(content=html_content)


def _render_card(ticket: Dict[str, Any]) -> str:
    assignee = ticket["assignee"]["username"] if ticket.get("assignee") else "Unassigned"
    return (
        f'<li class="ticket-card" data-ticket-id="{html.escape(ticket["id"])}">'
        f'<span class="ticket-type">{html.escape(ticket["type"])}</span> '
        f'<span class="ticket-title">{html.escape(ticket["title"])}</span> '
        f'<span class="ticket-assignee">{html.escape(assignee)}</span>'
        f"</li>"
    )


def _render_board(tickets: List[Dict[str, Any]]) -> str:
    columns = []
    for status, label in BOARD_COLUMNS:
        cards = "".join(_render_card(t) for t in tickets if t["status"] == status)
        columns.append(
            f'<section class="board-column" data-status="{status}"><h2>{label}</h2><ul>{cards}</ul></section>'
        )
    return "".join(columns)


def create_page_router() -> APIRouter:
    """Create router for the HTML pages."""
    router = APIRouter(tags=["pages"], include_in_schema=False)

    @router.get("/", response_class=HTMLResponse)
    @router.get("/board", response_class=HTMLResponse)
    async def board_page():
        result = await TicketService.list_tickets(TicketListQuery(limit=100))
        return _render_page("Board", _render_board(result["tickets"]))

    @router.get("/login", response_class=HTMLResponse)
    async def login_page():
        return _render_page(
            "Sign in",
            '<form method="post" action="/api/auth/sign-in">'
            '<input name="email" type="email"><input name="password" type="password">'
            '<button type="submit">Sign in</button></form>',
        )

    @router.get("/register", response_class=HTMLResponse)
    async def register_page():
        return _render_page(
            "Create the administrator account",
            '<form method="post" action="/api/auth/sign-up">'
            '<input name="email" type="email"><input name="password" type="password">'
            '<button type="submit">Register</button></form>',
        )

    @router.get("/profile", response_class=HTMLResponse)
    async def profile_page(request: Request):
        user = get_auth_state(request)["user"]
        return _render_page("Profile", f'<p class="username">{html.escape(user["username"])}</p>')

    @router.get("/admin", response_class=HTMLResponse)
    async def admin_page():
        return _render_page(
            "Administration",
            '<ul><li><a href="/admin/users">Users</a></li>'
            '<li><a href="/admin/documentation">Project documentation</a></li>'
            '<li><a href="/admin/ai-errors">AI errors</a></li></ul>',
        )

    @router.get("/admin/users", response_class=HTMLResponse)
    async def admin_users_page():
        return _render_page("Users", '<div id="user-management"></div>')

    @router.get("/admin/documentation", response_class=HTMLResponse)
    async def admin_documentation_page():
        return _render_page("Project documentation", '<div id="documentation-editor"></div>')

    @router.get("/admin/ai-errors", response_class=HTMLResponse)
    async def admin_ai_errors_page():
        return _render_page("AI errors", '<div id="ai-errors"></div>')

    return router
