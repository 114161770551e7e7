"""Edit permission for the ticket modal."""

import logging
from typing import Any, Dict, Optional

from sisyflow.c1_ticket_enums.ticket_enums import TicketModalMode
from sisyflow.client.notifications import Notifier
from sisyflow.client.user_context import is_admin

logger = logging.getLogger(__name__)

EDIT_DENIED_MESSAGE = "You don't have permission to edit this ticket. Switching to view mode."


def can_edit_ticket(ticket: Optional[Dict[str, Any]], user: Optional[Dict[str, Any]]) -> bool:
    """Administrators may edit any ticket, other users only tickets they reported."""
    if not ticket or not user:
        return False
    if is_admin(user):
        return True
    reporter = ticket.get("reporter")
    return bool(reporter) and reporter.get("id") == user.get("id")


class TicketPermissionGuard:
    """Downgrades edit mode to view mode when the user may not edit.

    Meant to be evaluated again whenever the mode, the ticket or the user
    changes, since the ticket and the user can arrive after the modal opened.
    Until both are known the requested mode is kept.
    """

    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    def evaluate(
        self,
        mode: TicketModalMode,
        ticket: Optional[Dict[str, Any]],
        user: Optional[Dict[str, Any]],
    ) -> TicketModalMode:
        if mode != TicketModalMode.EDIT or not ticket or not user:
            return mode
        if can_edit_ticket(ticket, user):
            return mode
        logger.info(f"User {user.get('id')} may not edit ticket {ticket.get('id')}")
        self.notifier.warning(EDIT_DENIED_MESSAGE)
        return TicketModalMode.VIEW
