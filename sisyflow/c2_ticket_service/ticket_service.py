"""Service layer for managing tickets on the board."""

import uuid
import logging
from typing import Optional, Dict, Any

from sqlalchemy import func

from sisyflow.core.database import get_db, Ticket, Profile
from sisyflow.core.exceptions import NotFoundError, AccessDeniedError
from sisyflow.c1_ticket_enums.ticket_enums import TicketStatus, UserRole
from sisyflow.c2_validation_service.schemas import (
    CreateTicketCommand,
    UpdateTicketCommand,
    TicketListQuery,
)

logger = logging.getLogger(__name__)


def _is_admin(user: Dict[str, Any]) -> bool:
    return user.get("role") == UserRole.ADMIN.value


class TicketService:
    """Service for managing ticket operations."""

    @staticmethod
    def _get_ticket_or_raise(db, ticket_id: str) -> Ticket:
        ticket = db.query(Ticket).filter_by(id=ticket_id).first()
        if not ticket:
            raise NotFoundError("Ticket not found")
        return ticket

    @staticmethod
    def _check_assignee_exists(db, assignee_id: Optional[str]) -> None:
        if assignee_id is not None and not db.query(Profile).filter_by(id=assignee_id).first():
            raise NotFoundError("Assignee not found")

    @staticmethod
    def _can_change_assignee(ticket: Ticket, assignee_id: Optional[str], user: Dict[str, Any]) -> bool:
        """
        Decide whether ``user`` may set the ticket's assignee to ``assignee_id``.

        Administrators and the reporter may assign anyone. Everybody else may
        only assign the ticket to themselves or drop their own assignment.
        """
        if _is_admin(user) or ticket.reporter_id == user["id"]:
            return True
        if assignee_id == user["id"]:
            return True
        return assignee_id is None and ticket.assignee_id == user["id"]

    @staticmethod
    async def create_ticket(command: CreateTicketCommand, reporter_id: str) -> Dict[str, Any]:
        """
        Create a new ticket in the OPEN column.

        Args:
            command: Validated ticket fields
            reporter_id: Profile id of the creating user; never changes afterwards

        Returns:
            The created ticket as a dict

        Raises:
            NotFoundError: If the requested assignee does not exist
        """
        logger.info(f"[TICKET_SERVICE] Creating ticket '{command.title[:60]}' for reporter {reporter_id}")

        with get_db() as db:
            TicketService._check_assignee_exists(db, command.assignee_id)

            ticket = Ticket(
                id=str(uuid.uuid4()),
                title=command.title,
                description=command.description or "",
                type=command.type.value,
                status=TicketStatus.OPEN.value,
                reporter_id=reporter_id,
                assignee_id=command.assignee_id,
                ai_enhanced=command.ai_enhanced,
            )
            db.add(ticket)
            db.flush()
            db.refresh(ticket)

            logger.info(f"[TICKET_SERVICE] Created ticket {ticket.id}")
            return ticket.to_dict()

    @staticmethod
    async def get_ticket(ticket_id: str) -> Dict[str, Any]:
        with get_db() as db:
            return TicketService._get_ticket_or_raise(db, ticket_id).to_dict()

    @staticmethod
    async def list_tickets(query: TicketListQuery) -> Dict[str, Any]:
        """
        List tickets with filters, sorting and offset pagination.

        Returns:
            ``{"tickets": [...], "pagination": {"page", "limit", "total"}}``
        """
        with get_db() as db:
            q = db.query(Ticket)
            if query.status:
                q = q.filter(Ticket.status == query.status.value)
            if query.type:
                q = q.filter(Ticket.type == query.type.value)
            if query.assignee_id:
                q = q.filter(Ticket.assignee_id == query.assignee_id)
            if query.reporter_id:
                q = q.filter(Ticket.reporter_id == query.reporter_id)

            total = q.count()

            column = getattr(Ticket, query.sort_field)
            q = q.order_by(column.desc() if query.sort_descending else column.asc(), Ticket.id)
            tickets = q.offset(query.offset).limit(query.limit).all()

            return {
                "tickets": [ticket.to_dict() for ticket in tickets],
                "pagination": {
                    "page": query.offset // query.limit + 1,
                    "limit": query.limit,
                    "total": total,
                },
            }

    @staticmethod
    async def update_ticket(ticket_id: str, command: UpdateTicketCommand, user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update from the edit form.

        Only the reporter or an administrator may edit. The reporter itself is
        never changed here.

        Raises:
            NotFoundError: Unknown ticket or assignee
            AccessDeniedError: The user is neither reporter nor administrator
        """
        updates = command.model_dump(exclude_unset=True)
        logger.info(f"[TICKET_SERVICE] Updating ticket {ticket_id}: {sorted(updates)}")

        with get_db() as db:
            ticket = TicketService._get_ticket_or_raise(db, ticket_id)
            if not (_is_admin(user) or ticket.reporter_id == user["id"]):
                raise AccessDeniedError(
                    "Access denied: Only the reporter or an administrator can edit this ticket"
                )

            if "assignee_id" in updates and updates["assignee_id"] != ticket.assignee_id:
                TicketService._check_assignee_exists(db, updates["assignee_id"])
                ticket.assignee_id = updates["assignee_id"]
            if "title" in updates:
                ticket.title = updates["title"]
            if "description" in updates:
                ticket.description = updates["description"] or ""
            if updates.get("type") is not None:
                ticket.type = updates["type"].value
            if updates.get("ai_enhanced") is not None:
                ticket.ai_enhanced = updates["ai_enhanced"]

            db.flush()
            db.refresh(ticket)
            return ticket.to_dict()

    @staticmethod
    async def update_status(ticket_id: str, status: TicketStatus, user: Dict[str, Any]) -> Dict[str, Any]:
        with get_db() as db:
            ticket = TicketService._get_ticket_or_raise(db, ticket_id)
            if not (_is_admin(user) or user["id"] in (ticket.reporter_id, ticket.assignee_id)):
                raise AccessDeniedError(
                    "Access denied: Only the reporter, the assignee or an administrator can move this ticket"
                )

            old_status = ticket.status
            ticket.status = status.value
            db.flush()
            db.refresh(ticket)
            logger.info(f"[TICKET_SERVICE] Ticket {ticket_id} moved {old_status} -> {status.value}")
            return ticket.to_dict()

    @staticmethod
    async def update_assignee(ticket_id: str, assignee_id: Optional[str], user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Assign or unassign a ticket.

        Raises:
            NotFoundError: Unknown ticket or assignee
            AccessDeniedError: See ``_can_change_assignee``
        """
        with get_db() as db:
            ticket = TicketService._get_ticket_or_raise(db, ticket_id)
            if not TicketService._can_change_assignee(ticket, assignee_id, user):
                raise AccessDeniedError(
                    "Access denied: You can only assign tickets to yourself or unassign yourself"
                )
            TicketService._check_assignee_exists(db, assignee_id)

            ticket.assignee_id = assignee_id
            db.flush()
            db.refresh(ticket)
            logger.info(f"[TICKET_SERVICE] Ticket {ticket_id} assignee set to {assignee_id or 'nobody'}")
            return ticket.to_dict()

    @staticmethod
    async def delete_ticket(ticket_id: str, user: Dict[str, Any]) -> None:
        with get_db() as db:
            ticket = TicketService._get_ticket_or_raise(db, ticket_id)
            if not _is_admin(user):
                raise AccessDeniedError("Access denied: Only administrators can delete tickets")
            db.delete(ticket)
            logger.info(f"[TICKET_SERVICE] Deleted ticket {ticket_id}")

    @staticmethod
    async def count_by_status() -> Dict[str, int]:
        """Ticket totals per board column, used by the health endpoint."""
        with get_db() as db:
            rows = db.query(Ticket.status, func.count(Ticket.id)).group_by(Ticket.status).all()
            counts = {status.value: 0 for status in TicketStatus}
            counts.update({status: count for status, count in rows})
            return counts
