"""Ticket management routes for the Sisyflow board."""

import logging
from typing import Optional, List, Dict, Any

from fastapi import APIRouter, HTTPException, Depends, Query, Response
from pydantic import BaseModel, ValidationError

from sisyflow.core.exceptions import SisyflowError
from sisyflow.c2_ticket_service.ticket_service import TicketService
from sisyflow.c2_validation_service.schemas import (
    CreateTicketCommand,
    UpdateTicketCommand,
    UpdateTicketStatusCommand,
    UpdateTicketAssigneeCommand,
    TicketListQuery,
)
from sisyflow.c2_validation_service.validation_helpers import first_error_message
from sisyflow.c3_auth_routes.dependencies import get_current_user

logger = logging.getLogger(__name__)


# Response Models
class UserReference(BaseModel):
    id: str
    username: str


class TicketResponse(BaseModel):
    id: str
    title: str
    description: str
    type: str
    status: str
    reporter_id: Optional[str] = None
    assignee_id: Optional[str] = None
    ai_enhanced: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    reporter: Optional[UserReference] = None
    assignee: Optional[UserReference] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int


class TicketListResponse(BaseModel):
    tickets: List[TicketResponse]
    pagination: Pagination


def create_ticket_router() -> APIRouter:
    """Create ticket router."""
    router = APIRouter(prefix="/api/tickets", tags=["tickets"])

    @router.get("", response_model=TicketListResponse)
    async def list_tickets(
        limit: int = Query(20),
        offset: int = Query(0),
        status: Optional[str] = Query(None),
        type: Optional[str] = Query(None),
        assignee_id: Optional[str] = Query(None),
        reporter_id: Optional[str] = Query(None),
        sort: str = Query("created_at desc"),
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        """List tickets for the board with filters and pagination."""
        try:
            query = TicketListQuery(
                limit=limit,
                offset=offset,
                status=status,
                type=type,
                assignee_id=assignee_id,
                reporter_id=reporter_id,
                sort=sort,
            )
            return await TicketService.list_tickets(query)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=first_error_message(e))
        except Exception as e:
            logger.error(f"Failed to list tickets: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("", response_model=TicketResponse, status_code=201)
    async def create_ticket(
        command: CreateTicketCommand,
        response: Response,
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        """Create a ticket reported by the current user."""
        try:
            ticket = await TicketService.create_ticket(command, reporter_id=user["id"])
            response.headers["Location"] = f"/api/tickets/{ticket['id']}"
            logger.info(f"Ticket {ticket['id']} created by {user['username']}")
            return ticket
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to create ticket: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/{ticket_id}", response_model=TicketResponse)
    async def get_ticket(ticket_id: str, user: Dict[str, Any] = Depends(get_current_user)):
        try:
            return await TicketService.get_ticket(ticket_id)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to get ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.put("/{ticket_id}", response_model=TicketResponse)
    async def update_ticket(
        ticket_id: str,
        command: UpdateTicketCommand,
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        """Update ticket fields from the edit form."""
        try:
            return await TicketService.update_ticket(ticket_id, command, user)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Failed to update ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.patch("/{ticket_id}/status", response_model=TicketResponse)
    async def update_ticket_status(
        ticket_id: str,
        command: UpdateTicketStatusCommand,
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        """Move a ticket to another board column."""
        try:
            return await TicketService.update_status(ticket_id, command.status, user)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to update status of ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.patch("/{ticket_id}/assignee", response_model=TicketResponse)
    async def update_ticket_assignee(
        ticket_id: str,
        command: UpdateTicketAssigneeCommand,
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        """Assign a ticket, or unassign it with ``assignee_id: null``."""
        try:
            return await TicketService.update_assignee(ticket_id, command.assignee_id, user)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to update assignee of ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.delete("/{ticket_id}", status_code=204)
    async def delete_ticket(ticket_id: str, user: Dict[str, Any] = Depends(get_current_user)):
        try:
            await TicketService.delete_ticket(ticket_id, user)
            return Response(status_code=204)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to delete ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    return router
