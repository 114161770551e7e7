"""C2 Ticket Service - Ticket management for the board."""
from sisyflow.c2_ticket_service.ticket_service import TicketService
__all__ = ["TicketService"]
