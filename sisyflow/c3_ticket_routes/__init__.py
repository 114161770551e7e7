"""C3 Ticket Routes."""
from sisyflow.c3_ticket_routes.ticket_routes import create_ticket_router
__all__ = ["create_ticket_router"]
