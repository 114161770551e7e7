"""Enumerations shared by the ticket board."""

from sisyflow.c1_ticket_enums.ticket_enums import TicketType, TicketStatus, UserRole, SuggestionType, TicketModalMode

__all__ = ["TicketType", "TicketStatus", "UserRole", "SuggestionType", "TicketModalMode"]
