"""Ticket models for Sisyflow."""

from sisyflow.c1_ticket_models.ticket import Ticket

__all__ = ["Ticket"]
