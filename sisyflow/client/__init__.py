"""Client-side controllers driving the Sisyflow API.

Each controller holds the state a UI component renders and talks to the
server through ``SisyflowClient``.
"""

from sisyflow.client.api_client import ApiError, SisyflowClient
from sisyflow.client.notifications import Notifier
from sisyflow.client.events import OpenTicketModal, TicketModalEvents

__all__ = ["ApiError", "SisyflowClient", "Notifier", "OpenTicketModal", "TicketModalEvents"]
