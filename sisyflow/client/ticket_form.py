"""Edit buffer of the ticket modal with live validation."""

from typing import Any, Dict, Optional

from sisyflow.c1_ticket_enums.ticket_enums import TicketType
from sisyflow.c2_validation_service.schemas import TicketFormData
from sisyflow.c2_validation_service.validation_helpers import collect_field_errors


def default_form_data() -> Dict[str, Any]:
    return {
        "title": "",
        "description": "",
        "type": TicketType.TASK.value,
        "assignee": None,
        "ai_enhanced": False,
    }


def form_data_from_ticket(ticket: Dict[str, Any]) -> Dict[str, Any]:
    """Buffer contents for an existing ticket record."""
    return {
        "title": ticket.get("title", ""),
        "description": ticket.get("description") or "",
        "type": ticket.get("type", TicketType.TASK.value),
        "assignee": dict(ticket["assignee"]) if ticket.get("assignee") else None,
        "ai_enhanced": bool(ticket.get("ai_enhanced", False)),
    }


class TicketFormState:
    """
    Form buffer plus derived field errors.

    Every change re-runs the full schema, so ``errors`` and ``is_valid``
    always describe the current buffer.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = default_form_data()
        self.errors: Dict[str, str] = {}
        self.reset(data)

    def reset(self, data: Optional[Dict[str, Any]] = None):
        self.data = default_form_data()
        if data:
            self.data.update(data)
        self.validate()

    def change(self, **updates) -> Dict[str, str]:
        unknown = set(updates) - set(self.data)
        if unknown:
            raise KeyError(f"Unknown ticket form fields: {sorted(unknown)}")
        self.data.update(updates)
        return self.validate()

    def validate(self) -> Dict[str, str]:
        self.errors = collect_field_errors(TicketFormData, self.data)
        return self.errors

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_payload(self) -> Dict[str, Any]:
        """Request body for POST/PUT /api/tickets."""
        assignee = self.data.get("assignee")
        return {
            "title": self.data["title"].strip(),
            "description": self.data.get("description") or "",
            "type": self.data["type"],
            "assignee_id": assignee["id"] if assignee else None,
            "ai_enhanced": bool(self.data.get("ai_enhanced")),
        }
