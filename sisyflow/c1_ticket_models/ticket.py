"""Ticket model for Sisyflow."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, CheckConstraint, Boolean
from sqlalchemy.orm import relationship

from sisyflow.c1_database_session.base import Base


class Ticket(Base):
    """Ticket shown on the Kanban board."""

    __tablename__ = "tickets"

    id = Column(String, primary_key=True)  # uuid4
    reporter_id = Column(String, ForeignKey("profiles.id", ondelete="SET NULL"))  # null once the reporter is deleted
    assignee_id = Column(String, ForeignKey("profiles.id", ondelete="SET NULL"))

    # Core Fields
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")  # Markdown
    type = Column(
        String(20),
        CheckConstraint("type IN ('BUG', 'IMPROVEMENT', 'TASK')"),
        nullable=False,
    )
    status = Column(
        String(20),
        CheckConstraint("status IN ('OPEN', 'IN_PROGRESS', 'CLOSED')"),
        default="OPEN",
        nullable=False,
    )
    ai_enhanced = Column(Boolean, default=False, nullable=False)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    reporter = relationship("Profile", foreign_keys=[reporter_id])
    assignee = relationship("Profile", foreign_keys=[assignee_id])

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description or "",
            "type": self.type,
            "status": self.status,
            "reporter_id": self.reporter_id,
            "assignee_id": self.assignee_id,
            "ai_enhanced": bool(self.ai_enhanced),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "reporter": self.reporter.to_reference() if self.reporter else None,
            "assignee": self.assignee.to_reference() if self.assignee else None,
        }
