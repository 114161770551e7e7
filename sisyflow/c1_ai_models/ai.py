"""AI suggestion session and AI error models for Sisyflow."""

from datetime import datetime
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, CheckConstraint, JSON
from sqlalchemy.orm import relationship

from sisyflow.c1_database_session.base import Base


class AISuggestionSession(Base):
    """One analysis pass over a ticket and how the user reacted to it."""

    __tablename__ = "ai_suggestion_sessions"

    id = Column(String, primary_key=True)  # uuid4
    ticket_id = Column(String, ForeignKey("tickets.id", ondelete="CASCADE"))
    user_id = Column(String, ForeignKey("profiles.id", ondelete="SET NULL"))
    suggestions = Column(JSON, nullable=False)  # [{type, content, applied}], order is significant
    rating = Column(
        Integer,
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)"),
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "session_id": self.id,
            "ticket_id": self.ticket_id,
            "user_id": self.user_id,
            "suggestions": list(self.suggestions or []),
            "rating": self.rating,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class AIError(Base):
    """A failed call to the language-model provider."""

    __tablename__ = "ai_errors"

    id = Column(String, primary_key=True)  # uuid4
    ticket_id = Column(String)  # not a FK: the ticket may not exist yet when analysis fails
    user_id = Column(String, ForeignKey("profiles.id", ondelete="SET NULL"))
    error_message = Column(Text, nullable=False)
    error_details = Column(JSON)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("Profile")

    def to_dict(self):
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "user_id": self.user_id,
            "error_message": self.error_message,
            "error_details": self.error_details,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "user": self.user.to_reference() if self.user else None,
        }
