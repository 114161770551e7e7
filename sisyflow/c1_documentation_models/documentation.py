"""Project documentation model for Sisyflow."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from sisyflow.c1_database_session.base import Base

# The table only ever holds this row
PROJECT_DOCUMENTATION_ID = "00000000-0000-0000-0000-000000000001"


class ProjectDocumentation(Base):
    """Shared project documentation, also fed to the AI as context."""

    __tablename__ = "project_documentation"

    id = Column(String, primary_key=True, default=PROJECT_DOCUMENTATION_ID)
    content = Column(Text, nullable=False, default="")
    updated_by = Column(String, ForeignKey("profiles.id", ondelete="SET NULL"))
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    editor = relationship("Profile")

    def to_dict(self):
        return {
            "id": self.id,
            "content": self.content or "",
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "updated_by": self.editor.to_reference() if self.editor else None,
        }
