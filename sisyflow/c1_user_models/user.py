"""Profile model for Sisyflow."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, CheckConstraint, Index

from sisyflow.c1_database_session import Base


class Profile(Base):
    """A registered user: login credentials plus the public profile."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True)  # uuid4
    email = Column(String, unique=True, nullable=False)
    username = Column(String(30), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(
        String,
        CheckConstraint("role IN ('USER', 'ADMIN')"),
        default="USER",
        nullable=False,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_profiles_email", "email"),
        Index("idx_profiles_username", "username"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def to_reference(self):
        """Compact ``{id, username}`` form embedded in other records."""
        return {"id": self.id, "username": self.username}

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
