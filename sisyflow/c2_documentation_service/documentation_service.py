"""Service layer for the shared project documentation."""

import logging
from typing import Dict, Any

from sisyflow.core.database import get_db, ProjectDocumentation, PROJECT_DOCUMENTATION_ID
from sisyflow.core.exceptions import AccessDeniedError
from sisyflow.c1_ticket_enums.ticket_enums import UserRole

logger = logging.getLogger(__name__)


class DocumentationService:
    """Read and replace the single project documentation record."""

    @staticmethod
    async def get_documentation() -> Dict[str, Any]:
        with get_db() as db:
            doc = db.query(ProjectDocumentation).filter_by(id=PROJECT_DOCUMENTATION_ID).first()
            if not doc:
                return {"id": PROJECT_DOCUMENTATION_ID, "content": "", "updated_at": None, "updated_by": None}
            return doc.to_dict()

    @staticmethod
    async def get_content() -> str:
        """Plain text used as context for AI analysis."""
        with get_db() as db:
            doc = db.query(ProjectDocumentation).filter_by(id=PROJECT_DOCUMENTATION_ID).first()
            return doc.content if doc else ""

    @staticmethod
    async def update_documentation(content: str, user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace the documentation content.

        Args:
            content: Already trimmed and length-checked content
            user: Acting user, must be an administrator

        Raises:
            AccessDeniedError: If the user is not an administrator
        """
        if user.get("role") != UserRole.ADMIN.value:
            raise AccessDeniedError("Only administrators can update project documentation")

        with get_db() as db:
            doc = db.query(ProjectDocumentation).filter_by(id=PROJECT_DOCUMENTATION_ID).first()
            if doc is None:
                doc = ProjectDocumentation(id=PROJECT_DOCUMENTATION_ID)
                db.add(doc)
            doc.content = content
            doc.updated_by = user["id"]
            db.flush()
            db.refresh(doc)
            logger.info(f"Project documentation updated by {user.get('username')} ({len(content)} chars)")
            return doc.to_dict()
