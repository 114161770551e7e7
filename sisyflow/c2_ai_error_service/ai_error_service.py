"""Service layer for logged AI failures."""

import uuid
import logging
from typing import Optional, Dict, Any

from sisyflow.core.database import get_db, AIError
from sisyflow.c2_validation_service.schemas import AIErrorsQuery

logger = logging.getLogger(__name__)


class AIErrorService:
    """Record and list failed language-model calls."""

    @staticmethod
    async def record_error(
        error_message: str,
        error_details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
        ticket_id: Optional[str] = None,
    ) -> str:
        """
        Persist one AI failure.

        Returns:
            Id of the stored ai_errors row
        """
        with get_db() as db:
            error = AIError(
                id=str(uuid.uuid4()),
                ticket_id=ticket_id,
                user_id=user_id,
                error_message=error_message,
                error_details=error_details,
            )
            db.add(error)
            logger.error(f"[AI_ERROR] {error_message} (user={user_id}, ticket={ticket_id})")
            return error.id

    @staticmethod
    async def list_errors(query: AIErrorsQuery) -> Dict[str, Any]:
        """
        List logged errors, newest first.

        Returns:
            ``{"errors": [...], "pagination": {"page", "limit", "total"}}``
        """
        with get_db() as db:
            q = db.query(AIError)
            if query.ticket_id:
                q = q.filter(AIError.ticket_id == query.ticket_id)
            if query.search:
                q = q.filter(AIError.error_message.ilike(f"%{query.search}%"))

            total = q.count()
            errors = (
                q.order_by(AIError.created_at.desc(), AIError.id)
                .offset(query.offset)
                .limit(query.limit)
                .all()
            )

            return {
                "errors": [error.to_dict() for error in errors],
                "pagination": {
                    "page": query.offset // query.limit + 1,
                    "limit": query.limit,
                    "total": total,
                },
            }
