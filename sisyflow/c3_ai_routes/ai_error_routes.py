"""Administrator route listing logged AI errors."""

import logging
from typing import Optional, List, Dict, Any

from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel, ValidationError

from sisyflow.c2_ai_error_service.ai_error_service import AIErrorService
from sisyflow.c2_validation_service.schemas import AIErrorsQuery
from sisyflow.c2_validation_service.validation_helpers import first_error_message
from sisyflow.c3_auth_routes.dependencies import require_admin
from sisyflow.c3_ticket_routes.ticket_routes import Pagination, UserReference

logger = logging.getLogger(__name__)


class AIErrorResponse(BaseModel):
    id: str
    ticket_id: Optional[str] = None
    user_id: Optional[str] = None
    error_message: str
    error_details: Optional[Any] = None
    created_at: Optional[str] = None
    user: Optional[UserReference] = None


class AIErrorListResponse(BaseModel):
    errors: List[AIErrorResponse]
    pagination: Pagination


def create_ai_error_router() -> APIRouter:
    """Create AI error log router."""
    router = APIRouter(prefix="/api/ai-errors", tags=["ai"])

    @router.get("", response_model=AIErrorListResponse)
    async def list_ai_errors(
        limit: int = Query(50),
        offset: int = Query(0),
        ticket_id: Optional[str] = Query(None),
        search: Optional[str] = Query(None),
        admin: Dict[str, Any] = Depends(require_admin),
    ):
        """Newest-first AI errors, filterable by ticket and message text."""
        try:
            query = AIErrorsQuery(limit=limit, offset=offset, ticket_id=ticket_id, search=search)
            return await AIErrorService.list_errors(query)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=first_error_message(e))
        except Exception as e:
            logger.error(f"Failed to list AI errors: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    return router
