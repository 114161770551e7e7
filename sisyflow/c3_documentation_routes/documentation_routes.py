"""Project documentation routes."""

import logging
from typing import Optional, Dict, Any

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from sisyflow.core.exceptions import SisyflowError
from sisyflow.c2_documentation_service.documentation_service import DocumentationService
from sisyflow.c2_validation_service.schemas import UpdateDocumentationCommand
from sisyflow.c3_auth_routes.dependencies import get_current_user
from sisyflow.c3_ticket_routes.ticket_routes import UserReference

logger = logging.getLogger(__name__)


class DocumentationResponse(BaseModel):
    id: str
    content: str
    updated_at: Optional[str] = None
    updated_by: Optional[UserReference] = None


class DocumentationUpdateResponse(BaseModel):
    data: DocumentationResponse
    message: str


def create_documentation_router() -> APIRouter:
    """Create project documentation router."""
    router = APIRouter(prefix="/api/project-documentation", tags=["documentation"])

    @router.get("", response_model=DocumentationResponse)
    async def get_documentation(user: Dict[str, Any] = Depends(get_current_user)):
        try:
            return await DocumentationService.get_documentation()
        except Exception as e:
            logger.error(f"Failed to load project documentation: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.put("", response_model=DocumentationUpdateResponse)
    async def update_documentation(
        command: UpdateDocumentationCommand,
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        """Replace the documentation; administrators only."""
        try:
            doc = await DocumentationService.update_documentation(command.content, user)
            return DocumentationUpdateResponse(data=doc, message="Project documentation updated successfully")
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to update project documentation: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    return router
