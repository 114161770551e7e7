"""AI suggestion routes: ticket analysis and suggestion sessions."""

import logging
from typing import Optional, List, Dict, Any

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from sisyflow.core.exceptions import SisyflowError
from sisyflow.c2_ai_suggestion_service.suggestion_session_service import SuggestionSessionService
from sisyflow.c2_validation_service.schemas import (
    AISuggestion,
    AnalyzeTicketCommand,
    CreateAISessionCommand,
    UpdateRatingCommand,
    UpdateSessionTicketCommand,
)
from sisyflow.c3_auth_routes.dependencies import get_current_user

logger = logging.getLogger(__name__)


class AnalyzeTicketResponse(BaseModel):
    suggestions: List[AISuggestion]


class AISessionResponse(BaseModel):
    session_id: str
    ticket_id: Optional[str] = None
    suggestions: List[AISuggestion]
    rating: Optional[int] = None


def create_ai_router(server_state) -> APIRouter:
    """Create AI suggestion router.

    Args:
        server_state: Holds the lazily created LLM provider
    """
    router = APIRouter(prefix="/api/ai-suggestion-sessions", tags=["ai"])

    @router.post("/analyze", response_model=AnalyzeTicketResponse)
    async def analyze_ticket(command: AnalyzeTicketCommand, user: Dict[str, Any] = Depends(get_current_user)):
        """Ask the language model for suggestions on a ticket draft."""
        try:
            return await SuggestionSessionService.analyze(command, user, server_state.get_llm_provider)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Unexpected error during AI analysis: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("", response_model=AISessionResponse, status_code=201)
    async def create_session(command: CreateAISessionCommand, user: Dict[str, Any] = Depends(get_current_user)):
        """Store the suggestions, their applied flags and the rating of a saved ticket."""
        try:
            return await SuggestionSessionService.create_session(command, user)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to save AI session: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/{session_id}", response_model=AISessionResponse)
    async def get_session(session_id: str, user: Dict[str, Any] = Depends(get_current_user)):
        try:
            return await SuggestionSessionService.get_session(session_id, user)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to get AI session {session_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.put("/{session_id}/rating", response_model=AISessionResponse)
    async def update_rating(
        session_id: str,
        command: UpdateRatingCommand,
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        try:
            return await SuggestionSessionService.update_rating(session_id, command.rating, user)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to rate AI session {session_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.patch("/{session_id}/ticket-id", response_model=AISessionResponse)
    async def update_ticket_id(
        session_id: str,
        command: UpdateSessionTicketCommand,
        user: Dict[str, Any] = Depends(get_current_user),
    ):
        try:
            return await SuggestionSessionService.update_ticket_id(session_id, command.ticket_id, user)
        except SisyflowError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        except Exception as e:
            logger.error(f"Failed to link AI session {session_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    return router
