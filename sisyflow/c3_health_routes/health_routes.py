"""Health check routes for the Sisyflow server."""

import logging
from datetime import datetime
from fastapi import APIRouter

from sisyflow import __version__
from sisyflow.c2_ticket_service.ticket_service import TicketService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Health check endpoint.

    Returns:
        dict: Health status, database reachability, timestamp, and version
    """
    try:
        await TicketService.count_by_status()
        database = "ok"
    except Exception as e:
        logger.error(f"Health check could not reach the database: {e}")
        database = "unavailable"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
        "timestamp": datetime.utcnow().isoformat(),
        "version": __version__,
    }
