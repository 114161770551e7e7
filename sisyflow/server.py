"""HTTP server for Sisyflow: app factory, shared state and CLI entry point."""

import argparse
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sisyflow import __version__
from sisyflow.core.config import Settings, get_settings
from sisyflow.c1_database_session.database_manager import DatabaseManager, get_database_manager
from sisyflow.interfaces.llm_interface import LLMProviderInterface, get_llm_provider

# C3 Routes (Application Layer)
from sisyflow.c3_health_routes import router as health_router
from sisyflow.c3_auth_routes import create_auth_router, auth_middleware
from sisyflow.c3_ticket_routes import create_ticket_router
from sisyflow.c3_profile_routes import create_profile_router
from sisyflow.c3_user_routes import create_user_router
from sisyflow.c3_ai_routes import create_ai_router, create_ai_error_router
from sisyflow.c3_documentation_routes import create_documentation_router
from sisyflow.c3_page_routes import create_page_router

logger = logging.getLogger(__name__)


class ServerState:
    """Global server state."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.db_manager: Optional[DatabaseManager] = None
        self.llm_provider: Optional[LLMProviderInterface] = None

    def initialize(self):
        """Create tables and report configuration problems."""
        self.db_manager = get_database_manager()
        self.db_manager.create_tables()
        logger.info(f"Database ready at {self.db_manager.database_path}")

        try:
            self.settings.validate_for_runtime()
        except ValueError as e:
            logger.warning(f"Configuration incomplete: {e}")

    def get_llm_provider(self) -> LLMProviderInterface:
        """Return the provider, creating it on first use.

        Raises:
            ValueError: If no provider can be built from the settings
        """
        if self.llm_provider is None:
            self.llm_provider = get_llm_provider(self.settings.llm)
        return self.llm_provider


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Answer malformed request bodies and parameters with 400."""
    details = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    logger.info(f"Rejected invalid request to {request.url.path}: {details}")
    return JSONResponse(
        status_code=400,
        content={"error": "Validation Error", "message": "Invalid request data", "details": details},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use, defaults to the global settings

    Returns:
        Configured application; its ``state.server_state`` holds the ServerState
    """
    settings = settings or get_settings()
    server_state = ServerState(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        server_state.initialize()
        yield

    app = FastAPI(
        title="Sisyflow",
        description="Ticket tracking board with AI-assisted ticket writing",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.server_state = server_state

    # Add CORS middleware
    if settings.server.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.server.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.middleware("http")(auth_middleware)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(health_router)
    app.include_router(create_auth_router())
    app.include_router(create_profile_router())
    app.include_router(create_user_router())
    app.include_router(create_ticket_router())
    app.include_router(create_ai_router(server_state))
    app.include_router(create_ai_error_router())
    app.include_router(create_documentation_router())
    app.include_router(create_page_router())

    return app


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv=None):
    """Run the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the Sisyflow server")
    parser.add_argument("--host", default=settings.server.host, help="Host to bind")
    parser.add_argument("--port", type=int, default=settings.server.port, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    logger.info(f"Starting Sisyflow {__version__} on {args.host}:{args.port}")

    if args.reload:
        uvicorn.run("sisyflow.server:create_app", factory=True, host=args.host, port=args.port, reload=True)
    else:
        uvicorn.run(create_app(settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
