"""
Chat IA - Main FastAPI Application
"""

import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import Settings, settings as default_settings
from .api import conversations_router
from .core import ConversationRegistry, ConversationSessionManager, MessageStore
from .core.logging_config import setup_logging
from .middleware import RequestLoggingMiddleware
from .responder import Responder, SimulatedResponder
from .services import AutoInteraction, InteractionService
from .storage import KeyValueStorage, create_storage

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    responder: Optional[Responder] = None,
    interaction: Optional[InteractionService] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use (module defaults if not given)
        storage: Storage backend (built from settings if not given)
        responder: Assistant reply generator (simulated if not given)
        interaction: Confirmation and clipboard boundary

    Returns:
        FastAPI application
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        # Startup
        setup_logging(settings)

        store = storage or create_storage(
            settings.storage_type,
            base_dir=settings.local_storage_path,
            key_prefix=settings.storage_key_prefix,
        )
        manager = ConversationSessionManager(
            registry=ConversationRegistry(store),
            message_store=MessageStore(store),
            responder=responder or SimulatedResponder(settings.responder_delay_seconds),
            interaction=interaction or AutoInteraction(),
        )
        manager.boot()
        app.state.session_manager = manager

        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Storage: {settings.storage_type} ({settings.local_storage_path})")
        logger.info(f"Conversations loaded: {len(manager.conversations)}")
        logger.info(f"Log level: {settings.log_level.upper()}")
        logger.info(f"Debug mode: {settings.debug}")
        yield
        # Shutdown
        logger.info(f"Shutting down {settings.app_name}")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Chat session manager with persistent conversations",
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add request logging middleware (after CORS)
    if settings.log_api_requests:
        app.add_middleware(RequestLoggingMiddleware)

    app.include_router(conversations_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "storage": settings.storage_type,
            "version": settings.app_version
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "chatia.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.debug
    )
