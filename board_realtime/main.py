from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from board_realtime.application.use_cases.notifications import NotificationService
from board_realtime.config import get_settings
from board_realtime.infrastructure.database import engine, initialize_database
from board_realtime.infrastructure.realtime import ConnectionRegistry, RealtimeConnection
from board_realtime.infrastructure.security import TokenVerifier
from board_realtime.interfaces.api.errors import register_exception_handlers
from board_realtime.interfaces.api.routes import register_routes
from board_realtime.log_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup; flush pending pushes and release the pool on shutdown."""

    initialize_database()
    logger.info("Realtime gateway ready")
    yield
    await app.state.notification_service.wait_for_deliveries()
    engine.dispose()


def create_app() -> FastAPI:
    """Build the FastAPI application with a fresh connection registry."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Board Realtime", lifespan=lifespan)

    registry: ConnectionRegistry[RealtimeConnection] = ConnectionRegistry(
        max_sessions_per_user=settings.realtime_max_sessions_per_user
    )
    app.state.connection_registry = registry
    app.state.notification_service = NotificationService(registry)
    app.state.token_verifier = TokenVerifier()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)
    return app
