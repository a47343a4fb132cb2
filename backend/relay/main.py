"""Relay API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - One ProcedureRegistry per app, built in create_app() and kept on app.state
    - Global error handlers map RelayError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory: tests build apps around fresh registries
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from relay.api.error_handlers import register_error_handlers
from relay.api.routes import health, rpc
from relay.config import Settings, get_settings
from relay.infrastructure import database
from relay.infrastructure.observability import setup_logging
from relay.services.app_router import build_app_registry
from relay.services.procedure_registry import ProcedureRegistry
from relay.services.transport import BatchTransport

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(
        f"Relay API started with {len(app.state.registry)} procedures",
    )
    yield
    await manager.dispose()
    logger.info("Relay API shutting down")


def create_app(
    settings: Settings | None = None,
    registry: ProcedureRegistry | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Relay API", version="1.0.0", lifespan=lifespan)

    app.state.registry = registry or build_app_registry()
    app.state.transport = BatchTransport(app.state.registry)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(rpc.router, prefix=settings.rpc_endpoint)

    register_error_handlers(app)
    return app


app = create_app()
