"""FastAPI application entry point"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api import socket as socket_router
from src.api import system as system_router
from src.core.config import settings
from src.core.dependencies import RedisManager
from src.core.metrics import ErrorMetrics, metrics
from src.core.middleware import setup_middleware
from src.services.gateway import SocketGateway, register_system_events
from src.services.graphql import GraphQLLoggerPlugin
from src.shared.errors import ErrorDispatcher
from src.shared.logging import get_logger, setup_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    setup_logger()
    logger.info(f"Starting {settings.app.name}...")

    yield

    logger.info("Shutting down...")
    await RedisManager.close()
    logger.info("Redis connection closed")


def create_app(error_metrics: ErrorMetrics | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        error_metrics: Error counters, the process-wide handle by default.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app.name,
        debug=settings.app.debug,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.app.debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.app.debug else None,
    )

    # Installed first so the exception filter middleware runs innermost
    dispatcher = ErrorDispatcher(error_metrics or metrics)
    dispatcher.install(app)

    setup_middleware(app)

    gateway = SocketGateway(dispatcher)
    register_system_events(gateway)

    app.state.error_dispatcher = dispatcher
    app.state.socket_gateway = gateway
    app.state.graphql_plugin = GraphQLLoggerPlugin(dispatcher)

    app.include_router(socket_router.router)
    app.include_router(system_router.router)

    return app


app = create_app()
