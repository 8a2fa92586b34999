"""
Shared FastAPI App Factory

Used by `src.main` and by the API tests so both serve the same routes,
middleware and exception handlers.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.service.cinema.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from src.service.cinema.driving_adapter.http_controller.movie_controller import (
    router as movie_router,
)
from src.service.cinema.driving_adapter.http_controller.showtime_controller import (
    router as showtime_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Movie ticket booking',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(movie_router, prefix='/movies', tags=['movies'])
    app.include_router(showtime_router, prefix='/showtimes', tags=['showtimes'])
    app.include_router(booking_router, prefix='/bookings', tags=['bookings'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
