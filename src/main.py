"""
Production FastAPI Application

    uvicorn src.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Popcorn Palace] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Popcorn Palace] Dependency injection wired')

    if settings.STORAGE_BACKEND == 'database':
        await container.database().create_tables()
        Logger.base.info('🗄️  [Popcorn Palace] Database ready')
    else:
        Logger.base.info('🧠 [Popcorn Palace] Using in-memory storage')

    Logger.base.info('✅ [Popcorn Palace] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Popcorn Palace] Shutting down...')

    if settings.STORAGE_BACKEND == 'database':
        await container.database().dispose()
        Logger.base.info('🗄️  [Popcorn Palace] Database engine disposed')

    container.unwire()

    Logger.base.info('👋 [Popcorn Palace] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
