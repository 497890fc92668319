"""
Admission API Application

Serves ticket resolution, admission, staff PIN checks and the admission log
to gate devices.
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
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Admission API] Starting up...')

    tracing = TracingConfig(service_name='gate-admission')
    tracing.setup()
    Logger.base.info('📊 [Admission API] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Admission API] Dependency injection wired')

    database = container.database()
    tracing.instrument_sqlalchemy(engine=database.engine)
    Logger.base.info('🗄️  [Admission API] Database engine ready + instrumented')

    if settings.DB_CREATE_TABLES_ON_STARTUP:
        await database.create_all()

    Logger.base.info('✅ [Admission API] Ready to serve gate requests')

    yield

    Logger.base.info('🛑 [Admission API] Shutting down...')

    await database.dispose()
    Logger.base.info('🗄️  [Admission API] Database engine disposed')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Admission API] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
