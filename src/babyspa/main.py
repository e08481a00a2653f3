import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

import babyspa.models  # noqa: F401 — register all models with Base.metadata
from babyspa.api.routes.appointments import router as appointments_router
from babyspa.api.routes.babies import router as babies_router
from babyspa.api.routes.packages import router as packages_router
from babyspa.api.routes.payments import router as payments_router
from babyspa.api.routes.scheduling import router as scheduling_router
from babyspa.config import get_settings
from babyspa.database import Base, engine
from babyspa.schemas.system import StatusResponse


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Create tables on startup (dev convenience; Alembic for production)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="Baby Spa",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(babies_router)
    app.include_router(packages_router)
    app.include_router(payments_router)
    app.include_router(scheduling_router)
    app.include_router(appointments_router)

    @app.get("/api/system/status", response_model=StatusResponse)
    async def system_status() -> StatusResponse:
        return StatusResponse(status="ok")

    return app


app = create_app()
