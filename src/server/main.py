"""FastAPI application and its lifespan-managed worker pool."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Callable

from fastapi import FastAPI

from server.models import HealthResponse
from server.routers import process
from siteweave.config import SITEWEAVE_WORKER_POOL_SIZE
from siteweave.utils.logging_config import get_logger
from siteweave.worker import WorkerPool

logger = get_logger(__name__)


@dataclass
class AppState:
    """Long-lived objects shared by request handlers."""

    worker_pool: WorkerPool | None = None


def _default_worker_pool() -> WorkerPool | None:
    if SITEWEAVE_WORKER_POOL_SIZE <= 0:
        return None
    return WorkerPool(SITEWEAVE_WORKER_POOL_SIZE)


def create_app(
    *, worker_pool_factory: Callable[[], WorkerPool | None] = _default_worker_pool
) -> FastAPI:
    """Build the application; ``worker_pool_factory`` runs once at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        pool = worker_pool_factory()
        app.state.siteweave = AppState(worker_pool=pool)
        logger.bind(workers=pool.size if pool else 0).info("siteweave server started")
        try:
            yield
        finally:
            if pool is not None:
                pool.close()

    app = FastAPI(title="siteweave", lifespan=lifespan)
    app.include_router(process.router)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        state: AppState = app.state.siteweave
        pool = state.worker_pool
        return HealthResponse(workers=pool.size if pool else 0)

    return app


app = create_app()
