"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from employee_api.core.background import ExportWorkerPool
from employee_api.core.config import Settings, get_settings
from employee_api.core.database import dispose_engine, get_session_factory, init_engine
from employee_api.core.logging import setup_logging
from employee_api.services.export_job_store import ExportJobStore
from employee_api.services.export_service import process_export, requeue_pending_exports


def build_worker_pool(store: ExportJobStore, settings: Settings) -> ExportWorkerPool:
    """Create the export worker pool wired to the job store and record store."""
    session_factory = get_session_factory()

    async def _handle(reference_id: str) -> None:
        await process_export(store, session_factory, reference_id, max_page_size=settings.export_max_page_size)

    return ExportWorkerPool(
        _handle,
        worker_count=settings.export_worker_count,
        queue_size=settings.export_queue_size,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: engine, export store and worker pool."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)

    store = ExportJobStore(get_session_factory())
    pool = build_worker_pool(store, settings)
    app.state.export_store = store
    app.state.export_pool = pool

    pool.start()
    await requeue_pending_exports(store, pool)

    yield

    await pool.stop()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Employee API",
        description="Employee records with asynchronous CSV export jobs",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Register exception handlers
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    # Register middleware and routers
    from employee_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
