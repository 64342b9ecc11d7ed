"""FastAPI dependency injection for the export job store and worker queue.

Both collaborators are created in the application lifespan and attached to
``app.state``; routes receive them through these providers so tests can
override them with ``app.dependency_overrides``.
"""

from fastapi import HTTPException, Request, status

from employee_api.core.background import JobDispatcher
from employee_api.services.export_job_store import ExportJobStore


def get_export_store(request: Request) -> ExportJobStore:
    """Return the application's export job store."""
    store = getattr(request.app.state, "export_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Export store not initialized",
        )
    return store


def get_export_dispatcher(request: Request) -> JobDispatcher:
    """Return the queue feeding the export workers."""
    dispatcher = getattr(request.app.state, "export_pool", None)
    if dispatcher is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Export workers not running",
        )
    return dispatcher
