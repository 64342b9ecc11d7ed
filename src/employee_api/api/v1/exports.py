"""Export API endpoints for asynchronous CSV export jobs."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from loguru import logger

from employee_api.core.background import ExportQueueFullError, JobDispatcher
from employee_api.core.config import Settings, get_settings
from employee_api.core.dependencies import get_export_dispatcher, get_export_store
from employee_api.lib.exporter import get_format
from employee_api.models.export_job import ExportJob, ExportStatus
from employee_api.schemas.common import ErrorResponse
from employee_api.schemas.export import (
    ExportCancelResponse,
    ExportJobSummary,
    ExportRequest,
    ExportStatusResponse,
    ExportSubmitResponse,
)
from employee_api.services.export_job_store import ExportJobStore
from employee_api.services.export_service import (
    ExportConflictError,
    cancel_export,
    get_export_job,
    list_export_jobs,
    submit_export,
)

exports_router = APIRouter(prefix="/exports", tags=["exports"])

# Characters left unescaped in the X-Export-Warning header; header values must be latin-1
_WARNING_HEADER_SAFE = " '.;:,()"

_STATUS_MESSAGES = {
    ExportStatus.PENDING: "Export is queued for processing",
    ExportStatus.PROCESSING: "Export is currently being processed",
    ExportStatus.COMPLETED: "Export completed successfully",
}


def _job_to_status(job: ExportJob) -> ExportStatusResponse:
    """Build the polling payload for a job."""
    job_status = ExportStatus(job.status)
    if job_status == ExportStatus.FAILED:
        message = f"Export failed: {job.error_message}"
    else:
        message = _STATUS_MESSAGES[job_status]

    response = ExportStatusResponse(reference_id=job.reference_id, status=job_status.value, message=message)
    if job_status != ExportStatus.PENDING:
        response.created_at = job.created_at
    if job_status == ExportStatus.COMPLETED:
        response.total_records = job.total_records
        response.file_size = job.file_size
        response.warning = job.warning_message
    return response


def _artifact_response(job: ExportJob) -> Response:
    """Return a completed job's artifact as a download."""
    export_format = get_format(job.export_type)
    headers = {
        "Content-Disposition": f'attachment; filename="export_{job.reference_id}.{export_format.extension}"',
        "X-Total-Records": str(job.total_records or 0),
        "X-File-Size": str(job.file_size or 0),
    }
    if job.created_at is not None:
        headers["X-Created-At"] = job.created_at.isoformat()
    if job.warning_message:
        headers["X-Export-Warning"] = quote(job.warning_message, safe=_WARNING_HEADER_SAFE)
    return Response(content=job.result or b"", media_type=export_format.media_type, headers=headers)


async def _get_job_or_404(store: ExportJobStore, reference_id: str) -> ExportJob:
    job = await get_export_job(store, reference_id)
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Export not found")
    return job


@exports_router.post(
    "",
    response_model=ExportSubmitResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={503: {"model": ErrorResponse}},
)
async def request_export(
    request: ExportRequest,
    store: Annotated[ExportJobStore, Depends(get_export_store)],
    dispatcher: Annotated[JobDispatcher, Depends(get_export_dispatcher)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ExportSubmitResponse:
    """Submit an export request; poll the returned reference ID for the result."""
    try:
        submission = await submit_export(
            store,
            dispatcher,
            request,
            min_estimate_seconds=settings.export_min_estimate_seconds,
            records_per_second=settings.export_records_per_second,
        )
    except ExportQueueFullError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e

    return ExportSubmitResponse(
        reference_id=submission.job.reference_id,
        status=ExportStatus.PENDING.value,
        message="Export request submitted successfully. Use reference ID to check status.",
        estimated_completion=submission.estimated_completion,
    )


@exports_router.get(
    "",
    response_model=list[ExportJobSummary],
)
async def list_exports(
    store: Annotated[ExportJobStore, Depends(get_export_store)],
    owner_id: str | None = Query(None, description="Only jobs submitted by this owner"),
) -> list[ExportJobSummary]:
    """List export jobs ordered by creation time."""
    jobs = await list_export_jobs(store, owner_id=owner_id)
    return [ExportJobSummary.model_validate(j) for j in jobs]


@exports_router.get(
    "/user/{owner_id}",
    response_model=list[ExportJobSummary],
)
async def list_owner_exports(
    owner_id: str,
    store: Annotated[ExportJobStore, Depends(get_export_store)],
) -> list[ExportJobSummary]:
    """List one owner's export jobs ordered by creation time."""
    jobs = await list_export_jobs(store, owner_id=owner_id)
    return [ExportJobSummary.model_validate(j) for j in jobs]


@exports_router.get(
    "/{reference_id}",
    response_model=ExportStatusResponse,
    responses={
        200: {"content": {"text/csv": {}}, "description": "Status payload, or the artifact once completed"},
        404: {"model": ErrorResponse},
    },
)
async def get_export(
    reference_id: str,
    store: Annotated[ExportJobStore, Depends(get_export_store)],
) -> ExportStatusResponse | Response:
    """Get export status, or download the artifact once the job has completed."""
    job = await _get_job_or_404(store, reference_id)
    if job.status == ExportStatus.COMPLETED and job.result is not None:
        return _artifact_response(job)
    return _job_to_status(job)


@exports_router.get(
    "/{reference_id}/status",
    response_model=ExportStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_export_status(
    reference_id: str,
    store: Annotated[ExportJobStore, Depends(get_export_store)],
) -> ExportStatusResponse:
    """Get export status without downloading the artifact."""
    job = await _get_job_or_404(store, reference_id)
    return _job_to_status(job)


@exports_router.delete(
    "/{reference_id}",
    response_model=ExportCancelResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def cancel_export_request(
    reference_id: str,
    store: Annotated[ExportJobStore, Depends(get_export_store)],
) -> ExportCancelResponse:
    """Cancel an export that has not started yet."""
    try:
        job = await cancel_export(store, reference_id)
    except ExportConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Export not found")

    logger.info(f"Export {reference_id} cancelled via API")
    return ExportCancelResponse(
        reference_id=job.reference_id,
        status=job.status,
        message="Export cancelled successfully",
    )
