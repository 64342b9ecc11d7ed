"""Export service: submission, background processing and cancellation of export jobs."""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from employee_api.core.background import ExportQueueFullError, JobDispatcher
from employee_api.lib.exporter import (
    EncodedExport,
    SortOutcome,
    encode_records,
    generate_reference_id,
    parse_field_list,
    sort_records,
)
from employee_api.models.base import utcnow
from employee_api.models.employee import Employee
from employee_api.models.export_job import ExportJob, ExportStatus
from employee_api.schemas.export import ExportParameters, ExportRequest
from employee_api.services import employee_service
from employee_api.services.export_job_store import ExportJobStore

DEFAULT_MAX_PAGE_SIZE = 10000
CANCELLED_MESSAGE = "Export cancelled by user"
INTERRUPTED_MESSAGE = "Export interrupted by shutdown"
QUEUE_FULL_MESSAGE = "Export queue is full; resubmit later"
_REFERENCE_ID_ATTEMPTS = 3


class ExportConflictError(ValueError):
    """Raised when a job's current status does not allow the requested action."""

    def __init__(self, reference_id: str, status: str) -> None:
        self.reference_id = reference_id
        self.status = status
        super().__init__(f"Cannot cancel export in {status} status")


@dataclass
class ExportSubmission:
    """A freshly queued job and its estimated completion time."""

    job: ExportJob
    estimated_completion: datetime


def estimate_completion(
    declared_size: int,
    *,
    now: datetime | None = None,
    min_seconds: int = 5,
    records_per_second: int = 1000,
) -> datetime:
    """Rough completion estimate: ``now + max(min_seconds, size / rate)`` seconds."""
    seconds = max(min_seconds, declared_size // records_per_second)
    return (now or utcnow()) + timedelta(seconds=seconds)


async def submit_export(
    store: ExportJobStore,
    dispatcher: JobDispatcher,
    request: ExportRequest,
    *,
    min_estimate_seconds: int = 5,
    records_per_second: int = 1000,
) -> ExportSubmission:
    """Persist a PENDING export job and hand it to the worker queue.

    Args:
        store: Export job store.
        dispatcher: Queue feeding the background workers.
        request: Validated export request.
        min_estimate_seconds: Floor of the completion estimate.
        records_per_second: Throughput assumed by the estimate.

    Returns:
        ExportSubmission with the created job.

    Raises:
        ExportQueueFullError: If the queue cannot accept the job.  The job
            is marked FAILED before the error propagates.
    """
    parameters = request.to_parameters()
    job = await _create_job(store, parameters, request.owner_id)

    try:
        dispatcher.submit(job.reference_id)
    except ExportQueueFullError:
        await store.compare_and_set(
            job.reference_id,
            ExportStatus.PENDING,
            ExportStatus.FAILED,
            error_message=QUEUE_FULL_MESSAGE,
            completed_at=utcnow(),
        )
        logger.warning(f"Export job {job.reference_id} rejected: queue full")
        raise

    estimated = estimate_completion(
        parameters.size,
        min_seconds=min_estimate_seconds,
        records_per_second=records_per_second,
    )
    return ExportSubmission(job=job, estimated_completion=estimated)


async def _create_job(store: ExportJobStore, parameters: ExportParameters, owner_id: str | None) -> ExportJob:
    """Insert a PENDING job under a fresh reference ID, retrying on collision."""
    for attempt in range(1, _REFERENCE_ID_ATTEMPTS + 1):
        job = ExportJob(
            reference_id=generate_reference_id(),
            owner_id=owner_id,
            export_type=parameters.export_type,
            parameters=parameters.model_dump(mode="json"),
            fields=parameters.fields,
            status=ExportStatus.PENDING.value,
            created_at=utcnow(),
        )
        try:
            job = await store.create(job)
        except IntegrityError:
            logger.warning(f"Reference ID collision on attempt {attempt}, regenerating")
            continue
        logger.info(f"Created export job {job.reference_id} (type={job.export_type}, owner={owner_id})")
        return job

    msg = "Could not allocate a unique export reference ID"
    raise RuntimeError(msg)


async def fetch_export_records(
    session: AsyncSession,
    parameters: ExportParameters,
    *,
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> list[Employee]:
    """Select the candidate employees for an export.

    Filters are not combined.  The first matching rule wins, in this order:
    email, name, department + position, department, position, salary range,
    and finally one page of the whole collection when no filter is given.
    A request carrying e.g. both ``department`` and ``min_salary`` is
    therefore filtered by department only.

    Args:
        session: Database session.
        parameters: Export parameters.
        max_page_size: Cap applied to ``size`` for unfiltered exports.

    Returns:
        Matching employees (possibly empty).
    """
    p = parameters
    if p.email is not None:
        employee = await employee_service.get_employee_by_email(session, p.email)
        return [employee] if employee else []
    if p.name is not None:
        return await employee_service.search_employees_by_name(session, p.name)
    if p.department is not None and p.position is not None:
        return await employee_service.list_employees_by_department_and_position(session, p.department, p.position)
    if p.department is not None:
        return await employee_service.list_employees_by_department(session, p.department)
    if p.position is not None:
        return await employee_service.list_employees_by_position(session, p.position)
    if p.min_salary is not None or p.max_salary is not None:
        # Only a lower bound selects candidates; an upper bound alone matches nothing.
        if p.min_salary is None:
            return []
        employees = await employee_service.list_employees_with_salary_above(session, p.min_salary)
        if p.max_salary is not None:
            employees = [e for e in employees if e.salary is not None and e.salary <= p.max_salary]
        return employees

    page_size = min(p.size, max_page_size)
    return await employee_service.list_employees_page(session, page=p.page, page_size=page_size)


def employee_to_record(employee: Employee) -> dict[str, Any]:
    """Convert an Employee ORM object to an export record dict."""
    return {
        "id": employee.id,
        "first_name": employee.first_name,
        "last_name": employee.last_name,
        "email": employee.email,
        "phone_number": employee.phone_number,
        "date_of_birth": employee.date_of_birth,
        "hire_date": employee.hire_date,
        "salary": employee.salary,
        "position": employee.position,
        "department": employee.department,
        "created_at": employee.created_at,
        "updated_at": employee.updated_at,
    }


def _sort_and_encode(records: list[dict[str, Any]], parameters: ExportParameters) -> tuple[SortOutcome, EncodedExport]:
    outcome = sort_records(records, parameters.sort_by, parameters.sort_dir)
    encoded = encode_records(outcome.records, parameters.export_type, parse_field_list(parameters.fields))
    return outcome, encoded


async def process_export(
    store: ExportJobStore,
    session_factory: async_sessionmaker[AsyncSession],
    reference_id: str,
    *,
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> ExportJob | None:
    """Run one export job: PENDING -> PROCESSING -> COMPLETED | FAILED.

    The job is claimed with an atomic status check, so a duplicate dequeue
    or a job cancelled while queued is skipped.  Any error raised while
    parsing parameters, filtering, sorting or encoding fails the job; it is
    recorded on the job and not re-raised.  Cancellation of the running
    task (worker shutdown) fails the job before the cancellation propagates.

    Args:
        store: Export job store.
        session_factory: Factory for record store sessions.
        reference_id: Job to process.
        max_page_size: Cap applied to ``size`` for unfiltered exports.

    Returns:
        The job in its final observed state, or None if it does not exist.
    """
    with logger.contextualize(reference_id=reference_id):
        return await _run_export(store, session_factory, reference_id, max_page_size=max_page_size)


async def _run_export(
    store: ExportJobStore,
    session_factory: async_sessionmaker[AsyncSession],
    reference_id: str,
    *,
    max_page_size: int,
) -> ExportJob | None:
    job = await store.compare_and_set(
        reference_id,
        ExportStatus.PENDING,
        ExportStatus.PROCESSING,
        started_at=utcnow(),
    )
    if job is None:
        existing = await store.find_by_reference_id(reference_id)
        if existing is None:
            logger.warning(f"Export job {reference_id} not found; skipping")
        else:
            logger.info(f"Export job {reference_id} is {existing.status}; skipping")
        return existing

    logger.info(f"Export job {reference_id} started")

    try:
        parameters = ExportParameters.model_validate(job.parameters)
        async with session_factory() as session:
            employees = await fetch_export_records(session, parameters, max_page_size=max_page_size)
            records = [employee_to_record(e) for e in employees]

        job.total_records = len(records)
        await store.update(job)

        outcome, encoded = await asyncio.to_thread(_sort_and_encode, records, parameters)
    except asyncio.CancelledError:
        logger.warning(f"Export job {reference_id} interrupted")
        await store.compare_and_set(
            reference_id,
            ExportStatus.PROCESSING,
            ExportStatus.FAILED,
            error_message=INTERRUPTED_MESSAGE,
            completed_at=utcnow(),
        )
        raise
    except Exception as exc:
        logger.exception(f"Export job {reference_id} failed")
        failed = await store.compare_and_set(
            reference_id,
            ExportStatus.PROCESSING,
            ExportStatus.FAILED,
            error_message=str(exc) or type(exc).__name__,
            completed_at=utcnow(),
        )
        return failed or await store.find_by_reference_id(reference_id)

    completed = await store.compare_and_set(
        reference_id,
        ExportStatus.PROCESSING,
        ExportStatus.COMPLETED,
        total_records=encoded.record_count,
        result=encoded.payload,
        file_size=encoded.size_bytes,
        warning_message=outcome.warning,
        completed_at=utcnow(),
    )
    logger.info(f"Export job {reference_id} completed: {encoded.record_count} records, {encoded.size_bytes} bytes")
    return completed or await store.find_by_reference_id(reference_id)


async def cancel_export(store: ExportJobStore, reference_id: str) -> ExportJob | None:
    """Cancel a job that is still PENDING by failing it with a cancellation reason.

    Returns:
        The cancelled job, or None if no such job exists.

    Raises:
        ExportConflictError: If the job has already left PENDING, including
            when a worker claims it concurrently.
    """
    job = await store.find_by_reference_id(reference_id)
    if job is None:
        return None
    if job.status != ExportStatus.PENDING:
        raise ExportConflictError(reference_id, job.status)

    cancelled = await store.compare_and_set(
        reference_id,
        ExportStatus.PENDING,
        ExportStatus.FAILED,
        error_message=CANCELLED_MESSAGE,
        completed_at=utcnow(),
    )
    if cancelled is None:
        current = await store.find_by_reference_id(reference_id)
        raise ExportConflictError(reference_id, current.status if current else "unknown")

    logger.info(f"Export job {reference_id} cancelled")
    return cancelled


async def get_export_job(store: ExportJobStore, reference_id: str) -> ExportJob | None:
    """Get an export job by reference ID."""
    return await store.find_by_reference_id(reference_id)


async def list_export_jobs(store: ExportJobStore, *, owner_id: str | None = None) -> list[ExportJob]:
    """List export jobs ordered by creation time, optionally for one owner."""
    if owner_id is not None:
        return await store.find_by_owner(owner_id)
    return await store.find_all()


async def requeue_pending_exports(store: ExportJobStore, dispatcher: JobDispatcher) -> int:
    """Re-enqueue jobs left PENDING by a previous process, oldest first.

    Returns:
        Number of jobs enqueued.
    """
    count = 0
    for job in await store.find_pending():
        try:
            dispatcher.submit(job.reference_id)
        except ExportQueueFullError:
            logger.warning(f"Queue full while re-enqueuing pending exports; {count} enqueued")
            break
        count += 1
    if count:
        logger.info(f"Re-enqueued {count} pending export jobs")
    return count
