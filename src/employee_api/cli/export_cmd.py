"""Export CLI commands for running and inspecting export jobs."""

import asyncio
from pathlib import Path

import typer

export_app = typer.Typer()


class _InlineDispatcher:
    """Collects submitted reference IDs so the CLI can process them in-process."""

    def __init__(self) -> None:
        self.submitted: list[str] = []

    def submit(self, reference_id: str) -> None:
        self.submitted.append(reference_id)


@export_app.command("run")
def export_run(
    department: str | None = typer.Option(None, "--department", help="Filter by department"),
    position: str | None = typer.Option(None, "--position", help="Filter by position"),
    email: str | None = typer.Option(None, "--email", help="Filter by email"),
    name: str | None = typer.Option(None, "--name", help="Substring match on first or last name"),
    min_salary: float | None = typer.Option(None, "--min-salary", help="Salary strictly greater than"),
    max_salary: float | None = typer.Option(None, "--max-salary", help="Salary at most"),
    fields: str | None = typer.Option(None, "--fields", help="Comma-separated fields in output order"),
    sort_by: str = typer.Option("id", "--sort-by", help="Field to sort by"),
    sort_dir: str = typer.Option("asc", "--sort-dir", help="asc or desc"),
    page: int = typer.Option(1, "--page", help="Page number when no filter is given"),
    size: int = typer.Option(1000, "--size", help="Page size when no filter is given"),
    owner: str | None = typer.Option(None, "--owner", help="Owner ID recorded on the job"),
    output: Path | None = typer.Option(None, "--output", help="Output directory"),
) -> None:
    """Create an export job and process it immediately."""
    raw: dict = {
        "department": department,
        "position": position,
        "email": email,
        "name": name,
        "min_salary": min_salary,
        "max_salary": max_salary,
        "sort_by": sort_by,
        "sort_dir": sort_dir,
        "page": page,
        "size": size,
        "owner_id": owner,
    }
    if fields:
        raw["fields"] = fields
    asyncio.run(_export_run(raw, output or Path(".")))


async def _export_run(raw: dict, output_dir: Path) -> None:
    """Async implementation of export run."""
    from employee_api.core.config import get_settings
    from employee_api.core.database import dispose_engine, get_session_factory, init_engine
    from employee_api.schemas.export import ExportRequest
    from employee_api.services.export_job_store import ExportJobStore
    from employee_api.services.export_service import process_export, submit_export

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        request = ExportRequest.model_validate(raw)
        factory = get_session_factory()
        store = ExportJobStore(factory)
        dispatcher = _InlineDispatcher()

        submission = await submit_export(store, dispatcher, request)
        reference_id = submission.job.reference_id
        typer.echo(f"Export job created: {reference_id}")
        typer.echo("Processing...")

        job = await process_export(store, factory, reference_id, max_page_size=settings.export_max_page_size)
        if job is None:
            typer.echo("Export job disappeared before processing", err=True)
            raise typer.Exit(code=1)

        typer.echo(f"\nExport {job.status.lower()}:")
        typer.echo(f"  Records:    {job.total_records or 0}")
        typer.echo(f"  File size:  {job.file_size or 0} bytes")
        if job.warning_message:
            typer.echo(f"  Warning:    {job.warning_message}")
        if job.error_message:
            typer.echo(f"  Error:      {job.error_message}")
            raise typer.Exit(code=1)

        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"export_{reference_id}.{job.export_type}"
        output_path.write_bytes(job.result or b"")
        typer.echo(f"  File path:  {output_path}")
    finally:
        await dispose_engine()


@export_app.command("status")
def export_status(
    reference_id: str = typer.Argument(..., help="Export reference ID"),
) -> None:
    """Show the status of an export job."""
    asyncio.run(_export_status(reference_id))


async def _export_status(reference_id: str) -> None:
    from employee_api.core.config import get_settings
    from employee_api.core.database import dispose_engine, get_session_factory, init_engine
    from employee_api.services.export_job_store import ExportJobStore
    from employee_api.services.export_service import get_export_job

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)
    try:
        job = await get_export_job(ExportJobStore(get_session_factory()), reference_id)
        if job is None:
            typer.echo(f"Export not found: {reference_id}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"{job.reference_id}: {job.status}")
        typer.echo(f"  Created:    {job.created_at}")
        typer.echo(f"  Started:    {job.started_at or '-'}")
        typer.echo(f"  Completed:  {job.completed_at or '-'}")
        typer.echo(f"  Records:    {job.total_records if job.total_records is not None else '-'}")
        if job.error_message:
            typer.echo(f"  Error:      {job.error_message}")
    finally:
        await dispose_engine()


@export_app.command("cancel")
def export_cancel(
    reference_id: str = typer.Argument(..., help="Export reference ID"),
) -> None:
    """Cancel an export job that is still pending."""
    asyncio.run(_export_cancel(reference_id))


async def _export_cancel(reference_id: str) -> None:
    from employee_api.core.config import get_settings
    from employee_api.core.database import dispose_engine, get_session_factory, init_engine
    from employee_api.services.export_job_store import ExportJobStore
    from employee_api.services.export_service import ExportConflictError, cancel_export

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)
    try:
        try:
            job = await cancel_export(ExportJobStore(get_session_factory()), reference_id)
        except ExportConflictError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(code=1) from e
        if job is None:
            typer.echo(f"Export not found: {reference_id}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Export {reference_id} cancelled")
    finally:
        await dispose_engine()


@export_app.command("list")
def export_list(
    owner: str | None = typer.Option(None, "--owner", help="Only jobs submitted by this owner"),
) -> None:
    """List export jobs in creation order."""
    asyncio.run(_export_list(owner))


async def _export_list(owner: str | None) -> None:
    from employee_api.core.config import get_settings
    from employee_api.core.database import dispose_engine, get_session_factory, init_engine
    from employee_api.services.export_job_store import ExportJobStore
    from employee_api.services.export_service import list_export_jobs

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)
    try:
        jobs = await list_export_jobs(ExportJobStore(get_session_factory()), owner_id=owner)
        if not jobs:
            typer.echo("No export jobs found")
            return
        for job in jobs:
            records = job.total_records if job.total_records is not None else "-"
            typer.echo(f"{job.reference_id}  {job.status:<10}  {job.created_at}  records={records}")
    finally:
        await dispose_engine()
