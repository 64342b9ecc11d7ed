"""Export job store: persistence of export job lifecycle records.

Every operation runs in its own short transaction and touches a job row with
a single statement, so readers observe either the previous or the next
version of a job, never a mix.  Status changes are guarded in the WHERE
clause: ``compare_and_set`` is the atomic primitive used to claim, finish
and cancel jobs, and ``update`` refuses to move a job backwards.
"""

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import defer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from employee_api.models.export_job import ExportJob, ExportStatus

# Statuses a row may currently hold for a full overwrite to the key status
_UPDATE_PREDECESSORS: dict[ExportStatus, tuple[ExportStatus, ...]] = {
    ExportStatus.PENDING: (ExportStatus.PENDING,),
    ExportStatus.PROCESSING: (ExportStatus.PENDING, ExportStatus.PROCESSING),
    ExportStatus.COMPLETED: (ExportStatus.PROCESSING,),
    ExportStatus.FAILED: (ExportStatus.PENDING, ExportStatus.PROCESSING),
}

_MUTABLE_COLUMNS = (
    "owner_id",
    "export_type",
    "parameters",
    "fields",
    "status",
    "total_records",
    "result",
    "file_size",
    "error_message",
    "warning_message",
    "started_at",
    "completed_at",
)


class ExportJobStore:
    """SQLAlchemy-backed store of ExportJob rows keyed by reference ID.

    Returned jobs are detached snapshots; mutate them and pass them back to
    ``update`` to persist.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, job: ExportJob) -> ExportJob:
        """Insert a new job.

        Raises:
            sqlalchemy.exc.IntegrityError: If the reference ID already exists.
        """
        async with self._session_factory() as session:
            session.add(job)
            await session.commit()
            await session.refresh(job)
        return job

    async def update(self, job: ExportJob) -> bool:
        """Overwrite all mutable columns of a job.

        The write only happens if the stored status may legally move to
        ``job.status``; terminal rows are never overwritten.

        Returns:
            True if the row was written, False if it was missing or the
            status change would regress.
        """
        target = ExportStatus(job.status)
        values = {column: getattr(job, column) for column in _MUTABLE_COLUMNS}
        values["status"] = target.value
        async with self._session_factory() as session:
            result = await session.execute(
                update(ExportJob)
                .where(
                    ExportJob.reference_id == job.reference_id,
                    ExportJob.status.in_([s.value for s in _UPDATE_PREDECESSORS[target]]),
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            written = result.rowcount == 1
            await session.commit()
        return written

    async def compare_and_set(
        self,
        reference_id: str,
        expected: ExportStatus,
        new: ExportStatus,
        **values: Any,
    ) -> ExportJob | None:
        """Atomically move a job from ``expected`` to ``new`` status.

        Args:
            reference_id: Job to transition.
            expected: Status the job must currently hold.
            new: Status to write.
            **values: Additional columns to set in the same statement.

        Returns:
            The updated job, or None if the job does not exist or is not in
            ``expected`` status.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                update(ExportJob)
                .where(ExportJob.reference_id == reference_id, ExportJob.status == expected.value)
                .values(status=new.value, **values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return None
            await session.commit()
            return await session.get(ExportJob, reference_id, populate_existing=True)

    async def find_by_reference_id(self, reference_id: str) -> ExportJob | None:
        """Get a job by reference ID."""
        async with self._session_factory() as session:
            return await session.get(ExportJob, reference_id)

    async def find_by_owner(self, owner_id: str) -> list[ExportJob]:
        """List an owner's jobs, oldest first."""
        return await self._list(select(ExportJob).where(ExportJob.owner_id == owner_id))

    async def find_all(self) -> list[ExportJob]:
        """List all jobs, oldest first."""
        return await self._list(select(ExportJob))

    async def find_pending(self) -> list[ExportJob]:
        """List PENDING jobs in submission order."""
        return await self._list(select(ExportJob).where(ExportJob.status == ExportStatus.PENDING.value))

    async def _list(self, query: Any) -> list[ExportJob]:
        """Run a listing query without loading artifacts; ``result`` is left unloaded."""
        async with self._session_factory() as session:
            result = await session.execute(
                query.options(defer(ExportJob.result)).order_by(ExportJob.created_at, ExportJob.reference_id)
            )
            return list(result.scalars().all())
