"""ExportJob model: tracks one asynchronous export request through its lifecycle."""

import enum
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, Index, Integer, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from employee_api.models.base import Base, utcnow


class ExportStatus(enum.StrEnum):
    """Lifecycle status of an export job.

    PENDING -> PROCESSING -> COMPLETED | FAILED.  Terminal states are absorbing.
    """

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (ExportStatus.COMPLETED, ExportStatus.FAILED)

    @property
    def rank(self) -> int:
        """Position in the lifecycle partial order (terminal states share a rank)."""
        return _STATUS_RANK[self]


_STATUS_RANK = {
    ExportStatus.PENDING: 0,
    ExportStatus.PROCESSING: 1,
    ExportStatus.COMPLETED: 2,
    ExportStatus.FAILED: 2,
}


class ExportJob(Base):
    """Tracks an export request.

    ``parameters`` is the JSON snapshot of the submitted ExportParameters so
    the worker can rebuild the request independently of the HTTP call that
    created it.  ``result`` holds the encoded artifact once COMPLETED;
    ``error_message`` is set only when FAILED.  ``warning_message`` carries
    non-fatal diagnostics such as an unrecognised sort field.
    """

    __tablename__ = "export_jobs"

    reference_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    owner_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    export_type: Mapped[str] = mapped_column(String(20), nullable=False, default="csv")
    parameters: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    fields: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ExportStatus.PENDING.value)

    total_records: Mapped[int | None] = mapped_column(Integer, nullable=True)
    result: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    warning_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_export_jobs_owner_id", "owner_id"),
        Index("ix_export_jobs_status", "status"),
        Index("ix_export_jobs_created_at", "created_at"),
    )
