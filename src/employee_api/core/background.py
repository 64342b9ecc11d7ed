"""Background export worker pool.

Submission and execution are decoupled by a bounded FIFO queue of job
reference IDs.  A fixed number of asyncio worker tasks drain the queue, so
the queue bound and the pool size are the only backpressure knobs.  The
JobDispatcher protocol keeps the service layer independent of this
in-process implementation.
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from loguru import logger

JobHandler = Callable[[str], Awaitable[Any]]


class ExportQueueFullError(RuntimeError):
    """Raised when a job cannot be enqueued because the queue is at capacity."""


class JobDispatcher(Protocol):
    """Protocol for handing a persisted job to background execution."""

    def submit(self, reference_id: str) -> None:
        """Enqueue a job for execution.

        Args:
            reference_id: Reference ID of a job already persisted as PENDING.

        Raises:
            ExportQueueFullError: If the job cannot be accepted right now.
        """
        ...


class ExportWorkerPool:
    """In-process worker pool fed by an asyncio queue.

    Jobs are started in submission order.  A handler failure is logged and
    isolated; the worker moves on to the next queued job.
    """

    def __init__(
        self,
        handler: JobHandler,
        *,
        worker_count: int = 2,
        queue_size: int = 1000,
    ) -> None:
        if worker_count < 1:
            msg = "worker_count must be at least 1"
            raise ValueError(msg)
        self._handler = handler
        self._worker_count = worker_count
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)
        self._workers: list[asyncio.Task[None]] = []

    @property
    def is_running(self) -> bool:
        return bool(self._workers)

    @property
    def queued(self) -> int:
        """Number of jobs waiting to be picked up."""
        return self._queue.qsize()

    def start(self) -> None:
        """Spawn the worker tasks.  Must be called from a running event loop."""
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._run_worker(n), name=f"export-worker-{n}") for n in range(self._worker_count)
        ]
        logger.info(f"Started {self._worker_count} export workers")

    def submit(self, reference_id: str) -> None:
        """Enqueue a job without blocking.

        Raises:
            ExportQueueFullError: If the queue is at capacity.
        """
        try:
            self._queue.put_nowait(reference_id)
        except asyncio.QueueFull as exc:
            msg = f"Export queue is full ({self._queue.maxsize} jobs waiting)"
            raise ExportQueueFullError(msg) from exc
        logger.debug(f"Queued export job {reference_id}")

    async def join(self) -> None:
        """Wait until every queued job has been handled."""
        await self._queue.join()

    async def stop(self) -> None:
        """Cancel the workers.

        Jobs still queued stay PENDING in the store and are re-enqueued on the
        next startup; a job being handled sees the cancellation in its handler.
        """
        for task in self._workers:
            task.cancel()
        for task in self._workers:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._workers = []
        logger.info("Stopped export workers")

    async def _run_worker(self, worker_number: int) -> None:
        while True:
            reference_id = await self._queue.get()
            try:
                await self._handler(reference_id)
            except Exception:
                logger.exception(f"Export worker {worker_number} failed handling job {reference_id}")
            finally:
                self._queue.task_done()
