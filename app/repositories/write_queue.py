"""Sequential per-key write queue."""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()

WriteJob = Callable[[], Awaitable[None]]
ErrorHandler = Callable[[str, Exception], Awaitable[None]]


class KeyWriteQueue:
    """FIFO of write jobs for one storage key, consumed by a single worker.

    Jobs run strictly one after another in submission order, so a later
    write can never reach storage before an earlier one. The worker task is
    started lazily on the first submit and must be created inside a running
    event loop.
    """

    def __init__(self, key: str, on_error: ErrorHandler | None = None) -> None:
        self.key = key
        self._on_error = on_error
        self._queue: asyncio.Queue[WriteJob] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self._running = False

    @property
    def pending(self) -> int:
        """Jobs submitted but not yet finished, including the running one."""
        return self._queue.qsize() + int(self._running)

    def submit(self, job: WriteJob) -> None:
        """Schedule ``job`` after every job already submitted."""
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(
                self._run(), name=f"write-queue:{self.key}"
            )
        self._queue.put_nowait(job)

    async def _run(self) -> None:
        while True:
            job = await self._queue.get()
            self._running = True
            try:
                await job()
            except Exception as exc:
                logger.exception("Write job failed", key=self.key)
                await self._report(exc)
            finally:
                self._running = False
                self._queue.task_done()

    async def _report(self, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            await self._on_error(self.key, exc)
        except Exception:
            logger.exception("Write error handler failed", key=self.key)

    async def join(self) -> None:
        """Wait until every submitted job has been attempted."""
        await self._queue.join()

    async def close(self) -> None:
        """Drain outstanding jobs, then stop the worker."""
        await self.join()
        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None
