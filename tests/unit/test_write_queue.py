"""Unit tests for the sequential per-key write queue."""

import asyncio

import pytest

from app.repositories.write_queue import KeyWriteQueue


def _job(log: list[str], label: str, delay: float = 0.0):
    async def run() -> None:
        await asyncio.sleep(delay)
        log.append(label)

    return run


class TestOrdering:
    """Jobs run one at a time in submission order."""

    async def test_slow_job_is_not_overtaken(self) -> None:
        queue = KeyWriteQueue("history")
        log: list[str] = []
        queue.submit(_job(log, "first", delay=0.05))
        queue.submit(_job(log, "second"))
        queue.submit(_job(log, "third", delay=0.01))

        await queue.join()
        assert log == ["first", "second", "third"]
        await queue.close()

    async def test_jobs_never_overlap(self) -> None:
        queue = KeyWriteQueue("history")
        running = 0
        peak = 0

        async def job() -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0)
            running -= 1

        for _ in range(5):
            queue.submit(job)
        await queue.join()
        assert peak == 1
        await queue.close()


class TestFailures:
    """A failing job is reported and later jobs still run."""

    async def test_error_handler_called_and_queue_continues(self) -> None:
        errors: list[tuple[str, Exception]] = []

        async def on_error(key: str, exc: Exception) -> None:
            errors.append((key, exc))

        async def boom() -> None:
            raise RuntimeError("disk full")

        queue = KeyWriteQueue("savedChats", on_error=on_error)
        log: list[str] = []
        queue.submit(boom)
        queue.submit(_job(log, "after"))
        await queue.join()

        assert log == ["after"]
        assert len(errors) == 1
        assert errors[0][0] == "savedChats"
        assert isinstance(errors[0][1], RuntimeError)
        await queue.close()

    async def test_failing_error_handler_keeps_worker_alive(self) -> None:
        async def on_error(key: str, exc: Exception) -> None:
            raise RuntimeError("notifier down")

        async def boom() -> None:
            raise ConnectionError("write refused")

        queue = KeyWriteQueue("history", on_error=on_error)
        log: list[str] = []
        queue.submit(boom)
        queue.submit(_job(log, "after"))
        await asyncio.wait_for(queue.join(), timeout=1)

        assert log == ["after"]
        assert queue._worker is not None
        assert not queue._worker.done()
        await queue.close()


class TestLifecycle:
    async def test_join_without_jobs_returns(self) -> None:
        queue = KeyWriteQueue("history")
        await asyncio.wait_for(queue.join(), timeout=1)

    async def test_close_drains_pending_jobs(self) -> None:
        queue = KeyWriteQueue("history")
        log: list[str] = []
        queue.submit(_job(log, "pending", delay=0.01))
        await queue.close()
        assert log == ["pending"]
        assert queue.pending == 0

    async def test_pending_counts_running_job(self) -> None:
        queue = KeyWriteQueue("history")
        started = asyncio.Event()
        release = asyncio.Event()

        async def blocked() -> None:
            started.set()
            await release.wait()

        queue.submit(blocked)
        queue.submit(_job([], "next"))
        await started.wait()
        assert queue.pending == 2

        release.set()
        await queue.join()
        assert queue.pending == 0
        await queue.close()

    def test_submit_requires_running_loop(self) -> None:
        queue = KeyWriteQueue("history")
        with pytest.raises(RuntimeError):
            queue.submit(_job([], "x"))
