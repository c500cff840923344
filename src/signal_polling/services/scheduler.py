"""
Scheduling primitives for the signal poller

The poller never sleeps or creates tasks itself; it asks a Scheduler for
recurring and one-shot jobs so timing can be replaced in tests.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from ..utils.logging_config import get_logger

logger = get_logger("signal_polling.scheduler")

JobCallback = Callable[[], Awaitable[None]]


class ScheduledJob:
    """Handle to a scheduled job"""

    def __init__(self, name: str):
        self.name = name
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    async def wait(self) -> None:
        """Wait until the job has finished running"""
        return None


class Scheduler:
    """Timer service interface"""

    def time(self) -> float:
        """Current wall-clock time in seconds since the epoch"""
        raise NotImplementedError

    def call_every(
        self,
        interval: float,
        callback: JobCallback,
        immediate: bool = True,
        name: str = "recurring"
    ) -> ScheduledJob:
        """Run callback every interval seconds, first run now if immediate"""
        raise NotImplementedError

    def call_later(self, delay: float, callback: JobCallback, name: str = "one-shot") -> ScheduledJob:
        """Run callback once after delay seconds"""
        raise NotImplementedError


class AsyncioJob(ScheduledJob):
    """Scheduled job backed by an asyncio task"""

    def __init__(self, name: str):
        super().__init__(name)
        self.task: Optional[asyncio.Task] = None

    def cancel(self) -> None:
        super().cancel()
        if self.task and not self.task.done():
            self.task.cancel()

    async def wait(self) -> None:
        """Wait until the underlying task has finished"""
        if self.task is None or self.task is asyncio.current_task():
            return
        try:
            await self.task
        except asyncio.CancelledError:
            pass


class AsyncioScheduler(Scheduler):
    """Scheduler running jobs as tasks on the current event loop"""

    def time(self) -> float:
        return time.time()

    def call_every(
        self,
        interval: float,
        callback: JobCallback,
        immediate: bool = True,
        name: str = "recurring"
    ) -> AsyncioJob:
        job = AsyncioJob(name)
        job.task = asyncio.get_running_loop().create_task(
            self._run_every(job, interval, callback, immediate), name=name
        )
        return job

    def call_later(self, delay: float, callback: JobCallback, name: str = "one-shot") -> AsyncioJob:
        job = AsyncioJob(name)
        job.task = asyncio.get_running_loop().create_task(
            self._run_later(job, delay, callback), name=name
        )
        return job

    async def _run_every(self, job: AsyncioJob, interval: float, callback: JobCallback, immediate: bool):
        loop = asyncio.get_running_loop()
        next_run = loop.time() if immediate else loop.time() + interval
        try:
            while not job.cancelled:
                await asyncio.sleep(max(0.0, next_run - loop.time()))
                if job.cancelled:
                    break
                # Awaited, so a slow run delays the next tick instead of overlapping it
                await self._invoke(job, callback)
                # Missed deadlines are dropped rather than replayed
                next_run = max(next_run + interval, loop.time())
        except asyncio.CancelledError:
            logger.debug("Recurring job cancelled", job=job.name)
            raise

    async def _run_later(self, job: AsyncioJob, delay: float, callback: JobCallback):
        try:
            await asyncio.sleep(delay)
            if not job.cancelled:
                await self._invoke(job, callback)
        except asyncio.CancelledError:
            logger.debug("One-shot job cancelled", job=job.name)
            raise

    async def _invoke(self, job: ScheduledJob, callback: JobCallback):
        try:
            await callback()
        except asyncio.CancelledError:
            raise
        except Exception as error:
            logger.exception("Scheduled job failed", job=job.name, error=str(error))
