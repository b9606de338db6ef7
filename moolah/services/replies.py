"""Deferred delivery of bot replies.

Replies appear after a short pause to keep the conversation natural. The
pause never affects correctness: the triggering user message is persisted
before its reply job is scheduled.
"""

from __future__ import annotations

import datetime as dt
import heapq
import itertools
from collections.abc import Awaitable, Callable
from typing import Protocol

from apscheduler.schedulers.asyncio import AsyncIOScheduler


ReplyJob = Callable[[], Awaitable[None]]


class ReplyQueue(Protocol):
    """Anything able to run a reply job after ``delay`` seconds."""

    def schedule(self, delay: float, job: ReplyJob) -> None: ...


class ManualReplyQueue:
    """Reply queue driven by a logical clock instead of wall time."""

    def __init__(self) -> None:
        self._now = 0.0
        self._counter = itertools.count()
        self._jobs: list[tuple[float, int, ReplyJob]] = []

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return len(self._jobs)

    def schedule(self, delay: float, job: ReplyJob) -> None:
        heapq.heappush(self._jobs, (self._now + max(delay, 0.0), next(self._counter), job))

    async def advance(self, seconds: float) -> int:
        """Move the clock forward and run every job that became due."""

        deadline = self._now + seconds
        executed = 0
        while self._jobs and self._jobs[0][0] <= deadline:
            due, _, job = heapq.heappop(self._jobs)
            self._now = max(self._now, due)
            await job()
            executed += 1
        self._now = deadline
        return executed

    async def run_pending(self) -> int:
        """Run all queued jobs, including ones scheduled while running."""

        executed = 0
        while self._jobs:
            due, _, job = heapq.heappop(self._jobs)
            self._now = max(self._now, due)
            await job()
            executed += 1
        return executed


class SchedulerReplyQueue:
    """Reply queue backed by an APScheduler ``date`` trigger."""

    def __init__(self, scheduler: AsyncIOScheduler) -> None:
        self._scheduler = scheduler

    def schedule(self, delay: float, job: ReplyJob) -> None:
        run_date = dt.datetime.now() + dt.timedelta(seconds=max(delay, 0.0))
        self._scheduler.add_job(job, "date", run_date=run_date, misfire_grace_time=None)


__all__ = [
    "ManualReplyQueue",
    "ReplyJob",
    "ReplyQueue",
    "SchedulerReplyQueue",
]
