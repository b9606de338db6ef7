import asyncio
import datetime as dt

from moolah.services.replies import ManualReplyQueue, SchedulerReplyQueue


def test_jobs_run_in_due_order() -> None:
    async def scenario() -> None:
        queue = ManualReplyQueue()
        ran: list[str] = []

        async def slow() -> None:
            ran.append("slow")

        async def fast() -> None:
            ran.append("fast")

        queue.schedule(1.0, slow)
        queue.schedule(0.5, fast)

        assert await queue.advance(0.5) == 1
        assert ran == ["fast"]
        assert queue.pending == 1

        assert await queue.advance(1.0) == 1
        assert ran == ["fast", "slow"]
        assert queue.now == 1.5

    asyncio.run(scenario())


def test_equal_delays_keep_scheduling_order() -> None:
    async def scenario() -> None:
        queue = ManualReplyQueue()
        ran: list[int] = []

        for index in range(3):
            async def job(index: int = index) -> None:
                ran.append(index)

            queue.schedule(1.0, job)

        await queue.run_pending()
        assert ran == [0, 1, 2]

    asyncio.run(scenario())


def test_run_pending_includes_jobs_scheduled_while_running() -> None:
    async def scenario() -> None:
        queue = ManualReplyQueue()
        ran: list[str] = []

        async def follow_up() -> None:
            ran.append("follow-up")

        async def first() -> None:
            ran.append("first")
            queue.schedule(0.5, follow_up)

        queue.schedule(1.0, first)

        assert await queue.run_pending() == 2
        assert ran == ["first", "follow-up"]
        assert queue.pending == 0

    asyncio.run(scenario())


class RecordingScheduler:
    def __init__(self) -> None:
        self.calls: list[tuple[object, str, dict]] = []

    def add_job(self, func, trigger, **kwargs) -> None:
        self.calls.append((func, trigger, kwargs))


def test_scheduler_queue_adds_date_job() -> None:
    scheduler = RecordingScheduler()
    queue = SchedulerReplyQueue(scheduler)

    async def job() -> None:
        return None

    before = dt.datetime.now()
    queue.schedule(2.0, job)

    func, trigger, kwargs = scheduler.calls[0]
    assert func is job
    assert trigger == "date"
    assert kwargs["run_date"] >= before + dt.timedelta(seconds=2)
