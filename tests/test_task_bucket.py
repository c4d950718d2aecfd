import asyncio
import contextlib
from unittest.mock import MagicMock

import pytest

from arealink.core import tasks
from arealink.core.tasks import TaskBucket


@pytest.fixture
def bucket_fixture() -> TaskBucket:
    return TaskBucket("hub", cancellation_timeout=0.2)


@pytest.fixture
def mock_logger(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    logger = MagicMock()
    monkeypatch.setattr(tasks, "LOGGER", logger)
    return logger


async def refresh_timer(ticks: list[int]):
    while True:
        ticks.append(len(ticks))
        await asyncio.sleep(0.01)


async def receive_loop_with_bad_frame(started: asyncio.Event):
    started.set()
    await asyncio.sleep(0)
    raise ValueError("undecodable frame")


async def loop_ignoring_cancel(done: asyncio.Event):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + 0.5
    while loop.time() < deadline:
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.sleep(0.01)
    done.set()


async def test_close_stops_refresh_timer(bucket_fixture: TaskBucket):
    ticks: list[int] = []
    timer = bucket_fixture.spawn(refresh_timer(ticks), name="hub.refresh")
    await asyncio.sleep(0.03)
    assert len(bucket_fixture) == 1

    stragglers = await bucket_fixture.cancel_all()
    ticks_at_close = len(ticks)
    await asyncio.sleep(0.03)

    assert stragglers == []
    assert timer.cancelled()
    assert len(ticks) == ticks_at_close, "timer kept ticking after cancel_all"
    assert len(bucket_fixture) == 0


async def test_crashed_receive_loop_is_logged_with_its_name(bucket_fixture: TaskBucket, mock_logger: MagicMock):
    started = asyncio.Event()
    recv = bucket_fixture.spawn(receive_loop_with_bad_frame(started), name="hub.recv")

    await started.wait()
    with contextlib.suppress(ValueError):
        await recv
    await asyncio.sleep(0)

    mock_logger.error.assert_called_once()
    call = mock_logger.error.call_args
    assert "crashed" in call.args[0]
    assert "hub.recv" in call.args
    assert isinstance(call.kwargs["exc_info"], ValueError)
    assert len(bucket_fixture) == 0


async def test_cancelled_task_is_not_reported_as_crash(bucket_fixture: TaskBucket, mock_logger: MagicMock):
    bucket_fixture.spawn(refresh_timer([]), name="hub.refresh")
    await asyncio.sleep(0)

    await bucket_fixture.cancel_all()

    mock_logger.error.assert_not_called()


async def test_task_ignoring_cancel_is_returned_and_warned(bucket_fixture: TaskBucket, mock_logger: MagicMock):
    done = asyncio.Event()
    holdout = bucket_fixture.spawn(loop_ignoring_cancel(done), name="hub.holdout")
    await asyncio.sleep(0)

    stragglers = await bucket_fixture.cancel_all()

    assert stragglers == [holdout]
    warnings = [call.args for call in mock_logger.warning.call_args_list]
    assert any("hub.holdout" in args for args in warnings), warnings

    await done.wait()
    await asyncio.sleep(0)
    assert holdout.done()
    assert not holdout.cancelled()


async def test_cancel_all_skips_the_calling_task(bucket_fixture: TaskBucket):
    async def closes_own_bucket() -> list[asyncio.Task]:
        return await bucket_fixture.cancel_all()

    closer = bucket_fixture.spawn(closes_own_bucket(), name="hub.closer")

    assert await closer == []
    assert not closer.cancelled()


async def test_cancel_all_with_no_tasks_is_a_noop(bucket_fixture: TaskBucket, mock_logger: MagicMock):
    assert await bucket_fixture.cancel_all() == []
    mock_logger.warning.assert_not_called()
