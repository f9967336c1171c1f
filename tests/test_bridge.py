import asyncio
import threading
from concurrent.futures import CancelledError

import pytest

from map_sugar.bridge import AsyncLoopBridge, run_sync
from map_sugar.transforms.concurrent import map_keys_async, map_values_async


async def _double(value: int) -> int:
    await asyncio.sleep(0)
    return value * 2


def test_run_sync_returns_transform_result() -> None:
    assert run_sync(map_values_async({"a": 1, "b": 2}, _double)) == {"a": 2, "b": 4}


def test_bridge_runs_several_calls() -> None:
    with AsyncLoopBridge() as bridge:
        assert bridge.run(map_values_async({"a": 1}, _double)) == {"a": 2}
        assert bridge.run(map_keys_async({"a": 1}, str.upper)) == {"A": 1}


def test_bridge_works_inside_running_event_loop() -> None:
    async def scenario() -> dict[str, int]:
        return run_sync(map_values_async({"inside": 3}, _double))

    assert asyncio.run(scenario()) == {"inside": 6}


def test_bridge_propagates_transform_failures() -> None:
    async def explode(_value: int) -> int:
        msg = "boom"
        raise ValueError(msg)

    with pytest.raises(ExceptionGroup) as excinfo:
        _ = run_sync(map_values_async({"a": 1}, explode))
    assert excinfo.group_contains(ValueError, match="boom")


def test_run_after_close_raises() -> None:
    bridge = AsyncLoopBridge()
    bridge.close()
    bridge.close()

    with pytest.raises(RuntimeError, match="bridge loop is not running"):
        _ = bridge.run(map_values_async({"a": 1}, _double))


def test_close_releases_callers_blocked_in_run() -> None:
    bridge = AsyncLoopBridge()
    started = threading.Event()
    outcome: list[BaseException | dict[str, int]] = []

    async def stall(value: int) -> int:
        started.set()
        await asyncio.sleep(10)
        return value

    def call_bridge() -> None:
        try:
            outcome.append(bridge.run(map_values_async({"a": 1}, stall)))
        except CancelledError as error:
            outcome.append(error)

    worker = threading.Thread(target=call_bridge)
    worker.start()
    assert started.wait(timeout=3)

    bridge.close()
    worker.join(timeout=3)

    assert not worker.is_alive()
    assert len(outcome) == 1
    assert isinstance(outcome[0], CancelledError)
