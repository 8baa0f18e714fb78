from __future__ import annotations

import asyncio
import sys
import threading
import time
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from copykit.fs._io import io_call, run_plan_blocking, run_plan_suspending  # noqa: E402
from copykit.fs.spec import TypeIoPlan  # noqa: E402


def _plan_recovering() -> TypeIoPlan[str]:
    n_value = yield io_call(int, "41")
    try:
        yield io_call(int, "not a number")
    except ValueError:
        return f"recovered after {n_value + 1}"
    return "unreachable"


def _plan_thread_names() -> TypeIoPlan[list[str]]:
    l_names = []
    for _ in range(2):
        l_names.append((yield io_call(lambda: threading.current_thread().name)))
    return l_names


def test_blocking_driver_throws_errors_back_into_plan() -> None:
    assert run_plan_blocking(_plan_recovering()) == "recovered after 42"


def test_suspending_driver_throws_errors_back_into_plan() -> None:
    assert asyncio.run(run_plan_suspending(_plan_recovering())) == "recovered after 42"


def test_blocking_driver_runs_inline() -> None:
    l_names = run_plan_blocking(_plan_thread_names())
    assert l_names == [threading.current_thread().name] * 2


def test_suspending_driver_runs_off_loop_thread() -> None:
    l_names = asyncio.run(run_plan_suspending(_plan_thread_names()))
    assert threading.current_thread().name not in l_names


def test_unhandled_error_propagates() -> None:
    def _plan() -> TypeIoPlan[None]:
        yield io_call(int, "boom")

    with pytest.raises(ValueError):
        run_plan_blocking(_plan())


def test_cancellation_closes_plan_between_steps() -> None:
    l_state: list[str] = []

    def _plan() -> TypeIoPlan[None]:
        try:
            yield io_call(time.sleep, 0.2)
            l_state.append("second step")
            yield io_call(time.sleep, 0.01)
        finally:
            l_state.append("closed")

    async def _scenario() -> None:
        task = asyncio.create_task(run_plan_suspending(_plan()))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(_scenario())

    assert l_state == ["closed"]
