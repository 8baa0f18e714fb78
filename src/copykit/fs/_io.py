"""Drivers that execute I/O plans.

Copy logic is written once as a generator ("plan") that yields ``SpecIoCall``
requests and receives their results. A driver decides how each request runs:

- ``run_plan_blocking`` calls it inline on the current thread.
- ``run_plan_suspending`` awaits it in the event loop's default executor, so the
  loop keeps serving other tasks between steps.

Exceptions raised by a request are thrown back into the plan at the ``yield``
that issued it, so plans handle OS errors with ordinary ``try``/``except``.
"""

import asyncio
from functools import partial
from typing import Any, TypeVar

from .spec import SpecIoCall, TypeIoPlan

T = TypeVar("T")


def io_call(func: Any, /, *args: Any, **kwargs: Any) -> SpecIoCall:
    return SpecIoCall(func=func, args=args, kwargs=kwargs)


def run_plan_blocking(plan: TypeIoPlan[T]) -> T:
    """Run a plan to completion, executing every request inline."""
    value: Any = None
    error: Exception | None = None
    try:
        while True:
            try:
                if error is None:
                    call = plan.send(value)
                else:
                    call = plan.throw(error)
            except StopIteration as stop:
                return stop.value
            value, error = None, None
            try:
                value = call()
            except Exception as e:
                error = e
    finally:
        plan.close()


async def run_plan_suspending(plan: TypeIoPlan[T]) -> T:
    """Run a plan to completion, awaiting every request in the default executor.

    Cancellation is observed between requests: the plan is closed and the
    partially written destination is left as it is.
    """
    loop = asyncio.get_running_loop()
    value: Any = None
    error: Exception | None = None
    try:
        while True:
            try:
                if error is None:
                    call = plan.send(value)
                else:
                    call = plan.throw(error)
            except StopIteration as stop:
                return stop.value
            value, error = None, None
            try:
                value = await loop.run_in_executor(
                    None, partial(call.func, *call.args, **call.kwargs)
                )
            except Exception as e:
                error = e
    finally:
        plan.close()
