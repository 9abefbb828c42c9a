"""Dependency tracking slot and the deferred-execution (tick) scheduler.

Uses contextvars to hold the Computed currently being evaluated, so any
container read made during evaluation lands in that Computed's dependency set.

Batched flushes are deferred callbacks. They run at the end of the outermost
transaction scope, through an installed scheduler, on the running asyncio
loop, or when flush_pending() is called, whichever applies first.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator

if TYPE_CHECKING:
    from signalarray.computed import Computed

logger = logging.getLogger("signalarray.tracking")

# The currently-evaluating Computed. When set, container reads register
# themselves as dependencies of it.
current_computation: contextvars.ContextVar[Computed | None] = contextvars.ContextVar(
    "current_computation", default=None
)

# Open tick scopes. When > 0, deferred callbacks wait for the outermost scope.
_tick_depth: int = 0

# Deferred callbacks awaiting their tick, in scheduling order.
_pending: list[Callable[[], None]] = []

_scheduler: Callable[[Callable[[], None]], object] | None = None


def set_scheduler(scheduler: Callable[[Callable[[], None]], object] | None) -> None:
    """Install the function used to defer batched flushes.

    The scheduler receives a zero-argument callback and must run it after
    the current unit of work, e.g. a UI app's ``call_next``. Pass None to
    fall back to the asyncio loop / explicit flush_pending().
    """
    global _scheduler
    _scheduler = scheduler


def in_tick() -> bool:
    return _tick_depth > 0


@contextmanager
def tick() -> Iterator[None]:
    """Make the enclosed work one tick. Nested scopes join the outermost one.

    Callbacks deferred inside run when the outermost scope exits, whether or
    not the body raised.
    """
    global _tick_depth
    _tick_depth += 1
    try:
        yield
    finally:
        _tick_depth -= 1
        if _tick_depth == 0:
            flush_pending()


def defer(callback: Callable[[], None]) -> None:
    """Run callback once the current synchronous unit of work completes."""
    if in_tick():
        _pending.append(callback)
        return
    if _scheduler is not None:
        _scheduler(callback)
        return
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No scheduler or running loop; holding callback until flush_pending()")
        _pending.append(callback)
        return
    loop.call_soon(callback)


def flush_pending() -> None:
    """Run all deferred callbacks, including ones deferred while running.

    Every callback runs even if an earlier one raises; the first error is
    re-raised once the queue is empty and later ones are logged.
    """
    error: BaseException | None = None
    while _pending:
        # Snapshot and clear — callbacks may defer new ones during run.
        batch = list(_pending)
        _pending.clear()
        for callback in batch:
            try:
                callback()
            except Exception as exc:
                if error is None:
                    error = exc
                else:
                    logger.exception("Deferred callback failed after an earlier failure")
    if error is not None:
        raise error


def get_pending_count() -> int:
    """Number of deferred callbacks waiting to run. Useful for testing."""
    return len(_pending)
