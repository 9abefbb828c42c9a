"""Actions and transactions — explicit scheduling ticks.

Batched containers defer their flush to the end of the current tick.
Wrapping work in an @action or `with transaction()` makes the scope itself
the tick: every flush scheduled inside runs once, when the outermost scope
exits.
"""

from __future__ import annotations

import functools
from typing import TypeVar, Callable, ParamSpec
from signalarray._tracking import tick

P = ParamSpec("P")
R = TypeVar("R")

# `with transaction():` is the tick scope itself.
transaction = tick


def action(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: run every call of fn as one tick.

    Usage:
        todos = Container([], batch_updates=True)

        @action
        def load(items):
            for item in items:
                todos.append(item)
            # subscribers see a single flush carrying every append
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        with tick():
            return fn(*args, **kwargs)

    return wrapper
