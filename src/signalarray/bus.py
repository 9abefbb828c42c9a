"""Notification bus — per-container subscribers plus the dispatch policy.

Immediate mode dispatches a Notification to every subscriber as each change
happens. Batched mode queues changes and dispatches a single Flush per tick
(see signalarray._tracking.defer).
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Callable

from signalarray._tracking import defer
from signalarray.records import Change, Flush, Notification

if TYPE_CHECKING:
    from signalarray.computed import Computed

logger = logging.getLogger("signalarray.bus")

Payload = Notification | Flush
Callback = Callable[[Payload], object]
Unsubscribe = Callable[[], None]

# ID generation shared by subscribers and computeds across all buses.
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


class NotificationBus:
    """Subscriber registry, version counter and pending change queue."""

    __slots__ = (
        "_batched",
        "_subscribers",
        "_computeds",
        "_queue",
        "_scheduled",
        "version",
    )

    def __init__(self, batched: bool = False) -> None:
        self._batched = batched
        self._subscribers: dict[int, Callback] = {}
        self._computeds: dict[int, Computed] = {}
        self._queue: list[Change] = []
        self._scheduled = False
        self.version = 0

    @property
    def batched(self) -> bool:
        return self._batched

    @property
    def pending(self) -> tuple[Change, ...]:
        """Changes queued for the next flush."""
        return tuple(self._queue)

    @property
    def scheduled(self) -> bool:
        return self._scheduled

    def subscribe(self, callback: Callback) -> Unsubscribe:
        """Register a callback. Returns a function that removes it."""
        sub_id = new_id()
        self._subscribers[sub_id] = callback

        def _unsubscribe() -> None:
            self._subscribers.pop(sub_id, None)

        return _unsubscribe

    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def register_computed(self, computed: Computed) -> int:
        computed_id = new_id()
        self._computeds[computed_id] = computed
        return computed_id

    def unregister_computed(self, computed_id: int) -> None:
        self._computeds.pop(computed_id, None)

    def notify(self, key: str, change: Change) -> None:
        """Bump the version, then dispatch now or queue for the next flush."""
        self.version += 1
        if self._batched:
            self._queue.append(change)
            self._schedule()
        else:
            # Computeds go dirty first so subscribers reading them see the change.
            self._invalidate()
            self._dispatch(Notification(key=key, change=change, version=self.version))

    def _schedule(self) -> None:
        if self._scheduled:
            return
        self._scheduled = True
        logger.debug("Flush scheduled at version %d", self.version)
        defer(self._run_scheduled)

    def _run_scheduled(self) -> None:
        # A manual flush() may already have drained this tick.
        if self._scheduled:
            self.flush()

    def flush(self) -> None:
        """Invalidate computeds, then dispatch every queued change as one Flush.

        No-op when nothing is queued or scheduled. The scheduled flag is
        cleared before any subscriber runs, so a raising subscriber never
        blocks later flushes.
        """
        if not self._queue and not self._scheduled:
            return
        mutations = tuple(self._queue)
        self._queue.clear()
        self._scheduled = False
        logger.debug("Flushing %d change(s) at version %d", len(mutations), self.version)
        self._invalidate()
        self._dispatch(Flush(mutations=mutations, version=self.version))

    def _dispatch(self, payload: Payload) -> None:
        # Snapshot — callbacks may unsubscribe during dispatch.
        for callback in list(self._subscribers.values()):
            callback(payload)

    def _invalidate(self) -> None:
        for computed in list(self._computeds.values()):
            computed.mark_dirty()
