"""Textual integration for signalarray. Opt-in — requires textual.

Guarding, NoMatches handling and thread marshaling live here so container
subscribers that touch widgets don't have to repeat them.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches
from signalarray._tracking import set_scheduler

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded subscribers during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def subscribe(app, container, callback):
    """container.subscribe() that safely bridges to Textual widgets.

    Skips payloads while the app is paused or not running, swallows
    NoMatches from widget queries, and marshals cross-thread calls via
    call_from_thread. Returns the unsubscribe function.
    """
    _main = threading.get_ident()

    def _guarded(payload):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, payload)
        else:
            _safe(payload)

    def _safe(payload):
        try:
            callback(payload)
        except NoMatches:
            pass

    return container.subscribe(_guarded)


def use_app_scheduler(app) -> None:
    """Run batched flushes on the app's message loop, after pending messages."""
    set_scheduler(app.call_next)
