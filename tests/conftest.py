import pytest

from signalarray import flush_pending, set_scheduler


@pytest.fixture(autouse=True)
def _reset_scheduling():
    """Leave no installed scheduler or held flush behind for the next test."""
    yield
    set_scheduler(None)
    flush_pending()
