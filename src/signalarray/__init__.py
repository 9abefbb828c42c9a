"""signalarray: reactive lists with tracked reads, batched notifications and computed values."""

from importlib.metadata import version as _version

__version__ = _version("signalarray")

from signalarray._tracking import flush_pending, get_pending_count, set_scheduler
from signalarray.action import action, transaction
from signalarray.config import ContainerConfig
from signalarray.computed import Computed
from signalarray.container import Container
from signalarray.reactive import ReactiveObject
from signalarray.records import (
    DerivedChange,
    Dependency,
    Flush,
    IndexChange,
    LengthChange,
    MutationRecord,
    Notification,
    PathChange,
)
# textual NOT auto-imported — opt-in only

__all__ = [
    "Container",
    "ContainerConfig",
    "Computed",
    "ReactiveObject",
    "Dependency",
    "MutationRecord",
    "IndexChange",
    "LengthChange",
    "PathChange",
    "DerivedChange",
    "Notification",
    "Flush",
    "action",
    "transaction",
    "set_scheduler",
    "flush_pending",
    "get_pending_count",
]
