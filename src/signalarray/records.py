"""Change records and notification payloads.

Every value here is immutable. Records are built once by the container,
queued (batched mode) or dispatched directly (immediate mode), and not
retained after dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Union


class Dependency(NamedTuple):
    """A (container-or-object, key) pair read during a Computed evaluation."""

    target: Any
    key: str


@dataclass(frozen=True)
class MutationRecord:
    """Snapshot of one recording sequence operation."""

    type: str
    args: tuple
    old_length: int
    new_length: int
    old_array: tuple
    new_array: tuple


@dataclass(frozen=True)
class IndexChange:
    index: int
    old_value: Any
    new_value: Any


@dataclass(frozen=True)
class LengthChange:
    old_value: int
    new_value: int


@dataclass(frozen=True)
class PathChange:
    path: str
    old_value: Any
    new_value: Any


@dataclass(frozen=True)
class DerivedChange:
    source: str  # "map" | "filter"


Change = Union[MutationRecord, IndexChange, LengthChange, PathChange, DerivedChange]


@dataclass(frozen=True)
class Notification:
    """Immediate-mode payload: one change, dispatched as it happens."""

    key: str
    change: Change
    version: int


@dataclass(frozen=True)
class Flush:
    """Batched-mode payload: every change queued since the previous flush."""

    mutations: tuple[Change, ...]
    version: int
