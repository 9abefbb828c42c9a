"""Computed values — memoized derived state tied to a container.

A Computed wraps a zero-argument function. The first get() evaluates it and
caches the result; later get() calls return the cache until the owning
container notifies (immediate mode) or flushes (batched mode), which marks
every registered Computed dirty.

Invalidation is container-wide: the recorded dependencies are bookkeeping
only and are never used to skip a recomputation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar, Generic, Callable
from signalarray._tracking import current_computation
from signalarray.records import Dependency

if TYPE_CHECKING:
    from signalarray.container import Container

T = TypeVar("T")

_UNSET = object()


class Computed(Generic[T]):
    """A lazily evaluated, cached value owned by a container."""

    __slots__ = ("_owner", "_fn", "_value", "_dirty", "_dependencies", "_id")

    def __init__(self, owner: Container, fn: Callable[[], T]) -> None:
        self._owner = owner
        self._fn = fn
        self._value = _UNSET
        self._dirty = True
        self._dependencies: set[Dependency] = set()
        self._id = owner._bus.register_computed(self)

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def dependencies(self) -> frozenset[Dependency]:
        """Dependencies recorded by the last successful evaluation."""
        return frozenset(self._dependencies)

    def get(self) -> T:
        """Read the computed value. Recomputes if dirty."""
        if self._dirty:
            self._recompute()
        return self._value

    def _recompute(self) -> None:
        """Evaluate fn with self installed as the current computation.

        Nothing is committed unless fn returns: on error the previous value
        and dependencies stay in place and the Computed stays dirty.
        """
        previous = self._dependencies
        self._dependencies = set()
        token = current_computation.set(self)
        try:
            value = self._fn()
        except BaseException:
            self._dependencies = previous
            raise
        finally:
            current_computation.reset(token)

        self._value = value
        self._dirty = False

    def _track(self, target, key: str) -> None:
        self._dependencies.add(Dependency(target, key))

    def mark_dirty(self) -> None:
        self._dirty = True

    def dispose(self) -> None:
        """Remove from the owner's registry. The computed stops being invalidated."""
        self._owner._bus.unregister_computed(self._id)
        self._dirty = True
        self._value = _UNSET
        self._dependencies.clear()

    def __repr__(self) -> str:
        name = getattr(self._fn, "__name__", "fn")
        state = "dirty" if self._dirty else f"cached={self._value!r}"
        return f"Computed({name}, {state})"
