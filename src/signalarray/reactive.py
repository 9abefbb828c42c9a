"""Nested object reactivity.

Dict values read through a deep container come back wrapped in a
ReactiveObject: reads track "<path>.<key>" against the owning container and
writes notify it under the same key. Wrapping is lazy, one level per access,
so cyclic dicts only grow the path as far as a reader actually walks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator

from signalarray.records import PathChange

if TYPE_CHECKING:
    from signalarray.container import Container


def join_path(path: str, key: object) -> str:
    return f"{path}.{key}"


def make_reactive(owner: Container, value: Any, path: str = "") -> Any:
    """Wrap lists as containers and dicts as ReactiveObjects; pass anything else through."""
    # Imported here: container imports this module.
    from signalarray.container import Container

    if isinstance(value, list):
        return Container(value, owner.config)
    if isinstance(value, dict):
        return ReactiveObject(owner, value, path)
    return value


class ReactiveObject:
    """A deep-tracking view over a dict, reporting to its owning container."""

    __slots__ = ("_owner", "_data", "_path")

    def __init__(self, owner: Container, data: dict, path: str = "") -> None:
        self._owner = owner
        self._data = data
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    @property
    def raw(self) -> dict:
        """The wrapped dict, untracked."""
        return self._data

    # --- Read operations (track) ---

    def __getitem__(self, key: Any) -> Any:
        path = join_path(self._path, key)
        self._owner.track(path)
        value = self._data[key]
        if self._owner.config.deep:
            return make_reactive(self._owner, value, path)
        return value

    def get(self, key: Any, default: Any = None) -> Any:
        if key not in self._data:
            self._owner.track(join_path(self._path, key))
            return default
        return self[key]

    def __contains__(self, key: Any) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator:
        return iter(self._data)

    def keys(self):
        return self._data.keys()

    # --- Write operations (notify) ---

    def __setitem__(self, key: Any, value: Any) -> None:
        path = join_path(self._path, key)
        old_value = self._data.get(key)
        self._data[key] = value
        self._owner.notify(path, PathChange(path=path, old_value=old_value, new_value=value))

    def __repr__(self) -> str:
        return f"ReactiveObject({self._path!r}, {self._data!r})"
