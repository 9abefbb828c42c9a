"""Mutation-aware sequence operations.

Recording operations snapshot the storage before and after they run and hand
a MutationRecord to the container's bus. Plain list operations outside the
recording set run on the storage as-is: no record, no notification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from signalarray.records import MutationRecord

if TYPE_CHECKING:
    from signalarray.container import Container


def _shift(items: list) -> Any:
    """Remove and return the first item."""
    return items.pop(0)


def _unshift(items: list, *values) -> int:
    """Insert values at the front, in order. Returns the new length."""
    items[0:0] = values
    return len(items)


def _splice(items: list, start: int, delete_count: int | None = None, *values) -> list:
    """Replace delete_count items from start with values. Returns removed items."""
    n = len(items)
    if start < 0:
        start = max(n + start, 0)
    else:
        start = min(start, n)
    if delete_count is None:
        delete_count = n - start
    delete_count = max(0, min(delete_count, n - start))
    removed = items[start:start + delete_count]
    items[start:start + delete_count] = values
    return removed


RECORDING_OPERATIONS: dict[str, Callable[..., Any]] = {
    "append": list.append,
    "pop": list.pop,
    "shift": _shift,
    "unshift": _unshift,
    "splice": _splice,
    "sort": list.sort,
    "reverse": list.reverse,
}

PASSTHROUGH_OPERATIONS: dict[str, Callable[..., Any]] = {
    "extend": list.extend,
    "insert": list.insert,
    "remove": list.remove,
    "clear": list.clear,
    "index": list.index,
    "count": list.count,
    "copy": list.copy,
}

SEQUENCE_OPERATIONS = frozenset(RECORDING_OPERATIONS) | frozenset(PASSTHROUGH_OPERATIONS)


def is_operation(name: object) -> bool:
    return isinstance(name, str) and name in SEQUENCE_OPERATIONS


def wrap_operation(container: Container, name: str) -> Callable[..., Any]:
    """Bind operation `name` to the container's storage."""
    recording = name in RECORDING_OPERATIONS
    op = RECORDING_OPERATIONS[name] if recording else PASSTHROUGH_OPERATIONS[name]

    def operation(*args, **kwargs):
        items = container._items
        old_length = len(items)
        old_array = tuple(items)

        result = op(items, *args, **kwargs)

        if recording and container.config.track_mutations:
            record = MutationRecord(
                type=name,
                args=args + ((kwargs,) if kwargs else ()),
                old_length=old_length,
                new_length=len(items),
                old_array=old_array,
                new_array=tuple(items),
            )
            container.notify("mutation", record)

        return result

    operation.__name__ = name
    operation.__qualname__ = f"Container.{name}"
    return operation
