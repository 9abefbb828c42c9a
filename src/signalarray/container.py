"""Container — a reactive list.

Reads made while a Computed is evaluating are recorded as dependencies keyed
"length", "index:<i>", "<path>.<key>" or the name of the read-only helper
used. Writes go through the container's NotificationBus, either dispatched
immediately or coalesced into one flush per tick (batch_updates).

    todos = Container([{"title": "a", "done": False}])
    remaining = todos.computed(lambda: len(todos.filter(lambda t: not t["done"])))
    remaining.get()        # 1
    todos[0]["done"] = True
    remaining.get()        # 0
"""

from __future__ import annotations

import functools
import logging
import math
from dataclasses import asdict
from typing import Any, Callable, Iterable, Iterator, Mapping

from signalarray._tracking import current_computation
from signalarray.bus import Callback, NotificationBus, Unsubscribe
from signalarray.computed import Computed
from signalarray.config import ContainerConfig
from signalarray.operations import is_operation, wrap_operation
from signalarray.reactive import make_reactive
from signalarray.records import Change, DerivedChange, IndexChange, LengthChange

logger = logging.getLogger("signalarray.container")

_MISSING = object()

# Most None slots a single index or length write may add past the end.
MAX_PADDING = 1 << 20

# Names read()/has() resolve to the container itself.
PUBLIC_NAMES = frozenset({
    "get", "set", "read", "write", "has", "length", "version", "config",
    "subscribe", "computed", "track", "notify", "flush", "make_reactive",
    "map", "filter", "reduce", "find", "find_index", "includes", "slice",
    "derived_map", "derived_filter", "detach",
})


def as_index(prop: object) -> int | None:
    """Return prop as an integer index, or None if it isn't one.

    Accepts ints and strings that parse to a finite integral number.
    """
    if isinstance(prop, bool):
        return None
    if isinstance(prop, int):
        return prop
    if isinstance(prop, str):
        try:
            number = float(prop)
        except ValueError:
            return None
        if math.isfinite(number) and number.is_integer():
            return int(number)
    return None


def _resolve_config(config, options: Mapping[str, object]) -> ContainerConfig:
    if isinstance(config, ContainerConfig) and not options:
        return config
    if isinstance(config, ContainerConfig):
        merged = asdict(config)
    else:
        merged = dict(config or {})
    merged.update(options)
    return ContainerConfig.from_options(merged)


class Container:
    """A reactive wrapper around a list.

    The given list is wrapped in place, not copied. `config` may be a
    ContainerConfig or a mapping of options; keyword options override it.
    """

    __slots__ = ("_items", "_config", "_bus", "_detach")

    def __init__(
        self,
        initial: Iterable[Any] | None = None,
        config: ContainerConfig | Mapping[str, object] | None = None,
        **options: object,
    ) -> None:
        if initial is None:
            initial = []
        self._items: list = initial if isinstance(initial, list) else list(initial)
        self._config = _resolve_config(config, options)
        self._bus = NotificationBus(batched=self._config.batch_updates)
        self._detach: Unsubscribe | None = None

    @property
    def config(self) -> ContainerConfig:
        return self._config

    @property
    def version(self) -> int:
        return self._bus.version

    # --- Tracking ---

    def track(self, key: str) -> None:
        """Record (self, key) on the Computed being evaluated, if any."""
        computation = current_computation.get()
        if computation is not None:
            computation._track(self, key)

    # --- Routed access ---

    def read(self, prop: object) -> Any:
        """Read `prop` by name: "length", an index, an operation or a public name.

        Returns None for anything else.
        """
        if prop == "length":
            return self.length
        index = as_index(prop)
        if index is not None:
            return self.get(index)
        if is_operation(prop):
            return wrap_operation(self, prop)
        if isinstance(prop, str) and prop in PUBLIC_NAMES:
            return getattr(self, prop)
        return None

    def write(self, prop: object, value: Any) -> bool:
        """Write "length" or an index. Returns False, changing nothing, for any other name."""
        if prop == "length":
            if isinstance(value, int) and value - len(self._items) > MAX_PADDING:
                logger.debug("Rejected length write of %d", value)
                return False
            self.length = value
            return True
        index = as_index(prop)
        if index is not None:
            return self.set(index, value)
        logger.debug("Rejected write to %r", prop)
        return False

    def has(self, prop: object) -> bool:
        """True for an existing index, "length", operation names and public names."""
        index = as_index(prop)
        if index is not None:
            return 0 <= index < len(self._items)
        if not isinstance(prop, str):
            return False
        return is_operation(prop) or prop in PUBLIC_NAMES

    # --- Element access ---

    def get(self, index: int) -> Any:
        """Read the item at index, or None when out of range."""
        if index < 0:
            index += len(self._items)
        self.track(f"index:{index}")
        if not 0 <= index < len(self._items):
            return None
        value = self._items[index]
        if self._config.deep:
            return self.make_reactive(value, str(index))
        return value

    def set(self, index: int, value: Any) -> bool:
        """Store value at index, padding with None past the end.

        Returns False for a negative index that is out of range, or one
        needing more than MAX_PADDING filler slots.
        """
        items = self._items
        if index < 0:
            index += len(items)
            if index < 0:
                logger.debug("Rejected write to out-of-range index %d", index - len(items))
                return False
        if index - len(items) > MAX_PADDING:
            logger.debug("Rejected write to index %d past length %d", index, len(items))
            return False
        old_value = items[index] if index < len(items) else None
        if index >= len(items):
            items.extend([None] * (index - len(items) + 1))
        items[index] = value
        self.notify(f"index:{index}", IndexChange(index=index, old_value=old_value, new_value=value))
        return True

    @property
    def length(self) -> int:
        self.track("length")
        return len(self._items)

    @length.setter
    def length(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"invalid length: {value!r}")
        items = self._items
        old_length = len(items)
        if value - old_length > MAX_PADDING:
            raise ValueError(f"length {value} would pad more than {MAX_PADDING} items")
        if value < old_length:
            del items[value:]
        else:
            items.extend([None] * (value - old_length))
        self.notify("length", LengthChange(old_value=old_length, new_value=value))

    def make_reactive(self, value: Any, path: str = "") -> Any:
        """Wrap a list as a Container or a dict as a ReactiveObject reporting here."""
        return make_reactive(self, value, path)

    # --- Notification ---

    def subscribe(self, callback: Callback) -> Unsubscribe:
        """Call callback with every Notification (or Flush, when batched).

        Returns a function that removes the subscription. Calling it twice is harmless.
        """
        return self._bus.subscribe(callback)

    def notify(self, key: str, change: Change) -> None:
        self._bus.notify(key, change)

    def flush(self) -> None:
        """Dispatch queued changes now instead of waiting for the tick."""
        self._bus.flush()

    def computed(self, fn: Callable[[], Any]) -> Computed:
        """Create a Computed invalidated by every change to this container.

        Usage:
            numbers = Container([1, 2, 2])

            @numbers.computed
            def total():
                return numbers.reduce(lambda acc, n: acc + n, 0)

            total.get()  # 5
        """
        return Computed(self, fn)

    # --- Read-only helpers (tracked under their own name) ---

    def map(self, fn: Callable[[Any], Any]) -> list:
        self.track("map")
        return [fn(item) for item in self._items]

    def filter(self, fn: Callable[[Any], bool]) -> list:
        self.track("filter")
        return [item for item in self._items if fn(item)]

    def reduce(self, fn: Callable[[Any, Any], Any], initial: Any = _MISSING) -> Any:
        self.track("reduce")
        if initial is _MISSING:
            return functools.reduce(fn, self._items)
        return functools.reduce(fn, self._items, initial)

    def find(self, fn: Callable[[Any], bool]) -> Any:
        self.track("find")
        return next((item for item in self._items if fn(item)), None)

    def find_index(self, fn: Callable[[Any], bool]) -> int:
        self.track("find_index")
        return next((i for i, item in enumerate(self._items) if fn(item)), -1)

    def includes(self, value: Any) -> bool:
        self.track("includes")
        return value in self._items

    def slice(self, start: int | None = None, end: int | None = None) -> list:
        self.track("slice")
        return self._items[start:end]

    # --- Derived containers ---

    def derived_map(self, fn: Callable[[Any], Any]) -> Container:
        """A container holding fn applied to every item, rebuilt on each change here."""
        return self._derive("map", lambda items: [fn(item) for item in items])

    def derived_filter(self, fn: Callable[[Any], bool]) -> Container:
        """A container holding the items passing fn, rebuilt on each change here."""
        return self._derive("filter", lambda items: [item for item in items if fn(item)])

    def _derive(self, source: str, derive: Callable[[list], list]) -> Container:
        derived = Container(derive(self._items), self._config)

        def _rederive(_payload) -> None:
            derived._items = derive(self._items)
            derived.notify("derived", DerivedChange(source=source))

        derived._detach = self.subscribe(_rederive)
        return derived

    def detach(self) -> None:
        """Stop a derived container from following its source. No-op otherwise."""
        if self._detach is not None:
            self._detach()
            self._detach = None

    # --- Python protocol sugar ---

    def __getattr__(self, name: str) -> Any:
        if is_operation(name):
            return wrap_operation(self, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            if index.step is not None:
                self.track("slice")
                return self._items[index]
            return self.slice(index.start, index.stop)
        position = as_index(index)
        if position is None:
            raise TypeError(f"Container indices must be integers, not {type(index).__name__}")
        return self.get(position)

    def __setitem__(self, index: int, value: Any) -> None:
        if self.write(index, value):
            return
        if as_index(index) is None:
            raise TypeError(f"cannot assign to Container key {index!r}")
        raise IndexError(f"Container assignment index out of range: {index!r}")

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[Any]:
        for index in range(self.length):
            yield self.get(index)

    def __contains__(self, value: Any) -> bool:
        return self.includes(value)

    def __repr__(self) -> str:
        return f"Container({self._items!r})"
