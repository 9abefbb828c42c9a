"""Container configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Mapping

# camelCase spellings accepted by from_options()
_ALIASES = {
    "trackMutations": "track_mutations",
    "batchUpdates": "batch_updates",
}


@dataclass(frozen=True)
class ContainerConfig:
    """Immutable per-container options, shared with nested and derived containers.

    deep: wrap nested lists/dicts in reactive views on read.
    track_mutations: build MutationRecords for recording operations.
    batch_updates: coalesce notifications into one flush per tick.
    """

    deep: bool = True
    track_mutations: bool = True
    batch_updates: bool = False

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise TypeError(f"{f.name} must be a bool, got {type(value).__name__}")

    @classmethod
    def from_options(cls, options: Mapping[str, object] | None = None) -> ContainerConfig:
        """Build a config from a loose mapping. Unknown keys are ignored."""
        if not options:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            name = _ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)
