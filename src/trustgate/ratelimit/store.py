"""Counter storage for rate limiters.

Limiters receive a store instead of owning module-level maps, so tests and
deployments can swap in their own. The in-memory store is process-local and
meant to be used from a single event loop.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol


@dataclass
class CounterEntry:
    """Hit count inside the window that opened at ``window_start`` (epoch seconds)."""

    count: int = 0
    window_start: float = 0.0


class CounterStore(Protocol):
    """Key to :class:`CounterEntry` mapping used by the limiters."""

    def get(self, key: str) -> CounterEntry | None: ...

    def set(self, key: str, entry: CounterEntry) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> Iterable[str]: ...


class InMemoryCounterStore:
    """Dict-backed :class:`CounterStore`."""

    def __init__(self) -> None:
        self._entries: dict[str, CounterEntry] = {}

    def get(self, key: str) -> CounterEntry | None:
        return self._entries.get(key)

    def set(self, key: str, entry: CounterEntry) -> None:
        self._entries[key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> Iterable[str]:
        return list(self._entries)

    def purge(self, predicate: Callable[[CounterEntry], bool]) -> int:
        """Drop every entry matching ``predicate``. Returns how many were removed."""
        stale = [key for key, entry in self._entries.items() if predicate(entry)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)
