"""Snapshot-consistent walks over an associative container."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from mapstep.protocol import Enumerator, breakable, to_enum

if TYPE_CHECKING:
    from mapstep.types import ElementCallback, EntryCallback

K = TypeVar("K")
V = TypeVar("V")


class HashTraversal(Generic[K, V]):
    """Mixin adding ``each``/``each_key``/``each_value`` to a container port.

    The host class provides ``entries()``, ``keys()``, ``values()`` and
    ``size()``. Every walk captures its snapshot once, when iteration starts,
    and never re-reads the live container, so callbacks may mutate it freely.
    """

    def _walk_entries(self) -> Iterator[tuple[K, V]]:
        snapshot = self.entries()  # type: ignore[attr-defined]
        yield from snapshot

    def _walk_keys(self) -> Iterator[K]:
        snapshot = tuple(self.keys())  # type: ignore[attr-defined]
        yield from snapshot

    def _walk_values(self) -> Iterator[V]:
        snapshot = tuple(self.values())  # type: ignore[attr-defined]
        yield from snapshot

    def _entry_enum(self, method: str) -> Enumerator[tuple[K, V]]:
        return to_enum(
            self,
            method,
            walk=self._walk_entries,
            invoke=getattr(self, method),
            size=self.size,  # type: ignore[attr-defined]
        )

    @breakable
    def each(self, callback: EntryCallback[K, V] | None = None) -> Any:
        """Call ``callback(key, value)`` for every entry and return ``self``."""
        if callback is None:
            return self._entry_enum("each")
        for key, value in self._walk_entries():
            callback(key, value)
        return self

    @breakable
    def each_pair(self, callback: EntryCallback[K, V] | None = None) -> Any:
        if callback is None:
            return self._entry_enum("each_pair")
        return self.each(callback)

    @breakable
    def each_key(self, callback: ElementCallback[K] | None = None) -> Any:
        """Call ``callback(key)`` for every key and return ``self``."""
        if callback is None:
            return to_enum(
                self,
                "each_key",
                walk=self._walk_keys,
                invoke=self.each_key,
                size=self.size,  # type: ignore[attr-defined]
            )
        for key in self._walk_keys():
            callback(key)
        return self

    @breakable
    def each_value(self, callback: ElementCallback[V] | None = None) -> Any:
        """Call ``callback(value)`` for every value and return ``self``."""
        if callback is None:
            return to_enum(
                self,
                "each_value",
                walk=self._walk_values,
                invoke=self.each_value,
                size=self.size,  # type: ignore[attr-defined]
            )
        for value in self._walk_values():
            callback(value)
        return self


__all__ = ["HashTraversal"]
