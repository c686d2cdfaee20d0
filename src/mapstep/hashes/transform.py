"""Filtering, merging and deletion built on the traversal contract."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final, TypeVar

from mapstep.errors import ContainerTypeError
from mapstep.hashes.traversal import HashTraversal
from mapstep.ports.container import AssociativeContainerPort
from mapstep.protocol import breakable, to_enum

if TYPE_CHECKING:
    from mapstep.types import EntryCallback, FallbackCallback, ResolverCallback

K = TypeVar("K")
V = TypeVar("V")

logger = logging.getLogger(__name__)


class _NoChange:
    """Result of an in-place filter that removed nothing."""

    _instance: _NoChange | None = None

    def __new__(cls) -> _NoChange:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_CHANGE"


NO_CHANGE: Final = _NoChange()


def _source_entries(source: Any) -> tuple[tuple[Any, Any], ...]:
    if isinstance(source, AssociativeContainerPort):
        return tuple(source.entries())
    return tuple(source.items())


class HashTransform(HashTraversal[K, V]):
    """Mixin adding ``delete``, ``merge`` and the filter family to a container port."""

    @breakable
    def delete(self, key: K, fallback: FallbackCallback[K] | None = None) -> Any:
        """Remove ``key`` and return its value.

        A missing key is not an error: the result of ``fallback(key)`` is
        returned when a fallback is given, otherwise ``None``.
        """
        if fallback is not None and not self.has_key(key):  # type: ignore[attr-defined]
            return fallback(key)
        return self.delete_by_key(key)  # type: ignore[attr-defined]

    @breakable
    def merge(self, *others: Any, resolver: ResolverCallback[K, V] | None = None) -> Any:
        """Return a copy of ``self`` with every ``other`` merged in, left to right.

        Without ``resolver`` later values win. With one, a key already present
        in the running copy is set to ``resolver(key, current, incoming)``; a
        key seen for the first time is assigned without calling it. Neither
        ``self`` nor any ``other`` is modified.
        """
        sources = []
        for position, other in enumerate(others, start=1):
            if not isinstance(other, (AssociativeContainerPort, Mapping)):
                raise ContainerTypeError(position, other)
            sources.append(_source_entries(other))

        merged = self.duplicate()  # type: ignore[attr-defined]
        collisions = 0
        for entries in sources:
            for key, incoming in entries:
                if resolver is not None and merged.has_key(key):
                    collisions += 1
                    merged.assign(key, resolver(key, merged.fetch(key), incoming))
                else:
                    merged.assign(key, incoming)

        logger.debug(
            "merged containers",
            extra={
                "data": {
                    "sources": len(sources),
                    "resolved_collisions": collisions,
                    "result_size": merged.size(),
                }
            },
        )
        return merged

    def _filtered_copy(self, callback: EntryCallback[K, V], keep: bool) -> Any:
        # The copy is taken before the walk starts, so it matches the snapshot.
        result = self.duplicate()  # type: ignore[attr-defined]
        for key, value in self._walk_entries():
            if bool(callback(key, value)) is not keep:
                result.delete_by_key(key)
        return result

    def _filter_in_place(self, method: str, callback: EntryCallback[K, V], keep: bool) -> list[K]:
        doomed = [
            key for key, value in self._walk_entries() if bool(callback(key, value)) is not keep
        ]
        for key in doomed:
            self.delete_by_key(key)  # type: ignore[attr-defined]
        if doomed:
            logger.debug(
                "filtered container in place",
                extra={"data": {"method": method, "deleted": len(doomed)}},
            )
        return doomed

    @breakable
    def select(self, callback: EntryCallback[K, V] | None = None) -> Any:
        """Return a new container with the entries for which ``callback`` is truthy."""
        if callback is None:
            return self._entry_enum("select")
        return self._filtered_copy(callback, keep=True)

    @breakable
    def reject(self, callback: EntryCallback[K, V] | None = None) -> Any:
        """Return a new container with the entries for which ``callback`` is falsy."""
        if callback is None:
            return self._entry_enum("reject")
        return self._filtered_copy(callback, keep=False)

    @breakable
    def select_(self, callback: EntryCallback[K, V] | None = None) -> Any:
        """Keep only matching entries; return ``self``, or ``NO_CHANGE`` if nothing was removed."""
        if callback is None:
            return self._entry_enum("select_")
        if not self._filter_in_place("select_", callback, keep=True):
            return NO_CHANGE
        return self

    @breakable
    def reject_(self, callback: EntryCallback[K, V] | None = None) -> Any:
        """Drop matching entries; return ``self``, or ``NO_CHANGE`` if nothing was removed."""
        if callback is None:
            return self._entry_enum("reject_")
        if not self._filter_in_place("reject_", callback, keep=False):
            return NO_CHANGE
        return self

    @breakable
    def keep_if(self, callback: EntryCallback[K, V] | None = None) -> Any:
        if callback is None:
            return self._entry_enum("keep_if")
        self._filter_in_place("keep_if", callback, keep=True)
        return self

    @breakable
    def delete_if(self, callback: EntryCallback[K, V] | None = None) -> Any:
        if callback is None:
            return self._entry_enum("delete_if")
        self._filter_in_place("delete_if", callback, keep=False)
        return self


__all__ = ["HashTransform", "NO_CHANGE"]
