"""Port describing the associative container the traversal helpers sit on."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Protocol, TypeVar, runtime_checkable

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@runtime_checkable
class AssociativeContainerPort(Protocol[K, V]):
    """Mutable, insertion-ordered key/value storage."""

    def size(self) -> int:
        """Return the number of stored entries."""

    def keys(self) -> Any:
        """Return the keys in insertion order."""

    def values(self) -> Any:
        """Return the values in insertion order."""

    def entries(self) -> tuple[tuple[K, V], ...]:
        """Return an immutable, ordered snapshot of ``(key, value)`` pairs."""

    def has_key(self, key: K) -> bool:
        """Return ``True`` when ``key`` is stored."""

    def fetch(self, key: K) -> V:
        """Return the value stored under ``key`` or raise ``KeyError``."""

    def delete_by_key(self, key: K) -> V | None:
        """Remove ``key`` and return its value, or ``None`` when absent."""

    def assign(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``, keeping the original position of existing keys."""

    def duplicate(self) -> AssociativeContainerPort[K, V]:
        """Return an independent shallow copy."""


__all__ = ["AssociativeContainerPort"]
