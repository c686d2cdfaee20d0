"""Dict-backed, insertion-ordered container exposing the traversal helpers."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator, Mapping, MutableMapping
from typing import Any, TypeVar

from mapstep.hashes.transform import HashTransform

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class OrderedHash(HashTransform[K, V], MutableMapping[K, V]):
    """Mutable mapping implementing ``AssociativeContainerPort``.

    Storage is a plain ``dict``, which already keeps insertion order and keeps
    the original slot of a key that is reassigned.
    """

    def __init__(
        self,
        data: Mapping[K, V] | Iterable[tuple[K, V]] | None = None,
        /,
        **entries: V,
    ) -> None:
        self._data: dict[K, V] = dict(data or {})
        if entries:
            self._data.update(entries)  # type: ignore[arg-type]

    # --- MutableMapping ---
    def __getitem__(self, key: K) -> V:
        return self._data[key]

    def __setitem__(self, key: K, value: V) -> None:
        self._data[key] = value

    def __delitem__(self, key: K) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    # --- AssociativeContainerPort ---
    def size(self) -> int:
        return len(self._data)

    def entries(self) -> tuple[tuple[K, V], ...]:
        return tuple(self._data.items())

    def has_key(self, key: K) -> bool:
        return key in self._data

    def fetch(self, key: K) -> V:
        return self._data[key]

    def delete_by_key(self, key: K) -> V | None:
        return self._data.pop(key, None)

    def assign(self, key: K, value: V) -> None:
        self._data[key] = value

    def duplicate(self) -> OrderedHash[K, V]:
        return type(self)(self._data)

    def to_dict(self) -> dict[K, V]:
        """Return a shallow copy as a plain ``dict``."""
        return dict(self._data)

    def __repr__(self) -> str:
        return f"OrderedHash({self._data!r})"


def ordered_hash(data: Mapping[Any, Any] | None = None, /, **entries: Any) -> OrderedHash[Any, Any]:
    """Build an ``OrderedHash`` from a mapping and/or keyword entries."""
    return OrderedHash(data, **entries)


__all__ = ["OrderedHash", "ordered_hash"]
