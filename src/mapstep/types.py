"""Callback and value type aliases, one shape per operation family.

Callbacks are kept to fixed arities instead of duck-typed blocks:

* ``EntryCallback`` receives ``(key, value)`` (``each``, ``select``, ``reject``...).
* ``ElementCallback`` receives a single key or value (``each_key``, ``each_value``).
* ``ResolverCallback`` receives ``(key, old_value, new_value)`` (``merge``).
* ``FallbackCallback`` receives the missing key (``delete``).
* ``NumberCallback`` receives the running counter (``times``, ``upto``, ``step``...).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias, TypeVar

from typing_extensions import TypeAliasType

K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")

Number: TypeAlias = int | float

if TYPE_CHECKING:
    EntryCallback: TypeAlias = Callable[[K, V], Any]
    ElementCallback: TypeAlias = Callable[[T], Any]
    ResolverCallback: TypeAlias = Callable[[K, V, V], V]
    FallbackCallback: TypeAlias = Callable[[K], Any]
    NumberCallback: TypeAlias = Callable[[Number], Any]
else:
    EntryCallback = TypeAliasType("EntryCallback", Callable[[K, V], Any], type_params=(K, V))
    ElementCallback = TypeAliasType("ElementCallback", Callable[[T], Any], type_params=(T,))
    ResolverCallback = TypeAliasType(
        "ResolverCallback", Callable[[K, V, V], V], type_params=(K, V)
    )
    FallbackCallback = TypeAliasType("FallbackCallback", Callable[[K], Any], type_params=(K,))
    NumberCallback = TypeAliasType("NumberCallback", Callable[[Number], Any])

__all__ = [
    "Number",
    "EntryCallback",
    "ElementCallback",
    "ResolverCallback",
    "FallbackCallback",
    "NumberCallback",
]
