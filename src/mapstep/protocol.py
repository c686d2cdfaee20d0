"""Callback-or-enumerator iteration contract shared by every operation.

Each iteration-capable operation takes an optional callback. With a callback it
runs inline and returns its result; without one it returns an ``Enumerator``
bound to the receiver, the operation name and the arguments that were passed.
Both forms consume the same walk, so the elements a callback sees are exactly
the elements an external consumer pulls.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterator
from typing import Any, Generic, ParamSpec, TypeVar

T = TypeVar("T")
P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class Break(Exception):  # noqa: N818
    """Raised from a callback to leave the surrounding iteration early.

    The interrupted operation returns ``value`` instead of its usual result.
    """

    def __init__(self, value: Any = None) -> None:
        super().__init__(value)
        self.value = value


def breakable(func: Callable[P, R]) -> Callable[P, R]:
    """Turn a ``Break`` raised by a callback into the operation's return value."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except Break as exc:
            return exc.value

    return wrapper


class Enumerator(Generic[T]):
    """Lazy, restartable handle over a deferred iteration.

    ``walk`` must return a fresh iterator on every call; ``invoke`` re-runs the
    originating operation as ``invoke(*args, callback)``.
    """

    __slots__ = ("receiver", "method", "args", "_walk", "_invoke", "_size", "_cursor", "_peeked")

    def __init__(
        self,
        receiver: Any,
        method: str,
        args: tuple[Any, ...],
        *,
        walk: Callable[[], Iterator[T]],
        invoke: Callable[..., Any],
        size: Callable[[], int | float | None] | None = None,
    ) -> None:
        self.receiver = receiver
        self.method = method
        self.args = args
        self._walk = walk
        self._invoke = invoke
        self._size = size
        self._cursor: Iterator[T] | None = None
        self._peeked: Any = _UNSET

    def __iter__(self) -> Iterator[T]:
        return self._walk()

    def each(self, callback: Callable[..., Any]) -> Any:
        """Run the originating operation with ``callback`` and return its result."""
        return self._invoke(*self.args, callback)

    def with_index(self, callback: Callable[[T, int], Any], offset: int = 0) -> Any:
        """Run the originating operation feeding ``(element, index)`` to ``callback``."""
        counter = offset

        def indexed(*element: Any) -> Any:
            nonlocal counter
            index = counter
            counter += 1
            item = element[0] if len(element) == 1 else element
            return callback(item, index)

        return self._invoke(*self.args, indexed)

    def size(self) -> int | float | None:
        """Return the element count when it is known without iterating."""
        if self._size is None:
            return None
        return self._size()

    def next(self) -> T:
        """Advance the external cursor, raising ``StopIteration`` at the end."""
        if self._peeked is not _UNSET:
            item, self._peeked = self._peeked, _UNSET
            return item  # type: ignore[no-any-return]
        if self._cursor is None:
            self._cursor = self._walk()
        return next(self._cursor)

    def peek(self) -> T:
        """Return the element ``next()`` would return without consuming it."""
        if self._peeked is _UNSET:
            self._peeked = self.next()
        return self._peeked  # type: ignore[no-any-return]

    def rewind(self) -> Enumerator[T]:
        """Reset the external cursor so ``next()`` starts a fresh traversal."""
        self._cursor = None
        self._peeked = _UNSET
        return self

    def take(self, count: int) -> list[T]:
        """Pull at most ``count`` elements from a fresh traversal."""
        if count < 0:
            raise ValueError("count must be non-negative")
        taken: list[T] = []
        if count == 0:
            return taken
        for item in self._walk():
            taken.append(item)
            if len(taken) >= count:
                break
        return taken

    def to_list(self) -> list[T]:
        """Materialize a fresh traversal; never returns for unbounded walks."""
        return list(self._walk())

    def __repr__(self) -> str:
        rendered = ", ".join(repr(arg) for arg in self.args)
        suffix = f"({rendered})" if rendered else ""
        return f"<Enumerator: {self.receiver!r}:{self.method}{suffix}>"


def to_enum(
    receiver: Any,
    method: str,
    *args: Any,
    walk: Callable[[], Iterator[T]],
    invoke: Callable[..., Any],
    size: Callable[[], int | float | None] | None = None,
) -> Enumerator[T]:
    """Build the enumerator an operation returns when no callback is supplied."""
    logger.debug(
        "enumerator created",
        extra={"data": {"method": method, "receiver_type": type(receiver).__name__}},
    )
    return Enumerator(receiver, method, args, walk=walk, invoke=invoke, size=size)


__all__ = ["Break", "Enumerator", "breakable", "to_enum"]
