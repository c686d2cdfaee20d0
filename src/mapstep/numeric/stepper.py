"""Bounded and unbounded arithmetic sequences over ints and floats.

The counters advance by repeated addition, never by ``start + index * step``,
so float rounding accumulates exactly the way a hand-written loop would.
"""

from __future__ import annotations

import functools
import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mapstep.errors import ArgumentError
from mapstep.protocol import breakable, to_enum

if TYPE_CHECKING:
    from mapstep.types import Number, NumberCallback

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StepSpec:
    """Start, optional limit and non-zero increment of a stepped sequence."""

    start: Number
    limit: Number | None = None
    increment: Number = 1

    def __post_init__(self) -> None:
        if self.increment == 0:
            raise ArgumentError("step can't be 0")

    @property
    def ascending(self) -> bool:
        return self.increment > 0

    @property
    def unbounded(self) -> bool:
        return self.limit is None

    @property
    def single_shot(self) -> bool:
        """An infinite increment, or a limit equal to the start, yields at most one value."""
        return _is_infinite(self.increment) or self.limit == self.start

    def counter(self) -> Number:
        """Return the start promoted to the increment's representation."""
        if isinstance(self.increment, float) and not isinstance(self.start, float):
            return float(self.start)
        return self.start

    def within(self, value: Number) -> bool:
        """Return ``True`` when ``value`` has not passed the limit yet."""
        if self.limit is None:
            return True
        return value <= self.limit if self.ascending else value >= self.limit

    def walk(self) -> Iterator[Number]:
        i = self.counter()
        if self.single_shot:
            if self.within(i):
                yield i
            return
        if self.unbounded:
            while True:
                yield i
                i += self.increment
        while self.within(i):
            yield i
            i += self.increment

    def count(self) -> int | float:
        """Return how many values ``walk`` yields without running it."""
        if self.single_shot:
            return 1 if self.within(self.counter()) else 0
        if self.limit is None:
            return math.inf
        if not self.within(self.start):
            return 0
        if _is_infinite(self.limit):
            return math.inf
        if isinstance(self.start, int) and isinstance(self.increment, int):
            return int((self.limit - self.start) // self.increment + 1)
        return sum(1 for _ in self.walk())


def _is_infinite(value: Number) -> bool:
    return isinstance(value, float) and math.isinf(value)


def _walk_up(start: Number, limit: Number) -> Iterator[Number]:
    i = start
    while i <= limit:
        yield i
        i += 1


def _walk_down(start: Number, limit: Number) -> Iterator[Number]:
    i = start
    while i >= limit:
        yield i
        i -= 1


def _span(start: Number, limit: Number) -> int:
    return max(0, math.floor(limit - start) + 1)


@breakable
def times(count: int, callback: NumberCallback | None = None) -> Any:
    """Call ``callback(i)`` for ``i`` in ``[0, count)`` and return ``count``."""
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError(f"times requires an int receiver ({type(count).__name__} given)")
    if callback is None:
        return to_enum(
            count,
            "times",
            walk=functools.partial(_walk_up, 0, count - 1),
            invoke=functools.partial(times, count),
            size=lambda: max(count, 0),
        )
    for i in _walk_up(0, count - 1):
        callback(i)
    return count


@breakable
def upto(start: Number, limit: Number, callback: NumberCallback | None = None) -> Any:
    """Call ``callback(i)`` for ``i = start, start + 1, ...`` while ``i <= limit``."""
    if callback is None:
        return to_enum(
            start,
            "upto",
            limit,
            walk=functools.partial(_walk_up, start, limit),
            invoke=functools.partial(upto, start),
            size=lambda: _span(start, limit),
        )
    for i in _walk_up(start, limit):
        callback(i)
    return start


@breakable
def downto(start: Number, limit: Number, callback: NumberCallback | None = None) -> Any:
    """Call ``callback(i)`` for ``i = start, start - 1, ...`` while ``i >= limit``."""
    if callback is None:
        return to_enum(
            start,
            "downto",
            limit,
            walk=functools.partial(_walk_down, start, limit),
            invoke=functools.partial(downto, start),
            size=lambda: _span(limit, start),
        )
    for i in _walk_down(start, limit):
        callback(i)
    return start


@breakable
def step(
    start: Number,
    limit: Number | None = None,
    increment: Number = 1,
    callback: NumberCallback | None = None,
) -> Any:
    """Call ``callback(i)`` from ``start`` towards ``limit`` in ``increment`` strides.

    A zero increment raises ``ArgumentError`` before anything else happens,
    including when no callback is given. With ``limit=None`` the loop never
    ends on its own: the callback has to raise ``Break`` (or any other
    exception) to stop it.
    """
    spec = StepSpec(start=start, limit=limit, increment=increment)
    if callback is None:
        return to_enum(
            start,
            "step",
            limit,
            increment,
            walk=spec.walk,
            invoke=functools.partial(step, start),
            size=spec.count,
        )
    if spec.unbounded and not spec.single_shot:
        logger.debug(
            "unbounded step started",
            extra={"data": {"start": start, "increment": increment}},
        )
    for i in spec.walk():
        callback(i)
    return start


__all__ = ["StepSpec", "times", "upto", "downto", "step"]
