"""Numeric ranges with coverage checks, sizing and stepped iteration."""

from __future__ import annotations

import functools
import math
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mapstep.errors import ArgumentError
from mapstep.numeric.stepper import StepSpec
from mapstep.protocol import breakable, to_enum

if TYPE_CHECKING:
    from mapstep.types import Number, NumberCallback

_FLOAT_EPSILON = sys.float_info.epsilon


def _compare(left: Any, right: Any) -> int | None:
    """Three-way comparison; ``None`` when the values cannot be ordered."""
    try:
        if left < right:
            return -1
        if left > right:
            return 1
        if left == right:
            return 0
    except TypeError:
        return None
    return None


def _less(left: Any, right: Any, exclusive: bool) -> bool:
    """``left < right``, or ``left <= right`` when not ``exclusive``."""
    outcome = _compare(left, right)
    if outcome is None or outcome > 0:
        return False
    if outcome == 0:
        return not exclusive
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class NumericRange:
    """``begin..end`` (or ``begin...end`` with ``exclude_end``); ``None`` leaves a side open."""

    begin: Any = None
    end: Any = None
    exclude_end: bool = False

    def is_empty(self) -> bool:
        """Return ``True`` when no value can satisfy both bounds."""
        if self.begin is None or self.end is None:
            return False
        outcome = _compare(self.begin, self.end)
        return outcome is None or outcome > 0 or (outcome == 0 and self.exclude_end)

    def cover(self, value: Any) -> bool:
        """Return ``True`` when ``value`` lies within the bounds, or a range overlaps them."""
        if self.begin is None and self.end is None:
            return True
        if isinstance(value, NumericRange):
            return self._cover_range(value)
        if self.begin is not None and not _less(self.begin, value, exclusive=False):
            return False
        if self.end is None:
            return True
        return _less(value, self.end, self.exclude_end)

    def _cover_range(self, other: NumericRange) -> bool:
        if other.begin is None and other.end is None:
            return True
        if self.end is None:
            if other.end is None:
                return _compare(self.begin, other.begin) is not None
            return not _less(other.end, self.begin, other.exclude_end)
        if self.begin is None:
            if other.begin is None:
                return _compare(self.end, other.end) is not None
            return not _less(self.end, other.begin, self.exclude_end)
        if other.end is None:
            return _less(other.begin, self.end, self.exclude_end)
        if other.begin is None:
            return _less(self.begin, other.end, other.exclude_end)
        if _less(self.end, other.begin, self.exclude_end):
            return False
        return not _less(other.end, self.begin, other.exclude_end)

    def size(self) -> int | float | None:
        """Return the number of integers the range iterates over.

        Float bounds are sized with a small epsilon tolerance so that
        ``0..0.3`` style ranges built from rounded values do not lose their
        last element.
        """
        if isinstance(self.begin, float):
            raise TypeError("can't iterate from float")
        if self.begin is None:
            raise TypeError("can't iterate from None")
        if _is_number(self.begin) and self.end is None:
            return math.inf
        if not (_is_number(self.begin) and _is_number(self.end)):
            return None

        begin = float(self.begin)
        end = float(self.end)
        n = end - begin
        err = min((abs(begin) + abs(end) + abs(end - begin)) * _FLOAT_EPSILON, 0.5)
        if self.exclude_end:
            if n <= 0:
                return 0
            n = 0 if n < 1 else math.floor(n - err)
        else:
            if n < 0:
                return 0
            n = math.floor(n + err)
        if math.isinf(n + 1):
            return math.inf
        return int(n) + 1

    def _walk(self) -> Iterator[int]:
        i = self.begin
        while self.end is None or _less(i, self.end, self.exclude_end):
            yield i
            i += 1

    def _require_int_begin(self) -> None:
        if isinstance(self.begin, bool) or not isinstance(self.begin, int):
            raise TypeError(f"can't iterate from {type(self.begin).__name__}")

    @breakable
    def each(self, callback: NumberCallback | None = None) -> Any:
        """Call ``callback(i)`` for every integer in the range and return ``self``."""
        self._require_int_begin()
        if callback is None:
            return to_enum(self, "each", walk=self._walk, invoke=self.each, size=self.size)
        for i in self._walk():
            callback(i)
        return self

    def _walk_step(self, spec: StepSpec) -> Iterator[Number]:
        for value in spec.walk():
            if self.exclude_end and value == self.end:
                return
            yield value

    @breakable
    def step(self, increment: Number = 1, callback: NumberCallback | None = None) -> Any:
        """Call ``callback`` from ``begin`` to ``end`` in ``increment`` strides and return ``self``."""
        if self.begin is None:
            raise TypeError("can't iterate from None")
        if increment < 0:
            raise ArgumentError("step can't be negative")
        spec = StepSpec(start=self.begin, limit=self.end, increment=increment)
        walk = functools.partial(self._walk_step, spec)
        if callback is None:
            return to_enum(
                self,
                "step",
                increment,
                walk=walk,
                invoke=self.step,
                size=None if self.exclude_end else spec.count,
            )
        for value in walk():
            callback(value)
        return self

    def __repr__(self) -> str:
        dots = "..." if self.exclude_end else ".."
        begin = "" if self.begin is None else repr(self.begin)
        end = "" if self.end is None else repr(self.end)
        return f"NumericRange({begin}{dots}{end})"


__all__ = ["NumericRange"]
