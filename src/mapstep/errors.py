"""Exceptions shared across the iteration and transformation helpers."""

from __future__ import annotations


class MapStepError(Exception):
    """Base class for mapstep failures."""


class ArgumentError(MapStepError, ValueError):
    """Raised when an operation receives an argument it cannot iterate with."""


class ContainerTypeError(MapStepError, TypeError):
    """Raised when an associative container was required but something else was given."""

    def __init__(self, position: int, given: object) -> None:
        self.position = position
        self.given_type = type(given).__name__
        super().__init__(
            f"argument {position} must be an associative container ({self.given_type} given)"
        )


__all__ = [
    "MapStepError",
    "ArgumentError",
    "ContainerTypeError",
]
