"""Validation errors raised before any sampling starts."""

from __future__ import annotations

from typing import Any


class EscapeTimeError(ValueError):
    """Base class for rejected render inputs."""


class InvalidViewport(EscapeTimeError):
    """A viewport extent or resolution violates its constraint."""

    def __init__(self, parameter: str, value: Any, constraint: str) -> None:
        self.parameter = parameter
        self.value = value
        self.constraint = constraint
        super().__init__(f"invalid viewport {parameter}={value!r}: must be {constraint}")


class InvalidIterationBudget(EscapeTimeError):
    """``max_iterations`` is not a positive integer."""

    def __init__(self, value: Any, constraint: str = "a positive integer") -> None:
        self.parameter = "max_iterations"
        self.value = value
        self.constraint = constraint
        super().__init__(f"invalid max_iterations={value!r}: must be {self.constraint}")
