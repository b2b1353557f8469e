"""Mappings from iteration results to output samples."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .evaluator import BOUNDED_CODE, IterationResult, check_iteration_budget, to_code

CURVES = ("linear", "log")


class ColorProfile(ABC):
    """Turns iteration codes into ``channels``-wide uint8 samples."""

    channels: int
    bounded_value: tuple[int, ...]

    @abstractmethod
    def map_codes(self, codes: np.ndarray, max_iterations: int) -> np.ndarray:
        """Return a uint8 array shaped ``codes.shape + (channels,)``."""

    def sample(self, result: IterationResult, max_iterations: int) -> tuple[int, ...]:
        mapped = self.map_codes(np.array([to_code(result)], dtype=np.int32), max_iterations)
        return tuple(int(v) for v in mapped[0])


class GrayscaleProfile(ColorProfile):
    """Bounded points are black; escaped points ramp from 1 to 255 with the escape step.

    ``curve`` picks a linear or logarithmic ramp. ``channels=3`` repeats the
    level into R, G and B.
    """

    def __init__(self, curve: str = "linear", channels: int = 1) -> None:
        if curve not in CURVES:
            raise ValueError(f"Unknown curve '{curve}'. Valid choices: {', '.join(CURVES)}.")
        if channels not in (1, 3):
            raise ValueError(f"Grayscale samples have 1 or 3 channels, got {channels}.")
        self.curve = curve
        self.channels = channels
        self.bounded_value = (0,) * channels

    def __repr__(self) -> str:
        return f"GrayscaleProfile(curve={self.curve!r}, channels={self.channels})"

    def levels(self, codes: np.ndarray, max_iterations: int) -> np.ndarray:
        check_iteration_budget(max_iterations)
        codes = np.asarray(codes)
        n = np.clip(codes.astype(np.int64), 1, int(max_iterations))
        if max_iterations == 1:
            levels = np.full(n.shape, 255, dtype=np.int64)
        elif self.curve == "linear":
            # integer division keeps consecutive steps distinct up to 255 iterations
            levels = 1 + (254 * (n - 1)) // (int(max_iterations) - 1)
        else:
            ramp = np.log(n.astype(np.float64)) / np.log(np.float64(max_iterations))
            levels = 1 + np.floor(254.0 * np.clip(ramp, 0.0, 1.0)).astype(np.int64)
        levels = np.where(codes == BOUNDED_CODE, 0, levels)
        return levels.astype(np.uint8)

    def map_codes(self, codes: np.ndarray, max_iterations: int) -> np.ndarray:
        levels = self.levels(codes, max_iterations)
        return np.repeat(levels[..., np.newaxis], self.channels, axis=-1)


PROFILES = {
    "linear": lambda: GrayscaleProfile("linear"),
    "log": lambda: GrayscaleProfile("log"),
    "linear-rgb": lambda: GrayscaleProfile("linear", channels=3),
    "log-rgb": lambda: GrayscaleProfile("log", channels=3),
}


def get_profile(name: str) -> ColorProfile:
    try:
        factory = PROFILES[name]
    except KeyError:
        raise ValueError(f"Unknown profile '{name}'. Valid choices: {', '.join(sorted(PROFILES))}.") from None
    return factory()
