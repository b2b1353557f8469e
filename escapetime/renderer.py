"""Rendering of whole viewports into iteration grids and pixel buffers."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .evaluator import (
    BOUNDED_CODE,
    IterationResult,
    check_iteration_budget,
    evaluate,
    evaluate_grid,
    from_code,
    to_code,
)
from .profiles import ColorProfile, GrayscaleProfile
from .viewport import Viewport, pixel_to_complex, sample_grid

logger = logging.getLogger(__name__)

BACKENDS = ("tensorflow", "python")
ROW_ORDER = "top-to-bottom"


@dataclass(frozen=True)
class IterationGrid:
    """Iteration codes for every pixel of a viewport, shaped ``(height, width)``."""

    codes: np.ndarray
    viewport: Viewport
    max_iterations: int

    def result_at(self, x: int, y: int) -> IterationResult:
        return from_code(self.codes[y, x])

    @property
    def bounded(self) -> np.ndarray:
        return self.codes == BOUNDED_CODE


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major samples for a rendered viewport.

    ``samples`` has shape ``(width * height, channels)``; index
    ``y * width + x`` holds pixel ``(x, y)`` and row 0 is the top of the
    viewport. Bounded pixels hold ``bounded_value``.
    """

    samples: np.ndarray
    width: int
    height: int
    channels: int
    bounded_value: tuple[int, ...]
    row_order: str = ROW_ORDER

    def __len__(self) -> int:
        return self.width * self.height

    def __getitem__(self, index: int) -> tuple[int, ...]:
        return tuple(int(v) for v in self.samples[index])

    def to_array(self) -> np.ndarray:
        """The samples reshaped for image containers."""
        if self.channels == 1:
            return self.samples.reshape(self.height, self.width)
        return self.samples.reshape(self.height, self.width, self.channels)


def _python_codes(viewport: Viewport, max_iterations: int) -> np.ndarray:
    codes = np.zeros((viewport.height, viewport.width), dtype=np.int32)
    for y in range(viewport.height):
        for x in range(viewport.width):
            codes[y, x] = to_code(evaluate(pixel_to_complex(x, y, viewport), max_iterations))
    return codes


def render_iterations(
    viewport: Viewport,
    max_iterations: int,
    *,
    backend: str = "tensorflow",
    device: Optional[str] = None,
) -> IterationGrid:
    """Evaluate every pixel of ``viewport``."""

    check_iteration_budget(max_iterations)
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}'. Valid choices: {', '.join(BACKENDS)}.")

    logger.debug(
        "rendering %dx%d from %s, %s plane units/pixel, max_iterations=%d, backend=%s",
        viewport.width, viewport.height, viewport.origin, viewport.scale, max_iterations, backend,
    )
    start = time.perf_counter()
    if backend == "tensorflow":
        re, im = sample_grid(viewport)
        codes = evaluate_grid(re, im, max_iterations, device=device)
    else:
        codes = _python_codes(viewport, max_iterations)
    logger.debug("evaluated %d samples in %.3fs", codes.size, time.perf_counter() - start)

    return IterationGrid(codes=codes, viewport=viewport, max_iterations=int(max_iterations))


def to_pixel_buffer(grid: IterationGrid, profile: Optional[ColorProfile] = None) -> PixelBuffer:
    profile = profile if profile is not None else GrayscaleProfile()
    mapped = profile.map_codes(grid.codes, grid.max_iterations)
    viewport = grid.viewport
    samples = np.ascontiguousarray(mapped.reshape(viewport.width * viewport.height, profile.channels))
    return PixelBuffer(
        samples=samples,
        width=viewport.width,
        height=viewport.height,
        channels=profile.channels,
        bounded_value=tuple(profile.bounded_value),
    )


def render(
    viewport: Viewport,
    max_iterations: int,
    profile: Optional[ColorProfile] = None,
    *,
    backend: str = "tensorflow",
    device: Optional[str] = None,
) -> PixelBuffer:
    """Render ``viewport`` into a fresh :class:`PixelBuffer`."""

    grid = render_iterations(viewport, max_iterations, backend=backend, device=device)
    return to_pixel_buffer(grid, profile)
