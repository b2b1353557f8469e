"""Pixel grid to complex plane mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import InvalidViewport

# Window of the default framing, relative to the origin and before scaling.
DEFAULT_TOP_LEFT = complex(-2.0, 1.2)
DEFAULT_BOTTOM_RIGHT = complex(0.5, -1.2)


def _check_extent(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise InvalidViewport(name, value, "a real number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidViewport(name, value, "finite and > 0")


def _check_resolution(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidViewport(name, value, "an integer")
    if value < 1:
        raise InvalidViewport(name, value, ">= 1")


@dataclass(frozen=True)
class Viewport:
    """A window of the complex plane sampled on a ``width`` x ``height`` grid.

    ``origin`` is the top-left corner of the window. Pixel ``(0, 0)`` samples
    exactly that corner, x grows along the real axis and y grows *down* the
    imaginary axis, so row 0 is the top of the image.
    """

    origin: complex
    plane_width: float
    plane_height: float
    width: int
    height: int

    def __post_init__(self) -> None:
        origin = complex(self.origin)
        if not (math.isfinite(origin.real) and math.isfinite(origin.imag)):
            raise InvalidViewport("origin", self.origin, "a finite complex number")
        _check_extent("plane_width", self.plane_width)
        _check_extent("plane_height", self.plane_height)
        _check_resolution("width", self.width)
        _check_resolution("height", self.height)
        object.__setattr__(self, "origin", origin)
        object.__setattr__(self, "plane_width", float(self.plane_width))
        object.__setattr__(self, "plane_height", float(self.plane_height))
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))

    @classmethod
    def from_bounds(cls, top_left: complex, bottom_right: complex, width: int, height: int) -> "Viewport":
        top_left = complex(top_left)
        bottom_right = complex(bottom_right)
        return cls(
            origin=top_left,
            plane_width=bottom_right.real - top_left.real,
            plane_height=top_left.imag - bottom_right.imag,
            width=width,
            height=height,
        )

    @classmethod
    def from_center(
        cls,
        center: complex,
        plane_width: float,
        width: int,
        height: int,
        plane_height: Optional[float] = None,
    ) -> "Viewport":
        """Build a viewport around ``center``.

        Without ``plane_height`` the vertical extent follows the pixel aspect
        ratio so that pixels stay square.
        """

        _check_resolution("width", width)
        _check_resolution("height", height)
        _check_extent("plane_width", plane_width)
        if plane_height is None:
            plane_height = np.float64(plane_width) * np.float64(height / width)
        _check_extent("plane_height", float(plane_height))
        center = complex(center)
        origin = complex(center.real - plane_width / 2.0, center.imag + plane_height / 2.0)
        return cls(origin, plane_width, float(plane_height), width, height)

    @classmethod
    def from_scale_factor(cls, origin: complex, scale_factor: float, width: int, height: int) -> "Viewport":
        """Frame the default Mandelbrot window, scaled by ``scale_factor`` and shifted by ``origin``."""

        _check_extent("scale_factor", scale_factor)
        origin = complex(origin)
        return cls.from_bounds(
            origin + DEFAULT_TOP_LEFT * scale_factor,
            origin + DEFAULT_BOTTOM_RIGHT * scale_factor,
            width,
            height,
        )

    @property
    def resolution(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def scale(self) -> float:
        """Plane units per pixel along the real axis."""
        return self.plane_width / self.width

    @property
    def bottom_right(self) -> complex:
        return complex(self.origin.real + self.plane_width, self.origin.imag - self.plane_height)

    @property
    def center(self) -> complex:
        return complex(
            self.origin.real + self.plane_width / 2.0,
            self.origin.imag - self.plane_height / 2.0,
        )


def pixel_to_complex(x: int, y: int, viewport: Viewport) -> complex:
    """Return the sample point for pixel ``(x, y)``."""

    if not (0 <= x < viewport.width and 0 <= y < viewport.height):
        raise ValueError(
            f"pixel ({x}, {y}) outside of {viewport.width}x{viewport.height} viewport"
        )
    re = viewport.origin.real + (x / viewport.width) * viewport.plane_width
    im = viewport.origin.imag - (y / viewport.height) * viewport.plane_height
    return complex(re, im)


def sample_grid(viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    """Real and imaginary parts of every sample point, each shaped ``(height, width)``.

    Bit-identical to calling :func:`pixel_to_complex` for each pixel.
    """

    cols = np.arange(viewport.width, dtype=np.float64)
    rows = np.arange(viewport.height, dtype=np.float64)
    re = viewport.origin.real + (cols / np.float64(viewport.width)) * np.float64(viewport.plane_width)
    im = viewport.origin.imag - (rows / np.float64(viewport.height)) * np.float64(viewport.plane_height)
    re_grid, im_grid = np.meshgrid(re, im)
    return re_grid, im_grid
