"""Public API for escape-time rendering of the Mandelbrot set."""

from .errors import EscapeTimeError, InvalidIterationBudget, InvalidViewport
from .evaluator import (
    BOUNDED,
    ESCAPE_RADIUS,
    Bounded,
    Escaped,
    IterationResult,
    evaluate,
    evaluate_grid,
)
from .profiles import ColorProfile, GrayscaleProfile, get_profile
from .renderer import IterationGrid, PixelBuffer, render, render_iterations
from .viewport import Viewport, pixel_to_complex, sample_grid

__all__ = [
    "BOUNDED",
    "Bounded",
    "ColorProfile",
    "ESCAPE_RADIUS",
    "EscapeTimeError",
    "Escaped",
    "GrayscaleProfile",
    "InvalidIterationBudget",
    "InvalidViewport",
    "IterationGrid",
    "IterationResult",
    "PixelBuffer",
    "Viewport",
    "evaluate",
    "evaluate_grid",
    "get_profile",
    "pixel_to_complex",
    "render",
    "render_iterations",
    "sample_grid",
]
