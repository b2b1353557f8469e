"""Escape-time classification of sample points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import tensorflow as tf

from .errors import InvalidIterationBudget

ESCAPE_RADIUS = 2.0
ESCAPE_RADIUS_SQUARED = ESCAPE_RADIUS * ESCAPE_RADIUS

# Iteration code used for points that never escape.
BOUNDED_CODE = 0

# Counters run in int32 on the TensorFlow backend.
MAX_ITERATIONS = int(np.iinfo(np.int32).max)


@dataclass(frozen=True)
class Escaped:
    """The orbit left the escape radius on step ``iterations`` (counted from 1)."""

    iterations: int


@dataclass(frozen=True)
class Bounded:
    """The orbit stayed inside the escape radius for the whole budget."""


BOUNDED = Bounded()

IterationResult = Union[Escaped, Bounded]


def check_iteration_budget(max_iterations: int) -> None:
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)):
        raise InvalidIterationBudget(max_iterations)
    if max_iterations <= 0:
        raise InvalidIterationBudget(max_iterations)
    if max_iterations > MAX_ITERATIONS:
        raise InvalidIterationBudget(max_iterations, f"at most {MAX_ITERATIONS}")


def to_code(result: IterationResult) -> int:
    if isinstance(result, Escaped):
        return result.iterations
    return BOUNDED_CODE


def from_code(code: int) -> IterationResult:
    code = int(code)
    if code == BOUNDED_CODE:
        return BOUNDED
    return Escaped(code)


def evaluate(c: complex, max_iterations: int) -> IterationResult:
    """Iterate ``z <- z**2 + c`` from zero until ``|z| > 2`` or the budget runs out.

    Float64 arithmetic bounds how deep a zoom can be resolved; beyond roughly
    1e-13 plane units per pixel neighbouring samples collapse together.
    """

    check_iteration_budget(max_iterations)
    cr = float(c.real)
    ci = float(c.imag)
    zr = 0.0
    zi = 0.0
    for n in range(1, int(max_iterations) + 1):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi > ESCAPE_RADIUS_SQUARED:
            return Escaped(n)
    return BOUNDED


@tf.function
def _escape_step(
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
    escaped: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every point that is still inside the escape radius by one step."""

    zr_new = zr * zr - zi * zi + cr
    zi_new = 2.0 * zr * zi + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    counts = counts + tf.cast(active, tf.int32)
    radius_sq = tf.constant(ESCAPE_RADIUS_SQUARED, dtype=zr.dtype)
    just_escaped = tf.logical_and(active, zr * zr + zi * zi > radius_sq)
    escaped = tf.logical_or(escaped, just_escaped)
    active = tf.logical_and(active, tf.logical_not(just_escaped))
    return zr, zi, counts, active, escaped


@tf.function
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, max_iterations: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    """Iterate with a TensorFlow while loop until the budget is spent or every point escaped."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    counts = tf.zeros_like(cr, tf.int32)
    active = tf.ones_like(cr, tf.bool)
    escaped = tf.zeros_like(cr, tf.bool)

    def cond(i, zr, zi, counts, active, escaped):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zr, zi, counts, active, escaped):
        zr, zi, counts, active, escaped = _escape_step(zr, zi, cr, ci, counts, active, escaped)
        return i + 1, zr, zi, counts, active, escaped

    _, _, _, counts, _, escaped = tf.while_loop(cond, body, (i, zr, zi, counts, active, escaped))
    return counts, escaped


def evaluate_grid(
    re: np.ndarray,
    im: np.ndarray,
    max_iterations: int,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Vectorized :func:`evaluate` returning int32 iteration codes (0 for bounded points)."""

    check_iteration_budget(max_iterations)
    re = np.asarray(re, dtype=np.float64)
    im = np.asarray(im, dtype=np.float64)
    if re.shape != im.shape:
        raise ValueError(f"shape mismatch between real {re.shape} and imaginary {im.shape} parts")
    if re.size == 0:
        return np.zeros(re.shape, dtype=np.int32)

    with tf.device(device if device is not None else "/CPU:0"):
        cr = tf.convert_to_tensor(re, dtype=tf.float64)
        ci = tf.convert_to_tensor(im, dtype=tf.float64)
        budget = tf.constant(int(max_iterations), dtype=tf.int32)
        counts, escaped = _escape_run(cr, ci, budget)
        codes = tf.where(escaped, counts, tf.zeros_like(counts))

    return codes.numpy().astype(np.int32, copy=False)
