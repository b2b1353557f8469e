import numpy as np
import pytest

from escapetime import (
    BOUNDED,
    GrayscaleProfile,
    InvalidIterationBudget,
    InvalidViewport,
    PixelBuffer,
    Viewport,
    render,
    render_iterations,
)


@pytest.fixture
def standard_viewport():
    return Viewport.from_bounds(complex(-2.0, 1.5), complex(1.0, -1.5), 100, 100)


def test_center_of_standard_window_is_bounded(standard_viewport):
    grid = render_iterations(standard_viewport, 100)
    assert grid.codes.shape == (100, 100)
    assert grid.result_at(50, 50) is BOUNDED
    assert grid.bounded[50, 50]


def test_corners_of_standard_window_escape(standard_viewport):
    grid = render_iterations(standard_viewport, 100)
    assert not grid.bounded[0, 0]
    assert grid.result_at(0, 0).iterations >= 1


def test_backends_agree():
    viewport = Viewport.from_scale_factor(complex(-0.2, 0.1), 0.8, 24, 16)
    fast = render_iterations(viewport, 40, backend="tensorflow")
    slow = render_iterations(viewport, 40, backend="python")
    np.testing.assert_array_equal(fast.codes, slow.codes)


def test_codes_within_budget(standard_viewport):
    grid = render_iterations(standard_viewport, 30)
    assert grid.codes.min() >= 0
    assert grid.codes.max() <= 30


def test_render_is_deterministic(standard_viewport):
    first = render(standard_viewport, 60)
    second = render(standard_viewport, 60)
    assert first is not second
    np.testing.assert_array_equal(first.samples, second.samples)


def test_pixel_buffer_layout(standard_viewport):
    buffer = render(standard_viewport, 100)
    assert isinstance(buffer, PixelBuffer)
    assert len(buffer) == 100 * 100
    assert buffer.samples.shape == (100 * 100, 1)
    assert buffer.samples.dtype == np.uint8
    assert buffer.row_order == "top-to-bottom"
    assert buffer.bounded_value == (0,)
    assert buffer[50 * 100 + 50] == (0,)
    assert buffer.to_array().shape == (100, 100)


def test_rows_run_top_to_bottom():
    # Asymmetric window: the top row lies far above the set, the bottom row crosses it
    viewport = Viewport.from_bounds(complex(-2.0, 3.0), complex(1.0, 0.0), 30, 30)
    grid = render_iterations(viewport, 50)
    assert not grid.bounded[0].any()
    assert grid.bounded[-1].any()


def test_rgb_profile_buffer(standard_viewport):
    buffer = render(standard_viewport, 50, GrayscaleProfile(channels=3))
    assert buffer.channels == 3
    assert buffer.samples.shape == (100 * 100, 3)
    assert buffer.to_array().shape == (100, 100, 3)
    assert buffer.bounded_value == (0, 0, 0)


def test_single_pixel_render():
    buffer = render(Viewport(0j, 1.0, 1.0, 1, 1), 10)
    assert len(buffer) == 1
    assert buffer[0] == (0,)


@pytest.mark.parametrize("max_iterations", [0, -5])
def test_invalid_budget_rejected(standard_viewport, max_iterations):
    with pytest.raises(InvalidIterationBudget):
        render(standard_viewport, max_iterations)


@pytest.mark.parametrize("width, height", [(0, 10), (10, 0)])
def test_degenerate_resolution_rejected(width, height):
    with pytest.raises(InvalidViewport):
        render(Viewport(complex(-2.0, 1.5), 3.0, 3.0, width, height), 10)


def test_unknown_backend(standard_viewport):
    with pytest.raises(ValueError):
        render_iterations(standard_viewport, 10, backend="cuda")


@pytest.mark.parametrize("backend", ["tensorflow", "python"])
def test_budget_beyond_int32_rejected_by_both_backends(backend):
    with pytest.raises(InvalidIterationBudget):
        render_iterations(Viewport(complex(3.0, 0.0), 1.0, 1.0, 2, 2), 2 ** 31, backend=backend)
