import numpy as np
import pytest

from escapetime import InvalidViewport, Viewport, pixel_to_complex, sample_grid


def test_pixel_zero_is_top_left_corner():
    viewport = Viewport(complex(-2.0, 1.5), 3.0, 3.0, 100, 100)
    assert pixel_to_complex(0, 0, viewport) == complex(-2.0, 1.5)


def test_y_moves_down_the_imaginary_axis():
    viewport = Viewport(complex(-2.0, 1.5), 3.0, 3.0, 100, 100)
    top = pixel_to_complex(10, 0, viewport)
    below = pixel_to_complex(10, 1, viewport)
    right = pixel_to_complex(11, 0, viewport)
    assert below.imag < top.imag
    assert below.real == top.real
    assert right.real > top.real


def test_center_pixel_of_standard_window():
    viewport = Viewport.from_bounds(complex(-2.0, 1.5), complex(1.0, -1.5), 100, 100)
    assert pixel_to_complex(50, 50, viewport) == complex(-0.5, 0.0)


def test_single_pixel_samples_the_corner():
    viewport = Viewport(complex(0.25, -0.5), 1.0, 2.0, 1, 1)
    assert pixel_to_complex(0, 0, viewport) == complex(0.25, -0.5)


def test_single_row_spans_the_real_axis():
    viewport = Viewport(complex(-1.0, 0.0), 2.0, 1.0, 4, 1)
    points = [pixel_to_complex(x, 0, viewport) for x in range(4)]
    assert [p.real for p in points] == [-1.0, -0.5, 0.0, 0.5]
    assert all(p.imag == 0.0 for p in points)


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (4, 0), (0, 3)])
def test_pixel_outside_viewport(x, y):
    viewport = Viewport(0j, 1.0, 1.0, 4, 3)
    with pytest.raises(ValueError):
        pixel_to_complex(x, y, viewport)


def test_mapping_is_reproducible():
    viewport = Viewport.from_center(complex(-0.743643887037151, 0.13182590420533), 1e-6, 64, 48)
    assert pixel_to_complex(17, 31, viewport) == pixel_to_complex(17, 31, viewport)


def test_sample_grid_matches_pixel_mapping():
    viewport = Viewport.from_scale_factor(complex(0.1, -0.2), 0.7, 13, 7)
    re, im = sample_grid(viewport)
    assert re.shape == (7, 13)
    assert im.shape == (7, 13)
    for y in range(viewport.height):
        for x in range(viewport.width):
            assert complex(re[y, x], im[y, x]) == pixel_to_complex(x, y, viewport)


@pytest.mark.parametrize(
    "kwargs, parameter",
    [
        (dict(width=0), "width"),
        (dict(height=0), "height"),
        (dict(width=-3), "width"),
        (dict(width=2.5), "width"),
        (dict(plane_width=0.0), "plane_width"),
        (dict(plane_height=-1.0), "plane_height"),
        (dict(plane_width=float("inf")), "plane_width"),
        (dict(plane_height=float("nan")), "plane_height"),
    ],
)
def test_invalid_viewport(kwargs, parameter):
    fields = dict(origin=0j, plane_width=1.0, plane_height=1.0, width=10, height=10)
    fields.update(kwargs)
    with pytest.raises(InvalidViewport) as excinfo:
        Viewport(**fields)
    assert excinfo.value.parameter == parameter
    assert parameter in str(excinfo.value)


def test_invalid_viewport_is_a_value_error():
    with pytest.raises(ValueError):
        Viewport(0j, 1.0, 1.0, 0, 1)


def test_bounds_must_be_ordered():
    with pytest.raises(InvalidViewport):
        Viewport.from_bounds(complex(1.0, 1.0), complex(-1.0, -1.0), 10, 10)


def test_from_center_keeps_pixels_square():
    viewport = Viewport.from_center(complex(-0.75, 0.0), 3.0, 300, 200)
    assert viewport.plane_height == pytest.approx(2.0)
    assert viewport.center.real == pytest.approx(-0.75)
    assert viewport.center.imag == pytest.approx(0.0)
    assert viewport.scale == pytest.approx(viewport.plane_height / viewport.height)


def test_from_center_explicit_height():
    viewport = Viewport.from_center(0j, 2.0, 10, 10, plane_height=4.0)
    assert viewport.origin == complex(-1.0, 2.0)
    assert viewport.bottom_right == complex(1.0, -2.0)


def test_from_scale_factor_default_framing():
    viewport = Viewport.from_scale_factor(0j, 1.0, 250, 240)
    assert viewport.origin == complex(-2.0, 1.2)
    assert viewport.bottom_right.real == pytest.approx(0.5)
    assert viewport.bottom_right.imag == pytest.approx(-1.2)
    assert viewport.resolution == (250, 240)
    assert viewport.scale == pytest.approx(0.01)


def test_from_scale_factor_rejects_non_positive_scale():
    with pytest.raises(InvalidViewport) as excinfo:
        Viewport.from_scale_factor(0j, 0.0, 10, 10)
    assert excinfo.value.parameter == "scale_factor"


def test_fields_are_normalized():
    viewport = Viewport(1, 2, 3, np.int64(4), 5)
    assert isinstance(viewport.origin, complex)
    assert isinstance(viewport.plane_width, float)
    assert isinstance(viewport.width, int)


def test_numpy_integer_extents():
    viewport = Viewport(0j, np.int64(3), np.int32(2), 6, 4)
    assert viewport.plane_width == 3.0
    assert viewport.plane_height == 2.0
    assert viewport.scale == 0.5
