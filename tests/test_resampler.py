"""Tests for export resampling and canvas fit."""

import numpy as np
import pytest
from models.errors import InvalidParameterError
from models.pixel_buffer import PixelBuffer
from engines.resampler import compute_fit, export_buffer, export_size, fit_to_canvas
from utils.test_images import generate_checkerboard, generate_random


def test_export_dimensions_round_half_up():
    assert export_size(10, 7, 1.5) == (15, 11)
    assert export_size(3, 3, 0.5) == (2, 2)
    assert export_size(100, 1, 0.001) == (1, 1)


def test_export_integer_scale_repeats_pixels():
    """Nearest neighbor: every source pixel becomes a solid scale x scale block."""
    buffer = generate_random(5, 4, seed=3)
    exported = export_buffer(buffer, 3)
    assert exported.size == (15, 12)
    np.testing.assert_array_equal(exported.pixels[::3, ::3], buffer.pixels)
    np.testing.assert_array_equal(exported.pixels[2::3, 2::3], buffer.pixels)


def test_export_keeps_colors_hard():
    """No new colors appear when exporting."""
    buffer = generate_checkerboard(32, square=4)
    exported = export_buffer(buffer, 2.5)
    assert exported.size == (80, 80)
    assert exported.distinct_colors() == buffer.distinct_colors()


def test_export_scale_one_is_identity():
    buffer = generate_random(6, 6)
    assert export_buffer(buffer, 1.0) == buffer


def test_export_rejects_bad_scale():
    buffer = generate_random(6, 6)
    for bad in (0, -2.0, float('nan')):
        with pytest.raises(InvalidParameterError):
            export_buffer(buffer, bad)


def test_compute_fit_never_enlarges():
    assert compute_fit(300, 200, 600, 600) == (300, 200)
    assert compute_fit(1200, 900, 600, 600) == (600, 450)
    assert compute_fit(300, 1200, 600, 600) == (150, 600)


def test_fit_to_canvas():
    buffer = generate_random(800, 400)
    fitted = fit_to_canvas(buffer, (600, 600))
    assert fitted.size == (600, 300)
    assert fit_to_canvas(fitted, (600, 600)) is fitted


def test_export_empty_buffer_unchanged():
    empty = PixelBuffer(width=0, height=5, pixels=np.zeros(0, dtype=np.uint8))
    assert export_buffer(empty, 2.0) is empty
