"""Tests for block downsampling."""

import numpy as np
import pytest
from models.errors import InvalidParameterError
from models.operation_params import DownsampleParams
from models.pixel_buffer import PixelBuffer
from engines.block_averager import align_pixels, downsample
from utils.test_images import generate_random


def test_output_has_exactly_cols_times_rows_pixels():
    """Dimension contract, including grids finer than the source."""
    buffer = generate_random(23, 17)
    for cols, rows in [(1, 1), (4, 3), (23, 17), (10, 40), (50, 2)]:
        result = downsample(buffer, cols, rows)
        assert result.size == (cols, rows)
        assert result.pixels.shape == (rows, cols, 4)


def test_downsample_then_align_one_is_unchanged():
    """100x100 -> 10x10, then align at block 1 leaves it as is."""
    buffer = generate_random(100, 100, seed=11)
    small = downsample(buffer, 10, 10)
    assert small.size == (10, 10)
    assert align_pixels(small, 1) == small


def test_even_grid_matches_alignment():
    """When blocks divide evenly, downsampling equals sampling the aligned image."""
    buffer = generate_random(12, 8, seed=5)
    small = downsample(buffer, 3, 2)
    aligned = align_pixels(buffer, 4)
    np.testing.assert_array_equal(small.pixels, aligned.pixels[::4, ::4])


def test_upsampling_repeats_source_pixels():
    """More cells than pixels: each cell samples one source pixel."""
    pixels = np.array([[[10, 20, 30, 255], [200, 100, 50, 128]]], dtype=np.uint8)
    result = downsample(PixelBuffer.from_array(pixels), 4, 1)
    assert result.size == (4, 1)
    np.testing.assert_array_equal(result.pixels[0, 0], pixels[0, 0])
    np.testing.assert_array_equal(result.pixels[0, 1], pixels[0, 0])
    np.testing.assert_array_equal(result.pixels[0, 2], pixels[0, 1])
    np.testing.assert_array_equal(result.pixels[0, 3], pixels[0, 1])


def test_alpha_is_averaged():
    """Alpha is averaged like the color channels."""
    pixels = np.zeros((1, 2, 4), dtype=np.uint8)
    pixels[0, 0, 3] = 255
    result = downsample(PixelBuffer.from_array(pixels), 1, 1)
    assert result.pixels[0, 0, 3] == 128


def test_invalid_grid_rejected():
    """cols/rows below 1 are rejected."""
    buffer = generate_random(8, 8)
    with pytest.raises(InvalidParameterError):
        downsample(buffer, 0, 4)
    with pytest.raises(InvalidParameterError):
        DownsampleParams(cols=4, rows=-1)


def test_grid_from_block_size():
    """One output pixel per block, partial blocks included."""
    params = DownsampleParams.from_block_size(100, 75, 8)
    assert (params.cols, params.rows) == (13, 10)
    assert params.label == "Downsample to 13x10"


def test_empty_buffer_downsamples_to_blank_grid():
    empty = PixelBuffer(width=0, height=5, pixels=np.zeros(0, dtype=np.uint8))
    result = downsample(empty, 3, 2)
    assert result.size == (3, 2)
    assert (result.pixels == 0).all()
