"""Block averaging: grid alignment and downsampling."""

import logging
from typing import Tuple

import numpy as np

from models.errors import InvalidParameterError
from models.pixel_buffer import PixelBuffer, check_buffer

logger = logging.getLogger(__name__)


def fixed_block_starts(length: int, block_size: int) -> np.ndarray:
    """Start offsets of ``ceil(length/block_size)`` blocks; the last may be partial."""
    return np.arange(0, length, block_size, dtype=np.intp)


def proportional_cell_starts(length: int, cells: int) -> np.ndarray:
    """Start offsets of ``cells`` cells spread evenly over ``length`` pixels.

    Cell i covers ``[floor(i*length/cells), floor((i+1)*length/cells))``.
    When cells outnumber pixels, starts repeat and such cells hold one pixel.
    """
    return (np.arange(cells, dtype=np.int64) * length // cells).astype(np.intp)


def _cell_lengths(starts: np.ndarray, length: int) -> np.ndarray:
    ends = np.append(starts[1:], length)
    return np.maximum(ends - starts, 1)


def block_means(
    pixels: np.ndarray,
    row_starts: np.ndarray,
    col_starts: np.ndarray
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Rounded per-cell channel means.

    Returns (means, row_lengths, col_lengths). Means are uint8 shaped
    (len(row_starts), len(col_starts), channels), rounded half up.
    """
    h, w = pixels.shape[:2]
    wide = pixels.astype(np.int64)
    # reduceat yields a single element for repeated starts, matching length 1
    sums = np.add.reduceat(np.add.reduceat(wide, row_starts, axis=0), col_starts, axis=1)
    row_lengths = _cell_lengths(row_starts, h)
    col_lengths = _cell_lengths(col_starts, w)
    counts = np.outer(row_lengths, col_lengths)[:, :, None]
    means = (2 * sums + counts) // (2 * counts)
    return means.astype(np.uint8), row_lengths, col_lengths


def align_pixels(buffer: PixelBuffer, block_size: int) -> PixelBuffer:
    """Replace every block_size square with its average color.

    Dimensions are preserved. Edge blocks smaller than block_size average only
    the pixels they contain.
    """
    check_buffer(buffer)
    block = max(1, int(block_size))
    if buffer.is_empty or block == 1:
        return buffer

    row_starts = fixed_block_starts(buffer.height, block)
    col_starts = fixed_block_starts(buffer.width, block)
    logger.debug("Aligning %dx%d to %dpx grid (%dx%d blocks)",
                 buffer.width, buffer.height, block, len(col_starts), len(row_starts))

    means, row_lengths, col_lengths = block_means(buffer.pixels, row_starts, col_starts)
    aligned = np.repeat(np.repeat(means, row_lengths, axis=0), col_lengths, axis=1)
    return PixelBuffer(width=buffer.width, height=buffer.height, pixels=aligned)


def downsample(buffer: PixelBuffer, cols: int, rows: int) -> PixelBuffer:
    """Average the buffer onto a cols x rows grid, one pixel per cell.

    The per-axis block size is width/cols and height/rows, so the output
    replaces the canvas dimensions.
    """
    check_buffer(buffer)
    cols = int(cols)
    rows = int(rows)
    if cols < 1 or rows < 1:
        raise InvalidParameterError(f"Target grid must be at least 1x1, got {cols}x{rows}")
    if buffer.is_empty:
        return PixelBuffer(width=cols, height=rows, pixels=np.zeros((rows, cols, 4), dtype=np.uint8))

    row_starts = proportional_cell_starts(buffer.height, rows)
    col_starts = proportional_cell_starts(buffer.width, cols)
    logger.debug("Downsampling %dx%d to %dx%d", buffer.width, buffer.height, cols, rows)

    means, _, _ = block_means(buffer.pixels, row_starts, col_starts)
    return PixelBuffer(width=cols, height=rows, pixels=means)
