"""Greedy first-match color quantization."""

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from scipy.spatial.distance import cdist

from models.pixel_buffer import PixelBuffer, check_buffer
from utils.constants import QUANTIZE_CHUNK, TOLERANCE_SCALE

logger = logging.getLogger(__name__)

# First scan window while the palette can still grow. After a new palette
# entry the window is twice the pixels that step consumed; it doubles after
# each window without one
_GROWTH_WINDOW = 64


@dataclass(frozen=True)
class QuantizationResult:
    """Quantized buffer plus the palette it was built from.

    ``unmatched_when_full`` counts pixels left as-is because the palette was
    full and no entry was within tolerance. The number of distinct output
    colors is at most ``len(palette) + unmatched_when_full``.
    """

    buffer: PixelBuffer
    palette: List[Tuple[int, int, int]]
    unmatched_when_full: int


def tolerance_radius(tolerance: float) -> float:
    """Convert a 0-100 tolerance to a 0-255 RGB distance."""
    return float(tolerance) * TOLERANCE_SCALE


def quantize_colors(buffer: PixelBuffer, tolerance: float, max_colors: int) -> QuantizationResult:
    """Snap pixels to the first palette color within tolerance, in row-major order.

    A pixel that matches nothing joins the palette (unchanged) while there is
    room; once the palette holds max_colors entries, unmatched pixels are
    left as they are. Earlier pixels are never revisited. Alpha is untouched.

    Equivalent to walking pixels one at a time; pixels are matched in windows
    and the window is cut at every pixel that grows the palette.
    """
    check_buffer(buffer)
    max_colors = max(1, int(max_colors))
    radius = tolerance_radius(tolerance)

    pixels = buffer.copy()
    flat = pixels.reshape(-1, 4)
    colors = flat[:, :3].astype(np.float64)
    n = colors.shape[0]

    palette = np.empty((0, 3), dtype=np.float64)
    unmatched_when_full = 0
    window = _GROWTH_WINDOW
    pos = 0

    while pos < n:
        full = len(palette) >= max_colors
        end = min(pos + (QUANTIZE_CHUNK if full else window), n)
        chunk = colors[pos:end]

        if len(palette):
            dist = cdist(chunk, palette)
            within = dist < radius
            matched = within.any(axis=1)
            first = within.argmax(axis=1)
        else:
            dist = None
            matched = np.zeros(len(chunk), dtype=bool)
            first = np.zeros(len(chunk), dtype=np.intp)

        if not full:
            present = (dist == 0).any(axis=1) if dist is not None else matched
            grows = np.flatnonzero(~matched & ~present)
            if grows.size:
                stop = int(grows[0])
                _assign(flat, pos, matched[:stop], first[:stop], palette)
                palette = np.vstack([palette, chunk[stop]])
                pos += stop + 1
                window = min(2 * (stop + 1), QUANTIZE_CHUNK)
                continue
            window = min(window * 2, QUANTIZE_CHUNK)
        else:
            unmatched_when_full += int(np.count_nonzero(~matched))

        _assign(flat, pos, matched, first, palette)
        pos = end

    logger.debug("Quantized %d pixels to %d palette colors (tolerance %.1f, %d unmatched)",
                 n, len(palette), radius, unmatched_when_full)

    result = PixelBuffer(width=buffer.width, height=buffer.height, pixels=pixels)
    entries = [tuple(int(c) for c in color) for color in palette]
    return QuantizationResult(buffer=result, palette=entries, unmatched_when_full=unmatched_when_full)


def _assign(flat: np.ndarray, start: int, matched: np.ndarray, first: np.ndarray, palette: np.ndarray) -> None:
    if not matched.any():
        return
    rows = start + np.flatnonzero(matched)
    flat[rows, :3] = palette[first[matched]].astype(np.uint8)
