"""Interior box blur on RGB channels."""

import logging
import math

import numpy as np

from models.pixel_buffer import PixelBuffer, check_buffer
from utils.constants import BLUR_STRENGTH_STEP

logger = logging.getLogger(__name__)


def blur_radius(strength: float) -> int:
    """Radius for a 0-100 strength: 1-24 -> 1, 25-49 -> 2, 50-74 -> 3, 75-99 -> 4, 100 -> 5."""
    return math.floor(strength / BLUR_STRENGTH_STEP) + 1


def box_blur_array(pixels: np.ndarray, radius: int) -> np.ndarray:
    """Box blur of an (h, w, 4) array, returning a new array.

    Every pixel at least ``radius`` away from all edges gets the rounded mean
    of its (2r+1)^2 neighborhood, read from the unblurred input. Edge pixels
    and the alpha channel are copied unchanged.
    """
    out = pixels.copy()
    h, w = pixels.shape[:2]
    if radius < 1 or h <= 2 * radius or w <= 2 * radius:
        return out

    k = 2 * radius + 1
    sat = np.zeros((h + 1, w + 1, 3), dtype=np.int64)
    sat[1:, 1:] = pixels[:, :, :3].astype(np.int64).cumsum(axis=0).cumsum(axis=1)
    sums = sat[k:, k:] - sat[:-k, k:] - sat[k:, :-k] + sat[:-k, :-k]

    count = k * k
    out[radius:h - radius, radius:w - radius, :3] = (2 * sums + count) // (2 * count)
    return out


def apply_box_blur(buffer: PixelBuffer, radius: int) -> PixelBuffer:
    check_buffer(buffer)
    logger.debug("Box blur radius %d on %dx%d", radius, buffer.width, buffer.height)
    blurred = box_blur_array(buffer.pixels, int(radius))
    return PixelBuffer(width=buffer.width, height=buffer.height, pixels=blurred)
