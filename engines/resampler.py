"""Export resampling and load-time canvas fit."""

import logging
import math
from typing import Tuple

import cv2

from models.errors import InvalidParameterError
from models.pixel_buffer import PixelBuffer, check_buffer

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def export_size(width: int, height: int, scale_factor: float) -> Tuple[int, int]:
    """Output dimensions for an export scale, never smaller than 1x1."""
    return (max(1, round_half_up(width * scale_factor)), max(1, round_half_up(height * scale_factor)))


def export_buffer(buffer: PixelBuffer, scale_factor: float) -> PixelBuffer:
    """Nearest-neighbor resample for export, keeping pixel edges hard."""
    check_buffer(buffer)
    if not (isinstance(scale_factor, (int, float)) and math.isfinite(scale_factor) and scale_factor > 0):
        raise InvalidParameterError(f"Export scale must be > 0, got {scale_factor!r}")
    if buffer.is_empty:
        return buffer

    new_w, new_h = export_size(buffer.width, buffer.height, scale_factor)
    if (new_w, new_h) == buffer.size:
        return buffer

    logger.debug("Exporting %dx%d at x%.2f -> %dx%d", buffer.width, buffer.height, scale_factor, new_w, new_h)
    resized = cv2.resize(buffer.copy(), (new_w, new_h), interpolation=cv2.INTER_NEAREST)
    return PixelBuffer(width=new_w, height=new_h, pixels=resized.reshape(new_h, new_w, 4))


def compute_fit(w: int, h: int, max_w: int, max_h: int) -> Tuple[int, int]:
    """Dimensions that fit within max_w x max_h, preserving aspect ratio. Never enlarges."""
    if w <= max_w and h <= max_h:
        return (w, h)
    ratio = min(max_w / w, max_h / h)
    return (max(1, int(w * ratio)), max(1, int(h * ratio)))


def fit_to_canvas(buffer: PixelBuffer, max_size: Tuple[int, int]) -> PixelBuffer:
    """Shrink an oversized input onto the working canvas using area averaging."""
    check_buffer(buffer)
    max_w, max_h = max_size
    new_w, new_h = compute_fit(buffer.width, buffer.height, max_w, max_h)
    if (new_w, new_h) == buffer.size:
        return buffer

    logger.info("Fitting %dx%d input to %dx%d canvas", buffer.width, buffer.height, new_w, new_h)
    resized = cv2.resize(buffer.copy(), (new_w, new_h), interpolation=cv2.INTER_AREA)
    return PixelBuffer(width=new_w, height=new_h, pixels=resized.reshape(new_h, new_w, 4))
