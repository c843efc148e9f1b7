"""Image I/O using OpenCV."""

import math
from pathlib import Path

import cv2
import numpy as np

from models.pixel_buffer import PixelBuffer


def to_rgba(image: np.ndarray) -> np.ndarray:
    """Convert an OpenCV-decoded array (gray, BGR or BGRA) to RGBA uint8."""
    if image.dtype != np.uint8:
        image = cv2.convertScaleAbs(image, alpha=255.0 / max(float(image.max()), 1.0))
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)


def load_image(path: str) -> PixelBuffer:
    """Load image as an RGBA buffer, keeping any alpha channel."""
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError(f"Could not load image from {path}")
    return PixelBuffer.from_array(to_rgba(img))


def save_image(buffer: PixelBuffer, path: str, quality: int = 95) -> None:
    """Save RGBA buffer. Alpha is dropped for formats without it."""
    suffix = Path(path).suffix.lower()
    if suffix in ('.jpg', '.jpeg', '.bmp'):
        image = cv2.cvtColor(buffer.copy(), cv2.COLOR_RGBA2BGR)
    else:
        image = cv2.cvtColor(buffer.copy(), cv2.COLOR_RGBA2BGRA)

    params = []
    if suffix in ('.jpg', '.jpeg'):
        params = [cv2.IMWRITE_JPEG_QUALITY, int(quality)]
    elif suffix == '.webp':
        params = [cv2.IMWRITE_WEBP_QUALITY, int(quality)]

    if not cv2.imwrite(str(path), image, params):
        raise ValueError(f"Could not save image to {path}")


def format_file_size(size_bytes: int) -> str:
    """Human-readable size, e.g. '1.5 KB'."""
    if size_bytes <= 0:
        return "0 Bytes"
    units = ['Bytes', 'KB', 'MB', 'GB']
    i = min(int(math.floor(math.log(size_bytes, 1024))), len(units) - 1)
    value = round(size_bytes / (1024 ** i), 2)
    return f"{value:g} {units[i]}"
