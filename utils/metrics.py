"""Metrics: operation timing and before/after statistics."""

import time
from dataclasses import dataclass
from typing import Optional

import numpy as np
from skimage.metrics import peak_signal_noise_ratio

from models.pixel_buffer import PixelBuffer


class Timer:
    """Wall-clock timer for a single operation."""
    
    def __init__(self):
        self.elapsed_ms = 0.0
    
    def measure(self, func, *args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        self.elapsed_ms = (time.perf_counter() - start) * 1000.0
        return result


@dataclass
class ProcessingStats:
    """What an operation did to the image."""
    
    elapsed_ms: float
    colors_before: int
    colors_after: int
    changed_pixels: int
    total_pixels: int
    psnr: Optional[float]
    
    @property
    def color_reduction_pct(self) -> float:
        if self.colors_before == 0:
            return 0.0
        return 100.0 * (self.colors_before - self.colors_after) / self.colors_before
    
    @property
    def changed_pct(self) -> float:
        if self.total_pixels == 0:
            return 0.0
        return 100.0 * self.changed_pixels / self.total_pixels


def compute_psnr(before: PixelBuffer, after: PixelBuffer) -> Optional[float]:
    """PSNR over RGBA; None when sizes differ, inf when identical."""
    if before.size != after.size or before.is_empty:
        return None
    if np.array_equal(before.pixels, after.pixels):
        return float('inf')
    return float(peak_signal_noise_ratio(before.pixels, after.pixels, data_range=255))


def compute_stats(before: PixelBuffer, after: PixelBuffer, elapsed_ms: float = 0.0) -> ProcessingStats:
    if before.size == after.size:
        changed = int(np.count_nonzero(np.any(before.pixels != after.pixels, axis=2)))
    else:
        changed = after.width * after.height
    
    return ProcessingStats(
        elapsed_ms=elapsed_ms,
        colors_before=before.distinct_colors(),
        colors_after=after.distinct_colors(),
        changed_pixels=changed,
        total_pixels=after.width * after.height,
        psnr=compute_psnr(before, after),
    )
