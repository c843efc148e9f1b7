"""Noise removal: palette quantization, then an optional box blur."""

import logging

from engines.blur import apply_box_blur, blur_radius
from engines.quantizer import QuantizationResult, quantize_colors
from models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def denoise_detailed(buffer: PixelBuffer, strength: float, tolerance: float, max_colors: int) -> QuantizationResult:
    """Like :func:`denoise` but also returns the palette used."""
    quantized = quantize_colors(buffer, tolerance, max_colors)
    if strength <= 0:
        return quantized

    radius = blur_radius(strength)
    blurred = apply_box_blur(quantized.buffer, radius)
    return QuantizationResult(
        buffer=blurred,
        palette=quantized.palette,
        unmatched_when_full=quantized.unmatched_when_full,
    )


def denoise(buffer: PixelBuffer, strength: float, tolerance: float, max_colors: int) -> PixelBuffer:
    """Reduce colors to at most max_colors palette entries, then blur if strength > 0.

    Quantization is greedy first-match (see quantize_colors); the blur only
    touches pixels at least one radius from every edge.
    """
    return denoise_detailed(buffer, strength, tolerance, max_colors).buffer
