"""Pixel engines - pure computation, no GUI dependencies."""

from .block_averager import align_pixels, downsample, block_means
from .quantizer import quantize_colors, QuantizationResult
from .blur import apply_box_blur, blur_radius
from .denoiser import denoise, denoise_detailed
from .resampler import export_buffer, fit_to_canvas
from .pipeline import run_operation

__all__ = [
    'align_pixels',
    'downsample',
    'block_means',
    'quantize_colors',
    'QuantizationResult',
    'apply_box_blur',
    'blur_radius',
    'denoise',
    'denoise_detailed',
    'export_buffer',
    'fit_to_canvas',
    'run_operation',
]
