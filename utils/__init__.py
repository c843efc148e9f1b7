"""Shared utilities."""

from .constants import HISTORY_LIMIT, MAX_CANVAS_SIZE, TOLERANCE_SCALE
from .metrics import Timer, ProcessingStats, compute_stats, compute_psnr
from .test_images import generate_checkerboard, generate_gradient, generate_noisy_sprite, generate_random
from .image_io import load_image, save_image, format_file_size

__all__ = [
    'HISTORY_LIMIT',
    'MAX_CANVAS_SIZE',
    'TOLERANCE_SCALE',
    'Timer',
    'ProcessingStats',
    'compute_stats',
    'compute_psnr',
    'generate_checkerboard',
    'generate_gradient',
    'generate_noisy_sprite',
    'generate_random',
    'load_image',
    'save_image',
    'format_file_size',
]
