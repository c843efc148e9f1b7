"""Synthetic RGBA images for demos and tests."""

import numpy as np

from models.pixel_buffer import PixelBuffer


def _rgba(rgb: np.ndarray, alpha: int = 255) -> np.ndarray:
    h, w = rgb.shape[:2]
    out = np.empty((h, w, 4), dtype=np.uint8)
    out[:, :, :3] = np.clip(rgb, 0, 255).astype(np.uint8)
    out[:, :, 3] = alpha
    return out


def generate_checkerboard(size: int = 256, square: int = 32) -> PixelBuffer:
    """High-contrast checkerboard - already block-uniform at multiples of square."""
    yy, xx = np.mgrid[0:size, 0:size]
    dark = ((yy // square + xx // square) % 2) == 0
    rgb = np.where(dark[:, :, None], [30, 30, 30], [220, 220, 220])
    return PixelBuffer.from_array(_rgba(rgb))


def generate_gradient(size: int = 256) -> PixelBuffer:
    """Smooth diagonal gradient - every pixel a slightly different color."""
    yy, xx = np.mgrid[0:size, 0:size].astype(np.float64)
    t = (yy + xx) / max(2 * size - 2, 1)
    rgb = np.stack([40 + t * 180, 60 + t * 140, 120 + t * 100], axis=-1)
    return PixelBuffer.from_array(_rgba(rgb))


def generate_noisy_sprite(size: int = 128, cell: int = 8, noise: float = 12.0, seed: int = 7) -> PixelBuffer:
    """Upscaled pixel-art sprite with photo-like noise, the typical input."""
    rng = np.random.default_rng(seed)
    palette = np.array([
        [24, 20, 37],
        [228, 59, 68],
        [254, 174, 52],
        [99, 199, 77],
        [0, 149, 233],
        [255, 255, 255],
    ], dtype=np.float64)
    cells = size // cell
    indices = rng.integers(0, len(palette), (cells, cells))
    sprite = palette[indices]
    rgb = np.repeat(np.repeat(sprite, cell, axis=0), cell, axis=1)
    rgb = rgb + rng.normal(0.0, noise, rgb.shape)
    return PixelBuffer.from_array(_rgba(rgb))


def generate_random(width: int, height: int, seed: int = 0) -> PixelBuffer:
    """Uniform random RGBA, including alpha."""
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_array(rng.integers(0, 256, (height, width, 4), dtype=np.uint8))


def generate_demo_image(key: str) -> PixelBuffer | None:
    """Generate demo image by key."""
    generators = {
        "sprite": lambda: generate_noisy_sprite(256),
        "gradient": lambda: generate_gradient(256),
        "checkerboard": lambda: generate_checkerboard(256),
        "random": lambda: generate_random(96, 96),
    }
    
    if key in generators:
        return generators[key]()
    
    return None
