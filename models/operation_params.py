"""Validated parameters for the pixel operations."""

import math
from dataclasses import dataclass

from models.errors import InvalidParameterError


def _as_number(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite, got {value}")
    return value


def _as_int(name: str, value) -> int:
    return int(math.floor(_as_number(name, value)))


@dataclass
class AlignParams:
    """Grid alignment: average every ``block_size`` square."""

    block_size: int = 8

    def __post_init__(self):
        self.block_size = _as_int("block_size", self.block_size)
        if self.block_size < 1:
            raise InvalidParameterError(f"Block size must be >= 1, got {self.block_size}")

    @property
    def label(self) -> str:
        return f"Align to {self.block_size}px grid"


@dataclass
class DenoiseParams:
    """Color quantization followed by an optional box blur."""

    strength: float = 30
    tolerance: float = 15
    max_colors: int = 16

    def __post_init__(self):
        self.strength = _as_number("strength", self.strength)
        self.tolerance = _as_number("tolerance", self.tolerance)
        self.max_colors = _as_int("max_colors", self.max_colors)
        if not (0 <= self.strength <= 100):
            raise InvalidParameterError(f"Strength must be 0-100, got {self.strength}")
        if not (0 <= self.tolerance <= 100):
            raise InvalidParameterError(f"Tolerance must be 0-100, got {self.tolerance}")
        if self.max_colors < 1:
            raise InvalidParameterError(f"Max colors must be >= 1, got {self.max_colors}")

    @property
    def label(self) -> str:
        return f"Denoise: strength {self.strength:g}%, {self.max_colors} colors"


@dataclass
class DownsampleParams:
    """Resample to an explicit ``cols x rows`` canvas."""

    cols: int = 1
    rows: int = 1

    def __post_init__(self):
        self.cols = _as_int("cols", self.cols)
        self.rows = _as_int("rows", self.rows)
        if self.cols < 1 or self.rows < 1:
            raise InvalidParameterError(f"Target grid must be at least 1x1, got {self.cols}x{self.rows}")

    @classmethod
    def from_block_size(cls, width: int, height: int, block_size: int) -> 'DownsampleParams':
        """One output pixel per ``block_size`` square of the source."""
        block = AlignParams(block_size).block_size
        return cls(cols=max(1, math.ceil(width / block)), rows=max(1, math.ceil(height / block)))

    @property
    def label(self) -> str:
        return f"Downsample to {self.cols}x{self.rows}"
