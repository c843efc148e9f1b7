"""RGBA pixel buffer, the unit of truth for the image."""

from dataclasses import dataclass

import numpy as np

from models.errors import DimensionMismatchError, InvalidParameterError

CHANNELS = 4


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Immutable RGBA image, row-major, origin top-left.

    ``pixels`` is a read-only ``uint8`` array shaped ``(height, width, 4)``.
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        expected = self.width * self.height * CHANNELS
        if self.pixels.size != expected:
            raise DimensionMismatchError(
                f"Pixel data has {self.pixels.size} values, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )
        pixels = np.array(self.pixels, dtype=np.uint8).reshape(self.height, self.width, CHANNELS)
        pixels.flags.writeable = False
        object.__setattr__(self, 'pixels', pixels)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'PixelBuffer':
        """Wrap an ``(h, w, 4)`` array. The array is copied."""
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise DimensionMismatchError(f"Expected (h, w, 4) array, got {array.shape}")
        h, w = array.shape[:2]
        return cls(width=w, height=h, pixels=array)

    @classmethod
    def from_bytes(cls, width: int, height: int, rgba: bytes) -> 'PixelBuffer':
        data = np.frombuffer(rgba, dtype=np.uint8)
        return cls(width=width, height=height, pixels=data)

    @classmethod
    def filled(cls, width: int, height: int, rgba=(0, 0, 0, 255)) -> 'PixelBuffer':
        array = np.empty((height, width, CHANNELS), dtype=np.uint8)
        array[:, :] = rgba
        return cls(width=width, height=height, pixels=array)

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def copy(self) -> np.ndarray:
        """Writable copy of the pixel array for engines to work on."""
        return self.pixels.copy()

    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def distinct_colors(self) -> int:
        """Number of distinct RGB values (alpha ignored)."""
        if self.is_empty:
            return 0
        flat = self.pixels[:, :, :3].reshape(-1, 3).astype(np.uint32)
        packed = (flat[:, 0] << 16) | (flat[:, 1] << 8) | flat[:, 2]
        return int(np.unique(packed).size)

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.pixels, other.pixels)

    __hash__ = None


def load_buffer(width: int, height: int, rgba: bytes) -> PixelBuffer:
    """Build a PixelBuffer from decoded RGBA bytes supplied by the ingestion layer."""
    if width < 1 or height < 1:
        raise InvalidParameterError(f"Image dimensions must be positive, got {width}x{height}")
    return PixelBuffer.from_bytes(width, height, rgba)


def check_buffer(buffer: PixelBuffer) -> None:
    """Fail fast if the buffer invariant does not hold."""
    expected = buffer.width * buffer.height * CHANNELS
    if buffer.pixels.size != expected or buffer.pixels.shape != (buffer.height, buffer.width, CHANNELS):
        raise DimensionMismatchError(
            f"Corrupt buffer: {buffer.pixels.shape} for {buffer.width}x{buffer.height}"
        )
