"""History entries: losslessly encoded buffer plus view state."""

import time
from dataclasses import dataclass, field

import cv2
import numpy as np

from models.errors import DimensionMismatchError
from models.pixel_buffer import PixelBuffer
from models.view_state import ViewState


def encode_png(buffer: PixelBuffer) -> bytes:
    """Encode RGBA pixels as PNG bytes (lossless)."""
    if buffer.is_empty:
        return b''
    bgra = np.ascontiguousarray(buffer.pixels[:, :, [2, 1, 0, 3]])
    ok, encoded = cv2.imencode('.png', bgra)
    if not ok:
        raise RuntimeError(f"PNG encoding failed for {buffer.width}x{buffer.height} buffer")
    return encoded.tobytes()


def decode_png(data: bytes, width: int, height: int) -> PixelBuffer:
    """Decode PNG bytes produced by :func:`encode_png`."""
    if not data:
        return PixelBuffer(width=width, height=height, pixels=np.zeros((height, width, 4), dtype=np.uint8))
    bgra = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    if bgra is None or bgra.shape != (height, width, 4):
        shape = None if bgra is None else bgra.shape
        raise DimensionMismatchError(f"Snapshot decoded to {shape}, expected {(height, width, 4)}")
    return PixelBuffer(width=width, height=height, pixels=bgra[:, :, [2, 1, 0, 3]])


@dataclass(frozen=True)
class Snapshot:
    """State to return to when the labelled operation is undone."""

    encoded_buffer: bytes
    width: int
    height: int
    view_state: ViewState
    label: str = ""
    created_at: float = field(default_factory=time.time)

    @classmethod
    def capture(cls, buffer: PixelBuffer, view_state: ViewState, label: str = "") -> 'Snapshot':
        return cls(
            encoded_buffer=encode_png(buffer),
            width=buffer.width,
            height=buffer.height,
            view_state=view_state,
            label=label,
        )

    def restore(self) -> PixelBuffer:
        return decode_png(self.encoded_buffer, self.width, self.height)

    @property
    def timestamp(self) -> str:
        return time.strftime('%H:%M:%S', time.localtime(self.created_at))
