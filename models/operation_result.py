"""Output of a pixel operation, handed to the session for commit."""

from dataclasses import dataclass
from typing import Any, Optional

from models.pixel_buffer import PixelBuffer


@dataclass(frozen=True)
class OperationResult:
    """A finished operation: the new buffer plus what produced it."""

    operation: str
    buffer: PixelBuffer
    label: str
    input_size: tuple
    params: Optional[Any] = None
    elapsed_ms: float = 0.0

    @property
    def resized(self) -> bool:
        return self.buffer.size != tuple(self.input_size)
