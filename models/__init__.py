"""Data models for buffers, history entries and operation parameters."""

from .errors import (
    PixelForgeError,
    InvalidParameterError,
    OperationInProgressError,
    EmptyHistoryError,
    NoImageError,
    DimensionMismatchError,
)
from .pixel_buffer import PixelBuffer, load_buffer
from .view_state import ViewState
from .snapshot import Snapshot
from .operation_params import AlignParams, DenoiseParams, DownsampleParams
from .operation_result import OperationResult

__all__ = [
    'PixelForgeError',
    'InvalidParameterError',
    'OperationInProgressError',
    'EmptyHistoryError',
    'NoImageError',
    'DimensionMismatchError',
    'PixelBuffer',
    'load_buffer',
    'ViewState',
    'Snapshot',
    'AlignParams',
    'DenoiseParams',
    'DownsampleParams',
    'OperationResult',
]
