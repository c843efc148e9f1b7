"""GUI widgets for the pixel editor."""

from .pixel_canvas import PixelCanvas
from .history_list import HistoryList

__all__ = ['PixelCanvas', 'HistoryList']
