"""Pan/zoom/auto-fit state for displaying a buffer on screen."""

import math
from typing import Optional, Tuple

from models.errors import InvalidParameterError
from models.view_state import ViewState


class ViewTransform:
    """Screen transform decoupled from pixel data.

    Points map as ``screen = composite * (buffer_point + offset)``: translate
    first, then scale, with the origin at the buffer's top-left corner.
    ``composite = zoom * display_scale``. Drag deltas are divided by ``zoom``
    only; ``display_scale`` is display magnification, not user intent.
    """
    
    def __init__(self, buffer_size: Tuple[int, int] = (0, 0)):
        self._offset_x = 0.0
        self._offset_y = 0.0
        self._zoom = 1.0
        self._display_scale = 1
        self._buffer_w, self._buffer_h = buffer_size
        
        self._dragging = False
        self._drag_start_pointer: Optional[Tuple[float, float]] = None
        self._drag_start_offset: Optional[Tuple[float, float]] = None
    
    # ---- State ----
    @property
    def offset(self) -> Tuple[float, float]:
        return (self._offset_x, self._offset_y)
    
    @property
    def zoom(self) -> float:
        return self._zoom
    
    @property
    def display_scale(self) -> int:
        return self._display_scale
    
    @property
    def composite_scale(self) -> float:
        return self._zoom * self._display_scale
    
    @property
    def is_dragging(self) -> bool:
        return self._dragging
    
    @property
    def state(self) -> ViewState:
        return ViewState(
            offset_x=self._offset_x,
            offset_y=self._offset_y,
            zoom=self._zoom,
            display_scale=self._display_scale,
        )
    
    def restore(self, state: ViewState) -> None:
        """Replace the whole view with a captured state."""
        self.pointer_cancel()
        self._offset_x = float(state.offset_x)
        self._offset_y = float(state.offset_y)
        self._zoom = float(state.zoom)
        self._display_scale = max(1, int(state.display_scale))
    
    def reset(self) -> None:
        """Back to zero offset and 1.0 zoom; display scale is left for auto_fit."""
        self.pointer_cancel()
        self._offset_x = 0.0
        self._offset_y = 0.0
        self._zoom = 1.0
    
    def set_buffer_size(self, width: int, height: int) -> None:
        self._buffer_w = int(width)
        self._buffer_h = int(height)
    
    def current_transform(self) -> Tuple[float, float, float]:
        """(offset_x, offset_y, composite_scale) for the renderer."""
        return (self._offset_x, self._offset_y, self.composite_scale)
    
    # ---- Zoom / fit ----
    def set_zoom(self, factor: float) -> None:
        if not (isinstance(factor, (int, float)) and math.isfinite(factor) and factor > 0):
            raise InvalidParameterError(f"Zoom must be > 0, got {factor!r}")
        self._zoom = float(factor)
    
    def auto_fit(self, container_width: float, container_height: float) -> int:
        """Pick the integer display scale that fills the container.

        Uses the larger of the per-axis floors, so a small buffer is
        overscaled to fill rather than shrunk to fit both axes. Never below 1.
        """
        if self._buffer_w <= 0 or self._buffer_h <= 0:
            self._display_scale = 1
            return self._display_scale
        fit_x = math.floor(max(0.0, container_width) / self._buffer_w)
        fit_y = math.floor(max(0.0, container_height) / self._buffer_h)
        self._display_scale = max(1, int(max(fit_x, fit_y)))
        return self._display_scale
    
    # ---- Panning ----
    def pan(self, dx: float, dy: float) -> None:
        """Shift by a screen-space delta."""
        self._offset_x += dx / self._zoom
        self._offset_y += dy / self._zoom
    
    def pointer_down(self, x: float, y: float) -> None:
        self._dragging = True
        self._drag_start_pointer = (x, y)
        self._drag_start_offset = (self._offset_x, self._offset_y)
    
    def pointer_move(self, x: float, y: float) -> bool:
        """Update the offset while dragging. Returns False when idle."""
        if not self._dragging or self._drag_start_pointer is None or self._drag_start_offset is None:
            return False
        sx, sy = self._drag_start_pointer
        ox, oy = self._drag_start_offset
        self._offset_x = ox + (x - sx) / self._zoom
        self._offset_y = oy + (y - sy) / self._zoom
        return True
    
    def pointer_up(self) -> None:
        self._dragging = False
        self._drag_start_pointer = None
        self._drag_start_offset = None
    
    pointer_cancel = pointer_up
    pointer_leave = pointer_up
    
    # ---- Mapping ----
    def buffer_to_screen(self, bx: float, by: float) -> Tuple[float, float]:
        scale = self.composite_scale
        return ((bx + self._offset_x) * scale, (by + self._offset_y) * scale)
    
    def screen_to_buffer(self, sx: float, sy: float) -> Tuple[float, float]:
        scale = self.composite_scale
        return (sx / scale - self._offset_x, sy / scale - self._offset_y)
    
    def pixel_at(self, sx: float, sy: float) -> Optional[Tuple[int, int]]:
        """Buffer pixel under a screen point, or None outside the buffer."""
        bx, by = self.screen_to_buffer(sx, sy)
        x, y = math.floor(bx), math.floor(by)
        if 0 <= x < self._buffer_w and 0 <= y < self._buffer_h:
            return (x, y)
        return None
