"""Canvas that draws the session buffer through its view transform."""

from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QPainter, QImage, QColor, QPen, QWheelEvent, QMouseEvent, QFont
from PySide6.QtCore import Qt, Signal, QRectF, QPointF

from editing.session import EditingSession
from models.pixel_buffer import PixelBuffer
from utils.constants import ZOOM_RANGE


def buffer_to_qimage(buffer: PixelBuffer) -> QImage:
    """Wrap RGBA pixels in a QImage that owns its copy of the data."""
    data = buffer.to_bytes()
    image = QImage(data, buffer.width, buffer.height, 4 * buffer.width, QImage.Format.Format_RGBA8888)
    return image.copy()


class PixelCanvas(QWidget):
    """Renders pixels with hard edges; drag pans, wheel zooms, resize refits."""
    
    cursorMoved = Signal(object, object)  # (x, y) or None, RGBA tuple or None
    viewChanged = Signal()
    
    def __init__(self, session: EditingSession, parent=None):
        super().__init__(parent)
        self._session = session
        self._image: Optional[QImage] = None
        self._image_source: Optional[PixelBuffer] = None
        self._show_original = False
        
        self._grid_size = 8
        self._grid_visible = False
        self._grid_opacity = 0.3
        
        self.setMouseTracking(True)
        self.setMinimumSize(240, 240)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
    
    # ---- Public API ----
    def refresh(self):
        """Re-read the session buffer and repaint."""
        buffer = self._displayed_buffer()
        if buffer is not self._image_source:
            self._image_source = buffer
            self._image = buffer_to_qimage(buffer) if buffer is not None else None
        self.update()
        self.viewChanged.emit()
    
    def fit(self):
        self._session.view.reset()
        self._session.auto_fit(self.width(), self.height())
        self.refresh()
    
    def set_zoom(self, factor: float):
        self._session.set_zoom(factor)
        self.refresh()
    
    def set_grid(self, size: int, visible: bool, opacity: float):
        self._grid_size = max(1, int(size))
        self._grid_visible = visible
        self._grid_opacity = max(0.0, min(1.0, opacity))
        self.update()
    
    def set_show_original(self, enabled: bool):
        self._show_original = enabled
        self.refresh()
    
    # ---- Painting ----
    def _displayed_buffer(self) -> Optional[PixelBuffer]:
        if self._show_original and self._session.original is not None:
            return self._session.original
        return self._session.buffer
    
    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(40, 40, 40))
        
        if self._image is None:
            painter.setFont(QFont("Segoe UI", 11))
            painter.setPen(QColor(100, 100, 100))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Open an image to begin\nCtrl+O • Demo menu")
            painter.end()
            return
        
        offset_x, offset_y, scale = self._session.current_transform()
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, False)
        painter.scale(scale, scale)
        painter.translate(offset_x, offset_y)
        
        w, h = self._image.width(), self._image.height()
        painter.fillRect(QRectF(0, 0, w, h), QColor(60, 60, 60))
        painter.drawImage(QPointF(0, 0), self._image)
        
        if self._grid_visible and not self._show_original:
            self._draw_grid(painter, w, h, scale)
        painter.end()
    
    def _draw_grid(self, painter: QPainter, w: int, h: int, scale: float):
        color = QColor(0, 212, 255)
        color.setAlphaF(self._grid_opacity)
        pen = QPen(color)
        pen.setCosmetic(True)
        painter.setPen(pen)
        
        step = self._grid_size
        # Skip lines that would be closer than 2 screen pixels
        if step * scale < 2:
            return
        for x in range(0, w + 1, step):
            painter.drawLine(QPointF(x, 0), QPointF(x, h))
        for y in range(0, h + 1, step):
            painter.drawLine(QPointF(0, y), QPointF(w, y))
    
    # ---- Interaction ----
    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._session.set_viewport(self.width(), self.height())
        if self._session.has_image:
            self._session.auto_fit()
            self.viewChanged.emit()
    
    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton and self._image is not None:
            pos = event.position()
            self._session.view.pointer_down(pos.x(), pos.y())
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        super().mousePressEvent(event)
    
    def mouseMoveEvent(self, event: QMouseEvent):
        pos = event.position()
        if self._session.view.pointer_move(pos.x(), pos.y()):
            self.update()
            self.viewChanged.emit()
        self._emit_cursor(pos.x(), pos.y())
        super().mouseMoveEvent(event)
    
    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self._session.view.pointer_up()
            self.unsetCursor()
        super().mouseReleaseEvent(event)
    
    def leaveEvent(self, event):
        self._session.view.pointer_leave()
        self.unsetCursor()
        self.cursorMoved.emit(None, None)
        super().leaveEvent(event)
    
    def wheelEvent(self, event: QWheelEvent):
        if self._image is None:
            event.ignore()
            return
        
        factor = 1.15 if event.angleDelta().y() > 0 else 1 / 1.15
        min_zoom, max_zoom, _ = ZOOM_RANGE
        new_zoom = self._session.view.zoom * factor
        
        if min_zoom <= new_zoom <= max_zoom:
            self._session.set_zoom(new_zoom)
            self.update()
            self.viewChanged.emit()
        event.accept()
    
    def _emit_cursor(self, sx: float, sy: float):
        buffer = self._displayed_buffer()
        if buffer is None:
            return
        pixel = self._session.view.pixel_at(sx, sy)
        if pixel is None or pixel[0] >= buffer.width or pixel[1] >= buffer.height:
            self.cursorMoved.emit(None, None)
            return
        x, y = pixel
        rgba = tuple(int(c) for c in buffer.pixels[y, x])
        self.cursorMoved.emit((x, y), rgba)
