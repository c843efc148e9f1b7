"""Editing session: the single owner of the live buffer, history and view."""

import logging
from typing import Optional, Tuple

from engines.pipeline import run_operation
from engines.resampler import export_buffer, fit_to_canvas
from editing.history import HistoryStack
from editing.view_transform import ViewTransform
from models.errors import EmptyHistoryError, InvalidParameterError, NoImageError, OperationInProgressError
from models.operation_params import AlignParams, DenoiseParams, DownsampleParams
from models.operation_result import OperationResult
from models.pixel_buffer import PixelBuffer, check_buffer, load_buffer
from models.snapshot import Snapshot
from models.view_state import ViewState
from utils.constants import HISTORY_LIMIT, MAX_CANVAS_SIZE
from utils.metrics import ProcessingStats, compute_stats

logger = logging.getLogger(__name__)


class EditingSession:
    """Holds one image being edited.

    Processing happens in two steps so it can run on a worker thread:
    :meth:`begin` hands out the current buffer and marks the session busy,
    :meth:`commit` snapshots the pre-operation state and swaps in the result.
    While busy, further requests raise OperationInProgressError.
    """

    def __init__(self, history_limit: int = HISTORY_LIMIT,
                 max_canvas_size: Optional[Tuple[int, int]] = MAX_CANVAS_SIZE):
        self._buffer: Optional[PixelBuffer] = None
        self._original: Optional[PixelBuffer] = None
        self._history = HistoryStack(history_limit)
        self._view = ViewTransform()
        self._max_canvas_size = max_canvas_size
        self._viewport: Tuple[int, int] = (0, 0)
        self._busy_with: Optional[str] = None
        self._last_stats: Optional[ProcessingStats] = None

        self.name = ""
        self.size_bytes: Optional[int] = None

    # ---- Properties ----
    @property
    def buffer(self) -> Optional[PixelBuffer]:
        return self._buffer

    @property
    def original(self) -> Optional[PixelBuffer]:
        return self._original

    @property
    def history(self) -> HistoryStack:
        return self._history

    @property
    def view(self) -> ViewTransform:
        return self._view

    @property
    def has_image(self) -> bool:
        return self._buffer is not None

    @property
    def is_busy(self) -> bool:
        return self._busy_with is not None

    @property
    def busy_operation(self) -> Optional[str]:
        return self._busy_with

    @property
    def can_undo(self) -> bool:
        return bool(self._history) and not self.is_busy

    @property
    def last_stats(self) -> Optional[ProcessingStats]:
        return self._last_stats

    # ---- Loading ----
    def load_buffer(self, width: int, height: int, rgba: bytes, name: str = "",
                    size_bytes: Optional[int] = None, fit_canvas: bool = True) -> PixelBuffer:
        """Start editing decoded RGBA data. Clears history."""
        buffer = load_buffer(width, height, rgba)
        return self.load_image(buffer, name=name, size_bytes=size_bytes, fit_canvas=fit_canvas)

    def load_image(self, buffer: PixelBuffer, name: str = "",
                   size_bytes: Optional[int] = None, fit_canvas: bool = True) -> PixelBuffer:
        self._ensure_idle("load")
        check_buffer(buffer)
        if buffer.is_empty:
            raise InvalidParameterError(f"Image dimensions must be positive, got {buffer.width}x{buffer.height}")
        if fit_canvas and self._max_canvas_size is not None:
            buffer = fit_to_canvas(buffer, self._max_canvas_size)

        self._buffer = buffer
        self._original = buffer
        self._history.clear()
        self._last_stats = None
        self.name = name
        self.size_bytes = size_bytes

        self._view.restore(ViewState())
        self._view.set_buffer_size(buffer.width, buffer.height)
        self._refit()
        logger.info("Loaded %s (%dx%d)", name or "image", buffer.width, buffer.height)
        return buffer

    def close(self) -> None:
        """Drop the image and all history."""
        self._ensure_idle("close")
        self._buffer = None
        self._original = None
        self._history.clear()
        self._last_stats = None
        self._view.restore(ViewState())
        self._view.set_buffer_size(0, 0)
        self.name = ""
        self.size_bytes = None

    # ---- Two-step processing ----
    def begin(self, operation: str) -> PixelBuffer:
        """Mark an operation in flight and return the buffer it should read."""
        self._ensure_idle(operation)
        if self._buffer is None:
            raise NoImageError(f"Load an image before running {operation}")
        self._busy_with = operation
        logger.debug("Began %s", operation)
        return self._buffer

    def abort(self) -> None:
        """Clear the in-flight flag after a failed computation."""
        if self._busy_with is not None:
            logger.warning("Aborted %s", self._busy_with)
        self._busy_with = None

    def commit(self, result: OperationResult) -> PixelBuffer:
        """Snapshot the current state, then make the result the live buffer."""
        try:
            if self._buffer is None:
                raise NoImageError("No image to commit onto")
            check_buffer(result.buffer)
            before = self._buffer
            snapshot = Snapshot.capture(before, self._view.state, result.label)
        finally:
            self._busy_with = None

        self._history.push(snapshot)
        self._buffer = result.buffer

        self._view.set_buffer_size(result.buffer.width, result.buffer.height)
        if result.buffer.size != before.size:
            self._refit()

        self._last_stats = compute_stats(before, result.buffer, result.elapsed_ms)
        logger.info("Committed '%s' (%d in history)", result.label, len(self._history))
        return result.buffer

    # ---- Synchronous operations ----
    def run(self, params) -> PixelBuffer:
        """Begin, compute and commit in one call."""
        buffer = self.begin(params.label)
        try:
            result = run_operation(buffer, params)
        except Exception:
            self.abort()
            raise
        return self.commit(result)

    def align(self, block_size: int) -> PixelBuffer:
        return self.run(AlignParams(block_size=block_size))

    def denoise(self, strength: float, tolerance: float, max_colors: int) -> PixelBuffer:
        return self.run(DenoiseParams(strength=strength, tolerance=tolerance, max_colors=max_colors))

    def downsample(self, cols: int, rows: int) -> PixelBuffer:
        return self.run(DownsampleParams(cols=cols, rows=rows))

    def downsample_by_block(self, block_size: int) -> PixelBuffer:
        """Downsample so each block_size square becomes one pixel."""
        if self._buffer is None:
            raise NoImageError("Load an image before downsampling")
        params = DownsampleParams.from_block_size(self._buffer.width, self._buffer.height, block_size)
        return self.run(params)

    def reset(self) -> PixelBuffer:
        """Return to the image as loaded. Undoable."""
        buffer = self.begin("reset")
        result = OperationResult(
            operation='reset',
            buffer=self._original,
            label="Reset to original",
            input_size=buffer.size,
        )
        return self.commit(result)

    # ---- Undo ----
    def undo(self) -> ViewState:
        """Restore the state before the most recent commit."""
        self._ensure_idle("undo")
        snapshot = self._history.pop()
        if snapshot is None:
            raise EmptyHistoryError("Nothing to undo")

        self._buffer = snapshot.restore()
        self._view.restore(snapshot.view_state)
        self._view.set_buffer_size(snapshot.width, snapshot.height)

        self._last_stats = None
        logger.info("Undid '%s' (%d left)", snapshot.label, len(self._history))
        return self._view.state

    # ---- View ----
    def set_viewport(self, width: int, height: int) -> None:
        """Record the container size used by auto-fit."""
        self._viewport = (int(width), int(height))

    def auto_fit(self, container_width: Optional[int] = None, container_height: Optional[int] = None) -> int:
        if container_width is not None and container_height is not None:
            self.set_viewport(container_width, container_height)
        return self._refit()

    def pan(self, dx: float, dy: float) -> None:
        self._view.pan(dx, dy)

    def set_zoom(self, factor: float) -> None:
        self._view.set_zoom(factor)

    def current_transform(self) -> Tuple[float, float, float]:
        return self._view.current_transform()

    # ---- Export ----
    def export(self, scale_factor: float = 1.0) -> PixelBuffer:
        if self._buffer is None:
            raise NoImageError("Nothing to export")
        return export_buffer(self._buffer, scale_factor)

    # ---- Helpers ----
    def _ensure_idle(self, operation: str) -> None:
        if self._busy_with is not None:
            logger.warning("Rejected %s: %s still running", operation, self._busy_with)
            raise OperationInProgressError(
                f"Cannot start {operation} while {self._busy_with} is running"
            )

    def _refit(self) -> int:
        width, height = self._viewport
        if width <= 0 or height <= 0:
            return self._view.display_scale
        return self._view.auto_fit(width, height)
