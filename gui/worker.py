"""Background worker for pixel operations."""

from PySide6.QtCore import QObject, Signal

from engines.pipeline import run_operation
from models.pixel_buffer import PixelBuffer


class ProcessingWorker(QObject):
    """Runs one pixel operation in a background thread.

    Reads only the immutable input buffer; the result is committed by the
    session on the GUI thread.
    """
    
    finished = Signal(object)
    error = Signal(str)
    progress = Signal(str)
    
    def __init__(self, buffer: PixelBuffer, params):
        super().__init__()
        self.buffer = buffer
        self.params = params
    
    def run(self):
        try:
            self.progress.emit(f"{self.params.label} ({self.buffer.width}×{self.buffer.height})...")
            result = run_operation(self.buffer, self.params)
            self.finished.emit(result)
        except Exception as e:
            self.error.emit(str(e))
