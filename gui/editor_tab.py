"""Pixel editor: controls, canvas, history and stats."""

import logging
import os
from pathlib import Path

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QLabel, QPushButton, QSlider,
    QSpinBox, QCheckBox, QGroupBox, QSplitter, QFileDialog, QMessageBox, QComboBox
)
from PySide6.QtCore import Qt, QThread, Signal, QSettings

from engines.resampler import export_size
from editing.session import EditingSession
from gui.widgets.pixel_canvas import PixelCanvas
from gui.widgets.history_list import HistoryList
from gui.worker import ProcessingWorker
from models.errors import PixelForgeError
from models.operation_params import AlignParams, DenoiseParams, DownsampleParams
from models.operation_result import OperationResult
from models.pixel_buffer import PixelBuffer
from utils.constants import (
    BLOCK_SIZE_RANGE, STRENGTH_RANGE, TOLERANCE_RANGE, MAX_COLORS_RANGE,
    EXPORT_SCALE_RANGE, EXPORT_QUALITY_RANGE, GRID_OPACITY_DEFAULT, IMAGE_EXTENSIONS,
    MAX_FILE_BYTES
)
from utils.image_io import load_image, save_image, format_file_size

logger = logging.getLogger(__name__)


def _slider(value_range, suffix: str = ""):
    """Slider with a value label beside it. Returns (container, slider)."""
    minimum, maximum, default = value_range
    container = QWidget()
    layout = QHBoxLayout(container)
    layout.setContentsMargins(0, 0, 0, 0)
    
    slider = QSlider(Qt.Orientation.Horizontal)
    slider.setRange(minimum, maximum)
    slider.setValue(default)
    
    label = QLabel(f"{default}{suffix}")
    label.setMinimumWidth(40)
    slider.valueChanged.connect(lambda v: label.setText(f"{v}{suffix}"))
    
    layout.addWidget(slider)
    layout.addWidget(label)
    return container, slider


class EditorTab(QWidget):
    """
    Pixel art editor.
    
    Layout:
    - Left: Image / Align / Denoise / Downsample / Export controls
    - Center: Pixel canvas (drag to pan, wheel to zoom)
    - Right: Stats and history
    """
    
    statusMessage = Signal(str)
    sessionChanged = Signal()
    
    def __init__(self, parent=None):
        super().__init__(parent)
        
        self._session = EditingSession()
        self._settings = QSettings("PixelForge", "PixelForgeStudio")
        self._thread = None
        self._worker = None
        
        self._init_ui()
        self._restore_settings()
        self._update_controls()
    
    @property
    def session(self) -> EditingSession:
        return self._session
    
    @property
    def canvas(self) -> PixelCanvas:
        return self._canvas
    
    def _init_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(8, 8, 8, 8)
        
        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self._create_control_panel())
        
        self._canvas = PixelCanvas(self._session)
        self._canvas.cursorMoved.connect(self._on_cursor_moved)
        self._canvas.viewChanged.connect(self._update_view_label)
        splitter.addWidget(self._canvas)
        
        splitter.addWidget(self._create_info_panel())
        
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        splitter.setStretchFactor(2, 0)
        splitter.setSizes([260, 640, 240])
        main_layout.addWidget(splitter, stretch=1)
    
    def _create_control_panel(self) -> QWidget:
        panel = QWidget()
        panel.setMinimumWidth(220)
        panel.setMaximumWidth(300)
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 8, 0)
        layout.setSpacing(4)
        
        # === Image ===
        image_group = QGroupBox("Image")
        image_layout = QVBoxLayout(image_group)
        
        buttons = QWidget()
        buttons_layout = QHBoxLayout(buttons)
        buttons_layout.setContentsMargins(0, 0, 0, 0)
        buttons_layout.setSpacing(4)
        
        self._load_btn = QPushButton("Load Image")
        self._load_btn.clicked.connect(self._on_load_image)
        buttons_layout.addWidget(self._load_btn)
        
        self._clear_btn = QPushButton("Clear")
        self._clear_btn.setToolTip("Close the image and drop its history")
        self._clear_btn.setMaximumWidth(60)
        self._clear_btn.clicked.connect(self.clear_session)
        buttons_layout.addWidget(self._clear_btn)
        image_layout.addWidget(buttons)
        
        self._image_info_label = QLabel("No image loaded")
        self._image_info_label.setWordWrap(True)
        self._image_info_label.setStyleSheet("color: #888; font-size: 11px;")
        image_layout.addWidget(self._image_info_label)
        layout.addWidget(image_group)
        
        # === Align ===
        align_group = QGroupBox("Grid Alignment")
        align_layout = QFormLayout(align_group)
        
        self._block_spin = QSpinBox()
        self._block_spin.setRange(*BLOCK_SIZE_RANGE[:2])
        self._block_spin.setValue(BLOCK_SIZE_RANGE[2])
        self._block_spin.setSuffix(" px")
        self._block_spin.valueChanged.connect(self._on_grid_changed)
        align_layout.addRow("Block size:", self._block_spin)
        
        self._align_btn = QPushButton("Align to Grid")
        self._align_btn.clicked.connect(self._on_align)
        align_layout.addRow(self._align_btn)
        layout.addWidget(align_group)
        
        # === Denoise ===
        denoise_group = QGroupBox("Denoise")
        denoise_layout = QFormLayout(denoise_group)
        
        strength_container, self._strength_slider = _slider(STRENGTH_RANGE, "%")
        denoise_layout.addRow("Strength:", strength_container)
        tolerance_container, self._tolerance_slider = _slider(TOLERANCE_RANGE, "%")
        denoise_layout.addRow("Tolerance:", tolerance_container)
        
        self._colors_spin = QSpinBox()
        self._colors_spin.setRange(*MAX_COLORS_RANGE[:2])
        self._colors_spin.setValue(MAX_COLORS_RANGE[2])
        denoise_layout.addRow("Max colors:", self._colors_spin)
        
        self._denoise_btn = QPushButton("Denoise")
        self._denoise_btn.clicked.connect(self._on_denoise)
        denoise_layout.addRow(self._denoise_btn)
        layout.addWidget(denoise_group)
        
        # === Downsample ===
        downsample_group = QGroupBox("Downsample")
        downsample_layout = QVBoxLayout(downsample_group)
        hint = QLabel("One output pixel per block (uses block size)")
        hint.setWordWrap(True)
        hint.setStyleSheet("color: #888; font-size: 11px;")
        downsample_layout.addWidget(hint)
        
        self._downsample_btn = QPushButton("Downsample")
        self._downsample_btn.clicked.connect(self._on_downsample)
        downsample_layout.addWidget(self._downsample_btn)
        layout.addWidget(downsample_group)
        
        # === Edit ===
        edit_row = QWidget()
        edit_layout = QHBoxLayout(edit_row)
        edit_layout.setContentsMargins(0, 0, 0, 0)
        self._undo_btn = QPushButton("Undo")
        self._undo_btn.clicked.connect(self.undo)
        edit_layout.addWidget(self._undo_btn)
        self._reset_btn = QPushButton("Reset")
        self._reset_btn.setToolTip("Return to the image as loaded (undoable)")
        self._reset_btn.clicked.connect(self.reset)
        edit_layout.addWidget(self._reset_btn)
        layout.addWidget(edit_row)
        
        # === View ===
        view_group = QGroupBox("View")
        view_layout = QFormLayout(view_group)
        
        self._grid_check = QCheckBox("Show grid")
        self._grid_check.toggled.connect(self._on_grid_changed)
        view_layout.addRow(self._grid_check)
        opacity_container, self._grid_opacity_slider = _slider((0, 100, GRID_OPACITY_DEFAULT), "%")
        self._grid_opacity_slider.valueChanged.connect(self._on_grid_changed)
        view_layout.addRow("Grid opacity:", opacity_container)
        
        self._compare_check = QCheckBox("Show original")
        self._compare_check.setToolTip("Compare against the image as loaded")
        self._compare_check.toggled.connect(self._canvas_show_original)
        view_layout.addRow(self._compare_check)
        
        self._view_label = QLabel("")
        self._view_label.setStyleSheet("color: #888; font-size: 11px;")
        view_layout.addRow(self._view_label)
        layout.addWidget(view_group)
        
        # === Export ===
        export_group = QGroupBox("Export")
        export_layout = QFormLayout(export_group)
        
        scale_container, self._export_scale_slider = _slider(EXPORT_SCALE_RANGE, "%")
        self._export_scale_slider.valueChanged.connect(self._update_export_label)
        export_layout.addRow("Scale:", scale_container)
        
        self._format_combo = QComboBox()
        self._format_combo.addItems(["PNG", "JPEG", "WebP"])
        self._format_combo.currentTextChanged.connect(self._update_controls)
        export_layout.addRow("Format:", self._format_combo)
        
        quality_container, self._quality_slider = _slider(EXPORT_QUALITY_RANGE, "%")
        export_layout.addRow("Quality:", quality_container)
        
        self._export_size_label = QLabel("")
        self._export_size_label.setStyleSheet("color: #888; font-size: 11px;")
        export_layout.addRow(self._export_size_label)
        
        self._export_btn = QPushButton("Export...")
        self._export_btn.clicked.connect(self._on_export)
        export_layout.addRow(self._export_btn)
        layout.addWidget(export_group)
        
        layout.addStretch()
        return panel
    
    def _create_info_panel(self) -> QWidget:
        panel = QWidget()
        panel.setMinimumWidth(200)
        panel.setMaximumWidth(280)
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(8, 0, 0, 0)
        
        stats_group = QGroupBox("Stats")
        stats_layout = QVBoxLayout(stats_group)
        self._stats_label = QLabel("Run an operation to see stats")
        self._stats_label.setWordWrap(True)
        self._stats_label.setStyleSheet("font-family: Consolas, monospace; font-size: 11px;")
        stats_layout.addWidget(self._stats_label)
        self._cursor_label = QLabel("")
        self._cursor_label.setStyleSheet("color: #888; font-size: 11px;")
        stats_layout.addWidget(self._cursor_label)
        layout.addWidget(stats_group)
        
        history_group = QGroupBox("History")
        history_layout = QVBoxLayout(history_group)
        self._history_list = HistoryList()
        history_layout.addWidget(self._history_list)
        layout.addWidget(history_group, stretch=1)
        
        self._status_label = QLabel("Ready")
        self._status_label.setWordWrap(True)
        self._status_label.setStyleSheet("color: #888; font-size: 11px;")
        layout.addWidget(self._status_label)
        return panel
    
    # ---- Loading ----
    def _on_load_image(self):
        last_folder = self._settings.value("last_open_folder", "")
        patterns = " ".join(f"*{ext}" for ext in IMAGE_EXTENSIONS)
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Image", last_folder, f"Images ({patterns});;All Files (*)"
        )
        if file_path:
            self.open_file(file_path)
    
    def open_file(self, file_path: str) -> bool:
        """Load an image file into a fresh session."""
        path = Path(file_path)
        try:
            size_bytes = os.path.getsize(path)
            if size_bytes > MAX_FILE_BYTES:
                raise ValueError(f"File is {format_file_size(size_bytes)}; limit is {format_file_size(MAX_FILE_BYTES)}")
            buffer = load_image(str(path))
            self.load_buffer(buffer, path.name, size_bytes)
        except (OSError, ValueError, PixelForgeError) as e:
            logger.warning("Failed to load %s: %s", path, e)
            QMessageBox.critical(self, "Error", f"Failed to load image:\n{e}")
            return False
        
        self._settings.setValue("last_open_folder", str(path.parent))
        return True
    
    def load_buffer(self, buffer: PixelBuffer, name: str, size_bytes=None):
        """Start editing an already-decoded buffer."""
        original_size = buffer.size
        buffer = self._session.load_image(buffer, name=name, size_bytes=size_bytes)
        self._compare_check.setChecked(False)
        self._canvas.fit()
        
        info = f"{name}\n{buffer.width} × {buffer.height}"
        if buffer.size != original_size:
            info += f" (from {original_size[0]} × {original_size[1]})"
        if size_bytes is not None:
            info += f"\n{format_file_size(size_bytes)}"
        self._image_info_label.setText(info)
        self._stats_label.setText(f"Colors: {buffer.distinct_colors()}")
        self._set_status(f"Loaded: {name} ({buffer.width}x{buffer.height})")
        self._on_session_changed()
    
    def clear_session(self):
        if self._session.is_busy:
            return
        self._session.close()
        self._image_info_label.setText("No image loaded")
        self._stats_label.setText("Run an operation to see stats")
        self._compare_check.setChecked(False)
        self._set_status("Session cleared")
        self._on_session_changed()
    
    # ---- Operations ----
    def _on_align(self):
        self._start_operation(lambda: AlignParams(block_size=self._block_spin.value()))
    
    def _on_denoise(self):
        self._start_operation(lambda: DenoiseParams(
            strength=self._strength_slider.value(),
            tolerance=self._tolerance_slider.value(),
            max_colors=self._colors_spin.value(),
        ))
    
    def _on_downsample(self):
        def make_params():
            buffer = self._session.buffer
            return DownsampleParams.from_block_size(buffer.width, buffer.height, self._block_spin.value())
        self._start_operation(make_params)
    
    def _start_operation(self, make_params):
        """Validate, mark the session busy and run the operation on a worker thread."""
        try:
            if not self._session.has_image:
                raise PixelForgeError("Load an image first")
            params = make_params()
            buffer = self._session.begin(params.label)
        except PixelForgeError as e:
            self._set_status(str(e))
            return
        
        self._update_controls()
        self._status_label.setText(f"Processing: {params.label}...")
        
        self._thread = QThread()
        self._worker = ProcessingWorker(buffer, params)
        self._worker.moveToThread(self._thread)
        
        self._thread.started.connect(self._worker.run)
        self._worker.progress.connect(self._status_label.setText)
        self._worker.finished.connect(self._on_operation_finished)
        self._worker.error.connect(self._on_operation_error)
        self._worker.finished.connect(self._thread.quit)
        self._worker.error.connect(self._thread.quit)
        self._thread.finished.connect(self._cleanup_thread)
        
        self._thread.start()
    
    def _on_operation_finished(self, result: OperationResult):
        try:
            self._session.commit(result)
        except RuntimeError as e:
            self._on_operation_error(str(e))
            return
        self._compare_check.setChecked(False)
        self._show_stats()
        self._set_status(f"{result.label} ({result.elapsed_ms:.1f} ms)")
        self._on_session_changed()
    
    def _on_operation_error(self, error_msg: str):
        self._session.abort()
        self._update_controls()
        QMessageBox.critical(self, "Processing Error", f"Operation failed:\n{error_msg}")
        self._set_status(f"Failed: {error_msg}")
    
    def _cleanup_thread(self):
        if self._thread:
            self._thread.deleteLater()
            self._thread = None
        if self._worker:
            self._worker.deleteLater()
            self._worker = None
    
    def undo(self):
        try:
            self._session.undo()
        except PixelForgeError as e:
            self._set_status(str(e))
            return
        self._stats_label.setText(f"Colors: {self._session.buffer.distinct_colors()}")
        self._set_status("Undone")
        self._on_session_changed()
    
    def reset(self):
        try:
            self._session.reset()
        except PixelForgeError as e:
            self._set_status(str(e))
            return
        self._show_stats()
        self._set_status("Reset to original")
        self._on_session_changed()
    
    # ---- Export ----
    def _on_export(self):
        if not self._session.has_image:
            return
        
        fmt = self._format_combo.currentText()
        ext = {"PNG": ".png", "JPEG": ".jpg", "WebP": ".webp"}[fmt]
        stem = Path(self._session.name).stem if self._session.name else "pixelart"
        last_folder = self._settings.value("last_export_folder", "")
        default_path = str(Path(last_folder) / f"{stem}_pixel{ext}") if last_folder else f"{stem}_pixel{ext}"
        
        file_path, _ = QFileDialog.getSaveFileName(
            self, "Export Pixel Art", default_path, f"{fmt} (*{ext});;All Files (*)"
        )
        if not file_path:
            return
        
        try:
            output = self._session.export(self._export_scale_slider.value() / 100.0)
            save_image(output, file_path, quality=self._quality_slider.value())
        except (ValueError, PixelForgeError) as e:
            QMessageBox.critical(self, "Export Error", f"Failed to save:\n{e}")
            return
        
        self._settings.setValue("last_export_folder", str(Path(file_path).parent))
        size = format_file_size(os.path.getsize(file_path))
        self._set_status(f"Saved: {Path(file_path).name} ({output.width}x{output.height}, {size})")
    
    # ---- UI state ----
    def _on_session_changed(self):
        self._canvas.refresh()
        self._history_list.refresh(self._session.history)
        self._update_controls()
        self._update_export_label()
        self.sessionChanged.emit()
    
    def _update_controls(self):
        has_image = self._session.has_image
        idle = not self._session.is_busy
        for button in (self._align_btn, self._denoise_btn, self._downsample_btn,
                       self._reset_btn, self._export_btn, self._clear_btn):
            button.setEnabled(has_image and idle)
        self._undo_btn.setEnabled(self._session.can_undo)
        self._load_btn.setEnabled(idle)
        self._quality_slider.setEnabled(self._format_combo.currentText() != "PNG")
    
    def _update_export_label(self):
        buffer = self._session.buffer
        if buffer is None:
            self._export_size_label.setText("")
            return
        w, h = export_size(buffer.width, buffer.height, self._export_scale_slider.value() / 100.0)
        self._export_size_label.setText(f"Output: {w} × {h}")
    
    def _update_view_label(self):
        view = self._session.view
        self._view_label.setText(f"Zoom {view.zoom:.2f}× • fit {view.display_scale}×")
    
    def _on_grid_changed(self, *args):
        self._canvas.set_grid(
            self._block_spin.value(),
            self._grid_check.isChecked(),
            self._grid_opacity_slider.value() / 100.0,
        )
    
    def _canvas_show_original(self, checked: bool):
        self._canvas.set_show_original(checked)
    
    def _on_cursor_moved(self, position, rgba):
        if position is None:
            self._cursor_label.setText("")
            return
        x, y = position
        r, g, b, a = rgba
        self._cursor_label.setText(f"({x}, {y})  #{r:02x}{g:02x}{b:02x}  α {a}")
    
    def _show_stats(self):
        stats = self._session.last_stats
        if stats is None:
            return
        psnr = "n/a (resized)" if stats.psnr is None else (
            "∞" if stats.psnr == float('inf') else f"{stats.psnr:.2f} dB")
        self._stats_label.setText(
            f"Time:    {stats.elapsed_ms:.1f} ms\n"
            f"Colors:  {stats.colors_before} → {stats.colors_after}\n"
            f"Reduced: {stats.color_reduction_pct:.1f}%\n"
            f"Changed: {stats.changed_pct:.1f}% px\n"
            f"PSNR:    {psnr}"
        )
    
    def _set_status(self, message: str):
        self._status_label.setText(message)
        self.statusMessage.emit(message)
    
    # ---- Settings ----
    def _restore_settings(self):
        s = self._settings
        self._block_spin.setValue(int(s.value("block_size", BLOCK_SIZE_RANGE[2])))
        self._strength_slider.setValue(int(s.value("strength", STRENGTH_RANGE[2])))
        self._tolerance_slider.setValue(int(s.value("tolerance", TOLERANCE_RANGE[2])))
        self._colors_spin.setValue(int(s.value("max_colors", MAX_COLORS_RANGE[2])))
        self._grid_opacity_slider.setValue(int(s.value("grid_opacity", GRID_OPACITY_DEFAULT)))
        self._quality_slider.setValue(int(s.value("export_quality", EXPORT_QUALITY_RANGE[2])))
    
    def save_settings(self):
        s = self._settings
        s.setValue("block_size", self._block_spin.value())
        s.setValue("strength", self._strength_slider.value())
        s.setValue("tolerance", self._tolerance_slider.value())
        s.setValue("max_colors", self._colors_spin.value())
        s.setValue("grid_opacity", self._grid_opacity_slider.value())
        s.setValue("export_quality", self._quality_slider.value())
