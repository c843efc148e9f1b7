"""Main application window."""

from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QStatusBar, QMessageBox
from PySide6.QtGui import QAction, QKeySequence

from gui.editor_tab import EditorTab
from utils.constants import HISTORY_LIMIT, MAX_CANVAS_SIZE

# App metadata
APP_VERSION = "1.0"
APP_NAME = "PixelForge Studio"


class MainWindow(QMainWindow):
    """
    Main application window.
    
    Hosts a single editor: load a photo, align it to a pixel grid, reduce
    its palette, downsample and export, with undo.
    """
    
    def __init__(self):
        super().__init__()
        
        self.setWindowTitle(f"{APP_NAME}: Photo to Pixel Art")
        self.setMinimumSize(1100, 720)
        self.setAcceptDrops(True)
        
        self._init_ui()
        self._init_menu()
        self._init_statusbar()
        
        self._apply_dark_theme()
    
    def _init_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        
        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(0, 0, 0, 0)
        
        self._editor = EditorTab()
        self._editor.statusMessage.connect(self._show_status)
        self._editor.sessionChanged.connect(self._update_title)
        layout.addWidget(self._editor)
    
    def _init_menu(self):
        menubar = self.menuBar()
        
        # File menu
        file_menu = menubar.addMenu("&File")
        
        load_action = QAction("&Open Image...", self)
        load_action.setShortcut("Ctrl+O")
        load_action.triggered.connect(self._editor._on_load_image)
        file_menu.addAction(load_action)
        
        export_action = QAction("&Export...", self)
        export_action.setShortcut("Ctrl+S")
        export_action.triggered.connect(self._editor._on_export)
        file_menu.addAction(export_action)
        
        close_action = QAction("&Close Image", self)
        close_action.setShortcut("Ctrl+W")
        close_action.triggered.connect(self._editor.clear_session)
        file_menu.addAction(close_action)
        
        file_menu.addSeparator()
        
        exit_action = QAction("E&xit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)
        
        # Edit menu
        edit_menu = menubar.addMenu("&Edit")
        
        undo_action = QAction("&Undo", self)
        undo_action.setShortcut(QKeySequence.StandardKey.Undo)
        undo_action.triggered.connect(self._editor.undo)
        edit_menu.addAction(undo_action)
        
        reset_action = QAction("&Reset to Original", self)
        reset_action.setShortcut("Ctrl+R")
        reset_action.triggered.connect(self._editor.reset)
        edit_menu.addAction(reset_action)
        
        # Process menu
        process_menu = menubar.addMenu("&Process")
        
        for label, shortcut, slot in (
            ("&Align to Grid", "F5", self._editor._on_align),
            ("&Denoise", "F6", self._editor._on_denoise),
            ("Down&sample", "F7", self._editor._on_downsample),
        ):
            action = QAction(label, self)
            action.setShortcut(shortcut)
            action.triggered.connect(slot)
            process_menu.addAction(action)
        
        # Demo menu
        demo_menu = menubar.addMenu("&Demo")
        
        demo_submenu = demo_menu.addMenu("Load Demo Image")
        
        demo_images = [
            ("Noisy Sprite", "sprite"),
            ("Gradient", "gradient"),
            ("Checkerboard", "checkerboard"),
            ("Random Noise", "random"),
        ]
        
        for label, key in demo_images:
            action = QAction(label, self)
            action.setData(key)
            action.triggered.connect(lambda checked, k=key: self._load_demo_image(k))
            demo_submenu.addAction(action)
        
        # View menu
        view_menu = menubar.addMenu("&View")
        
        fit_action = QAction("&Fit to Window", self)
        fit_action.setShortcut("Ctrl+0")
        fit_action.triggered.connect(self._editor.canvas.fit)
        view_menu.addAction(fit_action)
        
        actual_action = QAction("&Zoom 100%", self)
        actual_action.setShortcut("Ctrl+1")
        actual_action.triggered.connect(lambda: self._editor.canvas.set_zoom(1.0))
        view_menu.addAction(actual_action)
        
        # Help menu
        help_menu = menubar.addMenu("&Help")
        
        about_action = QAction("&About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)
    
    def _init_statusbar(self):
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)
        self._statusbar.showMessage("Ready. Load an image to begin.")
    
    def _show_status(self, message: str):
        self._statusbar.showMessage(message, 5000)
    
    def _update_title(self):
        session = self._editor.session
        if session.has_image:
            marker = f" [{len(session.history)}]" if session.history else ""
            self.setWindowTitle(f"{APP_NAME}: {session.name or 'Untitled'}{marker}")
        else:
            self.setWindowTitle(f"{APP_NAME}: Photo to Pixel Art")
    
    def _show_about(self):
        w, h = MAX_CANVAS_SIZE
        QMessageBox.about(
            self, f"About {APP_NAME}",
            f"<h3>{APP_NAME} {APP_VERSION}</h3>"
            "<p>Turn photos into clean pixel art.</p>"
            "<ul>"
            "<li><b>Align</b>: average each block so the image sits on a grid</li>"
            "<li><b>Denoise</b>: merge similar colors, cap the palette, soften with a box blur</li>"
            "<li><b>Downsample</b>: one pixel per block</li>"
            "</ul>"
            f"<p>Images are fitted to {w}×{h} on load. "
            f"Up to {HISTORY_LIMIT} steps can be undone.</p>"
        )
    
    def _load_demo_image(self, key: str):
        """Load a demo image by key."""
        from utils.test_images import generate_demo_image
        
        demo_image = generate_demo_image(key)
        
        if demo_image is None:
            QMessageBox.warning(self, "Demo Error", f"Could not load demo image: {key}")
            return
        
        self._editor.load_buffer(demo_image, f"demo_{key}")
        self._statusbar.showMessage(
            f"Loaded demo: {key}. Tip: Denoise with 8 colors, then Downsample."
        )
    
    # ---- Drag and drop ----
    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
    
    def dropEvent(self, event):
        urls = event.mimeData().urls()
        if urls and urls[0].isLocalFile():
            self._editor.open_file(urls[0].toLocalFile())
    
    def closeEvent(self, event):
        self._editor.save_settings()
        super().closeEvent(event)
    
    def _apply_dark_theme(self):
        """Apply dark theme stylesheet."""
        self.setStyleSheet("""
            /* === Base Styles === */
            QMainWindow {
                background-color: #1a1a1a;
            }
            QWidget {
                background-color: #242424;
                color: #e8e8e8;
                font-family: 'Segoe UI', 'SF Pro Display', 'Arial', sans-serif;
                font-size: 12px;
            }
            
            /* === Group Boxes === */
            QGroupBox {
                font-weight: 600;
                border: 1px solid #3d3d3d;
                border-radius: 6px;
                margin-top: 14px;
                padding-top: 12px;
                background-color: #2a2a2a;
            }
            QGroupBox::title {
                subcontrol-origin: margin;
                left: 12px;
                padding: 0 6px;
                color: #999;
            }
            
            /* === Buttons === */
            QPushButton {
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                    stop:0 #404040, stop:1 #353535);
                border: 1px solid #4a4a4a;
                border-radius: 5px;
                padding: 7px 14px;
                min-height: 20px;
                color: #e8e8e8;
            }
            QPushButton:hover {
                border-color: #5a5a5a;
            }
            QPushButton:focus {
                border-color: #00d4ff;
                outline: none;
            }
            QPushButton:disabled {
                background: #2a2a2a;
                color: #555;
                border-color: #383838;
            }
            
            /* === Sliders / spin boxes === */
            QSlider::groove:horizontal {
                border: none;
                height: 6px;
                background: #303030;
                border-radius: 3px;
            }
            QSlider::sub-page:horizontal {
                background: qlineargradient(x1:0, y1:0, x2:1, y2:0,
                    stop:0 #0097b8, stop:1 #00d4ff);
                border-radius: 3px;
            }
            QSlider::handle:horizontal {
                background: #00d4ff;
                border: 2px solid #00a8cc;
                width: 14px;
                height: 14px;
                margin: -5px 0;
                border-radius: 8px;
            }
            QSpinBox, QComboBox {
                background-color: #363636;
                border: 1px solid #4a4a4a;
                border-radius: 4px;
                padding: 4px 8px;
                min-height: 20px;
            }
            QSpinBox:focus, QComboBox:focus {
                border-color: #00d4ff;
            }
            
            /* === Checkboxes === */
            QCheckBox {
                spacing: 10px;
            }
            QCheckBox::indicator {
                width: 16px;
                height: 16px;
                border: 2px solid #4a4a4a;
                border-radius: 4px;
                background-color: #2a2a2a;
            }
            QCheckBox::indicator:checked {
                background: #00d4ff;
                border-color: #00a8cc;
            }
            
            /* === Menus === */
            QMenuBar {
                background-color: #1e1e1e;
                border-bottom: 1px solid #333;
            }
            QMenuBar::item {
                padding: 6px 12px;
            }
            QMenuBar::item:selected, QMenu::item:selected {
                background-color: #3a3a3a;
            }
            QMenu {
                background-color: #2a2a2a;
                border: 1px solid #3d3d3d;
                padding: 6px;
            }
            QMenu::item {
                padding: 6px 28px 6px 20px;
            }
            
            /* === Status Bar === */
            QStatusBar {
                background-color: #1e1e1e;
                border-top: 1px solid #333;
                color: #888;
            }
            
            /* === Splitter Handles === */
            QSplitter::handle {
                background-color: #333;
            }
            QSplitter::handle:horizontal {
                width: 3px;
            }
            
            QToolTip {
                background-color: #333;
                color: #e8e8e8;
                border: 1px solid #4a4a4a;
                padding: 6px 10px;
            }
        """)
