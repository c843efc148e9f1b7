"""History panel: undoable operations, newest first."""

from PySide6.QtWidgets import QListWidget, QListWidgetItem
from PySide6.QtCore import Qt

from editing.history import HistoryStack


class HistoryList(QListWidget):
    """Read-only list of history snapshot labels with capture times."""
    
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setSelectionMode(QListWidget.SelectionMode.NoSelection)
        self.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.setStyleSheet("""
            QListWidget { background: #1f1f1f; border: 1px solid #3d3d3d; border-radius: 5px; }
            QListWidget::item { padding: 6px; border-bottom: 1px solid #2c2c2c; }
        """)
    
    def refresh(self, history: HistoryStack):
        self.clear()
        for snapshot in history.entries():
            item = QListWidgetItem(f"{snapshot.label}\n{snapshot.width}×{snapshot.height} • {snapshot.timestamp}")
            item.setForeground(Qt.GlobalColor.cyan if self.count() == 0 else Qt.GlobalColor.lightGray)
            self.addItem(item)
        if self.count() == 0:
            placeholder = QListWidgetItem("No operations yet")
            placeholder.setForeground(Qt.GlobalColor.gray)
            self.addItem(placeholder)
