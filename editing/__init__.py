"""Editing state: undo history, view transform and the session that owns them."""

from .history import HistoryStack
from .view_transform import ViewTransform
from .session import EditingSession

__all__ = ['HistoryStack', 'ViewTransform', 'EditingSession']
