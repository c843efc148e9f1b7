"""Bounded snapshot stack for undo."""

from collections import deque
from typing import List, Optional

from models.snapshot import Snapshot
from utils.constants import HISTORY_LIMIT


class HistoryStack:
    """LIFO of snapshots; pushing past ``limit`` drops the oldest entry."""
    
    def __init__(self, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError(f"History limit must be >= 1, got {limit}")
        self._limit = limit
        self._entries = deque(maxlen=limit)
    
    @property
    def limit(self) -> int:
        return self._limit
    
    def push(self, snapshot: Snapshot) -> None:
        self._entries.append(snapshot)
    
    def pop(self) -> Optional[Snapshot]:
        """Remove and return the newest snapshot, or None when empty."""
        if not self._entries:
            return None
        return self._entries.pop()
    
    def peek(self) -> Optional[Snapshot]:
        return self._entries[-1] if self._entries else None
    
    def clear(self) -> None:
        self._entries.clear()
    
    def labels(self) -> List[str]:
        """Labels newest first."""
        return [entry.label for entry in reversed(self._entries)]
    
    def entries(self) -> List[Snapshot]:
        """Snapshots newest first."""
        return list(reversed(self._entries))
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __bool__(self) -> bool:
        return bool(self._entries)
