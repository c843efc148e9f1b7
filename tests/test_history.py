"""Tests for the undo history stack and snapshots."""

import numpy as np
import pytest
from models.pixel_buffer import PixelBuffer
from models.snapshot import Snapshot, encode_png, decode_png
from models.view_state import ViewState
from editing.history import HistoryStack
from utils.constants import HISTORY_LIMIT
from utils.test_images import generate_random


def _snapshot(i: int) -> Snapshot:
    buffer = PixelBuffer.filled(2, 2, (i % 256, 0, 0, 255))
    return Snapshot.capture(buffer, ViewState(offset_x=float(i)), label=f"step {i}")


def test_pop_is_lifo():
    """Snapshots come back newest first."""
    stack = HistoryStack()
    for i in range(5):
        stack.push(_snapshot(i))
    assert [stack.pop().label for _ in range(5)] == [f"step {i}" for i in range(4, -1, -1)]


def test_pop_empty_returns_none():
    """Empty stack pops None rather than raising."""
    stack = HistoryStack()
    assert stack.pop() is None
    assert stack.peek() is None
    assert not stack


def test_cap_evicts_oldest():
    """51 pushes leave exactly 50 entries; the first one is gone."""
    stack = HistoryStack()
    for i in range(HISTORY_LIMIT + 1):
        stack.push(_snapshot(i))
    
    assert len(stack) == HISTORY_LIMIT
    assert "step 0" not in stack.labels()
    assert stack.labels()[-1] == "step 1"
    
    popped = [stack.pop() for _ in range(HISTORY_LIMIT)]
    assert popped[-1].label == "step 1"
    assert stack.pop() is None


def test_labels_newest_first():
    stack = HistoryStack(limit=3)
    for i in range(4):
        stack.push(_snapshot(i))
    assert stack.labels() == ["step 3", "step 2", "step 1"]
    assert [s.label for s in stack.entries()] == stack.labels()


def test_invalid_limit():
    with pytest.raises(ValueError):
        HistoryStack(limit=0)


def test_snapshot_restores_exact_pixels():
    """PNG-encoded snapshots are lossless, alpha included."""
    buffer = generate_random(31, 7, seed=21)
    view = ViewState(offset_x=-3.5, offset_y=2.0, zoom=1.75, display_scale=4)
    
    snapshot = Snapshot.capture(buffer, view, label="Align to 4px grid")
    
    assert snapshot.restore() == buffer
    assert snapshot.view_state == view
    assert (snapshot.width, snapshot.height) == (31, 7)
    assert len(snapshot.timestamp) == 8


def test_snapshot_is_compact_for_flat_images():
    """A flat image encodes far smaller than its raw RGBA size."""
    buffer = PixelBuffer.filled(200, 200, (12, 34, 56, 255))
    data = encode_png(buffer)
    assert len(data) < buffer.pixels.nbytes // 10
    np.testing.assert_array_equal(decode_png(data, 200, 200).pixels, buffer.pixels)
