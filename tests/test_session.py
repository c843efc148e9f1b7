"""Tests for the editing session: commit, undo, concurrency and view."""

import numpy as np
import pytest
from models.errors import (
    DimensionMismatchError, EmptyHistoryError, InvalidParameterError, NoImageError,
    OperationInProgressError, PixelForgeError
)
from models.operation_params import AlignParams, DenoiseParams
from engines.pipeline import run_operation
from engines.denoiser import denoise
import models.snapshot
from editing.session import EditingSession
from utils.constants import HISTORY_LIMIT
from utils.test_images import generate_noisy_sprite, generate_random


def _session(buffer=None, viewport=(400, 300)) -> EditingSession:
    session = EditingSession()
    session.set_viewport(*viewport)
    session.load_image(buffer if buffer is not None else generate_noisy_sprite(64, cell=8))
    return session


def test_load_buffer_from_bytes():
    """Decoded RGBA bytes become the live buffer with empty history."""
    buffer = generate_random(12, 9)
    session = EditingSession()
    loaded = session.load_buffer(12, 9, buffer.to_bytes(), name="bytes")
    assert loaded == buffer
    assert session.original == buffer
    assert len(session.history) == 0


def test_load_rejects_empty_dimensions():
    session = EditingSession()
    with pytest.raises(InvalidParameterError):
        session.load_buffer(0, 10, b"")


def test_large_input_fitted_to_canvas():
    """Inputs larger than 600x600 are shrunk preserving aspect ratio."""
    session = EditingSession()
    loaded = session.load_image(generate_random(1200, 300))
    assert loaded.size == (600, 150)


def test_operations_need_an_image():
    session = EditingSession()
    with pytest.raises(NoImageError):
        session.align(4)
    with pytest.raises(NoImageError):
        session.export(2.0)


def test_commit_pushes_snapshot_and_undo_restores():
    """Undo brings back the exact pre-operation buffer."""
    session = _session()
    before = session.buffer
    session.align(8)
    assert session.buffer != before
    assert session.history.labels() == ["Align to 8px grid"]
    
    session.undo()
    assert session.buffer == before
    assert len(session.history) == 0


def test_undo_empty_history():
    """Nothing to undo is reported, not silently ignored."""
    session = _session()
    with pytest.raises(EmptyHistoryError):
        session.undo()


def test_history_lifo_law():
    """N commits then N undos restore the original buffer and view."""
    session = _session()
    session.set_zoom(1.5)
    session.pan(12, -7)
    start_buffer = session.buffer
    start_view = session.view.state
    
    session.align(4)
    session.pan(3, 3)
    session.denoise(40, 20, 6)
    session.downsample_by_block(8)
    session.set_zoom(2.5)
    session.align(2)
    session.reset()
    
    for _ in range(5):
        session.undo()
    
    assert session.buffer == start_buffer
    assert session.view.state == start_view


def test_history_cap_over_session():
    """51 commits keep 50 snapshots; undoing them all stops at the second state."""
    session = _session(generate_random(8, 8))
    for i in range(HISTORY_LIMIT + 1):
        session.align(1 + i % 3)
        session.denoise(0, 0, 256)
    
    # align then denoise per iteration: only the last 50 of 102 commits remain
    assert len(session.history) == HISTORY_LIMIT
    while session.history:
        session.undo()
    assert session.history.labels() == []


def test_downsample_changes_size_and_refits():
    """Downsampling replaces dimensions and recomputes the display scale."""
    session = _session(viewport=(400, 300))
    assert session.view.display_scale == 6
    
    session.downsample(8, 8)
    assert session.buffer.size == (8, 8)
    assert session.view.display_scale == 50
    
    session.undo()
    assert session.buffer.size == (64, 64)
    assert session.view.display_scale == 6


def test_content_operations_keep_display_scale():
    """Align and denoise do not auto-fit."""
    session = _session()
    session.set_viewport(1000, 1000)
    scale = session.view.display_scale
    session.align(4)
    session.denoise(10, 10, 8)
    assert session.view.display_scale == scale


def test_invalid_parameters_leave_buffer_untouched():
    session = _session()
    before = session.buffer
    for call in (lambda: session.align(0),
                 lambda: session.denoise(30, 15, 0),
                 lambda: session.downsample(0, 3),
                 lambda: session.set_zoom(0)):
        with pytest.raises(InvalidParameterError):
            call()
    assert session.buffer is before
    assert len(session.history) == 0
    assert not session.is_busy


def test_second_request_rejected_while_busy():
    """One operation at a time; the second is rejected, not queued."""
    session = _session()
    buffer = session.begin("Align to 4px grid")
    assert session.is_busy
    
    with pytest.raises(OperationInProgressError):
        session.denoise(30, 15, 16)
    with pytest.raises(OperationInProgressError):
        session.begin("another")
    with pytest.raises(OperationInProgressError):
        session.undo()
    assert not session.can_undo
    
    session.commit(run_operation(buffer, AlignParams(4)))
    assert not session.is_busy
    assert len(session.history) == 1


def test_abort_clears_busy_without_commit():
    session = _session()
    before = session.buffer
    session.begin("Denoise")
    session.abort()
    assert not session.is_busy
    assert session.buffer is before
    session.denoise(0, 10, 4)
    assert len(session.history) == 1


def test_worker_reads_immutable_buffer():
    """The buffer handed to a worker cannot be written."""
    session = _session()
    buffer = session.begin("Denoise")
    with pytest.raises(ValueError):
        buffer.pixels[0, 0, 0] = 1
    result = run_operation(buffer, DenoiseParams(0, 10, 4))
    session.commit(result)
    assert session.last_stats.colors_after <= session.last_stats.colors_before


def test_reset_is_undoable():
    session = _session()
    original = session.buffer
    session.align(8)
    aligned = session.buffer
    
    session.reset()
    assert session.buffer == original
    assert session.history.labels()[0] == "Reset to original"
    
    session.undo()
    assert session.buffer == aligned


def test_stats_after_operation():
    session = _session()
    session.denoise(0, 30, 4)
    stats = session.last_stats
    assert stats.colors_after <= stats.colors_before
    assert stats.total_pixels == 64 * 64
    assert stats.psnr is not None and stats.psnr > 0
    
    session.downsample(4, 4)
    assert session.last_stats.psnr is None


def test_export_dimensions():
    session = _session(generate_random(10, 7))
    assert session.export(2.0).size == (20, 14)
    assert session.export(0.5).size == (5, 4)
    with pytest.raises(InvalidParameterError):
        session.export(0)


def test_close_drops_everything():
    session = _session()
    session.align(4)
    session.close()
    assert not session.has_image
    assert len(session.history) == 0
    with pytest.raises(NoImageError):
        session.reset()


def test_sessions_are_independent():
    """No shared state between sessions."""
    a = _session(generate_random(8, 8, seed=1))
    b = _session(generate_random(8, 8, seed=2))
    a.align(4)
    assert len(b.history) == 0
    assert not np.array_equal(a.buffer.pixels, b.buffer.pixels)


def test_fractional_denoise_matches_engine():
    """Session denoise passes strength and tolerance through untruncated."""
    image = generate_random(16, 16, seed=31)
    session = _session(image)
    session.denoise(0.5, 15.9, 256)
    assert session.buffer == denoise(image, 0.5, 15.9, 256)
    assert session.history.labels()[0] == "Denoise: strength 0.5%, 256 colors"


def test_failed_snapshot_leaves_session_usable(monkeypatch):
    """If the pre-operation snapshot cannot be encoded, nothing is committed."""
    session = _session()
    before = session.buffer
    buffer = session.begin("Align to 4px grid")
    result = run_operation(buffer, AlignParams(4))
    
    def failing_encode(buffer):
        raise RuntimeError("PNG encoding failed")
    
    monkeypatch.setattr(models.snapshot, 'encode_png', failing_encode)
    with pytest.raises(RuntimeError):
        session.commit(result)
    
    assert not session.is_busy
    assert session.buffer is before
    assert len(session.history) == 0
    
    monkeypatch.undo()
    session.align(4)
    assert len(session.history) == 1


def test_dimension_mismatch_is_not_a_user_error():
    """Corrupt pixel data escapes handlers that report PixelForgeError."""
    assert issubclass(DimensionMismatchError, AssertionError)
    assert not issubclass(DimensionMismatchError, PixelForgeError)
