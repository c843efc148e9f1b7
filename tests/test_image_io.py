"""Tests for image file I/O and the command-line mode."""

import numpy as np
import pytest
from models.pixel_buffer import PixelBuffer
from utils.image_io import format_file_size, load_image, save_image, to_rgba
from utils.test_images import generate_random, generate_demo_image
from main import parse_cli_args


def test_png_round_trip_keeps_alpha(tmp_path):
    buffer = generate_random(13, 9, seed=4)
    path = tmp_path / "out.png"
    save_image(buffer, str(path))
    assert load_image(str(path)) == buffer


def test_jpeg_drops_alpha(tmp_path):
    buffer = PixelBuffer.filled(16, 16, (200, 40, 40, 100))
    path = tmp_path / "out.jpg"
    save_image(buffer, str(path), quality=90)
    loaded = load_image(str(path))
    assert loaded.size == (16, 16)
    assert (loaded.pixels[:, :, 3] == 255).all()


def test_load_missing_file(tmp_path):
    with pytest.raises(ValueError):
        load_image(str(tmp_path / "missing.png"))


def test_grayscale_converted_to_rgba():
    gray = np.full((4, 5), 77, dtype=np.uint8)
    rgba = to_rgba(gray)
    assert rgba.shape == (4, 5, 4)
    assert rgba[0, 0].tolist() == [77, 77, 77, 255]


def test_format_file_size():
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(512) == "512 Bytes"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(10 * 1024 * 1024) == "10 MB"


def test_demo_images():
    for key in ("sprite", "gradient", "checkerboard", "random"):
        assert not generate_demo_image(key).is_empty
    assert generate_demo_image("nope") is None


def test_cli_arguments():
    options = parse_cli_args(["in.png", "--align", "8", "--denoise", "30", "15", "16",
                              "--downsample", "4", "--scale", "2.5", "--out", "x.png"])
    assert options['source'] == "in.png"
    assert options['align'] == 8
    assert options['denoise'] == (30, 15, 16)
    assert options['downsample'] == 4
    assert options['scale'] == 2.5
    assert options['out'] == "x.png"


def test_cli_rejects_short_denoise():
    with pytest.raises(ValueError):
        parse_cli_args(["--denoise", "30", "15"])
