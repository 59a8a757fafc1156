"""Tests for the canvas and image output."""

import pytest
import numpy as np
from PIL import Image

from lumenray.vec3 import Color, BLACK
from lumenray.canvas import Canvas, PPM_LINE_LIMIT


class TestCanvas:
    """Test Canvas pixel storage."""

    def test_starts_black(self):
        c = Canvas(10, 20)
        assert c.width == 10
        assert c.height == 20
        assert c.pixels.shape == (20, 10, 3)
        for y in range(20):
            for x in range(10):
                assert c.pixel_at(x, y) == BLACK

    def test_write_pixel(self):
        c = Canvas(10, 20)
        red = Color(1, 0, 0)
        c.write_pixel(2, 3, red)
        assert c.pixel_at(2, 3) == red
        assert c.pixels[3, 2, 0] == 1.0

    def test_colors_are_unclamped(self):
        c = Canvas(2, 2)
        c.write_pixel(0, 0, Color(1.5, -0.5, 3))
        assert c.pixel_at(0, 0) == Color(1.5, -0.5, 3)

    @pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (10, 0), (0, 20)])
    def test_out_of_bounds(self, x, y):
        c = Canvas(10, 20)
        with pytest.raises(ValueError):
            c.write_pixel(x, y, BLACK)
        with pytest.raises(ValueError):
            c.pixel_at(x, y)

    @pytest.mark.parametrize("width, height", [(0, 5), (5, 0), (-2, 3)])
    def test_invalid_size(self, width, height):
        with pytest.raises(ValueError):
            Canvas(width, height)

    def test_write_block(self):
        c = Canvas(4, 3)
        block = np.full((2, 3, 3), 0.5)
        c.write_block(1, 1, block)
        assert c.pixel_at(1, 1) == Color(0.5, 0.5, 0.5)
        assert c.pixel_at(3, 2) == Color(0.5, 0.5, 0.5)
        assert c.pixel_at(0, 0) == BLACK

    def test_write_block_out_of_bounds(self):
        c = Canvas(4, 3)
        with pytest.raises(ValueError):
            c.write_block(2, 2, np.zeros((2, 3, 3)))

    def test_rgb_array_clamps(self):
        c = Canvas(3, 1)
        c.write_pixel(0, 0, Color(1.5, 0, 0))
        c.write_pixel(1, 0, Color(0, 0.5, 0))
        c.write_pixel(2, 0, Color(-0.5, 0, 1))
        rgb = c.to_rgb_array()
        assert rgb.dtype == np.uint8
        assert rgb[0].tolist() == [[255, 0, 0], [0, 128, 0], [0, 0, 255]]


class TestPPM:
    """Test plain PPM serialization."""

    def test_header(self):
        lines = Canvas(5, 3).to_ppm().splitlines()
        assert lines[:3] == ["P3", "5 3", "255"]

    def test_pixel_data(self):
        c = Canvas(5, 3)
        c.write_pixel(0, 0, Color(1.5, 0, 0))
        c.write_pixel(2, 1, Color(0, 0.5, 0))
        c.write_pixel(4, 2, Color(-0.5, 0, 1))
        lines = c.to_ppm().splitlines()
        assert lines[3:6] == [
            "255 0 0 0 0 0 0 0 0 0 0 0 0 0 0",
            "0 0 0 0 0 0 0 128 0 0 0 0 0 0 0",
            "0 0 0 0 0 0 0 0 0 0 0 0 0 0 255",
        ]

    def test_long_lines_are_split(self):
        c = Canvas(10, 2)
        c.pixels[:] = (1.0, 0.8, 0.6)
        lines = c.to_ppm().splitlines()
        assert lines[3:7] == [
            "255 204 153 255 204 153 255 204 153 255 204 153 255 204 153 255 204",
            "153 255 204 153 255 204 153 255 204 153 255 204 153",
            "255 204 153 255 204 153 255 204 153 255 204 153 255 204 153 255 204",
            "153 255 204 153 255 204 153 255 204 153 255 204 153",
        ]
        assert all(len(line) <= PPM_LINE_LIMIT for line in lines)

    def test_ends_with_newline(self):
        assert Canvas(5, 3).to_ppm().endswith("\n")


class TestSave:
    """Test writing images to disk."""

    def test_save_ppm(self, tmp_path):
        c = Canvas(2, 1)
        c.write_pixel(1, 0, Color(1, 1, 1))
        path = tmp_path / "out.ppm"
        c.save(path)
        assert path.read_text() == c.to_ppm()

    def test_save_png(self, tmp_path):
        c = Canvas(3, 2)
        c.write_pixel(0, 0, Color(1, 0, 0))
        c.write_pixel(2, 1, Color(0, 0, 1))
        path = tmp_path / "out.png"
        c.save(str(path))

        with Image.open(path) as img:
            assert img.size == (3, 2)
            assert img.mode == "RGB"
            assert img.getpixel((0, 0)) == (255, 0, 0)
            assert img.getpixel((2, 1)) == (0, 0, 255)
            assert img.getpixel((1, 0)) == (0, 0, 0)
