"""Test Pillow-backed glyph drawing.

Tests for src.raster.glyphs:
    - Bundled font loads at any pixel size and is cached
    - Invalid sizes and missing font files are rejected
    - draw_text composites ink in the requested color
    - Empty text is a no-op

Run:
    pytest tests/test_glyphs.py -v
"""

import numpy as np
import pytest

from src.raster import Canvas, Color
from src.raster.glyphs import draw_text, load_font, text_bbox, text_size


def test_load_font_cached():
    a = load_font(None, 24)
    b = load_font(None, 24)
    assert a is b
    assert load_font(None, 12) is not a


def test_load_font_invalid_size():
    with pytest.raises(ValueError):
        load_font(None, 0)


def test_load_font_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_font(str(tmp_path / "missing.ttf"), 20)


def test_text_size_grows_with_text():
    font = load_font(None, 20)
    w1, h1 = text_size(font, "A")
    w4, _ = text_size(font, "AAAA")
    assert w1 > 0 and h1 > 0
    assert w4 > w1
    assert text_bbox(font, "") == (0, 0, 0, 0)


def test_draw_text_colors_ink():
    canvas = Canvas.create(60, 30)
    font = load_font(None, 20)
    draw_text(canvas, font, "Hi", (5, 2), (200, 10, 20))

    alpha = canvas.pixels[..., 3]
    assert alpha.any()
    solid = alpha == 255
    assert solid.any()
    assert (canvas.pixels[solid][:, :3] == np.array([200, 10, 20])).all()


def test_draw_text_centered_anchor():
    canvas = Canvas.create(40, 40)
    font = load_font(None, 24)
    draw_text(canvas, font, "O", (20, 20), Color(0, 0, 0, 255), anchor="mm")
    ys, xs = np.nonzero(canvas.pixels[..., 3])
    assert abs(xs.mean() - 20) < 3
    assert abs(ys.mean() - 20) < 3


def test_draw_empty_text_noop():
    canvas = Canvas.create(10, 10)
    draw_text(canvas, load_font(None, 8), "", (0, 0), (0, 0, 0))
    assert not canvas.pixels.any()
