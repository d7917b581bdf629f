"""Test line and circle scan conversion.

Tests for src.raster.rasterize:
    - Bresenham diagonal, shallow and steep lines
    - Identical endpoints draw nothing
    - Midpoint circle extrema (stroke) and disk coverage (fill)
    - Off-canvas geometry is clipped without errors
    - Draw command dispatch

Test cases:
    - test_diagonal_line_exact()
    - test_line_identical_endpoints()
    - test_shallow_line_one_pixel_per_column()
    - test_steep_line_one_pixel_per_row()
    - test_line_direction_symmetry()
    - test_line_off_canvas_clipped()
    - test_circle_stroke_extrema()
    - test_circle_fill_covers_disk()
    - test_circle_off_canvas_untouched()
    - test_negative_radius_draws_nothing()
    - test_render_commands_dispatch()
    - test_render_commands_unknown()

Run:
    pytest tests/test_rasterize.py -v
"""

import numpy as np
import pytest

from src.raster import (
    Canvas,
    CircleFill,
    CircleStroke,
    Color,
    Line,
    circle_points,
    draw_circle,
    draw_line,
    line_points,
    render_commands,
)

INK = Color(0, 0, 0, 255)


def painted(canvas):
    """Set of (x, y) with non-zero alpha."""
    ys, xs = np.nonzero(canvas.pixels[..., 3])
    return set(zip(xs.tolist(), ys.tolist()))


# ============================================================================
# LINES
# ============================================================================

def test_diagonal_line_exact():
    canvas = Canvas.create(10, 10)
    draw_line(canvas, 1, 1, 8, 8, INK)
    assert painted(canvas) == {(i, i) for i in range(1, 9)}


def test_line_identical_endpoints():
    canvas = Canvas.create(10, 10)
    draw_line(canvas, 4, 4, 4, 4, INK)
    assert painted(canvas) == set()
    assert list(line_points(4, 4, 4, 4)) == []


def test_shallow_line_one_pixel_per_column():
    pts = list(line_points(0, 0, 9, 3))
    assert pts[0] == (0, 0) and pts[-1] == (9, 3)
    assert [x for x, _ in pts] == list(range(10))
    ys = [y for _, y in pts]
    assert all(0 <= b - a <= 1 for a, b in zip(ys, ys[1:]))


def test_steep_line_one_pixel_per_row():
    pts = list(line_points(2, 0, 4, 9))
    assert pts[0] == (2, 0) and pts[-1] == (4, 9)
    assert [y for _, y in pts] == list(range(10))


def test_line_direction_symmetry():
    """Reversed segments cover the same number of pixels and endpoints."""
    fwd = list(line_points(8, 8, 1, 1))
    assert fwd[0] == (8, 8) and fwd[-1] == (1, 1)
    assert set(fwd) == {(i, i) for i in range(1, 9)}
    left = list(line_points(9, 0, 0, 0))
    assert len(left) == 10


def test_line_off_canvas_clipped():
    canvas = Canvas.create(5, 5)
    draw_line(canvas, -10, 2, 20, 2, INK)
    assert painted(canvas) == {(x, 2) for x in range(5)}
    draw_line(canvas, -10, -10, -1, -20, INK)  # nothing visible, no error


# ============================================================================
# CIRCLES
# ============================================================================

def test_circle_stroke_extrema():
    canvas = Canvas.create(21, 21)
    draw_circle(canvas, 10, 10, 5, False, INK)
    pts = painted(canvas)
    for p in [(15, 10), (5, 10), (10, 15), (10, 5)]:
        assert p in pts
    assert (10, 10) not in pts
    # Nothing strictly inside radius 3
    assert not any((x - 10) ** 2 + (y - 10) ** 2 <= 9 for x, y in pts)


def test_circle_fill_covers_disk():
    canvas = Canvas.create(21, 21)
    draw_circle(canvas, 10, 10, 5, True, INK)
    pts = painted(canvas)
    disk = {
        (x, y)
        for x in range(21)
        for y in range(21)
        if (x - 10) ** 2 + (y - 10) ** 2 <= 25
    }
    assert disk <= pts
    assert (10, 10) in pts


def test_circle_off_canvas_untouched():
    canvas = Canvas.create(10, 10)
    draw_circle(canvas, -20, 5, 4, True, INK)
    draw_circle(canvas, 5, 40, 4, False, INK)
    assert painted(canvas) == set()


def test_circle_partially_clipped():
    canvas = Canvas.create(10, 10)
    draw_circle(canvas, 0, 0, 3, True, INK)
    pts = painted(canvas)
    assert (0, 0) in pts and (3, 0) in pts and (0, 3) in pts
    assert all(x >= 0 and y >= 0 for x, y in pts)


def test_negative_radius_draws_nothing():
    assert list(circle_points(5, 5, -1)) == []
    canvas = Canvas.create(10, 10)
    draw_circle(canvas, 5, 5, -2, True, INK)
    assert painted(canvas) == set()


# ============================================================================
# DRAW COMMANDS
# ============================================================================

def test_render_commands_dispatch():
    a = Canvas.create(21, 21)
    render_commands(a, [
        Line(0, 0, 20, 0, INK),
        CircleStroke(10, 10, 5, INK),
        CircleFill(3, 15, 2, INK),
    ])

    b = Canvas.create(21, 21)
    draw_line(b, 0, 0, 20, 0, INK)
    draw_circle(b, 10, 10, 5, False, INK)
    draw_circle(b, 3, 15, 2, True, INK)

    assert np.array_equal(a.pixels, b.pixels)


def test_render_commands_unknown():
    canvas = Canvas.create(4, 4)
    with pytest.raises(TypeError):
        render_commands(canvas, [("line", 0, 0, 3, 3)])


def test_commands_are_frozen():
    cmd = Line(0, 0, 1, 1, INK)
    with pytest.raises(Exception):
        cmd.x1 = 5
