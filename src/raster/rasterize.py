"""Scan conversion of lines and circles onto a Canvas.

Provides:
    - line_points() / draw_line(): integer Bresenham with steep-line transposition
    - circle_points() / draw_circle(): midpoint circle, 8-way symmetry, optional fill
    - Draw commands: Line, CircleStroke, CircleFill + render_commands()

Invariants:
    - Integer arithmetic only, no antialiasing
    - Off-canvas pixels are dropped silently (Canvas.plot)
    - A line with identical endpoints draws nothing
    - A circle whose bounding box misses the canvas touches no pixel

Used by:
    - captcha.generator: noise lines and spots
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

from .canvas import Canvas, Color, ColorLike


def _sign(v: int) -> int:
    return 1 if v > 0 else -1


def line_points(x1: int, y1: int, x2: int, y2: int) -> Iterator[Tuple[int, int]]:
    """Yield the pixels of the segment (x1, y1)–(x2, y2).

    Notes
    -----
    Error term d starts at 2·dy − dx. Each unit step of the major axis
    either keeps the minor coordinate (d < 0, d += 2·dy) or moves it by
    its sign (d += 2·(dy − dx)). Steep segments (dy > dx) swap the axes
    and swap back on output. The start point is emitted first, then one
    point per step until the major coordinate reaches its target.
    """
    dx, dy = abs(x2 - x1), abs(y2 - y1)
    steep = dy > dx
    if steep:
        x1, y1 = y1, x1
        x2, y2 = y2, x2
        dx, dy = dy, dx

    if x1 == x2:
        return

    ix, iy = _sign(x2 - x1), _sign(y2 - y1)
    n2dy = 2 * dy
    n2dydx = 2 * (dy - dx)
    d = n2dy - dx

    yield (y1, x1) if steep else (x1, y1)
    while x1 != x2:
        if d < 0:
            d += n2dy
        else:
            y1 += iy
            d += n2dydx
        x1 += ix
        yield (y1, x1) if steep else (x1, y1)


def draw_line(canvas: Canvas, x1: int, y1: int, x2: int, y2: int, color: ColorLike) -> None:
    """Draw a 1-px aliased segment between two integer endpoints."""
    color = Color.of(color)
    for x, y in line_points(x1, y1, x2, y2):
        canvas.plot(x, y, color)


def _octants(xc: int, yc: int, x: int, y: int) -> Tuple[Tuple[int, int], ...]:
    return (
        (xc + x, yc + y),
        (xc - x, yc + y),
        (xc + x, yc - y),
        (xc - x, yc - y),
        (xc + y, yc + x),
        (xc - y, yc + x),
        (xc + y, yc - x),
        (xc - y, yc - x),
    )


def circle_points(xc: int, yc: int, r: int, fill: bool = False) -> Iterator[Tuple[int, int]]:
    """Yield the pixels of a circle (outline, or solid disk when ``fill``).

    Notes
    -----
    Starts at (0, r) with d = 3 − 2r and walks one octant while x ≤ y:
    d < 0 → d += 4x + 6; otherwise d += 4(x − y) + 10 and y −= 1.
    In fill mode every yi in [x, y] is mirrored at each step, so pixels
    near the boundary may be yielded more than once.
    """
    x, y, d = 0, r, 3 - 2 * r
    while x <= y:
        if fill:
            for yi in range(x, y + 1):
                yield from _octants(xc, yc, x, yi)
        else:
            yield from _octants(xc, yc, x, y)
        if d < 0:
            d += 4 * x + 6
        else:
            d += 4 * (x - y) + 10
            y -= 1
        x += 1


def draw_circle(
    canvas: Canvas,
    xc: int,
    yc: int,
    r: int,
    fill: bool,
    color: ColorLike
) -> None:
    """Draw a circle of radius ``r`` centered at (xc, yc)."""
    if xc + r < 0 or xc - r >= canvas.width or yc + r < 0 or yc - r >= canvas.height:
        return
    color = Color.of(color)
    for x, y in circle_points(xc, yc, r, fill):
        canvas.plot(x, y, color)


# ============================================================================
# DRAW COMMANDS
# ============================================================================

@dataclass(frozen=True)
class Line:
    """Segment from (x1, y1) to (x2, y2)."""
    x1: int
    y1: int
    x2: int
    y2: int
    color: ColorLike


@dataclass(frozen=True)
class CircleStroke:
    """Circle outline."""
    xc: int
    yc: int
    r: int
    color: ColorLike


@dataclass(frozen=True)
class CircleFill:
    """Solid disk."""
    xc: int
    yc: int
    r: int
    color: ColorLike


DrawCommand = Union[Line, CircleStroke, CircleFill]


def render_commands(canvas: Canvas, commands: Iterable[DrawCommand]) -> None:
    """Execute draw commands in order.

    Raises
    ------
    TypeError
        For anything that is not a Line, CircleStroke or CircleFill
    """
    for cmd in commands:
        if isinstance(cmd, Line):
            draw_line(canvas, cmd.x1, cmd.y1, cmd.x2, cmd.y2, cmd.color)
        elif isinstance(cmd, CircleStroke):
            draw_circle(canvas, cmd.xc, cmd.yc, cmd.r, False, cmd.color)
        elif isinstance(cmd, CircleFill):
            draw_circle(canvas, cmd.xc, cmd.yc, cmd.r, True, cmd.color)
        else:
            raise TypeError(f"Unknown draw command: {type(cmd).__name__}")
