"""2-D raster engine behind the CAPTCHA renderer.

Provides:
    - Canvas: RGBA pixel buffer (canvas)
    - Bilinear resampling at fractional coordinates (resample)
    - Bresenham line and midpoint circle scan conversion (rasterize)
    - Rotation by inverse mapping (transform)
    - Sinusoidal warp filter (warp)
    - Pillow-backed glyph drawing (glyphs)

Data flows one way: draw onto a Canvas → optional rotate / warp →
encode with src.utils.fs.encode_png().

Invariants:
    - Synchronous, no I/O, no shared mutable state between canvases
    - Off-canvas geometry is clipped; only invalid canvas sizes raise
"""

from .canvas import (
    BLACK,
    TRANSPARENT,
    WHITE,
    Canvas,
    CanvasError,
    Color,
    InvalidDimension,
    OutOfRange,
)
from .rasterize import (
    CircleFill,
    CircleStroke,
    DrawCommand,
    Line,
    circle_points,
    draw_circle,
    draw_line,
    line_points,
    render_commands,
)
from .resample import ResampleWeights, linear_weights, resample, sample
from .transform import RotationPlan, rotate
from .warp import warp

__all__ = [
    'BLACK',
    'TRANSPARENT',
    'WHITE',
    'Canvas',
    'CanvasError',
    'Color',
    'InvalidDimension',
    'OutOfRange',
    'CircleFill',
    'CircleStroke',
    'DrawCommand',
    'Line',
    'circle_points',
    'draw_circle',
    'draw_line',
    'line_points',
    'render_commands',
    'ResampleWeights',
    'linear_weights',
    'resample',
    'sample',
    'RotationPlan',
    'rotate',
    'warp',
]
