"""Rotation of a canvas by an arbitrary angle.

Provides:
    - RotationPlan: output size and inverse mapping for one (size, angle) pair
    - rotate(): new canvas holding the rotated, antialiased image

Architecture:
    - Rotate the four source corners about the image center to find the
      output bounding box (width/height = max |corner delta| + 0.5, truncated)
    - Map every destination pixel center back into continuous source space
      with the inverse rotation, as numpy arrays over the whole output grid
      (inverse mapping, no forward splats)
    - Sample covered points with the array form of the bilinear resampler;
      uncovered pixels stay transparent

Invariants:
    - The source canvas is never modified; the result is a new Canvas
    - Angle is in degrees, any sign or magnitude
    - 0° (and any multiple of 360°) reproduces the source pixel for pixel
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .canvas import Canvas
from .resample import sample_grid


@dataclass(frozen=True)
class RotationPlan:
    """Geometry of one rotation.

    Attributes
    ----------
    sin, cos : float
        Sine and cosine of the angle
    src_width, src_height : int
        Source size
    width, height : int
        Output size
    dx, dy : float
        Translation terms of the inverse mapping; they put the center of
        the output canvas on the center of the source
    """
    sin: float
    cos: float
    src_width: int
    src_height: int
    width: int
    height: int
    dx: float
    dy: float

    @classmethod
    def for_size(cls, src_width: int, src_height: int, angle: float) -> "RotationPlan":
        """Plan the rotation of a ``src_width``×``src_height`` image by ``angle`` degrees."""
        theta = math.radians(angle)
        sin, cos = math.sin(theta), math.cos(theta)

        # Source corners, origin at the image center
        hw, hh = src_width * 0.5, src_height * 0.5
        corners = ((-hw, hh), (hw, hh), (-hw, -hh), (hw, -hh))
        rotated = [(cos * x + sin * y, -sin * x + cos * y) for x, y in corners]
        (x1, y1), (x2, y2), (x3, y3), (x4, y4) = rotated

        width = int(max(abs(x4 - x1), abs(x3 - x2)) + 0.5)
        height = int(max(abs(y4 - y1), abs(y3 - y2)) + 0.5)

        dx = -0.5 * width * cos + 0.5 * height * sin + hw
        dy = -0.5 * width * sin - 0.5 * height * cos + hh
        return cls(sin, cos, src_width, src_height, width, height, dx, dy)

    def source_point(self, x: int, y: int) -> Tuple[float, float]:
        """Continuous source coordinates seen by destination pixel (x, y)."""
        px, py = x + 0.5, y + 0.5
        return (
            self.cos * px - self.sin * py + self.dx,
            self.sin * px + self.cos * py + self.dy,
        )

    def source_grid(self) -> Tuple[np.ndarray, np.ndarray]:
        """source_point() for every destination pixel, as (sx, sy) arrays."""
        ys, xs = np.mgrid[0:self.height, 0:self.width]
        px, py = xs + 0.5, ys + 0.5
        return (
            self.cos * px - self.sin * py + self.dx,
            self.sin * px + self.cos * py + self.dy,
        )

    def covers(self, sx: float, sy: float) -> bool:
        return 0.0 <= sx < self.src_width and 0.0 <= sy < self.src_height


def rotate(canvas: Canvas, angle: float) -> Canvas:
    """Rotate ``canvas`` by ``angle`` degrees into a new, fitted canvas.

    Parameters
    ----------
    canvas : Canvas
        Source image (not modified)
    angle : float
        Rotation in degrees

    Returns
    -------
    Canvas
        Output sized to the rotated bounding box; pixels without source
        coverage are transparent

    Examples
    --------
    >>> src = Canvas.create(4, 2)
    >>> rotate(src, 90).size
    (2, 4)
    """
    plan = RotationPlan.for_size(canvas.width, canvas.height, angle)
    dst = Canvas.create(plan.width, plan.height)
    sx, sy = plan.source_grid()
    inside = (sx >= 0.0) & (sx < plan.src_width) & (sy >= 0.0) & (sy < plan.src_height)
    dst.pixels[inside] = sample_grid(canvas, sx[inside], sy[inside])
    return dst
