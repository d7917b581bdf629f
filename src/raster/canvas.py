"""RGBA pixel buffer shared by every drawing and transform step.

Provides:
    - Color: non-premultiplied 8-bit RGBA value
    - Canvas: width×height pixel grid with bound-checked access
    - Porter-Duff "over" compositing (canvas on canvas, color through mask)
    - Error taxonomy: CanvasError, InvalidDimension, OutOfRange

Storage:
    Canvas.pixels is a C-contiguous numpy uint8 array of shape (H, W, 4).
    Canvas.pix is the flat row-major byte view of the same memory, with
    stride == width * 4 bytes per row.

Invariants:
    - width, height > 0 (checked at construction)
    - get/set raise OutOfRange outside [0, width) × [0, height)
    - plot/fill_rect/composite_over clip to the canvas, never raise
    - New canvases are transparent black (all bytes zero)

Usage:
    from src.raster.canvas import Canvas, Color

    canvas = Canvas.create(120, 30)
    canvas.fill_uniform(Color(255, 255, 255))
    canvas.set(3, 4, (255, 0, 0, 255))
"""

from typing import NamedTuple, Sequence, Tuple, Union

import numpy as np


class CanvasError(Exception):
    """Base class for raster engine errors."""


class InvalidDimension(CanvasError, ValueError):
    """Canvas width or height is not a positive integer."""


class OutOfRange(CanvasError, IndexError):
    """Explicit pixel access outside the canvas rectangle."""


class Color(NamedTuple):
    """8-bit RGBA color, not premultiplied."""
    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def of(cls, value: "ColorLike") -> "Color":
        """Coerce a 3- or 4-item sequence into a Color.

        Raises
        ------
        ValueError
            If the sequence has the wrong length or a channel is outside 0..255
        """
        if isinstance(value, Color):
            return value
        channels = tuple(int(c) for c in value)
        if len(channels) == 3:
            channels = channels + (255,)
        if len(channels) != 4:
            raise ValueError(f"Color needs 3 or 4 channels, got {len(channels)}")
        for c in channels:
            if not 0 <= c <= 255:
                raise ValueError(f"Color channel out of range [0, 255]: {c}")
        return cls(*channels)


ColorLike = Union[Color, Sequence[int]]

TRANSPARENT = Color(0, 0, 0, 0)
BLACK = Color(0, 0, 0, 255)
WHITE = Color(255, 255, 255, 255)


def _check_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidDimension(f"Canvas {name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidDimension(f"Canvas {name} must be positive, got {value}")
    return int(value)


def over(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    """Composite ``src`` over ``dst`` (both (..., 4) uint8, non-premultiplied).

    Parameters
    ----------
    dst : np.ndarray
        Destination pixels, shape (..., 4), uint8
    src : np.ndarray
        Source pixels, same shape, uint8

    Returns
    -------
    np.ndarray
        Blended pixels, same shape, uint8

    Notes
    -----
    out_a = sa + da·(1 - sa)
    out_c = (sc·sa + dc·da·(1 - sa)) / out_a, and 0 where out_a == 0.
    Channels are rounded half up.
    """
    sa = src[..., 3:4].astype(np.float64) / 255.0
    da = dst[..., 3:4].astype(np.float64) / 255.0
    out_a = sa + da * (1.0 - sa)

    src_rgb = src[..., :3].astype(np.float64)
    dst_rgb = dst[..., :3].astype(np.float64)
    num = src_rgb * sa + dst_rgb * da * (1.0 - sa)
    with np.errstate(divide='ignore', invalid='ignore'):
        rgb = np.where(out_a > 0, num / np.where(out_a > 0, out_a, 1.0), 0.0)

    out = np.empty_like(dst)
    out[..., :3] = np.clip(np.floor(rgb + 0.5), 0, 255).astype(np.uint8)
    out[..., 3:4] = np.clip(np.floor(out_a * 255.0 + 0.5), 0, 255).astype(np.uint8)
    return out


class Canvas:
    """Rectangular RGBA pixel buffer.

    Attributes
    ----------
    width : int
        Width in pixels
    height : int
        Height in pixels
    pixels : np.ndarray
        (height, width, 4) uint8 array, row-major
    """

    def __init__(self, width: int, height: int):
        self.width = _check_dimension("width", width)
        self.height = _check_dimension("height", height)
        self.pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)

    @classmethod
    def create(cls, width: int, height: int) -> "Canvas":
        """Allocate a transparent canvas (raises InvalidDimension on w/h <= 0)."""
        return cls(width, height)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Canvas":
        """Build a canvas from a copy of an (H, W, 4) uint8 array."""
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 4:
            raise ValueError(f"Expected (H, W, 4) array, got shape {array.shape}")
        canvas = cls(array.shape[1], array.shape[0])
        canvas.pixels[...] = array.astype(np.uint8, copy=False)
        return canvas

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height})"

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def stride(self) -> int:
        """Bytes per row."""
        return self.width * 4

    @property
    def pix(self) -> np.ndarray:
        """Flat byte view of the buffer (shares memory with ``pixels``)."""
        return self.pixels.reshape(-1)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def offset(self, x: int, y: int) -> int:
        """Byte offset of pixel (x, y) in ``pix``."""
        self._require(x, y)
        return y * self.stride + x * 4

    def _require(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfRange(
                f"Pixel ({x}, {y}) outside canvas {self.width}x{self.height}"
            )

    def get(self, x: int, y: int) -> Color:
        """Read pixel (x, y)."""
        self._require(x, y)
        return Color(*(int(c) for c in self.pixels[y, x]))

    def set(self, x: int, y: int, color: ColorLike) -> None:
        """Write pixel (x, y)."""
        self._require(x, y)
        self.pixels[y, x] = Color.of(color)

    def plot(self, x: int, y: int, color: ColorLike) -> bool:
        """Write pixel (x, y) if it is on the canvas; return whether it was."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y, x] = color
            return True
        return False

    def fill_uniform(self, color: ColorLike) -> None:
        """Overwrite every pixel with ``color``."""
        self.pixels[...] = Color.of(color)

    def fill_rect(self, x: int, y: int, w: int, h: int, color: ColorLike) -> None:
        """Fill a rectangle, clipped to the canvas."""
        x1, y1 = max(0, x), max(0, y)
        x2, y2 = min(self.width, x + w), min(self.height, y + h)
        if x1 >= x2 or y1 >= y2:
            return
        self.pixels[y1:y2, x1:x2] = Color.of(color)

    def composite_over(self, source: "Canvas", offset: Tuple[int, int] = (0, 0)) -> None:
        """Blend ``source`` over this canvas with its origin at ``offset``.

        Parameters
        ----------
        source : Canvas
            Image placed on top
        offset : tuple of int
            Position of source's (0, 0) in this canvas's coordinates

        Notes
        -----
        Only the overlapping rectangle is touched. To lay a background
        beneath drawn content, composite the content over the background.
        """
        ox, oy = offset
        # Clipped regions
        src_x1, src_y1 = max(0, -ox), max(0, -oy)
        src_x2 = min(source.width, self.width - ox)
        src_y2 = min(source.height, self.height - oy)
        if src_x1 >= src_x2 or src_y1 >= src_y2:
            return

        dst_x1, dst_y1 = ox + src_x1, oy + src_y1
        dst_x2, dst_y2 = ox + src_x2, oy + src_y2

        region = self.pixels[dst_y1:dst_y2, dst_x1:dst_x2]
        self.pixels[dst_y1:dst_y2, dst_x1:dst_x2] = over(
            region, source.pixels[src_y1:src_y2, src_x1:src_x2]
        )

    def blend_mask(self, mask: np.ndarray, color: ColorLike) -> None:
        """Composite a solid color over the canvas through a coverage mask.

        Parameters
        ----------
        mask : np.ndarray
            (H, W) uint8 coverage, same size as the canvas
        color : ColorLike
            Fill color; its alpha is scaled by the mask
        """
        mask = np.asarray(mask)
        if mask.shape != (self.height, self.width):
            raise ValueError(
                f"Mask shape {mask.shape} does not match canvas {self.height}x{self.width}"
            )
        color = Color.of(color)
        covered = mask > 0
        if not covered.any():
            return

        layer = np.zeros_like(self.pixels)
        layer[..., 0] = color.r
        layer[..., 1] = color.g
        layer[..., 2] = color.b
        alpha = mask.astype(np.float64) * color.a / 255.0
        layer[..., 3] = np.floor(alpha + 0.5).astype(np.uint8)

        self.pixels[covered] = over(self.pixels[covered], layer[covered])

    def copy(self) -> "Canvas":
        return Canvas.from_array(self.pixels)

