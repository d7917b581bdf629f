"""Text drawing onto a Canvas through Pillow's FreeType bindings.

The engine does not shape or hint glyphs itself. Pillow renders the text
into an 8-bit coverage mask the size of the canvas, and the mask is
composited with Canvas.blend_mask().

Fonts are cached per (path, size) and never mutated, so one instance is
safe to share between concurrent requests.
"""

import logging
from functools import lru_cache
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .canvas import Canvas, ColorLike

logger = logging.getLogger(__name__)

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


@lru_cache(maxsize=64)
def load_font(path: Optional[str], size: int) -> FontType:
    """Load a TrueType/OpenType font at ``size`` pixels.

    Parameters
    ----------
    path : str, optional
        Font file; None selects Pillow's bundled default font
    size : int
        Pixel size, at least 1

    Returns
    -------
    FreeTypeFont
        Cached font instance

    Raises
    ------
    ValueError
        If size < 1
    OSError
        If the font file cannot be read
    """
    if size < 1:
        raise ValueError(f"Font size must be >= 1, got {size}")
    if path is None:
        return ImageFont.load_default(size=size)
    logger.debug(f"Loading font {path} at {size}px")
    return ImageFont.truetype(path, size)


def text_bbox(font: FontType, text: str, anchor: str = "la") -> Tuple[int, int, int, int]:
    """Bounding box (left, top, right, bottom) of ``text`` drawn at the origin."""
    if not text:
        return (0, 0, 0, 0)
    return tuple(int(v) for v in font.getbbox(text, anchor=anchor))


def text_size(font: FontType, text: str) -> Tuple[int, int]:
    """Ink width and height of ``text``."""
    left, top, right, bottom = text_bbox(font, text)
    return right - left, bottom - top


def draw_text(
    canvas: Canvas,
    font: FontType,
    text: str,
    origin: Tuple[float, float],
    color: ColorLike,
    anchor: str = "la"
) -> None:
    """Draw ``text`` onto ``canvas``.

    Parameters
    ----------
    canvas : Canvas
        Destination (modified in place)
    font : FontType
        Font from load_font()
    text : str
        Text to draw; empty text draws nothing
    origin : tuple of float
        Anchor point in canvas pixels
    color : ColorLike
        Fill color
    anchor : str
        Pillow anchor code, default "la" (left, ascender)
    """
    if not text:
        return
    mask = Image.new("L", canvas.size, 0)
    ImageDraw.Draw(mask).text(origin, text, fill=255, font=font, anchor=anchor)
    canvas.blend_mask(np.asarray(mask), color)
