"""Annotated text image: a main line in black over a red tip line.

Layout:
    font_size = sqrt(width * height / 100)
    Both lines are horizontally centered on their ink boxes and stacked with
    a 10 px gap; the block as a whole is vertically centered on a white
    canvas. An empty tip line takes no space and adds no gap.
"""

import logging
import math
from typing import Optional, Tuple

from ..raster import BLACK, WHITE, Canvas, Color
from ..raster.glyphs import FontType, draw_text, load_font, text_bbox

logger = logging.getLogger(__name__)

LINE_GAP = 10
TIP_COLOR = Color(255, 0, 0, 255)


def _ink(font: FontType, text: str) -> Tuple[int, int, int, int]:
    return text_bbox(font, text, anchor="la")


def render_annotated(
    text: str,
    tip_text: str,
    width: int,
    height: int,
    font_path: Optional[str] = None,
) -> Canvas:
    """Render ``text`` with ``tip_text`` below it.

    Parameters
    ----------
    text : str
        Main line, drawn in black
    tip_text : str
        Secondary line, drawn in red; may be empty
    width, height : int
        Canvas size (InvalidDimension when not positive)
    font_path : str, optional
        TrueType font; None uses Pillow's bundled font

    Returns
    -------
    Canvas
        Opaque image
    """
    canvas = Canvas.create(width, height)
    canvas.fill_uniform(WHITE)

    font_size = max(1, int(math.sqrt(width * height / 100.0)))
    font = load_font(font_path, font_size)

    main_box = _ink(font, text)
    tip_box = _ink(font, tip_text)
    main_h = main_box[3] - main_box[1]
    tip_h = tip_box[3] - tip_box[1]

    total_h = main_h
    if tip_text:
        total_h += LINE_GAP + tip_h
    y = (height - total_h) // 2

    # Origins are shifted by the bbox offsets so the ink, not the anchor, is centered
    main_x = (width - (main_box[2] - main_box[0])) // 2
    draw_text(canvas, font, text, (main_x - main_box[0], y - main_box[1]), BLACK)

    if tip_text:
        tip_x = (width - (tip_box[2] - tip_box[0])) // 2
        tip_y = y + main_h + LINE_GAP
        draw_text(canvas, font, tip_text, (tip_x - tip_box[0], tip_y - tip_box[1]), TIP_COLOR)

    logger.debug(f"Rendered annotated image {width}x{height} at {font_size}px")
    return canvas
