"""CAPTCHA image generation on top of the raster engine.

Pipeline (one call to CaptchaGenerator.create):
    1. Background layer: uniform fill, then noise circles and noise lines
       expressed as draw commands (every 4th circle is an outline)
    2. Text layer: each glyph is drawn centered on a square canvas of
       font_size = int(0.8 * height), rotated by a random integer angle in
       [-20, 20] degrees and composited at padding + i * gap
    3. Warp: tall images (height >= warp_min_height) get a sinusoidal warp of
       the text layer with amplitude font_size / 10 and period 200
    4. Text layer composited over the background

Disturbance level sets how many noise circles and how many noise lines are
drawn (NORMAL=4, MEDIUM=8, HIGH=16).

Randomness comes from a per-generator np.random.RandomState, so a seeded
generator reproduces its images exactly.

Usage:
    from src.captcha import CaptchaGenerator, Disturbance

    gen = CaptchaGenerator(120, 30, Disturbance.MEDIUM, seed=7)
    canvas, code = gen.create()
    png = generate_captcha_png(120, 30, code="AB12")
"""

import logging
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..raster import (
    BLACK,
    WHITE,
    Canvas,
    CircleFill,
    CircleStroke,
    Color,
    DrawCommand,
    InvalidDimension,
    Line,
    render_commands,
    rotate,
    warp,
)
from ..raster.glyphs import draw_text, load_font
from ..utils import color as color_utils
from ..utils import fs

logger = logging.getLogger(__name__)

MAX_ROTATION_DEG = 20
WARP_PERIOD = 200.0


class Disturbance(IntEnum):
    """Number of noise circles (and of noise lines) drawn on the background."""
    NORMAL = 4
    MEDIUM = 8
    HIGH = 16

    @classmethod
    def parse(cls, value: Union["Disturbance", int, str]) -> "Disturbance":
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown disturbance level: {value}") from None
        return cls(value)


# Ambiguous glyphs (0/O, 1/I/l, o) are left out of the letter sets
CHARSETS = {
    "numbers": "0123456789",
    "alphabet": "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz",
    "alphanumeric": "23456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz",
}

ColorValue = Union[str, Sequence[int]]


def _to_colors(values: Optional[Sequence[ColorValue]], default: Color) -> List[Color]:
    if not values:
        return [default]
    return [Color.of(color_utils.parse_color(v)) for v in values]


def _positive(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
        raise InvalidDimension(f"Captcha {name} must be a positive integer, got {value!r}")
    return int(value)


class CaptchaGenerator:
    """Renders CAPTCHA canvases of a fixed size.

    Parameters
    ----------
    width, height : int
        Image size in pixels (positive)
    disturbance : Disturbance or str
        Noise level, default NORMAL
    front_colors : sequence, optional
        Glyph and noise colors (names, hex strings or channel tuples); black if empty
    background_colors : sequence, optional
        Background fill candidates; white if empty
    font_path : str, optional
        TrueType font; None uses Pillow's bundled font
    seed : int, optional
        Seed for the generator's RandomState
    warp_min_height : int
        Warp the text layer only for images at least this tall
    """

    def __init__(
        self,
        width: int = 120,
        height: int = 30,
        disturbance: Union[Disturbance, int, str] = Disturbance.NORMAL,
        front_colors: Optional[Sequence[ColorValue]] = None,
        background_colors: Optional[Sequence[ColorValue]] = None,
        font_path: Optional[str] = None,
        seed: Optional[int] = None,
        warp_min_height: int = 48,
    ):
        self.width = _positive("width", width)
        self.height = _positive("height", height)
        self.disturbance = Disturbance.parse(disturbance)
        self.front_colors = _to_colors(front_colors, BLACK)
        self.background_colors = _to_colors(background_colors, WHITE)
        self.font_path = font_path
        self.warp_min_height = warp_min_height
        self.rng = np.random.RandomState(seed)

    @property
    def font_size(self) -> int:
        return max(1, int(0.8 * self.height))

    def _pick(self, colors: List[Color]) -> Color:
        return colors[self.rng.randint(0, len(colors))]

    def random_text(self, length: int = 4, charset: str = "alphanumeric") -> str:
        """Draw ``length`` characters from a named charset."""
        if length < 1:
            raise ValueError(f"Code length must be >= 1, got {length}")
        try:
            chars = CHARSETS[charset]
        except KeyError:
            raise ValueError(f"Unknown charset: {charset}") from None
        idx = self.rng.randint(0, len(chars), size=length)
        return "".join(chars[i] for i in idx)

    def noise_commands(self) -> List[DrawCommand]:
        """Random circles followed by random lines, ``disturbance`` of each."""
        w, h = self.width, self.height
        r_lo = max(1, h // 20)
        r_hi = max(r_lo, h // 10) + 1
        n = int(self.disturbance)

        commands: List[DrawCommand] = []
        for i in range(n):
            xc = int(self.rng.randint(0, w))
            yc = int(self.rng.randint(0, h))
            r = int(self.rng.randint(r_lo, r_hi))
            color = self._pick(self.front_colors)
            if i % 4 == 0:
                commands.append(CircleStroke(xc, yc, r, color))
            else:
                commands.append(CircleFill(xc, yc, r, color))

        for _ in range(n):
            x1, x2 = (int(v) for v in self.rng.randint(0, w, size=2))
            y1, y2 = (int(v) for v in self.rng.randint(0, h, size=2))
            commands.append(Line(x1, y1, x2, y2, self._pick(self.front_colors)))
        return commands

    def _background(self) -> Canvas:
        canvas = Canvas.create(self.width, self.height)
        canvas.fill_uniform(self._pick(self.background_colors))
        render_commands(canvas, self.noise_commands())
        return canvas

    def _glyph(self, font, ch: str, size: int) -> Canvas:
        glyph = Canvas.create(size, size)
        draw_text(glyph, font, ch, (size / 2, size / 2), self._pick(self.front_colors), anchor="mm")
        angle = int(self.rng.randint(-MAX_ROTATION_DEG, MAX_ROTATION_DEG + 1))
        return rotate(glyph, angle)

    def _text_layer(self, code: str) -> Canvas:
        fsize = self.font_size
        font = load_font(self.font_path, fsize)
        padding = fsize // 4
        gap = (self.width - 2 * padding) // len(code)

        layer = Canvas.create(self.width, self.height)
        for i, ch in enumerate(code):
            glyph = self._glyph(font, ch, fsize)
            x = padding + i * gap
            y = (self.height - glyph.height) // 2
            layer.composite_over(glyph, offset=(x, y))

        if self.height >= self.warp_min_height:
            warp(layer, fsize / 10.0, WARP_PERIOD)
        return layer

    def create(self, code: str = "", length: int = 4, charset: str = "alphanumeric") -> Tuple[Canvas, str]:
        """Render one CAPTCHA.

        Parameters
        ----------
        code : str
            Text to draw; a random code is generated when empty
        length, charset
            Used only for random codes

        Returns
        -------
        (Canvas, str)
            The image and the code it shows
        """
        if not code:
            code = self.random_text(length, charset)

        image = self._background()
        image.composite_over(self._text_layer(code))
        logger.debug(f"Rendered captcha {self.width}x{self.height} ({len(code)} chars)")
        return image, code


def generate_captcha_png(
    width: int,
    height: int,
    code: str = "",
    *,
    settings=None,
    seed: Optional[int] = None,
) -> bytes:
    """Render a CAPTCHA and encode it as PNG.

    Parameters
    ----------
    width, height : int
        Image size in pixels
    code : str
        Text to draw; random when empty
    settings : CaptchaSettings, optional
        Colors, font, disturbance and random-code options from the service config
    seed : int, optional
        RandomState seed

    Returns
    -------
    bytes
        PNG file contents
    """
    if settings is None:
        gen = CaptchaGenerator(width, height, seed=seed)
        canvas, _ = gen.create(code)
    else:
        gen = CaptchaGenerator(
            width,
            height,
            disturbance=settings.disturbance,
            front_colors=settings.front_colors,
            background_colors=settings.background_colors,
            font_path=settings.font_path,
            seed=seed,
            warp_min_height=settings.warp_min_height,
        )
        canvas, _ = gen.create(code, length=settings.length, charset=settings.charset)
    return fs.encode_png(canvas)
