"""Sinusoidal wave distortion applied to a canvas in place.

Each pixel (x, y) takes the color found at

    (x + round(A·sin(y·k)), y + round(A·cos(x·k))),   k = 1.4π / period

where A is the amplitude in pixels. Samples that fall off the canvas or
are fully transparent are skipped, so the original pixel stays.

Two read modes:
    snapshot=True (default): all reads come from a copy taken before the
        pass. The result does not depend on traversal order.
    snapshot=False: legacy pass reading the live buffer column by column
        (x outer, y inner), so later pixels may see already-moved
        neighbors. This reproduces the traversal-order effect only: offsets
        are still rounded half up, so the output is not pixel-identical to
        a pass that truncates them.
"""

import math

import numpy as np

from .canvas import Canvas

WAVE_CONSTANT = 1.4 * math.pi


def _round_half_up(v: np.ndarray) -> np.ndarray:
    return np.floor(v + 0.5).astype(np.int64)


def warp(canvas: Canvas, amplitude: float, period: float, *, snapshot: bool = True) -> Canvas:
    """Distort ``canvas`` with a sine wave.

    Parameters
    ----------
    canvas : Canvas
        Image to distort (modified in place)
    amplitude : float
        Peak displacement in pixels
    period : float
        Wavelength scale in pixels, must be positive
    snapshot : bool
        Read from a pre-pass copy (default) or from the live buffer

    Returns
    -------
    Canvas
        The same canvas, for chaining

    Raises
    ------
    ValueError
        If period is not positive
    """
    if period <= 0:
        raise ValueError(f"Warp period must be positive, got {period}")

    k = WAVE_CONSTANT / period
    h, w = canvas.height, canvas.width
    ys, xs = np.mgrid[0:h, 0:w]
    sx = xs + _round_half_up(amplitude * np.sin(ys * k))
    sy = ys + _round_half_up(amplitude * np.cos(xs * k))

    if snapshot:
        src = canvas.pixels.copy()
        inside = (sx >= 0) & (sx < w) & (sy >= 0) & (sy < h)
        sampled = src[np.clip(sy, 0, h - 1), np.clip(sx, 0, w - 1)]
        keep = inside & (sampled[..., 3] > 0)
        canvas.pixels[keep] = sampled[keep]
        return canvas

    pixels = canvas.pixels
    for x in range(w):
        for y in range(h):
            rx, ry = sx[y, x], sy[y, x]
            if 0 <= rx < w and 0 <= ry < h and pixels[ry, rx, 3] > 0:
                pixels[y, x] = pixels[ry, rx]
    return canvas
