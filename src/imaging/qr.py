"""QR code rendering.

The symbol matrix comes from the ``qrcode`` library (no quiet zone); this
module scales it by the largest integer factor that fits into
``size - 2 * margin`` and centers it on an opaque white square canvas.
"""

import logging
from typing import Sequence, Union

import numpy as np
import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.exceptions import DataOverflowError

from ..raster import WHITE, Canvas, Color, InvalidDimension
from ..utils import color as color_utils

logger = logging.getLogger(__name__)

ERROR_CORRECTION = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


def qr_matrix(text: str, level: str = "H") -> np.ndarray:
    """Module matrix of ``text`` as a square bool array (True = dark).

    Raises
    ------
    ValueError
        Unknown level, or text too long for any QR version at that level
    """
    try:
        correction = ERROR_CORRECTION[level]
    except KeyError:
        raise ValueError("Invalid QR code level") from None

    qr = qrcode.QRCode(error_correction=correction, border=0)
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except DataOverflowError as e:
        raise ValueError("Failed to create QR code: text too long") from e
    return np.array(qr.get_matrix(), dtype=bool)


def render_qrcode(
    text: str,
    level: str = "H",
    size: int = 300,
    color: Union[str, Sequence[int]] = "000000",
    margin: int = 0,
) -> Canvas:
    """Render ``text`` as a ``size`` × ``size`` QR code.

    Parameters
    ----------
    text : str
        Payload
    level : str
        Error correction level: "L", "M", "Q" or "H"
    size : int
        Edge length in pixels
    color : str or sequence
        Module color (name, hex string or channel tuple)
    margin : int
        Minimum white border in pixels, at most size / 4

    Returns
    -------
    Canvas
        Opaque image

    Raises
    ------
    InvalidDimension
        If size is not positive
    ValueError
        Bad level, color or margin, or a symbol that cannot fit one pixel per module
    """
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidDimension(f"QR size must be a positive integer, got {size!r}")
    if margin < 0 or margin * 4 > size:
        raise ValueError(f"margin {margin} must be in [0, size/4] for size {size}")
    fg = Color.of(color_utils.parse_color(color))

    modules = qr_matrix(text, level)
    n = modules.shape[0]
    available = size - 2 * margin
    scale = available // n
    if scale < 1:
        raise ValueError(
            f"QR symbol of {n}x{n} modules does not fit in {available}px; increase size"
        )

    canvas = Canvas.create(size, size)
    canvas.fill_uniform(WHITE)

    scaled = np.kron(modules, np.ones((scale, scale), dtype=bool))
    side = n * scale
    start = margin + (available - side) // 2
    canvas.pixels[start:start + side, start:start + side][scaled] = fg

    logger.debug(f"Rendered QR code: {n} modules × {scale}px, level {level}, size {size}")
    return canvas
