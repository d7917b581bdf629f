"""Color parsing for query parameters and config values.

Provides:
    - COLOR_NAMES: supported color names → 6-digit hex
    - hex_to_rgba(): "rrggbb" / "rrggbbaa" → (r, g, b, a)
    - parse_color(): names, hex strings (with or without '#'), or tuples

Returned colors are plain (r, g, b, a) int tuples so this module stays
independent of the raster engine; Canvas accepts them directly.

Invariants:
    - Channels are 8-bit ints in [0, 255]
    - Alpha defaults to 255 (opaque)
    - Parsing is case-insensitive and ignores surrounding whitespace
"""

import string
from typing import Sequence, Tuple, Union

RGBA = Tuple[int, int, int, int]

COLOR_NAMES = {
    "black": "000000",
    "white": "ffffff",
    "red": "ff0000",
    "green": "00ff00",
    "blue": "0000ff",
    "yellow": "ffff00",
    "cyan": "00ffff",
    "magenta": "ff00ff",
    "gray": "808080",
    "purple": "800080",
    "orange": "ffa500",
}


def hex_to_rgba(hex_str: str) -> RGBA:
    """Convert a 6- or 8-digit hex string to RGBA.

    Parameters
    ----------
    hex_str : str
        "rrggbb" or "rrggbbaa", no leading '#'

    Returns
    -------
    tuple of int
        (r, g, b, a)

    Raises
    ------
    ValueError
        If the string has the wrong length or non-hex digits
    """
    if len(hex_str) not in (6, 8) or not all(c in string.hexdigits for c in hex_str):
        raise ValueError("invalid color format")
    try:
        channels = [int(hex_str[i:i + 2], 16) for i in range(0, len(hex_str), 2)]
    except ValueError as e:
        raise ValueError("invalid color format") from e
    if len(channels) == 3:
        channels.append(255)
    return tuple(channels)


def parse_color(value: Union[str, Sequence[int]]) -> RGBA:
    """Parse a color name, hex string or channel sequence.

    Examples
    --------
    >>> parse_color("red")
    (255, 0, 0, 255)
    >>> parse_color("#00FF0080")
    (0, 255, 0, 128)
    >>> parse_color((1, 2, 3))
    (1, 2, 3, 255)
    """
    if isinstance(value, str):
        key = value.strip().lower().lstrip("#")
        key = COLOR_NAMES.get(key, key)
        return hex_to_rgba(key)

    channels = [int(c) for c in value]
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4 or any(not 0 <= c <= 255 for c in channels):
        raise ValueError("invalid color format")
    return tuple(channels)
