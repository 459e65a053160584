"""Color parsing, interpolation and formatting.

Color strings in a theme follow CSS conventions: hex codes (``#rgb``,
``#rrggbb``, ``#rrggbbaa``), named colors, ``rgb()``/``rgba()`` and
``hsl()``/``hsla()``. Hex and named colors are parsed by matplotlib; the
functional notations are parsed here.

Colors are carried as ``(r, g, b, a)`` with integer channels in 0-255 and
alpha in 0.0-1.0. Interpolated channels are rounded half up.
"""

import colorsys
import math
import re
from functools import lru_cache

import matplotlib.colors as mcolors

from maptheme.contracts.failure import InvalidColorError

RGBA = tuple[int, int, int, float]

_FUNCTIONAL = re.compile(r"^(rgba?|hsla?)\((.*)\)$", re.IGNORECASE)


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _clamp(x, lo, hi):
    return max(lo, min(hi, x))


def _parse_alpha(token: str) -> float:
    if token.endswith("%"):
        return _clamp(float(token[:-1]) / 100.0, 0.0, 1.0)
    return _clamp(float(token), 0.0, 1.0)


def _split_args(body: str) -> tuple[list[str], str]:
    """Split functional-notation arguments; returns (components, alpha)."""
    alpha = "1"
    if "/" in body:
        body, alpha = body.split("/", 1)
        alpha = alpha.strip()
    parts = [p for p in re.split(r"[\s,]+", body.strip()) if p]
    if len(parts) == 4:
        alpha = parts.pop()
    if len(parts) != 3:
        raise ValueError(f"expected 3 components, got {len(parts)}")
    return parts, alpha


def _parse_functional(kind: str, body: str) -> RGBA:
    parts, alpha = _split_args(body)

    if kind.startswith("rgb"):
        channels = []
        for part in parts:
            if part.endswith("%"):
                channels.append(round_half_up(float(part[:-1]) * 255 / 100))
            else:
                channels.append(round_half_up(float(part)))
        r, g, b = (_clamp(c, 0, 255) for c in channels)
        return r, g, b, _parse_alpha(alpha)

    hue = float(parts[0].rstrip("deg")) % 360 / 360
    saturation = _clamp(float(parts[1].rstrip("%")) / 100, 0.0, 1.0)
    lightness = _clamp(float(parts[2].rstrip("%")) / 100, 0.0, 1.0)
    r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
    return round_half_up(r * 255), round_half_up(g * 255), round_half_up(b * 255), _parse_alpha(alpha)


@lru_cache(maxsize=1024)
def parse_color(color: str) -> RGBA:
    """Parse a CSS color string.

    Parameters
    ----------
    color : str
        e.g. ``"#ff0000"``, ``"red"``, ``"rgb(255, 0, 0)"``,
        ``"hsla(0, 100%, 50%, 0.5)"``, ``"transparent"``.

    Returns
    -------
    tuple
        ``(r, g, b, a)``.

    Raises
    ------
    InvalidColorError
        If the string is not a recognised color.
    """
    text = color.strip()
    if text.lower() == "transparent":
        return 0, 0, 0, 0.0

    functional = _FUNCTIONAL.match(text)
    try:
        if functional:
            return _parse_functional(functional.group(1).lower(), functional.group(2))
        r, g, b, a = mcolors.to_rgba(text.lower())
    except ValueError as exc:
        raise InvalidColorError(f"Invalid color {color!r}: {exc}") from exc

    return round_half_up(r * 255), round_half_up(g * 255), round_half_up(b * 255), float(a)


def interpolate_rgba(lo: RGBA, hi: RGBA, t: float) -> RGBA:
    """Linear interpolation between two colors, ``t`` in [0, 1]."""
    t = _clamp(t, 0.0, 1.0)
    r, g, b = (
        _clamp(round_half_up(lo[i] + t * (hi[i] - lo[i])), 0, 255)
        for i in range(3)
    )
    a = _clamp(lo[3] + t * (hi[3] - lo[3]), 0.0, 1.0)
    return r, g, b, a


def format_color(rgba: RGBA) -> str:
    """``#rrggbb`` for opaque colors, ``rgba(r, g, b, a)`` otherwise."""
    r, g, b, a = rgba
    if a >= 1.0:
        return f"#{r:02x}{g:02x}{b:02x}"
    return f"rgba({r}, {g}, {b}, {round(a, 4):g})"


def to_unit_rgba(rgba: RGBA) -> tuple[float, float, float, float]:
    """matplotlib-style floats in [0, 1]."""
    r, g, b, a = rgba
    return r / 255, g / 255, b / 255, a
