"""
Perceptual color matching (CIE76 Delta-E).

Colors are compared in CIE L*a*b* space (D65 white point) so that "close" means
close to the eye, not close in RGB.
"""

import logging
import math
import re
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

Lab = Tuple[float, float, float]

DEFAULT_THRESHOLD = 5.0

# sRGB → XYZ (D65)
_M = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)
_WHITE = (0.95047, 1.0, 1.08883)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_RE = re.compile(r"^rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*[\d.]+\s*)?\)$", re.I)


def parse_rgb(value: str) -> Tuple[int, int, int]:
    """'#F00', 'ff0000', '#FF000080' or 'rgb(255, 0, 0)' → (255, 0, 0)."""
    text = value.strip()
    m = _RGB_RE.match(text)
    if m:
        return tuple(min(255, int(c)) for c in m.groups())
    m = _HEX_RE.match(text)
    if not m:
        raise ValueError(f"not a color: {value!r}")
    digits = m.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def normalize_hex(value: str) -> str:
    """Canonical uppercase '#RRGGBB' (alpha dropped)."""
    r, g, b = parse_rgb(value)
    return f"#{r:02X}{g:02X}{b:02X}"


def _linear(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def _f(t: float) -> float:
    return t ** (1 / 3) if t > 0.008856 else 7.787 * t + 16 / 116


def hex_to_lab(value: str) -> Lab:
    """sRGB hex → CIE L*a*b*. Black is (0, 0, 0), white is (100, 0, 0)."""
    rgb = [_linear(c) for c in parse_rgb(value)]
    x, y, z = (sum(m * c for m, c in zip(row, rgb)) for row in _M)
    fx, fy, fz = _f(x / _WHITE[0]), _f(y / _WHITE[1]), _f(z / _WHITE[2])
    return 116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz)


def lab_distance(lab1: Lab, lab2: Lab) -> float:
    """CIE76 Delta-E."""
    return math.sqrt(sum((a - b) ** 2 for a, b in zip(lab1, lab2)))


def find_closest_color(value: str, dictionary: Mapping[str, str],
                       threshold: float = DEFAULT_THRESHOLD) -> Optional[str]:
    """Path of the dictionary color nearest to ``value``, or None.

    ``dictionary`` maps color values to token paths. An exact (case-insensitive)
    key match wins outright; otherwise the smallest Delta-E within ``threshold``
    is returned, the earliest entry winning ties.
    """
    if not dictionary:
        return None
    wanted = value.strip().lstrip("#").upper()
    for key, path in dictionary.items():
        if key.strip().lstrip("#").upper() == wanted:
            return path

    try:
        target = hex_to_lab(value)
    except ValueError:
        logger.debug("cannot match unparseable color %r", value)
        return None

    best_path, best_distance = None, math.inf
    for key, path in dictionary.items():
        try:
            distance = lab_distance(target, hex_to_lab(key))
        except ValueError:
            logger.debug("skipping unparseable theme color %r", key)
            continue
        if distance < best_distance:
            best_path, best_distance = path, distance

    if best_distance <= threshold:
        return best_path
    return None
