"""CSS color to spreadsheet ``AARRGGBB`` translation.

Accepts hex (``#rgb``, ``#rrggbb``, with or without ``#``), ``rgb()`` /
``rgba()`` and a small table of CSS color names.  Anything unrecognized maps
to opaque black: losing a color is preferable to failing an export.
"""

from __future__ import annotations

import math
import re

OPAQUE_BLACK = "FF000000"
TRANSPARENT = "00000000"

NAMED_COLORS: dict[str, str] = {
    "black": "FF000000",
    "white": "FFFFFFFF",
    "red": "FFFF0000",
    "green": "FF008000",
    "blue": "FF0000FF",
    "yellow": "FFFFFF00",
    "magenta": "FFFF00FF",
    "cyan": "FF00FFFF",
    "gray": "FF808080",
    "silver": "FFC0C0C0",
    "purple": "FF800080",
    "orange": "FFFFA500",
    "pink": "FFFFC0CB",
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_RE = re.compile(r"^rgba?\((.*)\)$", re.IGNORECASE | re.DOTALL)
_COMPONENT_SPLIT_RE = re.compile(r"\s*[,/]\s*|\s+")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp_byte(value: float) -> int:
    return _round_half_up(max(0.0, min(255.0, value)))


def _byte_hex(value: int) -> str:
    return f"{value:02X}"


def _parse_channel(token: str) -> int | None:
    try:
        if token.endswith("%"):
            value = float(token[:-1]) * 255 / 100
        else:
            value = float(token)
    except ValueError:
        return None
    if math.isnan(value):
        return None
    return _clamp_byte(value)


def _parse_alpha(token: str) -> int | None:
    """Return the alpha byte for *token*, or ``None`` when unparsable."""
    try:
        if token.endswith("%"):
            fraction = float(token[:-1]) / 100
        else:
            fraction = float(token)
    except ValueError:
        return None
    if math.isnan(fraction):
        return None
    return _clamp_byte(max(0.0, min(1.0, fraction)) * 255)


def _from_functional(body: str) -> str | None:
    tokens = [t for t in _COMPONENT_SPLIT_RE.split(body.strip()) if t]
    if len(tokens) not in (3, 4):
        return None
    channels = [_parse_channel(t) for t in tokens[:3]]
    if any(ch is None for ch in channels):
        return None
    alpha = 255
    if len(tokens) == 4:
        parsed = _parse_alpha(tokens[3])
        if parsed is not None:
            alpha = parsed
    return _byte_hex(alpha) + "".join(_byte_hex(ch) for ch in channels)  # type: ignore[arg-type]


def to_spreadsheet_color(css_color: str | None) -> str:
    """Convert a CSS color value to an 8-digit ``AARRGGBB`` string.

    An 8-digit hex input is read as ``AARRGGBB`` and returned upper-cased, so
    the translation is idempotent on its own output.

    Args:
        css_color: Any CSS color string, possibly empty or ``None``.

    Returns:
        The alpha-first hex color.  Unrecognized input yields ``FF000000``.
    """
    if not css_color:
        return OPAQUE_BLACK

    value = css_color.strip()
    lowered = value.lower()

    if lowered in NAMED_COLORS:
        return NAMED_COLORS[lowered]
    if lowered == "transparent":
        return TRANSPARENT

    hex_match = _HEX_RE.match(value)
    if hex_match:
        digits = hex_match.group(1).upper()
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) == 6:
            return "FF" + digits
        return digits

    rgb_match = _RGB_RE.match(value)
    if rgb_match:
        converted = _from_functional(rgb_match.group(1))
        if converted is not None:
            return converted

    return OPAQUE_BLACK


def is_transparent(css_color: str | None) -> bool:
    """Return True for values that paint nothing (``transparent``, alpha 0)."""
    if not css_color:
        return True
    value = css_color.strip().lower()
    if value in ("transparent", "none", "initial", "inherit", "unset"):
        return True
    if value.startswith("rgba") or "/" in value:
        return to_spreadsheet_color(value).startswith("00")
    return False
