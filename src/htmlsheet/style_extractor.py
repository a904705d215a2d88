"""Style extractor: one table cell to a normalized :class:`StyleRecord`.

Each style axis is resolved in priority order:

1. the last styled descendant inside the cell that sets it (editors wrap
   styled runs in ``<span>`` elements rather than styling the cell),
2. the cell's own inline style,
3. the cell's computed (inherited) style from the injected resolver.

Bold, italic and underline are additive: header cells and ``<strong>`` /
``<b>``, ``<em>`` / ``<i>``, ``<u>`` descendants switch them on regardless of
CSS.  The border is always thin black on all four sides.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping

from htmlsheet.colors import is_transparent, to_spreadsheet_color
from htmlsheet.config import ExportConfig
from htmlsheet.css import InheritedStyleResolver
from htmlsheet.dom import find_first, iter_descendants
from htmlsheet.errors import ErrorCode, ExportError
from htmlsheet.models import HorizontalAlign, StyleRecord, VerticalAlign
from htmlsheet.protocols import HtmlNode, StyleResolver

logger = logging.getLogger(__name__)

_SIZE_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(px|pt|em|rem)?\s*$", re.IGNORECASE)
_ROOT_FONT_PX = 16.0
_DEFAULT_BLACK = "rgb(0, 0, 0)"

_HORIZONTAL = {
    "center": HorizontalAlign.CENTER,
    "right": HorizontalAlign.RIGHT,
    "left": HorizontalAlign.LEFT,
    "start": HorizontalAlign.LEFT,
}
_VERTICAL = {
    "middle": VerticalAlign.MIDDLE,
    "top": VerticalAlign.TOP,
    "bottom": VerticalAlign.BOTTOM,
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _is_bold(weight: str | None) -> bool:
    if not weight:
        return False
    weight = weight.strip().lower()
    if weight in ("bold", "bolder"):
        return True
    try:
        return float(weight) >= 700
    except ValueError:
        return False


def _is_italic(font_style: str | None) -> bool:
    if not font_style:
        return False
    return font_style.strip().lower() in ("italic", "oblique")


def _is_underline(style: Mapping[str, str]) -> bool:
    decoration = style.get("text-decoration", "") + " " + style.get("text-decoration-line", "")
    return "underline" in decoration.lower()


def _background(style: Mapping[str, str]) -> str | None:
    value = style.get("background-color")
    if value:
        return value
    shorthand = style.get("background", "").strip()
    if shorthand and " " not in shorthand.replace(", ", ","):
        return shorthand
    return None


def font_size_points(value: str | None, px_to_pt: float = 0.75) -> int | None:
    """Convert a CSS font size to whole points.

    ``px`` and unitless values are pixels, ``pt`` passes through, ``em`` /
    ``rem`` are relative to a 16px root.  Anything else returns ``None``.
    """
    if not value:
        return None
    match = _SIZE_RE.match(value)
    if not match:
        return None
    number = float(match.group(1))
    unit = (match.group(2) or "px").lower()
    if unit == "pt":
        return _round_half_up(number)
    if unit in ("em", "rem"):
        number *= _ROOT_FONT_PX
    return _round_half_up(number * px_to_pt)


def map_font_family(value: str | None, config: ExportConfig) -> str:
    """Map the first family of a CSS ``font-family`` list to a spreadsheet font."""
    if not value:
        return config.default_font_name
    first = value.split(",")[0].replace('"', "").replace("'", "").strip().lower()
    return config.font_map.get(first, config.default_font_name)


class StyleExtractor:
    """Derive a :class:`StyleRecord` from one HTML cell.

    Probing failures never propagate: the extractor returns a border-only
    record and appends a ``W_CELL_STYLE_FALLBACK`` diagnostic instead.
    """

    def __init__(
        self,
        config: ExportConfig | None = None,
        resolver: StyleResolver | None = None,
    ) -> None:
        self._config = config or ExportConfig()
        self._resolver = resolver or InheritedStyleResolver()

    # -- public API ----------------------------------------------------------

    def extract(
        self,
        cell: HtmlNode,
        errors: list[ExportError] | None = None,
        *,
        sheet_name: str | None = None,
        row: int | None = None,
        col: int | None = None,
    ) -> StyleRecord:
        """Return the style record for *cell*.

        Args:
            cell: A ``td`` / ``th`` node.
            errors: Optional sink for non-fatal diagnostics.
            sheet_name: Location context for diagnostics.
            row: Location context for diagnostics.
            col: Location context for diagnostics.
        """
        try:
            return self._extract(cell)
        except Exception as exc:
            logger.warning(
                "htmlsheet | sheet=%s | cell=(%s, %s) | code=%s | detail=%s",
                sheet_name,
                row,
                col,
                ErrorCode.W_CELL_STYLE_FALLBACK.value,
                exc,
            )
            if errors is not None:
                errors.append(
                    ExportError(
                        code=ErrorCode.W_CELL_STYLE_FALLBACK,
                        message=f"Style extraction failed, using border-only style: {exc}",
                        sheet_name=sheet_name,
                        row=row,
                        col=col,
                        stage="style",
                        recoverable=True,
                    )
                )
            return StyleRecord.border_only(self._config.default_font_name)

    # -- internal helpers ----------------------------------------------------

    def _extract(self, cell: HtmlNode) -> StyleRecord:
        config = self._config
        own = cell.inline_style()
        computed = self._resolver.computed_style(cell)
        styled = [style for style in (d.inline_style() for d in iter_descendants(cell)) if style]

        def pick(prop: str) -> str | None:
            for style in reversed(styled):
                if style.get(prop):
                    return style[prop]
            return own.get(prop) or computed.get(prop) or None

        bold = (
            any(_is_bold(style.get("font-weight")) for style in styled)
            or cell.tag == "th"
            or find_first(cell, "strong", "b") is not None
            or _is_bold(own.get("font-weight"))
            or _is_bold(computed.get("font-weight"))
        )
        italic = (
            any(_is_italic(style.get("font-style")) for style in styled)
            or find_first(cell, "em", "i") is not None
            or _is_italic(own.get("font-style"))
            or _is_italic(computed.get("font-style"))
        )
        underline = (
            any(_is_underline(style) for style in styled)
            or find_first(cell, "u") is not None
            or _is_underline(own)
            or _is_underline(computed)
        )

        return StyleRecord(
            font_name=map_font_family(pick("font-family"), config),
            font_size_points=font_size_points(pick("font-size"), config.px_to_pt),
            bold=bold,
            italic=italic,
            underline=underline,
            font_color=self._font_color(styled, own, computed),
            fill_color=self._fill_color(styled, own, computed),
            horizontal_align=_HORIZONTAL.get(
                (pick("text-align") or "").strip().lower(), HorizontalAlign.UNSET
            ),
            vertical_align=_VERTICAL.get(
                (pick("vertical-align") or "").strip().lower(), VerticalAlign.MIDDLE
            ),
        )

    @staticmethod
    def _font_color(
        styled: list[dict[str, str]],
        own: Mapping[str, str],
        computed: Mapping[str, str],
    ) -> str | None:
        for style in reversed(styled):
            if style.get("color"):
                return to_spreadsheet_color(style["color"])
        if own.get("color"):
            return to_spreadsheet_color(own["color"])
        inherited = computed.get("color")
        if inherited and inherited.replace(" ", "") != _DEFAULT_BLACK.replace(" ", ""):
            return to_spreadsheet_color(inherited)
        return None

    @staticmethod
    def _fill_color(
        styled: list[dict[str, str]],
        own: Mapping[str, str],
        computed: Mapping[str, str],
    ) -> str | None:
        candidates = [_background(style) for style in reversed(styled)]
        candidates.append(_background(own))
        candidates.append(_background(computed))
        for candidate in candidates:
            if candidate and not is_transparent(candidate):
                return to_spreadsheet_color(candidate)
        return None
