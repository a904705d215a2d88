"""Dimension estimator: column widths and row heights for a resolved grid.

Widths are estimated from weighted character counts (CJK / full-width
characters are wide, ``i l I . , : ;`` are narrow), converted from pixels to
spreadsheet width units, floored by any explicit width hint, and clamped.
Heights grow with the number of lines in the tallest cell of a row.
"""

from __future__ import annotations

import math
import re

from htmlsheet.config import ExportConfig
from htmlsheet.models import TableGrid

_NARROW_CHARS = frozenset("ilI.,:;")
_WIDE_RANGES = (
    (0x4E00, 0x9FFF),
    (0x3000, 0x303F),
    (0xFF00, 0xFFEF),
)
_WIDTH_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(px|%)?\s*$", re.IGNORECASE)


def _char_width(ch: str, config: ExportConfig) -> int:
    code = ord(ch)
    for low, high in _WIDE_RANGES:
        if low <= code <= high:
            return config.char_width_wide
    if ch in _NARROW_CHARS:
        return config.char_width_narrow
    return config.char_width_default


def measure_text_width(text: str, config: ExportConfig | None = None) -> int:
    """Estimated pixel width of *text*: the width of its longest line."""
    config = config or ExportConfig()
    if not text:
        return 0
    return max(
        sum(_char_width(ch, config) for ch in line)
        for line in text.split("\n")
    )


def parse_width_hint(value: str | None, config: ExportConfig | None = None) -> float | None:
    """Convert an explicit CSS / attribute width to spreadsheet width units.

    Pixel (and unitless) values divide by ``px_per_width_unit``; percentages
    scale by ``percent_width_factor``.  Unparsable values return ``None``.
    """
    config = config or ExportConfig()
    if not value:
        return None
    match = _WIDTH_RE.match(value)
    if not match:
        return None
    number = float(match.group(1))
    if number <= 0:
        return None
    if match.group(2) == "%":
        return number * config.percent_width_factor
    return number / config.px_per_width_unit


def estimate_column_widths(grid: TableGrid, config: ExportConfig | None = None) -> list[float]:
    """Return one width (spreadsheet units) per grid column.

    A cell spanning several columns contributes ``width / col_span`` to each
    of them, so a wide merged header does not inflate every spanned column.
    """
    config = config or ExportConfig()
    n_cols = grid.n_cols
    content_px = [0.0] * n_cols
    hints: list[float] = [0.0] * n_cols

    for index, hint in enumerate(grid.column_hints[:n_cols]):
        if hint:
            hints[index] = hint

    for cell in grid.anchors():
        share = measure_text_width(cell.raw_content, config) / cell.col_span
        for col in range(cell.col_index, min(cell.col_index + cell.col_span, n_cols)):
            content_px[col] = max(content_px[col], share)
        if cell.col_span == 1 and cell.width_hint:
            hints[cell.col_index] = max(hints[cell.col_index], cell.width_hint)

    widths: list[float] = []
    for col in range(n_cols):
        units = content_px[col] / config.px_per_width_unit * config.width_scale + config.width_margin
        units = max(units, hints[col], config.min_column_width)
        widths.append(round(min(units, config.max_column_width), 2))
    return widths


def estimate_row_heights(grid: TableGrid, config: ExportConfig | None = None) -> list[float]:
    """Return one height (points) per grid row, never below the baseline.

    A cell spanning several rows spreads its lines evenly across them.
    """
    config = config or ExportConfig()
    n_rows = grid.n_rows
    lines = [1] * n_rows

    for cell in grid.anchors():
        per_row = math.ceil(len(cell.raw_content.split("\n")) / cell.row_span)
        for row in range(cell.row_index, min(cell.row_index + cell.row_span, n_rows)):
            lines[row] = max(lines[row], per_row)

    return [max(config.base_row_height, count * config.line_height) for count in lines]
