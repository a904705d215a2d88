"""Grid resolver: HTML rows and cells to an absolute, rectangular grid.

Single row-major pass.  Each source cell is anchored at the first free
column of its row; its ``rowspan`` x ``colspan`` rectangle is then marked
occupied so later cells skip it.  Rows shorter than the widest row are padded
with placeholder cells, so every coordinate is either an anchor or consumed
by exactly one merge.
"""

from __future__ import annotations

import logging

from htmlsheet.config import ExportConfig
from htmlsheet.content import extract_content
from htmlsheet.dimensions import parse_width_hint
from htmlsheet.dom import column_elements, row_cells, table_rows
from htmlsheet.errors import ErrorCode, ExportError
from htmlsheet.models import Cell, MergeRange, StyleRecord, TableGrid
from htmlsheet.protocols import HtmlNode
from htmlsheet.style_extractor import StyleExtractor

logger = logging.getLogger(__name__)


def parse_span(value: str | None) -> int:
    """Coerce a ``colspan`` / ``rowspan`` attribute to an integer >= 1.

    Leading digits are honoured (``"2px"`` -> 2); absent, non-numeric and
    non-positive values become 1.
    """
    if not value:
        return 1
    digits = ""
    for ch in value.strip():
        if not ch.isdigit():
            break
        digits += ch
    if not digits:
        return 1
    span = int(digits)
    return span if span > 0 else 1


class _Occupancy:
    """Growable 2D boolean grid of claimed coordinates."""

    def __init__(self) -> None:
        self._rows: list[bytearray] = []

    def _ensure(self, row: int, col: int) -> None:
        while len(self._rows) <= row:
            self._rows.append(bytearray())
        line = self._rows[row]
        if len(line) <= col:
            line.extend(b"\x00" * (col + 1 - len(line)))

    def is_taken(self, row: int, col: int) -> bool:
        if row >= len(self._rows):
            return False
        line = self._rows[row]
        return col < len(line) and bool(line[col])

    def claim(self, row: int, col: int, row_span: int, col_span: int) -> None:
        for r in range(row, row + row_span):
            self._ensure(r, col + col_span - 1)
            line = self._rows[r]
            for c in range(col, col + col_span):
                line[c] = 1

    @property
    def n_rows(self) -> int:
        return len(self._rows)

    @property
    def n_cols(self) -> int:
        return max((len(line) for line in self._rows), default=0)


class GridResolver:
    """Resolve one HTML table into a :class:`TableGrid`.

    Content and style of every anchored cell are produced by the content
    normalizer and the injected :class:`StyleExtractor`.  A failure local to
    one cell yields a placeholder cell and a ``W_CELL_PROCESSING_FAILED``
    diagnostic; the rest of the table is still resolved.
    """

    def __init__(
        self,
        config: ExportConfig | None = None,
        style_extractor: StyleExtractor | None = None,
    ) -> None:
        self._config = config or ExportConfig()
        self._style_extractor = style_extractor or StyleExtractor(self._config)

    # -- public API ----------------------------------------------------------

    def resolve(
        self,
        table: HtmlNode,
        errors: list[ExportError] | None = None,
        sheet_name: str | None = None,
    ) -> TableGrid:
        """Resolve *table* into a rectangular grid with merge ranges.

        Args:
            table: A ``table`` node.  Nested tables inside its cells are not
                visited; they are absorbed into the cell text.
            errors: Optional sink for non-fatal diagnostics.
            sheet_name: Location context for diagnostics.
        """
        sink: list[ExportError] = errors if errors is not None else []
        occupancy = _Occupancy()
        placed: list[tuple[HtmlNode, int, int, int, int]] = []

        source_rows = table_rows(table)
        for r, row in enumerate(source_rows):
            c = 0
            for node in row_cells(row):
                while occupancy.is_taken(r, c):
                    c += 1
                row_span, col_span = self._spans(
                    node, r, c, len(source_rows) - r, occupancy, sink, sheet_name
                )
                occupancy.claim(r, c, row_span, col_span)
                placed.append((node, r, c, row_span, col_span))
                c += col_span

        n_cols = occupancy.n_cols
        n_rows = max(occupancy.n_rows, len(source_rows)) if n_cols else 0
        rows: list[list[Cell | None]] = [[None] * n_cols for _ in range(n_rows)]
        merges: list[MergeRange] = []

        for node, r, c, row_span, col_span in placed:
            cell = self._build_cell(node, r, c, row_span, col_span, sink, sheet_name)
            rows[r][c] = cell
            if cell.is_merged:
                merges.append(cell.merge_range())

        padded = 0
        for r in range(n_rows):
            for c in range(n_cols):
                if not occupancy.is_taken(r, c):
                    rows[r][c] = self._placeholder(r, c)
                    padded += 1

        logger.debug(
            "Resolved table grid: rows=%d cols=%d cells=%d merges=%d padded=%d",
            n_rows,
            n_cols,
            len(placed),
            len(merges),
            padded,
        )
        return TableGrid(
            rows=rows,
            merges=merges,
            column_hints=self._column_hints(table, n_cols),
        )

    # -- internal helpers ----------------------------------------------------

    def _spans(
        self,
        node: HtmlNode,
        r: int,
        c: int,
        rows_left: int,
        occupancy: _Occupancy,
        sink: list[ExportError],
        sheet_name: str | None,
    ) -> tuple[int, int]:
        config = self._config
        requested_rows = parse_span(node.get_attribute("rowspan"))
        requested_cols = parse_span(node.get_attribute("colspan"))
        # A rowspan ends at the last row of the table.
        row_span = min(requested_rows, config.max_rowspan, rows_left)
        col_span = min(requested_cols, config.max_colspan)

        # Stop a colspan at the first column already claimed by an earlier
        # rowspan so that no coordinate is claimed twice.
        for offset in range(1, col_span):
            if occupancy.is_taken(r, c + offset):
                col_span = offset
                break

        if (row_span, col_span) != (requested_rows, requested_cols):
            logger.info(
                "Clamped span at (%d, %d): rowspan %d->%d, colspan %d->%d",
                r,
                c,
                requested_rows,
                row_span,
                requested_cols,
                col_span,
            )
            sink.append(
                ExportError(
                    code=ErrorCode.W_SPAN_CLAMPED,
                    message=(
                        f"Span {requested_rows}x{requested_cols} clamped to "
                        f"{row_span}x{col_span}"
                    ),
                    sheet_name=sheet_name,
                    row=r,
                    col=c,
                    stage="grid",
                    recoverable=True,
                )
            )
        return row_span, col_span

    def _build_cell(
        self,
        node: HtmlNode,
        r: int,
        c: int,
        row_span: int,
        col_span: int,
        sink: list[ExportError],
        sheet_name: str | None,
    ) -> Cell:
        config = self._config
        try:
            content = extract_content(node, config)
            style = self._style_extractor.extract(
                node, sink, sheet_name=sheet_name, row=r, col=c
            )
            width_hint = None
            if col_span == 1:
                width_hint = parse_width_hint(
                    node.inline_style().get("width") or node.get_attribute("width"),
                    config,
                )
            if config.log_cell_content:
                logger.debug("Cell (%d, %d): %r", r, c, content)
            return Cell(
                row_index=r,
                col_index=c,
                row_span=row_span,
                col_span=col_span,
                is_header=node.tag == "th",
                raw_content=content,
                style=style,
                width_hint=width_hint,
            )
        except Exception as exc:
            logger.warning(
                "htmlsheet | sheet=%s | cell=(%d, %d) | code=%s | detail=%s",
                sheet_name,
                r,
                c,
                ErrorCode.W_CELL_PROCESSING_FAILED.value,
                exc,
            )
            sink.append(
                ExportError(
                    code=ErrorCode.W_CELL_PROCESSING_FAILED,
                    message=f"Cell processing failed: {exc}",
                    sheet_name=sheet_name,
                    row=r,
                    col=c,
                    stage="grid",
                    recoverable=True,
                )
            )
            return Cell(
                row_index=r,
                col_index=c,
                row_span=row_span,
                col_span=col_span,
                raw_content=config.empty_cell_text,
                style=StyleRecord.border_only(config.default_font_name),
            )

    def _placeholder(self, r: int, c: int) -> Cell:
        return Cell(
            row_index=r,
            col_index=c,
            raw_content=self._config.empty_cell_text,
            style=StyleRecord.border_only(self._config.default_font_name),
            is_placeholder=True,
        )

    def _column_hints(self, table: HtmlNode, n_cols: int) -> list[float | None]:
        hints: list[float | None] = []
        for col in column_elements(table):
            width = parse_width_hint(
                col.inline_style().get("width") or col.get_attribute("width"),
                self._config,
            )
            span = min(parse_span(col.get_attribute("span")), self._config.max_colspan)
            hints.extend([width] * span)
        return (hints + [None] * n_cols)[:n_cols]


def resolve_grid(table: HtmlNode, config: ExportConfig | None = None) -> TableGrid:
    """Convenience wrapper: resolve *table* with a default :class:`GridResolver`."""
    return GridResolver(config).resolve(table)
