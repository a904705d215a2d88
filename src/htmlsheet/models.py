"""Pydantic data models and enumerations for htmlsheet.

This module defines the complete data model layer referenced throughout the
pipeline: alignment enums, the normalized ``StyleRecord``, the span-resolved
``TableGrid`` with its ``Cell`` and ``MergeRange`` members, the
``WorkbookModel`` handed to writers, and the assembler/exporter result models.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from openpyxl.utils import get_column_letter
from pydantic import BaseModel

from htmlsheet.errors import ExportError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class HorizontalAlign(str, Enum):
    """Horizontal alignment of a cell; ``UNSET`` leaves the engine default."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    UNSET = "unset"


class VerticalAlign(str, Enum):
    """Vertical alignment of a cell."""

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------


class BorderSide(BaseModel):
    """One edge of a cell border."""

    style: str = "thin"
    color: str = "FF000000"


class Border(BaseModel):
    """Four-sided cell border; defaults to thin black on every side."""

    top: BorderSide = BorderSide()
    left: BorderSide = BorderSide()
    bottom: BorderSide = BorderSide()
    right: BorderSide = BorderSide()


class StyleRecord(BaseModel):
    """Normalized, spreadsheet-agnostic style of one cell.

    Colors are 8-digit ``AARRGGBB`` strings; ``None`` means "inherit the
    spreadsheet default".  Two cells with identical HTML styling produce
    equal records.
    """

    font_name: str
    font_size_points: int | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    font_color: str | None = None
    fill_color: str | None = None
    horizontal_align: HorizontalAlign = HorizontalAlign.UNSET
    vertical_align: VerticalAlign = VerticalAlign.MIDDLE
    wrap_text: bool = True
    border: Border = Border()

    @classmethod
    def border_only(cls, font_name: str) -> StyleRecord:
        """Fallback record used when style probing fails."""
        return cls(font_name=font_name)


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------


class MergeRange(BaseModel):
    """Inclusive, zero-based rectangle rendered as one visual cell."""

    start_row: int
    start_col: int
    end_row: int
    end_col: int

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def col_count(self) -> int:
        return self.end_col - self.start_col + 1

    def contains(self, row: int, col: int) -> bool:
        return (
            self.start_row <= row <= self.end_row
            and self.start_col <= col <= self.end_col
        )

    def to_a1(self) -> str:
        """Render as a 1-based A1 range, e.g. ``"A1:B2"``."""
        start = f"{get_column_letter(self.start_col + 1)}{self.start_row + 1}"
        end = f"{get_column_letter(self.end_col + 1)}{self.end_row + 1}"
        return f"{start}:{end}"


class Cell(BaseModel):
    """One logical table cell: the anchor of a possible merge."""

    row_index: int
    col_index: int
    row_span: int = 1
    col_span: int = 1
    is_header: bool = False
    raw_content: str = " "
    style: StyleRecord
    is_placeholder: bool = False
    width_hint: float | None = None

    @property
    def is_merged(self) -> bool:
        return self.row_span > 1 or self.col_span > 1

    def merge_range(self) -> MergeRange:
        return MergeRange(
            start_row=self.row_index,
            start_col=self.col_index,
            end_row=self.row_index + self.row_span - 1,
            end_col=self.col_index + self.col_span - 1,
        )


class TableGrid(BaseModel):
    """Logical representation of one HTML table after span resolution.

    ``rows`` is rectangular.  Each entry is either the ``Cell`` anchored at
    that coordinate or ``None`` when the coordinate is consumed by a merge.
    """

    rows: list[list[Cell | None]] = []
    merges: list[MergeRange] = []
    column_hints: list[float | None] = []

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_cols(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def cell_at(self, row: int, col: int) -> Cell | None:
        return self.rows[row][col]

    def anchors(self) -> Iterator[Cell]:
        """Yield every anchored cell in row-major order."""
        for row in self.rows:
            for cell in row:
                if cell is not None:
                    yield cell

    def values(self) -> list[list[str | None]]:
        """Return the content matrix (``None`` for merge-consumed slots)."""
        return [
            [cell.raw_content if cell is not None else None for cell in row]
            for row in self.rows
        ]


# ---------------------------------------------------------------------------
# Workbook
# ---------------------------------------------------------------------------


class Sheet(BaseModel):
    """One worksheet of the output workbook."""

    name: str
    cells: list[list[Cell | None]]
    merges: list[MergeRange] = []
    column_widths: list[float] = []
    row_heights: list[float] = []
    source_hidden: bool = False

    @property
    def n_rows(self) -> int:
        return len(self.cells)

    @property
    def n_cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0


class WorkbookModel(BaseModel):
    """Ordered sheets handed to a :class:`~htmlsheet.protocols.WorkbookWriter`."""

    sheets: list[Sheet] = []

    @property
    def sheet_count(self) -> int:
        return len(self.sheets)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class AssemblyResult(BaseModel):
    """Output of :meth:`WorkbookAssembler.build`.

    ``workbook`` is ``None`` when no table survived filtering.
    """

    workbook: WorkbookModel | None = None
    tables_found: int = 0
    tables_skipped_nested: int = 0
    tables_skipped_hidden: int = 0
    warnings: list[str] = []
    error_details: list[ExportError] = []


class ExportResult(BaseModel):
    """Final result returned by :class:`TableExporter`."""

    success: bool
    content: bytes | None = None
    output_format: str
    workbook: WorkbookModel | None = None
    sheets_created: int = 0
    errors: list[str] = []
    warnings: list[str] = []
    error_details: list[ExportError] = []
    processing_time_seconds: float = 0.0
