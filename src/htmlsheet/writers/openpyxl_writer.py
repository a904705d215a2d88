"""openpyxl-backed writer: :class:`WorkbookModel` to ``.xlsx`` bytes."""

from __future__ import annotations

import io
import logging

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from htmlsheet.models import (
    Border as BorderModel,
    BorderSide,
    Cell,
    HorizontalAlign,
    Sheet,
    StyleRecord,
    VerticalAlign,
    WorkbookModel,
)

logger = logging.getLogger(__name__)

_VERTICAL = {
    VerticalAlign.TOP: "top",
    VerticalAlign.MIDDLE: "center",
    VerticalAlign.BOTTOM: "bottom",
}


def _font(style: StyleRecord) -> Font:
    return Font(
        name=style.font_name,
        size=style.font_size_points,
        bold=style.bold,
        italic=style.italic,
        underline="single" if style.underline else None,
        color=style.font_color,
    )


def _alignment(style: StyleRecord) -> Alignment:
    horizontal = None
    if style.horizontal_align is not HorizontalAlign.UNSET:
        horizontal = style.horizontal_align.value
    return Alignment(
        horizontal=horizontal,
        vertical=_VERTICAL[style.vertical_align],
        wrap_text=style.wrap_text,
    )


def _side(model: BorderSide) -> Side:
    return Side(style=model.style, color=model.color)


def _border(border: BorderModel) -> Border:
    return Border(
        left=_side(border.left),
        right=_side(border.right),
        top=_side(border.top),
        bottom=_side(border.bottom),
    )


class OpenpyxlWriter:
    """Write each :class:`Sheet` as a styled worksheet of an ``.xlsx`` file.

    Anchor cells are styled before their range is merged; openpyxl then
    carries the anchor's border onto the edges of the merged rectangle.
    """

    format_name = "xlsx"

    def write(self, workbook: WorkbookModel) -> bytes:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for sheet in workbook.sheets:
            self._write_sheet(wb.create_sheet(title=sheet.name), sheet)

        buffer = io.BytesIO()
        wb.save(buffer)
        data = buffer.getvalue()
        logger.debug("Serialized %d sheet(s) to %d bytes", workbook.sheet_count, len(data))
        return data

    def _write_sheet(self, ws: Worksheet, sheet: Sheet) -> None:
        for row in sheet.cells:
            for cell in row:
                if cell is not None:
                    self._write_cell(ws, cell)

        for merge in sheet.merges:
            ws.merge_cells(
                start_row=merge.start_row + 1,
                start_column=merge.start_col + 1,
                end_row=merge.end_row + 1,
                end_column=merge.end_col + 1,
            )

        for index, width in enumerate(sheet.column_widths, start=1):
            ws.column_dimensions[get_column_letter(index)].width = width
        for index, height in enumerate(sheet.row_heights, start=1):
            ws.row_dimensions[index].height = height

    @staticmethod
    def _write_cell(ws: Worksheet, cell: Cell) -> None:
        target = ws.cell(row=cell.row_index + 1, column=cell.col_index + 1)
        target.value = ILLEGAL_CHARACTERS_RE.sub("", cell.raw_content)
        # Cell text is never a formula, even when it starts with "=".
        target.data_type = "s"
        style = cell.style
        target.font = _font(style)
        target.alignment = _alignment(style)
        target.border = _border(style.border)
        if style.fill_color:
            target.fill = PatternFill(fill_type="solid", fgColor=style.fill_color)
