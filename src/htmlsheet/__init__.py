"""htmlsheet -- HTML table to spreadsheet exporter.

Public API re-exports for convenient access.
"""

from htmlsheet.assembler import WorkbookAssembler
from htmlsheet.colors import to_spreadsheet_color
from htmlsheet.config import ExportConfig
from htmlsheet.content import extract_content, flatten_nested_table
from htmlsheet.css import InheritedStyleResolver
from htmlsheet.dimensions import (
    estimate_column_widths,
    estimate_row_heights,
    measure_text_width,
)
from htmlsheet.dom import SoupNode, find_top_level_tables, is_nested_table, parse_html
from htmlsheet.errors import ErrorCode, ExportError
from htmlsheet.exporter import TableExporter
from htmlsheet.grid import GridResolver, resolve_grid
from htmlsheet.models import (
    AssemblyResult,
    Cell,
    ExportResult,
    HorizontalAlign,
    MergeRange,
    Sheet,
    StyleRecord,
    TableGrid,
    VerticalAlign,
    WorkbookModel,
)
from htmlsheet.protocols import HtmlNode, StyleResolver, WorkbookWriter
from htmlsheet.style_extractor import StyleExtractor
from htmlsheet.writers import OpenpyxlWriter, get_writer

__all__ = [
    "TableExporter",
    "WorkbookAssembler",
    "GridResolver",
    "StyleExtractor",
    "InheritedStyleResolver",
    "OpenpyxlWriter",
    "ExportConfig",
    "ErrorCode",
    "ExportError",
    "HtmlNode",
    "StyleResolver",
    "WorkbookWriter",
    "AssemblyResult",
    "Cell",
    "ExportResult",
    "HorizontalAlign",
    "MergeRange",
    "Sheet",
    "StyleRecord",
    "TableGrid",
    "VerticalAlign",
    "WorkbookModel",
    "SoupNode",
    "parse_html",
    "find_top_level_tables",
    "is_nested_table",
    "resolve_grid",
    "extract_content",
    "flatten_nested_table",
    "to_spreadsheet_color",
    "estimate_column_widths",
    "estimate_row_heights",
    "measure_text_width",
    "get_writer",
]
