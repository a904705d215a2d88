"""Content normalizer: one table cell to one spreadsheet text value.

Nested tables are flattened to ``" | "``-delimited lines, lists to numbered
or bulleted lines, image-only cells to a placeholder token, and empty cells
to a single space so the spreadsheet still draws a bordered cell.
"""

from __future__ import annotations

from htmlsheet.config import ExportConfig
from htmlsheet.dom import (
    collapse_whitespace,
    find_all,
    row_cells,
    table_rows,
)
from htmlsheet.protocols import HtmlNode

_LIST_TAGS = ("ul", "ol")


def _outermost(nodes: list[HtmlNode], container_tags: tuple[str, ...]) -> list[HtmlNode]:
    """Drop nodes that sit inside another node of *container_tags* in *nodes*."""
    outer: list[HtmlNode] = []
    for node in nodes:
        ancestor = node.parent()
        nested = False
        while ancestor is not None:
            if ancestor.tag in container_tags and any(ancestor == n for n in nodes):
                nested = True
                break
            ancestor = ancestor.parent()
        if not nested:
            outer.append(node)
    return outer


def flatten_nested_table(table: HtmlNode, separator: str = " | ") -> str:
    """Render *table* as plain text: one line per row, cells joined by *separator*.

    Deeper nesting is absorbed into the enclosing cell's text; nested styling
    and merges are dropped.
    """
    lines = []
    for row in table_rows(table):
        lines.append(
            separator.join(collapse_whitespace(cell.text_content()) for cell in row_cells(row))
        )
    return "\n".join(lines)


def flatten_lists(cell: HtmlNode, config: ExportConfig) -> list[str]:
    """Return one line per list item of every outermost list inside *cell*."""
    lines: list[str] = []
    for lst in _outermost(find_all(cell, *_LIST_TAGS), _LIST_TAGS):
        items = [child for child in lst.children() if child.tag == "li"]
        for n, item in enumerate(items, start=1):
            if lst.tag == "ol":
                prefix = config.ordered_list_format.format(n=n)
            else:
                prefix = config.unordered_list_prefix
            lines.append(prefix + collapse_whitespace(item.text_content()))
    return lines


def extract_content(cell: HtmlNode, config: ExportConfig | None = None) -> str:
    """Normalize the content of *cell* to a non-empty string.

    Args:
        cell: A ``td``/``th`` node.
        config: Supplies the placeholder tokens and list prefixes.

    Returns:
        The cell text; never the empty string.
    """
    config = config or ExportConfig()

    nested_tables = _outermost(find_all(cell, "table"), ("table",))
    if nested_tables:
        text = "\n".join(
            flatten_nested_table(table, config.nested_cell_separator)
            for table in nested_tables
        )
        return text if text.strip() else config.empty_cell_text

    list_lines = flatten_lists(cell, config)
    if list_lines:
        return "\n".join(list_lines)

    text = collapse_whitespace(cell.text_content())
    if text:
        return text

    if find_all(cell, "img"):
        return config.image_placeholder
    return config.empty_cell_text
