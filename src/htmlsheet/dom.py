"""Tree helpers over :class:`~htmlsheet.protocols.HtmlNode` and the
BeautifulSoup live-document adapter.

Every helper here works purely through the ``HtmlNode`` protocol, so the same
traversal rules apply to parsed markup and to in-memory test trees.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager

from bs4 import BeautifulSoup, Tag

from htmlsheet.css import parse_style_attribute, serialize_style
from htmlsheet.protocols import HtmlNode, StyleResolver

logger = logging.getLogger(__name__)

CELL_TAGS = frozenset({"td", "th"})
SECTION_TAGS = frozenset({"thead", "tbody", "tfoot"})
_NESTING_TAGS = frozenset({"table", "td", "th"})


# ---------------------------------------------------------------------------
# Live-document adapter
# ---------------------------------------------------------------------------


class SoupNode:
    """``HtmlNode`` adapter over a BeautifulSoup ``Tag``.

    Equality is identity of the wrapped tag; BeautifulSoup's own ``Tag``
    equality is structural and would conflate identical sibling cells.
    """

    __slots__ = ("_element",)

    def __init__(self, element: Tag) -> None:
        self._element = element

    @property
    def element(self) -> Tag:
        return self._element

    @property
    def tag(self) -> str:
        return (self._element.name or "").lower()

    def get_attribute(self, name: str) -> str | None:
        value = self._element.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def children(self) -> list[HtmlNode]:
        return [SoupNode(child) for child in self._element.children if isinstance(child, Tag)]

    def parent(self) -> HtmlNode | None:
        parent = self._element.parent
        if parent is None:
            return None
        return SoupNode(parent)

    def text_content(self) -> str:
        return self._element.get_text()

    def inline_style(self) -> dict[str, str]:
        return parse_style_attribute(self.get_attribute("style"))

    def set_inline_style(self, prop: str, value: str | None) -> None:
        styles = self.inline_style()
        if value is None:
            styles.pop(prop, None)
        else:
            styles[prop] = value
        if styles:
            self._element["style"] = serialize_style(styles)
        elif "style" in self._element.attrs:
            del self._element["style"]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupNode) and other._element is self._element

    def __hash__(self) -> int:
        return id(self._element)

    def __repr__(self) -> str:
        return f"SoupNode(<{self.tag}>)"


def parse_html(markup: str) -> SoupNode:
    """Parse *markup* with BeautifulSoup's ``html.parser`` backend."""
    return SoupNode(BeautifulSoup(markup, "html.parser"))


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def iter_descendants(node: HtmlNode) -> Iterator[HtmlNode]:
    """Yield every element below *node* in document (pre-)order."""
    stack = list(reversed(node.children()))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))


def find_all(node: HtmlNode, *tags: str) -> list[HtmlNode]:
    wanted = frozenset(tags)
    return [d for d in iter_descendants(node) if d.tag in wanted]


def find_first(node: HtmlNode, *tags: str) -> HtmlNode | None:
    wanted = frozenset(tags)
    for descendant in iter_descendants(node):
        if descendant.tag in wanted:
            return descendant
    return None


def table_rows(table: HtmlNode) -> list[HtmlNode]:
    """Rows that belong to *table* itself, never to a nested table."""
    rows: list[HtmlNode] = []
    for child in table.children():
        if child.tag == "tr":
            rows.append(child)
        elif child.tag in SECTION_TAGS:
            rows.extend(row for row in child.children() if row.tag == "tr")
    return rows


def row_cells(row: HtmlNode) -> list[HtmlNode]:
    return [child for child in row.children() if child.tag in CELL_TAGS]


def column_elements(table: HtmlNode) -> list[HtmlNode]:
    """``<col>`` elements of *table*, directly or inside ``<colgroup>``."""
    cols: list[HtmlNode] = []
    for child in table.children():
        if child.tag == "col":
            cols.append(child)
        elif child.tag == "colgroup":
            cols.extend(col for col in child.children() if col.tag == "col")
    return cols


def is_nested_table(table: HtmlNode) -> bool:
    """Return True if any ancestor of *table* is a table or a table cell."""
    ancestor = table.parent()
    while ancestor is not None:
        if ancestor.tag in _NESTING_TAGS:
            return True
        ancestor = ancestor.parent()
    return False


def find_top_level_tables(root: HtmlNode) -> list[HtmlNode]:
    """Return every non-nested table at or below *root*, in document order."""
    candidates = [root] if root.tag == "table" else []
    candidates.extend(find_all(root, "table"))
    return [table for table in candidates if not is_nested_table(table)]


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------


def _is_hidden_node(node: HtmlNode, style: Mapping[str, str]) -> bool:
    if node.get_attribute("hidden") is not None:
        return True
    return style.get("display", "").strip().lower() == "none"


def hidden_nodes(node: HtmlNode, resolver: StyleResolver) -> list[HtmlNode]:
    """Return *node* and/or ancestors that hide it (``display: none``)."""
    hidden: list[HtmlNode] = []
    current: HtmlNode | None = node
    while current is not None:
        if _is_hidden_node(current, resolver.computed_style(current)):
            hidden.append(current)
        current = current.parent()
    return hidden


@contextmanager
def temporarily_visible(nodes: Iterable[HtmlNode]) -> Iterator[None]:
    """Force *nodes* visible for the duration of the block.

    Each node's previous inline ``display`` is restored on exit, on success
    and failure paths alike.
    """
    previous: list[tuple[HtmlNode, str | None]] = []
    try:
        for node in nodes:
            if any(node == seen for seen, _ in previous):
                continue
            previous.append((node, node.inline_style().get("display")))
            node.set_inline_style("display", "table" if node.tag == "table" else "block")
        yield
    finally:
        for node, display in reversed(previous):
            node.set_inline_style("display", display)
        if previous:
            logger.debug("Restored visibility of %d hidden element(s)", len(previous))
