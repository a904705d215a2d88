"""Collaborator protocols for the htmlsheet pipeline.

Defines the three structural-subtyping interfaces the core depends on: the
read-only HTML tree (``HtmlNode``), the computed-style lookup
(``StyleResolver``), and the serializer for the finished workbook
(``WorkbookWriter``).  All protocols are ``@runtime_checkable`` so callers can
optionally verify conformance with ``isinstance`` checks.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from htmlsheet.models import WorkbookModel


@runtime_checkable
class HtmlNode(Protocol):
    """Minimal element interface over any HTML-like tree."""

    @property
    def tag(self) -> str:
        """Lower-case tag name, e.g. ``"td"``."""
        ...

    def get_attribute(self, name: str) -> str | None:
        """Return the attribute value, or ``None`` when absent."""
        ...

    def children(self) -> list[HtmlNode]:
        """Return element children in document order (text nodes excluded)."""
        ...

    def parent(self) -> HtmlNode | None:
        """Return the parent element, or ``None`` at the root."""
        ...

    def text_content(self) -> str:
        """Return the concatenated text of all descendants."""
        ...

    def inline_style(self) -> dict[str, str]:
        """Return the parsed ``style`` attribute as ``{property: value}``."""
        ...

    def set_inline_style(self, prop: str, value: str | None) -> None:
        """Set (or remove, when *value* is ``None``) one inline style property."""
        ...


@runtime_checkable
class StyleResolver(Protocol):
    """Computed-style lookup, injected in place of a live rendering engine."""

    def computed_style(self, node: HtmlNode) -> Mapping[str, str]:
        """Return the resolved style properties for *node*."""
        ...


@runtime_checkable
class WorkbookWriter(Protocol):
    """Serializer turning a :class:`WorkbookModel` into container bytes."""

    format_name: str

    def write(self, workbook: WorkbookModel) -> bytes:
        """Serialize *workbook* and return the file content."""
        ...
