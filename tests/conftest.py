"""Shared test fixtures for htmlsheet tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from htmlsheet.config import ExportConfig
from htmlsheet.css import parse_style_attribute, serialize_style


class FakeNode:
    """In-memory ``HtmlNode`` used to exercise the pipeline without a parser."""

    def __init__(
        self,
        tag: str,
        attrs: dict[str, str] | None = None,
        children: list[FakeNode] | None = None,
        text: str = "",
    ) -> None:
        self._tag = tag.lower()
        self.attrs = dict(attrs or {})
        self._children = list(children or [])
        self._text = text
        self._parent: FakeNode | None = None
        for child in self._children:
            child._parent = self

    @property
    def tag(self) -> str:
        return self._tag

    def get_attribute(self, name: str) -> str | None:
        return self.attrs.get(name)

    def children(self) -> list[FakeNode]:
        return list(self._children)

    def parent(self) -> FakeNode | None:
        return self._parent

    def text_content(self) -> str:
        return self._text + "".join(child.text_content() for child in self._children)

    def inline_style(self) -> dict[str, str]:
        return parse_style_attribute(self.attrs.get("style"))

    def set_inline_style(self, prop: str, value: str | None) -> None:
        styles = self.inline_style()
        if value is None:
            styles.pop(prop, None)
        else:
            styles[prop] = value
        if styles:
            self.attrs["style"] = serialize_style(styles)
        else:
            self.attrs.pop("style", None)


def el(tag: str, *children: FakeNode, text: str = "", **attrs: str) -> FakeNode:
    """Build a :class:`FakeNode`; ``class_`` style keyword names lose the underscore."""
    return FakeNode(
        tag,
        {key.rstrip("_"): value for key, value in attrs.items()},
        list(children),
        text,
    )


class FailingResolver:
    """StyleResolver whose every lookup raises."""

    def computed_style(self, node):
        raise RuntimeError("style engine unavailable")


class DictResolver:
    """StyleResolver returning a fixed mapping for every node."""

    def __init__(self, styles: dict[str, str]) -> None:
        self._styles = styles

    def computed_style(self, node):
        return dict(self._styles)


@pytest.fixture
def default_config() -> ExportConfig:
    """Return a default ExportConfig."""
    return ExportConfig()


@pytest.fixture
def tmp_config_file(tmp_path: Path):
    """Factory fixture to write config text to a temp file and return the path."""

    def _write(content: str, filename: str = "config.json") -> str:
        file_path = tmp_path / filename
        file_path.write_text(content, encoding="utf-8")
        return str(file_path)

    return _write


@pytest.fixture
def sample_html_merged() -> str:
    """Header row spanning two columns over a 2x2 body."""
    return """
<html><body>
<table>
  <tr><th colspan="2">Header</th></tr>
  <tr><td>a</td><td>b</td></tr>
  <tr><td>c</td><td>d</td></tr>
</table>
</body></html>"""


@pytest.fixture
def sample_html_rowspan() -> str:
    """First column merged over two rows."""
    return """
<table>
  <tr><td rowspan="2">A</td><td>B</td></tr>
  <tr><td>C</td></tr>
</table>"""


@pytest.fixture
def sample_html_nested() -> str:
    """Outer table whose single cell holds a 2x2 inner table."""
    return """
<table>
  <tr><td>
    <table>
      <tr><td>x</td><td>y</td></tr>
      <tr><td>z</td><td>w</td></tr>
    </table>
  </td></tr>
</table>"""


@pytest.fixture
def sample_html_hidden() -> str:
    """One visible table followed by a table hidden with display:none."""
    return """
<div>
  <table><tr><td>visible</td></tr></table>
  <table id="secret" style="display:none"><tr><td>hidden</td></tr></table>
</div>"""
