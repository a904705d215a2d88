"""Unit tests for htmlsheet.content -- cell content normalization."""

from __future__ import annotations

from conftest import el

from htmlsheet.config import ExportConfig
from htmlsheet.content import extract_content, flatten_lists, flatten_nested_table
from htmlsheet.dom import parse_html


def _cell(markup: str):
    """Parse ``<td>`` markup and return the cell node."""
    return parse_html(markup).children()[0]


class TestPlainText:
    """Tests for plain text cells."""

    def test_text(self):
        assert extract_content(_cell("<td>hello</td>")) == "hello"

    def test_whitespace_collapsed(self):
        assert extract_content(_cell("<td>  a \n\t b  </td>")) == "a b"

    def test_inline_markup_flattened(self):
        assert extract_content(_cell("<td><b>bold</b> and <i>it</i></td>")) == "bold and it"

    def test_empty_is_single_space(self):
        assert extract_content(_cell("<td></td>")) == " "

    def test_whitespace_only_is_single_space(self):
        assert extract_content(_cell("<td>   </td>")) == " "

    def test_never_empty(self):
        for markup in ("<td></td>", "<td><span></span></td>", "<td><br></td>"):
            assert extract_content(_cell(markup)) != ""


class TestImages:
    """Tests for image-only cells."""

    def test_image_only(self):
        assert extract_content(_cell('<td><img src="a.png"></td>')) == "[Image]"

    def test_several_images_single_token(self):
        assert extract_content(_cell('<td><img src="a"><img src="b"></td>')) == "[Image]"

    def test_text_wins_over_image(self):
        assert extract_content(_cell('<td>caption <img src="a"></td>')) == "caption"

    def test_custom_placeholder(self):
        config = ExportConfig(image_placeholder="<pic>")
        assert extract_content(_cell('<td><img src="a"></td>'), config) == "<pic>"


class TestLists:
    """Tests for list flattening."""

    def test_ordered(self):
        cell = _cell("<td><ol><li>one</li><li>two</li></ol></td>")
        assert extract_content(cell) == "1. one\n2. two"

    def test_unordered(self):
        cell = _cell("<td><ul><li>a</li><li>b</li></ul></td>")
        assert extract_content(cell) == "- a\n- b"

    def test_text_outside_lists_dropped(self):
        cell = _cell("<td>intro<ul><li>a</li></ul></td>")
        assert extract_content(cell) == "- a"

    def test_nested_list_absorbed_into_item(self):
        cell = _cell("<td><ol><li>top <ul><li>sub</li></ul></li></ol></td>")
        assert flatten_lists(cell, ExportConfig()) == ["1. top sub"]

    def test_two_lists(self):
        cell = _cell("<td><ol><li>a</li></ol><ul><li>b</li></ul></td>")
        assert extract_content(cell) == "1. a\n- b"


class TestNestedTables:
    """Tests for nested table flattening."""

    def test_flatten(self, sample_html_nested):
        root = parse_html(sample_html_nested)
        outer = root.children()[0]
        inner_cell = outer.children()[0].children()[0]
        assert extract_content(inner_cell) == "x | y\nz | w"

    def test_custom_separator(self):
        table = el(
            "table",
            el("tr", el("td", text="1"), el("td", text="2")),
        )
        assert flatten_nested_table(table, ";") == "1;2"

    def test_empty_nested_table(self):
        cell = _cell("<td><table><tr><td></td></tr></table></td>")
        assert extract_content(cell) == " "

    def test_nested_table_wins_over_lists(self):
        cell = _cell(
            "<td><ul><li>item</li></ul><table><tr><td>t</td></tr></table></td>"
        )
        assert extract_content(cell) == "t"
