"""Unit tests for htmlsheet.dimensions -- width and height estimation."""

from __future__ import annotations

import pytest

from htmlsheet.config import ExportConfig
from htmlsheet.dimensions import (
    estimate_column_widths,
    estimate_row_heights,
    measure_text_width,
    parse_width_hint,
)
from htmlsheet.dom import parse_html
from htmlsheet.grid import resolve_grid


def _grid(markup: str):
    return resolve_grid(parse_html(markup).children()[0])


class TestMeasureTextWidth:
    """Tests for measure_text_width()."""

    def test_latin(self):
        assert measure_text_width("abc") == 21

    def test_cjk_is_wide(self):
        assert measure_text_width("中文") == 24

    def test_full_width_punctuation(self):
        assert measure_text_width("，。") == 24

    def test_narrow(self):
        assert measure_text_width("il.") == 12

    def test_longest_line(self):
        assert measure_text_width("ab\nabcd") == 28

    def test_empty(self):
        assert measure_text_width("") == 0


class TestParseWidthHint:
    """Tests for parse_width_hint()."""

    def test_pixels(self):
        assert parse_width_hint("140px") == pytest.approx(20.0)

    def test_unitless(self):
        assert parse_width_hint("70") == pytest.approx(10.0)

    def test_percent(self):
        assert parse_width_hint("50%") == pytest.approx(30.0)

    @pytest.mark.parametrize("value", [None, "", "auto", "0", "10em"])
    def test_unusable(self, value):
        assert parse_width_hint(value) is None


class TestColumnWidths:
    """Tests for estimate_column_widths()."""

    def test_minimum(self):
        assert estimate_column_widths(_grid("<table><tr><td>abc</td></tr></table>")) == [10.0]

    def test_from_content(self):
        text = "a" * 40
        widths = estimate_column_widths(_grid(f"<table><tr><td>{text}</td></tr></table>"))
        assert widths == [50.0]

    def test_clamped_to_maximum(self):
        text = "a" * 100
        widths = estimate_column_widths(_grid(f"<table><tr><td>{text}</td></tr></table>"))
        assert widths == [60.0]

    def test_spanning_cell_shared(self):
        text = "a" * 40
        grid = _grid(
            f'<table><tr><td colspan="2">{text}</td></tr><tr><td>x</td><td>y</td></tr></table>'
        )
        assert estimate_column_widths(grid) == [26.0, 26.0]

    def test_hint_is_floor(self):
        grid = _grid('<table><tr><td width="210">x</td></tr></table>')
        assert estimate_column_widths(grid) == [30.0]

    def test_hint_still_clamped(self):
        grid = _grid('<table><tr><td width="1000">x</td></tr></table>')
        assert estimate_column_widths(grid) == [60.0]

    def test_col_element_hint(self):
        grid = _grid('<table><col width="280"><tr><td>x</td></tr></table>')
        assert estimate_column_widths(grid) == [40.0]

    def test_custom_bounds(self):
        config = ExportConfig(min_column_width=5.0, max_column_width=20.0)
        grid = _grid("<table><tr><td>x</td><td>" + "a" * 80 + "</td></tr></table>")
        assert estimate_column_widths(grid, config) == [5.0, 20.0]

    def test_one_width_per_column(self, sample_html_rowspan):
        grid = _grid(sample_html_rowspan)
        assert len(estimate_column_widths(grid)) == grid.n_cols


class TestRowHeights:
    """Tests for estimate_row_heights()."""

    def test_baseline(self):
        assert estimate_row_heights(_grid("<table><tr><td>a</td></tr></table>")) == [20.0]

    def test_multiline(self):
        grid = _grid("<table><tr><td><ol><li>a</li><li>b</li><li>c</li></ol></td></tr></table>")
        assert estimate_row_heights(grid) == [60.0]

    def test_tallest_cell_wins(self):
        grid = _grid(
            "<table><tr><td>a</td><td><ul><li>1</li><li>2</li></ul></td></tr>"
            "<tr><td>b</td><td>c</td></tr></table>"
        )
        assert estimate_row_heights(grid) == [40.0, 20.0]

    def test_rowspan_distributes_lines(self):
        grid = _grid(
            '<table><tr><td rowspan="2"><ol><li>a</li><li>b</li><li>c</li></ol></td>'
            "<td>x</td></tr><tr><td>y</td></tr></table>"
        )
        assert estimate_row_heights(grid) == [40.0, 40.0]
