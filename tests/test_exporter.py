"""Unit tests for htmlsheet.exporter -- end-to-end orchestration."""

from __future__ import annotations

import asyncio
import io
import logging
from unittest.mock import MagicMock, patch

import openpyxl
from conftest import el

from htmlsheet.config import ExportConfig
from htmlsheet.dom import parse_html
from htmlsheet.errors import ErrorCode
from htmlsheet.exporter import TableExporter


class TestExportHappyPath:
    """Tests for successful exports."""

    def test_simple_table(self):
        result = TableExporter().export("<table><tr><td>a</td></tr></table>")
        assert result.success is True
        assert result.output_format == "xlsx"
        assert result.sheets_created == 1
        assert result.errors == []
        assert result.content[:2] == b"PK"

    def test_content_loads(self, sample_html_merged):
        result = TableExporter().export(sample_html_merged)
        wb = openpyxl.load_workbook(io.BytesIO(result.content))
        assert wb.sheetnames == ["Table1"]
        assert wb["Table1"]["A2"].value == "a"

    def test_workbook_model_attached(self, sample_html_rowspan):
        result = TableExporter().export(sample_html_rowspan)
        assert result.workbook.sheets[0].cells[1][0] is None

    def test_accepts_node_tree(self):
        root = el("div", el("table", el("tr", el("td", text="fake"))))
        result = TableExporter().export(root)
        assert result.success is True
        assert result.workbook.sheets[0].cells[0][0].raw_content == "fake"

    def test_nested_tables_not_exported_separately(self, sample_html_nested):
        result = TableExporter().export(sample_html_nested)
        assert result.sheets_created == 1

    def test_export_tables_flags_nested(self, sample_html_nested):
        root = parse_html(sample_html_nested)
        outer = root.children()[0]
        inner = outer.children()[0].children()[0].children()[0]
        result = TableExporter().export_tables([outer, inner])
        assert result.success is True
        assert result.warnings == [ErrorCode.W_TABLE_SKIPPED_NESTED.value]

    def test_hidden_table_exported_and_restored(self, sample_html_hidden):
        root = parse_html(sample_html_hidden)
        result = TableExporter().export(root)
        assert result.sheets_created == 2
        hidden = [t for t in root.children()[0].children() if t.get_attribute("id") == "secret"]
        assert hidden[0].inline_style() == {"display": "none"}

    def test_processing_time_recorded(self):
        result = TableExporter().export("<table><tr><td>a</td></tr></table>")
        assert result.processing_time_seconds >= 0

    def test_success_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="htmlsheet"):
            TableExporter().export("<table><tr><td>a</td></tr></table>")
        assert any("sheets=1" in record.getMessage() for record in caplog.records)


class TestExportFailures:
    """Tests for fail-closed outcomes."""

    def test_no_tables(self):
        result = TableExporter().export("<p>no tables here</p>")
        assert result.success is False
        assert result.content is None
        assert result.errors == [ErrorCode.E_NO_TABLES.value]

    def test_empty_string(self):
        result = TableExporter().export("")
        assert result.errors == [ErrorCode.E_NO_TABLES.value]

    def test_hidden_only_filtered(self):
        config = ExportConfig(include_hidden_tables=False)
        markup = '<table style="display: none"><tr><td>x</td></tr></table>'
        result = TableExporter(config).export(markup)
        assert result.success is False
        assert ErrorCode.W_TABLE_SKIPPED_HIDDEN.value in result.warnings
        assert result.errors == [ErrorCode.E_NO_TABLES.value]

    def test_unreadable_input(self):
        with patch("htmlsheet.exporter.parse_html", side_effect=ValueError("bad markup")):
            result = TableExporter().export("<table>")
        assert result.success is False
        assert result.errors == [ErrorCode.E_INPUT_INVALID.value]

    def test_unsupported_format(self):
        result = TableExporter(ExportConfig(output_format="ods")).export(
            "<table><tr><td>a</td></tr></table>"
        )
        assert result.success is False
        assert result.errors == [ErrorCode.E_UNSUPPORTED_FORMAT.value]
        assert result.workbook is not None

    def test_writer_failure(self):
        writer = MagicMock()
        writer.format_name = "xlsx"
        writer.write.side_effect = OSError("disk full")
        result = TableExporter(writer=writer).export("<table><tr><td>a</td></tr></table>")
        assert result.success is False
        assert result.content is None
        assert result.errors == [ErrorCode.E_SERIALIZE_FAILED.value]
        writer.write.assert_called_once()

    def test_failure_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="htmlsheet"):
            TableExporter().export("<p>none</p>")
        assert any("E_NO_TABLES" in record.getMessage() for record in caplog.records)


class TestInjectedWriter:
    """Tests for a caller-supplied writer."""

    def test_custom_writer_used(self):
        writer = MagicMock()
        writer.format_name = "csv"
        writer.write.return_value = b"a\n"
        result = TableExporter(writer=writer).export("<table><tr><td>a</td></tr></table>")
        assert result.success is True
        assert result.output_format == "csv"
        assert result.content == b"a\n"


class TestAexport:
    """Tests for the async wrapper."""

    def test_aexport_matches_export(self):
        result = asyncio.run(TableExporter().aexport("<table><tr><td>a</td></tr></table>"))
        assert result.success is True
        assert result.sheets_created == 1
