"""Workbook assembler: top-level HTML tables to a :class:`WorkbookModel`.

Drives the grid resolver once per surviving table, then the dimension
estimator over each resolved grid.  Nested tables are excluded (their
content lives in the parent cell's text); hidden tables are exported unless
the configuration filters them, and are made visible only for the duration
of the build.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from htmlsheet.config import ExportConfig
from htmlsheet.css import InheritedStyleResolver
from htmlsheet.dimensions import estimate_column_widths, estimate_row_heights
from htmlsheet.dom import hidden_nodes, is_nested_table, temporarily_visible
from htmlsheet.errors import ErrorCode, ExportError
from htmlsheet.grid import GridResolver
from htmlsheet.models import AssemblyResult, Sheet, WorkbookModel
from htmlsheet.protocols import HtmlNode, StyleResolver
from htmlsheet.style_extractor import StyleExtractor

logger = logging.getLogger("htmlsheet")


class WorkbookAssembler:
    """Build one sheet per surviving top-level table, in document order."""

    def __init__(
        self,
        config: ExportConfig | None = None,
        resolver: StyleResolver | None = None,
    ) -> None:
        self._config = config or ExportConfig()
        self._resolver = resolver or InheritedStyleResolver()
        self._grid_resolver = GridResolver(
            self._config, StyleExtractor(self._config, self._resolver)
        )

    # -- public API ----------------------------------------------------------

    def build(self, tables: Iterable[HtmlNode]) -> AssemblyResult:
        """Assemble a workbook from candidate *tables*.

        Args:
            tables: Candidate ``table`` nodes in document order.  Nested
                tables among them are skipped.

        Returns:
            An :class:`AssemblyResult`; its ``workbook`` is ``None`` and its
            diagnostics carry ``E_NO_TABLES`` when nothing could be exported.
        """
        config = self._config
        candidates = list(tables)
        details: list[ExportError] = []
        surviving: list[tuple[HtmlNode, list[HtmlNode]]] = []
        skipped_nested = 0
        skipped_hidden = 0

        for table in candidates:
            if is_nested_table(table):
                skipped_nested += 1
                logger.info("Skipping nested table (absorbed into its parent cell)")
                details.append(
                    ExportError(
                        code=ErrorCode.W_TABLE_SKIPPED_NESTED,
                        message="Nested table skipped; its content is flattened into the parent cell.",
                        stage="assemble",
                        recoverable=True,
                    )
                )
                continue
            hiding = self._hiding(table)
            if hiding and not config.include_hidden_tables:
                skipped_hidden += 1
                logger.info("Skipping hidden table (include_hidden_tables=False)")
                details.append(
                    ExportError(
                        code=ErrorCode.W_TABLE_SKIPPED_HIDDEN,
                        message="Hidden table skipped by configuration.",
                        stage="assemble",
                        recoverable=True,
                    )
                )
                continue
            surviving.append((table, hiding))

        if not surviving:
            return self._nothing_to_export(
                "No eligible top-level tables found.",
                len(candidates),
                skipped_nested,
                skipped_hidden,
                details,
            )

        to_reveal = [node for _table, hiding in surviving for node in hiding]
        sheets: list[Sheet] = []
        with temporarily_visible(to_reveal):
            for index, (table, hiding) in enumerate(surviving, start=1):
                name = config.sheet_name(index)
                try:
                    sheets.append(self._build_sheet(table, name, bool(hiding), details))
                except Exception as exc:
                    logger.warning(
                        "htmlsheet | sheet=%s | code=%s | detail=%s",
                        name,
                        ErrorCode.W_TABLE_FAILED.value,
                        exc,
                    )
                    details.append(
                        ExportError(
                            code=ErrorCode.W_TABLE_FAILED,
                            message=f"Table could not be converted: {exc}",
                            sheet_name=name,
                            stage="assemble",
                            recoverable=True,
                        )
                    )

        if not sheets:
            return self._nothing_to_export(
                "No table could be converted.",
                len(candidates),
                skipped_nested,
                skipped_hidden,
                details,
            )

        return AssemblyResult(
            workbook=WorkbookModel(sheets=sheets),
            tables_found=len(candidates),
            tables_skipped_nested=skipped_nested,
            tables_skipped_hidden=skipped_hidden,
            warnings=_unique_codes(details),
            error_details=details,
        )

    # -- internal helpers ----------------------------------------------------

    def _build_sheet(
        self,
        table: HtmlNode,
        name: str,
        hidden: bool,
        details: list[ExportError],
    ) -> Sheet:
        grid = self._grid_resolver.resolve(table, details, sheet_name=name)
        sheet = Sheet(
            name=name,
            cells=grid.rows,
            merges=grid.merges,
            column_widths=estimate_column_widths(grid, self._config),
            row_heights=estimate_row_heights(grid, self._config),
            source_hidden=hidden,
        )
        logger.debug(
            "Built sheet %s: rows=%d cols=%d merges=%d hidden=%s",
            name,
            sheet.n_rows,
            sheet.n_cols,
            len(sheet.merges),
            hidden,
        )
        return sheet

    def _hiding(self, table: HtmlNode) -> list[HtmlNode]:
        try:
            return hidden_nodes(table, self._resolver)
        except Exception as exc:
            logger.warning("Visibility probe failed, treating table as visible: %s", exc)
            return []

    @staticmethod
    def _nothing_to_export(
        message: str,
        found: int,
        skipped_nested: int,
        skipped_hidden: int,
        details: list[ExportError],
    ) -> AssemblyResult:
        logger.info("Nothing to export: %s", message)
        details.append(ExportError(code=ErrorCode.E_NO_TABLES, message=message, stage="assemble"))
        return AssemblyResult(
            workbook=None,
            tables_found=found,
            tables_skipped_nested=skipped_nested,
            tables_skipped_hidden=skipped_hidden,
            warnings=_unique_codes(details),
            error_details=details,
        )


def _unique_codes(details: list[ExportError]) -> list[str]:
    """Warning codes in first-seen order, without duplicates."""
    codes: list[str] = []
    for detail in details:
        if not detail.is_fatal and detail.code.value not in codes:
            codes.append(detail.code.value)
    return codes
