"""TableExporter -- orchestrator and public API for the htmlsheet pipeline.

Routes HTML through the full export pipeline:

1. Parse markup (or accept an already-built :class:`HtmlNode` tree).
2. Select top-level tables (nested tables are absorbed by their parent cell).
3. Assemble a :class:`WorkbookModel` via :class:`WorkbookAssembler`.
4. Serialize via the configured :class:`WorkbookWriter`.
5. Assemble and return :class:`ExportResult`.

The exporter enforces **fail-closed** semantics: a failure that prevents a
workbook from being produced returns a result with ``success=False``, error
codes, and no content, never a partial file.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable

from htmlsheet.assembler import WorkbookAssembler
from htmlsheet.config import ExportConfig
from htmlsheet.dom import find_top_level_tables, parse_html
from htmlsheet.errors import ErrorCode, ExportError
from htmlsheet.models import AssemblyResult, ExportResult, WorkbookModel
from htmlsheet.protocols import HtmlNode, StyleResolver, WorkbookWriter
from htmlsheet.writers import get_writer

logger = logging.getLogger("htmlsheet")


class TableExporter:
    """Top-level orchestrator for the htmlsheet pipeline.

    Parameters
    ----------
    config:
        Pipeline configuration.  Uses defaults when *None*.
    writer:
        Serializer for the finished workbook.  When *None*, the writer
        registered for ``config.output_format`` is used.
    resolver:
        Computed-style lookup.  Defaults to
        :class:`~htmlsheet.css.InheritedStyleResolver`.
    """

    def __init__(
        self,
        config: ExportConfig | None = None,
        writer: WorkbookWriter | None = None,
        resolver: StyleResolver | None = None,
    ) -> None:
        self._config = config or ExportConfig()
        self._writer = writer
        self._assembler = WorkbookAssembler(self._config, resolver)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def export(self, source: str | HtmlNode) -> ExportResult:
        """Export every top-level table in *source*.

        Parameters
        ----------
        source:
            HTML markup, or the root of an ``HtmlNode`` tree.

        Returns
        -------
        ExportResult
            The fully-assembled result.
        """
        start = time.monotonic()
        try:
            root = parse_html(source) if isinstance(source, str) else source
            tables = find_top_level_tables(root)
        except Exception as exc:
            err = ExportError(
                code=ErrorCode.E_INPUT_INVALID,
                message=f"Could not read the source document: {exc}",
                stage="parse",
            )
            return self._failure([err], start)
        return self._run(tables, start)

    def export_tables(self, tables: Iterable[HtmlNode]) -> ExportResult:
        """Export already-selected *tables*, one sheet each."""
        return self._run(tables, time.monotonic())

    async def aexport(self, source: str | HtmlNode) -> ExportResult:
        """Async wrapper around :meth:`export`.

        Offloads the synchronous ``export()`` call to a thread via
        ``asyncio.to_thread()``.
        """
        return await asyncio.to_thread(self.export, source)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run(self, tables: Iterable[HtmlNode], start: float) -> ExportResult:
        output_format = self._output_format()

        # ==============================================================
        # Step 1: Assemble
        # ==============================================================
        assembly: AssemblyResult = self._assembler.build(tables)
        details = list(assembly.error_details)
        if assembly.workbook is None:
            return self._failure(details, start, warnings=assembly.warnings)
        workbook = assembly.workbook

        # ==============================================================
        # Step 2: Select writer
        # ==============================================================
        writer = self._writer
        if writer is None:
            try:
                writer = get_writer(output_format)
            except ValueError as exc:
                details.append(
                    ExportError(
                        code=ErrorCode.E_UNSUPPORTED_FORMAT,
                        message=str(exc),
                        stage="serialize",
                    )
                )
                return self._failure(details, start, warnings=assembly.warnings, workbook=workbook)

        # ==============================================================
        # Step 3: Serialize
        # ==============================================================
        try:
            content = writer.write(workbook)
        except Exception as exc:
            details.append(
                ExportError(
                    code=ErrorCode.E_SERIALIZE_FAILED,
                    message=f"Workbook writer failed: {exc}",
                    stage="serialize",
                )
            )
            return self._failure(details, start, warnings=assembly.warnings, workbook=workbook)

        # ==============================================================
        # Step 4: Assemble Result
        # ==============================================================
        elapsed = time.monotonic() - start
        total_merges = sum(len(sheet.merges) for sheet in workbook.sheets)
        logger.info(
            "htmlsheet | format=%s | sheets=%d | merges=%d | warnings=%d | "
            "bytes=%d | time=%.1fs",
            output_format,
            workbook.sheet_count,
            total_merges,
            len(assembly.warnings),
            len(content),
            elapsed,
        )
        return ExportResult(
            success=True,
            content=content,
            output_format=output_format,
            workbook=workbook,
            sheets_created=workbook.sheet_count,
            warnings=assembly.warnings,
            error_details=details,
            processing_time_seconds=elapsed,
        )

    def _output_format(self) -> str:
        if self._writer is not None:
            return self._writer.format_name
        return self._config.output_format.lower()

    def _failure(
        self,
        details: list[ExportError],
        start: float,
        warnings: list[str] | None = None,
        workbook: WorkbookModel | None = None,
    ) -> ExportResult:
        elapsed = time.monotonic() - start
        fatal = [d for d in details if d.is_fatal]
        if fatal:
            logger.error(
                "htmlsheet | code=%s | detail=%s",
                fatal[0].code.value,
                fatal[0].message,
            )
        return ExportResult(
            success=False,
            content=None,
            output_format=self._output_format(),
            workbook=workbook,
            errors=[d.code.value for d in fatal],
            warnings=list(warnings or []),
            error_details=details,
            processing_time_seconds=elapsed,
        )
