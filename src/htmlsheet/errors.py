"""Normalized error codes and structured error model for the htmlsheet pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Normalized error codes for the htmlsheet pipeline.

    All errors and warnings use a stable string code suitable for metrics,
    alerting, and programmatic handling. Codes prefixed with ``E_`` are errors
    that prevent a workbook from being produced; codes prefixed with ``W_`` are
    non-fatal warnings attached to an otherwise successful export.
    """

    # Input errors
    E_NO_TABLES = "E_NO_TABLES"
    E_INPUT_INVALID = "E_INPUT_INVALID"

    # Output errors
    E_SERIALIZE_FAILED = "E_SERIALIZE_FAILED"
    E_UNSUPPORTED_FORMAT = "E_UNSUPPORTED_FORMAT"

    # Warnings (non-fatal)
    W_CELL_STYLE_FALLBACK = "W_CELL_STYLE_FALLBACK"
    W_CELL_PROCESSING_FAILED = "W_CELL_PROCESSING_FAILED"
    W_TABLE_FAILED = "W_TABLE_FAILED"
    W_SPAN_CLAMPED = "W_SPAN_CLAMPED"
    W_TABLE_SKIPPED_NESTED = "W_TABLE_SKIPPED_NESTED"
    W_TABLE_SKIPPED_HIDDEN = "W_TABLE_SKIPPED_HIDDEN"


class ExportError(BaseModel):
    """Structured error with code, message, and location context.

    ``row`` and ``col`` are zero-based grid coordinates of the cell that
    produced the diagnostic, when it is cell-local.
    """

    code: ErrorCode
    message: str
    sheet_name: str | None = None
    row: int | None = None
    col: int | None = None
    stage: str | None = None
    recoverable: bool = False

    @property
    def is_fatal(self) -> bool:
        return self.code.value.startswith("E_")
