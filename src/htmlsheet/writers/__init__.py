"""Workbook writers keyed by output format."""

from htmlsheet.protocols import WorkbookWriter
from htmlsheet.writers.openpyxl_writer import OpenpyxlWriter

_WRITERS: dict[str, type] = {
    OpenpyxlWriter.format_name: OpenpyxlWriter,
}


def get_writer(output_format: str) -> WorkbookWriter:
    """Return a writer instance for *output_format* (case-insensitive).

    Raises:
        ValueError: If no writer is registered for the format.
    """
    writer_cls = _WRITERS.get(output_format.lower())
    if writer_cls is None:
        supported = ", ".join(sorted(_WRITERS))
        raise ValueError(
            f"Unsupported output format '{output_format}'. Supported: {supported}."
        )
    return writer_cls()


__all__ = ["OpenpyxlWriter", "get_writer"]
