"""Configuration model for the htmlsheet export pipeline.

Provides ``ExportConfig`` with every tunable constant used by the style
extractor, content normalizer, dimension estimator, and writer.  Supports
loading overrides from YAML or JSON files via the ``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

from pydantic import BaseModel

DEFAULT_FONT_NAME = "宋体"

DEFAULT_FONT_MAP: dict[str, str] = {
    # CJK
    "宋体": "宋体",
    "simsun": "宋体",
    "黑体": "黑体",
    "simhei": "黑体",
    "微软雅黑": "微软雅黑",
    "microsoft yahei": "微软雅黑",
    "楷体": "楷体",
    "simkai": "楷体",
    "仿宋": "仿宋",
    "fangsong": "仿宋",
    # Western
    "arial": "Arial",
    "helvetica": "Arial",
    "times new roman": "Times New Roman",
    "calibri": "Calibri",
    "verdana": "Verdana",
    "tahoma": "Tahoma",
    "courier new": "Courier New",
    "georgia": "Georgia",
    # Generic families
    "sans-serif": "Arial",
    "serif": "Times New Roman",
    "monospace": "Courier New",
}


class ExportConfig(BaseModel):
    """All tunable parameters with sensible defaults.

    Override individual values via constructor kwargs or load a complete
    config from a file with ``ExportConfig.from_file(path)``.
    """

    # --- Identity ---
    exporter_version: str = "htmlsheet:1.0.0"

    # --- Fonts ---
    default_font_name: str = DEFAULT_FONT_NAME
    font_map: dict[str, str] = dict(DEFAULT_FONT_MAP)
    px_to_pt: float = 0.75

    # --- Content normalization ---
    empty_cell_text: str = " "
    image_placeholder: str = "[Image]"
    nested_cell_separator: str = " | "
    ordered_list_format: str = "{n}. "
    unordered_list_prefix: str = "- "

    # --- Column widths (pixel estimates -> spreadsheet width units) ---
    char_width_default: int = 7
    char_width_wide: int = 12
    char_width_narrow: int = 4
    px_per_width_unit: float = 7.0
    width_scale: float = 1.2
    width_margin: float = 2.0
    min_column_width: float = 10.0
    max_column_width: float = 60.0
    percent_width_factor: float = 0.6

    # --- Row heights (points) ---
    base_row_height: float = 20.0
    line_height: float = 20.0

    # --- Span limits ---
    max_colspan: int = 1000
    max_rowspan: int = 65534

    # --- Sheets / output ---
    sheet_name_template: str = "Table{index}"
    include_hidden_tables: bool = True
    output_format: str = "xlsx"

    # --- Logging ---
    log_cell_content: bool = False

    @classmethod
    def from_file(cls, path: str | pathlib.Path) -> ExportConfig:
        """Build an export config from a ``.json``, ``.yaml`` or ``.yml`` file.

        The file holds a mapping of field overrides, e.g. ``{"default_font_name":
        "Arial", "include_hidden_tables": false}``; an empty file yields the
        defaults.

        Raises:
            FileNotFoundError: *path* does not exist.
            ValueError: The extension is not one of the three above.
            ImportError: A YAML file was given without ``pyyaml`` installed.
        """
        file_path = pathlib.Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")

        text = file_path.read_text(encoding="utf-8")
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            data = json.loads(text) if text.strip() else None
        elif suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "Loading a YAML export config needs pyyaml: pip install htmlsheet[yaml]"
                ) from exc
            data = yaml.safe_load(text)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'; expected .json, .yaml or .yml."
            )

        return cls(**(data or {}))

    def sheet_name(self, index: int) -> str:
        """Return the sheet name for the 1-based *index* of a surviving table."""
        return self.sheet_name_template.format(index=index)
