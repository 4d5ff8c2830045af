"""Dataclasses representing a workbook read into memory."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from openpyxl.utils import get_column_letter


@dataclass
class SheetCell:
    """A single cell value together with its declared openpyxl type code."""

    value: Any
    data_type: str | None = None


@dataclass
class WorkbookSheet:
    """A worksheet trimmed to its occupied range (A1 to last used cell)."""

    title: str
    rows: list[list[SheetCell]]
    max_row: int = 0
    max_column: int = 0

    @property
    def is_empty(self) -> bool:
        return self.max_row == 0 or self.max_column == 0

    @property
    def header_row(self) -> list[SheetCell]:
        return self.rows[0] if self.rows else []

    @property
    def data_rows(self) -> list[list[SheetCell]]:
        return self.rows[1:]

    def sample_cell(self, column_index: int) -> SheetCell | None:
        """Return the row-2 cell of a column, or None if the sheet has no data row."""
        if len(self.rows) < 2 or column_index >= len(self.rows[1]):
            return None
        return self.rows[1][column_index]

    @property
    def range_ref(self) -> str:
        """The occupied range in A1 notation, e.g. ``A1:C10``."""
        if self.is_empty:
            return "A1:A1"
        return f"A1:{get_column_letter(self.max_column)}{self.max_row}"


@dataclass
class WorkbookDocument:
    """A parsed workbook with its sheets in workbook order."""

    path: Path
    sheets: list[WorkbookSheet]
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def sheet_titles(self) -> list[str]:
        return [sheet.title for sheet in self.sheets]
