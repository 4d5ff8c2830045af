"""Workbook reader that trims every sheet to its occupied range."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl import load_workbook
from openpyxl.cell import Cell
from openpyxl.worksheet.worksheet import Worksheet

from xlsx_datasource.utils.exceptions import WorkbookNotFoundError
from xlsx_datasource.utils.logging import get_logger
from xlsx_datasource.workbook import SheetCell, WorkbookDocument, WorkbookSheet

logger = get_logger(__name__)


@dataclass
class ReadOptions:
    """Options controlling which parts of a workbook are read."""

    sheet_names: list[str] | None = None
    max_rows: int | None = None
    max_columns: int | None = None


class WorkbookReader:
    """Read Excel workbooks into WorkbookDocument objects using openpyxl."""

    def read(
        self, file_path: Path, options: ReadOptions | None = None
    ) -> WorkbookDocument:
        """Read every sheet of a workbook.

        Parse errors raised by openpyxl are not caught here.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise WorkbookNotFoundError(str(file_path))

        opts = options or ReadOptions()
        # Load twice: once for declared cell types, once for cached computed values
        workbook = load_workbook(filename=file_path, data_only=False)
        computed_wb = load_workbook(filename=file_path, data_only=True)

        sheet_names = workbook.sheetnames
        if opts.sheet_names:
            missing = [name for name in opts.sheet_names if name not in sheet_names]
            if missing:
                raise ValueError(
                    f"Sheet(s) not found in workbook: {', '.join(missing)}"
                )
            target_names = [name for name in sheet_names if name in opts.sheet_names]
        else:
            target_names = sheet_names

        sheets = [
            self._read_sheet(
                workbook[name],
                computed_wb[name],
                max_rows=opts.max_rows,
                max_columns=opts.max_columns,
            )
            for name in target_names
        ]
        logger.debug("Workbook read", path=str(file_path), sheets=len(sheets))

        return WorkbookDocument(
            path=file_path,
            sheets=sheets,
            metadata={"sheet_names": list(sheet_names)},
        )

    def get_sheet_names(self, file_path: Path) -> list[str]:
        """List all sheet names in a workbook."""
        file_path = Path(file_path)
        if not file_path.exists():
            raise WorkbookNotFoundError(str(file_path))
        wb = load_workbook(filename=file_path, read_only=True)
        try:
            return list(wb.sheetnames)
        finally:
            wb.close()

    def read_frame(
        self, file_path: Path, sheet_name: str | None = None
    ) -> pd.DataFrame:
        """Read a worksheet as a DataFrame using row 1 as the header."""
        file_path = Path(file_path)
        if not file_path.exists():
            raise WorkbookNotFoundError(str(file_path))
        wb = load_workbook(filename=file_path, data_only=True, read_only=True)
        try:
            target_sheet = sheet_name or wb.sheetnames[0]
            if target_sheet not in wb.sheetnames:
                raise ValueError(f"Sheet '{target_sheet}' not found in workbook")
            data = list(wb[target_sheet].values)
        finally:
            wb.close()
        headers = data[0] if data else []
        rows = data[1:] if len(data) > 1 else []
        return pd.DataFrame(rows, columns=headers if headers else None)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _read_sheet(
        self,
        sheet: Worksheet,
        computed_sheet: Worksheet,
        *,
        max_rows: int | None,
        max_columns: int | None,
    ) -> WorkbookSheet:
        """Extract one worksheet, limited to its occupied range."""
        max_row, max_column = self._occupied_extent(sheet)
        if max_rows is not None:
            max_row = min(max_row, max_rows)
        if max_columns is not None:
            max_column = min(max_column, max_columns)

        if max_row == 0 or max_column == 0:
            return WorkbookSheet(title=sheet.title, rows=[])

        rows: list[list[SheetCell]] = []
        row_iter: Iterable[tuple[Cell, ...]] = sheet.iter_rows(
            min_row=1, max_row=max_row, min_col=1, max_col=max_column
        )
        computed_iter = computed_sheet.iter_rows(
            min_row=1,
            max_row=max_row,
            min_col=1,
            max_col=max_column,
            values_only=True,
        )
        for row_cells, computed_values in zip(row_iter, computed_iter, strict=True):
            rows.append(
                [
                    self._build_cell(cell, computed_value)
                    for cell, computed_value in zip(
                        row_cells, computed_values, strict=True
                    )
                ]
            )

        return WorkbookSheet(
            title=sheet.title,
            rows=rows,
            max_row=max_row,
            max_column=max_column,
        )

    @staticmethod
    def _build_cell(cell: Cell, computed_value: Any) -> SheetCell:
        """Pair the computed value with the declared type of the source cell."""
        if cell.value is None:
            return SheetCell(value=None, data_type=None)
        if cell.data_type == "f":
            return SheetCell(value=computed_value, data_type="f")
        return SheetCell(value=cell.value, data_type=cell.data_type)

    @staticmethod
    def _occupied_extent(sheet: Worksheet) -> tuple[int, int]:
        """Highest row and column that hold a value (0, 0 for an empty sheet)."""
        last_row = 0
        last_column = 0
        for row_idx, values in enumerate(sheet.iter_rows(values_only=True), start=1):
            for col_idx, value in enumerate(values, start=1):
                if value is None:
                    continue
                last_row = row_idx
                if col_idx > last_column:
                    last_column = col_idx
        return last_row, last_column
