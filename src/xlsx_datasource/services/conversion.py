"""Conversion of in-memory sheets into table schemas and row mappings.

Nothing in this module touches SQLite or openpyxl objects. A sheet becomes a
table named after its lowercased title; row 1 supplies the column names and
each column's type is taken from the declared type of its row-2 cell. The
sample is never checked against the remaining rows, so a column whose second
row is numeric is typed ``integer`` even when later rows hold text.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import Any

from xlsx_datasource.models import ColumnType, TableData, TableSchema
from xlsx_datasource.utils.logging import get_logger
from xlsx_datasource.workbook import SheetCell, WorkbookDocument, WorkbookSheet

logger = get_logger(__name__)

# openpyxl declared data types -> column types
DATA_TYPE_MAP: dict[str, ColumnType] = {
    "s": ColumnType.STRING,
    "str": ColumnType.STRING,
    "inlineStr": ColumnType.STRING,
    "n": ColumnType.INTEGER,
    "b": ColumnType.INTEGER,
    "f": ColumnType.INTEGER,
}


def column_type_for(data_type: str | None) -> ColumnType:
    """Map a declared cell type to a column type.

    Dates, error cells and empty samples fall back to ``string``.
    """
    if data_type is None:
        return ColumnType.STRING
    return DATA_TYPE_MAP.get(data_type, ColumnType.STRING)


def table_name_for(title: str) -> str:
    return title.lower()


def unique_headers(values: Iterable[Any]) -> list[str]:
    """Turn header cell values into distinct column names.

    Blank headers become ``column_<n>``. Repeats (compared case-insensitively,
    as SQLite does) get a ``_2``, ``_3``... suffix.
    """
    names: list[str] = []
    used: set[str] = set()
    for idx, value in enumerate(values, start=1):
        name = str(value).strip() if value is not None else ""
        if not name:
            name = f"column_{idx}"
        candidate = name
        suffix = 2
        while candidate.lower() in used:
            candidate = f"{name}_{suffix}"
            suffix += 1
        used.add(candidate.lower())
        names.append(candidate)
    return names


def infer_schema(sheet: WorkbookSheet) -> TableSchema | None:
    """Infer a table schema from the header row and the row-2 sample cells.

    Returns None for a sheet with no occupied cells.
    """
    if sheet.is_empty:
        return None

    headers = unique_headers(cell.value for cell in sheet.header_row)
    columns: dict[str, ColumnType] = {}
    for idx, header in enumerate(headers):
        sample = sheet.sample_cell(idx)
        columns[header] = column_type_for(sample.data_type if sample else None)

    return TableSchema(name=table_name_for(sheet.title), columns=columns)


def normalize_value(value: Any) -> Any:
    """Convert cell values SQLite cannot bind natively."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    return value


def build_rows(sheet: WorkbookSheet, schema: TableSchema) -> list[dict[str, Any]]:
    """Map every row after the header to ``{column: value}``."""
    headers = schema.column_names
    rows: list[dict[str, Any]] = []
    for row in sheet.data_rows:
        values = _pad(row, len(headers))
        rows.append(
            {
                header: normalize_value(cell.value)
                for header, cell in zip(headers, values, strict=True)
            }
        )
    return rows


def convert_sheet(sheet: WorkbookSheet) -> TableData | None:
    """Convert one sheet into a schema plus rows, or None if the sheet is empty."""
    schema = infer_schema(sheet)
    if schema is None:
        logger.debug("Skipping empty sheet", sheet=sheet.title)
        return None
    return TableData(schema=schema, rows=build_rows(sheet, schema))


def convert_workbook(document: WorkbookDocument) -> list[TableData]:
    """Convert every non-empty sheet of a workbook, in workbook order."""
    tables: list[TableData] = []
    seen: dict[str, str] = {}
    for sheet in document.sheets:
        table = convert_sheet(sheet)
        if table is None:
            continue
        # openpyxl renames case-insensitive duplicate titles on load, so only
        # documents built in code reach this branch.
        if table.name in seen:
            logger.warning(
                "Sheet titles collide after lowercasing; later sheet replaces table",
                table=table.name,
                first=seen[table.name],
                second=sheet.title,
            )
        seen[table.name] = sheet.title
        tables.append(table)
    return tables


def _pad(row: list[SheetCell], width: int) -> list[SheetCell]:
    if len(row) >= width:
        return row[:width]
    return row + [SheetCell(value=None) for _ in range(width - len(row))]
