"""Services backing the xlsx data source adapter."""

from xlsx_datasource.services.conversion import convert_sheet, convert_workbook
from xlsx_datasource.services.sqlite_store import SQLiteStore
from xlsx_datasource.services.workbook_reader import ReadOptions, WorkbookReader

__all__ = [
    "ReadOptions",
    "SQLiteStore",
    "WorkbookReader",
    "convert_sheet",
    "convert_workbook",
]
