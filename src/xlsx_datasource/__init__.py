"""xlsx-datasource - query Excel workbooks through a throwaway SQLite store."""

from xlsx_datasource.adapter import XlsxAdapter
from xlsx_datasource.models import AdapterConfig, ColumnType, TableData, TableSchema

__all__ = ["AdapterConfig", "ColumnType", "TableData", "TableSchema", "XlsxAdapter"]
__version__ = "0.1.0"
