"""Adapter exposing Excel workbooks through a throwaway SQLite database.

``connect()`` checks that every configured workbook exists, reads the first
one, converts each sheet into a table and loads the result into SQLite. All
querying is then delegated to the standard ``sqlite3`` driver. The store is
rebuilt from scratch on every connect.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

import pandas as pd

from xlsx_datasource.config import MEMORY_DATABASE, Settings
from xlsx_datasource.config import settings as default_settings
from xlsx_datasource.models import AdapterConfig, TableSchema
from xlsx_datasource.services.cleanup import remove_store
from xlsx_datasource.services.conversion import convert_workbook
from xlsx_datasource.services.sqlite_store import SQLiteStore
from xlsx_datasource.services.workbook_reader import WorkbookReader
from xlsx_datasource.utils.exceptions import (
    DataSourceConnectionError,
    NotConnectedError,
    WorkbookNotFoundError,
)
from xlsx_datasource.utils.logging import LogContext, get_logger, timed_operation

logger = get_logger(__name__)

PathLike = str | Path


class XlsxAdapter:
    """Query Excel workbooks with SQL.

    Example:
        with XlsxAdapter("report.xlsx", database=":memory:") as source:
            rows = source.query("SELECT * FROM orders WHERE qty > ?", (3,))
    """

    def __init__(
        self,
        files: PathLike | Sequence[PathLike] | None = None,
        database: str | None = None,
        destroy: bool | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Build an adapter, filling unset options from settings.

        Args:
            files: One workbook path or a list of them.
            database: SQLite path or ":memory:". Defaults to a fresh file
                under the configured resources directory.
            destroy: Remove the store on disconnect.
            settings: Settings to draw defaults from.
        """
        self._settings = settings or default_settings
        self.config = AdapterConfig(
            files=files,
            database=self._settings.resolve_database(database),
            destroy=self._settings.destroy if destroy is None else destroy,
        )
        self.connection_id = uuid4().hex[:8]
        self._reader = WorkbookReader()
        self._store = SQLiteStore(
            self.config.database,
            string_column_type=self._settings.string_column_type,
        )
        self._tables: list[TableSchema] = []
        self._connected = False

    @classmethod
    def from_config(
        cls, config: AdapterConfig, settings: Settings | None = None
    ) -> XlsxAdapter:
        return cls(
            files=config.files,
            database=config.database,
            destroy=config.destroy,
            settings=settings,
        )

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def files(self) -> list[Path]:
        return list(self.config.files)

    @property
    def database(self) -> str:
        return self.config.database

    @property
    def destroy(self) -> bool:
        return self.config.destroy

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def tables(self) -> list[TableSchema]:
        """Schemas loaded by the last successful connect."""
        return list(self._tables)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def connect(self) -> bool:
        """Load the first configured workbook into a fresh SQLite store.

        Returns:
            True once the store is populated. False when no workbook is
            configured or any configured workbook is missing; no store is
            created in that case.

        Raises:
            DataSourceConnectionError: If checking the workbooks fails.
        """
        self._connected = False
        files = self.files

        with LogContext(connection_id=self.connection_id):
            try:
                available = self._files_exist(files)
            except Exception as e:
                logger.error("Workbook check failed", error=str(e))
                raise DataSourceConnectionError(
                    files=[str(f) for f in files]
                ) from e

            if not available:
                self._store.close()
                return False

            source = files[0]
            if len(files) > 1:
                # TODO: define merge semantics for multiple workbooks
                logger.warning(
                    "Only the first workbook is loaded",
                    loaded=str(source),
                    ignored=len(files) - 1,
                )

            with LogContext(source=source.name):
                with timed_operation(logger, "connect") as metrics:
                    document = self._reader.read(source)
                    tables = convert_workbook(document)
                    self._store.open()
                    metrics.rows_loaded = self._store.load(tables)
                    metrics.sheets_read = len(document.sheets)
                    metrics.tables_loaded = len(tables)

        self._tables = [table.schema for table in tables]
        self._connected = True
        return True

    def disconnect(self) -> bool:
        """Close the store and remove it from disk if configured to.

        Returns:
            False only when removal was refused for a protected path.
        """
        self._connected = False
        self._store.close()

        if self.destroy and self.database != MEMORY_DATABASE:
            with LogContext(connection_id=self.connection_id):
                return remove_store(
                    self.database,
                    protected=[self._settings.resources_dir, self._settings.data_dir],
                )
        return True

    def modified(self, fmt: str | None = None) -> str:
        """Modification time of the first configured workbook.

        Args:
            fmt: strftime pattern; defaults to the configured pattern.

        Raises:
            WorkbookNotFoundError: If no workbook is configured or it is missing.
        """
        files = self.files
        if not files:
            raise WorkbookNotFoundError(None, message="No workbook configured")
        try:
            mtime = files[0].stat().st_mtime
        except FileNotFoundError as e:
            raise WorkbookNotFoundError(str(files[0])) from e
        return datetime.fromtimestamp(mtime).strftime(
            fmt or self._settings.modified_format
        )

    def __enter__(self) -> XlsxAdapter:
        self.connect()
        return self

    def __exit__(self, *args: Any) -> None:
        self.disconnect()

    # ------------------------------------------------------------------ #
    # Query API (delegated to the store)
    # ------------------------------------------------------------------ #

    def query(
        self, sql: str, params: Sequence[Any] | dict[str, Any] = ()
    ) -> list[dict[str, Any]]:
        return self._require_store().query(sql, params)

    def execute(self, sql: str, params: Sequence[Any] | dict[str, Any] = ()) -> int:
        return self._require_store().execute(sql, params)

    def read_frame(
        self, sql: str, params: Sequence[Any] | dict[str, Any] | None = None
    ) -> pd.DataFrame:
        return self._require_store().read_frame(sql, params)

    def sources(self) -> list[str]:
        """Table names available in the store."""
        return self._require_store().sources()

    def describe(self, table: str) -> dict[str, str]:
        """Declared column types of a table."""
        return self._require_store().describe(table)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _require_store(self) -> SQLiteStore:
        if not self._connected:
            raise NotConnectedError()
        return self._store

    @staticmethod
    def _files_exist(files: list[Path]) -> bool:
        if not files:
            logger.warning("No workbook configured")
            return False
        for path in files:
            if not path.exists():
                logger.warning("Workbook not found", path=str(path))
                return False
        return True
