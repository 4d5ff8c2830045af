"""Throwaway SQLite store that holds materialized sheets."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from xlsx_datasource.config import MEMORY_DATABASE
from xlsx_datasource.models import TableData, TableSchema
from xlsx_datasource.utils.exceptions import (
    ErrorCode,
    NotConnectedError,
    QueryError,
    StoreError,
)
from xlsx_datasource.utils.logging import get_logger

logger = get_logger(__name__)


def quote_identifier(name: str) -> str:
    """Quote a table or column name for SQLite."""
    return '"' + name.replace('"', '""') + '"'


class SQLiteStore:
    """Owns one sqlite3 connection to a file or in-memory database."""

    def __init__(self, database: str, string_column_type: str = "VARCHAR(255)") -> None:
        self.database = database
        self.string_column_type = string_column_type
        self._conn: sqlite3.Connection | None = None

    @property
    def is_memory(self) -> bool:
        return self.database == MEMORY_DATABASE

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise NotConnectedError("SQLite store is not open")
        return self._conn

    def open(self) -> sqlite3.Connection:
        """Open the database, replacing any handle already held."""
        self.close()
        if not self.is_memory:
            Path(self.database).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.database)
        logger.debug("SQLite store opened", database=self.database)
        return self._conn

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug("SQLite store closed", database=self.database)

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    def create_table(self, schema: TableSchema) -> None:
        """Drop and recreate the table for a schema."""
        table = quote_identifier(schema.name)
        columns = ", ".join(
            f"{quote_identifier(name)} {col_type.sql_type(self.string_column_type)}"
            for name, col_type in schema.columns.items()
        )
        self.connection.execute(f"DROP TABLE IF EXISTS {table}")
        self.connection.execute(f"CREATE TABLE IF NOT EXISTS {table} ({columns})")

    def insert_rows(self, table: TableData) -> int:
        """Insert all rows of a table with bound parameters."""
        if not table.rows:
            return 0
        names = table.schema.column_names
        columns = ", ".join(quote_identifier(name) for name in names)
        placeholders = ", ".join("?" for _ in names)
        sql = (
            f"INSERT INTO {quote_identifier(table.name)} ({columns}) "
            f"VALUES ({placeholders})"
        )
        self.connection.executemany(
            sql, ([row.get(name) for name in names] for row in table.rows)
        )
        return table.row_count

    def drop_tables(self) -> list[str]:
        """Drop every user table so the store holds only what is loaded next."""
        names = self.sources()
        for name in names:
            self.connection.execute(f"DROP TABLE IF EXISTS {quote_identifier(name)}")
        if names:
            logger.debug("Dropped existing tables", tables=len(names))
        return names

    def load(self, tables: Iterable[TableData]) -> int:
        """Replace the store contents with the given tables in one transaction.

        Returns:
            Total number of rows inserted.

        Raises:
            StoreError: If SQLite rejects a table, e.g. a reserved name.
        """
        inserted = 0
        with self.connection:
            self.drop_tables()
            for table in tables:
                try:
                    self.create_table(table.schema)
                    inserted += self.insert_rows(table)
                except sqlite3.Error as e:
                    raise StoreError(
                        f"Could not load table '{table.name}': {e}",
                        path=self.database,
                        table=table.name,
                        error_code=ErrorCode.STORE_LOAD_FAILED,
                    ) from e
                logger.debug(
                    "Table loaded", table=table.name, rows=table.row_count
                )
        return inserted

    # ------------------------------------------------------------------ #
    # Querying
    # ------------------------------------------------------------------ #

    def query(
        self, sql: str, params: Sequence[Any] | dict[str, Any] = ()
    ) -> list[dict[str, Any]]:
        """Run a SELECT and return rows as dictionaries."""
        try:
            cursor = self.connection.cursor()
            cursor.row_factory = sqlite3.Row
            cursor.execute(sql, params)
            return [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise QueryError(f"Query failed: {e}", sql=sql) from e

    def execute(self, sql: str, params: Sequence[Any] | dict[str, Any] = ()) -> int:
        """Run a data-modifying statement and return the affected row count."""
        try:
            with self.connection:
                cursor = self.connection.execute(sql, params)
            return cursor.rowcount
        except sqlite3.Error as e:
            raise QueryError(f"Statement failed: {e}", sql=sql) from e

    def read_frame(
        self, sql: str, params: Sequence[Any] | dict[str, Any] | None = None
    ) -> pd.DataFrame:
        """Run a query and return the result as a DataFrame."""
        try:
            return pd.read_sql_query(sql, self.connection, params=params)
        except (sqlite3.Error, pd.errors.DatabaseError) as e:
            raise QueryError(f"Query failed: {e}", sql=sql) from e

    def sources(self) -> list[str]:
        """List the tables in the store."""
        rows = self.query(
            "SELECT name FROM sqlite_master WHERE type = 'table' "
            "AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        return [row["name"] for row in rows]

    def describe(self, table: str) -> dict[str, str]:
        """Return ``{column: declared type}`` for a table."""
        rows = self.query(f"PRAGMA table_info({quote_identifier(table)})")
        if not rows:
            raise QueryError(f"Unknown table: {table}")
        return {row["name"]: row["type"] for row in rows}
