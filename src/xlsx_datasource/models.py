"""Table models and adapter configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ColumnType(str, Enum):
    """Coarse column type inferred from a sample cell."""

    STRING = "string"
    INTEGER = "integer"

    def sql_type(self, string_type: str = "VARCHAR(255)") -> str:
        """Declared SQLite type for this column."""
        if self is ColumnType.STRING:
            return string_type
        return self.value.upper()


@dataclass
class TableSchema:
    """Inferred schema of one sheet: table name and ordered column types."""

    name: str
    columns: dict[str, ColumnType] = field(default_factory=dict)

    @property
    def column_names(self) -> list[str]:
        return list(self.columns)


@dataclass
class TableData:
    """A table schema plus its materialized rows."""

    schema: TableSchema
    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def row_count(self) -> int:
        return len(self.rows)


class AdapterConfig(BaseModel):
    """Connection options for an XlsxAdapter."""

    files: list[Path] = Field(
        default_factory=list, description="Workbook paths; only the first is loaded"
    )
    database: str = Field(..., description="SQLite store path or ':memory:'")
    destroy: bool = Field(
        default=False, description="Remove the store from disk on disconnect"
    )

    @field_validator("files", mode="before")
    @classmethod
    def coerce_files(cls, v: Any) -> Any:
        """Accept a single path as well as a list of paths."""
        if v is None:
            return []
        if isinstance(v, (str, Path)):
            return [v]
        return v
