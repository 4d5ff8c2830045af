from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from openpyxl import Workbook

from xlsx_datasource.config import Settings

WorkbookFactory = Callable[..., Path]


def write_workbook(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
    """Save a workbook with one sheet per entry, rows appended in order."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets.items():
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path


@pytest.fixture
def make_workbook(tmp_path: Path) -> WorkbookFactory:
    """Factory writing workbooks into the test's temp directory."""

    def _make(sheets: dict[str, list[list[Any]]], name: str = "book.xlsx") -> Path:
        return write_workbook(tmp_path / name, sheets)

    return _make


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment, rooted in tmp_path."""
    with patch.dict(os.environ, {}, clear=True):
        return Settings(_env_file=None, resources_dir=str(tmp_path / "resources"))


@pytest.fixture
def orders_workbook(make_workbook: WorkbookFactory) -> Path:
    return make_workbook(
        {
            "Orders": [
                ["id", "customer", "qty"],
                [1, "alice", 3],
                [2, "bob", 5],
            ],
            "Customers": [
                ["name", "city"],
                ["alice", "Lisbon"],
            ],
        }
    )
