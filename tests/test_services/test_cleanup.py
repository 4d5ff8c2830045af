"""Tests for store removal."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from xlsx_datasource.services.cleanup import protected_paths, remove_store
from xlsx_datasource.utils.exceptions import StoreError


def test_removes_file(tmp_path: Path) -> None:
    target = tmp_path / "store.sqlite"
    target.write_bytes(b"")

    assert remove_store(target) is True
    assert not target.exists()


def test_removes_directory_tree(tmp_path: Path) -> None:
    target = tmp_path / "seed"
    (target / "inner").mkdir(parents=True)
    (target / "inner" / "file.txt").write_text("x")

    assert remove_store(target) is True
    assert not target.exists()


def test_missing_path_counts_as_removed(tmp_path: Path) -> None:
    assert remove_store(tmp_path / "never-created") is True


def test_root_is_protected() -> None:
    assert Path("/").resolve() in protected_paths()
    assert remove_store("/") is False


def test_extra_protected_path(tmp_path: Path) -> None:
    keep = tmp_path / "keep"
    keep.mkdir()

    assert remove_store(keep, protected=[keep]) is False
    assert keep.exists()


def test_filesystem_error_is_wrapped(tmp_path: Path) -> None:
    target = tmp_path / "store.sqlite"
    target.write_bytes(b"")

    with patch.object(Path, "unlink", side_effect=PermissionError("read-only")):
        with pytest.raises(StoreError) as exc_info:
            remove_store(target)

    assert exc_info.value.path == str(target.resolve())
    assert isinstance(exc_info.value.__cause__, PermissionError)
