"""Removal of on-disk SQLite stores."""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path

from xlsx_datasource.config import settings
from xlsx_datasource.utils.exceptions import StoreError
from xlsx_datasource.utils.logging import get_logger

logger = get_logger(__name__)


def protected_paths(extra: Iterable[str | Path] | None = None) -> set[Path]:
    """Paths that must never be removed, resolved to absolute form."""
    paths: list[str | Path] = [
        Path("/"),
        Path.home(),
        Path.cwd(),
        settings.resources_dir,
        settings.data_dir,
    ]
    if extra:
        paths.extend(extra)
    return {Path(p).expanduser().resolve() for p in paths}


def remove_store(
    path: str | Path, protected: Iterable[str | Path] | None = None
) -> bool:
    """Delete a store file or directory tree.

    Args:
        path: File or directory to remove.
        protected: Additional paths to refuse, on top of the defaults.

    Returns:
        True if the path is gone afterwards, False if it was protected.

    Raises:
        StoreError: If the filesystem refuses the removal.
    """
    target = Path(path).expanduser().resolve()
    if target in protected_paths(protected):
        logger.warning("Refusing to remove protected path", path=str(target))
        return False

    if not target.exists():
        return True

    try:
        if target.is_dir():
            shutil.rmtree(target)
        else:
            target.unlink()
    except OSError as e:
        raise StoreError(f"Could not remove store: {e}", path=str(target)) from e

    logger.info("Store removed", path=str(target))
    return True
