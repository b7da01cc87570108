"""IO helpers for loading files referenced by resource scripts."""

from __future__ import annotations
import os
from pathlib import Path

from ..errors import (
    E_FILE_MISSING,
    E_FILE_TOO_LARGE,
    E_FILE_UNREADABLE,
    ResourceError,
)

__all__ = ["DEFAULT_MAX_FILE_SIZE", "safe_read_file", "FileLoader"]

DEFAULT_MAX_FILE_SIZE = 16 * 1024 * 1024


def _max_size_from_env() -> int:
    raw = os.getenv("RSRCGEN_MAX_FILE_SIZE")
    if not raw:
        return DEFAULT_MAX_FILE_SIZE
    try:
        return int(raw)
    except ValueError:
        return DEFAULT_MAX_FILE_SIZE


def safe_read_file(path: Path, max_size: int | None = None) -> bytes:
    if max_size is None:
        max_size = _max_size_from_env()
    if not path.is_file():
        raise ResourceError(
            code=E_FILE_MISSING,
            message=f"File not found: {path}",
            context={"path": str(path)},
        )
    size = path.stat().st_size
    if size > max_size:
        raise ResourceError(
            code=E_FILE_TOO_LARGE,
            message=f"File too large: {size}>{max_size}",
            context={"path": str(path)},
        )
    try:
        return path.read_bytes()
    except OSError as e:
        raise ResourceError(
            code=E_FILE_UNREADABLE,
            message=f"Unable to read {path}: {e.strerror or e}",
            context={"path": str(path)},
        ) from e


class FileLoader:
    def __init__(self, max_size: int | None = None):
        self.max_size = max_size

    def contents(self, path: Path) -> bytes:
        return safe_read_file(Path(path), self.max_size)
