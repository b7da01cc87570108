"""Path utilities (safe resolution against a source root)."""

from __future__ import annotations
from pathlib import Path

from ..errors import E_PATH_ESCAPE, ResourceError

__all__ = ["safe_file_path", "SourceRootResolver"]


def safe_file_path(base_dir: Path, file_path: str) -> Path:
    base_dir = base_dir.resolve()
    resolved = (base_dir / file_path).resolve()
    resolved.relative_to(base_dir)  # raises ValueError if escapes
    return resolved


class SourceRootResolver:
    """Resolves script-relative paths used by ``import`` values."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def resolve_src_path(self, text: str) -> Path:
        try:
            return safe_file_path(self.root, text)
        except ValueError:
            raise ResourceError(
                code=E_PATH_ESCAPE,
                message=f"Path '{text}' escapes the source root.",
                context={"root": str(self.root)},
            ) from None
