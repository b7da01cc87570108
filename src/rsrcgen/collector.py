"""Collects encoded resources handed back by the declaration parser."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterator, List

from .encoding.encoder import EncodedResource
from .errors import E_WRITE_IO, ResourceError
from .logging import get_logger

__all__ = ["ResourceCollector", "resource_filename"]

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def resource_filename(resource: EncodedResource) -> Path:
    code = _UNSAFE.sub("_", resource.type_code) or "_"
    return Path(code) / f"{resource.resource_id}.bin"


class ResourceCollector:
    def __init__(self) -> None:
        self._resources: List[EncodedResource] = []
        self._files: Dict[int, Path] = {}

    def collect(self, resource: EncodedResource) -> EncodedResource:
        self._resources.append(resource)
        return resource

    def __iter__(self) -> Iterator[EncodedResource]:
        return iter(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    @property
    def resources(self) -> List[EncodedResource]:
        return list(self._resources)

    @property
    def total_bytes(self) -> int:
        return sum(len(r.data) for r in self._resources)

    def file_for(self, resource: EncodedResource) -> Path | None:
        return self._files.get(id(resource))

    def write_all(self, out_dir: Path) -> List[Path]:
        """Write each resource to ``<out_dir>/<type code>/<id>.bin``."""
        logger = get_logger()
        written: List[Path] = []
        for res in self._resources:
            path = out_dir / resource_filename(res)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(res.data)
            except OSError as e:
                raise ResourceError(
                    code=E_WRITE_IO,
                    message=f"Unable to write {path}: {e.strerror or e}",
                    context={"path": str(path)},
                ) from e
            self._files[id(res)] = path
            written.append(path)
            logger.debug("wrote %s (%d bytes)", path, len(res.data))
        return written
