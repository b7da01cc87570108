"""Manifest generation for compiled resource scripts.

The manifest is an optional JSON artifact summarising one compilation: the
script and type it was compiled against, plus one entry per encoded
resource (id, name, size, sha256 and the output file when one was written).
It is only produced when explicitly requested.
"""

from __future__ import annotations

from pathlib import Path
import hashlib
import json
from typing import Any

from .collector import ResourceCollector

__all__ = ["build_manifest", "manifest_dict"]


def manifest_dict(
    collector: ResourceCollector,
    *,
    script: Path | None = None,
    type_name: str | None = None,
    output_dir: Path | None = None,
) -> dict[str, Any]:
    entries = []
    for res in collector:
        entry: dict[str, Any] = {
            "type": res.type_code,
            "id": res.resource_id,
            "name": res.name,
            "size": len(res.data),
            "sha256": hashlib.sha256(res.data).hexdigest(),
        }
        path = collector.file_for(res)
        if path is not None:
            entry["file"] = (
                path.relative_to(output_dir).as_posix()
                if output_dir is not None
                else str(path)
            )
        entries.append(entry)
    return {
        "version": 1,
        "script": str(script) if script is not None else None,
        "type": type_name,
        "resources": entries,
        "counts": {"resources": len(entries)},
        "total_bytes": collector.total_bytes,
    }


def build_manifest(
    collector: ResourceCollector,
    output_path: Path,
    *,
    script: Path | None = None,
    type_name: str | None = None,
    output_dir: Path | None = None,
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = manifest_dict(
        collector, script=script, type_name=type_name, output_dir=output_dir
    )
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")
    return output_path
