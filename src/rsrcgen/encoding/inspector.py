"""Encoded resource inspection.

Public functions:
- decode_resource(data, template) -> list of (entry name, value)
- inspect_resource(path_or_bytes, template) -> dict
- validate_resource(info) -> list[str]

Values are decoded through the same primitive table the encoder uses, so a
decoded value compares equal to what the script declared (strings as raw
bytes, rectangles as 4-tuples). ``HEXD`` entries consume the rest of the
data.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Tuple
import hashlib
import struct

from ..types.primitives import PrimitiveKind
from ..types.templates import TypeTemplate
from .codec import read_primitive

__all__ = ["decode_resource", "inspect_resource", "validate_resource"]


def decode_resource(
    data: bytes, template: TypeTemplate
) -> List[Tuple[str, Any]]:
    out: List[Tuple[str, Any]] = []
    offset = 0
    for entry in template.template:
        if entry.type.kind is PrimitiveKind.NONE:
            raise ValueError(f"Entry '{entry.name}' has no known type")
        if offset > len(data) or (
            offset == len(data) and entry.type.kind is not PrimitiveKind.HEXD
        ):
            raise ValueError(
                f"Out of range read for {entry.name}: {offset}>={len(data)}"
            )
        try:
            value, used = read_primitive(data, offset, entry.type)
        except (struct.error, IndexError) as e:
            raise ValueError(
                f"Unable to decode {entry.name} at {offset}: {e}"
            ) from e
        out.append((entry.name, value))
        offset += used
    return out


def _entry_offsets(data: bytes, template: TypeTemplate) -> Dict[str, int]:
    offsets: Dict[str, int] = {}
    offset = 0
    for entry in template.template:
        offsets[entry.name] = offset
        _, used = read_primitive(data, offset, entry.type)
        offset += used
    offsets[""] = offset
    return offsets


def inspect_resource(
    source: str | Path | bytes, template: TypeTemplate
) -> Dict[str, Any]:
    data = source if isinstance(source, bytes) else Path(source).read_bytes()
    result: Dict[str, Any] = {
        "type": template.name,
        "code": template.code,
        "size": len(data),
        "sha256": hashlib.sha256(data).hexdigest(),
    }
    try:
        values = decode_resource(data, template)
        offsets = _entry_offsets(data, template)
    except ValueError as e:
        result["error"] = str(e)
        result["entries"] = []
        return result
    entries = []
    for name, value in values:
        shown = value.hex() if isinstance(value, bytes) else value
        if isinstance(value, tuple):
            shown = list(value)
        entries.append(
            {"name": name, "offset": offsets[name], "value": shown}
        )
    result["entries"] = entries
    result["consumed"] = offsets[""]
    return result


def validate_resource(info: Dict[str, Any]) -> List[str]:
    issues: List[str] = []
    if "error" in info:
        issues.append(info["error"])
        return issues
    consumed = info.get("consumed", 0)
    if consumed != info["size"]:
        issues.append(
            f"Trailing data: decoded {consumed} of {info['size']} bytes"
        )
    return issues
