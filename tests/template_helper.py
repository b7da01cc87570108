"""Shared builders for rsrcgen tests.

Usage:
    from template_helper import make_registry, encode_one
    reg = make_registry([("count", "DWRD")])
    res = encode_one("new(#128) { count = 3; }", reg)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List, Tuple

from rsrcgen.api import compile_source
from rsrcgen.encoding.encoder import EncodedResource
from rsrcgen.types.loader import parse_types_dict
from rsrcgen.types.registry import TypeTemplateRegistry


def types_dict(
    template: Iterable[Tuple[str, str]],
    fields: List[Any] | None = None,
    *,
    name: str = "Test",
    code: str = "TEST",
) -> dict:
    template = list(template)
    return {
        "types": [
            {
                "name": name,
                "code": code,
                "template": [{"name": n, "type": t} for n, t in template],
                "fields": (
                    fields if fields is not None else [n for n, _ in template]
                ),
            }
        ]
    }


def make_registry(
    template: Iterable[Tuple[str, str]],
    fields: List[Any] | None = None,
    **kw: Any,
) -> TypeTemplateRegistry:
    return TypeTemplateRegistry(parse_types_dict(types_dict(template, fields, **kw)))


def encode_one(
    source: str,
    registry: TypeTemplateRegistry,
    *,
    source_root: Path | None = None,
) -> EncodedResource:
    resources = compile_source(source, registry, source_root=source_root)
    assert len(resources) == 1
    return resources[0]
