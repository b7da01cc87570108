"""Type template loading utilities (JSON/YAML)."""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List
import json

import yaml

from ..errors import E_TEMPLATE, template_error
from .primitives import parse_primitive_type
from .registry import TypeTemplateRegistry
from .templates import (
    ExplicitType,
    FieldTemplate,
    TemplateEntry,
    TypeTemplate,
    ValueSlot,
)

__all__ = ["load_types", "parse_types_dict", "load_registry"]


def load_types(path: str | Path) -> List[TypeTemplate]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise template_error(
            E_TEMPLATE, f"Unable to parse type templates {p}: {e}"
        ) from e
    if not isinstance(data, dict):
        raise template_error(
            E_TEMPLATE, "Root of type template file must be an object"
        )
    return parse_types_dict(data)


def load_registry(
    path: str | Path, active: str | None = None
) -> TypeTemplateRegistry:
    return TypeTemplateRegistry(load_types(path), active=active)


def _require(obj: Dict[str, Any], key: str, where: str) -> Any:
    if key not in obj or obj[key] in (None, ""):
        raise template_error(E_TEMPLATE, f"{where}: missing '{key}'")
    return obj[key]


def _parse_symbols(raw: Any, where: str) -> Dict[str, int | str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise template_error(E_TEMPLATE, f"{where}: symbols must be a mapping")
    out: Dict[str, int | str] = {}
    for name, value in raw.items():
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise template_error(
                E_TEMPLATE,
                f"{where}: symbol '{name}' must be an integer or a string",
            )
        out[str(name)] = value
    return out


def _parse_type(raw: Dict[str, Any], index: int) -> TypeTemplate:
    where = f"types[{index}]"
    name = str(_require(raw, "name", where))
    where = f"type '{name}'"
    code = str(raw.get("code", name))

    entries: List[TemplateEntry] = []
    seen: set[str] = set()
    for i, e in enumerate(raw.get("template") or []):
        if not isinstance(e, dict):
            raise template_error(
                E_TEMPLATE, f"{where}: template[{i}] must be an object"
            )
        ename = str(_require(e, "name", f"{where}.template[{i}]"))
        if ename in seen:
            raise template_error(
                E_TEMPLATE, f"{where}: duplicate template entry '{ename}'"
            )
        seen.add(ename)
        # Unknown type names load as NONE and fail when a field is written.
        etype = parse_primitive_type(
            str(_require(e, "type", f"{where}.template[{i}]"))
        )
        entries.append(TemplateEntry(ename, etype))
    by_name = {e.name: e for e in entries}

    fields: Dict[str, FieldTemplate] = {}
    for i, f in enumerate(raw.get("fields") or []):
        if isinstance(f, str):
            f = {"name": f}
        if not isinstance(f, dict):
            raise template_error(
                E_TEMPLATE, f"{where}: fields[{i}] must be an object"
            )
        fname = str(_require(f, "name", f"{where}.fields[{i}]"))
        fwhere = f"{where}.{fname}"
        if fname in fields:
            raise template_error(
                E_TEMPLATE, f"{where}: duplicate field '{fname}'"
            )

        slots: List[ValueSlot] = []
        for v in f.get("values") or [fname]:
            if isinstance(v, str):
                v = {"name": v}
            if not isinstance(v, dict):
                raise template_error(
                    E_TEMPLATE, f"{fwhere}: values must be names or objects"
                )
            vname = str(_require(v, "name", fwhere))
            entry = by_name.get(vname)
            if entry is None:
                raise template_error(
                    E_TEMPLATE,
                    f"{fwhere}: value '{vname}' is not in the type template",
                )
            slots.append(
                ValueSlot(
                    vname,
                    entry.type,
                    _parse_symbols(v.get("symbols"), f"{fwhere}.{vname}"),
                )
            )

        explicit = None
        if f.get("reference"):
            explicit = ExplicitType(str(f["reference"]), is_reference=True)
        elif f.get("type"):
            explicit = ExplicitType(str(f["type"]))
        fields[fname] = FieldTemplate(fname, slots, explicit)

    return TypeTemplate(name=name, code=code, template=entries, fields=fields)


def parse_types_dict(data: Dict[str, Any]) -> List[TypeTemplate]:
    raw_types = data.get("types")
    if not isinstance(raw_types, list):
        raise template_error(E_TEMPLATE, "'types' must be a list")
    out: List[TypeTemplate] = []
    for i, t in enumerate(raw_types):
        if not isinstance(t, dict):
            raise template_error(E_TEMPLATE, f"types[{i}] must be an object")
        out.append(_parse_type(t, i))
    return out
