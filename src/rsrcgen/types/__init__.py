from .primitives import (
    PrimitiveKind,
    PrimitiveType,
    StringKind,
    parse_primitive_type,
)
from .templates import (
    ExplicitType,
    FieldTemplate,
    TemplateEntry,
    TypeTemplate,
    ValueSlot,
)
from .registry import TypeTemplateRegistry
from .loader import load_registry, load_types, parse_types_dict

__all__ = [
    "PrimitiveKind",
    "PrimitiveType",
    "StringKind",
    "parse_primitive_type",
    "ExplicitType",
    "FieldTemplate",
    "TemplateEntry",
    "TypeTemplate",
    "ValueSlot",
    "TypeTemplateRegistry",
    "load_registry",
    "load_types",
    "parse_types_dict",
]
