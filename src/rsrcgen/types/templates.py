"""Dataclass models for resource type templates."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from ..errors import (
    E_TEMPLATE,
    E_UNDEFINED_SYMBOL,
    template_error,
    value_error,
)
from ..lexer.tokens import Token
from .primitives import PrimitiveType

SymbolValue = Union[int, str]


@dataclass(frozen=True, slots=True)
class TemplateEntry:
    """One named, typed entry of a type's binary template."""

    name: str
    type: PrimitiveType


@dataclass(slots=True)
class ValueSlot:
    name: str
    backing: PrimitiveType
    symbols: Dict[str, SymbolValue] = field(default_factory=dict)

    def value_for(self, symbol: Token) -> SymbolValue:
        try:
            return self.symbols[symbol.text]
        except KeyError:
            raise value_error(
                E_UNDEFINED_SYMBOL,
                f"Undefined symbol '{symbol.text}' for value '{self.name}'.",
                symbol.position,
            ) from None


@dataclass(frozen=True, slots=True)
class ExplicitType:
    tag: str
    is_reference: bool = False


@dataclass(slots=True)
class FieldTemplate:
    name: str
    values: List[ValueSlot]
    explicit_type: Optional[ExplicitType] = None

    def __post_init__(self) -> None:
        if not self.values:
            raise template_error(
                E_TEMPLATE, f"Field '{self.name}' declares no values."
            )

    @property
    def value_count(self) -> int:
        return len(self.values)

    def value_at(self, index: int) -> ValueSlot:
        return self.values[index]


@dataclass(slots=True)
class TypeTemplate:
    name: str
    code: str
    template: List[TemplateEntry] = field(default_factory=list)
    fields: Dict[str, FieldTemplate] = field(default_factory=dict)

    def entry_named(self, name: str) -> Optional[TemplateEntry]:
        for entry in self.template:
            if entry.name == name:
                return entry
        return None

    def layout(self) -> List[Tuple[str, PrimitiveType]]:
        return [(e.name, e.type) for e in self.template]


__all__ = [
    "SymbolValue",
    "TemplateEntry",
    "ValueSlot",
    "ExplicitType",
    "FieldTemplate",
    "TypeTemplate",
]
