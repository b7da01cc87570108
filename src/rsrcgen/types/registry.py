"""Type template registry.

The registry owns the loaded :class:`TypeTemplate` set, tracks which type
resource declarations are currently compiled against, hands out fresh
encoders and resolves field names and template entries for the parser.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Set, Tuple

from ..errors import (
    E_DUP_RESOURCE_ID,
    E_TEMPLATE,
    E_UNKNOWN_FIELD,
    E_UNKNOWN_TYPE,
    template_error,
    value_error,
)
from ..lexer.tokens import SourcePosition, Token
from .primitives import PrimitiveKind, PrimitiveType
from .templates import FieldTemplate, SymbolValue, TypeTemplate, ValueSlot

if TYPE_CHECKING:
    from ..encoding.encoder import ResourceEncoder

__all__ = ["TypeTemplateRegistry", "FIRST_AUTO_ID"]

FIRST_AUTO_ID = 128


class TypeTemplateRegistry:
    def __init__(
        self, types: Iterable[TypeTemplate], *, active: str | None = None
    ):
        self._types: Dict[str, TypeTemplate] = {}
        for t in types:
            if t.name in self._types:
                raise template_error(
                    E_TEMPLATE, f"Type '{t.name}' is defined more than once."
                )
            self._types[t.name] = t
        self._active: Optional[TypeTemplate] = None
        self._used_ids: Dict[str, Set[int]] = {}
        if active is not None:
            self.select(active)
        elif len(self._types) == 1:
            self._active = next(iter(self._types.values()))

    # Type selection -------------------------------------------------------
    @property
    def type_names(self) -> List[str]:
        return list(self._types)

    def type_named(self, name: str) -> TypeTemplate:
        try:
            return self._types[name]
        except KeyError:
            raise template_error(
                E_UNKNOWN_TYPE,
                f"Unknown resource type '{name}'.",
                context={"known": sorted(self._types)},
            ) from None

    def select(self, name: str) -> TypeTemplate:
        self._active = self.type_named(name)
        return self._active

    @property
    def active(self) -> TypeTemplate:
        if self._active is None:
            raise template_error(
                E_UNKNOWN_TYPE,
                "No resource type selected.",
                context={"known": sorted(self._types)},
            )
        return self._active

    # Lookups used by the declaration parser ----------------------------------
    def instantiate_resource(
        self,
        resource_id: int | None = None,
        name: str | None = None,
        position: SourcePosition | None = None,
    ) -> ResourceEncoder:
        from ..encoding.encoder import ResourceEncoder

        tmpl = self.active
        rid = self.resolve_id(resource_id, position)
        return ResourceEncoder(
            type_code=tmpl.code,
            layout=tmpl.layout(),
            resource_id=rid,
            name=name or "",
        )

    def field_named(self, token: Token) -> FieldTemplate:
        tmpl = self.active
        try:
            return tmpl.fields[token.text]
        except KeyError:
            raise template_error(
                E_UNKNOWN_FIELD,
                f"The field '{token.text}' is not defined by type "
                f"'{tmpl.name}'.",
                token.position,
            ) from None

    def template_field_named(
        self, value_name: str
    ) -> Tuple[Dict[str, SymbolValue], PrimitiveType]:
        tmpl = self.active
        entry = tmpl.entry_named(value_name)
        if entry is None:
            return {}, PrimitiveType(PrimitiveKind.NONE)
        slot = self._slot_named(value_name)
        return (dict(slot.symbols) if slot else {}), entry.type

    def _slot_named(self, value_name: str) -> Optional[ValueSlot]:
        for f in self.active.fields.values():
            for slot in f.values:
                if slot.name == value_name:
                    return slot
        return None

    # Resource ids ---------------------------------------------------------
    def resolve_id(
        self, resource_id: int | None, position: SourcePosition | None = None
    ) -> int:
        """Assign or claim a resource id for the active type.

        Anonymous declarations receive the lowest free id starting at
        ``FIRST_AUTO_ID``. Explicit ids must be unique within the type.
        """
        used = self._used_ids.setdefault(self.active.name, set())
        if resource_id is None:
            rid = FIRST_AUTO_ID
            while rid in used:
                rid += 1
        else:
            if resource_id in used:
                raise value_error(
                    E_DUP_RESOURCE_ID,
                    f"Resource id #{resource_id} is already used by another "
                    f"'{self.active.name}' resource.",
                    position,
                )
            rid = resource_id
        used.add(rid)
        return rid
