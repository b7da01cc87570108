"""Resource encoder buffer and the immutable encoded result.

Writes are keyed by value slot; ``assemble`` lays the slot data out in the
type's template order, filling entries no field wrote with their default
encoding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import E_DUPLICATE_VALUE, internal_error, value_error
from ..types.primitives import PrimitiveKind, PrimitiveType
from ..types.templates import ValueSlot
from . import codec

__all__ = ["EncodedResource", "ResourceEncoder"]


@dataclass(frozen=True, slots=True)
class EncodedResource:
    type_code: str
    resource_id: int
    name: str
    data: bytes
    slots: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.data)


class ResourceEncoder:
    def __init__(
        self,
        *,
        type_code: str,
        layout: Sequence[Tuple[str, PrimitiveType]],
        resource_id: int,
        name: str = "",
    ):
        self.type_code = type_code
        self.resource_id = resource_id
        self.name = name
        self._layout: List[Tuple[str, PrimitiveType]] = list(layout)
        self._values: Dict[str, bytes] = {}
        self._order: List[str] = []
        self._assembled = False

    def _store(self, slot: ValueSlot, writer, *args) -> int:
        if self._assembled:
            raise internal_error(
                "Resource encoder already assembled",
                {"slot": slot.name, "resource_id": self.resource_id},
            )
        if slot.name in self._values:
            raise value_error(
                E_DUPLICATE_VALUE,
                f"Value '{slot.name}' has already been written.",
            )
        buf = bytearray()
        written = writer(buf, *args)
        self._values[slot.name] = bytes(buf)
        self._order.append(slot.name)
        return written

    # Signed integers
    def write_signed_byte(self, slot: ValueSlot, value: int) -> int:
        return self._store(slot, codec.write_signed, 1, value)

    def write_signed_short(self, slot: ValueSlot, value: int) -> int:
        return self._store(slot, codec.write_signed, 2, value)

    def write_signed_long(self, slot: ValueSlot, value: int) -> int:
        return self._store(slot, codec.write_signed, 4, value)

    def write_signed_quad(self, slot: ValueSlot, value: int) -> int:
        return self._store(slot, codec.write_signed, 8, value)

    # Unsigned integers
    def write_byte(self, slot: ValueSlot, value: int) -> int:
        return self._store(slot, codec.write_unsigned, 1, value)

    def write_short(self, slot: ValueSlot, value: int) -> int:
        return self._store(slot, codec.write_unsigned, 2, value)

    def write_long(self, slot: ValueSlot, value: int) -> int:
        return self._store(slot, codec.write_unsigned, 4, value)

    def write_quad(self, slot: ValueSlot, value: int) -> int:
        return self._store(slot, codec.write_unsigned, 8, value)

    def write_integer(
        self, slot: ValueSlot, kind: PrimitiveKind, value: int
    ) -> int:
        return self._store(slot, codec.write_integer, kind, value)

    # Strings and blobs
    def write_pstr(self, slot: ValueSlot, data: bytes) -> int:
        return self._store(slot, codec.write_pstr, data)

    def write_cstr(
        self, slot: ValueSlot, data: bytes, size: Optional[int] = None
    ) -> int:
        if size is None:
            return self._store(slot, codec.write_cstr, data)
        return self._store(slot, codec.write_fixed_cstr, data, size)

    def write_data(self, slot: ValueSlot, data: bytes) -> int:
        return self._store(slot, codec.write_data, data)

    def write_rect(
        self, slot: ValueSlot, top: int, left: int, bottom: int, right: int
    ) -> int:
        return self._store(slot, codec.write_rect, (top, left, bottom, right))

    @property
    def written_slots(self) -> Tuple[str, ...]:
        return tuple(self._order)

    def assemble(self) -> EncodedResource:
        if self._assembled:
            raise internal_error(
                "Resource encoder already assembled",
                {"resource_id": self.resource_id},
            )
        self._assembled = True
        unplaced = set(self._values) - {name for name, _ in self._layout}
        if unplaced:
            raise internal_error(
                "Values written outside of the type template",
                {"values": sorted(unplaced)},
            )
        out = bytearray()
        for name, ptype in self._layout:
            data = self._values.get(name)
            out += data if data is not None else codec.default_bytes(ptype)
        return EncodedResource(
            type_code=self.type_code,
            resource_id=self.resource_id,
            name=self.name,
            data=bytes(out),
            slots=tuple(self._order),
        )
