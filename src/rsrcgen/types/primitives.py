"""Primitive value types and the single width/signedness/string-kind table.

Every encoder, decoder and validation path looks primitive types up in
``KIND_TABLE`` instead of carrying its own case list.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

__all__ = [
    "PrimitiveKind",
    "StringKind",
    "KindInfo",
    "PrimitiveType",
    "KIND_TABLE",
    "INTEGER_KINDS",
    "UNSIGNED_KINDS",
    "PSTR_MAX_LENGTH",
    "RECT_COMPONENTS",
    "parse_primitive_type",
    "int_range",
]

PSTR_MAX_LENGTH = 255
RECT_COMPONENTS = 4


class PrimitiveKind(Enum):
    DBYT = "DBYT"
    DWRD = "DWRD"
    DLNG = "DLNG"
    DQAD = "DQAD"
    HBYT = "HBYT"
    HWRD = "HWRD"
    HLNG = "HLNG"
    HQAD = "HQAD"
    PSTR = "PSTR"
    CSTR = "CSTR"
    CXXX = "Cxxx"
    RECT = "RECT"
    HEXD = "HEXD"
    NONE = "NONE"


class StringKind(Enum):
    PASCAL = "pascal"
    C = "c"
    FIXED = "fixed"
    RAW = "raw"


@dataclass(frozen=True, slots=True)
class KindInfo:
    width: Optional[int]  # None for variable width
    signed: bool = False
    string_kind: Optional[StringKind] = None


KIND_TABLE: Dict[PrimitiveKind, KindInfo] = {
    PrimitiveKind.DBYT: KindInfo(1, True),
    PrimitiveKind.DWRD: KindInfo(2, True),
    PrimitiveKind.DLNG: KindInfo(4, True),
    PrimitiveKind.DQAD: KindInfo(8, True),
    PrimitiveKind.HBYT: KindInfo(1, False),
    PrimitiveKind.HWRD: KindInfo(2, False),
    PrimitiveKind.HLNG: KindInfo(4, False),
    PrimitiveKind.HQAD: KindInfo(8, False),
    PrimitiveKind.PSTR: KindInfo(None, string_kind=StringKind.PASCAL),
    PrimitiveKind.CSTR: KindInfo(None, string_kind=StringKind.C),
    PrimitiveKind.CXXX: KindInfo(None, string_kind=StringKind.FIXED),
    PrimitiveKind.RECT: KindInfo(8, True),
    PrimitiveKind.HEXD: KindInfo(None, string_kind=StringKind.RAW),
    PrimitiveKind.NONE: KindInfo(None),
}

INTEGER_KINDS = frozenset(
    {
        PrimitiveKind.DBYT,
        PrimitiveKind.DWRD,
        PrimitiveKind.DLNG,
        PrimitiveKind.DQAD,
        PrimitiveKind.HBYT,
        PrimitiveKind.HWRD,
        PrimitiveKind.HLNG,
        PrimitiveKind.HQAD,
    }
)
UNSIGNED_KINDS = frozenset(
    k for k in INTEGER_KINDS if not KIND_TABLE[k].signed
)


@dataclass(frozen=True, slots=True)
class PrimitiveType:
    kind: PrimitiveKind
    size: int = 0  # fixed string width, Cxxx only

    @property
    def info(self) -> KindInfo:
        return KIND_TABLE[self.kind]

    @property
    def width(self) -> Optional[int]:
        if self.kind is PrimitiveKind.CXXX:
            return self.size
        return self.info.width

    @property
    def is_integer(self) -> bool:
        return self.kind in INTEGER_KINDS

    @property
    def string_kind(self) -> Optional[StringKind]:
        return self.info.string_kind

    def __str__(self) -> str:
        if self.kind is PrimitiveKind.CXXX:
            return f"C{self.size:03X}"
        return self.kind.value

    @classmethod
    def of(cls, kind: PrimitiveKind) -> "PrimitiveType":
        return cls(kind)

    @classmethod
    def fixed_string(cls, size: int) -> "PrimitiveType":
        return cls(PrimitiveKind.CXXX, size)


_FIXED_RE = re.compile(r"^C([0-9A-F]{3})$", re.IGNORECASE)
_FIXED_DECIMAL_RE = re.compile(r"^Cxxx\((\d+)\)$", re.IGNORECASE)
_NAMES = {k.value.upper(): k for k in PrimitiveKind if k is not PrimitiveKind.CXXX}


def parse_primitive_type(text: str) -> PrimitiveType:
    """Parse a template type name. Unknown names map to ``NONE``.

    Fixed width strings are written as ``C`` plus three hex digits, so
    ``C01F`` is a 31 byte field. ``Cxxx(31)`` is accepted as well.
    """
    name = text.strip()
    m = _FIXED_RE.match(name)
    if m:
        return PrimitiveType.fixed_string(int(m.group(1), 16))
    m = _FIXED_DECIMAL_RE.match(name)
    if m:
        return PrimitiveType.fixed_string(int(m.group(1)))
    return PrimitiveType(_NAMES.get(name.upper(), PrimitiveKind.NONE))


def int_range(kind: PrimitiveKind) -> Tuple[int, int]:
    info = KIND_TABLE[kind]
    if kind not in INTEGER_KINDS and kind is not PrimitiveKind.RECT:
        raise ValueError(f"{kind.value} is not an integer type")
    bits = 16 if kind is PrimitiveKind.RECT else info.width * 8
    if info.signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1
