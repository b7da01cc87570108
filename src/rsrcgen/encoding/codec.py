"""Pure primitive packing functions.

All writers append big-endian data to a ``bytearray`` and return the number
of bytes written. String length limits are the caller's responsibility; the
codec only packs what it is given. Readers mirror the writers and are used
by the inspector.
"""

from __future__ import annotations

import struct
from typing import Sequence, Tuple

from ..types.primitives import (
    KIND_TABLE,
    PrimitiveKind,
    PrimitiveType,
    StringKind,
)

__all__ = [
    "write_signed",
    "write_unsigned",
    "write_integer",
    "write_pstr",
    "write_cstr",
    "write_fixed_cstr",
    "write_data",
    "write_rect",
    "write_primitive",
    "read_integer",
    "read_primitive",
    "default_bytes",
]

_SIGNED_FMT = {1: ">b", 2: ">h", 4: ">i", 8: ">q"}
_UNSIGNED_FMT = {1: ">B", 2: ">H", 4: ">I", 8: ">Q"}
_RECT_FMT = ">4h"


def write_signed(buf: bytearray, width: int, value: int) -> int:
    buf += struct.pack(_SIGNED_FMT[width], value)
    return width


def write_unsigned(buf: bytearray, width: int, value: int) -> int:
    buf += struct.pack(_UNSIGNED_FMT[width], value)
    return width


def write_integer(buf: bytearray, kind: PrimitiveKind, value: int) -> int:
    info = KIND_TABLE[kind]
    if info.signed:
        return write_signed(buf, info.width, value)
    return write_unsigned(buf, info.width, value)


def write_pstr(buf: bytearray, data: bytes) -> int:
    buf.append(len(data))
    buf += data
    return 1 + len(data)


def write_cstr(buf: bytearray, data: bytes) -> int:
    buf += data
    buf.append(0)
    return len(data) + 1


def write_fixed_cstr(buf: bytearray, data: bytes, size: int) -> int:
    buf += data
    buf += b"\x00" * (size - len(data))
    return size


def write_data(buf: bytearray, data: bytes) -> int:
    buf += data
    return len(data)


def write_rect(buf: bytearray, values: Sequence[int]) -> int:
    buf += struct.pack(_RECT_FMT, *values)
    return 8


def write_primitive(buf: bytearray, ptype: PrimitiveType, value) -> int:
    """Dispatch on the kind table: ints, bytes or a 4-sequence for RECT."""
    if ptype.is_integer:
        return write_integer(buf, ptype.kind, value)
    if ptype.kind is PrimitiveKind.RECT:
        return write_rect(buf, value)
    sk = ptype.string_kind
    if sk is StringKind.PASCAL:
        return write_pstr(buf, value)
    if sk is StringKind.C:
        return write_cstr(buf, value)
    if sk is StringKind.FIXED:
        return write_fixed_cstr(buf, value, ptype.size)
    if sk is StringKind.RAW:
        return write_data(buf, value)
    raise ValueError(f"Cannot encode value of type {ptype}")


def default_bytes(ptype: PrimitiveType) -> bytes:
    """Encoding of an entry no field wrote: zeros, empty strings."""
    buf = bytearray()
    if ptype.is_integer:
        write_integer(buf, ptype.kind, 0)
    elif ptype.kind is PrimitiveKind.RECT:
        write_rect(buf, (0, 0, 0, 0))
    elif ptype.kind is not PrimitiveKind.NONE:
        write_primitive(buf, ptype, b"")
    return bytes(buf)


def read_integer(data: bytes, offset: int, kind: PrimitiveKind) -> int:
    info = KIND_TABLE[kind]
    fmt = (_SIGNED_FMT if info.signed else _UNSIGNED_FMT)[info.width]
    return struct.unpack_from(fmt, data, offset)[0]


def read_primitive(
    data: bytes, offset: int, ptype: PrimitiveType
) -> Tuple[object, int]:
    """Decode one value at ``offset``; returns ``(value, bytes_consumed)``.

    ``HEXD`` consumes the remainder of ``data``.
    """
    if ptype.is_integer:
        return read_integer(data, offset, ptype.kind), ptype.width
    kind = ptype.kind
    if kind is PrimitiveKind.RECT:
        return tuple(struct.unpack_from(_RECT_FMT, data, offset)), 8
    sk = ptype.string_kind
    if sk is StringKind.PASCAL:
        length = data[offset]
        end = offset + 1 + length
        if end > len(data):
            raise ValueError(f"Pascal string overruns data at {offset}")
        return bytes(data[offset + 1 : end]), 1 + length
    if sk is StringKind.C:
        end = data.find(b"\x00", offset)
        if end < 0:
            raise ValueError(f"Unterminated C string at {offset}")
        return bytes(data[offset:end]), end - offset + 1
    if sk is StringKind.FIXED:
        raw = bytes(data[offset : offset + ptype.size])
        if len(raw) != ptype.size:
            raise ValueError(f"Fixed string overruns data at {offset}")
        return raw.split(b"\x00", 1)[0], ptype.size
    if sk is StringKind.RAW:
        return bytes(data[offset:]), len(data) - offset
    raise ValueError(f"Cannot decode value of type {ptype}")
