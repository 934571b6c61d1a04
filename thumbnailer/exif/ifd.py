"""
TIFF Image File Directory (IFD) entries as found in Exif blocks.

Each entry is 12 bytes: tag (u16), type (u16), count (u32) and a 4-byte field
that holds the value itself when it fits, or an offset to it otherwise.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

IFD_ENTRY_SIZE = 12


class IfdType(Enum):
    """Field types as (type code, size in bytes of one value)."""

    BYTE = (1, 1)
    ASCII = (2, 1)
    SHORT = (3, 2)
    LONG = (4, 4)
    RATIONAL = (5, 8)
    UNDEFINED = (7, 1)
    SLONG = (9, 4)
    SRATIONAL = (10, 8)

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def size(self) -> int:
        return self.value[1]

    @classmethod
    def type_of(cls, code: int) -> "IfdType | None":
        for ifd_type in cls:
            if ifd_type.code == code:
                return ifd_type
        return None


_ONE_BYTE_TYPES = (IfdType.BYTE, IfdType.ASCII, IfdType.UNDEFINED)


@dataclass(frozen=True)
class IfdEntry:
    tag: int
    type: IfdType | None
    count: int
    raw_value: bytes
    byte_order: str = "<"

    @property
    def is_value(self) -> bool:
        """True when the 4-byte field holds the value rather than an offset."""
        if self.type is None:
            return False
        return self.type.size * self.count <= 4

    @property
    def is_offset(self) -> bool:
        return not self.is_value

    @property
    def offset(self) -> int:
        return struct.unpack(self.byte_order + "I", self.raw_value)[0]

    def inline_values(self) -> Tuple[int, ...]:
        """Decode the values packed in the 4-byte field."""
        if not self.is_value:
            raise ValueError(f"IFD entry 0x{self.tag:04x} stores an offset, not a value")
        return unpack_values(self.type, self.count, self.raw_value, self.byte_order)

    def __repr__(self) -> str:
        type_name = self.type.name if self.type else "UNKNOWN"
        return f"IfdEntry(tag=0x{self.tag:04x}, type={type_name}, count={self.count}, raw={self.raw_value.hex()})"


def unpack_values(ifd_type: IfdType | None, count: int, data: bytes, byte_order: str) -> Tuple[int, ...]:
    """
    Read `count` values of `ifd_type` from the start of `data`.

    SHORT reads u16 values and the one-byte types read u8 values; any other
    type is read as a single u32.
    """
    if ifd_type is IfdType.SHORT:
        return struct.unpack_from(f"{byte_order}{count}H", data)
    if ifd_type in _ONE_BYTE_TYPES:
        return struct.unpack_from(f"{byte_order}{count}B", data)
    return struct.unpack_from(byte_order + "I", data)


def read_ifd_entry(data: bytes, offset: int, byte_order: str) -> IfdEntry:
    """Parse the 12-byte entry at `offset`; raises struct.error when truncated."""
    tag, type_code, count = struct.unpack_from(byte_order + "HHI", data, offset)
    raw_value = bytes(data[offset + 8 : offset + IFD_ENTRY_SIZE])
    if len(raw_value) != 4:
        raise struct.error(f"IFD entry at offset {offset} is truncated")
    return IfdEntry(
        tag=tag,
        type=IfdType.type_of(type_code),
        count=count,
        raw_value=raw_value,
        byte_order=byte_order,
    )
