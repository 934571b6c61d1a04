"""
Exif orientation decoding.

Only the first IFD of the Exif block is scanned, which is where cameras store
the Orientation tag (0x0112). Broken or unexpected metadata never fails a
read: the orientation is reported as absent and the image is used as stored.
"""

from __future__ import annotations

import logging
import struct
from enum import IntEnum
from typing import Iterator

from PIL import Image

from thumbnailer.exif.ifd import IFD_ENTRY_SIZE, IfdEntry, read_ifd_entry, unpack_values

LOGGER = logging.getLogger(__name__)

EXIF_MAGIC = b"Exif"
ORIENTATION_TAG = 0x0112

# "Exif" + NUL + pad byte, then the TIFF header.
TIFF_HEADER_START = 6
TIFF_HEADER_SIZE = 8
_BYTE_ORDERS = {b"II": "<", b"MM": ">"}


class Orientation(IntEnum):
    """
    Exif 2.3 orientation values. The name says which visual edge of the
    scene is stored as the first row, then as the first column.
    """

    TOP_LEFT = 1
    TOP_RIGHT = 2
    BOTTOM_RIGHT = 3
    BOTTOM_LEFT = 4
    LEFT_TOP = 5
    RIGHT_TOP = 6
    RIGHT_BOTTOM = 7
    LEFT_BOTTOM = 8

    @classmethod
    def type_of(cls, value: int) -> "Orientation | None":
        try:
            return cls(value)
        except ValueError:
            return None


class MalformedExifError(ValueError):
    """The Exif block does not have the expected structure."""


def orientation_from_exif(block: bytes) -> Orientation | None:
    """
    Decode the orientation from a raw Exif block (starting with b"Exif").

    Returns None when the block has no orientation tag; raises
    MalformedExifError when the block cannot be parsed.
    """
    if block[:4] != EXIF_MAGIC:
        raise MalformedExifError("Exif block does not start with the Exif magic string")

    tiff = block[TIFF_HEADER_START:]
    byte_order = _BYTE_ORDERS.get(bytes(tiff[:2]))
    if byte_order is None:
        raise MalformedExifError(f"Unknown TIFF byte order marker {bytes(tiff[:2])!r}")

    try:
        (entry_count,) = struct.unpack_from(byte_order + "H", tiff, TIFF_HEADER_SIZE)
        for index in range(entry_count):
            entry = read_ifd_entry(tiff, TIFF_HEADER_SIZE + 2 + index * IFD_ENTRY_SIZE, byte_order)
            if entry.tag == ORIENTATION_TAG:
                return Orientation.type_of(_entry_value(entry, tiff))
    except struct.error as exc:
        raise MalformedExifError(f"Truncated Exif block: {exc}") from exc

    return None


def _entry_value(entry: IfdEntry, tiff: bytes) -> int:
    if entry.is_value:
        values = entry.inline_values()
    else:
        # Offsets are relative to the TIFF header and must stay inside the block.
        if entry.type is None:
            raise MalformedExifError(f"Unknown IFD type for tag 0x{entry.tag:04x}")
        start = entry.offset
        end = start + entry.type.size * entry.count
        if end > len(tiff):
            raise MalformedExifError(f"Offset {start} of tag 0x{entry.tag:04x} points outside the block")
        values = unpack_values(entry.type, entry.count, tiff[start:end], entry.byte_order)
    if not values:
        raise MalformedExifError(f"Tag 0x{entry.tag:04x} has no values")
    return values[-1]


def _exif_segments(image: Image.Image) -> Iterator[bytes]:
    """Metadata segments that may hold an Exif block, in file order."""
    for marker, payload in getattr(image, "applist", None) or []:
        if marker == "APP1":
            yield payload
    exif = image.info.get("exif")
    if isinstance(exif, (bytes, bytearray)):
        yield bytes(exif)


def read_orientation(image: Image.Image, frame_index: int = 0) -> Orientation | None:
    """
    Orientation of frame `frame_index` of an opened (not yet converted) image.

    Returns None when the frame carries no Exif block, no orientation tag, or
    a block that cannot be parsed.
    """
    if frame_index != image.tell():
        image.seek(frame_index)

    for segment in _exif_segments(image):
        if segment[:4] != EXIF_MAGIC:
            continue
        try:
            return orientation_from_exif(segment)
        except MalformedExifError as exc:
            LOGGER.debug("Ignoring malformed Exif block: %s", exc)
            return None
    return None
