"""Endian-aware integer reads and little-endian writes.

Byte order is chosen once per blob from the TIFF byte-order mark and then
passed as a ``struct`` prefix character (``'<'`` or ``'>'``). Writes always
use little-endian regardless of the source order.
"""

import struct
from typing import Dict

from jpegexif.errors import InvalidByteOrderError, TruncatedDataError

BYTE_ORDER_MARKS: Dict[bytes, str] = {
    b'II': '<',  # Intel
    b'MM': '>',  # Motorola
}

OUTPUT_ENDIAN = '<'

# {width_bytes: (unsigned_format_char, signed_format_char)}
INT_FORMATS: Dict[int, tuple] = {
    1: ('B', 'b'),
    2: ('H', 'h'),
    4: ('I', 'i'),
}


def byte_order_from_mark(mark: bytes) -> str:
    """Map a TIFF byte-order mark to a struct prefix."""
    endian = BYTE_ORDER_MARKS.get(bytes(mark[:2]))
    if endian is None:
        raise InvalidByteOrderError(f'Invalid TIFF byte-order mark {bytes(mark[:2])!r}', 0)
    return endian


def _check_width(width: int):
    if width not in INT_FORMATS:
        raise ValueError(f'Integer width must be 1, 2 or 4 bytes, got {width}')


def check_bounds(data: bytes, offset: int, length: int):
    """Raise TruncatedDataError unless data[offset:offset+length] exists."""
    if offset < 0 or length < 0 or offset + length > len(data):
        raise TruncatedDataError(
            f'Need {length} byte(s) at offset {offset}, blob is {len(data)} bytes',
            offset)


def read_uint(data: bytes, offset: int, width: int, endian: str) -> int:
    """Read an unsigned integer of 1, 2 or 4 bytes."""
    _check_width(width)
    check_bounds(data, offset, width)
    return struct.unpack_from(endian + INT_FORMATS[width][0], data, offset)[0]


def read_sint(data: bytes, offset: int, width: int, endian: str) -> int:
    """Read a two's-complement signed integer of 1, 2 or 4 bytes."""
    _check_width(width)
    check_bounds(data, offset, width)
    return struct.unpack_from(endian + INT_FORMATS[width][1], data, offset)[0]


def write_uint(value: int, width: int, endian: str = OUTPUT_ENDIAN) -> bytes:
    """Encode an unsigned integer of 1, 2 or 4 bytes."""
    _check_width(width)
    return struct.pack(endian + INT_FORMATS[width][0], value)


def write_sint(value: int, width: int, endian: str = OUTPUT_ENDIAN) -> bytes:
    """Encode a two's-complement signed integer of 1, 2 or 4 bytes."""
    _check_width(width)
    return struct.pack(endian + INT_FORMATS[width][1], value)
