"""TIFF header and IFD parsing over an in-memory EXIF blob.

All offsets are relative to the start of the TIFF header, which is how EXIF
stores them inside the APP1 segment.
"""

import logging
from typing import Dict, List, Optional, Tuple

from jpegexif.config import CodecConfig
from jpegexif.errors import TruncatedDataError, UnknownValueTypeError
from jpegexif.tiff.endian import byte_order_from_mark, check_bounds, read_uint
from jpegexif.tiff.values import INLINE_LIMIT, Value, ValueKind

logger = logging.getLogger(__name__)

TIFF_MAGIC = 42
TIFF_HEADER_LENGTH = 8
IFD_ENTRY_LENGTH = 12

# tag id -> value; one per image file directory
Directory = Dict[int, Value]


class IFDEntry:
    """A single raw 12-byte IFD entry, before value decoding."""
    __slots__ = ('tag_id', 'type_id', 'count', 'value_offset', 'entry_offset')

    def __init__(self, tag_id: int, type_id: int, count: int,
                 value_offset: int, entry_offset: int):
        self.tag_id = tag_id
        self.type_id = type_id
        self.count = count
        self.value_offset = value_offset
        self.entry_offset = entry_offset

    @property
    def kind(self) -> Optional[ValueKind]:
        return ValueKind.from_type_id(self.type_id)

    @property
    def total_size(self) -> Optional[int]:
        kind = self.kind
        return None if kind is None else kind.width * self.count


class TIFFHeader:
    """Parsed 8-byte TIFF header."""
    __slots__ = ('endian', 'first_ifd_offset')

    def __init__(self, endian: str, first_ifd_offset: int):
        self.endian = endian
        self.first_ifd_offset = first_ifd_offset


def read_header(data: bytes) -> TIFFHeader:
    """Read and validate the TIFF header at the start of ``data``."""
    check_bounds(data, 0, TIFF_HEADER_LENGTH)
    endian = byte_order_from_mark(data[:2])
    magic = read_uint(data, 2, 2, endian)
    if magic != TIFF_MAGIC:
        raise TruncatedDataError(f'Bad TIFF magic {magic}, expected {TIFF_MAGIC}', 2)
    return TIFFHeader(endian, read_uint(data, 4, 4, endian))


def read_ifd_entries(data: bytes, header: TIFFHeader, ifd_offset: int,
                     max_entries: int = 1000) -> Tuple[List[IFDEntry], int]:
    """Read the raw entries of one IFD. Returns (entries, next_ifd_offset).

    Entries with an unknown type id are returned with ``value_offset`` set to
    the inline slot, since their size cannot be computed.
    """
    endian = header.endian
    num_entries = read_uint(data, ifd_offset, 2, endian)

    # More entries than any real directory has means the offset landed in
    # unrelated data.
    if num_entries > max_entries:
        raise TruncatedDataError(
            f'IFD claims {num_entries} entries (limit {max_entries})', ifd_offset)

    end = ifd_offset + 2 + num_entries * IFD_ENTRY_LENGTH
    check_bounds(data, ifd_offset, end + 4 - ifd_offset)

    entries = []
    for i in range(num_entries):
        entry_offset = ifd_offset + 2 + i * IFD_ENTRY_LENGTH
        tag_id = read_uint(data, entry_offset, 2, endian)
        type_id = read_uint(data, entry_offset + 2, 2, endian)
        count = read_uint(data, entry_offset + 4, 4, endian)

        kind = ValueKind.from_type_id(type_id)
        value_offset = entry_offset + 8
        if kind is not None and kind.width * count > INLINE_LIMIT:
            value_offset = read_uint(data, entry_offset + 8, 4, endian)

        entries.append(IFDEntry(tag_id, type_id, count, value_offset, entry_offset))

    next_offset = read_uint(data, end, 4, endian)
    return entries, next_offset


def read_ifd(data: bytes, header: TIFFHeader, ifd_offset: int,
             config: Optional[CodecConfig] = None) -> Tuple[Directory, int]:
    """Decode one IFD. Returns (directory, next_ifd_offset).

    Raises:
        TruncatedDataError: the directory or one of its values runs past
            the end of ``data``.
        UnknownValueTypeError: an entry has an unsupported type id and the
            config asks for errors instead of dropping.
    """
    if config is None:
        config = CodecConfig.default()

    entries, next_offset = read_ifd_entries(data, header, ifd_offset,
                                            config.max_ifd_entries)
    directory: Directory = {}
    for entry in entries:
        kind = entry.kind
        if kind is None:
            if config.unknown_types == 'error':
                raise UnknownValueTypeError(entry.tag_id, entry.type_id,
                                            entry.entry_offset)
            logger.warning('Dropping tag 0x%04x: unsupported type id %d at offset %d',
                           entry.tag_id, entry.type_id, entry.entry_offset)
            continue
        directory[entry.tag_id] = Value.decode(kind, data, entry.value_offset,
                                               entry.count, header.endian)

    logger.debug('IFD at %d: %d entries, next=%d', ifd_offset, len(directory), next_offset)
    return directory, next_offset


def read_offset_value(directory: Directory, tag_id: int) -> Optional[int]:
    """Return the first component of an integer tag (pointer or length).

    Returns None when the tag is absent. A present tag that is not an
    integer kind cannot address anything, so it raises TruncatedDataError.
    """
    value = directory.get(tag_id)
    if value is None:
        return None
    if not value.kind.is_integer or value.count == 0:
        raise TruncatedDataError(
            f'Tag 0x{tag_id:04x} should hold an offset but is {value.kind.name}'
            f' with {value.count} component(s)')
    return value.components[0]
