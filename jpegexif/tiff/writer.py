"""Layout planning and serialization of the five EXIF directories.

Output layout, always little-endian::

    TIFF header | IFD0 | Exif IFD | Interop IFD | GPS IFD | IFD1 | thumbnail

Each IFD block is ``count(2) + entries(12 each) + next(4) + extra data``.
Pointer tags are rewritten from freshly computed offsets on every save.
Sizes depend only on which entries exist, never on pointer values, so the
planner first fixes the entry set (placeholder pointers included), then
computes offsets, then fills the pointers in.
"""

import logging
from typing import Optional

from jpegexif.models import Layout
from jpegexif.tiff.endian import write_uint
from jpegexif.tiff.parser import IFD_ENTRY_LENGTH, TIFF_HEADER_LENGTH, Directory
from jpegexif.tiff.sub_ifd import DirectorySet
from jpegexif.tiff.tags import (
    EXIF_IFD_POINTER_TAG,
    GPS_IFD_POINTER_TAG,
    INTEROP_IFD_POINTER_TAG,
    JPEG_INTERCHANGE_FORMAT_LENGTH_TAG,
    JPEG_INTERCHANGE_FORMAT_TAG,
)
from jpegexif.tiff.values import Value, ValueKind

logger = logging.getLogger(__name__)

# "II", 42, first IFD at offset 8
TIFF_HEADER = b'II\x2a\x00\x08\x00\x00\x00'

# Entry count (2) + next-IFD field (4)
IFD_OVERHEAD = 6


def _offset_value(offset: int) -> Value:
    return Value.numbers([offset], ValueKind.ULONG)


def block_size(directory: Directory) -> int:
    """Bytes an IFD block occupies, extra data included. 0 when empty."""
    if not directory:
        return 0
    return IFD_OVERHEAD + sum(IFD_ENTRY_LENGTH + value.extra_size
                              for value in directory.values())


def _link(parent: Directory, tag_id: int, child: Directory):
    # Placeholder keeps the entry count right; the value is set after layout
    if child:
        parent[tag_id] = _offset_value(0)
    else:
        parent.pop(tag_id, None)


def prepare_directories(directories: DirectorySet,
                        thumbnail_length: int = 0) -> DirectorySet:
    """Copy the directories and settle which pointer entries will be written.

    Pointer tags are added for every non-empty child and removed for empty
    ones. The caller's directories are never modified.
    """
    prepared = DirectorySet(
        ifd0=dict(directories.ifd0),
        exif=dict(directories.exif),
        gps=dict(directories.gps),
        ifd1=dict(directories.ifd1),
        interop=dict(directories.interop),
    )
    # Exif first: the interop pointer can make an otherwise empty Exif IFD
    # non-empty, which in turn decides IFD0's Exif pointer.
    _link(prepared.exif, INTEROP_IFD_POINTER_TAG, prepared.interop)
    _link(prepared.ifd0, EXIF_IFD_POINTER_TAG, prepared.exif)
    _link(prepared.ifd0, GPS_IFD_POINTER_TAG, prepared.gps)

    if prepared.ifd1 and thumbnail_length > 0:
        prepared.ifd1[JPEG_INTERCHANGE_FORMAT_TAG] = _offset_value(0)
        prepared.ifd1[JPEG_INTERCHANGE_FORMAT_LENGTH_TAG] = _offset_value(thumbnail_length)
    else:
        prepared.ifd1.pop(JPEG_INTERCHANGE_FORMAT_TAG, None)
        prepared.ifd1.pop(JPEG_INTERCHANGE_FORMAT_LENGTH_TAG, None)
    return prepared


def plan_layout(prepared: DirectorySet, thumbnail_length: int = 0) -> Layout:
    """Compute block sizes bottom-up and start offsets top-down.

    IFD0 is always emitted (as a bare 6-byte block when it has no entries)
    because the TIFF header must point at a readable directory.
    """
    ifd0_size = block_size(prepared.ifd0) or IFD_OVERHEAD
    exif_size = block_size(prepared.exif)
    interop_size = block_size(prepared.interop)
    gps_size = block_size(prepared.gps)
    ifd1_size = block_size(prepared.ifd1)
    thumb_size = thumbnail_length if ifd1_size else 0

    ifd0_start = TIFF_HEADER_LENGTH
    exif_start = ifd0_start + ifd0_size
    interop_start = exif_start + exif_size
    gps_start = interop_start + interop_size
    ifd1_start = gps_start + gps_size
    thumbnail_start = ifd1_start + ifd1_size

    return Layout(
        ifd0_start=ifd0_start, ifd0_size=ifd0_size,
        exif_start=exif_start, exif_size=exif_size,
        interop_start=interop_start, interop_size=interop_size,
        gps_start=gps_start, gps_size=gps_size,
        ifd1_start=ifd1_start, ifd1_size=ifd1_size,
        thumbnail_start=thumbnail_start, thumbnail_size=thumb_size,
    )


def apply_pointers(prepared: DirectorySet, layout: Layout):
    """Fill the placeholder pointer entries with real offsets (in place)."""
    if EXIF_IFD_POINTER_TAG in prepared.ifd0:
        prepared.ifd0[EXIF_IFD_POINTER_TAG] = _offset_value(layout.exif_start)
    if GPS_IFD_POINTER_TAG in prepared.ifd0:
        prepared.ifd0[GPS_IFD_POINTER_TAG] = _offset_value(layout.gps_start)
    if INTEROP_IFD_POINTER_TAG in prepared.exif:
        prepared.exif[INTEROP_IFD_POINTER_TAG] = _offset_value(layout.interop_start)
    if JPEG_INTERCHANGE_FORMAT_TAG in prepared.ifd1:
        prepared.ifd1[JPEG_INTERCHANGE_FORMAT_TAG] = _offset_value(layout.thumbnail_start)


def write_ifd(directory: Directory, start: int, next_offset: int = 0) -> bytes:
    """Serialize one IFD block that will sit at ``start`` in the blob.

    Entries are written in ascending tag order, followed by the next-IFD
    field and then the out-of-line values in that same order.
    """
    tags = sorted(directory)
    extra_start = start + IFD_OVERHEAD + IFD_ENTRY_LENGTH * len(tags)

    out = bytearray(write_uint(len(tags), 2))
    extra = bytearray()
    for tag_id in tags:
        value = directory[tag_id]
        out += write_uint(tag_id, 2)
        out += write_uint(value.kind.type_id, 2)
        out += write_uint(value.count, 4)
        payload = value.encode()
        if value.is_inline:
            out += payload.ljust(4, b'\x00')
        else:
            out += write_uint(extra_start + len(extra), 4)
            extra += payload
    out += write_uint(next_offset, 4)
    out += extra
    return bytes(out)


def serialize(directories: DirectorySet, thumbnail: Optional[bytes] = None) -> bytes:
    """Build the complete TIFF blob for an APP1 segment."""
    thumbnail = thumbnail or b''
    prepared = prepare_directories(directories, len(thumbnail))
    layout = plan_layout(prepared, len(thumbnail))
    apply_pointers(prepared, layout)

    logger.debug('Layout: ifd0=%d exif=%d interop=%d gps=%d ifd1=%d thumb=%d total=%d',
                 layout.ifd0_start, layout.exif_start, layout.interop_start,
                 layout.gps_start, layout.ifd1_start, layout.thumbnail_start,
                 layout.total_size)

    next_offset = layout.ifd1_start if layout.ifd1_size else 0
    blob = bytearray(TIFF_HEADER)
    blob += write_ifd(prepared.ifd0, layout.ifd0_start, next_offset)
    if layout.exif_size:
        blob += write_ifd(prepared.exif, layout.exif_start)
    if layout.interop_size:
        blob += write_ifd(prepared.interop, layout.interop_start)
    if layout.gps_size:
        blob += write_ifd(prepared.gps, layout.gps_start)
    if layout.ifd1_size:
        blob += write_ifd(prepared.ifd1, layout.ifd1_start)
        blob += thumbnail

    assert len(blob) == layout.total_size, (len(blob), layout.total_size)
    return bytes(blob)
