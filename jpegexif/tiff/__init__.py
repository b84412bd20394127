"""TIFF/IFD codec for EXIF blobs.

Re-exports the public names so callers can use ``from jpegexif.tiff import X``.
"""

# --- endian.py: byte-order detection and integer codec ---
from jpegexif.tiff.endian import (  # noqa: F401
    BYTE_ORDER_MARKS,
    OUTPUT_ENDIAN,
    byte_order_from_mark,
    read_sint,
    read_uint,
    write_sint,
    write_uint,
)

# --- values.py: the ten value kinds ---
from jpegexif.tiff.values import (  # noqa: F401
    INLINE_LIMIT,
    Value,
    ValueKind,
    rational_to_float,
)

# --- parser.py: header and single-IFD decoding ---
from jpegexif.tiff.parser import (  # noqa: F401
    Directory,
    IFDEntry,
    TIFFHeader,
    read_header,
    read_ifd,
    read_ifd_entries,
    read_offset_value,
)

# --- sub_ifd.py: IFD1 / Exif / GPS / Interop resolution ---
from jpegexif.tiff.sub_ifd import (  # noqa: F401
    DirectorySet,
    read_all_directories,
    read_thumbnail_range,
)

# --- writer.py: layout planning and serialization ---
from jpegexif.tiff.writer import (  # noqa: F401
    TIFF_HEADER,
    apply_pointers,
    block_size,
    plan_layout,
    prepare_directories,
    serialize,
    write_ifd,
)

# --- tags.py: tag ids and names ---
from jpegexif.tiff.tags import (  # noqa: F401
    EXIF_IFD_POINTER_TAG,
    GPS_IFD_POINTER_TAG,
    GPS_TAG_NAMES,
    INTEROP_IFD_POINTER_TAG,
    INTEROP_TAG_NAMES,
    JPEG_INTERCHANGE_FORMAT_LENGTH_TAG,
    JPEG_INTERCHANGE_FORMAT_TAG,
    POINTER_TAGS,
    TAG_NAMES,
    tag_name,
)
