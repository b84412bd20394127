"""Shared test fixtures -- synthetic EXIF blob and JPEG file generators."""

import io
import struct

import pytest

# type_id -> struct char for integer and rational kinds
_FORMATS = {1: 'B', 3: 'H', 4: 'I', 5: 'I', 6: 'b', 8: 'h', 9: 'i', 10: 'i'}

EXIF_POINTER = 0x8769
GPS_POINTER = 0x8825
INTEROP_POINTER = 0xA005
THUMB_OFFSET = 0x0201
THUMB_LENGTH = 0x0202

# Stand-in for entropy-coded image data after the APP1 segment
FAKE_IMAGE_DATA = (b'\xff\xdb\x00\x43\x00' + bytes(range(64))
                   + b'\xff\xda\x00\x08\x01\x01\x00\x00\x3f\x00'
                   + bytes(range(200)) * 3 + b'\xff\xd9')


def encode_value(type_id, values, endian='<'):
    """Encode entry values. Returns (count, raw_bytes).

    ASCII (2) takes str (NUL appended) or bytes; UNDEFINED (7) takes bytes;
    rationals take a list of (num, den); other kinds take a list of ints.
    Unsupported type ids take raw bytes and are given count 1.
    """
    if type_id == 2:
        raw = values.encode('utf-8') + b'\x00' if isinstance(values, str) else bytes(values)
        return len(raw), raw
    if type_id == 7:
        return len(values), bytes(values)
    if type_id in (5, 10):
        flat = [part for pair in values for part in pair]
        return len(values), struct.pack(f'{endian}{len(flat)}{_FORMATS[type_id]}', *flat)
    if type_id in _FORMATS:
        return len(values), struct.pack(f'{endian}{len(values)}{_FORMATS[type_id]}', *values)
    return 1, bytes(values)


def pack_ifd(entries, start, endian='<', next_offset=0):
    """Pack one IFD placed at ``start``.

    Args:
        entries: List of (tag_id, type_id, values) tuples.
        start: Offset of the IFD within the TIFF blob.
        endian: '<' or '>'.
        next_offset: Value of the next-IFD field.
    """
    entries = sorted(entries, key=lambda e: e[0])
    extra_start = start + 2 + 12 * len(entries) + 4
    out = struct.pack(endian + 'H', len(entries))
    extra = b''
    for tag_id, type_id, values in entries:
        count, raw = encode_value(type_id, values, endian)
        out += struct.pack(endian + 'HHI', tag_id, type_id, count)
        if len(raw) <= 4:
            out += raw.ljust(4, b'\x00')
        else:
            out += struct.pack(endian + 'I', extra_start + len(extra))
            extra += raw
    out += struct.pack(endian + 'I', next_offset)
    return out + extra


def _with_pointer(entries, tag_id, offset):
    return [e for e in entries if e[0] != tag_id] + [(tag_id, 4, [offset])]


def build_tiff_blob(ifd0=(), exif=None, gps=None, interop=None, ifd1=None,
                    thumbnail=b'', endian='<'):
    """Build an EXIF TIFF blob with the given directories.

    Pointer tags are added for every directory passed (``None`` means
    absent). Blocks are placed in the order IFD0, IFD1, GPS, Exif,
    Interop, thumbnail, which differs from what the writer produces.

    Returns:
        bytes: TIFF header plus directories.
    """
    ifd0 = list(ifd0)
    exif = None if exif is None else list(exif)
    ifd1 = None if ifd1 is None else list(ifd1)

    # Placeholders first so that block sizes are final
    if interop is not None:
        exif = exif or []
        exif = _with_pointer(exif, INTEROP_POINTER, 0)
    if exif is not None:
        ifd0 = _with_pointer(ifd0, EXIF_POINTER, 0)
    if gps is not None:
        ifd0 = _with_pointer(ifd0, GPS_POINTER, 0)
    if ifd1 is not None and thumbnail:
        ifd1 = _with_pointer(ifd1, THUMB_OFFSET, 0)
        ifd1 = _with_pointer(ifd1, THUMB_LENGTH, len(thumbnail))

    def size(entries):
        return len(pack_ifd(entries, 0, endian)) if entries is not None else 0

    pos = 8
    ifd0_at, pos = pos, pos + size(ifd0)
    ifd1_at, pos = pos, pos + size(ifd1)
    gps_at, pos = pos, pos + size(gps)
    exif_at, pos = pos, pos + size(exif)
    interop_at, pos = pos, pos + size(interop)
    thumb_at = pos

    if exif is not None:
        ifd0 = _with_pointer(ifd0, EXIF_POINTER, exif_at)
    if gps is not None:
        ifd0 = _with_pointer(ifd0, GPS_POINTER, gps_at)
    if interop is not None:
        exif = _with_pointer(exif, INTEROP_POINTER, interop_at)
    if ifd1 is not None and thumbnail:
        ifd1 = _with_pointer(ifd1, THUMB_OFFSET, thumb_at)

    bo = b'II' if endian == '<' else b'MM'
    blob = bo + struct.pack(endian + 'HI', 42, 8)
    blob += pack_ifd(ifd0, ifd0_at, endian, ifd1_at if ifd1 is not None else 0)
    if ifd1 is not None:
        blob += pack_ifd(ifd1, ifd1_at, endian)
    if gps is not None:
        blob += pack_ifd(gps, gps_at, endian)
    if exif is not None:
        blob += pack_ifd(exif, exif_at, endian)
    if interop is not None:
        blob += pack_ifd(interop, interop_at, endian)
    if ifd1 is not None:
        blob += thumbnail
    return blob


def app1_segment(blob):
    """APP1 marker, size, Exif header and blob."""
    return b'\xff\xe1' + struct.pack('>H', len(blob) + 8) + b'Exif\x00\x00' + blob


def build_jpeg(blob, before=b'', after=FAKE_IMAGE_DATA):
    """SOI, optional segments, APP1/Exif carrying ``blob``, then image data."""
    return b'\xff\xd8' + before + app1_segment(blob) + after


# Thumbnail bytes are opaque to the codec; a short fake JPEG is enough
THUMBNAIL = b'\xff\xd8' + bytes(range(120)) + b'\xff\xd9'

SAMPLE_IFD0 = [
    (0x010F, 2, 'Canon'),
    (0x0110, 2, 'Canon EOS 5D Mark IV'),
    (0x0112, 3, [1]),
    (0x011A, 5, [(72, 1)]),
    (0x011B, 5, [(72, 1)]),
    (0x0128, 3, [2]),
]
SAMPLE_EXIF = [
    (0x829A, 5, [(1, 250)]),
    (0x8827, 3, [400]),
    (0x9000, 7, b'0230'),
    (0x9204, 10, [(-1, 3)]),
    (0x9286, 7, b'ASCII\x00\x00\x00hello'),
]
SAMPLE_GPS = [
    (0x00, 1, [2, 2, 0, 0]),
    (0x01, 2, 'N'),
    (0x02, 5, [(10, 1), (20, 1), (30000, 1000)]),
]
SAMPLE_INTEROP = [
    (0x0001, 2, 'R98'),
    (0x0002, 7, b'0100'),
]
SAMPLE_IFD1 = [
    (0x0103, 3, [6]),
]


def build_sample_blob(endian='<'):
    """Blob with all five directories and a thumbnail."""
    return build_tiff_blob(
        ifd0=SAMPLE_IFD0, exif=SAMPLE_EXIF, gps=SAMPLE_GPS,
        interop=SAMPLE_INTEROP, ifd1=SAMPLE_IFD1, thumbnail=THUMBNAIL,
        endian=endian,
    )


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_jpeg(tmp_path):
    """Little-endian JPEG with all five directories and a thumbnail."""
    filepath = tmp_path / 'sample.jpg'
    filepath.write_bytes(build_jpeg(build_sample_blob('<')))
    return filepath


@pytest.fixture
def tmp_jpeg_mm(tmp_path):
    """Big-endian variant of ``tmp_jpeg``."""
    filepath = tmp_path / 'sample_mm.jpg'
    filepath.write_bytes(build_jpeg(build_sample_blob('>')))
    return filepath


@pytest.fixture
def tmp_jpeg_minimal(tmp_path):
    """JPEG whose EXIF data is a single IFD0 tag."""
    filepath = tmp_path / 'minimal.jpg'
    filepath.write_bytes(build_jpeg(build_tiff_blob(ifd0=[(0x0112, 3, [1])])))
    return filepath


@pytest.fixture
def tmp_jpeg_jfif(tmp_path):
    """JPEG with an APP0/JFIF segment before the APP1 segment."""
    jfif = b'\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
    filepath = tmp_path / 'jfif.jpg'
    filepath.write_bytes(build_jpeg(build_sample_blob('<'), before=jfif))
    return filepath


@pytest.fixture
def tmp_real_jpeg(tmp_path):
    """A Pillow-encoded JPEG with a sample APP1 segment inserted after SOI."""
    Image = pytest.importorskip('PIL.Image')
    buf = io.BytesIO()
    Image.new('RGB', (32, 24), (200, 40, 40)).save(buf, 'JPEG', quality=90)
    encoded = buf.getvalue()
    assert encoded[:2] == b'\xff\xd8'

    filepath = tmp_path / 'real.jpg'
    filepath.write_bytes(b'\xff\xd8' + app1_segment(build_sample_blob('<')) + encoded[2:])
    return filepath
