"""JPEG envelope handling -- find the APP1/EXIF segment and splice a new one in.

Layout of the part of a JPEG this module cares about::

    FF D8                 SOI
    ...                   (optional segments before APP1, e.g. APP0/JFIF)
    FF E1 SS SS           APP1 marker + big-endian size (includes itself)
    45 78 69 66 00 00     "Exif\\0\\0"
    <TIFF blob>           size - 8 bytes
    ...                   everything else, copied verbatim
"""

import logging
import os
import struct
from pathlib import Path
from typing import BinaryIO, Optional

from jpegexif.errors import (
    ExifIOError,
    NoExifSegmentError,
    NotAJpegError,
    SegmentTooLargeError,
    TruncatedDataError,
)
from jpegexif.models import APP1_HEADER_LENGTH, ExifSegment

logger = logging.getLogger(__name__)

SOI = b'\xff\xd8'
APP1_MARKER = b'\xff\xe1'
EXIF_HEADER = b'Exif\x00\x00'

# Size field covers itself (2) and the Exif header (6) besides the blob
APP1_SIZE_OVERHEAD = 2 + len(EXIF_HEADER)
MAX_TIFF_BLOB = 0xFFFF - APP1_SIZE_OVERHEAD

DEFAULT_SEARCH_WINDOW = 100
DEFAULT_COPY_CHUNK = 10240


def _match_in_window(window: bytes) -> Optional[int]:
    """Index of the first complete marker + size + Exif header, or None."""
    pos = window.find(APP1_MARKER)
    while pos != -1 and pos + APP1_HEADER_LENGTH <= len(window):
        if window[pos + 4:pos + APP1_HEADER_LENGTH] == EXIF_HEADER:
            return pos
        pos = window.find(APP1_MARKER, pos + 1)
    return None


def find_exif_segment(f: BinaryIO, window_size: int = DEFAULT_SEARCH_WINDOW) -> ExifSegment:
    """Locate the APP1/EXIF segment in a seekable JPEG stream.

    The stream is scanned in windows of ``window_size`` bytes. Consecutive
    windows overlap by the header length, so a marker split across a
    window boundary is found at its start in the next window.

    Raises:
        NotAJpegError: the stream does not start with FF D8.
        NoExifSegmentError: no APP1 segment with an Exif header exists.
    """
    if window_size <= APP1_HEADER_LENGTH:
        raise ValueError(f'window_size must exceed {APP1_HEADER_LENGTH}')

    f.seek(0)
    if f.read(2) != SOI:
        raise NotAJpegError('Missing JPEG start-of-image marker', 0)

    window_start = 0
    while True:
        f.seek(window_start)
        window = f.read(window_size)
        if len(window) < APP1_HEADER_LENGTH:
            break

        pos = _match_in_window(window)
        if pos is not None:
            marker_offset = window_start + pos
            segment_size = struct.unpack('>H', window[pos + 2:pos + 4])[0]
            logger.debug('APP1/Exif marker at %d, declared size %d',
                         marker_offset, segment_size)
            return ExifSegment(marker_offset, segment_size)

        if len(window) < window_size:
            break  # end of stream
        window_start += len(window) - APP1_HEADER_LENGTH

    raise NoExifSegmentError('No APP1 segment with an Exif header found')


def read_exif_blob(f: BinaryIO, segment: ExifSegment) -> bytes:
    """Read the TIFF blob that follows the Exif header."""
    if segment.tiff_length < 0:
        raise TruncatedDataError(f'APP1 size {segment.segment_size} is smaller than '
                                 f'its own header', segment.marker_offset + 2)
    f.seek(segment.tiff_offset)
    blob = f.read(segment.tiff_length)
    if len(blob) < segment.tiff_length:
        raise TruncatedDataError(f'APP1 segment declares {segment.tiff_length} bytes '
                                 f'of EXIF data, file holds {len(blob)}',
                                 segment.tiff_offset)
    return blob


def build_app1_segment(blob: bytes) -> bytes:
    """Marker, big-endian size, Exif header and blob for a new APP1 segment."""
    if len(blob) > MAX_TIFF_BLOB:
        raise SegmentTooLargeError(f'EXIF data is {len(blob)} bytes, an APP1 segment '
                                   f'holds at most {MAX_TIFF_BLOB}')
    return APP1_MARKER + struct.pack('>H', len(blob) + APP1_SIZE_OVERHEAD) + EXIF_HEADER + blob


def _discard(path: Path):
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def assemble(source: Path, segment: ExifSegment, blob: bytes, output: Path,
             chunk_size: int = DEFAULT_COPY_CHUNK) -> int:
    """Write ``output`` as ``source`` with its EXIF segment replaced by ``blob``.

    Bytes before the original APP1 marker (SOI and any earlier segments) and
    everything after the original segment are copied verbatim. The file is
    written under a temporary name and renamed into place only once
    complete, so a failure never leaves a partial ``output``.

    Returns:
        Number of bytes written.
    """
    source = Path(source)
    output = Path(output)
    segment_bytes = build_app1_segment(blob)
    tmp_path = output.with_name(output.name + '.part')

    try:
        written = 0
        with open(source, 'rb') as src, open(tmp_path, 'wb') as out:
            src_size = os.fstat(src.fileno()).st_size
            if src_size < segment.end_offset:
                raise TruncatedDataError(f'{source} is {src_size} bytes, shorter than '
                                         f'its EXIF segment end {segment.end_offset}')

            head = src.read(segment.marker_offset)
            out.write(head)
            out.write(segment_bytes)
            written = len(head) + len(segment_bytes)

            src.seek(segment.end_offset)
            while True:
                chunk = src.read(chunk_size)
                if not chunk:
                    break
                out.write(chunk)
                written += len(chunk)
        os.replace(tmp_path, output)
    except OSError as e:
        _discard(tmp_path)
        raise ExifIOError(f'Cannot write {output}: {e}') from e
    except Exception:
        _discard(tmp_path)
        raise

    logger.debug('Wrote %s: %d bytes (APP1 %d bytes)', output, written, len(segment_bytes))
    return written
