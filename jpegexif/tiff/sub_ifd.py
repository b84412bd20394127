"""Resolution of IFD1 and the Exif / GPS / Interoperability sub-IFDs."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Set

from jpegexif.config import CodecConfig
from jpegexif.errors import TruncatedDataError
from jpegexif.models import ThumbnailRange
from jpegexif.tiff.endian import check_bounds
from jpegexif.tiff.parser import Directory, TIFFHeader, read_ifd, read_offset_value
from jpegexif.tiff.tags import (
    EXIF_IFD_POINTER_TAG,
    GPS_IFD_POINTER_TAG,
    INTEROP_IFD_POINTER_TAG,
    JPEG_INTERCHANGE_FORMAT_LENGTH_TAG,
    JPEG_INTERCHANGE_FORMAT_TAG,
)

logger = logging.getLogger(__name__)


@dataclass
class DirectorySet:
    """The five EXIF directories plus the thumbnail location."""
    ifd0: Directory = field(default_factory=dict)
    exif: Directory = field(default_factory=dict)
    gps: Directory = field(default_factory=dict)
    ifd1: Directory = field(default_factory=dict)
    interop: Directory = field(default_factory=dict)
    thumbnail: Optional[ThumbnailRange] = None


class _Walker:
    """Reads directories while refusing to visit the same offset twice."""

    def __init__(self, data: bytes, header: TIFFHeader, config: CodecConfig):
        self.data = data
        self.header = header
        self.config = config
        self.seen: Set[int] = set()

    def read(self, offset: int, what: str):
        if offset in self.seen:
            raise TruncatedDataError(f'{what} offset loops back to an earlier directory',
                                     offset)
        self.seen.add(offset)
        logger.debug('Reading %s at offset %d', what, offset)
        return read_ifd(self.data, self.header, offset, self.config)


def read_thumbnail_range(data: bytes, ifd1: Directory) -> Optional[ThumbnailRange]:
    """Return the IFD1 thumbnail range, or None if IFD1 does not describe one."""
    offset = read_offset_value(ifd1, JPEG_INTERCHANGE_FORMAT_TAG)
    length = read_offset_value(ifd1, JPEG_INTERCHANGE_FORMAT_LENGTH_TAG)
    if offset is None or length is None:
        return None
    check_bounds(data, offset, length)
    return ThumbnailRange(offset, length)


def read_exif_sub_ifd(walker: _Walker, ifd0: Directory) -> Directory:
    """Follow tag 0x8769 (ExifIFDPointer). Empty dict if absent."""
    offset = read_offset_value(ifd0, EXIF_IFD_POINTER_TAG)
    if offset is None:
        return {}
    directory, _ = walker.read(offset, 'Exif IFD')
    return directory


def read_interop_sub_ifd(walker: _Walker, exif: Directory) -> Directory:
    """Follow tag 0xA005 (InteroperabilityIFDPointer). Empty dict if absent."""
    offset = read_offset_value(exif, INTEROP_IFD_POINTER_TAG)
    if offset is None:
        return {}
    directory, _ = walker.read(offset, 'Interoperability IFD')
    return directory


def read_gps_sub_ifd(walker: _Walker, ifd0: Directory) -> Directory:
    """Follow tag 0x8825 (GPSInfoIFDPointer). Empty dict if absent."""
    offset = read_offset_value(ifd0, GPS_IFD_POINTER_TAG)
    if offset is None:
        return {}
    directory, _ = walker.read(offset, 'GPS IFD')
    return directory


def read_all_directories(data: bytes, header: TIFFHeader,
                         config: Optional[CodecConfig] = None) -> DirectorySet:
    """Parse IFD0 and every directory reachable from it.

    Order: IFD0, IFD1 (via IFD0's next field) and its thumbnail range, the
    Exif sub-IFD and its Interoperability sub-IFD, then the GPS sub-IFD.
    Any out-of-range offset aborts the whole parse.
    """
    if config is None:
        config = CodecConfig.default()
    walker = _Walker(data, header, config)
    result = DirectorySet()

    result.ifd0, next_offset = walker.read(header.first_ifd_offset, 'IFD0')
    if next_offset:
        result.ifd1, _ = walker.read(next_offset, 'IFD1')
        result.thumbnail = read_thumbnail_range(data, result.ifd1)

    result.exif = read_exif_sub_ifd(walker, result.ifd0)
    if result.exif:
        result.interop = read_interop_sub_ifd(walker, result.exif)
    result.gps = read_gps_sub_ifd(walker, result.ifd0)
    return result
