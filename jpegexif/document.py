"""Editable EXIF document -- parse a JPEG, read and change tags, save a copy.

Typical use::

    doc = open_jpeg('photo.jpg')
    doc.set_ascii_string(DirectoryId.IFD0, ARTIST_TAG, 'Jane Doe')
    doc.save('photo-tagged.jpg')

A document holds the five directories as plain ``{tag_id: Value}`` dicts.
Pointer and thumbnail-location tags are recomputed on every save, so values
set on them by hand are overwritten.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from jpegexif.config import CodecConfig
from jpegexif.errors import ExifIOError, SameFileError
from jpegexif.jpeg import assemble, find_exif_segment, read_exif_blob
from jpegexif.models import ExifSegment, ThumbnailRange
from jpegexif.tiff.parser import Directory, read_header
from jpegexif.tiff.sub_ifd import DirectorySet, read_all_directories
from jpegexif.tiff.values import Rational, Value, ValueKind
from jpegexif.tiff.writer import serialize

logger = logging.getLogger(__name__)


class DirectoryId(Enum):
    IFD0 = 'ifd0'
    EXIF = 'exif'
    GPS = 'gps'
    IFD1 = 'ifd1'
    INTEROP = 'interop'


DirectoryRef = Union[DirectoryId, str]


def _directory_id(which: DirectoryRef) -> DirectoryId:
    if isinstance(which, DirectoryId):
        return which
    return DirectoryId(str(which).lower())


class ExifDocument:
    """Parsed EXIF metadata of one JPEG file."""

    def __init__(self, source_path: Path, segment: ExifSegment, endian: str,
                 directories: DirectorySet, tiff_blob: bytes,
                 config: Optional[CodecConfig] = None):
        self.source_path = Path(source_path)
        self.segment = segment
        self.endian = endian
        self.config = config or CodecConfig.default()
        self._directories = directories
        self._tiff_blob = tiff_blob

    @classmethod
    def open(cls, path, config: Optional[CodecConfig] = None) -> 'ExifDocument':
        """Parse ``path``. Either every directory parses or an error is raised."""
        config = config or CodecConfig.default()
        path = Path(path)
        try:
            with open(path, 'rb') as f:
                segment = find_exif_segment(f, config.search_window)
                blob = read_exif_blob(f, segment)
        except OSError as e:
            raise ExifIOError(f'Cannot read {path}: {e}') from e

        header = read_header(blob)
        directories = read_all_directories(blob, header, config)
        logger.debug('Parsed %s: ifd0=%d exif=%d gps=%d ifd1=%d interop=%d tags',
                     path.name, len(directories.ifd0), len(directories.exif),
                     len(directories.gps), len(directories.ifd1),
                     len(directories.interop))
        return cls(path, segment, header.endian, directories, blob, config)

    # -- directories ------------------------------------------------------

    def directory(self, which: DirectoryRef) -> Directory:
        """The live ``{tag_id: Value}`` dict of one directory."""
        return getattr(self._directories, _directory_id(which).value)

    @property
    def byte_order(self) -> str:
        """Byte-order mark of the source blob, ``'II'`` or ``'MM'``."""
        return 'II' if self.endian == '<' else 'MM'

    @property
    def thumbnail(self) -> Optional[ThumbnailRange]:
        return self._directories.thumbnail

    @property
    def has_thumbnail(self) -> bool:
        thumb = self._directories.thumbnail
        return thumb is not None and thumb.length > 0

    def thumbnail_bytes(self) -> bytes:
        """The embedded thumbnail as stored in the source, or b'' if none."""
        if not self.has_thumbnail:
            return b''
        thumb = self._directories.thumbnail
        return self._tiff_blob[thumb.offset:thumb.offset + thumb.length]

    # -- getters ----------------------------------------------------------
    # Each returns None when the tag is absent or holds a different kind.

    def get_value(self, which: DirectoryRef, tag_id: int) -> Optional[Value]:
        return self.directory(which).get(tag_id)

    def get_numbers(self, which: DirectoryRef, tag_id: int) -> Optional[Tuple[int, ...]]:
        value = self.get_value(which, tag_id)
        if value is None or not value.kind.is_integer:
            return None
        return value.components

    def get_number(self, which: DirectoryRef, tag_id: int) -> Optional[int]:
        """First component of an integer tag."""
        numbers = self.get_numbers(which, tag_id)
        if not numbers:
            return None
        return numbers[0]

    def get_rationals(self, which: DirectoryRef, tag_id: int) -> Optional[Tuple[Rational, ...]]:
        value = self.get_value(which, tag_id)
        if value is None or not value.kind.is_rational:
            return None
        return value.components

    def get_rational(self, which: DirectoryRef, tag_id: int) -> Optional[Rational]:
        pairs = self.get_rationals(which, tag_id)
        if not pairs:
            return None
        return pairs[0]

    def get_bytes(self, which: DirectoryRef, tag_id: int) -> Optional[bytes]:
        """Raw payload of an ASCII or UNDEFINED tag."""
        value = self.get_value(which, tag_id)
        if value is None or not value.kind.is_bytes:
            return None
        return value.components

    def get_ascii_string(self, which: DirectoryRef, tag_id: int) -> Optional[str]:
        """Text of an ASCII tag with trailing NULs removed."""
        value = self.get_value(which, tag_id)
        if value is None or value.kind is not ValueKind.ASCII:
            return None
        return value.components.rstrip(b'\x00').decode('utf-8', errors='replace')

    # -- setters ----------------------------------------------------------

    def set_value(self, which: DirectoryRef, tag_id: int, value: Value):
        self.directory(which)[tag_id] = value

    def set_numbers(self, which: DirectoryRef, tag_id: int, values,
                    kind: ValueKind = ValueKind.USHORT):
        self.set_value(which, tag_id, Value.numbers(values, kind))

    def set_rationals(self, which: DirectoryRef, tag_id: int, pairs,
                      signed: bool = False):
        self.set_value(which, tag_id, Value.rationals(pairs, signed))

    def set_rational(self, which: DirectoryRef, tag_id: int, pair: Rational,
                     signed: bool = False):
        self.set_rationals(which, tag_id, [pair], signed)

    def set_ascii_string(self, which: DirectoryRef, tag_id: int, text: Union[str, bytes]):
        self.set_value(which, tag_id, Value.ascii(text))

    def set_bytes(self, which: DirectoryRef, tag_id: int, raw: bytes,
                  kind: ValueKind = ValueKind.UNDEFINED):
        if not kind.is_bytes:
            raise ValueError(f'{kind.name} is not a byte kind')
        self.set_value(which, tag_id, Value(kind, raw))

    def remove_tag(self, which: DirectoryRef, tag_id: int) -> bool:
        """Delete a tag. Returns False if it was not present."""
        return self.directory(which).pop(tag_id, None) is not None

    # -- output -----------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Serialize the current directories to a TIFF blob.

        The document itself is not modified.
        """
        return serialize(self._directories, self.thumbnail_bytes())

    def save(self, path) -> Path:
        """Write a copy of the source JPEG carrying the current metadata.

        Raises:
            SameFileError: ``path`` is the file this document was parsed from.
            SegmentTooLargeError: the metadata exceeds one APP1 segment.
            ExifIOError: reading the source or writing ``path`` failed.
        """
        output = Path(path)
        if output.resolve() == self.source_path.resolve():
            raise SameFileError(f'Refusing to overwrite the source file {output}')

        blob = self.to_bytes()
        assemble(self.source_path, self.segment, blob, output,
                 self.config.copy_chunk_size)
        logger.info('Saved %s (%d bytes of EXIF data)', output, len(blob))
        return output


def open_jpeg(path, config: Optional[CodecConfig] = None) -> ExifDocument:
    """Parse the EXIF metadata of the JPEG at ``path``."""
    return ExifDocument.open(path, config)
