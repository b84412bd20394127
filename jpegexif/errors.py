"""Exception hierarchy for the EXIF codec.

Every failure raised by parsing or saving derives from :class:`ExifError`,
so callers can catch one type and still tell the cases apart.
"""

from typing import Optional


class ExifError(Exception):
    """Base class for all codec failures."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f'{self.message} (0x{self.position:08x})'


class NotAJpegError(ExifError):
    """The stream does not start with the JPEG SOI marker."""


class NoExifSegmentError(ExifError):
    """No APP1 segment carrying an ``Exif\\0\\0`` header was found."""


class TruncatedDataError(ExifError):
    """An offset or length points past the end of the available data."""


class InvalidByteOrderError(ExifError):
    """The TIFF header byte-order mark is neither ``II`` nor ``MM``."""


class UnknownValueTypeError(ExifError):
    """A directory entry uses a type id outside the ten EXIF value kinds."""

    def __init__(self, tag: int, type_id: int, position: Optional[int] = None):
        super().__init__(f'Tag 0x{tag:04x} has unsupported type id {type_id}',
                         position)
        self.tag = tag
        self.type_id = type_id


class SegmentTooLargeError(ExifError):
    """The serialized metadata does not fit in a single APP1 segment."""


class SameFileError(ExifError):
    """Saving would overwrite the source file the document was parsed from."""


class ExifIOError(ExifError, OSError):
    """A filesystem operation failed while reading or writing a JPEG."""
