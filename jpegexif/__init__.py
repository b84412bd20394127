"""jpegexif -- read, edit and rewrite EXIF metadata in JPEG files."""

__version__ = "1.0.0"

from jpegexif.config import CodecConfig
from jpegexif.errors import (
    ExifError,
    ExifIOError,
    InvalidByteOrderError,
    NoExifSegmentError,
    NotAJpegError,
    SameFileError,
    SegmentTooLargeError,
    TruncatedDataError,
    UnknownValueTypeError,
)
from jpegexif.models import ExifSegment, TagMismatch, ThumbnailRange, VerificationResult
from jpegexif.tiff.values import Value, ValueKind
from jpegexif.document import DirectoryId, ExifDocument, open_jpeg
from jpegexif.manager import ExifManager
from jpegexif.verify import verify_file, verify_saved

__all__ = [
    "__version__",
    "CodecConfig",
    "ExifError",
    "ExifIOError",
    "InvalidByteOrderError",
    "NoExifSegmentError",
    "NotAJpegError",
    "SameFileError",
    "SegmentTooLargeError",
    "TruncatedDataError",
    "UnknownValueTypeError",
    "ExifSegment",
    "TagMismatch",
    "ThumbnailRange",
    "VerificationResult",
    "Value",
    "ValueKind",
    "DirectoryId",
    "ExifDocument",
    "open_jpeg",
    "ExifManager",
    "verify_file",
    "verify_saved",
]
