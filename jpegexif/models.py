"""Data models shared by the locator, layout planner and verifier."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# Bytes from the APP1 marker to the first TIFF byte:
# marker(2) + size field(2) + "Exif\0\0"(6)
APP1_HEADER_LENGTH = 10


@dataclass(frozen=True)
class ExifSegment:
    """Where the APP1/EXIF segment sits in the source file."""
    marker_offset: int
    segment_size: int  # big-endian size field, includes its own 2 bytes

    @property
    def tiff_offset(self) -> int:
        """Absolute file offset of the TIFF header."""
        return self.marker_offset + APP1_HEADER_LENGTH

    @property
    def tiff_length(self) -> int:
        """Length of the TIFF blob (size field minus itself and Exif header)."""
        return self.segment_size - 8

    @property
    def end_offset(self) -> int:
        """First file offset after the segment."""
        return self.tiff_offset + self.tiff_length


@dataclass(frozen=True)
class ThumbnailRange:
    """Thumbnail location inside the original TIFF blob."""
    offset: int
    length: int


@dataclass(frozen=True)
class Layout:
    """Byte offsets of every block in a serialized TIFF blob.

    A start offset is only meaningful when the matching size is non-zero.
    """
    ifd0_start: int
    ifd0_size: int
    exif_start: int
    exif_size: int
    interop_start: int
    interop_size: int
    gps_start: int
    gps_size: int
    ifd1_start: int
    ifd1_size: int
    thumbnail_start: int
    thumbnail_size: int

    @property
    def total_size(self) -> int:
        return self.thumbnail_start + self.thumbnail_size


@dataclass
class TagMismatch:
    """A tag whose value differs between a document and its saved file."""
    directory: str
    tag_id: int
    tag_name: str
    expected: str
    actual: str


@dataclass
class VerificationResult:
    """Result of re-reading a saved file."""
    filepath: Path
    is_valid: bool = True
    tags_checked: int = 0
    mismatches: List[TagMismatch] = field(default_factory=list)
    thumbnail_matches: Optional[bool] = None
    decodes: Optional[bool] = None  # None when no decode check was requested
    error: Optional[str] = None
