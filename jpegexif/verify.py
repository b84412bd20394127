"""Verification -- re-read saved files to confirm the metadata survived."""

import logging
from pathlib import Path
from typing import Optional

from jpegexif.document import DirectoryId, ExifDocument, open_jpeg
from jpegexif.errors import ExifError
from jpegexif.models import TagMismatch, VerificationResult
from jpegexif.tiff.tags import (
    GPS_TAG_NAMES,
    INTEROP_TAG_NAMES,
    JPEG_INTERCHANGE_FORMAT_LENGTH_TAG,
    POINTER_TAGS,
    TAG_NAMES,
    tag_name,
)

logger = logging.getLogger(__name__)

_NAMES = {
    DirectoryId.GPS: GPS_TAG_NAMES,
    DirectoryId.INTEROP: INTEROP_TAG_NAMES,
}


def _require_pillow():
    """Import Pillow, raising ImportError with install instructions."""
    try:
        from PIL import Image
        return Image
    except ImportError:
        raise ImportError(
            "Pillow is required for decode checks. "
            "Install with: pip install jpegexif[verify]"
        )


def check_decodes(filepath: Path) -> Optional[str]:
    """Fully decode the image with Pillow. Returns an error message or None."""
    Image = _require_pillow()
    try:
        with Image.open(filepath) as img:
            img.load()
            img.getexif()
    except (OSError, SyntaxError, ValueError) as e:
        return f'Pillow cannot decode {filepath.name}: {e}'
    return None


def _is_recomputed(which: DirectoryId, tag_id: int) -> bool:
    if tag_id in POINTER_TAGS:
        return True
    return which is DirectoryId.IFD1 and tag_id == JPEG_INTERCHANGE_FORMAT_LENGTH_TAG


def compare_documents(expected: ExifDocument, actual: ExifDocument,
                      result: VerificationResult):
    """Record every non-pointer tag of ``expected`` that differs in ``actual``."""
    for which in DirectoryId:
        names = _NAMES.get(which, TAG_NAMES)
        saved = actual.directory(which)
        for tag_id, value in sorted(expected.directory(which).items()):
            if _is_recomputed(which, tag_id):
                continue
            result.tags_checked += 1
            other = saved.get(tag_id)
            if other != value:
                result.mismatches.append(TagMismatch(
                    directory=which.value,
                    tag_id=tag_id,
                    tag_name=tag_name(tag_id, names),
                    expected=value.preview(),
                    actual='<missing>' if other is None else other.preview(),
                ))

    if expected.has_thumbnail and expected.directory(DirectoryId.IFD1):
        result.thumbnail_matches = expected.thumbnail_bytes() == actual.thumbnail_bytes()


def verify_saved(document: ExifDocument, filepath, check_decode: bool = False) -> VerificationResult:
    """Re-parse ``filepath`` and compare it against ``document``.

    ``is_valid`` is False if the file cannot be parsed, any tag differs,
    the thumbnail differs, or (with ``check_decode``) Pillow rejects it.
    """
    filepath = Path(filepath)
    result = VerificationResult(filepath=filepath)
    try:
        saved = open_jpeg(filepath, document.config)
    except ExifError as e:
        result.is_valid = False
        result.error = str(e)
        return result

    compare_documents(document, saved, result)
    if check_decode:
        error = check_decodes(filepath)
        result.decodes = error is None
        if error:
            result.error = error

    result.is_valid = (not result.mismatches
                       and result.thumbnail_matches is not False
                       and result.decodes is not False)
    logger.debug('Verified %s: %d tags, %d mismatches', filepath.name,
                 result.tags_checked, len(result.mismatches))
    return result


def verify_file(filepath, check_decode: bool = False) -> VerificationResult:
    """Check that ``filepath`` has parseable EXIF metadata (and decodes)."""
    filepath = Path(filepath)
    result = VerificationResult(filepath=filepath)
    try:
        document = open_jpeg(filepath)
    except ExifError as e:
        result.is_valid = False
        result.error = str(e)
        return result

    for which in DirectoryId:
        result.tags_checked += len(document.directory(which))
    if check_decode:
        error = check_decodes(filepath)
        result.decodes = error is None
        if error:
            result.is_valid = False
            result.error = error
    return result
