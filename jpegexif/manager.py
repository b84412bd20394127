"""Convenience accessors for common EXIF fields on top of ExifDocument.

Covers the dual copyright notice, free-text IFD0 tags, the user comment and
maker note, GPS position and image direction.
"""

import math
from typing import Optional, Tuple

from jpegexif.document import DirectoryId, ExifDocument
from jpegexif.tiff.tags import (
    ARTIST_TAG,
    COPYRIGHT_TAG,
    GPS_ALTITUDE_REF_TAG,
    GPS_ALTITUDE_TAG,
    GPS_IMG_DIRECTION_REF_TAG,
    GPS_IMG_DIRECTION_TAG,
    GPS_LATITUDE_REF_TAG,
    GPS_LATITUDE_TAG,
    GPS_LONGITUDE_REF_TAG,
    GPS_LONGITUDE_TAG,
    GPS_VERSION_ID_TAG,
    IMAGE_DESCRIPTION_TAG,
    MAKER_NOTE_TAG,
    SOFTWARE_TAG,
    USER_COMMENT_TAG,
)
from jpegexif.tiff.values import Rational, Value, ValueKind, rational_to_float

GPS_VERSION = (2, 2, 0, 0)
MAGNETIC_NORTH = 'M'

# 8-byte character code that prefixes a UserComment
_ASCII_CODE = b'ASCII\x00\x00\x00'
_UNICODE_CODE = b'UNICODE\x00'
_UNDEFINED_CODE = b'\x00' * 8

DMS = Tuple[Rational, Rational, Rational]


def to_dms(value: float) -> DMS:
    """Split ``|value|`` degrees into degree/minute/second rationals.

    Seconds keep millisecond precision (denominator 1000). Rounding is done
    on the total so that e.g. 73.6 gives 73 deg 36' 0.000" rather than
    35' 59.999".
    """
    total_ms = int(round(abs(value) * 3600000))
    degrees, rest = divmod(total_ms, 3600000)
    minutes, millis = divmod(rest, 60000)
    return (degrees, 1), (minutes, 1), (millis, 1000)


def from_dms(dms) -> Optional[float]:
    """Inverse of :func:`to_dms`. None for malformed or zero-denominator data."""
    if dms is None or len(dms) != 3:
        return None
    parts = [rational_to_float(pair) for pair in dms]
    if any(p is None for p in parts):
        return None
    degrees, minutes, seconds = parts
    return degrees + minutes / 60 + seconds / 3600


class ExifManager:
    """Field-level helpers over an :class:`ExifDocument`.

    All writes go through the document's typed setters; nothing is saved
    until ``document.save()`` is called.
    """

    def __init__(self, document: ExifDocument):
        self.document = document

    # -- copyright --------------------------------------------------------

    def get_copyright(self) -> Tuple[str, str]:
        """Return (photographer, editor). Empty strings when absent.

        The tag holds ``photographer NUL editor NUL``; the editor part is
        optional.
        """
        raw = self.document.get_bytes(DirectoryId.IFD0, COPYRIGHT_TAG)
        if not raw:
            return '', ''
        parts = raw.split(b'\x00')
        photographer = parts[0].decode('utf-8', errors='replace').strip()
        editor = parts[1].decode('utf-8', errors='replace').strip() if len(parts) > 1 else ''
        return photographer, editor

    def set_copyright(self, photographer: Optional[str], editor: Optional[str] = None):
        """Write the dual copyright notice.

        An empty photographer is stored as a single space, which EXIF uses
        to mean "editor copyright only".
        """
        photographer = (photographer or '').strip() or ' '
        editor = (editor or '').strip()
        raw = photographer.encode('utf-8') + b'\x00'
        if editor:
            raw += editor.encode('utf-8') + b'\x00'
        self.document.set_value(DirectoryId.IFD0, COPYRIGHT_TAG, Value.ascii(raw))

    def get_photographer_copyright(self) -> str:
        return self.get_copyright()[0]

    def get_editor_copyright(self) -> str:
        return self.get_copyright()[1]

    def set_photographer_copyright(self, photographer: Optional[str]):
        self.set_copyright(photographer, self.get_copyright()[1])

    def set_editor_copyright(self, editor: Optional[str]):
        self.set_copyright(self.get_copyright()[0], editor)

    # -- IFD0 text tags ---------------------------------------------------

    def get_artist(self) -> Optional[str]:
        return self.document.get_ascii_string(DirectoryId.IFD0, ARTIST_TAG)

    def set_artist(self, artist: str):
        self.document.set_ascii_string(DirectoryId.IFD0, ARTIST_TAG, artist)

    def get_software(self) -> Optional[str]:
        return self.document.get_ascii_string(DirectoryId.IFD0, SOFTWARE_TAG)

    def set_software(self, software: str):
        self.document.set_ascii_string(DirectoryId.IFD0, SOFTWARE_TAG, software)

    def get_image_description(self) -> Optional[str]:
        return self.document.get_ascii_string(DirectoryId.IFD0, IMAGE_DESCRIPTION_TAG)

    def set_image_description(self, description: str):
        self.document.set_ascii_string(DirectoryId.IFD0, IMAGE_DESCRIPTION_TAG, description)

    # -- Exif sub-IFD undefined tags --------------------------------------

    def get_user_comment(self) -> Optional[str]:
        raw = self.document.get_bytes(DirectoryId.EXIF, USER_COMMENT_TAG)
        if raw is None:
            return None
        code, body = raw[:8], raw[8:]
        if code == _UNICODE_CODE:
            encoding = 'utf-16-le' if self.document.endian == '<' else 'utf-16-be'
            text = body.decode(encoding, errors='replace')
        elif code in (_ASCII_CODE, _UNDEFINED_CODE):
            text = body.decode('utf-8', errors='replace')
        else:
            # No character code: older writers store the bare text
            text = raw.decode('utf-8', errors='replace')
        return text.rstrip('\x00 ')

    def set_user_comment(self, comment: str):
        """Store ``comment`` with the ASCII code, or the undefined code + UTF-8."""
        try:
            raw = _ASCII_CODE + comment.encode('ascii')
        except UnicodeEncodeError:
            raw = _UNDEFINED_CODE + comment.encode('utf-8')
        self.document.set_bytes(DirectoryId.EXIF, USER_COMMENT_TAG, raw)

    def get_maker_note(self) -> Optional[bytes]:
        return self.document.get_bytes(DirectoryId.EXIF, MAKER_NOTE_TAG)

    def set_maker_note(self, data: bytes):
        self.document.set_bytes(DirectoryId.EXIF, MAKER_NOTE_TAG, data)

    # -- GPS --------------------------------------------------------------

    def set_gps_location(self, latitude: float, longitude: float, altitude: float):
        """Write position tags into the GPS directory.

        Latitude/longitude are signed decimal degrees; zero counts as
        north/east. Altitude is metres, negative below sea level, stored
        as whole metres.
        """
        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f'Latitude {latitude} out of range')
        if not -180.0 <= longitude <= 180.0:
            raise ValueError(f'Longitude {longitude} out of range')
        if math.isnan(altitude) or math.isinf(altitude):
            raise ValueError(f'Altitude {altitude} is not finite')

        doc = self.document
        gps = DirectoryId.GPS
        doc.set_numbers(gps, GPS_VERSION_ID_TAG, GPS_VERSION, ValueKind.UBYTE)
        doc.set_ascii_string(gps, GPS_LATITUDE_REF_TAG, 'N' if latitude >= 0 else 'S')
        doc.set_rationals(gps, GPS_LATITUDE_TAG, to_dms(latitude))
        doc.set_ascii_string(gps, GPS_LONGITUDE_REF_TAG, 'E' if longitude >= 0 else 'W')
        doc.set_rationals(gps, GPS_LONGITUDE_TAG, to_dms(longitude))
        doc.set_numbers(gps, GPS_ALTITUDE_REF_TAG, [0 if altitude >= 0 else 1],
                        ValueKind.UBYTE)
        doc.set_rational(gps, GPS_ALTITUDE_TAG, (int(abs(altitude)), 1))

    def get_gps_location(self) -> Optional[Tuple[float, float, Optional[float]]]:
        """Return (latitude, longitude, altitude) or None without a position.

        Altitude is None when the file does not record one.
        """
        doc = self.document
        gps = DirectoryId.GPS
        latitude = from_dms(doc.get_rationals(gps, GPS_LATITUDE_TAG))
        longitude = from_dms(doc.get_rationals(gps, GPS_LONGITUDE_TAG))
        if latitude is None or longitude is None:
            return None
        if (doc.get_ascii_string(gps, GPS_LATITUDE_REF_TAG) or '').upper().startswith('S'):
            latitude = -latitude
        if (doc.get_ascii_string(gps, GPS_LONGITUDE_REF_TAG) or '').upper().startswith('W'):
            longitude = -longitude

        altitude = None
        alt_pair = doc.get_rational(gps, GPS_ALTITUDE_TAG)
        if alt_pair is not None:
            altitude = rational_to_float(alt_pair)
            if altitude is not None and doc.get_number(gps, GPS_ALTITUDE_REF_TAG) == 1:
                altitude = -altitude
        return latitude, longitude, altitude

    def clear_gps(self) -> int:
        """Remove every GPS tag. Returns how many were removed."""
        gps = self.document.directory(DirectoryId.GPS)
        removed = len(gps)
        gps.clear()
        return removed

    def set_img_direction(self, degrees: float):
        """Image direction in whole degrees relative to magnetic north."""
        if math.isnan(degrees) or math.isinf(degrees):
            raise ValueError(f'Direction {degrees} is not finite')
        if abs(degrees) >= 360.0:
            raise ValueError(f'Direction {degrees} out of range')
        doc = self.document
        doc.set_ascii_string(DirectoryId.GPS, GPS_IMG_DIRECTION_REF_TAG, MAGNETIC_NORTH)
        doc.set_rational(DirectoryId.GPS, GPS_IMG_DIRECTION_TAG, (int(abs(degrees)), 1))

    def get_img_direction(self) -> Optional[float]:
        pair = self.document.get_rational(DirectoryId.GPS, GPS_IMG_DIRECTION_TAG)
        if pair is None:
            return None
        return rational_to_float(pair)
