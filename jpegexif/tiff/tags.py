"""EXIF 2.2 tag ids and names for the five directories."""

from typing import Dict

# Sub-directory pointer tags
EXIF_IFD_POINTER_TAG = 0x8769
GPS_IFD_POINTER_TAG = 0x8825
INTEROP_IFD_POINTER_TAG = 0xA005

# Thumbnail location (IFD1)
JPEG_INTERCHANGE_FORMAT_TAG = 0x0201
JPEG_INTERCHANGE_FORMAT_LENGTH_TAG = 0x0202

# IFD0 tags used by the helpers
IMAGE_DESCRIPTION_TAG = 0x010E
SOFTWARE_TAG = 0x0131
ARTIST_TAG = 0x013B
COPYRIGHT_TAG = 0x8298

# Exif sub-IFD tags used by the helpers
MAKER_NOTE_TAG = 0x927C
USER_COMMENT_TAG = 0x9286

# GPS sub-IFD
GPS_VERSION_ID_TAG = 0x00
GPS_LATITUDE_REF_TAG = 0x01
GPS_LATITUDE_TAG = 0x02
GPS_LONGITUDE_REF_TAG = 0x03
GPS_LONGITUDE_TAG = 0x04
GPS_ALTITUDE_REF_TAG = 0x05
GPS_ALTITUDE_TAG = 0x06
GPS_IMG_DIRECTION_REF_TAG = 0x10
GPS_IMG_DIRECTION_TAG = 0x11

# Tags whose values are offsets and get rewritten on every save
POINTER_TAGS = frozenset({
    EXIF_IFD_POINTER_TAG,
    GPS_IFD_POINTER_TAG,
    INTEROP_IFD_POINTER_TAG,
    JPEG_INTERCHANGE_FORMAT_TAG,
})

# IFD0 / IFD1 / Exif sub-IFD tag names (ids do not collide across these)
TAG_NAMES: Dict[int, str] = {
    0x0100: 'ImageWidth', 0x0101: 'ImageLength', 0x0102: 'BitsPerSample',
    0x0103: 'Compression', 0x0106: 'PhotometricInterpretation',
    0x010E: 'ImageDescription', 0x010F: 'Make', 0x0110: 'Model',
    0x0111: 'StripOffsets', 0x0112: 'Orientation', 0x0115: 'SamplesPerPixel',
    0x0116: 'RowsPerStrip', 0x0117: 'StripByteCounts',
    0x011A: 'XResolution', 0x011B: 'YResolution',
    0x011C: 'PlanarConfiguration', 0x0128: 'ResolutionUnit',
    0x012D: 'TransferFunction', 0x0131: 'Software', 0x0132: 'DateTime',
    0x013B: 'Artist', 0x013E: 'WhitePoint', 0x013F: 'PrimaryChromaticities',
    0x0201: 'JPEGInterchangeFormat', 0x0202: 'JPEGInterchangeFormatLength',
    0x0211: 'YCbCrCoefficients', 0x0212: 'YCbCrSubSampling',
    0x0213: 'YCbCrPositioning', 0x0214: 'ReferenceBlackWhite',
    0x8298: 'Copyright',
    0x8769: 'ExifIFDPointer', 0x8825: 'GPSInfoIFDPointer',
    # Exif sub-IFD
    0x829A: 'ExposureTime', 0x829D: 'FNumber', 0x8822: 'ExposureProgram',
    0x8824: 'SpectralSensitivity', 0x8827: 'ISOSpeedRatings', 0x8828: 'OECF',
    0x9000: 'ExifVersion', 0x9003: 'DateTimeOriginal',
    0x9004: 'DateTimeDigitized', 0x9101: 'ComponentsConfiguration',
    0x9102: 'CompressedBitsPerPixel', 0x9201: 'ShutterSpeedValue',
    0x9202: 'ApertureValue', 0x9203: 'BrightnessValue',
    0x9204: 'ExposureBiasValue', 0x9205: 'MaxApertureValue',
    0x9206: 'SubjectDistance', 0x9207: 'MeteringMode', 0x9208: 'LightSource',
    0x9209: 'Flash', 0x920A: 'FocalLength', 0x9214: 'SubjectArea',
    0x927C: 'MakerNote', 0x9286: 'UserComment', 0x9290: 'SubSecTime',
    0x9291: 'SubSecTimeOriginal', 0x9292: 'SubSecTimeDigitized',
    0xA000: 'FlashpixVersion', 0xA001: 'ColorSpace',
    0xA002: 'PixelXDimension', 0xA003: 'PixelYDimension',
    0xA004: 'RelatedSoundFile', 0xA005: 'InteroperabilityIFDPointer',
    0xA20B: 'FlashEnergy', 0xA20C: 'SpatialFrequencyResponse',
    0xA20E: 'FocalPlaneXResolution', 0xA20F: 'FocalPlaneYResolution',
    0xA210: 'FocalPlaneResolutionUnit', 0xA214: 'SubjectLocation',
    0xA215: 'ExposureIndex', 0xA217: 'SensingMethod', 0xA300: 'FileSource',
    0xA301: 'SceneType', 0xA302: 'CFAPattern', 0xA401: 'CustomRendered',
    0xA402: 'ExposureMode', 0xA403: 'WhiteBalance', 0xA404: 'DigitalZoomRatio',
    0xA405: 'FocalLengthIn35mmFilm', 0xA406: 'SceneCaptureType',
    0xA407: 'GainControl', 0xA408: 'Contrast', 0xA409: 'Saturation',
    0xA40A: 'Sharpness', 0xA40B: 'DeviceSettingDescription',
    0xA40C: 'SubjectDistanceRange', 0xA420: 'ImageUniqueID',
}

# GPS tag names (tags 0-30)
GPS_TAG_NAMES: Dict[int, str] = {
    0: 'GPSVersionID', 1: 'GPSLatitudeRef', 2: 'GPSLatitude',
    3: 'GPSLongitudeRef', 4: 'GPSLongitude', 5: 'GPSAltitudeRef',
    6: 'GPSAltitude', 7: 'GPSTimeStamp', 8: 'GPSSatellites',
    9: 'GPSStatus', 10: 'GPSMeasureMode', 11: 'GPSDOP',
    12: 'GPSSpeedRef', 13: 'GPSSpeed', 14: 'GPSTrackRef',
    15: 'GPSTrack', 16: 'GPSImgDirectionRef', 17: 'GPSImgDirection',
    18: 'GPSMapDatum', 19: 'GPSDestLatitudeRef', 20: 'GPSDestLatitude',
    21: 'GPSDestLongitudeRef', 22: 'GPSDestLongitude', 23: 'GPSDestBearingRef',
    24: 'GPSDestBearing', 25: 'GPSDestDistanceRef', 26: 'GPSDestDistance',
    27: 'GPSProcessingMethod', 28: 'GPSAreaInformation', 29: 'GPSDateStamp',
    30: 'GPSDifferential',
}

INTEROP_TAG_NAMES: Dict[int, str] = {
    1: 'InteroperabilityIndex', 2: 'InteroperabilityVersion',
}


def tag_name(tag_id: int, names: Dict[int, str] = TAG_NAMES) -> str:
    """Look up a tag's name, falling back to ``Tag_0xNNNN``."""
    return names.get(tag_id, f'Tag_0x{tag_id:04x}')
