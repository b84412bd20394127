"""Tests for the copyright, text, GPS and direction helpers."""

import pytest

from jpegexif import ExifManager, open_jpeg
from jpegexif.document import DirectoryId
from jpegexif.manager import from_dms, to_dms
from jpegexif.tiff.values import ValueKind


@pytest.fixture
def manager(tmp_jpeg_minimal):
    return ExifManager(open_jpeg(tmp_jpeg_minimal))


def _reopen(manager, tmp_path):
    return ExifManager(open_jpeg(manager.document.save(tmp_path / 'out.jpg')))


class TestDms:
    def test_whole_degrees(self):
        assert to_dms(45.5) == ((45, 1), (30, 1), (0, 1000))

    def test_no_float_drift(self):
        assert to_dms(-73.6) == ((73, 1), (36, 1), (0, 1000))

    def test_millisecond_seconds(self):
        assert to_dms(10.3425) == ((10, 1), (20, 1), (33000, 1000))

    def test_inverse(self):
        assert from_dms(to_dms(12.345678)) == pytest.approx(12.345678, abs=1e-6)

    def test_malformed(self):
        assert from_dms(None) is None
        assert from_dms(((1, 1), (2, 1))) is None
        assert from_dms(((1, 0), (2, 1), (3, 1))) is None


class TestCopyright:
    def test_both(self, manager, tmp_path):
        manager.set_copyright('Alice', 'Bob')
        assert manager.document.get_bytes(DirectoryId.IFD0, 0x8298) == b'Alice\x00Bob\x00'
        assert _reopen(manager, tmp_path).get_copyright() == ('Alice', 'Bob')

    def test_photographer_only(self, manager, tmp_path):
        manager.set_copyright('Alice', None)
        assert manager.document.get_bytes(DirectoryId.IFD0, 0x8298) == b'Alice\x00'
        assert _reopen(manager, tmp_path).get_copyright() == ('Alice', '')

    def test_editor_only(self, manager):
        manager.set_copyright('', 'Bob')
        assert manager.document.get_bytes(DirectoryId.IFD0, 0x8298) == b' \x00Bob\x00'
        assert manager.get_copyright() == ('', 'Bob')

    def test_absent(self, manager):
        assert manager.get_copyright() == ('', '')

    def test_partial_updates(self, manager):
        manager.set_photographer_copyright('Alice')
        manager.set_editor_copyright('Bob')
        assert manager.get_copyright() == ('Alice', 'Bob')
        manager.set_photographer_copyright('Carol')
        assert manager.get_copyright() == ('Carol', 'Bob')

    def test_whitespace_trimmed(self, manager):
        manager.set_copyright('  Alice ', ' Bob  ')
        assert manager.get_copyright() == ('Alice', 'Bob')

    def test_single_part_getters(self, manager):
        manager.set_copyright('Alice', 'Bob')
        assert manager.get_photographer_copyright() == 'Alice'
        assert manager.get_editor_copyright() == 'Bob'

    def test_single_part_getters_absent(self, manager):
        assert manager.get_photographer_copyright() == ''
        assert manager.get_editor_copyright() == ''


class TestTextTags:
    def test_artist(self, manager, tmp_path):
        manager.set_artist('Jane Doe')
        assert _reopen(manager, tmp_path).get_artist() == 'Jane Doe'

    def test_software_and_description(self, manager):
        manager.set_software('jpegexif 1.0')
        manager.set_image_description('A red square')
        assert manager.get_software() == 'jpegexif 1.0'
        assert manager.get_image_description() == 'A red square'

    def test_missing(self, manager):
        assert manager.get_artist() is None
        assert manager.get_user_comment() is None
        assert manager.get_maker_note() is None


class TestUndefinedTags:
    def test_ascii_comment(self, manager, tmp_path):
        manager.set_user_comment('hello')
        raw = manager.document.get_bytes(DirectoryId.EXIF, 0x9286)
        assert raw == b'ASCII\x00\x00\x00hello'
        assert manager.document.get_value(DirectoryId.EXIF, 0x9286).kind is ValueKind.UNDEFINED
        assert _reopen(manager, tmp_path).get_user_comment() == 'hello'

    def test_non_ascii_comment(self, manager):
        manager.set_user_comment('café')
        assert manager.get_user_comment() == 'café'

    def test_comment_without_code(self, manager):
        manager.document.set_bytes(DirectoryId.EXIF, 0x9286, b'plain text')
        assert manager.get_user_comment() == 'plain text'

    def test_existing_comment(self, tmp_jpeg):
        assert ExifManager(open_jpeg(tmp_jpeg)).get_user_comment() == 'hello'

    def test_maker_note(self, manager, tmp_path):
        manager.set_maker_note(b'\x00\x01binary\xff')
        assert _reopen(manager, tmp_path).get_maker_note() == b'\x00\x01binary\xff'


class TestGps:
    def test_roundtrip(self, manager, tmp_path):
        manager.set_gps_location(45.5, -73.6, 120)
        again = _reopen(manager, tmp_path)
        lat, lon, alt = again.get_gps_location()
        assert lat == pytest.approx(45.5, abs=1e-4)
        assert lon == pytest.approx(-73.6, abs=1e-4)
        assert alt == pytest.approx(120)

        doc = again.document
        assert doc.get_ascii_string(DirectoryId.GPS, 0x01) == 'N'
        assert doc.get_ascii_string(DirectoryId.GPS, 0x03) == 'W'
        assert doc.get_number(DirectoryId.GPS, 0x05) == 0
        assert doc.get_numbers(DirectoryId.GPS, 0x00) == (2, 2, 0, 0)
        assert doc.get_value(DirectoryId.GPS, 0x00).kind is ValueKind.UBYTE

    def test_southern_hemisphere_below_sea_level(self, manager):
        manager.set_gps_location(-33.8688, 151.2093, -12.7)
        doc = manager.document
        assert doc.get_ascii_string(DirectoryId.GPS, 0x01) == 'S'
        assert doc.get_ascii_string(DirectoryId.GPS, 0x03) == 'E'
        assert doc.get_number(DirectoryId.GPS, 0x05) == 1
        assert doc.get_rational(DirectoryId.GPS, 0x06) == (12, 1)
        lat, lon, alt = manager.get_gps_location()
        assert lat == pytest.approx(-33.8688, abs=1e-4)
        assert lon == pytest.approx(151.2093, abs=1e-4)
        assert alt == -12

    def test_zero_is_north_east(self, manager):
        manager.set_gps_location(0.0, 0.0, 0)
        doc = manager.document
        assert doc.get_ascii_string(DirectoryId.GPS, 0x01) == 'N'
        assert doc.get_ascii_string(DirectoryId.GPS, 0x03) == 'E'

    def test_denominators(self, manager):
        manager.set_gps_location(10.5, 20.25, 5)
        lat = manager.document.get_rationals(DirectoryId.GPS, 0x02)
        assert [den for _, den in lat] == [1, 1, 1000]

    def test_out_of_range(self, manager):
        with pytest.raises(ValueError):
            manager.set_gps_location(91, 0, 0)
        with pytest.raises(ValueError):
            manager.set_gps_location(0, -181, 0)

    def test_no_location(self, manager):
        assert manager.get_gps_location() is None

    def test_latitude_without_longitude(self, tmp_jpeg):
        # Sample GPS directory has a latitude but no longitude
        assert ExifManager(open_jpeg(tmp_jpeg)).get_gps_location() is None

    def test_clear_gps(self, tmp_jpeg, tmp_path):
        mgr = ExifManager(open_jpeg(tmp_jpeg))
        assert mgr.clear_gps() == 3
        again = _reopen(mgr, tmp_path)
        assert again.document.directory(DirectoryId.GPS) == {}
        assert again.document.get_value(DirectoryId.IFD0, 0x8825) is None


class TestImgDirection:
    def test_roundtrip(self, manager, tmp_path):
        manager.set_img_direction(271.8)
        again = _reopen(manager, tmp_path)
        assert again.get_img_direction() == 271
        assert again.document.get_ascii_string(DirectoryId.GPS, 0x10) == 'M'

    def test_missing(self, manager):
        assert manager.get_img_direction() is None

    @pytest.mark.parametrize('degrees', [float('nan'), float('inf'), 360.0, -400.0, 5e9])
    def test_rejects_bad_direction(self, manager, degrees):
        with pytest.raises(ValueError):
            manager.set_img_direction(degrees)
        assert manager.get_img_direction() is None
