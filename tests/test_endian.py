"""Tests for byte-order detection and the integer codec."""

import pytest

from jpegexif.errors import InvalidByteOrderError, TruncatedDataError
from jpegexif.tiff.endian import (
    byte_order_from_mark,
    check_bounds,
    read_sint,
    read_uint,
    write_sint,
    write_uint,
)


class TestByteOrder:
    def test_intel(self):
        assert byte_order_from_mark(b'II') == '<'

    def test_motorola(self):
        assert byte_order_from_mark(b'MM') == '>'

    def test_invalid_mark(self):
        with pytest.raises(InvalidByteOrderError):
            byte_order_from_mark(b'IM')

    def test_short_mark(self):
        with pytest.raises(InvalidByteOrderError):
            byte_order_from_mark(b'I')


class TestRead:
    def test_ushort_both_orders(self):
        data = b'\x01\x02'
        assert read_uint(data, 0, 2, '>') == 0x0102
        assert read_uint(data, 0, 2, '<') == 0x0201

    def test_ulong_at_offset(self):
        data = b'\x00\x00\x78\x56\x34\x12'
        assert read_uint(data, 2, 4, '<') == 0x12345678

    def test_signed(self):
        assert read_sint(b'\xff\xff', 0, 2, '<') == -1
        assert read_sint(b'\x80', 0, 1, '<') == -128
        assert read_sint(b'\xff\xff\xff\xfe', 0, 4, '>') == -2

    def test_past_end(self):
        with pytest.raises(TruncatedDataError):
            read_uint(b'\x01', 0, 2, '<')

    def test_bad_width(self):
        with pytest.raises(ValueError):
            read_uint(b'\x00\x00\x00', 0, 3, '<')


class TestWrite:
    def test_little_endian_default(self):
        assert write_uint(0x0102, 2) == b'\x02\x01'
        assert write_uint(0x12345678, 4) == b'\x78\x56\x34\x12'

    def test_signed(self):
        assert write_sint(-2, 2) == b'\xfe\xff'

    def test_out_of_range(self):
        with pytest.raises(Exception):
            write_uint(256, 1)


class TestCheckBounds:
    def test_exact_fit(self):
        check_bounds(b'abcd', 0, 4)

    def test_negative_offset(self):
        with pytest.raises(TruncatedDataError):
            check_bounds(b'abcd', -1, 1)

    def test_error_carries_position(self):
        with pytest.raises(TruncatedDataError) as exc:
            check_bounds(b'abcd', 3, 2)
        assert exc.value.position == 3
