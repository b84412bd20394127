"""EXIF value kinds and typed component encode/decode.

The ten EXIF 2.2 kinds form a closed enum carrying their TIFF type id and
component width. A :class:`Value` pairs a kind with its components:

* integer kinds hold a tuple of ints,
* ``ASCII`` and ``UNDEFINED`` hold a ``bytes`` object (one component per byte),
* rational kinds hold a tuple of ``(numerator, denominator)`` pairs.

Rationals are stored as read -- a zero denominator is not rejected.
"""

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple, Union

from jpegexif.tiff.endian import INT_FORMATS, OUTPUT_ENDIAN, check_bounds

# Values up to this many bytes live inside the 12-byte directory entry
INLINE_LIMIT = 4


class ValueKind(Enum):
    """(type_id, component_width, signed)"""
    UBYTE = (1, 1, False)
    ASCII = (2, 1, False)
    USHORT = (3, 2, False)
    ULONG = (4, 4, False)
    URATIONAL = (5, 8, False)
    SBYTE = (6, 1, True)
    UNDEFINED = (7, 1, False)
    SSHORT = (8, 2, True)
    SLONG = (9, 4, True)
    SRATIONAL = (10, 8, True)

    def __init__(self, type_id: int, width: int, signed: bool):
        self.type_id = type_id
        self.width = width
        self.signed = signed

    @property
    def is_bytes(self) -> bool:
        return self in (ValueKind.ASCII, ValueKind.UNDEFINED)

    @property
    def is_rational(self) -> bool:
        return self in (ValueKind.URATIONAL, ValueKind.SRATIONAL)

    @property
    def is_integer(self) -> bool:
        return not (self.is_bytes or self.is_rational)

    @property
    def int_width(self) -> int:
        """Width of one stored integer (half the component for rationals)."""
        return self.width // 2 if self.is_rational else self.width

    @property
    def struct_char(self) -> str:
        unsigned, signed = INT_FORMATS[self.int_width]
        return signed if self.signed else unsigned

    @classmethod
    def from_type_id(cls, type_id: int) -> Optional['ValueKind']:
        """Return the kind for a TIFF type id, or None if unsupported."""
        return _KINDS_BY_TYPE_ID.get(type_id)


_KINDS_BY_TYPE_ID: Dict[int, ValueKind] = {k.type_id: k for k in ValueKind}

Rational = Tuple[int, int]
Components = Union[bytes, Tuple[int, ...], Tuple[Rational, ...]]


def _int_range(width: int, signed: bool) -> Tuple[int, int]:
    bits = width * 8
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


@dataclass(frozen=True)
class Value:
    """One directory entry's typed payload."""
    kind: ValueKind
    components: Components

    def __post_init__(self):
        if self.kind.is_bytes:
            if not isinstance(self.components, (bytes, bytearray)):
                raise TypeError(f'{self.kind.name} components must be bytes')
            object.__setattr__(self, 'components', bytes(self.components))
            return

        comps = tuple(self.components)
        lo, hi = _int_range(self.kind.int_width, self.kind.signed)
        if self.kind.is_rational:
            pairs = []
            for pair in comps:
                num, den = pair
                for part in (num, den):
                    if not lo <= int(part) <= hi:
                        raise ValueError(f'{part} out of range for {self.kind.name}')
                pairs.append((int(num), int(den)))
            comps = tuple(pairs)
        else:
            for item in comps:
                if not lo <= int(item) <= hi:
                    raise ValueError(f'{item} out of range for {self.kind.name}')
            comps = tuple(int(item) for item in comps)
        object.__setattr__(self, 'components', comps)

    # -- constructors -----------------------------------------------------

    @classmethod
    def numbers(cls, values: Iterable[int],
                kind: ValueKind = ValueKind.USHORT) -> 'Value':
        if not kind.is_integer:
            raise ValueError(f'{kind.name} is not an integer kind')
        return cls(kind, tuple(values))

    @classmethod
    def rationals(cls, pairs: Iterable[Rational], signed: bool = False) -> 'Value':
        kind = ValueKind.SRATIONAL if signed else ValueKind.URATIONAL
        return cls(kind, tuple(pairs))

    @classmethod
    def ascii(cls, text: Union[str, bytes]) -> 'Value':
        """ASCII value, NUL-terminated as EXIF requires."""
        raw = text.encode('utf-8') if isinstance(text, str) else bytes(text)
        if not raw.endswith(b'\x00'):
            raw += b'\x00'
        return cls(ValueKind.ASCII, raw)

    @classmethod
    def undefined(cls, raw: bytes) -> 'Value':
        return cls(ValueKind.UNDEFINED, bytes(raw))

    # -- sizes ------------------------------------------------------------

    @property
    def count(self) -> int:
        return len(self.components)

    @property
    def total_size(self) -> int:
        return self.count * self.kind.width

    @property
    def is_inline(self) -> bool:
        return self.total_size <= INLINE_LIMIT

    @property
    def extra_size(self) -> int:
        """Bytes this value needs in the directory's extra-data area."""
        return 0 if self.is_inline else self.total_size

    # -- codec ------------------------------------------------------------

    @classmethod
    def decode(cls, kind: ValueKind, data: bytes, offset: int,
               count: int, endian: str) -> 'Value':
        """Decode ``count`` components of ``kind`` starting at ``offset``."""
        total = count * kind.width
        check_bounds(data, offset, total)

        if kind.is_bytes:
            return cls(kind, bytes(data[offset:offset + total]))

        if kind.is_rational:
            flat = struct.unpack_from(f'{endian}{count * 2}{kind.struct_char}',
                                      data, offset)
            return cls(kind, tuple(zip(flat[0::2], flat[1::2])))

        return cls(kind, struct.unpack_from(f'{endian}{count}{kind.struct_char}',
                                            data, offset))

    def encode(self) -> bytes:
        """Serialize the components in the output (little-endian) byte order."""
        if self.kind.is_bytes:
            return self.components

        if self.kind.is_rational:
            flat = [part for pair in self.components for part in pair]
            return struct.pack(f'{OUTPUT_ENDIAN}{len(flat)}{self.kind.struct_char}', *flat)

        return struct.pack(f'{OUTPUT_ENDIAN}{self.count}{self.kind.struct_char}',
                           *self.components)

    def preview(self, limit: int = 60) -> str:
        """Short plain-text rendering for logs and the CLI."""
        if self.kind is ValueKind.ASCII:
            text = self.components.rstrip(b'\x00').decode('utf-8', errors='replace')
            text = text.replace('\x00', ' | ')
        elif self.kind is ValueKind.UNDEFINED:
            text = self.components[:limit // 2].hex(' ')
            if self.count > limit // 2:
                text += ' ...'
        elif self.kind.is_rational:
            text = ', '.join(f'{n}/{d}' for n, d in self.components)
        else:
            text = ', '.join(str(c) for c in self.components)
        if len(text) > limit:
            text = text[:limit - 3] + '...'
        return text


def rational_to_float(pair: Rational) -> Optional[float]:
    """Convert a rational to float; None when the denominator is zero."""
    num, den = pair
    if den == 0:
        return None
    return num / den
