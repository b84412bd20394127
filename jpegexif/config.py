"""Codec configuration -- scan window, copy buffer and parser limits."""

import json
from dataclasses import dataclass, fields

UNKNOWN_TYPE_POLICIES = ('drop', 'error')


@dataclass
class CodecConfig:
    """Tunable knobs for locating, parsing and saving EXIF data.

    ``unknown_types`` decides what happens to a directory entry whose type id
    is not one of the ten EXIF kinds: ``"drop"`` skips it with a logged
    warning, ``"error"`` aborts the parse with UnknownValueTypeError.
    """

    search_window: int = 100
    copy_chunk_size: int = 10240
    max_ifd_entries: int = 1000
    unknown_types: str = 'drop'

    def __post_init__(self):
        # A window must hold at least one full marker + size + Exif header
        if self.search_window <= 10:
            raise ValueError(f'search_window must be > 10, got {self.search_window}')
        if self.copy_chunk_size <= 0:
            raise ValueError(f'copy_chunk_size must be positive, got {self.copy_chunk_size}')
        if self.max_ifd_entries <= 0:
            raise ValueError(f'max_ifd_entries must be positive, got {self.max_ifd_entries}')
        if self.unknown_types not in UNKNOWN_TYPE_POLICIES:
            raise ValueError(f'unknown_types must be one of {UNKNOWN_TYPE_POLICIES}, '
                             f'got {self.unknown_types!r}')

    @classmethod
    def default(cls) -> 'CodecConfig':
        """Return the built-in defaults."""
        return cls()

    @classmethod
    def from_json(cls, path) -> 'CodecConfig':
        """Load settings from a JSON file, falling back to defaults.

        JSON format::

            {
              "search_window": 4096,
              "copy_chunk_size": 65536,
              "max_ifd_entries": 1000,
              "unknown_types": "error"
            }

        All keys are optional. Unrecognised keys raise ValueError so that a
        typo does not silently leave a default in place.
        """
        with open(str(path), 'r') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f'{path}: expected a JSON object')

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f'{path}: unknown config key(s): {", ".join(unknown)}')

        return cls(**data)
