"""Terminal formatting for what the CLI echoes.

Library modules log through ``logging``; nothing here is used outside
``jpegexif.cli``.
"""

import sys

_RESET = '\033[0m'

# role -> SGR code
_STYLES = {
    'header': '1;36',
    'success': '32',
    'warning': '33',
    'error': '1;31',
    'info': '36',
    'dim': '2',
    'bold': '1;37',
}

SEPARATOR_WIDTH = 60


def _stdout_is_terminal() -> bool:
    isatty = getattr(sys.stdout, 'isatty', None)
    return bool(isatty and isatty())


_USE_COLOR = _stdout_is_terminal()


def set_color_enabled(enabled: bool):
    """Override automatic colour detection (``--no-color``)."""
    global _USE_COLOR
    _USE_COLOR = enabled


def styled(role: str, text: str) -> str:
    """Wrap *text* in the escape code for *role* when colour is on."""
    if not _USE_COLOR:
        return text
    return f'\033[{_STYLES[role]}m{text}{_RESET}'


def cli_header(text: str) -> str:
    return styled('header', text)


def cli_success(text: str) -> str:
    return styled('success', text)


def cli_warning(text: str) -> str:
    return styled('warning', text)


def cli_error(text: str) -> str:
    return styled('error', text)


def cli_info(text: str) -> str:
    return styled('info', text)


def cli_dim(text: str) -> str:
    return styled('dim', text)


def cli_bold(text: str) -> str:
    return styled('bold', text)


def cli_separator() -> str:
    return styled('dim', '-' * SEPARATOR_WIDTH)


def cli_tag(tag: int) -> str:
    """Dimmed ``0x010f`` style tag id."""
    return styled('dim', f'0x{tag:04x}')


def cli_segment(offset: int, size: int) -> str:
    """Dimmed note giving where the APP1 segment sits in the file."""
    return styled('dim', f'(APP1 at {offset}, {size} bytes)')


def cli_mismatch(directory: str, tag_name: str, expected: str, actual: str) -> str:
    """One verification mismatch line, in warning colour."""
    return styled('warning', f'  {directory}/{tag_name}: expected {expected!r}, '
                             f'got {actual!r}')
