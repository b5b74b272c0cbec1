"""Terminal styling for the CLI and plain lines for ``--log`` files.

Colors are applied only when stdout is a terminal; ``set_color_enabled``
overrides the detection (tests and ``CliRunner`` turn it off).
"""

import sys
from datetime import datetime

_RESET = '\033[0m'

# Styles by role in the field listing and progress output
_STYLES = {
    'header': '\033[1;36m',
    'keep': '\033[32m',
    'strip': '\033[33m',
    'error': '\033[1;31m',
    'dim': '\033[2m',
    'bold': '\033[1;37m',
}


def _stdout_is_terminal() -> bool:
    try:
        return sys.stdout.isatty()
    except AttributeError:
        return False


_color = _stdout_is_terminal()


def set_color_enabled(enabled: bool):
    """Force ANSI colors on or off."""
    global _color
    _color = enabled


def _styled(role: str, text: str) -> str:
    if not _color:
        return text
    return f'{_STYLES[role]}{text}{_RESET}'


def cli_header(text: str) -> str:
    """File name heading in ``inspect`` output."""
    return _styled('header', text)


def cli_success(text: str) -> str:
    """Kept fields and cleaned files."""
    return _styled('keep', text)


def cli_warning(text: str) -> str:
    """Stripped fields and notices such as saved preferences."""
    return _styled('strip', text)


def cli_error(text: str) -> str:
    return _styled('error', text)


def cli_dim(text: str) -> str:
    return _styled('dim', text)


def cli_bold(text: str) -> str:
    return _styled('bold', text)


def cli_field(key: str, value: str, strip: bool) -> str:
    """``    [strip] location:GPSLatitude: 40/1, 26/1``"""
    marker = cli_warning('strip') if strip else cli_success('keep ')
    return f'    [{marker}] {key}: {cli_dim(value)}'


def cli_separator(width: int = 60) -> str:
    return cli_dim('─' * width)


def _log_line(level: str, msg: str) -> str:
    stamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    return f'[{stamp}] [{level}]'.ljust(30) + msg


def log_info(msg: str) -> str:
    """Plain ``--log`` file line at INFO level."""
    return _log_line('INFO', msg)


def log_error(msg: str) -> str:
    """Plain ``--log`` file line at ERROR level."""
    return _log_line('ERROR', msg)
