"""User preferences for the command-line front end.

Preferences live in a JSON file under a private namespace directory
(``~/.config/privacy-prep/prefs.json`` by default, or the directory named
by ``PRIVACYPREP_CONFIG_DIR``). The redaction core never touches them: the
CLI loads them and passes plain values down.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = 'PRIVACYPREP_CONFIG_DIR'
NAMESPACE = 'privacy-prep'
PREFS_FILENAME = 'prefs.json'


def config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    base = os.environ.get('XDG_CONFIG_HOME') or Path.home() / '.config'
    return Path(base) / NAMESPACE


def default_prefs_path() -> Path:
    return config_dir() / PREFS_FILENAME


@dataclass
class Preferences:
    """Last-used choices of the user."""

    quality: int = 92
    output_format: str = 'same'
    include_report: bool = False
    remember: bool = False
    strip_map: Dict[str, bool] = field(default_factory=dict)

    @classmethod
    def default(cls) -> 'Preferences':
        return cls()

    @classmethod
    def from_json(cls, path) -> 'Preferences':
        """Load preferences from a JSON file.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        with open(str(path), 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f'{path}: expected a JSON object')

        prefs = cls.default()
        prefs.quality = int(data.get('quality') or prefs.quality)
        prefs.output_format = data.get('output_format') or prefs.output_format
        prefs.include_report = bool(data.get('include_report', False))
        prefs.remember = bool(data.get('remember', False))
        strip_map = data.get('strip_map') or {}
        if isinstance(strip_map, dict):
            prefs.strip_map = {str(k): bool(v) for k, v in strip_map.items()}
        return prefs

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'Preferences':
        """Load saved preferences, falling back to defaults on any problem."""
        path = Path(path) if path else default_prefs_path()
        if not path.exists():
            return cls.default()
        try:
            return cls.from_json(path)
        except (OSError, ValueError, TypeError) as e:
            logger.warning('Ignoring unreadable preferences %s: %s', path, e)
            return cls.default()

    def save(self, path: Optional[Path] = None) -> Optional[Path]:
        """Write preferences if ``remember`` is on. Returns the path written."""
        if not self.remember:
            return None
        path = Path(path) if path else default_prefs_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(str(path), 'w') as f:
            json.dump(asdict(self), f, indent=2)
        return path


def clear_preferences(path: Optional[Path] = None) -> bool:
    """Delete the saved preferences file. Returns True if one existed."""
    path = Path(path) if path else default_prefs_path()
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False
