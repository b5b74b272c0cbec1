"""Field categories and selection presets.

Categories group fields for display. Presets turn a field list into a
complete selection map in one step.
"""

import re
from typing import Callable, Dict, Iterable, List

from privacyprep.models import Field

# Checked in order; first match wins
CATEGORY_PATTERNS = [
    (re.compile(r'GPS'), 'Location'),
    (re.compile(r'DateTime'), 'Time'),
    (re.compile(r'Make|Model|FNumber|Focal|Exposure|Shutter|ISO'), 'Camera'),
    (re.compile(r'Software|Artist|Copyright'), 'Attribution'),
    (re.compile(r'Orientation'), 'Orientation'),
]

OTHER = 'Other'

_SAFE_STRIP = re.compile(r'GPS|DateTime')
_CAMERA_KEEP = re.compile(
    r'Make|Model|FNumber|Focal|Exposure|Shutter|ISO|Software|Artist|Copyright')


def category_for_key(key: str) -> str:
    for pattern, category in CATEGORY_PATTERNS:
        if pattern.search(key):
            return category
    return OTHER


def group_by_category(fields: Iterable[Field]) -> Dict[str, List[Field]]:
    """Group fields by category; categories sorted by name."""
    groups: Dict[str, List[Field]] = {}
    for f in fields:
        groups.setdefault(category_for_key(f.key), []).append(f)
    return {name: groups[name] for name in sorted(groups)}


def strip_all_preset(fields: Iterable[Field]) -> Dict[str, bool]:
    """Strip every field."""
    return {f.key: True for f in fields}


def safe_preset(fields: Iterable[Field]) -> Dict[str, bool]:
    """Strip location and timestamps, keep everything else."""
    return {f.key: bool(_SAFE_STRIP.search(f.key)) for f in fields}


def keep_camera_preset(fields: Iterable[Field]) -> Dict[str, bool]:
    """Keep camera settings and attribution, strip everything else."""
    return {f.key: not _CAMERA_KEEP.search(f.key) for f in fields}


PRESETS: Dict[str, Callable[[Iterable[Field]], Dict[str, bool]]] = {
    'strip-all': strip_all_preset,
    'safe': safe_preset,
    'keep-camera': keep_camera_preset,
}


def apply_preset(name: str, fields: Iterable[Field]) -> Dict[str, bool]:
    """Build a selection map from a named preset.

    Raises:
        ValueError: if the preset name is unknown.
    """
    try:
        preset = PRESETS[name]
    except KeyError:
        raise ValueError(f'Unknown preset: {name!r} '
                         f'(expected one of {", ".join(PRESETS)})') from None
    return preset(list(fields))
