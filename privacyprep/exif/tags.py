"""Tag catalog -- maps (directory, tag_id) to a human-readable tag name.

The bundled table is loaded lazily on first lookup. A catalog built
without a table only knows a handful of fallback names; every other tag
is labelled with its decimal id, never with a guessed name.
"""

import threading
from typing import Dict, Optional

from privacyprep.models import PRIMARY, THUMBNAIL

# Names that are always known, even without the bundled table
FALLBACK_NAMES: Dict[int, str] = {
    256: 'ImageWidth',
    257: 'ImageLength',
    274: 'Orientation',
}

_FALLBACK_DIRECTORIES = (PRIMARY, THUMBNAIL)


class TagCatalog:
    """Lookup of tag names within each directory.

    Args:
        table: Mapping of directory name to ``{tag_id: name}``. ``None``
            builds a fallback-only catalog (no bundled table).
        bundled: Load the bundled table on first use. Ignored when
            ``table`` is given.
    """

    def __init__(self, table: Optional[Dict[str, Dict[int, str]]] = None,
                 bundled: bool = False):
        self._source = table
        self._bundled = bundled and table is None
        self._maps: Optional[Dict[str, Dict[int, str]]] = None
        self._reverse: Optional[Dict[str, Dict[str, int]]] = None
        self._lock = threading.Lock()

    @property
    def version(self) -> Optional[str]:
        if not self._bundled:
            return None
        from privacyprep.exif.tag_table import TAG_TABLE_VERSION
        return TAG_TABLE_VERSION

    def _ensure(self) -> Dict[str, Dict[int, str]]:
        maps = self._maps
        if maps is not None:
            return maps
        with self._lock:
            if self._maps is None:
                if self._bundled:
                    from privacyprep.exif.tag_table import TAG_TABLE
                    source = TAG_TABLE
                else:
                    source = self._source or {}
                built = {name: dict(tags) for name, tags in source.items()}
                self._reverse = {
                    name: {tag_name: tag_id for tag_id, tag_name in tags.items()}
                    for name, tags in built.items()
                }
                self._maps = built
            return self._maps

    def name_for(self, directory: str, tag_id: int) -> str:
        """Resolve a tag name, falling back to the decimal id."""
        maps = self._ensure()
        name = maps.get(directory, {}).get(tag_id)
        if name:
            return name
        if directory in _FALLBACK_DIRECTORIES and tag_id in FALLBACK_NAMES:
            return FALLBACK_NAMES[tag_id]
        return str(tag_id)

    def tag_id_for(self, directory: str, name: str) -> Optional[int]:
        """Reverse lookup of a tag id by name. Returns None if unknown."""
        self._ensure()
        tag_id = self._reverse.get(directory, {}).get(name)
        if tag_id is not None:
            return tag_id
        if directory in _FALLBACK_DIRECTORIES:
            for fid, fname in FALLBACK_NAMES.items():
                if fname == name:
                    return fid
        if name.isdigit():
            return int(name)
        return None


_catalog: Optional[TagCatalog] = None
_catalog_lock = threading.Lock()


def get_catalog() -> TagCatalog:
    """Return the process-wide catalog over the bundled tag table."""
    global _catalog
    if _catalog is None:
        with _catalog_lock:
            if _catalog is None:
                _catalog = TagCatalog(bundled=True)
    return _catalog


def name_for(directory: str, tag_id: int) -> str:
    """Resolve a tag name through the process-wide catalog."""
    return get_catalog().name_for(directory, tag_id)
