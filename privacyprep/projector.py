"""Field projection -- flattening a container into selectable fields and
rebuilding a filtered container from a selection map.

Selection keys are ``"<directory>:<name>"``. A selection map maps keys to
a *strip* flag; a key that is missing from the map is stripped.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from privacyprep.exif.tags import TagCatalog, get_catalog
from privacyprep.models import (
    DIRECTORIES, PRIMARY, USER_DIRECTORIES,
    Field, MetadataContainer,
)
from privacyprep.orientation import ORIENTATION_TAG

SelectionMap = Mapping[str, bool]


def field_key(directory: str, name: str) -> str:
    return f'{directory}:{name}'


def is_kept(selection: SelectionMap, key: str) -> bool:
    """A field is kept only when the map explicitly says strip=False."""
    return selection.get(key, True) is False


def project(container: MetadataContainer,
            catalog: Optional[TagCatalog] = None) -> List[Field]:
    """List the user-facing fields of a container in display order."""
    catalog = catalog or get_catalog()
    fields = []
    for directory in USER_DIRECTORIES:
        for tag_id, value in container.directory(directory).items():
            name = catalog.name_for(directory, tag_id)
            fields.append(Field(directory, tag_id, name, value))
    return fields


def rebuild(container: MetadataContainer, selection: SelectionMap,
            reoriented: bool, catalog: Optional[TagCatalog] = None) -> MetadataContainer:
    """Build a new container holding only the fields the selection keeps.

    Values are copied as-is. When the pixels have already been reoriented
    the Orientation tag is dropped whatever the selection says. The
    thumbnail directory and thumbnail bytes are never carried over.
    """
    catalog = catalog or get_catalog()
    directories: Dict[str, dict] = {name: {} for name in DIRECTORIES}
    for directory in USER_DIRECTORIES:
        out = directories[directory]
        for tag_id, value in container.directory(directory).items():
            if is_kept(selection, field_key(directory, catalog.name_for(directory, tag_id))):
                out[tag_id] = value

    if reoriented:
        directories[PRIMARY].pop(ORIENTATION_TAG, None)

    return MetadataContainer(directories=directories,
                             byte_order=container.byte_order)


def filter_fields(fields: Iterable[Field], selection: SelectionMap) -> List[Field]:
    """The "after" list: projected fields the selection keeps."""
    return [f for f in fields if is_kept(selection, f.key)]


def default_selection(fields: Iterable[Field],
                      previous: Optional[SelectionMap] = None) -> Dict[str, bool]:
    """Initial selection for a newly loaded image.

    Choices carried over from ``previous`` win; every other field of the
    image starts out stripped.
    """
    selection = dict(previous or {})
    for f in fields:
        selection.setdefault(f.key, True)
    return selection


def kept_and_removed(selection: SelectionMap,
                     fields: Iterable[Field] = ()) -> Tuple[List[str], List[str]]:
    """Ordered key lists of kept and removed fields.

    Fields of the image that the map does not mention are listed as
    removed, after the keys the map does mention.
    """
    effective = dict(selection)
    for f in fields:
        effective.setdefault(f.key, True)
    kept = [key for key, strip in effective.items() if strip is False]
    removed = [key for key, strip in effective.items() if strip is not False]
    return kept, removed
