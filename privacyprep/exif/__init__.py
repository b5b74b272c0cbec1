"""EXIF container codec package.

Re-exports the public names so callers can ``from privacyprep.exif import X``.
"""

# --- parser.py: TIFF structure, IFD walking, value validation ---
from privacyprep.exif.parser import (  # noqa: F401
    TIFF_TYPES,
    EXIF_IFD_POINTER_TAG,
    GPS_IFD_POINTER_TAG,
    INTEROP_IFD_POINTER_TAG,
    IFDEntry,
    TIFFHeader,
    read_header,
    read_ifd,
    read_value,
    load,
    decode,
)

# --- writer.py: serialization and embedding ---
from privacyprep.exif.writer import (  # noqa: F401
    pack_value,
    dump,
    encode,
)

# --- carrier.py: locating/removing the EXIF block in JPEG/PNG/WebP ---
from privacyprep.exif.carrier import (  # noqa: F401
    EXIF_HEADER,
    find_exif_payload,
    insert_exif,
    strip_all,
    is_jpeg,
    is_png,
)

# --- tags.py: tag name catalog ---
from privacyprep.exif.tags import (  # noqa: F401
    FALLBACK_NAMES,
    TagCatalog,
    get_catalog,
    name_for,
)
