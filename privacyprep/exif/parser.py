"""EXIF/TIFF binary parser -- stdlib only (struct module).

Reads the TIFF structure embedded in an EXIF payload: header, 0th IFD,
Exif/GPS/Interoperability sub-IFDs and the 1st (thumbnail) IFD, honoring
the declared byte order (II little-endian, MM big-endian).

Structural damage (bad header, IFD out of bounds, pointer loops) raises
MalformedMetadataError. Individual entries that fail type/count/offset
validation raise UnsupportedFieldTypeError and are skipped by the caller.
"""

import io
import logging
import struct
from typing import BinaryIO, Dict, List, Optional, Tuple

from privacyprep.errors import MalformedMetadataError, UnsupportedFieldTypeError
from privacyprep.exif.carrier import find_exif_payload
from privacyprep.models import (
    CAPTURE, INTEROP, LOCATION, PRIMARY, THUMBNAIL,
    FieldValue, MetadataContainer,
)

logger = logging.getLogger(__name__)

# EXIF type definitions: {type_id: (element_size_bytes, struct_format_char)}
TIFF_TYPES: Dict[int, Tuple[int, str]] = {
    1: (1, 'B'),    # BYTE
    2: (1, 's'),    # ASCII
    3: (2, 'H'),    # SHORT
    4: (4, 'I'),    # LONG
    5: (8, 'II'),   # RATIONAL (num/denom)
    6: (1, 'b'),    # SBYTE
    7: (1, 's'),    # UNDEFINED
    8: (2, 'h'),    # SSHORT
    9: (4, 'i'),    # SLONG
    10: (8, 'ii'),  # SRATIONAL
    11: (4, 'f'),   # FLOAT
    12: (8, 'd'),   # DOUBLE
}

# Sub-IFD pointer tags
EXIF_IFD_POINTER_TAG = 34665
GPS_IFD_POINTER_TAG = 34853
INTEROP_IFD_POINTER_TAG = 40965

# Thumbnail location tags (1st IFD)
THUMBNAIL_OFFSET_TAG = 513
THUMBNAIL_LENGTH_TAG = 514

# Tags that describe the container layout rather than the image; the
# writer regenerates them, so they never become fields.
STRUCTURAL_TAGS: Dict[str, Tuple[int, ...]] = {
    PRIMARY: (EXIF_IFD_POINTER_TAG, GPS_IFD_POINTER_TAG),
    CAPTURE: (INTEROP_IFD_POINTER_TAG,),
    LOCATION: (),
    INTEROP: (),
    THUMBNAIL: (EXIF_IFD_POINTER_TAG, GPS_IFD_POINTER_TAG,
                THUMBNAIL_OFFSET_TAG, THUMBNAIL_LENGTH_TAG),
}

# Maximum plausible tag count per IFD. Camera IFDs hold well under 100
# entries; anything far beyond that means the offset points at garbage.
MAX_IFD_ENTRIES = 1000

_POINTER_TYPES = (4, 13)  # LONG, IFD


class IFDEntry:
    """A single IFD (Image File Directory) entry."""
    __slots__ = ('tag_id', 'dtype', 'count', 'value_offset', 'entry_offset',
                 'is_inline')

    def __init__(self, tag_id: int, dtype: int, count: int,
                 value_offset: int, entry_offset: int, is_inline: bool):
        self.tag_id = tag_id
        self.dtype = dtype
        self.count = count
        self.value_offset = value_offset
        self.entry_offset = entry_offset
        self.is_inline = is_inline

    @property
    def total_size(self) -> int:
        elem_size = TIFF_TYPES.get(self.dtype, (1, 'B'))[0]
        return elem_size * self.count


class TIFFHeader:
    """Parsed TIFF header of an EXIF payload."""
    __slots__ = ('endian', 'first_ifd_offset', 'size')

    def __init__(self, endian: str, first_ifd_offset: int, size: int):
        self.endian = endian
        self.first_ifd_offset = first_ifd_offset
        self.size = size


def read_header(f: BinaryIO, size: int) -> TIFFHeader:
    """Read and validate the TIFF header at the start of the payload."""
    f.seek(0)
    data = f.read(8)
    if len(data) < 8:
        raise MalformedMetadataError('payload shorter than a TIFF header')
    bo = data[:2]
    if bo == b'II':
        endian = '<'
    elif bo == b'MM':
        endian = '>'
    else:
        raise MalformedMetadataError(f'bad byte order mark {bo!r}')

    magic, ifd_offset = struct.unpack(endian + 'HI', data[2:8])
    if magic != 42:
        raise MalformedMetadataError(f'bad TIFF magic {magic}')
    return TIFFHeader(endian, ifd_offset, size)


def read_ifd(f: BinaryIO, header: TIFFHeader,
             ifd_offset: int) -> Tuple[List[IFDEntry], int]:
    """Read all entries from an IFD. Returns (entries, next_ifd_offset)."""
    endian = header.endian
    if ifd_offset < 8 or ifd_offset + 2 > header.size:
        raise MalformedMetadataError(f'IFD offset {ifd_offset} out of bounds')

    f.seek(ifd_offset)
    num_entries = struct.unpack(endian + 'H', f.read(2))[0]
    if num_entries > MAX_IFD_ENTRIES:
        raise MalformedMetadataError(
            f'IFD at {ifd_offset} claims {num_entries} entries')
    if ifd_offset + 2 + 12 * num_entries > header.size:
        raise MalformedMetadataError(f'IFD at {ifd_offset} is truncated')

    entries = []
    for _ in range(num_entries):
        entry_offset = f.tell()
        data = f.read(12)
        tag_id, dtype, count = struct.unpack(endian + 'HHI', data[:8])
        elem_size = TIFF_TYPES.get(dtype, (1, 'B'))[0]
        total = elem_size * count
        if total <= 4:
            value_offset = entry_offset + 8
            is_inline = True
        else:
            value_offset = struct.unpack(endian + 'I', data[8:12])[0]
            is_inline = False
        entries.append(IFDEntry(tag_id, dtype, count, value_offset,
                                entry_offset, is_inline))

    # A missing next-IFD pointer at the very end of the payload reads as 0
    next_data = f.read(4)
    next_offset = struct.unpack(endian + 'I', next_data)[0] if len(next_data) == 4 else 0
    return entries, next_offset


def read_value(f: BinaryIO, header: TIFFHeader, entry: IFDEntry) -> FieldValue:
    """Decode an entry's value after validating type, count and bounds."""
    if entry.dtype not in TIFF_TYPES:
        raise UnsupportedFieldTypeError(entry.tag_id, f'unknown type {entry.dtype}')
    if entry.count == 0:
        raise UnsupportedFieldTypeError(entry.tag_id, 'zero count')
    total = entry.total_size
    if entry.value_offset + total > header.size:
        raise UnsupportedFieldTypeError(
            entry.tag_id, f'value at {entry.value_offset}+{total} out of bounds')

    f.seek(entry.value_offset)
    raw = f.read(total)
    if len(raw) != total:
        raise UnsupportedFieldTypeError(entry.tag_id, 'short read')

    if entry.dtype in (2, 7):
        return FieldValue(entry.dtype, raw)

    fmt_char = TIFF_TYPES[entry.dtype][1]
    values = struct.unpack(header.endian + fmt_char * entry.count, raw)
    if entry.dtype in (5, 10):
        values = tuple(zip(values[0::2], values[1::2]))
    return FieldValue(entry.dtype, tuple(values))


def read_pointer(f: BinaryIO, header: TIFFHeader,
                 entries: List[IFDEntry], tag_id: int) -> Optional[int]:
    """Return the sub-IFD offset held by a pointer tag, or None if absent.

    A pointer with the wrong type or count is ignored like any other bad
    entry; a pointer whose target is out of bounds is structural damage.
    """
    for entry in entries:
        if entry.tag_id != tag_id:
            continue
        if entry.dtype not in _POINTER_TYPES or entry.count != 1:
            logger.debug('Ignoring pointer tag %d with type %d count %d',
                         tag_id, entry.dtype, entry.count)
            return None
        f.seek(entry.value_offset)
        offset = struct.unpack(header.endian + 'I', f.read(4))[0]
        if offset == 0:
            return None
        if offset >= header.size:
            raise MalformedMetadataError(
                f'pointer tag {tag_id} targets {offset} beyond {header.size}')
        return offset
    return None


def read_directory(f: BinaryIO, header: TIFFHeader, entries: List[IFDEntry],
                   directory: str) -> Dict[int, FieldValue]:
    """Decode every valid, non-structural entry of an IFD, in stored order."""
    skip = STRUCTURAL_TAGS.get(directory, ())
    fields: Dict[int, FieldValue] = {}
    for entry in entries:
        if entry.tag_id in skip or entry.tag_id in fields:
            continue
        try:
            fields[entry.tag_id] = read_value(f, header, entry)
        except UnsupportedFieldTypeError as e:
            logger.debug('Dropping %s entry: %s', directory, e)
    return fields


def _read_thumbnail(f: BinaryIO, header: TIFFHeader,
                    entries: List[IFDEntry]) -> Optional[bytes]:
    offset = length = None
    for entry in entries:
        if entry.tag_id not in (THUMBNAIL_OFFSET_TAG, THUMBNAIL_LENGTH_TAG):
            continue
        try:
            value = read_value(f, header, entry)
        except UnsupportedFieldTypeError:
            return None
        if value.kind != 'unsigned' or value.count != 1:
            return None
        if entry.tag_id == THUMBNAIL_OFFSET_TAG:
            offset = value.value[0]
        else:
            length = value.value[0]
    if offset is None or not length or offset + length > header.size:
        return None
    f.seek(offset)
    return f.read(length)


def load(payload: bytes) -> MetadataContainer:
    """Parse a TIFF-form EXIF payload (no ``Exif\\0\\0`` prefix).

    Raises:
        MalformedMetadataError: on any structural problem.
    """
    f = io.BytesIO(payload)
    header = read_header(f, len(payload))
    seen = set()

    def visit(offset: int) -> Tuple[List[IFDEntry], int]:
        if offset in seen:
            raise MalformedMetadataError(f'IFD loop at offset {offset}')
        seen.add(offset)
        return read_ifd(f, header, offset)

    directories = {name: {} for name in (PRIMARY, CAPTURE, LOCATION, INTEROP, THUMBNAIL)}
    thumbnail = None

    zeroth, next_offset = visit(header.first_ifd_offset)
    directories[PRIMARY] = read_directory(f, header, zeroth, PRIMARY)

    exif_offset = read_pointer(f, header, zeroth, EXIF_IFD_POINTER_TAG)
    if exif_offset is not None:
        exif_entries, _ = visit(exif_offset)
        directories[CAPTURE] = read_directory(f, header, exif_entries, CAPTURE)
        interop_offset = read_pointer(f, header, exif_entries, INTEROP_IFD_POINTER_TAG)
        if interop_offset is not None:
            interop_entries, _ = visit(interop_offset)
            directories[INTEROP] = read_directory(f, header, interop_entries, INTEROP)

    gps_offset = read_pointer(f, header, zeroth, GPS_IFD_POINTER_TAG)
    if gps_offset is not None:
        gps_entries, _ = visit(gps_offset)
        directories[LOCATION] = read_directory(f, header, gps_entries, LOCATION)

    if next_offset:
        first, _ = visit(next_offset)
        directories[THUMBNAIL] = read_directory(f, header, first, THUMBNAIL)
        thumbnail = _read_thumbnail(f, header, first)

    return MetadataContainer(directories=directories, byte_order=header.endian,
                             thumbnail=thumbnail)


def decode(data: bytes) -> MetadataContainer:
    """Extract and parse the EXIF container of an image.

    Never raises: anything that is not a well-formed container yields the
    empty skeleton.
    """
    try:
        payload = find_exif_payload(data)
        if payload is None:
            return MetadataContainer.empty()
        return load(payload)
    except (MalformedMetadataError, struct.error) as e:
        logger.debug('Malformed EXIF container, treating as empty: %s', e)
        return MetadataContainer.empty()
