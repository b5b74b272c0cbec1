"""EXIF serializer -- builds a TIFF-form payload from a MetadataContainer.

Layout: header, 0th IFD, Exif IFD, GPS IFD, Interoperability IFD, 1st IFD,
thumbnail bytes. Each IFD is followed by its out-of-line values, which are
word aligned. Pointer tags are regenerated from the layout; only non-empty
directories are written.
"""

import logging
import struct
from typing import Dict, List, Tuple

from privacyprep.errors import EncodeUnsupportedError
from privacyprep.exif.carrier import insert_exif, strip_all
from privacyprep.exif.parser import (
    EXIF_IFD_POINTER_TAG, GPS_IFD_POINTER_TAG, INTEROP_IFD_POINTER_TAG,
    STRUCTURAL_TAGS, THUMBNAIL_LENGTH_TAG, THUMBNAIL_OFFSET_TAG, TIFF_TYPES,
)
from privacyprep.models import (
    CAPTURE, INTEROP, LOCATION, PRIMARY, THUMBNAIL,
    FieldValue, MetadataContainer,
)

logger = logging.getLogger(__name__)

# (tag_id, type_id, count, packed_value_bytes)
RawEntry = Tuple[int, int, int, bytes]

_LONG = 4


def pack_value(value: FieldValue, endian: str) -> Tuple[int, bytes]:
    """Pack a FieldValue. Returns (count, bytes).

    Raises:
        EncodeUnsupportedError: if the value does not fit its declared type.
    """
    if value.type_id not in TIFF_TYPES:
        raise EncodeUnsupportedError(f'unknown EXIF type {value.type_id}')
    if value.type_id in (2, 7):
        if not isinstance(value.value, bytes):
            raise EncodeUnsupportedError('ASCII/UNDEFINED values must be bytes')
        return len(value.value), value.value

    fmt_char = TIFF_TYPES[value.type_id][1]
    items = value.value
    if value.type_id in (5, 10):
        items = [part for pair in items for part in pair]
    try:
        packed = struct.pack(endian + fmt_char * value.count, *items)
    except struct.error as e:
        raise EncodeUnsupportedError(f'value does not fit type {value.type_id}: {e}') from e
    return value.count, packed


def _aligned(n: int) -> int:
    return n + (n & 1)


def _ifd_size(entries: List[RawEntry]) -> int:
    ool = sum(_aligned(len(raw)) for _, _, _, raw in entries if len(raw) > 4)
    return 2 + 12 * len(entries) + 4 + ool


def _build_ifd(entries: List[RawEntry], offset: int, endian: str,
               next_offset: int = 0) -> bytes:
    """Serialize one IFD located at ``offset``, values following it."""
    entries = sorted(entries, key=lambda e: e[0])
    data_offset = offset + 2 + 12 * len(entries) + 4
    out = [struct.pack(endian + 'H', len(entries))]
    data = []
    for tag_id, type_id, count, raw in entries:
        out.append(struct.pack(endian + 'HHI', tag_id, type_id, count))
        if len(raw) <= 4:
            out.append(raw.ljust(4, b'\x00'))
        else:
            out.append(struct.pack(endian + 'I', data_offset))
            chunk = raw if len(raw) % 2 == 0 else raw + b'\x00'
            data.append(chunk)
            data_offset += len(chunk)
    out.append(struct.pack(endian + 'I', next_offset))
    return b''.join(out) + b''.join(data)


def _raw_entries(fields: Dict[int, FieldValue], directory: str,
                 endian: str) -> List[RawEntry]:
    skip = STRUCTURAL_TAGS.get(directory, ())
    entries = []
    for tag_id, value in fields.items():
        if tag_id in skip:
            continue
        count, raw = pack_value(value, endian)
        entries.append((tag_id, value.type_id, count, raw))
    return entries


def _pointer(tag_id: int, offset: int, endian: str) -> RawEntry:
    return (tag_id, _LONG, 1, struct.pack(endian + 'I', offset))


def dump(container: MetadataContainer) -> bytes:
    """Serialize a container to a TIFF-form EXIF payload.

    Raises:
        EncodeUnsupportedError: if a value cannot be packed.
    """
    endian = container.byte_order if container.byte_order in ('<', '>') else '>'
    dirs = container.directories

    zeroth = _raw_entries(dirs[PRIMARY], PRIMARY, endian)
    exif = _raw_entries(dirs[CAPTURE], CAPTURE, endian)
    gps = _raw_entries(dirs[LOCATION], LOCATION, endian)
    interop = _raw_entries(dirs[INTEROP], INTEROP, endian)
    first = _raw_entries(dirs[THUMBNAIL], THUMBNAIL, endian)
    thumbnail = container.thumbnail or b''

    has_interop = bool(interop)
    has_exif = bool(exif) or has_interop
    has_gps = bool(gps)
    has_first = bool(first) or bool(thumbnail)

    # Placeholder pointers first: sizes do not depend on pointer values
    if has_exif:
        zeroth.append(_pointer(EXIF_IFD_POINTER_TAG, 0, endian))
    if has_gps:
        zeroth.append(_pointer(GPS_IFD_POINTER_TAG, 0, endian))
    if has_interop:
        exif.append(_pointer(INTEROP_IFD_POINTER_TAG, 0, endian))
    if thumbnail:
        first.append(_pointer(THUMBNAIL_OFFSET_TAG, 0, endian))
        first.append(_pointer(THUMBNAIL_LENGTH_TAG, len(thumbnail), endian))

    zeroth_offset = 8
    exif_offset = zeroth_offset + _ifd_size(zeroth)
    gps_offset = exif_offset + (_ifd_size(exif) if has_exif else 0)
    interop_offset = gps_offset + (_ifd_size(gps) if has_gps else 0)
    first_offset = interop_offset + (_ifd_size(interop) if has_interop else 0)
    thumb_offset = first_offset + (_ifd_size(first) if has_first else 0)

    def resolve(entries: List[RawEntry], targets: Dict[int, int]) -> List[RawEntry]:
        return [_pointer(tag, targets[tag], endian) if tag in targets and typ == _LONG
                and count == 1 else (tag, typ, count, raw)
                for tag, typ, count, raw in entries]

    zeroth = resolve(zeroth, {EXIF_IFD_POINTER_TAG: exif_offset,
                              GPS_IFD_POINTER_TAG: gps_offset})
    exif = resolve(exif, {INTEROP_IFD_POINTER_TAG: interop_offset})
    first = resolve(first, {THUMBNAIL_OFFSET_TAG: thumb_offset})

    bo = b'II' if endian == '<' else b'MM'
    parts = [bo + struct.pack(endian + 'HI', 42, zeroth_offset)]
    parts.append(_build_ifd(zeroth, zeroth_offset, endian,
                            next_offset=first_offset if has_first else 0))
    if has_exif:
        parts.append(_build_ifd(exif, exif_offset, endian))
    if has_gps:
        parts.append(_build_ifd(gps, gps_offset, endian))
    if has_interop:
        parts.append(_build_ifd(interop, interop_offset, endian))
    if has_first:
        parts.append(_build_ifd(first, first_offset, endian))
        parts.append(thumbnail)
    return b''.join(parts)


def encode(container: MetadataContainer, carrier: bytes) -> bytes:
    """Embed ``container`` into a copy of ``carrier``.

    An empty container yields the carrier with no EXIF section at all.
    If serialization fails or the carrier cannot hold EXIF, the carrier is
    returned unchanged.
    """
    if container.is_empty():
        return strip_all(carrier)
    try:
        payload = dump(container)
        return insert_exif(carrier, payload)
    except EncodeUnsupportedError as e:
        logger.info('EXIF not embedded: %s', e)
        return carrier
