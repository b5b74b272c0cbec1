"""Shared test fixtures -- synthetic EXIF payloads and JPEG/PNG carriers."""

import io
import struct

import numpy as np
import pytest
from PIL import Image

from privacyprep.exif.tags import TagCatalog, get_catalog

EXIF_POINTER = 34665
GPS_POINTER = 34853
INTEROP_POINTER = 40965

_FORMATS = {1: 'B', 3: 'H', 4: 'I', 5: 'II', 6: 'b', 8: 'h', 9: 'i',
            10: 'ii', 11: 'f', 12: 'd'}


def entry(tag_id, type_id, value, endian='<'):
    """Pack one IFD entry as (tag_id, type_id, count, raw_bytes).

    ASCII takes a str (NUL terminator added), UNDEFINED takes bytes,
    numeric types take a tuple (rationals as (num, den) pairs).
    """
    if type_id == 2:
        raw = value.encode('ascii') + b'\x00'
        return tag_id, type_id, len(raw), raw
    if type_id == 7:
        return tag_id, type_id, len(value), value
    items = value
    if type_id in (5, 10):
        items = [part for pair in value for part in pair]
    raw = struct.pack(endian + _FORMATS[type_id] * len(value), *items)
    return tag_id, type_id, len(value), raw


def _ifd_size(entries):
    ool = sum(len(raw) + len(raw) % 2 for _, _, _, raw in entries if len(raw) > 4)
    return 2 + 12 * len(entries) + 4 + ool


def _ifd_bytes(entries, offset, endian, next_offset=0):
    data_offset = offset + 2 + 12 * len(entries) + 4
    out = struct.pack(endian + 'H', len(entries))
    data = b''
    for tag_id, type_id, count, raw in entries:
        out += struct.pack(endian + 'HHI', tag_id, type_id, count)
        if len(raw) <= 4:
            out += raw.ljust(4, b'\x00')
        else:
            out += struct.pack(endian + 'I', data_offset + len(data))
            data += raw + b'\x00' * (len(raw) % 2)
    out += struct.pack(endian + 'I', next_offset)
    return out + data


def build_exif(zeroth, exif=None, gps=None, interop=None, first=None,
               thumbnail=b'', endian='<'):
    """Build a TIFF-form EXIF payload (no ``Exif\\0\\0`` prefix).

    Each directory is a list of ``entry()`` tuples; ``None`` omits the
    directory and its pointer. Pointer tags are added automatically.
    """
    zeroth = list(zeroth)
    if interop is not None and exif is None:
        exif = []
    exif = list(exif) if exif is not None else None
    first = list(first) if first is not None else None

    def pointer(tag_id, value=0):
        return tag_id, 4, 1, struct.pack(endian + 'I', value)

    if exif is not None:
        zeroth.append(pointer(EXIF_POINTER))
    if gps is not None:
        zeroth.append(pointer(GPS_POINTER))
    if interop is not None:
        exif.append(pointer(INTEROP_POINTER))
    if thumbnail:
        first = first or []
        first.append(pointer(513))
        first.append(pointer(514, len(thumbnail)))

    offsets = {}
    pos = 8
    for name, entries in (('zeroth', zeroth), ('exif', exif), ('gps', gps),
                          ('interop', interop), ('first', first)):
        if entries is not None:
            offsets[name] = pos
            pos += _ifd_size(entries)
    thumb_offset = pos

    def resolve(entries, targets):
        return [pointer(tag, targets[tag]) if tag in targets and raw == b'\x00' * 4
                else (tag, typ, count, raw) for tag, typ, count, raw in entries]

    zeroth = resolve(zeroth, {EXIF_POINTER: offsets.get('exif'),
                              GPS_POINTER: offsets.get('gps')})
    if exif is not None:
        exif = resolve(exif, {INTEROP_POINTER: offsets.get('interop')})
    if first is not None:
        first = resolve(first, {513: thumb_offset})

    bo = b'II' if endian == '<' else b'MM'
    out = bo + struct.pack(endian + 'HI', 42, 8)
    out += _ifd_bytes(zeroth, 8, endian, offsets.get('first', 0))
    for name, entries in (('exif', exif), ('gps', gps), ('interop', interop),
                          ('first', first)):
        if entries is not None:
            out += _ifd_bytes(entries, offsets[name], endian)
    return out + (thumbnail or b'')


def make_image(width=4, height=2, mode='RGB'):
    """An image whose every pixel is distinct (for orientation checks)."""
    channels = {'RGB': 3, 'RGBA': 4, 'L': 1}[mode]
    values = np.arange(width * height * channels, dtype=np.uint8)
    if mode == 'L':
        return Image.fromarray(values.reshape(height, width))
    return Image.fromarray(values.reshape(height, width, channels))


def jpeg_bytes(image=None, quality=95):
    buf = io.BytesIO()
    (image or make_image(16, 8)).save(buf, format='JPEG', quality=quality)
    return buf.getvalue()


def png_bytes(image=None, exif_payload=None):
    buf = io.BytesIO()
    kwargs = {}
    if exif_payload is not None:
        kwargs['exif'] = b'Exif\x00\x00' + exif_payload
    (image or make_image()).save(buf, format='PNG', **kwargs)
    return buf.getvalue()


def with_app1(jpeg, payload):
    """Insert an EXIF APP1 segment right after SOI."""
    body = b'Exif\x00\x00' + payload
    return jpeg[:2] + b'\xff\xe1' + struct.pack('>H', len(body) + 2) + body + jpeg[2:]


def with_comment(jpeg, text):
    """Insert a COM segment right after SOI."""
    return jpeg[:2] + b'\xff\xfe' + struct.pack('>H', len(text) + 2) + text + jpeg[2:]


def jpeg_with_exif(payload, image=None):
    return with_app1(jpeg_bytes(image), payload)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog():
    return get_catalog()


@pytest.fixture
def fallback_catalog():
    return TagCatalog()


@pytest.fixture
def camera_payload():
    """Make/Model/Orientation=6, an exposure block, GPS and interop."""
    e = '<'
    return build_exif(
        zeroth=[entry(271, 2, 'Acme', e), entry(272, 2, 'Snap 3000', e),
                entry(274, 3, (6,), e), entry(306, 2, '2024:05:01 10:00:00', e)],
        exif=[entry(33434, 5, ((1, 250),), e), entry(33437, 5, ((28, 10),), e),
              entry(36867, 2, '2024:05:01 10:00:00', e)],
        gps=[entry(1, 2, 'N', e), entry(2, 5, ((40, 1), (26, 1), (4614, 100)), e)],
        interop=[entry(1, 2, 'R98', e)],
        endian=e,
    )


@pytest.fixture
def camera_jpeg(camera_payload):
    return jpeg_with_exif(camera_payload)


@pytest.fixture
def camera_file(tmp_path, camera_jpeg):
    path = tmp_path / 'photo.jpg'
    path.write_bytes(camera_jpeg)
    return path
