"""Locating, inserting and removing the EXIF block inside image files.

JPEG carries EXIF in an APP1 segment (``Exif\\0\\0`` + TIFF payload),
PNG in an ``eXIf`` chunk, WebP in an ``EXIF`` RIFF chunk. Only JPEG is
supported as an output carrier.
"""

import logging
import struct
from typing import Iterator, List, Optional, Tuple

from privacyprep.errors import EncodeUnsupportedError, MalformedMetadataError

logger = logging.getLogger(__name__)

EXIF_HEADER = b'Exif\x00\x00'
JPEG_SOI = b'\xff\xd8'
PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

_APP0 = 0xE0
_APP1 = 0xE1
_SOS = 0xDA
_EOI = 0xD9

# APP1 length field is 16 bits and counts itself
MAX_APP1_PAYLOAD = 0xFFFF - 2


def is_jpeg(data: bytes) -> bool:
    return data[:2] == JPEG_SOI


def is_png(data: bytes) -> bool:
    return data[:8] == PNG_SIGNATURE


def is_webp(data: bytes) -> bool:
    return len(data) >= 12 and data[:4] == b'RIFF' and data[8:12] == b'WEBP'


# ---------------------------------------------------------------------------
# JPEG
# ---------------------------------------------------------------------------

def iter_jpeg_segments(data: bytes) -> Iterator[Tuple[int, int, int]]:
    """Yield (marker, start, end) for each segment after SOI.

    The SOS segment is yielded with ``end == len(data)``: everything from
    the start of scan onward is entropy-coded data copied verbatim.
    """
    if not is_jpeg(data):
        raise MalformedMetadataError('missing JPEG SOI marker')
    pos = 2
    size = len(data)
    while pos < size:
        if data[pos] != 0xFF:
            raise MalformedMetadataError(f'expected marker at {pos}')
        # Fill bytes
        while pos + 1 < size and data[pos + 1] == 0xFF:
            pos += 1
        if pos + 1 >= size:
            raise MalformedMetadataError('truncated marker')
        marker = data[pos + 1]
        if marker in (_SOS, _EOI):
            yield marker, pos, size
            return
        if 0xD0 <= marker <= 0xD7 or marker == 0x01:
            yield marker, pos, pos + 2
            pos += 2
            continue
        if pos + 4 > size:
            raise MalformedMetadataError('truncated segment length')
        length = struct.unpack('>H', data[pos + 2:pos + 4])[0]
        if length < 2 or pos + 2 + length > size:
            raise MalformedMetadataError(f'bad segment length {length} at {pos}')
        yield marker, pos, pos + 2 + length
        pos += 2 + length


def _is_exif_app1(data: bytes, marker: int, start: int) -> bool:
    return marker == _APP1 and data[start + 4:start + 10] == EXIF_HEADER


def _jpeg_exif_payload(data: bytes) -> Optional[bytes]:
    for marker, start, end in iter_jpeg_segments(data):
        if _is_exif_app1(data, marker, start):
            return data[start + 10:end]
    return None


def strip_jpeg_exif(data: bytes) -> bytes:
    """Return the JPEG without any EXIF APP1 segment."""
    parts: List[bytes] = [JPEG_SOI]
    for marker, start, end in iter_jpeg_segments(data):
        if _is_exif_app1(data, marker, start):
            continue
        parts.append(data[start:end])
    return b''.join(parts)


def insert_jpeg_exif(data: bytes, payload: bytes) -> bytes:
    """Embed a TIFF-form EXIF payload as the JPEG's only EXIF segment.

    The segment goes right after SOI, or after a leading JFIF APP0.
    """
    body = EXIF_HEADER + payload
    if len(body) > MAX_APP1_PAYLOAD:
        raise EncodeUnsupportedError(
            f'EXIF payload of {len(body)} bytes exceeds the APP1 limit')
    segment = b'\xff\xe1' + struct.pack('>H', len(body) + 2) + body

    stripped = strip_jpeg_exif(data)
    insert_at = 2
    for marker, start, end in iter_jpeg_segments(stripped):
        if marker == _APP0:
            insert_at = end
        break
    return stripped[:insert_at] + segment + stripped[insert_at:]


# ---------------------------------------------------------------------------
# PNG / WebP
# ---------------------------------------------------------------------------

def iter_png_chunks(data: bytes) -> Iterator[Tuple[bytes, int, int]]:
    """Yield (chunk_type, start, end) for each PNG chunk."""
    if not is_png(data):
        raise MalformedMetadataError('missing PNG signature')
    pos = 8
    size = len(data)
    while pos < size:
        if pos + 8 > size:
            raise MalformedMetadataError('truncated PNG chunk header')
        length = struct.unpack('>I', data[pos:pos + 4])[0]
        ctype = data[pos + 4:pos + 8]
        end = pos + 12 + length
        if end > size:
            raise MalformedMetadataError(f'PNG chunk {ctype!r} overruns file')
        yield ctype, pos, end
        pos = end
        if ctype == b'IEND':
            return


def strip_png_exif(data: bytes) -> bytes:
    parts: List[bytes] = [PNG_SIGNATURE]
    last = 8
    for ctype, start, end in iter_png_chunks(data):
        if ctype != b'eXIf':
            parts.append(data[start:end])
        last = end
    parts.append(data[last:])
    return b''.join(parts)


def _webp_exif_payload(data: bytes) -> Optional[bytes]:
    pos = 12
    size = len(data)
    while pos + 8 <= size:
        fourcc = data[pos:pos + 4]
        length = struct.unpack('<I', data[pos + 4:pos + 8])[0]
        if pos + 8 + length > size:
            raise MalformedMetadataError(f'WebP chunk {fourcc!r} overruns file')
        if fourcc == b'EXIF':
            return data[pos + 8:pos + 8 + length]
        pos += 8 + length + (length & 1)
    return None


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def find_exif_payload(data: bytes) -> Optional[bytes]:
    """Return the TIFF-form EXIF payload embedded in ``data``, if any.

    Accepts JPEG, PNG, WebP, a bare ``Exif\\0\\0`` block or a bare TIFF
    structure. Raises MalformedMetadataError if the carrier framing itself
    is broken.
    """
    payload = None
    if is_jpeg(data):
        payload = _jpeg_exif_payload(data)
    elif is_png(data):
        for ctype, start, end in iter_png_chunks(data):
            if ctype == b'eXIf':
                payload = data[start + 8:end - 4]
                break
    elif is_webp(data):
        payload = _webp_exif_payload(data)
    elif data[:6] == EXIF_HEADER:
        payload = data[6:]
    elif data[:4] in (b'II*\x00', b'MM\x00*'):
        payload = data

    if payload is not None and payload[:6] == EXIF_HEADER:
        payload = payload[6:]
    return payload


def strip_all(data: bytes) -> bytes:
    """Return ``data`` with no EXIF container.

    Carriers without an EXIF slot, and carriers whose framing cannot be
    parsed, are returned unchanged.
    """
    try:
        if is_jpeg(data):
            return strip_jpeg_exif(data)
        if is_png(data):
            return strip_png_exif(data)
    except MalformedMetadataError as e:
        logger.warning('Could not strip EXIF, carrier left unchanged: %s', e)
    return data


def insert_exif(carrier: bytes, payload: bytes) -> bytes:
    """Embed an EXIF payload in a carrier image.

    Raises:
        EncodeUnsupportedError: if the carrier cannot hold EXIF.
    """
    if not is_jpeg(carrier):
        raise EncodeUnsupportedError('only JPEG carriers can hold EXIF')
    try:
        return insert_jpeg_exif(carrier, payload)
    except MalformedMetadataError as e:
        raise EncodeUnsupportedError(f'carrier JPEG is malformed: {e}') from e
