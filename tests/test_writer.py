"""Tests for EXIF serialization and embedding."""

import pytest

from privacyprep.errors import EncodeUnsupportedError
from privacyprep.exif.carrier import find_exif_payload, is_png
from privacyprep.exif.parser import decode, load
from privacyprep.exif.writer import dump, encode, pack_value
from privacyprep.models import (
    CAPTURE, INTEROP, LOCATION, PRIMARY, THUMBNAIL,
    FieldValue, MetadataContainer,
)
from privacyprep.projector import project, rebuild
from tests.conftest import build_exif, entry, jpeg_bytes, png_bytes

VALUES_BY_TYPE = [
    (1, (0, 7, 255)),
    (2, 'Acme'),
    (3, (6, 65535)),
    (4, (1, 4294967295)),
    (5, ((1, 250), (3, 4))),
    (6, (-128, 0, 127)),
    (7, b'\x01\x02\x03\x04\x05'),
    (8, (-32768, 12)),
    (9, (-5, 2147483647)),
    (10, ((-1, 3),)),
    (11, (1.5, -0.25)),
    (12, (3.141592653589793,)),
]


def _container(byte_order='<', **dirs):
    return MetadataContainer(directories={k: dict(v) for k, v in dirs.items()},
                             byte_order=byte_order)


class TestPackValue:
    def test_ascii_kept_verbatim(self):
        count, raw = pack_value(FieldValue(2, b'Acme\x00'), '<')
        assert count == 5
        assert raw == b'Acme\x00'

    def test_short_big_endian(self):
        assert pack_value(FieldValue(3, (6,)), '>') == (1, b'\x00\x06')

    def test_rational_pairs(self):
        count, raw = pack_value(FieldValue(5, ((1, 250), (3, 4))), '<')
        assert count == 2
        assert len(raw) == 16

    def test_value_out_of_range(self):
        with pytest.raises(EncodeUnsupportedError):
            pack_value(FieldValue(3, (70000,)), '<')

    def test_unknown_type(self):
        with pytest.raises(EncodeUnsupportedError):
            pack_value(FieldValue(42, (1,)), '<')


class TestDump:
    def test_round_trip_all_directories(self):
        original = _container(
            byte_order='>',
            primary={271: FieldValue(2, b'Acme\x00'), 274: FieldValue(3, (1,))},
            capture={33434: FieldValue(5, ((1, 250),)),
                     37500: FieldValue(7, b'\x01\x02\x03\x04\x05')},
            location={1: FieldValue(2, b'N\x00'),
                      2: FieldValue(5, ((40, 1), (26, 1), (4614, 100)))},
            interop={1: FieldValue(2, b'R98\x00')},
        )
        parsed = load(dump(original))
        assert parsed.byte_order == '>'
        for name in (PRIMARY, CAPTURE, LOCATION, INTEROP):
            assert parsed.directory(name) == original.directory(name)

    @pytest.mark.parametrize('endian', ['<', '>'])
    @pytest.mark.parametrize('type_id,value', VALUES_BY_TYPE)
    def test_round_trip_every_type(self, type_id, value, endian):
        raw = entry(37500, type_id, value, endian)
        source = load(build_exif([entry(271, 2, 'Acme', endian)], exif=[raw],
                                 endian=endian))
        kept = rebuild(source, {f.key: False for f in project(source)}, False)

        payload = dump(kept)
        parsed = load(payload)
        assert parsed.byte_order == endian
        assert parsed.directories == source.directories
        assert pack_value(parsed.directory(CAPTURE)[37500], endian) == (raw[2], raw[3])
        assert dump(parsed) == payload

    def test_round_trip_preserves_parsed_payload(self, camera_payload):
        first = load(camera_payload)
        second = load(dump(first))
        assert second.directories == first.directories

    def test_only_primary_has_no_pointers(self):
        payload = dump(_container(primary={271: FieldValue(2, b'Acme\x00')}))
        container = load(payload)
        assert list(container.directory(PRIMARY)) == [271]
        # header + one-entry IFD + 5-byte value padded to 6
        assert len(payload) == 8 + 2 + 12 + 4 + 6

    def test_interop_forces_capture_directory(self):
        payload = dump(_container(interop={1: FieldValue(2, b'R98\x00')}))
        container = load(payload)
        assert container.directory(INTEROP)[1].value == b'R98\x00'
        assert container.directory(CAPTURE) == {}

    def test_thumbnail_round_trip(self):
        thumb = b'\xff\xd8tiny\xff\xd9'
        original = MetadataContainer(
            directories={PRIMARY: {271: FieldValue(2, b'Acme\x00')},
                         THUMBNAIL: {259: FieldValue(3, (6,))}},
            byte_order='<', thumbnail=thumb)
        parsed = load(dump(original))
        assert parsed.thumbnail == thumb
        assert parsed.directory(THUMBNAIL) == {259: FieldValue(3, (6,))}

    def test_odd_length_values_are_word_aligned(self):
        payload = dump(_container(primary={271: FieldValue(2, b'Acme\x00'),
                                           272: FieldValue(2, b'Model\x00')}))
        container = load(payload)
        assert container.directory(PRIMARY)[272].value == b'Model\x00'


class TestEncode:
    def test_embeds_into_jpeg(self):
        container = _container(primary={271: FieldValue(2, b'Acme\x00')})
        out = encode(container, jpeg_bytes())
        assert decode(out).directory(PRIMARY) == container.directory(PRIMARY)

    def test_replaces_existing_exif(self, camera_jpeg):
        container = _container(primary={271: FieldValue(2, b'Other\x00')})
        out = encode(container, camera_jpeg)
        parsed = decode(out)
        assert parsed.directory(PRIMARY) == {271: FieldValue(2, b'Other\x00')}
        assert parsed.directory(LOCATION) == {}

    def test_empty_container_strips(self, camera_jpeg):
        out = encode(MetadataContainer.empty(), camera_jpeg)
        assert find_exif_payload(out) is None

    def test_png_carrier_unchanged(self):
        carrier = png_bytes()
        container = _container(primary={271: FieldValue(2, b'Acme\x00')})
        out = encode(container, carrier)
        assert is_png(out)
        assert out == carrier

    def test_oversized_payload_not_embedded(self):
        carrier = jpeg_bytes()
        container = _container(capture={37500: FieldValue(7, b'\x00' * 70000)})
        assert encode(container, carrier) == carrier
