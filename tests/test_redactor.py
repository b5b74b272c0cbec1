"""Tests for file-level and batch redaction."""

import json

import pytest

from privacyprep import redactor
from privacyprep.exif.parser import decode
from privacyprep.models import LOCATION, PRIMARY
from privacyprep.redactor import (
    collect_image_files, output_name, redact_batch, redact_file,
)
from tests.conftest import jpeg_with_exif, png_bytes


def _make_tree(root, payload, count=3):
    (root / 'sub').mkdir(parents=True)
    for i in range(count):
        (root / f'img_{i}.jpg').write_bytes(jpeg_with_exif(payload))
    (root / 'sub' / 'nested.png').write_bytes(png_bytes())
    (root / 'notes.txt').write_text('not an image')


class TestCollect:
    def test_directory(self, tmp_path, camera_payload):
        _make_tree(tmp_path, camera_payload)
        files = collect_image_files(tmp_path)
        assert [f.name for f in files] == ['img_0.jpg', 'img_1.jpg', 'img_2.jpg',
                                           'nested.png']

    def test_single_file(self, camera_file):
        assert collect_image_files(camera_file) == [camera_file]

    def test_output_name(self):
        assert output_name('photo.jpg', 'jpeg') == 'photo.clean.jpg'
        assert output_name('IMG_1.HEIC.png', 'png') == 'IMG_1.HEIC.clean.png'


class TestRedactFile:
    def test_writes_clean_copy(self, tmp_path, camera_file):
        out_dir = tmp_path / 'out'
        result = redact_file(camera_file, out_dir, selection={'primary:Make': False})
        assert result.error is None
        assert result.output_path == out_dir / 'photo.clean.jpg'
        container = decode(result.output_path.read_bytes())
        assert list(container.directory(PRIMARY)) == [271]
        assert container.directory(LOCATION) == {}
        assert result.fields_kept == 1
        assert result.fields_removed == 9
        assert result.reoriented

    def test_preset_with_override(self, tmp_path, camera_file):
        result = redact_file(camera_file, tmp_path / 'out', preset='safe',
                             selection={'primary:Model': True})
        container = decode(result.output_path.read_bytes())
        assert 271 in container.directory(PRIMARY)
        assert 272 not in container.directory(PRIMARY)
        assert container.directory(LOCATION) == {}

    def test_report_next_to_output(self, tmp_path, camera_file):
        result = redact_file(camera_file, tmp_path / 'out', include_report=True,
                             pdf_report=True)
        assert result.report_path == tmp_path / 'out' / 'photo.redaction-report.json'
        doc = json.loads(result.report_path.read_text())
        assert doc['sourceFile'] == 'photo.jpg'
        assert result.report_path.with_suffix('.pdf').exists()

    def test_unreadable_file_recorded(self, tmp_path):
        bad = tmp_path / 'bad.jpg'
        bad.write_bytes(b'garbage')
        result = redact_file(bad, tmp_path / 'out')
        assert result.error
        assert result.output_path is None

    def test_unknown_preset_recorded(self, tmp_path, camera_file):
        result = redact_file(camera_file, tmp_path / 'out', preset='nope')
        assert 'Unknown preset' in result.error


class TestRedactBatch:
    def test_sequential(self, tmp_path, camera_payload):
        src = tmp_path / 'src'
        _make_tree(src, camera_payload)
        calls = []
        batch = redact_batch(src, tmp_path / 'out',
                             progress_callback=lambda *a: calls.append(a))
        assert batch.total_files == 4
        assert batch.files_cleaned == 4
        assert batch.files_errored == 0
        assert [c[0] for c in calls] == [1, 2, 3, 4]
        assert (tmp_path / 'out' / 'sub' / 'nested.clean.png').exists()

    def test_parallel_keeps_order(self, tmp_path, camera_payload):
        src = tmp_path / 'src'
        _make_tree(src, camera_payload, count=6)
        batch = redact_batch(src, tmp_path / 'out', workers=4)
        assert [r.source_path for r in batch.results] == collect_image_files(src)
        assert batch.files_cleaned == 7

    def test_errors_counted(self, tmp_path, camera_payload):
        src = tmp_path / 'src'
        _make_tree(src, camera_payload, count=1)
        (src / 'broken.jpg').write_bytes(b'\xff\xd8garbage')
        batch = redact_batch(src, tmp_path / 'out', workers=2)
        assert batch.files_errored == 1
        assert batch.files_cleaned == 2

    @pytest.mark.parametrize('workers', [1, 3])
    def test_unexpected_error_stays_per_file(self, tmp_path, camera_payload,
                                             monkeypatch, workers):
        src = tmp_path / 'src'
        _make_tree(src, camera_payload, count=2)
        real = redactor.redact_file

        def flaky(filepath, out, **options):
            if filepath.name == 'img_1.jpg':
                raise RuntimeError('decoder crashed')
            return real(filepath, out, **options)

        monkeypatch.setattr(redactor, 'redact_file', flaky)
        batch = redact_batch(src, tmp_path / 'out', workers=workers)
        assert batch.files_errored == 1
        assert batch.files_cleaned == 2
        failed = [r for r in batch.results if r.error]
        assert [r.source_path.name for r in failed] == ['img_1.jpg']
        assert failed[0].error == 'decoder crashed'

    def test_empty_directory(self, tmp_path):
        batch = redact_batch(tmp_path, tmp_path / 'out')
        assert batch.total_files == 0
        assert batch.results == []

