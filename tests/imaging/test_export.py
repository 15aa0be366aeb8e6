"""Tests for checkpoint image export."""

import logging

import numpy as np
import pytest
from PIL import Image

from domain.errors import ConfigurationError
from imaging.export import CheckpointExporter, resolve_image_format, snapshot_to_image


def make_snapshot() -> np.ndarray:
    """2x2 RGBA: red top-left, everything else empty."""
    snap = np.zeros((2, 2, 4), dtype=np.uint8)
    snap[0, 0] = (255, 0, 0, 255)
    return snap


class TestResolveImageFormat:
    """Tests for resolve_image_format()."""

    def test_png(self):
        assert resolve_image_format('png') == 'PNG'

    def test_jpg_alias(self):
        assert resolve_image_format('.JPG') == 'JPEG'

    def test_unknown(self):
        with pytest.raises(ConfigurationError):
            resolve_image_format('nope')

    def test_read_only_format_rejected(self):
        """PSD opens in Pillow but has no writer."""
        with pytest.raises(ConfigurationError, match='not written'):
            resolve_image_format('psd')


class TestSnapshotToImage:
    """Tests for snapshot_to_image()."""

    def test_png_keeps_transparency(self):
        img = snapshot_to_image(make_snapshot(), 'PNG')
        assert img.mode == 'RGBA'
        assert img.getpixel((0, 0)) == (255, 0, 0, 255)
        assert img.getpixel((1, 1))[3] == 0

    def test_jpeg_flattened_on_background(self):
        img = snapshot_to_image(make_snapshot(), 'JPEG')
        assert img.mode == 'RGB'
        assert img.getpixel((0, 0)) == (255, 0, 0)
        assert img.getpixel((1, 1)) == (0, 0, 0)


class TestCheckpointExporter:
    """Tests for CheckpointExporter."""

    def test_writes_named_file(self, tmp_path):
        with CheckpointExporter(tmp_path / 'out', 'run', 'png') as exporter:
            exporter.submit(3, 10, make_snapshot())
        path = tmp_path / 'out' / 'run_3.png'
        assert exporter.written == [path]
        assert exporter.failures == []
        with Image.open(path) as img:
            assert img.size == (2, 2)
            assert img.getpixel((0, 0)) == (255, 0, 0, 255)

    def test_unknown_format_fails_at_construction(self, tmp_path):
        with pytest.raises(ConfigurationError):
            CheckpointExporter(tmp_path, 'run', 'xyz')

    def test_write_failure_is_logged_and_isolated(self, tmp_path, caplog):
        """A blocked path fails that checkpoint only; later ones still go through."""
        blocker = tmp_path / 'blocked'
        blocker.write_text('not a directory', encoding='utf-8')
        exporter = CheckpointExporter(blocker, 'run', 'png')
        with caplog.at_level(logging.ERROR, logger='imaging.export'):
            exporter.submit(0, 1, make_snapshot())
            exporter.close()
        assert len(exporter.failures) == 1
        assert exporter.failures[0].checkpoint_id == 0
        assert 'Checkpoint export failed' in caplog.text

        retry = CheckpointExporter(tmp_path / 'ok', 'run', 'png')
        retry.submit(1, 2, make_snapshot())
        retry.close()
        assert retry.failures == []
        assert (tmp_path / 'ok' / 'run_1.png').exists()

    def test_failure_does_not_stop_later_checkpoints(self, tmp_path, monkeypatch):
        exporter = CheckpointExporter(tmp_path, 'run', 'png')
        original = snapshot_to_image

        def flaky(snapshot, fmt):
            if snapshot[0, 0, 0] == 1:
                msg = 'disk full'
                raise OSError(msg)
            return original(snapshot, fmt)

        monkeypatch.setattr('imaging.export.snapshot_to_image', flaky)
        bad = make_snapshot()
        bad[0, 0, 0] = 1
        exporter.submit(0, 1, bad)
        exporter.submit(1, 3, make_snapshot())
        exporter.close()
        assert [f.checkpoint_id for f in exporter.failures] == [0]
        assert exporter.written == [tmp_path / 'run_1.png']

    def test_unexpected_writer_error_is_collected(self, tmp_path, monkeypatch, caplog):
        """Errors outside OSError/ValueError still end up in failures."""

        def broken(snapshot, fmt):
            raise KeyError(fmt)

        monkeypatch.setattr('imaging.export.snapshot_to_image', broken)
        exporter = CheckpointExporter(tmp_path, 'run', 'png')
        with caplog.at_level(logging.ERROR, logger='imaging.export'):
            exporter.submit(0, 1, make_snapshot())
            exporter.close()
        assert [f.checkpoint_id for f in exporter.failures] == [0]
        assert exporter.written == []
        assert 'Checkpoint export failed' in caplog.text
