"""Checkpoint image export: RGBA canvas snapshots → files on disk."""

from __future__ import annotations

import contextlib
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image

from domain.errors import ConfigurationError, ExportFailure
from services.checkpoints import checkpoint_filename
from shared.constants import (
    ALPHA_CAPABLE_FORMATS,
    EXPORT_BACKGROUND_RGB,
    EXPORT_MAX_WORKERS,
)

if TYPE_CHECKING:
    import types

    import numpy as np

logger = logging.getLogger(__name__)


def resolve_image_format(fmt: str) -> str:
    """
    Pillow format name for a file extension ('png' → 'PNG', 'jpg' → 'JPEG').

    Only formats Pillow can write are accepted; read-only ones such as PSD
    are rejected here rather than failing at the first checkpoint.
    """
    ext = '.' + fmt.strip().lstrip('.').lower()
    registered = Image.registered_extensions()
    if ext not in registered:
        msg = f'unsupported image format {fmt!r}'
        raise ConfigurationError(msg)
    pil_format = registered[ext]
    if pil_format not in Image.SAVE:
        msg = f'image format {fmt!r} ({pil_format}) can be read but not written'
        raise ConfigurationError(msg)
    return pil_format


def snapshot_to_image(snapshot: np.ndarray, pil_format: str = 'PNG') -> Image.Image:
    """
    Build an image from an RGBA snapshot.

    Formats without alpha get the empty cells flattened onto the background.
    """
    img = Image.fromarray(snapshot)
    if pil_format in ALPHA_CAPABLE_FORMATS:
        return img
    background = Image.new('RGB', img.size, EXPORT_BACKGROUND_RGB)
    background.paste(img, mask=img.getchannel('A'))
    img.close()
    return background


class CheckpointExporter:
    """
    Writes checkpoint snapshots in the background.

    ``submit`` only queues the write, so the placement loop never waits on
    encoding or disk. Write errors are logged and collected in ``failures``;
    they never reach the caller.
    """

    def __init__(
        self,
        path: str | Path,
        prefix: str,
        fmt: str,
        max_workers: int = EXPORT_MAX_WORKERS,
    ) -> None:
        self.directory = Path(path)
        self.prefix = prefix
        self.extension = fmt.strip().lstrip('.').lower()
        self.pil_format = resolve_image_format(self.extension)
        self.failures: list[ExportFailure] = []
        self.written: list[Path] = []
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix='checkpoint-export'
        )

    def __enter__(self) -> CheckpointExporter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        self.close()

    def target_path(self, checkpoint_id: int) -> Path:
        return self.directory / checkpoint_filename(
            self.prefix, checkpoint_id, self.extension
        )

    def submit(self, checkpoint_id: int, index: int, snapshot: np.ndarray) -> None:
        """Queue a snapshot for writing. ``snapshot`` must not be mutated afterwards."""
        logger.debug('Queued checkpoint %d (placement %d)', checkpoint_id, index)
        self._executor.submit(self._write, checkpoint_id, snapshot)

    def _write(self, checkpoint_id: int, snapshot: np.ndarray) -> None:
        out_path = self.target_path(checkpoint_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            img = snapshot_to_image(snapshot, self.pil_format)
            try:
                img.save(out_path, format=self.pil_format)
            finally:
                with contextlib.suppress(Exception):
                    img.close()
            # Ensure data is written to disk
            fd = os.open(out_path, os.O_RDONLY)
            try:
                os.fsync(fd)
            finally:
                os.close(fd)
        except Exception as e:
            failure = ExportFailure(checkpoint_id, str(out_path), str(e))
            logger.error('Checkpoint export failed: %s', failure)
            with self._lock:
                self.failures.append(failure)
            return
        logger.info('Saved checkpoint %d: %s', checkpoint_id, out_path)
        with self._lock:
            self.written.append(out_path)

    def close(self) -> None:
        """Wait for queued writes and stop the writer threads."""
        self._executor.shutdown(wait=True)
