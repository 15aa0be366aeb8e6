"""
Greedy frontier placement.

Colors are taken one by one from the shuffled placement sequence. The first
goes to the configured origin; every later one goes to the frontier cell
where its inverse fitness is lowest. Each placement is committed to the
canvas and the frontier is grown around it before the next color is looked
at, so the loop itself is strictly sequential. Only the frontier scan may be
split across Numba worker threads.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import TYPE_CHECKING

import numba

from domain.errors import ConfigurationError, InvariantViolation
from services.canvas import Canvas
from services.checkpoints import checkpoint_indices
from services.color_space import build_placement_sequence
from services.fitness import FitnessEvaluator
from services.frontier import Frontier
from shared.constants import PARALLEL_SCAN_MIN_FRONTIER, PROGRESS_REPORT_EVERY

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    import numpy as np

    from domain.models import AllRgbSettings, Color, Coordinate

    # (checkpoint_id, placement_index, rgba_snapshot)
    CheckpointCallback = Callable[[int, int, np.ndarray], None]
    # (done, total)
    ProgressCallback = Callable[[int, int], None]

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    EMPTY = 'empty'
    RUNNING = 'running'
    COMPLETE = 'complete'


class PlacementEngine:
    """Drives one run from an empty canvas to a complete one."""

    def __init__(
        self,
        settings: AllRgbSettings,
        *,
        sequence: Sequence[Color] | None = None,
        on_checkpoint: CheckpointCallback | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.settings = settings
        self.sequence: tuple[Color, ...] = (
            tuple(sequence) if sequence is not None else build_placement_sequence(settings)
        )
        cells = settings.image_width * settings.image_height
        if len(self.sequence) != cells:
            msg = f'placement sequence has {len(self.sequence)} colors for {cells} cells'
            raise ConfigurationError(msg)

        self.canvas = Canvas(settings.image_width, settings.image_height)
        self.frontier = Frontier(self.canvas)
        self.evaluator = FitnessEvaluator.from_settings(self.canvas, settings)
        self.checkpoints = checkpoint_indices(len(self.sequence), settings.image_amount)
        self.placements: list[tuple[Coordinate, Color]] = []
        self.on_checkpoint = on_checkpoint
        self.on_progress = on_progress
        self._index = 0

    @property
    def state(self) -> EngineState:
        if self.canvas.is_empty:
            return EngineState.EMPTY
        if self.canvas.is_complete:
            return EngineState.COMPLETE
        return EngineState.RUNNING

    @property
    def index(self) -> int:
        """Index of the next placement."""
        return self._index

    @property
    def remaining(self) -> int:
        return len(self.sequence) - self._index

    @property
    def scan_threads(self) -> int:
        """Numba threads for the frontier scan, capped by what Numba was started with."""
        return max(1, min(self.settings.workers, numba.config.NUMBA_NUM_THREADS))

    def select_target(self, color: Color) -> Coordinate:
        """Cell for ``color``: the origin on an empty canvas, else the best frontier cell."""
        if not self.frontier:
            if not self.canvas.is_empty:
                msg = (
                    f'frontier exhausted with {self.canvas.filled_count} of '
                    f'{self.canvas.total} cells filled'
                )
                raise InvariantViolation(msg)
            return self.settings.origin

        parallel = (
            self.settings.workers > 1
            and len(self.frontier) >= PARALLEL_SCAN_MIN_FRONTIER
        )
        best = self.evaluator.scan(self.frontier.ordered(), color, parallel=parallel)
        if best is None:
            msg = 'frontier scan produced no candidate'
            raise InvariantViolation(msg)
        return best[1]

    def commit(self, coord: Coordinate, color: Color) -> None:
        """Write ``color`` at ``coord`` and grow the frontier around it."""
        self.canvas.place(coord, color)
        self.frontier.commit(coord)
        self.placements.append((coord, color))

    def step(self) -> Coordinate:
        """Place the next color of the sequence and return where it went."""
        if self._index >= len(self.sequence):
            msg = 'placement sequence is exhausted'
            raise InvariantViolation(msg)

        i = self._index
        color = self.sequence[i]
        target = self.select_target(color)
        self.commit(target, color)
        self._index += 1
        logger.debug('Placed #%d %s at (%d, %d)', i, color, target.x, target.y)

        total = len(self.sequence)
        if i in self.checkpoints:
            self._emit_checkpoint(i)
        if self.on_progress is not None and (
            self._index % PROGRESS_REPORT_EVERY == 0 or self._index == total
        ):
            self.on_progress(self._index, total)
        if self._index == total:
            self._verify_complete()
        return target

    def run(self) -> Canvas:
        """Place every remaining color; returns the completed canvas."""
        logger.info(
            'Placing %d colors on %dx%d (scan threads=%d, distance=%s, %s, window=%d)',
            self.remaining,
            self.canvas.width,
            self.canvas.height,
            self.scan_threads,
            self.settings.color_distance,
            'average' if self.settings.average else 'minimum',
            self.settings.neighbourhood_width,
        )
        started = time.monotonic()
        previous_threads = numba.get_num_threads()
        numba.set_num_threads(self.scan_threads)
        try:
            while self.remaining:
                self.step()
        finally:
            numba.set_num_threads(previous_threads)
        logger.info('Placement finished in %.2fs', time.monotonic() - started)
        return self.canvas

    def _emit_checkpoint(self, index: int) -> None:
        checkpoint_id = self.checkpoints[index]
        total = len(self.sequence)
        logger.info('Progress: %2d%%', (index + 1) * 100 // total)
        if self.on_checkpoint is not None:
            self.on_checkpoint(checkpoint_id, index, self.canvas.snapshot())

    def _verify_complete(self) -> None:
        if self.frontier:
            msg = f'run finished with {len(self.frontier)} cells still in the frontier'
            raise InvariantViolation(msg)
        if self.remaining:
            msg = f'run finished with {self.remaining} colors left to place'
            raise InvariantViolation(msg)
        if not self.canvas.is_complete:
            msg = (
                f'run finished with {self.canvas.total - self.canvas.filled_count} '
                'empty cells'
            )
            raise InvariantViolation(msg)
