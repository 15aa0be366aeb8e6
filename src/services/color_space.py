"""Quantized color cube enumeration and the seeded placement order."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from domain.errors import ConfigurationError
from domain.models import Color

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domain.models import AllRgbSettings

logger = logging.getLogger(__name__)


def enumerate_colors(depth: int) -> list[Color]:
    """
    Every quantized color exactly once, red-major, then green, then blue.

    Channel level ``k`` maps to ``k / depth`` for ``k`` in ``[0, depth)``.
    """
    if depth < 1:
        msg = f'color depth must be positive, got {depth}'
        raise ConfigurationError(msg)
    levels = [k / depth for k in range(depth)]
    return [Color(r, g, b) for r in levels for g in levels for b in levels]


def shuffle_colors(colors: Sequence[Color], seed: int) -> list[Color]:
    """Return a new list permuted deterministically by ``seed``."""
    shuffled = list(colors)
    rng = random.Random(seed)  # noqa: S311
    rng.shuffle(shuffled)
    return shuffled


def build_placement_sequence(settings: AllRgbSettings) -> tuple[Color, ...]:
    depth = settings.color_depth
    cells = settings.image_width * settings.image_height
    if depth**3 != cells:
        msg = (
            f'color depth {depth} gives {depth**3} colors, but the '
            f'{settings.image_width}x{settings.image_height} grid has {cells} cells'
        )
        raise ConfigurationError(msg)
    sequence = tuple(shuffle_colors(enumerate_colors(depth), settings.seed))
    logger.info('Placement sequence: %d colors, seed=%d', len(sequence), settings.seed)
    return sequence
