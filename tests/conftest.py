"""Pytest configuration and fixtures for allrgb tests."""

import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from domain.models import AllRgbSettings  # noqa: E402


def small_settings(**overrides) -> AllRgbSettings:
    """2x2x2 color cube on a 2x4 grid, origin (0, 0), seed 42."""
    defaults = {
        'average': True,
        'seed': 42,
        'neighbourhood_width': 3,
        'workers': 1,
        'color_depth': 2,
        'color_distance': 'squared_euclidean',
        'image_amount': 1,
        'image_width': 2,
        'image_height': 4,
        'image_path': 'out',
        'image_prefix': 'test',
        'image_format': 'png',
        'start_x': 0,
        'start_y': 0,
    }
    defaults.update(overrides)
    return AllRgbSettings(**defaults)


@pytest.fixture()
def make_settings():
    """Factory for small, valid AllRgbSettings."""
    return small_settings
