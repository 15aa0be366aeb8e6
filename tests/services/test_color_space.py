"""Tests for color cube enumeration and the seeded sequencer."""

from collections import Counter

import pytest

from domain.errors import ConfigurationError
from domain.models import AllRgbSettings, Color
from services.color_space import (
    build_placement_sequence,
    enumerate_colors,
    shuffle_colors,
)


class TestEnumerateColors:
    """Tests for enumerate_colors()."""

    @pytest.mark.parametrize('depth', [1, 2, 3, 5])
    def test_count_and_uniqueness(self, depth):
        """depth^3 distinct colors."""
        colors = enumerate_colors(depth)
        assert len(colors) == depth**3
        assert len(set(colors)) == depth**3

    def test_channel_levels(self):
        """Level k maps to k / depth."""
        levels = {c.red for c in enumerate_colors(4)}
        assert levels == {0.0, 0.25, 0.5, 0.75}

    def test_red_major_order(self):
        """Blue varies fastest, red slowest."""
        colors = enumerate_colors(2)
        assert colors[0] == Color(0.0, 0.0, 0.0)
        assert colors[1] == Color(0.0, 0.0, 0.5)
        assert colors[2] == Color(0.0, 0.5, 0.0)
        assert colors[4] == Color(0.5, 0.0, 0.0)

    def test_non_positive_depth(self):
        with pytest.raises(ConfigurationError):
            enumerate_colors(0)


class TestShuffleColors:
    """Tests for shuffle_colors()."""

    def test_same_seed_same_order(self):
        colors = enumerate_colors(4)
        assert shuffle_colors(colors, 42) == shuffle_colors(colors, 42)

    def test_different_seed_different_order(self):
        colors = enumerate_colors(4)
        assert shuffle_colors(colors, 1) != shuffle_colors(colors, 2)

    def test_is_permutation(self):
        colors = enumerate_colors(3)
        assert Counter(shuffle_colors(colors, 5)) == Counter(colors)

    def test_input_untouched(self):
        colors = enumerate_colors(3)
        original = list(colors)
        shuffle_colors(colors, 5)
        assert colors == original


class TestBuildPlacementSequence:
    """Tests for build_placement_sequence()."""

    def test_sequence_covers_cube(self, make_settings):
        sequence = build_placement_sequence(make_settings())
        assert isinstance(sequence, tuple)
        assert set(sequence) == set(enumerate_colors(2))

    def test_deterministic(self, make_settings):
        settings = make_settings()
        assert build_placement_sequence(settings) == build_placement_sequence(settings)

    def test_dimension_mismatch(self):
        """Settings built without validation still fail here."""
        settings = AllRgbSettings.model_construct(
            color_depth=2, image_width=3, image_height=3, seed=0
        )
        with pytest.raises(ConfigurationError, match='grid has'):
            build_placement_sequence(settings)
