"""Tests for domain models."""

import dataclasses

import pytest
from pydantic import ValidationError

from domain.models import AllRgbSettings, Color, Coordinate


def create_base_settings(**overrides):
    """Create AllRgbSettings with a consistent 4^3 = 8x8 geometry."""
    defaults = {
        'color_depth': 4,
        'image_width': 8,
        'image_height': 8,
        'image_amount': 4,
        'start_x': 3,
        'start_y': 3,
    }
    defaults.update(overrides)
    return AllRgbSettings(**defaults)


class TestColor:
    """Tests for Color value type."""

    def test_is_immutable(self):
        """Assigning a channel should fail."""
        c = Color(0.5, 0.5, 0.5)
        with pytest.raises(AttributeError):
            c.red = 1.0  # type: ignore[misc]

    def test_equal_colors_hash_equal(self):
        """Colors are value types."""
        assert Color(0.25, 0.5, 0.75) == Color(0.25, 0.5, 0.75)
        assert len({Color(0.25, 0.5, 0.75), Color(0.25, 0.5, 0.75)}) == 1

    def test_hue_primary_colors(self):
        """Hue is reported in degrees."""
        assert Color(1.0, 0.0, 0.0).hue == pytest.approx(0.0)
        assert Color(0.0, 1.0, 0.0).hue == pytest.approx(120.0)
        assert Color(0.0, 0.0, 1.0).hue == pytest.approx(240.0)

    def test_hue_of_grey_is_zero(self):
        """Greys have no hue."""
        assert Color(0.5, 0.5, 0.5).hue == 0.0

    def test_brightness_is_max_channel(self):
        """Brightness is the HSB value."""
        assert Color(0.25, 0.75, 0.5).brightness == 0.75

    def test_to_rgba8(self):
        """Channels scale to 0-255 with an opaque alpha."""
        assert Color(0.0, 0.5, 1.0).to_rgba8() == (0, 128, 255, 255)


class TestCoordinate:
    """Tests for Coordinate value type."""

    def test_hashable_lookup_key(self):
        """Equal coordinates collapse in a set."""
        assert {Coordinate(1, 2), Coordinate(1, 2)} == {Coordinate(1, 2)}

    def test_row_major_key(self):
        """Row first, then column."""
        assert Coordinate(5, 1).row_major_key == (1, 5)
        assert Coordinate(0, 2).row_major_key > Coordinate(9, 1).row_major_key

    def test_immutable(self):
        """Coordinates are frozen dataclasses."""
        coord = Coordinate(1, 2)
        assert dataclasses.is_dataclass(coord)
        with pytest.raises(dataclasses.FrozenInstanceError):
            coord.x = 3


class TestAllRgbSettingsDefaults:
    """The defaults must form a valid configuration."""

    def test_defaults_are_consistent(self):
        """Default depth cube fills the default grid."""
        settings = AllRgbSettings()
        assert settings.color_depth**3 == settings.image_width * settings.image_height
        assert settings.total_colors == settings.image_width * settings.image_height

    def test_settings_are_frozen(self):
        """Settings cannot be modified after construction."""
        settings = create_base_settings()
        with pytest.raises(ValidationError):
            settings.seed = 5  # type: ignore[misc]

    def test_derived_properties(self):
        """Half width and origin are derived."""
        settings = create_base_settings(neighbourhood_width=5)
        assert settings.neighbourhood_half_width == 2
        assert settings.origin == Coordinate(3, 3)

    def test_extra_keys_ignored(self):
        """Unknown keys from old profiles are ignored."""
        settings = create_base_settings(legacy_option=True)
        assert not hasattr(settings, 'legacy_option')


class TestAllRgbSettingsValidators:
    """Tests for AllRgbSettings validators."""

    def test_dimension_mismatch_rejected(self):
        """depth^3 must equal width * height."""
        with pytest.raises(ValidationError, match='grid has'):
            create_base_settings(image_width=9)

    @pytest.mark.parametrize('width', [0, 2, 4, -1])
    def test_neighbourhood_width_must_be_odd_positive(self, width):
        """Even or non-positive window sizes are rejected."""
        with pytest.raises(ValidationError):
            create_base_settings(neighbourhood_width=width)

    def test_neighbourhood_width_one_accepted(self):
        """Width 1 is the degenerate window."""
        settings = create_base_settings(neighbourhood_width=1)
        assert settings.neighbourhood_half_width == 0

    def test_unknown_distance_rejected(self):
        """Distance names come from the registry."""
        with pytest.raises(ValidationError, match='unknown color distance'):
            create_base_settings(color_distance='manhattan')

    def test_distance_name_normalized(self):
        """Distance lookup is case-insensitive."""
        settings = create_base_settings(color_distance='Squared_Hue_Difference')
        assert settings.color_distance == 'squared_hue_difference'

    def test_origin_outside_grid_rejected(self):
        """Start must be a grid cell."""
        with pytest.raises(ValidationError, match='outside'):
            create_base_settings(start_x=8)

    def test_amount_above_total_rejected(self):
        """More checkpoints than placements is meaningless."""
        with pytest.raises(ValidationError, match='amount'):
            create_base_settings(image_amount=65)

    def test_amount_zero_accepted(self):
        """No checkpoints at all is allowed."""
        assert create_base_settings(image_amount=0).image_amount == 0

    def test_workers_must_be_positive(self):
        """At least one scan thread."""
        with pytest.raises(ValidationError):
            create_base_settings(workers=0)

    def test_format_normalized(self):
        """Leading dot and case are dropped from the format."""
        assert create_base_settings(image_format='.PNG').image_format == 'png'

    def test_empty_format_rejected(self):
        """An empty format cannot name a file."""
        with pytest.raises(ValidationError):
            create_base_settings(image_format='  ')

    def test_string_values_are_coerced(self):
        """Override strings parse into typed values."""
        settings = create_base_settings(average='false', seed='17')
        assert settings.average is False
        assert settings.seed == 17
