"""Domain layer - value types, settings and profiles."""
from domain.errors import (
    AllRgbError,
    ConfigurationError,
    ExportFailure,
    InvariantViolation,
)
from domain.models import AllRgbSettings, Color, Coordinate
from domain.profiles import (
    build_settings,
    ensure_profiles_dir,
    list_profiles,
    load_profile,
    parse_overrides,
    save_profile,
)

__all__ = [
    'AllRgbError',
    'AllRgbSettings',
    'Color',
    'ConfigurationError',
    'Coordinate',
    'ExportFailure',
    'InvariantViolation',
    'build_settings',
    'ensure_profiles_dir',
    'list_profiles',
    'load_profile',
    'parse_overrides',
    'save_profile',
]
