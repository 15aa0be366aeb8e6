"""Mapping layer between flat AllRgbSettings fields and sectioned TOML format.

AllRgbSettings remains a flat Pydantic model. This module provides:
- flat_to_sectioned(): flat dict → sectioned dict (for TOML save)
- sectioned_to_flat(): sectioned dict → flat dict (for TOML load)
- dotted_to_flat(): 'image.width' style override keys → flat field names
"""

from __future__ import annotations

# {section_name: {flat_field_name: short_name_in_toml}}
SECTION_MAP: dict[str, dict[str, str]] = {
    'color': {
        'color_depth': 'depth',
        'color_distance': 'distance',
    },
    'image': {
        'image_amount': 'amount',
        'image_width': 'width',
        'image_height': 'height',
        'image_path': 'path',
        'image_prefix': 'prefix',
        'image_format': 'format',
    },
    'start': {
        'start_x': 'x',
        'start_y': 'y',
    },
}

# Reverse index: flat_field → (section, short_name)
_FLAT_TO_SECTION: dict[str, tuple[str, str]] = {}
for _section, _fields in SECTION_MAP.items():
    for _flat, _short in _fields.items():
        _FLAT_TO_SECTION[_flat] = (_section, _short)

# Reverse index: (section, short_name) → flat_field
_SECTION_TO_FLAT: dict[str, dict[str, str]] = {}
for _section, _fields in SECTION_MAP.items():
    _SECTION_TO_FLAT[_section] = {v: k for k, v in _fields.items()}


def flat_to_sectioned(flat: dict) -> dict:
    """Convert flat AllRgbSettings dict to sectioned dict for TOML output.

    Unsectioned fields stay at the top level, as in the hand-written profiles.
    """
    result: dict = {}
    for key, value in flat.items():
        if key in _FLAT_TO_SECTION:
            section, short_name = _FLAT_TO_SECTION[key]
            result.setdefault(section, {})[short_name] = value
        else:
            result[key] = value
    return result


def sectioned_to_flat(data: dict) -> dict:
    """Convert sectioned TOML dict to flat dict for AllRgbSettings validation."""
    flat: dict = {}
    for key, value in data.items():
        if isinstance(value, dict) and key in _SECTION_TO_FLAT:
            # Known section — expand short names to flat names
            mapping = _SECTION_TO_FLAT[key]
            for short_name, field_value in value.items():
                flat[mapping.get(short_name, f'{key}_{short_name}')] = field_value
        elif isinstance(value, dict):
            # Unknown section — pass through keys as-is
            flat.update(value)
        else:
            flat[key] = value
    return flat


def dotted_to_flat(key: str) -> str:
    """Translate a dotted key ('image.width') into its flat field name."""
    key = key.strip()
    if '.' not in key:
        return key
    section, _, short_name = key.partition('.')
    mapping = _SECTION_TO_FLAT.get(section, {})
    return mapping.get(short_name, f'{section}_{short_name}'.replace('.', '_'))
