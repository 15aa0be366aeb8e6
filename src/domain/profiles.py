from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import ParseError

from domain.errors import ConfigurationError
from domain.models import AllRgbSettings
from domain.toml_sections import dotted_to_flat, flat_to_sectioned, sectioned_to_flat
from shared.constants import APP_DIR_NAME, PROFILE_EXTENSION, PROFILES_DIR

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


def _user_profiles_dir() -> Path:
    """
    Determine profiles directory.

    1) If <project_root>/configs/profiles exists, use it (run-from-repo setups).
    2) Otherwise, fall back to the user config directory:
       %APPDATA%/AllRGB/configs/profiles or ~/.config/AllRGB/configs/profiles.
    """
    project_root = Path(__file__).resolve().parent.parent.parent
    local_profiles = project_root / PROFILES_DIR
    if local_profiles.exists():
        return local_profiles

    return (
        Path(os.getenv('APPDATA') or (Path.home() / '.config'))
        / APP_DIR_NAME
        / PROFILES_DIR
    )


def ensure_profiles_dir() -> Path:
    profiles_dir = _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles() -> list[str]:
    """Profile names without extension."""
    folder = ensure_profiles_dir()
    return sorted(p.stem for p in folder.glob(f'*{PROFILE_EXTENSION}') if p.is_file())


def profile_path(name: str) -> Path:
    return ensure_profiles_dir() / f'{name}{PROFILE_EXTENSION}'


def parse_overrides(pairs: list[str] | None) -> dict[str, str]:
    """Turn ``['image.width=512', 'average=false']`` into flat field overrides."""
    result: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition('=')
        if not sep or not key.strip():
            msg = f'override must look like key=value, got {pair!r}'
            raise ConfigurationError(msg)
        result[dotted_to_flat(key)] = value.strip()
    return result


def build_settings(data: Mapping[str, Any]) -> AllRgbSettings:
    """Validate a flat mapping into settings; all failures become ConfigurationError."""
    try:
        return AllRgbSettings.model_validate(dict(data))
    except ValidationError as e:
        problems = '; '.join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        msg = f'invalid settings: {problems}'
        raise ConfigurationError(msg) from e


def load_profile(
    name_or_path: str | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> AllRgbSettings:
    """
    Load and validate a TOML profile, then apply flat overrides on top.

    Accepts either a profile name (without .toml) from the profiles directory
    or a path to a TOML file. ``None`` means model defaults only.
    """
    flat: dict[str, Any] = {}
    if name_or_path:
        p = Path(name_or_path)
        path = (
            p
            if p.suffix.lower() == PROFILE_EXTENSION and p.exists()
            else profile_path(name_or_path)
        )
        if not path.exists():
            msg = f'Profile not found: {path}'
            raise FileNotFoundError(msg)
        text = path.read_text(encoding='utf-8')
        try:
            data = tomlkit.parse(text).unwrap()
        except ParseError as e:
            msg = f'cannot parse profile {path}: {e}'
            raise ConfigurationError(msg) from e
        flat = sectioned_to_flat(data)
        logger.info('Loaded profile %s (%d keys)', path, len(flat))

    if overrides:
        logger.info('Applying overrides: %s', dict(overrides))
        flat.update(overrides)

    return build_settings(flat)


def save_profile(name: str, settings: AllRgbSettings) -> Path:
    """Write settings as a sectioned TOML profile."""
    path = profile_path(name)
    data = flat_to_sectioned(settings.model_dump())
    path.write_text(tomlkit.dumps(data), encoding='utf-8')
    return path
