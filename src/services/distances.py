"""Color distance functions and the name → function registry used by settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from domain.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from domain.models import Color

    DistanceFn = Callable[[Color, Color], float]


def squared_euclidean(c1: Color, c2: Color) -> float:
    """Sum of squared per-channel differences."""
    dr = c1.red - c2.red
    dg = c1.green - c2.green
    db = c1.blue - c2.blue
    return dr * dr + dg * dg + db * db


def squared_hue_difference(c1: Color, c2: Color) -> float:
    # Hue in degrees, no wrap-around at 360
    d = c1.hue - c2.hue
    return d * d


def squared_brightness_difference(c1: Color, c2: Color) -> float:
    d = c1.brightness - c2.brightness
    return d * d


_REGISTRY: dict[str, DistanceFn] = {
    'squared_euclidean': squared_euclidean,
    'squared_hue_difference': squared_hue_difference,
    'squared_brightness_difference': squared_brightness_difference,
}

# Ids of the built-in distances inside the compiled frontier scan (services.fitness)
KERNEL_SQUARED_EUCLIDEAN = 0
KERNEL_SQUARED_HUE_DIFFERENCE = 1
KERNEL_SQUARED_BRIGHTNESS_DIFFERENCE = 2

_KERNEL_IDS: dict[DistanceFn, int] = {
    squared_euclidean: KERNEL_SQUARED_EUCLIDEAN,
    squared_hue_difference: KERNEL_SQUARED_HUE_DIFFERENCE,
    squared_brightness_difference: KERNEL_SQUARED_BRIGHTNESS_DIFFERENCE,
}


def register_distance(name: str, fn: DistanceFn) -> None:
    """Add a distance function under a (case-insensitive) name."""
    key = name.strip().lower()
    if not key:
        msg = 'distance name must not be empty'
        raise ValueError(msg)
    _REGISTRY[key] = fn


def available_distances() -> list[str]:
    return sorted(_REGISTRY)


def resolve_distance(name: str) -> DistanceFn:
    """Look up a distance function by name."""
    try:
        return _REGISTRY[name.strip().lower()]
    except KeyError:
        msg = (
            f'unknown color distance {name!r}; '
            f'expected one of {", ".join(available_distances())}'
        )
        raise ConfigurationError(msg) from None


def kernel_id(fn: DistanceFn) -> int | None:
    """Compiled-scan id of a built-in distance; None for registered custom ones."""
    return _KERNEL_IDS.get(fn)
