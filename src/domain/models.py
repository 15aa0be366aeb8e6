from __future__ import annotations

import colorsys
from dataclasses import dataclass

from pydantic import BaseModel, field_validator, model_validator

from shared.constants import (
    CHANNEL_MAX_8BIT,
    DEFAULT_AVERAGE,
    DEFAULT_COLOR_DEPTH,
    DEFAULT_COLOR_DISTANCE,
    DEFAULT_IMAGE_AMOUNT,
    DEFAULT_IMAGE_FORMAT,
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_PATH,
    DEFAULT_IMAGE_PREFIX,
    DEFAULT_IMAGE_WIDTH,
    DEFAULT_NEIGHBOURHOOD_WIDTH,
    DEFAULT_SEED,
    DEFAULT_START_X,
    DEFAULT_START_Y,
    DEFAULT_WORKERS,
)


@dataclass(frozen=True)
class Color:
    """RGB color with channels normalized to [0, 1]."""

    red: float
    green: float
    blue: float

    @property
    def hue(self) -> float:
        """Hue in degrees, [0, 360). Greys have hue 0."""
        h, _s, _v = colorsys.rgb_to_hsv(self.red, self.green, self.blue)
        return h * 360.0

    @property
    def brightness(self) -> float:
        """HSB brightness, i.e. the largest channel."""
        return max(self.red, self.green, self.blue)

    def to_rgba8(self) -> tuple[int, int, int, int]:
        return (
            round(self.red * CHANNEL_MAX_8BIT),
            round(self.green * CHANNEL_MAX_8BIT),
            round(self.blue * CHANNEL_MAX_8BIT),
            CHANNEL_MAX_8BIT,
        )


@dataclass(frozen=True)
class Coordinate:
    """Grid cell address; x is the column, y is the row."""

    x: int
    y: int

    @property
    def row_major_key(self) -> tuple[int, int]:
        return (self.y, self.x)


class AllRgbSettings(BaseModel):
    """
    Run configuration, built once at startup and handed to the engine.

    Field names are the flat form of the dotted keys (``image.width`` ->
    ``image_width``), see domain.toml_sections.
    """

    model_config = {
        'extra': 'ignore',
        'frozen': True,
    }

    # Aggregate neighbour distances by mean (True) or minimum (False)
    average: bool = DEFAULT_AVERAGE
    # Seed of the placement order shuffle
    seed: int = DEFAULT_SEED
    # Side length of the fitness window, odd
    neighbourhood_width: int = DEFAULT_NEIGHBOURHOOD_WIDTH
    # Threads for the frontier scan
    workers: int = DEFAULT_WORKERS

    color_depth: int = DEFAULT_COLOR_DEPTH
    color_distance: str = DEFAULT_COLOR_DISTANCE

    # Number of checkpoint images written during the run
    image_amount: int = DEFAULT_IMAGE_AMOUNT
    image_width: int = DEFAULT_IMAGE_WIDTH
    image_height: int = DEFAULT_IMAGE_HEIGHT
    image_path: str = DEFAULT_IMAGE_PATH
    image_prefix: str = DEFAULT_IMAGE_PREFIX
    image_format: str = DEFAULT_IMAGE_FORMAT

    # Cell of the first placement
    start_x: int = DEFAULT_START_X
    start_y: int = DEFAULT_START_Y

    @field_validator('neighbourhood_width')
    @classmethod
    def validate_neighbourhood_width(cls, v: int) -> int:
        if v < 1 or v % 2 == 0:
            msg = f'neighbourhood_width must be a positive odd integer, got {v}'
            raise ValueError(msg)
        return v

    @field_validator('workers', 'color_depth', 'image_width', 'image_height')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            msg = f'value must be positive, got {v}'
            raise ValueError(msg)
        return v

    @field_validator('color_distance')
    @classmethod
    def validate_color_distance(cls, v: str) -> str:
        from services.distances import available_distances

        name = v.strip().lower()
        if name not in available_distances():
            msg = (
                f'unknown color distance {v!r}; '
                f'expected one of {", ".join(available_distances())}'
            )
            raise ValueError(msg)
        return name

    @field_validator('image_format')
    @classmethod
    def validate_image_format(cls, v: str) -> str:
        fmt = v.strip().lstrip('.').lower()
        if not fmt:
            msg = 'image format must not be empty'
            raise ValueError(msg)
        return fmt

    @model_validator(mode='after')
    def validate_geometry(self) -> AllRgbSettings:
        cells = self.image_width * self.image_height
        if self.color_depth**3 != cells:
            msg = (
                f'color depth {self.color_depth} gives {self.color_depth**3} colors, '
                f'but the {self.image_width}x{self.image_height} grid has {cells} cells'
            )
            raise ValueError(msg)
        if not (0 <= self.start_x < self.image_width and 0 <= self.start_y < self.image_height):
            msg = (
                f'start ({self.start_x}, {self.start_y}) lies outside the '
                f'{self.image_width}x{self.image_height} grid'
            )
            raise ValueError(msg)
        if not (0 <= self.image_amount <= cells):
            msg = f'image amount must be within [0, {cells}], got {self.image_amount}'
            raise ValueError(msg)
        return self

    @property
    def total_colors(self) -> int:
        return self.color_depth**3

    @property
    def neighbourhood_half_width(self) -> int:
        return self.neighbourhood_width // 2

    @property
    def origin(self) -> Coordinate:
        return Coordinate(self.start_x, self.start_y)
