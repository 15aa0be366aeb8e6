"""Write-once grid of placed colors."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from domain.errors import InvariantViolation
from domain.models import Coordinate
from shared.constants import CHANNEL_MAX_8BIT

if TYPE_CHECKING:
    from collections.abc import Iterator

    from domain.models import Color


class Canvas:
    """
    Width x height grid of optional colors.

    A cell goes from empty to filled once and never changes afterwards.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            msg = f'canvas size must be positive, got {width}x{height}'
            raise ValueError(msg)
        self.width = width
        self.height = height
        self._cells: list[Color | None] = [None] * (width * height)
        # Channel values and fill mask for the compiled fitness kernels
        self._rgb = np.zeros((height, width, 3), dtype=np.float64)
        self._mask = np.zeros((height, width), dtype=np.bool_)
        self._filled = 0

    @property
    def total(self) -> int:
        return self.width * self.height

    @property
    def filled_count(self) -> int:
        return self._filled

    @property
    def is_empty(self) -> bool:
        return self._filled == 0

    @property
    def is_complete(self) -> bool:
        return self._filled == self.total

    @property
    def rgb(self) -> np.ndarray:
        """(height, width, 3) float64 channels; zero where empty. Read-only view."""
        view = self._rgb.view()
        view.flags.writeable = False
        return view

    @property
    def filled_mask(self) -> np.ndarray:
        """(height, width) bool mask of filled cells. Read-only view."""
        view = self._mask.view()
        view.flags.writeable = False
        return view

    def in_bounds(self, coord: Coordinate) -> bool:
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def _index(self, coord: Coordinate) -> int:
        if not self.in_bounds(coord):
            msg = f'{coord} lies outside the {self.width}x{self.height} canvas'
            raise InvariantViolation(msg)
        return coord.y * self.width + coord.x

    def get(self, coord: Coordinate) -> Color | None:
        return self._cells[self._index(coord)]

    def is_filled(self, coord: Coordinate) -> bool:
        return self._cells[self._index(coord)] is not None

    def place(self, coord: Coordinate, color: Color) -> None:
        idx = self._index(coord)
        if self._cells[idx] is not None:
            msg = f'cell {coord} is already filled with {self._cells[idx]}'
            raise InvariantViolation(msg)
        self._cells[idx] = color
        self._rgb[coord.y, coord.x] = (color.red, color.green, color.blue)
        self._mask[coord.y, coord.x] = True
        self._filled += 1

    def neighbours(self, coord: Coordinate, half_width: int = 1) -> Iterator[Coordinate]:
        """In-bounds cells of the (2h+1)^2 window around ``coord``, centre excluded."""
        y0 = max(0, coord.y - half_width)
        y1 = min(self.height - 1, coord.y + half_width)
        x0 = max(0, coord.x - half_width)
        x1 = min(self.width - 1, coord.x + half_width)
        for y in range(y0, y1 + 1):
            for x in range(x0, x1 + 1):
                if x == coord.x and y == coord.y:
                    continue
                yield Coordinate(x, y)

    def neighbour_colors(self, coord: Coordinate, half_width: int = 1) -> list[Color]:
        """Colors already placed in the window around ``coord``, centre excluded."""
        cells = self._cells
        width = self.width
        centre = coord.y * width + coord.x
        y0 = max(0, coord.y - half_width)
        y1 = min(self.height - 1, coord.y + half_width)
        x0 = max(0, coord.x - half_width)
        x1 = min(width - 1, coord.x + half_width)
        found = []
        for y in range(y0, y1 + 1):
            row = y * width
            for x in range(x0, x1 + 1):
                idx = row + x
                if idx == centre:
                    continue
                c = cells[idx]
                if c is not None:
                    found.append(c)
        return found

    def colors(self) -> Iterator[Color]:
        return (c for c in self._cells if c is not None)

    def snapshot(self) -> np.ndarray:
        """Frozen RGBA copy (height x width x 4, uint8); empty cells are transparent."""
        arr = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        # np.rint rounds half to even, like round() in Color.to_rgba8
        arr[..., :3] = np.rint(self._rgb * CHANNEL_MAX_8BIT).astype(np.uint8)
        arr[..., 3] = np.where(self._mask, CHANNEL_MAX_8BIT, 0)
        return arr
