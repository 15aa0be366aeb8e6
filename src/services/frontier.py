"""Set of empty cells touching the filled region."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.constants import FRONTIER_HALF_WIDTH

if TYPE_CHECKING:
    from collections.abc import Iterator

    from domain.models import Coordinate
    from services.canvas import Canvas


class Frontier:
    """
    Candidate pool for the next placement.

    A cell is in the frontier iff it is empty and one of its eight neighbours
    is filled. Maintained incrementally by ``commit`` after each canvas write.
    """

    def __init__(self, canvas: Canvas) -> None:
        self._canvas = canvas
        self._cells: set[Coordinate] = set()

    def __len__(self) -> int:
        return len(self._cells)

    def __bool__(self) -> bool:
        return bool(self._cells)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._cells)

    def __contains__(self, coord: object) -> bool:
        return coord in self._cells

    def discard(self, coord: Coordinate) -> None:
        self._cells.discard(coord)

    def expand_around(self, coord: Coordinate) -> int:
        """Add the empty cells of the 3x3 ring around ``coord``; returns how many were new."""
        before = len(self._cells)
        canvas = self._canvas
        for n in canvas.neighbours(coord, FRONTIER_HALF_WIDTH):
            if not canvas.is_filled(n):
                self._cells.add(n)
        return len(self._cells) - before

    def commit(self, coord: Coordinate) -> None:
        """Update after ``coord`` has been filled on the canvas."""
        self._cells.discard(coord)
        self.expand_around(coord)

    def ordered(self) -> list[Coordinate]:
        """Frontier cells in row-major order."""
        return sorted(self._cells, key=lambda c: (c.y, c.x))
