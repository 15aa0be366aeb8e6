"""
Inverse fitness: how badly a color fits at a cell, given its placed neighbours.

The per-candidate scan over the frontier is the hot loop of a run. For the
built-in distances it runs as a Numba kernel over the canvas arrays, with a
``prange`` variant for multi-threaded scans. Custom registered distances go
through the pure-Python path, which is also the reference the kernel matches.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
from numba import njit, prange

from services.distances import (
    KERNEL_SQUARED_BRIGHTNESS_DIFFERENCE,
    KERNEL_SQUARED_HUE_DIFFERENCE,
    kernel_id,
    resolve_distance,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from domain.models import AllRgbSettings, Color, Coordinate
    from services.canvas import Canvas
    from services.distances import DistanceFn

# Returned when no neighbour in the window is filled, in both aggregation modes
NO_NEIGHBOUR_FITNESS = math.inf


@njit(cache=True)
def _hue_degrees_numba(r: float, g: float, b: float) -> float:
    """Hue in degrees; same arithmetic as colorsys.rgb_to_hsv."""
    maxc = max(r, max(g, b))
    minc = min(r, min(g, b))
    if minc == maxc:
        return 0.0
    rangec = maxc - minc
    rc = (maxc - r) / rangec
    gc = (maxc - g) / rangec
    bc = (maxc - b) / rangec
    if r == maxc:
        h = bc - gc
    elif g == maxc:
        h = 2.0 + rc - bc
    else:
        h = 4.0 + gc - rc
    return ((h / 6.0) % 1.0) * 360.0


@njit(cache=True)
def _distance_numba(
    kind: int,
    r1: float,
    g1: float,
    b1: float,
    r2: float,
    g2: float,
    b2: float,
) -> float:
    if kind == KERNEL_SQUARED_HUE_DIFFERENCE:
        d = _hue_degrees_numba(r1, g1, b1) - _hue_degrees_numba(r2, g2, b2)
        return d * d
    if kind == KERNEL_SQUARED_BRIGHTNESS_DIFFERENCE:
        d = max(r1, max(g1, b1)) - max(r2, max(g2, b2))
        return d * d
    dr = r1 - r2
    dg = g1 - g2
    db = b1 - b2
    return dr * dr + dg * dg + db * db


@njit(cache=True)
def _cell_fitness_numba(
    rgb: np.ndarray,
    filled: np.ndarray,
    cy: int,
    cx: int,
    r: float,
    g: float,
    b: float,
    half_width: int,
    kind: int,
    average: int,
) -> float:
    """Inverse fitness of one cell (Numba JIT version of inverse_fitness)."""
    h = filled.shape[0]
    w = filled.shape[1]
    y0 = max(0, cy - half_width)
    y1 = min(h - 1, cy + half_width)
    x0 = max(0, cx - half_width)
    x1 = min(w - 1, cx + half_width)

    total = 0.0
    count = 0
    best = np.inf
    for y in range(y0, y1 + 1):
        for x in range(x0, x1 + 1):
            if (y == cy and x == cx) or not filled[y, x]:
                continue
            d = _distance_numba(kind, r, g, b, rgb[y, x, 0], rgb[y, x, 1], rgb[y, x, 2])
            total += d
            count += 1
            best = min(best, d)

    if count == 0:
        return np.inf
    if average:
        return total / count
    return best


@njit(cache=True)
def _scan_frontier_numba(
    rgb: np.ndarray,
    filled: np.ndarray,
    ys: np.ndarray,
    xs: np.ndarray,
    r: float,
    g: float,
    b: float,
    half_width: int,
    kind: int,
    average: int,
) -> np.ndarray:
    n = ys.shape[0]
    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        out[i] = _cell_fitness_numba(
            rgb, filled, ys[i], xs[i], r, g, b, half_width, kind, average
        )
    return out


@njit(parallel=True, cache=True)
def _scan_frontier_parallel(
    rgb: np.ndarray,
    filled: np.ndarray,
    ys: np.ndarray,
    xs: np.ndarray,
    r: float,
    g: float,
    b: float,
    half_width: int,
    kind: int,
    average: int,
) -> np.ndarray:
    """Same as _scan_frontier_numba, cells split across Numba threads."""
    n = ys.shape[0]
    out = np.empty(n, dtype=np.float64)
    for i in prange(n):
        out[i] = _cell_fitness_numba(
            rgb, filled, ys[i], xs[i], r, g, b, half_width, kind, average
        )
    return out


class FitnessEvaluator:
    """
    Aggregated distance between a candidate color and the placed colors around a cell.

    Lower is better. ``half_width`` sets the window to (2h+1) x (2h+1) cells;
    ``average`` selects the mean of neighbour distances, otherwise the minimum.
    Read-only with respect to the canvas.
    """

    def __init__(
        self,
        canvas: Canvas,
        distance: DistanceFn,
        half_width: int = 1,
        *,
        average: bool = True,
    ) -> None:
        if half_width < 0:
            msg = f'half_width must be non-negative, got {half_width}'
            raise ValueError(msg)
        self.canvas = canvas
        self.distance = distance
        self.half_width = half_width
        self.average = average
        # None for custom distances: those are scanned in Python
        self.kernel = kernel_id(distance)

    @classmethod
    def from_settings(cls, canvas: Canvas, settings: AllRgbSettings) -> FitnessEvaluator:
        return cls(
            canvas,
            resolve_distance(settings.color_distance),
            settings.neighbourhood_half_width,
            average=settings.average,
        )

    def inverse_fitness(self, coord: Coordinate, color: Color) -> float:
        neighbours = self.canvas.neighbour_colors(coord, self.half_width)
        if not neighbours:
            return NO_NEIGHBOUR_FITNESS
        distance = self.distance
        if self.average:
            return sum(distance(color, n) for n in neighbours) / len(neighbours)
        return min(distance(color, n) for n in neighbours)

    def best_of(
        self, coords: Iterable[Coordinate], color: Color
    ) -> tuple[float, Coordinate] | None:
        """
        Minimum inverse fitness over ``coords``.

        Ties go to the first cell in row-major order, independent of the
        iteration order of ``coords``. Returns None for an empty input.
        """
        best: tuple[float, int, int] | None = None
        best_coord: Coordinate | None = None
        for coord in coords:
            key = (self.inverse_fitness(coord, color), coord.y, coord.x)
            if best is None or key < best:
                best = key
                best_coord = coord
        if best is None or best_coord is None:
            return None
        return best[0], best_coord

    def scan(
        self,
        coords: Sequence[Coordinate],
        color: Color,
        *,
        parallel: bool = False,
    ) -> tuple[float, Coordinate] | None:
        """
        Minimum inverse fitness over ``coords``, given in row-major order.

        Built-in distances are scored by the compiled kernel (multi-threaded
        when ``parallel``); the first minimum wins, which is the row-major
        tie-break because of the input order. Same result as ``best_of``.
        """
        if not coords:
            return None
        if self.kernel is None:
            return self.best_of(coords, color)

        n = len(coords)
        ys = np.fromiter((c.y for c in coords), dtype=np.int64, count=n)
        xs = np.fromiter((c.x for c in coords), dtype=np.int64, count=n)
        kernel = _scan_frontier_parallel if parallel else _scan_frontier_numba
        fitness = kernel(
            self.canvas.rgb,
            self.canvas.filled_mask,
            ys,
            xs,
            color.red,
            color.green,
            color.blue,
            self.half_width,
            self.kernel,
            int(self.average),
        )
        # argmin returns the first of equal minima
        i = int(np.argmin(fitness))
        return float(fitness[i]), coords[i]
