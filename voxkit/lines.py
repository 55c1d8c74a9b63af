"""Line rasterisation: sampled, supercover and integer (Bresenham-style) variants."""

from __future__ import annotations

import math
from enum import Enum
from itertools import product
from typing import Iterable, Iterator

from .grid import Index3, VoxelGrid
from .primitives import _as_point


class LineAlgorithm(Enum):
    """The line rasterisation algorithms known to the package."""

    RLV = "Real Line Voxelisation"
    SLV = "Supercover Line Voxelisation"
    ILV = "Integer-only Line Voxelisation"
    DDA = "3D Digital Differential Analyser"
    BRESENHAM = "3D Bresenham"

    @property
    def display_name(self) -> str:
        """Human-readable name of the algorithm."""
        return self.value


def _sampled_cells(
    grid: VoxelGrid, start: Iterable[float], end: Iterable[float]
) -> Iterator[Index3]:
    """Cells of points stepped from ``start`` along the unit direction to ``end``.

    The parameter runs from 0 to 1 over the unit direction vector, in steps
    fixed by half the grid resolution and the segment length.
    """
    first = _as_point(start, "start")
    last = _as_point(end, "end")
    direction = last - first
    length = math.sqrt(float(direction @ direction))
    if length > 0.0:
        direction = direction / length
    step_size = grid.resolution * 0.5
    num_steps = int(length / step_size) + 1
    for i in range(num_steps + 1):
        t = i / num_steps
        yield grid.world_to_grid(first + t * direction)


def _integer_cells(start: Index3, end: Index3) -> Iterator[Index3]:
    """Cells of an integer error-accumulating line between two grid cells."""
    deltas = [abs(e - s) for s, e in zip(start, end)]
    steps = [1 if s < e else -1 for s, e in zip(start, end)]
    if deltas[0] >= deltas[1] and deltas[0] >= deltas[2]:
        major = 0
    elif deltas[1] >= deltas[2]:
        major = 1
    else:
        major = 2
    minors = [axis for axis in range(3) if axis != major]
    run = deltas[major]
    position = list(start)
    errors = {axis: 2 * deltas[axis] - run for axis in minors}
    for _ in range(run + 1):
        yield tuple(position)  # type: ignore[misc]
        for axis in minors:
            if errors[axis] > 0:
                position[axis] += steps[axis]
                errors[axis] -= 2 * run
            errors[axis] += 2 * deltas[axis]
        position[major] += steps[major]


def _integer_line(
    grid: VoxelGrid, start: Iterable[float], end: Iterable[float]
) -> None:
    first = grid.world_to_grid(_as_point(start, "start"))
    last = grid.world_to_grid(_as_point(end, "end"))
    for cell in _integer_cells(first, last):
        grid.set(cell, True)


def voxelize_line_rlv(
    start: Iterable[float],
    end: Iterable[float],
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid with the cells of points sampled from ``start`` along the line set."""
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    for cell in _sampled_cells(grid, start, end):
        grid.set(cell, True)
    return grid


def voxelize_line_slv(
    start: Iterable[float],
    end: Iterable[float],
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Like :func:`voxelize_line_rlv`, also setting the 26 neighbours of each cell."""
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    for cell in _sampled_cells(grid, start, end):
        for offset in product((-1, 0, 1), repeat=3):
            neighbour = tuple(c + o for c, o in zip(cell, offset))
            if grid.is_inside_grid(neighbour):
                grid.set(neighbour, True)
    return grid


def voxelize_line_ilv(
    start: Iterable[float],
    end: Iterable[float],
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid with an integer-only line between the cells of ``start`` and ``end``."""
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    _integer_line(grid, start, end)
    return grid


def voxelize_line_bresenham(
    start: Iterable[float],
    end: Iterable[float],
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid with a 3D Bresenham line between the cells of ``start`` and ``end``."""
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    _integer_line(grid, start, end)
    return grid