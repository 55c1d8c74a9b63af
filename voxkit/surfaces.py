"""Point clouds, implicit surfaces, sampled distance fields and surface extraction."""

from __future__ import annotations

from itertools import product
from typing import Callable, Iterable, Sequence

import numpy as np

from .grid import Index3, Vec3, VoxelGrid
from .primitives import _as_point, _mark, _region, _world_region

_CORNERS = list(product((0, 1), repeat=3))
_CUBE_EDGES = [
    (corner, tuple(1 if i == axis else c for i, c in enumerate(corner)))
    for corner in _CORNERS
    for axis in range(3)
    if corner[axis] == 0
]


def _offset(a: Iterable[int], b: Iterable[int], sign: int = 1) -> Index3:
    return tuple(x + sign * y for x, y in zip(a, b))  # type: ignore[return-value]


def _unit_step(axis: int) -> Index3:
    return tuple(1 if i == axis else 0 for i in range(3))  # type: ignore[return-value]


def voxelize_point_cloud(
    points: Sequence[Iterable[float]],
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
    point_radius: float = 0.0,
) -> VoxelGrid:
    """Grid marking the points of a cloud.

    With a non-positive ``point_radius`` each point sets the voxel containing
    it; otherwise every voxel whose centre lies within ``point_radius`` of a
    point is set. Points outside the grid leave it unchanged.
    """
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    radius = float(point_radius)
    cloud = [_as_point(p, "point") for p in points]
    if radius <= 0.0:
        for point in cloud:
            grid.set(grid.world_to_grid(point), True)
        return grid
    for point in cloud:
        region = _world_region(grid, point - radius, point + radius)
        if region is None:
            continue
        slices, centres = region
        dist_sq = np.sum((centres - point) ** 2, axis=-1)
        _mark(grid, slices, dist_sq <= radius * radius)
    return grid


def voxelize_implicit_surface(
    sdf: Callable[[Vec3], float],
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
    isovalue: float = 0.0,
) -> VoxelGrid:
    """Grid with every voxel whose centre has ``sdf(centre) <= isovalue`` set."""
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    level = float(isovalue)
    for position in product(*(range(d) for d in grid.dimensions)):
        grid.set(position, float(sdf(grid.grid_to_world(position))) <= level)
    return grid


def voxelize_sdf(
    sdf_values: Sequence[float],
    dimensions: Iterable[int],
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
    isovalue: float = 0.0,
) -> VoxelGrid:
    """Grid built from sampled distances, one per voxel with x varying fastest.

    Raises :class:`ValueError` when ``dimensions`` differ from the grid's or
    the number of samples does not match.
    """
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    dims = tuple(int(d) for d in dimensions)
    if dims != grid.dimensions:
        raise ValueError("SDF dimensions do not match grid dimensions")
    values = np.asarray(sdf_values, dtype=float).ravel()
    if values.size != dims[0] * dims[1] * dims[2]:
        raise ValueError("number of SDF values does not match the dimensions")
    grid._data[...] = values.reshape(dims, order="F") <= float(isovalue)
    return grid


def extract_surface(
    grid: VoxelGrid, isovalue: float = 0.0
) -> tuple[list[Vec3], list[tuple[int, int, int]]]:
    """Triangulate the boundary between occupied and empty voxels.

    Voxel centres act as samples. Each 2x2x2 block of samples with mixed
    occupancy contributes one vertex, the mean of the midpoints of its edges
    that cross the boundary; each crossing sample edge contributes two
    triangles joining the four blocks around it, wound so that normals point
    from occupied to empty space. Occupancy is binary, so ``isovalue`` does
    not move the crossings from the edge midpoints.

    Returns ``(vertices, faces)`` with faces as vertex index triples.
    """
    del isovalue
    data = grid._data
    dims = grid.dimensions
    vertices: list[Vec3] = []
    faces: list[tuple[int, int, int]] = []
    if any(d < 2 for d in dims):
        return vertices, faces

    cell_vertex: dict[Index3, int] = {}
    for cell in product(*(range(d - 1) for d in dims)):
        crossings = []
        for lo, hi in _CUBE_EDGES:
            a = _offset(cell, lo)
            b = _offset(cell, hi)
            if bool(data[a]) != bool(data[b]):
                pa = grid.grid_to_world(a)
                pb = grid.grid_to_world(b)
                crossings.append([(u + v) * 0.5 for u, v in zip(pa, pb)])
        if crossings:
            count = len(crossings)
            cell_vertex[cell] = len(vertices)
            vertices.append(
                tuple(sum(c[i] for c in crossings) / count for i in range(3))  # type: ignore[arg-type]
            )

    for axis in range(3):
        b_axis = (axis + 1) % 3
        c_axis = (axis + 2) % 3
        ranges: list[range] = [range(0)] * 3
        ranges[axis] = range(dims[axis] - 1)
        ranges[b_axis] = range(1, dims[b_axis] - 1)
        ranges[c_axis] = range(1, dims[c_axis] - 1)
        step_a = _unit_step(axis)
        step_b = _unit_step(b_axis)
        step_c = _unit_step(c_axis)
        for sample in product(*ranges):
            inside = bool(data[sample])
            if inside == bool(data[_offset(sample, step_a)]):
                continue
            minus_b = _offset(sample, step_b, -1)
            minus_c = _offset(sample, step_c, -1)
            minus_bc = _offset(minus_b, step_c, -1)
            quad = [
                cell_vertex[minus_bc],
                cell_vertex[minus_c],
                cell_vertex[sample],
                cell_vertex[minus_b],
            ]
            if not inside:
                quad.reverse()
            faces.append((quad[0], quad[1], quad[2]))
            faces.append((quad[0], quad[2], quad[3]))
    return vertices, faces