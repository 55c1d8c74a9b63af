"""Rasterisation of boxes, spheres, corridors and triangle meshes."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

import numpy as np

from .grid import VoxelGrid

_Slices = tuple[slice, slice, slice]


def _as_point(values: Iterable[float], name: str) -> np.ndarray:
    point = np.asarray(tuple(values), dtype=float)
    if point.shape != (3,):
        raise ValueError(f"{name} must have exactly three components")
    return point


def _region(
    grid: VoxelGrid, lower: Iterable[int], upper: Iterable[int]
) -> Optional[tuple[_Slices, np.ndarray]]:
    """Clip an inclusive index box to the grid.

    Returns the slices addressing the box and the world centres of its voxels
    (shape ``(nx, ny, nz, 3)``), or ``None`` if nothing of the box is left.
    """
    lo = [max(0, int(v)) for v in lower]
    hi = [min(d - 1, int(v)) for v, d in zip(upper, grid.dimensions)]
    if any(a > b for a, b in zip(lo, hi)):
        return None
    slices: _Slices = tuple(slice(a, b + 1) for a, b in zip(lo, hi))  # type: ignore[assignment]
    axes = [
        origin + (np.arange(s.start, s.stop) + 0.5) * grid.resolution
        for origin, s in zip(grid.min_bounds, slices)
    ]
    mesh = np.meshgrid(*axes, indexing="ij")
    return slices, np.stack(mesh, axis=-1)


def _world_region(
    grid: VoxelGrid, lower: np.ndarray, upper: np.ndarray
) -> Optional[tuple[_Slices, np.ndarray]]:
    return _region(grid, grid.world_to_grid(lower), grid.world_to_grid(upper))


def _mark(grid: VoxelGrid, slices: _Slices, mask: np.ndarray) -> None:
    grid._data[slices] |= mask


def voxelize_box(
    center: Iterable[float],
    size: Iterable[float],
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid with every voxel between the box's lower and upper corner cells set."""
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    middle = _as_point(center, "center")
    half = _as_point(size, "size") * 0.5
    grid.set_region(grid.world_to_grid(middle - half), grid.world_to_grid(middle + half))
    return grid


def voxelize_sphere(
    center: Iterable[float],
    radius: float,
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid with every voxel whose centre lies within ``radius`` of ``center`` set."""
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    middle = _as_point(center, "center")
    radius = float(radius)
    cell = grid.world_to_grid(middle)
    reach = int(math.ceil(radius / grid.resolution))
    region = _region(grid, (c - reach for c in cell), (c + reach for c in cell))
    if region is not None:
        slices, centres = region
        dist_sq = np.sum((centres - middle) ** 2, axis=-1)
        _mark(grid, slices, dist_sq <= radius * radius)
    return grid


def voxelize_corridor(
    waypoints: Sequence[Iterable[float]],
    width: float,
    height: float,
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid holding a corridor of the given width and height along a polyline.

    A voxel belongs to a segment when its centre is within ``width / 2`` of the
    segment and its height differs from the nearest segment point by at most
    ``height / 2``. Fewer than two waypoints give an empty grid.
    """
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    points = [_as_point(p, "waypoint") for p in waypoints]
    if len(points) < 2:
        return grid
    half_width = float(width) * 0.5
    half_height = float(height) * 0.5
    margin = np.array([half_width, half_height, half_width])

    for start, end in zip(points, points[1:]):
        direction = end - start
        length = float(np.linalg.norm(direction))
        if length > 0.0:
            direction = direction / length
        region = _world_region(grid, start - margin, end + margin)
        if region is None:
            continue
        slices, centres = region
        t = np.clip((centres - start) @ direction, 0.0, length)
        projection = start + t[..., np.newaxis] * direction
        dist = np.linalg.norm(centres - projection, axis=-1)
        vertical = np.abs(centres[..., 1] - projection[..., 1])
        _mark(grid, slices, (dist <= half_width) & (vertical <= half_height))
    return grid


def voxelize_mesh(
    vertices: Sequence[Iterable[float]],
    faces: Sequence[Iterable[int]],
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid marking voxels inside the mesh's bounding box that project into a face.

    A voxel is set when the barycentric coordinates of its centre, projected
    onto the plane of some triangle, are all non-negative.
    """
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    verts = np.asarray([tuple(v) for v in vertices], dtype=float)
    if verts.size == 0:
        raise ValueError("a mesh needs at least one vertex")
    if verts.ndim != 2 or verts.shape[1] != 3:
        raise ValueError("vertices must have exactly three components")
    count = len(verts)

    triangles = []
    for face in faces:
        indices = tuple(int(i) for i in face)
        if len(indices) != 3:
            raise ValueError("a face must have exactly three vertex indices")
        if any(not 0 <= i < count for i in indices):
            raise IndexError(f"face {indices} refers to a missing vertex")
        triangles.append(verts[list(indices)])

    region = _world_region(grid, verts.min(axis=0), verts.max(axis=0))
    if region is None:
        return grid
    slices, centres = region
    inside = np.zeros(centres.shape[:-1], dtype=bool)

    with np.errstate(divide="ignore", invalid="ignore"):
        for v0, v1, v2 in triangles:
            e1 = v1 - v0
            e2 = v2 - v0
            rel = centres - v0
            d00 = e1 @ e1
            d01 = e1 @ e2
            d11 = e2 @ e2
            d20 = rel @ e1
            d21 = rel @ e2
            denom = d00 * d11 - d01 * d01
            v = (d11 * d20 - d01 * d21) / denom
            w = (d00 * d21 - d01 * d20) / denom
            u = 1.0 - v - w
            inside |= (u >= 0) & (v >= 0) & (w >= 0)

    _mark(grid, slices, inside)
    return grid