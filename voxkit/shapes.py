"""Sphere and point-cloud voxelizers, and the face types used to describe meshes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from .base import Voxelizer
from .grid import Vec3, VoxelGrid
from .primitives import _as_point, _mark, _region


def _normalized(vector: np.ndarray) -> Vec3:
    """Return ``vector`` at unit length; a zero vector stays zero."""
    length = float(np.linalg.norm(vector))
    if length > 0.0:
        vector = vector / length
    return tuple(float(v) for v in vector)  # type: ignore[return-value]


def _fill_ball(grid: VoxelGrid, center: np.ndarray, radius: float) -> None:
    """Set the voxels whose centres lie within ``radius`` of ``center``.

    Only the cube of ``ceil(radius / resolution)`` cells around the voxel
    containing ``center`` is examined.
    """
    cell = grid.world_to_grid(center)
    reach = int(math.ceil(radius / grid.resolution))
    region = _region(grid, (c - reach for c in cell), (c + reach for c in cell))
    if region is None:
        return
    slices, centres = region
    dist_sq = np.sum((centres - center) ** 2, axis=-1)
    _mark(grid, slices, dist_sq <= radius * radius)


class SphereVoxelizer(Voxelizer):
    """A solid sphere."""

    def __init__(self, center: Iterable[float], radius: float) -> None:
        self.center = _as_point(center, "center")
        self.radius = float(radius)

    def fill(self, grid: VoxelGrid) -> None:
        """Set every voxel whose centre lies within the sphere."""
        _fill_ball(grid, self.center, self.radius)


class PointCloudVoxelizer(Voxelizer):
    """A set of points, each grown into a ball of ``point_radius``."""

    def __init__(self, points: Sequence[Iterable[float]], point_radius: float) -> None:
        self.points = [_as_point(p, "point") for p in points]
        self.point_radius = float(point_radius)

    def fill(self, grid: VoxelGrid) -> None:
        """Set every voxel whose centre lies within ``point_radius`` of some point."""
        for point in self.points:
            _fill_ball(grid, point, self.point_radius)


@dataclass(frozen=True)
class Face:
    """A planar polygon with a unit normal computed by Newell's method."""

    vertices: tuple[Vec3, ...]
    normal: Vec3 = field(init=False)

    def __post_init__(self) -> None:
        verts = tuple(
            tuple(float(c) for c in _as_point(v, "vertex")) for v in self.vertices
        )
        object.__setattr__(self, "vertices", verts)
        normal = np.zeros(3)
        for current, following in zip(verts, verts[1:] + verts[:1]):
            cx, cy, cz = current
            nx, ny, nz = following
            normal[0] += (cy - ny) * (cz + nz)
            normal[1] += (cz - nz) * (cx + nx)
            normal[2] += (cx - nx) * (cy + ny)
        object.__setattr__(self, "normal", _normalized(normal))


@dataclass(frozen=True)
class Triangle:
    """A triangle with a unit normal following the right-hand rule v0, v1, v2."""

    v0: Vec3
    v1: Vec3
    v2: Vec3
    normal: Vec3 = field(init=False)

    def __post_init__(self) -> None:
        a = _as_point(self.v0, "v0")
        b = _as_point(self.v1, "v1")
        c = _as_point(self.v2, "v2")
        for name, value in (("v0", a), ("v1", b), ("v2", c)):
            object.__setattr__(self, name, tuple(float(x) for x in value))
        object.__setattr__(self, "normal", _normalized(np.cross(b - a, c - a)))