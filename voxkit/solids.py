"""Rasterisation of cylinders, cones, tori and capsules."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .grid import VoxelGrid
from .primitives import _as_point, _mark, _world_region


def _unit(vector: np.ndarray) -> np.ndarray:
    """Return ``vector`` scaled to unit length; a zero vector is returned unchanged."""
    length = float(np.linalg.norm(vector))
    return vector / length if length > 0.0 else vector


def voxelize_cylinder(
    center: Iterable[float],
    axis: Iterable[float],
    radius: float,
    height: float,
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid with the voxels of a finite cylinder centred on ``center`` set.

    A voxel is set when its centre lies within ``height / 2`` of ``center``
    along ``axis`` and within ``radius`` of the axis line.
    """
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    middle = _as_point(center, "center")
    direction = _unit(_as_point(axis, "axis"))
    radius = float(radius)
    height = float(height)
    half_height = direction * (height * 0.5)

    region = _world_region(grid, middle - half_height - radius, middle + half_height + radius)
    if region is None:
        return grid
    slices, centres = region
    rel = centres - middle
    projection = rel @ direction
    radial = rel - projection[..., np.newaxis] * direction
    dist_sq = np.sum(radial ** 2, axis=-1)
    mask = (np.abs(projection) <= height * 0.5) & (dist_sq <= radius * radius)
    _mark(grid, slices, mask)
    return grid


def voxelize_cone(
    apex: Iterable[float],
    axis: Iterable[float],
    radius: float,
    height: float,
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid with the voxels of a cone set.

    The cone starts at ``apex`` and opens along ``axis`` to a base of
    ``radius`` at distance ``height``; its radius shrinks linearly towards the
    far end, measured from the apex.
    """
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    tip = _as_point(apex, "apex")
    direction = _unit(_as_point(axis, "axis"))
    radius = float(radius)
    height = float(height)
    base_center = tip + direction * height

    region = _world_region(grid, tip - radius, base_center + radius)
    if region is None:
        return grid
    slices, centres = region
    rel = centres - tip
    projection = rel @ direction
    radial = rel - projection[..., np.newaxis] * direction
    dist_sq = np.sum(radial ** 2, axis=-1)
    with np.errstate(divide="ignore", invalid="ignore"):
        local_radius = radius * (1.0 - projection / height)
        mask = (
            (projection >= 0.0)
            & (projection <= height)
            & (dist_sq <= local_radius * local_radius)
        )
    _mark(grid, slices, mask)
    return grid


def voxelize_torus(
    center: Iterable[float],
    axis: Iterable[float],
    major_radius: float,
    minor_radius: float,
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid with the voxels of a torus around ``axis`` through ``center`` set."""
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    middle = _as_point(center, "center")
    direction = _unit(_as_point(axis, "axis"))
    major_radius = float(major_radius)
    minor_radius = float(minor_radius)
    reach = major_radius + minor_radius

    region = _world_region(grid, middle - reach, middle + reach)
    if region is None:
        return grid
    slices, centres = region
    rel = centres - middle
    projection = rel @ direction
    planar = rel - projection[..., np.newaxis] * direction
    dist_to_axis = np.linalg.norm(planar, axis=-1)
    ring_dist_sq = (dist_to_axis - major_radius) ** 2 + projection ** 2
    _mark(grid, slices, ring_dist_sq <= minor_radius * minor_radius)
    return grid


def voxelize_capsule(
    start: Iterable[float],
    end: Iterable[float],
    radius: float,
    resolution: float,
    min_bounds: Iterable[float],
    max_bounds: Iterable[float],
) -> VoxelGrid:
    """Grid with every voxel within ``radius`` of the segment ``start``-``end`` set."""
    grid = VoxelGrid(resolution, min_bounds, max_bounds)
    first = _as_point(start, "start")
    last = _as_point(end, "end")
    radius = float(radius)
    segment = last - first
    length = float(np.linalg.norm(segment))
    direction = _unit(segment)

    region = _world_region(
        grid, np.minimum(first, last) - radius, np.maximum(first, last) + radius
    )
    if region is None:
        return grid
    slices, centres = region
    t = np.clip((centres - first) @ direction, 0.0, length)
    nearest = first + t[..., np.newaxis] * direction
    dist_sq = np.sum((centres - nearest) ** 2, axis=-1)
    _mark(grid, slices, dist_sq <= radius * radius)
    return grid