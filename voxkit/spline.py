"""Voxelization of a tube of fixed radius around a piecewise cubic spline."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Sequence, Union

import numpy as np

from .base import Voxelizer
from .grid import VoxelGrid
from .primitives import _as_point, _mark, _world_region

_STEPS_PER_SEGMENT = 100
_DERIVATIVE_STEP = 0.001


class SplineType(IntEnum):
    """Kinds of cubic spline; each segment uses four consecutive control points."""

    CATMULL_ROM = 0
    BSPLINE = 1
    BEZIER = 2


class SplineVoxelizer(Voxelizer):
    """A tube of ``radius`` around a spline through sliding windows of four points.

    The curve is sampled at 100 evenly spaced parameters in ``[0, 1)`` per
    segment; a point belongs to the tube when it lies within ``radius`` of a
    sample.
    """

    def __init__(
        self,
        control_points: Sequence[Iterable[float]],
        radius: float,
        spline_type: Union[SplineType, int] = SplineType.CATMULL_ROM,
    ) -> None:
        self.control_points = [_as_point(p, "control point") for p in control_points]
        self.radius = float(radius)
        try:
            self.spline_type = SplineType(spline_type)
        except ValueError:
            raise ValueError("Invalid spline type") from None
        self._samples = np.array(
            [
                self.evaluate(step / _STEPS_PER_SEGMENT, segment)
                for segment in range(self.num_segments)
                for step in range(_STEPS_PER_SEGMENT)
            ],
            dtype=float,
        ).reshape(-1, 3)

    @property
    def num_segments(self) -> int:
        return max(0, len(self.control_points) - 3)

    def evaluate(self, t: float, segment: int) -> np.ndarray:
        """Point of the curve at parameter ``t`` within ``segment``."""
        if not 0 <= segment < self.num_segments:
            raise IndexError(f"segment {segment} out of range")
        p0, p1, p2, p3 = self.control_points[segment:segment + 4]
        t = float(t)
        t2 = t * t
        t3 = t2 * t
        if self.spline_type is SplineType.CATMULL_ROM:
            a = -0.5 * p0 + 1.5 * p1 - 1.5 * p2 + 0.5 * p3
            b = p0 - 2.5 * p1 + 2.0 * p2 - 0.5 * p3
            c = -0.5 * p0 + 0.5 * p2
            return a * t3 + b * t2 + c * t + p1
        if self.spline_type is SplineType.BSPLINE:
            b0 = (1 - t) ** 3 / 6.0
            b1 = (3 * t3 - 6 * t2 + 4) / 6.0
            b2 = (-3 * t3 + 3 * t2 + 3 * t + 1) / 6.0
            b3 = t3 / 6.0
            return p0 * b0 + p1 * b1 + p2 * b2 + p3 * b3
        mt = 1 - t
        return p0 * mt ** 3 + 3 * p1 * mt * mt * t + 3 * p2 * mt * t2 + p3 * t3

    def derivative(self, t: float, segment: int) -> np.ndarray:
        """Central-difference tangent of the curve at ``t`` within ``segment``."""
        h = _DERIVATIVE_STEP
        before = self.evaluate(t - h, segment)
        after = self.evaluate(t + h, segment)
        return (after - before) / (2 * h)

    def _near(self, points: np.ndarray) -> np.ndarray:
        flat = points.reshape(-1, 3)
        result = np.zeros(len(flat), dtype=bool)
        for sample in self._samples:
            result |= np.linalg.norm(flat - sample, axis=1) <= self.radius
        return result.reshape(points.shape[:-1])

    def contains(self, point: Iterable[float]) -> bool:
        """Whether ``point`` lies within ``radius`` of a curve sample."""
        target = _as_point(point, "point")
        return bool(self._near(target[np.newaxis])[0])

    def fill(self, grid: VoxelGrid) -> None:
        """Set the voxels whose centres lie inside the tube."""
        if not self.control_points:
            return
        cloud = np.array(self.control_points)
        region = _world_region(
            grid, cloud.min(axis=0) - self.radius, cloud.max(axis=0) + self.radius
        )
        if region is None:
            return
        slices, centres = region
        _mark(grid, slices, self._near(centres))


def create_spline_voxelizer(
    control_points: Sequence[Iterable[float]],
    radius: float,
    spline_type: Union[SplineType, int] = SplineType.CATMULL_ROM,
) -> SplineVoxelizer:
    """Build a :class:`SplineVoxelizer`, checking its arguments.

    Raises :class:`ValueError` for fewer than four control points, a
    non-positive radius or an unknown spline type.
    """
    points = list(control_points)
    if len(points) < 4:
        raise ValueError("Spline requires at least 4 control points")
    if float(radius) <= 0.0:
        raise ValueError("Radius must be positive")
    if spline_type not in {t.value for t in SplineType}:
        raise ValueError("Invalid spline type")
    return SplineVoxelizer(points, radius, spline_type)