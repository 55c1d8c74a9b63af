"""Stack of voxel grids whose resolution doubles at each level."""

from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np

from .grid import Vec3, VoxelGrid


class MultiLevelVoxelGrid:
    """Grids over one box; level ``i`` has voxels ``2**i`` times the base size."""

    def __init__(
        self,
        base_resolution: float,
        min_bounds: Iterable[float],
        max_bounds: Iterable[float],
        num_levels: int,
    ) -> None:
        if num_levels < 0:
            raise ValueError("num_levels must not be negative")
        lower = tuple(min_bounds)
        upper = tuple(max_bounds)
        self._levels = [
            VoxelGrid(base_resolution * 2.0 ** level, lower, upper)
            for level in range(num_levels)
        ]
        self._base_resolution = float(base_resolution)
        self._min_bounds: Vec3 = tuple(float(v) for v in lower)  # type: ignore[assignment]
        self._max_bounds: Vec3 = tuple(float(v) for v in upper)  # type: ignore[assignment]

    def get_level(self, level: int) -> VoxelGrid:
        """Return the grid at ``level`` (0 is the finest)."""
        if not 0 <= level < len(self._levels):
            raise IndexError(f"level {level} out of range")
        return self._levels[level]

    @property
    def num_levels(self) -> int:
        return len(self._levels)

    @property
    def base_resolution(self) -> float:
        return self._base_resolution

    @property
    def min_bounds(self) -> Vec3:
        return self._min_bounds

    @property
    def max_bounds(self) -> Vec3:
        return self._max_bounds

    def update_higher_levels(self) -> None:
        """Rebuild each coarser level: a voxel is set if any of its 2x2x2 children is."""
        for finer, coarser in zip(self._levels, self._levels[1:]):
            self._downsample(finer, coarser)

    @staticmethod
    def _downsample(finer: VoxelGrid, coarser: VoxelGrid) -> None:
        cx, cy, cz = coarser.dimensions
        padded = np.zeros((2 * cx, 2 * cy, 2 * cz), dtype=bool)
        source = finer._data
        ex, ey, ez = (min(s, p) for s, p in zip(source.shape, padded.shape))
        padded[:ex, :ey, :ez] = source[:ex, :ey, :ez]
        coarser._data[...] = padded.reshape(cx, 2, cy, 2, cz, 2).any(axis=(1, 3, 5))

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[VoxelGrid]:
        return iter(self._levels)