"""Common interface for objects that rasterise a shape into a voxel grid."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from .grid import VoxelGrid


class Voxelizer(ABC):
    """A shape that can mark its voxels in a :class:`VoxelGrid`."""

    def voxelize(
        self,
        resolution: float,
        min_bounds: Iterable[float],
        max_bounds: Iterable[float],
    ) -> VoxelGrid:
        """Create a fresh grid with the given geometry and fill it with this shape."""
        grid = VoxelGrid(resolution, min_bounds, max_bounds)
        self.fill(grid)
        return grid

    @abstractmethod
    def fill(self, grid: VoxelGrid) -> None:
        """Mark the voxels of ``grid`` occupied by this shape."""