"""Dense boolean voxel grid over an axis-aligned box."""

from __future__ import annotations

import math
import os
import struct
from typing import Iterable, Union

import numpy as np

Vec3 = tuple[float, float, float]
Index3 = tuple[int, int, int]
PathLike = Union[str, "os.PathLike[str]"]

_MAGIC = b"VXZG"
_HEADER = struct.Struct("<4s7d3i")
_EPSILON = 1e-6


def _vec3(values: Iterable[float], name: str) -> Vec3:
    items = tuple(float(v) for v in values)
    if len(items) != 3:
        raise ValueError(f"{name} must have exactly three components")
    return items  # type: ignore[return-value]


def _index3(values: Iterable[int]) -> Index3:
    items = tuple(int(v) for v in values)
    if len(items) != 3:
        raise ValueError("a grid position must have exactly three components")
    return items  # type: ignore[return-value]


class VoxelGrid:
    """A regular grid of occupied/empty cells covering ``[min_bounds, max_bounds]``.

    Cells are addressed by integer ``(x, y, z)`` positions. Reading a position
    outside the grid yields ``False``; writing one is ignored.
    """

    def __init__(
        self,
        resolution: float,
        min_bounds: Iterable[float],
        max_bounds: Iterable[float],
    ) -> None:
        resolution = float(resolution)
        if not resolution > 0.0:
            raise ValueError("resolution must be positive")
        lower = _vec3(min_bounds, "min_bounds")
        upper = _vec3(max_bounds, "max_bounds")
        if any(hi <= lo for lo, hi in zip(lower, upper)):
            raise ValueError("max_bounds must exceed min_bounds on every axis")
        self._resolution = resolution
        self._min_bounds = lower
        self._max_bounds = upper
        self._dimensions: Index3 = tuple(  # type: ignore[assignment]
            max(1, math.ceil((hi - lo) / resolution - _EPSILON))
            for lo, hi in zip(lower, upper)
        )
        self._data = np.zeros(self._dimensions, dtype=bool)

    @property
    def resolution(self) -> float:
        """Edge length of one voxel."""
        return self._resolution

    @property
    def min_bounds(self) -> Vec3:
        return self._min_bounds

    @property
    def max_bounds(self) -> Vec3:
        return self._max_bounds

    @property
    def dimensions(self) -> Index3:
        """Number of voxels along x, y and z."""
        return self._dimensions

    @property
    def origin(self) -> Vec3:
        """World position of the grid's minimum corner."""
        return self._min_bounds

    def get(self, position: Iterable[int]) -> bool:
        """Return the value at ``position``; ``False`` outside the grid."""
        index = _index3(position)
        if not self.is_inside_grid(index):
            return False
        return bool(self._data[index])

    def set(self, position: Iterable[int], value: bool) -> None:
        """Set the value at ``position``; positions outside the grid are ignored."""
        index = _index3(position)
        if self.is_inside_grid(index):
            self._data[index] = bool(value)

    def fill(self, value: bool = True) -> None:
        self._data[...] = bool(value)

    def clear(self) -> None:
        self.fill(False)

    def set_region(
        self, lower: Iterable[int], upper: Iterable[int], value: bool = True
    ) -> None:
        """Set every voxel in the inclusive box ``lower..upper``, clipped to the grid."""
        lo = [max(0, v) for v in _index3(lower)]
        hi = [min(d - 1, v) for v, d in zip(_index3(upper), self._dimensions)]
        if any(a > b for a, b in zip(lo, hi)):
            return
        self._data[lo[0]:hi[0] + 1, lo[1]:hi[1] + 1, lo[2]:hi[2] + 1] = bool(value)

    def is_valid_position(self, position: Iterable[int]) -> bool:
        return self.is_inside_grid(position)

    def is_inside_grid(self, position: Iterable[int]) -> bool:
        return all(0 <= p < d for p, d in zip(_index3(position), self._dimensions))

    def world_to_grid(self, world_pos: Iterable[float]) -> Index3:
        """Index of the voxel containing ``world_pos`` (may lie outside the grid)."""
        point = _vec3(world_pos, "world_pos")
        return tuple(  # type: ignore[return-value]
            math.floor((p - lo) / self._resolution)
            for p, lo in zip(point, self._min_bounds)
        )

    def grid_to_world(self, grid_pos: Iterable[int]) -> Vec3:
        """World position of the centre of voxel ``grid_pos``."""
        index = _index3(grid_pos)
        return tuple(  # type: ignore[return-value]
            lo + (i + 0.5) * self._resolution
            for i, lo in zip(index, self._min_bounds)
        )

    def count_occupied(self) -> int:
        return int(np.count_nonzero(self._data))

    def occupancy_rate(self) -> float:
        total = self._data.size
        return self.count_occupied() / total if total else 0.0

    def copy(self) -> "VoxelGrid":
        duplicate = VoxelGrid(self._resolution, self._min_bounds, self._max_bounds)
        duplicate._data = self._data.copy()
        return duplicate

    def save(self, filename: PathLike) -> None:
        """Write the grid to ``filename`` in a compact binary form."""
        header = _HEADER.pack(
            _MAGIC,
            self._resolution,
            *self._min_bounds,
            *self._max_bounds,
            *self._dimensions,
        )
        bits = np.packbits(self._data.ravel(order="F"))
        with open(filename, "wb") as handle:
            handle.write(header)
            handle.write(bits.tobytes())

    @classmethod
    def load(cls, filename: PathLike) -> "VoxelGrid":
        """Read a grid written by :meth:`save`."""
        with open(filename, "rb") as handle:
            payload = handle.read()
        if len(payload) < _HEADER.size:
            raise ValueError("voxel grid file is truncated")
        magic, resolution, *rest = _HEADER.unpack_from(payload)
        if magic != _MAGIC:
            raise ValueError("not a voxel grid file")
        lower, upper, dims = rest[0:3], rest[3:6], tuple(rest[6:9])
        grid = cls(resolution, lower, upper)
        if grid.dimensions != dims:
            raise ValueError("voxel grid file has inconsistent dimensions")
        count = dims[0] * dims[1] * dims[2]
        body = np.frombuffer(payload, dtype=np.uint8, offset=_HEADER.size)
        if body.size * 8 < count:
            raise ValueError("voxel grid file is truncated")
        flat = np.unpackbits(body, count=count).astype(bool)
        grid._data = flat.reshape(dims, order="F")
        return grid

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VoxelGrid):
            return NotImplemented
        return (
            self._resolution == other._resolution
            and self._min_bounds == other._min_bounds
            and self._max_bounds == other._max_bounds
            and np.array_equal(self._data, other._data)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"VoxelGrid(resolution={self._resolution}, "
            f"min_bounds={self._min_bounds}, max_bounds={self._max_bounds}, "
            f"dimensions={self._dimensions})"
        )