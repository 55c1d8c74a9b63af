# voxkit

voxkit turns geometry into boolean voxel grids. A `VoxelGrid` covers an
axis-aligned box at a fixed resolution; voxelizers mark the cells that a
shape occupies. The heavy lifting is done with numpy.

## Installation

```
pip install voxkit
```

## The grid

```python
from voxkit.grid import VoxelGrid

grid = VoxelGrid(0.5, (0.0, 0.0, 0.0), (4.0, 4.0, 4.0))
print(grid.dimensions)            # (8, 8, 8): cells along x, y and z
grid.set((1, 2, 3), True)
print(grid.get((1, 2, 3)))        # True
print(grid.world_to_grid((1.2, 0.1, 3.9)))   # (2, 0, 7)
print(grid.grid_to_world((0, 0, 0)))         # centre of the first cell
print(grid.count_occupied(), grid.occupancy_rate())

grid.save("scene.vox")
same = VoxelGrid.load("scene.vox")
assert same == grid
```

`resolution`, `min_bounds`, `max_bounds`, `dimensions` and `origin` are
read-only properties. Reading a position outside the grid gives `False`;
writing one is ignored. `fill(value)`, `clear()` and
`set_region(lower, upper, value)` change many cells at once, and `copy()`
returns an independent grid. A resolution that is not positive, or bounds
that do not enclose a non-empty box, raise `ValueError`.

`save` writes a small binary file of the package's own layout (a header with
resolution, bounds and dimensions, followed by packed bits); `load` reads it
back and raises `ValueError` for a file that is truncated or not of that
layout.

## Voxelizing shapes

Each `voxelize_*` function builds a new grid from a resolution and bounds and
returns it.

```python
from voxkit.primitives import voxelize_box, voxelize_sphere
from voxkit.solids import voxelize_cylinder, voxelize_capsule
from voxkit.surfaces import voxelize_implicit_surface, extract_surface
from voxkit.lines import voxelize_line_bresenham

lo, hi = (0.0, 0.0, 0.0), (10.0, 10.0, 10.0)

box = voxelize_box((5, 5, 5), (4, 4, 4), 1.0, lo, hi)
ball = voxelize_sphere((5, 5, 5), 3.0, 1.0, lo, hi)
tube = voxelize_cylinder((5, 5, 5), (0, 0, 1), 2.0, 6.0, 1.0, lo, hi)
pill = voxelize_capsule((2, 5, 5), (8, 5, 5), 1.5, 1.0, lo, hi)
line = voxelize_line_bresenham((0, 0, 0), (9, 4, 2), 1.0, lo, hi)

blob = voxelize_implicit_surface(
    lambda p: sum((c - 5.0) ** 2 for c in p) ** 0.5 - 3.0, 1.0, lo, hi, 0.0
)
vertices, faces = extract_surface(blob, 0.0)
```

What each module offers:

- `voxkit.primitives`: `voxelize_box`, `voxelize_sphere`,
  `voxelize_corridor` (a corridor of given width and height along a list of
  waypoints; fewer than two waypoints give an empty grid) and
  `voxelize_mesh` (vertices plus faces given as index triples).
- `voxkit.solids`: `voxelize_cylinder`, `voxelize_cone`, `voxelize_torus`
  and `voxelize_capsule`.
- `voxkit.surfaces`: `voxelize_point_cloud` (a point radius of zero or less
  marks only the cell holding each point), `voxelize_implicit_surface`
  (cells whose centre has `sdf(centre) <= isovalue`), `voxelize_sdf`
  (sampled values with x varying fastest; a dimension or length mismatch
  raises `ValueError`) and `extract_surface`, which returns a list of
  vertices and a list of triangles, as index triples, along the boundary
  between occupied and empty cells. Occupancy is binary, so the `isovalue`
  passed to `extract_surface` does not change its result.
- `voxkit.lines`: `voxelize_line_rlv` (points sampled along the line),
  `voxelize_line_slv` (the same, plus the 26 neighbours of every sampled
  cell), and `voxelize_line_ilv` and `voxelize_line_bresenham` (integer
  error-accumulating lines between the cells of the two end points).
  `LineAlgorithm` is an enum whose `display_name` gives a readable name for
  each method.

## Voxelizer objects

Classes derived from `voxkit.base.Voxelizer` fill an existing grid with
`fill(grid)`, or create a new one with `voxelize(resolution, min_bounds,
max_bounds)`.

```python
from voxkit.shapes import SphereVoxelizer, PointCloudVoxelizer
from voxkit.spline import SplineType, create_spline_voxelizer

grid = SphereVoxelizer((5, 5, 5), 2.0).voxelize(0.5, lo, hi)
PointCloudVoxelizer([(1, 1, 1), (8, 8, 8)], 0.75).fill(grid)

points = [(1, 1, 1), (3, 5, 2), (6, 4, 7), (9, 8, 8)]
spline = create_spline_voxelizer(points, 0.8, SplineType.CATMULL_ROM)
curve = spline.voxelize(0.5, lo, hi)
print(spline.evaluate(0.5, 0), spline.derivative(0.5, 0))
print(spline.contains((3, 5, 2)))
```

`SplineType` offers `CATMULL_ROM`, `BSPLINE` and `BEZIER`; each segment
uses four consecutive control points. `create_spline_voxelizer` raises
`ValueError` for fewer than four control points, a radius that is not
positive, or an unknown spline type.

`voxkit.shapes` also has `Face` (a polygon whose unit normal is computed by
Newell's method) and `Triangle` (a triangle with a right-handed unit
normal). Both are frozen dataclasses for describing geometry; no voxelizer
in the package takes them as input.

## Multiple resolutions

```python
from voxkit.multilevel import MultiLevelVoxelGrid

pyramid = MultiLevelVoxelGrid(0.25, lo, hi, 3)
pyramid.get_level(0).set((4, 4, 4), True)
pyramid.update_higher_levels()
print(pyramid.get_level(1).get((2, 2, 2)))   # True
print(pyramid.num_levels)                    # 3
```

Each level doubles the cell size of the one below it; after
`update_higher_levels()` a coarse cell is occupied when any of the eight
finer cells under it is. `get_level` raises `IndexError` for a level that
does not exist, and the object can be iterated over and passed to `len()`.

## What voxkit does not do

voxkit has no viewer or renderer: it does not draw grids on screen. It has
no sparse or octree storage; grids are always dense, and the only file
format is the one written by `VoxelGrid.save`. There is no command-line
tool; everything is used from Python.

## Running the tests

```
pip install -e .[test]
pytest
```