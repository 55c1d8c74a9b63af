import math
from collections import Counter

import numpy as np
import pytest

from voxkit.grid import VoxelGrid
from voxkit.primitives import voxelize_sphere
from voxkit.surfaces import (
    extract_surface,
    voxelize_implicit_surface,
    voxelize_point_cloud,
    voxelize_sdf,
)

LOW = (0.0, 0.0, 0.0)
HIGH = (10.0, 10.0, 10.0)


def test_point_cloud_without_radius_marks_containing_cells():
    points = [(1.2, 1.7, 3.3), (1.8, 1.1, 3.9), (7.5, 2.5, 0.5)]
    grid = voxelize_point_cloud(points, 1.0, LOW, HIGH)
    assert grid.count_occupied() == 2
    assert grid.get((1, 1, 3)) is True
    assert grid.get((7, 2, 0)) is True


def test_point_cloud_ignores_points_outside():
    grid = voxelize_point_cloud([(-3.0, 5.0, 5.0), (50.0, 1.0, 1.0)], 1.0, LOW, HIGH)
    assert grid.count_occupied() == 0


def test_point_cloud_with_radius_matches_sphere():
    cloud = voxelize_point_cloud([(5, 5, 5)], 1.0, LOW, HIGH, point_radius=2.2)
    sphere = voxelize_sphere((5, 5, 5), 2.2, 1.0, LOW, HIGH)
    assert cloud == sphere
    assert cloud.count_occupied() > 0


def test_point_cloud_is_union_of_points():
    a = voxelize_point_cloud([(3, 3, 3)], 1.0, LOW, HIGH, point_radius=1.5)
    b = voxelize_point_cloud([(7, 6, 5)], 1.0, LOW, HIGH, point_radius=1.5)
    both = voxelize_point_cloud([(3, 3, 3), (7, 6, 5)], 1.0, LOW, HIGH, point_radius=1.5)
    assert np.array_equal(both._data, a._data | b._data)


def test_implicit_sphere_matches_sphere():
    def sdf(p):
        return math.dist(p, (5.0, 5.0, 5.0)) - 2.2

    grid = voxelize_implicit_surface(sdf, 1.0, LOW, HIGH)
    assert grid == voxelize_sphere((5, 5, 5), 2.2, 1.0, LOW, HIGH)


def test_implicit_isovalue_is_inclusive():
    empty = voxelize_implicit_surface(lambda p: 1.0, 1.0, LOW, (3, 3, 3), isovalue=0.0)
    full = voxelize_implicit_surface(lambda p: 1.0, 1.0, LOW, (3, 3, 3), isovalue=1.0)
    assert empty.count_occupied() == 0
    assert full.occupancy_rate() == pytest.approx(1.0)


def test_sdf_values_are_read_x_fastest():
    grid = voxelize_sdf(list(range(27)), (3, 3, 3), 1.0, LOW, (3, 3, 3), isovalue=4)
    assert grid.count_occupied() == 5
    assert grid.get((2, 0, 0)) is True
    assert grid.get((1, 1, 0)) is True
    assert grid.get((2, 1, 0)) is False
    assert grid.get((0, 0, 1)) is False


def test_sdf_dimension_mismatch_raises():
    with pytest.raises(ValueError):
        voxelize_sdf([0.0] * 27, (3, 3, 2), 1.0, LOW, (3, 3, 3))


def test_sdf_value_count_mismatch_raises():
    with pytest.raises(ValueError):
        voxelize_sdf([0.0] * 26, (3, 3, 3), 1.0, LOW, (3, 3, 3))


def test_extract_surface_of_uniform_grid_is_empty():
    grid = VoxelGrid(1.0, LOW, (5, 5, 5))
    assert extract_surface(grid) == ([], [])
    grid.fill(True)
    assert extract_surface(grid) == ([], [])


def _edge_counts(faces):
    counts = Counter()
    for a, b, c in faces:
        for u, v in ((a, b), (b, c), (c, a)):
            counts[frozenset((u, v))] += 1
    return counts


def _signed_volume(vertices, faces):
    total = 0.0
    for a, b, c in faces:
        p, q, r = (np.array(vertices[i]) for i in (a, b, c))
        total += float(np.dot(p, np.cross(q, r))) / 6.0
    return total


def test_extract_surface_of_blob_is_closed_and_outward():
    grid = VoxelGrid(1.0, LOW, (6, 6, 6))
    grid.set_region((2, 2, 2), (3, 3, 3))
    vertices, faces = extract_surface(grid)
    assert faces
    assert all(0 <= i < len(vertices) for face in faces for i in face)
    assert set(_edge_counts(faces).values()) == {2}
    assert _signed_volume(vertices, faces) > 0.0


def test_extract_surface_of_cavity_points_inward():
    grid = VoxelGrid(1.0, LOW, (6, 6, 6))
    grid.fill(True)
    grid.set((3, 3, 3), False)
    vertices, faces = extract_surface(grid)
    assert set(_edge_counts(faces).values()) == {2}
    assert _signed_volume(vertices, faces) < 0.0


def test_extract_surface_vertices_centred_on_blob():
    grid = VoxelGrid(1.0, LOW, (6, 6, 6))
    grid.set_region((2, 2, 2), (3, 3, 3))
    vertices, _ = extract_surface(grid)
    lo = grid.grid_to_world((2, 2, 2))
    hi = grid.grid_to_world((3, 3, 3))
    expected = [(a + b) / 2 for a, b in zip(lo, hi)]
    centroid = np.mean(np.array(vertices), axis=0)
    assert centroid.tolist() == pytest.approx(expected)
    for v in vertices:
        assert all(lo_b <= c <= hi_b for c, lo_b, hi_b in zip(v, grid.min_bounds, grid.max_bounds))