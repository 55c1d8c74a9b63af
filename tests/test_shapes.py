import math

import numpy as np
import pytest

from voxkit.grid import VoxelGrid
from voxkit.primitives import voxelize_sphere
from voxkit.shapes import Face, PointCloudVoxelizer, SphereVoxelizer, Triangle

LOWER = (0.0, 0.0, 0.0)
UPPER = (8.0, 8.0, 8.0)


def test_sphere_matches_functional_sphere():
    grid = SphereVoxelizer((4.0, 4.0, 4.0), 2.5).voxelize(1.0, LOWER, UPPER)
    assert grid == voxelize_sphere((4.0, 4.0, 4.0), 2.5, 1.0, LOWER, UPPER)


def test_sphere_voxels_lie_within_radius():
    center = np.array([3.2, 4.1, 3.9])
    grid = SphereVoxelizer(center, 2.0).voxelize(0.5, LOWER, UPPER)
    assert grid.count_occupied() > 0
    for x in range(grid.dimensions[0]):
        for y in range(grid.dimensions[1]):
            for z in range(grid.dimensions[2]):
                world = np.array(grid.grid_to_world((x, y, z)))
                inside = float(np.sum((world - center) ** 2)) <= 4.0
                assert grid.get((x, y, z)) == inside


def test_sphere_fill_keeps_existing_voxels():
    grid = VoxelGrid(1.0, LOWER, UPPER)
    grid.set((0, 0, 0), True)
    SphereVoxelizer((6.0, 6.0, 6.0), 1.0).fill(grid)
    assert grid.get((0, 0, 0))
    assert grid.get(grid.world_to_grid((6.0, 6.0, 6.0))) or grid.count_occupied() > 1


def test_sphere_outside_grid_sets_nothing():
    grid = SphereVoxelizer((50.0, 50.0, 50.0), 1.0).voxelize(1.0, LOWER, UPPER)
    assert grid.count_occupied() == 0


def test_point_cloud_zero_radius_hits_centre_voxel():
    grid = PointCloudVoxelizer([(0.5, 0.5, 0.5)], 0.0).voxelize(1.0, LOWER, UPPER)
    assert grid.count_occupied() == 1
    assert grid.get((0, 0, 0))


def test_point_cloud_single_point_matches_sphere():
    cloud = PointCloudVoxelizer([(4.0, 4.0, 4.0)], 2.5).voxelize(1.0, LOWER, UPPER)
    sphere = SphereVoxelizer((4.0, 4.0, 4.0), 2.5).voxelize(1.0, LOWER, UPPER)
    assert cloud == sphere


def test_point_cloud_is_union_of_balls():
    points = [(2.0, 2.0, 2.0), (6.0, 6.0, 6.0)]
    cloud = PointCloudVoxelizer(points, 1.5).voxelize(1.0, LOWER, UPPER)
    first = SphereVoxelizer(points[0], 1.5).voxelize(1.0, LOWER, UPPER)
    second = SphereVoxelizer(points[1], 1.5).voxelize(1.0, LOWER, UPPER)
    assert np.array_equal(cloud._data, first._data | second._data)


def test_point_cloud_empty_sets_nothing():
    grid = PointCloudVoxelizer([], 1.0).voxelize(1.0, LOWER, UPPER)
    assert grid.count_occupied() == 0


def test_point_cloud_rejects_bad_point():
    with pytest.raises(ValueError):
        PointCloudVoxelizer([(1.0, 2.0)], 1.0)


def test_face_normal_of_counter_clockwise_square():
    face = Face([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)])
    assert face.normal == pytest.approx((0.0, 0.0, 1.0))


def test_face_normal_flips_with_winding():
    square = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    forward = Face(square)
    backward = Face(list(reversed(square)))
    assert backward.normal == pytest.approx(tuple(-c for c in forward.normal))


def test_face_degenerate_normal_is_zero():
    face = Face([(0, 0, 0), (1, 1, 1), (2, 2, 2)])
    assert face.normal == (0.0, 0.0, 0.0)


def test_face_vertices_are_stored_as_tuples():
    face = Face([[0, 0, 0], [1, 0, 0], [0, 0, 1]])
    assert face.vertices == ((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0))


def test_triangle_normal_right_hand_rule():
    tri = Triangle((0, 0, 0), (1, 0, 0), (0, 1, 0))
    assert tri.normal == pytest.approx((0.0, 0.0, 1.0))


def test_triangle_normal_is_unit_and_orthogonal():
    tri = Triangle((0.3, -1.2, 2.0), (4.0, 0.5, -1.0), (-2.0, 3.0, 0.7))
    normal = np.array(tri.normal)
    assert math.isclose(float(np.linalg.norm(normal)), 1.0, rel_tol=1e-9)
    edge1 = np.subtract(tri.v1, tri.v0)
    edge2 = np.subtract(tri.v2, tri.v0)
    assert abs(float(normal @ edge1)) < 1e-9
    assert abs(float(normal @ edge2)) < 1e-9


def test_triangle_agrees_with_face():
    points = [(0.3, -1.2, 2.0), (4.0, 0.5, -1.0), (-2.0, 3.0, 0.7)]
    assert Triangle(*points).normal == pytest.approx(Face(points).normal)


def test_triangle_degenerate_normal_is_zero():
    tri = Triangle((1, 1, 1), (1, 1, 1), (2, 2, 2))
    assert tri.normal == (0.0, 0.0, 0.0)