"""Voxelization of shapes, lines, splines, point clouds and surfaces into boolean voxel grids."""

__version__ = "0.1.0"