[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxkit"
version = "0.1.0"
description = "Voxelization of geometric primitives, lines, splines, point clouds and implicit surfaces into boolean voxel grids"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["voxel", "voxelization", "geometry", "occupancy grid", "3d"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voxkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
