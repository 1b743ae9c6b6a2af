[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tracekit"
version = "0.1.0"
description = "Building blocks for a small ray tracer: vectors, rays, bounding boxes, meshes, BSDFs, OBJ loading and filtered image blocks"
requires-python = ">=3.10"
keywords = ["ray tracing", "rendering", "bsdf", "mesh", "wavefront obj", "graphics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tracekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
