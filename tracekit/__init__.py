"""Building blocks for a small ray tracer: geometry, materials, meshes and images."""

__version__ = "0.1.0"