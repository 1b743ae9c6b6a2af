"""Triangle meshes, shading frames and intersection records."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from tracekit.bbox import BoundingBox
from tracekit.bsdf import BSDF, Diffuse
from tracekit.common import TracerError, indent
from tracekit.ray import Ray
from tracekit.vector import coordinate_system, format_vector


@dataclass(eq=False)
class Frame:
    """Orthonormal frame with tangents ``s``, ``t`` and normal ``n``."""

    s: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0]))
    t: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    n: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))

    @classmethod
    def from_normal(cls, n) -> Frame:
        """A frame around the unit normal ``n``."""
        normal = np.array(n, dtype=float)
        s, t = coordinate_system(normal)
        return cls(s, t, normal)

    def to_local(self, v) -> np.ndarray:
        """Express a world-space vector in this frame."""
        vector = np.asarray(v, dtype=float)
        return np.array(
            [float(vector @ self.s), float(vector @ self.t), float(vector @ self.n)]
        )

    def to_world(self, v) -> np.ndarray:
        """Express a vector given in this frame in world space."""
        x, y, z = (float(c) for c in v)
        return self.s * x + self.t * y + self.n * z

    def __str__(self) -> str:
        return (
            "Frame[\n"
            f"  s = {format_vector(self.s)},\n"
            f"  t = {format_vector(self.t)},\n"
            f"  n = {format_vector(self.n)}\n"
            "]"
        )


@dataclass(eq=False)
class Intersection:
    """Local information about a ray-triangle intersection."""

    p: np.ndarray = field(default_factory=lambda: np.zeros(3))
    t: float = math.inf
    uv: np.ndarray = field(default_factory=lambda: np.zeros(2))
    sh_frame: Frame = field(default_factory=Frame)
    geo_frame: Frame = field(default_factory=Frame)
    mesh: Mesh | None = None

    def to_local(self, d) -> np.ndarray:
        """Transform a direction into the shading frame."""
        return self.sh_frame.to_local(d)

    def to_world(self, d) -> np.ndarray:
        """Transform a direction from the shading frame to world space."""
        return self.sh_frame.to_world(d)

    def __str__(self) -> str:
        if self.mesh is None:
            return "Intersection[invalid]"
        return (
            "Intersection[\n"
            f"  p = {format_vector(self.p)},\n"
            f"  t = {self.t:f},\n"
            f"  uv = {format_vector(self.uv)},\n"
            f"  shFrame = {indent(str(self.sh_frame))},\n"
            f"  geoFrame = {indent(str(self.geo_frame))},\n"
            f"  mesh = {self.mesh}\n"
            "]"
        )


def _rows(data, width: int, dtype) -> np.ndarray:
    if data is None:
        return np.zeros((0, width), dtype=dtype)
    array = np.array(data, dtype=dtype)
    if array.size == 0:
        return np.zeros((0, width), dtype=dtype)
    return array.reshape(-1, width)


class Mesh:
    """A triangle mesh.

    ``positions`` and ``normals`` hold one row of three values per vertex,
    ``texcoords`` one row of two, and ``indices`` one row of three vertex
    indices per triangle. Normals and texture coordinates may be empty.
    """

    def __init__(
        self,
        positions,
        indices,
        normals=None,
        texcoords=None,
        name: str = "",
        bsdf: BSDF | None = None,
        emitter=None,
    ) -> None:
        self.positions = _rows(positions, 3, float)
        self.indices = _rows(indices, 3, np.int64)
        self.normals = _rows(normals, 3, float)
        self.texcoords = _rows(texcoords, 2, float)
        self.name = name
        self.bsdf = bsdf
        self.emitter = emitter
        if len(self.positions):
            self.bbox = BoundingBox(
                self.positions.min(axis=0), self.positions.max(axis=0)
            )
        else:
            self.bbox = BoundingBox.empty(3)

    @property
    def is_emitter(self) -> bool:
        """Whether an area emitter is attached."""
        return self.emitter is not None

    def triangle_count(self) -> int:
        """Number of triangles."""
        return len(self.indices)

    def vertex_count(self) -> int:
        """Number of vertices."""
        return len(self.positions)

    def _vertices(self, index: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        i0, i1, i2 = self.indices[index]
        return self.positions[i0], self.positions[i1], self.positions[i2]

    def surface_area(self, index: int) -> float:
        """Area of one triangle."""
        p0, p1, p2 = self._vertices(index)
        return 0.5 * float(np.linalg.norm(np.cross(p1 - p0, p2 - p0)))

    def triangle_bounding_box(self, index: int) -> BoundingBox:
        """Axis-aligned box around one triangle."""
        p0, p1, p2 = self._vertices(index)
        box = BoundingBox.from_point(p0)
        box.expand_by(p1)
        box.expand_by(p2)
        return box

    def centroid(self, index: int) -> np.ndarray:
        """Centroid of one triangle."""
        p0, p1, p2 = self._vertices(index)
        return (1.0 / 3.0) * (p0 + p1 + p2)

    def ray_intersect(self, index: int, ray: Ray) -> tuple[float, float, float] | None:
        """Intersect a ray segment with one triangle.

        Returns the barycentric ``(u, v)`` and distance ``t`` of the hit,
        or None when the segment misses the triangle.
        """
        p0, p1, p2 = self._vertices(index)
        edge1 = p1 - p0
        edge2 = p2 - p0

        pvec = np.cross(ray.d, edge2)
        det = float(edge1 @ pvec)
        if -1e-8 < det < 1e-8:
            return None
        inv_det = 1.0 / det

        tvec = ray.o - p0
        u = float(tvec @ pvec) * inv_det
        if u < 0.0 or u > 1.0:
            return None

        qvec = np.cross(tvec, edge1)
        v = float(ray.d @ qvec) * inv_det
        if v < 0.0 or u + v > 1.0:
            return None

        t = float(edge2 @ qvec) * inv_det
        if ray.mint <= t <= ray.maxt:
            return u, v, t
        return None

    def add_child(self, child) -> None:
        """Attach a BSDF to the mesh."""
        if isinstance(child, BSDF):
            if self.bsdf is not None:
                raise TracerError("Mesh: tried to register multiple BSDF instances!")
            self.bsdf = child
            return
        raise TracerError(
            f"Mesh.add_child(<{type(child).__name__}>) is not supported!"
        )

    def activate(self) -> None:
        """Assign a diffuse BSDF when no material was given."""
        if self.bsdf is None:
            self.bsdf = Diffuse()

    def __str__(self) -> str:
        bsdf = indent(str(self.bsdf)) if self.bsdf is not None else "null"
        emitter = indent(str(self.emitter)) if self.emitter is not None else "null"
        return (
            "Mesh[\n"
            f'  name = "{self.name}",\n'
            f"  vertexCount = {self.vertex_count()},\n"
            f"  triangleCount = {self.triangle_count()},\n"
            f"  bsdf = {bsdf},\n"
            f"  emitter = {emitter}\n"
            "]"
        )