"""Ray intersection queries against the scene geometry."""

from __future__ import annotations

import numpy as np

from tracekit.bbox import BoundingBox
from tracekit.common import TracerError
from tracekit.mesh import Frame, Intersection, Mesh
from tracekit.ray import Ray
from tracekit.vector import normalized


class Accel:
    """Acceleration structure for ray queries.

    The current implementation tests every triangle of its single mesh.
    """

    def __init__(self) -> None:
        self._mesh: Mesh | None = None
        self._triangles: range | None = None
        self.bbox = BoundingBox.empty(3)

    @property
    def mesh(self) -> Mesh | None:
        """The registered mesh, if any."""
        return self._mesh

    def add_mesh(self, mesh: Mesh) -> None:
        """Register the mesh to be searched; only one mesh is supported."""
        if self._mesh is not None:
            raise TracerError("Accel: only a single mesh is supported!")
        self._mesh = mesh
        self._triangles = None
        self.bbox = BoundingBox(mesh.bbox.min.copy(), mesh.bbox.max.copy())

    def build(self) -> None:
        """Prepare the structure for queries.

        Records the triangles of the registered mesh that queries will search.
        """
        mesh = self._mesh
        self._triangles = range(mesh.triangle_count()) if mesh is not None else range(0)

    def ray_intersect(self, ray: Ray, shadow_ray: bool = False) -> Intersection | None:
        """Find the closest intersection of the ray segment with the mesh.

        Returns None when nothing is hit. For a shadow ray the search stops
        at the first hit found, and the returned record only carries the
        mesh, the distance ``t`` and the barycentric ``uv`` of that hit.
        """
        mesh = self._mesh
        if mesh is None:
            return None
        if self._triangles is None:
            self.build()

        segment = ray.with_segment(ray.mint, ray.maxt)
        closest: tuple[int, float, float, float] | None = None

        for index in self._triangles:
            hit = mesh.ray_intersect(index, segment)
            if hit is None:
                continue
            u, v, t = hit
            if shadow_ray:
                return Intersection(t=t, uv=np.array([u, v]), mesh=mesh)
            segment.maxt = t
            closest = (index, u, v, t)

        if closest is None:
            return None
        return self._describe(mesh, *closest)

    @staticmethod
    def _describe(mesh: Mesh, index: int, u: float, v: float, t: float) -> Intersection:
        bary = np.array([1.0 - (u + v), u, v])
        i0, i1, i2 = mesh.indices[index]
        p0, p1, p2 = mesh.positions[i0], mesh.positions[i1], mesh.positions[i2]

        its = Intersection(t=t, uv=np.array([u, v]), mesh=mesh)
        its.p = bary[0] * p0 + bary[1] * p1 + bary[2] * p2

        if len(mesh.texcoords):
            uv = mesh.texcoords
            its.uv = bary[0] * uv[i0] + bary[1] * uv[i1] + bary[2] * uv[i2]

        its.geo_frame = Frame.from_normal(normalized(np.cross(p1 - p0, p2 - p0)))

        if len(mesh.normals):
            n = mesh.normals
            shading = bary[0] * n[i0] + bary[1] * n[i1] + bary[2] * n[i2]
            its.sh_frame = Frame.from_normal(normalized(shading))
        else:
            its.sh_frame = its.geo_frame
        return its