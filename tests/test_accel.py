import numpy as np
import pytest

from tracekit.accel import Accel
from tracekit.common import TracerError
from tracekit.mesh import Mesh
from tracekit.ray import Ray

TRIANGLE = [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]


def make_accel(**kwargs):
    accel = Accel()
    accel.add_mesh(Mesh(TRIANGLE, [[0, 1, 2]], **kwargs))
    accel.build()
    return accel


def down_ray(x=0.25, y=0.25, **kwargs):
    return Ray([x, y, 1.0], [0.0, 0.0, -1.0], **kwargs)


def test_hit_position_lies_on_ray():
    accel = make_accel()
    ray = down_ray()
    its = accel.ray_intersect(ray)
    assert its is not None
    assert np.allclose(its.p, ray(its.t))
    assert its.t == pytest.approx(1.0)


def test_uv_without_texcoords_is_barycentric():
    its = make_accel().ray_intersect(down_ray(0.25, 0.25))
    assert np.allclose(its.uv, [0.25, 0.25])


def test_uv_from_texcoords_interpolates():
    texcoords = [[p[0], p[1]] for p in TRIANGLE]
    its = make_accel(texcoords=texcoords).ray_intersect(down_ray(0.3, 0.2))
    assert np.allclose(its.uv, its.p[:2])


def test_geometric_frame_is_orthonormal_to_triangle():
    its = make_accel().ray_intersect(down_ray())
    n = its.geo_frame.n
    assert np.linalg.norm(n) == pytest.approx(1.0)
    edges = np.array(TRIANGLE[1]) - TRIANGLE[0], np.array(TRIANGLE[2]) - TRIANGLE[0]
    assert all(abs(float(e @ n)) < 1e-12 for e in edges)
    assert its.sh_frame is its.geo_frame


def test_shading_frame_uses_normalized_vertex_normals():
    normals = [[0.0, 0.0, 2.0]] * 3
    its = make_accel(normals=normals).ray_intersect(down_ray())
    assert np.linalg.norm(its.sh_frame.n) == pytest.approx(1.0)
    assert np.allclose(its.sh_frame.n, its.geo_frame.n)


def test_miss_returns_none():
    assert make_accel().ray_intersect(down_ray(2.0, 2.0)) is None


def test_segment_end_limits_hits():
    assert make_accel().ray_intersect(down_ray(maxt=0.5)) is None


def test_closest_of_several_triangles_is_returned():
    positions = TRIANGLE + [[0.0, 0.0, -1.0], [1.0, 0.0, -1.0], [0.0, 1.0, -1.0]]
    accel = Accel()
    accel.add_mesh(Mesh(positions, [[3, 4, 5], [0, 1, 2]]))
    ray = down_ray()
    its = accel.ray_intersect(ray)
    assert its.p[2] == pytest.approx(0.0)
    assert ray.maxt == float("inf")


def test_shadow_ray_reports_blocking_hit():
    accel = make_accel()
    its = accel.ray_intersect(down_ray(), shadow_ray=True)
    assert its is not None
    assert its.mesh is accel.mesh
    assert accel.ray_intersect(down_ray(3.0, 3.0), shadow_ray=True) is None


def test_only_one_mesh_allowed():
    accel = make_accel()
    with pytest.raises(TracerError):
        accel.add_mesh(Mesh(TRIANGLE, [[0, 1, 2]]))


def test_bounding_box_follows_mesh():
    accel = make_accel()
    assert accel.bbox == accel.mesh.bbox


def test_empty_accel_finds_nothing():
    assert Accel().ray_intersect(down_ray()) is None