import numpy as np
import pytest

from tracekit.common import TracerError
from tracekit.obj import ObjVertex, load_obj, parse_obj

TRIANGLE_OBJ = """\
# a single triangle
v 0 0 0
v 1 0 0
v 0 1 0
f 1 2 3
"""

QUAD_OBJ = """\
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
f 1 2 3 4
"""


def test_vertex_parse_full_triple():
    vertex = ObjVertex.parse("1/2/3")
    assert (vertex.p, vertex.uv, vertex.n) == (1, 2, 3)


def test_vertex_parse_missing_texcoord():
    vertex = ObjVertex.parse("4//5")
    assert vertex.p == 4
    assert vertex.n == 5
    assert vertex.uv == ObjVertex().uv


def test_vertex_parse_position_only():
    assert ObjVertex.parse("7") == ObjVertex(p=7)


@pytest.mark.parametrize("text", ["1/2/3/4", "x", "1/a"])
def test_vertex_parse_rejects_bad_data(text):
    with pytest.raises(TracerError):
        ObjVertex.parse(text)


def test_triangle_is_read():
    mesh = parse_obj(TRIANGLE_OBJ.splitlines(), name="tri")
    assert mesh.triangle_count() == 1
    assert mesh.vertex_count() == 3
    assert mesh.name == "tri"
    assert mesh.indices.tolist() == [[0, 1, 2]]


def test_quad_is_split_and_shares_vertices():
    mesh = parse_obj(QUAD_OBJ.splitlines())
    assert mesh.triangle_count() == 2
    assert mesh.vertex_count() == 4
    assert mesh.indices.tolist() == [[0, 1, 2], [3, 0, 2]]
    total = sum(mesh.surface_area(i) for i in range(mesh.triangle_count()))
    assert total == pytest.approx(1.0)


def test_normals_are_normalized_and_texcoords_kept():
    text = TRIANGLE_OBJ.replace("f 1 2 3", "vn 0 0 5\nvt 0.5 0.25\nf 1/1/1 2/1/1 3/1/1")
    mesh = parse_obj(text.splitlines())
    assert np.allclose(np.linalg.norm(mesh.normals, axis=1), 1.0)
    assert np.allclose(mesh.texcoords, [[0.5, 0.25]] * 3)


def test_bounding_box_covers_unused_vertices():
    mesh = parse_obj((TRIANGLE_OBJ + "v 5 5 5\n").splitlines())
    assert mesh.vertex_count() == 3
    assert mesh.bbox.contains([5.0, 5.0, 5.0])


def test_missing_position_index_raises():
    with pytest.raises(TracerError):
        parse_obj(["v 0 0 0", "f 1 2 3"])


def test_missing_normal_index_raises():
    with pytest.raises(TracerError):
        parse_obj(TRIANGLE_OBJ.replace("f 1 2 3", "vn 0 0 1\nf 1 2 3").splitlines())


def test_load_obj_from_file(tmp_path):
    path = tmp_path / "tri.obj"
    path.write_text(TRIANGLE_OBJ)
    mesh = load_obj(path)
    assert mesh.triangle_count() == 1
    assert mesh.name == str(path)


def test_load_obj_missing_file(tmp_path):
    with pytest.raises(TracerError):
        load_obj(tmp_path / "absent.obj")