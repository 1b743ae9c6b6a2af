"""Loader for Wavefront OBJ triangle meshes."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from tracekit.bbox import BoundingBox
from tracekit.common import TracerError, mem_string, to_uint, tokenize
from tracekit.mesh import Mesh
from tracekit.timer import Timer
from tracekit.vector import normalized

logger = logging.getLogger(__name__)

_MISSING = 0xFFFFFFFF


@dataclass(frozen=True)
class ObjVertex:
    """One-based position, normal and texture coordinate indices of a corner."""

    p: int = _MISSING
    n: int = _MISSING
    uv: int = _MISSING

    @classmethod
    def parse(cls, text: str) -> ObjVertex:
        """Parse a face corner such as ``1``, ``1/2``, ``1//3`` or ``1/2/3``."""
        tokens = tokenize(text, "/", True)
        if not 1 <= len(tokens) <= 3:
            raise TracerError(f'Invalid vertex data: "{text}"')
        p = to_uint(tokens[0])
        uv = to_uint(tokens[1]) if len(tokens) >= 2 and tokens[1] else _MISSING
        n = to_uint(tokens[2]) if len(tokens) >= 3 and tokens[2] else _MISSING
        return cls(p=p, n=n, uv=uv)


def _read_floats(tokens: list[str], count: int) -> list[float]:
    """Read ``count`` numbers; a missing or unreadable one and all after it are 0."""
    values = [0.0] * count
    for position, token in enumerate(tokens[:count]):
        try:
            values[position] = float(token)
        except ValueError:
            break
    return values


def _lookup(table: list, index: int, kind: str):
    if not 1 <= index <= len(table):
        raise TracerError(f"OBJ file references missing {kind} index {index}")
    return table[index - 1]


def parse_obj(lines: Iterable[str], name: str = "") -> Mesh:
    """Build a mesh from the lines of an OBJ file.

    Quads are split into two triangles, and corners with the same index
    triple share one mesh vertex.
    """
    positions: list[list[float]] = []
    texcoords: list[list[float]] = []
    normals: list[np.ndarray] = []
    indices: list[int] = []
    vertices: list[ObjVertex] = []
    vertex_map: dict[ObjVertex, int] = {}
    bbox = BoundingBox.empty(3)

    for line in lines:
        tokens = line.split()
        if not tokens:
            continue
        prefix, args = tokens[0], tokens[1:]
        if prefix == "v":
            p = _read_floats(args, 3)
            bbox.expand_by(p)
            positions.append(p)
        elif prefix == "vt":
            texcoords.append(_read_floats(args, 2))
        elif prefix == "vn":
            normals.append(normalized(_read_floats(args, 3)))
        elif prefix == "f":
            corners = (args + ["", "", "", ""])[:4]
            verts = [ObjVertex.parse(text) for text in corners[:3]]
            if corners[3]:
                verts += [ObjVertex.parse(corners[3]), verts[0], verts[2]]
            for vertex in verts:
                if vertex not in vertex_map:
                    vertex_map[vertex] = len(vertices)
                    vertices.append(vertex)
                indices.append(vertex_map[vertex])

    mesh_positions = [_lookup(positions, v.p, "position") for v in vertices]
    mesh_normals = (
        [_lookup(normals, v.n, "normal") for v in vertices] if normals else None
    )
    mesh_texcoords = (
        [_lookup(texcoords, v.uv, "texture coordinate") for v in vertices]
        if texcoords
        else None
    )

    mesh = Mesh(
        mesh_positions,
        indices,
        normals=mesh_normals,
        texcoords=mesh_texcoords,
        name=name,
    )
    mesh.bbox = bbox
    return mesh


def load_obj(path) -> Mesh:
    """Load an OBJ file from disk into a mesh named after its path."""
    filename = Path(path)
    timer = Timer()
    logger.info('Loading "%s" ..', filename)
    try:
        with filename.open("r", encoding="utf-8", errors="replace") as stream:
            mesh = parse_obj(stream, name=str(filename))
    except OSError as exc:
        raise TracerError(f'Unable to open OBJ file "{filename}"!') from exc

    memory = 4 * (mesh.indices.size + mesh.positions.size + mesh.normals.size
                  + mesh.texcoords.size)
    logger.info(
        "done. (V=%d, F=%d, took %s and %s)",
        mesh.vertex_count(),
        mesh.triangle_count(),
        timer.elapsed_string(),
        mem_string(memory),
    )
    return mesh