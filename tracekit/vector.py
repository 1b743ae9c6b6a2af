"""Vector helpers built on numpy arrays."""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np


def vec(*args) -> np.ndarray:
    """Build a float vector from components or from one iterable."""
    if len(args) == 1 and isinstance(args[0], (Iterable, np.ndarray)):
        return np.array(list(args[0]), dtype=float)
    return np.array(args, dtype=float)


def format_vector(v) -> str:
    """Render a vector as ``[a, b, ...]``."""
    array = np.asarray(v)
    if np.issubdtype(array.dtype, np.integer):
        parts = [str(int(x)) for x in array]
    else:
        parts = [f"{float(x):f}" for x in array]
    return "[" + ", ".join(parts) + "]"


def normalized(v) -> np.ndarray:
    """Return ``v`` scaled to unit length; a zero vector is returned unchanged."""
    array = np.asarray(v, dtype=float)
    norm = float(np.linalg.norm(array))
    if norm == 0.0:
        return array.copy()
    return array / norm


def spherical_direction(theta: float, phi: float) -> np.ndarray:
    """Unit direction for the given spherical coordinates."""
    sin_theta, cos_theta = math.sin(theta), math.cos(theta)
    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    return np.array([sin_theta * cos_phi, sin_theta * sin_phi, cos_theta])


def spherical_coordinates(v) -> np.ndarray:
    """Return (theta, phi) of a direction, with phi in [0, 2*pi)."""
    x, y, z = (float(c) for c in v)
    theta = math.acos(z) if -1.0 <= z <= 1.0 else math.nan
    phi = math.atan2(y, x)
    if phi < 0:
        phi += 2 * math.pi
    return np.array([theta, phi])


def coordinate_system(a) -> tuple[np.ndarray, np.ndarray]:
    """Complete the unit vector ``a`` to an orthonormal basis (b, c)."""
    ax, ay, az = (float(c) for c in a)
    if abs(ax) > abs(ay):
        inv_len = 1.0 / math.sqrt(ax * ax + az * az)
        c = np.array([az * inv_len, 0.0, -ax * inv_len])
    else:
        inv_len = 1.0 / math.sqrt(ay * ay + az * az)
        c = np.array([0.0, az * inv_len, -ay * inv_len])
    b = np.cross(c, np.array([ax, ay, az]))
    return b, c