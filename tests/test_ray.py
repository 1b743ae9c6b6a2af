import math

import numpy as np
import pytest

from tracekit.common import EPSILON
from tracekit.ray import Ray


def test_default_segment():
    ray = Ray([0, 0, 0], [0, 0, 1])
    assert ray.mint == EPSILON
    assert ray.maxt == math.inf


def test_reciprocal_direction():
    ray = Ray([1, 2, 3], [2.0, -4.0, 0.5])
    np.testing.assert_allclose(ray.d * ray.d_rcp, np.ones(3))


def test_zero_component_reciprocal_is_infinite():
    ray = Ray([0, 0, 0], [0.0, 1.0, 2.0])
    assert float(ray.d_rcp[0]) == math.inf
    assert float(ray.d_rcp[1]) == 1.0
    assert float(ray.d_rcp[2]) == 0.5


def test_update_after_changing_direction():
    ray = Ray([0, 0, 0], [1.0, 1.0, 1.0])
    ray.d = np.array([2.0, 4.0, 8.0])
    ray.update()
    np.testing.assert_allclose(ray.d * ray.d_rcp, np.ones(3))


def test_call_gives_point_along_ray():
    ray = Ray([1, 0, 0], [0, 1, 0])
    np.testing.assert_allclose(ray(0.0), ray.o)
    np.testing.assert_allclose(ray(2.0), [1.0, 2.0, 0.0])


def test_reverse():
    ray = Ray([1, 2, 3], [0.0, 0.5, -2.0], 0.25, 10.0)
    rev = ray.reverse()
    np.testing.assert_allclose(rev.o, ray.o)
    np.testing.assert_allclose(rev.d, -ray.d)
    np.testing.assert_allclose(rev.d_rcp, -ray.d_rcp)
    assert (rev.mint, rev.maxt) == (ray.mint, ray.maxt)
    back = rev.reverse()
    np.testing.assert_allclose(back.d, ray.d)


def test_reverse_does_not_share_origin():
    ray = Ray([1, 2, 3], [0, 0, 1])
    rev = ray.reverse()
    rev.o[0] = 99.0
    assert ray.o[0] == pytest.approx(1.0)


def test_with_segment():
    ray = Ray([1, 2, 3], [0, 1, 0])
    seg = ray.with_segment(0.5, 7.0)
    assert (seg.mint, seg.maxt) == (0.5, 7.0)
    np.testing.assert_allclose(seg.o, ray.o)
    np.testing.assert_allclose(seg.d, ray.d)
    assert ray.maxt == math.inf


def test_str():
    text = str(Ray([0, 0, 0], [0, 0, 1], 1.0, 2.0))
    assert text.startswith("Ray[\n  o = [")
    assert "mint = 1.000000" in text
    assert text.endswith("]")