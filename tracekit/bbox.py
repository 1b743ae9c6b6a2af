"""Axis-aligned bounding boxes of any dimension."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from tracekit.ray import Ray
from tracekit.vector import format_vector


def _as_point(p) -> np.ndarray:
    array = np.array(p)
    if np.issubdtype(array.dtype, np.integer):
        return array
    return array.astype(float)


@dataclass(eq=False)
class BoundingBox:
    """An axis-aligned box given by its componentwise minimum and maximum."""

    min: np.ndarray
    max: np.ndarray

    def __post_init__(self) -> None:
        self.min = _as_point(self.min)
        self.max = _as_point(self.max)

    @classmethod
    def empty(cls, dimension: int = 3) -> BoundingBox:
        """An invalid box (min = +inf, max = -inf) that contains nothing."""
        return cls(np.full(dimension, math.inf), np.full(dimension, -math.inf))

    @classmethod
    def from_point(cls, p) -> BoundingBox:
        """A box collapsed onto a single point."""
        point = _as_point(p)
        return cls(point.copy(), point.copy())

    @classmethod
    def merge(cls, a: BoundingBox, b: BoundingBox) -> BoundingBox:
        """The smallest box containing both ``a`` and ``b``."""
        return cls(np.minimum(a.min, b.min), np.maximum(a.max, b.max))

    @property
    def dimension(self) -> int:
        return len(self.min)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return bool(
            np.array_equal(self.min, other.min) and np.array_equal(self.max, other.max)
        )

    __hash__ = None  # type: ignore[assignment]

    @staticmethod
    def _bounds(other) -> tuple[np.ndarray, np.ndarray]:
        if isinstance(other, BoundingBox):
            return other.min, other.max
        point = _as_point(other)
        return point, point

    def volume(self):
        """The n-dimensional volume."""
        return np.prod(self.max - self.min).item()

    def surface_area(self) -> float:
        """The (n-1)-dimensional volume of the boundary."""
        d = self.max - self.min
        total = sum(
            float(np.prod(np.delete(d, axis))) for axis in range(self.dimension)
        )
        return 2.0 * total

    def center(self) -> np.ndarray:
        """The midpoint of the box."""
        return (self.max + self.min) * 0.5

    def contains(self, other, strict: bool = False) -> bool:
        """Whether a point or another box lies on or inside this box.

        With ``strict`` the boundary is excluded.
        """
        lo, hi = self._bounds(other)
        if strict:
            return bool(np.all(lo > self.min) and np.all(hi < self.max))
        return bool(np.all(lo >= self.min) and np.all(hi <= self.max))

    def overlaps(self, other: BoundingBox, strict: bool = False) -> bool:
        """Whether two boxes overlap; ``strict`` excludes touching boundaries."""
        if strict:
            return bool(np.all(other.min < self.max) and np.all(other.max > self.min))
        return bool(np.all(other.min <= self.max) and np.all(other.max >= self.min))

    def squared_distance_to(self, other):
        """Smallest squared distance to a point or another box."""
        lo, hi = self._bounds(other)
        gap = np.where(
            hi < self.min, self.min - hi, np.where(lo > self.max, lo - self.max, 0)
        )
        return (gap * gap).sum().item()

    def distance_to(self, other) -> float:
        """Smallest distance to a point or another box."""
        return math.sqrt(self.squared_distance_to(other))

    def is_valid(self) -> bool:
        """True when min <= max along every axis."""
        return bool(np.all(self.max >= self.min))

    def is_point(self) -> bool:
        """True when the box has collapsed to a single point."""
        return bool(np.all(self.max == self.min))

    def has_volume(self) -> bool:
        """True when min < max along every axis."""
        return bool(np.all(self.max > self.min))

    def major_axis(self) -> int:
        """Index of the longest side; ties go to the lower index."""
        return int(np.argmax(self.max - self.min))

    def minor_axis(self) -> int:
        """Index of the shortest side; ties go to the lower index."""
        return int(np.argmin(self.max - self.min))

    def extents(self) -> np.ndarray:
        """The side lengths, max - min."""
        return self.max - self.min

    def clip(self, other: BoundingBox) -> None:
        """Shrink this box to its intersection with ``other``."""
        self.min = np.maximum(self.min, other.min)
        self.max = np.minimum(self.max, other.max)

    def reset(self) -> None:
        """Make the box invalid (min = +inf, max = -inf)."""
        self.min = np.full(self.dimension, math.inf)
        self.max = np.full(self.dimension, -math.inf)

    def expand_by(self, other) -> None:
        """Grow the box to contain a point or another box."""
        lo, hi = self._bounds(other)
        self.min = np.minimum(self.min, lo)
        self.max = np.maximum(self.max, hi)

    def largest_axis(self) -> int:
        """Index of the largest extent; ties go to the lower index."""
        return int(np.argmax(self.max - self.min))

    def corner(self, index: int) -> np.ndarray:
        """Corner whose bit ``i`` in ``index`` selects max along axis ``i``."""
        use_max = [(index >> axis) & 1 == 1 for axis in range(self.dimension)]
        return np.where(use_max, self.max, self.min)

    def _slab(self, ray: Ray) -> tuple[float, float] | None:
        near, far = -math.inf, math.inf
        for origin, direction, rcp, lo, hi in zip(
            ray.o[:3], ray.d[:3], ray.d_rcp[:3], self.min[:3], self.max[:3]
        ):
            if direction == 0:
                if origin < lo or origin > hi:
                    return None
                continue
            t1 = float((lo - origin) * rcp)
            t2 = float((hi - origin) * rcp)
            if t1 > t2:
                t1, t2 = t2, t1
            near = max(t1, near)
            far = min(t2, far)
            if not near <= far:
                return None
        return near, far

    def ray_intersect(self, ray: Ray) -> bool:
        """Whether the ray segment [mint, maxt] hits the box."""
        interval = self._slab(ray)
        if interval is None:
            return False
        near, far = interval
        return ray.mint <= far and near <= ray.maxt

    def ray_interval(self, ray: Ray) -> tuple[float, float] | None:
        """The (near, far) overlap of the unbounded ray with the box, or None."""
        return self._slab(ray)

    def __str__(self) -> str:
        if not self.is_valid():
            return "BoundingBox[invalid]"
        return f"BoundingBox[min={format_vector(self.min)}, max={format_vector(self.max)}]"