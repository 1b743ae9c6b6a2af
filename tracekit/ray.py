"""Ray segments with cached reciprocal directions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from tracekit.common import EPSILON
from tracekit.vector import format_vector


def _reciprocal(d: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore"):
        return 1.0 / d


@dataclass(eq=False)
class Ray:
    """A ray segment ``o + t*d`` for ``t`` in ``[mint, maxt]``.

    ``d_rcp`` holds the componentwise reciprocals of ``d``; call
    :meth:`update` after changing ``d``.
    """

    o: np.ndarray
    d: np.ndarray
    mint: float = EPSILON
    maxt: float = math.inf
    d_rcp: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.o = np.array(self.o, dtype=float)
        self.d = np.array(self.d, dtype=float)
        self.mint = float(self.mint)
        self.maxt = float(self.maxt)
        self.update()

    def update(self) -> None:
        """Recompute the reciprocal direction after ``d`` was changed."""
        self.d_rcp = _reciprocal(self.d)

    def __call__(self, t: float) -> np.ndarray:
        """The point at distance parameter ``t`` along the ray."""
        return self.o + t * self.d

    def reverse(self) -> Ray:
        """A ray with the same origin and segment pointing the other way."""
        result = Ray(self.o.copy(), -self.d, self.mint, self.maxt)
        result.d_rcp = -self.d_rcp
        return result

    def with_segment(self, mint: float, maxt: float) -> Ray:
        """A copy of this ray covering a different segment."""
        result = Ray(self.o.copy(), self.d.copy(), mint, maxt)
        result.d_rcp = self.d_rcp.copy()
        return result

    def __str__(self) -> str:
        return (
            "Ray[\n"
            f"  o = {format_vector(self.o)},\n"
            f"  d = {format_vector(self.d)},\n"
            f"  mint = {self.mint:f},\n"
            f"  maxt = {self.maxt:f}\n"
            "]"
        )