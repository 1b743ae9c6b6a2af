"""RGB colour values."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Color3:
    """An RGB colour triple."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    @classmethod
    def constant(cls, value: float) -> Color3:
        """A colour with all three channels equal to ``value``."""
        return cls(value, value, value)

    def __iter__(self):
        return iter((self.r, self.g, self.b))

    def __getitem__(self, index: int) -> float:
        return (self.r, self.g, self.b)[index]

    def __len__(self) -> int:
        return 3

    def _map(self, fn) -> Color3:
        return Color3(*(fn(c) for c in self))

    def _combine(self, other, fn) -> Color3:
        if isinstance(other, Color3):
            return Color3(*(fn(a, b) for a, b in zip(self, other)))
        return self._map(lambda c: fn(c, other))

    def __add__(self, other) -> Color3:
        return self._combine(other, lambda a, b: a + b)

    __radd__ = __add__

    def __sub__(self, other) -> Color3:
        return self._combine(other, lambda a, b: a - b)

    def __mul__(self, other) -> Color3:
        return self._combine(other, lambda a, b: a * b)

    __rmul__ = __mul__

    def __truediv__(self, other) -> Color3:
        return self._combine(other, lambda a, b: a / b)

    def __str__(self) -> str:
        return f"[{self.r:f}, {self.g:f}, {self.b:f}]"

    def to_array(self) -> np.ndarray:
        """The channels as a numpy array."""
        return np.array([self.r, self.g, self.b], dtype=float)

    def to_srgb(self) -> Color3:
        """Convert linear RGB to sRGB."""

        def convert(value: float) -> float:
            if value <= 0.0031308:
                return 12.92 * value
            return (1.0 + 0.055) * value ** (1.0 / 2.4) - 0.055

        return self._map(convert)

    def to_linear_rgb(self) -> Color3:
        """Convert sRGB to linear RGB."""

        def convert(value: float) -> float:
            if value <= 0.04045:
                return value * (1.0 / 12.92)
            return ((value + 0.055) * (1.0 / 1.055)) ** 2.4

        return self._map(convert)

    def is_valid(self) -> bool:
        """True when every channel is finite and non-negative."""
        return all(c >= 0 and math.isfinite(c) for c in self)

    def luminance(self) -> float:
        """Luminance of the colour."""
        return self.r * 0.212671 + self.g * 0.715160 + self.b * 0.072169

    def max_coeff(self) -> float:
        """The largest channel value."""
        return max(self)