"""Bidirectional scattering distribution functions."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import numpy as np

from tracekit.color import Color3
from tracekit.common import INV_PI


class Measure(enum.Enum):
    """Measure associated with a probability distribution."""

    UNKNOWN = 0
    SOLID_ANGLE = 1
    DISCRETE = 2


def _cos_theta(v: np.ndarray) -> float:
    """Cosine of the angle to the local normal (the z component)."""
    return float(v[2])


@dataclass(eq=False)
class BSDFQueryRecord:
    """Parameters of a BSDF query, with directions in the local frame.

    Sampling routines fill in ``wo``, ``eta`` and ``measure``.
    """

    wi: np.ndarray
    wo: np.ndarray = field(default_factory=lambda: np.zeros(3))
    measure: Measure = Measure.UNKNOWN
    eta: float = 1.0

    def __post_init__(self) -> None:
        self.wi = np.array(self.wi, dtype=float)
        self.wo = np.array(self.wo, dtype=float)


class BSDF(ABC):
    """Base class of all scattering models."""

    @abstractmethod
    def eval(self, record: BSDFQueryRecord) -> Color3:
        """The BSDF value for the directions and measure in ``record``."""

    @abstractmethod
    def pdf(self, record: BSDFQueryRecord) -> float:
        """Density of sampling ``record.wo`` given ``record.wi``."""

    def is_diffuse(self) -> bool:
        """Whether the material is handled as diffuse."""
        return False


@dataclass
class Diffuse(BSDF):
    """Lambertian reflectance model."""

    albedo: Color3 = field(default_factory=lambda: Color3.constant(0.5))

    def _front_facing(self, record: BSDFQueryRecord) -> bool:
        return (
            record.measure is Measure.SOLID_ANGLE
            and _cos_theta(record.wi) > 0
            and _cos_theta(record.wo) > 0
        )

    def eval(self, record: BSDFQueryRecord) -> Color3:
        """Albedo / pi on the front side, zero otherwise."""
        if not self._front_facing(record):
            return Color3.constant(0.0)
        return self.albedo * INV_PI

    def pdf(self, record: BSDFQueryRecord) -> float:
        """Cosine-weighted density with respect to solid angle."""
        if not self._front_facing(record):
            return 0.0
        return INV_PI * _cos_theta(record.wo)

    def is_diffuse(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"Diffuse[\n  albedo = {self.albedo}\n]"


@dataclass
class Mirror(BSDF):
    """Ideal specular reflector."""

    def eval(self, record: BSDFQueryRecord) -> Color3:
        """Discrete models always evaluate to zero."""
        return Color3.constant(0.0)

    def pdf(self, record: BSDFQueryRecord) -> float:
        """Discrete models always have zero density."""
        return 0.0

    def sample(self, record: BSDFQueryRecord, sample) -> Color3:
        """Reflect ``record.wi`` about the normal into ``record.wo``."""
        if _cos_theta(record.wi) <= 0:
            return Color3.constant(0.0)
        x, y, z = (float(c) for c in record.wi)
        record.wo = np.array([-x, -y, z])
        record.measure = Measure.DISCRETE
        record.eta = 1.0
        return Color3.constant(1.0)

    def __str__(self) -> str:
        return "Mirror[]"


@dataclass
class Dielectric(BSDF):
    """Ideal smooth dielectric interface."""

    int_ior: float = 1.5046
    ext_ior: float = 1.000277

    def eval(self, record: BSDFQueryRecord) -> Color3:
        """Discrete models always evaluate to zero."""
        return Color3.constant(0.0)

    def pdf(self, record: BSDFQueryRecord) -> float:
        """Discrete models always have zero density."""
        return 0.0

    def __str__(self) -> str:
        return (
            "Dielectric[\n"
            f"  intIOR = {self.int_ior:f},\n"
            f"  extIOR = {self.ext_ior:f}\n"
            "]"
        )