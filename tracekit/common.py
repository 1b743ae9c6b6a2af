"""Shared constants, string parsing helpers and small numeric utilities."""

from __future__ import annotations

import math
import re
import struct

import numpy as np

EPSILON = 1e-4
"""Relative error threshold for ray intersection computations."""

PI = math.pi
INV_PI = 1.0 / math.pi
INV_TWOPI = 1.0 / (2.0 * math.pi)
INV_FOURPI = 1.0 / (4.0 * math.pi)
SQRT_TWO = math.sqrt(2.0)
INV_SQRT_TWO = 1.0 / math.sqrt(2.0)

_WHITESPACE = " \t\n\v\f\r"
_INT_RE = re.compile(r"([+-]?)(\d+)")
_DEC_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0[xX]([0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)([pP][+-]?\d+)?"
)
_SPECIAL_FLOAT_RE = re.compile(r"[+-]?(inf|infinity|nan)", re.IGNORECASE)

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1
_ULONG_MAX = 2**64 - 1


class TracerError(RuntimeError):
    """Error raised for invalid input or unsupported operations."""


def indent(string: str, amount: int = 2) -> str:
    """Indent every line but the first by ``amount`` spaces."""
    if not string:
        return ""
    trailing = string.endswith("\n")
    body = string[:-1] if trailing else string
    joined = ("\n" + " " * amount).join(body.split("\n"))
    return joined + "\n" if trailing else joined


def _parse_integer(text: str) -> tuple[bool, int] | None:
    """Parse text the way strtol/strtoul do; None means trailing garbage."""
    if text == "":
        return (False, 0)
    match = _INT_RE.fullmatch(text.lstrip(_WHITESPACE))
    if match is None:
        return None
    return (match.group(1) == "-", int(match.group(2)))


def _wrap32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 2**32 if value >= 2**31 else value


def to_bool(text: str) -> bool:
    """Parse ``true`` or ``false`` in any letter case."""
    value = text.lower()
    if value == "false":
        return False
    if value == "true":
        return True
    raise TracerError(f'Could not parse boolean value "{text}"')


def to_int(text: str) -> int:
    """Parse a signed decimal integer, with 32-bit wrap-around on overflow."""
    parsed = _parse_integer(text)
    if parsed is None:
        raise TracerError(f'Could not parse integer value "{text}"')
    negative, magnitude = parsed
    value = -magnitude if negative else magnitude
    value = min(max(value, _LONG_MIN), _LONG_MAX)
    return _wrap32(value)


def to_uint(text: str) -> int:
    """Parse an unsigned decimal integer; a leading minus negates modulo 2**32."""
    parsed = _parse_integer(text)
    if parsed is None:
        raise TracerError(f'Could not parse integer value "{text}"')
    negative, magnitude = parsed
    if magnitude > _ULONG_MAX:
        value = _ULONG_MAX
    else:
        value = (2**64 - magnitude) % 2**64 if negative else magnitude
    return value & 0xFFFFFFFF


def _to_single(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def to_float(text: str) -> float:
    """Parse a floating point value, rounded to single precision."""
    if text == "":
        return 0.0
    stripped = text.lstrip(_WHITESPACE)
    if _DEC_FLOAT_RE.fullmatch(stripped) or _SPECIAL_FLOAT_RE.fullmatch(stripped):
        return _to_single(float(stripped))
    if _HEX_FLOAT_RE.fullmatch(stripped):
        return _to_single(float.fromhex(stripped))
    raise TracerError(f'Could not parse floating point value "{text}"')


def to_vector3f(text: str) -> np.ndarray:
    """Parse three comma or space separated numbers into a vector."""
    tokens = tokenize(text)
    if len(tokens) != 3:
        raise TracerError("Expected 3 values")
    return np.array([to_float(token) for token in tokens], dtype=float)


def tokenize(string: str, delim: str = ", ", include_empty: bool = False) -> list[str]:
    """Split at any character of ``delim``.

    Empty pieces are dropped unless ``include_empty`` is set; the piece after
    the last delimiter is always kept.
    """
    if not delim:
        return [string]
    separator = delim[0]
    pieces = string.translate({ord(c): separator for c in delim}).split(separator)
    *inner, last = pieces
    tokens = [piece for piece in inner if piece or include_empty]
    tokens.append(last)
    return tokens


def time_string(time: float, precise: bool = False) -> str:
    """Format a duration in milliseconds for humans."""
    if math.isnan(time) or math.isinf(time):
        return "inf"
    suffix = "ms"
    if time > 1000:
        time /= 1000
        suffix = "s"
        if time > 60:
            time /= 60
            suffix = "m"
            if time > 60:
                time /= 60
                suffix = "h"
                if time > 12:
                    time /= 12
                    suffix = "d"
    digits = 4 if precise else 1
    return f"{time:.{digits}f}{suffix}"


def mem_string(size: int, precise: bool = False) -> str:
    """Format an amount of memory in bytes for humans."""
    suffixes = ("B", "KiB", "MiB", "GiB", "TiB", "PiB")
    value = float(size)
    suffix = 0
    while suffix < 5 and value > 1024.0:
        value /= 1024.0
        suffix += 1
    digits = 0 if suffix == 0 else (4 if precise else 1)
    return f"{value:.{digits}f} {suffixes[suffix]}"


def clamp(value, lo, hi):
    """Clamp ``value`` to the range [lo, hi]."""
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def lerp(t: float, v1: float, v2: float) -> float:
    """Linearly interpolate between ``v1`` and ``v2``."""
    return (1.0 - t) * v1 + t * v2


def mod(a: int, b: int) -> int:
    """Modulo whose result is never negative for a positive divisor."""
    r = abs(a) % abs(b)
    if a < 0:
        r = -r
    return r + b if r < 0 else r


def rad_to_deg(value: float) -> float:
    """Convert radians to degrees."""
    return value * (180.0 / math.pi)


def deg_to_rad(value: float) -> float:
    """Convert degrees to radians."""
    return value * (math.pi / 180.0)


def fresnel(cos_theta_i: float, ext_ior: float, int_ior: float) -> float:
    """Unpolarized Fresnel reflectance of a dielectric interface."""
    eta_i, eta_t = ext_ior, int_ior
    if ext_ior == int_ior:
        return 0.0
    if cos_theta_i < 0.0:
        eta_i, eta_t = eta_t, eta_i
        cos_theta_i = -cos_theta_i

    eta = eta_i / eta_t
    sin_theta_t_sqr = eta * eta * (1 - cos_theta_i * cos_theta_i)
    if sin_theta_t_sqr > 1.0:
        return 1.0

    cos_theta_t = math.sqrt(1.0 - sin_theta_t_sqr)
    rs = (eta_i * cos_theta_i - eta_t * cos_theta_t) / (
        eta_i * cos_theta_i + eta_t * cos_theta_t
    )
    rp = (eta_t * cos_theta_i - eta_i * cos_theta_t) / (
        eta_t * cos_theta_i + eta_i * cos_theta_t
    )
    return (rs * rs + rp * rp) / 2.0