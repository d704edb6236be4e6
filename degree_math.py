"""
Trigonometry in degrees. Every function converts to radians at its boundary.
"""

import math


def deg2rad(d: float) -> float:
    return d * math.pi / 180.0


def rad2deg(r: float) -> float:
    return r * 180.0 / math.pi


def clamp(x: float, lo: float = -1.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, x))


def sin_deg(d: float) -> float:
    return math.sin(deg2rad(d))


def cos_deg(d: float) -> float:
    return math.cos(deg2rad(d))


def tan_deg(d: float) -> float:
    return math.tan(deg2rad(d))


def acos_deg(x: float) -> float:
    """Inverse cosine in degrees, [0, 180]."""
    return rad2deg(math.acos(x))


def acot_deg(x: float) -> float:
    """Inverse cotangent in degrees. acot(0) is 90."""
    if x == 0:
        return 90.0
    return rad2deg(math.atan(1.0 / x))
