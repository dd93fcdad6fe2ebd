"""Geodesic distance helpers on the WGS84 ellipsoid."""

from __future__ import annotations

import logging
import math
from typing import Iterable

from ..errors import GeodesicConvergenceError
from .models import Point

_LOG = logging.getLogger(__name__)

# WGS84 ellipsoid.
_WGS84_A = 6_378_137.0
_WGS84_F = 1 / 298.257223563
_WGS84_B = (1 - _WGS84_F) * _WGS84_A

_MAX_ITERATIONS = 200
_CONVERGENCE_THRESHOLD = 1e-12


def vincenty_distance(first: Point, second: Point) -> float:
    """Return the ellipsoidal distance in metres between two points.

    Uses Vincenty's inverse formula. Raises ``GeodesicConvergenceError`` when
    the iteration on lambda does not settle, which happens for nearly
    antipodal pairs.
    """

    a, b, f = _WGS84_A, _WGS84_B, _WGS84_F
    sin = math.sin
    cos = math.cos
    radians = math.radians
    atan2 = math.atan2
    sqrt = math.sqrt

    big_l = radians(second.x - first.x)
    u1 = math.atan((1 - f) * math.tan(radians(first.y)))
    u2 = math.atan((1 - f) * math.tan(radians(second.y)))
    sin_u1, cos_u1 = sin(u1), cos(u1)
    sin_u2, cos_u2 = sin(u2), cos(u2)

    lam = big_l
    for _ in range(_MAX_ITERATIONS):
        sin_lam = sin(lam)
        cos_lam = cos(lam)
        sin_sigma = sqrt(
            (cos_u2 * sin_lam) ** 2
            + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
        )
        if sin_sigma == 0:
            # coincident points
            return 0.0
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha**2
        if cos_sq_alpha != 0:
            cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha
        else:
            # equatorial line
            cos_2sigma_m = 0.0
        c = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
        lam_prev = lam
        lam = big_l + (1 - c) * f * sin_alpha * (
            sigma
            + c
            * sin_sigma
            * (cos_2sigma_m + c * cos_sigma * (-1 + 2 * cos_2sigma_m**2))
        )
        if abs(lam - lam_prev) <= _CONVERGENCE_THRESHOLD:
            break
    else:
        raise GeodesicConvergenceError(
            f"Vincenty formula failed to converge between {first} and {second}"
        )

    u_sq = cos_sq_alpha * (a**2 - b**2) / b**2
    big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = (
        big_b
        * sin_sigma
        * (
            cos_2sigma_m
            + big_b
            / 4
            * (
                cos_sigma * (-1 + 2 * cos_2sigma_m**2)
                - big_b
                / 6
                * cos_2sigma_m
                * (-3 + 4 * sin_sigma**2)
                * (-3 + 4 * cos_2sigma_m**2)
            )
        )
    )
    return b * big_a * (sigma - delta_sigma)


def path_distance(points: Iterable[Point]) -> float:
    """Sum geodesic distances between consecutive points.

    Pairs whose distance cannot be computed are excluded from the total
    rather than failing the whole path.
    """

    total = 0.0
    previous: Point | None = None
    for current in points:
        if previous is not None:
            try:
                total += vincenty_distance(previous, current)
            except GeodesicConvergenceError:
                _LOG.debug("Skipping unmeasurable pair %s -> %s", previous, current)
        previous = current
    return total


__all__ = ["vincenty_distance", "path_distance"]
