"""
Geospatial helpers.

A tiny geometry layer for the geofence check; no GIS dependencies needed for
point-to-point distances.
"""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

EARTH_RADIUS_M = 6_371_000


def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two degree coordinates (haversine)."""
    phi1 = radians(lat1)
    phi2 = radians(lat2)
    dphi = radians(lat2 - lat1)
    dlambda = radians(lon2 - lon1)

    h = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlambda / 2) ** 2
    # Rounding can push h just outside [0, 1] near antipodes and poles.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * atan2(sqrt(h), sqrt(1 - h))
