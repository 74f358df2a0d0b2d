"""
Geofence evaluation.

Compares a captured device position with a school's registered coordinate and
decides whether the inspector is physically on site. The threshold is inclusive.
"""

from __future__ import annotations

from siap.core.geo import distance_m
from siap.domain.models import (
    STATUS_IN_RADIUS,
    STATUS_OUT_OF_RADIUS,
    Coordinate,
    GeofenceResult,
    School,
)

DEFAULT_GEOFENCE_RADIUS_M = 250.0


def evaluate(
    captured: Coordinate,
    school: School,
    radius_m: float = DEFAULT_GEOFENCE_RADIUS_M,
) -> GeofenceResult:
    """Return the distance to `school` and whether it is within `radius_m`.

    Schools without a registered coordinate yield the indeterminate result
    (`distance_m=None`, `verified=None`).
    """
    if not school.has_coordinate:
        return GeofenceResult(distance_m=None, verified=None)
    dist = distance_m(captured.latitude, captured.longitude, school.latitude, school.longitude)
    return GeofenceResult(distance_m=dist, verified=dist <= radius_m)


def location_status(result: GeofenceResult | None) -> str:
    """Label stored on the finalized visit; indeterminate counts as not on site."""
    if result is not None and result.verified is True:
        return STATUS_IN_RADIUS
    return STATUS_OUT_OF_RADIUS


def describe(result: GeofenceResult) -> str:
    if result.verified is None:
        return "Koordinat sekolah belum terdaftar (tidak dapat diverifikasi)"
    meters = round(result.distance_m)
    if result.verified:
        return f"Lokasi sesuai (dalam radius), {meters} meter"
    return f"Lokasi tidak sesuai, {meters} meter"
