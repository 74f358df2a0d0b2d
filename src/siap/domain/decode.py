"""
Wire normalization for remote records.

The spreadsheet-backed store is loosely typed: list columns come back as
`", "`-joined strings, booleans as `"TRUE"`, coordinates as strings or blanks,
and older rows lack newer columns. Every remote record passes through these
functions exactly once before the rest of the app sees it.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from siap.domain.models import EmpathyMetrics, School, SchoolVisit

LIST_SEPARATOR = ", "
DEFAULT_SCORE = 3

_TRUE_STRINGS = {"true", "1", "yes", "y", "ya"}


def _as_list(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    if isinstance(value, str) and value != "":
        return value.split(LIST_SEPARATOR)
    return []


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def _as_int(value: Any, default: int = 0) -> int:
    f = _as_float(value)
    return int(round(f)) if f is not None else default


def _as_degrees(value: Any, limit: float) -> float | None:
    out = _as_float(value)
    return out if out is not None and abs(out) <= limit else None


def _as_score(value: Any) -> int:
    score = _as_int(value, default=DEFAULT_SCORE)
    return score if 1 <= score <= 5 else DEFAULT_SCORE


def _as_metrics(value: Any) -> EmpathyMetrics:
    if not isinstance(value, Mapping):
        return EmpathyMetrics()
    return EmpathyMetrics(
        schoolClimate=_as_score(value.get("schoolClimate")),
        teacherEngagement=_as_score(value.get("teacherEngagement")),
        leadershipVibe=_as_score(value.get("leadershipVibe")),
    )


def _as_coordinate(value: Any) -> dict[str, float | None] | None:
    if not isinstance(value, Mapping):
        return None
    lat = _as_degrees(value.get("latitude"), 90)
    lon = _as_degrees(value.get("longitude"), 180)
    if lat is None or lon is None:
        return None
    accuracy = _as_float(value.get("accuracy"))
    if accuracy is not None and accuracy < 0:
        accuracy = None
    return {"latitude": lat, "longitude": lon, "accuracy": accuracy}


def decode_school(raw: Mapping[str, Any]) -> School:
    """Map a remote school row into a `School`."""
    return School(
        id=str(raw.get("id") or raw.get("npsn") or ""),
        npsn=str(raw.get("npsn") or ""),
        name=str(raw.get("name") or ""),
        principal=str(raw.get("principal") or ""),
        inspectorId=str(raw.get("inspectorId") or ""),
        latitude=_as_degrees(raw.get("latitude"), 90),
        longitude=_as_degrees(raw.get("longitude"), 180),
    )


def decode_visit(raw: Mapping[str, Any]) -> SchoolVisit:
    """Map a remote visit row into a `SchoolVisit`, applying defaults once."""
    status = raw.get("status")
    if status not in ("Draft", "Submitted", "Archived"):
        status = "Submitted"

    return SchoolVisit(
        id=str(raw.get("id") or ""),
        inspectorId=str(raw.get("inspectorId") or ""),
        schoolId=str(raw.get("schoolId") or ""),
        schoolName=str(raw.get("schoolName") or ""),
        principalName=str(raw.get("principalName") or ""),
        date=str(raw.get("date") or ""),
        jam=str(raw.get("jam") or ""),
        type=str(raw.get("type") or ""),
        location=_as_coordinate(raw.get("location")),
        locationVerified=_as_bool(raw.get("locationVerified")),
        distanceMeter=max(0, _as_int(raw.get("distanceMeter"))),
        locationStatus=str(raw.get("locationStatus") or ""),
        photoUrl=str(raw.get("photoUrl") or ""),
        notes=str(raw.get("notes") or ""),
        empathyMetrics=_as_metrics(raw.get("empathyMetrics")),
        keyFindings=tuple(_as_list(raw.get("keyFindings"))),
        agreedActions=tuple(_as_list(raw.get("agreedActions"))),
        signatureSupervisor=str(raw.get("signatureSupervisor") or ""),
        signaturePrincipal=str(raw.get("signaturePrincipal") or ""),
        status=status,
        link_pdf=(str(raw["link_pdf"]) if raw.get("link_pdf") else None),
    )
