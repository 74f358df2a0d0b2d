"""
Device location collaborator.

The visit form asks a `LocationProvider` for one high-accuracy fix, bounded by a
timeout (10 s by default). Failures carry a specific reason so the inspector knows
whether to grant permission, enable GPS, or simply retry.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Protocol

from siap.domain.models import Coordinate


class LocationFailureReason(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


_DETAILS = {
    LocationFailureReason.PERMISSION_DENIED: " Akses lokasi ditolak.",
    LocationFailureReason.POSITION_UNAVAILABLE: " Lokasi tidak tersedia.",
    LocationFailureReason.TIMEOUT: " Timeout mengambil lokasi.",
}


def failure_message(reason: LocationFailureReason) -> str:
    """User-facing explanation for a failed location request."""
    if reason is LocationFailureReason.UNSUPPORTED:
        return "Geolocation tidak didukung oleh perangkat ini."
    return "Gagal mengambil lokasi." + _DETAILS[reason] + " Mohon aktifkan GPS dan izinkan akses lokasi."


class LocationUnavailable(Exception):
    """Raised by providers when no position could be obtained."""

    def __init__(self, reason: LocationFailureReason, message: str | None = None):
        self.reason = LocationFailureReason(reason)
        super().__init__(message or failure_message(self.reason))

    @property
    def message(self) -> str:
        return str(self)


class LocationProvider(Protocol):
    async def request_current_position(self, *, enable_high_accuracy: bool = True) -> Coordinate:
        """Return one position fix or raise `LocationUnavailable`."""
        ...


class StaticLocationProvider:
    """Provider returning a fixed coordinate (or a fixed failure); for tests and kiosks."""

    def __init__(
        self,
        coordinate: Coordinate | None = None,
        *,
        failure: LocationFailureReason | None = None,
    ):
        if coordinate is None and failure is None:
            failure = LocationFailureReason.POSITION_UNAVAILABLE
        self.coordinate = coordinate
        self.failure = failure
        self.calls = 0
        self.last_high_accuracy: bool | None = None

    async def request_current_position(self, *, enable_high_accuracy: bool = True) -> Coordinate:
        self.calls += 1
        self.last_high_accuracy = enable_high_accuracy
        if self.failure is not None:
            raise LocationUnavailable(self.failure)
        return self.coordinate


class TimedLocationProvider:
    """Bound another provider with a timeout; expiry becomes a `TIMEOUT` failure."""

    def __init__(self, inner: LocationProvider, *, timeout_seconds: float = 10):
        self._inner = inner
        self.timeout_seconds = float(timeout_seconds)

    async def request_current_position(self, *, enable_high_accuracy: bool = True) -> Coordinate:
        try:
            return await asyncio.wait_for(
                self._inner.request_current_position(enable_high_accuracy=enable_high_accuracy),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise LocationUnavailable(LocationFailureReason.TIMEOUT) from e
