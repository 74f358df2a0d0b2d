"""
Remote data service client (spreadsheet-backed web app).

The store exposes one URL:
- GET  `?action=getSchools&inspectorId=...` / `?action=getVisits&inspectorId=...`
- POST `{"action": "saveVisit", "data": <visit>}`

Every response is an envelope `{"status": "success" | "error", "data": ..., "message": ...}`.
Records are normalized through `siap.domain.decode` before leaving this module.
"""

from __future__ import annotations

import logging
from typing import Any

from siap.config.settings import Settings
from siap.core.http import get_json, post_json
from siap.domain.decode import decode_school, decode_visit
from siap.domain.models import School, SchoolVisit

logger = logging.getLogger(__name__)


class RemoteServiceError(RuntimeError):
    """The remote store answered, but not with `status == "success"`."""

    def __init__(self, action: str, message: str):
        self.action = action
        super().__init__(f"{action}: {message}")


class RemoteDataClient:
    """Reads schools/visits from, and writes visits to, the remote store."""

    def __init__(self, settings: Settings):
        self._settings = settings

    @property
    def base_url(self) -> str:
        return self._settings.remote.base_url

    def _unwrap(self, action: str, payload: Any) -> Any:
        if not isinstance(payload, dict):
            raise RemoteServiceError(action, "unexpected response shape")
        if payload.get("status") != "success":
            raise RemoteServiceError(action, str(payload.get("message") or "request failed"))
        return payload.get("data")

    def _get(self, action: str, **params: Any) -> Any:
        payload = get_json(
            self.base_url,
            params={"action": action, **params},
            timeout_seconds=self._settings.app.http_timeout_seconds,
        )
        return self._unwrap(action, payload)

    def get_schools_raw(self, inspector_id: str) -> list[dict[str, Any]]:
        data = self._get("getSchools", inspectorId=inspector_id)
        return [row for row in (data or []) if isinstance(row, dict)]

    def get_visits_raw(self, inspector_id: str) -> list[dict[str, Any]]:
        data = self._get("getVisits", inspectorId=inspector_id)
        return [row for row in (data or []) if isinstance(row, dict)]

    def get_schools(self, inspector_id: str) -> list[School]:
        return [decode_school(row) for row in self.get_schools_raw(inspector_id)]

    def get_visits(self, inspector_id: str) -> list[SchoolVisit]:
        return [decode_visit(row) for row in self.get_visits_raw(inspector_id)]

    def save_visit(self, visit: SchoolVisit) -> Any:
        """Send a finalized visit; returns the store's `data` field.

        Raises:
            httpx.HTTPError: Transport errors or non-2xx status codes.
            RemoteServiceError: The store rejected the record.
        """
        logger.info("Submitting visit %s for school %s", visit.id, visit.school_id)
        payload = post_json(
            self.base_url,
            payload={"action": "saveVisit", "data": visit.to_wire()},
            timeout_seconds=self._settings.app.http_timeout_seconds,
        )
        return self._unwrap("saveVisit", payload)
