"""
Application shell.

The shell owns everything that outlives a single visit form: the signed-in inspector,
the cached school directory and visit history, the remote client and the submission
outbox. It creates at most one `VisitCaptureWorkflow` at a time and receives the
finalized `SchoolVisit` from it.

Submission is optimistic: the visit is recorded locally first, then sent. If the
remote write fails the record stays in the outbox until `flush_outbox()` delivers it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import httpx

from siap.config.settings import Settings
from siap.core.cache import LocalState, LocalStateCache
from siap.core.env import resolve_project_path
from siap.domain.decode import decode_school, decode_visit
from siap.domain.models import InspectorProfile, School, SchoolVisit
from siap.ingestion.advisor import AdvisorClient
from siap.ingestion.remote_client import RemoteDataClient, RemoteServiceError
from siap.workflow.location import LocationProvider, TimedLocationProvider
from siap.workflow.visit_form import VisitCaptureWorkflow

logger = logging.getLogger(__name__)

REMOTE_ERRORS = (httpx.HTTPError, RemoteServiceError, ValueError)


class VisitShell:
    def __init__(
        self,
        settings: Settings,
        *,
        cache: LocalStateCache,
        remote: RemoteDataClient,
        location_provider: LocationProvider,
        advisor: AdvisorClient | None = None,
    ):
        self._settings = settings
        self._cache = cache
        self._remote = remote
        self._location_provider = location_provider
        self._advisor = advisor or AdvisorClient(settings)
        self._state = cache.load()
        self._active: VisitCaptureWorkflow | None = None

    @property
    def inspector(self) -> InspectorProfile | None:
        if not self._state.user:
            return None
        return InspectorProfile.model_validate(self._state.user)

    @property
    def schools(self) -> list[School]:
        return [decode_school(row) for row in self._state.schools]

    @property
    def visits(self) -> list[SchoolVisit]:
        return [decode_visit(row) for row in self._state.visits]

    @property
    def outbox(self) -> list[SchoolVisit]:
        return [decode_visit(row) for row in self._state.outbox]

    @property
    def active(self) -> VisitCaptureWorkflow | None:
        return self._active

    def sign_in(self, profile: InspectorProfile) -> None:
        """Switch inspector; undelivered visits stay queued for the next flush."""
        self._state = LocalState(user=profile.model_dump(mode="json"), outbox=self._state.outbox)
        self._cache.save(self._state)

    def sign_out(self) -> None:
        if self._active is not None:
            self._active.cancel()
            self._active = None
        self._state = LocalState()
        self._cache.clear()

    def refresh(self) -> bool:
        """Pull schools and visits for the inspector; keeps cached data on failure."""
        inspector = self.inspector
        if inspector is None:
            return False
        try:
            visits = self._remote.get_visits_raw(inspector.id_pengawas)
            schools = self._remote.get_schools_raw(inspector.id_pengawas)
        except REMOTE_ERRORS as e:
            logger.warning("Refresh failed, keeping cached data: %s", e)
            return False
        # Re-encode through the decoder so the cache only holds normalized rows.
        self._state.visits = _normalize(visits, lambda row: decode_visit(row).to_wire(), "visit")
        self._state.schools = _normalize(
            schools, lambda row: decode_school(row).model_dump(mode="json", by_alias=True), "school"
        )
        self._cache.save(self._state)
        return True

    def start_visit(self) -> VisitCaptureWorkflow:
        """Open a fresh visit form, discarding any unfinished one."""
        if self._active is not None and not self._active.closed:
            self._active.cancel()
        inspector = self.inspector
        provider = TimedLocationProvider(
            self._location_provider,
            timeout_seconds=self._settings.location.timeout_seconds,
        )
        self._active = VisitCaptureWorkflow(
            self._settings,
            provider,
            schools=self.schools,
            inspector_id=inspector.id_pengawas if inspector else "",
        )
        return self._active

    def cancel_visit(self) -> None:
        if self._active is not None:
            self._active.cancel()
            self._active = None

    async def submit_active(self) -> SchoolVisit | None:
        """Finalize the active form and hand the visit to the remote store."""
        if self._active is None:
            return None
        visit = self._active.submit()
        if visit is None:
            return None
        self._active = None
        await self.save_visit(visit)
        return visit

    async def save_visit(self, visit: SchoolVisit) -> bool:
        """Record and queue `visit` locally, then try to deliver it; True when delivered."""
        wire = visit.to_wire()
        self._state.visits = [wire, *self._state.visits]
        self._state.outbox.append(wire)
        self._cache.save(self._state)
        try:
            await asyncio.to_thread(self._remote.save_visit, visit)
        except REMOTE_ERRORS as e:
            logger.warning("Visit %s queued for retry: %s", visit.id, e)
            return False
        self._state.outbox = [row for row in self._state.outbox if row is not wire]
        self._cache.save(self._state)
        return True

    def flush_outbox(self) -> int:
        """Retry queued submissions; returns how many were delivered."""
        remaining: list[dict] = []
        delivered = 0
        for row in self._state.outbox:
            try:
                self._remote.save_visit(decode_visit(row))
            except REMOTE_ERRORS as e:
                logger.warning("Retry failed for visit %s: %s", row.get("id"), e)
                remaining.append(row)
                continue
            delivered += 1
        self._state.outbox = remaining
        self._cache.save(self._state)
        if delivered:
            logger.info("Delivered %d queued visit(s); %d remaining", delivered, len(remaining))
        return delivered

    async def advise(self, visit: SchoolVisit) -> str:
        """Encouraging advice for the principal; falls back to a static message."""
        return await asyncio.to_thread(
            self._advisor.empathetic_advice, list(visit.key_findings), list(visit.agreed_actions)
        )


def _normalize(rows: list, decode: Callable[[dict], dict], kind: str) -> list[dict]:
    """Decode remote rows one by one; malformed rows are logged and skipped."""
    out: list[dict] = []
    for row in rows:
        try:
            out.append(decode(row))
        except (ValueError, AttributeError) as e:
            row_id = row.get("id") if isinstance(row, dict) else None
            logger.warning("Skipping malformed remote %s row %r: %s", kind, row_id, e)
    return out


def build_shell(settings: Settings, location_provider: LocationProvider) -> VisitShell:
    """Wire a shell with the file cache and remote client described by `settings`."""
    return VisitShell(
        settings,
        cache=LocalStateCache(resolve_project_path(settings.cache.path)),
        remote=RemoteDataClient(settings),
        location_provider=location_provider,
    )
