"""
Visit capture workflow.

One `VisitCaptureWorkflow` owns one in-progress visit (`VisitDraft`) and walks it
through four stages:

1. location & school   -> needs a captured coordinate and a selected school
2. category & notes    -> needs a category and non-blank notes
3. findings & actions  -> needs at least one agreed action
4. photo & signatures  -> needs a photo and both signatures, then `submit()`

Unmet guards never raise: `advance()` returns False and `submit()` returns None,
which is what the form uses to disable its buttons. Going back never clears data
entered in later stages. After `submit()` or `cancel()` the workflow is closed and
a late location result is discarded.
"""

from __future__ import annotations

import logging
import math
import secrets
import string
from datetime import datetime
from typing import Sequence

from siap.config.settings import Settings
from siap.core.imaging import decode_data_uri, encode_bytes_data_uri
from siap.core.time import clock_hhmm, visit_date
from siap.domain.models import (
    Coordinate,
    GeofenceResult,
    School,
    SchoolVisit,
    SupervisionType,
    VisitDraft,
)
from siap.geofence.evaluator import evaluate, location_status
from siap.ingestion.school_directory import search_schools
from siap.signature.pad import SignatureCapture
from siap.workflow.entries import EntryList
from siap.workflow.location import LocationProvider, LocationUnavailable
from siap.workflow.stages import Stage

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_uppercase + string.digits


class WorkflowClosedError(RuntimeError):
    """Raised when a cancelled or finalized workflow is used again."""


def new_visit_id() -> str:
    return "VK-" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class VisitCaptureWorkflow:
    """Step-gated state machine accumulating a single school visit."""

    def __init__(
        self,
        settings: Settings,
        location_provider: LocationProvider,
        *,
        schools: Sequence[School] = (),
        inspector_id: str = "",
        now: datetime | None = None,
    ):
        self._settings = settings
        self._location_provider = location_provider
        self._schools = list(schools)
        self._inspector_id = inspector_id

        self.draft = VisitDraft(id=new_visit_id(), date=visit_date(settings.app.timezone, now=now))
        self.findings = EntryList(self.draft.key_findings)
        self.actions = EntryList(self.draft.agreed_actions)

        sig = settings.signature
        self.supervisor_pad = SignatureCapture(
            width=sig.width,
            height=sig.height,
            stroke_width=sig.stroke_width,
            ink_color=sig.ink_color,
            on_save=self._save_supervisor_signature,
        )
        self.principal_pad = SignatureCapture(
            width=sig.width,
            height=sig.height,
            stroke_width=sig.stroke_width,
            ink_color=sig.ink_color,
            on_save=self._save_principal_signature,
        )

        self._stage = Stage.LOCATION_AND_SCHOOL
        self._school: School | None = None
        self._location: Coordinate | None = None
        self._geofence: GeofenceResult | None = None
        self._location_busy = False
        self._location_error: LocationUnavailable | None = None
        self._fetch_seq = 0
        self._closed = False
        self._cancelled = False

    # -- state ---------------------------------------------------------------

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def school(self) -> School | None:
        return self._school

    @property
    def location(self) -> Coordinate | None:
        return self._location

    @property
    def geofence(self) -> GeofenceResult | None:
        return self._geofence

    @property
    def location_busy(self) -> bool:
        return self._location_busy

    @property
    def location_error(self) -> LocationUnavailable | None:
        return self._location_error

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _ensure_open(self) -> None:
        if self._closed:
            raise WorkflowClosedError(f"Visit {self.draft.id} is no longer editable")

    # -- guards & navigation -------------------------------------------------

    def guard_satisfied(self, stage: Stage | None = None) -> bool:
        """Whether the guard for leaving `stage` (default: current stage) holds."""
        stage = self._stage if stage is None else Stage(stage)
        d = self.draft
        if stage is Stage.LOCATION_AND_SCHOOL:
            return self._location is not None and self._school is not None
        if stage is Stage.CATEGORY_AND_NOTES:
            return d.category is not None and bool(d.notes.strip())
        if stage is Stage.FINDINGS_AND_ACTIONS:
            return len(d.agreed_actions) >= 1
        if stage is Stage.PHOTO_AND_SIGNATURES:
            return bool(d.photo_url) and bool(d.signature_supervisor) and bool(d.signature_principal)
        return False

    @property
    def can_advance(self) -> bool:
        return (
            not self._closed
            and self._stage < Stage.PHOTO_AND_SIGNATURES
            and self.guard_satisfied()
        )

    @property
    def can_submit(self) -> bool:
        # Earlier data stays editable at stage 4, so every guard is re-checked.
        return (
            not self._closed
            and self._stage is Stage.PHOTO_AND_SIGNATURES
            and all(self.guard_satisfied(s) for s in Stage if s < Stage.FINALIZED)
        )

    def advance(self) -> bool:
        """Move to the next stage if the current guard holds."""
        self._ensure_open()
        if not self.can_advance:
            return False
        self._stage = Stage(self._stage + 1)
        logger.info("Visit %s advanced to stage %d", self.draft.id, int(self._stage))
        return True

    def go_back(self, stage: Stage | int | None = None) -> bool:
        """Return to `stage` (default: the previous one); later data is kept."""
        self._ensure_open()
        if stage is None:
            if self._stage is Stage.LOCATION_AND_SCHOOL:
                return False
            target = Stage(self._stage - 1)
        else:
            target = Stage(stage)
        if target >= self._stage:
            return False
        self._stage = target
        return True

    # -- stage 1: location & school -----------------------------------------

    def search_schools(self, term: str) -> list[School]:
        return search_schools(self._schools, term)

    def _evaluate(self) -> None:
        if self._location is None or self._school is None:
            self._geofence = None
            return
        self._geofence = evaluate(self._location, self._school, self._settings.geofence.radius_m)
        logger.info(
            "Geofence for visit %s at %s: distance=%s verified=%s",
            self.draft.id,
            self._school.id,
            self._geofence.distance_m,
            self._geofence.verified,
        )

    async def select_school(self, school: School) -> bool:
        """Pick the visited school; fetches location first if none is captured yet."""
        self._ensure_open()
        if self._stage is not Stage.LOCATION_AND_SCHOOL:
            return False
        self._school = school
        self.draft.school_id = school.id
        self.draft.school_name = school.name
        self.draft.principal_name = school.principal
        self._geofence = None
        if self._location is None:
            await self.fetch_location()
        else:
            self._evaluate()
        return True

    def deselect_school(self) -> None:
        """Clear the school choice (the search box regained focus)."""
        self._ensure_open()
        if self._stage is not Stage.LOCATION_AND_SCHOOL:
            return
        self._school = None
        self._geofence = None
        self.draft.school_id = ""
        self.draft.school_name = ""
        self.draft.principal_name = ""

    async def fetch_location(self) -> bool:
        """Request a position fix and re-run the geofence check with it.

        Returns True when a coordinate was captured. Failures are stored in
        `location_error`; a previously captured coordinate is kept.
        """
        self._ensure_open()
        self._fetch_seq += 1
        seq = self._fetch_seq
        self._location_busy = True
        self._location_error = None
        try:
            coordinate = await self._location_provider.request_current_position(
                enable_high_accuracy=self._settings.location.enable_high_accuracy
            )
        except LocationUnavailable as e:
            if self._closed or seq != self._fetch_seq:
                return False
            self._location_error = e
            logger.warning("Location fetch failed for visit %s: %s", self.draft.id, e.reason.value)
            return False
        finally:
            if seq == self._fetch_seq:
                self._location_busy = False

        if self._closed or seq != self._fetch_seq:
            logger.info("Discarding late location result for visit %s", self.draft.id)
            return False
        self._location = coordinate
        self._evaluate()
        return True

    # -- stage 2: category & notes ------------------------------------------

    def set_category(self, category: SupervisionType | str) -> None:
        self._ensure_open()
        self.draft.category = SupervisionType(category)

    def set_notes(self, notes: str) -> None:
        self._ensure_open()
        self.draft.notes = notes

    def set_empathy(self, **scores: int) -> None:
        """Update empathy scores by field name (`school_climate=4`, ...)."""
        self._ensure_open()
        metrics = self.draft.empathy_metrics
        for name, value in scores.items():
            if name not in type(metrics).model_fields:
                raise ValueError(f"Unknown empathy metric: {name}")
            setattr(metrics, name, value)

    # -- stage 3: findings & actions ----------------------------------------

    def add_finding(self, text: str | None = None) -> bool:
        self._ensure_open()
        return self.findings.add(text)

    def remove_finding(self, index: int) -> str:
        self._ensure_open()
        return self.findings.remove(index)

    def add_action(self, text: str | None = None) -> bool:
        self._ensure_open()
        return self.actions.add(text)

    def remove_action(self, index: int) -> str:
        self._ensure_open()
        return self.actions.remove(index)

    # -- stage 4: photo & signatures ----------------------------------------

    def capture_photo(self, artifact: str) -> None:
        """Store a photo data URI, replacing any earlier one."""
        self._ensure_open()
        mime, raw = decode_data_uri(artifact)
        if not mime.startswith("image/"):
            raise ValueError(f"Photo must be an image, got {mime!r}")
        if not raw:
            raise ValueError("Photo data URI carries no image bytes")
        self.draft.photo_url = artifact

    def capture_photo_bytes(self, data: bytes, mime: str = "image/jpeg") -> None:
        self.capture_photo(encode_bytes_data_uri(data, mime))

    def _save_supervisor_signature(self, artifact: str) -> None:
        if not self._closed:
            self.draft.signature_supervisor = artifact

    def _save_principal_signature(self, artifact: str) -> None:
        if not self._closed:
            self.draft.signature_principal = artifact

    # -- terminal transitions -----------------------------------------------

    def submit(self, *, now: datetime | None = None) -> SchoolVisit | None:
        """Finalize the draft into a `SchoolVisit`; None if the stage-4 guard fails."""
        self._ensure_open()
        if not self.can_submit:
            logger.info("Submit blocked for visit %s at stage %d", self.draft.id, int(self._stage))
            return None

        d = self.draft
        result = self._geofence or GeofenceResult()
        visit = SchoolVisit(
            id=d.id,
            inspectorId=self._inspector_id,
            schoolId=d.school_id,
            schoolName=d.school_name,
            principalName=d.principal_name,
            date=d.date,
            jam=clock_hhmm(self._settings.app.timezone, now=now),
            type=d.category.value,
            location=self._location,
            locationVerified=result.verified is True,
            distanceMeter=_round_half_up(result.distance_m) if result.distance_m is not None else 0,
            locationStatus=location_status(result),
            photoUrl=d.photo_url,
            notes=d.notes,
            empathyMetrics=d.empathy_metrics.model_copy(),
            keyFindings=tuple(d.key_findings),
            agreedActions=tuple(d.agreed_actions),
            signatureSupervisor=d.signature_supervisor,
            signaturePrincipal=d.signature_principal,
            status="Submitted",
        )
        self._stage = Stage.FINALIZED
        self._closed = True
        logger.info(
            "Visit %s finalized: school=%s status=%s distance=%dm",
            visit.id,
            visit.school_id,
            visit.location_status,
            visit.distance_meter,
        )
        return visit

    def cancel(self) -> None:
        """Discard the draft; safe while a location fetch is still pending."""
        if self._closed:
            return
        self._closed = True
        self._cancelled = True
        self._location_busy = False
        logger.info("Visit %s cancelled", self.draft.id)
