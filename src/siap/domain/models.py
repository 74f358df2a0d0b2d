"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- device inputs (`Coordinate`)
- the school directory (`School`)
- the in-progress visit (`VisitDraft`) and the finalized record (`SchoolVisit`)
- the geofence decision (`GeofenceResult`)

Wire names follow the remote spreadsheet store (camelCase, `jam`, `link_pdf`);
Python code uses snake_case attributes. Dump with `by_alias=True` for the wire.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

VisitStatus = Literal["Draft", "Submitted", "Archived"]

STATUS_IN_RADIUS = "DI LOKASI"
STATUS_OUT_OF_RADIUS = "JARAK JAUH"


class SupervisionType(str, Enum):
    """Supervision focus categories offered by the visit form."""

    IKM = "Kurikulum Merdeka"
    PBD = "Rapor Pendidikan"
    KOMBEL = "Komunitas Belajar"
    PMM = "Kinerja PMM"
    DIGITAL = "Digitalisasi"
    MANAJERIAL = "Tata Kelola"
    ACADEMIC = "Akademik"
    COACHING = "Pendampingan"


class Coordinate(BaseModel):
    """A device-reported position in decimal degrees (WGS84)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: float | None = Field(default=None, ge=0)


class School(BaseModel):
    """A school assigned to an inspector; the registered coordinate is optional."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False, populate_by_name=True)

    id: str
    npsn: str = ""
    name: str
    principal: str = ""
    inspector_id: str = Field("", alias="inspectorId")
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @property
    def has_coordinate(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class InspectorProfile(BaseModel):
    """The signed-in inspector (only the fields the visit flow needs)."""

    model_config = ConfigDict(extra="ignore")

    id_pengawas: str
    nama_pengawas: str = ""
    nip: str = ""
    wilayah: str = ""
    jabatan: str = ""


class EmpathyMetrics(BaseModel):
    """Three 1..5 impressions recorded with every visit."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    school_climate: int = Field(3, ge=1, le=5, alias="schoolClimate")
    teacher_engagement: int = Field(3, ge=1, le=5, alias="teacherEngagement")
    leadership_vibe: int = Field(3, ge=1, le=5, alias="leadershipVibe")


class GeofenceResult(BaseModel):
    """Outcome of comparing a captured position with a school's coordinate.

    `None`/`None` means the school has no registered coordinate: the visit cannot
    be verified, which is different from `verified=False`.
    """

    model_config = ConfigDict(frozen=True)

    distance_m: float | None = Field(default=None, ge=0)
    verified: bool | None = None

    @model_validator(mode="after")
    def _validate_tri_state(self) -> "GeofenceResult":
        if (self.distance_m is None) != (self.verified is None):
            raise ValueError("distance_m and verified must both be set or both be None")
        return self

    @property
    def indeterminate(self) -> bool:
        return self.verified is None


class VisitDraft(BaseModel):
    """Mutable in-progress visit, owned by a single `VisitCaptureWorkflow`."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    date: str
    school_id: str = ""
    school_name: str = ""
    principal_name: str = ""
    category: SupervisionType | None = None
    notes: str = ""
    key_findings: list[str] = Field(default_factory=list)
    agreed_actions: list[str] = Field(default_factory=list)
    signature_supervisor: str = ""
    signature_principal: str = ""
    photo_url: str = ""
    empathy_metrics: EmpathyMetrics = Field(default_factory=EmpathyMetrics)
    status: VisitStatus = "Draft"


class SchoolVisit(BaseModel):
    """Finalized, immutable visit record as exchanged with the remote store."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    inspector_id: str = Field("", alias="inspectorId")
    school_id: str = Field("", alias="schoolId")
    school_name: str = Field(..., alias="schoolName")
    principal_name: str = Field("", alias="principalName")
    date: str
    time: str = Field("", alias="jam")
    # Remote rows may carry categories outside `SupervisionType`.
    type: str
    location: Coordinate | None = None
    location_verified: bool = Field(False, alias="locationVerified")
    distance_meter: int = Field(0, ge=0, alias="distanceMeter")
    location_status: str = Field("", alias="locationStatus")
    photo_url: str = Field("", alias="photoUrl")
    notes: str = ""
    empathy_metrics: EmpathyMetrics = Field(default_factory=EmpathyMetrics, alias="empathyMetrics")
    key_findings: tuple[str, ...] = Field(default_factory=tuple, alias="keyFindings")
    agreed_actions: tuple[str, ...] = Field(default_factory=tuple, alias="agreedActions")
    signature_supervisor: str = Field("", alias="signatureSupervisor")
    signature_principal: str = Field("", alias="signaturePrincipal")
    status: VisitStatus = "Submitted"
    pdf_link: str | None = Field(default=None, alias="link_pdf")

    def to_wire(self) -> dict:
        """Dump with the remote store's field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
