"""
API routes.

Endpoints:
- GET  `/api/health`
- POST `/api/distance`: great-circle distance between two coordinates.
- POST `/api/geofence`: geofence decision for a captured position and a school.
- POST `/api/signature`: rasterize a unified pointer stream into a PNG artifact.
- GET  `/api/schools`: search the inspector's schools in the remote directory.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

import httpx
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from siap.config.settings import get_settings
from siap.core.geo import distance_m
from siap.domain.models import Coordinate, GeofenceResult, School
from siap.geofence.evaluator import describe, evaluate, location_status
from siap.ingestion.remote_client import RemoteDataClient, RemoteServiceError
from siap.ingestion.school_directory import search_schools
from siap.signature.pad import SignatureCapture
from siap.signature.pointer import ClientRect, PointerMessage

router = APIRouter()


class DistanceRequest(BaseModel):
    origin: Coordinate = Field(..., alias="from")
    target: Coordinate = Field(..., alias="to")


class GeofenceRequest(BaseModel):
    captured: Coordinate
    school: School
    radius_m: float | None = Field(default=None, gt=0)


class GeofenceResponse(BaseModel):
    result: GeofenceResult
    radius_m: float
    location_status: str
    description: str


class PointerEventIn(BaseModel):
    kind: Literal["begin", "move", "end"]
    x: float = 0.0
    y: float = 0.0


class RectIn(BaseModel):
    left: float = 0.0
    top: float = 0.0
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class SignatureRequest(BaseModel):
    events: list[PointerEventIn]
    rect: RectIn | None = None


class SignatureResponse(BaseModel):
    has_ink: bool
    artifact: str


@lru_cache
def _remote() -> RemoteDataClient:
    return RemoteDataClient(get_settings())


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok", "name": get_settings().app.name}


@router.post("/api/distance")
def post_distance(req: DistanceRequest) -> dict:
    meters = distance_m(req.origin.latitude, req.origin.longitude, req.target.latitude, req.target.longitude)
    return {"distance_m": meters}


@router.post("/api/geofence", response_model=GeofenceResponse)
def post_geofence(req: GeofenceRequest) -> GeofenceResponse:
    radius = req.radius_m if req.radius_m is not None else get_settings().geofence.radius_m
    result = evaluate(req.captured, req.school, radius)
    return GeofenceResponse(
        result=result,
        radius_m=radius,
        location_status=location_status(result),
        description=describe(result),
    )


@router.post("/api/signature", response_model=SignatureResponse)
def post_signature(req: SignatureRequest) -> SignatureResponse:
    sig = get_settings().signature
    pad = SignatureCapture(
        width=sig.width,
        height=sig.height,
        stroke_width=sig.stroke_width,
        ink_color=sig.ink_color,
    )
    rect = ClientRect(**req.rect.model_dump()) if req.rect else None
    artifact = pad.feed(
        (PointerMessage(kind=e.kind, client_x=e.x, client_y=e.y) for e in req.events),
        rect,
    )
    return SignatureResponse(has_ink=pad.has_ink, artifact=artifact)


@router.get("/api/schools")
def get_schools(inspector_id: str, q: str = "") -> dict:
    """Search the inspector's schools by name or NPSN."""
    try:
        schools = _remote().get_schools(inspector_id)
    except (httpx.HTTPError, RemoteServiceError, ValueError) as e:
        raise HTTPException(
            status_code=502,
            detail={"code": "REMOTE_ERROR", "message": str(e)},
        ) from e
    matches = search_schools(schools, q)
    return {"schools": [s.model_dump(mode="json", by_alias=True) for s in matches]}
