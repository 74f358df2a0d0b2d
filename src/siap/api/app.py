# src/siap/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and maps validation errors to the
`{code, message}` error shape. Endpoints live in `siap.api.routes`.
"""

from __future__ import annotations

import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from siap.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title="SIAP Visit API", version="0.1.0")

# The field web app is served from a different origin; configure via
# SIAP_CORS_ORIGINS="https://app.example,https://staging.example".
cors_origins = [s.strip() for s in os.getenv("SIAP_CORS_ORIGINS", "").split(",") if s.strip()]
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": {"code": "VALIDATION_ERROR", "message": str(exc.errors())}},
    )


app.include_router(router)
