# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from owaspscan import __version__
from owaspscan.api.routes.analyze import get_pipeline

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    rules: int


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    return HealthResponse(
        status="ok",
        service="owaspscan",
        version=__version__,
        rules=len(get_pipeline(request).catalog),
    )
