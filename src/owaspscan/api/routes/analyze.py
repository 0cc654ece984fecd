# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Analysis and comparison endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from owaspscan.core.exceptions import EmptySourceError, SourceTooLargeError
from owaspscan.scanner.diff import build_comparison
from owaspscan.scanner.pipeline import AnalysisPipeline
from owaspscan.sdk import validate_source

logger = logging.getLogger("owaspscan.api.analyze")

router = APIRouter()


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class AnalyzeRequestBody(BaseModel):
    code: str = Field(description="Source code to analyze; the language is inferred")


class CompareRequestBody(AnalyzeRequestBody):
    context_lines: int | None = Field(default=None, ge=0, le=50, alias="contextLines")

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def get_pipeline(request: Request) -> AnalysisPipeline:
    return request.app.state.pipeline


def _validate(code: str, pipeline: AnalysisPipeline) -> None:
    try:
        validate_source(code, pipeline.settings.max_input_chars)
    except EmptySourceError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SourceTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/analyze")
async def analyze(body: AnalyzeRequestBody, request: Request) -> dict[str, Any]:
    """Analyze source code; returns the result with camelCase keys."""
    pipeline = get_pipeline(request)
    _validate(body.code, pipeline)
    result = await asyncio.to_thread(pipeline.analyze, body.code)
    return result.model_dump(mode="json", by_alias=True)


@router.post("/compare")
async def compare(body: CompareRequestBody, request: Request) -> dict[str, Any]:
    """Analyze source code and return focused original/secure sections."""
    pipeline = get_pipeline(request)
    _validate(body.code, pipeline)
    result = await asyncio.to_thread(pipeline.analyze, body.code)
    ctx = body.context_lines if body.context_lines is not None else pipeline.settings.context_lines
    comparison = build_comparison(body.code, result, ctx)
    return {
        "analysis": result.model_dump(mode="json", by_alias=True),
        "comparison": comparison.model_dump(mode="json", by_alias=True),
    }
