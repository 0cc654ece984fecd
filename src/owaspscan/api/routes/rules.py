# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Rule catalog and OWASP reference endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

from owaspscan.api.routes.analyze import get_pipeline
from owaspscan.core.owasp import OWASP_TOP_10, OwaspReference

router = APIRouter()


class RuleResponse(BaseModel):
    id: str
    title: str
    category: int
    category_code: str
    category_name: str
    severity: str
    languages: list[str] | None
    description: str
    recommendation: str


@router.get("/rules", response_model=list[RuleResponse])
async def list_rules(
    request: Request,
    category: int | None = Query(default=None, ge=1, le=10),
) -> list[RuleResponse]:
    catalog = get_pipeline(request).catalog
    return [
        RuleResponse(
            id=r.rule_id,
            title=r.title,
            category=r.category.value,
            category_code=r.category.code,
            category_name=r.category.title,
            severity=r.severity.value,
            languages=None if r.languages is None else sorted(lang.value for lang in r.languages),
            description=r.description,
            recommendation=r.recommendation,
        )
        for r in catalog
        if category is None or r.category.value == category
    ]


@router.get("/owasp", response_model=list[OwaspReference])
async def owasp_reference() -> list[OwaspReference]:
    return list(OWASP_TOP_10)
