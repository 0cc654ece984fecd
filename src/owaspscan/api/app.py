# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from owaspscan import __version__
from owaspscan.api.middleware import RequestMiddleware
from owaspscan.api.routes import analyze, health, rules
from owaspscan.core.config import Settings, get_settings
from owaspscan.core.logging import setup_logging
from owaspscan.scanner.pipeline import AnalysisPipeline


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="owaspscan",
        description="OWASP Top 10 static analysis and secure-code remediation",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    app.state.settings = settings
    app.state.pipeline = AnalysisPipeline(settings=settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(analyze.router, prefix="/api/v1", tags=["analyze"])
    app.include_router(rules.router, prefix="/api/v1", tags=["rules"])
    app.add_middleware(RequestMiddleware)

    return app
