# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLES_DIR = FIXTURES_DIR / "samples"
CLEAN_DIR = SAMPLES_DIR / "clean"
VULNERABLE_DIR = SAMPLES_DIR / "vulnerable"
RULES_DIR = FIXTURES_DIR / "rules"


@pytest.fixture
def clean_dir() -> Path:
    return CLEAN_DIR


@pytest.fixture
def vulnerable_dir() -> Path:
    return VULNERABLE_DIR


@pytest.fixture
def rules_dir() -> Path:
    return RULES_DIR


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Keep host environment variables out of Settings and keep logs quiet."""
    for var in (
        "OWASPSCAN_CUSTOM_RULES_DIR",
        "OWASPSCAN_DISABLED_RULES",
        "OWASPSCAN_MAX_INPUT_CHARS",
        "OWASPSCAN_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("OWASPSCAN_LOG_LEVEL", "WARNING")


@pytest.fixture(autouse=True)
def _clear_default_catalog():
    """Reset the process-wide catalog and SDK pipeline between tests."""
    from owaspscan.detectors.rule_engine.catalog import get_default_catalog
    from owaspscan.sdk import _default_pipeline

    get_default_catalog.cache_clear()
    _default_pipeline.cache_clear()
    yield
    get_default_catalog.cache_clear()
    _default_pipeline.cache_clear()


@pytest.fixture(scope="session")
def catalog():
    from owaspscan.detectors.rule_engine.catalog import build_catalog

    return build_catalog()


@pytest.fixture
def pipeline(catalog):
    from owaspscan.scanner.pipeline import AnalysisPipeline

    return AnalysisPipeline(catalog=catalog)
