# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Public SDK interface for embedding owaspscan in other tools.

Usage::

    from owaspscan import analyze

    result = analyze(source_text)
    print(result.language, result.risk_score)
    print(result.secure_code)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from owaspscan.core.config import Settings, get_settings
from owaspscan.core.exceptions import EmptySourceError, ScanError, SourceTooLargeError
from owaspscan.models.analysis import AnalysisResult
from owaspscan.scanner.diff import Comparison, build_comparison
from owaspscan.scanner.pipeline import AnalysisPipeline

logger = logging.getLogger("owaspscan.sdk")


@lru_cache(maxsize=1)
def _default_pipeline() -> AnalysisPipeline:
    return AnalysisPipeline()


def _pipeline(settings: Settings | None) -> AnalysisPipeline:
    if settings is None:
        return _default_pipeline()
    return AnalysisPipeline(settings=settings)


def validate_source(text: str, max_chars: int | None = None) -> None:
    """Raise if *text* is blank or longer than *max_chars*.

    Raises
    ------
    EmptySourceError
        The text is empty or whitespace-only.
    SourceTooLargeError
        The text exceeds the configured character limit.
    """
    if not text or not text.strip():
        raise EmptySourceError("Source code is empty")
    limit = max_chars if max_chars is not None else get_settings().max_input_chars
    if len(text) > limit:
        msg = f"Source code is {len(text)} characters; the limit is {limit}"
        raise SourceTooLargeError(msg)


def analyze(source_text: str, *, settings: Settings | None = None) -> AnalysisResult:
    """Analyze *source_text* and return an :class:`AnalysisResult`.

    Parameters
    ----------
    source_text:
        Code in any language; the language is inferred.
    settings:
        Optional ``Settings`` override; falls back to the process-wide
        catalog and ``get_settings()``.
    """
    pipeline = _pipeline(settings)
    validate_source(source_text, pipeline.settings.max_input_chars)
    return pipeline.analyze(source_text)


def read_source(path: str | Path) -> str:
    """Read a source file as UTF-8, raising :class:`ScanError` when it cannot be read."""
    resolved = Path(path).resolve()
    try:
        return resolved.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ScanError(f"Cannot read {resolved}: {exc}") from exc


def analyze_file(path: str | Path, *, settings: Settings | None = None) -> AnalysisResult:
    """Read a file from disk and analyze its contents."""
    return analyze(read_source(path), settings=settings)


def compare(
    source_text: str,
    *,
    settings: Settings | None = None,
    context_lines: int | None = None,
) -> tuple[AnalysisResult, Comparison]:
    """Analyze *source_text* and build the original/secure comparison view."""
    pipeline = _pipeline(settings)
    validate_source(source_text, pipeline.settings.max_input_chars)
    result = pipeline.analyze(source_text)
    ctx = context_lines if context_lines is not None else pipeline.settings.context_lines
    return result, build_comparison(source_text, result, ctx)
