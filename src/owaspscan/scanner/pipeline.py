# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Analysis pipeline: classify, scan, score, remediate."""

from __future__ import annotations

import logging
import time

from owaspscan.classifier.language import classify
from owaspscan.core.config import Settings, get_settings
from owaspscan.detectors.rule_engine.catalog import RuleCatalog, build_catalog, get_default_catalog
from owaspscan.models.analysis import AnalysisResult
from owaspscan.models.source import SourceDocument
from owaspscan.remediation.remediator import Remediator
from owaspscan.scanner.scanner import scan
from owaspscan.scanner.severity import compute_risk_score

logger = logging.getLogger("owaspscan.scanner.pipeline")


class AnalysisPipeline:
    """Runs one analysis per call against a shared, read-only rule catalog.

    The pipeline holds no per-request state, so a single instance can serve
    concurrent callers from several threads.
    """

    def __init__(
        self,
        catalog: RuleCatalog | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        if catalog is not None:
            self._catalog = catalog
        elif settings is None:
            self._catalog = get_default_catalog()
        else:
            self._catalog = build_catalog(
                self._settings.custom_rules_dir or None, self._settings.disabled_rules
            )

    @property
    def catalog(self) -> RuleCatalog:
        return self._catalog

    @property
    def settings(self) -> Settings:
        return self._settings

    def analyze(self, text: str) -> AnalysisResult:
        """Analyze *text* and return an immutable result.

        Never raises on content: unknown languages fall back to General and
        empty text yields an empty result.
        """
        start_time = time.monotonic()
        document = SourceDocument(text)
        language = classify(text)

        findings = scan(
            document,
            language,
            self._catalog,
            max_line_length=self._settings.max_line_length,
            snippet_max_chars=self._settings.snippet_max_chars,
        )
        remediation = Remediator(
            document,
            findings,
            self._catalog,
            language,
            max_line_length=self._settings.max_line_length,
        ).run()
        risk_score = compute_risk_score(findings)

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            "Analysis complete: language=%s findings=%d risk_score=%d duration_ms=%d",
            language.value,
            len(findings),
            risk_score,
            elapsed_ms,
        )

        return AnalysisResult(
            language=language,
            risk_score=risk_score,
            findings=tuple(findings),
            secure_code=remediation.secure_code,
            fixes=remediation.fixes,
            source_sha256=document.sha256,
        )
