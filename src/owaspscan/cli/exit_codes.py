# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Exit codes for CI/CD pipeline integrations.

Exit codes:
    0 (CLEAN) no finding at or above the ``--fail-on`` severity
    1 (ERROR) input could not be read or was empty
    2 (FINDINGS) at least one finding at or above the ``--fail-on`` severity
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum

from owaspscan.core.constants import SEVERITY_ORDER, Severity
from owaspscan.models.analysis import AnalysisResult


class CIExitCode(IntEnum):
    """Exit codes used by the owaspscan CLI."""

    CLEAN = 0
    ERROR = 1
    FINDINGS = 2


def exit_code_for(results: Iterable[AnalysisResult], fail_on: Severity | None) -> CIExitCode:
    """Return FINDINGS when any result has a finding at least as severe as *fail_on*."""
    if fail_on is None:
        return CIExitCode.CLEAN
    threshold = SEVERITY_ORDER.index(fail_on)
    for result in results:
        if any(SEVERITY_ORDER.index(f.severity) <= threshold for f in result.findings):
            return CIExitCode.FINDINGS
    return CIExitCode.CLEAN
