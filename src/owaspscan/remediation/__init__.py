# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Secure-code synthesis."""

from owaspscan.remediation.remediator import RemediationResult, Remediator, remediate

__all__ = ["RemediationResult", "Remediator", "remediate"]
