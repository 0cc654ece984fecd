# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Side-by-side comparison of original and secure code around each finding."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from owaspscan.core.constants import CLEAN_COMPARISON_LINES
from owaspscan.models.analysis import AnalysisResult
from owaspscan.models.finding import AppliedFix, Finding


class ComparisonSection(BaseModel):
    """Matching windows of the original and secure code (1-indexed, inclusive)."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    original_start: int
    original_end: int
    original_lines: tuple[str, ...]
    secure_start: int
    secure_end: int
    secure_lines: tuple[str, ...]
    rule_ids: tuple[str, ...] = ()


class Comparison(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    clean: bool
    sections: tuple[ComparisonSection, ...] = ()


def _clamp(value: int, upper: int) -> int:
    return max(1, min(value, max(upper, 1)))


def _secure_range(
    finding: Finding,
    fixes: dict[tuple[str, int], AppliedFix],
    ordered: list[tuple[Finding, AppliedFix]],
) -> tuple[int, int]:
    fix = fixes.get((finding.rule_id, finding.line))
    if fix is not None:
        return fix.secure_line, fix.secure_line_end
    # Unapplied finding: shift by the line delta of the nearest preceding fix.
    delta = 0
    for prior, prior_fix in ordered:
        if prior.line >= finding.line:
            break
        delta = prior_fix.secure_line_end - prior.line_end
    return finding.line + delta, finding.line_end + delta


def build_comparison(original: str, result: AnalysisResult, context_lines: int = 3) -> Comparison:
    """Build focused comparison sections for *result*.

    Each finding contributes its lines plus *context_lines* on either side;
    overlapping or adjacent sections are merged. A clean result yields one
    section with the first lines of the code.
    """
    original_lines = original.splitlines()
    secure_lines = result.secure_code.splitlines()

    if result.is_clean:
        head = tuple(original_lines[:CLEAN_COMPARISON_LINES])
        section = ComparisonSection(
            original_start=1,
            original_end=max(len(head), 1),
            original_lines=head,
            secure_start=1,
            secure_end=max(len(head), 1),
            secure_lines=tuple(secure_lines[:CLEAN_COMPARISON_LINES]),
        )
        return Comparison(clean=True, sections=(section,))

    fixes = {(fx.rule_id, fx.line): fx for fx in result.fixes}
    ordered = sorted(
        ((f, fixes[(f.rule_id, f.line)]) for f in result.findings if (f.rule_id, f.line) in fixes),
        key=lambda pair: pair[0].line,
    )

    ranges: list[list] = []
    for finding in sorted(result.findings, key=lambda f: f.line):
        s_start, s_end = _secure_range(finding, fixes, ordered)
        ranges.append([
            _clamp(finding.line - context_lines, len(original_lines)),
            _clamp(finding.line_end + context_lines, len(original_lines)),
            _clamp(s_start - context_lines, len(secure_lines)),
            _clamp(s_end + context_lines, len(secure_lines)),
            [finding.rule_id],
        ])

    merged: list[list] = []
    for rng in ranges:
        if merged and rng[0] <= merged[-1][1] + 1:
            cur = merged[-1]
            cur[1] = max(cur[1], rng[1])
            cur[2] = min(cur[2], rng[2])
            cur[3] = max(cur[3], rng[3])
            cur[4].extend(r for r in rng[4] if r not in cur[4])
        else:
            merged.append(rng)

    sections = tuple(
        ComparisonSection(
            original_start=o_start,
            original_end=o_end,
            original_lines=tuple(original_lines[o_start - 1 : o_end]),
            secure_start=s_start,
            secure_end=s_end,
            secure_lines=tuple(secure_lines[s_start - 1 : s_end]),
            rule_ids=tuple(rule_ids),
        )
        for o_start, o_end, s_start, s_end, rule_ids in merged
    )
    return Comparison(clean=False, sections=sections)
