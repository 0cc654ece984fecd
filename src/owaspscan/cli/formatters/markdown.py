# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Markdown report formatter."""

from __future__ import annotations

from owaspscan import __version__
from owaspscan.cli.formatters.console import LEXERS
from owaspscan.models.analysis import AnalysisResult
from owaspscan.scanner.diff import Comparison


def _fence(code: str, lang: str) -> str:
    fence = "```"
    while fence in code:
        fence += "`"
    return f"{fence}{lang}\n{code.rstrip()}\n{fence}"


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def format_markdown(
    result: AnalysisResult,
    target: str = "<stdin>",
    comparison: Comparison | None = None,
) -> str:
    """Render a full report: summary, findings, comparison, secure code."""
    lang = "" if LEXERS[result.language] == "text" else LEXERS[result.language]
    lines = [
        "# OWASP Top 10 Security Report",
        "",
        f"Generated by owaspscan v{__version__}",
        "",
        "## Summary",
        "",
        f"- **Target:** `{target}`",
        f"- **Language:** {result.language.value}",
        f"- **Risk score:** {result.risk_score}/100 ({result.risk_level.value})",
        f"- **Vulnerabilities:** {len(result.findings)}",
    ]
    if result.max_severity:
        lines.append(f"- **Highest severity:** {result.max_severity.value}")
    lines.append("")

    lines += ["## Findings", ""]
    if result.findings:
        lines += [
            "| Line | Severity | Rule | Type | Description |",
            "| ---: | --- | --- | --- | --- |",
        ]
        for f in result.findings:
            lines.append(
                f"| {f.line} | {f.severity.value} | `{f.rule_id}` | {_cell(f.type)} | {_cell(f.description)} |"
            )
        lines.append("")
        for f in result.findings:
            lines += [
                f"### Line {f.line}: {f.type}",
                "",
                _fence(f.code_snippet, lang),
                "",
                f"**Recommendation:** {f.recommendation}",
                "",
            ]
    else:
        lines += ["No vulnerabilities detected.", ""]

    if comparison is not None and not comparison.clean:
        lines += ["## Comparison", ""]
        for section in comparison.sections:
            lines += [
                f"### Original lines {section.original_start}-{section.original_end}",
                "",
                _fence("\n".join(section.original_lines), lang),
                "",
                f"### Secure lines {section.secure_start}-{section.secure_end}",
                "",
                _fence("\n".join(section.secure_lines), lang),
                "",
            ]

    if result.findings:
        lines += ["## Secure Code", "", _fence(result.secure_code, lang), ""]

    return "\n".join(lines)
