# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Rich console output formatter for analysis results."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from owaspscan import __version__
from owaspscan.analytics.history import HistorySummary
from owaspscan.core.constants import SEVERITY_ORDER, Language, RiskLevel, Severity
from owaspscan.models.analysis import AnalysisResult
from owaspscan.scanner.diff import Comparison

console = Console()

SEVERITY_COLORS = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}

RISK_COLORS = {
    RiskLevel.HIGH: "bold red",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.LOW: "cyan",
    RiskLevel.NONE: "bold green",
}

# Lexer names understood by Pygments via rich.syntax.
LEXERS = {
    Language.JAVASCRIPT: "javascript",
    Language.PYTHON: "python",
    Language.PHP: "php",
    Language.JAVA: "java",
    Language.C_CPP: "cpp",
    Language.HTML: "html",
    Language.CSS: "css",
    Language.GENERAL: "text",
}


def format_analysis_result(
    result: AnalysisResult,
    target: str = "<stdin>",
    *,
    show_secure_code: bool = False,
    out: Console | None = None,
) -> None:
    """Print an analysis result to the console with Rich formatting."""
    out = out or console
    out.print()
    out.print(f"[bold]owaspscan v{__version__}[/bold] - OWASP Top 10 Code Analyzer")
    out.print()

    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_column("key", style="dim")
    info_table.add_column("value")
    info_table.add_row("Target:", target)
    info_table.add_row("Language:", result.language.value)
    info_table.add_row("SHA256:", result.source_sha256[:16] + "..." if result.source_sha256 else "N/A")
    out.print(info_table)
    out.print()

    risk_color = RISK_COLORS.get(result.risk_level, "white")
    out.print(
        Panel(
            f"[{risk_color}]RISK: {result.risk_level.value.upper()}[/{risk_color}]"
            f"  (risk score: {result.risk_score}/100)",
            style=risk_color,
        )
    )
    out.print()

    if result.findings:
        for finding in result.findings:
            sev_color = SEVERITY_COLORS.get(finding.severity, "white")
            out.print(Text(finding.severity.value.upper().ljust(9), style=sev_color), end="")
            out.print(f"  [bold]{finding.rule_id}[/bold]  {finding.type}")
            line_info = f"Line {finding.line}" if finding.line == finding.line_end else (
                f"Lines {finding.line}-{finding.line_end}"
            )
            out.print(f"          {line_info}: {finding.code_snippet[:120]}", style="dim", markup=False)
            out.print(f"          {finding.description}", style="dim italic", markup=False)
            out.print(f"          Fix: {finding.recommendation}", style="dim", markup=False)
            out.print()
    else:
        out.print("  No vulnerabilities detected.", style="bold green")
        out.print()

    counts = result.finding_count_by_severity
    parts = [f"{counts[sev.value]} {sev.value.lower()}" for sev in SEVERITY_ORDER if sev.value in counts]
    summary = ", ".join(parts) if parts else "0 findings"
    out.print(f"  Summary: {len(result.findings)} findings ({summary})")
    out.print()

    if show_secure_code and result.findings:
        out.print(
            Panel(
                Syntax(result.secure_code, LEXERS[result.language], line_numbers=True),
                title="Secure Code",
                border_style="green",
            )
        )


def format_comparison(
    comparison: Comparison,
    language: Language,
    *,
    out: Console | None = None,
) -> None:
    """Print original and secure sections side by side."""
    out = out or console
    lexer = LEXERS[language]
    if comparison.clean:
        out.print("[bold green]No vulnerabilities detected; the code is unchanged.[/bold green]")

    for section in comparison.sections:
        table = Table(show_header=True, expand=True)
        table.add_column(f"Original (lines {section.original_start}-{section.original_end})", style="red")
        table.add_column(f"Secure (lines {section.secure_start}-{section.secure_end})", style="green")
        table.add_row(
            Syntax(
                "\n".join(section.original_lines),
                lexer,
                line_numbers=True,
                start_line=section.original_start,
            ),
            Syntax(
                "\n".join(section.secure_lines),
                lexer,
                line_numbers=True,
                start_line=section.secure_start,
            ),
        )
        if section.rule_ids:
            table.caption = ", ".join(section.rule_ids)
        out.print(table)


def format_history_summary(summary: HistorySummary, *, out: Console | None = None) -> None:
    """Print the aggregate statistics of a multi-file scan."""
    out = out or console
    table = Table(title="Scan Summary", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Analyses run", str(summary.analyses_run))
    table.add_row("Total issues", str(summary.total_issues))
    table.add_row("Average risk score", str(summary.average_risk_score))
    table.add_row("Clean scans", str(summary.clean_scans))
    out.print(table)

    sev_table = Table(title="Severity Distribution")
    sev_table.add_column("Severity", style="bold")
    sev_table.add_column("Count", justify="right")
    for sev in SEVERITY_ORDER:
        sev_table.add_row(
            Text(sev.value, style=SEVERITY_COLORS[sev]),
            str(summary.severity_distribution.get(sev.value, 0)),
        )
    out.print(sev_table)

    if summary.category_distribution:
        cat_table = Table(title="Categories")
        cat_table.add_column("Category", style="bold")
        cat_table.add_column("Count", justify="right")
        for name, count in summary.category_distribution:
            cat_table.add_row(name, str(count))
        out.print(cat_table)
