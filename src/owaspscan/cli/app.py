# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root."""

from __future__ import annotations

import sys
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer

from owaspscan.cli.exit_codes import CIExitCode, exit_code_for
from owaspscan.core.config import get_settings
from owaspscan.core.constants import SOURCE_EXTENSIONS, Severity
from owaspscan.core.exceptions import OwaspScanError
from owaspscan.core.logging import setup_logging
from owaspscan.models.analysis import AnalysisResult

app = typer.Typer(
    name="owaspscan",
    help="OWASP Top 10 static analysis and secure-code remediation",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override OWASPSCAN_LOG_LEVEL"),
    ] = None,
) -> None:
    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.log_format)


class OutputFormat(StrEnum):
    CONSOLE = "console"
    JSON = "json"
    SARIF = "sarif"
    MARKDOWN = "markdown"


def _read_target(target: str) -> str:
    from owaspscan.sdk import read_source

    if target == "-":
        return sys.stdin.read()
    return read_source(target)


def _collect_sources(directory: Path) -> list[Path]:
    return sorted(
        p for p in directory.rglob("*")
        if p.is_file() and p.suffix.lower() in SOURCE_EXTENSIONS
    )


@app.command()
def scan(
    target: Annotated[
        str, typer.Argument(help="Source file, directory, or - for stdin")
    ],
    fmt: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.CONSOLE,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path"),
    ] = None,
    secure_out: Annotated[
        Path | None,
        typer.Option("--secure-out", help="Write the remediated code to this path (single target)"),
    ] = None,
    fail_on: Annotated[
        Severity | None,
        typer.Option(
            "--fail-on",
            case_sensitive=False,
            help="Exit with code 2 when a finding reaches this severity",
        ),
    ] = None,
    watch: Annotated[
        bool,
        typer.Option("--watch", help="Watch the file or directory and re-analyze on change"),
    ] = False,
    poll_interval: Annotated[
        float | None,
        typer.Option("--poll-interval", help="Watch mode poll interval in seconds"),
    ] = None,
) -> None:
    """Analyze source code for OWASP Top 10 vulnerabilities."""
    settings = get_settings()

    if watch:
        from owaspscan.cli.tui.watch import run_watch_mode

        run_watch_mode(
            target,
            poll_interval=poll_interval or settings.watch_poll_interval,
            debounce=settings.watch_debounce,
        )
        return

    from owaspscan.sdk import analyze

    target_path = Path(target)
    if target != "-" and target_path.is_dir():
        results = _scan_directory(target_path, fmt, output)
        raise typer.Exit(int(exit_code_for(results, fail_on)))

    if target != "-" and not target_path.is_file():
        typer.echo(f"Target not found: {target}", err=True)
        raise typer.Exit(int(CIExitCode.ERROR))

    try:
        text = _read_target(target)
        result = analyze(text)
    except OwaspScanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(int(CIExitCode.ERROR)) from exc

    label = "<stdin>" if target == "-" else target
    _output_result(result, label, fmt, output, text)

    if secure_out:
        secure_out.write_text(result.secure_code, encoding="utf-8")
        typer.echo(f"Secure code written to {secure_out}", err=True)

    raise typer.Exit(int(exit_code_for([result], fail_on)))


def _scan_directory(
    directory: Path,
    fmt: OutputFormat,
    output: Path | None,
) -> list[AnalysisResult]:
    import json

    from owaspscan.analytics.history import AnalysisHistory
    from owaspscan.sdk import analyze

    files = _collect_sources(directory)
    if not files:
        typer.echo(f"No source files found in {directory}", err=True)
        raise typer.Exit(int(CIExitCode.ERROR))

    history = AnalysisHistory()
    scanned: list[tuple[str, AnalysisResult]] = []
    for path in files:
        try:
            result = analyze(_read_target(str(path)))
        except OwaspScanError as exc:
            typer.echo(f"Skipping {path}: {exc}", err=True)
            continue
        history.add(result)
        scanned.append((str(path), result))
        if fmt == OutputFormat.CONSOLE:
            from owaspscan.cli.formatters.console import format_analysis_result

            format_analysis_result(result, str(path))

    if fmt == OutputFormat.CONSOLE:
        from owaspscan.cli.formatters.console import format_history_summary

        format_history_summary(history.summary())
    elif fmt == OutputFormat.SARIF:
        from owaspscan.cli.formatters.sarif import analysis_results_to_sarif

        _write_output(json.dumps(analysis_results_to_sarif(scanned), indent=2), output)
    elif fmt == OutputFormat.JSON:
        data = [
            {"target": target, **result.model_dump(mode="json", by_alias=True)}
            for target, result in scanned
        ]
        _write_output(json.dumps(data, indent=2), output)
    elif fmt == OutputFormat.MARKDOWN:
        from owaspscan.cli.formatters.markdown import format_markdown

        _write_output("\n\n".join(format_markdown(r, t) for t, r in scanned), output)

    return [r for _, r in scanned]


def _output_result(
    result: AnalysisResult,
    target: str,
    fmt: OutputFormat,
    output: Path | None,
    original: str,
) -> None:
    if fmt == OutputFormat.CONSOLE:
        from owaspscan.cli.formatters.console import format_analysis_result

        format_analysis_result(result, target, show_secure_code=True)
    elif fmt == OutputFormat.SARIF:
        from owaspscan.cli.formatters.sarif import format_sarif

        _write_output(format_sarif(result, target), output)
    elif fmt == OutputFormat.JSON:
        from owaspscan.cli.formatters.json_fmt import format_json

        _write_output(format_json(result), output)
    elif fmt == OutputFormat.MARKDOWN:
        from owaspscan.cli.formatters.markdown import format_markdown
        from owaspscan.scanner.diff import build_comparison

        comparison = build_comparison(original, result, get_settings().context_lines)
        _write_output(format_markdown(result, target, comparison), output)


def _write_output(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Output written to {output}")
    else:
        sys.stdout.write(text + "\n")


@app.command()
def compare(
    target: Annotated[
        str, typer.Argument(help="Source file, or - for stdin")
    ],
    context: Annotated[
        int | None,
        typer.Option("--context", "-c", help="Context lines around each finding"),
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Emit JSON instead of a side-by-side view")
    ] = False,
) -> None:
    """Show original and secure code side by side around each finding."""
    from owaspscan.sdk import compare as sdk_compare

    try:
        result, comparison = sdk_compare(_read_target(target), context_lines=context)
    except OwaspScanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(int(CIExitCode.ERROR)) from exc

    if as_json:
        from owaspscan.cli.formatters.json_fmt import format_json_comparison

        _write_output(format_json_comparison(result, comparison), None)
        return

    from owaspscan.cli.formatters.console import format_comparison

    format_comparison(comparison, result.language)


@app.command()
def rules(
    category: Annotated[
        int | None,
        typer.Option("--category", "-c", min=1, max=10, help="Only rules in this OWASP category (1-10)"),
    ] = None,
) -> None:
    """List the rules in the active catalog."""
    from rich.console import Console
    from rich.table import Table

    from owaspscan.detectors.rule_engine.catalog import get_default_catalog

    table = Table(title="Rule Catalog")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Severity", style="red")
    table.add_column("Title", style="bold")
    table.add_column("Languages")

    for r in get_default_catalog():
        if category is not None and r.category.value != category:
            continue
        langs = "any" if r.languages is None else ", ".join(sorted(lang.value for lang in r.languages))
        table.add_row(r.rule_id, r.category.code, r.severity.value, r.title, langs)

    Console().print(table)


@app.command()
def owasp() -> None:
    """Show the OWASP Top 10 (2021) reference."""
    from rich.console import Console
    from rich.panel import Panel

    from owaspscan.core.owasp import OWASP_TOP_10

    console = Console()
    for ref in OWASP_TOP_10:
        body = [ref.description, "", "[bold]Prevention:[/bold]"]
        body += [f"  - {item}" for item in ref.prevention]
        console.print(Panel("\n".join(body), title=f"{ref.code} {ref.name}", subtitle=ref.severity.value))


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port")] = None,
    workers: Annotated[int, typer.Option("--workers", "-w", help="Worker count")] = 1,
) -> None:
    """Start the owaspscan API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "owaspscan.api.app:create_app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        workers=workers,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from owaspscan import __version__

    typer.echo(f"owaspscan v{__version__}")
