# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Watch mode: poll source files for changes and re-analyze them once edits settle."""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from owaspscan.cli.formatters.console import format_analysis_result
from owaspscan.core.constants import SOURCE_EXTENSIONS
from owaspscan.core.exceptions import ScanError
from owaspscan.live import DebouncedAnalyzer
from owaspscan.models.analysis import AnalysisResult
from owaspscan.scanner.pipeline import AnalysisPipeline
from owaspscan.sdk import read_source


def collect_file_states(target: Path) -> dict[str, float]:
    """Collect mtime for the watched file, or every source file in a directory.

    Returns a mapping of absolute file path to modification time.
    """
    states: dict[str, float] = {}
    if target.is_file():
        with contextlib.suppress(OSError):
            states[str(target.resolve())] = target.stat().st_mtime
        return states
    if not target.is_dir():
        return states
    for filepath in target.iterdir():
        if filepath.is_file() and filepath.suffix.lower() in SOURCE_EXTENSIONS:
            with contextlib.suppress(OSError):
                states[str(filepath.resolve())] = filepath.stat().st_mtime
    return states


def detect_changes(
    previous: dict[str, float],
    current: dict[str, float],
) -> list[str]:
    """Return the paths that are new or have a newer mtime."""
    changed: list[str] = []
    for fpath, mtime in current.items():
        prev_mtime = previous.get(fpath)
        if prev_mtime is None or mtime > prev_mtime:
            changed.append(fpath)
    return changed


def run_watch_mode(
    target: str,
    poll_interval: float = 2.0,
    debounce: float = 1.0,
    console: Console | None = None,
) -> None:
    """Watch a file or directory and re-analyze changed sources.

    Uses polling (no external watchdog dependency).
    """
    if console is None:
        console = Console()

    path = Path(target).resolve()
    if not path.exists():
        console.print(f"[red]Target not found: {target}[/red]")
        return

    console.print(
        Panel(
            f"[bold blue]Watch Mode[/bold blue]\n"
            f"Watching: {path}\n"
            f"Poll interval: {poll_interval}s\n"
            f"Press Ctrl+C to stop.",
            border_style="blue",
        )
    )

    try:
        asyncio.run(_watch_loop(path, poll_interval, debounce, console))
    except KeyboardInterrupt:
        console.print("\n[dim]Watch mode stopped.[/dim]")


async def _watch_loop(path: Path, poll_interval: float, debounce: float, console: Console) -> None:
    pipeline = AnalysisPipeline()
    analyzers: dict[str, DebouncedAnalyzer] = {}

    def _analyzer_for(fpath: str) -> DebouncedAnalyzer:
        if fpath not in analyzers:

            def _render(result: AnalysisResult) -> None:
                format_analysis_result(result, fpath, out=console)

            analyzers[fpath] = DebouncedAnalyzer(pipeline.analyze, delay=debounce, on_result=_render)
        return analyzers[fpath]

    # Analyze everything once, then only what changes.
    file_states: dict[str, float] = {}
    console.print(f"[dim]Tracking {len(collect_file_states(path))} source file(s)...[/dim]")

    while True:
        current_states = collect_file_states(path)
        changed = detect_changes(file_states, current_states)
        if changed and file_states:
            console.print(f"\n[bold yellow]Detected {len(changed)} changed file(s)[/bold yellow]")
        for fpath in changed:
            try:
                text = read_source(fpath)
            except ScanError as exc:
                console.print(f"[red]{exc}[/red]")
                continue
            _analyzer_for(fpath).submit(text)
        file_states = current_states
        await asyncio.sleep(poll_interval)
