# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Debounced cancel-and-replace analysis for interactive callers."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from owaspscan.models.analysis import AnalysisResult

logger = logging.getLogger("owaspscan.live")

ResultCallback = Callable[[AnalysisResult], None]


class DebouncedAnalyzer:
    """Analyze only the most recent submission once input settles.

    Each ``submit`` cancels the pending analysis and schedules a new one
    after ``delay`` seconds. The analysis itself runs in a worker thread so
    the event loop stays responsive.
    """

    def __init__(
        self,
        analyze: Callable[[str], AnalysisResult],
        delay: float = 1.0,
        on_result: ResultCallback | None = None,
    ) -> None:
        self._analyze = analyze
        self._delay = delay
        self._on_result = on_result
        self._pending: asyncio.Task[AnalysisResult | None] | None = None
        self.latest: AnalysisResult | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def submit(self, text: str) -> None:
        """Schedule analysis of *text*; blank text only cancels."""
        self.cancel()
        if not text.strip():
            return
        self._pending = asyncio.get_running_loop().create_task(self._run(text))

    async def _run(self, text: str) -> AnalysisResult | None:
        await asyncio.sleep(self._delay)
        result = await asyncio.to_thread(self._analyze, text)
        self.latest = result
        if self._on_result is not None:
            try:
                self._on_result(result)
            except Exception:
                logger.exception("Live analysis callback failed")
        return result

    async def flush(self) -> AnalysisResult | None:
        """Wait for the pending analysis, if any, and return the latest result."""
        task = self._pending
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        return self.latest
