# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Submitted source text and its line structure."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceDocument:
    """Raw submitted text split into lines.

    ``lines`` holds line contents without terminators and ``endings`` the
    terminator that followed each line (empty for an unterminated last line),
    so ``"".join(l + e for l, e in zip(lines, endings)) == text`` always holds.
    Line numbers are 0-indexed internally and reported 1-indexed.
    """

    text: str
    lines: tuple[str, ...] = field(init=False, repr=False)
    endings: tuple[str, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        contents: list[str] = []
        endings: list[str] = []
        for raw in self.text.splitlines(keepends=True):
            body = raw.splitlines()[0]
            contents.append(body)
            endings.append(raw[len(body):])
        object.__setattr__(self, "lines", tuple(contents))
        object.__setattr__(self, "endings", tuple(endings))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def sha256(self) -> str:
        return hashlib.sha256(self.text.encode("utf-8", "surrogatepass")).hexdigest()

    @property
    def newline(self) -> str:
        """Dominant line terminator, used for lines the remediator inserts."""
        if "\r\n" in self.endings:
            return "\r\n"
        return "\n"

    def line(self, number: int) -> str:
        """Return the content of the 1-indexed line *number*."""
        return self.lines[number - 1]
