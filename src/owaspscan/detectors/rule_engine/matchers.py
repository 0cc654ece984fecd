# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Matcher variants and the single dispatch function that evaluates them."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum


class MatcherKind(StrEnum):
    LINE = "line"
    WINDOW = "window"
    PREDICATE = "predicate"
    ANY = "any"


@dataclass(frozen=True)
class MatchSpan:
    """A matched region; ``start`` and ``end`` are inclusive 0-based line indexes."""

    start: int
    end: int
    text: str


Predicate = Callable[[Sequence[str], int], MatchSpan | None]


@dataclass(frozen=True)
class Matcher:
    kind: MatcherKind
    patterns: tuple[re.Pattern[str], ...] = ()
    window: int = 1
    suppress: tuple[re.Pattern[str], ...] = ()
    predicate: Predicate | None = None
    alternatives: tuple[Matcher, ...] = ()


def _compile(patterns: Sequence[str | re.Pattern[str]], flags: int) -> tuple[re.Pattern[str], ...]:
    return tuple(p if isinstance(p, re.Pattern) else re.compile(p, flags) for p in patterns)


def line_matcher(
    *patterns: str | re.Pattern[str],
    suppress: Sequence[str | re.Pattern[str]] = (),
    flags: int = 0,
) -> Matcher:
    return Matcher(
        kind=MatcherKind.LINE,
        patterns=_compile(patterns, flags),
        suppress=_compile(suppress, flags),
    )


def window_matcher(
    *patterns: str | re.Pattern[str],
    window: int = 2,
    suppress: Sequence[str | re.Pattern[str]] = (),
    flags: int = 0,
) -> Matcher:
    if window < 2:
        msg = "Window matchers need at least two lines"
        raise ValueError(msg)
    return Matcher(
        kind=MatcherKind.WINDOW,
        patterns=_compile(patterns, flags),
        window=window,
        suppress=_compile(suppress, flags),
    )


def predicate_matcher(predicate: Predicate) -> Matcher:
    return Matcher(kind=MatcherKind.PREDICATE, predicate=predicate)


def any_matcher(*matchers: Matcher) -> Matcher:
    """Match with the first of *matchers* that matches, tried in order."""
    return Matcher(kind=MatcherKind.ANY, alternatives=matchers)


def _suppressed(matcher: Matcher, text: str) -> bool:
    return any(p.search(text) for p in matcher.suppress)


def evaluate(
    matcher: Matcher,
    lines: Sequence[str],
    index: int,
    max_line_length: int = 4096,
) -> MatchSpan | None:
    """Evaluate *matcher* at line *index*.

    Window matches must start on the first line of the window, and a window
    that would run past the last line never matches.
    """
    if matcher.kind == MatcherKind.LINE:
        line = lines[index][:max_line_length]
        for pattern in matcher.patterns:
            if pattern.search(line):
                if _suppressed(matcher, line):
                    return None
                return MatchSpan(index, index, lines[index])
        return None

    if matcher.kind == MatcherKind.WINDOW:
        if index + matcher.window > len(lines):
            return None
        chunk = [ln[:max_line_length] for ln in lines[index : index + matcher.window]]
        text = "\n".join(chunk)
        first_len = len(chunk[0])
        for pattern in matcher.patterns:
            for m in pattern.finditer(text):
                if m.start() > first_len:
                    break
                last = max(m.start(), m.end() - 1)
                end = index + text.count("\n", 0, last)
                matched = "\n".join(lines[index : end + 1])
                if _suppressed(matcher, matched):
                    return None
                return MatchSpan(index, end, matched)
        return None

    if matcher.kind == MatcherKind.ANY:
        for alternative in matcher.alternatives:
            span = evaluate(alternative, lines, index, max_line_length)
            if span is not None:
                return span
        return None

    if matcher.predicate is not None:
        return matcher.predicate(lines, index)
    return None


_UNBOUNDED_BRACE = re.compile(r"\{\d*,\}")


def _unbounded_at(pattern: str, pos: int) -> bool:
    if pos >= len(pattern):
        return False
    if pattern[pos] in "*+":
        return True
    return bool(_UNBOUNDED_BRACE.match(pattern, pos))


def has_unsafe_quantifier(pattern: str) -> bool:
    """Return True when an unbounded quantifier applies to a group that already
    contains one, e.g. ``(a+)+`` or ``(?:\\w*\\s)*``, or to a group with
    alternatives, e.g. ``(a|a)*`` or ``(\\w|\\d)+``.
    """
    # One [quantified, alternation] pair per open group.
    stack: list[list[bool]] = []
    in_class = False
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if in_class:
            if ch == "]":
                in_class = False
            i += 1
            continue
        if ch == "[":
            in_class = True
            i += 1
            if i < n and pattern[i] == "^":
                i += 1
            if i < n and pattern[i] == "]":
                i += 1
            continue
        if ch == "(":
            stack.append([False, False])
        elif ch == ")":
            inner, alternation = stack.pop() if stack else (False, False)
            quantified = _unbounded_at(pattern, i + 1)
            if quantified and (inner or alternation):
                return True
            if stack:
                stack[-1][0] = stack[-1][0] or inner or quantified
                stack[-1][1] = stack[-1][1] or alternation
        elif ch == "|":
            if stack:
                stack[-1][1] = True
        elif stack and _unbounded_at(pattern, i):
            stack[-1][0] = True
        i += 1
    return False
