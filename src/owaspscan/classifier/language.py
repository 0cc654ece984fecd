# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Lexical language classifier.

Each language carries a list of weighted regex markers. A marker contributes
``weight * min(hits, CLASSIFIER_MAX_HITS_PER_MARKER)`` to its language, the
highest total wins, and ties fall back to ``LANGUAGE_PRIORITY``. Totals below
``CLASSIFIER_MIN_SCORE`` classify as General.
"""

from __future__ import annotations

import re

from owaspscan.core.constants import (
    CLASSIFIER_MAX_HITS_PER_MARKER,
    CLASSIFIER_MIN_SCORE,
    LANGUAGE_PRIORITY,
    Language,
)

_M = re.MULTILINE
_MI = re.MULTILINE | re.IGNORECASE

_CSS_ELEMENTS = (
    r"html|body|div|span|p|a|h[1-6]|ul|ol|li|table|tr|td|th|img|input|button|"
    r"form|header|footer|nav|section|main|article|label|select|textarea"
)

MARKERS: dict[Language, list[tuple[re.Pattern[str], int]]] = {
    Language.PHP: [
        (re.compile(r"<\?php\b", re.IGNORECASE), 25),
        (re.compile(r"\$_(?:GET|POST|REQUEST|COOKIE|SERVER|FILES|SESSION)\b"), 4),
        (re.compile(r"\bfunction\s+\w+\s*\(\s*\$"), 3),
        (re.compile(r"^\s*echo\s", _M), 2),
        (re.compile(r"\bmysqli?_\w+\s*\("), 3),
        (re.compile(r"\$[A-Za-z_]\w*\s*(?:=|->)"), 1),
    ],
    Language.HTML: [
        (re.compile(r"<!DOCTYPE\s+html", re.IGNORECASE), 10),
        (re.compile(r"<html\b", re.IGNORECASE), 6),
        (re.compile(r"<(?:head|body|title|meta|link)\b", re.IGNORECASE), 3),
        (
            re.compile(
                r"</(?:div|p|span|body|head|a|ul|ol|li|table|form|script|button|h[1-6])>",
                re.IGNORECASE,
            ),
            2,
        ),
    ],
    Language.JAVA: [
        (re.compile(r"\bpublic\s+(?:final\s+|abstract\s+)?class\s+\w+"), 6),
        (re.compile(r"\bpublic\s+static\s+void\s+main\s*\("), 8),
        (re.compile(r"System\.(?:out|err)\.print"), 5),
        (re.compile(r"^\s*import\s+(?:java|javax|org|com)\.[\w.]+(?:\.\*)?;", _M), 8),
        (re.compile(r"@Override\b"), 4),
        (re.compile(r"\b(?:private|protected|public)\s+(?:static\s+)?(?:final\s+)?[A-Z]\w*\s+\w+\s*[;=(]"), 2),
        (re.compile(r"\bString\s+\w+\s*="), 2),
    ],
    Language.C_CPP: [
        (re.compile(r"^\s*#include\s*[<\"]", _M), 8),
        (re.compile(r"\bint\s+main\s*\("), 6),
        (re.compile(r"\bstd::"), 4),
        (re.compile(r"\bcout\s*<<"), 5),
        (re.compile(r"\bprintf\s*\("), 3),
        (re.compile(r"\b(?:malloc|free|strcpy|strcat|strncpy|sprintf|gets|memcpy)\s*\("), 3),
        (re.compile(r"\bchar\s*\*?\s*\w+\s*\["), 3),
    ],
    Language.PYTHON: [
        (re.compile(r"^\s*def\s+\w+\s*\([^)\n]*\)\s*(?:->\s*[^:\n]+)?:\s*$", _M), 5),
        (re.compile(r"^\s*from\s+[\w.]+\s+import\s", _M), 4),
        (re.compile(r"^\s*import\s+[\w.]+(?:\s+as\s+\w+)?\s*$", _M), 3),
        (re.compile(r"^\s*(?:if|elif|else|for|while|with|try|except|class)\b[^\n{};]*:\s*$", _M), 2),
        (re.compile(r"\bself\."), 2),
        (re.compile(r"\b(?:None|True|False)\b"), 1),
        (re.compile(r"\bprint\("), 1),
    ],
    Language.JAVASCRIPT: [
        (re.compile(r"\bconsole\.(?:log|error|warn)\s*\("), 4),
        (re.compile(r"\brequire\s*\(\s*['\"]"), 5),
        (re.compile(r"\bmodule\.exports\b"), 5),
        (re.compile(r"^\s*export\s+(?:default|const|function|class)\b", _M), 4),
        (re.compile(r"\b(?:const|let|var)\s+\w+\s*="), 2),
        (re.compile(r"=>"), 2),
        (re.compile(r"\bfunction\s*\w*\s*\([^)$\n]*\)\s*\{"), 2),
        (re.compile(r"\bdocument\.\w+"), 3),
    ],
    Language.CSS: [
        (
            re.compile(
                rf"^\s*(?:[.#][\w\-]+|\*|:root|(?:{_CSS_ELEMENTS})\b)[^{{}};\n()=]{{0,80}}\{{\s*$",
                _MI,
            ),
            2,
        ),
        (re.compile(r"^\s*-?[a-z][a-z\-]*\s*:\s*[^:;{}\n=()]{1,120};\s*$", _M), 2),
        (re.compile(r"^\s*@(?:media|import|font-face|keyframes)\b", _M), 3),
        (re.compile(r"!important\b"), 3),
    ],
}


def score_languages(text: str) -> dict[Language, int]:
    """Return the marker score for every language except General."""
    scores: dict[Language, int] = {}
    for language, markers in MARKERS.items():
        total = 0
        for pattern, weight in markers:
            hits = 0
            for _ in pattern.finditer(text):
                hits += 1
                if hits >= CLASSIFIER_MAX_HITS_PER_MARKER:
                    break
            total += weight * hits
        scores[language] = total
    return scores


def classify(text: str) -> Language:
    """Infer the language of *text*. Never raises; falls back to General."""
    if not text or not text.strip():
        return Language.GENERAL

    scores = score_languages(text)
    best = max(scores.values(), default=0)
    if best < CLASSIFIER_MIN_SCORE:
        return Language.GENERAL

    for language in LANGUAGE_PRIORITY:
        if scores.get(language, 0) == best:
            return language
    return Language.GENERAL
