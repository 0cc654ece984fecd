# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A06 Vulnerable and Outdated Components rules."""

from __future__ import annotations

import re

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import line_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import replace_calls, split_args

_GETS = re.compile(r"""(?<![\w.>])gets\s*\(""")
_STRCPY = re.compile(r"""(?<![\w.>])strcpy\s*\(""")
_STRCAT = re.compile(r"""(?<![\w.>])strcat\s*\(""")
_SPRINTF = re.compile(r"""(?<![\w.>])sprintf\s*\(""")


def _bounded_gets(_m: re.Match[str], args: str) -> str:
    buf = args.strip()
    return f"fgets({buf}, sizeof({buf}), stdin)"


def _bounded_strcpy(m: re.Match[str], args: str) -> str:
    parts = split_args(args)
    if len(parts) != 2:
        return f"{m.group(0)}{args})"
    dst, src = parts
    return f"strncpy({dst}, {src}, sizeof({dst}) - 1)"


def _bounded_strcat(m: re.Match[str], args: str) -> str:
    parts = split_args(args)
    if len(parts) != 2:
        return f"{m.group(0)}{args})"
    dst, src = parts
    return f"strncat({dst}, {src}, sizeof({dst}) - strlen({dst}) - 1)"


def _bounded_sprintf(m: re.Match[str], args: str) -> str:
    parts = split_args(args)
    if len(parts) < 2:
        return f"{m.group(0)}{args})"
    dst, *rest = parts
    return f"snprintf({dst}, sizeof({dst}), {', '.join(rest)})"


@rule
class UnsafeCStringFunction(BaseRule):
    rule_id = "OWASP-A06-001"
    title = "Unbounded C string function"
    severity = Severity.HIGH
    category = OwaspCategory.VULNERABLE_COMPONENTS
    description = "gets, strcpy, strcat, or sprintf write without a length bound and can overflow buffers"
    recommendation = "Use the bounded variants (fgets, strncpy/strlcpy, strncat/strlcat, snprintf)."
    languages = frozenset({Language.C_CPP})
    matcher = line_matcher(_GETS, _STRCPY, _STRCAT, _SPRINTF, r"""\bscanf\s*\(\s*"%s\"""")

    def rewrite(self, fragment: str, language: Language) -> str:
        fragment = replace_calls(fragment, _GETS, _bounded_gets)
        fragment = replace_calls(fragment, _STRCPY, _bounded_strcpy)
        fragment = replace_calls(fragment, _STRCAT, _bounded_strcat)
        fragment = replace_calls(fragment, _SPRINTF, _bounded_sprintf)
        return re.sub(r"""\bscanf\(\s*"%s\"""", 'scanf("%255s"', fragment)


_REMOVED_API_FIXES = [
    (re.compile(r"""(?<![\w>$])mysql_(?=\w+\s*\()"""), "mysqli_"),
    (re.compile(r"""\bssl\.wrap_socket\s*\("""), "ssl.create_default_context().wrap_socket("),
    (re.compile(r"""\bcgi\.escape\s*\("""), "html.escape("),
    (re.compile(r"""\bnew\s+Buffer\s*\("""), "Buffer.from("),
    (re.compile(r"""(?<![\w>$])eregi?\s*\("""), "preg_match("),
]


@rule
class RemovedOrDeprecatedApi(BaseRule):
    rule_id = "OWASP-A06-002"
    title = "Removed or deprecated API"
    severity = Severity.MEDIUM
    category = OwaspCategory.VULNERABLE_COMPONENTS
    description = "An API that was removed or deprecated for security reasons is still in use"
    recommendation = "Migrate to the maintained replacement API and keep runtimes and libraries patched."
    matcher = line_matcher(
        r"""(?<![\w>$])mysql_(?:query|connect|pconnect|fetch_\w+|real_escape_string|select_db|num_rows)\s*\(""",
        r"""\bssl\.wrap_socket\s*\(""",
        r"""\bcgi\.escape\s*\(""",
        r"""\bnew\s+Buffer\s*\(""",
        r"""(?<![\w>$])eregi?\s*\(""",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        for pattern, repl in _REMOVED_API_FIXES:
            fragment = pattern.sub(repl, fragment)
        return fragment


_OLD_JQUERY = re.compile(
    r"""(jquery[-.@/]?)(?:1\.\d{1,2}|2\.\d{1,2}|3\.[0-4])(?:\.\d{1,2})?(?=(?:\.min)?\.js|/|["'])""",
    re.IGNORECASE,
)


@rule
class OutdatedJquery(BaseRule):
    rule_id = "OWASP-A06-003"
    title = "Outdated jQuery version"
    severity = Severity.MEDIUM
    category = OwaspCategory.VULNERABLE_COMPONENTS
    description = "A jQuery release older than 3.5 is loaded; it has known XSS vulnerabilities"
    recommendation = "Upgrade to a current jQuery 3.x release and pin it with Subresource Integrity."
    matcher = line_matcher(_OLD_JQUERY)

    def rewrite(self, fragment: str, language: Language) -> str:
        return _OLD_JQUERY.sub(r"\g<1>3.7.1", fragment)
