# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A05 Security Misconfiguration rules."""

from __future__ import annotations

import re
from collections.abc import Sequence

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import MatchSpan, line_matcher, predicate_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import leading_ws

_DEBUG_FLAG = re.compile(r"""(\bdebug["']?\s*[=:]\s*)(True|true|1)\b""", re.IGNORECASE)
_DISPLAY_ERRORS = re.compile(r"""(ini_set\(\s*["']display_errors["']\s*,\s*)["']?(?:1|on|true)["']?""", re.IGNORECASE)
_FALSE_FOR = {"True": "False", "true": "false", "TRUE": "FALSE", "1": "0"}


@rule
class DebugModeEnabled(BaseRule):
    rule_id = "OWASP-A05-001"
    title = "Debug mode enabled"
    severity = Severity.MEDIUM
    category = OwaspCategory.SECURITY_MISCONFIGURATION
    description = "Debug mode exposes internals such as stack traces and interactive consoles"
    recommendation = "Turn debug mode off outside local development and drive it from configuration."
    matcher = line_matcher(
        _DEBUG_FLAG,
        _DISPLAY_ERRORS,
        re.compile(r"""app\.set\(\s*["']env["']\s*,\s*["']development["']""", re.IGNORECASE),
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        fragment = _DEBUG_FLAG.sub(lambda m: m.group(1) + _FALSE_FOR.get(m.group(2), "False"), fragment)
        fragment = _DISPLAY_ERRORS.sub(r"\1'0'", fragment)
        return re.sub(r"""(["'])development\1""", r"\1production\1", fragment)


_STACK_FIXES = [
    (re.compile(r"""\btraceback\.print_exc\(\s*\)"""), 'logger.exception("Unhandled error")'),
    (re.compile(r"""\btraceback\.format_exc\(\s*\)"""), '"Internal server error"'),
    (re.compile(r"""\b(\w+)\.printStackTrace\(\s*\)"""), r'logger.error("Unhandled error", \1)'),
    (re.compile(r"""\b(?:err|error|e|ex)\.stack\b"""), '"Internal server error"'),
    (re.compile(r"""\$\w+->(?:getMessage|getTraceAsString)\(\)"""), "'An internal error occurred'"),
]


@rule
class StackTraceExposure(BaseRule):
    rule_id = "OWASP-A05-002"
    title = "Stack trace or error detail exposed"
    severity = Severity.MEDIUM
    category = OwaspCategory.SECURITY_MISCONFIGURATION
    description = "Exception details are printed or returned where a client may see them"
    recommendation = "Log exception details server side and return a generic error message."
    matcher = line_matcher(
        r"""\btraceback\.(?:print_exc|format_exc)\(""",
        r"""\.printStackTrace\(\s*\)""",
        r"""\bres\.(?:send|json|write|end)\s*\([^)\n]{0,100}\b(?:err|error|e|ex)\.stack\b""",
        r"""\b(?:echo|print|die|exit)\b[^;\n]{0,100}->(?:getMessage|getTraceAsString)\(\)""",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        for pattern, repl in _STACK_FIXES:
            fragment = pattern.sub(repl, fragment)
        return fragment


_EXPRESS_APP = re.compile(r"""\b(?:(?:const|let|var)\s+)?(\w+)\s*=\s*express\(\s*\)""")
_FLASK_APP = re.compile(r"""\b(\w+)\s*=\s*Flask\(\s*__name__""")
_JS_HEADERS = re.compile(r"""\bhelmet\b""")
_PY_HEADERS = re.compile(r"""\b(?:Talisman|flask_talisman|secure_headers|after_request)\b""")


def _missing_headers(lines: Sequence[str], index: int) -> MatchSpan | None:
    line = lines[index][:4096]
    if _EXPRESS_APP.search(line):
        guard = _JS_HEADERS
    elif _FLASK_APP.search(line):
        guard = _PY_HEADERS
    else:
        return None
    if any(guard.search(other) for other in lines):
        return None
    return MatchSpan(index, index, lines[index])


@rule
class MissingSecurityHeaders(BaseRule):
    rule_id = "OWASP-A05-003"
    title = "Missing security headers"
    severity = Severity.LOW
    category = OwaspCategory.SECURITY_MISCONFIGURATION
    description = "The web application is created without middleware that sets security headers"
    recommendation = "Add helmet (Express) or Talisman (Flask) so responses carry CSP, HSTS, and related headers."
    languages = frozenset({Language.JAVASCRIPT, Language.PYTHON, Language.GENERAL})
    matcher = predicate_matcher(_missing_headers)

    def rewrite(self, fragment: str, language: Language) -> str:
        indent = leading_ws(fragment.split("\n", 1)[0])
        m = _EXPRESS_APP.search(fragment)
        if m:
            return f"{fragment}\n{indent}{m.group(1)}.use(helmet());"
        m = _FLASK_APP.search(fragment)
        if m:
            return f"{fragment}\n{indent}Talisman({m.group(1)})"
        return fragment


_HEAD_TAG = re.compile(r"""<head\b[^>]{0,200}>""", re.IGNORECASE)
_CSP = re.compile(r"""Content-Security-Policy""", re.IGNORECASE)


def _missing_csp(lines: Sequence[str], index: int) -> MatchSpan | None:
    if not _HEAD_TAG.search(lines[index][:4096]):
        return None
    if any(_CSP.search(other) for other in lines):
        return None
    return MatchSpan(index, index, lines[index])


@rule
class MissingContentSecurityPolicy(BaseRule):
    rule_id = "OWASP-A05-004"
    title = "Missing Content-Security-Policy"
    severity = Severity.LOW
    category = OwaspCategory.SECURITY_MISCONFIGURATION
    description = "The page declares no Content-Security-Policy, so injected scripts run unrestricted"
    recommendation = "Send a Content-Security-Policy header, or add a CSP meta tag restricting script sources."
    languages = frozenset({Language.HTML, Language.PHP})
    matcher = predicate_matcher(_missing_csp)

    def rewrite(self, fragment: str, language: Language) -> str:
        indent = leading_ws(fragment.split("\n", 1)[0])
        meta = "<meta http-equiv=\"Content-Security-Policy\" content=\"default-src 'self'\">"
        return f"{fragment}\n{indent}  {meta}"
