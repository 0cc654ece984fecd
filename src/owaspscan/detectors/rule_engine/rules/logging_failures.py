# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A09 Security Logging and Monitoring Failures rules."""

from __future__ import annotations

import re

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import any_matcher, line_matcher, window_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import leading_ws, sub_inside_strings, sub_outside_strings

_PY_EXCEPT_INLINE = re.compile(r"""^(?P<ws>[ \t]*)(?P<head>except\b[^\n:]*):[ \t]*pass\b[ \t]*(?:#[^\n]*)?(?=\n|\Z)""")
_PY_EXCEPT_TWO_LINE = re.compile(r"""^[ \t]*except\b[^\n:]*:[ \t]*(?:#[^\n]*)?\n[ \t]*pass\b""")
_PY_PASS_LINE = re.compile(r"""^(?P<ws>[ \t]*)pass\b[ \t]*(?:#[^\n]*)?$""", re.MULTILINE)
_BARE_EXCEPT = re.compile(r"""\bexcept(?=[ \t]*(?::|$))""")
_EMPTY_CATCH = re.compile(r"""\bcatch\s*\((?P<decl>[^()\n]*)\)\s*\{\s*\}""")
_EMPTY_PROMISE_CATCH = re.compile(r"""\.catch\(\s*(?:\(\s*\w*\s*\)|\w+)\s*=>\s*\{\s*\}\s*\)""")


def _catch_variable(decl: str) -> str:
    words = re.findall(r"""\$?[A-Za-z_]\w*""", decl)
    return words[-1] if words else ""


def _catch_log_statement(var: str, language: Language) -> str:
    if language == Language.JAVASCRIPT:
        return f"console.error({var or 'err'});"
    if language == Language.JAVA:
        return f'logger.error("Unexpected error", {var or "e"});'
    if language == Language.PHP:
        return f"error_log({var or '$e'}->getMessage());"
    if language == Language.C_CPP:
        return f"std::cerr << {var}.what() << std::endl;" if var else 'std::cerr << "Unexpected error" << std::endl;'
    return f"log_error({var});"


def _except_head(head: str) -> str:
    return _BARE_EXCEPT.sub("except Exception", head, count=1)


@rule
class SwallowedException(BaseRule):
    rule_id = "OWASP-A09-001"
    title = "Exception silently swallowed"
    severity = Severity.LOW
    category = OwaspCategory.LOGGING_FAILURES
    description = "An error handler discards the exception without logging it"
    recommendation = "Log the exception with context, or let it propagate to a handler that does."
    matcher = any_matcher(
        line_matcher(_PY_EXCEPT_INLINE, _EMPTY_CATCH, _EMPTY_PROMISE_CATCH),
        window_matcher(_PY_EXCEPT_TWO_LINE, _EMPTY_CATCH, _EMPTY_PROMISE_CATCH, window=2),
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        first, _, rest = fragment.partition("\n")
        inline = _PY_EXCEPT_INLINE.match(first)
        if inline:
            ws = inline.group("ws")
            head = _except_head(inline.group("head"))
            replaced = f"{ws}{head}:\n{ws}    logger.exception(\"Unexpected error\")"
            return replaced + ("\n" + rest if rest else "")
        if _PY_EXCEPT_TWO_LINE.match(fragment):
            first = _except_head(first)
            body = _PY_PASS_LINE.sub(r'\g<ws>logger.exception("Unexpected error")', rest, count=1)
            return f"{first}\n{body}"

        indent = leading_ws(first)

        def _fill_catch(m: re.Match[str]) -> str:
            stmt = _catch_log_statement(_catch_variable(m.group("decl")), language)
            return f"catch ({m.group('decl')}) {{\n{indent}    {stmt}\n{indent}}}"

        fragment = _EMPTY_CATCH.sub(_fill_catch, fragment)
        return _EMPTY_PROMISE_CATCH.sub(".catch((err) => { console.error(err); })", fragment)


_SENSITIVE_WORD = r"""(?:password|passwd|secret|token|api_?key|credit_?card|card_?number|\bssn\b|\bcvv\b)"""
_SENSITIVE = re.compile(_SENSITIVE_WORD, re.IGNORECASE)
_LOG_CALL = (
    r"""(?:\blog(?:ger|ging)?\.\w+|\bconsole\.(?:log|info|warn|error|debug)|\bprint(?:f|ln)?"""
    r"""|\berror_log|\bSystem\.(?:out|err)\.print(?:ln|f)?|\bsyslog|\bfprintf)"""
)
_EXPRESSION = re.compile(r"""\$?[A-Za-z_]\w*(?:(?:\.|->)\w+|\[[^\[\]\n"']{0,60}\])*""")
_PLACEHOLDER = re.compile(
    r"""\$?\{[ \t]{0,10}\$?[\w.\[\]"'>-]{0,60}""" + _SENSITIVE_WORD + r"""[\w.\[\]"'>-]{0,60}[ \t]{0,10}\}""",
    re.IGNORECASE,
)
_PHP_VARIABLE = re.compile(r"""\$\w{0,60}""" + _SENSITIVE_WORD + r"""\w{0,60}""", re.IGNORECASE)
_REDACTED = "[REDACTED]"


def _redact_expression(m: re.Match[str]) -> str:
    expr = m.group(0)
    following = m.string[m.end(): m.end() + 1]
    if following == "(" or not _SENSITIVE.search(expr):
        return expr
    return f'"{_REDACTED}"'


@rule
class SensitiveDataInLogs(BaseRule):
    rule_id = "OWASP-A09-002"
    title = "Sensitive data written to logs"
    severity = Severity.MEDIUM
    category = OwaspCategory.LOGGING_FAILURES
    description = "Passwords, tokens, or card data are passed to a log or print statement"
    recommendation = "Never log credentials or personal data; log an identifier or a masked value instead."
    redact_snippet = True
    matcher = line_matcher(
        re.compile(_LOG_CALL + r"""\s*\([^\n]{0,200}""" + _SENSITIVE_WORD, re.IGNORECASE),
        suppress=[re.compile(r"""redact|mask|\*\*\*""", re.IGNORECASE)],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        fragment = _PLACEHOLDER.sub(_REDACTED, fragment)
        fragment = sub_inside_strings(_PHP_VARIABLE, _REDACTED, fragment)
        return sub_outside_strings(_EXPRESSION, _redact_expression, fragment)
