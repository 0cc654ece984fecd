# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A07 Identification and Authentication Failures rules."""

from __future__ import annotations

import re

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import line_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import call_name, redact_secret, secret_assignment

_PASSWORD_ASSIGNMENT = secret_assignment(r"password|passwd|pwd")


@rule
class HardcodedPassword(BaseRule):
    rule_id = "OWASP-A07-001"
    title = "Hardcoded password"
    severity = Severity.HIGH
    category = OwaspCategory.AUTHENTICATION_FAILURES
    description = "A password is stored as a literal in source code"
    recommendation = "Read credentials from the environment or a secret store, and rotate the exposed password."
    redact_snippet = True
    matcher = line_matcher(
        _PASSWORD_ASSIGNMENT,
        suppress=[re.compile(r"""environ|getenv|process\.env|\$\{""", re.IGNORECASE)],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        return redact_secret(fragment, language, _PASSWORD_ASSIGNMENT)


_JWT_FIXES = [
    (re.compile(r"""(\bjwt\.decode\s*\([^)\n]{0,200}\bverify\s*=\s*)False\b"""), r"\1True"),
    (re.compile(r"""(["']verify_signature["']\s*:\s*)False\b"""), r"\1True"),
    (re.compile(r"""(["']verify_signature["']\s*:\s*)false\b"""), r"\1true"),
    (re.compile(r"""(\balgorithms\s*[=:]\s*\[\s*)(["'])none\2""", re.IGNORECASE), r"\1\2HS256\2"),
]
_JS_JWT_DECODE = re.compile(r"""\bjwt\.decode\s*\(\s*([\w.]+)\s*\)""")


@rule
class JwtVerificationDisabled(BaseRule):
    rule_id = "OWASP-A07-002"
    title = "JWT signature verification disabled"
    severity = Severity.CRITICAL
    category = OwaspCategory.AUTHENTICATION_FAILURES
    description = "Tokens are decoded without verifying their signature, so any forged token is accepted"
    recommendation = "Always verify token signatures with a secret or public key and an explicit algorithm list."
    matcher = line_matcher(
        r"""\bjwt\.decode\s*\([^)\n]{0,200}\bverify\s*=\s*False""",
        re.compile(r"""["']verify_signature["']\s*:\s*false\b""", re.IGNORECASE),
        re.compile(r"""\balgorithms\s*[=:]\s*\[\s*["']none["']""", re.IGNORECASE),
        _JS_JWT_DECODE,
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        for pattern, repl in _JWT_FIXES:
            fragment = pattern.sub(repl, fragment)
        if language in (Language.JAVASCRIPT, Language.GENERAL):
            fragment = _JS_JWT_DECODE.sub(r"jwt.verify(\1, process.env.JWT_SECRET)", fragment)
        return fragment


_COOKIE_FLAG = re.compile(
    r"""(\b(?:http_?only|secure|session_cookie_secure|session_cookie_httponly)["']?\]?\s*[:=]\s*)(false|False|FALSE)\b""",
    re.IGNORECASE,
)
_JAVA_COOKIE_FLAG = re.compile(r"""\b(set(?:HttpOnly|Secure))\s*\(\s*false\s*\)""")
_TRUE_FOR = {"false": "true", "False": "True", "FALSE": "TRUE"}


@rule
class InsecureCookieFlags(BaseRule):
    rule_id = "OWASP-A07-003"
    title = "Session cookie without Secure or HttpOnly"
    severity = Severity.MEDIUM
    category = OwaspCategory.AUTHENTICATION_FAILURES
    description = "Cookies are sent without Secure or HttpOnly, exposing sessions to theft"
    recommendation = "Set Secure, HttpOnly, and SameSite on every session cookie."
    matcher = line_matcher(_COOKIE_FLAG, _JAVA_COOKIE_FLAG)

    def rewrite(self, fragment: str, language: Language) -> str:
        fragment = _COOKIE_FLAG.sub(lambda m: m.group(1) + _TRUE_FOR.get(m.group(2), "true"), fragment)
        return _JAVA_COOKIE_FLAG.sub(lambda m: f"{call_name(m.group(1), language)}(true)", fragment)
