# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A01 Broken Access Control rules."""

from __future__ import annotations

import re

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import line_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import annotate, wrap_user_input

_BASENAME = {
    Language.PYTHON: "os.path.basename",
    Language.JAVASCRIPT: "path.basename",
    Language.PHP: "basename",
    Language.JAVA: "FilenameUtils.getName",
}


def _wrap_basename(text: str, language: Language, fn: str | None = None) -> str:
    return wrap_user_input(text, language, fn or _BASENAME.get(language, "basename"))


@rule
class PathTraversal(BaseRule):
    rule_id = "OWASP-A01-001"
    title = "Path traversal via user-controlled file path"
    severity = Severity.HIGH
    category = OwaspCategory.BROKEN_ACCESS_CONTROL
    description = "File system access uses a path taken directly from the request"
    recommendation = (
        "Reduce user input to a bare file name and resolve it against a fixed "
        "base directory; reject paths that escape it."
    )
    matcher = line_matcher(
        r"""\b(?:open|send_file|send_from_directory)\s*\([^)\n]{0,200}request\.""",
        r"""\b(?:readFile|readFileSync|createReadStream|sendFile)\s*\([^)\n]{0,200}req\.(?:query|body|params)""",
        r"""\b(?:file_get_contents|fopen|readfile|file)\s*\([^)\n]{0,200}\$_(?:GET|POST|REQUEST|COOKIE)""",
        r"""new\s+File(?:InputStream|Reader)?\s*\([^)\n]{0,200}getParameter""",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        return _wrap_basename(fragment, language)


@rule
class FileInclusion(BaseRule):
    rule_id = "OWASP-A01-002"
    title = "File inclusion from user input"
    severity = Severity.CRITICAL
    category = OwaspCategory.BROKEN_ACCESS_CONTROL
    description = "Code is included or imported by a name supplied in the request"
    recommendation = "Map request values to an allow-list of known files or modules."
    languages = frozenset({Language.PHP, Language.PYTHON})
    matcher = line_matcher(
        r"""\b(?:include|require)(?:_once)?\b\s*\(?[^;\n]{0,200}\$_(?:GET|POST|REQUEST|COOKIE)""",
        r"""\b(?:__import__|import_module)\s*\([^)\n]{0,200}request\.""",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        fn = "basename" if language == Language.PHP else "allowed_module"
        wrapped = _wrap_basename(fragment, language, fn)
        if wrapped == fragment:
            return fragment
        return annotate(wrapped, language, "Only include files from an explicit allow-list")


_TRUSTED_ORIGIN = "https://trusted.example.com"
_CORS_FIXES = [
    (re.compile(r"""(Access-Control-Allow-Origin["']?\s*[,:]\s*["']?)\*""", re.IGNORECASE), rf"\1{_TRUSTED_ORIGIN}"),
    (re.compile(r"""\bcors\(\s*\)"""), f'cors({{ origin: "{_TRUSTED_ORIGIN}" }})'),
    (re.compile(r"""\bCORS\(\s*(\w+)\s*\)"""), rf'CORS(\1, origins=["{_TRUSTED_ORIGIN}"])'),
    (re.compile(r"""(allow_origins\s*=\s*\[\s*)["']\*["'](\s*\])"""), rf'\1"{_TRUSTED_ORIGIN}"\2'),
    (re.compile(r"""(\borigins?\s*[:=]\s*)(["'])\*\2"""), rf"\1\2{_TRUSTED_ORIGIN}\2"),
]


@rule
class CorsWildcard(BaseRule):
    rule_id = "OWASP-A01-003"
    title = "CORS policy allows any origin"
    severity = Severity.MEDIUM
    category = OwaspCategory.BROKEN_ACCESS_CONTROL
    description = "Cross-origin requests are accepted from every origin"
    recommendation = "List the specific origins that may call this service."
    matcher = line_matcher(
        re.compile(r"""Access-Control-Allow-Origin["']?\s*[,:]\s*["']?\*""", re.IGNORECASE),
        r"""\bcors\(\s*\)""",
        r"""\bCORS\(\s*\w+\s*\)""",
        r"""\ballow_origins\s*=\s*\[\s*["']\*["']\s*\]""",
        r"""\borigins?\s*[:=]\s*["']\*["']""",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        for pattern, repl in _CORS_FIXES:
            fragment = pattern.sub(repl, fragment)
        return fragment


_MODE_777 = re.compile(r"""\b(0o|0)?777\b""")


@rule
class WorldWritablePermissions(BaseRule):
    rule_id = "OWASP-A01-004"
    title = "World-writable file permissions"
    severity = Severity.MEDIUM
    category = OwaspCategory.BROKEN_ACCESS_CONTROL
    description = "Files or directories are made readable and writable by every user"
    recommendation = "Grant the narrowest mode that works, e.g. 0750 for directories and 0640 for files."
    matcher = line_matcher(r"""\bchmod\b[^\n]{0,120}\b(?:0o|0)?777\b""")

    def rewrite(self, fragment: str, language: Language) -> str:
        return _MODE_777.sub(lambda m: f"{m.group(1) or ''}750", fragment)
