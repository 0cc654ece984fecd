# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A08 Software and Data Integrity Failures rules."""

from __future__ import annotations

import re

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import line_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import annotate, replace_calls, split_args

_PY_DESERIALIZE = re.compile(r"""\b(?:c?[Pp]ickle|marshal|dill)\.(load|loads)\s*\(""")
_YAML_LOAD = re.compile(r"""\byaml\.(?:unsafe_)?load\s*\(""")
_NODE_UNSERIALIZE = re.compile(r"""\bserialize\.unserialize\s*\(""")
_PHP_UNSERIALIZE = re.compile(r"""(?<![\w>$.])unserialize\s*\(""")
_JAVA_OBJECT_STREAM = re.compile(r"""\bnew\s+ObjectInputStream\s*\(""")


def _safe_yaml(_m: re.Match[str], args: str) -> str:
    parts = split_args(args)
    return f"yaml.safe_load({parts[0] if parts else ''})"


def _json_decode(_m: re.Match[str], args: str) -> str:
    parts = split_args(args)
    return f"json_decode({parts[0] if parts else ''}, true)"


@rule
class InsecureDeserialization(BaseRule):
    rule_id = "OWASP-A08-001"
    title = "Insecure deserialization"
    severity = Severity.CRITICAL
    category = OwaspCategory.INTEGRITY_FAILURES
    description = "Untrusted data is deserialized with a format that can instantiate arbitrary objects"
    recommendation = "Exchange data as JSON or another data-only format, and never deserialize untrusted objects."
    matcher = line_matcher(
        _PY_DESERIALIZE,
        _YAML_LOAD,
        _NODE_UNSERIALIZE,
        _PHP_UNSERIALIZE,
        _JAVA_OBJECT_STREAM,
        suppress=[r"""\bSafeLoader\b|\bCSafeLoader\b"""],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        fragment = _PY_DESERIALIZE.sub(r"json.\1(", fragment)
        fragment = replace_calls(fragment, _YAML_LOAD, _safe_yaml)
        fragment = _NODE_UNSERIALIZE.sub("JSON.parse(", fragment)
        if language in (Language.PHP, Language.GENERAL):
            fragment = replace_calls(fragment, _PHP_UNSERIALIZE, _json_decode)
        if _JAVA_OBJECT_STREAM.search(fragment):
            fragment = annotate(
                fragment,
                language,
                "Set an ObjectInputFilter that allow-lists expected classes before readObject()",
            )
        return fragment


_REMOTE_TAG = re.compile(
    r"""<(?:script|link)\b[^>\n]*\b(?:src|href)\s*=\s*["'](?:https?:)?//[^"'\n]+["'][^>\n]*>""",
    re.IGNORECASE,
)
_TAG_CLOSE = re.compile(r"""\s*/?>$""")
_SRI_ATTRS = ' integrity="sha384-REPLACE_WITH_RESOURCE_HASH" crossorigin="anonymous"'


def _add_integrity(m: re.Match[str]) -> str:
    tag = m.group(0)
    if re.search(r"""\bintegrity\s*=""", tag, re.IGNORECASE):
        return tag
    if tag.lower().startswith("<link") and not re.search(r"""\brel\s*=\s*["']?stylesheet""", tag, re.IGNORECASE):
        return tag
    close = _TAG_CLOSE.search(tag)
    if close is None:
        return tag
    return tag[: close.start()] + _SRI_ATTRS + tag[close.start():]


@rule
class CdnResourceWithoutIntegrity(BaseRule):
    rule_id = "OWASP-A08-002"
    title = "Third-party script without Subresource Integrity"
    severity = Severity.MEDIUM
    category = OwaspCategory.INTEGRITY_FAILURES
    description = "A script or stylesheet is loaded from another origin without an integrity hash"
    recommendation = "Add an integrity hash and crossorigin attribute to every third-party script and stylesheet."
    matcher = line_matcher(
        re.compile(r"""<script\b[^>\n]*\bsrc\s*=\s*["'](?:https?:)?//""", re.IGNORECASE),
        re.compile(r"""<link\b[^>\n]*\brel\s*=\s*["']?stylesheet[^>\n]*\bhref\s*=\s*["'](?:https?:)?//""", re.IGNORECASE),
        re.compile(r"""<link\b[^>\n]*\bhref\s*=\s*["'](?:https?:)?//[^>\n]*\brel\s*=\s*["']?stylesheet""", re.IGNORECASE),
        suppress=[re.compile(r"""\bintegrity\s*=""", re.IGNORECASE)],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        return _REMOTE_TAG.sub(_add_integrity, fragment)
