# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for secure-code synthesis."""

from __future__ import annotations

import logging
import time

import pytest

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.catalog import RuleCatalog
from owaspscan.detectors.rule_engine.matchers import line_matcher
from owaspscan.detectors.rule_engine.yaml_rule import YamlRule, YamlRuleDefinition
from owaspscan.models.finding import AppliedFix
from owaspscan.models.source import SourceDocument
from owaspscan.remediation.remediator import Remediator, remediate
from owaspscan.remediation.transforms import (
    annotate,
    apply_sql_rewrite,
    comment,
    env_var_name,
    find_concatenated_sql,
    split_args,
)
from owaspscan.scanner.scanner import scan

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _yaml_rule(**overrides) -> YamlRule:
    data = {
        "id": "TEST-001",
        "title": "Test rule",
        "category": "A03",
        "patterns": ["TODO"],
    }
    data.update(overrides)
    return YamlRule(YamlRuleDefinition(**data))


class _BrokenRewrite(BaseRule):
    rule_id = "TEST-BROKEN"
    title = "Broken rewrite"
    severity = Severity.LOW
    category = OwaspCategory.INJECTION
    description = "Rewrite always raises"
    matcher = line_matcher(r"BROKEN")

    def rewrite(self, fragment: str, language: Language) -> str:
        raise ValueError("cannot rewrite")


def _run(catalog: RuleCatalog, code: str, language: Language = Language.GENERAL):
    doc = SourceDocument(code)
    findings = scan(doc, language, catalog)
    return findings, Remediator(doc, findings, catalog, language).run()


# ---------------------------------------------------------------------------
# Remediator
# ---------------------------------------------------------------------------


class TestRemediator:
    def test_no_findings_returns_original_text(self, catalog) -> None:
        code = "a = 1\r\nb = 2\n\n"
        assert remediate(SourceDocument(code), [], catalog, Language.GENERAL) == code

    def test_inserted_lines_shift_later_fixes(self, catalog) -> None:
        code = "from flask import Flask\napp = Flask(__name__)\napp.run(debug=True)"
        findings, result = _run(catalog, code, Language.PYTHON)
        assert [f.rule_id for f in findings] == ["OWASP-A05-003", "OWASP-A05-001"]
        assert result.secure_code == (
            "from flask import Flask\napp = Flask(__name__)\nTalisman(app)\napp.run(debug=False)"
        )
        assert result.fixes == (
            AppliedFix(rule_id="OWASP-A05-003", line=2, secure_line=2, secure_line_end=3),
            AppliedFix(rule_id="OWASP-A05-001", line=3, secure_line=4, secure_line_end=4),
        )

    def test_crlf_preserved_for_inserted_lines(self, catalog) -> None:
        code = "from flask import Flask\r\napp = Flask(__name__)\r\n"
        _, result = _run(catalog, code, Language.PYTHON)
        assert result.secure_code == "from flask import Flask\r\napp = Flask(__name__)\r\nTalisman(app)\r\n"

    def test_missing_final_newline_preserved(self, catalog) -> None:
        _, result = _run(catalog, "app.run(debug=True)", Language.PYTHON)
        assert result.secure_code == "app.run(debug=False)"

    def test_later_finding_targets_merged_segment(self) -> None:
        window = _yaml_rule(
            id="TEST-WINDOW",
            kind="window",
            patterns=[r"BEGIN\nEND"],
            replacements=[{"pattern": "BEGIN", "replacement": "START\nMIDDLE"}],
        )
        line = _yaml_rule(
            id="TEST-LINE",
            patterns=["END"],
            replacements=[{"pattern": "END", "replacement": "FINISH"}],
        )
        catalog = RuleCatalog([window, line])
        findings, result = _run(catalog, "BEGIN\nEND\ntail\n")
        assert [(f.rule_id, f.line, f.line_end) for f in findings] == [
            ("TEST-WINDOW", 1, 2),
            ("TEST-LINE", 2, 2),
        ]
        assert result.secure_code == "START\nMIDDLE\nFINISH\ntail\n"
        assert [(fx.rule_id, fx.secure_line, fx.secure_line_end) for fx in result.fixes] == [
            ("TEST-WINDOW", 1, 3),
            ("TEST-LINE", 1, 3),
        ]

    def test_rule_without_rewrite_annotates(self) -> None:
        catalog = RuleCatalog([_yaml_rule(recommendation="Finish the work.")])
        _, result = _run(catalog, "    x = 1  # TODO\n", Language.PYTHON)
        assert result.secure_code == (
            "    # SECURITY: Test rule (A03:2021). Finish the work.\n    x = 1  # TODO\n"
        )

    def test_failed_rewrite_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        catalog = RuleCatalog([_BrokenRewrite()])
        with caplog.at_level(logging.WARNING, logger="owaspscan.remediation"):
            findings, result = _run(catalog, "BROKEN\n")
        assert len(findings) == 1
        assert result.secure_code == "BROKEN\n"
        assert result.fixes == ()
        assert "TEST-BROKEN" in caplog.text

    def test_overlong_line_left_unremediated(self, caplog) -> None:
        catalog = RuleCatalog([_yaml_rule(replacements=[{"pattern": "TODO", "replacement": "DONE"}])])
        code = "TODO " + "x" * 200 + "\nTODO\n"
        doc = SourceDocument(code)
        findings = scan(doc, Language.GENERAL, catalog)
        with caplog.at_level(logging.INFO, logger="owaspscan.remediation"):
            result = Remediator(doc, findings, catalog, Language.GENERAL, max_line_length=100).run()
        assert [f.line for f in findings] == [1, 2]
        assert result.secure_code == "TODO " + "x" * 200 + "\nDONE\n"
        assert [fix.line for fix in result.fixes] == [2]
        assert "exceeds 100 characters" in caplog.text

    def test_unknown_rule_is_skipped(self, catalog) -> None:
        other = RuleCatalog([_yaml_rule()])
        doc = SourceDocument("TODO\n")
        findings = scan(doc, Language.GENERAL, other)
        result = Remediator(doc, findings, catalog, Language.GENERAL).run()
        assert result.secure_code == "TODO\n"
        assert result.fixes == ()


# ---------------------------------------------------------------------------
# Transform helpers
# ---------------------------------------------------------------------------


class TestTransforms:
    @pytest.mark.parametrize(
        ("language", "expected"),
        [
            (Language.PYTHON, "# note"),
            (Language.GENERAL, "# note"),
            (Language.JAVASCRIPT, "// note"),
            (Language.PHP, "// note"),
            (Language.HTML, "<!-- note -->"),
            (Language.CSS, "/* note */"),
        ],
    )
    def test_comment_syntax(self, language: Language, expected: str) -> None:
        assert comment(language, "note") == expected

    def test_annotate_keeps_indentation(self) -> None:
        assert annotate("    return x", Language.PYTHON, "check") == "    # check\n    return x"

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("password", "PASSWORD"),
            ("apiKey", "API_KEY"),
            ("$db->password", "PASSWORD"),
            ("config.secret-key", "SECRET_KEY"),
        ],
    )
    def test_env_var_name(self, key: str, expected: str) -> None:
        assert env_var_name(key) == expected

    def test_split_args_respects_nesting(self) -> None:
        assert split_args('buf, fmt(a, b), "x, y"') == ["buf", "fmt(a, b)", '"x, y"']

    def test_sql_rewrite_on_long_padded_line(self) -> None:
        line = "x" + " " * 20000 + 'stmt.executeQuery("SELECT * FROM users WHERE id = " + uid);'
        started = time.monotonic()
        rw = find_concatenated_sql(line, Language.JAVA)
        assert rw is not None
        rewritten = apply_sql_rewrite(line, rw, Language.JAVA)
        assert time.monotonic() - started < 2.0
        assert '"SELECT * FROM users WHERE id = ?"' in rewritten
