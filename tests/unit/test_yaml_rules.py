# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for the YAML-based custom rule authoring system."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.core.exceptions import RuleDefinitionError
from owaspscan.detectors.rule_engine.registry import RuleRegistry
from owaspscan.detectors.rule_engine.yaml_loader import (
    load_yaml_rule,
    load_yaml_rules_from_directory,
)
from owaspscan.detectors.rule_engine.yaml_rule import YamlRule, YamlRuleDefinition

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_definition(**overrides) -> YamlRuleDefinition:
    defaults = {
        "id": "TEST-001",
        "title": "Test rule",
        "description": "A test rule",
        "severity": "medium",
        "category": "A03",
        "patterns": [r"danger\("],
    }
    defaults.update(overrides)
    return YamlRuleDefinition(**defaults)


def _write(directory: Path, name: str, body: str) -> Path:
    path = directory / name
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Definition schema
# ---------------------------------------------------------------------------


class TestYamlRuleDefinition:
    def test_minimal_definition(self) -> None:
        d = _make_definition()
        assert d.category == OwaspCategory.INJECTION
        assert d.severity == Severity.MEDIUM
        assert d.kind == "line"
        assert d.languages is None

    @pytest.mark.parametrize("category", ["A03", "a03", "A03:2021", 3, "3"])
    def test_category_forms(self, category) -> None:
        assert _make_definition(category=category).category == OwaspCategory.INJECTION

    def test_language_names_are_case_insensitive(self) -> None:
        d = _make_definition(languages=["python", "JavaScript", "c/c++"])
        assert d.languages == [Language.PYTHON, Language.JAVASCRIPT, Language.C_CPP]

    def test_single_language_string(self) -> None:
        assert _make_definition(languages="php").languages == [Language.PHP]

    def test_invalid_regex_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid regex"):
            _make_definition(patterns=["(unclosed"])

    def test_empty_pattern_list_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _make_definition(patterns=[])

    def test_blank_id_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Rule id must not be empty"):
            _make_definition(id="   ")

    def test_window_bounds(self) -> None:
        with pytest.raises(ValidationError):
            _make_definition(kind="window", window=1)

    def test_unknown_severity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _make_definition(severity="apocalyptic")


# ---------------------------------------------------------------------------
# YamlRule behavior
# ---------------------------------------------------------------------------


class TestYamlRule:
    def test_attributes(self) -> None:
        r = YamlRule(_make_definition(recommendation="Stop."))
        assert r.rule_id == "TEST-001"
        assert r.category == OwaspCategory.INJECTION
        assert r.recommendation == "Stop."
        assert r.applies_to(Language.GENERAL)

    def test_language_restriction(self) -> None:
        r = YamlRule(_make_definition(languages=["python"]))
        assert r.applies_to(Language.PYTHON)
        assert not r.applies_to(Language.GENERAL)

    def test_nested_quantifier_rejected(self) -> None:
        with pytest.raises(RuleDefinitionError, match="backtracking-prone"):
            YamlRule(_make_definition(patterns=[r"(a+)+$"]))

    def test_quantified_alternation_rejected(self) -> None:
        with pytest.raises(RuleDefinitionError, match=r"backtracking-prone.*\(a\|a\)"):
            YamlRule(_make_definition(patterns=[r"^(a|a)*b"]))

    def test_bounded_alternation_allowed(self) -> None:
        r = YamlRule(_make_definition(patterns=[r"(?:get|post)\s*\("]))
        assert r.match(["requests.get (url)"], 0) is not None

    def test_ignore_case(self) -> None:
        r = YamlRule(_make_definition(ignore_case=True))
        assert r.match(["DANGER(1)"], 0) is not None

    def test_suppress(self) -> None:
        r = YamlRule(_make_definition(suppress=[r"#\s*safe"]))
        assert r.match(["danger(1)  # safe"], 0) is None
        assert r.match(["danger(1)"], 0) is not None

    def test_replacements(self) -> None:
        r = YamlRule(
            _make_definition(replacements=[{"pattern": r"danger\(", "replacement": "safe("}])
        )
        assert r.remediate("x = danger(1)", Language.PYTHON) == "x = safe(1)"

    def test_custom_annotation(self) -> None:
        r = YamlRule(_make_definition(annotation="Review this call"))
        assert r.remediate("danger(1)", Language.JAVASCRIPT) == "// Review this call\ndanger(1)"

    def test_not_added_to_registry(self) -> None:
        YamlRule(_make_definition(id="TEST-NOT-REGISTERED"))
        assert all(cls.rule_id != "TEST-NOT-REGISTERED" for cls in RuleRegistry.get_all())


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class TestLoader:
    def test_load_single_file(self, rules_dir: Path) -> None:
        r = load_yaml_rule(rules_dir / "console_debug.yml")
        assert r.rule_id == "CUSTOM-DEBUG-001"
        assert r.severity == Severity.LOW
        assert r.category == OwaspCategory.LOGGING_FAILURES
        assert r.languages == frozenset({Language.JAVASCRIPT})

    def test_directory_skips_invalid_files(self, rules_dir: Path) -> None:
        rules = load_yaml_rules_from_directory(rules_dir)
        assert [r.rule_id for r in rules] == ["CUSTOM-DEBUG-001"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert load_yaml_rules_from_directory(tmp_path / "nope") == []

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert load_yaml_rules_from_directory(tmp_path) == []

    def test_invalid_yaml_syntax(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "bad.yml", "id: [unclosed\n")
        with pytest.raises(RuleDefinitionError, match="Invalid YAML syntax"):
            load_yaml_rule(path)

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "list.yaml", "- a\n- b\n")
        with pytest.raises(RuleDefinitionError, match="Expected a mapping"):
            load_yaml_rule(path)

    def test_schema_errors_reported(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "schema.yml", "id: X\ntitle: missing patterns\ncategory: A01\n")
        with pytest.raises(RuleDefinitionError, match="Schema validation failed"):
            load_yaml_rule(path)

    def test_yaml_and_yml_extensions(self, tmp_path: Path) -> None:
        body = """\
            id: {id}
            title: t
            category: A05
            patterns:
              - 'x'
        """
        _write(tmp_path, "b.yaml", body.format(id="B"))
        _write(tmp_path, "a.yml", body.format(id="A"))
        assert [r.rule_id for r in load_yaml_rules_from_directory(tmp_path)] == ["A", "B"]

    def test_non_utf8_file_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.yml"
        path.write_bytes("id: L-1\ntitle: caf\xe9\ncategory: A05\npatterns: ['x']\n".encode("latin-1"))
        with pytest.raises(RuleDefinitionError, match="not valid UTF-8"):
            load_yaml_rule(path)

    def test_directory_skips_non_utf8_file(self, tmp_path: Path) -> None:
        _write(tmp_path, "good.yml", "id: X-1\ntitle: t\ncategory: A05\npatterns: ['x']\n")
        (tmp_path / "latin1.yml").write_bytes(
            "id: X-2\ntitle: caf\xe9\ncategory: A05\npatterns: ['x']\n".encode("latin-1")
        )
        assert [r.rule_id for r in load_yaml_rules_from_directory(tmp_path)] == ["X-1"]
