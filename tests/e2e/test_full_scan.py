# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""End-to-end tests exercising the full analysis flow through CLI internals."""

from __future__ import annotations

import json
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest

from owaspscan.cli.app import OutputFormat, _collect_sources, _output_result, _write_output
from owaspscan.sdk import analyze_file, compare, read_source

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "samples"
CLEAN_DIR = FIXTURES_DIR / "clean"
VULNERABLE_DIR = FIXTURES_DIR / "vulnerable"


# ---------------------------------------------------------------------------
# 1. analyze_file() on vulnerable and clean fixtures
# ---------------------------------------------------------------------------
class TestAnalyzeFile:
    def test_vulnerable_php(self) -> None:
        result = analyze_file(VULNERABLE_DIR / "login.php")
        assert result.risk_score == 97
        assert result.risk_level == "high"
        assert "mysql_query(" not in result.secure_code
        assert result.source_sha256 != ""

    def test_clean_python(self) -> None:
        result = analyze_file(CLEAN_DIR / "add.py")
        assert result.is_clean
        assert result.secure_code == read_source(CLEAN_DIR / "add.py")

    def test_compare_round_trip(self) -> None:
        result, comparison = compare(read_source(VULNERABLE_DIR / "app.py"), context_lines=1)
        assert not comparison.clean
        covered = {r for section in comparison.sections for r in section.rule_ids}
        assert covered == {f.rule_id for f in result.findings}


# ---------------------------------------------------------------------------
# 2. _output_result with each format
# ---------------------------------------------------------------------------
class TestOutputResult:
    @pytest.fixture
    def vulnerable(self):
        path = VULNERABLE_DIR / "app.py"
        return analyze_file(path), read_source(path)

    @pytest.fixture
    def clean(self):
        path = CLEAN_DIR / "add.py"
        return analyze_file(path), read_source(path)

    def test_console_format(self, vulnerable) -> None:
        result, source = vulnerable
        _output_result(result, "app.py", OutputFormat.CONSOLE, None, source)

    def test_json_format_to_stdout(self, vulnerable) -> None:
        result, source = vulnerable
        buf = StringIO()
        with patch("sys.stdout", buf):
            _output_result(result, "app.py", OutputFormat.JSON, None, source)

        data = json.loads(buf.getvalue())
        assert data["riskScore"] == 92
        assert len(data["vulnerabilities"]) == 7

    def test_json_format_clean(self, clean) -> None:
        result, source = clean
        buf = StringIO()
        with patch("sys.stdout", buf):
            _output_result(result, "add.py", OutputFormat.JSON, None, source)

        data = json.loads(buf.getvalue())
        assert data["riskScore"] == 0
        assert data["vulnerabilities"] == []

    def test_sarif_format_to_stdout(self, vulnerable) -> None:
        result, source = vulnerable
        buf = StringIO()
        with patch("sys.stdout", buf):
            _output_result(result, "app.py", OutputFormat.SARIF, None, source)

        sarif = json.loads(buf.getvalue())
        assert sarif["version"] == "2.1.0"
        assert sarif["runs"][0]["tool"]["driver"]["name"] == "owaspscan"
        assert len(sarif["runs"][0]["results"]) == 7

    def test_markdown_format_to_file(self, vulnerable, tmp_path) -> None:
        result, source = vulnerable
        out = tmp_path / "report.md"
        _output_result(result, "app.py", OutputFormat.MARKDOWN, out, source)
        md = out.read_text(encoding="utf-8")
        assert "# OWASP Top 10 Security Report" in md
        assert "### Original lines" in md


# ---------------------------------------------------------------------------
# 3. _write_output with both file output and stdout
# ---------------------------------------------------------------------------
class TestWriteOutput:
    def test_write_to_file(self, tmp_path) -> None:
        out_file = tmp_path / "report.json"
        _write_output('{"riskScore": 0}', out_file)
        assert out_file.read_text(encoding="utf-8") == '{"riskScore": 0}'

    def test_write_to_stdout(self) -> None:
        buf = StringIO()
        with patch("sys.stdout", buf):
            _write_output('{"riskScore": 92}', None)
        assert buf.getvalue() == '{"riskScore": 92}\n'


# ---------------------------------------------------------------------------
# 4. Directory collection
# ---------------------------------------------------------------------------
class TestCollectSources:
    def test_fixture_tree(self) -> None:
        names = [p.name for p in _collect_sources(FIXTURES_DIR)]
        assert names == ["add.py", "app.py", "login.php"]

    def test_filters_by_extension(self, tmp_path) -> None:
        (tmp_path / "a.JS").write_text("x", encoding="utf-8")
        (tmp_path / "b.md").write_text("x", encoding="utf-8")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "c.java").write_text("x", encoding="utf-8")
        assert [p.name for p in _collect_sources(tmp_path)] == ["a.JS", "c.java"]
