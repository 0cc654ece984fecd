# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""End-to-end behavior of the analysis pipeline on small inputs."""

from __future__ import annotations

import logging

import pytest

from owaspscan.core.config import Settings
from owaspscan.core.constants import Language, RiskLevel, Severity
from owaspscan.scanner.pipeline import AnalysisPipeline


class TestAnalysisPipeline:
    def test_sql_concatenation_general(self, pipeline) -> None:
        result = pipeline.analyze('query = "SELECT * FROM users WHERE id = " + userId')
        assert result.language == Language.GENERAL
        assert [f.rule_id for f in result.findings] == ["OWASP-A03-001"]
        assert result.findings[0].severity == Severity.CRITICAL
        assert result.risk_score == 25
        assert "?" in result.secure_code
        assert "# bind parameters: userId" in result.secure_code

    def test_hardcoded_password(self, pipeline) -> None:
        result = pipeline.analyze('password = "admin123"')
        assert [f.rule_id for f in result.findings] == ["OWASP-A07-001"]
        assert result.secure_code == 'password = "${PASSWORD}"'
        assert "admin123" not in result.findings[0].code_snippet

    def test_clean_python(self, pipeline, clean_dir) -> None:
        code = (clean_dir / "add.py").read_text(encoding="utf-8")
        result = pipeline.analyze(code)
        assert result.language == Language.PYTHON
        assert result.is_clean
        assert result.risk_score == 0
        assert result.risk_level == RiskLevel.NONE
        assert result.max_severity is None
        assert result.secure_code == code

    def test_two_rules_on_one_line(self, pipeline) -> None:
        result = pipeline.analyze('os.system("rm " + request.args.get("f"))')
        assert [f.rule_id for f in result.findings] == ["OWASP-A03-004", "OWASP-A04-001"]
        assert {f.line for f in result.findings} == {1}
        assert result.risk_score == 33

    def test_swallowed_exception(self, pipeline) -> None:
        code = "def run():\n    try:\n        work()\n    except Exception:\n        pass\n"
        result = pipeline.analyze(code)
        assert result.language == Language.PYTHON
        assert [(f.rule_id, f.line, f.line_end) for f in result.findings] == [("OWASP-A09-001", 4, 5)]
        assert '        logger.exception("Unexpected error")' in result.secure_code

    def test_empty_text(self, pipeline) -> None:
        result = pipeline.analyze("")
        assert result.language == Language.GENERAL
        assert result.findings == ()
        assert result.secure_code == ""

    def test_deterministic(self, pipeline, vulnerable_dir) -> None:
        code = (vulnerable_dir / "app.py").read_text(encoding="utf-8")
        assert pipeline.analyze(code) == pipeline.analyze(code)

    def test_score_grows_with_findings(self, pipeline) -> None:
        base = pipeline.analyze("app.run(debug=True)\n")
        more = pipeline.analyze("app.run(debug=True)\nvalue = eval(data)\n")
        assert more.risk_score >= base.risk_score
        assert len(more.findings) > len(base.findings)

    def test_fixes_point_into_secure_code(self, pipeline, vulnerable_dir) -> None:
        code = (vulnerable_dir / "app.py").read_text(encoding="utf-8")
        result = pipeline.analyze(code)
        secure_count = len(result.secure_code.splitlines())
        assert result.fixes
        for fix in result.fixes:
            assert 1 <= fix.secure_line <= fix.secure_line_end <= secure_count

    def test_source_hash(self, pipeline) -> None:
        result = pipeline.analyze("print('hi')\n")
        assert len(result.source_sha256) == 64

    def test_logs_completion(self, pipeline, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="owaspscan.scanner.pipeline"):
            pipeline.analyze("app.run(debug=True)\n")
        assert "Analysis complete" in caplog.text

    def test_settings_disable_rules(self) -> None:
        pipeline = AnalysisPipeline(settings=Settings(disabled_rules=["OWASP-A05-001"]))
        assert pipeline.analyze("app.run(debug=True)\n").is_clean

    def test_settings_add_custom_rules(self, rules_dir) -> None:
        pipeline = AnalysisPipeline(settings=Settings(custom_rules_dir=str(rules_dir)))
        result = pipeline.analyze("const x = require('x');\nconsole.debug(x);\n")
        assert result.language == Language.JAVASCRIPT
        assert [f.rule_id for f in result.findings] == ["CUSTOM-DEBUG-001"]
        assert "logger.debug(x);" in result.secure_code
