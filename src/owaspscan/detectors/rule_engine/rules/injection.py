# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""A03 Injection rules: SQL, OS command, code evaluation, and XSS."""

from __future__ import annotations

import re

from owaspscan.core.constants import Language, OwaspCategory, Severity
from owaspscan.detectors.rule_engine.base_rule import BaseRule
from owaspscan.detectors.rule_engine.matchers import line_matcher
from owaspscan.detectors.rule_engine.registry import rule
from owaspscan.remediation.transforms import (
    apply_sql_rewrite,
    find_concatenated_sql,
    find_php_interpolated_sql,
    find_python_formatted_sql,
    replace_calls,
    rewrite_lines,
    sub_outside_strings,
    wrap_user_input,
)

_SQL = r"(?:SELECT\b.{0,200}?\bFROM|INSERT\s+INTO|UPDATE\s+\w+\s+SET|DELETE\s+FROM)"


def _quoted_sql(tail: str, quotes: str = "\"'") -> list[re.Pattern[str]]:
    """One pattern per quote character: a literal containing a SQL statement, then *tail*."""
    return [
        re.compile(
            rf"{q}[^{q}\n]{{0,200}}?{_SQL}[^{q}\n]{{0,200}}{q}{tail}",
            re.IGNORECASE,
        )
        for q in quotes
    ]


@rule
class SqlConcatenation(BaseRule):
    rule_id = "OWASP-A03-001"
    title = "SQL query built by string concatenation"
    severity = Severity.CRITICAL
    category = OwaspCategory.INJECTION
    description = "A SQL statement is concatenated with a runtime value, allowing SQL injection"
    recommendation = "Use parameterized queries or prepared statements and pass values as bind parameters."
    matcher = line_matcher(*_quoted_sql(r"\s*(?:\+|\.(?=[\s$]))\s*[\w$(]"))

    def rewrite(self, fragment: str, language: Language) -> str:
        def _line(line: str) -> str | None:
            rw = find_concatenated_sql(line, language)
            return apply_sql_rewrite(line, rw, language) if rw else None

        return rewrite_lines(fragment, _line)


@rule
class PythonFormattedSql(BaseRule):
    rule_id = "OWASP-A03-002"
    title = "SQL query built with string formatting"
    severity = Severity.CRITICAL
    category = OwaspCategory.INJECTION
    description = "A SQL statement is built with an f-string, % formatting, or str.format"
    recommendation = "Pass values as the second argument of cursor.execute() with %s placeholders."
    languages = frozenset({Language.PYTHON})
    matcher = line_matcher(
        *(
            re.compile(rf"\b[fF]{q}(?=[^{q}\n]{{0,400}}\{{)[^{q}\n]{{0,200}}?{_SQL}", re.IGNORECASE)
            for q in "\"'"
        ),
        *_quoted_sql(r"\s*%\s*[\w(]"),
        *_quoted_sql(r"\.format\("),
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        def _line(line: str) -> str | None:
            rw = find_python_formatted_sql(line)
            return apply_sql_rewrite(line, rw, language) if rw else None

        return rewrite_lines(fragment, _line)


@rule
class PhpInterpolatedSql(BaseRule):
    rule_id = "OWASP-A03-003"
    title = "SQL query with interpolated PHP variables"
    severity = Severity.CRITICAL
    category = OwaspCategory.INJECTION
    description = "A double-quoted SQL string interpolates PHP variables"
    recommendation = "Use PDO or mysqli prepared statements with ? placeholders."
    languages = frozenset({Language.PHP})
    matcher = line_matcher(
        re.compile(rf"\"[^\"\n]{{0,200}}?{_SQL}[^\"\n]{{0,200}}?(?:\$[A-Za-z_]|\{{\$)", re.IGNORECASE)
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        def _line(line: str) -> str | None:
            rw = find_php_interpolated_sql(line)
            return apply_sql_rewrite(line, rw, language) if rw else None

        return rewrite_lines(fragment, _line)


_OS_SYSTEM = re.compile(r"\bos\.system\s*\(")
_OS_POPEN = re.compile(r"\bos\.popen\s*\(")
_SHELL_TRUE = re.compile(r"\bshell\s*=\s*True\b")
_POPEN_READ = re.compile(r"(subprocess\.check_output\([^\n]*?text=True\))\.read\(\)")
_JS_EXEC = re.compile(r"\b(exec|execSync)\s*\(")
_PHP_SHELL = re.compile(r"(?<![\w>$.])(?:shell_exec|system|passthru|exec|popen)\s*\(")
_PHP_VAR = re.compile(r"(?<!escapeshellarg\()(\$[A-Za-z_]\w*(?:\[[^\[\]\n]{0,60}\])?)")
_JAVA_EXEC = re.compile(r"\bRuntime\.getRuntime\(\)\.exec\s*\(")


@rule
class CommandInjection(BaseRule):
    rule_id = "OWASP-A03-004"
    title = "OS command injection"
    severity = Severity.CRITICAL
    category = OwaspCategory.INJECTION
    description = "A shell command is executed with a string that may contain user input"
    recommendation = "Run programs with an argument list and no shell; never build command strings from input."
    matcher = line_matcher(
        _OS_SYSTEM,
        _OS_POPEN,
        r"\bsubprocess\.\w+\([^\n]{0,300}\bshell\s*=\s*True",
        r"\bchild_process\.exec(?:Sync)?\s*\(",
        r"(?<![\w.])exec(?:Sync)?\s*\(\s*(?:`[^`\n]{0,200}\$\{|[\"'][^\"'\n]{0,200}[\"']\s*\+|req\.)",
        r"(?<![\w>$.])(?:shell_exec|system|passthru|exec|popen|proc_open)\s*\([^)\n]{0,200}\$",
        r"`[^`\n]{0,200}\$_(?:GET|POST|REQUEST)",
        _JAVA_EXEC,
        r"(?<![\w.])system\s*\(\s*[A-Za-z_]\w*\s*\)",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        if language in (Language.PYTHON, Language.GENERAL):
            fragment = replace_calls(
                fragment, _OS_SYSTEM, lambda _m, args: f"subprocess.run(shlex.split({args}), check=True)"
            )
            fragment = replace_calls(
                fragment, _OS_POPEN, lambda _m, args: f"subprocess.check_output(shlex.split({args}), text=True)"
            )
            fragment = _POPEN_READ.sub(r"\1", fragment)
            fragment = _SHELL_TRUE.sub("shell=False", fragment)
        if language == Language.JAVASCRIPT:
            fragment = sub_outside_strings(_JS_EXEC, lambda m: "execFile" + m.group(1)[4:] + "(", fragment)
        if language == Language.PHP:
            fragment = replace_calls(
                fragment,
                _PHP_SHELL,
                lambda m, args: m.group(0) + _PHP_VAR.sub(r"escapeshellarg(\1)", args) + ")",
            )
        if language == Language.JAVA:
            fragment = replace_calls(
                fragment, _JAVA_EXEC, lambda _m, args: f"new ProcessBuilder({args}).start()"
            )
        return fragment


_EVAL = re.compile(r"(?<![\w.])eval\s*\(")


@rule
class CodeEvaluation(BaseRule):
    rule_id = "OWASP-A03-005"
    title = "Dynamic code evaluation"
    severity = Severity.CRITICAL
    category = OwaspCategory.INJECTION
    description = "Strings are evaluated as code; any attacker influence becomes code execution"
    recommendation = "Parse data with a data-only parser (JSON, ast.literal_eval) instead of evaluating it."
    matcher = line_matcher(
        _EVAL,
        r"\bnew\s+Function\s*\(",
        r"\bset(?:Timeout|Interval)\s*\(\s*[\"'`]",
        r"^\s*exec\s*\(\s*[^)\s]",
        r"\bcreate_function\s*\(",
        r"\bassert\s*\(\s*\$",
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        if language == Language.PYTHON:
            return sub_outside_strings(_EVAL, "ast.literal_eval(", fragment)
        if language in (Language.JAVASCRIPT, Language.HTML):
            return sub_outside_strings(_EVAL, "JSON.parse(", fragment)
        return fragment


_DOM_FIXES = [
    (re.compile(r"\.innerHTML\s*=(?!=)"), ".textContent ="),
    (re.compile(r"\bdocument\.write(?:ln)?\s*\("), 'document.body.insertAdjacentText("beforeend", '),
    (re.compile(r"\.insertAdjacentHTML\s*\("), ".insertAdjacentText("),
    (re.compile(r"(\$\([^)\n]{0,100}\))\.html\s*\((?=[^)\s])"), r"\1.text("),
]


@rule
class DomXss(BaseRule):
    rule_id = "OWASP-A03-006"
    title = "DOM-based cross-site scripting"
    severity = Severity.HIGH
    category = OwaspCategory.INJECTION
    description = "Markup is written into the DOM from a value that may be attacker-controlled"
    recommendation = "Assign text with textContent, or sanitize markup with a vetted library before inserting it."
    matcher = line_matcher(
        r"\.(?:inner|outer)HTML\s*=(?!=)",
        r"\bdocument\.write(?:ln)?\s*\(",
        r"\.insertAdjacentHTML\s*\(",
        r"\bdangerouslySetInnerHTML\b",
        r"\$\([^)\n]{0,100}\)\.html\s*\([^)\s]",
        suppress=[r"DOMPurify\.sanitize", r"innerHTML\s*=\s*(?:\"\"|'')\s*;?\s*$"],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        for pattern, repl in _DOM_FIXES:
            fragment = pattern.sub(repl, fragment)
        return fragment


_ESCAPE_FN = {
    Language.PHP: "htmlspecialchars",
    Language.PYTHON: "escape",
    Language.JAVASCRIPT: "escape_html",
    Language.JAVA: "Encode.forHtml",
}


@rule
class ReflectedXss(BaseRule):
    rule_id = "OWASP-A03-007"
    title = "Reflected cross-site scripting"
    severity = Severity.HIGH
    category = OwaspCategory.INJECTION
    description = "Request input is written into the response without output encoding"
    recommendation = "HTML-encode every request value before writing it to the response."
    matcher = line_matcher(
        r"\b(?:echo|print)\b[^;\n]{0,200}\$_(?:GET|POST|REQUEST|COOKIE)",
        r"<\?=\s*\$_(?:GET|POST|REQUEST|COOKIE)",
        r"\bres\.(?:send|write|end)\s*\([^)\n]{0,200}req\.(?:query|body|params)",
        r"\brender_template_string\s*\([^)\n]{0,200}request\.",
        r"\breturn\s+[^\n]{0,200}\+\s*request\.(?:args|form|values)",
        r"getWriter\(\)\.(?:print|println|write)\s*\([^)\n]{0,200}getParameter",
        suppress=[r"htmlspecialchars|htmlentities|escape|Encode\.for"],
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        return wrap_user_input(fragment, language, _ESCAPE_FN.get(language, "escape_html"))


_SCRIPT_URL = re.compile(r"javascript:[^\"'\n]*", re.IGNORECASE)
_CSS_EXPRESSION = re.compile(r"\bexpression\s*\(", re.IGNORECASE)


@rule
class ScriptUrlOrCssExpression(BaseRule):
    rule_id = "OWASP-A03-008"
    title = "javascript: URL or CSS expression()"
    severity = Severity.MEDIUM
    category = OwaspCategory.INJECTION
    description = "Script is executed from a URL or stylesheet, a common XSS vector"
    recommendation = "Use event listeners instead of javascript: URLs and remove CSS expression() values."
    matcher = line_matcher(
        re.compile(r"(?:href|src|action|formaction)\s*=\s*[\"']\s*javascript:", re.IGNORECASE),
        re.compile(r"\blocation(?:\.href)?\s*=\s*[\"']javascript:", re.IGNORECASE),
        re.compile(r"url\(\s*[\"']?\s*javascript:", re.IGNORECASE),
        re.compile(r":\s*expression\s*\(", re.IGNORECASE),
    )

    def rewrite(self, fragment: str, language: Language) -> str:
        fragment = _SCRIPT_URL.sub("#", fragment)
        return replace_calls(fragment, _CSS_EXPRESSION, lambda _m, _args: "initial")
