# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Text transforms shared by rule remediations.

Every transform takes a fragment (one or more lines joined with ``\\n``) and
returns the replacement text. Lines a transform inserts copy the indentation
of the line they are attached to.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from owaspscan.core.constants import Language

_HASH_COMMENT = {Language.PYTHON, Language.GENERAL}
_SLASH_COMMENT = {Language.JAVASCRIPT, Language.JAVA, Language.C_CPP, Language.PHP}

_STRING_LITERAL = re.compile(r"""("(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')""")


def leading_ws(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def comment(language: Language, text: str) -> str:
    """Render *text* as a single-line comment in *language*."""
    if language in _HASH_COMMENT:
        return f"# {text}"
    if language in _SLASH_COMMENT:
        return f"// {text}"
    if language == Language.HTML:
        return f"<!-- {text} -->"
    return f"/* {text} */"


def annotate(fragment: str, language: Language, text: str) -> str:
    """Insert a comment line above *fragment*."""
    first = fragment.split("\n", 1)[0]
    return f"{leading_ws(first)}{comment(language, text)}\n{fragment}"


def sub_outside_strings(
    pattern: re.Pattern[str],
    repl: str | Callable[[re.Match[str]], str],
    text: str,
) -> str:
    """Apply ``pattern.sub`` only to the parts of *text* outside string literals."""
    parts = _STRING_LITERAL.split(text)
    for i in range(0, len(parts), 2):
        parts[i] = pattern.sub(repl, parts[i])
    return "".join(parts)


def sub_inside_strings(
    pattern: re.Pattern[str],
    repl: str | Callable[[re.Match[str]], str],
    text: str,
) -> str:
    """Apply ``pattern.sub`` only inside string literals."""
    parts = _STRING_LITERAL.split(text)
    for i in range(1, len(parts), 2):
        parts[i] = pattern.sub(repl, parts[i])
    return "".join(parts)


def call_name(snake: str, language: Language) -> str:
    """Spell a helper function name the way *language* names functions."""
    if language in (Language.JAVASCRIPT, Language.JAVA):
        head, *rest = snake.split("_")
        return head + "".join(part.title() for part in rest)
    return snake


# ---------------------------------------------------------------------------
# User input wrapping
# ---------------------------------------------------------------------------

_PY_INPUT = (
    r"request\.(?:args|form|values|json|data|cookies|headers|GET|POST)"
    r"(?:\.get\([^()\n]{0,100}\)|\[[^\[\]\n]{0,100}\])?"
)
_JS_INPUT = r"req\.(?:query|body|params|cookies|headers)(?:\.[A-Za-z_$][\w$]{0,60}|\[[^\[\]\n]{0,100}\])?"
_PHP_INPUT = r"\$_(?:GET|POST|REQUEST|COOKIE)(?:\[[^\[\]\n]{0,100}\])?"
_JAVA_INPUT = r"request\.get(?:Parameter|Header|QueryString)\([^()\n]{0,100}\)"

USER_INPUT_PATTERNS: dict[Language, re.Pattern[str]] = {
    Language.PYTHON: re.compile(_PY_INPUT),
    Language.JAVASCRIPT: re.compile(_JS_INPUT),
    Language.PHP: re.compile(_PHP_INPUT),
    Language.JAVA: re.compile(_JAVA_INPUT),
}
_ANY_INPUT = re.compile("|".join((_JAVA_INPUT, _PY_INPUT, _JS_INPUT, _PHP_INPUT)))


def user_input_pattern(language: Language) -> re.Pattern[str]:
    return USER_INPUT_PATTERNS.get(language, _ANY_INPUT)


def wrap_user_input(text: str, language: Language, helper: str = "validate_input") -> str:
    """Wrap every user-input expression in *text* with a call to *helper*."""
    name = call_name(helper, language)
    prefix = f"{name}("

    def _wrap(m: re.Match[str]) -> str:
        before = m.string[max(0, m.start() - len(prefix)) : m.start()]
        if before == prefix:
            return m.group(0)
        return f"{prefix}{m.group(0)})"

    return user_input_pattern(language).sub(_wrap, text)


# ---------------------------------------------------------------------------
# Secrets
# ---------------------------------------------------------------------------

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def env_var_name(key: str) -> str:
    """``apiKey`` -> ``API_KEY``, ``$db->password`` -> ``PASSWORD``."""
    tail = re.split(r"->|\.|\$", key)[-1] or key
    tail = _CAMEL_BOUNDARY.sub("_", tail)
    return re.sub(r"[^A-Za-z0-9]+", "_", tail).strip("_").upper() or "SECRET"


def env_lookup(name: str, language: Language) -> str:
    if language == Language.PYTHON:
        return f'os.environ["{name}"]'
    if language == Language.JAVASCRIPT:
        return f"process.env.{name}"
    if language == Language.PHP:
        return f"getenv('{name}')"
    if language == Language.JAVA:
        return f'System.getenv("{name}")'
    if language == Language.C_CPP:
        return f'getenv("{name}")'
    return f'"${{{name}}}"'


def secret_assignment(keywords: str) -> re.Pattern[str]:
    """Pattern for ``<key containing keyword> = "<literal>"`` style assignments."""
    return re.compile(
        rf"(?P<key>[\w$.\->]{{0,40}}(?:{keywords})[\w\-]{{0,20}})"
        r"(?P<kq>[\"']?)(?P<sep>\s*(?:=>|:=|[:=])\s*)"
        r"(?P<q>[\"'])(?P<value>[^\"'\n]{1,200})(?P=q)",
        re.IGNORECASE,
    )


def redact_secret(text: str, language: Language, pattern: re.Pattern[str]) -> str:
    """Replace hardcoded literals matched by *pattern* with environment lookups."""

    def _replace(m: re.Match[str]) -> str:
        name = env_var_name(m.group("key"))
        return f"{m.group('key')}{m.group('kq')}{m.group('sep')}{env_lookup(name, language)}"

    return pattern.sub(_replace, text)


# ---------------------------------------------------------------------------
# SQL parameterization
# ---------------------------------------------------------------------------

_SQL_KEYWORD = re.compile(r"\b(?:SELECT|INSERT|UPDATE|DELETE|REPLACE)\b", re.IGNORECASE)
_QUOTED_PLACEHOLDER = re.compile(r"'(\?|%s)'")
_ASSIGN_TAIL = re.compile(r"(?P<lhs>[\w$\[\]<>.]{1,120}(?:[ \t]{1,10}[\w$]{1,120})?)[ \t]{0,10}=[ \t]*$")
_EXECUTE_TAIL = re.compile(r"(?:\.|->)(?P<method>\w+)\s*\(\s*$")
_LINE_ASSIGN = re.compile(r"^[ \t]*(?P<lhs>[\w$\[\]<>.\-]+(?:[ \t]+[\w$\[\]<>.\-]+){0,3})[ \t]*=(?!=)")
_PHP_INTERP = re.compile(r"\{(\$[^{}\n]{1,100})\}|(\$[A-Za-z_]\w*(?:\[[^\[\]\n]{0,60}\]|->\w+)?)")
_PY_FSTRING = (re.compile(r"\b[fF]\"([^\"\n]*)\""), re.compile(r"\b[fF]'([^'\n]*)'"))
_PY_FORMAT_FIELD = re.compile(r"\{([^{}\n]*)\}")
_PY_PERCENT = re.compile(
    r"(?P<lit>\"[^\"\n]*\"|'[^'\n]*')\s*%\s*(?P<args>\([^\n]{0,400}?\)(?=\s*(?:[),;]|$))|[\w.]+(?:\[[^\[\]\n]*\])?)"
)
_PY_DOTFORMAT = re.compile(r"(?P<lit>\"[^\"\n]*\"|'[^'\n]*')\.format\((?P<args>[^()\n]*)\)")


@dataclass(frozen=True)
class SqlRewrite:
    """A query expression at ``line[start:end]`` rebuilt as *literal* plus bind *params*."""

    start: int
    end: int
    literal: str
    params: tuple[str, ...]


def _placeholder(language: Language) -> str:
    return "%s" if language == Language.PYTHON else "?"


def _read_literal(text: str, pos: int) -> int:
    """Return the index just past the string literal starting at *pos*, or -1."""
    quote = text[pos]
    i = pos + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    return -1


def _concat_op(text: str, pos: int, language: Language) -> int:
    """Return the index after a concatenation operator at *pos*, or -1."""
    if pos < len(text) and text[pos] == "+" and language != Language.PHP:
        return pos + 1
    if pos < len(text) and text[pos] == "." and language in (Language.PHP, Language.GENERAL):
        nxt = text[pos + 1 : pos + 2]
        if nxt in (" ", "$", "\t", '"', "'"):
            return pos + 1
    return -1


def _read_expression(text: str, pos: int, language: Language) -> int:
    depth = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if ch in "\"'":
            end = _read_literal(text, i)
            if end < 0:
                return len(text)
            i = end
            continue
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            if depth == 0:
                return i
            depth -= 1
        elif depth == 0 and (ch in ",;" or _concat_op(text, i, language) >= 0):
            return i
        i += 1
    return i


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in " \t":
        pos += 1
    return pos


def find_concatenated_sql(line: str, language: Language) -> SqlRewrite | None:
    """Locate ``"SELECT ... " + expr [+ "..."]`` and rebuild it with placeholders."""
    i = 0
    while i < len(line):
        if line[i] not in "\"'":
            i += 1
            continue
        end = _read_literal(line, i)
        if end < 0:
            return None
        quote = line[i]
        sql = line[i + 1 : end - 1]
        if not _SQL_KEYWORD.search(sql):
            i = end
            continue

        params: list[str] = []
        pos = end
        chain_end = end
        while True:
            op = _concat_op(line, _skip_ws(line, pos), language)
            if op < 0:
                break
            pos = _skip_ws(line, op)
            if pos < len(line) and line[pos] in "\"'":
                lit_end = _read_literal(line, pos)
                if lit_end < 0:
                    break
                sql += line[pos + 1 : lit_end - 1]
                pos = lit_end
            else:
                expr_end = _read_expression(line, pos, language)
                expr = line[pos:expr_end].strip()
                if not expr:
                    break
                params.append(expr)
                sql += _placeholder(language)
                pos = expr_end
            chain_end = pos

        if params:
            sql = _QUOTED_PLACEHOLDER.sub(r"\1", sql)
            return SqlRewrite(i, chain_end, f"{quote}{sql}{quote}", tuple(params))
        i = end
    return None


def find_php_interpolated_sql(line: str) -> SqlRewrite | None:
    for m in re.finditer(r"\"[^\"\n]*\"", line):
        body = m.group(0)[1:-1]
        if not _SQL_KEYWORD.search(body) or "$" not in body:
            continue
        params: list[str] = []

        def _sub(pm: re.Match[str], params: list[str] = params) -> str:
            params.append(pm.group(1) or pm.group(2))
            return "?"

        sql = _QUOTED_PLACEHOLDER.sub(r"\1", _PHP_INTERP.sub(_sub, body))
        if params:
            return SqlRewrite(m.start(), m.end(), f'"{sql}"', tuple(params))
    return None


def find_python_formatted_sql(line: str) -> SqlRewrite | None:
    """Handle f-strings, ``%`` formatting and ``.format()`` query construction."""
    for pattern in _PY_FSTRING:
        for m in pattern.finditer(line):
            body = m.group(1)
            if not _SQL_KEYWORD.search(body):
                continue
            params = [f.strip() for f in _PY_FORMAT_FIELD.findall(body) if f.strip()]
            if not params:
                continue
            sql = _QUOTED_PLACEHOLDER.sub(r"\1", _PY_FORMAT_FIELD.sub("%s", body))
            quote = m.group(0)[1]
            return SqlRewrite(m.start(), m.end(), f"{quote}{sql}{quote}", tuple(params))

    for m in _PY_PERCENT.finditer(line):
        lit = m.group("lit")
        if not _SQL_KEYWORD.search(lit):
            continue
        args = m.group("args").strip()
        if args.startswith("(") and args.endswith(")"):
            inner = args[1:-1].strip().rstrip(",")
            params = tuple(a.strip() for a in inner.split(",") if a.strip())
        else:
            params = (args,)
        sql = _QUOTED_PLACEHOLDER.sub(r"\1", lit[1:-1])
        return SqlRewrite(m.start(), m.end(), f"{lit[0]}{sql}{lit[0]}", params)

    for m in _PY_DOTFORMAT.finditer(line):
        lit = m.group("lit")
        if not _SQL_KEYWORD.search(lit):
            continue
        params = tuple(a.strip() for a in m.group("args").split(",") if a.strip())
        if not params:
            continue
        sql = _QUOTED_PLACEHOLDER.sub(r"\1", _PY_FORMAT_FIELD.sub("%s", lit[1:-1]))
        return SqlRewrite(m.start(), m.end(), f"{lit[0]}{sql}{lit[0]}", params)
    return None


def _param_list(params: tuple[str, ...], language: Language) -> str:
    if language == Language.PYTHON:
        joined = ", ".join(params)
        return f"({joined},)" if len(params) == 1 else f"({joined})"
    return "[" + ", ".join(params) + "]"


def apply_sql_rewrite(line: str, rw: SqlRewrite, language: Language) -> str:
    """Splice *rw* into *line* and bind its parameters the way *language* does."""
    indent = leading_ws(line)
    before = line[: rw.start]
    after = line[rw.end :]
    in_call = _skip_ws(after, 0) < len(after) and after[_skip_ws(after, 0)] in "),"
    assign = _ASSIGN_TAIL.search(before)
    params = rw.params

    if language in (Language.PHP, Language.JAVA):
        php = language == Language.PHP
        if assign and not in_call:
            query = assign.group("lhs").split()[-1]
            prepared = [f"{before}{rw.literal}{after}"]
        else:
            query = rw.literal
            prepared = []
        if php:
            prepared.append(f"{indent}$stmt = $pdo->prepare({query});")
            prepared.append(f"{indent}$stmt->execute({_param_list(params, language)});")
        else:
            prepared.append(f"{indent}PreparedStatement stmt = connection.prepareStatement({query});")
            prepared += [f"{indent}stmt.setObject({n}, {p});" for n, p in enumerate(params, 1)]

        if in_call:
            target = _LINE_ASSIGN.match(before)
            lhs = target.group("lhs").strip() if target else ""
            if php:
                if lhs:
                    prepared.append(f"{indent}{lhs} = $stmt;")
            else:
                execute = _EXECUTE_TAIL.search(before)
                method = execute.group("method") if execute else ""
                call = f"stmt.{method if method.startswith('execute') else 'execute'}();"
                prepared.append(f"{indent}{lhs} = {call}" if lhs else f"{indent}{call}")
        return "\n".join(prepared)

    if in_call and language in (Language.PYTHON, Language.JAVASCRIPT):
        return f"{before}{rw.literal}, {_param_list(params, language)}{after}"

    rebuilt = f"{before}{rw.literal}{after}"
    if assign and language == Language.PYTHON:
        return f"{rebuilt}\n{indent}params = {_param_list(params, language)}"
    if assign and language == Language.JAVASCRIPT:
        return f"{rebuilt}\n{indent}const params = {_param_list(params, language)};"
    note = comment(language, "bind parameters: " + ", ".join(params))
    return f"{rebuilt}\n{indent}{note}"


def rewrite_lines(fragment: str, fn: Callable[[str], str | None]) -> str:
    """Apply *fn* to each line of *fragment*; ``None`` leaves a line unchanged."""
    out: list[str] = []
    for line in fragment.split("\n"):
        replaced = fn(line)
        out.append(line if replaced is None else replaced)
    return "\n".join(out)


# ---------------------------------------------------------------------------
# Call rewriting
# ---------------------------------------------------------------------------


def _matching_paren(text: str, open_idx: int) -> int:
    depth = 0
    i = open_idx
    while i < len(text):
        ch = text[i]
        if ch in "\"'":
            end = _read_literal(text, i)
            if end < 0:
                return -1
            i = end
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def split_args(args: str) -> list[str]:
    """Split a call's argument text on top-level commas."""
    parts: list[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(args):
        ch = args[i]
        if ch in "\"'":
            end = _read_literal(args, i)
            i = end if end > 0 else len(args)
            continue
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(args[start:i].strip())
            start = i + 1
        i += 1
    tail = args[start:].strip()
    if tail or parts:
        parts.append(tail)
    return parts


def replace_calls(
    text: str,
    pattern: re.Pattern[str],
    build: Callable[[re.Match[str], str], str],
) -> str:
    """Replace each call matched by *pattern* (which must end at the opening
    parenthesis) with ``build(match, argument_text)``.
    """
    out: list[str] = []
    pos = 0
    for m in pattern.finditer(text):
        if m.start() < pos or not m.group(0).endswith("("):
            continue
        close = _matching_paren(text, m.end() - 1)
        if close < 0:
            continue
        out.append(text[pos : m.start()])
        out.append(build(m, text[m.end() : close]))
        pos = close + 1
    out.append(text[pos:])
    return "".join(out)
