"""Compiler/interpreter output parsing.

Each matcher recognises one family of error-line grammars and returns the
diagnostics it found, or ``None``. Matchers are tried in a fixed order and the
first one that finds anything wins; results are never merged across matchers,
so native-language grammars always shadow the generic fallbacks below them.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Pattern

from .schemas import Diagnostic, Severity

SQL_SCRIPT_FILE = "script.sql"
PYTHON_ERROR_MESSAGE = "Python error"
RUNTIME_ERROR_MESSAGE = "JavaScript runtime error"

Matcher = Callable[[str], Optional[List[Diagnostic]]]

_C_STYLE = re.compile(r"^(.+?):(\d+):(\d+):\s+(error|fatal error|warning):\s+(.*)$", re.MULTILINE)
_JAVA_STYLE = re.compile(r"^(.+?):(\d+):\s+(error|warning):\s+(.*)$", re.MULTILINE)
_PYTHON_STYLE = re.compile(r"File\s+\"(.+?)\",\s+line\s+(\d+)", re.MULTILINE)
_RUNTIME_STYLE = re.compile(r"^(.+?):(\d+)(?::\d+)?$", re.MULTILINE)
_TYPESCRIPT_STYLE = re.compile(r"^(.+?)\((\d+),(\d+)\):\s+(error|warning)\s+TS\d+:\s+(.*)$", re.MULTILINE)
_SQL_NEAR_LINE = re.compile(r"Error:\s+near\s+line\s+(\d+):\s+(.*)$", re.MULTILINE)
_SQL_GENERIC = re.compile(r"Error:\s+(.*)$", re.MULTILINE)


def _collect(pattern: Pattern[str], text: str, build: Callable[[re.Match], Diagnostic]) -> Optional[List[Diagnostic]]:
    found = [build(m) for m in pattern.finditer(text)]
    return found or None


def _severity(kind: str) -> Severity:
    return Severity.error if "error" in kind else Severity.warning


def match_c_style(text: str) -> Optional[List[Diagnostic]]:
    """``file.cpp:2:14: error: message`` (gcc/clang; "fatal error" counts as error)."""
    return _collect(_C_STYLE, text, lambda m: Diagnostic(
        file=m.group(1),
        row=int(m.group(2)),
        column=int(m.group(3)),
        severity=_severity(m.group(4)),
        message=m.group(5).strip(),
    ))


def match_java_style(text: str) -> Optional[List[Diagnostic]]:
    """``Main.java:3: error: message`` (javac reports no column)."""
    return _collect(_JAVA_STYLE, text, lambda m: Diagnostic(
        file=m.group(1),
        row=int(m.group(2)),
        column=0,
        severity=Severity(m.group(3)),
        message=m.group(4).strip(),
    ))


def match_python_style(text: str) -> Optional[List[Diagnostic]]:
    """``File "script.py", line 4`` traceback frames."""
    return _collect(_PYTHON_STYLE, text, lambda m: Diagnostic(
        file=m.group(1),
        row=int(m.group(2)),
        column=0,
        severity=Severity.error,
        message=PYTHON_ERROR_MESSAGE,
    ))


def match_runtime_style(text: str) -> Optional[List[Diagnostic]]:
    """A bare ``file:row`` or ``file:row:col`` line, as printed by node above a caret."""
    return _collect(_RUNTIME_STYLE, text, lambda m: Diagnostic(
        file=m.group(1),
        row=int(m.group(2)),
        column=0,
        severity=Severity.error,
        message=RUNTIME_ERROR_MESSAGE,
    ))


def match_typescript_style(text: str) -> Optional[List[Diagnostic]]:
    """``script.ts(3,7): error TS2322: message``."""
    return _collect(_TYPESCRIPT_STYLE, text, lambda m: Diagnostic(
        file=m.group(1),
        row=int(m.group(2)),
        column=int(m.group(3)),
        severity=Severity(m.group(4)),
        message=m.group(5).strip(),
    ))


def match_sql_near_line(text: str) -> Optional[List[Diagnostic]]:
    """sqlite's ``Error: near line 2: message``."""
    return _collect(_SQL_NEAR_LINE, text, lambda m: Diagnostic(
        file=SQL_SCRIPT_FILE,
        row=int(m.group(1)),
        column=0,
        severity=Severity.error,
        message=m.group(2).strip(),
    ))


def match_sql_generic(text: str) -> Optional[List[Diagnostic]]:
    return _collect(_SQL_GENERIC, text, lambda m: Diagnostic(
        file=SQL_SCRIPT_FILE,
        row=1,
        column=0,
        severity=Severity.error,
        message=m.group(1).strip(),
    ))


# Order matters: first matcher with a non-empty result wins.
MATCHERS: List[Matcher] = [
    match_c_style,
    match_java_style,
    match_python_style,
    match_runtime_style,
    match_typescript_style,
    match_sql_near_line,
    match_sql_generic,
]


def parse_diagnostics(text: Optional[str], matchers: Optional[List[Matcher]] = None) -> List[Diagnostic]:
    if not text:
        return []
    for matcher in matchers or MATCHERS:
        found = matcher(text)
        if found:
            return found
    return []


__all__ = [
    "MATCHERS",
    "Matcher",
    "parse_diagnostics",
    "match_c_style",
    "match_java_style",
    "match_python_style",
    "match_runtime_style",
    "match_typescript_style",
    "match_sql_near_line",
    "match_sql_generic",
]
