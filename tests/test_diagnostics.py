import pytest

from app.features.judge0.diagnostics import (
    MATCHERS,
    PYTHON_ERROR_MESSAGE,
    RUNTIME_ERROR_MESSAGE,
    SQL_SCRIPT_FILE,
    match_c_style,
    match_sql_generic,
    parse_diagnostics,
)
from app.features.judge0.schemas import Severity


def test_cpp_error_scenario():
    output = (
        "file.cpp: In function 'int main()':\n"
        "file.cpp:2:14: error: 'cout' was not declared in this scope\n"
        "    2 | int main(){cout<<1;}\n"
        "      |             ^~~~\n"
    )
    diags = parse_diagnostics(output)
    assert len(diags) == 1
    d = diags[0]
    assert (d.file, d.row, d.column, d.severity) == ("file.cpp", 2, 14, Severity.error)
    assert d.message == "'cout' was not declared in this scope"


@pytest.mark.parametrize(
    "kind, expected",
    [("error", Severity.error), ("fatal error", Severity.error), ("warning", Severity.warning)],
)
def test_c_style_severity(kind, expected):
    diags = parse_diagnostics(f"main.c:1:1: {kind}: something")
    assert diags[0].severity == expected


def test_c_style_collects_every_line():
    output = "a.c:3:5: warning: unused variable 'x'\na.c:9:1: error: expected ';' before '}' token"
    diags = parse_diagnostics(output)
    assert [(d.row, d.column, d.severity) for d in diags] == [
        (3, 5, Severity.warning),
        (9, 1, Severity.error),
    ]


def test_c_style_shadows_generic_fallback():
    # The trailing "main.c:7" line alone would satisfy the bare file:row matcher.
    output = "main.c:3:5: error: expected ';'\nmain.c:7"
    diags = parse_diagnostics(output)
    assert len(diags) == 1
    assert diags[0].row == 3
    assert diags[0].message == "expected ';'"


def test_java_style_has_no_column():
    diags = parse_diagnostics("Main.java:5: error: ';' expected\n        int x = 1\n                 ^\n1 error")
    assert len(diags) == 1
    assert (diags[0].file, diags[0].row, diags[0].column) == ("Main.java", 5, 0)
    assert diags[0].message == "';' expected"


def test_python_traceback_frames():
    output = (
        "Traceback (most recent call last):\n"
        '  File "script.py", line 4, in <module>\n'
        "    foo()\n"
        "NameError: name 'foo' is not defined\n"
    )
    diags = parse_diagnostics(output)
    assert [(d.file, d.row) for d in diags] == [("script.py", 4)]
    assert diags[0].message == PYTHON_ERROR_MESSAGE
    assert diags[0].severity == Severity.error


def test_node_runtime_location_beats_sql_generic():
    output = "/box/script.js:3\n    foo();\n    ^\n\nReferenceError: foo is not defined\n"
    diags = parse_diagnostics(output)
    assert [(d.file, d.row, d.column) for d in diags] == [("/box/script.js", 3, 0)]
    assert diags[0].message == RUNTIME_ERROR_MESSAGE


def test_typescript_style():
    output = "script.ts(3,7): error TS2322: Type 'string' is not assignable to type 'number'."
    diags = parse_diagnostics(output)
    assert len(diags) == 1
    assert (diags[0].row, diags[0].column, diags[0].severity) == (3, 7, Severity.error)
    assert diags[0].message == "Type 'string' is not assignable to type 'number'."


def test_sql_near_line():
    diags = parse_diagnostics('Error: near line 2: near "SELEC": syntax error')
    assert len(diags) == 1
    assert (diags[0].file, diags[0].row) == (SQL_SCRIPT_FILE, 2)
    assert diags[0].message == 'near "SELEC": syntax error'


def test_sql_generic_defaults_to_first_line():
    diags = parse_diagnostics("Error: no such table: users")
    assert len(diags) == 1
    assert (diags[0].file, diags[0].row, diags[0].column) == (SQL_SCRIPT_FILE, 1, 0)
    assert diags[0].message == "no such table: users"


def test_unrecognised_output_yields_nothing():
    assert parse_diagnostics("collect2: error: ld returned 1 exit status") == []
    assert parse_diagnostics("") == []
    assert parse_diagnostics(None) == []


def test_matchers_return_none_when_nothing_matches():
    assert match_c_style("plain text") is None
    assert match_sql_generic("plain text") is None


def test_matcher_order_is_fixed():
    names = [m.__name__ for m in MATCHERS]
    assert names == [
        "match_c_style",
        "match_java_style",
        "match_python_style",
        "match_runtime_style",
        "match_typescript_style",
        "match_sql_near_line",
        "match_sql_generic",
    ]


def test_custom_matcher_list_short_circuits():
    calls = []

    def first(text):
        calls.append("first")
        return None

    def second(text):
        calls.append("second")
        return match_sql_generic(text)

    def third(text):  # pragma: no cover - must never run
        calls.append("third")
        return None

    diags = parse_diagnostics("Error: boom", matchers=[first, second, third])
    assert [d.message for d in diags] == ["boom"]
    assert calls == ["first", "second"]
