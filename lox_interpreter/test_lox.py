import sys
import io
import os
import tempfile
from contextlib import redirect_stdout
from unittest.mock import patch

from .lox import Lox, RunResult, main

def run_lox_test(name, source_code, expected_output, expect_success=True):
    """
    Runs source through the whole pipeline the way the command line does,
    reporting errors into the same stream as program output.
    """
    print(f"--- Running Lox Test: {name} ---")

    out = io.StringIO()
    lox = Lox(output=out)
    result = lox.run(source_code)
    lox.report(result)
    output = out.getvalue()

    if result.succeeded != expect_success:
        print(f"FAIL: {name} - expected succeeded={expect_success}, got {result.succeeded}.")
        return False

    if output != expected_output:
        print(f"FAIL: {name}")
        print(f"Expected output: {expected_output!r}")
        print(f"Got:             {output!r}")
        return False

    print(f"PASS: {name}")
    return True

def _write_script(source):
    fd, path = tempfile.mkstemp(suffix=".lox")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(source)
    return path


def test_successful_run():
    assert run_lox_test("Successful Run", "var a = 1; print a + 1;", "2\n")


def test_parse_errors_prevent_execution():
    source = "print 1;\nprint ;\nprint 2;\nvar = 3;"
    expected = (
        "[line 2] Error  at ';' : Expect expression.\n"
        "[line 4] Error  at '=' : Expect variable name.\n"
    )
    assert run_lox_test("Parse Errors Prevent Execution", source, expected, expect_success=False)


def test_lexical_error_prevents_execution():
    assert run_lox_test(
        "Lexical Error", "print 1; #",
        "[line 1] Error  at '#' : Unexpected character.\n",
        expect_success=False,
    )


def test_runtime_error_stops_program():
    source = 'print "before";\nprint "a" - 1;\nprint "after";'
    expected = "before\n[line 2] Error  at '-' : Strings and numbers can only be concatenated.\n"
    assert run_lox_test("Runtime Error Stops Program", source, expected, expect_success=False)


def test_state_persists_between_runs():
    out = io.StringIO()
    lox = Lox(output=out)
    assert lox.run("var greeting = \"hi\";").succeeded
    assert lox.run("print greeting;").succeeded
    assert out.getvalue() == "hi\n"


def test_run_result():
    assert RunResult().succeeded
    result = Lox(output=io.StringIO()).run("missing;")
    assert not result.succeeded
    assert result.errors == []
    assert result.all_errors() == [result.runtime_error]


def test_run_file_exit_codes():
    cases = [
        ("print 1;", 0),
        ("print (1;", 65),
        ("print nope;", 70),
    ]
    for source, expected_code in cases:
        path = _write_script(source)
        try:
            code = Lox(output=io.StringIO()).run_file(path)
        finally:
            os.remove(path)
        assert code == expected_code, f"{source!r}: expected {expected_code}, got {code}"

    assert Lox(output=io.StringIO()).run_file(os.path.join(tempfile.gettempdir(), "no-such-script.lox")) == 66


def test_run_file_rejects_invalid_utf8():
    fd, path = tempfile.mkstemp(suffix=".lox")
    with os.fdopen(fd, "wb") as f:
        f.write(b"print \xff\xfe;")
    out = io.StringIO()
    try:
        code = Lox(output=out).run_file(path)
    finally:
        os.remove(path)
    assert code == 66
    assert "not valid UTF-8" in out.getvalue()


def test_deep_input_is_reported_not_raised():
    out = io.StringIO()
    lox = Lox(output=out)
    nested = lox.run("print " + "(" * 1000 + "1" + ")" * 1000 + ";")
    long_sum = lox.run("print " + " + ".join(["1"] * 5000) + ";")
    assert not nested.succeeded and len(nested.errors) == 1
    assert long_sum.runtime_error is not None
    assert long_sum.runtime_error.message == "Expression nesting too deep."
    assert lox.run("print 3;").succeeded


def test_main_usage():
    f = io.StringIO()
    with redirect_stdout(f):
        code = main(["one.lox", "two.lox"])
    assert code == 64
    assert f.getvalue() == "Usage: lox [script]\n"


def test_main_runs_script():
    path = _write_script("var n = 0; while (n < 2) { print n; n = n + 1; }")
    f = io.StringIO()
    try:
        with redirect_stdout(f):
            code = main([path])
    finally:
        os.remove(path)
    assert code == 0
    assert f.getvalue() == "0\n1\n"


def test_prompt_keeps_going_after_errors():
    out = io.StringIO()
    lines = ["print 1;", "", "print missing;", "var a = 2;", "print a;", EOFError()]
    with patch("builtins.input", side_effect=lines):
        Lox(output=out).run_prompt()
    output = out.getvalue()
    assert output.startswith("Lox REPL")
    assert "1\n" in output
    assert "Undefined variable." in output
    assert "2\n" in output
    assert output.endswith("Exiting.\n")


TESTS = [
    test_successful_run,
    test_parse_errors_prevent_execution,
    test_lexical_error_prevents_execution,
    test_runtime_error_stops_program,
    test_state_persists_between_runs,
    test_run_result,
    test_run_file_exit_codes,
    test_run_file_rejects_invalid_utf8,
    test_deep_input_is_reported_not_raised,
    test_main_usage,
    test_main_runs_script,
    test_prompt_keeps_going_after_errors,
]


def main_tests():
    tests_passed = 0
    for test in TESTS:
        try:
            test()
            tests_passed += 1
        except AssertionError:
            pass

    print(f"\n--- Lox Test Summary ---")
    print(f"{tests_passed} / {len(TESTS)} tests passed.")

    if tests_passed != len(TESTS):
        sys.exit(1)

if __name__ == "__main__":
    main_tests()
