"""Data-driven tests: scope guard, pipeline errors, and per-style codegen."""

from pathlib import Path

import pytest

from csconv import convert
from csconv.frontend.normalize import normalize
from csconv.frontend.scope import scope_guard

TESTS_DIR = Path(__file__).parent

TESTS = {
    "scope": {"dir": "03_scope"},
    "errors": {"dir": "04_errors"},
    "codegen": {"dir": "15_codegen"},
}


# ---------------------------------------------------------------------------
# Test file parsing
# ---------------------------------------------------------------------------


def parse_test_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse a .tests file into (name, input, expected) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            test_input = "\n".join(input_lines)
            expected = "\n".join(expected_lines).strip()
            result.append((test_name, test_input, expected))
        else:
            i += 1
    return result


def discover_tests(test_dir: Path) -> list[tuple[str, str, str]]:
    """Glob *.tests in test_dir, return (test_id, input, expected) tuples."""
    results = []
    for test_file in sorted(test_dir.glob("*.tests")):
        for name, input_code, expected in parse_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", input_code, expected))
    return results


# ---------------------------------------------------------------------------
# Phase runners
# ---------------------------------------------------------------------------


def run_scope(source: str) -> str:
    error = scope_guard(normalize(source))
    if error is None:
        return "ok"
    return f"scope: {error.message}"


def run_errors(source: str) -> str:
    result = convert(source)
    if result.ok:
        return "ok"
    error = result.errors[0]
    return f"{error.stage} {error.line}:{error.column} {error.message}"


def run_codegen(source: str, style: str) -> str:
    result = convert(source, style)
    if not result.ok:
        return f"error: {result.errors[0]}"
    assert result.pseudocode is not None
    return result.pseudocode


# ---------------------------------------------------------------------------
# Parametrization
# ---------------------------------------------------------------------------


def pytest_generate_tests(metafunc):
    for name, cfg in TESTS.items():
        fixture = f"{name}_input"
        if fixture in metafunc.fixturenames:
            cases = discover_tests(TESTS_DIR / cfg["dir"])
            params = [pytest.param(inp, exp, id=tid) for tid, inp, exp in cases]
            metafunc.parametrize(f"{fixture},{name}_expected", params)


# ---------------------------------------------------------------------------
# Test functions
# ---------------------------------------------------------------------------


def test_scope(scope_input: str, scope_expected: str):
    assert run_scope(scope_input) == scope_expected


def test_errors(errors_input: str, errors_expected: str):
    assert run_errors(errors_input) == errors_expected


def test_codegen(codegen_input: str, codegen_expected: str, request):
    style = request.node.callspec.id.split("/")[0]
    actual = run_codegen(codegen_input, style)
    if actual != codegen_expected:
        pytest.fail(
            f"Codegen mismatch for style {style}\n"
            f"--- expected ---\n{codegen_expected}\n"
            f"--- actual ---\n{actual}"
        )
