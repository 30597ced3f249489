# tests/test_validation_bench.py

import json
from pathlib import Path

import pytest

from flowlint.validator import validate_workflow

BENCH = Path(__file__).resolve().parent.parent / "bench" / "validation"


@pytest.mark.parametrize("case_dir", sorted(BENCH.glob("V*")), ids=lambda p: p.name)
def test_validation_bench(case_dir: Path):
    """
    Validation benchmark:
    - load workflow.json
    - load expect.json (optional profile / environment / accept, plus an "assert" block)
    - run validate_workflow with the bundled registry
    - check validity, issue codes per severity and counts
    """
    wf_file = case_dir / "workflow.json"
    exp_file = case_dir / "expect.json"

    assert wf_file.exists(), f"Missing workflow.json in {case_dir}"
    assert exp_file.exists(), f"Missing expect.json in {case_dir}"

    with wf_file.open("r", encoding="utf-8") as f:
        workflow = json.load(f)

    with exp_file.open("r", encoding="utf-8") as f:
        expect = json.load(f)

    result = validate_workflow(
        workflow,
        profile=expect.get("profile", "runtime"),
        environment=expect.get("environment", "production"),
        accept=expect.get("accept", ()),
    )

    asserts = (expect.get("assert") or {})
    error_codes = [it.code.value for it in result.errors]
    warning_codes = [it.code.value for it in result.warnings]
    suppressed_codes = [it.code.value for it in result.suppressed]
    dump = "\n".join(str(it) for it in result.issues)

    # ---- valid / passed ----
    if "valid" in asserts:
        assert result.valid == bool(asserts["valid"]), f"{case_dir.name}: valid={result.valid}\n{dump}"
    if "passed" in asserts:
        assert result.passed() == bool(asserts["passed"]), f"{case_dir.name}: passed={result.passed()}\n{dump}"

    # ---- codes ----
    for code in asserts.get("errors_include", []):
        assert code in error_codes, f"{case_dir.name}: expected error {code}, got {error_codes}"
    for code in asserts.get("warnings_include", []):
        assert code in warning_codes, f"{case_dir.name}: expected warning {code}, got {warning_codes}"
    for code in asserts.get("suppressed_include", []):
        assert code in suppressed_codes, f"{case_dir.name}: expected suppressed {code}, got {suppressed_codes}"
    for code in asserts.get("codes_exclude", []):
        assert code not in error_codes + warning_codes, f"{case_dir.name}: unexpected {code}\n{dump}"

    # ---- counts ----
    if "n_errors" in asserts:
        assert len(result.errors) == asserts["n_errors"], f"{case_dir.name}: errors\n{dump}"
    if "n_warnings" in asserts:
        assert len(result.warnings) == asserts["n_warnings"], f"{case_dir.name}: warnings\n{dump}"

    # ---- cycles ----
    if "has_cycles" in asserts:
        cycles = result.detail["structure"]["cycles"]
        assert bool(cycles) == bool(asserts["has_cycles"]), f"{case_dir.name}: cycles={cycles}"
