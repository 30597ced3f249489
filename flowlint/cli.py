#!/usr/bin/env python3
# flowlint/cli.py

import json
from pathlib import Path
from typing import List, Optional

import typer

from flowlint.config import PROFILES, load_settings
from flowlint.doclint import lint_docs
from flowlint.errors import FlowlintError
from flowlint.result import ValidationResult
from flowlint.utils.io import write_json
from flowlint.utils.logger import init_logger
from flowlint.validator import validate_file

app = typer.Typer(help="flowlint CLI - Validate n8n workflow JSON before deployment")


def _print_result(result: ValidationResult, verbose: bool = False) -> None:
    s = result.summary()
    status = "PASS" if result.passed() else "FAIL"
    print(f"{status}: {s['errors']} error(s), {s['warnings']} warning(s), {s['suppressed']} suppressed")

    if result.errors:
        print("Errors:")
        for it in result.errors:
            print(f"- {it}")
    if result.warnings:
        print("Warnings:")
        for it in result.warnings:
            print(f"- {it}")

    if verbose:
        for it in result.suppressed:
            print(f"[debug] suppressed ({it.false_positive.value}): {it}")
        if result.detail:
            print("[debug] detail:", json.dumps(result.detail, ensure_ascii=False, default=str))


@app.command()
def validate(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True, help="Path to n8n workflow JSON/YAML"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Validation profile: minimal | runtime | ai-friendly | strict"),
    env: Optional[str] = typer.Option(None, "--env", help="Target environment: production | staging | development"),
    registry: Optional[Path] = typer.Option(None, "--registry", help="Node registry export (JSON/YAML) layered over the bundled one"),
    credentials: Optional[Path] = typer.Option(None, "--credentials", help="Credential export [{id, name, type}] of the target instance"),
    accept: Optional[List[str]] = typer.Option(None, "--accept", "-a", help="False-positive category to suppress (repeatable)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (default: ./flowlint.yaml if present)"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON report to this path"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write logs to a rotating file in this directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug info"),
):
    """
    Validate one workflow. Exit code 1 when it does not pass under the chosen
    profile, 2 when the inputs cannot be read.
    """
    try:
        settings = load_settings(
            config,
            profile=profile,
            environment=env,
            registry_path=registry,
            credentials_path=credentials,
            accept=accept or None,
        )
        init_logger(level="DEBUG" if verbose else settings.log_level, log_dir=log_dir)
        result = validate_file(input, settings)
    except FlowlintError as e:
        typer.echo(f"[error] {e}", err=True)
        raise typer.Exit(code=2)

    _print_result(result, verbose=verbose)

    if report is not None:
        payload = {"input": str(input), "profile": settings.profile, "environment": settings.environment}
        payload.update(result.to_dict())
        write_json(report, payload)
        print(f"[ok] wrote report to {report}")

    if not result.passed():
        raise typer.Exit(code=1)


@app.command()
def bench(
    glob: str = typer.Option("bench/validation/*/workflow.json", "--glob", help="Glob for workflow JSON files"),
    out: Path = typer.Option(Path("experiments/results/report.csv"), "--out", help="CSV path to write results"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Validation profile"),
    env: Optional[str] = typer.Option(None, "--env", help="Target environment"),
    registry: Optional[Path] = typer.Option(None, "--registry", help="Node registry export"),
    dump_details: bool = typer.Option(False, "--dump-details", help="Dump per-case JSON report next to each workflow"),
):
    """
    Batch validate workflows and export a CSV report (one row per workflow).
    """
    import glob as _glob
    import pandas as pd

    try:
        settings = load_settings(None, profile=profile, environment=env, registry_path=registry)
    except FlowlintError as e:
        raise typer.BadParameter(str(e))
    init_logger(level=settings.log_level)

    rows = []
    for fp_str in sorted(_glob.glob(glob)):
        fp = Path(fp_str)
        try:
            result = validate_file(fp, settings)
        except FlowlintError as e:
            print(f"[skip] {fp}: {e}")
            continue

        codes = sorted(set(result.codes()))
        rows.append({
            "id": fp.parent.name,
            "file": str(fp),
            "valid": result.valid,
            "passed": result.passed(),
            "errors": len(result.errors),
            "warnings": len(result.warnings),
            "suppressed": len(result.suppressed),
            "codes": ";".join(codes),
        })

        if dump_details:
            write_json(fp.with_name("flowlint_detail.json"), result.to_dict())

    out.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows, columns=["id", "file", "valid", "passed", "errors", "warnings", "suppressed", "codes"]).to_csv(out, index=False)
    print(f"[ok] wrote {out} ({len(rows)} workflows)")


@app.command("lint-docs")
def lint_docs_cmd(
    root: Path = typer.Argument(Path("."), exists=True, file_okay=False, help="Repository root to lint"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug info"),
):
    """
    Documentation checks: node type naming, placeholder-only *.example files,
    secret files covered by .gitignore. Exit code 1 on errors.
    """
    init_logger(level="DEBUG" if verbose else None)
    result = lint_docs(root)
    _print_result(result, verbose=verbose)
    if not result.valid:
        raise typer.Exit(code=1)


@app.command()
def profiles():
    """
    List validation profiles and what they check.
    """
    for name, p in PROFILES.items():
        accepted = ", ".join(fp.value for fp in p.accept) or "-"
        print(f"{name}")
        print(f"  types={p.check_types} unknown={p.check_unknown} expressions={p.check_expressions} "
              f"credentials={p.check_credentials}")
        print(f"  warnings={p.emit_warnings} optional={p.optional_warnings} "
              f"fail_on_warnings={p.fail_on_warnings} accepts={accepted}")


if __name__ == "__main__":
    app()
