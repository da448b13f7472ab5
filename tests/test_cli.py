"""CLI integration smoke tests for column-pruner."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from openpyxl import load_workbook
from typer.testing import CliRunner

import column_pruner.cli as cli_mod
from column_pruner import __version__
from column_pruner.cli import app

runner = CliRunner()


def _read_json(path: Path) -> dict:  # type: ignore[type-arg]
    return json.loads(path.read_text(encoding="utf-8"))


def test_run_prunes_with_explicit_directive(
    write_invoice_xlsx: Callable[..., Path], tmp_path: Path
) -> None:
    xlsx = write_invoice_xlsx()
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        [
            "run", "--input", str(xlsx), "--out-dir", str(out_dir),
            "--no-defaults", "--drop", "invoice=B,D", "--quiet",
        ],
    )

    assert result.exit_code == 0
    processed = out_dir / "processed_invoice.xlsx"
    assert processed.exists()
    ws = load_workbook(processed)["Invoice"]
    assert [c.value for c in ws[1]] == ["H1", "H3", "H5", "H6", "H7"]
    assert {str(r) for r in ws.merged_cells.ranges} == {"C3:D3"}

    report = _read_json(out_dir / "prune_report.json")
    assert report["sheets"][0]["deleted_columns"] == ["B", "D"]
    assert report["columns_deleted"] == 2
    manifest = _read_json(out_dir / "run_manifest.json")
    assert manifest["status"] == "success"
    assert manifest["sheets_pruned"] == 1
    assert manifest["output_path"].endswith("processed_invoice.xlsx")
    assert len(manifest["sha256"]) == 64


def test_run_uses_default_directives_for_invoice_sheet(
    write_invoice_xlsx: Callable[..., Path], tmp_path: Path
) -> None:
    xlsx = write_invoice_xlsx(title="INVOICE")
    out_dir = tmp_path / "out"

    result = runner.invoke(app, ["run", "-i", str(xlsx), "-o", str(out_dir), "--quiet"])

    assert result.exit_code == 0
    # Default invoice directive deletes G (the 7th column) among others.
    ws = load_workbook(out_dir / "processed_invoice.xlsx")["INVOICE"]
    assert [c.value for c in ws[1]] == ["H1", "H2", "H3", "H4", "H5", "H6"]
    report = _read_json(out_dir / "prune_report.json")
    assert sorted(report["skipped"]) == ["invoice_ims", "note", "note_ims"]


def test_run_profile_overrides_defaults(
    write_invoice_xlsx: Callable[..., Path], tmp_path: Path
) -> None:
    xlsx = write_invoice_xlsx()
    profile = tmp_path / "profile.txt"
    profile.write_text("# only the first column\ninvoice=A\n", encoding="utf-8")
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        ["run", "-i", str(xlsx), "-o", str(out_dir), "--profile", str(profile), "--quiet"],
    )

    assert result.exit_code == 0
    ws = load_workbook(out_dir / "processed_invoice.xlsx")["Invoice"]
    assert ws["A1"].value == "H2"


def test_run_malformed_label_exits_2_with_failure_artifacts(
    write_invoice_xlsx: Callable[..., Path], tmp_path: Path
) -> None:
    xlsx = write_invoice_xlsx()
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        ["run", "-i", str(xlsx), "-o", str(out_dir), "--drop", "invoice=B,7", "--quiet"],
    )

    assert result.exit_code == 2
    assert "Invalid column label" in result.stdout
    assert not (out_dir / "processed_invoice.xlsx").exists()
    manifest = _read_json(out_dir / "run_manifest.json")
    assert manifest["status"] == "failed"
    assert manifest["error_code"] == 2
    report = _read_json(out_dir / "prune_report.json")
    assert any("Invalid column label" in w for w in report["warnings"])


def test_run_without_any_directive_exits_2(
    write_invoice_xlsx: Callable[..., Path], tmp_path: Path
) -> None:
    xlsx = write_invoice_xlsx()

    result = runner.invoke(
        app, ["run", "-i", str(xlsx), "-o", str(tmp_path / "out"), "--no-defaults", "--quiet"]
    )

    assert result.exit_code == 2
    assert "No directives configured" in result.stdout


def test_run_unsupported_input_exits_2(tmp_path: Path) -> None:
    csv_path = tmp_path / "data.csv"
    csv_path.write_text("a,b\n1,2\n", encoding="utf-8")
    out_dir = tmp_path / "out"

    result = runner.invoke(app, ["run", "-i", str(csv_path), "-o", str(out_dir), "--quiet"])

    assert result.exit_code == 2
    assert "Unsupported file type" in result.stdout
    assert _read_json(out_dir / "run_manifest.json")["status"] == "failed"


def test_run_missing_input_is_usage_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["run", "-i", str(tmp_path / "nope.xlsx")])

    assert result.exit_code == 2


def test_run_profile_not_found_error(
    write_invoice_xlsx: Callable[..., Path], tmp_path: Path
) -> None:
    xlsx = write_invoice_xlsx()

    result = runner.invoke(
        app,
        [
            "run", "-i", str(xlsx), "-o", str(tmp_path / "out"),
            "--profile", str(tmp_path / "nonexist.txt"), "--quiet",
        ],
    )

    assert result.exit_code == 2
    assert "Profile not found" in result.stdout


def test_run_unexpected_error_exits_1(
    monkeypatch: pytest.MonkeyPatch,
    write_invoice_xlsx: Callable[..., Path],
    tmp_path: Path,
) -> None:
    xlsx = write_invoice_xlsx()
    out_dir = tmp_path / "out"

    def _boom(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("kaboom")

    monkeypatch.setattr(cli_mod, "prune_workbook", _boom)

    result = runner.invoke(app, ["run", "-i", str(xlsx), "-o", str(out_dir), "--quiet"])

    assert result.exit_code == 1
    assert "Unexpected internal error: kaboom" in result.stdout
    manifest = _read_json(out_dir / "run_manifest.json")
    assert manifest["status"] == "failed"
    assert manifest["error_code"] == 1
    assert not (out_dir / "processed_invoice.xlsx").exists()


def test_run_nonquiet_shows_progress_panels(
    write_invoice_xlsx: Callable[..., Path], tmp_path: Path
) -> None:
    xlsx = write_invoice_xlsx()

    result = runner.invoke(
        app, ["run", "-i", str(xlsx), "-o", str(tmp_path / "out"), "--drop", "note=A"]
    )

    assert result.exit_code == 0
    assert "Prune Start" in result.stdout
    assert "Loading workbook" in result.stdout
    assert "Pruned Sheets" in result.stdout
    assert "sheet not found" in result.stdout
    assert "Prune Complete" in result.stdout


def test_check_reports_plan_without_writing_workbook(
    write_invoice_xlsx: Callable[..., Path], tmp_path: Path
) -> None:
    xlsx = write_invoice_xlsx()
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        ["check", "-i", str(xlsx), "-o", str(out_dir), "--no-defaults", "-d", "invoice=B,D"],
    )

    assert result.exit_code == 0
    assert "Planned Deletions" in result.stdout
    assert not (out_dir / "processed_invoice.xlsx").exists()
    report = _read_json(out_dir / "prune_report.json")
    assert report["sheets"][0]["columns_after"] == 5
    assert _read_json(out_dir / "run_manifest.json")["status"] == "success"


def test_check_without_matching_sheet_exits_2(
    write_invoice_xlsx: Callable[..., Path], tmp_path: Path
) -> None:
    xlsx = write_invoice_xlsx(title="Other")
    out_dir = tmp_path / "out"

    result = runner.invoke(app, ["check", "-i", str(xlsx), "-o", str(out_dir), "--quiet"])

    assert result.exit_code == 2
    assert "No configured sheet found" in result.stdout
    manifest = _read_json(out_dir / "run_manifest.json")
    assert manifest["status"] == "failed"
    assert manifest["sheets_skipped"] == 4


def test_version_flag_prints_and_exits() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "column-pruner" in result.stdout
    assert f"v{__version__}" in result.stdout
