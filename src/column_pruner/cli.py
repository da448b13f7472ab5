"""CLI entry point for column-pruner."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table as RichTable

from column_pruner import __version__
from column_pruner.config import PruneConfig, build_config
from column_pruner.io import load_workbook_file, output_path_for, save_workbook_file
from column_pruner.models import PruneReport, RunManifest
from column_pruner.report import write_manifest, write_prune_report
from column_pruner.utils import plural, sha256_file, utcnow_iso
from column_pruner.workbook import prune_workbook

app = typer.Typer(
    name="cprune",
    help="column-pruner — Delete configured columns from workbook sheets, keeping their formatting.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {msg}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"column-pruner v{__version__}")
        raise typer.Exit()


def _write_manifest(
    out_dir: Path,
    input_file: Path,
    run_id: str,
    created_at: str,
    report: PruneReport,
    *,
    output_path: Path | None = None,
    status: str = "success",
    error_code: int | None = None,
    error_message: str = "",
) -> Path:
    sha256 = ""
    try:
        sha256 = sha256_file(input_file)
    except OSError:
        pass

    manifest = RunManifest(
        run_id=run_id,
        version=__version__,
        input_path=str(input_file.resolve()),
        output_path=str(output_path.resolve()) if output_path else "",
        created_at_utc=created_at,
        sheets_pruned=len(report.sheets),
        sheets_skipped=len(report.skipped),
        sha256=sha256,
        status=status,
        error_code=error_code,
        error_message=error_message,
    )
    return write_manifest(out_dir, manifest)


def _fail(
    out_dir: Path,
    input_file: Path,
    run_id: str,
    created_at: str,
    *,
    message: str,
    error_code: int = 2,
    report: PruneReport | None = None,
) -> NoReturn:
    """Write failure artifacts, print *message* and exit with *error_code*."""
    if report is None:
        report = PruneReport()
    report.warnings.append(message)
    report_path = write_prune_report(out_dir, report)
    manifest_path = _write_manifest(
        out_dir,
        input_file,
        run_id,
        created_at,
        report,
        status="failed",
        error_code=error_code,
        error_message=message,
    )
    _err(message)
    console.print(f"  Report   -> {report_path}")
    console.print(f"  Manifest -> {manifest_path}")
    raise typer.Exit(code=error_code)


def _results_table(report: PruneReport, title: str) -> RichTable:
    tbl = RichTable(title=title, show_lines=True)
    tbl.add_column("Sheet", style="bold")
    tbl.add_column("Deleted")
    tbl.add_column("Cols", justify="right")
    tbl.add_column("Merges kept/dropped", justify="right")
    tbl.add_column("Styles", justify="right")

    for result in report.sheets:
        tbl.add_row(
            result.sheet,
            ", ".join(result.deleted_columns) or "[dim]none[/dim]",
            f"{result.columns_before} -> {result.columns_after}",
            f"{result.merges_kept}/{result.merges_dropped}",
            str(result.styles_carried),
        )
    for name in report.skipped:
        tbl.add_row(name, "[yellow]sheet not found[/yellow]", "-", "-", "-")
    return tbl


def _describe_config(config: PruneConfig) -> list[str]:
    return [
        f"{directive.sheet}: {', '.join(directive.labels)}" for directive in config
    ]


# ── Callbacks ────────────────────────────────────────────────────


@app.callback()
def main(
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """column-pruner CLI."""


# ── run command ──────────────────────────────────────────────────


@app.command()
def run(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path to the .xlsx workbook.",
        exists=True, readable=True,
    ),
    out_dir: Path = typer.Option(
        Path("output"), "--out-dir", "-o",
        help="Output directory for the processed workbook + report + manifest.",
    ),
    drops: list[str] | None = typer.Option(
        None, "--drop", "-d",
        help="Directive sheet=COLUMNS, e.g. --drop invoice=G,K,AC (overrides profile/defaults).",
    ),
    profile: Path | None = typer.Option(
        None, "--profile",
        help="Profile file with one sheet=COLUMNS line per sheet.",
    ),
    no_defaults: bool = typer.Option(
        False, "--no-defaults",
        help="Ignore the built-in invoice/note directives.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress informational output; still writes all artifacts.",
    ),
) -> None:
    """Delete the configured columns and write processed_<input name>."""
    echo = _printer(quiet)
    created_at = utcnow_iso()
    run_id = created_at
    out_dir.mkdir(parents=True, exist_ok=True)
    try:
        config = build_config(
            use_defaults=not no_defaults, profile=profile, directives=drops
        )
    except ValueError as exc:
        _fail(out_dir, input_file, run_id, created_at, message=str(exc))

    if not config:
        _fail(
            out_dir, input_file, run_id, created_at,
            message="No directives configured. Use --drop sheet=COLUMNS or --profile.",
        )

    if not quiet:
        console.print(Panel(
            f"[bold]column-pruner[/bold] v{__version__}\n"
            f"Input:  {input_file}\nOutput: {out_dir}",
            title="Prune Start", border_style="blue",
        ))
        if profile:
            console.print(f"  Using profile: {profile}")
        for line in _describe_config(config):
            console.print(f"  {line}")

    # ── Load ─────────────────────────────────────────────────────
    echo("[blue]>[/blue] Loading workbook …")
    try:
        wb = load_workbook_file(input_file)
    except (FileNotFoundError, ValueError, OSError) as exc:
        _fail(out_dir, input_file, run_id, created_at, message=str(exc))

    echo(f"  {plural(len(wb.sheetnames), 'sheet')}: {', '.join(wb.sheetnames)}")

    output_path = output_path_for(input_file, out_dir)
    report = PruneReport()
    try:
        # ── Prune ────────────────────────────────────────────────
        echo("[blue]>[/blue] Pruning columns …")
        report = prune_workbook(wb, config)
        if not quiet:
            for w in report.warnings:
                console.print(f"  [yellow]![/yellow] {w}")
            console.print(_results_table(report, "Pruned Sheets"))

        # ── Write ────────────────────────────────────────────────
        echo(f"[blue]>[/blue] Writing {output_path.name} …")
        save_workbook_file(wb, output_path)
        echo(f"  Workbook -> {output_path}")

        report_path = write_prune_report(out_dir, report)
        echo(f"  Report   -> {report_path}")
        manifest_path = _write_manifest(
            out_dir, input_file, run_id, created_at, report, output_path=output_path,
        )
        echo(f"  Manifest -> {manifest_path}")

        if not quiet:
            console.print(Panel(
                f"[green]Done[/green] — {plural(report.columns_deleted, 'column')} removed "
                f"from {plural(len(report.sheets), 'sheet')} -> {output_path}",
                title="Prune Complete", border_style="green",
            ))
    except typer.Exit:
        raise
    except Exception as exc:
        _fail(
            out_dir, input_file, run_id, created_at,
            message=f"Unexpected internal error: {exc}",
            error_code=1,
            report=report,
        )


# ── check command ────────────────────────────────────────────────


@app.command()
def check(
    input_file: Path = typer.Option(
        ..., "--input", "-i",
        help="Path to the .xlsx workbook.",
        exists=True, readable=True,
    ),
    out_dir: Path = typer.Option(
        Path("output"), "--out-dir", "-o",
        help="Output directory for report + manifest.",
    ),
    drops: list[str] | None = typer.Option(
        None, "--drop", "-d",
        help="Directive sheet=COLUMNS, e.g. --drop invoice=G,K,AC.",
    ),
    profile: Path | None = typer.Option(
        None, "--profile",
        help="Profile file with one sheet=COLUMNS line per sheet.",
    ),
    no_defaults: bool = typer.Option(
        False, "--no-defaults",
        help="Ignore the built-in invoice/note directives.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress informational output; still writes report + manifest.",
    ),
) -> None:
    """Show what `run` would delete without writing a workbook.

    Writes prune_report.json + run_manifest.json only.
    Exit 0 = at least one sheet matched, exit 2 = config error or nothing to prune.
    """
    created_at = utcnow_iso()
    run_id = created_at
    out_dir.mkdir(parents=True, exist_ok=True)
    try:
        config = build_config(
            use_defaults=not no_defaults, profile=profile, directives=drops
        )
    except ValueError as exc:
        _fail(out_dir, input_file, run_id, created_at, message=str(exc))

    if not quiet:
        console.print(Panel(
            f"[bold]column-pruner[/bold] v{__version__}  [dim]check mode[/dim]\n"
            f"Input: {input_file}",
            title="Check", border_style="cyan",
        ))

    try:
        wb = load_workbook_file(input_file)
    except (FileNotFoundError, ValueError, OSError) as exc:
        _fail(out_dir, input_file, run_id, created_at, message=str(exc))

    report = PruneReport()
    try:
        report = prune_workbook(wb, config, dry_run=True)

        report_path = write_prune_report(out_dir, report)
        status = "success"
        error_code: int | None = None
        error_message = ""
        if not report.sheets:
            status = "failed"
            error_code = 2
            error_message = "No configured sheet found in workbook"
        manifest_path = _write_manifest(
            out_dir,
            input_file,
            run_id,
            created_at,
            report,
            status=status,
            error_code=error_code,
            error_message=error_message,
        )

        if not quiet:
            for w in report.warnings:
                console.print(f"  [yellow]![/yellow] {w}")
            console.print(_results_table(report, "Planned Deletions"))
        console.print(f"  Report   -> {report_path}")
        console.print(f"  Manifest -> {manifest_path}")

        if not report.sheets:
            _err(f"{error_message}. Sheets present: {', '.join(wb.sheetnames)}")
            raise typer.Exit(code=2)
    except typer.Exit:
        raise
    except Exception as exc:
        _fail(
            out_dir, input_file, run_id, created_at,
            message=f"Unexpected internal error: {exc}",
            error_code=1,
            report=report,
        )
