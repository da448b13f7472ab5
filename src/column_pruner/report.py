"""Run artifact persistence — prune report + manifest."""

from __future__ import annotations

from pathlib import Path

from column_pruner.io import write_json
from column_pruner.models import PruneReport, RunManifest

REPORT_NAME = "prune_report.json"
MANIFEST_NAME = "run_manifest.json"


def write_prune_report(out_dir: Path, report: PruneReport) -> Path:
    """Write ``prune_report.json`` into *out_dir* and return the path."""
    return write_json(Path(out_dir) / REPORT_NAME, report.to_dict())


def write_manifest(out_dir: Path, manifest: RunManifest) -> Path:
    """Write ``run_manifest.json`` into *out_dir* and return the path."""
    return write_json(Path(out_dir) / MANIFEST_NAME, manifest.to_dict())
