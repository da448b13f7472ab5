"""Data models used across the package."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from numbers import Integral
from typing import Any


def _to_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return result


def _to_string_list(values: Sequence[Any] | None, field_name: str) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        raise TypeError(f"{field_name} must be a sequence of strings")
    normalized: list[str] = []
    for item in values:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} items must be strings")
        normalized.append(item)
    return normalized


# ── Sheet values ─────────────────────────────────────────────────


@dataclass(frozen=True)
class MergeRange:
    """Rectangular merged region, zero-based and inclusive on both ends."""

    min_row: int
    min_col: int
    max_row: int
    max_col: int

    def __post_init__(self) -> None:
        for name in ("min_row", "min_col", "max_row", "max_col"):
            _to_non_negative_int(getattr(self, name), name)
        if self.max_row < self.min_row:
            raise ValueError("max_row must be >= min_row")
        if self.max_col < self.min_col:
            raise ValueError("max_col must be >= min_col")


Address = tuple[int, int]


@dataclass
class SheetData:
    """Plain-value snapshot of one worksheet.

    ``rows`` is the dense row-major grid of the used range. Grid row ``i``
    sits at absolute row ``first_row + i``; grid columns are absolute, so
    column ``0`` is always ``A``. ``styles`` and ``data_types`` are keyed by
    absolute ``(row, col)``; styles are opaque descriptors, data types the
    openpyxl cell type codes (``s``, ``n``, ``f``, ``e``, ...) of non-empty
    cells. ``hidden_columns`` holds the sorted indices of hidden columns.
    """

    title: str = ""
    rows: list[list[Any]] = field(default_factory=list)
    first_row: int = 0
    column_widths: list[float | None] = field(default_factory=list)
    merges: list[MergeRange] = field(default_factory=list)
    styles: dict[Address, Any] = field(default_factory=dict)
    data_types: dict[Address, str] = field(default_factory=dict)
    hidden_columns: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.first_row = _to_non_negative_int(self.first_row, "first_row")

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_cols(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    def contains(self, row: int, col: int) -> bool:
        """True if absolute ``(row, col)`` falls inside the grid."""
        grid_row = row - self.first_row
        if grid_row < 0 or grid_row >= len(self.rows):
            return False
        return 0 <= col < len(self.rows[grid_row])


# ── Run reporting ────────────────────────────────────────────────


@dataclass
class SheetPruneResult:
    """What happened to a single sheet."""

    sheet: str = ""
    deleted_columns: list[str] = field(default_factory=list)
    ignored_columns: list[str] = field(default_factory=list)
    columns_before: int = 0
    columns_after: int = 0
    merges_kept: int = 0
    merges_dropped: int = 0
    styles_carried: int = 0

    def __post_init__(self) -> None:
        self.deleted_columns = _to_string_list(self.deleted_columns, "deleted_columns")
        self.ignored_columns = _to_string_list(self.ignored_columns, "ignored_columns")
        for name in (
            "columns_before", "columns_after", "merges_kept", "merges_dropped", "styles_carried",
        ):
            setattr(self, name, _to_non_negative_int(getattr(self, name), name))
        if self.columns_after > self.columns_before:
            raise ValueError("columns_after must be <= columns_before")

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheet": self.sheet,
            "deleted_columns": list(self.deleted_columns),
            "ignored_columns": list(self.ignored_columns),
            "columns_before": self.columns_before,
            "columns_after": self.columns_after,
            "merges_kept": self.merges_kept,
            "merges_dropped": self.merges_dropped,
            "styles_carried": self.styles_carried,
        }


@dataclass
class PruneReport:
    """Report emitted alongside every run.

    ``skipped`` lists configured sheet names that matched no worksheet.
    """

    sheets: list[SheetPruneResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.skipped = _to_string_list(self.skipped, "skipped")
        self.warnings = _to_string_list(self.warnings, "warnings")
        for result in self.sheets:
            if not isinstance(result, SheetPruneResult):
                raise TypeError("sheets items must be SheetPruneResult")

    @property
    def columns_deleted(self) -> int:
        return sum(r.columns_before - r.columns_after for r in self.sheets)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheets": [r.to_dict() for r in self.sheets],
            "skipped": list(self.skipped),
            "warnings": list(self.warnings),
            "columns_deleted": self.columns_deleted,
        }


@dataclass
class RunManifest:
    """Audit-trail manifest for a single run."""

    tool: str = "column-pruner"
    run_id: str = ""
    version: str = ""
    input_path: str = ""
    output_path: str = ""
    created_at_utc: str = ""
    sheets_pruned: int = 0
    sheets_skipped: int = 0
    sha256: str = ""
    status: str = "success"
    error_code: int | None = None
    error_message: str = ""

    def __post_init__(self) -> None:
        self.sheets_pruned = _to_non_negative_int(self.sheets_pruned, "sheets_pruned")
        self.sheets_skipped = _to_non_negative_int(self.sheets_skipped, "sheets_skipped")
        if self.status not in {"success", "failed"}:
            raise ValueError("status must be 'success' or 'failed'")

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "run_id": self.run_id,
            "version": self.version,
            "input_path": self.input_path,
            "output_path": self.output_path,
            "created_at_utc": self.created_at_utc,
            "sheets_pruned": self.sheets_pruned,
            "sheets_skipped": self.sheets_skipped,
            "sha256": self.sha256,
            "status": self.status,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }
