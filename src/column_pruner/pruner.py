"""Column pruning — pure functions, no side effects.

The input :class:`SheetData` is never mutated; every call returns a fresh
sheet so the original stays readable while the replacement is built.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Sequence
from typing import Any

from column_pruner.columns import column_index_to_letter
from column_pruner.models import Address, MergeRange, SheetData, SheetPruneResult

# ── Coordinate helpers ───────────────────────────────────────────


def _normalize_indices(columns: Iterable[int]) -> list[int]:
    """Return *columns* deduplicated and sorted ascending."""
    unique: set[int] = set()
    for col in columns:
        if isinstance(col, bool) or not isinstance(col, int):
            raise TypeError("column indices must be integers")
        if col < 0:
            raise ValueError(f"column index must be >= 0, got {col}")
        unique.add(col)
    return sorted(unique)


def shift_column(col: int, deleted: Sequence[int]) -> int | None:
    """Return the new index of *col* once *deleted* (sorted) are gone.

    ``None`` if *col* itself is deleted.
    """
    pos = bisect_left(deleted, col)
    if pos < len(deleted) and deleted[pos] == col:
        return None
    return col - pos


def adjust_merge(merge: MergeRange, deleted: Sequence[int]) -> MergeRange | None:
    """Remap *merge* against the sorted *deleted* indices.

    A range whose column span (inclusive) contains a deleted column is
    dropped. Otherwise both bounds move left by the number of deleted
    columns below their original value.
    """
    start_pos = bisect_left(deleted, merge.min_col)
    if start_pos < len(deleted) and deleted[start_pos] <= merge.max_col:
        return None
    end_pos = bisect_left(deleted, merge.max_col)
    return MergeRange(
        min_row=merge.min_row,
        min_col=merge.min_col - start_pos,
        max_row=merge.max_row,
        max_col=merge.max_col - end_pos,
    )


def _prune_row(row: Sequence[Any], descending: Sequence[int]) -> list[Any]:
    pruned = list(row)
    # Highest index first so earlier splices don't shift pending ones.
    for idx in descending:
        if idx < len(pruned):
            del pruned[idx]
    return pruned


def _carry_cells(
    cells: dict[Address, Any], deleted: Sequence[int], pruned: SheetData
) -> dict[Address, Any]:
    carried: dict[Address, Any] = {}
    for (row, col), item in cells.items():
        new_col = shift_column(col, deleted)
        if new_col is not None and pruned.contains(row, new_col):
            carried[(row, new_col)] = item
    return carried


# ── Main pruning function ───────────────────────────────────────


def prune_sheet(
    sheet: SheetData, columns: Iterable[int]
) -> tuple[SheetData, SheetPruneResult]:
    """Remove *columns* (zero-based) from *sheet*.

    Returns ``(new_sheet, result)``. Values, cell types, styles, column
    widths, hidden flags and merge ranges of the retained columns are
    remapped to their new positions. Indices past the end of a row are
    ignored for that row; column settings past the used range still shift.
    """
    deleted = _normalize_indices(columns)
    descending = deleted[::-1]
    n_cols = sheet.n_cols

    # 1-3. Splice values and rebuild the grid
    pruned = SheetData(
        title=sheet.title,
        rows=[_prune_row(row, descending) for row in sheet.rows],
        first_row=sheet.first_row,
    )

    # 4. Styles and cell types follow their cell
    pruned.styles = _carry_cells(sheet.styles, deleted, pruned)
    pruned.data_types = _carry_cells(sheet.data_types, deleted, pruned)

    # 5. Column settings: drop deleted positions, keep order
    deleted_set = set(deleted)
    pruned.column_widths = [
        width for idx, width in enumerate(sheet.column_widths) if idx not in deleted_set
    ]
    pruned.hidden_columns = [
        new_col
        for new_col in (shift_column(col, deleted) for col in sheet.hidden_columns)
        if new_col is not None
    ]

    # 6. Merges from the original bounds
    dropped = 0
    for merge in sheet.merges:
        adjusted = adjust_merge(merge, deleted)
        if adjusted is None:
            dropped += 1
            continue
        pruned.merges.append(adjusted)

    result = SheetPruneResult(
        sheet=sheet.title,
        deleted_columns=[column_index_to_letter(c) for c in deleted if c < n_cols],
        ignored_columns=[column_index_to_letter(c) for c in deleted if c >= n_cols],
        columns_before=n_cols,
        columns_after=pruned.n_cols,
        merges_kept=len(pruned.merges),
        merges_dropped=dropped,
        styles_carried=len(pruned.styles),
    )
    return pruned, result
