"""openpyxl adapter — worksheet <-> SheetData, sheet lookup and swap-in."""

from __future__ import annotations

from collections.abc import Iterable
from copy import copy

from openpyxl import Workbook
from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.utils.units import DEFAULT_COLUMN_WIDTH
from openpyxl.worksheet.worksheet import Worksheet

from column_pruner.config import PruneConfig
from column_pruner.models import MergeRange, PruneReport, SheetData
from column_pruner.pruner import prune_sheet

# ── Lookup ───────────────────────────────────────────────────────


def resolve_sheet_name(names: Iterable[str], key: str) -> str | None:
    """Return the first of *names* equal to *key* ignoring case, else ``None``."""
    wanted = key.strip().lower()
    for name in names:
        if name.lower() == wanted:
            return name
    return None


# ── Worksheet -> SheetData ───────────────────────────────────────


def _column_settings(ws: Worksheet) -> tuple[list[float | None], list[int]]:
    """Return explicit widths and hidden column indices of *ws*.

    openpyxl fills in ``DEFAULT_COLUMN_WIDTH`` for a ``<col>`` element that
    has no width, so that value counts as unset.
    """
    widths: dict[int, float] = {}
    hidden: set[int] = set()
    for letter, dim in ws.column_dimensions.items():
        start = dim.min or column_index_from_string(letter)
        end = dim.max or start
        for col in range(start - 1, end):
            if dim.width and dim.width != DEFAULT_COLUMN_WIDTH:
                widths[col] = float(dim.width)
            if dim.hidden:
                hidden.add(col)
    if not widths:
        return [], sorted(hidden)
    return [widths.get(idx) for idx in range(max(widths) + 1)], sorted(hidden)


def sheet_from_worksheet(ws: Worksheet) -> SheetData:
    """Snapshot values, cell types, styles, column settings and merges of *ws*.

    The grid spans the used rows and columns ``A`` through the last used
    column. Style descriptors are copies of each cell's ``StyleArray``, so
    they stay valid for any sheet of the same workbook.
    """
    widths, hidden = _column_settings(ws)
    sheet = SheetData(
        title=ws.title,
        first_row=ws.min_row - 1,
        column_widths=widths,
        hidden_columns=hidden,
    )
    for row in ws.iter_rows(
        min_row=ws.min_row, max_row=ws.max_row, min_col=1, max_col=ws.max_column
    ):
        values = []
        for cell in row:
            values.append(cell.value)
            if cell.value is not None:
                sheet.data_types[(cell.row - 1, cell.column - 1)] = cell.data_type
            if cell.has_style:
                sheet.styles[(cell.row - 1, cell.column - 1)] = copy(cell._style)
        sheet.rows.append(values)

    for rng in ws.merged_cells.ranges:
        sheet.merges.append(
            MergeRange(
                min_row=rng.min_row - 1,
                min_col=rng.min_col - 1,
                max_row=rng.max_row - 1,
                max_col=rng.max_col - 1,
            )
        )
    return sheet


# ── SheetData -> Worksheet ───────────────────────────────────────


def _fill_worksheet(ws: Worksheet, sheet: SheetData) -> None:
    # Values before merging: merge_cells() turns covered cells read-only.
    for offset, values in enumerate(sheet.rows):
        row = sheet.first_row + offset + 1
        for col, value in enumerate(values, 1):
            if value is None:
                continue
            cell = ws.cell(row=row, column=col)
            data_type = sheet.data_types.get((row - 1, col - 1))
            if data_type is None:
                cell.value = value
            else:
                # Bypass type inference: text like "=x" or "#N/A" stays text.
                cell._value = value
                cell.data_type = data_type

    for merge in sheet.merges:
        ws.merge_cells(
            start_row=merge.min_row + 1,
            start_column=merge.min_col + 1,
            end_row=merge.max_row + 1,
            end_column=merge.max_col + 1,
        )

    for (row, col), style in sheet.styles.items():
        ws.cell(row=row + 1, column=col + 1)._style = copy(style)

    for idx, width in enumerate(sheet.column_widths):
        if width is not None:
            ws.column_dimensions[get_column_letter(idx + 1)].width = width

    for idx in sheet.hidden_columns:
        ws.column_dimensions[get_column_letter(idx + 1)].hidden = True


def replace_worksheet(wb: Workbook, title: str, sheet: SheetData) -> Worksheet:
    """Swap worksheet *title* for one rebuilt from *sheet*.

    The new worksheet is built off to the side; if that fails it is removed
    again and *wb* is left as it was. Name, position, visibility and the
    active-sheet selection carry over.
    """
    old = wb[title]
    position = wb.index(old)
    was_active = wb.active is old

    new = wb.create_sheet()
    try:
        _fill_worksheet(new, sheet)
    except Exception:
        wb.remove(new)
        raise

    new.sheet_state = old.sheet_state
    wb.remove(old)
    wb.move_sheet(new, offset=position - wb.index(new))
    new.title = title
    if was_active:
        wb.active = position
    return new


# ── Workbook-level entry point ───────────────────────────────────


def prune_workbook(
    wb: Workbook, config: PruneConfig, *, dry_run: bool = False
) -> PruneReport:
    """Apply every directive of *config* to *wb*.

    Directives whose sheet is absent are skipped and listed in
    ``report.skipped``. With ``dry_run`` the results are computed but the
    workbook is left untouched.
    """
    report = PruneReport()
    for directive in config:
        title = resolve_sheet_name(wb.sheetnames, directive.sheet)
        if title is None:
            report.skipped.append(directive.sheet)
            report.warnings.append(f"Sheet {directive.sheet!r} not found; skipped")
            continue

        pruned, result = prune_sheet(sheet_from_worksheet(wb[title]), directive.indices)
        if not dry_run:
            replace_worksheet(wb, title, pruned)
        report.sheets.append(result)
        if result.ignored_columns:
            report.warnings.append(
                f"Sheet {title!r}: no cells in columns past the used range: "
                f"{', '.join(result.ignored_columns)} (column widths still shift)"
            )
    return report
