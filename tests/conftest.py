from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from openpyxl import Workbook
from openpyxl.styles import Border, Font, PatternFill, Side

YELLOW_FILL = PatternFill(fill_type="solid", start_color="FFFF00", end_color="FFFF00")
THIN_LEFT = Border(left=Side(style="thin"))


def build_invoice_workbook(title: str = "Invoice") -> Workbook:
    """Seven-column invoice sheet with styles, widths and merges, plus a Summary sheet.

    Layout (row: content)::

        1: H1..H7 headers, A1 bold
        2: 1..7, C2 yellow fill, E2 number format 0.00
        3: B3 value, E3:F3 merged
        4: B4:C4 merged
        5: G5 styled (left border) but empty
    """
    wb = Workbook()
    ws = wb.active
    assert ws is not None
    ws.title = title

    for col in range(1, 8):
        ws.cell(row=1, column=col, value=f"H{col}")
        ws.cell(row=2, column=col, value=col)
        ws.column_dimensions[chr(ord("A") + col - 1)].width = 8 + 2 * col

    ws["A1"].font = Font(bold=True)
    ws["C2"].fill = YELLOW_FILL
    ws["E2"].number_format = "0.00"
    ws["B3"] = "b3"
    ws["E3"] = "merged"
    ws.merge_cells("E3:F3")
    ws["B4"] = "span"
    ws.merge_cells("B4:C4")
    ws["G5"].border = THIN_LEFT

    summary = wb.create_sheet("Summary")
    summary["A1"] = "total"
    summary["B1"] = 42
    return wb


@pytest.fixture
def invoice_workbook() -> Workbook:
    return build_invoice_workbook()


@pytest.fixture
def write_invoice_xlsx(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str = "invoice.xlsx", title: str = "Invoice") -> Path:
        path = tmp_path / name
        build_invoice_workbook(title).save(path)
        return path

    return _write


@pytest.fixture
def make_invoice_workbook() -> Callable[..., Workbook]:
    return build_invoice_workbook
