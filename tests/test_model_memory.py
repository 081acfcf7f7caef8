from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from sheetfit.model.memory import MemoryFont  # noqa: E402
from sheetfit.sizing import EnumCellType  # noqa: E402


def test_rows_track_first_and_last(sheet) -> None:
    assert (sheet.first_row_num, sheet.last_row_num) == (-1, -1)
    sheet.set_cell(4, 0, "x")
    sheet.create_row(2)
    assert (sheet.first_row_num, sheet.last_row_num) == (2, 4)


def test_cells_are_ordered_and_typed(sheet) -> None:
    sheet.set_cell(0, 3, 1.5)
    sheet.set_cell(0, 1, True)
    cells = sheet.get_row(0).cells

    assert [_cell.column_index for _cell in cells] == [1, 3]
    assert [_cell.cell_type for _cell in cells] == [EnumCellType.BOOLEAN, EnumCellType.NUMERIC]
    assert cells[0].sheet is sheet
    assert cells[1].row_index == 0


def test_column_width_defaults(sheet) -> None:
    sheet.set_column_width(2, 3000)
    assert sheet.get_column_width(2) == 3000
    assert sheet.get_column_width(0) == 8 * 256


def test_fonts_are_registered(workbook) -> None:
    n_idx = workbook.add_font(MemoryFont(name="Arial", is_bold=True))
    assert n_idx == 1
    assert workbook.get_font_at(n_idx).is_bold
    assert workbook.get_font_at(0).name == "Calibri"


def test_negative_coordinates_rejected(sheet) -> None:
    with pytest.raises(ValueError):
        sheet.create_row(-1)
    with pytest.raises(ValueError):
        sheet.create_row(0).create_cell(-2)
