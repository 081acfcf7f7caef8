from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from sheetfit.model.memory import MemoryFont  # noqa: E402
from sheetfit.sizing import (  # noqa: E402
    SpecMergedRegion,
    can_compute_column_width,
    get_cell_font_char_width,
    get_cell_height,
    get_cell_width,
    get_cell_with_merges,
    get_column_width,
    get_default_char_width,
    get_row_cells_height,
    get_row_height,
    open_session,
)


def test_functions_share_an_explicit_session(sheet, make_session) -> None:
    cell = sheet.set_cell(0, 0, "abc")
    session = make_session(sheet)

    assert get_cell_height(cell, False, session=session) == 15.0
    assert get_cell_width(cell, 7, session=session) == pytest.approx((21 + 8) / 7)
    assert get_cell_font_char_width(cell, session=session) == 7
    assert get_column_width(sheet, 0, False, session=session) == pytest.approx(29 / 7)
    assert get_row_height(sheet, 0, False, session=session) == pytest.approx(
        15 * 72 / 144 * 1.33
    )
    assert get_row_cells_height(sheet.get_row(0), False, session=session) == 15.0


def test_functions_accept_a_measurer(sheet, measurer) -> None:
    sheet.set_cell(0, 0, "abc")
    assert get_column_width(sheet, 0, False, measurer=measurer) == pytest.approx(29 / 7)


def test_missing_inputs(sheet, measurer) -> None:
    assert get_cell_height(None, True, measurer=measurer) == 0.0
    assert get_cell_width(None, 7, measurer=measurer) == -1.0
    assert get_cell_font_char_width(None, measurer=measurer) == 0
    assert get_row_cells_height(None, False, measurer=measurer) == -1.0
    assert get_row_cells_height(None, False, 0, 3, measurer=measurer) == 0.0


def test_open_session_rebinds_to_other_sheet(workbook, make_session) -> None:
    sheet_first = workbook.create_sheet("First")
    sheet_second = workbook.create_sheet("Second")
    session = make_session(sheet_first)

    assert open_session(sheet_first, session=session) is session
    session_other = open_session(sheet_second, session=session)
    assert session_other.sheet is sheet_second
    assert session_other.font_cache is session.font_cache


def test_default_char_width(workbook, measurer) -> None:
    assert get_default_char_width(workbook, measurer=measurer) == 7


def test_can_compute_column_width(make_measurer) -> None:
    font = MemoryFont(name="Calibri", height_in_points=11.0)
    assert can_compute_column_width(font, measurer=make_measurer())
    assert not can_compute_column_width(font, measurer=make_measurer(families=()))


def test_get_cell_with_merges(sheet) -> None:
    cell_top_left = sheet.set_cell(2, 1, "merged")
    cell_plain = sheet.set_cell(0, 0, "plain")
    sheet.add_merged_region(SpecMergedRegion(2, 3, 1, 2))

    assert get_cell_with_merges(sheet, 0, 0) is cell_plain
    assert get_cell_with_merges(sheet, 3, 2) is cell_top_left
    assert get_cell_with_merges(sheet, 5, 5) is None
