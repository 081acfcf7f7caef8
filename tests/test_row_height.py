from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from sheetfit.model.memory import MemoryCellStyle  # noqa: E402
from sheetfit.sizing import (  # noqa: E402
    InvalidRangeError,
    SpecMergedRegion,
    apportion_block_height,
)

STYLE_WRAP = MemoryCellStyle(wrap_text=True)

################################################################################
# #region Apportionment


def test_apportion_single_content_row_gives_remainder_to_empty_row() -> None:
    assert apportion_block_height(
        total_points=40.0,
        bases_points=(10.0, 15.0),
        has_content=(True, False),
        default_points=15.0,
    ) == (10.0, 30.0)


def test_apportion_empty_block_splits_evenly() -> None:
    tup_assigned = apportion_block_height(
        total_points=40.0,
        bases_points=(15.0, 15.0),
        has_content=(False, False),
        default_points=15.0,
    )
    assert tup_assigned == (20.0, 20.0)
    assert sum(tup_assigned) >= 40.0


def test_apportion_small_empty_block_keeps_default() -> None:
    assert apportion_block_height(
        total_points=25.0,
        bases_points=(15.0, 15.0),
        has_content=(False, False),
        default_points=15.0,
    ) == (15.0, 15.0)


def test_apportion_remainder_split_over_empty_rows() -> None:
    tup_assigned = apportion_block_height(
        total_points=60.0,
        bases_points=(12.0, 15.0, 15.0),
        has_content=(True, False, False),
        default_points=15.0,
    )
    assert tup_assigned == (12.0, 24.0, 24.0)
    assert sum(tup_assigned[1:]) == pytest.approx(60.0 - 12.0)


def test_apportion_full_block_grows_first_tallest_row() -> None:
    assert apportion_block_height(
        total_points=70.0,
        bases_points=(10.0, 20.0, 20.0),
        has_content=(True, True, True),
        default_points=15.0,
    ) == (10.0, 40.0, 20.0)


def test_apportion_content_taller_than_block_is_kept() -> None:
    assert apportion_block_height(
        total_points=20.0,
        bases_points=(30.0, 15.0),
        has_content=(True, False),
        default_points=15.0,
    ) == (30.0, 15.0)


# #endregion
################################################################################
# #region RowHeight


@pytest.fixture
def make_unit_session(make_session, make_measurer, options_unit_scale):
    def _make(sheet):
        return make_session(
            sheet,
            measurer_=make_measurer(line_height_px=10.0),
            options=options_unit_scale,
        )

    return _make


def _build_vertical_merge(sheet, region: SpecMergedRegion) -> None:
    # Row 0 holds a 10pt cell; the merged text needs 4 lines (40pt) in 64px.
    sheet.set_cell(0, 0, "a")
    sheet.set_cell(0, 1, "x" * 30, STYLE_WRAP)
    for _row_idx in range(1, region.row_last + 1):
        sheet.get_row(_row_idx) or sheet.create_row(_row_idx)
    sheet.add_merged_region(region)


def test_vertical_merge_scenario(sheet, make_unit_session) -> None:
    region = SpecMergedRegion(0, 1, 1, 1)
    _build_vertical_merge(sheet, region)
    session = make_unit_session(sheet)

    assignment = session.rows.plan_block_assignment(region)
    assert assignment.total_points == 40.0
    assert assignment.bases_points == (10.0, 15.0)
    assert assignment.has_content == (True, False)

    assert session.rows.get_row_height(1, True) == 30.0
    assert session.rows.get_row_height(0, True) == 10.0
    assert sheet.get_row(1).height_points == 30.0
    # Write-back never lowers a row below its current (default) height.
    assert sheet.get_row(0).height_points == 15.0


def test_vertical_merge_apportionment_is_idempotent(sheet, make_unit_session) -> None:
    _build_vertical_merge(sheet, SpecMergedRegion(0, 1, 1, 1))
    session = make_unit_session(sheet)

    n_first = session.rows.get_row_height(1, True)
    n_second = session.rows.get_row_height(1, True)
    n_fresh = make_unit_session(sheet).rows.get_row_height(1, True)

    assert n_first == n_second == n_fresh == 30.0
    assert sheet.get_row(1).height_points == 30.0


def test_vertical_merge_creates_missing_rows(sheet, make_unit_session) -> None:
    sheet.set_cell(0, 0, "x" * 100)
    sheet.add_merged_region(SpecMergedRegion(0, 2, 0, 0))
    session = make_unit_session(sheet)

    # 700px of text over 64px: 11 lines, 110pt over three empty rows.
    assert session.rows.get_row_height(0, True) == pytest.approx(110.0 / 3)
    assert sheet.get_row(2).height_points == pytest.approx(110.0 / 3)


@pytest.mark.parametrize(
    "region",
    [
        SpecMergedRegion(0, 1, 1, 1),
        SpecMergedRegion(0, 0, 1, 3),
        SpecMergedRegion(0, 3, 1, 2),
    ],
)
def test_ignoring_merges_is_independent_of_merge_shape(
    sheet, make_unit_session, region
) -> None:
    _build_vertical_merge(sheet, region)
    session = make_unit_session(sheet)

    assert session.rows.get_row_height(0, False) == 10.0
    assert all(_row.height_points is None for _row in sheet.rows)


def test_horizontal_merge_raises_row_height(sheet, make_unit_session) -> None:
    sheet.set_cell(0, 0, "a")
    sheet.set_cell(0, 1, "x" * 30)
    sheet.add_merged_region(SpecMergedRegion(0, 0, 1, 2))
    session = make_unit_session(sheet)

    # 112px + 16px padding: 210px of text needs 2 lines.
    assert session.rows.get_row_height(0, True) == 20.0
    assert session.rows.get_row_height(0, False) == 10.0


def test_row_height_capped_at_format_maximum(sheet, make_unit_session) -> None:
    sheet.set_cell(0, 0, "y" * 1000)
    sheet.add_merged_region(SpecMergedRegion(0, 0, 0, 1))
    assert make_unit_session(sheet).rows.get_row_height(0, True) == 409.5


def test_missing_row_height(sheet, make_unit_session) -> None:
    assert make_unit_session(sheet).rows.get_row_height(5, True) == -1.0


def test_empty_row_takes_default_height(sheet, make_unit_session) -> None:
    sheet.create_row(0)
    assert make_unit_session(sheet).rows.get_row_height(0, True) == 15.0


# #endregion
################################################################################
# #region RowCellsHeight


def test_row_cells_height_in_pixels(sheet, make_session) -> None:
    sheet.set_cell(0, 0, "a")
    sheet.set_cell(0, 2, "a\nb\nc")
    rows = make_session(sheet).rows

    assert rows.get_row_cells_height(0, False) == 45.0
    assert rows.get_row_cells_height(0, False, 0, 1) == 15.0


def test_row_cells_height_missing_row(sheet, make_session) -> None:
    rows = make_session(sheet).rows
    assert rows.get_row_cells_height(3, False) == -1.0
    assert rows.get_row_cells_height(3, False, 0, 4) == 0.0


def test_row_cells_height_rejects_bad_ranges(sheet, make_session) -> None:
    rows = make_session(sheet).rows
    with pytest.raises(InvalidRangeError):
        rows.get_row_cells_height(0, False, 3, 1)
    with pytest.raises(InvalidRangeError):
        rows.get_row_cells_height(0, False, 3, None)


# #endregion
################################################################################
