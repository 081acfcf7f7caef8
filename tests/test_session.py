from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from sheetfit.model.memory import MemoryWorkbook  # noqa: E402
from sheetfit.sizing import SpecMergedRegion, SpecSizingCapabilities  # noqa: E402
from sheetfit.sizing.session import derive_sizing_capabilities  # noqa: E402


@pytest.mark.parametrize(
    ("major_version", "b_legacy_format", "cfg_expected"),
    [
        (2, False, SpecSizingCapabilities(True, False, False)),
        (1, False, SpecSizingCapabilities(False, True, False)),
        (3, True, SpecSizingCapabilities(True, False, True)),
    ],
)
def test_derive_capabilities(make_measurer, major_version, b_legacy_format, cfg_expected) -> None:
    workbook = MemoryWorkbook(is_legacy_format=b_legacy_format)
    assert (
        derive_sizing_capabilities(make_measurer(major_version=major_version), workbook)
        == cfg_expected
    )


def test_merged_pixel_width_is_memoised(sheet, make_session) -> None:
    region = SpecMergedRegion(0, 0, 0, 2)
    session = make_session(sheet)

    assert session.get_merged_pixel_width(region) == pytest.approx(3 * 56)
    sheet.set_column_width(0, 0)
    # Column widths are fixed for the pass.
    assert session.get_merged_pixel_width(region) == pytest.approx(3 * 56)
    session.rebuild_merge_index()
    assert session.get_merged_pixel_width(region) == pytest.approx(2 * 56)


def test_rebuild_merge_index_picks_up_new_merges(sheet, make_session) -> None:
    sheet.set_cell(0, 0, "a")
    session = make_session(sheet)
    assert len(session.merge_index) == 0

    sheet.add_merged_region(SpecMergedRegion(0, 1, 0, 0))
    assert len(session.rebuild_merge_index()) == 1
    assert session.merge_index.is_merged(1, 0)


def test_block_assignment_stored_once(sheet, make_session) -> None:
    region = SpecMergedRegion(0, 1, 0, 0)
    sheet.set_cell(0, 0, "x" * 30)
    sheet.add_merged_region(region)
    session = make_session(sheet)

    assert session.get_block_assignment(region) is None
    session.rows.get_row_height(0, True)
    assignment = session.get_block_assignment(region)
    session.rows.get_row_height(1, True)

    assert assignment is not None
    assert session.get_block_assignment(region) is assignment


def test_default_char_width_from_font_zero(sheet, make_session, make_measurer) -> None:
    session = make_session(sheet, measurer_=make_measurer(char_width_px=6.2))
    assert session.default_char_width == 7
