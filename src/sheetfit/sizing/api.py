"""
Functional entry points of the sizing engine.

Each call opens a :class:`SizingSession` for the sheet involved unless one is
passed in. Reuse a session across calls of one pass: it keeps the merge index,
the merged-width memo and applied block assignments.
"""

import math

from .conf import DEFAULT_SIZING_OPTIONS
from .errors import FontResolutionError
from .font_cache import FontMetricsCache, get_shared_font_cache
from .merge_index import MergeIndex
from .protocols import (
    CellValueFormatter,
    CellView,
    FontView,
    RowView,
    SheetView,
    TextMeasurer,
    WorkbookView,
)
from .session import SizingSession, convert_font_descriptor
from .spec import SpecSizingOptions


def open_session(
    sheet: SheetView,
    *,
    session: SizingSession | None = None,
    measurer: TextMeasurer | None = None,
    font_cache: FontMetricsCache | None = None,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> SizingSession:
    if session is not None:
        return session if session.sheet is sheet else session.for_sheet(sheet)
    return SizingSession(sheet, measurer=measurer, font_cache=font_cache, options=options)


def _resolve_font_cache(
    measurer: TextMeasurer | None,
    font_cache: FontMetricsCache | None,
    options: SpecSizingOptions,
) -> FontMetricsCache:
    if font_cache is not None:
        return font_cache
    if measurer is None:
        from ..measure import get_default_text_measurer

        measurer = get_default_text_measurer()
    return get_shared_font_cache(measurer, options=options)


################################################################################
# #region Rows


def get_row_height(
    sheet: SheetView,
    row_idx: int,
    use_merged_cells: bool,
    *,
    session: SizingSession | None = None,
    measurer: TextMeasurer | None = None,
    font_cache: FontMetricsCache | None = None,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> float:
    """Points row ``row_idx`` needs (-1 if the row is missing)."""
    return open_session(
        sheet, session=session, measurer=measurer, font_cache=font_cache, options=options
    ).rows.get_row_height(row_idx, use_merged_cells)


def get_row_cells_height(
    row: RowView | None,
    use_merged_cells: bool,
    col_first: int | None = None,
    col_last: int | None = None,
    *,
    session: SizingSession | None = None,
    measurer: TextMeasurer | None = None,
    font_cache: FontMetricsCache | None = None,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> float:
    """Largest cell height on ``row`` in device pixels."""
    if row is None:
        return 0.0 if col_first is not None or col_last is not None else -1.0
    return open_session(
        row.sheet, session=session, measurer=measurer, font_cache=font_cache, options=options
    ).rows.get_row_cells_height(row.row_num, use_merged_cells, col_first, col_last)


# #endregion
################################################################################
# #region Columns


def get_column_width(
    sheet: SheetView,
    col: int,
    use_merged_cells: bool,
    row_first: int | None = None,
    row_last: int | None = None,
    rows_max: int = 0,
    *,
    session: SizingSession | None = None,
    measurer: TextMeasurer | None = None,
    font_cache: FontMetricsCache | None = None,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> float:
    """Width column ``col`` needs in reference-char units (-1 if empty)."""
    return open_session(
        sheet, session=session, measurer=measurer, font_cache=font_cache, options=options
    ).columns.get_column_width(col, use_merged_cells, row_first, row_last, rows_max)


def get_default_char_width(
    workbook: WorkbookView,
    *,
    measurer: TextMeasurer | None = None,
    font_cache: FontMetricsCache | None = None,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> int:
    """Pixel width of ``'0'`` in the workbook's default font (font index 0)."""
    cfg_metrics = _resolve_font_cache(measurer, font_cache, options).resolve(
        convert_font_descriptor(workbook.get_font_at(0))
    )
    return max(1, math.ceil(cfg_metrics.reference_char_width))


def can_compute_column_width(
    font: FontView,
    *,
    measurer: TextMeasurer | None = None,
    font_cache: FontMetricsCache | None = None,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> bool:
    """Whether ``font`` (or a fallback for it) can be measured."""
    try:
        _resolve_font_cache(measurer, font_cache, options).resolve(
            convert_font_descriptor(font)
        )
    except FontResolutionError:
        return False
    return True


# #endregion
################################################################################
# #region Cells


def get_cell_height(
    cell: CellView | None,
    use_merged_cells: bool,
    *,
    session: SizingSession | None = None,
    measurer: TextMeasurer | None = None,
    font_cache: FontMetricsCache | None = None,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> float:
    """Device-pixel height ``cell`` needs (0 for a missing cell)."""
    if cell is None:
        return 0.0
    return open_session(
        cell.sheet, session=session, measurer=measurer, font_cache=font_cache, options=options
    ).cells.measure_cell_height(cell, use_merged_cells)


def get_cell_width(
    cell: CellView | None,
    default_char_width: float,
    formatter: CellValueFormatter | None = None,
    use_merged_cells: bool = False,
    *,
    session: SizingSession | None = None,
    measurer: TextMeasurer | None = None,
    font_cache: FontMetricsCache | None = None,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> float:
    """Width of ``cell`` in units of ``default_char_width`` (-1 if empty/skipped)."""
    if cell is None:
        return -1.0
    return open_session(
        cell.sheet, session=session, measurer=measurer, font_cache=font_cache, options=options
    ).cells.measure_cell_width(cell, default_char_width, formatter, use_merged_cells)


def get_cell_font_char_width(
    cell: CellView | None,
    *,
    session: SizingSession | None = None,
    measurer: TextMeasurer | None = None,
    font_cache: FontMetricsCache | None = None,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> int:
    """Pixel width of ``'0'`` in the cell's own font (0 for a missing cell)."""
    if cell is None:
        return 0
    return open_session(
        cell.sheet, session=session, measurer=measurer, font_cache=font_cache, options=options
    ).cells.cell_font_char_width(cell)


def get_cell_with_merges(
    sheet: SheetView,
    row_idx: int,
    col_idx: int,
    *,
    merge_index: MergeIndex | None = None,
) -> CellView | None:
    """
    The cell displayed at ``(row_idx, col_idx)``.

    A stored cell is returned as is; an empty position inside a merged region
    resolves to the region's top-left cell; anything else gives ``None``.
    """
    row = sheet.get_row(row_idx)
    if row is not None and (cell := row.get_cell(col_idx)) is not None:
        return cell

    if merge_index is None:
        merge_index = MergeIndex(sheet.merged_regions)
    region = merge_index.try_get_region(row_idx, col_idx)
    if region is None:
        return None
    row_top = sheet.get_row(region.row_first)
    return None if row_top is None else row_top.get_cell(region.col_first)


# #endregion
################################################################################
