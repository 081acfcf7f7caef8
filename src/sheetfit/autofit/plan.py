from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from .._optional_deps import import_extra

if TYPE_CHECKING:
    import polars as pl

    from ..sizing.session import SizingSession

N_WIDTH_CELL_LIMIT = 255

################################################################################
# #region Specification


@dataclass(frozen=True, slots=True)
class SpecAutofitPolicy:
    """
    Bounds applied to measured column widths (reference-char units).

    ``rows_max`` caps how many rows below the first one are scanned per
    column; ``None`` scans every row. Row heights are never padded.
    """

    width_cell_min: int = 8
    width_cell_max: int = 60
    width_cell_padding: int = 2
    rows_max: int | None = 20_000
    use_merged_cells: bool = True


@dataclass(slots=True)
class SpecAutofitPlan:
    col_widths: dict[int, float] = field(default_factory=dict)
    row_heights: dict[int, float] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def warn(self, msg: str) -> None:
        logger.warning(msg)
        self.warnings.append(str(msg))

    def to_polars(self) -> pl.DataFrame:
        """One row per sized column/row: ``Kind``, ``Index``, ``Size``, ``Unit``."""
        pl = import_extra("polars", extra="xlsx", feature="Autofit plan report")
        l_records = [
            ("column", _col, _width, "chars") for _col, _width in self.col_widths.items()
        ] + [
            ("row", _row, _height, "points") for _row, _height in self.row_heights.items()
        ]
        return pl.DataFrame(
            l_records,
            schema={
                "Kind": pl.Utf8,
                "Index": pl.Int64,
                "Size": pl.Float64,
                "Unit": pl.Utf8,
            },
            orient="row",
        )


# #endregion
################################################################################
# #region Planning


def _collect_sheet_extent(session: SizingSession) -> tuple[list[int], list[int]]:
    sheet = session.sheet
    l_rows: list[int] = []
    n_col_last = -1
    if sheet.first_row_num >= 0:
        for _row_idx in range(sheet.first_row_num, sheet.last_row_num + 1):
            row_ = sheet.get_row(_row_idx)
            if row_ is None:
                continue
            l_rows.append(_row_idx)
            for _cell in row_.cells:
                n_col_last = max(n_col_last, _cell.column_index)
    for _region in session.merge_index.regions:
        n_col_last = max(n_col_last, _region.col_last)
    return list(range(n_col_last + 1)), l_rows


def plan_sheet_autofit(
    session: SizingSession,
    cols: Iterable[int] | None = None,
    rows: Iterable[int] | None = None,
    policy: SpecAutofitPolicy = SpecAutofitPolicy(),
) -> SpecAutofitPlan:
    """
    Measure the widths and heights a sheet needs.

    Columns whose cells are all empty and rows that do not exist are left
    out of the plan, so they keep their current size. Heights of vertical
    merges are written back to the document model while planning.

    Args:
        session: Sizing pass over the sheet.
        cols: 0-based columns to size. Defaults to every column holding a
            cell or a merged region.
        rows: 0-based rows to size. Defaults to every existing row.
        policy: Width bounds and scan limits.
    """
    l_cols_default, l_rows_default = _collect_sheet_extent(session)
    l_cols = l_cols_default if cols is None else list(cols)
    l_rows = l_rows_default if rows is None else list(rows)

    n_min = max(1, int(policy.width_cell_min))
    n_max = min(N_WIDTH_CELL_LIMIT, max(n_min, int(policy.width_cell_max)))
    n_pad = max(0, int(policy.width_cell_padding))
    n_rows_max = 0 if policy.rows_max is None else max(0, int(policy.rows_max))
    n_height_max = session.options.row_height_points_max

    plan = SpecAutofitPlan()
    for _col in l_cols:
        n_width_ = session.columns.get_column_width(
            _col, policy.use_merged_cells, rows_max=n_rows_max
        )
        if n_width_ < 0:
            continue
        if n_width_ + n_pad > n_max:
            plan.warn(f"Column {_col}: width {n_width_ + n_pad:.2f} capped at {n_max}.")
        plan.col_widths[_col] = min(n_max, max(n_min, n_width_ + n_pad))

    for _row_idx in l_rows:
        n_height_ = session.rows.get_row_height(_row_idx, policy.use_merged_cells)
        if n_height_ < 0:
            continue
        if n_height_ >= n_height_max:
            plan.warn(f"Row {_row_idx}: height capped at {n_height_max}pt.")
        plan.row_heights[_row_idx] = n_height_

    logger.debug(
        f"Autofit plan: {len(plan.col_widths)} columns, {len(plan.row_heights)} rows, "
        f"{len(plan.warnings)} warnings"
    )
    return plan


# #endregion
################################################################################
