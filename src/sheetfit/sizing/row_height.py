from typing import TYPE_CHECKING

from .errors import InvalidRangeError
from .protocols import RowView
from .spec import SpecBlockAssignment, SpecMergedRegion
from .value_text import check_cell_has_content, convert_cell_height_text

if TYPE_CHECKING:
    from .session import SizingSession


def apportion_block_height(
    *,
    total_points: float,
    bases_points: tuple[float, ...],
    has_content: tuple[bool, ...],
    default_points: float,
) -> tuple[float, ...]:
    """
    Split the height a vertical merge needs over the rows it spans.

    - No row has content of its own: split ``total_points`` evenly, never
      below the default row height or a row's own base.
    - Some rows have content: those rows keep their base and the remainder
      ``total - sum(content bases)`` goes to the empty rows evenly (never
      below the default). When every row has content, the whole remainder is
      added to the anchor row, the first row with the largest base.

    Examples:
        >>> apportion_block_height(
        ...     total_points=40.0,
        ...     bases_points=(10.0, 15.0),
        ...     has_content=(True, False),
        ...     default_points=15.0,
        ... )
        (10.0, 30.0)
    """
    n_rows = len(bases_points)
    if n_rows == 0:
        return ()

    if not any(has_content):
        n_even = max(default_points, total_points / n_rows)
        return tuple(max(_base, n_even) for _base in bases_points)

    l_assigned = [
        _base if _has else default_points
        for _base, _has in zip(bases_points, has_content)
    ]
    n_sum_content = sum(
        _base for _base, _has in zip(bases_points, has_content) if _has
    )
    n_empty = n_rows - sum(has_content)
    n_remainder = max(0.0, total_points - n_sum_content)
    if n_remainder <= 0:
        return tuple(l_assigned)

    if n_empty > 0:
        n_per_empty = max(default_points, n_remainder / n_empty)
        for _idx, _has in enumerate(has_content):
            if not _has:
                l_assigned[_idx] = max(l_assigned[_idx], n_per_empty)
    else:
        n_idx_anchor = max(range(n_rows), key=lambda i: (bases_points[i], -i))
        l_assigned[n_idx_anchor] = bases_points[n_idx_anchor] + n_remainder
    return tuple(l_assigned)


class RowHeightResolver:
    """
    Row heights in points.

    With merges honoured, a row must fit its own non-merged cells, every
    horizontal merge on it, and its share of every vertical merge it belongs
    to. Vertical merges are apportioned once per session and the resulting
    heights are written back to each spanned row (never lowering a row).
    """

    def __init__(self, session: "SizingSession") -> None:
        self.session = session

    ############################################################
    # #region RowBase
    def _iter_unmerged_cells(self, row: RowView):
        merge_index = self.session.merge_index
        for _cell in row.cells:
            if _cell is None or merge_index.is_merged(_cell.row_index, _cell.column_index):
                continue
            yield _cell

    def row_base_points(self, row: RowView | None) -> float:
        """Height of the row's non-merged cells; default height when it has none."""
        n_base = -1.0
        if row is not None:
            for _cell in self._iter_unmerged_cells(row):
                n_base = max(n_base, self.session.cells.measure_cell_height_points(_cell))
        if n_base < 0:
            return self.session.default_row_height_points
        return n_base

    def row_has_content(self, row: RowView | None) -> bool:
        if row is None:
            return False
        return any(check_cell_has_content(_cell) for _cell in self._iter_unmerged_cells(row))

    # #endregion
    ############################################################
    # #region MergedBlocks
    def merged_block_total_points(self, region: SpecMergedRegion) -> float:
        """
        Points the whole merged block needs: the top-left cell's text wrapped
        across every merged column, rotation ignored.
        """
        session = self.session
        cell_top_left = session.cells.get_top_left_cell(region)
        if cell_top_left is None or not convert_cell_height_text(
            cell_top_left, session.formatter
        ):
            return session.default_row_height_points

        n_height_px = session.cells.measure_wrapped_height(
            cell_top_left, session.cells.merged_wrap_width_px(region)
        )
        if n_height_px <= 0:
            return session.default_row_height_points
        return (
            session.options.convert_px_to_points(n_height_px)
            * session.options.height_point_correction
        )

    def plan_block_assignment(self, region: SpecMergedRegion) -> SpecBlockAssignment:
        """Apportion ``region`` without touching the document."""
        session = self.session
        n_default = session.default_row_height_points
        n_epsilon = session.options.content_epsilon_points

        l_bases: list[float] = []
        l_has_content: list[bool] = []
        for _row_idx in range(region.row_first, region.row_last + 1):
            row_ = session.sheet.get_row(_row_idx)
            n_base_ = self.row_base_points(row_)
            l_bases.append(n_base_)
            l_has_content.append(
                self.row_has_content(row_) or n_base_ > n_default + n_epsilon
            )

        n_total = self.merged_block_total_points(region)
        tup_bases = tuple(l_bases)
        tup_has_content = tuple(l_has_content)
        return SpecBlockAssignment(
            region=region,
            total_points=n_total,
            bases_points=tup_bases,
            has_content=tup_has_content,
            assigned_points=apportion_block_height(
                total_points=n_total,
                bases_points=tup_bases,
                has_content=tup_has_content,
                default_points=n_default,
            ),
        )

    def apply_block_assignment(self, assignment: SpecBlockAssignment) -> None:
        session = self.session
        sheet = session.sheet
        n_default = session.default_row_height_points
        n_max = session.options.row_height_points_max
        for _offset, _assigned in enumerate(assignment.assigned_points):
            n_row_idx_ = assignment.region.row_first + _offset
            row_ = sheet.get_row(n_row_idx_) or sheet.create_row(n_row_idx_)
            n_current_ = (
                row_.height_points
                if row_.height_points is not None and row_.height_points > 0
                else n_default
            )
            row_.height_points = max(n_current_, min(_assigned, n_max))

    def resolve_block_assignment(self, region: SpecMergedRegion) -> SpecBlockAssignment:
        assignment = self.session.get_block_assignment(region)
        if assignment is None:
            assignment = self.plan_block_assignment(region)
            self.apply_block_assignment(assignment)
            self.session.store_block_assignment(assignment)
        return assignment

    # #endregion
    ############################################################
    # #region RowHeight
    def get_row_height(self, row_idx: int, use_merged_cells: bool) -> float:
        """
        Points row ``row_idx`` needs, capped at the format maximum (409.5pt).

        Returns -1 when the row does not exist. Without ``use_merged_cells``
        merged cells are ignored entirely and nothing is written back.
        """
        session = self.session
        n_max = session.options.row_height_points_max
        row = session.sheet.get_row(row_idx)
        if row is None:
            return -1.0

        n_height = self.row_base_points(row)
        if not use_merged_cells:
            return min(n_height, n_max)

        tup_regions = session.merge_index.regions_for_row(row_idx)
        for _region in tup_regions:
            if _region.is_horizontal_only:
                n_height = max(n_height, self.merged_block_total_points(_region))

        for _region in tup_regions:
            if _region.is_horizontal_only:
                continue
            assignment_ = self.resolve_block_assignment(_region)
            n_height = max(n_height, min(assignment_.assigned_for_row(row_idx), n_max))

        return min(n_height, n_max)

    def get_row_cells_height(
        self,
        row_idx: int,
        use_merged_cells: bool,
        col_first: int | None = None,
        col_last: int | None = None,
    ) -> float:
        """
        Largest cell height on the row in device pixels.

        Without a column range every stored cell counts and a missing row
        gives -1; with a range a missing row gives 0.
        """
        b_has_range = col_first is not None or col_last is not None
        if b_has_range:
            if col_first is None or col_last is None:
                raise InvalidRangeError("col_first and col_last must be given together.")
            if col_first < 0 or col_first > col_last:
                raise InvalidRangeError(
                    f"Invalid column range: col_first={col_first}, col_last={col_last}"
                )

        cells = self.session.cells
        row = self.session.sheet.get_row(row_idx)
        if row is None:
            return 0.0 if b_has_range else -1.0

        if b_has_range:
            return max(
                (
                    cells.measure_cell_height(row.get_cell(_col), use_merged_cells)
                    for _col in range(col_first, col_last + 1)
                ),
                default=0.0,
            )
        return max(
            (cells.measure_cell_height(_cell, use_merged_cells) for _cell in row.cells),
            default=-1.0,
        )

    # #endregion
    ############################################################
