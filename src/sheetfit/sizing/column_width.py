from typing import TYPE_CHECKING

from .errors import InvalidRangeError
from .protocols import CellValueFormatter

if TYPE_CHECKING:
    from .session import SizingSession


class ColumnWidthResolver:
    def __init__(self, session: "SizingSession") -> None:
        self.session = session

    def get_column_width(
        self,
        col: int,
        use_merged_cells: bool,
        row_first: int | None = None,
        row_last: int | None = None,
        rows_max: int = 0,
        *,
        formatter: CellValueFormatter | None = None,
    ) -> float:
        """
        Width column ``col`` needs, in reference-char units.

        Args:
            col: 0-based column index.
            use_merged_cells: Measure merged cells by their leftmost cell and
                divide by the column span; otherwise merged cells are skipped.
            row_first: First row scanned (inclusive). Defaults to the sheet's
                first row.
            row_last: Last row scanned (inclusive). Defaults to the sheet's
                last row.
            rows_max: When > 0, the scan stops ``rows_max`` rows after
                ``row_first``.

        Returns:
            float: The widest cell, or -1 when every scanned cell is empty.
        """
        if col < 0:
            raise InvalidRangeError(f"Column index must be >= 0, got {col}.")
        sheet = self.session.sheet
        b_explicit_range = row_first is not None and row_last is not None
        if (row_first is not None and row_first < 0) or (
            b_explicit_range and row_first > row_last
        ):
            raise InvalidRangeError(
                f"Invalid row range: row_first={row_first}, row_last={row_last}"
            )
        row_first = sheet.first_row_num if row_first is None else row_first
        row_last = sheet.last_row_num if row_last is None else row_last
        if row_first < 0 or row_first > row_last:
            # A defaulted bound leaves nothing to scan.
            return -1.0

        if rows_max > 0 and row_last - row_first > rows_max:
            row_last = row_first + rows_max

        cells = self.session.cells
        n_default_char_width = self.session.default_char_width
        n_width = -1.0
        for _row_idx in range(row_first, row_last + 1):
            row_ = sheet.get_row(_row_idx)
            if row_ is None:
                continue
            n_width = max(
                n_width,
                cells.measure_cell_width(
                    row_.get_cell(col),
                    n_default_char_width,
                    formatter,
                    use_merged_cells,
                ),
            )
        return n_width
