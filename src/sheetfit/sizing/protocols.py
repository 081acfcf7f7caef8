from collections.abc import Iterable, Sequence
from typing import Any, Protocol

from .spec import EnumCellType, SpecMergedRegion, SpecTextExtent, SpecTextOptions

################################################################################
# #region TextMeasurement


class TextMeasurer(Protocol):
    """
    Text-measurement collaborator.

    All extents are in device pixels at ``options.dpi``.

    - ``measure_advance`` returns the layout advance box: width of the widest
      line and the summed line-box height. When ``options.wrap_width_px`` is
      set, text is broken against that budget before measuring.
    - ``measure_size`` returns the ink box of the text (no wrapping).
    - ``major_version`` declares the backend generation; from version 2 the
      wrap width of merged cells includes per-column padding.
    """

    major_version: int

    def list_families(self) -> Sequence[str]: ...

    def resolve_family(self, name: str, locale: str) -> str | None: ...

    def measure_advance(self, text: str, options: SpecTextOptions) -> SpecTextExtent: ...

    def measure_size(self, text: str, options: SpecTextOptions) -> SpecTextExtent: ...


# #endregion
################################################################################
# #region DocumentModel


class FontView(Protocol):
    name: str
    height_in_points: float
    is_bold: bool
    is_italic: bool


class CellStyleView(Protocol):
    wrap_text: bool
    rotation: int  # degrees, -90..90
    font_index: int
    number_format: str


class CellView(Protocol):
    row_index: int
    column_index: int
    cell_type: EnumCellType
    # Only meaningful when ``cell_type`` is FORMULA.
    cached_formula_result_type: EnumCellType
    string_value: str | None
    numeric_value: Any
    boolean_value: bool | None
    style: CellStyleView

    @property
    def sheet(self) -> "SheetView": ...


class RowView(Protocol):
    row_num: int
    # None or <= 0: row uses the sheet default height.
    height_points: float | None

    @property
    def sheet(self) -> "SheetView": ...

    @property
    def cells(self) -> Iterable[CellView]: ...

    def get_cell(self, col: int) -> CellView | None: ...


class WorkbookView(Protocol):
    # Legacy binary (BIFF8) workbook; column pixel widths get a correction.
    is_legacy_format: bool

    def get_font_at(self, font_index: int) -> FontView: ...


class SheetView(Protocol):
    default_row_height_points: float

    @property
    def workbook(self) -> WorkbookView: ...

    @property
    def merged_regions(self) -> Sequence[SpecMergedRegion]: ...

    @property
    def first_row_num(self) -> int: ...

    @property
    def last_row_num(self) -> int: ...

    def get_row(self, row_idx: int) -> RowView | None: ...

    def create_row(self, row_idx: int) -> RowView: ...

    def get_column_width(self, col: int) -> float:
        """Column width in 1/256th of a reference character."""
        ...


class CellValueFormatter(Protocol):
    def format_cell_value(self, cell: CellView) -> str: ...


# #endregion
################################################################################
