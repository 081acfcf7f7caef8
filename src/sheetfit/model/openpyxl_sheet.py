"""
openpyxl adapter for the sizing protocols.

Coordinates are 0-based on this side and 1-based on the openpyxl side. Fonts
are collected into a per-workbook table on demand; index 0 is the workbook's
default font. Formula cells loaded without ``data_only=True`` carry no cached
result and measure as blank.
"""

from typing import Any

from openpyxl.cell.cell import Cell
from openpyxl.styles.fonts import DEFAULT_FONT, Font
from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.utils.units import DEFAULT_COLUMN_WIDTH
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.dimensions import ColumnDimension
from openpyxl.worksheet.worksheet import Worksheet

from ..sizing.conf import N_COLUMN_WIDTH_UNITS_PER_CHAR
from ..sizing.spec import EnumCellType, SpecMergedRegion
from .memory import N_DEFAULT_COLUMN_WIDTH_CHARS, N_DEFAULT_ROW_HEIGHT_POINTS, MemoryFont

DICT_DATA_TYPES: dict[str, EnumCellType] = {
    "s": EnumCellType.STRING,
    "inlineStr": EnumCellType.STRING,
    "str": EnumCellType.STRING,
    "n": EnumCellType.NUMERIC,
    "d": EnumCellType.NUMERIC,
    "b": EnumCellType.BOOLEAN,
    "e": EnumCellType.ERROR,
    "f": EnumCellType.FORMULA,
}
N_ROTATION_VERTICAL_STACKED = 255


def convert_text_rotation(text_rotation: int | None) -> int:
    """
    OOXML ``textRotation`` to signed degrees.

    0..90 rotate counter-clockwise, 91..180 encode -1..-90 and 255
    (stacked vertical text) is treated as 90.
    """
    n_rotation = int(text_rotation or 0)
    if n_rotation == N_ROTATION_VERTICAL_STACKED:
        return 90
    if 90 < n_rotation <= 180:
        return 90 - n_rotation
    return n_rotation


def convert_openpyxl_font(font: Font | None) -> MemoryFont:
    font = font or DEFAULT_FONT
    return MemoryFont(
        name=font.name or DEFAULT_FONT.name,
        height_in_points=float(font.sz or DEFAULT_FONT.sz),
        is_bold=bool(font.b),
        is_italic=bool(font.i),
    )


################################################################################
# #region Styles


class OpenpyxlCellStyle:
    __slots__ = ("wrap_text", "rotation", "font_index", "number_format")

    def __init__(self, cell: Cell, font_index: int) -> None:
        alignment = cell.alignment
        self.wrap_text = bool(alignment.wrap_text)
        self.rotation = convert_text_rotation(alignment.textRotation)
        self.font_index = font_index
        self.number_format = cell.number_format or "General"


# #endregion
################################################################################
# #region Cells


class OpenpyxlCellView:
    __slots__ = (
        "_sheet",
        "raw",
        "row_index",
        "column_index",
        "cell_type",
        "cached_formula_result_type",
        "string_value",
        "numeric_value",
        "boolean_value",
        "style",
    )

    def __init__(self, sheet: "OpenpyxlSheetView", cell: Cell) -> None:
        self._sheet = sheet
        self.raw = cell
        self.row_index = cell.row - 1
        self.column_index = cell.column - 1
        self.cached_formula_result_type = EnumCellType.BLANK
        self.string_value: str | None = None
        self.numeric_value: Any = None
        self.boolean_value: bool | None = None
        self.style = OpenpyxlCellStyle(
            cell, sheet.workbook.register_font(cell.font)
        )

        value = cell.value
        if value is None:
            self.cell_type = EnumCellType.BLANK
            return
        self.cell_type = DICT_DATA_TYPES.get(cell.data_type, EnumCellType.STRING)
        if self.cell_type == EnumCellType.STRING:
            self.string_value = str(value)
        elif self.cell_type == EnumCellType.NUMERIC:
            self.numeric_value = value
        elif self.cell_type == EnumCellType.BOOLEAN:
            self.boolean_value = bool(value)

    @property
    def sheet(self) -> "OpenpyxlSheetView":
        return self._sheet


# #endregion
################################################################################
# #region Rows


class OpenpyxlRowView:
    __slots__ = ("_sheet", "row_num")

    def __init__(self, sheet: "OpenpyxlSheetView", row_num: int) -> None:
        self._sheet = sheet
        self.row_num = row_num

    @property
    def sheet(self) -> "OpenpyxlSheetView":
        return self._sheet

    @property
    def height_points(self) -> float | None:
        dimension = self._sheet.worksheet.row_dimensions.get(self.row_num + 1)
        return None if dimension is None else dimension.height

    @height_points.setter
    def height_points(self, value: float | None) -> None:
        self._sheet.worksheet.row_dimensions[self.row_num + 1].height = value

    @property
    def cells(self) -> list[OpenpyxlCellView]:
        return [
            OpenpyxlCellView(self._sheet, _cell)
            for _cell in self._sheet.iter_raw_cells(self.row_num)
        ]

    def get_cell(self, col: int) -> OpenpyxlCellView | None:
        cell = self._sheet.get_raw_cell(self.row_num, col)
        return None if cell is None else OpenpyxlCellView(self._sheet, cell)


# #endregion
################################################################################
# #region Sheets


class OpenpyxlSheetView:
    """
    One worksheet seen through the sizing protocols.

    Rows exist when they hold stored cells or a row dimension. The row index is
    built at construction; call :meth:`refresh` after adding cells.
    """

    def __init__(self, workbook: "OpenpyxlWorkbookView", worksheet: Worksheet) -> None:
        self._workbook = workbook
        self.worksheet = worksheet
        self._dict_row_cols: dict[int, list[int]] = {}
        self.refresh()

    def refresh(self) -> None:
        dict_row_cols: dict[int, list[int]] = {}
        # Stored cells only; iter_rows would materialise the whole rectangle.
        for _row, _col in sorted(self.worksheet._cells):
            dict_row_cols.setdefault(_row - 1, []).append(_col - 1)
        self._dict_row_cols = dict_row_cols

    @property
    def workbook(self) -> "OpenpyxlWorkbookView":
        return self._workbook

    @property
    def default_row_height_points(self) -> float:
        return float(
            self.worksheet.sheet_format.defaultRowHeight or N_DEFAULT_ROW_HEIGHT_POINTS
        )

    @property
    def merged_regions(self) -> list[SpecMergedRegion]:
        return [
            SpecMergedRegion(
                row_first=_range.min_row - 1,
                row_last=_range.max_row - 1,
                col_first=_range.min_col - 1,
                col_last=_range.max_col - 1,
            )
            for _range in self.worksheet.merged_cells.ranges
        ]

    def _iter_row_nums(self) -> set[int]:
        set_rows = set(self._dict_row_cols)
        set_rows.update(_idx - 1 for _idx in self.worksheet.row_dimensions)
        return set_rows

    @property
    def first_row_num(self) -> int:
        return min(self._iter_row_nums(), default=-1)

    @property
    def last_row_num(self) -> int:
        return max(self._iter_row_nums(), default=-1)

    def get_raw_cell(self, row_idx: int, col: int) -> Cell | None:
        return self.worksheet._cells.get((row_idx + 1, col + 1))

    def iter_raw_cells(self, row_idx: int) -> list[Cell]:
        return [
            self.worksheet._cells[(row_idx + 1, _col + 1)]
            for _col in self._dict_row_cols.get(row_idx, ())
        ]

    def get_row(self, row_idx: int) -> OpenpyxlRowView | None:
        if row_idx in self._dict_row_cols or (row_idx + 1) in self.worksheet.row_dimensions:
            return OpenpyxlRowView(self, row_idx)
        return None

    def create_row(self, row_idx: int) -> OpenpyxlRowView:
        # Touching the dimension registers the row.
        self.worksheet.row_dimensions[row_idx + 1]
        return OpenpyxlRowView(self, row_idx)

    def _find_column_dimension(self, col: int) -> ColumnDimension | None:
        n_col = col + 1
        dimension = self.worksheet.column_dimensions.get(get_column_letter(n_col))
        if dimension is not None:
            return dimension
        # A <col min max> span is stored under the letter of its first column.
        for _dimension in self.worksheet.column_dimensions.values():
            n_min_ = _dimension.min or column_index_from_string(_dimension.index)
            n_max_ = _dimension.max or n_min_
            if n_min_ <= n_col <= n_max_:
                return _dimension
        return None

    def get_column_width(self, col: int) -> float:
        dimension = self._find_column_dimension(col)
        # openpyxl fills in DEFAULT_COLUMN_WIDTH on dimensions written without a width.
        if (
            dimension is not None
            and dimension.width
            and dimension.width != DEFAULT_COLUMN_WIDTH
        ):
            n_width_chars = dimension.width
        else:
            n_width_chars = (
                self.worksheet.sheet_format.defaultColWidth or N_DEFAULT_COLUMN_WIDTH_CHARS
            )
        return n_width_chars * N_COLUMN_WIDTH_UNITS_PER_CHAR


# #endregion
################################################################################
# #region Workbook


class OpenpyxlWorkbookView:
    """Workbook-level view: font table and per-sheet views."""

    is_legacy_format = False

    def __init__(self, workbook: Workbook) -> None:
        self.raw = workbook
        font_default = workbook._fonts[0] if workbook._fonts else DEFAULT_FONT
        self._l_fonts: list[MemoryFont] = [convert_openpyxl_font(font_default)]
        self._dict_font_index: dict[tuple[str, float, bool, bool], int] = {
            self._font_key(self._l_fonts[0]): 0
        }
        self._dict_sheets: dict[str, OpenpyxlSheetView] = {}

    @staticmethod
    def _font_key(font: MemoryFont) -> tuple[str, float, bool, bool]:
        return (font.name, font.height_in_points, font.is_bold, font.is_italic)

    def register_font(self, font: Font | None) -> int:
        font_view = convert_openpyxl_font(font)
        tup_key = self._font_key(font_view)
        n_idx = self._dict_font_index.get(tup_key)
        if n_idx is None:
            self._l_fonts.append(font_view)
            n_idx = self._dict_font_index[tup_key] = len(self._l_fonts) - 1
        return n_idx

    def get_font_at(self, font_index: int) -> MemoryFont:
        return self._l_fonts[font_index]

    def sheet(self, name: str | None = None) -> OpenpyxlSheetView:
        """View of worksheet ``name`` (the active sheet when omitted)."""
        worksheet = self.raw.active if name is None else self.raw[name]
        sheet_view = self._dict_sheets.get(worksheet.title)
        if sheet_view is None:
            sheet_view = self._dict_sheets[worksheet.title] = OpenpyxlSheetView(
                self, worksheet
            )
        return sheet_view


# #endregion
################################################################################
