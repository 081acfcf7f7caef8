"""
In-memory document model.

A complete implementation of the sizing protocols without any spreadsheet
library behind it: useful to size generated tables before they are written,
and as the reference model in tests. Coordinates are 0-based.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..sizing.conf import N_COLUMN_WIDTH_UNITS_PER_CHAR
from ..sizing.spec import EnumCellType, SpecMergedRegion

N_DEFAULT_ROW_HEIGHT_POINTS = 15.0
N_DEFAULT_COLUMN_WIDTH_CHARS = 8


@dataclass(slots=True)
class MemoryFont:
    name: str = "Calibri"
    height_in_points: float = 11.0
    is_bold: bool = False
    is_italic: bool = False


@dataclass(slots=True)
class MemoryCellStyle:
    wrap_text: bool = False
    rotation: int = 0
    font_index: int = 0
    number_format: str = "General"


@dataclass(slots=True)
class MemoryWorkbook:
    fonts: list[MemoryFont] = field(default_factory=lambda: [MemoryFont()])
    is_legacy_format: bool = False
    sheets: dict[str, "MemorySheet"] = field(default_factory=dict)

    def get_font_at(self, font_index: int) -> MemoryFont:
        return self.fonts[font_index]

    def add_font(self, font: MemoryFont) -> int:
        """Register ``font`` and return its index."""
        self.fonts.append(font)
        return len(self.fonts) - 1

    def create_sheet(self, name: str, **kwargs: Any) -> "MemorySheet":
        sheet = MemorySheet(workbook=self, name=name, **kwargs)
        self.sheets[name] = sheet
        return sheet


@dataclass(slots=True, eq=False)
class MemoryCell:
    row: "MemoryRow" = field(repr=False)
    column_index: int
    cell_type: EnumCellType = EnumCellType.BLANK
    cached_formula_result_type: EnumCellType = EnumCellType.BLANK
    string_value: str | None = None
    numeric_value: Any = None
    boolean_value: bool | None = None
    style: MemoryCellStyle = field(default_factory=MemoryCellStyle)

    @property
    def row_index(self) -> int:
        return self.row.row_num

    @property
    def sheet(self) -> "MemorySheet":
        return self.row.sheet

    def set_value(self, value: Any) -> "MemoryCell":
        """Store ``value`` with the matching cell type; ``None`` blanks the cell."""
        self.string_value = None
        self.numeric_value = None
        self.boolean_value = None
        if value is None:
            self.cell_type = EnumCellType.BLANK
        elif isinstance(value, bool):
            self.cell_type = EnumCellType.BOOLEAN
            self.boolean_value = value
        elif isinstance(value, str):
            self.cell_type = EnumCellType.STRING
            self.string_value = value
        else:
            self.cell_type = EnumCellType.NUMERIC
            self.numeric_value = value
        return self

    def set_formula_result(self, value: Any) -> "MemoryCell":
        """Formula cell whose cached result is ``value``."""
        self.set_value(value)
        self.cached_formula_result_type = self.cell_type
        self.cell_type = EnumCellType.FORMULA
        return self


@dataclass(slots=True, eq=False)
class MemoryRow:
    sheet: "MemorySheet" = field(repr=False)
    row_num: int
    height_points: float | None = None
    _dict_cells: dict[int, MemoryCell] = field(default_factory=dict, repr=False)

    @property
    def cells(self) -> list[MemoryCell]:
        return [self._dict_cells[_col] for _col in sorted(self._dict_cells)]

    def get_cell(self, col: int) -> MemoryCell | None:
        return self._dict_cells.get(col)

    def create_cell(self, col: int, style: MemoryCellStyle | None = None) -> MemoryCell:
        if col < 0:
            raise ValueError(f"Column index must be >= 0, got {col}.")
        cell = MemoryCell(row=self, column_index=col, style=style or MemoryCellStyle())
        self._dict_cells[col] = cell
        return cell


@dataclass(slots=True, eq=False)
class MemorySheet:
    workbook: MemoryWorkbook = field(repr=False)
    name: str = "Sheet1"
    default_row_height_points: float = N_DEFAULT_ROW_HEIGHT_POINTS
    default_column_width: int = N_DEFAULT_COLUMN_WIDTH_CHARS * N_COLUMN_WIDTH_UNITS_PER_CHAR
    merged_regions: list[SpecMergedRegion] = field(default_factory=list)
    _dict_rows: dict[int, MemoryRow] = field(default_factory=dict, repr=False)
    _dict_column_widths: dict[int, float] = field(default_factory=dict, repr=False)

    @property
    def first_row_num(self) -> int:
        return min(self._dict_rows, default=-1)

    @property
    def last_row_num(self) -> int:
        return max(self._dict_rows, default=-1)

    @property
    def rows(self) -> list[MemoryRow]:
        return [self._dict_rows[_idx] for _idx in sorted(self._dict_rows)]

    def get_row(self, row_idx: int) -> MemoryRow | None:
        return self._dict_rows.get(row_idx)

    def create_row(self, row_idx: int) -> MemoryRow:
        if row_idx < 0:
            raise ValueError(f"Row index must be >= 0, got {row_idx}.")
        row = MemoryRow(sheet=self, row_num=row_idx)
        self._dict_rows[row_idx] = row
        return row

    def get_column_width(self, col: int) -> float:
        return self._dict_column_widths.get(col, self.default_column_width)

    def set_column_width(self, col: int, width: float) -> None:
        """Set the width of ``col`` in 1/256th of a reference character."""
        self._dict_column_widths[col] = width

    def add_merged_region(self, region: SpecMergedRegion) -> SpecMergedRegion:
        self.merged_regions.append(region)
        return region

    def set_cell(
        self,
        row_idx: int,
        col: int,
        value: Any,
        style: MemoryCellStyle | None = None,
    ) -> MemoryCell:
        """Write ``value`` at ``(row_idx, col)``, creating the row when needed."""
        row = self.get_row(row_idx) or self.create_row(row_idx)
        cell = row.get_cell(col) or row.create_cell(col)
        if style is not None:
            cell.style = style
        return cell.set_value(value)

    def write_rows(
        self, rows: Iterable[Iterable[Any]], row_first: int = 0, col_first: int = 0
    ) -> None:
        for _offset_row, _values in enumerate(rows):
            for _offset_col, _value in enumerate(_values):
                if _value is not None:
                    self.set_cell(row_first + _offset_row, col_first + _offset_col, _value)
