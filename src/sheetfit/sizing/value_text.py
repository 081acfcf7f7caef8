import math
import re
from datetime import date, datetime, time
from typing import Any

from .conf import C_REFERENCE_CHAR
from .protocols import CellValueFormatter, CellView
from .spec import EnumCellType

_RE_FIXED_FORMAT = re.compile(r"^(?P<grouped>#,##)?0(?:\.(?P<decimals>0+))?$")
_RE_PERCENT_FORMAT = re.compile(r"^0(?:\.(?P<decimals>0+))?%$")
_RE_SCIENTIFIC_FORMAT = re.compile(r"^0(?:\.(?P<decimals>0+))?E\+0+$", re.IGNORECASE)
_RE_FORMAT_LITERAL = re.compile(r'"[^"]*"|\\.|_.|\*.')
_N_GENERAL_DIGITS_MAX = 11

################################################################################
# #region CellTypes


def resolve_cell_type(cell: CellView) -> EnumCellType:
    """Formula cells are measured by their cached result."""
    if cell.cell_type == EnumCellType.FORMULA:
        return cell.cached_formula_result_type
    return cell.cell_type


def check_cell_has_content(cell: CellView) -> bool:
    enum_type = resolve_cell_type(cell)
    if enum_type == EnumCellType.STRING:
        return bool(cell.string_value)
    return enum_type in (EnumCellType.NUMERIC, EnumCellType.BOOLEAN, EnumCellType.ERROR)


# #endregion
################################################################################
# #region NumberFormatting


def convert_value_default_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_general(value: float) -> str:
    if not math.isfinite(value):
        raise ValueError(f"Cannot display non-finite number: {value!r}")
    if value.is_integer() and abs(value) < 10**_N_GENERAL_DIGITS_MAX:
        return str(int(value))
    c_text = f"{value:.{_N_GENERAL_DIGITS_MAX - 1}g}"
    if "e" in c_text:
        c_mantissa, c_exp = c_text.split("e")
        return f"{c_mantissa}E{int(c_exp):+03d}"
    return c_text


def format_number(value: float, number_format: str) -> str:
    """
    Render ``value`` the way a spreadsheet would display it.

    Covers General, fixed decimals (``0.00``), grouped (``#,##0.00``),
    percent (``0.0%``) and scientific (``0.00E+00``). Sections after ``;`` and
    quoted literals are ignored; unknown patterns render as General.
    """
    c_format = _RE_FORMAT_LITERAL.sub("", (number_format or "General").split(";")[0]).strip()
    if not c_format or c_format.lower() == "general":
        return _format_general(value)

    if m := _RE_FIXED_FORMAT.match(c_format):
        n_decimals = len(m.group("decimals") or "")
        c_group = "," if m.group("grouped") else ""
        return f"{value:{c_group}.{n_decimals}f}"
    if m := _RE_PERCENT_FORMAT.match(c_format):
        n_decimals = len(m.group("decimals") or "")
        return f"{value * 100:.{n_decimals}f}%"
    if m := _RE_SCIENTIFIC_FORMAT.match(c_format):
        n_decimals = len(m.group("decimals") or "")
        c_mantissa, c_exp = f"{value:.{n_decimals}E}".split("E")
        return f"{c_mantissa}E{int(c_exp):+03d}"
    return _format_general(value)


class DefaultCellFormatter:
    """Formats numeric and temporal cell values by their style's number format."""

    def format_cell_value(self, cell: CellView) -> str:
        value = cell.numeric_value
        if isinstance(value, datetime):
            return value.isoformat(sep=" ")
        if isinstance(value, (date, time)):
            return value.isoformat()
        return format_number(float(value), cell.style.number_format)


DEFAULT_CELL_FORMATTER = DefaultCellFormatter()


def format_numeric_cell(cell: CellView, formatter: CellValueFormatter) -> str:
    try:
        return formatter.format_cell_value(cell)
    except Exception:
        # Formatting never fails a measurement; fall back to the raw text.
        return convert_value_default_text(cell.numeric_value)


# #endregion
################################################################################
# #region DisplayText


def convert_cell_height_text(cell: CellView, formatter: CellValueFormatter) -> str | None:
    """
    Text measured for row heights.

    Numbers and booleans carry a trailing reference char, matching the glyph
    padding Excel reserves next to right-aligned values.
    """
    enum_type = resolve_cell_type(cell)
    if enum_type == EnumCellType.STRING:
        return cell.string_value
    if enum_type == EnumCellType.BOOLEAN:
        return str(bool(cell.boolean_value)).upper() + C_REFERENCE_CHAR
    if enum_type == EnumCellType.NUMERIC:
        return format_numeric_cell(cell, formatter) + C_REFERENCE_CHAR
    return None


def convert_cell_width_lines(
    cell: CellView, formatter: CellValueFormatter
) -> list[str] | None:
    """Lines measured for column widths; ``None`` when nothing is displayed."""
    enum_type = resolve_cell_type(cell)
    if enum_type == EnumCellType.STRING:
        return (cell.string_value or "").split("\n")
    if enum_type == EnumCellType.NUMERIC:
        return [format_numeric_cell(cell, formatter)]
    if enum_type == EnumCellType.BOOLEAN:
        return [str(bool(cell.boolean_value)).upper()]
    return None


# #endregion
################################################################################
