from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from .._optional_deps import import_extra
from .plan import SpecAutofitPlan

if TYPE_CHECKING:
    import openpyxl.worksheet.worksheet
    import xlsxwriter.worksheet


def apply_autofit_plan_xlsxwriter(
    worksheet: xlsxwriter.worksheet.Worksheet, plan: SpecAutofitPlan
) -> None:
    """
    Write planned sizes through xlsxwriter (0-based, like the plan).

    Column formats set earlier with ``set_column`` are replaced; apply the
    plan before column formats when both are needed.
    """
    for _col, _width in sorted(plan.col_widths.items()):
        worksheet.set_column(_col, _col, _width)
    for _row, _height in sorted(plan.row_heights.items()):
        worksheet.set_row(_row, _height)
    logger.debug(
        f"Applied autofit to xlsxwriter sheet {worksheet.get_name()!r}: "
        f"{len(plan.col_widths)} columns, {len(plan.row_heights)} rows"
    )


def apply_autofit_plan_openpyxl(
    worksheet: openpyxl.worksheet.worksheet.Worksheet, plan: SpecAutofitPlan
) -> None:
    get_column_letter = import_extra(
        "openpyxl.utils", extra="openpyxl", feature="Autofit for openpyxl worksheets"
    ).get_column_letter
    for _col, _width in sorted(plan.col_widths.items()):
        worksheet.column_dimensions[get_column_letter(_col + 1)].width = _width
    for _row, _height in sorted(plan.row_heights.items()):
        worksheet.row_dimensions[_row + 1].height = _height
    logger.debug(
        f"Applied autofit to openpyxl sheet {worksheet.title!r}: "
        f"{len(plan.col_widths)} columns, {len(plan.row_heights)} rows"
    )
