"""Sheet-level autofit: measure every column and row, then apply to a writer."""

from .apply import apply_autofit_plan_openpyxl, apply_autofit_plan_xlsxwriter
from .plan import SpecAutofitPlan, SpecAutofitPolicy, plan_sheet_autofit

__all__ = [
    "SpecAutofitPlan",
    "SpecAutofitPolicy",
    "apply_autofit_plan_openpyxl",
    "apply_autofit_plan_xlsxwriter",
    "plan_sheet_autofit",
]
