"""
Row heights and column widths for spreadsheet cells.

The most used entry points are importable from the package root; they are
resolved on first access so that ``import sheetfit`` stays cheap.
"""

from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any

try:
    __version__ = version("sheetfit")
except PackageNotFoundError:
    __version__ = "0.0.0"

if TYPE_CHECKING:
    from .autofit import plan_sheet_autofit
    from .model.memory import MemoryWorkbook
    from .sizing import SizingSession, get_column_width, get_row_height

_DICT_LAZY_EXPORTS: dict[str, str] = {
    "SizingSession": ".sizing",
    "get_row_height": ".sizing",
    "get_column_width": ".sizing",
    "MemoryWorkbook": ".model.memory",
    "plan_sheet_autofit": ".autofit",
}

__all__ = ["__version__", *_DICT_LAZY_EXPORTS]


def __getattr__(name: str) -> Any:
    c_module = _DICT_LAZY_EXPORTS.get(name)
    if c_module is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    obj = getattr(import_module(c_module, __name__), name)
    globals()[name] = obj
    return obj


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
