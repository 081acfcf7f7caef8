"""
Loading of modules that live behind an install extra.

Each extra lists the top-level imports it provides; a ``ModuleNotFoundError``
for one of them is turned into an error that names the extra to install.
"""

from __future__ import annotations

from importlib import import_module
from types import ModuleType

DICT_EXTRA_IMPORTS: dict[str, tuple[str, ...]] = {
    "pillow": ("PIL",),
    "openpyxl": ("openpyxl",),
    "xlsx": ("xlsxwriter", "polars"),
}


def build_missing_extra_error(
    *, feature: str, extra: str, missing_module: str | None
) -> ModuleNotFoundError:
    c_missing = f" (`{missing_module}` not found)" if missing_module else ""
    return ModuleNotFoundError(
        f"{feature} needs the `{extra}` extra{c_missing}. "
        f'Install it with `pip install "sheetfit[{extra}]"` '
        f"or, in a checkout, `pdm sync -G dev -G {extra}`."
    )


def import_extra(
    module_name: str, *, extra: str, feature: str, package: str | None = None
) -> ModuleType:
    """
    Import ``module_name``, which depends on the ``extra`` install extra.

    Raises:
        ModuleNotFoundError: With an install hint when a module the extra
            provides is missing; other missing modules propagate unchanged.
    """
    try:
        return import_module(module_name, package=package)
    except ModuleNotFoundError as exc:
        c_top_level = (exc.name or "").partition(".")[0]
        if c_top_level in DICT_EXTRA_IMPORTS.get(extra, ()):
            raise build_missing_extra_error(
                feature=feature, extra=extra, missing_module=exc.name
            ) from exc
        raise
