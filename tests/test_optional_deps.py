from __future__ import annotations

import re
import sys
from pathlib import Path

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

import sheetfit  # noqa: E402
from sheetfit import _optional_deps  # noqa: E402
from sheetfit._optional_deps import build_missing_extra_error, import_extra  # noqa: E402


def test_missing_extra_module_carries_install_hint(monkeypatch) -> None:
    monkeypatch.setitem(
        _optional_deps.DICT_EXTRA_IMPORTS, "pillow", ("sheetfit_missing_backend",)
    )
    with pytest.raises(ModuleNotFoundError) as exc_info:
        import_extra(
            "sheetfit_missing_backend.fonts",
            extra="pillow",
            feature="Pillow text measurement",
        )

    message = str(exc_info.value)
    assert "Pillow text measurement needs the `pillow` extra" in message
    assert re.search(r'pip install "sheetfit\[pillow\]"', message)
    assert "pdm sync -G dev -G pillow" in message
    assert isinstance(exc_info.value.__cause__, ModuleNotFoundError)


def test_unrelated_missing_module_is_reraised_untouched() -> None:
    with pytest.raises(ModuleNotFoundError) as exc_info:
        import_extra("sheetfit_missing_internal", extra="xlsx", feature="Autofit plan report")
    assert exc_info.value.name == "sheetfit_missing_internal"
    assert "extra" not in str(exc_info.value)


def test_error_without_module_name() -> None:
    exc = build_missing_extra_error(feature="Autofit", extra="xlsx", missing_module=None)
    assert str(exc).startswith("Autofit needs the `xlsx` extra. ")


def test_import_extra_resolves_relative_modules() -> None:
    module = import_extra(".sizing.conf", extra="pillow", feature="Sizing", package="sheetfit")
    assert module.__name__ == "sheetfit.sizing.conf"


def test_package_root_exports_are_lazy() -> None:
    from sheetfit.sizing import SizingSession, get_row_height

    assert sheetfit.SizingSession is SizingSession
    assert sheetfit.get_row_height is get_row_height
    assert "plan_sheet_autofit" in dir(sheetfit)
    with pytest.raises(AttributeError):
        sheetfit.not_an_export  # noqa: B018
