from __future__ import annotations

import math
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from sheetfit.model.memory import MemorySheet, MemoryWorkbook  # noqa: E402
from sheetfit.sizing import (  # noqa: E402
    DEFAULT_SIZING_OPTIONS,
    FontMetricsCache,
    SizingSession,
    SpecSizingOptions,
    SpecTextExtent,
    SpecTextOptions,
)


class FakeTextMeasurer:
    """
    Monospaced measurer: every char is ``char_width_px`` wide and every line
    ``line_height_px`` tall, whatever the font. Wrapping is per character.
    """

    def __init__(
        self,
        char_width_px: float = 7.0,
        line_height_px: float = 15.0,
        families: Sequence[str] = ("Calibri", "Arial"),
        major_version: int = 2,
    ) -> None:
        self.char_width_px = char_width_px
        self.line_height_px = line_height_px
        self.families = list(families)
        self.major_version = major_version
        self.n_calls = 0

    def list_families(self) -> list[str]:
        return list(self.families)

    def resolve_family(self, name: str, locale: str) -> str | None:
        for _family in self.families:
            if _family.casefold() == name.casefold():
                return _family
        return None

    def _count_lines(self, line: str, wrap_width_px: float | None) -> int:
        if wrap_width_px is None or not line:
            return 1
        return max(1, math.ceil(len(line) * self.char_width_px / wrap_width_px))

    def measure_advance(self, text: str, options: SpecTextOptions) -> SpecTextExtent:
        self.n_calls += 1
        l_lines = text.split("\n")
        n_lines = sum(self._count_lines(_line, options.wrap_width_px) for _line in l_lines)
        return SpecTextExtent(
            width=max(len(_line) for _line in l_lines) * self.char_width_px,
            height=n_lines * self.line_height_px,
        )

    def measure_size(self, text: str, options: SpecTextOptions) -> SpecTextExtent:
        self.n_calls += 1
        return SpecTextExtent(
            width=len(text) * self.char_width_px, height=self.line_height_px
        )


@pytest.fixture
def options_unit_scale() -> SpecSizingOptions:
    # Pixels equal points and no empirical correction: heights read directly.
    return DEFAULT_SIZING_OPTIONS.with_(dpi=72, height_point_correction=1.0)


@pytest.fixture
def make_measurer() -> Callable[..., FakeTextMeasurer]:
    return FakeTextMeasurer


@pytest.fixture
def measurer() -> FakeTextMeasurer:
    return FakeTextMeasurer()


@pytest.fixture
def workbook() -> MemoryWorkbook:
    return MemoryWorkbook()


@pytest.fixture
def sheet(workbook: MemoryWorkbook) -> MemorySheet:
    return workbook.create_sheet("Sheet1")


@pytest.fixture
def make_session(
    measurer: FakeTextMeasurer,
) -> Callable[..., SizingSession]:
    """Session with an isolated font cache, so tests never share metrics."""

    def _make(
        sheet: MemorySheet,
        *,
        measurer_: FakeTextMeasurer | None = None,
        options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
        **kwargs: Any,
    ) -> SizingSession:
        measurer_ = measurer_ or measurer
        return SizingSession(
            sheet,
            measurer=measurer_,
            font_cache=FontMetricsCache(measurer_, options=options),
            options=options,
            **kwargs,
        )

    return _make
