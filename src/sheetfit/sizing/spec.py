# "Facts/Results/Plans" consumed and produced by the sheet sizing engine.

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from .errors import InvalidRangeError

################################################################################
# #region GridSpecification


@dataclass(frozen=True, slots=True)
class SpecMergedRegion:
    """Inclusive rectangle of merged cells, 0-based."""

    row_first: int
    row_last: int
    col_first: int
    col_last: int

    def __post_init__(self) -> None:
        if self.row_first < 0 or self.col_first < 0:
            raise InvalidRangeError(f"Negative merged region bounds: {self!r}")
        if self.row_first > self.row_last or self.col_first > self.col_last:
            raise InvalidRangeError(f"Inverted merged region bounds: {self!r}")

    @property
    def row_count(self) -> int:
        return self.row_last - self.row_first + 1

    @property
    def col_count(self) -> int:
        return self.col_last - self.col_first + 1

    @property
    def is_horizontal_only(self) -> bool:
        return self.row_first == self.row_last

    def contains(self, row: int, col: int) -> bool:
        return (
            self.row_first <= row <= self.row_last
            and self.col_first <= col <= self.col_last
        )


class EnumCellType(StrEnum):
    STRING = "string"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    ERROR = "error"
    FORMULA = "formula"
    BLANK = "blank"


# #endregion
################################################################################
# #region FontSpecification


@dataclass(frozen=True, slots=True)
class SpecFontDescriptor:
    family: str
    size_points: float
    bold: bool = False
    italic: bool = False

    def with_(self, **kwargs: Any) -> "SpecFontDescriptor":
        return replace(self, **kwargs)

    @property
    def is_integral_size(self) -> bool:
        return float(self.size_points).is_integer()


@dataclass(frozen=True, slots=True)
class SpecTextOptions:
    font: SpecFontDescriptor
    dpi: int
    wrap_width_px: float | None = None  # None: no wrapping

    def with_wrap_width(self, wrap_width_px: float | None) -> "SpecTextOptions":
        return replace(self, wrap_width_px=wrap_width_px)


@dataclass(frozen=True, slots=True)
class SpecTextExtent:
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class SpecFontMetrics:
    font_resolved: SpecFontDescriptor
    line_height: float
    space_width: float
    reference_char_width: float
    text_options: SpecTextOptions


# #endregion
################################################################################
# #region SizingOptions


@dataclass(frozen=True, slots=True)
class SpecSizingOptions:
    dpi: int
    cell_padding_px: int
    default_padding_px: int
    width_correction: float
    row_height_points_max: float
    points_per_inch: float
    height_point_correction: float
    content_epsilon_points: float
    reference_char: str
    fallback_font_family: str

    def with_(self, **kwargs: Any) -> "SpecSizingOptions":
        return replace(self, **kwargs)

    def convert_px_to_points(self, px: float) -> float:
        return px * (self.points_per_inch / self.dpi)


@dataclass(frozen=True, slots=True)
class SpecSizingCapabilities:
    # Resolved once per session; never re-derived per call.
    wrap_padding_supported: bool
    legacy_width_correction: bool
    legacy_format: bool


# #endregion
################################################################################
# #region RowApportionment


@dataclass(frozen=True, slots=True)
class SpecBlockAssignment:
    region: SpecMergedRegion
    total_points: float
    bases_points: tuple[float, ...]
    has_content: tuple[bool, ...]
    assigned_points: tuple[float, ...]

    def assigned_for_row(self, row_idx: int) -> float:
        return self.assigned_points[row_idx - self.region.row_first]


# #endregion
################################################################################
