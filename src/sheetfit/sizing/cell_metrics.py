import math
from typing import TYPE_CHECKING

from .conf import N_COLUMN_WIDTH_UNITS_PER_CHAR
from .protocols import CellValueFormatter, CellView
from .spec import SpecFontMetrics, SpecMergedRegion
from .value_text import convert_cell_height_text, convert_cell_width_lines

if TYPE_CHECKING:
    from .session import SizingSession

# Stand-in glyph measured for the line height of whitespace-only text.
_C_BLANK_HEIGHT_PROBE = "A"


def calculate_rotated_bounds(
    width: float, height: float, rotation_degrees: float
) -> tuple[float, float]:
    """
    Axis-aligned bounding box of a ``width`` x ``height`` box rotated by
    ``rotation_degrees``. Returns ``(width, height)``; 0 degrees is identity.
    """
    n_angle = math.radians(rotation_degrees)
    n_sin = abs(math.sin(n_angle))
    n_cos = abs(math.cos(n_angle))
    return (height * n_sin + width * n_cos, height * n_cos + width * n_sin)


class CellMetricsEngine:
    """Height (device pixels) and width (reference-char units) of single cells."""

    def __init__(self, session: "SizingSession") -> None:
        self.session = session

    ############################################################
    # #region Geometry
    def column_width_px(self, col: int) -> float:
        session = self.session
        n_width_chars = (
            session.sheet.get_column_width(col) / N_COLUMN_WIDTH_UNITS_PER_CHAR
        )
        n_width_px = n_width_chars * session.default_char_width
        if session.capabilities.legacy_format:
            return n_width_px * session.options.width_correction
        return n_width_px

    def _finalize_wrap_width(self, width_px: float, n_cols: int) -> float:
        cfg_options = self.session.options
        if self.session.capabilities.wrap_padding_supported:
            width_px += n_cols * cfg_options.cell_padding_px
        return float(math.ceil(max(width_px, cfg_options.default_padding_px)))

    def merged_wrap_width_px(self, region: SpecMergedRegion) -> float:
        return self._finalize_wrap_width(
            self.session.get_merged_pixel_width(region), region.col_count
        )

    def cell_wrap_width_px(self, cell: CellView) -> float:
        return self._finalize_wrap_width(self.column_width_px(cell.column_index), 1)

    # #endregion
    ############################################################
    # #region Fonts
    def resolve_cell_metrics(self, cell: CellView) -> SpecFontMetrics:
        return self.session.resolve_font_metrics(cell.style.font_index)

    def cell_font_char_width(self, cell: CellView | None) -> int:
        if cell is None:
            return 0
        return math.ceil(self.resolve_cell_metrics(cell).reference_char_width)

    # #endregion
    ############################################################
    # #region Height
    def measure_wrapped_height(self, cell: CellView | None, wrap_width_px: float) -> float:
        """
        Height of ``cell`` wrapped against ``wrap_width_px``.

        Blank content inside a wrap context still occupies a default row.
        """
        if cell is None:
            return self.session.default_row_height_points
        c_text = convert_cell_height_text(cell, self.session.formatter)
        if not c_text:
            return self.session.default_row_height_points

        cfg_options = self.resolve_cell_metrics(cell).text_options.with_wrap_width(
            wrap_width_px
        )
        return float(round(self.session.measurer.measure_advance(c_text, cfg_options).height))

    def measure_unmerged_height(self, cell: CellView) -> float:
        c_text = convert_cell_height_text(cell, self.session.formatter)
        if not c_text:
            return 0.0

        cfg_style = cell.style
        if cfg_style.wrap_text:
            return self.measure_wrapped_height(cell, self.cell_wrap_width_px(cell))

        cfg_metrics = self.resolve_cell_metrics(cell)
        if cfg_style.rotation == 0 and "\n" not in c_text:
            return float(round(cfg_metrics.line_height))

        extent = self.session.measurer.measure_advance(c_text, cfg_metrics.text_options)
        if cfg_style.rotation != 0:
            _, n_height = calculate_rotated_bounds(
                extent.width, extent.height, cfg_style.rotation
            )
            return float(round(n_height))
        return float(round(extent.height))

    def measure_cell_height(self, cell: CellView | None, use_merged_cells: bool) -> float:
        """
        Pixel height ``cell`` needs.

        A merged cell (when ``use_merged_cells``) is measured through the
        region's top-left cell wrapped across the summed column width; the
        block height is then split evenly over the spanned rows. The even
        split is only an estimate; :class:`RowHeightResolver` apportions the
        real per-row heights.
        """
        if cell is None:
            return 0.0
        region = self.session.merge_index.try_get_region(cell.row_index, cell.column_index)
        if region is None or not use_merged_cells:
            return self.measure_unmerged_height(cell)

        cell_top_left = self.get_top_left_cell(region)
        if cell_top_left is None:
            return self.session.default_row_height_points

        n_height_total = self.measure_wrapped_height(
            cell_top_left, self.merged_wrap_width_px(region)
        )
        return n_height_total / max(region.row_count, 1)

    def measure_cell_height_points(self, cell: CellView) -> float:
        """Unmerged cell height in points; blank cells take the default row height."""
        n_height_px = self.measure_unmerged_height(cell)
        if n_height_px <= 0:
            return self.session.default_row_height_points
        cfg_options = self.session.options
        return cfg_options.convert_px_to_points(n_height_px) * cfg_options.height_point_correction

    def get_top_left_cell(self, region: SpecMergedRegion) -> CellView | None:
        row = self.session.sheet.get_row(region.row_first)
        return None if row is None else row.get_cell(region.col_first)

    # #endregion
    ############################################################
    # #region Width
    def measure_cell_width(
        self,
        cell: CellView | None,
        default_char_width: float,
        formatter: CellValueFormatter | None = None,
        use_merged_cells: bool = False,
    ) -> float:
        """
        Width of ``cell`` in units of ``default_char_width``, or -1 when the
        cell shows nothing (blank, error, or hidden inside an ignored merge).

        Only the widest line of a multi-line string counts.
        """
        if cell is None:
            return -1.0

        n_colspan = 1
        region = self.session.merge_index.try_get_region(cell.row_index, cell.column_index)
        if region is not None:
            if not use_merged_cells:
                return -1.0
            row = self.session.sheet.get_row(cell.row_index)
            cell = None if row is None else row.get_cell(region.col_first)
            if cell is None:
                return -1.0
            n_colspan = region.col_count

        l_lines = convert_cell_width_lines(cell, formatter or self.session.formatter)
        if l_lines is None:
            return -1.0

        cfg_metrics = self.resolve_cell_metrics(cell)
        n_width = -1.0
        for _line in l_lines:
            n_width = max(
                n_width,
                self._measure_line_width(
                    _line,
                    cfg_metrics,
                    rotation=cell.style.rotation,
                    colspan=n_colspan,
                    default_char_width=default_char_width,
                ),
            )
        return n_width

    def _measure_line_width(
        self,
        line: str,
        metrics: SpecFontMetrics,
        *,
        rotation: int,
        colspan: int,
        default_char_width: float,
    ) -> float:
        if not line:
            return -1.0
        session = self.session
        c_trimmed = line.strip()
        extent = session.measurer.measure_size(
            c_trimmed or _C_BLANK_HEIGHT_PROBE, metrics.text_options
        )
        n_trimmed_width = extent.width if c_trimmed else 0.0
        n_spaces = len(line) - len(c_trimmed)
        n_width = n_trimmed_width + n_spaces * metrics.space_width

        if rotation != 0:
            n_width, _ = calculate_rotated_bounds(n_width, extent.height, rotation)

        n_correction = (
            session.options.width_correction
            if session.capabilities.legacy_width_correction
            else 1.0
        )
        return (
            (round(n_width) + session.options.cell_padding_px)
            / max(colspan, 1)
            / default_char_width
            * n_correction
        )

    # #endregion
    ############################################################
