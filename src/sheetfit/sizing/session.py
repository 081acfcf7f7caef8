import math

from loguru import logger

from .cell_metrics import CellMetricsEngine
from .column_width import ColumnWidthResolver
from .conf import DEFAULT_SIZING_OPTIONS, N_WRAP_PADDING_MAJOR_VERSION_MIN
from .font_cache import FontMetricsCache, get_shared_font_cache
from .merge_index import MergeIndex
from .protocols import CellValueFormatter, FontView, SheetView, TextMeasurer, WorkbookView
from .row_height import RowHeightResolver
from .spec import (
    SpecBlockAssignment,
    SpecFontDescriptor,
    SpecFontMetrics,
    SpecMergedRegion,
    SpecSizingCapabilities,
    SpecSizingOptions,
)
from .value_text import DEFAULT_CELL_FORMATTER


def derive_sizing_capabilities(
    measurer: TextMeasurer, workbook: WorkbookView
) -> SpecSizingCapabilities:
    b_modern_backend = measurer.major_version >= N_WRAP_PADDING_MAJOR_VERSION_MIN
    return SpecSizingCapabilities(
        wrap_padding_supported=b_modern_backend,
        legacy_width_correction=not b_modern_backend,
        legacy_format=bool(workbook.is_legacy_format),
    )


def convert_font_descriptor(font: FontView) -> SpecFontDescriptor:
    return SpecFontDescriptor(
        family=font.name,
        size_points=float(font.height_in_points),
        bold=bool(font.is_bold),
        italic=bool(font.is_italic),
    )


class SizingSession:
    """
    Context of one sizing pass over one sheet.

    Owns the pass-scoped state (merge index, merged-width arena, applied
    block assignments) and references the shared font metrics cache. Build a
    new session, or call :meth:`rebuild_merge_index`, after changing merges or
    column widths.

    Example::

        session = SizingSession(sheet, measurer=PillowTextMeasurer())
        n_height_pt = session.rows.get_row_height(3, use_merged_cells=True)
        n_width_chars = session.columns.get_column_width(0, use_merged_cells=True)
    """

    def __init__(
        self,
        sheet: SheetView,
        *,
        measurer: TextMeasurer | None = None,
        font_cache: FontMetricsCache | None = None,
        options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
        formatter: CellValueFormatter = DEFAULT_CELL_FORMATTER,
        capabilities: SpecSizingCapabilities | None = None,
        merge_index: MergeIndex | None = None,
    ) -> None:
        if measurer is None:
            if font_cache is not None:
                measurer = font_cache.measurer
            else:
                from ..measure import get_default_text_measurer

                measurer = get_default_text_measurer()

        self.sheet = sheet
        self.measurer = measurer
        self.options = options
        self.formatter = formatter
        self.font_cache = (
            font_cache
            if font_cache is not None
            else get_shared_font_cache(measurer, options=options)
        )
        self.capabilities = (
            capabilities
            if capabilities is not None
            else derive_sizing_capabilities(measurer, sheet.workbook)
        )
        self.merge_index = (
            merge_index if merge_index is not None else MergeIndex.build(sheet)
        )
        self._dict_merged_width_px: dict[SpecMergedRegion, float] = {}
        self._dict_block_assignments: dict[SpecMergedRegion, SpecBlockAssignment] = {}
        self._n_default_char_width: int | None = None

        self.cells = CellMetricsEngine(self)
        self.rows = RowHeightResolver(self)
        self.columns = ColumnWidthResolver(self)

    def for_sheet(self, sheet: SheetView) -> "SizingSession":
        """New pass over ``sheet`` sharing measurer, font cache and options."""
        return SizingSession(
            sheet,
            measurer=self.measurer,
            font_cache=self.font_cache,
            options=self.options,
            formatter=self.formatter,
        )

    def rebuild_merge_index(self) -> MergeIndex:
        self.merge_index = MergeIndex.build(self.sheet)
        self._dict_merged_width_px.clear()
        self._dict_block_assignments.clear()
        return self.merge_index

    @property
    def default_row_height_points(self) -> float:
        return float(self.sheet.default_row_height_points)

    def resolve_font_metrics(self, font_index: int) -> SpecFontMetrics:
        font = self.sheet.workbook.get_font_at(font_index)
        return self.font_cache.resolve(convert_font_descriptor(font))

    @property
    def default_char_width(self) -> int:
        """Pixel width of the reference char in the workbook's default font."""
        if self._n_default_char_width is None:
            cfg_metrics = self.resolve_font_metrics(0)
            self._n_default_char_width = max(
                1, math.ceil(cfg_metrics.reference_char_width)
            )
        return self._n_default_char_width

    def get_merged_pixel_width(self, region: SpecMergedRegion) -> float:
        # Column widths are fixed for the pass, so the sum is memoised.
        n_width_px = self._dict_merged_width_px.get(region)
        if n_width_px is None:
            n_width_px = sum(
                self.cells.column_width_px(_col)
                for _col in range(region.col_first, region.col_last + 1)
            )
            self._dict_merged_width_px[region] = n_width_px
        return n_width_px

    def get_block_assignment(self, region: SpecMergedRegion) -> SpecBlockAssignment | None:
        return self._dict_block_assignments.get(region)

    def store_block_assignment(self, assignment: SpecBlockAssignment) -> None:
        self._dict_block_assignments[assignment.region] = assignment
        logger.debug(
            f"Merged block {assignment.region} apportioned: "
            f"total={assignment.total_points:.2f}pt assigned={assignment.assigned_points}"
        )
