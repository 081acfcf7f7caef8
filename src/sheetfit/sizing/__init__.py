from .api import (
    can_compute_column_width,
    get_cell_font_char_width,
    get_cell_height,
    get_cell_width,
    get_cell_with_merges,
    get_column_width,
    get_default_char_width,
    get_row_cells_height,
    get_row_height,
    open_session,
)
from .cell_metrics import CellMetricsEngine, calculate_rotated_bounds
from .column_width import ColumnWidthResolver
from .conf import DEFAULT_SIZING_OPTIONS
from .errors import FontResolutionError, InvalidRangeError
from .font_cache import FontMetricsCache, get_shared_font_cache
from .merge_index import MergeIndex
from .row_height import RowHeightResolver, apportion_block_height
from .session import SizingSession
from .spec import (
    EnumCellType,
    SpecBlockAssignment,
    SpecFontDescriptor,
    SpecFontMetrics,
    SpecMergedRegion,
    SpecSizingCapabilities,
    SpecSizingOptions,
    SpecTextExtent,
    SpecTextOptions,
)
from .value_text import DefaultCellFormatter

__all__ = [
    "DEFAULT_SIZING_OPTIONS",
    "CellMetricsEngine",
    "ColumnWidthResolver",
    "DefaultCellFormatter",
    "EnumCellType",
    "FontMetricsCache",
    "FontResolutionError",
    "InvalidRangeError",
    "MergeIndex",
    "RowHeightResolver",
    "SizingSession",
    "SpecBlockAssignment",
    "SpecFontDescriptor",
    "SpecFontMetrics",
    "SpecMergedRegion",
    "SpecSizingCapabilities",
    "SpecSizingOptions",
    "SpecTextExtent",
    "SpecTextOptions",
    "apportion_block_height",
    "calculate_rotated_bounds",
    "can_compute_column_width",
    "get_cell_font_char_width",
    "get_cell_height",
    "get_cell_width",
    "get_cell_with_merges",
    "get_column_width",
    "get_default_char_width",
    "get_row_cells_height",
    "get_row_height",
    "get_shared_font_cache",
    "open_session",
]
