# Strategy/Preference/Adjustable Parameters for sheet sizing.

from .spec import SpecSizingOptions

N_DPI_MEASURE = 144
N_CELL_PADDING_PX = 8
N_DEFAULT_PADDING_PX = 20
N_WIDTH_CORRECTION = 1.05
N_ROW_HEIGHT_POINTS_MAX = 409.5
N_POINTS_PER_INCH = 72.0
N_HEIGHT_POINT_CORRECTION = 1.33
N_COLUMN_WIDTH_UNITS_PER_CHAR = 256
N_CONTENT_EPSILON_POINTS = 0.1

# Excel measures column widths in units of the '0' glyph.
C_REFERENCE_CHAR = "0"
C_FALLBACK_FONT_FAMILY = "Arial"
C_LINE_HEIGHT_PROBE = "Hg"

# Backend major version from which wrap width gets per-column padding.
N_WRAP_PADDING_MAJOR_VERSION_MIN = 2

DEFAULT_SIZING_OPTIONS = SpecSizingOptions(
    dpi=N_DPI_MEASURE,
    cell_padding_px=N_CELL_PADDING_PX,
    default_padding_px=N_DEFAULT_PADDING_PX,
    width_correction=N_WIDTH_CORRECTION,
    row_height_points_max=N_ROW_HEIGHT_POINTS_MAX,
    points_per_inch=N_POINTS_PER_INCH,
    height_point_correction=N_HEIGHT_POINT_CORRECTION,
    content_epsilon_points=N_CONTENT_EPSILON_POINTS,
    reference_char=C_REFERENCE_CHAR,
    fallback_font_family=C_FALLBACK_FONT_FAMILY,
)
