"""
Workbook look: NHS identity colours, and the fonts, fills and borders built from them.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

# NHS identity palette
NHS_BLUE = "005EB8"
NHS_DARK_BLUE = "003087"
NHS_PALE_GREY = "E8EDEE"
NHS_MID_GREY = "768692"
NHS_WARM_YELLOW = "FFB81C"
NHS_RED = "DA291C"
ROW_STRIPE = "F5F7F8"
SENTINEL_TINT = "FFF4D6"
ISSUE_TINT = "FBE5E3"
GRID = "CCCCCC"


def _font(size: int, color: str = "000000", **kw) -> Font:
    return Font(name="Arial", size=size, color=color, **kw)


def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _box(color: str, bottom: str = "thin") -> Border:
    side = Side(style="thin", color=color)
    return Border(left=side, right=side, top=side, bottom=Side(style=bottom, color=color))


TITLE_FONT = _font(22, NHS_DARK_BLUE, bold=True)
SUBTITLE_FONT = _font(11, NHS_MID_GREY, italic=True)
SECTION_FONT = _font(13, NHS_BLUE, bold=True)
HEADER_FONT = _font(10, "FFFFFF", bold=True)
DATA_FONT = _font(10)
KPI_VALUE_FONT = _font(24, NHS_BLUE, bold=True)
KPI_LABEL_FONT = _font(9, NHS_MID_GREY)
NOTE_TITLE_FONT = _font(10, NHS_RED, bold=True)
NOTE_BODY_FONT = _font(10, italic=True)
LEGEND_FONT = _font(10, bold=True)

HEADER_FILL = _fill(NHS_DARK_BLUE)
LEGEND_FILL = _fill(NHS_PALE_GREY)
STRIPE_FILL = _fill(ROW_STRIPE)

GRID_BORDER = _box(GRID)
HEADER_BORDER = _box(NHS_DARK_BLUE, bottom="medium")

CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")
WRAP = Alignment(horizontal="left", vertical="top", wrap_text=True)

# Row highlight name → fill
HIGHLIGHT_FILLS = {
    "sentinel": _fill(SENTINEL_TINT),
    "warning": _fill(ISSUE_TINT),
}
