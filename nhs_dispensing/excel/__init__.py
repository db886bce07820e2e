"""Excel workbook output for the query catalog."""
from .formatters import NUMBER_FORMATS, cell_kind, fit_columns, kpi_card, style_header, write_cell
from .writer import ExcelWriter
