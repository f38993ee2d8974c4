from ._convert_impl import convert, output_path_for, sanitize_filename
from .dates import excel_serial_to_datetime, format_datetime
from .extractor import open_workbook_auto
from .models import Cell, CellErrorType, CellKind, Grid
from .serializer import format_cell, write_grid

__all__ = [
	"Cell",
	"CellErrorType",
	"CellKind",
	"Grid",
	"convert",
	"excel_serial_to_datetime",
	"format_cell",
	"format_datetime",
	"open_workbook_auto",
	"output_path_for",
	"sanitize_filename",
	"write_grid",
]

__prog__ = "sheet2csv"
__version__ = "0.1.0"
__author__ = "sheet2csv developers"
__description__ = "Convert every sheet of an Excel workbook to a semicolon separated csv file"
