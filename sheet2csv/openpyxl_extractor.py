#!/usr/bin/env python3
"""
OpenPyXL-based reader for .xlsx and .xlsm workbooks.
Limitations:
- Workbooks are loaded with data_only=True, so formula cells yield their cached
  value (or nothing when the file was never calculated)
- Styles, merged ranges and charts are ignored

Date cells are read as stored: date-formatted numbers keep their serial and
ISO dates (t="d") keep their text. openpyxl's own datetime conversion is
lossy around the 1900 leap-year day and rounds to milliseconds.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from openpyxl import load_workbook
from openpyxl.utils.datetime import MAC_EPOCH
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet._read_only import ReadOnlyWorksheet
from openpyxl.worksheet._reader import WorkSheetParser

from .errors import SheetReadError, WorkbookReadError
from .models import Cell, CellErrorType, Grid

logger = logging.getLogger(__name__)

# days between the 1900 and 1904 date systems
_MAC_EPOCH_OFFSET = 1462

SERIAL_DATE = "serial"


class SerialWorkSheetParser(WorkSheetParser):
	"""WorkSheetParser that leaves date cells as stored in the sheet xml."""

	def __init__(self, *args, **kwargs):
		super().__init__(*args, **kwargs)
		self.serial_date_formats = set(self.date_formats)
		self.date_formats = set()

	def parse_cell(self, element):
		if element.get("t") == "d":
			# parsed as a plain string so from_ISO8601 is skipped
			element.set("t", "str")
			cell = super().parse_cell(element)
			cell["data_type"] = "d"
			return cell
		cell = super().parse_cell(element)
		if cell["data_type"] == "n" and cell["style_id"] in self.serial_date_formats:
			cell["data_type"] = SERIAL_DATE
		return cell


def cell_from_openpyxl(cell: Dict[str, Any], mac_epoch: bool = False) -> Cell:
	value = cell["value"]
	data_type = cell["data_type"]
	if value is None:
		return Cell.empty()
	if data_type == "e":
		return Cell.error(CellErrorType.from_text(str(value)))
	if data_type == "d":
		return Cell.datetime_iso(str(value))
	if data_type == SERIAL_DATE:
		return Cell.date_time(value + _MAC_EPOCH_OFFSET if mac_epoch else value)
	if isinstance(value, bool):
		return Cell.boolean(value)
	if isinstance(value, int):
		return Cell.integer(value)
	if isinstance(value, float):
		return Cell.number(value)
	return Cell.string(str(value))


class OpenpyxlWorkbookReader:
	"""Read sheet names and cell grids using openpyxl (cross-platform)."""

	def __init__(self, excel_file_path: str):
		self.excel_file_path = Path(excel_file_path)
		self.workbook: Optional[Workbook] = None
		if not self.excel_file_path.exists():
			raise WorkbookReadError("Excel file not found", str(excel_file_path))

	def __enter__(self):
		if self.workbook is None:
			self.open_workbook()
		return self

	def __exit__(self, exc_type, exc_val, exc_tb):
		self.close_workbook()

	def open_workbook(self) -> None:
		logger.debug("Opening %s with openpyxl", self.excel_file_path)
		try:
			self.workbook = load_workbook(filename=str(self.excel_file_path), data_only=True, read_only=True, keep_links=False)
		except Exception as e:
			raise WorkbookReadError(f"Cannot open workbook: {e}", str(self.excel_file_path)) from e

	def close_workbook(self) -> None:
		if self.workbook is not None:
			self.workbook.close()
			self.workbook = None

	close = close_workbook

	def sheet_names(self) -> List[str]:
		return list(self.workbook.sheetnames)

	def _select_sheet(self, sheet_name: str) -> ReadOnlyWorksheet:
		try:
			ws = self.workbook[sheet_name]
		except KeyError:
			raise SheetReadError(f"Sheet not found: {sheet_name}", sheet_name, str(self.excel_file_path)) from None
		if not isinstance(ws, ReadOnlyWorksheet):
			raise SheetReadError(f"Not a worksheet: {sheet_name}", sheet_name, str(self.excel_file_path))
		return ws

	def worksheet_range(self, sheet_name: str) -> Grid:
		ws = self._select_sheet(sheet_name)
		wb = self.workbook
		mac_epoch = wb.epoch == MAC_EPOCH
		rows: List[List[Cell]] = []
		try:
			with ws._get_source() as src:
				parser = SerialWorkSheetParser(
					src,
					ws._shared_strings,
					data_only=True,
					epoch=wb.epoch,
					date_formats=wb._date_formats,
					timedelta_formats=wb._timedelta_formats,
				)
				for idx, cells in parser.parse():
					while len(rows) < idx:
						rows.append([])
					row = rows[idx - 1]
					for cell in cells:
						col = cell["column"]
						row.extend([Cell.empty()] * (col - len(row)))
						row[col - 1] = cell_from_openpyxl(cell, mac_epoch)
		except (KeyError, ValueError) as e:
			raise SheetReadError(f"Cannot read sheet {sheet_name}: {e}", sheet_name, str(self.excel_file_path)) from e
		return Grid.from_rows(rows)
