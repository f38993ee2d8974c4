#!/usr/bin/env python3
"""
xlrd-based reader for legacy .xls (BIFF) workbooks.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

import xlrd

from .errors import SheetReadError, WorkbookReadError
from .models import Cell, CellErrorType, Grid

logger = logging.getLogger(__name__)

# days between the 1900 and 1904 date systems
_MAC_EPOCH_OFFSET = 1462


def cell_from_xlrd(cell: Any, datemode: int = 0) -> Cell:
	ctype = cell.ctype
	if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
		return Cell.empty()
	if ctype == xlrd.XL_CELL_TEXT:
		return Cell.string(cell.value)
	if ctype == xlrd.XL_CELL_NUMBER:
		return Cell.number(cell.value)
	if ctype == xlrd.XL_CELL_DATE:
		serial = cell.value + _MAC_EPOCH_OFFSET if datemode == 1 else cell.value
		return Cell.date_time(serial)
	if ctype == xlrd.XL_CELL_BOOLEAN:
		return Cell.boolean(cell.value)
	if ctype == xlrd.XL_CELL_ERROR:
		return Cell.error(CellErrorType.from_code(cell.value))
	raise ValueError(f"Unknown xlrd cell type: {ctype}")


class XlrdWorkbookReader:
	"""Read sheet names and cell grids from .xls files using xlrd."""

	def __init__(self, excel_file_path: str):
		self.excel_file_path = Path(excel_file_path)
		self.book = None
		if not self.excel_file_path.exists():
			raise WorkbookReadError("Excel file not found", str(excel_file_path))

	def __enter__(self):
		if self.book is None:
			self.open_workbook()
		return self

	def __exit__(self, exc_type, exc_val, exc_tb):
		self.close_workbook()

	def open_workbook(self) -> None:
		logger.debug("Opening %s with xlrd", self.excel_file_path)
		try:
			self.book = xlrd.open_workbook(str(self.excel_file_path), on_demand=True)
		except Exception as e:
			raise WorkbookReadError(f"Cannot open workbook: {e}", str(self.excel_file_path)) from e

	def close_workbook(self) -> None:
		if self.book is not None:
			self.book.release_resources()
			self.book = None

	close = close_workbook

	def sheet_names(self) -> List[str]:
		return list(self.book.sheet_names())

	def worksheet_range(self, sheet_name: str) -> Grid:
		try:
			sheet = self.book.sheet_by_name(sheet_name)
			rows = [[cell_from_xlrd(c, self.book.datemode) for c in sheet.row(i)] for i in range(sheet.nrows)]
		except (xlrd.XLRDError, ValueError) as e:
			raise SheetReadError(f"Cannot read sheet {sheet_name}: {e}", sheet_name, str(self.excel_file_path)) from e
		self.book.unload_sheet(sheet_name)
		return Grid.from_rows(rows)
