#!/usr/bin/env python3
"""
pyxlsb-based reader for binary .xlsb workbooks.
pyxlsb does not expose number formats, so date cells come out as plain numbers.

Worksheet.rows() drops the record type and hands back error cells as hex
text ('0x7'), which cannot be told apart from a string cell holding the same
text. The sheet's record stream is walked here instead so errors are
recognised by their record.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, List, Optional

from pyxlsb import biff12, open_workbook

from .errors import SheetReadError, WorkbookReadError
from .models import Cell, CellErrorType, Grid

logger = logging.getLogger(__name__)

_ERROR_RECORDS = (biff12.BOOLERR, biff12.FORMULA_BOOLERR)


def cell_from_pyxlsb(value: Any) -> Cell:
	if value is None:
		return Cell.empty()
	if isinstance(value, bool):
		return Cell.boolean(value)
	if isinstance(value, int):
		return Cell.integer(value)
	if isinstance(value, float):
		return Cell.number(value)
	return Cell.string(str(value))


def cell_from_record(recid: int, value: Any, stringtable: Optional[Any] = None) -> Cell:
	if value is None:
		return Cell.empty()
	if recid in _ERROR_RECORDS:
		# pyxlsb formats the error byte with hex()
		return Cell.error(CellErrorType.from_code(int(value, 16)))
	if recid == biff12.STRING and stringtable is not None:
		return Cell.string(stringtable[value])
	return cell_from_pyxlsb(value)


def read_sheet_rows(sheet) -> List[List[Cell]]:
	rows: List[List[Cell]] = []
	row: Optional[List[Cell]] = None
	reader = sheet._reader
	reader.seek(sheet._data_offset, os.SEEK_SET)
	for recid, item in reader:
		if recid == biff12.ROW:
			while len(rows) <= item.r:
				rows.append([])
			row = rows[item.r]
		elif biff12.BLANK <= recid <= biff12.FORMULA_BOOLERR and row is not None:
			row.extend([Cell.empty()] * (item.c + 1 - len(row)))
			row[item.c] = cell_from_record(recid, item.v, sheet._stringtable)
		elif recid == biff12.SHEETDATA_END:
			break
	return rows


class PyxlsbWorkbookReader:
	"""Read sheet names and cell grids from .xlsb files using pyxlsb."""

	def __init__(self, excel_file_path: str):
		self.excel_file_path = Path(excel_file_path)
		self.workbook = None
		if not self.excel_file_path.exists():
			raise WorkbookReadError("Excel file not found", str(excel_file_path))

	def __enter__(self):
		if self.workbook is None:
			self.open_workbook()
		return self

	def __exit__(self, exc_type, exc_val, exc_tb):
		self.close_workbook()

	def open_workbook(self) -> None:
		logger.debug("Opening %s with pyxlsb", self.excel_file_path)
		try:
			self.workbook = open_workbook(str(self.excel_file_path))
		except Exception as e:
			raise WorkbookReadError(f"Cannot open workbook: {e}", str(self.excel_file_path)) from e

	def close_workbook(self) -> None:
		if self.workbook is not None:
			self.workbook.close()
			self.workbook = None

	close = close_workbook

	def sheet_names(self) -> List[str]:
		return list(self.workbook.sheets)

	def worksheet_range(self, sheet_name: str) -> Grid:
		if sheet_name not in self.workbook.sheets:
			raise SheetReadError(f"Sheet not found: {sheet_name}", sheet_name, str(self.excel_file_path))
		try:
			with self.workbook.get_sheet(sheet_name) as sheet:
				rows = read_sheet_rows(sheet)
		except (IndexError, KeyError, ValueError) as e:
			raise SheetReadError(f"Cannot read sheet {sheet_name}: {e}", sheet_name, str(self.excel_file_path)) from e
		return Grid.from_rows(rows)
