from __future__ import annotations

import struct
import zipfile
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple

import pytest
import xlwt
from openpyxl import Workbook
from pyxlsb import biff12


def _save_workbook(path: Path, sheets: Dict[str, List[List[object]]]) -> Path:
	wb = Workbook()
	wb.remove(wb.active)
	for name, rows in sheets.items():
		ws = wb.create_sheet(name)
		for r, row in enumerate(rows, start=1):
			for c, value in enumerate(row, start=1):
				if value is not None:
					ws.cell(row=r, column=c, value=value)
	wb.save(path)
	return path


@pytest.fixture
def make_xlsx(tmp_path: Path) -> Callable[..., Path]:
	"""Build an .xlsx in tmp_path from {sheet name: rows of values}."""

	def _make(sheets: Dict[str, List[List[object]]], name: str = "book.xlsx") -> Path:
		return _save_workbook(tmp_path / name, sheets)

	return _make


@pytest.fixture
def two_sheet_workbook(make_xlsx) -> Path:
	return make_xlsx({
		"Sheet1": [["A", 1], [2, True]],
		"hiddenSheet": [["secret"]],
	})


# .xls

XLS_DATE_STYLE = "YYYY-MM-DD hh:mm:ss"


@pytest.fixture
def make_xls(tmp_path: Path) -> Callable[..., Path]:
	"""
	Build an .xls with xlwt. Each cell is a plain value, ("date", value) for
	a date-formatted number or ("error", "#DIV/0!") for an error cell.
	"""

	def _make(sheets: Dict[str, List[List[object]]], name: str = "book.xls", dates_1904: bool = False) -> Path:
		wb = xlwt.Workbook()
		wb.dates_1904 = dates_1904
		date_style = xlwt.easyxf(num_format_str=XLS_DATE_STYLE)
		for sheet_name, rows in sheets.items():
			ws = wb.add_sheet(sheet_name)
			for r, row in enumerate(rows):
				for c, value in enumerate(row):
					if value is None:
						continue
					if isinstance(value, tuple) and value[0] == "date":
						ws.write(r, c, value[1], date_style)
					elif isinstance(value, tuple) and value[0] == "error":
						ws.row(r).set_cell_error(c, value[1])
					else:
						ws.write(r, c, value)
		path = tmp_path / name
		wb.save(str(path))
		return path

	return _make


# .xlsb, assembled from BIFF12 records

XlsbCell = Tuple[int, int, bytes]


def _record(recid: int, payload: bytes = b"") -> bytes:
	rid = bytes([recid]) if recid < 0x80 else struct.pack("<H", recid)
	size = len(payload)
	encoded = bytearray()
	while True:
		byte = size & 0x7F
		size >>= 7
		if size:
			encoded.append(byte | 0x80)
		else:
			encoded.append(byte)
			break
	return rid + bytes(encoded) + payload


def _wide(text: str) -> bytes:
	return struct.pack("<I", len(text)) + text.encode("utf-16-le")


def xlsb_float(col: int, value: float) -> XlsbCell:
	return biff12.FLOAT, col, struct.pack("<d", value)


def xlsb_shared_string(col: int, index: int) -> XlsbCell:
	return biff12.STRING, col, struct.pack("<I", index)


def xlsb_inline_string(col: int, text: str) -> XlsbCell:
	return biff12.FORMULA_STRING, col, _wide(text)


def xlsb_bool(col: int, value: bool) -> XlsbCell:
	return biff12.BOOL, col, bytes([1 if value else 0])


def xlsb_error(col: int, code: int, formula: bool = False) -> XlsbCell:
	return (biff12.FORMULA_BOOLERR if formula else biff12.BOOLERR), col, bytes([code])


def xlsb_blank(col: int) -> XlsbCell:
	return biff12.BLANK, col, b""


def _sheet_part(rows: Dict[int, Sequence[XlsbCell]]) -> bytes:
	out = [_record(biff12.WORKSHEET), _record(biff12.SHEETDATA)]
	for r in sorted(rows):
		out.append(_record(biff12.ROW, struct.pack("<I", r)))
		for recid, col, value in rows[r]:
			out.append(_record(recid, struct.pack("<II", col, 0) + value))
	out.append(_record(biff12.SHEETDATA_END))
	out.append(_record(biff12.WORKSHEET_END))
	return b"".join(out)


@pytest.fixture
def make_xlsb(tmp_path: Path) -> Callable[..., Path]:
	"""Build an .xlsb from {sheet name: {row index: [cell records]}} and shared strings."""

	def _make(sheets: Dict[str, Dict[int, Sequence[XlsbCell]]], strings: Sequence[str] = (), name: str = "book.xlsb") -> Path:
		rels = ['<?xml version="1.0" encoding="UTF-8"?>', '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">']
		book = [_record(biff12.WORKBOOK), _record(biff12.SHEETS)]
		parts = {}
		for i, (sheet_name, rows) in enumerate(sheets.items(), start=1):
			rid = f"rId{i}"
			target = f"worksheets/sheet{i}.bin"
			rels.append(f'<Relationship Id="{rid}" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/worksheet" Target="{target}"/>')
			book.append(_record(biff12.SHEET, struct.pack("<II", 0, i) + _wide(rid) + _wide(sheet_name)))
			parts[f"xl/{target}"] = _sheet_part(rows)
		rels.append("</Relationships>")
		book.append(_record(biff12.SHEETS_END))
		book.append(_record(biff12.WORKBOOK_END))

		path = tmp_path / name
		with zipfile.ZipFile(path, "w") as zf:
			zf.writestr("xl/_rels/workbook.bin.rels", "".join(rels))
			zf.writestr("xl/workbook.bin", b"".join(book))
			if strings:
				sst = [_record(biff12.SST, struct.pack("<II", len(strings), len(strings)))]
				sst.extend(_record(biff12.SI, b"\x00" + _wide(s)) for s in strings)
				sst.append(_record(biff12.SST_END))
				zf.writestr("xl/sharedStrings.bin", b"".join(sst))
			for part, data in parts.items():
				zf.writestr(part, data)
		return path

	return _make
