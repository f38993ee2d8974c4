#!/usr/bin/env python3
"""
Grid serializer: writes a Grid as semicolon separated rows ending in CRLF.
Fields are written as-is; nothing is quoted or escaped.
"""

import math
from decimal import Decimal
from typing import BinaryIO

from .dates import excel_serial_to_datetime, format_datetime
from .models import Cell, CellKind, Grid

SEPARATOR = b";"
LINE_TERMINATOR = b"\r\n"
ENCODING = "utf-8"


def format_float(value: float) -> str:
	"""Shortest round-trip decimal text, never in exponent notation (3.0 -> "3")."""
	if math.isnan(value):
		return "NaN"
	if math.isinf(value):
		return "inf" if value > 0 else "-inf"
	text = format(Decimal(repr(value)), "f")
	if "." in text:
		text = text.rstrip("0").rstrip(".")
	return text


def format_cell(cell: Cell) -> str:
	kind = cell.kind
	if kind is CellKind.EMPTY:
		return ""
	if kind in (CellKind.STRING, CellKind.DATETIME_ISO, CellKind.DURATION_ISO):
		return cell.value
	if kind is CellKind.FLOAT:
		return format_float(cell.value)
	if kind is CellKind.INT:
		return str(cell.value)
	if kind is CellKind.DATETIME:
		return format_datetime(excel_serial_to_datetime(cell.value))
	if kind is CellKind.BOOL:
		return "true" if cell.value else "false"
	if kind is CellKind.ERROR:
		return cell.value.symbol
	raise TypeError(f"Unhandled cell kind: {kind!r}")


def write_grid(dest: BinaryIO, grid: Grid) -> None:
	"""
	Write every row of grid to dest. The last field index is taken from the
	grid width once; every row is expected to have that many cells.
	Write errors propagate, bytes already written are left in place.
	"""
	last = grid.width - 1
	for row in grid.rows:
		for i, cell in enumerate(row):
			text = format_cell(cell)
			if text:
				dest.write(text.encode(ENCODING))
			if i != last:
				dest.write(SEPARATOR)
		dest.write(LINE_TERMINATOR)
