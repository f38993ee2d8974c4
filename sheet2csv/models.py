#!/usr/bin/env python3
"""
Typed cell model shared by the workbook readers and the grid serializer.
A Cell is a closed tagged value: its kind is one of CellKind and the payload
type depends on that kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple


class CellKind(Enum):
	EMPTY = "empty"
	STRING = "string"
	FLOAT = "float"
	INT = "int"
	BOOL = "bool"
	DATETIME = "datetime"
	DATETIME_ISO = "datetime_iso"
	DURATION_ISO = "duration_iso"
	ERROR = "error"


class CellErrorType(Enum):
	"""Spreadsheet error values, keyed by their display text."""

	DIV0 = "#DIV/0!"
	NA = "#N/A"
	NAME = "#NAME?"
	NULL = "#NULL!"
	NUM = "#NUM!"
	REF = "#REF!"
	VALUE = "#VALUE!"
	GETTING_DATA = "#GETTING_DATA"

	@property
	def symbol(self) -> str:
		return _ERROR_SYMBOLS[self]

	@classmethod
	def from_text(cls, text: str) -> "CellErrorType":
		return cls(text.strip().upper())

	@classmethod
	def from_code(cls, code: int) -> "CellErrorType":
		# BIFF error codes as stored in .xls and .xlsb records
		try:
			return _ERROR_CODES[code]
		except KeyError:
			raise ValueError(f"Unknown cell error code: {code:#04x}") from None


_ERROR_SYMBOLS = {
	CellErrorType.DIV0: "Div0",
	CellErrorType.NA: "NA",
	CellErrorType.NAME: "Name",
	CellErrorType.NULL: "Null",
	CellErrorType.NUM: "Num",
	CellErrorType.REF: "Ref",
	CellErrorType.VALUE: "Value",
	CellErrorType.GETTING_DATA: "GettingData",
}

_ERROR_CODES = {
	0x00: CellErrorType.NULL,
	0x07: CellErrorType.DIV0,
	0x0F: CellErrorType.VALUE,
	0x17: CellErrorType.REF,
	0x1D: CellErrorType.NAME,
	0x24: CellErrorType.NUM,
	0x2A: CellErrorType.NA,
	0x2B: CellErrorType.GETTING_DATA,
}


@dataclass(frozen=True)
class Cell:
	kind: CellKind
	value: Any = None

	@classmethod
	def empty(cls) -> "Cell":
		return _EMPTY

	@classmethod
	def string(cls, value: str) -> "Cell":
		return cls(CellKind.STRING, value)

	@classmethod
	def number(cls, value: float) -> "Cell":
		return cls(CellKind.FLOAT, float(value))

	@classmethod
	def integer(cls, value: int) -> "Cell":
		return cls(CellKind.INT, int(value))

	@classmethod
	def boolean(cls, value: bool) -> "Cell":
		return cls(CellKind.BOOL, bool(value))

	@classmethod
	def date_time(cls, serial: float) -> "Cell":
		"""Date-time stored as a fractional day count since the 1899-12-30 epoch."""
		return cls(CellKind.DATETIME, float(serial))

	@classmethod
	def datetime_iso(cls, value: str) -> "Cell":
		return cls(CellKind.DATETIME_ISO, value)

	@classmethod
	def duration_iso(cls, value: str) -> "Cell":
		return cls(CellKind.DURATION_ISO, value)

	@classmethod
	def error(cls, error: CellErrorType) -> "Cell":
		return cls(CellKind.ERROR, error)

	@property
	def is_empty(self) -> bool:
		return self.kind is CellKind.EMPTY


_EMPTY = Cell(CellKind.EMPTY)


@dataclass(frozen=True)
class Grid:
	"""Rectangular block of cells covering the used area of one sheet."""

	rows: Tuple[Tuple[Cell, ...], ...] = field(default_factory=tuple)
	width: int = 0

	@property
	def height(self) -> int:
		return len(self.rows)

	def get_size(self) -> Tuple[int, int]:
		return self.height, self.width

	def is_empty(self) -> bool:
		return not self.rows

	@classmethod
	def from_rows(cls, rows: Iterable[Sequence[Cell]]) -> "Grid":
		"""
		Build a grid from raw rows, trimmed to the bounding box of the
		non-empty cells. Short rows are padded with empty cells.
		"""
		materialized: List[Sequence[Cell]] = [list(r) for r in rows]
		bounds = _used_bounds(materialized)
		if bounds is None:
			return cls()
		min_row, max_row, min_col, max_col = bounds
		width = max_col - min_col + 1
		trimmed: List[Tuple[Cell, ...]] = []
		for r in materialized[min_row:max_row + 1]:
			part = list(r[min_col:max_col + 1])
			part.extend([_EMPTY] * (width - len(part)))
			trimmed.append(tuple(part))
		return cls(rows=tuple(trimmed), width=width)


def _used_bounds(rows: List[Sequence[Cell]]) -> Optional[Tuple[int, int, int, int]]:
	min_row = max_row = min_col = max_col = None
	for ri, r in enumerate(rows):
		for ci, c in enumerate(r):
			if c.is_empty:
				continue
			if min_row is None:
				min_row = ri
			max_row = ri
			min_col = ci if min_col is None else min(min_col, ci)
			max_col = ci if max_col is None else max(max_col, ci)
	if min_row is None:
		return None
	return min_row, max_row, min_col, max_col
