#!/usr/bin/env python3
"""
Workbook reader selection.
Picks the backend for a workbook from its file extension:
  .xlsx / .xlsm  -> openpyxl
  .xls           -> xlrd
  .xlsb          -> pyxlsb
"""

from pathlib import Path
from typing import Dict, List, Protocol, Type, Union

from .errors import UnsupportedFileTypeError
from .models import Grid
from .openpyxl_extractor import OpenpyxlWorkbookReader
from .pyxlsb_extractor import PyxlsbWorkbookReader
from .xlrd_extractor import XlrdWorkbookReader


class WorkbookReader(Protocol):
	def __enter__(self) -> "WorkbookReader": ...

	def __exit__(self, exc_type, exc_val, exc_tb) -> None: ...

	def sheet_names(self) -> List[str]: ...

	def worksheet_range(self, sheet_name: str) -> Grid: ...

	def close(self) -> None: ...


READERS: Dict[str, Type] = {
	".xlsx": OpenpyxlWorkbookReader,
	".xlsm": OpenpyxlWorkbookReader,
	".xls": XlrdWorkbookReader,
	".xlsb": PyxlsbWorkbookReader,
}

SUPPORTED_EXTENSIONS = tuple(READERS)


def check_extension(path: Union[str, Path]) -> str:
	"""
	Return the lowercased extension of path, or raise UnsupportedFileTypeError.
	Only looks at the name, the file itself is not touched.
	"""
	ext = Path(path).suffix.lower()
	if ext not in READERS:
		raise UnsupportedFileTypeError("Expecting an Excel file [xlsx, xlsm, xlsb, xls]", str(path))
	return ext


def open_workbook_auto(path: Union[str, Path]) -> WorkbookReader:
	"""Create the reader for path and open it. Use the result as a context manager."""
	reader_cls = READERS[check_extension(path)]
	reader = reader_cls(str(path))
	reader.open_workbook()
	return reader
