#!/usr/bin/env python3
import logging
import re
from pathlib import Path
from typing import List, Union

from .errors import OutputWriteError, SheetReadError
from .extractor import check_extension, open_workbook_auto
from .models import Grid
from .serializer import write_grid

logger = logging.getLogger(__name__)

SKIPPED_SHEET = "hiddenSheet"
OUTPUT_EXTENSION = ".csv"
MAX_FILENAME_BYTES = 255

_ILLEGAL_RE = re.compile(r"[/?<>\\:*|\"]")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED_RE = re.compile(r"^\.+$")
_WINDOWS_RESERVED_RE = re.compile(r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE)
_WINDOWS_TRAILING_RE = re.compile(r"[. ]+$")


def _truncate_utf8(name: str, limit: int) -> str:
	return name.encode("utf-8")[:limit].decode("utf-8", errors="ignore")


def sanitize_filename(name: str, replacement: str = "") -> str:
	"""
	Make name safe to use as a file name on any platform: illegal and control
	characters are replaced, dot-only and Windows device names are dropped,
	trailing dots/spaces are removed and the result is cut to 255 bytes.
	"""
	name = _ILLEGAL_RE.sub(replacement, name)
	name = _CONTROL_RE.sub(replacement, name)
	name = _RESERVED_RE.sub(replacement, name)
	name = _WINDOWS_RESERVED_RE.sub(replacement, name)
	name = _WINDOWS_TRAILING_RE.sub(replacement, name)
	return _truncate_utf8(name, MAX_FILENAME_BYTES)


def output_path_for(workbook_path: Path, sheet_name: str) -> Path:
	filename = sanitize_filename(f"{workbook_path.stem}_{sheet_name}{OUTPUT_EXTENSION}")
	return workbook_path.with_name(filename)


def write_sheet_csv(dest: Path, grid: Grid) -> None:
	try:
		with open(dest, "wb") as f:
			write_grid(f, grid)
	except OSError as e:
		raise OutputWriteError(f"Cannot write output file: {e}", str(dest)) from e


def convert(workbook_path: Union[str, Path]) -> List[Path]:
	"""
	Write one semicolon separated file per sheet next to workbook_path and
	return the paths written, in sheet order. The first error aborts the run;
	files already written are kept.
	"""
	workbook_path = Path(workbook_path)
	check_extension(workbook_path)

	written: List[Path] = []
	with open_workbook_auto(workbook_path) as excel:
		sheets = excel.sheet_names()
		logger.debug("Found %d sheet(s) in %s", len(sheets), workbook_path.name)
		for sheet in sheets:
			if sheet == SKIPPED_SHEET:
				logger.info("Skipping sheet %s", sheet)
				continue
			grid = excel.worksheet_range(sheet)

			dest = output_path_for(workbook_path, sheet)
			print(dest)
			logger.debug("Sheet %s: %d rows x %d columns", sheet, grid.height, grid.width)
			try:
				write_sheet_csv(dest, grid)
			except OverflowError as e:
				raise SheetReadError(f"Date out of range in sheet {sheet}: {e}", sheet, str(workbook_path)) from e
			written.append(dest)
	return written
