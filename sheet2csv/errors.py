#!/usr/bin/env python3
"""
Exceptions raised while converting a workbook.

Sheet2CsvError (base)
├── UnsupportedFileTypeError
├── WorkbookReadError
├── SheetReadError
└── OutputWriteError

Every error is fatal to a run; exit_code is what the CLI exits with.
"""

from typing import Optional


class Sheet2CsvError(Exception):
	exit_code = 1

	def __init__(self, message: str, path: Optional[str] = None):
		super().__init__(message)
		self.message = message
		self.path = path

	def __str__(self) -> str:
		if self.path:
			return f"{self.message} ({self.path})"
		return self.message


class UnsupportedFileTypeError(Sheet2CsvError):
	exit_code = 2


class WorkbookReadError(Sheet2CsvError):
	exit_code = 3


class SheetReadError(Sheet2CsvError):
	exit_code = 4

	def __init__(self, message: str, sheet_name: str, path: Optional[str] = None):
		super().__init__(message, path)
		self.sheet_name = sheet_name


class OutputWriteError(Sheet2CsvError):
	exit_code = 5
