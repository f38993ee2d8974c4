#!/usr/bin/env python3
"""
Command-line interface for the sheet2csv package.
Usage:
  sheet2csv <excel_file>
  python -m sheet2csv <excel_file>
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from . import __author__, __description__, __prog__, __version__
from ._convert_impl import convert
from .errors import Sheet2CsvError

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "SHEET2CSV_LOG_LEVEL"


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog=__prog__, description=__description__)
	parser.add_argument('file', help='Excel file to convert to csv')
	parser.add_argument('--version', action='version', version=f"{__prog__} {__version__}")
	return parser


def configure_logging() -> None:
	level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
	logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(levelname)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
	args = build_parser().parse_args(argv)
	configure_logging()

	print(f"{__prog__} v{__version__} by {__author__}")

	try:
		convert(args.file)
	except Sheet2CsvError as e:
		logger.error("%s", e)
		return e.exit_code
	return 0


if __name__ == "__main__":
	sys.exit(main())
