#!/usr/bin/env python3
"""
Conversion of spreadsheet serial dates (fractional day counts) to datetimes.

The serial is counted from 1899-12-30, which keeps the 1900 leap-year bug of
the original spreadsheet format: serials after February 1900 are one day
ahead of the proleptic calendar. Consumers of the exported files rely on
that, so it is not corrected here.
"""

import math
from datetime import datetime, timedelta

EXCEL_EPOCH = datetime(1899, 12, 30)
SECONDS_PER_DAY = 86400


def excel_serial_to_datetime(serial: float) -> datetime:
	days = math.floor(serial)
	# truncate, sub-second precision is dropped
	seconds = int((serial - days) * SECONDS_PER_DAY)
	return EXCEL_EPOCH + timedelta(days=days) + timedelta(seconds=seconds)


def format_datetime(value: datetime) -> str:
	# strftime pads %Y only on some platforms
	return f"{value.year:04d}-{value:%m-%dT%H:%M:%S}"
