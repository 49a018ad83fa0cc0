"""Read statement files into a grid of cell strings."""

from __future__ import annotations

import csv
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional, Union

from openpyxl import load_workbook

from ..utils.logging import get_logger

logger = get_logger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xltx", ".xltm"}
DATE_CELL_FORMAT = "%d-%b-%Y"


def cell_to_text(value: Any) -> Optional[str]:
    """Render a spreadsheet cell the way it reads on screen."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.strftime(DATE_CELL_FORMAT)
        return value.strftime(f"{DATE_CELL_FORMAT} %H:%M:%S")
    if isinstance(value, date):
        return value.strftime(DATE_CELL_FORMAT)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    text = str(value).strip()
    return text or None


def read_excel_grid(path: Union[str, Path], sheet_name: Optional[str] = None) -> List[List[Optional[str]]]:
    """Read the first (or named) worksheet of an xlsx file."""
    workbook = load_workbook(filename=str(path), read_only=True, data_only=True)
    try:
        if sheet_name and sheet_name not in workbook.sheetnames:
            raise ValueError(
                f"Worksheet {sheet_name!r} not found in {path} (available: {', '.join(workbook.sheetnames)})"
            )
        sheet = workbook[sheet_name] if sheet_name else workbook.worksheets[0]
        grid = [[cell_to_text(value) for value in row] for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
    logger.debug("Read %d rows from %s", len(grid), path)
    return grid


def read_csv_grid(path: Union[str, Path], encoding: str = "utf-8-sig") -> List[List[Optional[str]]]:
    with open(path, newline="", encoding=encoding) as handle:
        grid = [[cell_to_text(value) for value in row] for row in csv.reader(handle)]
    logger.debug("Read %d rows from %s", len(grid), path)
    return grid


def read_grid(path: Union[str, Path], sheet_name: Optional[str] = None) -> List[List[Optional[str]]]:
    """Read a statement export (xlsx or csv) into rows of cell strings."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Statement file not found: {file_path}")
    suffix = file_path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        return read_excel_grid(file_path, sheet_name=sheet_name)
    if suffix in {".csv", ".txt"}:
        return read_csv_grid(file_path)
    raise ValueError(f"Unsupported statement format: {file_path.suffix or '(none)'}")
