"""Decode uploaded CSV and spreadsheet files into header-keyed rows."""

import csv
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Sequence, Union

import openpyxl
import xlrd

from .errors import ValidationError

logger = logging.getLogger(__name__)


class TabularFormat(Enum):
    """Supported upload formats, keyed by file extension."""

    CSV = ".csv"
    XLSX = ".xlsx"
    XLS = ".xls"

    @property
    def label(self) -> str:
        return "CSV" if self is TabularFormat.CSV else "XLSX"


def detect_format(filename: Union[str, Path, None]) -> TabularFormat:
    """Pick the decoder from the file extension."""
    suffix = Path(filename or "").suffix.lower()
    try:
        return TabularFormat(suffix)
    except ValueError:
        raise ValidationError("Only .csv, .xlsx and .xls files are allowed") from None


def iter_rows(path: Union[str, Path], fmt: TabularFormat) -> Iterator[Dict[str, Any]]:
    """Yield each data row of the file as a header -> value mapping.

    Spreadsheets are read from their first sheet only.
    """
    path = Path(path)
    if fmt is TabularFormat.CSV:
        return _iter_csv(path)
    if fmt is TabularFormat.XLSX:
        return _iter_xlsx(path)
    return _iter_xls(path)


# === CSV ===

def _detect_encoding(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            for _ in f:
                pass
        return "utf-8-sig"
    except UnicodeDecodeError:
        logger.info(f"{path.name} is not valid UTF-8, falling back to latin-1")
        return "latin-1"


def _iter_csv(path: Path) -> Iterator[Dict[str, Any]]:
    encoding = _detect_encoding(path)
    with open(path, "r", encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)

        try:
            dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
        except csv.Error:
            dialect = csv.excel

        reader = csv.DictReader(f, dialect=dialect, restval="")
        try:
            for row in reader:
                yield row
        except csv.Error as e:
            raise ValidationError(f"Could not parse CSV file: {e}") from e


# === Spreadsheets ===

def _header_names(cells: Sequence[Any]) -> List[str]:
    return ["" if cell is None else str(cell).strip() for cell in cells]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _build_row(headers: List[str], values: Sequence[Any]) -> Dict[str, Any]:
    row = {}
    for i, header in enumerate(headers):
        if not header:
            continue
        value = values[i] if i < len(values) else None
        row[header] = "" if value is None else value
    return row


def _rows_from_grid(grid: Iterator[Sequence[Any]]) -> Iterator[Dict[str, Any]]:
    headers = None
    for values in grid:
        if headers is None:
            headers = _header_names(values)
            continue
        if all(_is_blank(v) for v in values):
            continue
        yield _build_row(headers, values)


def _iter_xlsx(path: Path) -> Iterator[Dict[str, Any]]:
    try:
        workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
    except Exception as e:
        raise ValidationError(f"Could not read spreadsheet: {e}") from e

    try:
        if not workbook.worksheets:
            return
        sheet = workbook.worksheets[0]
        yield from _rows_from_grid(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()


def _iter_xls(path: Path) -> Iterator[Dict[str, Any]]:
    try:
        book = xlrd.open_workbook(str(path), on_demand=True)
    except Exception as e:
        raise ValidationError(f"Could not read spreadsheet: {e}") from e

    try:
        if book.nsheets == 0:
            return
        sheet = book.sheet_by_index(0)
        grid = (sheet.row_values(i) for i in range(sheet.nrows))
        yield from _rows_from_grid(grid)
    finally:
        book.release_resources()
