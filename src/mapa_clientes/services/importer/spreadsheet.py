"""Spreadsheet reading for the importer and the template validator."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ...exceptions import InputFileNotFoundError, UnreadableSpreadsheetError

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
CSV_ENCODINGS = ("utf-8-sig", "cp1252")


@dataclass(slots=True)
class SheetData:
    sheet_name: str
    headers: list[str]
    rows: list[dict[str, Any]]


def _is_blank_row(values: tuple[Any, ...] | list[Any]) -> bool:
    return all(value is None or str(value).strip() == "" for value in values)


def _header_names(raw_header: tuple[Any, ...] | list[Any]) -> list[str]:
    return [str(cell).strip() if cell is not None else "" for cell in raw_header]


def _rows_from_values(headers: list[str], values_iter) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for values in values_iter:
        if _is_blank_row(values):
            continue
        row: dict[str, Any] = {}
        for index, header in enumerate(headers):
            if not header:
                continue
            value = values[index] if index < len(values) else None
            # Blank cells default to "" so every column is present in every row.
            row[header] = "" if value is None else value
        rows.append(row)
    return rows


def _read_csv(path: Path) -> SheetData:
    # Excel on Windows exports CSV as cp1252 unless told otherwise.
    for encoding in CSV_ENCODINGS:
        try:
            with path.open(mode="r", encoding=encoding, newline="") as handle:
                reader = csv.reader(handle)
                header = next(reader, None)
                if header is None:
                    raise UnreadableSpreadsheetError(path, "falta la fila de encabezados")
                headers = _header_names(header)
                return SheetData(sheet_name=path.stem, headers=headers, rows=_rows_from_values(headers, reader))
        except UnicodeDecodeError:
            logger.warning(f"{path.name} is not valid {encoding}, retrying with the next encoding")
        except csv.Error as exc:
            raise UnreadableSpreadsheetError(path, f"CSV inválido ({exc})") from exc
    raise UnreadableSpreadsheetError(path, f"codificación no soportada (probé {', '.join(CSV_ENCODINGS)})")


def _read_workbook(path: Path) -> SheetData:
    try:
        wb = load_workbook(path, data_only=True, read_only=True)
    except (InvalidFileException, BadZipFile, OSError) as exc:
        raise UnreadableSpreadsheetError(path, f"no es un libro de Excel válido ({exc})") from exc
    try:
        sheet = wb.worksheets[0]
        values = sheet.iter_rows(min_row=1, values_only=True)
        header = next(values, None)
        if header is None:
            raise UnreadableSpreadsheetError(path, "la hoja está vacía")
        headers = _header_names(header)
        return SheetData(sheet_name=sheet.title, headers=headers, rows=_rows_from_values(headers, values))
    finally:
        wb.close()


def read_spreadsheet(path: Path) -> SheetData:
    """Read the first sheet of an Excel workbook, or a CSV file, into row dicts."""
    path = Path(path)
    if not path.exists():
        raise InputFileNotFoundError(path, label="archivo Excel")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        return _read_csv(path)
    if suffix not in EXCEL_SUFFIXES:
        raise UnreadableSpreadsheetError(path, f"tipo '{suffix}' no soportado; usa .xlsx o .csv")
    return _read_workbook(path)
