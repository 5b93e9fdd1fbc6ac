"""Pre-flight check of a spreadsheet against its import template."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ...exceptions import InputFileNotFoundError
from .spreadsheet import SheetData, read_spreadsheet
from .template import ImportTemplate, TemplateValidation, check_headers

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ValidatedSpreadsheet:
    path: Path
    template: ImportTemplate
    sheet: SheetData
    validation: TemplateValidation


def validate_spreadsheet(spreadsheet_path: Path, template_path: Path) -> ValidatedSpreadsheet:
    """Load both files and check the headers.

    Raises InputFileNotFoundError when either file is missing and
    MissingHeadersError when a required header is absent. Headers the template
    does not account for are only logged.
    """
    spreadsheet_path = Path(spreadsheet_path)
    template_path = Path(template_path)
    if not spreadsheet_path.exists():
        raise InputFileNotFoundError(spreadsheet_path, label="archivo Excel")
    if not template_path.exists():
        raise InputFileNotFoundError(template_path, label="template")

    template = ImportTemplate.load(template_path)
    sheet = read_spreadsheet(spreadsheet_path)
    logger.info(f"Spreadsheet {spreadsheet_path.name}, sheet '{sheet.sheet_name}': {len(sheet.rows)} rows")
    logger.debug(f"Detected headers: {sheet.headers}")

    validation = check_headers(template, sheet.headers)
    return ValidatedSpreadsheet(path=spreadsheet_path, template=template, sheet=sheet, validation=validation)
