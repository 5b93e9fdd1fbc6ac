"""Spreadsheet import and template validation."""

from .service import ImportReport, import_spreadsheet
from .template import ImportTemplate, TemplateValidation, validate_headers
from .validator import validate_spreadsheet

__all__ = [
    "ImportReport",
    "ImportTemplate",
    "TemplateValidation",
    "import_spreadsheet",
    "validate_headers",
    "validate_spreadsheet",
]
