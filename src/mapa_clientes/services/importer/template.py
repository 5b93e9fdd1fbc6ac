"""Import templates: the declared header contract of a spreadsheet."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from ...exceptions import InputFileNotFoundError, MissingHeadersError

logger = logging.getLogger(__name__)


def normalize_header(header: object) -> str:
    return str(header if header is not None else "").strip().lower()


@dataclass(slots=True)
class ImportTemplate:
    """Declarative mapping between spreadsheet headers and document fields.

    ``mapping`` goes from document field to spreadsheet header, ``required``
    lists headers that must be present, ``extras`` lists headers carried into
    the document's ``extras`` object.
    """

    version: str
    required: list[str] = field(default_factory=list)
    mapping: dict[str, str] = field(default_factory=dict)
    extras: list[str] = field(default_factory=list)
    path: Optional[Path] = None

    @classmethod
    def load(cls, path: Path) -> "ImportTemplate":
        path = Path(path)
        if not path.exists():
            raise InputFileNotFoundError(path, label="template")
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            raise ValueError(f"Template '{path}' must be a JSON object.")
        return cls(
            version=str(payload.get("version") or path.stem),
            required=[str(item) for item in payload.get("required") or []],
            mapping={str(k): str(v) for k, v in (payload.get("mapping") or {}).items()},
            extras=[str(item) for item in payload.get("extras") or []],
            path=path,
        )

    def header_for(self, document_field: str, default: Optional[str] = None) -> str:
        return self.mapping.get(document_field, default if default is not None else document_field)

    @property
    def accounted_headers(self) -> set[str]:
        return {normalize_header(h) for h in (*self.required, *self.extras, *self.mapping.values())}


@dataclass(slots=True)
class TemplateValidation:
    present: list[str]
    missing: list[str]
    unaccounted: list[str]

    @property
    def ok(self) -> bool:
        return not self.missing


def validate_headers(template: ImportTemplate, headers: Iterable[object]) -> TemplateValidation:
    """Compare spreadsheet headers to the template, ignoring case and surrounding spaces."""
    present = [str(h).strip() for h in headers if normalize_header(h)]
    present_keys = {normalize_header(h) for h in present}
    missing = [h for h in template.required if normalize_header(h) not in present_keys]
    accounted = template.accounted_headers
    unaccounted = [h for h in present if normalize_header(h) not in accounted]
    return TemplateValidation(present=present, missing=missing, unaccounted=unaccounted)


def check_headers(template: ImportTemplate, headers: Iterable[object]) -> TemplateValidation:
    """Validate and raise MissingHeadersError on missing required headers."""
    result = validate_headers(template, headers)
    if result.missing:
        logger.error(f"Missing required headers: {result.missing}")
        raise MissingHeadersError(result.missing)
    if result.unaccounted:
        logger.warning(f"Headers not covered by template {template.version} (ignored): {result.unaccounted}")
    return result
