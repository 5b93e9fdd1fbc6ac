"""Batch import of client spreadsheets into the store."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ...config import settings
from ...data.clients_repository import ClientRepository
from ...models.domain import SchemaVariant
from ..normalizer import to_num, to_str
from .template import ImportTemplate, normalize_header
from .validator import validate_spreadsheet

logger = logging.getLogger(__name__)

REQUIRED_ROLES = ("partition", "code", "name", "latitude", "longitude")

SKIP_MISSING_PARTITION = "missing_partition"
SKIP_MISSING_CODE = "missing_code"
SKIP_MISSING_NAME = "missing_name"
SKIP_INVALID_COORDINATES = "invalid_coordinates"


@dataclass
class ImportReport:
    spreadsheet: str
    sheet_name: str
    template_version: str
    variant: str
    rows_read: int = 0
    skipped: Counter = field(default_factory=Counter)
    operations: int = 0
    failed: int = 0
    total_documents: int = 0
    indexes_changed: list[str] = field(default_factory=list)
    unaccounted_headers: list[str] = field(default_factory=list)

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())

    def as_dict(self) -> dict[str, Any]:
        return {
            "spreadsheet": self.spreadsheet,
            "sheet": self.sheet_name,
            "template": self.template_version,
            "variant": self.variant,
            "rowsRead": self.rows_read,
            "skipped": dict(self.skipped),
            "skippedTotal": self.skipped_total,
            "operations": self.operations,
            "failed": self.failed,
            "totalDocuments": self.total_documents,
            "indexesChanged": list(self.indexes_changed),
        }


class DocumentBuilder:
    """Turns spreadsheet rows into upsert payloads for one schema generation."""

    def __init__(
        self,
        variant: SchemaVariant,
        template: ImportTemplate,
        headers: list[str],
        source_file: str,
        imported_at: datetime,
    ) -> None:
        self.variant = variant
        self.template = template
        self._header_index = {normalize_header(h): h for h in headers if normalize_header(h)}
        self._timestamp = imported_at.isoformat()
        self._source = {
            "archivo": source_file,
            "plantilla": template.version,
            "importadoEn": self._timestamp,
        }

        required_keys = {variant.doc_keys[role] for role in REQUIRED_ROLES if role in variant.doc_keys}
        if template.mapping:
            self.optional_fields = {
                doc_field: header for doc_field, header in template.mapping.items() if doc_field not in required_keys
            }
        else:
            self.optional_fields = dict(variant.optional_fields)

    def _cell(self, row: dict[str, Any], header: str) -> Any:
        actual = self._header_index.get(normalize_header(header))
        if actual is None:
            return None
        return row.get(actual)

    def _role_value(self, row: dict[str, Any], role: str) -> Any:
        doc_key = self.variant.doc_keys[role]
        return self._cell(row, self.template.header_for(doc_key))

    def build(self, row: dict[str, Any]) -> tuple[Optional[dict[str, Any]], Optional[str]]:
        """Return ``(payload, None)`` or ``(None, skip_reason)``."""
        variant = self.variant
        keys = variant.doc_keys

        partition = to_str(self._role_value(row, "partition")) if variant.partitioned else None
        code = to_str(self._role_value(row, "code"))
        name = to_str(self._role_value(row, "name"))
        latitude = to_num(self._role_value(row, "latitude"))
        longitude = to_num(self._role_value(row, "longitude"))

        if variant.partitioned and not partition:
            return None, SKIP_MISSING_PARTITION
        if not code:
            return None, SKIP_MISSING_CODE
        if not name:
            return None, SKIP_MISSING_NAME
        if latitude is None or longitude is None:
            return None, SKIP_INVALID_COORDINATES

        doc: dict[str, Any] = {}
        if variant.partitioned:
            doc[keys["partition"]] = partition
        doc[keys["code"]] = code
        doc[keys["name"]] = name
        for doc_field, header in self.optional_fields.items():
            doc[doc_field] = to_str(self._cell(row, header))
        doc[keys["latitude"]] = latitude
        doc[keys["longitude"]] = longitude
        if self.template.extras:
            doc["extras"] = {header: to_str(self._cell(row, header)) for header in self.template.extras}

        payload: dict[str, Any] = {}
        if variant.partitioned:
            payload[variant.partition_column] = partition
        payload[variant.code_column] = code
        for column, doc_field in variant.promoted_columns.items():
            payload[column] = doc.get(doc_field) or None
        payload["doc"] = doc
        payload["source"] = self._source
        # created_at is left to the column default so re-imports never touch it.
        payload["updated_at"] = self._timestamp
        return payload, None

    def key(self, payload: dict[str, Any]) -> tuple:
        return tuple(payload[column] for column in self.variant.key_columns)


def import_spreadsheet(
    spreadsheet_path: Path,
    repository: ClientRepository,
    template_path: Optional[Path] = None,
    batch_size: Optional[int] = None,
    imported_at: Optional[datetime] = None,
) -> ImportReport:
    """Validate, then upsert every usable row of ``spreadsheet_path``.

    Header problems and missing files raise before the store is opened.
    Rows lacking identity, name or coordinates are skipped and counted.
    """
    variant = repository.variant
    template_path = Path(template_path) if template_path else settings.template_path(variant.name)
    batch_size = batch_size or settings.import_batch_size

    validated = validate_spreadsheet(spreadsheet_path, template_path)
    report = ImportReport(
        spreadsheet=str(validated.path),
        sheet_name=validated.sheet.sheet_name,
        template_version=validated.template.version,
        variant=variant.name,
        rows_read=len(validated.sheet.rows),
        unaccounted_headers=list(validated.validation.unaccounted),
    )

    builder = DocumentBuilder(
        variant,
        validated.template,
        validated.sheet.headers,
        source_file=validated.path.name,
        imported_at=imported_at or datetime.now(timezone.utc),
    )

    repository.store.open()
    report.indexes_changed = repository.ensure_indexes()

    pending: dict[tuple, dict[str, Any]] = {}
    queued = 0

    def _flush() -> None:
        nonlocal queued
        if not pending:
            return
        written, failed = repository.upsert_batch(list(pending.values()))
        report.operations += queued
        report.failed += failed
        pending.clear()
        queued = 0
        logger.info(f"Processed ~{report.operations} rows ({written} written in last batch)")

    for row in validated.sheet.rows:
        payload, reason = builder.build(row)
        if payload is None:
            report.skipped[reason] += 1
            continue
        # Same key twice in one batch: the later row wins, as sequential upserts would.
        pending[builder.key(payload)] = payload
        queued += 1
        if queued >= batch_size:
            _flush()
    _flush()

    report.total_documents = repository.count()
    logger.info(
        f"Import finished: {report.rows_read} rows read, {report.operations} operations, "
        f"{report.skipped_total} skipped {dict(report.skipped)}, {report.failed} failed, "
        f"{report.total_documents} documents in {repository.table}"
    )
    return report
