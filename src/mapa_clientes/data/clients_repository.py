"""Data access for client documents stored in Supabase."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from ..config import settings
from ..db.supabase import ClientStore
from ..models.domain import COMMERCIAL_FIELDS, ClientRecord, IndexSpec, SchemaVariant
from ..services.normalizer import to_num, to_str

logger = logging.getLogger(__name__)

# Helper functions created by sql/schema.sql; PostgREST cannot run DDL itself.
RPC_LIST_INDEXES = "mapa_list_indexes"
RPC_DROP_INDEX = "mapa_drop_index"
RPC_CREATE_INDEX = "mapa_create_index"

DOCUMENT_COLUMNS = ("doc",)


def record_from_row(row: dict[str, Any], variant: SchemaVariant) -> ClientRecord:
    """Build a ClientRecord from a stored row of either generation."""
    doc = row.get("doc") or {}
    keys = variant.doc_keys
    extras = doc.get("extras") if isinstance(doc.get("extras"), dict) else {}
    commercial_source = doc if variant.partitioned else extras

    def _optional(role: str) -> Optional[str]:
        return to_str(doc.get(keys[role])) or None

    latitude = to_num(doc.get(keys["latitude"]))
    longitude = to_num(doc.get(keys["longitude"]))
    if latitude is None or longitude is None:
        latitude = longitude = None

    return ClientRecord(
        code=to_str(doc.get(variant.code_key)) or to_str(row.get(variant.code_column)),
        partition=(to_str(row.get(variant.partition_column)) or None) if variant.partitioned else None,
        name=_optional("name"),
        neighborhood=_optional("neighborhood"),
        city=_optional("city"),
        phone=_optional("phone"),
        latitude=latitude,
        longitude=longitude,
        commercial={name: commercial_source[name] for name in COMMERCIAL_FIELDS if name in commercial_source},
        extras=dict(extras),
    )


def _chunks(items: Sequence[Any], size: int) -> Iterable[Sequence[Any]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class ClientRepository:
    """Reads and writes the client table of one schema generation."""

    def __init__(self, store: ClientStore, variant: SchemaVariant, table: Optional[str] = None) -> None:
        self.store = store
        self.variant = variant
        self.table = table or getattr(settings, variant.table_setting)

    def _query(self):
        return self.store.client.table(self.table)

    @property
    def _columns(self) -> str:
        return ",".join(self.variant.key_columns + DOCUMENT_COLUMNS)

    def find_one(self, code: str, partition: Optional[str] = None) -> Optional[ClientRecord]:
        query = self._query().select(self._columns).eq(self.variant.code_column, code)
        if self.variant.partitioned:
            query = query.eq(self.variant.partition_column, partition)
        response = query.limit(1).execute()
        if not response.data:
            return None
        return record_from_row(response.data[0], self.variant)

    def find_many(
        self,
        codes: Sequence[str],
        partition: Optional[str] = None,
        chunk_size: Optional[int] = None,
    ) -> list[ClientRecord]:
        """Fetch all documents whose code is in ``codes`` (within ``partition``)."""
        size = chunk_size or settings.lookup_chunk_size
        records: list[ClientRecord] = []
        for chunk in _chunks(list(codes), size):
            query = self._query().select(self._columns).in_(self.variant.code_column, list(chunk))
            if self.variant.partitioned:
                query = query.eq(self.variant.partition_column, partition)
            response = query.execute()
            records.extend(record_from_row(row, self.variant) for row in (response.data or []))
        logger.debug(f"{self.table}: {len(records)} of {len(codes)} codes found")
        return records

    def count(self) -> int:
        response = self._query().select(self.variant.code_column, count="exact").limit(1).execute()
        return response.count or 0

    def upsert_batch(self, rows: list[dict[str, Any]]) -> tuple[int, int]:
        """Upsert rows keyed by the identity columns.

        Returns ``(written, failed)``. A rejected batch is retried row by row so
        one bad row does not block the others.
        """
        if not rows:
            return 0, 0
        try:
            self._query().upsert(rows, on_conflict=self.variant.on_conflict).execute()
            return len(rows), 0
        except Exception as exc:
            logger.warning(f"Batch upsert of {len(rows)} rows failed, retrying one by one: {exc}")

        written = failed = 0
        for row in rows:
            try:
                self._query().upsert(row, on_conflict=self.variant.on_conflict).execute()
                written += 1
            except Exception as exc:
                failed += 1
                key = tuple(row.get(column) for column in self.variant.key_columns)
                logger.warning(f"Failed to upsert client {key}: {exc}")
        return written, failed

    def list_indexes(self) -> dict[str, dict[str, Any]]:
        response = self.store.client.rpc(RPC_LIST_INDEXES, {"p_table": self.table}).execute()
        return {row["name"]: row for row in (response.data or [])}

    def ensure_indexes(self) -> list[str]:
        """Create the generation's indexes, rebuilding a same-named index that lost its uniqueness.

        Returns the names of indexes created or rebuilt.
        """
        existing = self.list_indexes()
        changed: list[str] = []
        for spec in self.variant.indexes:
            current = existing.get(spec.name)
            if current is not None:
                if bool(current.get("is_unique")) == spec.unique or not spec.unique:
                    continue
                logger.warning(f"Index {spec.name} exists without UNIQUE; dropping and recreating it")
                self.store.client.rpc(RPC_DROP_INDEX, {"p_name": spec.name}).execute()
            self._create_index(spec)
            changed.append(spec.name)
        return changed

    def _create_index(self, spec: IndexSpec) -> None:
        self.store.client.rpc(
            RPC_CREATE_INDEX,
            {
                "p_table": self.table,
                "p_name": spec.name,
                "p_columns": list(spec.columns),
                "p_unique": spec.unique,
            },
        ).execute()
        logger.info(f"Index {spec.name} ready on {self.table}({', '.join(spec.columns)})")
