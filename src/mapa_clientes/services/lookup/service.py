"""Single and bulk client lookups for both schema generations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ...config import settings
from ...data.clients_repository import ClientRepository
from ...exceptions import (
    ClientNotFoundError,
    MissingParameterError,
    PayloadTooLargeError,
    UnmappableClientError,
)
from ...models.domain import COMMERCIAL_FIELDS, ClientRecord
from ..normalizer import to_str

logger = logging.getLogger(__name__)


def unique_codes(raw_codes: Iterable[Any]) -> list[str]:
    """Trim, drop blanks and deduplicate (exact, case-sensitive), keeping first-seen order."""
    return list(dict.fromkeys(code for code in (to_str(item) for item in raw_codes) if code))


@dataclass(slots=True)
class BulkLookupResult:
    requested: list[str]
    found: int
    clients: list[dict[str, Any]] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    without_coordinates: list[str] = field(default_factory=list)
    partition: Optional[str] = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.partition is not None:
            payload["cd"] = self.partition
        payload.update(
            {
                "totalSolicitados": len(self.requested),
                "totalEncontrados": self.found,
                "totalMostrables": len(self.clients),
                "noEncontrados": list(self.not_found),
                "sinCoordenadas": list(self.without_coordinates),
                "clientes": list(self.clients),
            }
        )
        return payload


class LookupService:
    """Read-only lookups over one ClientRepository.

    The repository's schema generation decides whether a partition key is
    required and which flat shape is returned.
    """

    def __init__(self, repository: ClientRepository, max_codes: Optional[int] = None) -> None:
        self.repository = repository
        self.variant = repository.variant
        self.max_codes = max_codes or settings.bulk_lookup_limit

    def _identity(self, record: ClientRecord) -> dict[str, Any]:
        keys = self.variant.doc_keys
        identity: dict[str, Any] = {}
        if self.variant.partitioned:
            identity[keys["partition"]] = record.partition
        identity[keys["code"]] = record.code
        return identity

    def flatten(self, record: ClientRecord) -> dict[str, Any]:
        """Render a mappable record in its generation's flat response shape."""
        keys = self.variant.doc_keys
        flat = self._identity(record)
        flat.update(
            {
                keys["name"]: record.name,
                keys["neighborhood"]: record.neighborhood,
                keys["city"]: record.city,
                keys["phone"]: record.phone,
                "lat": record.latitude,
                "lng": record.longitude,
            }
        )
        if self.variant.partitioned:
            for name in COMMERCIAL_FIELDS:
                flat[name] = record.commercial.get(name)
        else:
            flat["extras"] = dict(record.extras)
        return flat

    def _require_partition(self, partition: Optional[str], message: str) -> Optional[str]:
        if not self.variant.partitioned:
            return None
        partition = to_str(partition)
        if not partition:
            raise MissingParameterError(message)
        return partition

    def find_one(self, code: Any, partition: Optional[str] = None) -> dict[str, Any]:
        if self.variant.partitioned:
            code = to_str(code)
            partition = to_str(partition)
            if not code or not partition:
                raise MissingParameterError("Se requiere ?cd=...&cliente=...")
        else:
            code = to_str(code)
            if not code:
                raise MissingParameterError("Código requerido")

        record = self.repository.find_one(code, partition)
        if record is None:
            raise ClientNotFoundError()
        if not record.mappable:
            raise UnmappableClientError(extra=self._identity(record))
        return self.flatten(record)

    def find_many(self, raw_codes: Any, partition: Optional[str] = None) -> BulkLookupResult:
        list_field = "clientes" if self.variant.partitioned else "codigos"
        partition = self._require_partition(partition, "Se requiere { cd }")
        if not isinstance(raw_codes, (list, tuple)) or not raw_codes:
            raise MissingParameterError(f"Se requiere {{ {list_field}: [] }}")

        codes = unique_codes(raw_codes)
        if not codes:
            raise MissingParameterError(f"Se requiere {{ {list_field}: [] }}")
        if len(codes) > self.max_codes:
            raise PayloadTooLargeError(f"Demasiados clientes. Máximo: {self.max_codes}")

        records = self.repository.find_many(codes, partition)
        found_codes = {to_str(record.code) for record in records}

        result = BulkLookupResult(requested=codes, found=len(records), partition=partition)
        result.not_found = [code for code in codes if code not in found_codes]
        for record in records:
            if record.mappable:
                result.clients.append(self.flatten(record))
            else:
                result.without_coordinates.append(record.code)

        logger.debug(
            f"Bulk lookup ({self.variant.name}): {len(codes)} requested, {len(records)} found, "
            f"{len(result.clients)} mappable"
        )
        return result
