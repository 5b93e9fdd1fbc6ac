"""Client lookups of the legacy flat generation (codigo only)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from ...schemas.clients import BulkByCodesRequest, BulkLookupResponse
from ...services.lookup import LookupService
from ..dependencies import get_legacy_lookup

router = APIRouter(prefix="/clientes", tags=["clientes-legacy"])


@router.post("/por-codigos", response_model=BulkLookupResponse, status_code=status.HTTP_200_OK)
def find_clients_by_codes(
    body: BulkByCodesRequest,
    lookup: LookupService = Depends(get_legacy_lookup),
) -> dict[str, Any]:
    return lookup.find_many(body.codigos).as_dict()


# Registered after /clientes/buscar so that path is not captured as a code.
@router.get("/{codigo}", status_code=status.HTTP_200_OK)
def find_client_by_code(codigo: str, lookup: LookupService = Depends(get_legacy_lookup)) -> dict[str, Any]:
    return lookup.find_one(codigo)
