"""Client lookups of the partitioned generation (CD + Cliente)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from ...schemas.clients import BulkByClientsRequest, PartitionedBulkLookupResponse
from ...services.lookup import LookupService
from ..dependencies import get_partitioned_lookup

router = APIRouter(prefix="/clientes", tags=["clientes"])


@router.get("/buscar", status_code=status.HTTP_200_OK)
def find_client(
    cd: str = Query(default="", description="Distribution center code, e.g. AV46"),
    cliente: str = Query(default="", description="Client code"),
    lookup: LookupService = Depends(get_partitioned_lookup),
) -> dict[str, Any]:
    """Flattened client with numeric lat/lng; 400/404/422 otherwise."""
    return lookup.find_one(cliente, partition=cd)


@router.post("/por-clientes", response_model=PartitionedBulkLookupResponse, status_code=status.HTTP_200_OK)
def find_clients(
    body: BulkByClientsRequest,
    lookup: LookupService = Depends(get_partitioned_lookup),
) -> dict[str, Any]:
    return lookup.find_many(body.clientes, partition=body.cd).as_dict()
