"""Client lookup API schemas."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    ok: bool
    service: str
    time: str


class DistributionCenterModel(BaseModel):
    code: str
    name: str


class DistributionCentersResponse(BaseModel):
    ok: bool = True
    data: List[DistributionCenterModel]
    default: Optional[str] = None


class StoreStatusResponse(BaseModel):
    ok: bool
    connected: bool
    tables: dict[str, str]
    documents: dict[str, int] | None = None
    error: str | None = None


class BulkByClientsRequest(BaseModel):
    """Body of POST /clientes/por-clientes; fields are checked by the service for 400 messages."""

    cd: Any = None
    clientes: Any = None


class BulkByCodesRequest(BaseModel):
    codigos: Any = None


class BulkLookupResponse(BaseModel):
    totalSolicitados: int
    totalEncontrados: int
    totalMostrables: int
    noEncontrados: List[str]
    sinCoordenadas: List[str]
    clientes: List[dict[str, Any]]


class PartitionedBulkLookupResponse(BulkLookupResponse):
    cd: str


class MarkersRequest(BaseModel):
    """Codes to show on the map; ``cd`` selects the partitioned generation."""

    cd: Optional[str] = None
    clientes: Optional[List[Any]] = None
    texto: Optional[str] = None


class MarkersResponse(BaseModel):
    type: str = "FeatureCollection"
    features: List[dict[str, Any]]
    bounds: Optional[List[List[float]]] = None
    bbox: Optional[List[float]] = None
    estado: str
    totalSolicitados: int
    totalEncontrados: int
    totalMostrables: int
    noEncontrados: List[str]
    sinCoordenadas: List[str]
