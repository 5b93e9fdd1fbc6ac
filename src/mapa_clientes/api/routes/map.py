"""Map markers for the browser page."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...schemas.clients import MarkersRequest, MarkersResponse
from ...services.lookup import LookupService
from ...services.presentation import build_marker_collection, parse_codes, status_message
from ..dependencies import get_legacy_lookup, get_partitioned_lookup

router = APIRouter(prefix="/mapa", tags=["mapa"])


@router.post("/marcadores", response_model=MarkersResponse, status_code=status.HTTP_200_OK)
def build_markers(
    body: MarkersRequest,
    partitioned: LookupService = Depends(get_partitioned_lookup),
    legacy: LookupService = Depends(get_legacy_lookup),
) -> MarkersResponse:
    """Look up codes and return them as map features.

    A request carrying ``cd`` is served by the partitioned generation, one
    without it by the legacy generation. Codes come from ``clientes`` or, when
    absent, from the free text in ``texto``.
    """
    codes = body.clientes if body.clientes is not None else parse_codes(body.texto)
    if body.cd is not None:
        result = partitioned.find_many(codes, partition=body.cd)
    else:
        result = legacy.find_many(codes)

    collection = build_marker_collection(result.clients)
    counters = result.as_dict()
    return MarkersResponse(
        features=collection["features"],
        bounds=collection["bounds"],
        bbox=collection.get("bbox"),
        estado=status_message(result),
        totalSolicitados=counters["totalSolicitados"],
        totalEncontrados=counters["totalEncontrados"],
        totalMostrables=counters["totalMostrables"],
        noEncontrados=counters["noEncontrados"],
        sinCoordenadas=counters["sinCoordenadas"],
    )
