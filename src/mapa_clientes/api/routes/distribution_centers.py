"""Distribution center (CD) listing."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...schemas.clients import DistributionCenterModel, DistributionCentersResponse

router = APIRouter(prefix="/api", tags=["distribution-centers"])


@router.get("/cds", response_model=DistributionCentersResponse, status_code=status.HTTP_200_OK)
def list_distribution_centers() -> DistributionCentersResponse:
    return DistributionCentersResponse(
        ok=True,
        data=[DistributionCenterModel(code=center.code, name=center.name) for center in settings.distribution_centers],
        default=settings.default_distribution_center,
    )
