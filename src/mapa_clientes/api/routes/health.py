"""Health endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...data.clients_repository import ClientRepository
from ...db.supabase import ClientStore
from ...models.domain import VARIANTS
from ...schemas.clients import HealthResponse, StoreStatusResponse
from ..dependencies import get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

STORE_UNAVAILABLE = "No se pudo consultar la base de datos"


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
def health_root() -> HealthResponse:
    """Simple health check endpoint that doesn't touch the store."""
    return HealthResponse(ok=True, service=settings.service_name, time=datetime.now(timezone.utc).isoformat())


@router.get("/debug/store", response_model=StoreStatusResponse, status_code=status.HTTP_200_OK)
def store_status(store: ClientStore = Depends(get_store)) -> StoreStatusResponse:
    """Which tables the server reads and whether the store answers."""
    tables = {name: getattr(settings, variant.table_setting) for name, variant in VARIANTS.items()}
    try:
        documents = {name: ClientRepository(store, variant).count() for name, variant in VARIANTS.items()}
    except Exception as exc:
        logger.warning(f"Store status check failed: {exc}", exc_info=True)
        return StoreStatusResponse(ok=False, connected=False, tables=tables, error=STORE_UNAVAILABLE)
    return StoreStatusResponse(ok=True, connected=True, tables=tables, documents=documents)
