"""FastAPI dependencies for the store and lookup services."""

from fastapi import Depends, Request

from ..data.clients_repository import ClientRepository
from ..db.supabase import ClientStore
from ..models.domain import LEGACY, PARTITIONED
from ..services.lookup import LookupService


def get_store(request: Request) -> ClientStore:
    """The store opened by the application lifespan."""
    return request.app.state.store


def get_partitioned_lookup(store: ClientStore = Depends(get_store)) -> LookupService:
    return LookupService(ClientRepository(store, PARTITIONED))


def get_legacy_lookup(store: ClientStore = Depends(get_store)) -> LookupService:
    return LookupService(ClientRepository(store, LEGACY))
