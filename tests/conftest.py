from pathlib import Path
from typing import Any, Iterable

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from mapa_clientes.data.clients_repository import ClientRepository
from mapa_clientes.db.supabase import ClientStore
from mapa_clientes.main import create_app
from mapa_clientes.models.domain import LEGACY, PARTITIONED

from fakes import FakeSupabase


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def store(fake_supabase: FakeSupabase) -> ClientStore:
    return ClientStore.from_client(fake_supabase)


@pytest.fixture
def partitioned_repo(store: ClientStore) -> ClientRepository:
    return ClientRepository(store, PARTITIONED, table="clientes")


@pytest.fixture
def legacy_repo(store: ClientStore) -> ClientRepository:
    return ClientRepository(store, LEGACY, table="clientes_legacy")


@pytest.fixture
def api_client(store: ClientStore) -> Iterable[TestClient]:
    app = create_app(store=store)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def make_workbook(tmp_path: Path):
    def _make(headers: list[str], rows: list[list[Any]], name: str = "Clientes.xlsx") -> Path:
        wb = Workbook()
        sheet = wb.active
        sheet.title = "Hoja1"
        sheet.append(headers)
        for row in rows:
            sheet.append(row)
        path = tmp_path / name
        wb.save(path)
        return path

    return _make
