from fastapi.testclient import TestClient

from fakes import legacy_row, partitioned_row


def test_health_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["service"] == "mapa-clientes"
    assert payload["time"]


def test_debug_store_reports_document_counts(api_client: TestClient, fake_supabase) -> None:
    fake_supabase.seed("clientes", [partitioned_row("AV46", "1"), partitioned_row("AV46", "2")])
    fake_supabase.seed("clientes_legacy", [legacy_row("C-1")])

    payload = api_client.get("/debug/store").json()

    assert payload["ok"] is True
    assert payload["tables"] == {"partitioned": "clientes", "legacy": "clientes_legacy"}
    assert payload["documents"] == {"partitioned": 2, "legacy": 1}


def test_debug_store_hides_failure_detail(api_client: TestClient, fake_supabase, monkeypatch) -> None:
    def broken_table(name):
        raise RuntimeError("password authentication failed for user postgres")

    monkeypatch.setattr(fake_supabase, "table", broken_table)

    response = api_client.get("/debug/store")

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is False
    assert payload["connected"] is False
    assert payload["error"] == "No se pudo consultar la base de datos"
    assert "password" not in response.text


def test_distribution_centers_listing(api_client: TestClient) -> None:
    payload = api_client.get("/api/cds").json()
    assert payload["ok"] is True
    codes = [center["code"] for center in payload["data"]]
    assert codes == ["AV28", "AV57", "AV46"]
    assert payload["default"] == "AV46"


def test_index_page_is_served(api_client: TestClient) -> None:
    response = api_client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert api_client.get("/static/app.js").status_code == 200


def test_find_client_success(api_client: TestClient, fake_supabase) -> None:
    fake_supabase.seed("clientes", [partitioned_row("AV46", "12565416", Nombre="Tienda La 14")])

    response = api_client.get("/clientes/buscar", params={"cd": "AV46", "cliente": "12565416"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["Nombre"] == "Tienda La 14"
    assert payload["lat"] == 3.45
    assert payload["lng"] == -76.53


def test_find_client_error_statuses(api_client: TestClient, fake_supabase) -> None:
    fake_supabase.seed("clientes", [partitioned_row("AV46", "9", lat="x")])

    missing = api_client.get("/clientes/buscar", params={"cd": "AV46"})
    assert missing.status_code == 400
    assert missing.json() == {"error": "Se requiere ?cd=...&cliente=..."}

    not_found = api_client.get("/clientes/buscar", params={"cd": "AV46", "cliente": "8"})
    assert not_found.status_code == 404
    assert not_found.json() == {"error": "Cliente no encontrado"}

    unmappable = api_client.get("/clientes/buscar", params={"cd": "AV46", "cliente": "9"})
    assert unmappable.status_code == 422
    assert unmappable.json() == {"error": "Cliente sin coordenadas válidas", "CD": "AV46", "Cliente": "9"}


def test_bulk_by_clients(api_client: TestClient, fake_supabase) -> None:
    fake_supabase.seed(
        "clientes",
        [partitioned_row("AV46", "1"), partitioned_row("AV46", "2", lat=None)],
    )

    response = api_client.post("/clientes/por-clientes", json={"cd": "AV46", "clientes": ["1", "2", "3", "1"]})

    assert response.status_code == 200
    payload = response.json()
    assert payload["cd"] == "AV46"
    assert payload["totalSolicitados"] == 3
    assert payload["totalEncontrados"] == 2
    assert payload["totalMostrables"] == 1
    assert payload["noEncontrados"] == ["3"]
    assert payload["sinCoordenadas"] == ["2"]


def test_bulk_by_clients_validation(api_client: TestClient) -> None:
    no_cd = api_client.post("/clientes/por-clientes", json={"clientes": ["1"]})
    assert no_cd.status_code == 400
    assert no_cd.json() == {"error": "Se requiere { cd }"}

    no_list = api_client.post("/clientes/por-clientes", json={"cd": "AV46", "clientes": "1"})
    assert no_list.status_code == 400
    assert no_list.json() == {"error": "Se requiere { clientes: [] }"}

    too_many = api_client.post(
        "/clientes/por-clientes", json={"cd": "AV46", "clientes": [str(i) for i in range(2001)]}
    )
    assert too_many.status_code == 413
    assert too_many.json() == {"error": "Demasiados clientes. Máximo: 2000"}


def test_malformed_body_is_a_client_error(api_client: TestClient) -> None:
    response = api_client.post(
        "/clientes/por-clientes", content="{not json", headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_legacy_endpoints(api_client: TestClient, fake_supabase) -> None:
    fake_supabase.seed(
        "clientes_legacy",
        [legacy_row("C-1", extras={"ZonaVenta": "Z1"}), legacy_row("C-2", lat="", lng="")],
    )

    one = api_client.get("/clientes/C-1")
    assert one.status_code == 200
    assert one.json()["extras"] == {"ZonaVenta": "Z1"}

    assert api_client.get("/clientes/C-9").status_code == 404
    unmappable = api_client.get("/clientes/C-2")
    assert unmappable.status_code == 422
    assert unmappable.json()["codigo"] == "C-2"

    bulk = api_client.post("/clientes/por-codigos", json={"codigos": ["C-1", "C-2", "C-3"]})
    assert bulk.status_code == 200
    payload = bulk.json()
    assert "cd" not in payload
    assert payload["noEncontrados"] == ["C-3"]
    assert payload["sinCoordenadas"] == ["C-2"]

    empty = api_client.post("/clientes/por-codigos", json={})
    assert empty.status_code == 400
    assert empty.json() == {"error": "Se requiere { codigos: [] }"}


def test_map_markers_partitioned_from_text(api_client: TestClient, fake_supabase) -> None:
    fake_supabase.seed(
        "clientes",
        [
            partitioned_row("AV46", "1", lat=3.4, lng=-76.5, ValorFlex="250000"),
            partitioned_row("AV46", "2", lat=3.5, lng=-76.4),
        ],
    )

    response = api_client.post("/mapa/marcadores", json={"cd": "AV46", "texto": "1\n2, 3"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["type"] == "FeatureCollection"
    assert [f["id"] for f in payload["features"]] == ["AV46:1", "AV46:2"]
    assert "$ 250.000" in payload["features"][0]["properties"]["popup"]
    assert payload["bounds"] == [[3.4, -76.5], [3.5, -76.4]]
    assert payload["bbox"] == [-76.5, 3.4, -76.4, 3.5]
    assert payload["estado"] == "Mostrados: 2 | No encontrados: 1"


def test_map_markers_legacy_without_cd(api_client: TestClient, fake_supabase) -> None:
    fake_supabase.seed("clientes_legacy", [legacy_row("C-1", barrio="Centro")])

    payload = api_client.post("/mapa/marcadores", json={"clientes": ["C-1"]}).json()

    assert payload["features"][0]["id"] == "-:C-1"
    assert "Centro" in payload["features"][0]["properties"]["popup"]


def test_map_markers_without_codes(api_client: TestClient) -> None:
    response = api_client.post("/mapa/marcadores", json={"cd": "AV46", "texto": " \n "})
    assert response.status_code == 400
    assert response.json() == {"error": "Se requiere { clientes: [] }"}


def test_unexpected_store_failure_returns_generic_500(api_client: TestClient, fake_supabase, monkeypatch) -> None:
    def broken_table(name):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(fake_supabase, "table", broken_table)

    response = api_client.get("/clientes/buscar", params={"cd": "AV46", "cliente": "1"})

    assert response.status_code == 500
    assert response.json() == {"error": "Error interno"}
