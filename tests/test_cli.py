from click.testing import CliRunner

from mapa_clientes import cli as cli_module
from mapa_clientes.config import settings
from mapa_clientes.db.supabase import ClientStore


def test_validate_reports_ok_and_unaccounted_headers(make_workbook) -> None:
    workbook = make_workbook(
        ["CD", "Cliente", "Nombre", "Latitud", "Longitud", "Ruta"],
        [["AV46", "1", "Tienda", 3.4, -76.5, "R1"]],
    )

    result = CliRunner().invoke(cli_module.cli, ["validate", "--file", str(workbook)])

    assert result.exit_code == 0, result.output
    assert "Filas detectadas: 1" in result.output
    assert "['Ruta']" in result.output
    assert "Validación OK" in result.output


def test_validate_fails_on_missing_headers(make_workbook) -> None:
    workbook = make_workbook(["Codigo", "Nombre"], [["C-1", "Tienda"]])

    result = CliRunner().invoke(cli_module.cli, ["validate", "-f", str(workbook), "-v", "legacy"])

    assert result.exit_code == 1
    assert "Latitud" in result.output
    assert "Validación FALLÓ" in result.output


def test_import_uses_store_and_prints_report(make_workbook, fake_supabase, monkeypatch) -> None:
    monkeypatch.setattr(cli_module, "ClientStore", lambda: ClientStore.from_client(fake_supabase))
    workbook = make_workbook(
        ["CD", "Cliente", "Nombre", "Latitud", "Longitud"],
        [["AV46", "1", "Tienda", 3.4, -76.5], ["AV46", "2", "Sin coords", "", ""]],
    )

    result = CliRunner().invoke(cli_module.cli, ["import", "--file", str(workbook), "--batch-size", "10"])

    assert result.exit_code == 0, result.output
    assert "Operaciones ejecutadas: 1" in result.output
    assert "invalid_coordinates" in result.output
    assert "Total documentos en clientes: 1" in result.output
    assert len(fake_supabase.get_table("clientes").rows) == 1


def test_import_without_credentials_exits(make_workbook, monkeypatch) -> None:
    monkeypatch.setattr(settings, "supabase_url", None)
    monkeypatch.setattr(settings, "supabase_key", None)
    workbook = make_workbook(["CD", "Cliente", "Nombre", "Latitud", "Longitud"], [["AV46", "1", "T", 3.4, -76.5]])

    result = CliRunner().invoke(cli_module.cli, ["import", "--file", str(workbook)])

    assert result.exit_code == 1
    assert "Supabase no configurado" in result.output


def test_check_env_masks_key(monkeypatch) -> None:
    monkeypatch.setattr(settings, "supabase_url", "https://demo.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "k" * 40)

    result = CliRunner().invoke(cli_module.cli, ["check-env"])

    assert result.exit_code == 0
    assert "k" * 20 + "..." in result.output
    assert "k" * 21 not in result.output
    assert "Supabase configurado" in result.output


def test_check_env_fails_without_supabase(monkeypatch) -> None:
    monkeypatch.setattr(settings, "supabase_url", None)
    monkeypatch.setattr(settings, "supabase_key", None)

    result = CliRunner().invoke(cli_module.cli, ["check-env"])

    assert result.exit_code == 1
    assert "NO configurado" in result.output


def test_validate_resolves_relative_file_under_data_root(make_workbook, tmp_path, monkeypatch) -> None:
    make_workbook(["CD", "Cliente", "Nombre", "Latitud", "Longitud"], [["AV46", "1", "T", 3.4, -76.5]], name="cali.xlsx")
    monkeypatch.setattr(settings, "data_root", tmp_path)
    monkeypatch.chdir(tmp_path.parent)

    result = CliRunner().invoke(cli_module.cli, ["validate", "--file", "cali.xlsx"])

    assert result.exit_code == 0, result.output
    assert str(tmp_path / "cali.xlsx") in result.output


def test_unsupported_file_type_prints_error_without_traceback(tmp_path) -> None:
    notes = tmp_path / "clientes.txt"
    notes.write_text("CD,Cliente\n", encoding="utf-8")

    for command in ("validate", "import"):
        result = CliRunner().invoke(cli_module.cli, [command, "--file", str(notes)])

        assert result.exit_code == 1
        assert "❌" in result.output
        assert "no soportado" in result.output
        assert not isinstance(result.exception, ValueError)
