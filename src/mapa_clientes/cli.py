"""Command line entry points: spreadsheet validation, import and environment check.

Usage:
    mapa-clientes validate --file data/Clientes.xlsx
    mapa-clientes import --file data/Clientes.xlsx --variant partitioned
    mapa-clientes import --file data/maps.xlsx --variant legacy --template plantilla.v1.json
    mapa-clientes check-env
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from .config import configure_logging, settings
from .data.clients_repository import ClientRepository
from .db.supabase import ClientStore
from .exceptions import MapaClientesError
from .models.domain import VARIANTS
from .services.importer import import_spreadsheet, validate_spreadsheet

logger = logging.getLogger("mapa_clientes.cli")

VARIANT_CHOICE = click.Choice(sorted(VARIANTS))


def _spreadsheet_path(file_path: str) -> Path:
    """Relative paths are looked up under MAPA_DATA_ROOT when they do not exist as given."""
    path = Path(file_path)
    if path.is_absolute() or path.exists():
        return path
    return settings.data_root / path


def _template_path(template: Optional[str], variant: str) -> Path:
    return Path(template) if template else settings.template_path(variant)


def _mask(value: Optional[str], keep: int = 20) -> str:
    if not value:
        return "(no definido)"
    return value[:keep] + "..." if len(value) > keep else value


@click.group()
@click.option("--log-level", default=None, help="Override MAPA_LOG_LEVEL for this run.")
def cli(log_level: Optional[str]) -> None:
    """Mapa Clientes: spreadsheet import and validation."""
    configure_logging(log_level)


@cli.command("validate")
@click.option("--file", "-f", "file_path", required=True, help="Spreadsheet to check (.xlsx or .csv), relative to MAPA_DATA_ROOT")
@click.option("--template", "-t", default=None, help="Template JSON (defaults to the variant's template)")
@click.option("--variant", "-v", type=VARIANT_CHOICE, default="partitioned", show_default=True)
def validate_cmd(file_path: str, template: Optional[str], variant: str) -> None:
    """Check spreadsheet headers against the template without touching the store."""
    try:
        validated = validate_spreadsheet(_spreadsheet_path(file_path), _template_path(template, variant))
    except MapaClientesError as exc:
        click.echo(f"❌ {exc.detail}", err=True)
        click.echo("🛑 Validación FALLÓ. No se debe importar.", err=True)
        raise SystemExit(1)

    click.echo(f"📄 Archivo: {validated.path}")
    click.echo(f"📑 Hoja: {validated.sheet.sheet_name}")
    click.echo(f"📦 Filas detectadas: {len(validated.sheet.rows)}")
    click.echo(f"✅ Encabezados obligatorios OK: {validated.template.required}")
    if validated.validation.unaccounted:
        click.echo(f"⚠️ Encabezados NO contemplados (se ignoran): {validated.validation.unaccounted}")
    else:
        click.echo("✅ No hay encabezados inesperados.")
    click.echo("✅ Validación OK. Puedes ejecutar: mapa-clientes import")


@cli.command("import")
@click.option("--file", "-f", "file_path", required=True, help="Spreadsheet to import (.xlsx or .csv), relative to MAPA_DATA_ROOT")
@click.option("--template", "-t", default=None, help="Template JSON (defaults to the variant's template)")
@click.option("--variant", "-v", type=VARIANT_CHOICE, default="partitioned", show_default=True)
@click.option("--batch-size", type=int, default=None, help="Rows per bulk upsert (default MAPA_IMPORT_BATCH_SIZE)")
def import_cmd(file_path: str, template: Optional[str], variant: str, batch_size: Optional[int]) -> None:
    """Upsert every usable row into the variant's table."""
    store = ClientStore()
    repository = ClientRepository(store, VARIANTS[variant])
    try:
        report = import_spreadsheet(
            _spreadsheet_path(file_path),
            repository,
            template_path=_template_path(template, variant),
            batch_size=batch_size,
        )
    except MapaClientesError as exc:
        click.echo(f"❌ Error: {exc.detail}", err=True)
        raise SystemExit(1)
    finally:
        store.close()

    click.echo("🎉 Importación terminada")
    click.echo(f"📦 Filas leídas: {report.rows_read}")
    click.echo(f"✅ Operaciones ejecutadas: {report.operations}")
    click.echo(f"⚠️ Filas omitidas: {report.skipped_total} {dict(report.skipped)}")
    if report.failed:
        click.echo(f"❌ Operaciones fallidas: {report.failed}")
    click.echo(f"📊 Total documentos en {repository.table}: {report.total_documents}")


@cli.command("check-env")
def check_env_cmd() -> None:
    """Show which settings are loaded and whether Supabase is configured."""
    env_file = Path(".env")
    click.echo(f"{'✅' if env_file.exists() else '❌'} .env: {env_file.resolve()}")
    click.echo(f"MAPA_SUPABASE_URL: {_mask(settings.supabase_url, keep=30)}")
    click.echo(f"MAPA_SUPABASE_KEY: {_mask(settings.supabase_key)}")
    click.echo(f"Tablas: {settings.clients_table}, {settings.legacy_table}")
    click.echo(f"Plantillas: {settings.templates_dir}")
    if settings.supabase_url and settings.supabase_key:
        click.echo("✅ Supabase configurado")
    else:
        click.echo("❌ Supabase NO configurado: define MAPA_SUPABASE_URL y MAPA_SUPABASE_KEY")
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
