"""Information popup shown for each marker."""

from __future__ import annotations

from html import escape
from typing import Any

from ..normalizer import display_value, format_money, is_blank

OPERATIONAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("Cliente", "Cliente"),
    ("Nombre", "Nombre"),
    ("Barrio", "Barrio"),
    ("Poblacion", "Población"),
    ("Telefono", "Teléfono"),
    ("EntregaFREE", "Día entrega"),
)

VALUE_FIELDS: tuple[tuple[str, str, bool], ...] = (
    ("DiaFlex", "Día Flex", False),
    ("ValorMinimoFlex", "Pedido mínimo", True),
    ("ValorFlex", "Valor Flex", True),
)

COMMERCIAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("ZonaVenta", "Zona Venta"),
    ("Distrito", "Distrito"),
    ("COM", "COM"),
    ("Cerveza", "Cerveza"),
    ("NABS", "NABS"),
    ("MKP", "MKP"),
)

ALWAYS_SHOWN = {"Cliente"}

SEPARATOR = '<div style="border-top:1px dashed #999;margin:8px 0;"></div>'


def _line(label: str, text: str) -> str:
    return f"<b>{escape(label)}:</b> {escape(text)}<br/>"


def _section(client: dict[str, Any], fields: tuple[tuple[str, str], ...]) -> str:
    out = []
    for key, label in fields:
        value = client.get(key)
        if key not in ALWAYS_SHOWN and is_blank(value):
            continue
        out.append(_line(label, display_value(value)))
    return "".join(out)


def build_popup(client: dict[str, Any]) -> str:
    """Popup HTML for a normalized client.

    Operational fields, then order values (money fields formatted as currency),
    then commercial fields. The partition key and coordinates are never shown.
    """
    html = ['<div style="min-width:260px">', _section(client, OPERATIONAL_FIELDS), SEPARATOR]
    for key, label, is_money in VALUE_FIELDS:
        value = client.get(key)
        if is_blank(value):
            continue
        html.append(_line(label, format_money(value) if is_money else display_value(value)))
    html.append(SEPARATOR)
    html.append(_section(client, COMMERCIAL_FIELDS))
    html.append("</div>")
    return "".join(html)
