"""Normalization of lookup responses from either API generation.

Every logical field resolves through one ordered fallback chain. Each step is
either a top-level key of the payload or an ``extras.<key>`` lookup into the
legacy nested object; the first value that is not ``None`` wins, otherwise the
field's default applies::

    Cliente   <- Cliente, codigo, cliente, extras.Cliente, extras.codigo   (default "-")
    Nombre    <- Nombre, nombre, extras.Nombre                             (default "Sin nombre")
    Barrio    <- Barrio, barrio, extras.Barrio                             (default "-")
    Telefono  <- Telefono, telefono, extras.Telefono                       (default "-")

The partitioned shape uses capitalised keys, the legacy shape lowercase keys
plus ``extras``. Commercial fields fall back from the flat key to ``extras``.
"""

from __future__ import annotations

from typing import Any, Optional

EXTRAS_PREFIX = "extras."

FIELD_FALLBACKS: dict[str, tuple[tuple[str, ...], Any]] = {
    "CD": (("CD", "cd", "extras.CD"), "-"),
    "Cliente": (("Cliente", "codigo", "cliente", "extras.Cliente", "extras.codigo"), "-"),
    "Nombre": (("Nombre", "nombre", "extras.Nombre"), "Sin nombre"),
    "Barrio": (("Barrio", "barrio", "extras.Barrio"), "-"),
    "Poblacion": (("Poblacion", "poblacion", "extras.Poblacion"), None),
    "Telefono": (("Telefono", "telefono", "extras.Telefono"), "-"),
    "EntregaFREE": (("EntregaFREE", "extras.EntregaFREE"), None),
    "DiaFlex": (("DiaFlex", "extras.DiaFlex"), None),
    "ValorMinimoFlex": (("ValorMinimoFlex", "extras.ValorMinimoFlex"), None),
    "ValorFlex": (("ValorFlex", "extras.ValorFlex"), None),
    "ZonaVenta": (("ZonaVenta", "extras.ZonaVenta"), None),
    "Distrito": (("Distrito", "extras.Distrito"), None),
    "COM": (("COM", "extras.COM"), None),
    "Cerveza": (("Cerveza", "extras.Cerveza"), None),
    "NABS": (("NABS", "extras.NABS"), None),
    "MKP": (("MKP", "extras.MKP"), None),
    "Cobro": (("Cobro", "extras.Cobro"), None),
    "NPS": (("NPS", "extras.NPS"), None),
}


def _coordinate(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def resolve_field(payload: dict[str, Any], field_name: str) -> Any:
    chain, default = FIELD_FALLBACKS[field_name]
    extras = payload.get("extras") if isinstance(payload.get("extras"), dict) else {}
    for step in chain:
        if step.startswith(EXTRAS_PREFIX):
            value = extras.get(step[len(EXTRAS_PREFIX):])
        else:
            value = payload.get(step)
        if value is not None:
            return value
    return default


def normalize_client(payload: Any) -> Optional[dict[str, Any]]:
    """Normalize one client of either response shape; ``None`` for non-objects."""
    if not isinstance(payload, dict):
        return None
    client = {name: resolve_field(payload, name) for name in FIELD_FALLBACKS}
    client["lat"] = _coordinate(payload.get("lat"))
    client["lng"] = _coordinate(payload.get("lng"))
    return client
