"""GeoJSON marker collections for the browser map."""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional, Sequence

from ..lookup.service import BulkLookupResult
from .fields import normalize_client
from .popup import build_popup

_CODE_SEPARATORS = re.compile(r"[\n,; \t\r]+")


def parse_codes(text: Optional[str]) -> List[str]:
    """Split a pasted or uploaded block of codes on newlines, commas, semicolons, spaces and tabs."""
    return [part.strip() for part in _CODE_SEPARATORS.split(str(text or "")) if part.strip()]


def compute_bounds(points: Iterable[Sequence[float]]) -> Optional[List[List[float]]]:
    """Bounding box ``[[south, west], [north, east]]`` of ``(lat, lng)`` points."""
    points = list(points)
    if not points:
        return None
    lats = [point[0] for point in points]
    lngs = [point[1] for point in points]
    return [[min(lats), min(lngs)], [max(lats), max(lngs)]]


def build_marker_collection(clients: Iterable[Any]) -> dict[str, Any]:
    """Normalize clients of either shape and turn the mappable ones into point features.

    The collection's ``bbox`` follows GeoJSON order ``[west, south, east, north]``;
    ``bounds`` carries the same box in Leaflet's ``[[south, west], [north, east]]``.
    """
    features: List[dict[str, Any]] = []
    points: List[tuple[float, float]] = []
    for payload in clients:
        client = normalize_client(payload)
        if client is None or client["lat"] is None or client["lng"] is None:
            continue
        points.append((client["lat"], client["lng"]))
        features.append(
            {
                "type": "Feature",
                "id": f"{client['CD']}:{client['Cliente']}",
                "geometry": {"type": "Point", "coordinates": [client["lng"], client["lat"]]},
                "properties": {
                    "cliente": client["Cliente"],
                    "nombre": client["Nombre"],
                    "popup": build_popup(client),
                },
            }
        )

    bounds = compute_bounds(points)
    collection: dict[str, Any] = {"type": "FeatureCollection", "features": features, "bounds": bounds}
    if bounds:
        (south, west), (north, east) = bounds
        collection["bbox"] = [west, south, east, north]
    return collection


def status_message(result: BulkLookupResult) -> str:
    message = f"Mostrados: {len(result.clients)}"
    if result.not_found:
        message += f" | No encontrados: {len(result.not_found)}"
    if result.without_coordinates:
        message += f" | Sin coordenadas: {len(result.without_coordinates)}"
    return message
