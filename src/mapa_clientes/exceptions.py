"""Error taxonomy shared by the importer, the lookup service and the API."""

from __future__ import annotations

from typing import Any, Optional


class MapaClientesError(Exception):
    """Base error. API handlers turn it into ``{"error": detail, **extra}``."""

    status_code: int = 500
    detail: str = "Error interno"

    def __init__(self, detail: Optional[str] = None, extra: Optional[dict[str, Any]] = None) -> None:
        self.detail = detail or self.__class__.detail
        self.extra = extra or {}
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.detail, **self.extra}


# Configuration / startup errors abort the process.

class ConfigurationError(MapaClientesError):
    detail = "Configuración incompleta"


class InputFileNotFoundError(MapaClientesError):
    detail = "Archivo no encontrado"

    def __init__(self, path: Any, label: str = "archivo") -> None:
        super().__init__(f"No encontré el {label}: {path}", {"path": str(path)})
        self.path = path


class MissingHeadersError(MapaClientesError):
    """Spreadsheet lacks headers the template declares as required."""

    detail = "Faltan encabezados obligatorios"

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Faltan encabezados obligatorios: {', '.join(missing)}", {"missing": list(missing)})
        self.missing = list(missing)


class UnreadableSpreadsheetError(MapaClientesError):
    """The spreadsheet exists but cannot be parsed (type, encoding or corrupt file)."""

    detail = "No se pudo leer el archivo"

    def __init__(self, path: Any, reason: str) -> None:
        super().__init__(f"No se pudo leer {path}: {reason}", {"path": str(path)})
        self.path = path


# Request errors surface as 4xx.

class MissingParameterError(MapaClientesError):
    status_code = 400
    detail = "Parámetro requerido"


class ClientNotFoundError(MapaClientesError):
    status_code = 404
    detail = "Cliente no encontrado"


class PayloadTooLargeError(MapaClientesError):
    status_code = 413
    detail = "Demasiados clientes"


class UnmappableClientError(MapaClientesError):
    """The client exists but its coordinates do not parse; extra holds the identity fields."""

    status_code = 422
    detail = "Cliente sin coordenadas válidas"
