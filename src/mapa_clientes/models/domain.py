"""Domain models for client records and the two schema generations."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class IndexSpec:
    name: str
    columns: tuple[str, ...]
    unique: bool = False


@dataclass(frozen=True, slots=True)
class SchemaVariant:
    """Describes one API/storage generation.

    ``key_columns`` are the table columns forming the identity; ``doc_keys`` maps
    logical roles (partition, code, name, latitude, longitude, ...) to the key
    used inside the stored document. ``optional_fields`` is the fixed field list
    used when an import template carries no mapping of its own.
    """

    name: str
    table_setting: str
    key_columns: tuple[str, ...]
    doc_keys: dict[str, str]
    optional_fields: dict[str, str]
    indexes: tuple[IndexSpec, ...]
    promoted_columns: dict[str, str] = field(default_factory=dict)

    @property
    def partitioned(self) -> bool:
        return "partition" in self.doc_keys

    @property
    def code_key(self) -> str:
        return self.doc_keys["code"]

    @property
    def code_column(self) -> str:
        return self.key_columns[-1]

    @property
    def partition_column(self) -> Optional[str]:
        return self.key_columns[0] if self.partitioned else None

    @property
    def on_conflict(self) -> str:
        return ",".join(self.key_columns)


# Commercial attributes carried through without typing.
COMMERCIAL_FIELDS: tuple[str, ...] = (
    "ZT",
    "COM",
    "ZonaVenta",
    "Distrito",
    "EntregaFREE",
    "DiaFlex",
    "ValorMinimoFlex",
    "ValorFlex",
    "Cerveza",
    "NABS",
    "MKP",
    "Cobro",
    "NPS",
)

PARTITIONED = SchemaVariant(
    name="partitioned",
    table_setting="clients_table",
    key_columns=("cd", "cliente"),
    doc_keys={
        "partition": "CD",
        "code": "Cliente",
        "name": "Nombre",
        "latitude": "Latitud",
        "longitude": "Longitud",
        "neighborhood": "Barrio",
        "city": "Poblacion",
        "phone": "Telefono",
    },
    optional_fields={
        "Barrio": "Barrio",
        "Poblacion": "Poblacion",
        "Telefono": "Telefono",
        **{name: name for name in COMMERCIAL_FIELDS},
    },
    indexes=(IndexSpec("clientes_cd_cliente_unique", ("cd", "cliente"), unique=True),),
)

LEGACY = SchemaVariant(
    name="legacy",
    table_setting="legacy_table",
    key_columns=("codigo",),
    doc_keys={
        "code": "codigo",
        "name": "nombre",
        "latitude": "lat",
        "longitude": "lng",
        "neighborhood": "barrio",
        "city": "poblacion",
        "phone": "telefono",
    },
    optional_fields={
        "barrio": "Barrio",
        "poblacion": "Poblacion",
        "telefono": "Telefono",
    },
    indexes=(
        IndexSpec("clientes_legacy_codigo_unique", ("codigo",), unique=True),
        IndexSpec("clientes_legacy_barrio_idx", ("barrio",)),
        IndexSpec("clientes_legacy_telefono_idx", ("telefono",)),
    ),
    promoted_columns={"barrio": "barrio", "telefono": "telefono"},
)

VARIANTS = {variant.name: variant for variant in (PARTITIONED, LEGACY)}


@dataclass(slots=True)
class ClientRecord:
    """A stored client document: the common fields typed, the uncommon ones kept open.

    Provenance (``source``, ``created_at``, ``updated_at``) stays in the row
    columns written by the importer; lookups never read it.
    """

    code: str
    partition: Optional[str] = None
    name: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    commercial: dict[str, Any] = field(default_factory=dict)
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def mappable(self) -> bool:
        return self.latitude is not None and self.longitude is not None
