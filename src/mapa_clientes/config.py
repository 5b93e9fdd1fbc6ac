"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
import logging
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent


class DistributionCenterSetting(BaseModel):
    code: str
    name: str


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="MAPA_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Mapa Clientes API"
    service_name: str = "mapa-clientes"
    log_level: str = Field(default="INFO", description="Root logging level for the API and the CLI.")
    data_root: Path = Field(default=Path("data"), description="Directory holding spreadsheets to import.")
    templates_dir: Path = Field(
        default=PACKAGE_ROOT / "templates",
        description="Directory with the default column-mapping templates of each schema generation.",
    )
    static_dir: Path = Field(default=PACKAGE_ROOT / "static", description="Browser map assets.")

    clients_table: str = Field(default="clientes", description="Table of the partitioned (CD + Cliente) generation.")
    legacy_table: str = Field(default="clientes_legacy", description="Table of the legacy flat (codigo) generation.")

    bulk_lookup_limit: int = Field(default=2000, ge=1, description="Maximum distinct codes per bulk lookup.")
    lookup_chunk_size: int = Field(
        default=200,
        ge=1,
        description="Codes per store query; keeps PostgREST URLs short and under its row limit.",
    )
    import_batch_size: int = Field(default=1000, ge=1)

    distribution_centers: tuple[DistributionCenterSetting, ...] = Field(
        default=(
            DistributionCenterSetting(code="AV28", name="Popayán"),
            DistributionCenterSetting(code="AV57", name="Tuluá"),
            DistributionCenterSetting(code="AV46", name="Cali"),
        ),
        description="Distribution centers offered by /api/cds.",
    )
    default_distribution_center: str = "AV46"
    currency_symbol: str = "$"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("data_root", "templates_dir", "static_dir", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    def template_path(self, variant_name: str) -> Path:
        return self.templates_dir / f"{variant_name}.json"


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
