"""Supabase client lifecycle for the API and the importer."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from supabase import Client, create_client

from ..config import settings
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ClientStore:
    """Owns the one long-lived Supabase connection of a process.

    Constructed explicitly (by the app lifespan or the importer CLI) and passed
    to the repositories; nothing reaches for a module-level client.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        client_factory: Callable[[str, str], Client] = create_client,
    ) -> None:
        self.url = url if url is not None else settings.supabase_url
        self.key = key if key is not None else settings.supabase_key
        self._client_factory = client_factory
        self._client: Client | None = None

    @classmethod
    def from_client(cls, client: Client) -> "ClientStore":
        """Wrap an already-built client (tests, scripts)."""
        store = cls(url="", key="")
        store._client = client
        return store

    @property
    def is_open(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> Client:
        if self._client is None:
            raise RuntimeError("ClientStore is not open; call open() first.")
        return self._client

    def open(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.url or not self.key:
            raise ConfigurationError(
                "Supabase no configurado: define MAPA_SUPABASE_URL y MAPA_SUPABASE_KEY"
            )
        self._client = self._client_factory(self.url, self.key)
        logger.info(f"Connected to Supabase at {self.url}")
        return self._client

    def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        # PostgREST queries share one httpx session per client.
        session = getattr(getattr(client, "postgrest", None), "session", None)
        if session is not None:
            session.close()
        logger.info("Supabase connection released")

    def __enter__(self) -> "ClientStore":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
