from types import SimpleNamespace

import pytest

from mapa_clientes.db.supabase import ClientStore
from mapa_clientes.exceptions import ConfigurationError


class RecordingSession:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_open_builds_client_once_and_close_releases_session() -> None:
    session = RecordingSession()
    built = []

    def factory(url, key):
        built.append((url, key))
        return SimpleNamespace(postgrest=SimpleNamespace(session=session))

    store = ClientStore(url="https://demo.supabase.co", key="secret", client_factory=factory)
    with store:
        store.open()
        assert store.is_open

    assert built == [("https://demo.supabase.co", "secret")]
    assert session.closed is True
    assert not store.is_open
    with pytest.raises(RuntimeError):
        store.client


def test_open_without_credentials_raises_configuration_error() -> None:
    store = ClientStore(url="", key="", client_factory=lambda url, key: pytest.fail("client built"))
    with pytest.raises(ConfigurationError):
        store.open()


def test_close_is_a_no_op_when_never_opened() -> None:
    ClientStore(url="", key="").close()
