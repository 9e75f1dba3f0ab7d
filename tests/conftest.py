import os
import socket
import sys
import urllib.request
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC = REPO_ROOT / "src"
FIXTURES_DIR = REPO_ROOT / "tests" / "fixtures" / "districts"

# Prefer repo sources over any installed package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _registry_teardown():
    # Requested before ``monkeypatch`` so this teardown runs after
    # monkeypatch has restored any patched registry functions.
    from la_jurisdictions.config import reset_settings_cache
    from la_jurisdictions.registry import reset_registry

    yield
    reset_settings_cache()
    reset_registry()


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    if os.getenv("LIVE") == "1":
        return

    real_connect = socket.socket.connect

    def guarded_connect(sock, address):
        host = address[0]
        if host not in ("127.0.0.1", "localhost"):
            raise RuntimeError("Network access blocked in tests")
        return real_connect(sock, address)

    monkeypatch.setattr(socket.socket, "connect", guarded_connect)
    monkeypatch.setattr(
        urllib.request,
        "urlopen",
        lambda *args, **kwargs: (_ for _ in ()).throw(
            RuntimeError("Network access blocked in tests")
        ),
    )


@pytest.fixture(autouse=True)
def fixture_data_dir(monkeypatch):
    from la_jurisdictions.config import reset_settings_cache
    from la_jurisdictions.registry import reset_registry

    monkeypatch.setenv("LAJ_DATA_DIR", str(FIXTURES_DIR))
    monkeypatch.setenv("LAJ_FETCH_TIMEOUT", "5")
    reset_settings_cache()
    reset_registry()
    yield FIXTURES_DIR


@pytest.fixture
def loaded_store():
    from la_jurisdictions.registry import get_store

    store = get_store()
    store.load_all_blocking()
    return store


class StubGeocoder:
    def __init__(self, results=None, error=None):
        self.results = list(results or [])
        self.error = error
        self.queries = []

    def geocode(self, query, limit=5):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)


@pytest.fixture
def stub_geocoder():
    return StubGeocoder
