import json

from admin_dashboard.credential_store import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    FileCredentialStore,
    InMemoryCredentialStore,
)


def test_in_memory_store_round_trip():
    store = InMemoryCredentialStore()
    store.set(ACCESS_TOKEN_KEY, "T1")
    assert store.access_token == "T1"
    assert store.refresh_token is None

    store.remove(ACCESS_TOKEN_KEY)
    store.remove(ACCESS_TOKEN_KEY)
    assert store.get(ACCESS_TOKEN_KEY) is None


def test_file_store_survives_restart(tmp_path):
    path = tmp_path / "nested" / "credentials.json"
    store = FileCredentialStore(path)
    store.set(ACCESS_TOKEN_KEY, "T1")
    store.set(REFRESH_TOKEN_KEY, "R1")

    assert json.loads(path.read_text()) == {"access_token": "T1", "refresh_token": "R1"}
    reopened = FileCredentialStore(path)
    assert reopened.access_token == "T1"
    assert reopened.refresh_token == "R1"


def test_file_store_removes_file_when_emptied(tmp_path):
    path = tmp_path / "credentials.json"
    store = FileCredentialStore(path)
    store.set(ACCESS_TOKEN_KEY, "T1")
    store.remove(ACCESS_TOKEN_KEY)

    assert not path.exists()
    assert FileCredentialStore(path).access_token is None


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("{not json")

    store = FileCredentialStore(path)
    assert store.access_token is None
