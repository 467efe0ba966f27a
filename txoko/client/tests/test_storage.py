from txoko.client.storage import LANGUAGE_KEY
from txoko.client.storage import TOKEN_KEY
from txoko.client.storage import TokenStore
from txoko.client.storage import default_storage_path


def test_set_get_remove(tmp_path):
    store = TokenStore(tmp_path / "nested" / "storage.json")
    assert store.token is None

    store.set(TOKEN_KEY, "abc")
    assert store.get(TOKEN_KEY) == "abc"
    assert TokenStore(store.path).token == "abc"

    store.remove(TOKEN_KEY)
    assert store.token is None
    store.remove(TOKEN_KEY)


def test_language_defaults_to_basque(tmp_path):
    store = TokenStore(tmp_path / "storage.json")
    assert store.language == "eu"
    store.set(LANGUAGE_KEY, "es")
    assert store.language == "es"


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")
    store = TokenStore(path)
    assert store.get(TOKEN_KEY, "fallback") == "fallback"
    store.set(TOKEN_KEY, "new")
    assert store.token == "new"


def test_default_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("TXOKO_STORAGE_PATH", str(tmp_path / "s.json"))
    assert default_storage_path() == tmp_path / "s.json"
    monkeypatch.delenv("TXOKO_STORAGE_PATH")
    assert default_storage_path().name == "storage.json"
