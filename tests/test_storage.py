import json

from debt_tracker.storage import ACCOUNTS_KEY, API_KEY_KEY, JsonFileStore, MemoryStore


def test_memory_store_get_set_remove():
    store = MemoryStore()
    assert store.get("k") is None

    store.set("k", "v")
    assert store.get("k") == "v"

    store.remove("k")
    store.remove("k")
    assert store.get("k") is None


def test_file_store_keys_are_independent(tmp_path):
    path = tmp_path / "nested" / "store.json"
    store = JsonFileStore(path)
    store.set(ACCOUNTS_KEY, "[]")
    store.set(API_KEY_KEY, "secret")

    reopened = JsonFileStore(path)
    assert reopened.get(ACCOUNTS_KEY) == "[]"
    assert reopened.get(API_KEY_KEY) == "secret"

    reopened.remove(ACCOUNTS_KEY)
    assert reopened.get(ACCOUNTS_KEY) is None
    assert reopened.get(API_KEY_KEY) == "secret"
    assert json.loads(path.read_text(encoding="utf-8")) == {API_KEY_KEY: "secret"}


def test_file_store_missing_file_reads_empty(tmp_path):
    store = JsonFileStore(tmp_path / "absent.json")

    assert store.get(ACCOUNTS_KEY) is None


def test_file_store_corrupt_file_reads_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("not json at all", encoding="utf-8")
    store = JsonFileStore(path)

    assert store.get(ACCOUNTS_KEY) is None
    store.set(API_KEY_KEY, "k")
    assert store.get(API_KEY_KEY) == "k"


def test_file_store_leaves_no_temp_files(tmp_path):
    store = JsonFileStore(tmp_path / "store.json")
    store.set("a", "1")
    store.set("b", "2")

    assert [p.name for p in tmp_path.iterdir()] == ["store.json"]
