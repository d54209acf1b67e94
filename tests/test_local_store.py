from local_store import LocalStore, is_completed, load_completion, save_completion
from lookup import PostGameDetails


def test_values_persist_across_instances(tmp_path):
    path = tmp_path / "nested" / "store.json"
    LocalStore(str(path)).set("a", "1")
    assert LocalStore(str(path)).get("a") == "1"
    assert LocalStore(str(path)).get("b") is None


def test_unreadable_file_is_treated_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    store = LocalStore(str(path))
    assert store.get("a") is None
    store.set("a", "x")
    assert LocalStore(str(path)).get("a") == "x"


def test_completion_round_trip(tmp_path):
    store = LocalStore(str(tmp_path / "c.json"))
    details = PostGameDetails(word="CRANE", status="won", guesses=["SLATE", "CRANE"], translation="grúa")
    assert not is_completed(store, 42, "2024-05-01")
    assert load_completion(store, 42, "2024-05-01") is None
    save_completion(store, 42, "2024-05-01", details)
    assert is_completed(store, 42, "2024-05-01")
    assert load_completion(store, 42, "2024-05-01") == details
    assert not is_completed(store, 42, "2024-05-02")
    assert not is_completed(store, 7, "2024-05-01")


def test_corrupt_details_still_count_as_completed(tmp_path):
    store = LocalStore(str(tmp_path / "c.json"))
    store.set("wordquiz:42:2024-05-01:completed", "true")
    store.set("wordquiz:42:2024-05-01:details", "{broken")
    assert is_completed(store, 42, "2024-05-01")
    assert load_completion(store, 42, "2024-05-01") is None
