import json

from alarms.storage import AlarmStorage
from alarms.store import AlarmStore


def test_missing_file_loads_empty(tmp_path):
    api_key, store = AlarmStorage(tmp_path / "alarms.json").load()
    assert api_key == ""
    assert len(store) == 0


def test_save_then_load(tmp_path):
    storage = AlarmStorage(tmp_path / "nested" / "alarms.json")
    store, _ = AlarmStore().add("Focus", 2, 0)
    store, _ = store.generate_interval(1, 0, 2)
    assert storage.save("secret", store)
    api_key, loaded = storage.load()
    assert api_key == "secret"
    assert loaded == store


def test_corrupt_file_loads_empty(tmp_path):
    path = tmp_path / "alarms.json"
    path.write_text("{not json", encoding="utf-8")
    api_key, store = AlarmStorage(path).load()
    assert api_key == ""
    assert len(store) == 0


def test_bad_items_and_duplicates_are_skipped(tmp_path):
    path = tmp_path / "alarms.json"
    payload = {
        "api_key": "k",
        "alarms": [
            {"id": "a", "name": "ok", "hours": 1, "minutes": 0},
            {"id": "b", "name": "bad", "hours": 99, "minutes": 0},
            {"name": "no id", "hours": 1, "minutes": 0},
            "garbage",
            {"id": "a", "name": "dup", "hours": 2, "minutes": 0},
        ],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    api_key, store = AlarmStorage(path).load()
    assert api_key == "k"
    assert [a.name for a in store] == ["ok"]


def test_plain_list_layout_loads_without_key(tmp_path):
    path = tmp_path / "alarms.json"
    path.write_text(json.dumps([{"id": "a", "name": "ok", "hours": "3", "minutes": "5"}]), encoding="utf-8")
    api_key, store = AlarmStorage(path).load()
    assert api_key == ""
    assert store.get("a").target_minutes == 5


def test_save_failure_is_reported_not_raised(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    storage = AlarmStorage(blocker / "alarms.json")
    assert storage.save("k", AlarmStore()) is False
