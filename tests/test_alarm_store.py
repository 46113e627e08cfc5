import pytest

from alarms.errors import NotFoundError, ValidationError
from alarms.store import Alarm, AlarmKind, AlarmStore


def _store_with(*targets):
    store = AlarmStore()
    for name, hours, minutes in targets:
        store, _ = store.add(name, hours, minutes)
    return store


def test_add_creates_enabled_manual_alarm():
    store, alarm = AlarmStore().add("  Lunch break ", 2, 30)
    assert len(store) == 1
    assert alarm.name == "Lunch break"
    assert (alarm.target_hours, alarm.target_minutes) == (2, 30)
    assert alarm.enabled
    assert not alarm.has_triggered
    assert alarm.last_triggered_date is None
    assert alarm.kind is AlarmKind.MANUAL
    assert alarm.id.startswith("al_")


def test_add_accepts_digit_strings():
    _, alarm = AlarmStore().add("Focus", "8", " 05")
    assert (alarm.target_hours, alarm.target_minutes) == (8, 5)


@pytest.mark.parametrize(
    "name,hours,minutes",
    [
        ("", 1, 0),
        ("   ", 1, 0),
        ("x", 24, 0),
        ("x", -1, 0),
        ("x", 1, 60),
        ("x", 1, -1),
        ("x", "abc", 0),
        ("x", 1.5, 0),
        ("x", True, 0),
        ("x", "--5", 0),
        ("x", "\u00b2", 0),
        ("x", 1, "1.5"),
    ],
)
def test_add_rejects_invalid_input_without_mutating(name, hours, minutes):
    store = _store_with(("Existing", 1, 0))
    with pytest.raises(ValidationError):
        store.add(name, hours, minutes)
    assert [a.name for a in store] == ["Existing"]


def test_add_boundaries_are_inclusive():
    store = _store_with(("start", 0, 0), ("end", 23, 59))
    assert [(a.target_hours, a.target_minutes) for a in store] == [(0, 0), (23, 59)]


def test_add_returns_new_store():
    original = AlarmStore()
    updated, _ = original.add("a", 1, 0)
    assert len(original) == 0
    assert len(updated) == 1


def test_ids_are_unique():
    store = AlarmStore()
    for i in range(30):
        store, _ = store.add(f"a{i}", 1, 0)
    ids = [a.id for a in store]
    assert len(set(ids)) == len(ids)


def test_generate_interval_on_empty_store():
    store, generated = AlarmStore().generate_interval(1, 0, 3)
    assert [a.name for a in generated] == ["Commit 1", "Commit 2", "Commit 3"]
    assert [(a.target_hours, a.target_minutes) for a in store] == [(1, 0), (2, 0), (3, 0)]
    assert all(a.kind is AlarmKind.INTERVAL for a in store)
    assert all(a.enabled and not a.has_triggered for a in store)


def test_generate_interval_carries_minutes_into_hours():
    _, generated = AlarmStore().generate_interval(0, 45, 3)
    assert [(a.target_hours, a.target_minutes) for a in generated] == [(0, 45), (1, 30), (2, 15)]


def test_generate_interval_is_all_or_nothing():
    store = _store_with(("Manual", 5, 0))
    with pytest.raises(ValidationError) as excinfo:
        store.generate_interval(10, 0, 3)
    assert "Commit 3" in str(excinfo.value)
    assert [a.name for a in store] == ["Manual"]


def test_generate_interval_allows_last_hour():
    _, generated = AlarmStore().generate_interval(23, 59, 1)
    assert (generated[0].target_hours, generated[0].target_minutes) == (23, 59)


def test_generate_interval_replaces_previous_batch_and_keeps_manual():
    store = _store_with(("Manual", 5, 0))
    store, _ = store.generate_interval(1, 0, 5)
    store, generated = store.generate_interval(2, 0, 2)
    assert [a.name for a in store.manual_alarms] == ["Manual"]
    assert store.interval_alarms == generated
    assert len(store) == 3


@pytest.mark.parametrize(
    "hours,minutes,count",
    [(24, 0, 1), (-1, 0, 1), (0, 60, 1), (1, 0, 0), (0, 10, 51), (0, 0, 3)],
)
def test_generate_interval_validates_parameters(hours, minutes, count):
    with pytest.raises(ValidationError):
        AlarmStore().generate_interval(hours, minutes, count)


def test_generate_interval_allows_fifty_commits():
    store, generated = AlarmStore().generate_interval(0, 10, 50)
    assert len(generated) == 50
    assert (generated[-1].target_hours, generated[-1].target_minutes) == (8, 20)


def test_clear_interval_removes_only_interval_alarms():
    store = _store_with(("Manual", 5, 0))
    store, _ = store.generate_interval(1, 0, 3)
    cleared = store.clear_interval()
    assert [a.name for a in cleared] == ["Manual"]
    assert len(store) == 4


def test_toggle_flips_enabled():
    store, alarm = AlarmStore().add("a", 1, 0)
    store = store.toggle(alarm.id)
    assert not store.get(alarm.id).enabled
    store = store.toggle(alarm.id)
    assert store.get(alarm.id).enabled


def test_remove_deletes_alarm():
    store, alarm = AlarmStore().add("a", 1, 0)
    store, other = store.add("b", 2, 0)
    store = store.remove(alarm.id)
    assert [a.id for a in store] == [other.id]


def test_reset_trigger_clears_state_regardless_of_date():
    triggered = Alarm(
        id="al_1", name="a", target_hours=1, target_minutes=0,
        has_triggered=True, last_triggered_date="2024-01-01",
    )
    store = AlarmStore.of([triggered]).reset_trigger("al_1")
    alarm = store.get("al_1")
    assert not alarm.has_triggered
    assert alarm.last_triggered_date is None


@pytest.mark.parametrize("operation", ["toggle", "remove", "reset_trigger", "get"])
def test_unknown_id_raises_not_found(operation):
    store = _store_with(("a", 1, 0))
    with pytest.raises(NotFoundError) as excinfo:
        getattr(store, operation)("al_missing")
    assert excinfo.value.alarm_id == "al_missing"


def test_alarm_dict_round_trip_uses_storage_keys():
    alarm = Alarm(
        id="al_1", name="a", target_hours=3, target_minutes=15,
        enabled=False, has_triggered=True, last_triggered_date="2024-01-01",
        kind=AlarmKind.INTERVAL,
    )
    data = alarm.to_dict()
    assert data == {
        "id": "al_1",
        "name": "a",
        "hours": 3,
        "minutes": 15,
        "enabled": False,
        "hasTriggered": True,
        "lastTriggeredDate": "2024-01-01",
        "type": "interval",
    }
    assert Alarm.from_dict(data) == alarm


def test_from_dict_accepts_string_targets_and_drops_dangling_trigger():
    alarm = Alarm.from_dict(
        {"id": "1700000000000", "name": "Old", "hours": "8", "minutes": "0", "hasTriggered": True}
    )
    assert (alarm.target_hours, alarm.target_minutes) == (8, 0)
    assert not alarm.has_triggered
    assert alarm.kind is AlarmKind.MANUAL


def test_from_dict_rejects_out_of_range():
    with pytest.raises(ValueError):
        Alarm.from_dict({"id": "x", "name": "bad", "hours": 30, "minutes": 0})
