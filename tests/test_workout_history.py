import json

import pytest

from daily_sweat.memory.workout_history import WorkoutHistoryStorage


@pytest.fixture
def storage(tmp_path):
    return WorkoutHistoryStorage(tmp_path / "history.json")


def test_empty_history(storage):
    assert storage.load() == []


def test_add_keeps_newest_first(storage, plan_factory, timed_plan):
    first = plan_factory(*timed_plan.exercises, id="1")
    second = plan_factory(*timed_plan.exercises, id="2")

    storage.add(first)
    history = storage.add(second)

    assert [plan.id for plan in history] == ["2", "1"]


def test_history_persists_to_disk(storage, tmp_path, timed_plan):
    storage.add(timed_plan)

    reloaded = WorkoutHistoryStorage(tmp_path / "history.json").load()

    assert reloaded == [timed_plan]
    raw = json.loads((tmp_path / "history.json").read_text(encoding="utf-8"))
    assert raw[0]["id"] == timed_plan.id


def test_same_id_is_replaced_in_place(storage, plan_factory, timed_plan):
    storage.add(plan_factory(*timed_plan.exercises, id="1"))
    storage.add(plan_factory(*timed_plan.exercises, id="2"))

    history = storage.add(plan_factory(*timed_plan.exercises, id="1", name="Renamed"))

    assert [plan.id for plan in history] == ["2", "1"]
    assert history[1].name == "Renamed"


def test_history_is_capped(storage, plan_factory, timed_plan):
    for i in range(25):
        storage.add(plan_factory(*timed_plan.exercises, id=str(i)))

    history = storage.load()

    assert len(history) == WorkoutHistoryStorage.MAX_ITEMS
    assert history[0].id == "24"
    assert history[-1].id == "5"


def test_remove_and_clear(storage, plan_factory, timed_plan):
    storage.add(plan_factory(*timed_plan.exercises, id="1"))
    storage.add(plan_factory(*timed_plan.exercises, id="2"))

    assert [plan.id for plan in storage.remove("1")] == ["2"]
    assert storage.get("1") is None
    assert storage.get("2").id == "2"

    storage.clear()
    assert storage.load() == []


def test_corrupt_file_loads_empty(tmp_path):
    path = tmp_path / "history.json"
    path.write_text("{not json", encoding="utf-8")

    assert WorkoutHistoryStorage(path).load() == []


def test_invalid_entries_are_skipped(tmp_path, timed_plan):
    path = tmp_path / "history.json"
    path.write_text(
        json.dumps({"plans": [{"name": "broken"}, timed_plan.model_dump(mode="json")]}),
        encoding="utf-8",
    )

    history = WorkoutHistoryStorage(path).load()

    assert [plan.id for plan in history] == [timed_plan.id]


def test_directory_path_uses_default_filename(tmp_path, timed_plan):
    storage = WorkoutHistoryStorage(tmp_path / "data")
    storage.add(timed_plan)

    assert (tmp_path / "data" / "workout_history.json").exists()
