from datetime import datetime, timezone

import pytest

from hookkit import Engine, EngineConfig
from hookkit.engine import SnapshotLog, deep_copy


def _counter(api):
    count, set_count = api.def_state(0)
    if count < 3:
        set_count(count + 1)


def test_snapshot_count_matches_passes():
    engine = Engine(_counter, config=EngineConfig(log_passes=False))

    snapshots = engine.snapshots()
    assert len(snapshots) == 4
    assert [snap.hooks[0].value for snap in snapshots] == [0, 1, 2, 3]
    assert engine.last_snapshot() is snapshots[-1]


def test_snapshot_values_are_immune_to_live_mutation():
    holder = {}

    def render(api):
        data, _set_data = api.def_state({"items": [1, 2], "tags": {"a"}})
        holder["data"] = data

    engine = Engine(render, config=EngineConfig(log_passes=False))
    holder["data"]["items"].append(3)
    holder["data"]["tags"].add("b")

    recorded = engine.last_snapshot().hooks[0].value
    assert recorded == {"items": [1, 2], "tags": {"a"}}


def test_ref_snapshot_is_a_copy():
    holder = {}

    def render(api):
        ref = api.def_ref([])
        holder["ref"] = ref

    engine = Engine(render, config=EngineConfig(log_passes=False))
    holder["ref"].current.append("late")

    assert engine.last_snapshot().hooks[0].current == []


def test_effect_and_output_fields_are_recorded():
    def render(api):
        count, _set_count = api.def_state(1)
        api.def_effect(lambda: None, [count])
        handle = api.def_output_object("ns", "count", count)
        handle.disable()

    engine = Engine(render, config=EngineConfig(log_passes=False))
    state, effect, output = engine.last_snapshot().hooks

    assert state.as_dict() == {"type": "state", "index": 0, "value": 1}
    assert effect.deps == (1,)
    assert effect.has_run is False
    assert output.as_dict() == {
        "type": "output",
        "index": 2,
        "namespace": "ns",
        "key": "count",
        "value": 1,
        "enabled": False,
        "mode": "overwrite",
    }

    engine.update()
    assert engine.last_snapshot().hooks[1].has_run is True


def test_clear_snapshots():
    engine = Engine(_counter, config=EngineConfig(log_passes=False))
    engine.clear_snapshots()

    assert engine.snapshots() == ()
    assert engine.last_snapshot() is None


def test_bounded_log_keeps_newest_entries():
    engine = Engine(_counter, config=EngineConfig(log_passes=False, max_snapshots=2))

    assert [snap.iteration for snap in engine.snapshots()] == [2, 3]


def test_snapshots_can_be_disabled():
    engine = Engine(_counter, config=EngineConfig(log_passes=False, record_snapshots=False))

    assert engine.snapshots() == ()


def test_deep_copy_clones_known_containers():
    original = {"list": [[1]], "tuple": ([2],), "set": {3}, "frozen": frozenset({4})}
    copied = deep_copy(original)

    assert copied == original
    assert copied is not original
    assert copied["list"][0] is not original["list"][0]
    assert copied["tuple"][0] is not original["tuple"][0]
    assert copied["set"] is not original["set"]
    assert isinstance(copied["frozen"], frozenset)


def test_deep_copy_handles_dates_and_passes_opaque_objects_by_reference():
    class Box:
        pass

    box = Box()
    stamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    assert deep_copy(stamp) == stamp
    assert deep_copy(box) is box
    assert deep_copy("text") == "text"
    assert deep_copy(None) is None


def test_snapshot_log_rejects_invalid_bound():
    with pytest.raises(ValueError, match="max_entries"):
        SnapshotLog(max_entries=0)
