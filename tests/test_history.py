from hookkit import Engine, EngineConfig
from hookkit.history import SNAPSHOT_COLUMNS, snapshots_frame, value_trace


def _render(api):
    count, set_count = api.def_state(0)
    api.def_ref("r")
    if count < 3:
        set_count(count + 1)


def test_value_trace_follows_counter():
    engine = Engine(_render, config=EngineConfig(log_passes=False))

    assert value_trace(engine.snapshots(), 0) == [0, 1, 2, 3]
    assert value_trace(engine.snapshots(), 1) == ["r", "r", "r", "r"]
    assert value_trace(engine.snapshots(), 5) == []


def test_snapshots_frame_has_one_row_per_hook():
    engine = Engine(_render, config=EngineConfig(log_passes=False))

    frame = snapshots_frame(engine.snapshots())

    assert list(frame.columns) == list(SNAPSHOT_COLUMNS)
    assert len(frame) == 8
    states = frame[frame["type"] == "state"]
    assert states["value"].tolist() == [0, 1, 2, 3]
    assert states["iteration"].tolist() == [0, 1, 2, 3]
    refs = frame[frame["type"] == "ref"]
    assert refs["current"].tolist() == ["r"] * 4


def test_snapshots_frame_empty():
    frame = snapshots_frame(())

    assert frame.empty
    assert list(frame.columns) == list(SNAPSHOT_COLUMNS)
