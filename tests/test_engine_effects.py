from hookkit import Engine, EngineConfig


def _engine() -> Engine:
    return Engine(config=EngineConfig(log_passes=False))


def test_effect_runs_once_after_state_stabilizes():
    effect_log: list[str] = []

    def render(api):
        count, set_count = api.def_state(0)
        api.def_effect(lambda: effect_log.append(f"effect-{count}"), [count])
        if count < 2:
            set_count(count + 1)

    _engine().set_fn(render)

    assert effect_log == ["effect-2"]


def test_effect_reruns_when_dependencies_change():
    effect_log: list[int] = []
    holder = {}

    def render(api):
        count, set_count = api.def_state(0)
        holder["bump"] = lambda: set_count(count + 1)
        api.def_effect(lambda: effect_log.append(count), [count])

    _engine().set_fn(render)
    assert effect_log == [0]

    holder["bump"]()
    assert effect_log == [0, 1]

    holder["bump"]()
    assert effect_log == [0, 1, 2]


def test_effect_skipped_when_dependencies_unchanged():
    effect_log: list[int] = []

    def render(api):
        count, _set_count = api.def_state(0)
        api.def_effect(lambda: effect_log.append(count), [count])

    engine = _engine()
    engine.set_fn(render)
    assert effect_log == [0]

    engine.update()
    assert effect_log == [0]


def test_effect_with_changed_dependency_length_reruns():
    effect_log: list[tuple] = []
    deps = {"value": ["a"]}

    def render(api):
        current = tuple(deps["value"])
        api.def_effect(lambda: effect_log.append(current), deps["value"])

    engine = _engine()
    engine.set_fn(render)
    deps["value"] = ["a", "b"]
    engine.update()

    assert effect_log == [("a",), ("a", "b")]


def test_effect_without_dependencies_runs_on_every_update():
    effect_log: list[str] = []

    def render(api):
        api.def_effect(lambda: effect_log.append("ran"))

    engine = _engine()
    engine.set_fn(render)
    assert effect_log == ["ran"]

    engine.update()
    assert effect_log == ["ran", "ran"]


def test_cleanup_runs_before_effect_reruns():
    log: list[str] = []
    holder = {}

    def render(api):
        count, set_count = api.def_state(0)
        holder["bump"] = lambda: set_count(count + 1)

        def effect():
            log.append(f"setup-{count}")
            return lambda: log.append(f"cleanup-{count}")

        api.def_effect(effect, [count])

    _engine().set_fn(render)
    assert log == ["setup-0"]

    holder["bump"]()
    assert log == ["setup-0", "cleanup-0", "setup-1"]

    holder["bump"]()
    assert log == ["setup-0", "cleanup-0", "setup-1", "cleanup-1", "setup-2"]


def test_instance_cleanup_runs_stored_cleanups_once():
    log: list[str] = []

    def render(api):
        def effect():
            log.append("setup")
            return lambda: log.append("cleanup")

        api.def_effect(effect, [])

    engine = _engine()
    engine.set_fn(render)
    assert log == ["setup"]

    engine.cleanup()
    assert log == ["setup", "cleanup"]

    engine.cleanup()
    assert log == ["setup", "cleanup"]


def test_effects_run_in_position_order():
    log: list[str] = []

    def render(api):
        api.def_effect(lambda: log.append("first"), [])
        api.def_effect(lambda: log.append("second"), [])

    _engine().set_fn(render)

    assert log == ["first", "second"]


def test_multiple_effects_track_their_own_dependencies():
    effect1_log: list[int] = []
    effect2_log: list[int] = []
    holder = {}

    def render(api):
        count, set_count = api.def_state(0)
        other, _set_other = api.def_state(10)
        holder["bump"] = lambda: set_count(count + 1)
        api.def_effect(lambda: effect1_log.append(count), [count])
        api.def_effect(lambda: effect2_log.append(other), [other])

    _engine().set_fn(render)
    assert effect1_log == [0]
    assert effect2_log == [10]

    holder["bump"]()
    assert effect1_log == [0, 1]
    assert effect2_log == [10]


def test_effect_state_updates_restabilize():
    final = {}
    holder = {}

    def render(api):
        count, set_count = api.def_state(0)
        triggered, set_triggered = api.def_state(False)
        final["count"] = count
        holder["trigger"] = lambda: set_triggered(True)

        def effect():
            if triggered and count < 5:
                set_count(count + 1)

        api.def_effect(effect, [triggered, count])

    _engine().set_fn(render)
    assert final["count"] == 0

    holder["trigger"]()
    assert final["count"] == 5


def test_effect_sees_stabilized_state_and_ref():
    effect_log: list[str] = []
    refs = {}

    def render(api):
        count, set_count = api.def_state(0)
        renders = api.def_ref(0)
        renders.current += 1
        refs["renders"] = renders
        api.def_effect(
            lambda: effect_log.append(f"effect-count:{count}-renders:{renders.current}"), [count]
        )
        if count < 2:
            set_count(count + 1)

    _engine().set_fn(render)

    assert refs["renders"].current == 3
    assert effect_log == ["effect-count:2-renders:3"]


def test_effect_restart_skips_remaining_effects_until_next_stabilization():
    log: list[str] = []

    def render(api):
        phase, set_phase = api.def_state("start")

        def first():
            log.append(f"first:{phase}")
            if phase == "start":
                set_phase("done")

        api.def_effect(first, [phase])
        api.def_effect(lambda: log.append(f"second:{phase}"), [phase])

    _engine().set_fn(render)

    assert log == ["first:start", "first:done", "second:done"]
