import pytest

from hookkit import CapabilitySet
from hookkit.engine import HookStore, OutputHook, StateHook, is_same


def test_capability_set_dispatch():
    caps = CapabilitySet({"def_one": lambda: 1, "def_two": lambda: 2})

    assert caps.def_one() == 1
    assert caps["def_two"]() == 2
    assert "def_one" in caps
    assert caps.names() == ("def_one", "def_two")
    assert len(caps) == 2


def test_capability_set_is_immutable_and_reports_unknown_names():
    caps = CapabilitySet({"def_one": lambda: 1})

    with pytest.raises(AttributeError, match="immutable"):
        caps.def_one = lambda: 3
    with pytest.raises(AttributeError, match=r"Unknown capability: def_nope \(available: def_one\)"):
        caps.def_nope
    with pytest.raises(TypeError, match="must be callable"):
        CapabilitySet({"def_bad": 1})


def test_capability_set_restrict_and_merge():
    caps = CapabilitySet({"def_one": lambda: 1, "def_two": lambda: 2})

    assert caps.restrict("def_two").names() == ("def_two",)
    with pytest.raises(KeyError, match="def_three"):
        caps.restrict("def_three")
    with pytest.raises(ValueError, match="Duplicate capability name"):
        caps.merged({"def_one": lambda: 9})
    assert caps.merged({"def_three": lambda: 3}).def_three() == 3


def test_is_same_semantics():
    big = 10**9

    assert is_same(big, int(str(big)))
    assert is_same("abc", "".join(["a", "b", "c"]))
    assert is_same(None, None)
    assert not is_same(1, True)
    assert not is_same(1, 1.0)
    assert not is_same([1], [1])
    assert not is_same(float("nan"), float("nan"))


def test_store_claims_positions_and_vacates_in_place():
    store = HookStore()

    state, created = store.claim(StateHook, lambda: StateHook(value=1))
    output, _ = store.claim(OutputHook, lambda: OutputHook(namespace="ns", key="k", value=2))
    assert created is True
    assert len(store) == 2

    store.reset_position()
    again, created = store.claim(StateHook, lambda: StateHook(value=99))
    assert again is state
    assert created is False

    assert store.vacate("output") == 1
    assert store.items() == [(0, state)]
    rebuilt, created = store.claim(OutputHook, lambda: OutputHook(namespace="ns", key="k", value=3))
    assert created is True
    assert rebuilt is not output
    assert store.items() == [(0, state), (1, rebuilt)]


def test_output_hook_rejects_unknown_mode():
    with pytest.raises(ValueError, match="Invalid output mode"):
        OutputHook(namespace="ns", key="k", value=1, mode="merge")
