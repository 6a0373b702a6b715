"""Engine primitives: hook store, stabilization loop, snapshots and output fold."""

from hookkit.engine.capabilities import BASE_CAPABILITIES, CapabilitySet
from hookkit.engine.hooks import (
    ALLOWED_OUTPUT_MODES,
    EffectHook,
    Hook,
    HookStore,
    HookType,
    InputHook,
    OutputHook,
    OutputMode,
    ReducerHook,
    RefHook,
    StateHook,
    is_same,
)
from hookkit.engine.output import OutputDocument, OutputHandle, aggregate_outputs
from hookkit.engine.recorder import DefaultPassRecorder, NullPassRecorder, PassRecorder
from hookkit.engine.runtime import Engine, UserFunction
from hookkit.engine.snapshots import HookSnapshot, Snapshot, SnapshotLog, deep_copy

__all__ = [
    "ALLOWED_OUTPUT_MODES",
    "BASE_CAPABILITIES",
    "CapabilitySet",
    "DefaultPassRecorder",
    "EffectHook",
    "Engine",
    "Hook",
    "HookSnapshot",
    "HookStore",
    "HookType",
    "InputHook",
    "NullPassRecorder",
    "OutputDocument",
    "OutputHandle",
    "OutputHook",
    "OutputMode",
    "PassRecorder",
    "ReducerHook",
    "RefHook",
    "Snapshot",
    "SnapshotLog",
    "StateHook",
    "UserFunction",
    "aggregate_outputs",
    "deep_copy",
    "is_same",
]
