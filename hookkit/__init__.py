"""Deterministic state-stabilization engine.

A user function is re-run against a positional hook store until it stops
requesting state changes; effects and aggregated output follow. The
`hookkit.engine` package has no dependency on `hookkit.prompt` or
`hookkit.history`.
"""

from hookkit.config import EngineConfig, load_engine_config
from hookkit.engine import (
    CapabilitySet,
    DefaultPassRecorder,
    Engine,
    HookSnapshot,
    NullPassRecorder,
    OutputHandle,
    PassRecorder,
    Snapshot,
)
from hookkit.errors import IterationLimitExceeded
from hookkit.extension_registry import Extension, ExtensionRegistry

__all__ = [
    "CapabilitySet",
    "DefaultPassRecorder",
    "Engine",
    "EngineConfig",
    "Extension",
    "ExtensionRegistry",
    "HookSnapshot",
    "IterationLimitExceeded",
    "NullPassRecorder",
    "OutputHandle",
    "PassRecorder",
    "Snapshot",
    "load_engine_config",
]
