"""Per-pass snapshots of the hook store.

``deep_copy`` handles a closed set of shapes: lists, tuples, dicts (and other
mappings, copied to dicts), sets, frozensets and date-like values. Primitives
pass through. Anything else (class instances, dataclasses, callables) is kept
by reference, so mutating such an object later is visible through earlier
snapshots.
"""

from __future__ import annotations

import copy
import time
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time as dt_time, timedelta
from typing import Any, Iterable

from .hooks import (
    EffectHook,
    Hook,
    HookType,
    InputHook,
    OutputHook,
    ReducerHook,
    RefHook,
    StateHook,
)


def deep_copy(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, complex, str, bytes)):
        return value
    if isinstance(value, list):
        return [deep_copy(item) for item in value]
    if isinstance(value, tuple):
        return tuple(deep_copy(item) for item in value)
    if isinstance(value, (datetime, date, dt_time, timedelta)):
        return copy.copy(value)
    if isinstance(value, Mapping):
        return {key: deep_copy(item) for key, item in value.items()}
    if isinstance(value, frozenset):
        return frozenset(deep_copy(item) for item in value)
    if isinstance(value, set):
        return {deep_copy(item) for item in value}
    return value


@dataclass(frozen=True)
class HookSnapshot:
    type: HookType
    index: int
    value: Any = None
    current: Any = None
    deps: tuple[Any, ...] | None = None
    has_run: bool | None = None
    namespace: str | None = None
    key: str | None = None
    enabled: bool | None = None
    mode: str | None = None

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, "index": self.index}
        if self.type in ("state", "reducer", "input"):
            out["value"] = self.value
        elif self.type == "ref":
            out["current"] = self.current
        elif self.type == "effect":
            out["deps"] = self.deps
            out["has_run"] = self.has_run
        else:
            out.update(
                namespace=self.namespace,
                key=self.key,
                value=self.value,
                enabled=self.enabled,
                mode=self.mode,
            )
        return out


@dataclass(frozen=True)
class Snapshot:
    iteration: int
    timestamp: float
    hooks: tuple[HookSnapshot, ...] = field(default_factory=tuple)


def snapshot_hook(hook: Hook, index: int) -> HookSnapshot:
    if isinstance(hook, (StateHook, ReducerHook, InputHook)):
        return HookSnapshot(type=hook.type, index=index, value=deep_copy(hook.value))
    if isinstance(hook, RefHook):
        return HookSnapshot(type="ref", index=index, current=deep_copy(hook.current))
    if isinstance(hook, EffectHook):
        return HookSnapshot(
            type="effect",
            index=index,
            deps=deep_copy(hook.deps),
            has_run=hook.has_run,
        )
    if isinstance(hook, OutputHook):
        return HookSnapshot(
            type="output",
            index=index,
            namespace=hook.namespace,
            key=hook.key,
            value=deep_copy(hook.value),
            enabled=hook.enabled,
            mode=hook.mode,
        )
    raise TypeError(f"Unsupported hook type: {type(hook).__name__}")


class SnapshotLog:
    """Append-only log of snapshots, optionally bounded to the newest entries."""

    def __init__(self, *, max_entries: int | None = None) -> None:
        if max_entries is not None and (isinstance(max_entries, bool) or int(max_entries) < 1):
            raise ValueError(f"max_entries must be >= 1 or None (got {max_entries!r})")
        self._entries: deque[Snapshot] = deque(maxlen=max_entries)

    def __len__(self) -> int:
        return len(self._entries)

    def capture(self, iteration: int, hooks: Iterable[tuple[int, Hook]]) -> Snapshot:
        snapshot = Snapshot(
            iteration=iteration,
            timestamp=time.time(),
            hooks=tuple(snapshot_hook(hook, index) for index, hook in hooks),
        )
        self._entries.append(snapshot)
        return snapshot

    def all(self) -> tuple[Snapshot, ...]:
        return tuple(self._entries)

    def latest(self) -> Snapshot | None:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()
