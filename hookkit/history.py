"""Tabular views over a snapshot log."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pandas as pd

from hookkit.engine.snapshots import Snapshot

SNAPSHOT_COLUMNS: tuple[str, ...] = (
    "iteration",
    "timestamp",
    "index",
    "type",
    "value",
    "current",
    "deps",
    "has_run",
    "namespace",
    "key",
    "enabled",
    "mode",
)


def snapshots_frame(snapshots: Sequence[Snapshot]) -> pd.DataFrame:
    """One row per (snapshot, hook); columns that do not apply to a hook type are None."""

    rows: list[dict[str, Any]] = []
    for snapshot in snapshots:
        for hook in snapshot.hooks:
            row: dict[str, Any] = {column: None for column in SNAPSHOT_COLUMNS}
            row.update(hook.as_dict())
            row["iteration"] = snapshot.iteration
            row["timestamp"] = snapshot.timestamp
            rows.append(row)
    return pd.DataFrame(rows, columns=list(SNAPSHOT_COLUMNS))


def value_trace(snapshots: Sequence[Snapshot], index: int) -> list[Any]:
    """Recorded values of the hook at ``index``, one per snapshot that contains it."""

    trace: list[Any] = []
    for snapshot in snapshots:
        for hook in snapshot.hooks:
            if hook.index != index:
                continue
            if hook.type == "ref":
                trace.append(hook.current)
            elif hook.type == "effect":
                trace.append(hook.deps)
            else:
                trace.append(hook.value)
            break
    return trace
