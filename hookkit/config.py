from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from hookkit.config_io import load_yaml_mapping, resolve_config_path
from hookkit.config_namespace import ConfigNamespace

DEFAULT_MAX_ITERATIONS = 1000


@dataclass(frozen=True)
class EngineConfig:
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    record_snapshots: bool = True
    max_snapshots: int | None = None
    log_passes: bool = True
    logger_name: str = "hookkit"
    effective: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int):
            raise TypeError(
                f"max_iterations must be an int (type={type(self.max_iterations).__name__})"
            )
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1 (got {self.max_iterations})")
        if self.max_snapshots is not None and (
            isinstance(self.max_snapshots, bool)
            or not isinstance(self.max_snapshots, int)
            or self.max_snapshots < 1
        ):
            raise ValueError(f"max_snapshots must be >= 1 or None (got {self.max_snapshots!r})")
        if not isinstance(self.logger_name, str) or not self.logger_name.strip():
            raise TypeError("logger_name must be a non-empty string")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "EngineConfig":
        """Parse ``{"engine": {...}}``; unknown keys are rejected."""

        root = ConfigNamespace(dict(data or {}), path="")
        engine = root.namespace("engine", default=None)

        max_iterations = engine.get_int(
            "max_iterations", default=DEFAULT_MAX_ITERATIONS, min_value=1
        )
        log_passes = engine.get_bool("log_passes", default=True)
        logger_name = engine.get_str("logger_name", default="hookkit")

        snapshots = engine.namespace("snapshots", default=None)
        record_snapshots = snapshots.get_bool("enabled", default=True)
        max_snapshots = snapshots.get_optional_int("max_entries", default=None, min_value=1)

        root.assert_consumed()

        return cls(
            max_iterations=max_iterations,
            record_snapshots=record_snapshots,
            max_snapshots=max_snapshots,
            log_passes=log_passes,
            logger_name=logger_name or "hookkit",
            effective=root.effective_values(),
        )


def load_engine_config(
    path: str | os.PathLike[str] | None = None,
    *,
    env_var: str | None = "HOOKKIT_CONFIG",
) -> EngineConfig:
    resolved = resolve_config_path(path, env_var=env_var)
    if resolved is None:
        return EngineConfig.from_dict({})
    return EngineConfig.from_dict(load_yaml_mapping(resolved))
