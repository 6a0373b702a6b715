from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

import yaml


def load_yaml_mapping(path: str | os.PathLike[str]) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Config file must contain a YAML mapping: {path}")
    return dict(payload)


def resolve_config_path(
    path: str | os.PathLike[str] | None = None,
    *,
    env_var: str | None = "HOOKKIT_CONFIG",
) -> str | None:
    """Explicit path first, then the environment variable; None when neither is set."""

    raw: str | None = None
    if path is not None:
        raw = str(path).strip() or None
    elif env_var:
        raw = os.environ.get(str(env_var), "").strip() or None

    if raw is None:
        return None
    return os.path.abspath(os.path.expandvars(os.path.expanduser(raw)))
