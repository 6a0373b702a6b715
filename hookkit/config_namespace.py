"""Strict configuration namespace with consumed-keys enforcement."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable

_MISSING = object()


def _join_path(parent: str, key: str) -> str:
    if not parent:
        return key
    return f"{parent}.{key}"


@dataclass
class ConfigNamespace:
    """Typed reads over a config mapping that remember which keys were used."""

    data: Mapping[str, Any]
    path: str
    _consumed: set[str] = field(default_factory=set, init=False, repr=False)
    _children: dict[str, "ConfigNamespace"] = field(default_factory=dict, init=False, repr=False)
    _effective: dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def empty(cls, *, path: str) -> "ConfigNamespace":
        return cls({}, path=path)

    def consumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._consumed))

    def unconsumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(str(k) for k in self.data.keys() if k not in self._consumed))

    def assert_consumed(self) -> None:
        unknown = list(self.unconsumed_keys())
        if unknown:
            path = self.path or "<root>"
            consumed = ", ".join(self.consumed_keys()) or "<none>"
            raise ValueError(
                f"Unknown config keys under {path}: {', '.join(unknown)} (consumed: {consumed})"
            )
        for child in self._children.values():
            child.assert_consumed()

    def effective_values(self) -> dict[str, Any]:
        out = dict(self._effective)
        for key, child in self._children.items():
            child_effective = child.effective_values()
            if child_effective:
                out[key] = child_effective
        return out

    def _normalize_key(self, key: str) -> str:
        if not isinstance(key, str) or not key.strip():
            raise TypeError("ConfigNamespace key must be a non-empty string")
        return key.strip()

    def _get_raw(self, key: str, *, default: Any) -> Any:
        normalized = self._normalize_key(key)
        if normalized in self._children:
            raise ValueError(
                f"{_join_path(self.path, normalized)} already accessed as a nested namespace"
            )

        self._consumed.add(normalized)
        if normalized not in self.data:
            if default is _MISSING:
                raise ValueError(f"Missing required config key: {_join_path(self.path, normalized)}")
            return default
        return self.data.get(normalized)

    def namespace(
        self,
        key: str,
        *,
        default: Mapping[str, Any] | None | object = _MISSING,
    ) -> "ConfigNamespace":
        normalized = self._normalize_key(key)
        if normalized in self._children:
            return self._children[normalized]

        child_path = _join_path(self.path, normalized)
        raw = self.data.get(normalized)
        self._consumed.add(normalized)

        if raw is None:
            if default is _MISSING:
                raise ValueError(f"Missing required config namespace: {child_path}")
            if default is not None and not isinstance(default, Mapping):
                raise TypeError(f"default for {child_path} must be a mapping or None")
            raw = dict(default) if default is not None else {}

        if not isinstance(raw, Mapping):
            raise TypeError(f"{child_path} must be a mapping (type={type(raw).__name__})")

        child = ConfigNamespace(dict(raw), path=child_path)
        self._children[normalized] = child
        return child

    def get_bool(self, key: str, *, default: bool | object = _MISSING) -> bool:
        if default is not _MISSING and not isinstance(default, bool):
            raise TypeError(f"{_join_path(self.path, key.strip())} default must be a boolean")

        value = self._get_raw(key, default=default)
        if not isinstance(value, bool):
            raise TypeError(
                f"{_join_path(self.path, key.strip())} must be a boolean (type={type(value).__name__})"
            )
        self._effective[key.strip()] = value
        return value

    def _check_int(
        self,
        key: str,
        value: int,
        *,
        min_value: int | None,
        max_value: int | None,
        choices: Iterable[int] | None,
    ) -> int:
        label = _join_path(self.path, key.strip())
        if min_value is not None and value < int(min_value):
            raise ValueError(f"{label} must be >= {int(min_value)} (got {value})")
        if max_value is not None and value > int(max_value):
            raise ValueError(f"{label} must be <= {int(max_value)} (got {value})")
        if choices is not None:
            choice_set = {int(item) for item in choices}
            if value not in choice_set:
                allowed = ", ".join(str(item) for item in sorted(choice_set)) or "<none>"
                raise ValueError(f"{label} must be one of: {allowed} (got {value})")
        self._effective[key.strip()] = value
        return value

    def get_int(
        self,
        key: str,
        *,
        default: int | object = _MISSING,
        min_value: int | None = None,
        max_value: int | None = None,
        choices: Iterable[int] | None = None,
    ) -> int:
        if default is not _MISSING and (isinstance(default, bool) or not isinstance(default, int)):
            raise TypeError(f"{_join_path(self.path, key.strip())} default must be an int")

        raw = self._get_raw(key, default=default)
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise TypeError(
                f"{_join_path(self.path, key.strip())} must be an int (type={type(raw).__name__})"
            )
        return self._check_int(
            key, int(raw), min_value=min_value, max_value=max_value, choices=choices
        )

    def get_optional_int(
        self,
        key: str,
        *,
        default: int | None | object = _MISSING,
        min_value: int | None = None,
        max_value: int | None = None,
    ) -> int | None:
        """Parse an int or an explicit null; missing keys fall back to ``default``."""

        if default is not _MISSING and default is not None and (
            isinstance(default, bool) or not isinstance(default, int)
        ):
            raise TypeError(f"{_join_path(self.path, key.strip())} default must be an int or None")

        raw = self._get_raw(key, default=default)
        if raw is None:
            self._effective[key.strip()] = None
            return None
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise TypeError(
                f"{_join_path(self.path, key.strip())} must be an int or null (type={type(raw).__name__})"
            )
        return self._check_int(key, int(raw), min_value=min_value, max_value=max_value, choices=None)

    def get_str(
        self,
        key: str,
        *,
        default: str | None | object = _MISSING,
        allow_empty: bool = False,
    ) -> str | None:
        if default is not _MISSING and default is not None and not isinstance(default, str):
            raise TypeError(f"{_join_path(self.path, key.strip())} default must be a string or None")

        raw = self._get_raw(key, default=default)
        if raw is None:
            self._effective[key.strip()] = None
            return None
        if not isinstance(raw, str):
            raise TypeError(
                f"{_join_path(self.path, key.strip())} must be a string (type={type(raw).__name__})"
            )
        value = raw.strip()
        if not value and not allow_empty:
            raise ValueError(f"{_join_path(self.path, key.strip())} cannot be empty")
        self._effective[key.strip()] = value
        return value
