"""Immutable capability dispatch table handed to the user function."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Callable

BASE_CAPABILITIES: tuple[str, ...] = (
    "def_state",
    "def_reducer",
    "def_ref",
    "def_effect",
    "def_input",
    "def_output_object",
    "def_output_array",
)


class CapabilitySet(Mapping[str, Callable[..., Any]]):
    """Name -> callable table with attribute access.

    ``api.def_state(0)`` and ``api["def_state"](0)`` are equivalent.
    """

    __slots__ = ("_table",)

    def __init__(self, table: Mapping[str, Callable[..., Any]]) -> None:
        for name, fn in table.items():
            if not isinstance(name, str) or not name.strip():
                raise TypeError("Capability names must be non-empty strings")
            if not callable(fn):
                raise TypeError(f"Capability {name} must be callable (type={type(fn).__name__})")
        object.__setattr__(self, "_table", MappingProxyType(dict(table)))

    def __getitem__(self, name: str) -> Callable[..., Any]:
        return self._table[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("__") or name == "_table":
            raise AttributeError(name)
        try:
            return self._table[name]
        except KeyError:
            available = ", ".join(sorted(self._table)) or "<none>"
            raise AttributeError(
                f"Unknown capability: {name} (available: {available})"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("CapabilitySet is immutable")

    def __repr__(self) -> str:
        return f"CapabilitySet({', '.join(sorted(self._table))})"

    def names(self) -> tuple[str, ...]:
        return tuple(self._table)

    def merged(self, extra: Mapping[str, Callable[..., Any]]) -> "CapabilitySet":
        clashes = sorted(set(extra) & set(self._table))
        if clashes:
            raise ValueError(f"Duplicate capability name(s): {', '.join(clashes)}")
        return CapabilitySet({**self._table, **extra})

    def restrict(self, *names: str) -> "CapabilitySet":
        missing = [name for name in names if name not in self._table]
        if missing:
            raise KeyError(f"Unknown capability: {', '.join(missing)}")
        return CapabilitySet({name: self._table[name] for name in names})
