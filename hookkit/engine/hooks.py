"""Hook slots and the positional arena that stores them.

Slots are addressed by call order: the Nth capability call of a pass always
lands on position N. The engine cannot tell a reordered call from a
legitimate one, so callers must make the same capability calls in the same
order on every pass. A slot revisited by a different capability than the
one that created it is reported as a ``TypeError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal, TypeAlias, TypeVar

HookType: TypeAlias = Literal["state", "reducer", "ref", "effect", "input", "output"]
OutputMode: TypeAlias = Literal["overwrite", "append"]
ALLOWED_OUTPUT_MODES: tuple[str, ...] = ("overwrite", "append")

EffectCallback: TypeAlias = Callable[[], Any]
Cleanup: TypeAlias = Callable[[], Any]

_PRIMITIVES = (type(None), bool, int, float, complex, str, bytes)


def is_same(left: Any, right: Any) -> bool:
    """Reference identity, widened to value equality for immutable primitives."""

    if left is right:
        return True
    if type(left) is not type(right) or not isinstance(left, _PRIMITIVES):
        return False
    return bool(left == right)


@dataclass
class StateHook:
    value: Any
    type: HookType = field(default="state", init=False)


@dataclass
class ReducerHook:
    value: Any
    reducer: Callable[[Any, Any], Any]
    type: HookType = field(default="reducer", init=False)


@dataclass
class RefHook:
    current: Any
    type: HookType = field(default="ref", init=False)


@dataclass
class EffectHook:
    callback: EffectCallback
    deps: tuple[Any, ...] | None
    cleanup: Cleanup | None = None
    has_run: bool = False
    type: HookType = field(default="effect", init=False)

    def refresh(self, callback: EffectCallback, deps: tuple[Any, ...] | None) -> bool:
        """Take the latest callback and re-arm the effect when its deps changed."""

        self.callback = callback
        changed = (
            deps is None
            or self.deps is None
            or len(deps) != len(self.deps)
            or any(not is_same(new, old) for new, old in zip(deps, self.deps))
        )
        if changed:
            self.deps = deps
            self.has_run = False
        return changed


@dataclass
class InputHook:
    value: Any
    type: HookType = field(default="input", init=False)


@dataclass
class OutputHook:
    namespace: str
    key: str
    value: Any
    mode: OutputMode = "overwrite"
    enabled: bool = True
    type: HookType = field(default="output", init=False)

    def __post_init__(self) -> None:
        if self.mode not in ALLOWED_OUTPUT_MODES:
            raise ValueError(f"Invalid output mode: {self.mode}")


Hook: TypeAlias = StateHook | ReducerHook | RefHook | EffectHook | InputHook | OutputHook
H = TypeVar("H", StateHook, ReducerHook, RefHook, EffectHook, InputHook, OutputHook)


class HookStore:
    """Growable arena of hook slots plus the per-pass position counter."""

    def __init__(self) -> None:
        self._slots: list[Hook | None] = []
        self.position = 0

    def __len__(self) -> int:
        return len(self._slots)

    def reset_position(self) -> None:
        self.position = 0

    def claim(self, kind: type[H], create: Callable[[], H]) -> tuple[H, bool]:
        """Return the slot at the current position, creating it on first visit.

        The boolean is True when the slot was created by this call. Vacant
        positions (left behind by ``vacate``) are rebuilt the same way.
        """

        index = self.position
        self.position += 1

        if index >= len(self._slots):
            hook = create()
            self._slots.append(hook)
            return hook, True

        existing = self._slots[index]
        if existing is None:
            hook = create()
            self._slots[index] = hook
            return hook, True

        if not isinstance(existing, kind):
            raise TypeError(
                f"Hook at position {index} is a {existing.type} hook but was visited as "
                f"{kind.__name__}; capability calls must happen in the same order on every pass"
            )
        return existing, False

    def vacate(self, hook_type: HookType) -> int:
        """Empty every slot of ``hook_type`` in place; positions are kept."""

        count = 0
        for index, hook in enumerate(self._slots):
            if hook is not None and hook.type == hook_type:
                self._slots[index] = None
                count += 1
        return count

    def items(self) -> list[tuple[int, Hook]]:
        return [(index, hook) for index, hook in enumerate(self._slots) if hook is not None]

    def of_type(self, kind: type[H]) -> list[H]:
        return [hook for hook in self._slots if isinstance(hook, kind)]
