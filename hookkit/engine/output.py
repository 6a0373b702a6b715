"""Namespaced output entries and the fold that renders them."""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeAlias

from .hooks import OutputHook

OutputDocument: TypeAlias = dict[str, dict[str, Any]]
OutputCallback: TypeAlias = Callable[[OutputDocument], Any]


class OutputHandle:
    """Toggle for a single output entry slot."""

    __slots__ = ("_hook",)

    def __init__(self, hook: OutputHook) -> None:
        self._hook = hook

    @property
    def enabled(self) -> bool:
        return self._hook.enabled

    @property
    def namespace(self) -> str:
        return self._hook.namespace

    @property
    def key(self) -> str:
        return self._hook.key

    def enable(self) -> None:
        self._hook.enabled = True

    def disable(self) -> None:
        self._hook.enabled = False

    def __repr__(self) -> str:
        state = "enabled" if self._hook.enabled else "disabled"
        return f"OutputHandle({self._hook.namespace}.{self._hook.key}, {self._hook.mode}, {state})"


def aggregate_outputs(entries: Iterable[OutputHook]) -> OutputDocument:
    """Fold enabled entries, in slot order, into ``{namespace: {key: value}}``.

    Overwrite entries replace whatever is stored at namespace/key. Append
    entries extend the list started by earlier append entries at the same
    namespace/key; a value left there by an overwrite entry is replaced by a
    new list.
    """

    document: OutputDocument = {}
    appended: set[tuple[str, str]] = set()
    for entry in entries:
        if not entry.enabled:
            continue
        bucket = document.setdefault(entry.namespace, {})
        slot = (entry.namespace, entry.key)
        if entry.mode == "append":
            if slot in appended:
                bucket[entry.key].append(entry.value)
            else:
                bucket[entry.key] = [entry.value]
                appended.add(slot)
        else:
            bucket[entry.key] = entry.value
            appended.discard(slot)
    return document
