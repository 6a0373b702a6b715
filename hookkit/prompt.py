"""Prompt builder: an engine preloaded with prompt-shaped output extensions."""

from __future__ import annotations

from typing import Any, Literal

from hookkit.config import EngineConfig
from hookkit.engine import CapabilitySet, Engine, OutputHandle, UserFunction

MessageRole = Literal["user", "assistant"]
ALLOWED_MESSAGE_ROLES: tuple[str, ...] = ("user", "assistant")

VARIABLES_NAMESPACE = "variables"
MESSAGES_NAMESPACE = "prependedMessages"
SYSTEMS_NAMESPACE = "systems"

PROMPT_CAPABILITIES: tuple[str, ...] = (
    "def_state",
    "def_effect",
    "def_reducer",
    "def_ref",
    "def_variable",
    "def_message",
    "def_system",
)


def _def_variable(api: CapabilitySet, name: str, value: Any) -> OutputHandle:
    return api.def_output_object(VARIABLES_NAMESPACE, name, value)


def _def_message(api: CapabilitySet, role: MessageRole, message: str) -> OutputHandle:
    if role not in ALLOWED_MESSAGE_ROLES:
        raise ValueError(f"Invalid message role: {role!r} (allowed: {', '.join(ALLOWED_MESSAGE_ROLES)})")
    return api.def_output_array(MESSAGES_NAMESPACE, "message", {"role": role, "message": message})


def _def_system(api: CapabilitySet, name: str, value: Any) -> OutputHandle:
    return api.def_output_object(SYSTEMS_NAMESPACE, name, value)


class Prompt(Engine):
    def __init__(
        self, fn: UserFunction | None = None, *, config: EngineConfig | None = None, **kwargs: Any
    ) -> None:
        super().__init__(config=config, **kwargs)
        self.extend(
            {
                "def_variable": {"execute": _def_variable, "doc": "Named prompt variable."},
                "def_message": {"execute": _def_message, "doc": "Message prepended to the prompt."},
                "def_system": {"execute": _def_system, "doc": "Named system setting."},
            }
        )
        if fn is not None:
            self.set_fn(fn)

    def set_fn(self, fn: UserFunction) -> None:
        if not callable(fn):
            raise TypeError(f"User function must be callable (type={type(fn).__name__})")

        def restricted(api: CapabilitySet) -> Any:
            return fn(api.restrict(*PROMPT_CAPABILITIES))

        super().set_fn(restricted)
