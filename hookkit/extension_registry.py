from __future__ import annotations

import difflib
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from hookkit.engine.capabilities import BASE_CAPABILITIES, CapabilitySet


@dataclass(frozen=True)
class Extension:
    """Composite capability built on top of the base capability set.

    ``execute(capabilities, *args, **kwargs)`` runs on every call with the full
    capability set of the current pass. ``init(engine)`` runs once, on the
    first call of the extension.
    """

    name: str
    execute: Callable[..., Any]
    init: Callable[[Any], Any] | None = None
    doc: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise TypeError("Extension.name must be a non-empty string")
        object.__setattr__(self, "name", self.name.strip())

        if not callable(self.execute):
            raise TypeError(
                f"Extension {self.name} execute must be callable (type={type(self.execute).__name__})"
            )
        if self.init is not None and not callable(self.init):
            raise TypeError(
                f"Extension {self.name} init must be callable or None (type={type(self.init).__name__})"
            )
        if self.doc is not None and (not isinstance(self.doc, str) or not self.doc.strip()):
            raise TypeError("Extension.doc must be a non-empty string or None")


def _coerce(name: str, spec: Extension | Mapping[str, Any]) -> Extension:
    if isinstance(spec, Extension):
        if spec.name != name.strip():
            raise ValueError(f"Extension registered as {name!r} is named {spec.name!r}")
        return spec
    if isinstance(spec, Mapping):
        unknown = sorted(set(spec) - {"execute", "init", "doc"})
        if unknown:
            raise ValueError(f"Unknown extension fields for {name}: {', '.join(unknown)}")
        if "execute" not in spec:
            raise ValueError(f"Extension {name} is missing required field: execute")
        return Extension(name=name, execute=spec["execute"], init=spec.get("init"), doc=spec.get("doc"))
    raise TypeError(
        f"Extension {name} must be an Extension or a mapping (type={type(spec).__name__})"
    )


@dataclass
class ExtensionRegistry:
    """Named extensions plus the record of which ones already ran ``init``."""

    _by_name: dict[str, Extension] = field(default_factory=dict)
    _initialized: set[str] = field(default_factory=set, repr=False)

    def register(self, extension: Extension) -> Extension:
        if extension.name in BASE_CAPABILITIES:
            raise ValueError(f"Extension name collides with a base capability: {extension.name}")
        if extension.name in self._by_name:
            raise ValueError(f"Duplicate extension name: {extension.name}")
        self._by_name[extension.name] = extension
        return extension

    def extend(self, extensions: Mapping[str, Extension | Mapping[str, Any]]) -> tuple[Extension, ...]:
        coerced = [_coerce(name, spec) for name, spec in extensions.items()]
        for extension in coerced:
            if extension.name in self._by_name:
                raise ValueError(f"Duplicate extension name: {extension.name}")
        return tuple(self.register(extension) for extension in coerced)

    def available(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_name))

    def get(self, name: str) -> Extension:
        extension = self._by_name.get((name or "").strip())
        if extension is None:
            available = ", ".join(self.available()) or "<none>"
            raise ValueError(f"Unknown extension: {name} (available: {available})")
        return extension

    def suggest(self, name: str, *, limit: int = 3) -> tuple[str, ...]:
        key = (name or "").strip()
        if not key:
            return ()
        return tuple(difflib.get_close_matches(key, list(self.available()), n=limit))

    def is_initialized(self, name: str) -> bool:
        return name in self._initialized

    def bind(
        self,
        engine: Any,
        base: CapabilitySet,
    ) -> CapabilitySet:
        """Merge the base capabilities with one dispatcher per registered extension.

        Dispatchers look the full set up lazily, so extensions can call each
        other as well as the base accessors.
        """

        capabilities: CapabilitySet | None = None

        def dispatcher(extension: Extension) -> Callable[..., Any]:
            def call(*args: Any, **kwargs: Any) -> Any:
                if extension.name not in self._initialized:
                    self._initialized.add(extension.name)
                    if extension.init is not None:
                        extension.init(engine)
                assert capabilities is not None
                return extension.execute(capabilities, *args, **kwargs)

            call.__name__ = extension.name
            call.__doc__ = extension.doc
            return call

        capabilities = base.merged(
            {name: dispatcher(extension) for name, extension in self._by_name.items()}
        )
        return capabilities

    def describe(self) -> tuple[dict[str, Any], ...]:
        return tuple(
            {
                "name": extension.name,
                "doc": extension.doc,
                "has_init": extension.init is not None,
                "initialized": extension.name in self._initialized,
            }
            for extension in sorted(self._by_name.values(), key=lambda e: e.name)
        )

    @classmethod
    def from_extensions(cls, extensions: Iterable[Extension]) -> "ExtensionRegistry":
        registry = cls()
        for extension in extensions:
            registry.register(extension)
        return registry
