"""Fixpoint-seeking execution loop over a hook store.

The engine calls the user function repeatedly. Setters invoked during a pass
are queued and applied after the pass; the loop stops at the first pass that
queues nothing. Effects run after that, followed by output delivery.

Setters invoked outside a pass mutate their slot immediately and start the
loop again from pass 0. When that happens during the effect phase or the
output callback of a loop that is still on the stack, the outer loop restarts
instead of recursing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Sequence, TypeAlias

from hookkit.config import EngineConfig
from hookkit.errors import IterationLimitExceeded
from hookkit.extension_registry import Extension, ExtensionRegistry

from .capabilities import CapabilitySet
from .hooks import (
    EffectCallback,
    EffectHook,
    HookStore,
    InputHook,
    OutputHook,
    OutputMode,
    ReducerHook,
    RefHook,
    StateHook,
    is_same,
)
from .output import OutputCallback, OutputDocument, OutputHandle, aggregate_outputs
from .recorder import DefaultPassRecorder, NullPassRecorder, PassRecorder, validate_recorder
from .snapshots import Snapshot, SnapshotLog

UserFunction: TypeAlias = Callable[[CapabilitySet], Any]

_NO_INPUT = object()


class Engine:
    def __init__(
        self,
        fn: UserFunction | None = None,
        *,
        config: EngineConfig | None = None,
        logger: logging.Logger | None = None,
        recorder: PassRecorder | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.logger = logger or logging.getLogger(self.config.logger_name)
        if recorder is None:
            recorder = DefaultPassRecorder() if self.config.log_passes else NullPassRecorder()
        validate_recorder(recorder)
        self._recorder = recorder

        self._store = HookStore()
        self._pending: list[Callable[[], None]] = []
        self._executing = False
        self._loop_active = False
        self._restart_requested = False
        self._iteration = 0

        self._snapshots = SnapshotLog(max_entries=self.config.max_snapshots)
        self._extensions = ExtensionRegistry()
        self._fn: UserFunction | None = None
        self._input: Any = _NO_INPUT
        self._output_callback: OutputCallback | None = None
        self._last_output: OutputDocument | None = None

        if fn is not None:
            self.set_fn(fn)

    # Public surface

    def set_fn(self, fn: UserFunction) -> None:
        if not callable(fn):
            raise TypeError(f"User function must be callable (type={type(fn).__name__})")
        self._fn = fn
        self._request_run()

    def update(self) -> None:
        self._request_run()

    def set_input(self, data: Any) -> None:
        self._input = data
        discarded = self._store.vacate("output")
        self.logger.debug("Input updated (discarded_outputs=%d)", discarded)
        self._request_run()

    def on_output(self, callback: OutputCallback | None) -> None:
        if callback is not None and not callable(callback):
            raise TypeError(f"Output callback must be callable (type={type(callback).__name__})")
        self._output_callback = callback

    def extend(
        self, extensions: Mapping[str, Extension | Mapping[str, Any]]
    ) -> tuple[Extension, ...]:
        return self._extensions.extend(extensions)

    def register_extension(
        self,
        name: str,
        execute: Callable[..., Any],
        *,
        init: Callable[["Engine"], Any] | None = None,
        doc: str | None = None,
    ) -> Extension:
        return self._extensions.register(Extension(name=name, execute=execute, init=init, doc=doc))

    @property
    def extensions(self) -> ExtensionRegistry:
        return self._extensions

    def cleanup(self) -> None:
        for effect in self._store.of_type(EffectHook):
            if effect.cleanup is not None:
                cleanup, effect.cleanup = effect.cleanup, None
                cleanup()

    def snapshots(self) -> tuple[Snapshot, ...]:
        return self._snapshots.all()

    def last_snapshot(self) -> Snapshot | None:
        return self._snapshots.latest()

    def clear_snapshots(self) -> None:
        self._snapshots.clear()

    @property
    def last_output(self) -> OutputDocument | None:
        return self._last_output

    @property
    def is_executing(self) -> bool:
        return self._executing

    def capabilities(self) -> CapabilitySet:
        base = CapabilitySet(
            {
                "def_state": self.def_state,
                "def_reducer": self.def_reducer,
                "def_ref": self.def_ref,
                "def_effect": self.def_effect,
                "def_input": self.def_input,
                "def_output_object": self.def_output_object,
                "def_output_array": self.def_output_array,
            }
        )
        return self._extensions.bind(self, base)

    # Capability accessors

    def def_state(self, initial: Any) -> tuple[Any, Callable[[Any], None]]:
        hook, _created = self._store.claim(StateHook, lambda: StateHook(value=initial))

        def set_value(action: Any) -> None:
            new_value = action(hook.value) if callable(action) else action
            self._write(hook, new_value)

        return hook.value, set_value

    def def_reducer(
        self, reducer: Callable[[Any, Any], Any], initial: Any
    ) -> tuple[Any, Callable[[Any], None]]:
        hook, _created = self._store.claim(
            ReducerHook, lambda: ReducerHook(value=initial, reducer=reducer)
        )

        def dispatch(action: Any) -> None:
            self._write(hook, hook.reducer(hook.value, action))

        return hook.value, dispatch

    def def_ref(self, initial: Any) -> RefHook:
        hook, _created = self._store.claim(RefHook, lambda: RefHook(current=initial))
        return hook

    def def_effect(self, callback: EffectCallback, deps: Sequence[Any] | None = None) -> None:
        if not callable(callback):
            raise TypeError(f"Effect callback must be callable (type={type(callback).__name__})")
        frozen = tuple(deps) if deps is not None else None
        hook, created = self._store.claim(
            EffectHook, lambda: EffectHook(callback=callback, deps=frozen)
        )
        if not created:
            hook.refresh(callback, frozen)

    def def_input(self, default: Any = None) -> Any:
        current = default if self._input is _NO_INPUT else self._input
        hook, _created = self._store.claim(InputHook, lambda: InputHook(value=current))
        hook.value = current
        return hook.value

    def def_output_object(self, namespace: str, key: str, value: Any) -> OutputHandle:
        return self._def_output(namespace, key, value, mode="overwrite")

    def def_output_array(self, namespace: str, key: str, value: Any) -> OutputHandle:
        return self._def_output(namespace, key, value, mode="append")

    def _def_output(self, namespace: str, key: str, value: Any, *, mode: OutputMode) -> OutputHandle:
        if not isinstance(namespace, str) or not namespace.strip():
            raise TypeError("Output namespace must be a non-empty string")
        if not isinstance(key, str) or not key.strip():
            raise TypeError("Output key must be a non-empty string")
        hook, _created = self._store.claim(
            OutputHook,
            lambda: OutputHook(namespace=namespace, key=key, value=value, mode=mode),
        )
        hook.namespace = namespace
        hook.key = key
        hook.value = value
        hook.mode = mode
        return OutputHandle(hook)

    # Loop

    def _write(self, hook: StateHook | ReducerHook, new_value: Any) -> None:
        if is_same(new_value, hook.value):
            return
        if self._executing:
            def apply() -> None:
                hook.value = new_value

            self._pending.append(apply)
            return
        hook.value = new_value
        self._request_run()

    def _request_run(self) -> None:
        if self._loop_active:
            self._restart_requested = True
            return
        self._run()

    def _run(self) -> None:
        if self._fn is None:
            return

        self._loop_active = True
        passes = 0
        try:
            while True:
                self._restart_requested = False
                passes = self._stabilize(passes)
                self._recorder.on_stabilized(
                    self.logger, passes=passes, hooks=len(self._store)
                )

                self._run_effects()
                if self._restart_requested:
                    continue

                self._emit_output()
                if self._restart_requested:
                    continue
                return
        except Exception as exc:
            self._recorder.on_error(self.logger, self._iteration, exc)
            raise
        finally:
            self._executing = False
            self._loop_active = False
            self._restart_requested = False
            self._pending = []

    def _stabilize(self, passes: int) -> int:
        assert self._fn is not None
        iteration = 0
        while True:
            self._iteration = iteration
            self._store.reset_position()
            self._pending = []
            self._recorder.on_pass_start(self.logger, iteration, hooks=len(self._store))

            capabilities = self.capabilities()
            self._executing = True
            try:
                self._fn(capabilities)
            finally:
                self._executing = False

            passes += 1
            if self.config.record_snapshots:
                self._snapshots.capture(iteration, self._store.items())

            queued = self._pending
            self._pending = []
            self._recorder.on_pass_end(self.logger, iteration, queued=len(queued))
            if not queued:
                return passes

            for apply in queued:
                apply()

            if passes >= self.config.max_iterations:
                raise IterationLimitExceeded(self.config.max_iterations, passes=passes)
            iteration += 1

    def _run_effects(self) -> None:
        ran = 0
        for effect in self._store.of_type(EffectHook):
            if effect.has_run:
                continue
            if effect.cleanup is not None:
                cleanup, effect.cleanup = effect.cleanup, None
                cleanup()

            result = effect.callback()
            if callable(result):
                effect.cleanup = result
            effect.has_run = True
            ran += 1

            if self._restart_requested:
                break
        if ran:
            self.logger.debug("Ran %d effect(s)", ran)

    def _emit_output(self) -> None:
        document = aggregate_outputs(self._store.of_type(OutputHook))
        self._last_output = document
        if self._output_callback is not None:
            self._output_callback(document)
