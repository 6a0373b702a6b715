"""Pass recorders: observation hooks around the stabilization loop."""

from __future__ import annotations

import logging
from typing import Any, Protocol


class PassRecorder(Protocol):
    def on_pass_start(self, logger: logging.Logger, iteration: int, **metrics: Any) -> None:
        ...

    def on_pass_end(self, logger: logging.Logger, iteration: int, **metrics: Any) -> None:
        ...

    def on_stabilized(self, logger: logging.Logger, **metrics: Any) -> None:
        ...

    def on_error(self, logger: logging.Logger, iteration: int, exc: BaseException) -> None:
        ...


REQUIRED_RECORDER_METHODS: tuple[str, ...] = (
    "on_pass_start",
    "on_pass_end",
    "on_stabilized",
    "on_error",
)


def validate_recorder(recorder: Any) -> None:
    for name in REQUIRED_RECORDER_METHODS:
        method = getattr(recorder, name, None)
        if method is None or not callable(method):
            raise TypeError(f"Pass recorder missing required method: {name}")


def _format_metrics(metrics: dict[str, Any]) -> str:
    return ", ".join(f"{key}={value}" for key, value in metrics.items() if value is not None)


class DefaultPassRecorder:
    def on_pass_start(self, logger: logging.Logger, iteration: int, **metrics: Any) -> None:
        logger.debug("Pass: %d (%s)", iteration, _format_metrics(metrics))

    def on_pass_end(self, logger: logging.Logger, iteration: int, **metrics: Any) -> None:
        queued = int(metrics.get("queued", 0) or 0)
        if queued:
            logger.debug("Completed pass %d with %d queued update(s)", iteration, queued)
        else:
            logger.debug("Completed pass %d (no queued updates)", iteration)

    def on_stabilized(self, logger: logging.Logger, **metrics: Any) -> None:
        logger.info("Stabilized (%s)", _format_metrics(metrics))

    def on_error(self, logger: logging.Logger, iteration: int, exc: BaseException) -> None:
        logger.error("Pass %d failed: %s", iteration, exc)


class NullPassRecorder:
    def on_pass_start(self, logger: logging.Logger, iteration: int, **metrics: Any) -> None:
        return

    def on_pass_end(self, logger: logging.Logger, iteration: int, **metrics: Any) -> None:
        return

    def on_stabilized(self, logger: logging.Logger, **metrics: Any) -> None:
        return

    def on_error(self, logger: logging.Logger, iteration: int, exc: BaseException) -> None:
        return
