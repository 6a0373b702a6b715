from __future__ import annotations


class IterationLimitExceeded(RuntimeError):
    """The stabilization loop ran out of passes before reaching a fixpoint."""

    def __init__(self, max_iterations: int, *, passes: int | None = None) -> None:
        self.max_iterations = int(max_iterations)
        self.passes = int(passes if passes is not None else max_iterations)
        super().__init__(
            "Maximum iterations reached. Possible infinite loop detected "
            f"(max_iterations={self.max_iterations}, passes={self.passes})"
        )
