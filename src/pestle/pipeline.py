"""Runs an assertion closure through its chain of pipes."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import reduce
from typing import Any


class ExpectationPipeline:
    """Call ``closure`` with the sent arguments, wrapped by each pipe in order.

    Each pipe is called as ``pipe(next, *args, **kwargs)`` where ``next()``
    runs the rest of the chain. A pipe that never calls ``next`` stops the
    assertion from running.
    """

    def __init__(self, closure: Callable[..., Any]):
        self.closure = closure
        self.args: tuple[Any, ...] = ()
        self.kwargs: dict[str, Any] = {}
        self._pipes: list[Callable[..., Any]] = []

    def send(self, *args: Any, **kwargs: Any) -> ExpectationPipeline:
        self.args = args
        self.kwargs = kwargs
        return self

    def through(self, pipes: Iterable[Callable[..., Any]]) -> ExpectationPipeline:
        self._pipes = list(pipes)
        return self

    def run(self) -> None:
        def destination() -> None:
            self.closure(*self.args, **self.kwargs)

        pipeline = reduce(self._carry, reversed(self._pipes), destination)
        pipeline()

    def _carry(
        self, stack: Callable[[], Any], pipe: Callable[..., Any]
    ) -> Callable[[], Any]:
        def stage() -> Any:
            return pipe(stack, *self.args, **self.kwargs)

        return stage
