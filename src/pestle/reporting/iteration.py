"""Names repeated test runs for reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class IterationInfo:
    """Position of one run of a repeated test (1-based)."""

    iteration: int
    total: int

    def __post_init__(self) -> None:
        if not 1 <= self.iteration <= self.total:
            raise ValueError(
                f"iteration must be between 1 and {self.total}, got {self.iteration}"
            )


@runtime_checkable
class Test(Protocol):
    iteration: IterationInfo | None

    def count(self) -> int: ...

    def run(self, result: Any = None) -> Any: ...

    def get_name(self) -> str: ...


class IterationAwareTest:
    """Wraps a runner test so its reported name carries the iteration.

    ``get_name()`` returns ``"<name> ⟲ <iteration> of <total>"`` when the
    wrapped test has iteration info, and the plain name otherwise. Everything
    else is forwarded to the wrapped test unchanged, errors included.
    """

    def __init__(self, underlying_test: Test):
        self._underlying_test = underlying_test

    def count(self) -> int:
        return self._underlying_test.count()

    def run(self, result: Any = None) -> Any:
        return self._underlying_test.run(result)

    def get_name(self) -> str:
        name = self._underlying_test.get_name()
        iteration = getattr(self._underlying_test, "iteration", None)
        if iteration is None:
            return name
        return f"{name} ⟲ {iteration.iteration} of {iteration.total}"

    # unittest suite protocol
    __call__ = run
    countTestCases = count
    id = get_name

    def __str__(self) -> str:
        return self.get_name()

    def __repr__(self) -> str:
        return f"IterationAwareTest({self._underlying_test!r})"

    def __getattr__(self, name: str) -> Any:
        if name == "_underlying_test":
            raise AttributeError(name)
        return getattr(self._underlying_test, name)
