"""Expectations on members of the wrapped value."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pestle.expectations.each import EachExpectation
from pestle.support import retrieve

if TYPE_CHECKING:
    from pestle.expectation import Expectation


class HigherOrderExpectation:
    """Expectation on something read or computed from the original value.

    ``expect(user).name.to_be("Nuno")`` reads ``name`` from the value and
    asserts on it. After an assertion runs, the next unknown name is read from
    the original value again, so several members can be checked in one chain::

        expect(user).name.to_be("Nuno").age.to_be_greater_than(18)

    Calling the wrapper calls the forwarded member, so methods of the value can
    be used too: ``expect("abc").upper().to_be("ABC")``.
    """

    def __init__(self, original: Expectation, value: Any):
        self._original = original
        self._expectation = original._new(value)
        self._opposite = False
        self._should_reset = False

    @property
    def not_(self) -> HigherOrderExpectation:
        self._opposite = not self._opposite
        return self

    def and_(self, value: Any) -> Expectation:
        return self._original.and_(value)

    def json(self) -> HigherOrderExpectation:
        return HigherOrderExpectation(self._original, self._expectation.json().value)

    def scoped(self, callback: Callable[[Expectation], Any]) -> HigherOrderExpectation:
        """Run ``callback`` on the current expectation, then continue on the original value."""
        callback(self._expectation)
        return HigherOrderExpectation(self._original, self._original.value)

    def __call__(self, *args: Any, **kwargs: Any) -> HigherOrderExpectation:
        if isinstance(self._expectation, EachExpectation):
            self._expectation(*args, **kwargs)
            return self

        member = self._expectation.value
        if not callable(member):
            raise TypeError(f"'{type(member).__name__}' object is not callable")
        return HigherOrderExpectation(self._original, member(*args, **kwargs))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        if not self._original.has_method(name):
            return HigherOrderExpectation(self._original, retrieve(name, self._value()))

        if name == "each":
            self._expectation = self._expectation.each
            return self

        def perform(*args: Any, **kwargs: Any) -> HigherOrderExpectation:
            return self._perform_assertion(name, args, kwargs)

        perform.__name__ = name
        return perform

    def __repr__(self) -> str:
        return f"HigherOrderExpectation({self._expectation.value!r})"

    def _value(self) -> Any:
        return self._original.value if self._should_reset else self._expectation.value

    def _perform_assertion(self, name: str, args: tuple, kwargs: dict) -> HigherOrderExpectation:
        from pestle.expectation import Expectation

        target = self._expectation.not_ if self._opposite else self._expectation
        result = getattr(target, name)(*args, **kwargs)
        if isinstance(result, Expectation):
            self._expectation = result

        self._opposite = False
        self._should_reset = True

        return self
