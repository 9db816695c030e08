"""Expectations applied to every element of an iterable value."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pestle.exceptions import ExpectationFailedError, ExpectationNotFound
from pestle.support import pairs

if TYPE_CHECKING:
    from pestle.expectation import Expectation


class EachExpectation:
    """Applies the next assertion to every element of the wrapped value.

    Elements are collected once, so generators can be checked by a callback
    and by chained assertions alike.
    """

    def __init__(self, original: Expectation):
        self._original = original
        self._opposite = False
        self._pairs = pairs(original.value)

    @property
    def value(self) -> Any:
        return self._original.value

    def and_(self, value: Any) -> Expectation:
        return self._original.and_(value)

    @property
    def not_(self) -> EachExpectation:
        self._opposite = True
        return self

    def __call__(self, callback: Callable[[Expectation], Any] | None = None) -> EachExpectation:
        if callback is not None:
            for _, item in self._pairs:
                callback(self._original._new(item))
        return self

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if not self._original.has_method(name):
            raise ExpectationNotFound.from_name(name)

        def apply(*args: Any, **kwargs: Any) -> EachExpectation:
            opposite, self._opposite = self._opposite, False
            for key, item in self._pairs:
                expectation = self._original._new(item)
                target = expectation.not_ if opposite else expectation
                try:
                    getattr(target, name)(*args, **kwargs)
                except AssertionError as e:
                    raise ExpectationFailedError(
                        f"Failed asserting element [{key!r}] ({item!r}): {e}"
                    ) from e
            return self

        apply.__name__ = name
        return apply
