"""Negated expectations."""

from __future__ import annotations

import reprlib
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, NoReturn

from pestle.exceptions import ExpectationFailedError, ExpectationNotFound

if TYPE_CHECKING:
    from pestle.expectation import Expectation


class OppositeExpectation:
    """Runs the next assertion on the original expectation and inverts the outcome.

    Any name the original can dispatch (built-in assertion or extension) is
    supported: a failure becomes a pass that returns the original, and a pass
    becomes an :class:`~pestle.exceptions.ExpectationFailedError`.
    """

    def __init__(self, original: Expectation):
        self._original = original

    def to_have_keys(self, keys: Iterable[Any]) -> Expectation:
        """Assert that none of ``keys`` is present."""
        for key in keys:
            self.to_have_key(key)
        return self._original

    def to_have_attributes(self, names: Iterable[str]) -> Expectation:
        """Assert that none of the attributes in ``names`` is present."""
        for name in names:
            self.to_have_attribute(name)
        return self._original

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if not self._original.has_method(name):
            raise ExpectationNotFound.from_name(name)

        def negated(*args: Any, **kwargs: Any) -> Expectation:
            try:
                getattr(self._original, name)(*args, **kwargs)
            except AssertionError:
                return self._original
            self._throw(name, args, kwargs)

        negated.__name__ = name
        return negated

    def _throw(self, name: str, args: tuple, kwargs: dict) -> NoReturn:
        rendered = [reprlib.repr(arg) for arg in args]
        rendered += [f"{key}={reprlib.repr(value)}" for key, value in kwargs.items()]
        message = f"Expecting {reprlib.repr(self._original.value)} not {name.replace('_', ' ')}"
        if rendered:
            message += " " + ", ".join(rendered)
        raise ExpectationFailedError(f"{message}.")
