"""The fluent expectation wrapper."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable, Mapping
from types import MethodType
from typing import Any

from pestle.assertions import ASSERTION_METHODS, Assert, Assertions
from pestle.exceptions import (
    ExpectationNotFound,
    InvalidValueKind,
    NotIterable,
    UnhandledMatch,
)
from pestle.expectations import (
    EachExpectation,
    HigherOrderExpectation,
    OppositeExpectation,
)
from pestle.pipeline import ExpectationPipeline
from pestle.registry import ExtensionRegistry, Resolution, default_registry, resolve
from pestle.support import call_with_accepted, is_invocable, is_iterable, pairs, retrieve

logger = logging.getLogger(__name__)


class Expectation:
    """Wraps a value so assertions can be chained on it.

    Names that are not defined on the class are resolved dynamically: an
    assertion from :class:`~pestle.assertions.Assertions`, then an extension
    from the registry, and otherwise the attribute or key of the wrapped value
    (a :class:`~pestle.expectations.HigherOrderExpectation`). Assertions and
    extensions run through the pipes registered for their name and return the
    expectation itself::

        expect(response).status.to_be(200).body.json().to_have_key("id")

    Assertions must be called. ``expect(False).to_be_true`` without the
    parentheses only returns the bound dispatcher and checks nothing.
    """

    def __init__(self, value: Any, registry: ExtensionRegistry | None = None):
        self.value = value
        self._registry = registry if registry is not None else default_registry

    def and_(self, value: Any) -> Expectation:
        """Start a new expectation, reusing ``value`` if it already is one."""
        return value if isinstance(value, Expectation) else self._new(value)

    def json(self) -> Expectation:
        """Assert the value is a JSON string and expect its decoded form."""
        if not isinstance(self.value, str):
            raise InvalidValueKind("str", self.value)
        return self.to_be_json().and_(json.loads(self.value))

    def dump(self, *args: Any) -> Expectation:
        print(repr(self.value), *(repr(arg) for arg in args))
        return self

    def dd(self, *args: Any) -> None:
        """Dump the value and stop the process."""
        self.dump(*args)
        sys.exit(1)

    @property
    def not_(self) -> OppositeExpectation:
        return OppositeExpectation(self)

    @property
    def each(self) -> EachExpectation:
        """Expect every element; call the result with a callback to visit each one."""
        if not is_iterable(self.value):
            raise NotIterable(self.value)
        return EachExpectation(self)

    def sequence(self, *callbacks: Any) -> Expectation:
        """Assert elements in order, one callback (or literal) per element.

        Callbacks are reused round-robin when there are fewer of them than
        elements; more callbacks than elements is a failure.
        """
        if not is_iterable(self.value):
            raise NotIterable(self.value)

        items = pairs(self.value)
        if len(callbacks) > len(items):
            Assert.assertLessEqual(
                len(callbacks),
                len(items),
                f"Failed asserting that {len(callbacks)} sequence callbacks "
                f"fit {len(items)} values.",
            )
        if items and not callbacks:
            raise ValueError("sequence() needs at least one callback")

        for index, (key, item) in enumerate(items):
            callback = callbacks[index % len(callbacks)]
            if is_invocable(callback):
                call_with_accepted(callback, self._new(item), self._new(key))
                continue
            self._new(item).to_equal(callback)

        return self

    def match(self, subject: Any, expressions: Mapping[Any, Any]) -> Expectation:
        """Run the expression whose key equals ``subject``; the first match wins."""
        if is_invocable(subject):
            subject = subject()

        for key, handler in expressions.items():
            if subject != key:
                continue
            if is_invocable(handler):
                handler(self._new(self.value))
            else:
                self.and_(self.value).to_equal(handler)
            return self

        raise UnhandledMatch(subject)

    def when(
        self,
        condition: bool | Callable[[], bool],
        callback: Callable[[Expectation], Any],
    ) -> Expectation:
        if condition() if callable(condition) else condition:
            callback(self.and_(self.value))
        return self

    def unless(
        self,
        condition: bool | Callable[[], bool],
        callback: Callable[[Expectation], Any],
    ) -> Expectation:
        predicate = condition if callable(condition) else (lambda: condition)
        return self.when(lambda: not predicate(), callback)

    def has_method(self, name: str) -> bool:
        return resolve(name, KNOWN_METHODS, self._registry) is not Resolution.FORWARD

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        if resolve(name, KNOWN_METHODS, self._registry) is Resolution.FORWARD:
            return HigherOrderExpectation(self, retrieve(name, self.value))

        def dispatch(*args: Any, **kwargs: Any) -> Expectation:
            return self._call(name, *args, **kwargs)

        dispatch.__name__ = name
        return dispatch

    def __repr__(self) -> str:
        return f"Expectation({self.value!r})"

    def _call(self, name: str, *args: Any, **kwargs: Any) -> Expectation:
        closure = self._expectation_closure(name)
        pipes = [MethodType(pipe, self) for pipe in self._registry.pipes(name)]
        logger.debug(f"Running '{name}' through {len(pipes)} pipe(s)")

        ExpectationPipeline(closure).send(*args, **kwargs).through(pipes).run()

        return self

    def _expectation_closure(self, name: str) -> Callable[..., Any]:
        if name in ASSERTION_METHODS:
            return getattr(Assertions(self.value), name)

        extension = self._registry.get_extend(name)
        if extension is not None:
            return MethodType(extension, self)

        raise ExpectationNotFound.from_name(name)

    def _new(self, value: Any) -> Expectation:
        return Expectation(value, self._registry)


CORE_METHODS = frozenset(name for name in vars(Expectation) if not name.startswith("_"))
KNOWN_METHODS = CORE_METHODS | ASSERTION_METHODS


def expect(value: Any, registry: ExtensionRegistry | None = None) -> Expectation:
    """Create an expectation for ``value``."""
    return Expectation(value, registry)
