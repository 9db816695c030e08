"""Small helpers shared by the expectation classes."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Mapping
from typing import Any


def is_iterable(value: Any) -> bool:
    """Text and byte strings are treated as scalars, not iterables."""
    return isinstance(value, Iterable) and not isinstance(
        value, (str, bytes, bytearray)
    )


def is_invocable(value: Any) -> bool:
    """Callables other than classes; a class passed as a literal stays a literal."""
    return callable(value) and not isinstance(value, type)


def pairs(value: Iterable[Any]) -> list[tuple[Any, Any]]:
    """Materialise ``value`` as ordered (key, item) pairs."""
    if isinstance(value, Mapping):
        return list(value.items())
    return list(enumerate(value))


def retrieve(name: str, value: Any) -> Any:
    """Read ``name`` from a mapping key, falling back to attribute access."""
    if isinstance(value, Mapping) and name in value:
        return value[name]
    return getattr(value, name)


def call_with_accepted(callback: Callable[..., Any], *args: Any) -> Any:
    """Call ``callback`` with as many leading ``args`` as it accepts positionally."""
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return callback(*args)

    accepted = 0
    for parameter in signature.parameters.values():
        if parameter.kind is parameter.VAR_POSITIONAL:
            return callback(*args)
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            accepted += 1
    return callback(*args[:accepted])
