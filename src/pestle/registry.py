"""Process-wide store of extensions and pipes, plus the dispatch resolver."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from enum import Enum
from types import MethodType
from typing import Any

logger = logging.getLogger(__name__)

Extension = Callable[..., Any]
Pipe = Callable[..., Any]


class Resolution(str, Enum):
    BUILT_IN = "built-in"
    EXTENSION = "extension"
    FORWARD = "forward"


class ExtensionRegistry:
    """Named extensions and per-name pipes.

    Populated during bootstrap, before any test runs, and only read
    afterwards. Entries are never removed; registering a name again replaces
    the previous extension.
    """

    def __init__(self) -> None:
        self._extends: dict[str, Extension] = {}
        self._pipes: dict[str, list[Pipe]] = {}
        self.loaded_modules: set[str] = set()

    def extend(self, name: str, extension: Extension) -> None:
        """Register ``extension(expectation, *args, **kwargs)`` under ``name``."""
        if name in self._extends:
            logger.debug(f"Overwriting extension '{name}'")
        self._extends[name] = extension

    def has_extend(self, name: str) -> bool:
        return name in self._extends

    def get_extend(self, name: str) -> Extension | None:
        return self._extends.get(name)

    def pipe(self, name: str, pipe: Pipe) -> None:
        """Append ``pipe(expectation, next, *args, **kwargs)`` to the pipes for ``name``."""
        self._pipes.setdefault(name, []).append(pipe)

    def intercept(
        self,
        name: str,
        filter: type | Callable[..., bool],
        handler: Callable[..., Any],
    ) -> None:
        """Run ``handler`` instead of assertion ``name`` when ``filter`` matches.

        ``filter`` is either a type the expectation value must be an instance
        of, or a predicate called with the value and the assertion arguments.
        """
        if isinstance(filter, type):
            value_type = filter

            def matches(value: Any, *args: Any, **kwargs: Any) -> bool:
                return isinstance(value, value_type)

        else:
            matches = filter

        def interceptor(expectation, next, *args, **kwargs):
            if matches(expectation.value, *args, **kwargs):
                MethodType(handler, expectation)(*args, **kwargs)
                return
            next()

        self.pipe(name, interceptor)

    def pipes(self, name: str) -> list[Pipe]:
        return list(self._pipes.get(name, ()))

    def __contains__(self, name: str) -> bool:
        return self.has_extend(name)

    def __repr__(self) -> str:
        return (
            f"ExtensionRegistry(extends={sorted(self._extends)}, "
            f"pipes={sorted(self._pipes)})"
        )


def resolve(
    name: str, known: Collection[str], registry: ExtensionRegistry
) -> Resolution:
    """Decide how ``name`` is dispatched on an expectation.

    Known methods win over extensions, and extensions over forwarding to
    the wrapped value.
    """
    if name in known:
        return Resolution.BUILT_IN
    if registry.has_extend(name):
        return Resolution.EXTENSION
    return Resolution.FORWARD


default_registry = ExtensionRegistry()


def extend(name: str, extension: Extension) -> None:
    default_registry.extend(name, extension)


def pipe(name: str, pipe: Pipe) -> None:
    default_registry.pipe(name, pipe)


def intercept(
    name: str, filter: type | Callable[..., bool], handler: Callable[..., Any]
) -> None:
    default_registry.intercept(name, filter, handler)
