"""Fluent expectations for Python tests."""

from pestle.exceptions import (
    ExpectationFailedError,
    ExpectationNotFound,
    InvalidValueKind,
    NotIterable,
    UnhandledMatch,
)
from pestle.expectation import Expectation, expect
from pestle.registry import ExtensionRegistry, default_registry, extend, intercept, pipe

__all__ = [
    "Expectation",
    "ExpectationFailedError",
    "ExpectationNotFound",
    "ExtensionRegistry",
    "InvalidValueKind",
    "NotIterable",
    "UnhandledMatch",
    "default_registry",
    "expect",
    "extend",
    "intercept",
    "pipe",
]
