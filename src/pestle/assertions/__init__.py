"""Assertion operations composed into expectations."""

from pestle.assertions.base import Assert
from pestle.assertions.builtin import ASSERTION_METHODS, Assertions

__all__ = ["ASSERTION_METHODS", "Assert", "Assertions"]
