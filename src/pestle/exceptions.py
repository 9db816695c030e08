"""Exception types raised by expectations."""

from __future__ import annotations


class PestleError(Exception):
    """Base class for misuse of the expectation API (not assertion failures)."""


class ExpectationFailedError(AssertionError):
    """An expectation did not hold.

    Subclasses ``AssertionError`` so pytest and unittest report it as a test
    failure rather than an error.
    """


class UnhandledMatch(ExpectationFailedError):
    """``match()`` found no expression for the subject."""

    def __init__(self, subject: object):
        super().__init__(f"Unhandled match value: {subject!r}")
        self.subject = subject


class InvalidValueKind(PestleError, TypeError):
    """The expectation value is not of the kind an operation requires."""

    def __init__(self, expected: str, value: object):
        super().__init__(
            f"Invalid expectation value type. Expected [{expected}], got [{type(value).__name__}]."
        )
        self.expected = expected
        self.value = value


class NotIterable(PestleError, TypeError):
    """``each`` or ``sequence`` was used on a value that cannot be iterated."""

    def __init__(self, value: object):
        super().__init__(
            f"Expectation value is not iterable: [{type(value).__name__}]."
        )
        self.value = value


class ExpectationNotFound(PestleError, LookupError):
    """No assertion or extension is registered under the given name."""

    @classmethod
    def from_name(cls, name: str) -> ExpectationNotFound:
        return cls(f"Expectation [{name}] does not exist.")
