"""Assertion library backing the expectation methods.

Comparison logic (diffs, container checks, approximate equality) comes from
``unittest.TestCase``; a single case instance is used as a plain assertion
helper and raises :class:`~pestle.exceptions.ExpectationFailedError`.
"""

from __future__ import annotations

import unittest
from typing import NoReturn

from pestle.exceptions import ExpectationFailedError


class _AssertionLibrary(unittest.TestCase):
    failureException = ExpectationFailedError
    longMessage = False
    maxDiff = None

    def runTest(self) -> None:
        pass


Assert = _AssertionLibrary()


def fail(message: str) -> NoReturn:
    Assert.fail(message)


def fail_unless(condition: object, message: str) -> None:
    if not condition:
        fail(message)
