"""Wrappers that change how the next assertion on an expectation applies."""

from pestle.expectations.each import EachExpectation
from pestle.expectations.higher_order import HigherOrderExpectation
from pestle.expectations.opposite import OppositeExpectation

__all__ = ["EachExpectation", "HigherOrderExpectation", "OppositeExpectation"]
