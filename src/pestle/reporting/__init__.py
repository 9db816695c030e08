"""Test identity and report output."""

from pestle.reporting.iteration import IterationAwareTest, IterationInfo
from pestle.reporting.junit import write_junit

__all__ = ["IterationAwareTest", "IterationInfo", "write_junit"]
