from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from junitparser import Error, Failure, JUnitXml, Skipped, TestCase, TestSuite

if TYPE_CHECKING:
    from pestle.runner import TestOutcome


def write_junit(run_dir: Path, outcomes: Iterable[TestOutcome]) -> Path:
    """Write junit.xml with one suite per test class, return path."""
    xml = JUnitXml()

    suites: dict[str, list[TestOutcome]] = {}
    for outcome in outcomes:
        suites.setdefault(outcome.classname, []).append(outcome)

    for classname, class_outcomes in suites.items():
        suite = TestSuite(classname)

        for outcome in class_outcomes:
            case = TestCase(outcome.name)
            case.classname = classname
            case.time = outcome.duration_seconds
            if outcome.status == "failed":
                result = Failure(outcome.message)
            elif outcome.status == "error":
                result = Error(outcome.message)
            elif outcome.status == "skipped":
                result = Skipped(outcome.message)
            else:
                result = None
            if result is not None:
                if outcome.details:
                    result.text = outcome.details
                case.result = [result]
            suite.add_testcase(case)

        # Set time after add_testcase (add_testcase resets it via update_statistics)
        suite.time = round(sum(o.duration_seconds for o in class_outcomes), 6)

        # Use append (not +=) to preserve properties and time
        xml.append(suite)

    junit_path = run_dir / "junit.xml"
    xml.write(str(junit_path), pretty=True)
    return junit_path
