from __future__ import annotations

import time
import unittest
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

import yaml

from pestle.config import PestleConfig, bootstrap
from pestle.registry import ExtensionRegistry
from pestle.reporting.iteration import IterationAwareTest, IterationInfo
from pestle.verbose import detach_logger, setup_logger

_REPEAT_ATTR = "__pestle_repeat__"

F = TypeVar("F", bound=Callable[..., Any])


def repeat(times: int) -> Callable[[F], F]:
    """Mark a test method to run ``times`` times, each run reported separately."""
    if times < 1:
        raise ValueError(f"repeat must be at least 1, got {times}")

    def decorator(func: F) -> F:
        setattr(func, _REPEAT_ATTR, times)
        return func

    return decorator


class TestCase(unittest.TestCase):
    """``unittest.TestCase`` that can carry iteration info for repeated runs."""

    iteration: IterationInfo | None = None

    def count(self) -> int:
        return self.countTestCases()

    def get_name(self) -> str:
        return self.id()


def collect_tests(case_class: type[TestCase], default_repeat: int = 1) -> list[TestCase]:
    """Instantiate every test method of ``case_class``, expanding repeats.

    ``@repeat(n)`` on a method overrides ``default_repeat``. A test that runs
    once carries no iteration info.
    """
    if not (isinstance(case_class, type) and issubclass(case_class, TestCase)):
        raise TypeError(f"{case_class!r} is not a pestle.runner.TestCase subclass")

    tests: list[TestCase] = []
    for method_name in unittest.TestLoader().getTestCaseNames(case_class):
        method = getattr(case_class, method_name)
        times = getattr(method, _REPEAT_ATTR, default_repeat)
        if times == 1:
            tests.append(case_class(method_name))
            continue
        for iteration in range(1, times + 1):
            test = case_class(method_name)
            test.iteration = IterationInfo(iteration, times)
            tests.append(test)
    return tests


@dataclass
class TestOutcome:
    __test__ = False

    name: str
    classname: str
    status: str
    message: str = ""
    details: str = ""
    duration_seconds: float = 0.0

    @property
    def passed(self) -> bool:
        return self.status in ("passed", "skipped")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _last_line(traceback_text: str) -> str:
    lines = [line for line in traceback_text.strip().splitlines() if line.strip()]
    return lines[-1] if lines else ""


def _outcome_from_result(
    name: str, classname: str, result: unittest.TestResult, duration: float
) -> TestOutcome:
    if result.errors:
        details = result.errors[0][1]
        status, message = "error", _last_line(details)
    elif result.failures:
        details = result.failures[0][1]
        status, message = "failed", _last_line(details)
    elif result.unexpectedSuccesses:
        status, message, details = "failed", "unexpected success", ""
    elif result.skipped:
        status, message, details = "skipped", result.skipped[0][1], ""
    else:
        status, message, details = "passed", "", ""

    return TestOutcome(
        name=name,
        classname=classname,
        status=status,
        message=message,
        details=details,
        duration_seconds=round(duration, 6),
    )


class Runner:
    """Runs test classes and writes junit.xml, meta.yaml and debug.log."""

    def __init__(
        self,
        config: PestleConfig,
        output_dir: Path | None = None,
        verbose: bool | None = None,
        registry: ExtensionRegistry | None = None,
    ):
        self.config = config
        self.output_dir = output_dir if output_dir is not None else Path(config.output_dir)
        self.verbose = config.verbose if verbose is None else verbose
        self.registry = registry
        self.interrupted = False
        self.outcomes: list[TestOutcome] = []

    def execute(self, case_classes: Iterable[type[TestCase]]) -> Path:
        """Run every test of ``case_classes``. Returns the run directory."""
        run_id = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
        run_dir = self.output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        logger = setup_logger(run_dir, verbose=self.verbose, logger_name="pestle")
        logger.debug("Starting test run")
        try:
            self._run_all(run_dir, case_classes, logger)
        finally:
            detach_logger(logger)
        return run_dir

    def _run_all(self, run_dir: Path, case_classes: Iterable[type[TestCase]], logger) -> None:
        # Extensions are registered before any test executes
        bootstrap(self.config, self.registry)

        tests: list[TestCase] = []
        for case_class in case_classes:
            tests.extend(collect_tests(case_class, default_repeat=self.config.repeat))

        print(f"Running {len(tests)} test(s)...")

        self.outcomes = []
        try:
            for index, test in enumerate(tests, start=1):
                classname = f"{type(test).__module__}.{type(test).__qualname__}"
                outcome = self._run_test(IterationAwareTest(test), classname, logger)
                self.outcomes.append(outcome)
                print(f"  [{index}/{len(tests)}] {outcome.status.upper()}  {outcome.name}")
        except KeyboardInterrupt:
            self.interrupted = True
            logger.warning(
                f"Run interrupted by user (Ctrl+C) after {len(self.outcomes)} test(s). Saving partial results..."
            )

        self._write_results(run_dir, self.outcomes)

        n_passed = sum(1 for o in self.outcomes if o.passed)
        logger.debug(f"Run complete: {n_passed}/{len(self.outcomes)} test(s) passed")

    def _run_test(self, test: IterationAwareTest, classname: str, logger) -> TestOutcome:
        name = test.get_name()
        logger.debug(f"Running test '{name}'")

        result = unittest.TestResult()
        started = time.perf_counter()
        test.run(result)
        duration = time.perf_counter() - started

        outcome = _outcome_from_result(name, classname, result, duration)
        logger.debug(f"Test '{name}' {outcome.status} in {duration:.3f}s")
        return outcome

    def _write_results(self, run_dir: Path, outcomes: list[TestOutcome]) -> None:
        """Write junit.xml and meta.yaml to the run directory."""
        from pestle.reporting.junit import write_junit

        write_junit(run_dir, outcomes)

        try:
            import importlib.metadata

            pestle_version = importlib.metadata.version("pestle")
        except Exception:
            pestle_version = "unknown"

        meta: dict[str, Any] = {
            "run_id": run_dir.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "tests": len(outcomes),
            "failures": sum(1 for o in outcomes if o.status == "failed"),
            "errors": sum(1 for o in outcomes if o.status == "error"),
            "extensions": list(self.config.extensions),
            "pestle_version": pestle_version,
            "repeat": self.config.repeat,
        }
        if self.interrupted:
            meta["interrupted"] = True

        (run_dir / "meta.yaml").write_text(yaml.dump(meta, default_flow_style=False))
