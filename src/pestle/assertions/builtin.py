"""Built-in assertion operations available on every expectation."""

from __future__ import annotations

import json
import math
import os
import re
from collections.abc import Iterable, Mapping, Sized
from numbers import Number
from pathlib import Path
from typing import Any

from pestle.assertions.base import Assert, fail, fail_unless
from pestle.exceptions import InvalidValueKind

_MISSING = object()

_SCALARS = (bool, int, float, complex, str, bytes)


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Number):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def _lookup_key(value: Mapping, key: Any) -> Any:
    """Return ``value[key]``, following dotted string keys into nested mappings."""
    if key in value:
        return value[key]
    if not isinstance(key, str) or "." not in key:
        return _MISSING
    node: Any = value
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


class Assertions:
    """Assertion operations over a single value.

    Each method raises :class:`~pestle.exceptions.ExpectationFailedError` when
    the assertion does not hold and returns ``None`` otherwise; chaining is the
    expectation's job.
    """

    def __init__(self, value: Any):
        self.value = value

    def to_be(self, expected: Any, message: str = "") -> None:
        """Identity for objects; same type and equal value for scalars."""
        if isinstance(expected, _SCALARS):
            same = type(self.value) is type(expected) and self.value == expected
        else:
            same = self.value is expected
        fail_unless(
            same,
            message or f"Failed asserting that {self.value!r} is identical to {expected!r}.",
        )

    def to_equal(self, expected: Any, message: str = "") -> None:
        Assert.assertEqual(self.value, expected, message or None)

    def to_equal_canonicalizing(self, expected: Any, message: str = "") -> None:
        """Equal ignoring order of elements."""
        if isinstance(self.value, Mapping) and isinstance(expected, Mapping):
            Assert.assertEqual(dict(self.value), dict(expected), message or None)
            return
        Assert.assertCountEqual(self.value, expected, message or None)

    def to_equal_with_delta(self, expected: float, delta: float, message: str = "") -> None:
        Assert.assertAlmostEqual(self.value, expected, delta=delta, msg=message or None)

    def to_be_empty(self) -> None:
        empty = len(self.value) == 0 if isinstance(self.value, Sized) else not self.value
        fail_unless(empty, f"Failed asserting that {self.value!r} is empty.")

    def to_be_true(self) -> None:
        fail_unless(self.value is True, f"Failed asserting that {self.value!r} is true.")

    def to_be_truthy(self) -> None:
        fail_unless(self.value, f"Failed asserting that {self.value!r} is truthy.")

    def to_be_false(self) -> None:
        fail_unless(self.value is False, f"Failed asserting that {self.value!r} is false.")

    def to_be_falsy(self) -> None:
        fail_unless(not self.value, f"Failed asserting that {self.value!r} is falsy.")

    def to_be_greater_than(self, expected: Any) -> None:
        Assert.assertGreater(self.value, expected)

    def to_be_greater_than_or_equal(self, expected: Any) -> None:
        Assert.assertGreaterEqual(self.value, expected)

    def to_be_less_than(self, expected: Any) -> None:
        Assert.assertLess(self.value, expected)

    def to_be_less_than_or_equal(self, expected: Any) -> None:
        Assert.assertLessEqual(self.value, expected)

    def to_contain(self, *needles: Any) -> None:
        for needle in needles:
            Assert.assertIn(needle, self.value)

    def to_start_with(self, prefix: str) -> None:
        if not isinstance(self.value, str):
            raise InvalidValueKind("str", self.value)
        fail_unless(
            self.value.startswith(prefix),
            f"Failed asserting that {self.value!r} starts with {prefix!r}.",
        )

    def to_end_with(self, suffix: str) -> None:
        if not isinstance(self.value, str):
            raise InvalidValueKind("str", self.value)
        fail_unless(
            self.value.endswith(suffix),
            f"Failed asserting that {self.value!r} ends with {suffix!r}.",
        )

    def to_have_length(self, length: int) -> None:
        if not isinstance(self.value, Sized):
            raise InvalidValueKind("sized", self.value)
        Assert.assertEqual(
            len(self.value),
            length,
            f"Failed asserting that {self.value!r} has length {length}.",
        )

    def to_have_count(self, count: int) -> None:
        if not isinstance(self.value, Sized) or isinstance(self.value, (str, bytes)):
            raise InvalidValueKind("collection", self.value)
        Assert.assertEqual(
            len(self.value),
            count,
            f"Failed asserting that {type(self.value).__name__} has {count} elements.",
        )

    def to_have_attribute(self, name: str, value: Any = _MISSING) -> None:
        fail_unless(
            hasattr(self.value, name),
            f"Failed asserting that {self.value!r} has attribute {name!r}.",
        )
        if value is not _MISSING:
            Assert.assertEqual(getattr(self.value, name), value)

    def to_have_attributes(self, names: Iterable[str] | Mapping[str, Any]) -> None:
        if isinstance(names, Mapping):
            for name, value in names.items():
                self.to_have_attribute(name, value)
            return
        for name in names:
            self.to_have_attribute(name)

    def to_be_in(self, values: Iterable[Any]) -> None:
        Assert.assertIn(self.value, values)

    def to_be_infinite(self) -> None:
        fail_unless(
            isinstance(self.value, float) and math.isinf(self.value),
            f"Failed asserting that {self.value!r} is infinite.",
        )

    def to_be_nan(self) -> None:
        fail_unless(
            isinstance(self.value, float) and math.isnan(self.value),
            f"Failed asserting that {self.value!r} is nan.",
        )

    def to_be_instance_of(self, cls: type | tuple[type, ...]) -> None:
        Assert.assertIsInstance(self.value, cls)

    def to_be_list(self) -> None:
        Assert.assertIsInstance(self.value, list)

    def to_be_dict(self) -> None:
        Assert.assertIsInstance(self.value, dict)

    def to_be_bool(self) -> None:
        Assert.assertIsInstance(self.value, bool)

    def to_be_int(self) -> None:
        fail_unless(
            isinstance(self.value, int) and not isinstance(self.value, bool),
            f"Failed asserting that {self.value!r} is of type int.",
        )

    def to_be_float(self) -> None:
        Assert.assertIsInstance(self.value, float)

    def to_be_string(self) -> None:
        Assert.assertIsInstance(self.value, str)

    def to_be_callable(self) -> None:
        fail_unless(callable(self.value), f"Failed asserting that {self.value!r} is callable.")

    def to_be_iterable(self) -> None:
        Assert.assertIsInstance(self.value, Iterable)

    def to_be_numeric(self) -> None:
        fail_unless(_is_numeric(self.value), f"Failed asserting that {self.value!r} is numeric.")

    def to_be_none(self) -> None:
        Assert.assertIsNone(self.value)

    def to_be_json(self) -> None:
        Assert.assertIsInstance(self.value, str)
        try:
            json.loads(self.value)
        except ValueError as e:
            fail(f"Failed asserting that {self.value!r} is valid JSON: {e}.")

    def to_have_key(self, key: Any, value: Any = _MISSING) -> None:
        if not isinstance(self.value, Mapping):
            raise InvalidValueKind("mapping", self.value)
        found = _lookup_key(self.value, key)
        fail_unless(
            found is not _MISSING,
            f"Failed asserting that {self.value!r} has the key {key!r}.",
        )
        if value is not _MISSING:
            Assert.assertEqual(found, value)

    def to_have_keys(self, keys: Iterable[Any]) -> None:
        for key in keys:
            self.to_have_key(key)

    def to_match(self, pattern: str | re.Pattern) -> None:
        if not isinstance(self.value, str):
            raise InvalidValueKind("str", self.value)
        Assert.assertRegex(self.value, pattern)

    def to_match_dict(self, expected: Mapping[Any, Any]) -> None:
        """Every key of ``expected`` is present with an equal value."""
        if not isinstance(self.value, Mapping):
            raise InvalidValueKind("mapping", self.value)
        for key, value in expected.items():
            self.to_have_key(key)
            Assert.assertEqual(
                self.value[key],
                value,
                f"Failed asserting that key {key!r} is {value!r}, got {self.value[key]!r}.",
            )

    def to_match_object(self, expected: Mapping[str, Any]) -> None:
        """Every attribute named in ``expected`` is present with an equal value."""
        for name, value in expected.items():
            self.to_have_attribute(name)
            Assert.assertEqual(
                getattr(self.value, name),
                value,
                f"Failed asserting that attribute {name!r} is {value!r}, got {getattr(self.value, name)!r}.",
            )

    def to_be_directory(self) -> None:
        fail_unless(Path(self.value).is_dir(), f"Failed asserting that {self.value} is a directory.")

    def to_be_readable_directory(self) -> None:
        self.to_be_directory()
        fail_unless(os.access(self.value, os.R_OK), f"Failed asserting that {self.value} is readable.")

    def to_be_writable_directory(self) -> None:
        self.to_be_directory()
        fail_unless(os.access(self.value, os.W_OK), f"Failed asserting that {self.value} is writable.")

    def to_be_file(self) -> None:
        fail_unless(Path(self.value).is_file(), f"Failed asserting that {self.value} is a file.")

    def to_be_readable_file(self) -> None:
        self.to_be_file()
        fail_unless(os.access(self.value, os.R_OK), f"Failed asserting that {self.value} is readable.")

    def to_be_writable_file(self) -> None:
        self.to_be_file()
        fail_unless(os.access(self.value, os.W_OK), f"Failed asserting that {self.value} is writable.")

    def to_throw(
        self,
        exception: type[BaseException] | str = Exception,
        message: str | None = None,
    ) -> None:
        """Call the value and expect it to raise.

        A string as the first argument is taken as the expected message.
        """
        if not callable(self.value):
            raise InvalidValueKind("callable", self.value)
        if isinstance(exception, str):
            exception, message = Exception, exception
        with Assert.assertRaises(exception) as caught:
            self.value()
        if message is not None:
            Assert.assertIn(message, str(caught.exception))


ASSERTION_METHODS = frozenset(
    name
    for name, member in vars(Assertions).items()
    if callable(member) and not name.startswith("_")
)
