"""Tests for the opposite, each and higher-order expectation wrappers."""

import pytest

from pestle.exceptions import ExpectationFailedError, ExpectationNotFound, NotIterable
from pestle.expectation import Expectation
from pestle.expectations import EachExpectation, HigherOrderExpectation


class _Address:
    def __init__(self, city):
        self.city = city


class _User:
    def __init__(self, name, age, address=None):
        self.name = name
        self.age = age
        self.address = address

    def greeting(self, punctuation="!"):
        return f"Hello {self.name}{punctuation}"


# --- OppositeExpectation ---


def test_not_passes_when_the_assertion_fails(registry):
    expectation = Expectation(1, registry)
    assert expectation.not_.to_be(2) is expectation


def test_not_fails_when_the_assertion_passes(registry):
    with pytest.raises(ExpectationFailedError, match=r"Expecting 1 not to be 1\."):
        Expectation(1, registry).not_.to_be(1)


def test_not_message_includes_keyword_arguments(registry):
    with pytest.raises(ExpectationFailedError, match="delta=0.5"):
        Expectation(1.0, registry).not_.to_equal_with_delta(1.2, delta=0.5)


def test_not_does_not_change_the_value(registry):
    expectation = Expectation([1, 2], registry)
    expectation.not_.to_be_empty()
    assert expectation.value == [1, 2]


def test_not_negates_extensions(registry):
    registry.extend("to_be_even", lambda self: self.to_equal(self.value - self.value % 2))

    Expectation(3, registry).not_.to_be_even()
    with pytest.raises(ExpectationFailedError, match="not to be even"):
        Expectation(4, registry).not_.to_be_even()


@pytest.mark.parametrize(
    "value, name, args",
    [
        ("abc", "to_be_int", ()),
        ([1], "to_be_empty", ()),
        (5, "to_be_less_than", (3,)),
        ({"a": 1}, "to_have_key", ("b",)),
        ("pestle", "to_match", (r"^\d+$",)),
    ],
)
def test_not_covers_the_whole_assertion_surface(registry, value, name, args):
    getattr(Expectation(value, registry).not_, name)(*args)

    with pytest.raises(ExpectationFailedError):
        getattr(Expectation(value, registry), name)(*args)


def test_not_to_have_keys_requires_every_key_missing(registry):
    Expectation({"a": 1}, registry).not_.to_have_keys(["x", "y"])

    with pytest.raises(ExpectationFailedError):
        Expectation({"a": 1, "y": 2}, registry).not_.to_have_keys(["x", "y"])


def test_not_to_have_attributes_requires_every_attribute_missing(registry):
    Expectation(_User("Nuno", 30), registry).not_.to_have_attributes(["email", "phone"])

    with pytest.raises(ExpectationFailedError):
        Expectation(_User("Nuno", 30), registry).not_.to_have_attributes(["email", "name"])


def test_not_with_unknown_name_raises(registry):
    with pytest.raises(ExpectationNotFound):
        Expectation("abc", registry).not_.upper()


def test_not_lets_non_assertion_errors_propagate(registry):
    with pytest.raises(TypeError):
        Expectation(5, registry).not_.to_start_with("5")


# --- EachExpectation ---


def test_each_applies_assertion_to_every_element(registry):
    each = Expectation([1, 2, 3], registry).each
    assert each.to_be_int() is each


def test_each_reports_the_failing_index(registry):
    with pytest.raises(ExpectationFailedError, match=r"element \[2\]") as exc_info:
        Expectation([1, 2, "three"], registry).each.to_be_int()
    assert isinstance(exc_info.value.__cause__, AssertionError)


def test_each_reports_the_failing_key_for_mappings(registry):
    with pytest.raises(ExpectationFailedError, match=r"element \['b'\]"):
        Expectation({"a": 1, "b": -1}, registry).each.to_be_greater_than(0)


def test_each_not_negates_every_element(registry):
    Expectation([1, 2], registry).each.not_.to_be_string()

    with pytest.raises(ExpectationFailedError):
        Expectation([1, "x"], registry).each.not_.to_be_string()


def test_each_not_applies_to_the_next_assertion_only(registry):
    each = Expectation([1, 2], registry).each
    each.not_.to_be_string().to_be_int()


def test_each_with_extension(registry):
    registry.extend("to_be_positive", lambda self: self.to_be_greater_than(0))

    Expectation([1, 2], registry).each.to_be_positive()
    with pytest.raises(ExpectationFailedError):
        Expectation([1, 0], registry).each.to_be_positive()


def test_each_unknown_name_raises(registry):
    with pytest.raises(ExpectationNotFound):
        Expectation(["a"], registry).each.upper()


def test_each_and_starts_a_new_expectation(registry):
    following = Expectation([1], registry).each.and_("next")
    assert isinstance(following, Expectation)
    assert following.value == "next"


def test_each_callback_then_assertion(registry):
    seen = []
    result = Expectation([1, 2], registry).each(lambda e: seen.append(e.value))
    assert isinstance(result, EachExpectation)
    result.to_be_int()
    assert seen == [1, 2]


def test_each_callback_then_assertion_on_a_generator(registry):
    seen = []
    each = Expectation((v for v in [1, "x"]), registry).each(lambda e: seen.append(e.value))

    assert seen == [1, "x"]
    with pytest.raises(ExpectationFailedError, match=r"element \[1\]"):
        each.to_be_int()


# --- HigherOrderExpectation ---


def test_higher_order_reads_attributes(registry):
    user = _User("Nuno", 30)
    Expectation(user, registry).name.to_be("Nuno").age.to_be(30)


def test_higher_order_reads_mapping_keys(registry):
    Expectation({"name": "Nuno", "age": 30}, registry).name.to_be("Nuno").age.to_be_greater_than(18)


def test_higher_order_resets_to_the_original_after_an_assertion(registry):
    user = _User("Nuno", 30)
    chain = Expectation(user, registry).name.to_be_string()
    assert isinstance(chain, HigherOrderExpectation)
    chain.age.to_be_int()


def test_higher_order_failure_raises(registry):
    with pytest.raises(ExpectationFailedError):
        Expectation(_User("Nuno", 30), registry).name.to_be("Taylor")


def test_higher_order_nested_attributes(registry):
    user = _User("Nuno", 30, _Address("Lisbon"))
    Expectation(user, registry).address.city.to_be("Lisbon")


def test_higher_order_calls_methods(registry):
    user = _User("Nuno", 30)
    Expectation(user, registry).greeting("?").to_be("Hello Nuno?")


def test_higher_order_not(registry):
    user = _User("Nuno", 30)
    Expectation(user, registry).name.not_.to_be("Taylor").age.to_be(30)

    with pytest.raises(ExpectationFailedError):
        Expectation(user, registry).name.not_.to_be("Nuno")


def test_higher_order_each_asserts_every_forwarded_element(registry):
    data = {"items": [1, 2], "name": "list"}
    chain = Expectation(data, registry).items.each.to_be_int()

    assert isinstance(chain, HigherOrderExpectation)
    chain.name.to_be("list")

    with pytest.raises(ExpectationFailedError, match=r"element \[1\]"):
        Expectation({"items": [1, "x"]}, registry).items.each.to_be_int()


def test_higher_order_each_not_and_callback(registry):
    seen = []
    Expectation({"items": [1, 2]}, registry).items.each.not_.to_be_string()
    Expectation({"items": [1, 2]}, registry).items.each(lambda e: seen.append(e.value))
    assert seen == [1, 2]


def test_higher_order_each_rejects_non_iterables(registry):
    with pytest.raises(NotIterable):
        Expectation({"count": 3}, registry).count.each


def test_higher_order_not_applies_once(registry):
    user = _User("Nuno", 30)
    Expectation(user, registry).name.not_.to_be("Taylor").to_be("Nuno")


def test_higher_order_scoped(registry):
    user = _User("Nuno", 30, _Address("Lisbon"))
    Expectation(user, registry).address.scoped(
        lambda address: address.city.to_be("Lisbon")
    ).name.to_be("Nuno")


def test_higher_order_json(registry):
    Expectation({"payload": '{"id": 7}'}, registry).payload.json().id.to_be(7)


def test_higher_order_and(registry):
    following = Expectation(_User("Nuno", 30), registry).name.and_(5)
    assert isinstance(following, Expectation)
    assert following.value == 5


def test_higher_order_with_extension(registry):
    registry.extend("to_be_adult", lambda self: self.to_be_greater_than_or_equal(18))
    Expectation(_User("Nuno", 30), registry).age.to_be_adult()


def test_higher_order_calling_a_non_callable_raises(registry):
    with pytest.raises(TypeError):
        Expectation(_User("Nuno", 30), registry).age()
