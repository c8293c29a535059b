"""Unit tests for equality rules."""

import datetime
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from storewatch import InvalidPathError, by_key, strict_equal, values_equal


@pytest.mark.unit
@pytest.mark.equality
def test_strict_equal_compares_objects_by_identity():
    """Equal but distinct containers count as changed"""
    value = {"x": 1}

    assert strict_equal(value, value)
    assert not strict_equal({"x": 1}, {"x": 1})
    assert not strict_equal([1], [1])


@pytest.mark.unit
@pytest.mark.equality
def test_strict_equal_compares_scalars_by_value():
    big = 10**20

    assert strict_equal(big, 10**20 + 0)
    assert strict_equal("ab" * 50, "a" + "b" + "ab" * 49)
    assert strict_equal(None, None)
    assert not strict_equal(1, 2)


@pytest.mark.unit
@pytest.mark.equality
def test_strict_equal_does_not_coerce_between_types():
    assert not strict_equal(1, True)
    assert not strict_equal(1, 1.0)
    assert not strict_equal("1", 1)


@pytest.mark.unit
@pytest.mark.equality
def test_strict_equal_treats_nan_as_changed():
    assert not strict_equal(float("nan"), float("nan"))


@pytest.mark.unit
@pytest.mark.equality
def test_values_equal_compares_structure():
    assert values_equal({"x": [1, 2]}, {"x": [1, 2]})
    assert not values_equal({"x": [1, 2]}, {"x": [2, 1]})


@pytest.mark.unit
@pytest.mark.equality
def test_values_equal_handles_numpy_arrays():
    assert values_equal(np.array([1, 2, 3]), np.array([1, 2, 3]))
    assert not values_equal(np.array([1, 2, 3]), np.array([1, 2, 4]))
    assert not values_equal(np.array([1, 2]), [1, 2])


@pytest.mark.unit
@pytest.mark.equality
def test_values_equal_treats_failing_comparison_as_unequal():
    class Incomparable:
        def __eq__(self, other):
            raise TypeError("no")

    assert not values_equal(Incomparable(), Incomparable())


@pytest.mark.unit
@pytest.mark.equality
def test_by_key_only_compares_the_given_key():
    same_id = by_key("id")

    assert same_id({"id": 1, "name": "a"}, {"id": 1, "name": "b"})
    assert not same_id({"id": 1}, {"id": 2})


@pytest.mark.unit
@pytest.mark.equality
def test_by_key_accepts_paths_and_missing_values():
    same_owner = by_key("owner.id")

    assert same_owner({"owner": {"id": 3}}, {"owner": {"id": 3, "x": 1}})
    assert same_owner({}, {"owner": None})
    assert not same_owner({}, {"owner": {"id": 3}})


@pytest.mark.unit
@pytest.mark.equality
def test_strict_equal_compares_value_scalars_by_value():
    """Freshly computed numpy scalars, decimals, fractions and dates are equal by value"""
    assert strict_equal(np.array([1.5, 2.0]).sum(), np.array([1.5, 2.0]).sum())
    assert strict_equal(np.int64(7), np.int64(7))
    assert strict_equal(Decimal("3.5"), Decimal("1.5") + Decimal("2"))
    assert strict_equal(Fraction(1, 2), Fraction(2, 4))
    assert strict_equal(datetime.date(2024, 1, 1), datetime.date(2024, 1, 1))
    assert strict_equal(
        datetime.datetime(2024, 1, 1, 12), datetime.datetime(2024, 1, 1, 12)
    )
    assert strict_equal(datetime.timedelta(seconds=5), datetime.timedelta(seconds=5))
    assert not strict_equal(Decimal("3.5"), Decimal("3.6"))
    assert not strict_equal(np.float64(1.0), np.float64(2.0))


@pytest.mark.unit
@pytest.mark.equality
def test_strict_equal_keeps_identity_for_containers():
    assert not strict_equal((1, 2), (1, 2))
    assert not strict_equal(np.array([1]), np.array([1]))


@pytest.mark.unit
@pytest.mark.equality
def test_by_key_rejects_malformed_key_when_built():
    with pytest.raises(InvalidPathError):
        by_key("owner..id")
