# tests/test_quicksort.py
import random

import pytest

from dynarray import dynarray, quicksort


# ---------------------
# Helper functions
# ---------------------
def _expected_order(values):
    """None elements first, then the remaining values in ascending order."""
    absent = [v for v in values if v is None]
    present = sorted(v for v in values if v is not None)
    return absent + present


# ---------------------
# Generator functions
# ---------------------
def generate_random_cases():
    """Generate reproducible random lists mixing ints, duplicates and None."""
    for seed in range(20):
        rng = random.Random(seed)
        length = rng.randint(0, 60)
        values = [None if rng.random() < 0.2 else rng.randint(-5, 5) for _ in range(length)]
        yield values, f"seed_{seed}_len_{length}"


# ---------------------
# Whole-sequence sorting tests
# ---------------------
@pytest.mark.parametrize(
    "values, expected",
    [
        ([1, 3, 7, 2], [1, 2, 3, 7]),
        ([1, None, None, 3], [None, None, 1, 3]),
        ([], []),
        ([1], [1]),
        ([None], [None]),
        ([None, None], [None, None]),
        ([2, 1], [1, 2]),
        ([1, None], [None, 1]),
        ([None, 1], [None, 1]),
        ([None, 5, 3], [None, 3, 5]),
        ([3, 3, 3], [3, 3, 3]),
        ([5, None, 3, None, 1], [None, None, 1, 3, 5]),
        ([9, 8, 7, 6, 5, 4, 3, 2, 1, 0], [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]),
        (["pear", None, "apple", "fig"], [None, "apple", "fig", "pear"]),
    ],
    ids=[
        "four_ints",
        "none_in_middle",
        "empty",
        "single",
        "single_none",
        "all_none",
        "pair",
        "none_last",
        "none_first",
        "none_then_unsorted_pair",
        "all_equal",
        "interleaved_none",
        "descending",
        "strings",
    ],
)
@pytest.mark.parametrize("container", [list, dynarray], ids=["list", "dynarray"])
def test_quicksort(container, values, expected):
    """Test quicksort puts None first and the rest in ascending order."""
    seq = container(values)
    result = quicksort(seq)
    assert result is None
    assert list(seq) == expected


@pytest.mark.parametrize(
    "values",
    [case for case, _ in generate_random_cases()],
    ids=[case_id for _, case_id in generate_random_cases()],
)
def test_quicksort_random(values):
    """Test quicksort against the reference ordering on random input."""
    seq = dynarray(values)
    quicksort(seq)
    assert list(seq) == _expected_order(values)
    assert seq.size == len(values)


def test_quicksort_renders_none_first():
    """Test the sorted dynarray renders with null markers at the front."""
    seq = dynarray()
    seq.add(1)
    seq.add(None)
    seq.add(None)
    seq.add(3)

    quicksort(seq)

    assert str(seq) == "[null, null, 1, 3]"


@pytest.mark.parametrize(
    "values",
    [list(range(1200)), list(range(1200, 0, -1)), [7] * 1200],
    ids=["ascending", "descending", "constant"],
)
def test_quicksort_long_degenerate_input(values):
    """Test inputs that partition badly at every step do not exhaust the stack."""
    seq = list(values)
    quicksort(seq)
    assert seq == sorted(values)


# ---------------------
# Range sorting tests
# ---------------------
@pytest.mark.parametrize(
    "values, first, last, expected",
    [
        ([9, 4, None, 1, 0], 1, 3, [9, None, 1, 4, 0]),
        ([9, 4, None, 1, 0], 0, 4, [None, 0, 1, 4, 9]),
        ([3, 2, 1], 0, 1, [2, 3, 1]),
        ([3, 2, 1], 1, 2, [3, 1, 2]),
        ([3, 2, 1], 2, 2, [3, 2, 1]),
        ([3, 2, 1], 2, 0, [3, 2, 1]),
    ],
    ids=["middle", "whole", "prefix", "suffix", "single_element_range", "empty_range"],
)
def test_quicksort_range(values, first, last, expected):
    """Test that only first..last, both inclusive, is sorted."""
    seq = dynarray(values)
    quicksort(seq, first, last)
    assert list(seq) == expected


def test_quicksort_range_outside_sequence():
    """Test that a range reaching past the end fails on access."""
    with pytest.raises(IndexError):
        quicksort(dynarray([2, 1]), 0, 5)


# ---------------------
# Key and comparison tests
# ---------------------
def test_quicksort_key():
    """Test sorting by a key function."""
    seq = dynarray(["ccc", "a", "bb"])
    quicksort(seq, key=len)
    assert list(seq) == ["a", "bb", "ccc"]


def test_quicksort_key_never_called_with_none():
    """Test that None elements bypass the key function."""
    calls = []

    def key(value):
        calls.append(value)
        return value.lower()

    seq = dynarray(["b", None, "C", "a", None])
    quicksort(seq, key=key)

    assert list(seq) == [None, None, "a", "b", "C"]
    assert None not in calls


def test_quicksort_unorderable_values():
    """Test that comparison errors propagate to the caller."""
    with pytest.raises(TypeError):
        quicksort(dynarray([1, "a", 2]))


def test_quicksort_key_error_propagates():
    """Test that exceptions raised by the key function are not swallowed."""

    def key(value):
        raise ValueError(f"bad value {value!r}")

    with pytest.raises(ValueError, match="bad value"):
        quicksort([2, 1], key=key)


def test_quicksort_single_present_value_skips_comparison():
    """Test that a range with one non-None element is never compared."""

    class Unorderable:
        pass

    marker = Unorderable()
    seq = [None, marker, None]
    quicksort(seq)
    assert seq == [None, None, marker]
