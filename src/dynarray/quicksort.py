"""In-place quicksort that places ``None`` before every other value."""

from __future__ import annotations

from operator import index as op_index
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, MutableSequence
    from typing import SupportsIndex

    from _typeshed import SupportsRichComparison

    KeyFunc = Callable[[Any], SupportsRichComparison]


def quicksort(
    seq: MutableSequence[Any],
    first: SupportsIndex = 0,
    last: SupportsIndex | None = None,
    *,
    key: KeyFunc | None = None,
) -> None:
    """Sort ``seq[first]`` through ``seq[last]`` in place, in ascending order.

    ``None`` is treated as less than every other value: all ``None`` elements of
    the range end up at its front, followed by the remaining elements in
    non-decreasing order. Only pairs of non-None elements are ever compared.
    The sort is not stable.

    Works on any object supporting ``len()`` and integer ``__getitem__`` /
    ``__setitem__``, e.g. a :class:`~dynarray.dynarray` or a builtin list.

    Args:
        seq: Sequence to sort
        first: Index of the first element of the range (default 0)
        last: Index of the last element of the range, inclusive
              (default: the last element of seq)
        key: Optional key function, never called with None

    Raises:
        TypeError: If two keys cannot be compared
        IndexError: If the range reaches outside seq
    """
    start = op_index(first)
    end = len(seq) - 1 if last is None else op_index(last)
    _quicksort(seq, start, end, key)


def _quicksort(seq: MutableSequence[Any], first: int, last: int, key: KeyFunc | None) -> None:
    # Recurse into the smaller side and loop on the larger one to bound the stack depth
    while first < last:
        pivot = _gather_absent(seq, first, last)
        if pivot >= last:
            # At most one non-None element left after the None prefix
            return

        left = _partition(seq, pivot, last, key)
        if left - first < last - left:
            _quicksort(seq, first, left - 1, key)
            first = left + 1
        else:
            _quicksort(seq, left + 1, last, key)
            last = left - 1


def _gather_absent(seq: MutableSequence[Any], first: int, last: int) -> int:
    """Swap every None in ``seq[first..last]`` to the front of the range.

    Returns:
        Index of the first slot after the None prefix
    """
    boundary = first
    for i in range(first, last + 1):
        if seq[i] is None:
            if i != boundary:
                _swap(seq, boundary, i)
            boundary += 1
    return boundary


def _partition(seq: MutableSequence[Any], pivot: int, last: int, key: KeyFunc | None) -> int:
    """Partition ``seq[pivot..last]`` around the element at pivot.

    Elements that are None or not greater than the pivot (ties included) are
    moved before it, larger elements after it.

    Returns:
        Final index of the pivot element
    """
    pivot_value = seq[pivot]
    pivot_key = key(pivot_value) if key is not None else pivot_value

    left = pivot
    for right in range(pivot + 1, last + 1):
        item = seq[right]
        if item is None or pivot_key >= (key(item) if key is not None else item):
            left += 1
            _swap(seq, left, right)

    _swap(seq, pivot, left)
    return left


def _swap(seq: MutableSequence[Any], first: int, second: int) -> None:
    seq[first], seq[second] = seq[second], seq[first]
