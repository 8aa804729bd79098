from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, MutableSequence
from operator import index as op_index
from typing import TYPE_CHECKING, TypeVar, overload

import numpy as np

from dynarray.quicksort import quicksort

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from typing import Any, SupportsIndex

    from _typeshed import SupportsRichComparison
    from numpy.typing import DTypeLike, NDArray

T = TypeVar("T")

logger = logging.getLogger(__name__)

# Capacity of a new or cleared dynarray when none (or a non-positive one) is requested
INITIAL_CAPACITY = 10
# Growth factor applied to the current size when the backing storage is full
CAPACITY_MULTIPLIER = 1.75
# Largest capacity a dynarray will ever request, bounded by what NumPy can address as an object array
MAX_CAPACITY = sys.maxsize // np.dtype(object).itemsize


def _new_storage(capacity: int, items: Iterable[Any] = ()) -> NDArray[np.object_]:
    """Allocate an object array of the given capacity and fill its head from items."""
    storage = np.empty(capacity, dtype=object)
    for i, item in enumerate(items):
        storage[i] = item
    return storage


class dynarray(MutableSequence[T]):  # noqa: N801
    """A contiguous, growable array list backed by a NumPy object array.

    Elements live in ``_data[0:_size]``; the rest of the backing storage is
    spare capacity. ``None`` is a regular element (the absent value) and is
    sorted before every other value by :meth:`sort`.

    Note:
        This implementation is not synchronized.
    """

    _data: NDArray[np.object_]
    _size: int
    _max_capacity: int

    def __init__(
        self,
        data: Iterable[T] | None = None,
        capacity: SupportsIndex | None = None,
        *,
        max_capacity: SupportsIndex = MAX_CAPACITY,
    ) -> None:
        """Initialize a dynarray, optionally populated from data.

        Args:
            data: Initial elements (optional); they populate indices 0, 1, 2, etc.
            capacity: Initial capacity of the backing storage. ``None`` or a
                non-positive value selects ``INITIAL_CAPACITY``. Raised to the
                number of initial elements if smaller.
            max_capacity: Upper bound on the backing storage (default ``MAX_CAPACITY``)

        Raises:
            TypeError: If capacity or max_capacity doesn't support __index__
            ValueError: If max_capacity is not between 1 and MAX_CAPACITY
            MemoryError: If data holds more than max_capacity elements
        """
        try:
            max_capacity = op_index(max_capacity)
        except TypeError:
            raise TypeError("max_capacity must support __index__") from None
        if not 0 < max_capacity <= MAX_CAPACITY:
            raise ValueError(f"max_capacity must be between 1 and {MAX_CAPACITY}")

        if capacity is not None:
            try:
                capacity = op_index(capacity)
            except TypeError:
                raise TypeError("capacity must support __index__") from None
        if capacity is None or capacity <= 0:
            capacity = INITIAL_CAPACITY

        items = list(data) if data is not None else []
        if len(items) > max_capacity:
            raise MemoryError(f"cannot hold {len(items)} elements, max_capacity is {max_capacity}")

        self._max_capacity = max_capacity
        self._data = _new_storage(max(min(capacity, max_capacity), len(items)), items)
        self._size = len(items)

    # ---------------------
    # Properties
    # ---------------------
    @property
    def size(self) -> int:
        """The number of elements in the dynarray."""
        return self._size

    @property
    def capacity(self) -> int:
        """The length of the backing storage, always at least :attr:`size`."""
        return len(self._data)

    @property
    def max_capacity(self) -> int:
        """The largest capacity this dynarray may grow to."""
        return self._max_capacity

    def __len__(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        """Return True if the dynarray holds no elements."""
        return self._size == 0

    # ---------------------
    # Backing storage
    # ---------------------
    def _ensure_capacity(self, required: int) -> None:
        if required > len(self._data):
            self._grow(required)

    def _grow(self, required: int) -> None:
        """Reallocate the backing storage so that it holds at least required elements.

        The new capacity is ``size * CAPACITY_MULTIPLIER``, but never less than
        required and never more than max_capacity. Nothing is modified when the
        request cannot be satisfied.

        Args:
            required: Minimum capacity needed by the pending operation

        Raises:
            MemoryError: If required exceeds max_capacity
        """
        if required > self._max_capacity:
            raise MemoryError(f"cannot grow dynarray to {required} elements, max_capacity is {self._max_capacity}")

        old_capacity = len(self._data)
        new_capacity = min(max(required, int(self._size * CAPACITY_MULTIPLIER)), self._max_capacity)

        new_data = np.empty(new_capacity, dtype=object)
        new_data[: self._size] = self._data[: self._size]
        self._data = new_data
        logger.debug("dynarray grown from %d to %d slots (size %d)", old_capacity, new_capacity, self._size)

    def _check_index(self, index: SupportsIndex) -> int:
        idx = op_index(index)
        if not 0 <= idx < self._size:
            raise IndexError(f"dynarray index {idx} out of range")
        return idx

    def _normalize(self, index: SupportsIndex) -> int:
        idx = op_index(index)
        if idx < 0:
            idx += self._size
        return idx

    # ---------------------
    # Positional access
    # ---------------------
    def get(self, index: SupportsIndex) -> T:
        """Return the element at index.

        Raises:
            IndexError: If index is not in ``[0, size)``
        """
        return self._data[self._check_index(index)]  # type: ignore[no-any-return]

    def set(self, index: SupportsIndex, value: T) -> T:
        """Replace the element at index and return the previous one.

        Raises:
            IndexError: If index is not in ``[0, size)``
        """
        idx = self._check_index(index)
        old_value = self._data[idx]
        self._data[idx] = value
        return old_value  # type: ignore[no-any-return]

    def add(self, value: T) -> None:
        """Append value, growing the backing storage first if it is full.

        Raises:
            MemoryError: If growing would exceed max_capacity
        """
        self._ensure_capacity(self._size + 1)
        self._data[self._size] = value
        self._size += 1

    def insert(self, index: SupportsIndex, value: T) -> None:
        """Insert value at index, shifting later elements one slot to the right.

        Unlike :meth:`list.insert`, index must name an existing element: inserting
        at ``index == size`` (including into an empty dynarray) is rejected. Use
        :meth:`add` to append.

        Args:
            index: Position of an existing element, ``0 <= index < size``
            value: Value to insert

        Raises:
            IndexError: If index is not in ``[0, size)``
            MemoryError: If growing would exceed max_capacity
        """
        idx = self._check_index(index)
        self._ensure_capacity(self._size + 1)
        self._data[idx + 1 : self._size + 1] = self._data[idx : self._size]
        self._data[idx] = value
        self._size += 1

    def remove_at(self, index: SupportsIndex) -> T:
        """Remove and return the element at index, shifting later elements left.

        Raises:
            IndexError: If index is not in ``[0, size)``
        """
        idx = self._check_index(index)
        old_value = self._data[idx]
        self._data[idx : self._size - 1] = self._data[idx + 1 : self._size]
        self._size -= 1
        self._data[self._size] = None
        return old_value  # type: ignore[no-any-return]

    # ---------------------
    # Search
    # ---------------------
    def index_of(self, value: object) -> int:
        """Return the index of the first element equal to value, or -1."""
        for i in range(self._size):
            item = self._data[i]
            if item is value or item == value:
                return i
        return -1

    def last_index_of(self, value: object) -> int:
        """Return the index of the last element equal to value, or -1."""
        for i in range(self._size - 1, -1, -1):
            item = self._data[i]
            if item is value or item == value:
                return i
        return -1

    def contains(self, value: object) -> bool:
        return self.index_of(value) >= 0

    def contains_all(self, values: Iterable[object]) -> bool:
        """Return True if every element of values is in the dynarray."""
        return all(self.index_of(value) >= 0 for value in values)

    def remove(self, value: object) -> bool:  # type: ignore[override]
        """Remove the first element equal to value.

        Args:
            value: Value to remove

        Returns:
            True if an element was removed, False if value was not found
        """
        idx = self.index_of(value)
        if idx < 0:
            return False
        self.remove_at(idx)
        return True

    # ---------------------
    # Bulk operations
    # ---------------------
    def add_all(self, values: Iterable[T]) -> None:
        """Append every element of values, in iteration order.

        The backing storage is grown once for the whole batch.

        Raises:
            MemoryError: If growing would exceed max_capacity (nothing is appended)
        """
        batch = list(values)
        if not batch:
            return

        self._ensure_capacity(self._size + len(batch))
        for offset, value in enumerate(batch, start=self._size):
            self._data[offset] = value
        self._size += len(batch)

    def insert_all(self, index: SupportsIndex, values: Iterable[T]) -> None:
        """Not supported: batch insertion is only available at the end via :meth:`add_all`.

        Raises:
            NotImplementedError: Always
        """
        raise NotImplementedError("dynarray does not support insert_all(index, values)")

    def remove_all(self, values: Iterable[object]) -> bool:
        """Remove one occurrence per element of values.

        Each element of values removes the first remaining equal element, so a
        value repeated in values removes that many occurrences.

        Returns:
            True if at least one element was removed
        """
        changed = False
        for value in list(values):
            if self.remove(value):
                changed = True
        return changed

    def retain_all(self, values: Iterable[object]) -> bool:
        """Keep only the elements that also occur in values.

        Retained elements keep their relative order. When anything is dropped
        the backing storage is reallocated to exactly the retained count.

        Returns:
            True if the dynarray changed
        """
        keep = list(values)
        retained = [self._data[i] for i in range(self._size) if self._data[i] in keep]
        if len(retained) == self._size:
            return False

        old_capacity = len(self._data)
        self._data = _new_storage(len(retained), retained)
        self._size = len(retained)
        logger.debug("dynarray rebuilt from %d to %d slots by retain_all", old_capacity, self._size)
        return True

    def clear(self) -> None:
        """Remove all elements and reallocate the backing storage at ``INITIAL_CAPACITY``."""
        old_capacity = len(self._data)
        self._data = _new_storage(min(INITIAL_CAPACITY, self._max_capacity))
        self._size = 0
        logger.debug("dynarray cleared, %d slots released", old_capacity)

    def append(self, value: T) -> None:
        """Same as :meth:`add`."""
        self.add(value)

    def extend(self, values: Iterable[T]) -> None:
        """Same as :meth:`add_all`."""
        self.add_all(values)

    # ---------------------
    # Export
    # ---------------------
    def to_array(self, dtype: DTypeLike = object) -> NDArray[Any]:
        """Return an independent NumPy array holding the elements in order.

        Args:
            dtype: Element type of the returned array (default: object). Any
                other dtype converts every element, as ``numpy.asarray`` would.

        Raises:
            TypeError: If an element cannot be converted to dtype
            ValueError: If an element cannot be converted to dtype
        """
        return self._data[: self._size].astype(dtype)

    def sub_list(self, first: SupportsIndex, last: SupportsIndex) -> dynarray[T]:
        """Return a new dynarray holding a copy of the elements ``first`` through ``last``.

        Both bounds are inclusive and must be valid indices, so ``sub_list(2, 3)``
        returns two elements. An empty dynarray is returned when first > last.

        Raises:
            IndexError: If either bound is not in ``[0, size)``
        """
        start = self._check_index(first)
        stop = self._check_index(last) + 1
        return dynarray(self._data[start:stop], max_capacity=self._max_capacity)

    def copy(self) -> dynarray[T]:
        """Return a shallow copy with the same capacity."""
        return self.__copy__()

    def __copy__(self) -> dynarray[T]:
        return dynarray(self._data[: self._size], capacity=len(self._data), max_capacity=self._max_capacity)

    # ---------------------
    # Iteration
    # ---------------------
    def iterator(self) -> dynarray_iterator[T]:
        """Return a single-pass forward cursor positioned before the first element."""
        return dynarray_iterator(self)

    def __iter__(self) -> dynarray_iterator[T]:
        return self.iterator()

    def list_iterator(self, index: SupportsIndex = 0) -> Iterator[T]:
        """Not supported: dynarray only offers the forward cursor of :meth:`iterator`.

        Raises:
            NotImplementedError: Always
        """
        raise NotImplementedError("dynarray does not support list_iterator()")

    def __contains__(self, value: object) -> bool:
        return self.index_of(value) >= 0

    # ---------------------
    # Sorting
    # ---------------------
    def sort(self, *, key: Callable[[T], SupportsRichComparison] | None = None) -> None:
        """Sort the dynarray in place, ascending, with ``None`` before every other element.

        Args:
            key: Optional key function, never called with None

        Raises:
            TypeError: If two keys cannot be compared
        """
        quicksort(self, key=key)

    # ---------------------
    # Item protocol
    # ---------------------
    @overload
    def __getitem__(self, key: SupportsIndex) -> T: ...

    @overload
    def __getitem__(self, key: slice) -> dynarray[T]: ...

    def __getitem__(self, key: SupportsIndex | slice) -> T | dynarray[T]:
        """Get an element by index (negative indices count from the end) or a new dynarray by slice.

        Raises:
            TypeError: If key is not an integer or slice
            IndexError: If index is out of range
            ValueError: If slice step is zero
        """
        if isinstance(key, slice):
            return dynarray(self._data[: self._size][key], max_capacity=self._max_capacity)
        return self.get(self._normalize(key))

    def __setitem__(self, key: SupportsIndex | slice, value: T) -> None:  # type: ignore[override]
        """Replace an element by index (negative indices count from the end).

        Raises:
            TypeError: If key is a slice or not an integer
            IndexError: If index is out of range
        """
        if isinstance(key, slice):
            raise TypeError("dynarray does not support slice assignment")
        self.set(self._normalize(key), value)

    def __delitem__(self, key: SupportsIndex | slice) -> None:  # type: ignore[override]
        """Remove an element by index (negative indices count from the end).

        Raises:
            TypeError: If key is a slice or not an integer
            IndexError: If index is out of range
        """
        if isinstance(key, slice):
            raise TypeError("dynarray does not support slice deletion")
        self.remove_at(self._normalize(key))

    # ---------------------
    # Comparison and rendering
    # ---------------------
    def __eq__(self, other: object) -> bool:
        """Return True if other is an iterable with equal elements in the same order."""
        if self is other:
            return True

        if not hasattr(other, "__iter__"):
            return NotImplemented

        if hasattr(other, "__len__"):
            try:
                if len(other) != self._size:  # type: ignore[arg-type]
                    return False
            except TypeError:
                pass  # Some iterables don't support len()

        other_iter = iter(other)  # type: ignore[call-overload]
        for i in range(self._size):
            try:
                other_val = next(other_iter)
            except StopIteration:
                return False
            item = self._data[i]
            if not (item is other_val or item == other_val):
                return False

        try:
            next(other_iter)
            return False
        except StopIteration:
            return True

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __hash__(self) -> None:  # type: ignore[override]
        """Raise TypeError as dynarrays are not hashable.

        Raises:
            TypeError: Always raised since dynarrays are mutable
        """
        raise TypeError("unhashable type: 'dynarray'")

    def __str__(self) -> str:
        """Render as ``[a, b, c]`` with absent values shown as ``null``."""
        parts = ("null" if self._data[i] is None else str(self._data[i]) for i in range(self._size))
        return f"[{', '.join(parts)}]"

    def __repr__(self) -> str:
        return f"dynarray({[self._data[i] for i in range(self._size)]!r})"


class dynarray_iterator(Iterator[T]):  # noqa: N801
    """Single-pass, read-only forward cursor over a dynarray.

    Behavior is undefined if the dynarray is structurally modified during traversal.
    """

    def __init__(self, owner: dynarray[T]) -> None:
        self._owner = owner
        self._cursor = 0

    def has_next(self) -> bool:
        """Return True if :meth:`next` has another element to return."""
        return self._cursor < self._owner._size

    def next(self) -> T:
        """Return the next element.

        Raises:
            StopIteration: If the cursor is past the last element
        """
        if not self.has_next():
            raise StopIteration
        value = self._owner._data[self._cursor]
        self._cursor += 1
        return value  # type: ignore[no-any-return]

    def __next__(self) -> T:
        return self.next()
