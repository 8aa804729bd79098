"""A growable array list with a None-tolerant in-place quicksort.

See README.md for complete documentation and usage examples.
"""

from dynarray.dynarray import CAPACITY_MULTIPLIER, INITIAL_CAPACITY, MAX_CAPACITY, dynarray, dynarray_iterator
from dynarray.quicksort import quicksort

__all__ = ["CAPACITY_MULTIPLIER", "INITIAL_CAPACITY", "MAX_CAPACITY", "dynarray", "dynarray_iterator", "quicksort"]
