"""Lazy permutation enumeration (iterative Heap's algorithm)."""

import math
from typing import Generic, Iterator, Sequence, Tuple, TypeVar

T = TypeVar("T")


def permute(sequence: Sequence[T]) -> Iterator[Tuple[T, ...]]:
    """
    Yield every ordering of `sequence`, identity first.

    Each step swaps exactly two elements of a working copy, so producing the
    next permutation is O(1) amortized. Yields n! tuples.
    """
    items = list(sequence)
    n = len(items)
    counters = [0] * n

    yield tuple(items)
    i = 1
    while i < n:
        if counters[i] < i:
            k = counters[i] if i % 2 else 0
            items[i], items[k] = items[k], items[i]
            counters[i] += 1
            i = 1
            yield tuple(items)
        else:
            counters[i] = 0
            i += 1


class Permutations(Generic[T]):
    """Restartable iterable over all orderings of a fixed sequence."""

    def __init__(self, sequence: Sequence[T]):
        self.sequence = tuple(sequence)

    def __iter__(self) -> Iterator[Tuple[T, ...]]:
        return permute(self.sequence)

    def __len__(self) -> int:
        return math.factorial(len(self.sequence))
