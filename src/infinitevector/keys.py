"""Composite index helpers.

Tuples of non-negative integers order lexicographically on their own. For
flat integer keys, or for an ordered backend that should sort tuples by
diagonal, tuples are enumerated with Cantor's diagonal argument::

    (0, 0) -> 0, (0, 1) -> 1, (1, 0) -> 2, (0, 2) -> 3, ...
    (0, 0, 0) -> 0, (0, 0, 1) -> 1, (0, 1, 0) -> 2, (1, 0, 0) -> 3, (0, 0, 2) -> 4, ...

A tuple of length n with component sum s sits on diagonal s, which is
preceded by ``comb(s + n - 1, n)`` tuples; its position inside the diagonal
is the enumeration of its first n - 1 components. Both orderings are total,
and the enumeration is a bijection between n-tuples and non-negative ints.
"""

from __future__ import annotations

from math import comb
from operator import index as op_index
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import SupportsIndex

__all__ = [
    "cantor_index",
    "cantor_order",
    "cantor_pair",
    "cantor_triple",
    "cantor_tuple",
    "cantor_unpair",
    "cantor_untriple",
]


def _components(key: Sequence[SupportsIndex]) -> list[int]:
    try:
        parts = [op_index(c) for c in key]
    except TypeError:
        raise TypeError("key components must be integers") from None
    if any(c < 0 for c in parts):
        raise ValueError("key components must be non-negative")
    return parts


def cantor_index(key: Sequence[SupportsIndex]) -> int:
    """Return the Cantor enumeration of a tuple of non-negative integers.

    Args:
        key: Tuple (or other sequence) of non-negative integers

    Returns:
        Non-negative integer, unique among tuples of the same length

    Raises:
        TypeError: If a component is not an integer
        ValueError: If a component is negative or key is empty
    """
    parts = _components(key)
    if not parts:
        raise ValueError("key must have at least one component")

    result = 0
    total = sum(parts)
    for n in range(len(parts), 0, -1):
        result += comb(total + n - 1, n)
        total -= parts[n - 1]
    return result


def cantor_tuple(number: SupportsIndex, arity: int) -> tuple[int, ...]:
    """Invert :func:`cantor_index`.

    Args:
        number: Non-negative integer
        arity: Length of the tuple to produce (at least 1)

    Returns:
        The tuple whose Cantor enumeration is number

    Raises:
        ValueError: If number is negative or arity is less than 1
    """
    remaining = op_index(number)
    if remaining < 0:
        raise ValueError("number must be non-negative")
    if arity < 1:
        raise ValueError("arity must be at least 1")

    sums = []
    for n in range(arity, 0, -1):
        # Largest diagonal s with comb(s + n - 1, n) <= remaining
        hi = 1
        while comb(hi + n - 1, n) <= remaining:
            hi *= 2
        lo = 0
        while hi - lo > 1:
            mid = (lo + hi) // 2
            if comb(mid + n - 1, n) <= remaining:
                lo = mid
            else:
                hi = mid
        remaining -= comb(lo + n - 1, n)
        sums.append(lo)

    # sums[i] is the component sum of the (arity - i)-prefix
    sums.append(0)
    return tuple(sums[i] - sums[i + 1] for i in range(arity - 1, -1, -1))


def cantor_pair(j: SupportsIndex, k: SupportsIndex) -> int:
    """Return ``(j + k) * (j + k + 1) // 2 + j``."""
    return cantor_index((j, k))


def cantor_unpair(number: SupportsIndex) -> tuple[int, int]:
    """Inverse of :func:`cantor_pair`."""
    j, k = cantor_tuple(number, 2)
    return j, k


def cantor_triple(j: SupportsIndex, k: SupportsIndex, l: SupportsIndex) -> int:  # noqa: E741
    """Return the Cantor enumeration of ``(j, k, l)``."""
    return cantor_index((j, k, l))


def cantor_untriple(number: SupportsIndex) -> tuple[int, int, int]:
    """Inverse of :func:`cantor_triple`."""
    j, k, l = cantor_tuple(number, 3)  # noqa: E741
    return j, k, l


def cantor_order(key: Sequence[SupportsIndex]) -> tuple[int, int]:
    """Sort key ordering tuples by arity, then by Cantor enumeration.

    Suitable as the ``key`` argument of
    :class:`~infinitevector.backends.OrderedBackend`.
    """
    return len(key), cantor_index(key)
