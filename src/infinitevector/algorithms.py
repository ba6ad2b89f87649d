"""Generic algorithms over iterator ranges.

Each function takes half-open ranges ``[first, last)`` of sequence iterators
and touches the elements only through the iterator interface. Input
iterators are copied, never advanced in place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from infinitevector.backends import Traversal

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from typing import Any

    from infinitevector.iterator import BidirectionalSequenceIterator, Entry, SequenceIterator


def _require(iterator: SequenceIterator[Any, Any], traversal: Traversal, algorithm: str) -> None:
    if iterator.traversal is not traversal:
        raise TypeError(f"{algorithm}() requires {traversal.value} iterators, got {iterator.traversal.value}")


def equal(
    first1: SequenceIterator[Any, Any],
    last1: SequenceIterator[Any, Any],
    first2: SequenceIterator[Any, Any],
    predicate: Callable[[Entry, Entry], bool] | None = None,
) -> bool:
    """Compare ``[first1, last1)`` with the range starting at first2 element by element.

    The second range must hold at least as many entries as the first. The
    result is only meaningful when both ranges enumerate their entries in
    the same order.

    Args:
        first1: Start of the first range
        last1: End of the first range
        first2: Start of the second range
        predicate: Optional equivalence on entries (default: ``==``)

    Returns:
        True if every pair of corresponding entries compares equal
    """
    it1 = first1.copy()
    it2 = first2.copy()
    while it1 != last1:
        a = it1.entry()
        b = it2.entry()
        if not (predicate(a, b) if predicate is not None else a == b):
            return False
        it1.increment()
        it2.increment()
    return True


def count_if(
    first: SequenceIterator[Any, Any], last: SequenceIterator[Any, Any], predicate: Callable[[Entry], bool]
) -> int:
    """Return the number of entries in ``[first, last)`` satisfying predicate."""
    count = 0
    it = first.copy()
    while it != last:
        if predicate(it.entry()):
            count += 1
        it.increment()
    return count


def find_if(
    first: SequenceIterator[Any, Any], last: SequenceIterator[Any, Any], predicate: Callable[[Entry], bool]
) -> SequenceIterator[Any, Any]:
    """Return an iterator at the first entry satisfying predicate, or a copy of last."""
    it = first.copy()
    while it != last:
        if predicate(it.entry()):
            return it
        it.increment()
    return last.copy()


def distance(first: SequenceIterator[Any, Any], last: SequenceIterator[Any, Any]) -> int:
    """Return the number of increments from first to last."""
    steps = 0
    it = first.copy()
    while it != last:
        it.increment()
        steps += 1
    return steps


def reversed_entries(
    first: BidirectionalSequenceIterator[Any, Any], last: BidirectionalSequenceIterator[Any, Any]
) -> Iterator[Entry]:
    """Yield the entries of ``[first, last)`` from back to front.

    Raises:
        TypeError: If the iterators are not bidirectional (raised before any
            element is visited)
    """
    _require(first, Traversal.BIDIRECTIONAL, "reversed_entries")
    _require(last, Traversal.BIDIRECTIONAL, "reversed_entries")
    return _walk_back(first.copy(), last.copy())


def _walk_back(
    first: BidirectionalSequenceIterator[Any, Any], it: BidirectionalSequenceIterator[Any, Any]
) -> Iterator[Entry]:
    while it != first:
        yield it.decrement().entry()
