"""Cursor-style iterators over the stored entries of an InfiniteVector."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Generic, NamedTuple, TypeVar

from infinitevector.backends import Traversal

if TYPE_CHECKING:
    import sys

    from infinitevector.backends import BackendCursor
    from infinitevector.infinitevector import InfiniteVector

    if sys.version_info < (3, 11):
        from typing_extensions import Self
    else:
        from typing import Self

K = TypeVar("K")
V = TypeVar("V")


class Entry(NamedTuple):
    """A stored ``(index, value)`` pair."""

    index: Any
    value: Any


class SequenceIterator(Generic[K, V]):
    """Forward iterator over the entries of one InfiniteVector.

    Wraps a backend cursor plus a reference to the owning vector. The
    reference only scopes comparisons; the iterator never mutates anything.

    Besides the cursor interface (:meth:`entry`, :meth:`increment`, ...) the
    iterator implements the Python iterator protocol: ``next()`` returns the
    current entry and advances, raising StopIteration at the end.
    """

    #: Traversal category. Algorithms needing more than forward steps check this.
    traversal: ClassVar[Traversal] = Traversal.FORWARD

    __slots__ = ("_container", "_cursor")

    def __init__(self, container: InfiniteVector[K, V], cursor: BackendCursor[K, V]) -> None:
        self._container = container
        self._cursor = cursor

    def entry(self) -> Entry:
        """Dereference the iterator.

        Returns:
            The entry at the current position

        Raises:
            IndexError: If the iterator is at the end
            RuntimeError: If a mutation of the vector invalidated the iterator
        """
        return Entry(*self._cursor.item())

    def index(self) -> K:
        """Return the index of the current entry."""
        return self._cursor.item()[0]

    def value(self) -> V:
        """Return the value of the current entry."""
        return self._cursor.item()[1]

    def increment(self) -> Self:
        """Advance to the next entry and return self (prefix increment)."""
        self._cursor = self._cursor.successor()
        return self

    def post_increment(self) -> Self:
        """Advance to the next entry and return a copy at the old position."""
        old = self.copy()
        self._cursor = self._cursor.successor()
        return old

    def at_end(self) -> bool:
        """Return True if the iterator is past the last entry."""
        return self._cursor.at_end()

    def copy(self) -> Self:
        """Return an independent iterator at the same position."""
        return type(self)(self._container, self._cursor)

    __copy__ = copy

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> Entry:
        if self._cursor.at_end():
            raise StopIteration
        current = Entry(*self._cursor.item())
        self._cursor = self._cursor.successor()
        return current

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SequenceIterator):
            return NotImplemented
        if self._container is not other._container:
            return False
        return bool(self._cursor == other._cursor)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._cursor!r}>"


class BidirectionalSequenceIterator(SequenceIterator[K, V]):
    """Iterator over a backend whose cursors can also step backwards."""

    traversal: ClassVar[Traversal] = Traversal.BIDIRECTIONAL

    __slots__ = ()

    def decrement(self) -> Self:
        """Step back to the previous entry and return self (prefix decrement).

        Raises:
            IndexError: If the iterator is at the first entry
        """
        self._cursor = self._cursor.predecessor()
        return self

    def post_decrement(self) -> Self:
        """Step back to the previous entry and return a copy at the old position."""
        old = self.copy()
        self._cursor = self._cursor.predecessor()
        return old


_ITERATOR_TYPES: dict[Traversal, type[SequenceIterator[Any, Any]]] = {
    Traversal.FORWARD: SequenceIterator,
    Traversal.BIDIRECTIONAL: BidirectionalSequenceIterator,
}


def _make_iterator(
    container: InfiniteVector[K, V], cursor: BackendCursor[K, V], traversal: Traversal
) -> SequenceIterator[K, V]:
    """Build the iterator class matching the backend's declared traversal."""
    return _ITERATOR_TYPES[traversal](container, cursor)
