from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from infinitevector import algorithms
from infinitevector.backends import Backend, OrderedBackend, Traversal
from infinitevector.iterator import _make_iterator

if TYPE_CHECKING:
    import sys
    from collections.abc import Callable, Iterable, Iterator

    from infinitevector.iterator import Entry, SequenceIterator

    if sys.version_info < (3, 11):
        from typing_extensions import Self
    else:
        from typing import Self

K = TypeVar("K")
V = TypeVar("V")

logger = logging.getLogger(__name__)

#: Backend used when none is given.
DEFAULT_BACKEND: type[Backend[Any, Any]] = OrderedBackend


class InfiniteVector(Generic[K, V]):
    """An infinite sequence that is ``default`` everywhere except at finitely many indices.

    Entries are held in a pluggable :class:`~infinitevector.backends.Backend`.
    Storing the default value at an index removes that index's entry, so the
    stored entries are exactly the support of the vector.
    """

    _backend: Backend[K, V]
    _default: V

    def __init__(
        self,
        data: Backend[K, V] | Mapping[K, V] | Iterable[tuple[K, V]] | None = None,
        *,
        default: Any = 0,
        backend: Callable[[], Backend[K, V]] | None = None,
    ) -> None:
        """Initialize an InfiniteVector.

        Args:
            data: Initial entries (optional, defaults to empty)
                  - None: creates the zero vector
                  - Backend instance: adopted as the storage, not copied
                  - mapping: index -> value pairs are imported
                  - iterable: ``(index, value)`` pairs are imported in order,
                    so a later pair for the same index wins
            default: Value reported for every index without an entry (default: 0)
            backend: Backend class or zero-argument factory (default:
                :data:`DEFAULT_BACKEND`). Must be omitted when data is a
                Backend instance.

        Raises:
            TypeError: If backend does not produce a Backend instance, or if
                backend is given together with a Backend instance as data

        Note:
            Entries equal to default are dropped after import, including
            entries of an adopted backend.
        """
        self._default = default

        if isinstance(data, Backend):
            if backend is not None:
                raise TypeError("backend cannot be given when adopting a Backend instance")
            self._backend = data
            pruned = self._prune()
            logger.debug("adopted %s with %d entries (%d pruned)", type(data).__name__, len(data), pruned)
            return

        store = (backend if backend is not None else DEFAULT_BACKEND)()
        if not isinstance(store, Backend):
            raise TypeError(f"backend must produce a Backend instance, got {type(store).__name__!r}")
        self._backend = store

        if data is None:
            return

        store.update(data.items() if isinstance(data, Mapping) else data)
        pruned = self._prune()
        logger.debug("imported %d entries into %s (%d pruned)", len(store), type(store).__name__, pruned)

    def _prune(self) -> int:
        """Erase every stored entry equal to the default and return how many were erased."""
        stale = [k for k, v in self._backend.items() if v == self._default]
        for k in stale:
            self._backend.erase(k)
        return len(stale)

    @property
    def default(self) -> V:
        """The value reported for every index without an entry."""
        return self._default

    @property
    def size(self) -> int:
        """Number of stored entries."""
        return len(self._backend)

    def __len__(self) -> int:
        """Return the number of stored entries."""
        return len(self._backend)

    def get(self, index: K) -> V:
        """Return the value at index.

        Args:
            index: Any index; need not have an entry

        Returns:
            The stored value, or the default if index has no entry

        Note:
            Never inserts an entry.
        """
        return self._backend.lookup(index, self._default)  # type: ignore[no-any-return]

    def set(self, index: K, value: V) -> None:
        """Store value at index.

        Args:
            index: Index to write
            value: New value; if equal to the default, the entry is removed
        """
        if value == self._default:
            self._backend.erase(index)
        else:
            self._backend.assign(index, value)

    def erase(self, index: K) -> V:
        """Reset index to the default by removing its entry.

        Args:
            index: Index to reset

        Returns:
            The value that was at index before erasing (default if none)
        """
        old_value = self._backend.lookup(index, self._default)
        self._backend.erase(index)
        return old_value  # type: ignore[no-any-return]

    def __getitem__(self, index: K) -> V:
        return self.get(index)

    def __setitem__(self, index: K, value: V) -> None:
        self.set(index, value)

    def __delitem__(self, index: K) -> None:
        self._backend.erase(index)

    def __contains__(self, index: object) -> bool:
        """Return True if index has a stored entry."""
        return index in self._backend

    def begin(self) -> SequenceIterator[K, V]:
        """Return an iterator at the first stored entry."""
        return _make_iterator(self, self._backend.begin(), self._backend.traversal)

    def end(self) -> SequenceIterator[K, V]:
        """Return the past-the-end iterator."""
        return _make_iterator(self, self._backend.end(), self._backend.traversal)

    def __iter__(self) -> Iterator[Entry]:
        """Return an iterator over the stored entries in backend order."""
        return self.begin()

    def __reversed__(self) -> Iterator[Entry]:
        """Return an iterator over the stored entries from back to front.

        Raises:
            TypeError: If the backend does not support backward traversal
        """
        return algorithms.reversed_entries(self.begin(), self.end())  # type: ignore[arg-type]

    def indices(self) -> list[K]:
        """Return the indices of the stored entries in backend order."""
        return [k for k, _ in self._backend.items()]

    def values(self) -> list[V]:
        """Return the stored values in backend order."""
        return [v for _, v in self._backend.items()]

    def items(self) -> Iterator[tuple[K, V]]:
        """Return an iterator over ``(index, value)`` pairs in backend order."""
        return self._backend.items()

    def __eq__(self, other: object) -> bool:
        """Return True if self and other report the same value at every index.

        Backends may differ. Entries are compared position by position only
        when both backends enumerate equal key sets in the same order;
        otherwise each entry of self is looked up in other.
        """
        if self is other:
            return True
        if not isinstance(other, InfiniteVector):
            return NotImplemented

        # Different defaults disagree at infinitely many indices
        if self._default != other._default:
            return False
        if len(self._backend) != len(other._backend):
            return False

        if self._backend.same_order(other._backend):
            return algorithms.equal(self.begin(), self.end(), other.begin())

        # Equal sizes and no stored defaults: every entry of self found in other suffices.
        # Values match by identity first, then ==, as in the positional Entry comparison.
        missing = object()
        for index, value in self._backend.items():
            found = other._backend.lookup(index, missing)
            if found is not value and found != value:
                return False
        return True

    def __hash__(self) -> None:  # type: ignore[override]
        """Raise TypeError as InfiniteVectors are not hashable.

        Raises:
            TypeError: Always raised since InfiniteVectors are mutable
        """
        raise TypeError("unhashable type: 'InfiniteVector'")

    def __str__(self) -> str:
        """Render one ``index: value`` line per entry, or ``0`` for the zero vector."""
        if not len(self._backend):
            return "0"
        return "\n".join(f"{_format_index(k)}: {_format_value(v)}" for k, v in self._backend.items())

    def __repr__(self) -> str:
        """Return a string representation.

        Format: *<size/default>{idx: val, ..., idx: val}*
        """
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self._backend.items())
        return f"<{len(self._backend)}/{self._default!r}>{{{body}}}"

    def clear(self) -> None:
        """Remove all entries, leaving the zero vector."""
        self._backend.clear()

    def copy(self) -> Self:
        """Return a shallow copy with a copy of the backend.

        Returns:
            New InfiniteVector with the same default and entries
        """
        return type(self)(self._backend.copy(), default=self._default)

    __copy__ = copy

    @property
    def traversal(self) -> Traversal:
        """Traversal category of this vector's iterators."""
        return self._backend.traversal


def _format_index(index: Any) -> str:
    if isinstance(index, tuple):
        return f"({','.join(str(c) for c in index)})"
    return str(index)


def _format_value(value: Any) -> str:
    # %g drops trailing zeros: 23.0 -> 23
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)
