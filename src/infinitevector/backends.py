"""Pluggable key-value stores behind :class:`~infinitevector.InfiniteVector`.

A backend is a unique-keyed mapping with a deliberately small surface:
insert-or-update, lookup with an explicit fallback, erase, and positional
cursors. It has no indexing syntax, so a failed lookup can never insert an
entry as a side effect.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from bisect import bisect_left, bisect_right, insort
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

if TYPE_CHECKING:
    import sys
    from collections.abc import Callable, Iterable, Iterator, Mapping

    if sys.version_info < (3, 11):
        from typing_extensions import Self
    else:
        from typing import Self

K = TypeVar("K")
V = TypeVar("V")

# Names that would turn a backend into an array-style map
_FORBIDDEN_METHODS = ("__getitem__", "__setitem__", "__missing__")


class Traversal(enum.Enum):
    """Traversal category of a cursor."""

    FORWARD = "forward"
    BIDIRECTIONAL = "bidirectional"


class BackendCursor(ABC, Generic[K, V]):
    """Immutable position inside a backend.

    Moving a cursor returns a new cursor; the original keeps its position.
    """

    @abstractmethod
    def at_end(self) -> bool:
        """Return True if the cursor sits past the last entry."""

    @abstractmethod
    def item(self) -> tuple[K, V]:
        """Return the ``(key, value)`` pair at this position.

        Raises:
            IndexError: If the cursor is at the end
            RuntimeError: If the cursor was invalidated by a mutation
        """

    @abstractmethod
    def successor(self) -> Self:
        """Return a cursor at the next entry.

        Raises:
            IndexError: If the cursor is at the end
            RuntimeError: If the cursor was invalidated by a mutation
        """

    def predecessor(self) -> Self:
        """Return a cursor at the previous entry (bidirectional backends only).

        Raises:
            TypeError: If the backend only supports forward traversal
        """
        raise TypeError(f"{type(self).__name__} does not support backward traversal")

    @abstractmethod
    def __eq__(self, other: object) -> bool:
        """Return True if both cursors denote the same position of the same backend."""


class Backend(ABC, Generic[K, V]):
    """Capability contract for stores usable by an InfiniteVector."""

    #: Traversal category offered by this backend's cursors.
    traversal: ClassVar[Traversal]

    #: True if iteration follows a deterministic ascending key order.
    ordered: ClassVar[bool]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for name in _FORBIDDEN_METHODS:
            if name in vars(cls):
                raise TypeError(f"backend {cls.__name__} must not define {name}; use lookup() and assign()")

    @abstractmethod
    def lookup(self, key: K, default: Any) -> Any:
        """Return the value stored for key, or default. Never mutates."""

    @abstractmethod
    def assign(self, key: K, value: V) -> None:
        """Insert key with value, or overwrite the existing value."""

    @abstractmethod
    def erase(self, key: K) -> bool:
        """Remove key.

        Returns:
            True if an entry was removed, False if key was absent
        """

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def __contains__(self, key: object) -> bool: ...

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries."""

    @abstractmethod
    def copy(self) -> Self:
        """Return a shallow copy with the same configuration."""

    @abstractmethod
    def begin(self) -> BackendCursor[K, V]:
        """Return a cursor at the first entry (equal to end() when empty)."""

    @abstractmethod
    def end(self) -> BackendCursor[K, V]:
        """Return the past-the-end cursor."""

    def update(self, pairs: Iterable[tuple[K, V]]) -> None:
        """Assign every ``(key, value)`` pair in order."""
        for key, value in pairs:
            self.assign(key, value)

    def items(self) -> Iterator[tuple[K, V]]:
        """Yield ``(key, value)`` pairs in cursor order."""
        cursor = self.begin()
        while not cursor.at_end():
            yield cursor.item()
            cursor = cursor.successor()

    def same_order(self, other: Backend[Any, Any]) -> bool:
        """Return True if self and other iterate equal key sets in the same order."""
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"


# Past-the-end marker for ordered cursors
_END = object()


class _OrderedCursor(BackendCursor[K, V]):
    __slots__ = ("_backend", "_key")

    def __init__(self, backend: OrderedBackend[K, V], key: Any) -> None:
        self._backend = backend
        self._key = key

    def at_end(self) -> bool:
        return self._key is _END

    def item(self) -> tuple[K, V]:
        if self._key is _END:
            raise IndexError("dereference of end cursor")
        values = self._backend._values
        if self._key not in values:
            raise RuntimeError(f"cursor invalidated: key {self._key!r} was erased")
        return self._key, values[self._key]

    def successor(self) -> _OrderedCursor[K, V]:
        if self._key is _END:
            raise IndexError("cannot advance past end")
        backend = self._backend
        pos = backend._bisect(bisect_right, self._key)
        return _OrderedCursor(backend, backend._keys[pos] if pos < len(backend._keys) else _END)

    def predecessor(self) -> _OrderedCursor[K, V]:
        backend = self._backend
        pos = len(backend._keys) if self._key is _END else backend._bisect(bisect_left, self._key)
        if pos == 0:
            raise IndexError("cannot step back before begin")
        return _OrderedCursor(backend, backend._keys[pos - 1])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _OrderedCursor):
            return NotImplemented
        if self._backend is not other._backend:
            return False
        if self._key is _END or other._key is _END:
            return self._key is other._key
        return bool(self._key == other._key)

    def __repr__(self) -> str:
        return f"<ordered cursor at {'end' if self._key is _END else repr(self._key)}>"


class OrderedBackend(Backend[K, V]):
    """Sorted store with bidirectional cursors.

    Values live in a dict; a parallel key list is kept sorted with :mod:`bisect`,
    either by the keys themselves or by ``key(k)`` when a sort key is given.
    The sort key must be injective on the stored keys.

    A cursor is bound to a key, not a list slot. Erasing an entry invalidates
    only cursors on that entry; advancing such a cursor still moves to the
    next greater stored key.
    """

    traversal = Traversal.BIDIRECTIONAL
    ordered = True

    def __init__(
        self,
        data: Mapping[K, V] | Iterable[tuple[K, V]] | None = None,
        *,
        key: Callable[[K], Any] | None = None,
    ) -> None:
        self._sort_key = key
        self._values: dict[K, V] = {}
        self._keys: list[K] = []
        if data is not None:
            pairs = data.items() if hasattr(data, "items") else data
            self._values = dict(pairs)  # type: ignore[arg-type]
            self._keys = sorted(self._values, key=key)  # type: ignore[arg-type]

    @property
    def sort_key(self) -> Callable[[K], Any] | None:
        """The sort key function, or None for natural key order."""
        return self._sort_key

    def _bisect(self, search: Callable[..., int], key: Any) -> int:
        if self._sort_key is None:
            return search(self._keys, key)
        return search(self._keys, self._sort_key(key), key=self._sort_key)

    def lookup(self, key: K, default: Any) -> Any:
        return self._values.get(key, default)

    def assign(self, key: K, value: V) -> None:
        if key not in self._values:
            insort(self._keys, key, key=self._sort_key)
        self._values[key] = value

    def update(self, pairs: Iterable[tuple[K, V]]) -> None:
        # One sort for the whole batch instead of an insort per new key
        size = len(self._values)
        self._values.update(pairs)
        if len(self._values) != size:
            self._keys = sorted(self._values, key=self._sort_key)  # type: ignore[arg-type]

    def erase(self, key: K) -> bool:
        if key not in self._values:
            return False
        del self._values[key]
        del self._keys[self._bisect(bisect_left, key)]
        return True

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def clear(self) -> None:
        self._values.clear()
        self._keys.clear()

    def copy(self) -> OrderedBackend[K, V]:
        result: OrderedBackend[K, V] = OrderedBackend(key=self._sort_key)
        result._values = self._values.copy()
        result._keys = self._keys.copy()
        return result

    def begin(self) -> _OrderedCursor[K, V]:
        return _OrderedCursor(self, self._keys[0] if self._keys else _END)

    def end(self) -> _OrderedCursor[K, V]:
        return _OrderedCursor(self, _END)

    def items(self) -> Iterator[tuple[K, V]]:
        # Direct walk over the sorted key list
        values = self._values
        return ((k, values[k]) for k in self._keys)

    def same_order(self, other: Backend[Any, Any]) -> bool:
        return isinstance(other, OrderedBackend) and self._sort_key == other._sort_key


class _HashedCursor(BackendCursor[K, V]):
    __slots__ = ("_backend", "_pos", "_version")

    def __init__(self, backend: HashedBackend[K, V], pos: int) -> None:
        self._backend = backend
        self._pos = pos
        self._version = backend._version

    def _check(self) -> list[K]:
        if self._version != self._backend._version:
            raise RuntimeError("cursor invalidated: backend changed size during iteration")
        return self._backend._order()

    def at_end(self) -> bool:
        return self._pos >= len(self._check())

    def item(self) -> tuple[K, V]:
        order = self._check()
        if self._pos >= len(order):
            raise IndexError("dereference of end cursor")
        key = order[self._pos]
        return key, self._backend._table[key]

    def successor(self) -> _HashedCursor[K, V]:
        if self._pos >= len(self._check()):
            raise IndexError("cannot advance past end")
        return _HashedCursor(self._backend, self._pos + 1)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _HashedCursor):
            return NotImplemented
        return self._backend is other._backend and self._version == other._version and self._pos == other._pos

    def __repr__(self) -> str:
        return f"<hashed cursor at slot {self._pos}>"


class HashedBackend(Backend[K, V]):
    """Hash-table store with forward-only cursors.

    Iteration order is unspecified but stable while no entry is added or
    removed. Any such structural change invalidates every outstanding cursor;
    overwriting the value of an existing key does not.
    """

    traversal = Traversal.FORWARD
    ordered = False

    def __init__(self, data: Mapping[K, V] | Iterable[tuple[K, V]] | None = None) -> None:
        self._table: dict[K, V] = {}
        self._version = 0
        self._snapshot: list[K] | None = None
        if data is not None:
            pairs = data.items() if hasattr(data, "items") else data
            self._table = dict(pairs)  # type: ignore[arg-type]

    def _order(self) -> list[K]:
        if self._snapshot is None:
            self._snapshot = list(self._table)
        return self._snapshot

    def _touch(self) -> None:
        self._version += 1
        self._snapshot = None

    def lookup(self, key: K, default: Any) -> Any:
        return self._table.get(key, default)

    def assign(self, key: K, value: V) -> None:
        if key not in self._table:
            self._touch()
        self._table[key] = value

    def erase(self, key: K) -> bool:
        if key not in self._table:
            return False
        del self._table[key]
        self._touch()
        return True

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def clear(self) -> None:
        self._table.clear()
        self._touch()

    def copy(self) -> HashedBackend[K, V]:
        return HashedBackend(self._table)

    def begin(self) -> _HashedCursor[K, V]:
        return _HashedCursor(self, 0)

    def end(self) -> _HashedCursor[K, V]:
        return _HashedCursor(self, len(self._table))
