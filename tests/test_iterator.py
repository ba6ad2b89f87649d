# tests/test_iterator.py
import copy

import pytest

from infinitevector import (
    BidirectionalSequenceIterator,
    Entry,
    HashedBackend,
    InfiniteVector,
    OrderedBackend,
    SequenceIterator,
    Traversal,
    algorithms,
)

backend_variants = {
    "ordered": OrderedBackend,
    "hashed": HashedBackend,
}


def _second_equal_to(number):
    """Predicate matching entries whose value equals number."""
    return lambda entry: entry.value == number


# ---------------------
# Dereference tests
# ---------------------
@pytest.mark.parametrize("backend", list(backend_variants.values()), ids=list(backend_variants))
def test_dereference(backend):
    """Test entry(), index() and value() at the first position."""
    v = InfiniteVector([(42, 23.0)], backend=backend)
    it = v.begin()

    assert it.entry() == Entry(42, 23.0)
    assert it.entry() == (42, 23.0)
    assert it.index() == 42
    assert it.value() == 23.0


@pytest.mark.parametrize("backend", list(backend_variants.values()), ids=list(backend_variants))
def test_dereference_end_raises(backend):
    """Test that dereferencing or advancing the end iterator raises IndexError."""
    v = InfiniteVector({42: 23.0}, backend=backend)
    end = v.end()

    with pytest.raises(IndexError):
        end.entry()
    with pytest.raises(IndexError):
        end.index()
    with pytest.raises(IndexError):
        end.value()
    with pytest.raises(IndexError):
        end.increment()


@pytest.mark.parametrize("backend", list(backend_variants.values()), ids=list(backend_variants))
def test_empty_begin_equals_end(backend):
    """Test that an empty vector's begin and end coincide."""
    v = InfiniteVector(backend=backend)

    assert v.begin() == v.end()
    assert v.begin().at_end()
    with pytest.raises(IndexError):
        v.begin().entry()


# ---------------------
# Increment tests
# ---------------------
def test_prefix_increment():
    """Test that increment() advances in place and returns the iterator itself."""
    v = InfiniteVector({42: 23.0, 123: 23.0})
    it = v.begin()

    assert it.increment() is it
    assert it.index() == 123
    it.increment()
    assert it == v.end()


def test_postfix_increment():
    """Test that post_increment() returns a copy at the old position."""
    v = InfiniteVector({42: 23.0, 123: 23.0})
    it = v.begin()
    old = it.post_increment()

    assert old is not it
    assert old.index() == 42
    assert it.index() == 123
    assert old == v.begin()


@pytest.mark.parametrize("backend", list(backend_variants.values()), ids=list(backend_variants))
def test_cursor_walk_matches_iteration(backend):
    """Test that walking from begin to end visits the same entries as iteration."""
    v = InfiniteVector([(5, "e"), (1, "a"), (3, "c")], backend=backend)

    walked = []
    it = v.begin()
    while it != v.end():
        walked.append(it.entry())
        it.increment()

    assert walked == list(v)
    assert len(walked) == len(v)


@pytest.mark.parametrize("backend", list(backend_variants.values()), ids=list(backend_variants))
def test_begin_yields_independent_iterators(backend):
    """Test that repeated begin() calls give independent cursors."""
    v = InfiniteVector([(1, "a"), (2, "b")], backend=backend)
    it1 = v.begin()
    it2 = v.begin()
    first = it1.index()

    it1.increment()

    assert it2.index() == first
    assert it1 != it2


@pytest.mark.parametrize("copy_method", ["method", "copy_module"], ids=["copy()", "copy.copy"])
def test_copy_is_independent(copy_method):
    """Test that copying an iterator gives an independent cursor at the same position."""
    v = InfiniteVector({1: "a", 2: "b"})
    it = v.begin()
    dup = it.copy() if copy_method == "method" else copy.copy(it)

    assert dup == it
    assert type(dup) is type(it)
    dup.increment()
    assert it.index() == 1
    assert dup.index() == 2


# ---------------------
# Decrement and category tests
# ---------------------
def test_ordered_iterators_are_bidirectional():
    """Test the traversal tag and class of ordered-backend iterators."""
    v = InfiniteVector({1: 1.0})

    assert isinstance(v.begin(), BidirectionalSequenceIterator)
    assert v.begin().traversal is Traversal.BIDIRECTIONAL
    assert v.traversal is Traversal.BIDIRECTIONAL


def test_hashed_iterators_are_forward_only():
    """Test that hashed-backend iterators declare forward traversal and cannot step back."""
    v = InfiniteVector({1: 1.0}, backend=HashedBackend)
    it = v.begin()

    assert type(it) is SequenceIterator
    assert it.traversal is Traversal.FORWARD
    assert v.traversal is Traversal.FORWARD
    assert not hasattr(it, "decrement")
    assert not hasattr(it, "post_decrement")


def test_decrement():
    """Test prefix and postfix decrement from the end."""
    v = InfiniteVector({42: 23.0, 123: 24.0})
    it = v.end()

    assert it.decrement() is it
    assert it.entry() == (123, 24.0)

    old = it.post_decrement()
    assert old.index() == 123
    assert it.index() == 42
    assert it == v.begin()


def test_decrement_before_begin_raises():
    """Test that stepping back from the first entry raises IndexError."""
    v = InfiniteVector({42: 23.0})

    with pytest.raises(IndexError):
        v.begin().decrement()
    with pytest.raises(IndexError):
        InfiniteVector().end().decrement()


# ---------------------
# Iterator comparison tests
# ---------------------
def test_iterators_of_different_vectors_unequal():
    """Test that iterators of distinct vectors never compare equal."""
    a = InfiniteVector({1: 1.0})
    b = InfiniteVector({1: 1.0})

    assert a.begin() != b.begin()
    assert InfiniteVector().end() != InfiniteVector().end()
    assert not (a.begin() == b.begin())


def test_iterators_not_ordered():
    """Test that iterators support no ordering comparison."""
    v = InfiniteVector({1: 1.0})

    with pytest.raises(TypeError):
        v.begin() < v.end()  # noqa: B015


def test_iterators_unhashable():
    """Test that iterators are unhashable."""
    with pytest.raises(TypeError):
        hash(InfiniteVector().begin())


# ---------------------
# Python iterator protocol tests
# ---------------------
@pytest.mark.parametrize("backend", list(backend_variants.values()), ids=list(backend_variants))
def test_iterator_protocol(backend):
    """Test next() and StopIteration on sequence iterators."""
    v = InfiniteVector([(42, 23.0), (123, 23.0)], backend=backend)
    it = iter(v)

    assert iter(it) is it
    assert {next(it), next(it)} == {Entry(42, 23.0), Entry(123, 23.0)}
    with pytest.raises(StopIteration):
        next(it)
    assert it == v.end()


def test_ordered_protocol_order():
    """Test that next() on an ordered backend follows ascending indices."""
    v = InfiniteVector({123: 23.0, 42: 23.0})

    assert list(v.begin()) == [(42, 23.0), (123, 23.0)]


# ---------------------
# Invalidation tests
# ---------------------
def test_ordered_erase_invalidates_only_erased_position():
    """Test that erasing an entry of an ordered backend leaves other cursors valid."""
    v = InfiniteVector({1: "a", 2: "b", 3: "c"})
    at_one = v.begin()
    at_two = v.begin().increment()

    del v[1]

    with pytest.raises(RuntimeError):
        at_one.entry()
    assert at_two.entry() == (2, "b")

    # An invalidated cursor still advances to the next stored index
    at_one.increment()
    assert at_one == at_two


def test_ordered_insert_keeps_cursors_valid():
    """Test that inserting into an ordered backend leaves cursors valid."""
    v = InfiniteVector({2: "b", 4: "d"})
    it = v.begin()

    v[3] = "c"
    v[0] = "z"

    assert it.entry() == (2, "b")
    assert it.increment().entry() == (3, "c")


def test_ordered_erase_while_iterating():
    """Test that entries already visited can be erased during ordered iteration."""
    v = InfiniteVector({1: "a", 2: "b", 3: "c"})

    seen = []
    for entry in v:
        seen.append(entry.index)
        del v[entry.index]

    assert seen == [1, 2, 3]
    assert len(v) == 0


def test_ordered_set_default_invalidates_position():
    """Test that pruning an entry by assigning the default invalidates its cursor."""
    v = InfiniteVector({1: 1.0, 2: 2.0})
    it = v.begin()

    v[1] = 0

    with pytest.raises(RuntimeError):
        it.value()


@pytest.mark.parametrize(
    "mutation",
    [
        lambda v: v.set(99, 1.0),
        lambda v: v.erase(1),
        lambda v: v.set(2, 0),
        lambda v: v.clear(),
    ],
    ids=["insert", "erase", "prune", "clear"],
)
def test_hashed_structural_change_invalidates_all(mutation):
    """Test that adding or removing entries of a hashed backend invalidates every cursor."""
    v = InfiniteVector({1: 1.0, 2: 2.0}, backend=HashedBackend)
    it = v.begin()
    end = v.end()

    mutation(v)

    with pytest.raises(RuntimeError):
        it.entry()
    with pytest.raises(RuntimeError):
        next(it)
    with pytest.raises(RuntimeError):
        end.increment()


def test_hashed_overwrite_keeps_cursors_valid():
    """Test that overwriting a stored value is not a structural change."""
    v = InfiniteVector({1: 1.0, 2: 2.0}, backend=HashedBackend)
    it = v.begin()
    index = it.index()

    v[index] = 5.0

    assert it.value() == 5.0
    assert it == v.begin()


def test_hashed_erase_while_iterating_raises():
    """Test that erasing during hashed iteration is detected."""
    v = InfiniteVector({1: "a", 2: "b", 3: "c"}, backend=HashedBackend)

    with pytest.raises(RuntimeError):
        for entry in v:
            del v[entry.index]


# ---------------------
# Generic algorithm tests
# ---------------------
@pytest.mark.parametrize("backend", list(backend_variants.values()), ids=list(backend_variants))
def test_count_if(backend):
    """Test counting entries by value through the iterator contract."""
    w = InfiniteVector({42: 23.0, 123: 23.0, 7: 1.0}, backend=backend)

    assert algorithms.count_if(w.begin(), w.end(), _second_equal_to(23.0)) == 2
    assert algorithms.count_if(w.begin(), w.end(), _second_equal_to(5.0)) == 0
    assert algorithms.count_if(w.begin(), w.end(), lambda e: e.index > 40) == 2


def test_count_if_leaves_iterators_untouched():
    """Test that algorithms copy their input iterators."""
    w = InfiniteVector({42: 23.0, 123: 23.0})
    first = w.begin()

    algorithms.count_if(first, w.end(), _second_equal_to(23.0))

    assert first == w.begin()


def test_equal_ordered_ranges():
    """Test pairwise comparison of two ordered ranges."""
    a = InfiniteVector({1: 1.0, 2: 2.0})
    b = InfiniteVector({2: 2.0, 1: 1.0})
    c = InfiniteVector({1: 1.0, 2: 3.0})

    assert algorithms.equal(a.begin(), a.end(), b.begin())
    assert not algorithms.equal(a.begin(), a.end(), c.begin())
    assert algorithms.equal(a.begin(), a.end(), c.begin(), lambda x, y: x.index == y.index)


def test_equal_positional_is_order_sensitive():
    """Test that pairwise comparison fails across differing orders while == does not."""
    ordered = InfiniteVector({1: 1.0, 2: 2.0})
    hashed = InfiniteVector([(2, 2.0), (1, 1.0)], backend=HashedBackend)

    assert not algorithms.equal(ordered.begin(), ordered.end(), hashed.begin())
    assert ordered == hashed


@pytest.mark.parametrize("backend", list(backend_variants.values()), ids=list(backend_variants))
def test_find_if(backend):
    """Test locating the first entry matching a predicate."""
    v = InfiniteVector({1: "a", 2: "b", 3: "c"}, backend=backend)

    found = algorithms.find_if(v.begin(), v.end(), lambda e: e.value == "b")
    assert found.entry() == (2, "b")

    missing = algorithms.find_if(v.begin(), v.end(), lambda e: e.value == "z")
    assert missing == v.end()


@pytest.mark.parametrize("backend", list(backend_variants.values()), ids=list(backend_variants))
@pytest.mark.parametrize("data", [{}, {1: 1.0}, {i: float(i) for i in range(1, 20)}], ids=["empty", "one", "many"])
def test_distance_equals_size(backend, data):
    """Test that the range length equals the number of stored entries."""
    v = InfiniteVector(data, backend=backend)

    assert algorithms.distance(v.begin(), v.end()) == len(v)


def test_reversed_entries():
    """Test reverse traversal of a bidirectional range."""
    v = InfiniteVector({3: "c", 1: "a", 2: "b"})

    assert [e.index for e in algorithms.reversed_entries(v.begin(), v.end())] == [3, 2, 1]


def test_reversed_entries_rejects_forward_iterators():
    """Test that reverse traversal of forward-only iterators fails before visiting anything."""
    v = InfiniteVector({1: "a"}, backend=HashedBackend)

    with pytest.raises(TypeError, match="bidirectional"):
        algorithms.reversed_entries(v.begin(), v.end())
