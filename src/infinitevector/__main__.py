"""Command line entry point: ``python -m infinitevector {demo,bench}``."""

from __future__ import annotations

import argparse
import itertools
import logging
import sys
import time
from typing import TYPE_CHECKING

from infinitevector import algorithms
from infinitevector.backends import HashedBackend, OrderedBackend
from infinitevector.infinitevector import InfiniteVector
from infinitevector.keys import cantor_index, cantor_order

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from typing import Any, TextIO

logger = logging.getLogger("infinitevector")

# Default upper bound per tuple component, by key arity
BENCH_SIZES = {2: 200, 3: 30}


def _answer(flag: bool) -> str:
    return "  ... yes!" if flag else "  ... no!"


def run_demo(out: TextIO) -> None:
    """Walk through construction, rendering, equality and counting."""
    v: InfiniteVector[int, float] = InfiniteVector()
    print("- a zero vector v:", file=out)
    print(v, file=out)

    wmap = {42: 23.0, 123: 23.0}
    w = InfiniteVector(wmap)
    print("- a vector w created from a mapping:", file=out)
    print(w, file=out)

    a: InfiniteVector[int, float] = InfiniteVector()
    b: InfiniteVector[int, float] = InfiniteVector()
    a[1] = 2.5
    b[2] = 2.5
    print("- are the vectors a and b equal?", file=out)
    print(_answer(a == b), file=out)

    ay: InfiniteVector[int, float] = InfiniteVector(backend=HashedBackend)
    by: InfiniteVector[int, float] = InfiniteVector()
    print("- are the empty vectors ay and by equal?", file=out)
    print(_answer(ay == by), file=out)

    print("- are the vectors v and w equal?", file=out)
    print(_answer(v == w), file=out)

    wh = InfiniteVector(reversed(list(wmap.items())), backend=HashedBackend)
    print("- is w equal to a hashed vector with the same entries?", file=out)
    print(_answer(w == wh), file=out)

    number = 23.0
    print(f"- wmap contains {sum(1 for x in wmap.values() if x == number)} times the number {number:g}", file=out)
    hits = algorithms.count_if(w.begin(), w.end(), lambda e: e.value == number)
    print(f"- w contains {hits} times the number {number:g}", file=out)


def _timed(
    label: str, make: Callable[[], InfiniteVector[Any, float]], keys: Sequence[Any]
) -> tuple[str, float, float, InfiniteVector[Any, float]]:
    start = time.perf_counter()
    vec = make()
    for k in keys:
        vec[k] = 1.0
    write = time.perf_counter() - start

    start = time.perf_counter()
    for k in keys:
        vec.get(k)
    read = time.perf_counter() - start
    logger.debug("%s: %d entries", label, len(vec))
    return label, write, read, vec


def run_bench(size: int, arity: int, out: TextIO) -> bool:
    """Time writes and reads of tuple keys against Cantor-encoded integer keys.

    Returns:
        True if all tuple-keyed vectors compared equal, as did all
        integer-keyed ones
    """
    tuples = list(itertools.product(range(size), repeat=arity))
    flat = [cantor_index(t) for t in tuples]
    logger.info("benchmarking %d keys of arity %d", len(tuples), arity)

    def cantor_ordered() -> OrderedBackend[Any, float]:
        return OrderedBackend(key=cantor_order)

    tuple_runs = [
        _timed("tuple keys, lexicographic order", lambda: InfiniteVector(), tuples),
        _timed("tuple keys, cantor order", lambda: InfiniteVector(backend=cantor_ordered), tuples),
        _timed("tuple keys, hashed", lambda: InfiniteVector(backend=HashedBackend), tuples),
    ]
    flat_runs = [
        _timed("cantor-encoded int keys, ordered", lambda: InfiniteVector(), flat),
        _timed("cantor-encoded int keys, hashed", lambda: InfiniteVector(backend=HashedBackend), flat),
    ]

    for label, write, read, _ in tuple_runs + flat_runs:
        print(f"{label:<36} write {write:8.4f}s  read {read:8.4f}s", file=out)

    consistent = all(run[3] == tuple_runs[0][3] for run in tuple_runs) and all(
        run[3] == flat_runs[0][3] for run in flat_runs
    )
    print(f"consistent: {'yes' if consistent else 'no'}", file=out)
    return consistent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="infinitevector", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("demo", help="walk through the basic operations")

    bench = commands.add_parser("bench", help="compare tuple keys with Cantor-encoded integer keys")
    bench.add_argument("--arity", type=int, choices=sorted(BENCH_SIZES), default=2)
    bench.add_argument("--size", type=int, default=None, help="upper bound per key component")
    return parser


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    out = out if out is not None else sys.stdout

    if args.command == "demo":
        run_demo(out)
        return 0

    size = args.size if args.size is not None else BENCH_SIZES[args.arity]
    if size < 1:
        logger.error("--size must be positive, got %d", size)
        return 2
    return 0 if run_bench(size, args.arity, out) else 1


if __name__ == "__main__":
    sys.exit(main())
