"""An infinite-dimensional vector that stores only its finitely many non-default entries.

See README.md for complete documentation and usage examples.
"""

import logging

from infinitevector.backends import Backend, BackendCursor, HashedBackend, OrderedBackend, Traversal
from infinitevector.infinitevector import InfiniteVector
from infinitevector.iterator import BidirectionalSequenceIterator, Entry, SequenceIterator

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Backend",
    "BackendCursor",
    "BidirectionalSequenceIterator",
    "Entry",
    "HashedBackend",
    "InfiniteVector",
    "OrderedBackend",
    "SequenceIterator",
    "Traversal",
]
