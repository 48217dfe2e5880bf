# markov/DB/api.py
from __future__ import annotations
import bisect
import random
from itertools import accumulate
from typing import List, Optional, Protocol, Sequence

from ..models import Prefix, Suffix
from ..tuples import TextTuple


class ChainStore(Protocol):
    # Write (ingestion)
    def upsert_prefix(self, t: TextTuple, order: int, author: str) -> int: ...
    def increment_suffix(self, prefix_id: int, word: str) -> None: ...
    # Read (generation)
    def find_prefixes_containing(self, word: str) -> List[Prefix]: ...
    def random_prefix(self, rng: Optional[random.Random] = None) -> Prefix: ...
    def random_suffix(self, prefix_id: int, rng: Optional[random.Random] = None) -> Suffix: ...
    def lookup_prefix(self, t: TextTuple, author: Optional[str] = None) -> Optional[Prefix]: ...
    def get_prefix(self, prefix_id: int) -> Prefix: ...
    def suffixes_of(self, prefix_id: int) -> List[Suffix]: ...
    # Stats / maintenance
    def count_prefixes(self) -> int: ...
    def count_suffixes(self) -> int: ...
    def rebuild_index(self) -> None: ...
    # lifecycle
    def close(self) -> None: ...


def make_store(dsn: str) -> ChainStore:
    """
    Factory:
      - sqlite:///path      -> SQLiteStore on a file (schema applied if missing)
      - sqlite://:memory:   -> SQLiteStore on a private in-memory database
      - memory://           -> MemoryStore (pure Python, same contract)
    """
    if dsn.startswith("sqlite:///"):
        from .sqlite_store import SQLiteStore
        return SQLiteStore(dsn.removeprefix("sqlite:///"))

    if dsn == "sqlite://:memory:":
        from .sqlite_store import SQLiteStore
        return SQLiteStore(":memory:")

    if dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        return MemoryStore()

    raise ValueError(f"Unsupported store DSN: {dsn}")


def pick_weighted(suffixes: Sequence[Suffix], rng: random.Random) -> Suffix:
    """Pick one suffix with probability proportional to its count."""
    cumulative = list(accumulate(s.count for s in suffixes))
    r = rng.randrange(cumulative[-1])
    return suffixes[bisect.bisect_right(cumulative, r)]
