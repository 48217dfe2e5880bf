# markov/DB/memory_store.py
from __future__ import annotations
import random
import threading
from collections import defaultdict
from typing import Dict, List, Optional, Set, Tuple

from ..errors import NoMatch, NoSuffix, StorageFailure
from ..models import Prefix, Suffix
from ..normalize import contains_phrase, index_tokens
from ..tuples import TextTuple
from .api import ChainStore, pick_weighted


class MemoryStore(ChainStore):
    """In-memory chain store (useful for tests or ephemeral runs)."""
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._prefixes: Dict[int, Prefix] = {}
        self._by_key: Dict[Tuple[str, str], int] = {}       # (tuple text, author) -> id
        self._by_text: Dict[str, List[int]] = defaultdict(list)
        self._index: Dict[str, Set[int]] = defaultdict(set)  # token -> prefix ids
        self._suffixes: Dict[int, Dict[str, Suffix]] = defaultdict(dict)
        self._next_prefix = 1
        self._next_suffix = 1

    # ---- Write ----
    def upsert_prefix(self, t: TextTuple, order: int, author: str) -> int:
        key = (t.encode(), author)
        with self._lock:
            pid = self._by_key.get(key)
            if pid is not None:
                return pid
            pid = self._next_prefix
            self._next_prefix += 1
            self._prefixes[pid] = Prefix(id=pid, tuple=t.copy(), order=order, author=author)
            self._by_key[key] = pid
            self._by_text[key[0]].append(pid)
            for tok in index_tokens(key[0]):
                self._index[tok].add(pid)
            return pid

    def increment_suffix(self, prefix_id: int, word: str) -> None:
        with self._lock:
            if prefix_id not in self._prefixes:
                raise StorageFailure(f"suffix refers to unknown prefix {prefix_id}")
            bucket = self._suffixes[prefix_id]
            cur = bucket.get(word)
            if cur is None:
                bucket[word] = Suffix(id=self._next_suffix, prefix_id=prefix_id, word=word, count=1)
                self._next_suffix += 1
            else:
                bucket[word] = Suffix(id=cur.id, prefix_id=prefix_id, word=word, count=cur.count + 1)

    # ---- Read ----
    def find_prefixes_containing(self, word: str) -> List[Prefix]:
        toks = index_tokens(word)
        if not toks:
            raise NoMatch(word)
        with self._lock:
            ids = set.intersection(*(self._index.get(tok, set()) for tok in toks))
            hits = [
                self._prefixes[pid] for pid in sorted(ids)
                if contains_phrase(index_tokens(self._prefixes[pid].tuple.encode()), toks)
            ]
        if not hits:
            raise NoMatch(word)
        return [_clone(p) for p in hits]

    def random_prefix(self, rng: Optional[random.Random] = None) -> Prefix:
        rng = rng if rng is not None else random.Random()
        with self._lock:
            if not self._prefixes:
                raise NoMatch()
            return _clone(self._prefixes[rng.choice(list(self._prefixes))])

    def random_suffix(self, prefix_id: int, rng: Optional[random.Random] = None) -> Suffix:
        suffixes = self.suffixes_of(prefix_id)
        if not suffixes:
            raise NoSuffix(prefix_id)
        return pick_weighted(suffixes, rng if rng is not None else random.Random())

    def lookup_prefix(self, t: TextTuple, author: Optional[str] = None) -> Optional[Prefix]:
        text = t.encode()
        with self._lock:
            if author is not None and (text, author) in self._by_key:
                return _clone(self._prefixes[self._by_key[(text, author)]])
            ids = self._by_text.get(text)
            return _clone(self._prefixes[ids[0]]) if ids else None

    def get_prefix(self, prefix_id: int) -> Prefix:
        with self._lock:
            return _clone(self._prefixes[prefix_id])

    def suffixes_of(self, prefix_id: int) -> List[Suffix]:
        with self._lock:
            return sorted(self._suffixes.get(prefix_id, {}).values(), key=lambda s: s.id)

    # ---- Stats / maintenance ----
    def count_prefixes(self) -> int:
        with self._lock:
            return len(self._prefixes)

    def count_suffixes(self) -> int:
        with self._lock:
            return sum(len(b) for b in self._suffixes.values())

    def rebuild_index(self) -> None:
        with self._lock:
            self._index.clear()
            for pid, p in self._prefixes.items():
                for tok in index_tokens(p.tuple.encode()):
                    self._index[tok].add(pid)

    def close(self) -> None:
        with self._lock:
            self._prefixes.clear()
            self._by_key.clear()
            self._by_text.clear()
            self._index.clear()
            self._suffixes.clear()


def _clone(p: Prefix) -> Prefix:
    # Callers may shift the returned tuple; never hand out the stored one.
    return Prefix(id=p.id, tuple=p.tuple.copy(), order=p.order, author=p.author)
