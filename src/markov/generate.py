# markov/generate.py
from __future__ import annotations

import logging
import random
from enum import Enum
from typing import List, Optional, Protocol, Sequence

from .DB.api import ChainStore
from .errors import NoSuffix
from .models import Prefix
from .tuples import Direction

log = logging.getLogger(__name__)


class Writer(Protocol):
    def write(self, s: str) -> object: ...


class State(Enum):
    SEEKING = "seeking"   # finding the starting prefix
    WALKING = "walking"   # sampling suffixes
    DONE = "done"


class Generator:
    """
    Weighted random walk over a chain store.

    The walk starts from the first prefix containing the first seed word (or
    a uniformly random prefix without seeds), emits the prefix words, then
    repeatedly samples a successor proportionally to its count and slides the
    window forward. It ends when the current prefix has no successor. There
    is no length cap unless `max_words` is given.

    Pass `seed` (or an `rng`) for a reproducible walk.
    """

    def __init__(
        self,
        store: ChainStore,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        max_words: Optional[int] = None,
    ) -> None:
        self.store = store
        self.rng = rng if rng is not None else random.Random(seed)
        self.max_words = max_words
        self.state = State.SEEKING

    def start(self, seeds: Sequence[str] = ()) -> Prefix:
        if seeds:
            return self.store.find_prefixes_containing(seeds[0])[0]
        return self.store.random_prefix(self.rng)

    def walk(self, seeds: Sequence[str] = ()) -> List[str]:
        self.state = State.SEEKING
        try:
            current = self.start(seeds)
            log.debug("Starting prefix #%d %s", current.id, current)
            self.state = State.WALKING

            words = current.words()
            window = current.tuple.copy()
            added = 0
            while self.max_words is None or added < self.max_words:
                try:
                    suf = self.store.random_suffix(current.id, self.rng)
                except NoSuffix:
                    break
                words.append(suf.word)
                added += 1
                window.shift(suf.word, Direction.FORWARD)

                nxt = self.store.lookup_prefix(window, current.author)
                if nxt is None:
                    # the shifted window was never observed as a prefix
                    break
                current = nxt
            return words
        finally:
            self.state = State.DONE

    def generate(self, seeds: Sequence[str], writer: Writer) -> str:
        """Write the space-joined walk to `writer` (no trailing newline)."""
        text = " ".join(self.walk(seeds))
        writer.write(text)
        return text

    def generate_text(self, seeds: Sequence[str] = ()) -> str:
        return " ".join(self.walk(seeds))
