# markov/engine.py
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from . import config as CFG
from .DB.api import ChainStore, make_store
from .generate import Generator, Writer
from .ingest import IngestStats, ingest, ingest_parallel
from .loader import batch_lines, iter_lines
from .models import Prefix

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - chain storage via a ChainStore (SQLite or in-memory),
      - the ingestion pipeline (markov.ingest),
      - the generation walk (markov.generate).

    Public API (used by CLI/Flask):
      * open(db_dsn):            attach a store (schema created if missing)
      * ingest(lines, ...):      feed text lines into the chain
      * ingest_paths(paths, ...): same, reading files / directories / stdin
      * generate(seeds, ...):    weighted random walk, returns the text
      * search(word):            prefixes containing a word
      * stats():                 prefix / suffix totals
      * shutdown():              close underlying resources

    Storage DSNs (via markov.DB.api.make_store):
      - "sqlite:///path/to/chain.sqlite"
      - "sqlite://:memory:"
      - "memory://"
    """

    # ------------- lifecycle -------------

    def __init__(self) -> None:
        self._store: Optional[ChainStore] = None

    def open(self, db_dsn: Optional[str] = None, *, verbose: bool = False) -> "Engine":
        if verbose or CFG.VERBOSE:
            logging.basicConfig(level=logging.INFO)

        dsn = db_dsn or CFG.DEFAULT_DSN
        log.info("Initializing chain store: %s", dsn)
        self._store = make_store(dsn)
        return self

    @property
    def store(self) -> ChainStore:
        if self._store is None:
            raise RuntimeError("Engine not initialized. Call open() first.")
        return self._store

    # ------------- ingestion -------------

    def ingest(
        self,
        lines: Iterable[str],
        *,
        order: int = CFG.DEFAULT_ORDER,
        author: str = "",
        timeout: Optional[float] = None,
        per_line: bool = False,
    ) -> IngestStats:
        return ingest(self.store, lines, order, author, timeout=timeout, per_line=per_line)

    def ingest_paths(
        self,
        paths: Sequence[str],
        *,
        order: int = CFG.DEFAULT_ORDER,
        author: str = "",
        timeout: Optional[float] = None,
        per_line: bool = False,
        workers: int = 1,
    ) -> IngestStats:
        if workers > 1:
            log.info("Ingesting %d input(s) with %d workers", len(paths), workers)
            return ingest_parallel(
                self.store, batch_lines(paths), order, author,
                workers=workers, timeout=timeout, per_line=per_line,
            )
        return self.ingest(iter_lines(paths), order=order, author=author,
                           timeout=timeout, per_line=per_line)

    # ------------- query -------------

    def generate(
        self,
        seeds: Sequence[str] = (),
        writer: Optional[Writer] = None,
        *,
        seed: Optional[int] = None,
        max_words: Optional[int] = None,
    ) -> str:
        gen = Generator(self.store, seed=seed, max_words=max_words)
        if writer is not None:
            return gen.generate(seeds, writer)
        return gen.generate_text(seeds)

    def search(self, word: str, *, limit: Optional[int] = CFG.TOP_N_PREFIXES) -> List[Prefix]:
        hits = self.store.find_prefixes_containing(word)
        return hits[:limit] if limit else hits

    def stats(self) -> Dict[str, int]:
        return {"prefixes": self.store.count_prefixes(), "suffixes": self.store.count_suffixes()}

    # ------------- teardown -------------

    def shutdown(self) -> None:
        try:
            if self._store:
                self._store.close()
        finally:
            self._store = None
            log.info("Engine shutdown complete")
