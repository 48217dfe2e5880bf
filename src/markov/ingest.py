# markov/ingest.py
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterable, List, Optional

from . import config as CFG
from .DB.api import ChainStore
from .errors import IngestTimeout, MalformedInput
from .normalize import split_author, split_words
from .tuples import Direction, TextTuple

log = logging.getLogger(__name__)


@dataclass
class IngestStats:
    lines: int = 0          # non-blank lines consumed
    words: int = 0          # words read, warm-up included
    observations: int = 0   # (prefix, suffix) pairs written

    def merge(self, other: "IngestStats") -> "IngestStats":
        return IngestStats(
            lines=self.lines + other.lines,
            words=self.words + other.words,
            observations=self.observations + other.observations,
        )


def ingest(
    store: ChainStore,
    lines: Iterable[str],
    order: int = CFG.DEFAULT_ORDER,
    author: str = "",
    *,
    timeout: Optional[float] = None,
    per_line: bool = False,
) -> IngestStats:
    """
    Feed a stream of lines into the chain.

    If author is empty, every line must be '<author> <content>'; otherwise
    lines are pure content attributed to `author`. One working tuple is kept
    for the whole stream, so windows span line breaks: only the first `order`
    words of the stream fill the window (warm-up). With per_line=True the
    warm-up restarts on every line and no observation crosses a line break.

    Every later word W produces one observation: the current window is
    upserted as a prefix, W is counted as its suffix, then W is shifted in.
    The first storage error, malformed line or expired `timeout` (seconds)
    stops the stream; observations already written stay committed.
    """
    deadline = time.monotonic() + timeout if timeout is not None else None
    return _ingest(store, lines, order, author, deadline, per_line)


def ingest_parallel(
    store: ChainStore,
    batches: Iterable[Iterable[str]],
    order: int = CFG.DEFAULT_ORDER,
    author: str = "",
    *,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
    per_line: bool = False,
) -> IngestStats:
    """Ingest independent line batches concurrently (one working tuple per batch)."""
    deadline = time.monotonic() + timeout if timeout is not None else None
    total = IngestStats()
    with ThreadPoolExecutor(max_workers=workers or CFG.INGEST_WORKERS) as ex:
        futures = [
            ex.submit(_ingest, store, batch, order, author, deadline, per_line)
            for batch in batches
        ]
        try:
            for fut in as_completed(futures):
                total = total.merge(fut.result())
        except BaseException:
            for fut in futures:
                fut.cancel()
            raise
    return total


def _ingest(
    store: ChainStore,
    lines: Iterable[str],
    order: int,
    author: str,
    deadline: Optional[float],
    per_line: bool,
) -> IngestStats:
    if order < 1:
        raise ValueError(f"order must be >= 1, got {order}")

    stats = IngestStats()
    window = TextTuple(order)
    seen = 0
    ts = time.monotonic()

    for line_no, line in enumerate(lines, start=1):
        _check_deadline(deadline, stats)
        if not line.strip():
            continue

        auth, content = author, line
        if not author:
            auth, content = split_author(line)
            if not content.strip():
                raise MalformedInput(line_no, line)

        if per_line:
            seen = 0
        for word in split_words(content):
            stats.words += 1
            if seen < order:
                window.shift(word, Direction.FORWARD)
                seen += 1
                continue

            _check_deadline(deadline, stats)
            pid = store.upsert_prefix(window.copy(), order, auth)
            store.increment_suffix(pid, word)
            stats.observations += 1

            window.shift(word, Direction.FORWARD)

        stats.lines += 1
        now = time.monotonic()
        log.debug("%-12.6f: %r", now - ts, content)
        ts = now

    log.info(
        "Ingested lines=%d words=%d observations=%d (order=%d)",
        stats.lines, stats.words, stats.observations, order,
    )
    return stats


def _check_deadline(deadline: Optional[float], stats: IngestStats) -> None:
    if deadline is not None and time.monotonic() >= deadline:
        log.warning("Ingestion deadline expired after %d lines", stats.lines)
        raise IngestTimeout(stats.lines)
