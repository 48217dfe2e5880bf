# markov/errors.py
"""
Error kinds raised by the chain store, ingestion and generation.

Every failure is a distinct exception type rooted at MarkovError, so callers
can catch the whole family or a single kind:

- NoMatch:         a seed word found no prefix (or the store is empty)
- NoSuffix:        a prefix has no recorded successor; ends a generation walk
- StorageConflict: unique-key collision on insert; recovered inside the store
- StorageFailure:  any other storage engine failure
- MalformedInput:  an ingested line lacks the author/content separator
- IngestTimeout:   the ingestion deadline expired
"""
from __future__ import annotations


class MarkovError(Exception):
    """Base class for every error raised by this package."""


class NoMatch(MarkovError, LookupError):
    def __init__(self, word: str | None = None) -> None:
        self.word = word
        if word is None:
            super().__init__("markov: no prefixes")
        else:
            super().__init__(f"markov: no prefixes match {word!r}")


class NoSuffix(MarkovError, LookupError):
    def __init__(self, prefix_id: int) -> None:
        self.prefix_id = prefix_id
        super().__init__(f"markov: no suffixes for prefix {prefix_id}")


class StorageConflict(MarkovError):
    """Unique constraint hit; the caller re-reads the existing row."""


class StorageFailure(MarkovError):
    """Storage engine error (I/O, aborted transaction, corruption, missing FTS5)."""


class MalformedInput(MarkovError, ValueError):
    def __init__(self, line_no: int, line: str) -> None:
        self.line_no = line_no
        self.line = line
        super().__init__(f"line {line_no}: expected '<author> <content>', got {line!r}")


class IngestTimeout(MarkovError, TimeoutError):
    def __init__(self, lines_done: int) -> None:
        self.lines_done = lines_done
        super().__init__(f"ingestion deadline expired after {lines_done} lines")
