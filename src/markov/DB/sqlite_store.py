# markov/DB/sqlite_store.py
from __future__ import annotations
import logging
import os
import random
import sqlite3
import threading
import time
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence

from .. import config as CFG
from ..errors import NoMatch, NoSuffix, StorageConflict, StorageFailure
from ..models import Prefix, Suffix
from ..normalize import index_tokens
from ..tuples import TextTuple
from .api import ChainStore, pick_weighted
from .schema import SCHEMA

log = logging.getLogger(__name__)

_PREFIX_COLS = "id, tuple, ord, author"
_SUFFIX_COLS = "id, prefix_id, word, count"


class SQLiteStore(ChainStore):
    """
    Chain store on SQLite with an FTS5 index over prefix text.

    One connection is shared by every thread of the process; an RLock
    serializes transactions on it (single writer). BEGIN IMMEDIATE takes the
    database write lock up front so other connections surface as "busy",
    which is retried a bounded number of times.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path if db_path == ":memory:" else os.path.abspath(db_path)
        if self.db_path != ":memory:":
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
        self._lock = threading.RLock()
        try:
            self.conn = sqlite3.connect(
                self.db_path,
                timeout=CFG.BUSY_TIMEOUT,
                check_same_thread=False,
                isolation_level=None,  # explicit BEGIN/COMMIT below
            )
            if self.db_path != ":memory:":
                self.conn.execute("PRAGMA journal_mode=WAL;")
            self.conn.execute("PRAGMA foreign_keys=ON;")
            for stmt in SCHEMA:
                self.conn.execute(stmt)
        except sqlite3.Error as exc:
            if "fts5" in str(exc).lower():
                raise StorageFailure(f"SQLite build lacks FTS5 support: {exc}") from exc
            raise StorageFailure(f"cannot open {self.db_path}: {exc}") from exc
        log.info("Opened chain store %s", self.db_path)

    # ---- Write ----
    def upsert_prefix(self, t: TextTuple, order: int, author: str) -> int:
        text = t.encode()
        with self._tx() as c:
            try:
                return _insert_prefix(c, text, order, author)
            except StorageConflict:
                # Already present (possibly inserted by a concurrent writer): resolve to its id.
                row = c.execute(
                    "SELECT id FROM prefixes WHERE tuple=? AND author=?", (text, author)
                ).fetchone()
                return int(row[0])

    def increment_suffix(self, prefix_id: int, word: str) -> None:
        with self._tx() as c:
            c.execute(
                "INSERT INTO suffixes(prefix_id, word, count) VALUES (?,?,1) "
                "ON CONFLICT(prefix_id, word) DO UPDATE SET count = count + 1",
                (prefix_id, word),
            )

    # ---- Read ----
    def find_prefixes_containing(self, word: str) -> List[Prefix]:
        if not index_tokens(word):
            raise NoMatch(word)
        # FTS5 tokenizes the phrase itself, exactly as it tokenized the prefixes
        expr = 'tuple : "%s"' % word.replace('"', '""')
        rows = self._query(
            "SELECT p.id, p.tuple, p.ord, p.author FROM prefixes_idx "
            "JOIN prefixes p ON p.id = prefixes_idx.rowid "
            "WHERE prefixes_idx MATCH ? ORDER BY p.id",
            (expr,),
        )
        if not rows:
            raise NoMatch(word)
        return [_decode_prefix(r) for r in rows]

    def random_prefix(self, rng: Optional[random.Random] = None) -> Prefix:
        rng = rng if rng is not None else random.Random()
        (max_id,) = self._query("SELECT MAX(id) FROM prefixes")[0]
        if max_id is None:
            raise NoMatch()
        for _ in range(CFG.RANDOM_PROBES):
            rows = self._query(
                f"SELECT {_PREFIX_COLS} FROM prefixes WHERE id=?", (rng.randint(1, int(max_id)),)
            )
            if rows:
                return _decode_prefix(rows[0])
        # Too many holes in the id range: pick by position instead.
        (n,) = self._query("SELECT COUNT(*) FROM prefixes")[0]
        if not n:
            raise NoMatch()
        rows = self._query(
            f"SELECT {_PREFIX_COLS} FROM prefixes ORDER BY id LIMIT 1 OFFSET ?", (rng.randrange(int(n)),)
        )
        return _decode_prefix(rows[0])

    def random_suffix(self, prefix_id: int, rng: Optional[random.Random] = None) -> Suffix:
        suffixes = self.suffixes_of(prefix_id)
        if not suffixes:
            raise NoSuffix(prefix_id)
        return pick_weighted(suffixes, rng if rng is not None else random.Random())

    def lookup_prefix(self, t: TextTuple, author: Optional[str] = None) -> Optional[Prefix]:
        text = t.encode()
        if author is not None:
            rows = self._query(
                f"SELECT {_PREFIX_COLS} FROM prefixes WHERE tuple=? AND author=?", (text, author)
            )
            if rows:
                return _decode_prefix(rows[0])
        rows = self._query(
            f"SELECT {_PREFIX_COLS} FROM prefixes WHERE tuple=? ORDER BY id LIMIT 1", (text,)
        )
        return _decode_prefix(rows[0]) if rows else None

    def get_prefix(self, prefix_id: int) -> Prefix:
        rows = self._query(f"SELECT {_PREFIX_COLS} FROM prefixes WHERE id=?", (prefix_id,))
        if not rows:
            raise KeyError(prefix_id)
        return _decode_prefix(rows[0])

    def suffixes_of(self, prefix_id: int) -> List[Suffix]:
        rows = self._query(
            f"SELECT {_SUFFIX_COLS} FROM suffixes WHERE prefix_id=? ORDER BY id", (prefix_id,)
        )
        return [_decode_suffix(r) for r in rows]

    # ---- Stats / maintenance ----
    def count_prefixes(self) -> int:
        return int(self._query("SELECT COUNT(*) FROM prefixes")[0][0])

    def count_suffixes(self) -> int:
        return int(self._query("SELECT COUNT(*) FROM suffixes")[0][0])

    def rebuild_index(self) -> None:
        with self._tx() as c:
            c.execute("INSERT INTO prefixes_idx(prefixes_idx) VALUES ('rebuild')")
        log.info("Rebuilt search index for %s", self.db_path)

    # ---- lifecycle ----
    def close(self) -> None:
        with self._lock:
            self.conn.close()
        log.info("Closed chain store %s", self.db_path)

    # ---- internals ----
    @contextmanager
    def _tx(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            self._begin()
            try:
                yield self.conn
                self.conn.execute("COMMIT")
            except sqlite3.Error as exc:
                self._rollback()
                raise StorageFailure(str(exc)) from exc
            except BaseException:
                self._rollback()
                raise

    def _begin(self) -> None:
        for attempt in range(1, CFG.TX_RETRIES + 1):
            try:
                self.conn.execute("BEGIN IMMEDIATE")
                return
            except sqlite3.OperationalError as exc:
                if not _is_busy(exc) or attempt == CFG.TX_RETRIES:
                    raise StorageFailure(f"cannot begin transaction (attempt {attempt}): {exc}") from exc
                log.warning("Database busy (attempt %d/%d), retrying", attempt, CFG.TX_RETRIES)
                time.sleep(CFG.TX_BACKOFF * attempt)

    def _rollback(self) -> None:
        if self.conn.in_transaction:
            self.conn.execute("ROLLBACK")

    def _query(self, sql: str, params: Sequence[Any] = ()) -> List[tuple]:
        with self._lock:
            try:
                return self.conn.execute(sql, params).fetchall()
            except sqlite3.Error as exc:
                raise StorageFailure(str(exc)) from exc


def _insert_prefix(c: sqlite3.Connection, text: str, order: int, author: str) -> int:
    try:
        cur = c.execute("INSERT INTO prefixes(tuple, ord, author) VALUES (?,?,?)", (text, order, author))
    except sqlite3.IntegrityError as exc:
        raise StorageConflict(f"prefix {text!r} by {author!r} exists") from exc
    return int(cur.lastrowid)


def _is_busy(exc: sqlite3.OperationalError) -> bool:
    msg = str(exc).lower()
    return "locked" in msg or "busy" in msg


def _decode_prefix(row: Sequence[Any]) -> Prefix:
    pid, text, order, author = row
    return Prefix(id=int(pid), tuple=TextTuple.decode(text), order=int(order), author=author)


def _decode_suffix(row: Sequence[Any]) -> Suffix:
    sid, prefix_id, word, count = row
    return Suffix(id=int(sid), prefix_id=int(prefix_id), word=word, count=int(count))
