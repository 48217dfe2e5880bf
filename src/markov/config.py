from __future__ import annotations
import os

# Chain shape
DEFAULT_ORDER: int = 2

# Storage DSN: "sqlite:///path/to/chain.sqlite", "sqlite://:memory:" or "memory://"
DEFAULT_DSN: str = os.environ.get("MARKOV_DB", "sqlite:///markov.sqlite")

# Transaction tuning (SQLite)
BUSY_TIMEOUT: float = 5.0   # seconds sqlite3 waits on a locked database
TX_RETRIES: int = 5         # BEGIN IMMEDIATE attempts before StorageFailure
TX_BACKOFF: float = 0.05    # linear backoff step between attempts

# random_prefix(): id probes before falling back to COUNT/OFFSET
RANDOM_PROBES: int = 8

# parallel ingestion
_cpu = os.cpu_count() or 4
INGEST_WORKERS: int = int(os.environ.get("MARKOV_WORKERS", _cpu))

# listing cap for search output (CLI / web)
TOP_N_PREFIXES: int = 20

# Progress logging (set MARKOV_VERBOSE=1 to enable)
VERBOSE: bool = os.environ.get("MARKOV_VERBOSE") == "1"
