"""
Markov chain text model on persistent storage.

Text is ingested word by word into overlapping fixed-length prefixes
("tuples"); each prefix accumulates weighted successor words ("suffixes").
Generation performs a weighted random walk over the stored model, starting
from a prefix that contains a seed word or from a random prefix.

Main entry points:
    Engine:          open a store, ingest text, generate text
    ingest(...):     feed lines into any ChainStore
    Generator:       weighted random walk over any ChainStore
    make_store(dsn): "sqlite:///path", "sqlite://:memory:" or "memory://"

Example Usage:
    from markov import Engine

    eng = Engine().open("sqlite:///chain.sqlite")
    eng.ingest(["The quick brown fox jumps over the lazy dog"], order=3, author="test")
    print(eng.generate(["The"]))
    eng.shutdown()
"""

# src/markov/__init__.py
from .engine import Engine
from .generate import Generator, State
from .ingest import IngestStats, ingest, ingest_parallel
from .DB.api import ChainStore, make_store
from .models import Prefix, Suffix
from .tuples import Direction, TextTuple
from .errors import (
    MarkovError, NoMatch, NoSuffix, StorageConflict, StorageFailure, MalformedInput, IngestTimeout,
)

__version__ = "1.0.0"
__all__ = [
    "Engine", "Generator", "State", "IngestStats", "ingest", "ingest_parallel",
    "ChainStore", "make_store", "Prefix", "Suffix", "Direction", "TextTuple",
    "MarkovError", "NoMatch", "NoSuffix", "StorageConflict", "StorageFailure",
    "MalformedInput", "IngestTimeout",
]
