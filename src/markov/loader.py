from __future__ import annotations
import logging
import os
import sys
from typing import Iterable, Iterator, List

log = logging.getLogger(__name__)


def _iter_txt_files(root: str) -> Iterator[str]:
    """Yield *.txt files recursively under root, in a stable order."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for fn in sorted(filenames):
            if fn.lower().endswith(".txt"):
                yield os.path.join(dirpath, fn)


def _expand(paths: Iterable[str]) -> List[str]:
    out: List[str] = []
    for p in paths:
        if p == "-" or not os.path.isdir(p):
            out.append(p)
        else:
            out.extend(_iter_txt_files(os.path.abspath(p)))
    return out


def iter_lines(paths: Iterable[str], encoding: str = "utf-8") -> Iterator[str]:
    """
    Stream lines (without trailing EOL) from files, directories of *.txt
    files, or "-" for stdin. Files are read lazily, one at a time.
    """
    for path in _expand(paths):
        if path == "-":
            log.info("Reading stdin")
            for raw in sys.stdin:
                yield raw.rstrip("\r\n")
            continue
        log.info("Reading %s", path)
        with open(path, "r", encoding=encoding, errors="replace") as f:
            for raw in f:
                yield raw.rstrip("\r\n")


def batch_lines(paths: Iterable[str], encoding: str = "utf-8") -> List[List[str]]:
    """One batch of lines per input file, for parallel ingestion."""
    batches: List[List[str]] = []
    for path in _expand(paths):
        batches.append(list(iter_lines([path], encoding=encoding)))
    return batches
