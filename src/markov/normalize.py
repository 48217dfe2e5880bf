from __future__ import annotations
import re
import unicodedata
from typing import List, Tuple

_TOKEN_RE = re.compile(r"[^\W_]+")


def split_words(text: str) -> List[str]:
    """Whitespace tokenization used for ingestion (words keep their punctuation)."""
    return text.split()


def split_author(line: str) -> Tuple[str, str]:
    """
    Split '<author> <content>' on the first space.
    Returns (author, content); content is "" when there is no space. A line
    that starts with a space has an empty author.
    """
    author, _, content = line.partition(" ")
    return author, content


def index_tokens(text: str) -> List[str]:
    """
    Search-index tokens of a text, mirroring SQLite FTS5's unicode61 tokenizer:
      * lowercased (no full case folding, so "ß" stays "ß")
      * diacritics removed
      * split on anything that is not a letter or digit
    """
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _TOKEN_RE.findall(stripped)


def contains_phrase(haystack: List[str], needle: List[str]) -> bool:
    """True when `needle` occurs as a contiguous run inside `haystack`."""
    n = len(needle)
    if n == 0:
        return False
    return any(haystack[i:i + n] == needle for i in range(len(haystack) - n + 1))
