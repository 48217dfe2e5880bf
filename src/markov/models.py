# src/markov/models.py
"""
Record types returned by the chain store.

- Prefix: one stored tuple (Markov state) attributed to an author.
- Suffix: one successor word of a prefix with its observation count.

These classes carry no storage logic; each store maps its rows into them
with explicit decode functions so callers never see engine-specific rows.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List

from .tuples import TextTuple


@dataclass(frozen=True, slots=True)
class Prefix:
    """
    Attributes
    ----------
    id : int
        Stable identifier assigned on first observation. Never reused.
    tuple : TextTuple
        The word window. Unique together with ``author``.
    order : int
        Number of words in the tuple.
    author : str
        Who wrote the text the prefix was observed in.
    """
    id: int
    tuple: TextTuple
    order: int
    author: str

    def words(self) -> List[str]:
        """Independent copy of the tuple's words (safe to extend)."""
        return self.tuple.elements()

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "tuple": self.tuple.encode(), "order": self.order, "author": self.author}

    def __str__(self) -> str:
        return f"{self.author}({self.order}): {self.tuple}"


@dataclass(frozen=True, slots=True)
class Suffix:
    """
    Attributes
    ----------
    id : int
        Row identifier.
    prefix_id : int
        The prefix this word follows.
    word : str
        The successor word.
    count : int
        How many times ``word`` was observed after the prefix (>= 1).
    """
    id: int
    prefix_id: int
    word: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.word}({self.count})"
