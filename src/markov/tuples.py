from __future__ import annotations
from enum import Enum
from typing import Iterable, List


class Direction(Enum):
    FORWARD = 0
    BACKWARD = 1


class TextTuple:
    """
    Fixed-length window of words used as a Markov chain state.

    The length (order) is set at construction and never changes; shift()
    slides the window in place. The canonical text form, words joined by a
    single space, is both the persisted encoding and the search key.
    """
    __slots__ = ("_e",)

    def __init__(self, order: int) -> None:
        if order < 1:
            raise ValueError(f"tuple order must be >= 1, got {order}")
        self._e: List[str] = [""] * order

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "TextTuple":
        ws = list(words)
        t = cls(len(ws))
        t._e[:] = ws
        return t

    @classmethod
    def decode(cls, text: str) -> "TextTuple":
        # Only safe for previously-encoded text: order == number of fields.
        return cls.from_words(text.split())

    @property
    def order(self) -> int:
        return len(self._e)

    def elements(self) -> List[str]:
        return list(self._e)

    def copy(self) -> "TextTuple":
        return TextTuple.from_words(self._e)

    def shift(self, word: str, direction: Direction = Direction.FORWARD) -> None:
        e = self._e
        if direction is Direction.FORWARD:
            e[:-1] = e[1:]
            e[-1] = word
        else:
            e[1:] = e[:-1]
            e[0] = word

    def encode(self) -> str:
        return " ".join(self._e)

    __str__ = encode

    def __repr__(self) -> str:
        return f"TextTuple({self.encode()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextTuple):
            return NotImplemented
        return self._e == other._e

    def __hash__(self) -> int:
        return hash(tuple(self._e))

    def __len__(self) -> int:
        return len(self._e)
