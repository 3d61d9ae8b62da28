"""The machine word: sixteen characters holding either a number or a string."""

from __future__ import annotations

import enum

from xosfs.layout import XSM_WORD_SIZE
from xosfs.virtual_disk import get_value

_DIGITS = "0123456789"


class WordType(enum.IntEnum):
    """What a word's characters read as."""

    STRING = 0
    INTEGER = 1


def _fit(text: str) -> str:
    return text.split("\0", 1)[0][:XSM_WORD_SIZE]


class Word:
    """One storage cell of memory, the disk or a register."""

    __slots__ = ("value",)

    def __init__(self, value: str | int = "") -> None:
        self.value = ""
        if isinstance(value, int):
            self.store_int(value)
        else:
            self.store_str(value)

    def __repr__(self) -> str:
        return f"Word({self.value!r})"

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Word):
            return self.value == other.value
        return NotImplemented

    def unix_type(self) -> WordType:
        """INTEGER when the word is an optional sign followed by digits only."""
        digits = self.value[1:] if self.value[:1] in ("+", "-") else self.value
        if all(char in _DIGITS for char in digits):
            return WordType.INTEGER
        return WordType.STRING

    def to_int(self) -> int:
        """The leading integer of the word, 0 when there is none."""
        return get_value(self.value)

    def store_int(self, value: int) -> None:
        self.value = str(int(value))

    def store_str(self, text: str) -> None:
        """Store text, keeping at most one word's worth of characters."""
        self.value = _fit(text)

    def copy_from(self, other: Word) -> None:
        self.value = other.value

    def raw(self) -> bytes:
        """The word's characters as the machine stores them, padded with NULs."""
        return self.value.encode("latin-1", errors="replace")[:XSM_WORD_SIZE].ljust(
            XSM_WORD_SIZE, b"\0"
        )

    def encrypt(self) -> None:
        """Replace the word by the sum of its characters as signed bytes."""
        total = sum(byte - 256 if byte > 127 else byte for byte in self.raw())
        self.store_int(total)