"""Two-pass resolution of symbolic jump and call targets in assembly code."""

from __future__ import annotations

import os
import re
from typing import Iterable

from xosfs.layout import XSM_INSTRUCTION_SIZE, XSM_WORD_SIZE

# Longest piece of a line read at once: one instruction's worth of characters.
_LINE_LIMIT = XSM_INSTRUCTION_SIZE * XSM_WORD_SIZE
_TOKEN_SPLIT = re.compile(r"[ ,]")
_JUMPS = {"JMP", "CALL"}
_CONDITIONAL_JUMPS = {"JNZ", "JZ"}


class LabelError(Exception):
    """Raised when a source file cannot be read or a label cannot be resolved."""


def is_label(line: str) -> bool:
    """True when the line is a label definition, i.e. ends with a colon."""
    return line.endswith(":")


def is_charstring(text: str | None) -> bool:
    """True when the text holds at least one letter."""
    if text is None:
        return False
    return any(char.isascii() and char.isalpha() for char in text)


def _strip_newline(line: str) -> str:
    return line.split("\n", 1)[0]


class LabelTable:
    """Label names and the code addresses they stand for."""

    def __init__(self) -> None:
        self._labels: dict[str, int] = {}

    def reset(self) -> None:
        """Forget every label."""
        self._labels.clear()

    def insert(self, name: str, address: int) -> None:
        """Define a label; a later definition of the same name wins."""
        self._labels[name] = address

    def target(self, name: str) -> int | None:
        """Address of a label, or None when it is not defined."""
        return self._labels.get(name)

    def collect(self, lines: Iterable[str]) -> None:
        """First pass: record the address of every label definition."""
        address = 0
        for raw in lines:
            line = _strip_newline(raw)
            if is_label(line):
                name = next((part for part in line.split(":") if part), None)
                if name is not None:
                    self.insert(name, address)
            else:
                address += XSM_INSTRUCTION_SIZE

    def resolve_lines(self, lines: Iterable[str], base_address: int) -> list[str]:
        """Second pass: drop label lines and replace symbolic jump targets."""
        resolved = []
        for raw in lines:
            line = _strip_newline(raw)
            if not line or is_label(line):
                continue
            tokens = [token for token in _TOKEN_SPLIT.split(line) if token]
            opcode, leftop, rightop = (tokens + [None, None, None])[:3]
            mnemonic = (opcode or "").upper()
            separator = ""
            jump = False
            if mnemonic in _JUMPS:
                jump = True
                rightop, leftop = leftop, ""
            elif mnemonic in _CONDITIONAL_JUMPS:
                jump = True
                separator = ", "
            if jump and is_charstring(rightop):
                address = self.target(rightop)
                if address is None:
                    raise LabelError(f'Can not resolve label "{rightop}".')
                resolved.append(f"{opcode} {leftop}{separator}{address + base_address}")
            else:
                resolved.append(line)
        return resolved


def resolve_file(path: str | os.PathLike, base_address: int) -> list[str]:
    """Read an assembly file and return its lines with labels resolved."""
    try:
        with open(path, encoding="latin-1", newline="\n") as fh:
            pieces = list(iter(lambda: fh.readline(_LINE_LIMIT), ""))
    except OSError as exc:
        raise LabelError("Can't open source file.") from exc
    table = LabelTable()
    table.collect(pieces)
    return table.resolve_lines(pieces, base_address)