"""Main memory and its paging hardware."""

from __future__ import annotations

from xosfs.layout import XSM_INSTRUCTION_SIZE, XSM_MEMORY_NUMPAGES, XSM_PAGE_SIZE
from xosfs.xsm.word import Word

MEMORY_SIZE = XSM_PAGE_SIZE * XSM_MEMORY_NUMPAGES

EXP_PAGEFAULT = 0
EXP_ILLINSTR = 1
EXP_ILLMEM = 2
EXP_ARITH = 3


class MachineException(Exception):
    """A fault raised by the machine, with the details its handler needs."""

    def __init__(
        self, message: str, code: int, mode: int = 0, ma: int = 0, epn: int = 0
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.mode = mode
        self.ma = ma
        self.epn = epn


class Memory:
    """Word-addressed RAM of a fixed number of pages."""

    def __init__(self) -> None:
        self._words = [Word() for _ in range(MEMORY_SIZE)]

    def __len__(self) -> int:
        return len(self._words)

    def is_valid(self, address: int) -> bool:
        return 0 <= address < MEMORY_SIZE

    def word(self, address: int) -> Word | None:
        """The word at a physical address, or None when out of range."""
        return self._words[address] if self.is_valid(address) else None

    def page_of(self, address: int) -> int:
        quotient = abs(address) // XSM_PAGE_SIZE
        return quotient if address >= 0 else -quotient

    def page(self, page: int) -> list[Word] | None:
        """The words of a page, or None when the page does not exist."""
        start = page * XSM_PAGE_SIZE
        if not self.is_valid(start):
            return None
        return self._words[start : start + XSM_PAGE_SIZE]

    def translate_page(self, ptbr: int, page: int, write: bool) -> int:
        """Physical page for a logical page through the page table at ``ptbr``."""
        entry = self.word(ptbr + page * 2)
        info = self.word(ptbr + page * 2 + 1)
        if entry is None or info is None:
            raise MachineException("Illegal memory access", EXP_ILLMEM, epn=page)
        flags = info.value
        if flags[1:2] == "0":
            raise MachineException("Page fault", EXP_PAGEFAULT, epn=page)
        if write and flags[2:3] == "0":
            raise MachineException("Page is not writable", EXP_ILLMEM, epn=page)
        return entry.to_int()

    def translate_address(self, ptbr: int, address: int, write: bool) -> int:
        """Physical address for a logical address; faults carry the address."""
        offset = address - self.page_of(address) * XSM_PAGE_SIZE
        try:
            target = self.translate_page(ptbr, self.page_of(address), write)
        except MachineException as exc:
            exc.ma = address
            raise
        return target * XSM_PAGE_SIZE + offset

    def raw_instruction(self, address: int) -> str:
        """The words of the instruction at ``address``, joined."""
        parts = []
        for offset in range(XSM_INSTRUCTION_SIZE):
            word = self.word(address + offset)
            if word is None:
                raise MachineException(
                    "Illegal memory access", EXP_ILLMEM, ma=address + offset
                )
            parts.append(word.value)
        return "".join(parts)