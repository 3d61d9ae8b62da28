"""The machine's disk, held in memory and written back on close."""

from __future__ import annotations

import os

from xosfs.layout import XSM_PAGE_SIZE, XSM_WORD_SIZE
from xosfs.xsm.word import Word

DEFAULT_DISK = "../xfs-interface/disk.xfs"
DISK_BLOCK_NUM = 512
DISK_BLOCK_SIZE = XSM_PAGE_SIZE


class MachineDisk:
    """All disk blocks as words, read from a disk file and saved back to it."""

    def __init__(self, path: str | os.PathLike = DEFAULT_DISK) -> None:
        self.path = os.fspath(path)
        total = DISK_BLOCK_NUM * DISK_BLOCK_SIZE
        try:
            with open(self.path, "rb") as fh:
                data = fh.read(total * XSM_WORD_SIZE)
        except FileNotFoundError:
            with open(self.path, "wb"):
                pass
            data = b""
        data = data.ljust(total * XSM_WORD_SIZE, b"\0")
        self._words = [
            Word(data[start : start + XSM_WORD_SIZE].decode("latin-1"))
            for start in range(0, len(data), XSM_WORD_SIZE)
        ]

    def __enter__(self) -> MachineDisk:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _check(self, block_num: int) -> None:
        if not 0 <= block_num < DISK_BLOCK_NUM:
            raise IndexError(f"no disk block {block_num}")

    def block(self, block_num: int) -> list[Word]:
        """The live words of a disk block."""
        self._check(block_num)
        start = block_num * DISK_BLOCK_SIZE
        return self._words[start : start + DISK_BLOCK_SIZE]

    def write_page(self, page: list[Word], block_num: int) -> None:
        """Copy a memory page into a disk block."""
        if len(page) != XSM_PAGE_SIZE:
            raise ValueError(f"a page holds {XSM_PAGE_SIZE} words")
        for target, source in zip(self.block(block_num), page):
            target.copy_from(source)

    def read_block(self, block_num: int) -> list[Word]:
        """A copy of a disk block's words."""
        return [Word(word.value) for word in self.block(block_num)]

    def close(self) -> int:
        """Write every block to the disk file; return the number of bytes written."""
        data = b"".join(word.raw() for word in self._words)
        with open(self.path, "wb") as fh:
            return fh.write(data)