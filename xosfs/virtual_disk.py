"""The disk file and the in-memory copy of its system blocks."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Iterable

from xosfs import layout

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


class DiskError(OSError):
    """Raised when the disk file cannot be opened or created."""


@dataclass
class FileEntry:
    """A file listed in the inode table."""

    name: str
    size: int


def get_value(text: str) -> int:
    """Read the leading integer of a word; 0 when there is none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _encode_word(value: str) -> bytes:
    return value.encode("latin-1", errors="replace")[: layout.WORD_SIZE].ljust(
        layout.WORD_SIZE, b"\0"
    )


def _decode_word(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


class VirtualDisk:
    """Memory copy of the first disk blocks plus one scratch block."""

    def __init__(self, path: str | os.PathLike = layout.DISK_NAME) -> None:
        self.path = os.fspath(path)
        self._blocks: list[list[str]] = []
        self.clear()

    # File access

    def _open(self, mode: str):
        try:
            return open(self.path, mode)
        except OSError as exc:
            raise DiskError("Unable to open disk file") from exc

    def read_block(self, virt_block: int, file_block: int) -> None:
        """Copy disk block ``file_block`` into memory block ``virt_block``."""
        with self._open("rb") as fh:
            fh.seek(layout.BLOCK_BYTES * file_block)
            data = fh.read(layout.BLOCK_BYTES).ljust(layout.BLOCK_BYTES, b"\0")
        size = layout.WORD_SIZE
        self._blocks[virt_block] = [
            _decode_word(data[start : start + size])
            for start in range(0, layout.BLOCK_BYTES, size)
        ]

    def write_block(self, virt_block: int, file_block: int) -> None:
        """Write memory block ``virt_block`` to disk block ``file_block``."""
        data = b"".join(_encode_word(word) for word in self._blocks[virt_block])
        with self._open("r+b") as fh:
            fh.seek(layout.BLOCK_BYTES * file_block)
            fh.write(data)

    def check_exists(self) -> None:
        """Raise DiskError unless the disk file can be opened."""
        with self._open("rb"):
            pass

    def create(self, truncate: bool) -> None:
        """Create the disk file, emptying it first when ``truncate`` is set."""
        try:
            with open(self.path, "wb" if truncate else "ab"):
                pass
        except OSError as exc:
            raise DiskError("Failed to create disk file") from exc

    # Words

    def word(self, block: int, index: int) -> str:
        return self._blocks[block][index]

    def set_word(self, block: int, index: int, value: str) -> None:
        self._blocks[block][index] = value

    def get_value_at(self, address: int) -> int:
        block, index = divmod(address, layout.BLOCK_SIZE)
        return get_value(self._blocks[block][index])

    def store_value_at(self, address: int, value: int) -> None:
        block, index = divmod(address, layout.BLOCK_SIZE)
        self._blocks[block][index] = str(value)

    def store_string_at(self, address: int, value: str) -> None:
        block, index = divmod(address, layout.BLOCK_SIZE)
        self._blocks[block][index] = value

    # Blocks and structures

    def empty_block(self, block: int) -> None:
        self._blocks[block] = [""] * layout.BLOCK_SIZE

    def clear(self) -> None:
        """Wipe the whole memory copy."""
        count = layout.NO_BLOCKS_TO_COPY + layout.EXTRA_BLOCKS
        self._blocks = [[""] * layout.BLOCK_SIZE for _ in range(count)]

    def free_blocks(self, blocks: Iterable[int]) -> None:
        """Mark blocks free and blank them on disk, stopping at -1 or 0."""
        for block in blocks:
            if block in (-1, 0):
                break
            self.store_value_at(layout.DISK_FREE_LIST * layout.BLOCK_SIZE + block, 0)
            self.empty_block(layout.TEMP_BLOCK)
            self.write_block(layout.TEMP_BLOCK, block)

    def find_free_block(self) -> int | None:
        """Claim the first free block and return its number, or None."""
        for offset in range(layout.NO_OF_FREE_LIST_BLOCKS):
            words = self._blocks[layout.DISK_FREE_LIST + offset]
            for index, word in enumerate(words):
                if get_value(word) == 0:
                    words[index] = "1"
                    return offset * layout.BLOCK_SIZE + index
        return None

    def set_defaults(self, structure: int) -> None:
        """Fill the free list, inode table or root file with initial values."""
        if structure == layout.DISK_FREE_LIST:
            for entry in range(layout.NO_OF_FREE_LIST_BLOCKS * layout.BLOCK_SIZE):
                block, index = divmod(entry, layout.BLOCK_SIZE)
                used = not layout.DATA_START_BLOCK <= entry < layout.NO_OF_DISK_BLOCKS
                self._blocks[layout.DISK_FREE_LIST + block][index] = "1" if used else "0"
        elif structure == layout.INODE:
            self._reset_table(
                layout.INODE,
                layout.NO_OF_INODE_BLOCKS,
                layout.INODE_ENTRY_SIZE,
                layout.INODE_ENTRY_FILESIZE,
                layout.INODE_ENTRY_FILENAME,
            )
        elif structure == layout.ROOTFILE:
            self._reset_table(
                layout.ROOTFILE,
                layout.NO_OF_ROOTFILE_BLOCKS,
                layout.ROOTFILE_ENTRY_SIZE,
                layout.ROOTFILE_ENTRY_FILESIZE,
                layout.ROOTFILE_ENTRY_FILENAME,
            )
        else:
            raise ValueError(f"unknown disk structure {structure}")

    def _reset_table(self, first, count, entry_size, size_field, name_field) -> None:
        for block in range(first, first + count):
            words = ["-1"] * layout.BLOCK_SIZE
            for base in range(0, layout.BLOCK_SIZE, entry_size):
                words[base + size_field] = "0"
                words[base + name_field] = "-1"
            self._blocks[block] = words

    def commit(self, structure: int) -> None:
        """Write a structure to the disk file; the inode table takes the root file with it."""
        if structure == layout.DISK_FREE_LIST:
            ranges = [(layout.DISK_FREE_LIST, layout.NO_OF_FREE_LIST_BLOCKS)]
        elif structure == layout.INODE:
            ranges = [
                (layout.INODE, layout.NO_OF_INODE_BLOCKS),
                (layout.ROOTFILE, layout.NO_OF_ROOTFILE_BLOCKS),
            ]
        elif structure == layout.ROOTFILE:
            ranges = [(layout.ROOTFILE, layout.NO_OF_ROOTFILE_BLOCKS)]
        else:
            raise ValueError(f"unknown disk structure {structure}")
        for first, count in ranges:
            for block in range(first, first + count):
                self.write_block(block, block)

    def load(self) -> None:
        """Read the free list, inode table and root file from the disk file."""
        for first, count in (
            (layout.DISK_FREE_LIST, layout.NO_OF_FREE_LIST_BLOCKS),
            (layout.INODE, layout.NO_OF_INODE_BLOCKS),
            (layout.ROOTFILE, layout.NO_OF_ROOTFILE_BLOCKS),
        ):
            for block in range(first, first + count):
                self.read_block(block, block)

    def list_files(self) -> list[FileEntry]:
        """Files named in the inode table, in table order."""
        self.check_exists()
        files = []
        for block in range(layout.INODE, layout.INODE + layout.NO_OF_INODE_BLOCKS):
            words = self._blocks[block]
            for base in range(0, layout.BLOCK_SIZE, layout.INODE_ENTRY_SIZE):
                name = words[base + layout.INODE_ENTRY_FILENAME]
                if get_value(name) != -1:
                    size = get_value(words[base + layout.INODE_ENTRY_FILESIZE])
                    files.append(FileEntry(name, size))
        return files