"""Inode table and root file entries in the memory copy of the disk."""

from __future__ import annotations

from typing import Sequence

from xosfs import layout
from xosfs.virtual_disk import VirtualDisk, get_value


def _entries():
    """Yield (block, word index, relative location) for every inode entry."""
    for block in range(layout.INODE, layout.INODE + layout.NO_OF_INODE_BLOCKS):
        for base in range(0, layout.BLOCK_SIZE, layout.INODE_ENTRY_SIZE):
            yield block, base, (block - layout.INODE) * layout.BLOCK_SIZE + base


def find_empty_entry(disk: VirtualDisk) -> int | None:
    """Relative location of the first unused inode entry, or None when full."""
    for block, base, location in _entries():
        if get_value(disk.word(block, base + layout.INODE_ENTRY_FILENAME)) == -1:
            return location
    return None


def add_root_entry(disk: VirtualDisk, index: int, file_type: int, name: str, size: int) -> None:
    """Fill the root file entry at relative word ``index``."""
    base = layout.ROOTFILE * layout.BLOCK_SIZE + index
    disk.store_string_at(base + layout.ROOTFILE_ENTRY_FILENAME, name)
    disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILESIZE, size)
    disk.store_value_at(base + layout.ROOTFILE_ENTRY_FILETYPE, file_type)


def add_entry(
    disk: VirtualDisk,
    index: int,
    file_type: int,
    name: str,
    size: int,
    blocks: Sequence[int],
) -> None:
    """Fill the inode entry at relative word ``index`` and its root file entry."""
    base = layout.INODE * layout.BLOCK_SIZE + index
    disk.store_value_at(base + layout.INODE_ENTRY_FILETYPE, file_type)
    disk.store_string_at(base + layout.INODE_ENTRY_FILENAME, name)
    disk.store_value_at(base + layout.INODE_ENTRY_FILESIZE, size)
    padded = list(blocks)[: layout.INODE_NUM_DATA_BLOCKS]
    padded += [-1] * (layout.INODE_NUM_DATA_BLOCKS - len(padded))
    for offset, block in enumerate(padded):
        disk.store_value_at(base + layout.INODE_ENTRY_DATABLOCK + offset, block)
    root_index = index // layout.INODE_ENTRY_SIZE * layout.ROOTFILE_ENTRY_SIZE
    add_root_entry(disk, root_index, file_type, name, size)


def remove_root_entry(disk: VirtualDisk, location: int) -> None:
    """Mark the root file entry at relative word ``location`` unused."""
    block = layout.ROOTFILE + location // layout.BLOCK_SIZE
    start = location % layout.BLOCK_SIZE
    disk.set_word(block, start + layout.ROOTFILE_ENTRY_FILETYPE, "-1")
    disk.set_word(block, start + layout.ROOTFILE_ENTRY_FILENAME, "-1")
    disk.set_word(block, start + layout.ROOTFILE_ENTRY_FILESIZE, "0")


def remove_entry(disk: VirtualDisk, location: int) -> None:
    """Mark the inode entry at ``location`` and its root file entry unused."""
    block = layout.INODE + location // layout.BLOCK_SIZE
    start = location % layout.BLOCK_SIZE
    disk.set_word(block, start + layout.INODE_ENTRY_FILETYPE, "-1")
    disk.set_word(block, start + layout.INODE_ENTRY_FILENAME, "-1")
    disk.set_word(block, start + layout.INODE_ENTRY_FILESIZE, "0")
    for offset in range(layout.INODE_NUM_DATA_BLOCKS):
        disk.set_word(block, start + layout.INODE_ENTRY_DATABLOCK + offset, "-1")
    remove_root_entry(
        disk, location // layout.INODE_ENTRY_SIZE * layout.ROOTFILE_ENTRY_SIZE
    )


def find_entry(disk: VirtualDisk, name: str | None) -> int | None:
    """Relative location of the inode entry for ``name``, or None."""
    if name is None:
        return None
    for block, base, location in _entries():
        word = disk.word(block, base + layout.INODE_ENTRY_FILENAME)
        if word == name and get_value(word) != -1:
            return location
    return None


def data_blocks(disk: VirtualDisk, location: int) -> list[int]:
    """Data block numbers recorded in the inode entry at ``location``."""
    block = layout.INODE + location // layout.BLOCK_SIZE
    start = location % layout.BLOCK_SIZE + layout.INODE_ENTRY_DATABLOCK
    return [
        get_value(disk.word(block, start + offset))
        for offset in range(layout.INODE_NUM_DATA_BLOCKS)
    ]