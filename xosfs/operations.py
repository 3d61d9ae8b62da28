"""Disk-wide operations: formatting, deleting, listing and exporting files."""

from __future__ import annotations

import itertools
from typing import Iterator, TextIO

from xosfs import inode, layout
from xosfs.loader import expand_path
from xosfs.virtual_disk import VirtualDisk


def _read_block(disk: VirtualDisk, block: int) -> list[str]:
    """Read a disk block through the scratch block and return its words."""
    disk.empty_block(layout.TEMP_BLOCK)
    disk.read_block(layout.TEMP_BLOCK, block)
    return [disk.word(layout.TEMP_BLOCK, index) for index in range(layout.BLOCK_SIZE)]


def _open_output(path: str) -> TextIO:
    try:
        return open(path, "w", encoding="latin-1", newline="\n")
    except OSError as exc:
        raise OSError(f"File '{path}' not found!") from exc


def _file_blocks(disk: VirtualDisk, name: str) -> Iterator[int]:
    location = inode.find_entry(disk, name)
    if location is None:
        raise FileNotFoundError(f"File '{name}' not found!")
    return itertools.takewhile(lambda block: block > 0, inode.data_blocks(disk, location))


def format_disk(disk: VirtualDisk, fmt: bool) -> None:
    """Create the disk file and, when ``fmt`` is set, lay out an empty file system."""
    disk.create(False)
    if not fmt:
        return
    disk.clear()
    disk.set_defaults(layout.DISK_FREE_LIST)
    disk.commit(layout.DISK_FREE_LIST)
    disk.set_defaults(layout.INODE)
    disk.set_defaults(layout.ROOTFILE)
    root_blocks = [
        layout.ROOTFILE + offset if offset < layout.NO_OF_ROOTFILE_BLOCKS else -1
        for offset in range(layout.INODE_NUM_DATA_BLOCKS)
    ]
    inode.add_entry(
        disk,
        0,
        layout.FILETYPE_ROOT,
        "root",
        layout.NO_OF_ROOTFILE_BLOCKS * layout.BLOCK_SIZE,
        root_blocks,
    )
    disk.commit(layout.INODE)
    disk.commit(layout.ROOTFILE)


def delete_file(disk: VirtualDisk, name: str) -> None:
    """Remove a file, release its blocks and commit the tables."""
    disk.check_exists()
    location = inode.find_entry(disk, name)
    if location is None:
        raise FileNotFoundError(f"File '{name}' not found!")
    disk.free_blocks(inode.data_blocks(disk, location))
    inode.remove_entry(disk, location)
    disk.commit(layout.INODE)
    disk.commit(layout.DISK_FREE_LIST)


def clear_blocks(disk: VirtualDisk, start: int, count: int) -> None:
    """Blank ``count`` disk blocks from ``start``."""
    disk.empty_block(layout.TEMP_BLOCK)
    for block in range(start, start + count):
        disk.write_block(layout.TEMP_BLOCK, block)


def delete_init(disk: VirtualDisk) -> None:
    clear_blocks(disk, layout.INIT_BLOCK, layout.NO_OF_INIT_BLOCKS)


def delete_os(disk: VirtualDisk) -> None:
    clear_blocks(disk, layout.OS_STARTUP_CODE, layout.OS_STARTUP_CODE_SIZE)


def delete_timer(disk: VirtualDisk) -> None:
    clear_blocks(disk, layout.TIMERINT, layout.TIMERINT_SIZE)


def delete_disk_interrupt(disk: VirtualDisk) -> None:
    clear_blocks(disk, layout.DISKCONTROLLER_INT, layout.DISKCONTROLLER_INT_SIZE)


def delete_console_interrupt(disk: VirtualDisk) -> None:
    clear_blocks(disk, layout.CONSOLE_INT, layout.CONSOLE_INT_SIZE)


def delete_interrupt(disk: VirtualDisk, int_no: int) -> None:
    clear_blocks(disk, layout.interrupt_block(int_no), layout.INT1_SIZE)


def delete_exception_handler(disk: VirtualDisk) -> None:
    clear_blocks(disk, layout.EX_HANDLER, layout.EX_HANDLER_SIZE)


def file_contents(disk: VirtualDisk, name: str) -> list[str]:
    """The non-empty words of a file, block after block."""
    disk.check_exists()
    words: list[str] = []
    for block in _file_blocks(disk, name):
        words.extend(word for word in _read_block(disk, block) if word)
    disk.empty_block(layout.TEMP_BLOCK)
    return words


def export_file(disk: VirtualDisk, name: str, unix_path: str) -> None:
    """Write the words of an XFS file, concatenated, to a host file."""
    disk.check_exists()
    blocks = list(_file_blocks(disk, name))
    with _open_output(expand_path(unix_path)) as out:
        for block in blocks:
            out.write("".join(word for word in _read_block(disk, block) if word))
    disk.empty_block(layout.TEMP_BLOCK)


def copy_blocks(disk: VirtualDisk, start: int, end: int, path: str) -> None:
    """Write disk blocks ``start`` to ``end`` inclusive to a host file, one word per line."""
    disk.check_exists()
    with _open_output(expand_path(path)) as out:
        for block in range(start, end + 1):
            out.writelines(f"{word}\n" for word in _read_block(disk, block))


def free_list(disk: VirtualDisk) -> list[str]:
    """The words of the disk free list; a value of 0 marks a free block."""
    disk.check_exists()
    return [
        disk.word(layout.DISK_FREE_LIST + block, index)
        for block in range(layout.NO_OF_FREE_LIST_BLOCKS)
        for index in range(layout.BLOCK_SIZE)
    ]


def dump_root_file(disk: VirtualDisk, path: str) -> None:
    copy_blocks(
        disk, layout.ROOTFILE, layout.ROOTFILE + layout.NO_OF_ROOTFILE_BLOCKS - 1, path
    )


def dump_inode_table(disk: VirtualDisk, path: str) -> None:
    copy_blocks(disk, layout.INODE, layout.INODE + layout.NO_OF_INODE_BLOCKS - 1, path)