"""Loading executables, data files and system code onto the XFS disk."""

from __future__ import annotations

import enum
import io
import os
from typing import TextIO

from xosfs import inode, layout
from xosfs.labels import LabelError, resolve_file
from xosfs.virtual_disk import VirtualDisk

_ASSEMBLY_LINE = 100
_DATA_LINE = 16
_WORD_LINE = layout.XSM_WORD_SIZE
_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"


class LoadError(Exception):
    """Raised when a file cannot be placed on the disk."""


class FileKind(enum.IntEnum):
    """How the lines of a source file become disk words."""

    ASSEMBLY_CODE = 0
    DATA_FILE = 1


def add_extension(filename: str, ext: str) -> str:
    """Append ``ext`` unless present, keeping the name shorter than a word."""
    if len(filename) >= layout.WORD_SIZE:
        return filename[:11] + ext
    if not filename.endswith(ext):
        filename += ext
        if len(filename) >= layout.WORD_SIZE:
            return filename[:11] + ext
    return filename


def expand_path(path: str) -> str:
    """Replace the first path component by an environment variable's value.

    The variable is named by the component without its first character,
    so ``$HOME/x`` becomes the value of ``HOME`` followed by ``/x``.
    """
    head, slash, rest = path.partition("/")
    name = head[1:]
    value = os.environ.get(name) if name else None
    expanded = value if value is not None else head
    return f"{expanded}/{rest}" if slash else expanded


def _gets(stream: TextIO, size: int) -> tuple[str | None, bool]:
    """Read like a line of at most ``size - 1`` characters; report end of file."""
    limit = size - 1
    piece = stream.readline(limit)
    if not piece:
        return None, True
    return piece, not piece.endswith("\n") and len(piece) < limit


def data_file_size(stream: TextIO) -> int:
    """Number of words a data file occupies."""
    stream.seek(0)
    count = 0
    while True:
        _, eof = _gets(stream, _WORD_LINE)
        count += 1
        if eof:
            return count


def _trim(text: str) -> str:
    return text.strip(_WHITESPACE)


def _clip(line: str) -> str:
    """Cut a source line down, shortening an over-long string literal."""
    quote = line.find('"')
    if quote < 0 or len(line) - quote <= layout.WORD_SIZE:
        return line[:31]
    end = quote + 15
    return line[: end - 1] + '"'


def _split_instruction(line: str) -> tuple[str | None, str | None, str | None]:
    stripped = line.lstrip(" ")
    if not stripped:
        return None, None, None
    instr, _, rest = stripped.partition(" ")
    rest = rest.lstrip(",")
    if not rest:
        return instr, None, None
    arg1, comma, tail = rest.partition(",")
    if not comma:
        return instr, arg1, None
    return instr, arg1, tail or None


def _put(disk: VirtualDisk, index: int, value: str) -> None:
    if index < layout.BLOCK_SIZE:
        disk.set_word(layout.TEMP_BLOCK, index, value)


def _write_assembly(disk: VirtualDisk, stream: TextIO, block_num: int) -> bool:
    line_count = 0
    line = ""
    while line_count < layout.BLOCK_SIZE:
        piece, eof = _gets(stream, _ASSEMBLY_LINE)
        if piece is not None:
            line = piece
        if eof:
            _put(disk, line_count, line)
            disk.write_block(layout.TEMP_BLOCK, block_num)
            return False
        buffer = _clip(line)
        if len(buffer) <= 1:
            continue
        if buffer.endswith("\n"):
            buffer = buffer[:-1]
        instr, arg1, arg2 = _split_instruction(buffer)
        if instr is None:
            continue
        name = _trim(instr)
        if name[:1] and name[0] in _DIGITS:
            _put(disk, line_count, name)
            line_count += 1
        elif arg1 is not None:
            first = _trim(arg1) + ("," if arg2 is not None else "")
            _put(disk, line_count, f"{name} {first}")
            _put(disk, line_count + 1, _trim(arg2) if arg2 is not None else "")
            line_count += 2
        else:
            _put(disk, line_count, instr)
            _put(disk, line_count + 1, "")
            line_count += 2
    disk.write_block(layout.TEMP_BLOCK, block_num)
    return True


def _write_data(disk: VirtualDisk, stream: TextIO, block_num: int) -> bool:
    line = ""
    for index in range(layout.BLOCK_SIZE):
        piece, eof = _gets(stream, _DATA_LINE)
        if piece is not None:
            line = piece
        disk.set_word(layout.TEMP_BLOCK, index, line)
        if eof:
            disk.set_word(layout.TEMP_BLOCK, index, "")
            disk.write_block(layout.TEMP_BLOCK, block_num)
            return False
    disk.write_block(layout.TEMP_BLOCK, block_num)
    return True


def write_file_block(
    disk: VirtualDisk, stream: TextIO, block_num: int, kind: FileKind
) -> bool:
    """Fill one disk block from the stream; False once the stream ran out."""
    disk.empty_block(layout.TEMP_BLOCK)
    if FileKind(kind) is FileKind.ASSEMBLY_CODE:
        return _write_assembly(disk, stream, block_num)
    return _write_data(disk, stream, block_num)


def _open_source(path: str, message: str) -> TextIO:
    try:
        return open(path, encoding="latin-1", newline="\n")
    except OSError as exc:
        raise LoadError(message) from exc


def _xfs_name(path: str, ext: str) -> str:
    return add_extension(path.rsplit("/", 1)[-1][:15], ext)


def _store_file(
    disk: VirtualDisk,
    stream: TextIO,
    filename: str,
    block_count: int,
    kind: FileKind,
    file_type: int,
    no_space: str,
) -> None:
    blocks: list[int] = []
    for _ in range(block_count):
        block = disk.find_free_block()
        if block is None:
            disk.free_blocks(blocks)
            raise LoadError(no_space)
        blocks.append(block)
    if inode.find_entry(disk, filename) is not None:
        disk.free_blocks(blocks)
        raise LoadError(
            "Disk already contains the file with this name. "
            "Try again with a different name."
        )
    entry = inode.find_empty_entry(disk)
    if entry is None:
        disk.free_blocks(blocks)
        raise LoadError("No free INODE entry found.")
    disk.commit(layout.DISK_FREE_LIST)
    disk.empty_block(layout.TEMP_BLOCK)
    stream.seek(0)
    for block in blocks:
        write_file_block(disk, stream, block, kind)
    inode.add_entry(
        disk, entry, file_type, filename, len(blocks) * layout.BLOCK_SIZE, blocks
    )
    disk.commit(layout.INODE)


def load_executable(disk: VirtualDisk, path: str) -> str:
    """Store an assembly program as an executable file; return its XFS name."""
    filename = _xfs_name(path, ".xsm")
    path = expand_path(path)
    with _open_source(path, f"File {path} not found.") as stream:
        lines = stream.read().count("\n")
        block_count = lines // (layout.BLOCK_SIZE // 2) + 1
        if block_count > layout.INODE_MAX_BLOCK_NUM:
            raise LoadError(
                f"The size of file exceeds {layout.INODE_MAX_BLOCK_NUM} blocks"
            )
        _store_file(
            disk,
            stream,
            filename,
            block_count,
            FileKind.ASSEMBLY_CODE,
            layout.FILETYPE_EXEC,
            "Insufficient disk space!",
        )
    return filename


def load_data(disk: VirtualDisk, path: str) -> str:
    """Store a data file, one word per line; return its XFS name."""
    filename = _xfs_name(path, ".dat")
    path = expand_path(path)
    with _open_source(path, f"File '{path}' not found.!") as stream:
        words = data_file_size(stream)
        block_count = -(-words // layout.BLOCK_SIZE)
        if block_count > layout.INODE_MAX_BLOCK_NUM:
            raise LoadError(
                f"The size of file exceeds {layout.INODE_MAX_BLOCK_NUM} blocks\n"
                f"The file contains {words} words, an xfs file can have only upto "
                f"{layout.INODE_MAX_BLOCK_NUM * layout.BLOCK_SIZE} words"
            )
        _store_file(
            disk,
            stream,
            filename,
            block_count,
            FileKind.DATA_FILE,
            layout.FILETYPE_DATA,
            "Disk does not have enough space to contain the file.",
        )
    return filename


def _clear_blocks(disk: VirtualDisk, start: int, count: int) -> None:
    disk.empty_block(layout.TEMP_BLOCK)
    for block in range(start, start + count):
        disk.write_block(layout.TEMP_BLOCK, block)


def _load_code_stream(disk: VirtualDisk, stream: TextIO, start: int, count: int) -> None:
    full = True
    for offset in range(count):
        full = write_file_block(disk, stream, start + offset, FileKind.ASSEMBLY_CODE)
        if not full:
            break
    if full:
        _clear_blocks(disk, start, count)
        raise LoadError(f"Code exceeds {count} block")


def load_code(disk: VirtualDisk, path: str, start_block: int, count: int) -> None:
    """Write assembly code to ``count`` disk blocks from ``start_block``."""
    with _open_source(path, f"File {path} not found.") as stream:
        _load_code_stream(disk, stream, start_block, count)


def load_code_with_labels(
    disk: VirtualDisk, path: str, start_block: int, count: int, mem_page: int
) -> None:
    """Resolve labels against memory page ``mem_page``, then load the code."""
    path = expand_path(path)
    try:
        lines = resolve_file(path, mem_page * layout.PAGE_SIZE)
    except LabelError as exc:
        raise LoadError(str(exc)) from exc
    text = "".join(f"{line}\n" for line in lines)
    _load_code_stream(disk, io.StringIO(text), start_block, count)


def load_init(disk: VirtualDisk, path: str) -> None:
    load_code(disk, path, layout.INIT_BLOCK, layout.NO_OF_INIT_BLOCKS)


def load_idle(disk: VirtualDisk, path: str) -> None:
    load_code(disk, path, layout.IDLE_BLOCK, layout.NO_OF_IDLE_BLOCKS)


def load_shell(disk: VirtualDisk, path: str) -> None:
    load_code(disk, path, layout.SHELL_BLOCK, layout.NO_OF_SHELL_BLOCKS)


def load_library(disk: VirtualDisk, path: str) -> None:
    load_code_with_labels(
        disk, path, layout.LIBRARY_BLOCK, layout.NO_OF_LIBRARY_BLOCKS,
        layout.MEM_LIBRARY_PAGE,
    )


def load_os(disk: VirtualDisk, path: str) -> None:
    load_code_with_labels(
        disk, path, layout.OS_STARTUP_CODE, layout.OS_STARTUP_CODE_SIZE,
        layout.MEM_OS_STARTUP_CODE,
    )


def load_timer(disk: VirtualDisk, path: str) -> None:
    load_code_with_labels(
        disk, path, layout.TIMERINT, layout.TIMERINT_SIZE, layout.MEM_TIMERINT
    )


def load_disk_interrupt(disk: VirtualDisk, path: str) -> None:
    load_code_with_labels(
        disk, path, layout.DISKCONTROLLER_INT, layout.DISKCONTROLLER_INT_SIZE,
        layout.MEM_DISKCONTROLLER_INT,
    )


def load_console_interrupt(disk: VirtualDisk, path: str) -> None:
    load_code_with_labels(
        disk, path, layout.CONSOLE_INT, layout.CONSOLE_INT_SIZE, layout.MEM_CONSOLE_INT
    )


def load_interrupt(disk: VirtualDisk, path: str, int_no: int) -> None:
    load_code_with_labels(
        disk, path, layout.interrupt_block(int_no), layout.INT_SIZE,
        layout.interrupt_page(int_no),
    )


def load_module(disk: VirtualDisk, path: str, mod_no: int) -> None:
    load_code_with_labels(
        disk, path, layout.module_block(mod_no), layout.MOD_SIZE,
        layout.module_page(mod_no),
    )


def load_exception_handler(disk: VirtualDisk, path: str) -> None:
    load_code_with_labels(
        disk, path, layout.EX_HANDLER, layout.EX_HANDLER_SIZE, layout.MEM_EX_HANDLER
    )