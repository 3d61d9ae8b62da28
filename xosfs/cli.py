"""Interactive and one-shot command line for the XFS disk."""

from __future__ import annotations

import os
import sys
from typing import Callable, TextIO

from xosfs import layout, loader, operations
from xosfs.labels import LabelError
from xosfs.loader import LoadError
from xosfs.virtual_disk import VirtualDisk, get_value

_COMMANDS = ("fdisk", "load", "rm", "ls", "cat", "copy", "exit", "help")
_OPTIONS = ("--exec", "--int=", "--exhandler", "--os", "--data")
_INTERRUPTS = ("1", "2", "3", "4", "5", "6", "7", "timer")
_PATH_LIMIT = 50
_NAME_LIMIT = 12
_COMPLETER_DELIMS = " \t\n\"\\'`@$><=;|&{("

_BANNER = 'Unix-XFS Interace Version 2.0. \nType "help" for getting a list of commands.'

_HELP = (
    (" fdisk ", "Format the disk with XFS filesystem"),
    (" load --exec <pathname> ", "Loads an executable file to XFS disk "),
    (" load --data <pathname> ", "Loads a data file to XFS disk "),
    (" load --init <pathname> ", "Loads INIT code to XFS disk "),
    (" load --os <pathname> ", "Loads OS startup code to XFS disk "),
    (" load --idle <pathname> ", "Loads Idle code to XFS disk "),
    (" load --shell <pathname> ", "Loads Shell code to XFS disk "),
    (" load --library <pathname> ", "Loads Library code to XFS disk "),
    (" load --int=timer <pathname>", "Loads Timer Interrupt routine to XFS disk "),
    (" load --int=disk <pathname>", "Loads Disk Controller Interrupt routine to XFS disk "),
    (" load --int=console <pathname>", "Loads Console Interrupt routine to XFS disk "),
    (" load --int=[4-18] <pathname>", "Loads the specified Interrupt routine to XFS disk "),
    (" load --exhandler <pathname> ", "Loads exception handler routine to XFS disk "),
    (" load --module [0-7] <pathname>", "Loads the specified Module to XFS disk "),
    (" export <xfs_filename> <pathname>",
     "Exports a data file from XFS disk to UNIX file system"),
    (" rm <xfs_filename>", "Removes a file from XFS disk "),
    (" ls ", "List all files"),
    (" df ", "Display free list and free space"),
    (" cat <xfs_filename> ", "to display contents of a file"),
    (" copy <start_blocks> <end_block> <unix_filename>",
     "Copies contents of specified range of blocks to a UNIX file."),
    (" dump --inodetable ",
     "Copies the contents of inode table to an external UNIX file named inodetable.txt"),
    (" dump --rootfile ",
     "Copies the contents of root file to an external UNIX file named inodetable.txt"),
    (" exit ", "Exit the interface"),
)

_CODE_LOADERS = {
    "--init": loader.load_init,
    "--shell": loader.load_shell,
    "--library": loader.load_library,
    "--idle": loader.load_idle,
    "--os": loader.load_os,
    "--exhandler": loader.load_exception_handler,
}

_NAMED_INTERRUPTS = {
    "timer": loader.load_timer,
    "disk": loader.load_disk_interrupt,
    "console": loader.load_console_interrupt,
}


def _matching(candidates, text: str) -> list[str]:
    return [candidate for candidate in candidates if candidate.startswith(text)]


def complete_commands(text: str) -> list[str]:
    """Command names starting with ``text``."""
    return _matching(_COMMANDS, text)


def complete_options(text: str) -> list[str]:
    """Load and rm options starting with ``text``."""
    return _matching(_OPTIONS, text)


def complete_interrupts(text: str) -> list[str]:
    """Interrupt names starting with ``text``."""
    return _matching(_INTERRUPTS, text)


def _tokens(text: str) -> list[str]:
    return [token for token in text.split(" ") if token]


def _arg(args: list[str], index: int) -> str | None:
    return args[index] if index < len(args) else None


class Interface:
    """Runs XFS commands against one disk, writing messages to ``out``."""

    def __init__(self, disk: VirtualDisk, out: TextIO | None = None) -> None:
        self.disk = disk
        self.out = out if out is not None else sys.stdout
        self._handlers: dict[str, Callable[[list[str]], None]] = {
            "help": self._help,
            "fdisk": self._fdisk,
            "run": self._run,
            "load": self._load,
            "rm": self._rm,
            "export": self._export,
            "ls": self._ls,
            "df": self._df,
            "cat": self._cat,
            "copy": self._copy,
            "dump": self._dump,
            "exit": self._exit,
        }

    def _print(self, text: str = "", end: str = "\n") -> None:
        self.out.write(text + end)

    def run_command(self, command: str) -> None:
        """Run one command line, reporting failures as messages."""
        tokens = _tokens(command)
        if not tokens:
            return
        name, args = tokens[0], tokens[1:]
        handler = self._handlers.get(name)
        if handler is None:
            self._print(f'Unknown command "{name}". See "help" for more information')
            return
        try:
            handler(args)
        except (LoadError, LabelError, OSError) as exc:
            self._print(str(exc))

    # Commands

    def _help(self, args: list[str]) -> None:
        for usage, description in _HELP:
            self._print(f"{usage}\n\t {description}")

    def _fdisk(self, args: list[str]) -> None:
        self._print(f'Formatting Complete. "{layout.DISK_NAME}" created.')
        operations.format_disk(self.disk, True)

    def _run(self, args: list[str]) -> None:
        path = _arg(args, 0)
        try:
            with open(path or "", encoding="latin-1", newline="\n") as batch:
                lines = batch.readlines()
        except OSError:
            self._print(f"Unable to open file : {path}")
            return
        for line in lines:
            self.run_command(line[:-1] if line.endswith("\n") else line)

    def _load(self, args: list[str]) -> None:
        arg1, arg2, arg3 = _arg(args, 0), _arg(args, 1), _arg(args, 2)
        if arg2 is None:
            self._print('Missing <pathname> for load. See "help" for more information')
            return
        parts = [part for part in (arg1 or "").split("=") if part]
        option = parts[0] if parts else ""
        int_type = parts[1] if len(parts) > 1 else None
        path = arg2[:_PATH_LIMIT]

        if option == "--exec":
            if self._valid_name(path, ".xsm"):
                loader.load_executable(self.disk, path)
        elif option == "--data":
            if self._valid_name(path, ".dat"):
                loader.load_data(self.disk, path)
        elif option in _CODE_LOADERS:
            _CODE_LOADERS[option](self.disk, path)
        elif option == "--int":
            self._load_interrupt(int_type, path)
        elif option == "--module":
            mod_no = get_value(arg2)
            if not 0 <= mod_no <= layout.NO_OF_MODULES:
                self._print('Invalid argument for "--module=" ')
            elif arg3 is None:
                self._print('Missing <pathname> for load. See "help" for more information')
            else:
                loader.load_module(self.disk, arg3, mod_no)
        else:
            self._print(
                f'Invalid argument "{option}" for load. See "help" for more information'
            )

    def _valid_name(self, path: str, ext: str) -> bool:
        if len(os.path.basename(path)) > _NAME_LIMIT:
            self._print(f"Filename is more than {_NAME_LIMIT} characters long")
            return False
        dot = path.rfind(".")
        if dot < 0 or path[dot:] != ext:
            self._print(f'Filename does not have "{ext}" extension')
            return False
        return True

    def _load_interrupt(self, int_type: str | None, path: str) -> None:
        if int_type in _NAMED_INTERRUPTS:
            _NAMED_INTERRUPTS[int_type](self.disk, path)
            return
        int_no = get_value(int_type or "")
        if 1 <= int_no <= layout.NO_OF_INTERRUPTS:
            loader.load_interrupt(self.disk, path, int_no)
        else:
            self._print('Invalid argument for "--int=" ')

    def _rm(self, args: list[str]) -> None:
        name = _arg(args, 0)
        if name is None:
            self._print('Missing <xfs_filename> for rm. See "help" for more information')
            return
        operations.delete_file(self.disk, name)

    def _export(self, args: list[str]) -> None:
        name, target = _arg(args, 0), _arg(args, 1)
        if name is None or target is None:
            self._print('Insufficient arguments for "export". See "help" for more information')
            return
        operations.export_file(self.disk, name, target)

    def _ls(self, args: list[str]) -> None:
        files = self.disk.list_files()
        if not files:
            self._print("The disk contains no files.")
        for entry in files:
            self._print(f"Filename: {entry.name} Filesize {entry.size}")

    def _df(self, args: list[str]) -> None:
        words = operations.free_list(self.disk)
        for position, word in enumerate(words):
            self._print(f"{position % layout.BLOCK_SIZE} \t - \t {word}  ")
        free = sum(get_value(word) == 0 for word in words)
        self._print(f"\nNo of Free Blocks = {free}", end="")
        self._print(f"\nTotal no of Blocks = {layout.NO_OF_DISK_BLOCKS}")

    def _cat(self, args: list[str]) -> None:
        name = _arg(args, 0)
        if name is None:
            self._print('Missing <xfs_filename> for cat. See "help" for more information')
            return
        for word in operations.file_contents(self.disk, name):
            self._print(f"{word}\t")

    def _copy(self, args: list[str]) -> None:
        if len(args) < 3:
            self._print('Insufficient arguments for "copy". See "help" for more information')
            return
        start, end = get_value(args[0]), get_value(args[1])
        operations.copy_blocks(self.disk, start, end, args[2][:_PATH_LIMIT])

    def _dump(self, args: list[str]) -> None:
        option = _arg(args, 0)
        if option == "--inodetable":
            operations.dump_inode_table(self.disk, "inodetable.txt")
        elif option == "--rootfile":
            operations.dump_root_file(self.disk, "rootfile.txt")
        else:
            self._print(
                f'Invalid argument "{option}" for dump. See "help" for more information'
            )

    def _exit(self, args: list[str]) -> None:
        raise SystemExit(0)

    # Interactive use

    def complete(self, text: str, line: str, begidx: int) -> list[str]:
        """Completions for the word ``text`` that starts at ``begidx`` in ``line``."""
        context = _tokens(line[:begidx])
        after_equals = begidx > 0 and line[begidx - 1] == "="
        if not context:
            return complete_commands(text)
        command = context[0]
        if command == "load":
            if after_equals:
                return complete_interrupts(text)
            if len(context) == 1:
                return complete_options(text)
            return []
        if command == "rm":
            if len(context) == 1:
                return complete_options(text)
            if after_equals:
                return complete_interrupts(text)
            return self._complete_files(text)
        if command == "cat":
            return self._complete_files(text)
        return []

    def _complete_files(self, text: str) -> list[str]:
        try:
            files = self.disk.list_files()
        except OSError:
            return []
        return [entry.name for entry in files if entry.name.startswith(text)]

    def loop(self, input_func: Callable[[str], str] = input) -> None:
        """Read and run commands until ``exit`` or end of input."""
        while True:
            try:
                line = input_func("# ")
            except EOFError:
                break
            command = line.strip()
            if not command:
                continue
            if command == "exit":
                break
            self.run_command(command)


def _install_completion(interface: Interface) -> None:
    try:
        import readline
    except ImportError:
        return
    matches: list[str] = []

    def completer(text: str, state: int) -> str | None:
        if state == 0:
            matches[:] = interface.complete(
                text, readline.get_line_buffer(), readline.get_begidx()
            )
        return matches[state] if state < len(matches) else None

    readline.set_completer_delims(_COMPLETER_DELIMS)
    readline.set_completer(completer)
    readline.parse_and_bind("tab: complete")


def main(argv: list[str] | None = None) -> int:
    """Run the arguments as one command, or start the interactive prompt."""
    args = sys.argv[1:] if argv is None else list(argv)
    disk = VirtualDisk(layout.DISK_NAME)
    if os.path.exists(disk.path):
        disk.load()
    interface = Interface(disk)
    if args:
        interface.run_command(" ".join(args))
    else:
        print(_BANNER)
        _install_completion(interface)
        interface.loop()
    return 0


if __name__ == "__main__":
    sys.exit(main())