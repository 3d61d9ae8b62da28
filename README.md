# xosfs

`xosfs` manages disk images in the XFS format, the small file system used by
the XSM teaching machine. It formats a disk image, loads executables, data
files, OS code, interrupt handlers and modules onto it, and lists, shows,
exports and removes what is stored there. It also provides some of the XSM
machine's building blocks: words, the register file, paged memory and the
machine disk.

## Installation

```
pip install .
```

Install with the `test` extra to run the test suite:

```
pip install ".[test]"
pytest
```

## The interactive interface

```
xfs-interface
```

This starts a prompt (`# `) working on `disk.xfs` in the current directory;
if that file exists, its free list, inode table and root file are read first.
Where the `readline` module is available, the prompt completes command names,
`load` options, interrupt names and file names on the disk. The prompt ends on
`exit` or at end of input.

A single command can be given on the command line instead:

```
xfs-interface fdisk
xfs-interface load --exec program.xsm
xfs-interface ls
```

Commands:

| Command | Effect |
| --- | --- |
| `fdisk` | Create `disk.xfs` and format it with the XFS file system |
| `load --exec <path>` | Load an executable file (`.xsm`) |
| `load --data <path>` | Load a data file (`.dat`), one word per line |
| `load --init <path>` | Load the INIT code |
| `load --os <path>` | Load the OS startup code |
| `load --idle <path>` | Load the idle code |
| `load --shell <path>` | Load the shell code |
| `load --library <path>` | Load the library code |
| `load --int=timer <path>` | Load the timer interrupt routine |
| `load --int=disk <path>` | Load the disk controller interrupt routine |
| `load --int=console <path>` | Load the console interrupt routine |
| `load --int=N <path>` | Load interrupt routine N (1 to 18) |
| `load --exhandler <path>` | Load the exception handler |
| `load --module N <path>` | Load module N (numbers 0 to 8 are accepted) |
| `export <xfs_file> <path>` | Write a file's words, joined, to a host file |
| `rm <xfs_file>` | Remove a file and free its blocks |
| `ls` | List all files with their sizes |
| `df` | Show the free list and the number of free blocks |
| `cat <xfs_file>` | Show the non-empty words of a file |
| `copy <start> <end> <path>` | Copy disk blocks start to end to a host file, one word per line |
| `dump --inodetable` | Write the inode table to `inodetable.txt` |
| `dump --rootfile` | Write the root file to `rootfile.txt` |
| `run <path>` | Run the commands listed in a file, one per line |
| `help` | List the commands |
| `exit` | Leave the interface |

For `load --exec` and `load --data` the file's base name may be at most 12
characters and must carry the `.xsm` or `.dat` extension. A path may start with
an environment variable, as in `$HOME/prog.xsm`. Failures (a missing file, a
full disk, a name already in use, code too large for its area) are printed as
messages.

Labels in OS code, interrupt handlers, modules, the exception handler and the
library are resolved to memory addresses while loading, based on the memory
page each piece of code is placed in. INIT, idle and shell code is loaded as
written.

## Using the library

```python
from xosfs.virtual_disk import VirtualDisk
from xosfs import operations, loader

disk = VirtualDisk("disk.xfs")
operations.format_disk(disk, True)
name = loader.load_data(disk, "numbers.dat")
for entry in disk.list_files():
    print(entry.name, entry.size)
print(operations.file_contents(disk, name))
```

- `xosfs.layout` holds the fixed disk and memory layout: block numbers and
  sizes of each region, with `interrupt_block`, `module_block`,
  `interrupt_page` and `module_page` to locate interrupt routines and modules.
- `xosfs.virtual_disk.VirtualDisk` keeps the system blocks of a disk file in
  memory and reads and writes them; it raises `DiskError` when the disk file
  cannot be opened or created.
- `xosfs.inode` finds, adds and removes inode table and root file entries.
- `xosfs.labels` resolves symbolic `JMP`, `CALL`, `JZ` and `JNZ` targets
  (`LabelTable`, `resolve_file`), raising `LabelError` for unknown labels.
- `xosfs.loader` places files and system code on the disk, raising
  `LoadError` when it cannot.
- `xosfs.operations` formats, deletes, lists, exports and copies.
- `xosfs.cli.Interface` runs the commands above against a `VirtualDisk`.

The `xosfs.xsm` package models parts of the machine: `Word` (sixteen
characters holding a number or a string), `RegisterFile` (R0–R19, P0–P3, BP,
SP, IP, PTBR, PTLR, EIP, EC, EPN, EMA), `Memory` with page table translation
that raises `MachineException` on faults, and `MachineDisk`, an in-memory copy
of all 512 disk blocks that is written back to its file on `close()` (by
default `../xfs-interface/disk.xfs`).

## What it does not do

The `xosfs.xsm` package does not run programs: there is no processor,
instruction decoder, interrupt or timer handling, console, or debugger. It
offers only the storage pieces listed above.