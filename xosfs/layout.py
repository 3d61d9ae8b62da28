"""On-disk and in-memory layout of the XFS disk image."""

# Machine parameters
XSM_WORD_SIZE = 16
XSM_MEMORY_NUMPAGES = 128
XSM_PAGE_SIZE = 512
XSM_INSTRUCTION_SIZE = 2

# Block geometry
BLOCK_SIZE = 512
WORD_SIZE = 16
BLOCK_BYTES = BLOCK_SIZE * WORD_SIZE

# Disk block map
OS_STARTUP_CODE = 0
DISK_FREE_LIST = 2
INODE = 3
ROOTFILE = 5
INIT_BLOCK = 7
SHELL_BLOCK = 9
IDLE_BLOCK = 11
LIBRARY_BLOCK = 13
EX_HANDLER = 15
TIMERINT = 17
DISKCONTROLLER_INT = 19
CONSOLE_INT = 21
INT0 = EX_HANDLER
INT1 = TIMERINT
INT2 = DISKCONTROLLER_INT
INT3 = CONSOLE_INT
INT4 = 23
INT18 = 51
MOD0 = 53
MOD7 = 67

OS_STARTUP_CODE_SIZE = 2
NO_OF_FREE_LIST_BLOCKS = 1
NO_OF_ROOTFILE_BLOCKS = 1
NO_OF_INIT_BLOCKS = 4
NO_OF_SHELL_BLOCKS = 2
NO_OF_IDLE_BLOCKS = 2
NO_OF_LIBRARY_BLOCKS = 2
EX_HANDLER_SIZE = 2
TIMERINT_SIZE = 2
DISKCONTROLLER_INT_SIZE = 2
CONSOLE_INT_SIZE = 2
INT1_SIZE = TIMERINT_SIZE
INT_SIZE = 2
MOD_SIZE = 2

NO_OF_INODE_BLOCKS = 2

NO_OF_INTERRUPTS = 18
NO_OF_MODULES = 8

DATA_START_BLOCK = 69
NO_OF_DATA_BLOCKS = 187

SWAP_START_BLOCK = 256
NO_OF_SWAP_BLOCKS = 256

NO_OF_DISK_BLOCKS = 512
DISK_SIZE = NO_OF_DISK_BLOCKS * BLOCK_SIZE

# Inode entries
INODE_MAX_FILE_NUM = 60
INODE_MAX_BLOCK_NUM = 4
INODE_ENTRY_FILETYPE = 0
INODE_ENTRY_FILENAME = 1
INODE_ENTRY_FILESIZE = 2
INODE_ENTRY_USERID = 3
INODE_ENTRY_PERMISSION = 4
INODE_ENTRY_DATABLOCK = 8
INODE_NUM_DATA_BLOCKS = INODE_MAX_BLOCK_NUM
INODE_ENTRY_SIZE = 16
INODE_SIZE = NO_OF_INODE_BLOCKS * BLOCK_SIZE

FILETYPE_ROOT = 1
FILETYPE_DATA = 2
FILETYPE_EXEC = 3

# Root file entries
ROOTFILE_ENTRY_FILENAME = 0
ROOTFILE_ENTRY_FILESIZE = 1
ROOTFILE_ENTRY_FILETYPE = 2
ROOTFILE_ENTRY_USERNAME = 3
ROOTFILE_ENTRY_PERMISSION = 4
ROOTFILE_ENTRY_SIZE = 8

# In-memory copy of the disk
NO_BLOCKS_TO_COPY = 69
EXTRA_BLOCKS = 1
TEMP_BLOCK = 69

DISK_NAME = "disk.xfs"

# Memory organisation (page numbers)
MEM_INIT_BASIC_BLOCK = 65
MEM_OS_STARTUP_CODE = 1
MEM_EX_HANDLER = 2
MEM_INT1 = 4
MEM_TIMERINT = 4
MEM_DISKCONTROLLER_INT = 6
MEM_CONSOLE_INT = 8
MEM_MOD0 = 40
MEM_INIT_PAGE = 65
MEM_LIBRARY_PAGE = 63
MEM_INT_SIZE = 2
MEM_MOD_SIZE = 2
PAGE_SIZE = 512


def interrupt_block(int_no: int) -> int:
    """First disk block of interrupt routine ``int_no`` (1-based)."""
    return (int_no - 1) * INT_SIZE + INT1


def module_block(mod_no: int) -> int:
    """First disk block of module ``mod_no`` (0-based)."""
    return mod_no * MOD_SIZE + MOD0


def interrupt_page(int_no: int) -> int:
    """Memory page that interrupt routine ``int_no`` is loaded to."""
    return (int_no - 1) * MEM_INT_SIZE + MEM_INT1


def module_page(mod_no: int) -> int:
    """Memory page that module ``mod_no`` is loaded to."""
    return mod_no * MEM_MOD_SIZE + MEM_MOD0