import pytest

from xosfs import layout
from xosfs.virtual_disk import DiskError, FileEntry, VirtualDisk, get_value


@pytest.fixture
def disk(tmp_path):
    vd = VirtualDisk(tmp_path / "disk.xfs")
    vd.create(truncate=True)
    return vd


@pytest.mark.parametrize(
    "text, expected",
    [("42", 42), ("  -7x", -7), ("+3", 3), ("abc", 0), ("", 0)],
)
def test_get_value(text, expected):
    assert get_value(text) == expected


def test_check_exists_missing_file(tmp_path):
    vd = VirtualDisk(tmp_path / "absent.xfs")
    with pytest.raises(DiskError):
        vd.check_exists()


def test_write_block_missing_file(tmp_path):
    vd = VirtualDisk(tmp_path / "absent.xfs")
    with pytest.raises(DiskError):
        vd.write_block(0, 0)


def test_create_into_missing_directory(tmp_path):
    vd = VirtualDisk(tmp_path / "nodir" / "disk.xfs")
    with pytest.raises(DiskError):
        vd.create(truncate=True)


def test_create_truncates_only_when_asked(tmp_path):
    path = tmp_path / "disk.xfs"
    path.write_bytes(b"content")
    vd = VirtualDisk(path)
    vd.create(truncate=False)
    assert path.read_bytes() == b"content"
    vd.create(truncate=True)
    assert path.read_bytes() == b""


def test_block_round_trip(disk):
    disk.set_word(4, 0, "MOV R0, 5")
    disk.set_word(4, 511, "-12")
    disk.write_block(4, 100)
    disk.clear()
    assert disk.word(4, 0) == ""
    disk.read_block(4, 100)
    assert disk.word(4, 0) == "MOV R0, 5"
    assert disk.word(4, 511) == "-12"


def test_words_are_nul_padded_on_disk(disk):
    disk.set_word(3, 1, "abc")
    disk.write_block(3, 3)
    raw = open(disk.path, "rb").read()
    start = 3 * layout.BLOCK_BYTES + layout.WORD_SIZE
    assert raw[start : start + layout.WORD_SIZE] == b"abc".ljust(layout.WORD_SIZE, b"\0")
    assert len(raw) == 4 * layout.BLOCK_BYTES


def test_free_list_defaults(disk):
    disk.set_defaults(layout.DISK_FREE_LIST)
    assert disk.word(layout.DISK_FREE_LIST, layout.DATA_START_BLOCK - 1) == "1"
    assert disk.word(layout.DISK_FREE_LIST, layout.DATA_START_BLOCK) == "0"
    assert disk.word(layout.DISK_FREE_LIST, layout.NO_OF_DISK_BLOCKS - 1) == "0"


def test_find_free_block_claims_in_order(disk):
    disk.set_defaults(layout.DISK_FREE_LIST)
    first = disk.find_free_block()
    second = disk.find_free_block()
    assert first == layout.DATA_START_BLOCK
    assert second == layout.DATA_START_BLOCK + 1
    assert disk.word(layout.DISK_FREE_LIST, first) == "1"


def test_find_free_block_when_full(disk):
    for index in range(layout.BLOCK_SIZE):
        disk.set_word(layout.DISK_FREE_LIST, index, "1")
    assert disk.find_free_block() is None


def test_free_blocks_stops_at_terminator(disk):
    disk.set_defaults(layout.DISK_FREE_LIST)
    a = disk.find_free_block()
    b = disk.find_free_block()
    c = disk.find_free_block()
    disk.set_word(layout.TEMP_BLOCK, 0, "junk")
    disk.write_block(layout.TEMP_BLOCK, a)
    disk.free_blocks([a, -1, c])
    assert disk.get_value_at(layout.DISK_FREE_LIST * layout.BLOCK_SIZE + a) == 0
    assert disk.get_value_at(layout.DISK_FREE_LIST * layout.BLOCK_SIZE + b) == 1
    assert disk.get_value_at(layout.DISK_FREE_LIST * layout.BLOCK_SIZE + c) == 1
    disk.read_block(0, a)
    assert disk.word(0, 0) == ""


def test_inode_defaults(disk):
    disk.set_defaults(layout.INODE)
    base = layout.INODE_ENTRY_SIZE
    assert disk.word(layout.INODE, base + layout.INODE_ENTRY_FILENAME) == "-1"
    assert disk.word(layout.INODE, base + layout.INODE_ENTRY_FILESIZE) == "0"
    assert disk.word(layout.INODE + 1, layout.INODE_ENTRY_DATABLOCK) == "-1"


def test_rootfile_defaults(disk):
    disk.set_defaults(layout.ROOTFILE)
    base = layout.ROOTFILE_ENTRY_SIZE
    assert disk.word(layout.ROOTFILE, base + layout.ROOTFILE_ENTRY_FILESIZE) == "0"
    assert disk.word(layout.ROOTFILE, base + layout.ROOTFILE_ENTRY_FILETYPE) == "-1"


def test_unknown_structure(disk):
    with pytest.raises(ValueError):
        disk.set_defaults(layout.TEMP_BLOCK)
    with pytest.raises(ValueError):
        disk.commit(layout.TEMP_BLOCK)


def test_commit_inode_includes_rootfile(disk):
    disk.set_defaults(layout.DISK_FREE_LIST)
    disk.set_defaults(layout.INODE)
    disk.set_defaults(layout.ROOTFILE)
    disk.set_word(layout.ROOTFILE, 0, "root")
    disk.set_word(layout.INODE, 1, "root")
    disk.commit(layout.DISK_FREE_LIST)
    disk.commit(layout.INODE)
    other = VirtualDisk(disk.path)
    other.load()
    assert other.word(layout.ROOTFILE, 0) == "root"
    assert other.word(layout.INODE, 1) == "root"
    assert other.word(layout.DISK_FREE_LIST, layout.DATA_START_BLOCK) == "0"


def test_value_and_string_at(disk):
    address = layout.INODE * layout.BLOCK_SIZE + 520
    disk.store_value_at(address, -5)
    assert disk.get_value_at(address) == -5
    assert disk.word(layout.INODE + 1, 8) == "-5"
    disk.store_string_at(address, "name.dat")
    assert disk.word(layout.INODE + 1, 8) == "name.dat"


def test_list_files(disk):
    disk.set_defaults(layout.INODE)
    assert disk.list_files() == []
    base = layout.INODE_ENTRY_SIZE * 2
    disk.set_word(layout.INODE + 1, base + layout.INODE_ENTRY_FILENAME, "a.dat")
    disk.set_word(layout.INODE + 1, base + layout.INODE_ENTRY_FILESIZE, "512")
    assert disk.list_files() == [FileEntry("a.dat", 512)]


def test_list_files_requires_disk(tmp_path):
    vd = VirtualDisk(tmp_path / "absent.xfs")
    with pytest.raises(DiskError):
        vd.list_files()