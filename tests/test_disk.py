import pytest

from xosfs.xsm.disk import DISK_BLOCK_NUM, DISK_BLOCK_SIZE, MachineDisk
from xosfs.xsm.word import Word


@pytest.fixture
def disk_path(tmp_path):
    return tmp_path / "disk.xfs"


def _page(prefix):
    return [Word(f"{prefix}{index}") for index in range(DISK_BLOCK_SIZE)]


def test_missing_file_is_created(disk_path):
    disk = MachineDisk(disk_path)
    assert disk_path.exists()
    assert all(word.value == "" for word in disk.block(0))


def test_write_then_read_block(disk_path):
    disk = MachineDisk(disk_path)
    page = _page("w")
    disk.write_page(page, 7)
    copy = disk.read_block(7)
    assert copy == page
    copy[0].store_str("changed")
    assert disk.block(7)[0].value == "w0"


def test_block_is_live(disk_path):
    disk = MachineDisk(disk_path)
    disk.block(3)[5].store_int(42)
    assert disk.read_block(3)[5].to_int() == 42


def test_close_writes_whole_disk(disk_path):
    disk = MachineDisk(disk_path)
    written = disk.close()
    assert written == DISK_BLOCK_NUM * DISK_BLOCK_SIZE * 16
    assert disk_path.stat().st_size == written


def test_contents_survive_reopen(disk_path):
    with MachineDisk(disk_path) as disk:
        disk.write_page(_page("v"), DISK_BLOCK_NUM - 1)
    reopened = MachineDisk(disk_path)
    assert reopened.read_block(DISK_BLOCK_NUM - 1) == _page("v")
    assert reopened.block(0)[0].value == ""


def test_bad_block_number(disk_path):
    disk = MachineDisk(disk_path)
    with pytest.raises(IndexError):
        disk.block(DISK_BLOCK_NUM)
    with pytest.raises(IndexError):
        disk.read_block(-1)


def test_write_page_needs_full_page(disk_path):
    disk = MachineDisk(disk_path)
    with pytest.raises(ValueError):
        disk.write_page([Word("x")], 1)