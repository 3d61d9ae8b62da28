import pytest

from xosfs.xsm.memory import (
    EXP_ILLMEM,
    EXP_PAGEFAULT,
    MEMORY_SIZE,
    MachineException,
    Memory,
)


@pytest.fixture
def mem():
    return Memory()


def test_size(mem):
    assert len(mem) == MEMORY_SIZE == 65536


def test_bounds(mem):
    assert mem.is_valid(0)
    assert mem.is_valid(MEMORY_SIZE - 1)
    assert not mem.is_valid(MEMORY_SIZE)
    assert not mem.is_valid(-1)
    assert mem.word(-1) is None
    assert mem.word(MEMORY_SIZE) is None


def test_word_is_live(mem):
    mem.word(10).store_int(99)
    assert mem.word(10).to_int() == 99


def test_page_of(mem):
    assert mem.page_of(1023) == 1
    assert mem.page_of(512) == 1
    assert mem.page_of(511) == 0


def test_page_starts_at_page_boundary(mem):
    mem.word(512).store_str("first")
    words = mem.page(1)
    assert len(words) == 512
    assert words[0] is mem.word(512)
    assert mem.page(200) is None


def _map(mem, ptbr, page, target, flags):
    mem.word(ptbr + page * 2).store_int(target)
    mem.word(ptbr + page * 2 + 1).store_str(flags)


def test_translate_address(mem):
    _map(mem, 1000, 1, 5, "0110")
    physical = mem.translate_address(1000, 512 + 7, True)
    assert mem.page_of(physical) == 5
    assert physical % 512 == 7


def test_translate_page_fault(mem):
    _map(mem, 1000, 2, 5, "0000")
    with pytest.raises(MachineException) as info:
        mem.translate_address(1000, 2 * 512 + 3, False)
    assert info.value.code == EXP_PAGEFAULT
    assert info.value.epn == 2
    assert info.value.ma == 2 * 512 + 3


def test_read_only_page(mem):
    _map(mem, 1000, 0, 9, "0100")
    assert mem.translate_page(1000, 0, False) == 9
    with pytest.raises(MachineException) as info:
        mem.translate_page(1000, 0, True)
    assert info.value.code == EXP_ILLMEM


def test_raw_instruction(mem):
    mem.word(100).store_str("MOV R0,")
    mem.word(101).store_str("R1")
    assert mem.raw_instruction(100) == "MOV R0,R1"


def test_raw_instruction_out_of_range(mem):
    with pytest.raises(MachineException):
        mem.raw_instruction(MEMORY_SIZE - 1)