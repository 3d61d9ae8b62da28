import pytest

from xosfs.xsm.registers import RegisterFile


@pytest.fixture
def regs():
    return RegisterFile()


def test_register_count(regs):
    assert len(regs) == 33
    assert len(regs.names()) == len(regs)


def test_code_is_case_insensitive(regs):
    assert regs.code("sp") == 25
    assert regs.code("SP") == regs.code("Sp")
    assert regs.code("R0") == 0


def test_unknown_code_is_none(regs):
    assert regs.code("R99") is None


def test_integer_round_trip(regs):
    regs.store_integer("r5", 123)
    assert regs.integer("R5") == 123
    assert regs.string("R5") == "123"


def test_string_round_trip(regs):
    regs.store_string("EIP", "hello")
    assert regs.string("eip") == "hello"


def test_string_of_unknown_register_is_none(regs):
    assert regs.string("XYZ") is None


def test_register_of_unknown_name_raises(regs):
    with pytest.raises(KeyError):
        regs.register("XYZ")
    with pytest.raises(KeyError):
        regs.store_integer("XYZ", 1)


def test_registers_are_distinct(regs):
    regs.store_integer("R1", 1)
    regs.store_integer("R2", 2)
    assert regs.integer("R1") == 1
    assert regs.integer("R2") == 2


def test_zero_register(regs):
    assert regs.zero.to_int() == 0


@pytest.mark.parametrize(
    "name, allowed",
    [
        ("R0", True),
        ("R19", True),
        ("SP", True),
        ("P0", False),
        ("P3", False),
        ("PTBR", False),
        ("PTLR", True),
        ("NOPE", False),
    ],
)
def test_user_mode(regs, name, allowed):
    assert regs.user_mode(name) is allowed