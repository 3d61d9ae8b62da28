import pytest

from xosfs import layout
from xosfs.labels import LabelError, LabelTable, is_charstring, is_label, resolve_file


def test_is_label():
    assert is_label("start:")
    assert not is_label("MOV R0, 1")
    assert not is_label("")


def test_is_charstring():
    assert is_charstring("L1")
    assert not is_charstring("123")
    assert not is_charstring(None)


def test_collect_spacing_between_labels():
    table = LabelTable()
    table.collect(["start:\n", "MOV R0, 1\n", "loop:\n", "JMP loop\n"])
    assert table.target("loop") - table.target("start") == layout.XSM_INSTRUCTION_SIZE


def test_target_missing_is_none():
    table = LabelTable()
    assert table.target("nowhere") is None


def test_insert_latest_wins_and_reset():
    table = LabelTable()
    table.insert("a", 4)
    table.insert("a", 8)
    assert table.target("a") == 8
    table.reset()
    assert table.target("a") is None


def test_resolve_unconditional_jump():
    lines = ["start:", "MOV R0, 1", "JMP start"]
    table = LabelTable()
    table.collect(lines)
    result = table.resolve_lines(lines, 1024)
    assert result == ["MOV R0, 1", f"JMP {1024 + table.target('start')}"]


def test_resolve_conditional_jump():
    lines = ["MOV R0, 1\n", "loop:\n", "JZ R0, loop\n"]
    table = LabelTable()
    table.collect(lines)
    result = table.resolve_lines(lines, 512)
    assert result[-1] == f"JZ R0, {512 + table.target('loop')}"


def test_numeric_jump_untouched():
    table = LabelTable()
    table.collect(["JMP 100"])
    assert table.resolve_lines(["JMP 100"], 512) == ["JMP 100"]


def test_unresolved_label_raises():
    table = LabelTable()
    with pytest.raises(LabelError):
        table.resolve_lines(["CALL missing"], 0)


def test_resolve_file(tmp_path):
    source = tmp_path / "code.spl"
    source.write_text("top:\nMOV R1, 2\nCALL top\n")
    result = resolve_file(source, layout.PAGE_SIZE)
    assert result == ["MOV R1, 2", f"CALL {layout.PAGE_SIZE}"]


def test_resolve_file_missing(tmp_path):
    with pytest.raises(LabelError):
        resolve_file(tmp_path / "absent.spl", 0)