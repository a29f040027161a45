import pytest

from exposkit.xfs.labels import (
    LabelError,
    LabelTable,
    has_letters,
    is_label,
    label_name,
    resolve_labels,
)

PROGRAM = [
    "start:\n",
    "MOV R0, 1\n",
    "loop:\n",
    "JMP loop\n",
    "JZ R0, start\n",
    "JNZ R1, 512\n",
    "HALT\n",
]


def test_is_label():
    assert is_label("start:") is True
    assert is_label("MOV R0, 1") is False
    assert is_label("") is False


def test_has_letters():
    assert has_letters("L1") is True
    assert has_letters("1024") is False
    assert has_letters(None) is False
    assert has_letters("") is False


def test_label_name_strips_colons():
    assert label_name("loop:") == "loop"
    assert label_name("::x:") == "x"


def test_resolve_with_zero_base():
    out = resolve_labels(PROGRAM, 0)
    assert out == ["MOV R0, 1", "JMP 2", "JZ R0, 0", "JNZ R1, 512", "HALT"]


def test_base_address_shifts_resolved_targets_only():
    plain = resolve_labels(PROGRAM, 0)
    shifted = resolve_labels(PROGRAM, 512)
    assert len(plain) == len(shifted)
    assert shifted[0] == plain[0]
    assert shifted[3] == plain[3]
    assert int(shifted[1].split()[-1]) == int(plain[1].split()[-1]) + 512
    assert int(shifted[2].split()[-1]) == int(plain[2].split()[-1]) + 512


def test_call_and_lowercase_opcode():
    lines = ["f:\n", "RET\n", "call f\n", "jmp f\n"]
    assert resolve_labels(lines, 0) == ["RET", "call 0", "jmp 0"]


def test_blank_lines_do_not_take_addresses():
    lines = ["\n", "NOP\n", "\n", "here:\n", "JMP here\n"]
    assert resolve_labels(lines, 0) == ["NOP", "JMP 2"]


def test_unknown_label_raises():
    with pytest.raises(LabelError) as info:
        resolve_labels(["JMP nowhere\n"], 0)
    assert info.value.label == "nowhere"
    assert "nowhere" in str(info.value)


def test_table_later_definition_wins_and_reset():
    table = LabelTable()
    table.insert("a", 1)
    table.insert("a", 5)
    assert table.target("a") == 5
    assert "a" in table
    table.reset()
    assert table.target("a") is None
    assert len(table) == 0


def test_scan_and_resolve_separately():
    table = LabelTable()
    table.scan(PROGRAM)
    assert table.target("start") == 0
    assert table.target("loop") == 2
    assert table.resolve(PROGRAM, 0) == resolve_labels(PROGRAM, 0)


def test_numeric_targets_left_alone():
    lines = ["JMP 1024\n", "MOV R0, loop\n"]
    assert resolve_labels(lines, 0) == ["JMP 1024", "MOV R0, loop"]