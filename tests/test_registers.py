import pytest

from exposkit.xsm.registers import RegisterFile


@pytest.fixture
def registers():
    return RegisterFile()


def test_names(registers):
    names = registers.names()
    assert len(names) == 33
    assert names[0] == "R0"
    assert names[-1] == "EMA"
    assert len(registers) == len(names)


def test_code_is_case_insensitive(registers):
    assert registers.code("ptbr") == registers.code("PTBR") == 27
    assert registers.code("XX") is None


def test_store_and_read(registers):
    registers.store_integer("r5", 99)
    assert registers.integer("R5") == 99
    registers.store_string("P1", "hello")
    assert registers.string("p1") == "hello"


def test_get_returns_live_register(registers):
    registers.get("r1").store_integer(5)
    assert registers.integer("R1") == 5


def test_unknown_register(registers):
    assert registers.string("QQ") is None
    assert registers.get("QQ") is None
    with pytest.raises(KeyError):
        registers.store_integer("QQ", 1)
    with pytest.raises(KeyError):
        registers.integer("QQ")


@pytest.mark.parametrize(
    "name, allowed",
    [
        ("R0", True),
        ("R19", True),
        ("SP", True),
        ("BP", True),
        ("P0", False),
        ("P3", False),
        ("PTBR", False),
        ("PTLR", True),
        ("nope", False),
    ],
)
def test_user_mode(registers, name, allowed):
    assert registers.user_mode(name) is allowed