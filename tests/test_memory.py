import pytest

from exposkit.xsm.exceptions import AccessViolation, IllegalPage, PageFault
from exposkit.xsm.memory import MEMORY_SIZE, Memory
from exposkit.xsm.word import XSM_MEMORY_NUMPAGES, XSM_PAGE_SIZE

PTBR = 1000


@pytest.fixture
def memory():
    return Memory()


def set_entry(memory, page, physical, aux):
    memory.word(PTBR + page * 2).store_integer(physical)
    memory.word(PTBR + page * 2 + 1).store_string(aux)


def test_valid_addresses(memory):
    assert len(memory) == XSM_PAGE_SIZE * XSM_MEMORY_NUMPAGES
    assert memory.is_valid(0)
    assert memory.is_valid(MEMORY_SIZE - 1)
    assert not memory.is_valid(MEMORY_SIZE)
    assert not memory.is_valid(-1)


def test_word_out_of_range(memory):
    with pytest.raises(IndexError):
        memory.word(MEMORY_SIZE)


def test_words_persist(memory):
    memory.word(77).store_string("kept")
    assert memory.word(77).text == "kept"
    assert memory.word(78).text == ""


def test_page_of(memory):
    assert memory.page_of(XSM_PAGE_SIZE * 2 + 3) == 2
    assert memory.page_of(-5) is None


def test_translate_writes_to_physical_page(memory):
    set_entry(memory, 0, 5, "0110")
    address = memory.translate_address(PTBR, 10, 7, True)
    memory.word(address).store_string("x")
    assert memory.page(5)[7].text == "x"


def test_translate_second_page(memory):
    set_entry(memory, 1, 9, "0110")
    address = memory.translate_address(PTBR, 10, XSM_PAGE_SIZE + 4, False)
    assert memory.page_of(address) == 9
    assert address % XSM_PAGE_SIZE == 4


def test_page_fault(memory):
    set_entry(memory, 0, 5, "0010")
    with pytest.raises(PageFault) as info:
        memory.translate_address(PTBR, 10, 3, False)
    assert info.value.page == 0


def test_read_only_page(memory):
    set_entry(memory, 0, 5, "0100")
    assert memory.page_of(memory.translate_address(PTBR, 10, 3, False)) == 5
    with pytest.raises(AccessViolation) as info:
        memory.translate_address(PTBR, 10, 3, True)
    assert info.value.address == 3


def test_page_beyond_limit(memory):
    address = XSM_PAGE_SIZE * 4
    with pytest.raises(IllegalPage) as info:
        memory.translate_address(PTBR, 4, address, False)
    assert info.value.address == address


def test_negative_address_is_illegal(memory):
    with pytest.raises(IllegalPage):
        memory.translate_address(PTBR, 4, -1, False)


def test_raw_instruction(memory):
    memory.word(512).store_string("MOV R0,")
    memory.word(513).store_string("5")
    assert memory.raw_instruction(512) == "MOV R0,5"


def test_page_is_live_and_bounded(memory):
    words = memory.page(3)
    assert len(words) == XSM_PAGE_SIZE
    words[0].store_string("start")
    assert memory.word(3 * XSM_PAGE_SIZE).text == "start"
    with pytest.raises(IndexError):
        memory.page(XSM_MEMORY_NUMPAGES)