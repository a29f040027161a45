"""The XSM main memory and its address translation."""

from __future__ import annotations

from exposkit.xsm.exceptions import AccessViolation, IllegalPage, PageFault, TranslationError
from exposkit.xsm.word import (
    XSM_INSTRUCTION_SIZE,
    XSM_MEMORY_NUMPAGES,
    XSM_PAGE_SIZE,
    XSM_WORD_SIZE,
    Word,
)

MEMORY_SIZE = XSM_PAGE_SIZE * XSM_MEMORY_NUMPAGES

INSTR_FETCH = -5
OPER_FETCH = -6
DEBUG_FETCH = -7


class Memory:
    """128 pages of 512 words, initially all empty."""

    def __init__(self) -> None:
        self._buffer = bytearray(MEMORY_SIZE * XSM_WORD_SIZE)

    def __len__(self) -> int:
        return MEMORY_SIZE

    def is_valid(self, address: int) -> bool:
        return 0 <= address < MEMORY_SIZE

    def word(self, address: int) -> Word:
        """The word at a physical address; IndexError outside memory."""
        if not self.is_valid(address):
            raise IndexError(f"memory address {address} out of range")
        return Word.view(self._buffer, address * XSM_WORD_SIZE)

    def page_of(self, address: int) -> int | None:
        """Page number of an address, or None for a negative address."""
        if address < 0:
            return None
        return address // XSM_PAGE_SIZE

    def translate_page(self, ptbr: int, ptlr: int, page: int | None, write: bool) -> int:
        """Physical page of a logical page, through the page table at ``ptbr``."""
        if page is None or page < 0 or page >= ptlr:
            raise IllegalPage(page=page)
        entry = ptbr + page * 2
        physical = self.word(entry).integer()
        info = self.word(entry + 1).text
        if info[1:2] == "0":
            raise PageFault(page=page)
        if write and info[2:3] == "0":
            raise AccessViolation(page=page)
        return physical

    def translate_address(self, ptbr: int, ptlr: int, address: int, write: bool) -> int:
        """Physical address of a logical address; raises a TranslationError on failure."""
        page = self.page_of(address)
        try:
            physical = self.translate_page(ptbr, ptlr, page, write)
        except TranslationError as exc:
            exc.address = address
            raise
        return physical * XSM_PAGE_SIZE + address % XSM_PAGE_SIZE

    def raw_instruction(self, address: int) -> str:
        """The text of the instruction stored in the words starting at ``address``."""
        return "".join(
            self.word(address + offset).text for offset in range(XSM_INSTRUCTION_SIZE)
        )

    def page(self, number: int) -> list[Word]:
        """The 512 words of a page, as live views into memory."""
        if not 0 <= number < XSM_MEMORY_NUMPAGES:
            raise IndexError(f"page {number} out of range")
        start = number * XSM_PAGE_SIZE
        return [self.word(start + offset) for offset in range(XSM_PAGE_SIZE)]