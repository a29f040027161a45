"""The machine's disk: a file of 512 blocks kept in memory while running."""

from __future__ import annotations

from os import PathLike
from typing import Sequence

from exposkit.xsm.word import XSM_PAGE_SIZE, XSM_WORD_SIZE, Word

XSM_DISK_BLOCK_NUM = 512
XSM_DISK_BLOCK_SIZE = XSM_PAGE_SIZE

_BLOCK_BYTES = XSM_DISK_BLOCK_SIZE * XSM_WORD_SIZE
_DISK_BYTES = _BLOCK_BYTES * XSM_DISK_BLOCK_NUM


class Disk:
    """Memory copy of a disk file; changes reach the file on close."""

    def __init__(self, path: str | PathLike) -> None:
        self.path = path
        self._buffer = bytearray(_DISK_BYTES)
        try:
            with open(path, "rb") as handle:
                data = handle.read(_DISK_BYTES)
        except FileNotFoundError:
            with open(path, "wb"):
                pass
        else:
            self._buffer[:len(data)] = data

    def __enter__(self) -> "Disk":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def block(self, number: int) -> list[Word]:
        """The words of a block, as live views into the disk copy."""
        if not 0 <= number < XSM_DISK_BLOCK_NUM:
            raise IndexError(f"block {number} out of range")
        start = number * _BLOCK_BYTES
        return [
            Word.view(self._buffer, start + offset * XSM_WORD_SIZE)
            for offset in range(XSM_DISK_BLOCK_SIZE)
        ]

    def _check_page(self, page: Sequence[Word]) -> None:
        if len(page) != XSM_PAGE_SIZE:
            raise ValueError(f"a page holds exactly {XSM_PAGE_SIZE} words")

    def write_page(self, page: Sequence[Word], block_number: int) -> None:
        """Copy a memory page into a disk block."""
        self._check_page(page)
        for target, source in zip(self.block(block_number), page):
            target.copy_from(source)

    def read_block(self, page: Sequence[Word], block_number: int) -> None:
        """Copy a disk block into a memory page."""
        self._check_page(page)
        for target, source in zip(page, self.block(block_number)):
            target.copy_from(source)

    def close(self) -> int:
        """Write the whole disk back to its file; returns the number of bytes written."""
        with open(self.path, "wb") as handle:
            return handle.write(self._buffer)