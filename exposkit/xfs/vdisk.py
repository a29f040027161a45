"""The disk file and its in-memory copy."""

from __future__ import annotations

import re
from os import PathLike
from typing import Iterable

from exposkit.xfs.layout import (
    BLOCK_SIZE,
    DATA_START_BLOCK,
    DISK_FREE_LIST,
    INODE,
    INODE_ENTRY_FILENAME,
    INODE_ENTRY_FILESIZE,
    INODE_ENTRY_SIZE,
    NO_OF_DISK_BLOCKS,
    NO_OF_FREE_LIST_BLOCKS,
    NO_OF_INODE_BLOCKS,
    NO_OF_ROOTFILE_BLOCKS,
    ROOTFILE,
    ROOTFILE_ENTRY_FILENAME,
    ROOTFILE_ENTRY_FILESIZE,
    ROOTFILE_ENTRY_SIZE,
    TEMP_BLOCK,
    USER_TABLE_OFFSET,
    WORD_SIZE,
    XFS_NUM_BLOCKS,
    XosFile,
)

_BLOCK_BYTES = BLOCK_SIZE * WORD_SIZE
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_USER_TABLE_IN_LAST_BLOCK = USER_TABLE_OFFSET - BLOCK_SIZE * (NO_OF_INODE_BLOCKS - 1)


class DiskError(Exception):
    """Base error for disk file problems."""

    default_message = "Disk error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class DiskOpenError(DiskError):
    """The disk file could not be opened."""

    default_message = "Unable to open disk file"


class DiskCreateError(DiskError):
    """The disk file could not be created."""

    default_message = "Failed to create disk file"


def word_value(text: str) -> int:
    """Integer value of a word: its leading integer, or 0 if it has none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _encode_word(text: str) -> bytes:
    return text.encode("latin-1", "replace")[:WORD_SIZE].ljust(WORD_SIZE, b"\0")


def _decode_word(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


class VirtualDisk:
    """A disk file of 512 blocks of 512 words, with a memory copy of every block."""

    def __init__(self, path: str | PathLike) -> None:
        self.path = path
        self.blocks: list[list[str]] = [[""] * BLOCK_SIZE for _ in range(XFS_NUM_BLOCKS)]

    def create(self, format: bool) -> None:
        """Create the disk file; truncate it as well when ``format`` is true."""
        try:
            with open(self.path, "wb" if format else "ab"):
                pass
        except OSError as exc:
            raise DiskCreateError() from exc

    def check_exists(self) -> None:
        """Raise DiskOpenError unless the disk file can be opened."""
        try:
            with open(self.path, "rb"):
                pass
        except OSError as exc:
            raise DiskOpenError() from exc

    def read_block(self, virt_block: int, file_block: int) -> None:
        """Read disk block ``file_block`` into memory block ``virt_block``."""
        try:
            with open(self.path, "rb") as handle:
                handle.seek(_BLOCK_BYTES * file_block)
                data = handle.read(_BLOCK_BYTES)
        except OSError as exc:
            raise DiskOpenError() from exc
        block = self.blocks[virt_block]
        for index in range(len(data) // WORD_SIZE):
            block[index] = _decode_word(data[index * WORD_SIZE:(index + 1) * WORD_SIZE])

    def write_block(self, virt_block: int, file_block: int) -> None:
        """Write memory block ``virt_block`` to disk block ``file_block``."""
        payload = b"".join(_encode_word(word) for word in self.blocks[virt_block])
        try:
            with open(self.path, "r+b") as handle:
                handle.seek(_BLOCK_BYTES * file_block)
                handle.write(payload)
        except OSError as exc:
            raise DiskOpenError() from exc

    def word(self, block: int, index: int) -> str:
        return self.blocks[block][index]

    def set_word(self, block: int, index: int, text: str) -> None:
        self.blocks[block][index] = text

    def empty_block(self, block: int) -> None:
        """Set every word of a memory block to the empty string."""
        self.blocks[block] = [""] * BLOCK_SIZE

    def get_value_at(self, address: int) -> int:
        """Integer value of the word at a linear word address."""
        block, index = divmod(address, BLOCK_SIZE)
        return word_value(self.blocks[block][index])

    def store_value_at(self, address: int, value: int) -> None:
        block, index = divmod(address, BLOCK_SIZE)
        self.blocks[block][index] = str(int(value))

    def store_string_at(self, address: int, value: str) -> None:
        block, index = divmod(address, BLOCK_SIZE)
        self.blocks[block][index] = value

    def free_blocks(self, blocks: Iterable[int]) -> None:
        """Mark blocks free and blank them on disk, stopping at the first -1 or 0."""
        for number in blocks:
            if number in (-1, 0):
                break
            self.store_value_at(DISK_FREE_LIST * BLOCK_SIZE + number, 0)
            self.empty_block(TEMP_BLOCK)
            self.write_block(TEMP_BLOCK, number)

    def find_free_block(self) -> int | None:
        """Claim the first free block in the free list; None if the disk is full."""
        for offset in range(NO_OF_FREE_LIST_BLOCKS):
            block = self.blocks[DISK_FREE_LIST + offset]
            for index, word in enumerate(block):
                if word_value(word) == 0:
                    block[index] = "1"
                    return offset * BLOCK_SIZE + index
        return None

    def set_default_values(self, structure: int) -> None:
        """Fill the free list, inode table or root file with its initial contents."""
        if structure == DISK_FREE_LIST:
            for number in range(NO_OF_FREE_LIST_BLOCKS * BLOCK_SIZE):
                used = not DATA_START_BLOCK <= number < NO_OF_DISK_BLOCKS
                block, index = divmod(number, BLOCK_SIZE)
                self.blocks[DISK_FREE_LIST + block][index] = "1" if used else "0"
        elif structure == INODE:
            for offset in range(NO_OF_INODE_BLOCKS):
                self.blocks[INODE + offset] = ["-1"] * BLOCK_SIZE
            for entry in range(0, USER_TABLE_OFFSET, INODE_ENTRY_SIZE):
                self.store_value_at(INODE * BLOCK_SIZE + entry + INODE_ENTRY_FILESIZE, 0)
        elif structure == ROOTFILE:
            for offset in range(NO_OF_ROOTFILE_BLOCKS):
                block = ["-1"] * BLOCK_SIZE
                for entry in range(0, BLOCK_SIZE, ROOTFILE_ENTRY_SIZE):
                    block[entry + ROOTFILE_ENTRY_FILESIZE] = "0"
                    block[entry + ROOTFILE_ENTRY_FILENAME] = "-1"
                self.blocks[ROOTFILE + offset] = block
        else:
            raise ValueError(f"unknown disk structure {structure}")

    def commit(self, structure: int) -> None:
        """Write a structure's memory copy to the disk; the inode table brings the root file along."""
        if structure == DISK_FREE_LIST:
            blocks = range(DISK_FREE_LIST, DISK_FREE_LIST + NO_OF_FREE_LIST_BLOCKS)
        elif structure == INODE:
            blocks = [
                *range(INODE, INODE + NO_OF_INODE_BLOCKS),
                *range(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS),
            ]
        elif structure == ROOTFILE:
            blocks = range(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS)
        else:
            raise ValueError(f"unknown disk structure {structure}")
        for number in blocks:
            self.write_block(number, number)

    def list_files(self) -> list[XosFile]:
        """All files recorded in the inode table, in table order."""
        self.check_exists()
        files = []
        last = INODE + NO_OF_INODE_BLOCKS - 1
        for number in range(INODE, INODE + NO_OF_INODE_BLOCKS):
            block = self.blocks[number]
            for entry in range(0, BLOCK_SIZE, INODE_ENTRY_SIZE):
                if number == last and entry >= _USER_TABLE_IN_LAST_BLOCK:
                    continue
                name = block[entry + INODE_ENTRY_FILENAME]
                if word_value(name) != -1:
                    files.append(XosFile(name, word_value(block[entry + INODE_ENTRY_FILESIZE])))
        return files

    def load(self) -> None:
        """Read the free list, inode table and root file from the disk file."""
        for start, count in (
            (DISK_FREE_LIST, NO_OF_FREE_LIST_BLOCKS),
            (INODE, NO_OF_INODE_BLOCKS),
            (ROOTFILE, NO_OF_ROOTFILE_BLOCKS),
        ):
            for number in range(start, start + count):
                self.read_block(number, number)

    def clear(self) -> None:
        """Wipe the whole memory copy."""
        for number in range(XFS_NUM_BLOCKS):
            self.empty_block(number)