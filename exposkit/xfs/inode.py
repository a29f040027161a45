"""Inode table and root file entries in the memory copy of the disk."""

from __future__ import annotations

from typing import Sequence

from exposkit.xfs.layout import (
    BLOCK_SIZE,
    INODE,
    INODE_ENTRY_DATABLOCK,
    INODE_ENTRY_FILENAME,
    INODE_ENTRY_FILESIZE,
    INODE_ENTRY_FILETYPE,
    INODE_ENTRY_PERMISSION,
    INODE_ENTRY_SIZE,
    INODE_ENTRY_USERID,
    INODE_NUM_DATA_BLOCKS,
    ROOTFILE,
    ROOTFILE_ENTRY_FILENAME,
    ROOTFILE_ENTRY_FILESIZE,
    ROOTFILE_ENTRY_FILETYPE,
    ROOTFILE_ENTRY_SIZE,
    USER_TABLE_OFFSET,
    FileType,
)
from exposkit.xfs.vdisk import VirtualDisk, word_value

_OWNERSHIP = {
    FileType.ROOT: (0, 0),
    FileType.DATA: (1, 1),
    FileType.EXEC: (0, -1),
}


def _entries():
    """Locations of inode entries, excluding the user table that follows them."""
    return range(0, USER_TABLE_OFFSET, INODE_ENTRY_SIZE)


def _name_word(disk: VirtualDisk, location: int) -> str:
    block, index = divmod(location + INODE_ENTRY_FILENAME, BLOCK_SIZE)
    return disk.word(INODE + block, index)


def find_empty_inode_entry(disk: VirtualDisk) -> int | None:
    """Location of the first unused inode entry, or None when the table is full."""
    for location in _entries():
        if word_value(_name_word(disk, location)) == -1:
            return location
    return None


def find_inode_entry(disk: VirtualDisk, name: str | None) -> int | None:
    """Location of the inode entry of the named file, or None."""
    if name is None:
        return None
    for location in _entries():
        word = _name_word(disk, location)
        if word == name and word_value(word) != -1:
            return location
    return None


def add_inode_entry(
    disk: VirtualDisk,
    start: int,
    file_type: FileType,
    name: str,
    size: int,
    blocks: Sequence[int],
) -> None:
    """Record a file in the inode table and in the root file."""
    file_type = FileType(file_type)
    base = INODE * BLOCK_SIZE + start
    disk.store_value_at(base + INODE_ENTRY_FILETYPE, int(file_type))
    disk.store_string_at(base + INODE_ENTRY_FILENAME, name)
    disk.store_value_at(base + INODE_ENTRY_FILESIZE, size)
    user_id, permission = _OWNERSHIP[file_type]
    disk.store_value_at(base + INODE_ENTRY_USERID, user_id)
    disk.store_value_at(base + INODE_ENTRY_PERMISSION, permission)
    padded = list(blocks)[:INODE_NUM_DATA_BLOCKS]
    padded += [-1] * (INODE_NUM_DATA_BLOCKS - len(padded))
    for offset, number in enumerate(padded):
        disk.store_value_at(base + INODE_ENTRY_DATABLOCK + offset, number)
    add_root_file_entry(
        disk, start // INODE_ENTRY_SIZE * ROOTFILE_ENTRY_SIZE, file_type, name, size
    )


def add_root_file_entry(
    disk: VirtualDisk, start: int, file_type: FileType, name: str, size: int
) -> None:
    """Record a file's name, size and type in the root file."""
    base = ROOTFILE * BLOCK_SIZE + start
    disk.store_string_at(base + ROOTFILE_ENTRY_FILENAME, name)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILESIZE, size)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILETYPE, int(file_type))


def remove_inode_entry(disk: VirtualDisk, location: int) -> None:
    """Clear an inode entry and the matching root file entry."""
    base = INODE * BLOCK_SIZE + location
    disk.store_value_at(base + INODE_ENTRY_FILETYPE, -1)
    disk.store_value_at(base + INODE_ENTRY_FILENAME, -1)
    disk.store_value_at(base + INODE_ENTRY_FILESIZE, 0)
    disk.store_value_at(base + INODE_ENTRY_USERID, -1)
    disk.store_value_at(base + INODE_ENTRY_PERMISSION, -1)
    for offset in range(INODE_NUM_DATA_BLOCKS):
        disk.store_value_at(base + INODE_ENTRY_DATABLOCK + offset, -1)
    remove_root_file_entry(disk, location // INODE_ENTRY_SIZE * ROOTFILE_ENTRY_SIZE)


def remove_root_file_entry(disk: VirtualDisk, location: int) -> None:
    """Clear a root file entry."""
    base = ROOTFILE * BLOCK_SIZE + location
    disk.store_value_at(base + ROOTFILE_ENTRY_FILETYPE, -1)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILENAME, -1)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILESIZE, 0)


def data_blocks(disk: VirtualDisk, location: int) -> list[int]:
    """The data block numbers recorded in an inode entry."""
    base = INODE * BLOCK_SIZE + location + INODE_ENTRY_DATABLOCK
    return [disk.get_value_at(base + offset) for offset in range(INODE_NUM_DATA_BLOCKS)]