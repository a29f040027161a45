"""Operations on XFS disk files: formatting, loading, exporting and deleting."""

from __future__ import annotations

import enum
import io
from itertools import takewhile
from os import PathLike
from typing import Iterable, TextIO

from exposkit.xfs.encoding import (
    add_extension,
    data_file_size,
    expand_path,
    pack_assembly_block,
    pack_data_block,
)
from exposkit.xfs.inode import (
    add_inode_entry,
    data_blocks,
    find_empty_inode_entry,
    find_inode_entry,
    remove_inode_entry,
)
from exposkit.xfs.labels import LabelError, resolve_labels
from exposkit.xfs.layout import (
    BLOCK_SIZE,
    CONSOLE_INT,
    CONSOLE_INT_SIZE,
    DISK_FREE_LIST,
    DISKCONTROLLER_INT,
    DISKCONTROLLER_INT_SIZE,
    EX_HANDLER,
    EX_HANDLER_SIZE,
    IDLE_BLOCK,
    INIT_BLOCK,
    INODE,
    INODE_MAX_BLOCK_NUM,
    INODE_NUM_DATA_BLOCKS,
    INT_SIZE,
    LIBRARY_BLOCK,
    MEM_CONSOLE_INT,
    MEM_DISKCONTROLLER_INT,
    MEM_EX_HANDLER,
    MEM_OS_STARTUP_CODE,
    MEM_TIMERINT,
    MOD_SIZE,
    NO_OF_FREE_LIST_BLOCKS,
    NO_OF_IDLE_BLOCKS,
    NO_OF_INIT_BLOCKS,
    NO_OF_INODE_BLOCKS,
    NO_OF_LIBRARY_BLOCKS,
    NO_OF_ROOTFILE_BLOCKS,
    NO_OF_SHELL_BLOCKS,
    OS_STARTUP_CODE,
    OS_STARTUP_CODE_SIZE,
    ROOTFILE,
    SHELL_BLOCK,
    TEMP_BLOCK,
    TIMERINT,
    TIMERINT_SIZE,
    USER_TABLE_OFFSET,
    XSM_PAGE_SIZE,
    FileType,
    XosFile,
    interrupt_block,
    interrupt_page,
    module_block,
    module_page,
)
from exposkit.xfs.vdisk import VirtualDisk, word_value

_ENCODING = "latin-1"
_NAME_LIMIT = 15


class XfsError(Exception):
    """An XFS operation could not be carried out."""


class CodeRegion(enum.Enum):
    """Fixed disk regions holding system code: first block, block count, memory page."""

    OS_STARTUP = (OS_STARTUP_CODE, OS_STARTUP_CODE_SIZE, MEM_OS_STARTUP_CODE)
    EX_HANDLER = (EX_HANDLER, EX_HANDLER_SIZE, MEM_EX_HANDLER)
    TIMER = (TIMERINT, TIMERINT_SIZE, MEM_TIMERINT)
    DISK_CONTROLLER = (DISKCONTROLLER_INT, DISKCONTROLLER_INT_SIZE, MEM_DISKCONTROLLER_INT)
    CONSOLE = (CONSOLE_INT, CONSOLE_INT_SIZE, MEM_CONSOLE_INT)
    INIT = (INIT_BLOCK, NO_OF_INIT_BLOCKS, None)
    SHELL = (SHELL_BLOCK, NO_OF_SHELL_BLOCKS, None)
    IDLE = (IDLE_BLOCK, NO_OF_IDLE_BLOCKS, None)
    LIBRARY = (LIBRARY_BLOCK, NO_OF_LIBRARY_BLOCKS, None)

    def __init__(self, block: int, count: int, page: int | None) -> None:
        self.block = block
        self.count = count
        self.page = page


def _open_text(path: str, mode: str = "r") -> TextIO:
    return open(path, mode, encoding=_ENCODING, newline="\n")


def _write_words(disk: VirtualDisk, block: int, words: Iterable[str]) -> None:
    disk.empty_block(TEMP_BLOCK)
    for index, word in enumerate(words):
        disk.set_word(TEMP_BLOCK, index, word)
    disk.write_block(TEMP_BLOCK, block)


def _read_words(disk: VirtualDisk, block: int) -> list[str]:
    disk.empty_block(TEMP_BLOCK)
    disk.read_block(TEMP_BLOCK, block)
    words = list(disk.blocks[TEMP_BLOCK])
    disk.empty_block(TEMP_BLOCK)
    return words


def _base_name(path: str) -> str:
    return path.rsplit("/", 1)[-1][:_NAME_LIMIT]


def format_disk(disk: VirtualDisk, format: bool) -> None:
    """Create the disk file; when ``format`` is true, lay down an empty file system."""
    disk.create(False)
    if not format:
        return
    disk.clear()
    disk.set_default_values(DISK_FREE_LIST)
    disk.commit(DISK_FREE_LIST)
    disk.set_default_values(INODE)
    disk.set_default_values(ROOTFILE)
    root_blocks = [ROOTFILE + offset for offset in range(NO_OF_ROOTFILE_BLOCKS)]
    root_blocks += [-1] * (INODE_NUM_DATA_BLOCKS - len(root_blocks))
    add_inode_entry(
        disk, 0, FileType.ROOT, "root", NO_OF_ROOTFILE_BLOCKS * BLOCK_SIZE, root_blocks
    )
    user_table = INODE * BLOCK_SIZE + USER_TABLE_OFFSET
    for offset, value in enumerate(("kernel", "-1", "root", "452")):
        disk.store_string_at(user_table + offset, value)
    disk.commit(INODE)
    disk.commit(ROOTFILE)


def list_files(disk: VirtualDisk) -> list[XosFile]:
    """All files on the disk."""
    return disk.list_files()


def _locate(disk: VirtualDisk, name: str) -> int:
    location = find_inode_entry(disk, name)
    if location is None:
        raise XfsError(f"File '{name}' not found!")
    return location


def file_contents(disk: VirtualDisk, name: str) -> list[str]:
    """The non-empty words of a file, in order."""
    disk.check_exists()
    location = _locate(disk, name)
    words: list[str] = []
    for block in takewhile(lambda number: number > 0, data_blocks(disk, location)):
        words.extend(word for word in _read_words(disk, block) if word)
    return words


def export_file(disk: VirtualDisk, name: str, unix_path: str | PathLike) -> None:
    """Write every word of a file's blocks, one per line, to a UNIX file."""
    disk.check_exists()
    location = _locate(disk, name)
    blocks = list(takewhile(lambda number: number > 0, data_blocks(disk, location)))
    target = expand_path(str(unix_path))
    try:
        handle = _open_text(target, "w")
    except OSError as exc:
        raise XfsError(f"File '{target}' not found!") from exc
    with handle:
        for block in blocks:
            for word in _read_words(disk, block):
                handle.write(f"{word}\n")


def clear_blocks(disk: VirtualDisk, start: int, count: int) -> None:
    """Blank ``count`` disk blocks starting at ``start``."""
    disk.empty_block(TEMP_BLOCK)
    for number in range(start, start + count):
        disk.write_block(TEMP_BLOCK, number)


def copy_blocks_to_file(disk: VirtualDisk, start: int, end: int, path: str | PathLike) -> None:
    """Write the words of disk blocks ``start`` to ``end`` inclusive to a UNIX file."""
    disk.check_exists()
    target = expand_path(str(path))
    try:
        handle = _open_text(target, "w")
    except OSError as exc:
        raise XfsError(f"File '{target}' not found!") from exc
    with handle:
        for number in range(start, end + 1):
            disk.empty_block(TEMP_BLOCK)
            disk.read_block(TEMP_BLOCK, number)
            for word in disk.blocks[TEMP_BLOCK]:
                handle.write(f"{word}\n")


def _load_code_stream(disk: VirtualDisk, stream: TextIO, start: int, count: int) -> None:
    full = False
    for offset in range(count):
        words, full = pack_assembly_block(stream)
        _write_words(disk, start + offset, words)
        if not full:
            break
    if full:
        clear_blocks(disk, start, count)
        raise XfsError(f"Code exceeds {count} block")


def load_code(disk: VirtualDisk, path: str | PathLike, start: int, count: int) -> None:
    """Load an assembly file into ``count`` blocks starting at ``start``."""
    source = expand_path(str(path))
    try:
        handle = _open_text(source)
    except OSError as exc:
        raise XfsError(f"File {source} not found.") from exc
    with handle:
        _load_code_stream(disk, handle, start, count)


def load_code_with_labels(
    disk: VirtualDisk, path: str | PathLike, block: int, count: int, page: int
) -> None:
    """Resolve labels for code that runs from memory ``page``, then load it."""
    source = expand_path(str(path))
    try:
        with _open_text(source) as handle:
            lines = list(handle)
    except OSError as exc:
        raise XfsError("Can't open source file.") from exc
    try:
        resolved = resolve_labels(lines, page * XSM_PAGE_SIZE)
    except LabelError as exc:
        raise XfsError(str(exc)) from exc
    stream = io.StringIO("".join(f"{line}\n" for line in resolved), newline="\n")
    _load_code_stream(disk, stream, block, count)


def load_region(disk: VirtualDisk, region: CodeRegion, path: str | PathLike) -> None:
    """Load code into one of the fixed system regions."""
    if region.page is None:
        load_code(disk, path, region.block, region.count)
    else:
        load_code_with_labels(disk, path, region.block, region.count, region.page)


def delete_region(disk: VirtualDisk, region: CodeRegion) -> None:
    """Blank one of the fixed system regions."""
    clear_blocks(disk, region.block, region.count)


def load_interrupt(disk: VirtualDisk, path: str | PathLike, number: int) -> None:
    """Load interrupt routine ``number``."""
    load_code_with_labels(
        disk, path, interrupt_block(number), INT_SIZE, interrupt_page(number)
    )


def delete_interrupt(disk: VirtualDisk, number: int) -> None:
    """Blank interrupt routine ``number``."""
    clear_blocks(disk, interrupt_block(number), INT_SIZE)


def load_module(disk: VirtualDisk, path: str | PathLike, number: int) -> None:
    """Load module ``number``."""
    load_code_with_labels(disk, path, module_block(number), MOD_SIZE, module_page(number))


def delete_module(disk: VirtualDisk, number: int) -> None:
    """Blank module ``number``."""
    clear_blocks(disk, module_block(number), MOD_SIZE)


def _allocate(disk: VirtualDisk, count: int, message: str) -> list[int]:
    blocks: list[int] = []
    for _ in range(count):
        number = disk.find_free_block()
        if number is None:
            disk.free_blocks(blocks)
            raise XfsError(message)
        blocks.append(number)
    return blocks


def _claim_inode(disk: VirtualDisk, name: str, blocks: list[int]) -> int:
    if find_inode_entry(disk, name) is not None:
        disk.free_blocks(blocks)
        raise XfsError(
            "Disk already contains the file with this name. Try again with a different name."
        )
    location = find_empty_inode_entry(disk)
    if location is None:
        disk.free_blocks(blocks)
        raise XfsError("No free INODE entry found.")
    return location


def _padded(blocks: list[int]) -> list[int]:
    return blocks + [-1] * (INODE_MAX_BLOCK_NUM - len(blocks))


def load_data(disk: VirtualDisk, path: str | PathLike) -> XosFile:
    """Store a UNIX data file on the disk as a data file; returns its entry."""
    text = str(path)
    filename = add_extension(_base_name(text), ".dat")
    source = expand_path(text)
    try:
        handle = _open_text(source)
    except OSError as exc:
        raise XfsError(f"File '{source}' not found.!") from exc
    with handle:
        words = data_file_size(handle)
        needed = -(-words // BLOCK_SIZE)
        if needed > INODE_MAX_BLOCK_NUM:
            raise XfsError(
                f"The size of file exceeds {INODE_MAX_BLOCK_NUM} blocks\n"
                f"The file contains {words} words, an xfs file can have only upto "
                f"{INODE_MAX_BLOCK_NUM * BLOCK_SIZE} words"
            )
        handle.seek(0)
        blocks = _allocate(disk, needed, "Disk does not have enough space to contain the file.")
        location = _claim_inode(disk, filename, blocks)
        disk.commit(DISK_FREE_LIST)
        disk.empty_block(TEMP_BLOCK)
        for number in blocks:
            block_words, _ = pack_data_block(handle)
            _write_words(disk, number, block_words)
    add_inode_entry(disk, location, FileType.DATA, filename, words, _padded(blocks))
    disk.commit(INODE)
    return XosFile(filename, words)


def load_executable(disk: VirtualDisk, path: str | PathLike) -> XosFile:
    """Store an assembly file on the disk as an executable; returns its entry."""
    text = str(path)
    filename = add_extension(_base_name(text), ".xsm")
    source = expand_path(text)
    try:
        handle = _open_text(source)
    except OSError as exc:
        raise XfsError(f"File {source} not found.") from exc
    with handle:
        lines = handle.read().count("\n")
        needed = lines // (BLOCK_SIZE // 2) + 1
        if needed > INODE_MAX_BLOCK_NUM:
            raise XfsError(f"The size of file exceeds {INODE_MAX_BLOCK_NUM} blocks")
        handle.seek(0)
        blocks = _allocate(disk, needed, "Insufficient disk space!")
        location = _claim_inode(disk, filename, blocks)
        disk.commit(DISK_FREE_LIST)
        disk.empty_block(TEMP_BLOCK)
        for number in blocks:
            block_words, _ = pack_assembly_block(handle)
            _write_words(disk, number, block_words)
    add_inode_entry(disk, location, FileType.EXEC, filename, lines * 2, _padded(blocks))
    disk.commit(INODE)
    return XosFile(filename, lines * 2)


def delete_file(disk: VirtualDisk, name: str) -> None:
    """Remove a data or executable file and free its blocks."""
    if name == "root":
        raise XfsError("Root file cannot be deleted")
    disk.check_exists()
    location = _locate(disk, name)
    disk.free_blocks(data_blocks(disk, location))
    remove_inode_entry(disk, location)
    disk.commit(INODE)
    disk.commit(DISK_FREE_LIST)


def free_list(disk: VirtualDisk) -> list[str]:
    """The words of the disk free list; a block is free when its word's value is 0."""
    disk.check_exists()
    words: list[str] = []
    for offset in range(NO_OF_FREE_LIST_BLOCKS):
        words.extend(disk.blocks[DISK_FREE_LIST + offset])
    return words


def free_count(words: Iterable[str]) -> int:
    """Number of free blocks recorded in free list words."""
    return sum(1 for word in words if word_value(word) == 0)


def dump_root_file(disk: VirtualDisk, path: str | PathLike) -> None:
    """Copy the root file blocks to a UNIX file."""
    copy_blocks_to_file(disk, ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS - 1, path)


def dump_inode_table(disk: VirtualDisk, path: str | PathLike) -> None:
    """Copy the inode table and user table blocks to a UNIX file."""
    copy_blocks_to_file(disk, INODE, INODE + NO_OF_INODE_BLOCKS - 1, path)