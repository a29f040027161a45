"""Reading assembly and data files into disk blocks, and path helpers."""

from __future__ import annotations

import os
from typing import TextIO

from exposkit.xfs.layout import BLOCK_SIZE, WORD_SIZE, XSM_WORD_SIZE

_SPACE = " \t\n\v\f\r"
_LINE_LIMIT = 100
_NAME_LIMIT = 16
_DIGITS = "0123456789"


def expand_path(path: str) -> str:
    """Replace the first path component by the environment variable it names.

    The first character of the component (normally ``$``) is dropped to get
    the variable name; the component is kept when no such variable is set.
    """
    head, separator, rest = path.partition("/")
    name = head[1:]
    value = os.environ.get(name) if name else None
    return f"{head if value is None else value}{separator}{rest}"


def add_extension(filename: str, ext: str) -> str:
    """Append ``ext`` if missing, keeping the name under 16 characters."""
    if len(filename) >= _NAME_LIMIT:
        return filename[:11] + ext
    if filename[-4:] != ext:
        filename += ext
        if len(filename) >= _NAME_LIMIT:
            return filename[:11] + ext
    return filename


def _read_chunk(stream: TextIO, limit: int) -> tuple[str, bool]:
    """Read like a line buffer of ``limit`` bytes; report whether input ran out."""
    size = limit - 1
    chunk = stream.readline(size)
    at_eof = chunk == "" or (not chunk.endswith("\n") and len(chunk) < size)
    return chunk, at_eof


def _strtok(text: str, pos: int, delims: str) -> tuple[str | None, int]:
    while pos < len(text) and text[pos] in delims:
        pos += 1
    if pos >= len(text):
        return None, pos
    end = pos
    while end < len(text) and text[end] not in delims:
        end += 1
    return text[pos:end], min(end + 1, len(text))


def _word(text: str) -> str:
    return text[:WORD_SIZE]


def _pad(words: list[str]) -> list[str]:
    return words + [""] * (BLOCK_SIZE - len(words))


def _assemble_line(line: str) -> list[str]:
    """The words one source line of assembly occupies on disk."""
    quote = line.find('"')
    if quote != -1 and len(line) - quote > 16:
        buffer = line[:quote + 14] + '"'
    else:
        buffer = line[:31]
    if len(buffer) <= 1:
        return []
    if buffer.endswith("\n"):
        buffer = buffer[:-1]

    instr, pos = _strtok(buffer, 0, " ")
    arg1, pos = _strtok(buffer, pos, ",")
    arg2, pos = _strtok(buffer, pos, "")
    if instr is None:
        return []

    name = instr.strip(_SPACE)
    if name[:1] and name[0] in _DIGITS:
        return [_word(name)]
    if arg1 is not None:
        first = arg1.strip(_SPACE)
        if arg2 is not None:
            first += ","
        second = arg2.strip(_SPACE) if arg2 is not None else ""
        return [_word(f"{name} {first}"), _word(second)]
    return [_word(instr), ""]


def pack_assembly_block(stream: TextIO) -> tuple[list[str], bool]:
    """Pack assembly lines into one block of words.

    Returns the 512 words and True when the block filled up before the
    input ended. An instruction takes two words, a bare number one.
    """
    words: list[str] = []
    while len(words) < BLOCK_SIZE:
        line, at_eof = _read_chunk(stream, _LINE_LIMIT)
        if at_eof:
            return _pad(words), False
        words.extend(_assemble_line(line))
    return words[:BLOCK_SIZE], True


def pack_data_block(stream: TextIO) -> tuple[list[str], bool]:
    """Pack data lines into one block, one word per line piece of up to 15 characters.

    Returns the 512 words and True when the block filled up before the input ended.
    """
    words: list[str] = []
    for _ in range(BLOCK_SIZE):
        chunk, at_eof = _read_chunk(stream, XSM_WORD_SIZE)
        if at_eof:
            return _pad(words), False
        cut = chunk.find("\n", 1)
        words.append(chunk if cut == -1 else chunk[:cut])
    return words, True


def data_file_size(stream: TextIO) -> int:
    """Number of words a data file takes, counted from its start."""
    stream.seek(0)
    count = 0
    while True:
        _, at_eof = _read_chunk(stream, XSM_WORD_SIZE)
        count += 1
        if at_eof:
            return count - 1