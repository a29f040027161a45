"""Sixteen-byte machine words and the basic XSM machine constants."""

from __future__ import annotations

import enum

from exposkit.xfs.vdisk import word_value

XSM_WORD_SIZE = 16
XSM_MEMORY_NUMPAGES = 128
XSM_PAGE_SIZE = 512

XSM_REGSIZE = XSM_WORD_SIZE
XSM_NUM_REG = 33

XSM_INSTRUCTION_SIZE = 2

XSM_DISK_IDLE = 0
XSM_DISK_BUSY = 1
XSM_CONSOLE_IDLE = 0
XSM_CONSOLE_BUSY = 1

XSM_INTERRUPT_EXCEPTION = 0
XSM_INTERRUPT_TIMER = 1
XSM_INTERRUPT_DISK = 2
XSM_INTERRUPT_CONSOLE = 3

XSM_DEFAULT_DISK = "../xfs-interface/disk.xfs"

_INT_RANGE = 2**32
_INT_MIN = -(2**31)
_DIGITS = "0123456789"


class WordType(enum.IntEnum):
    """What the contents of a word look like."""

    STRING = 0
    INTEGER = 1


class Word:
    """A machine word: sixteen bytes holding a NUL-terminated string.

    A word either owns its bytes or is a view into a larger buffer, such
    as the machine memory or the disk.
    """

    __slots__ = ("_raw",)

    def __init__(self, text: str = "") -> None:
        self._raw = memoryview(bytearray(XSM_WORD_SIZE))
        self.store_string(text)

    @classmethod
    def view(cls, buffer: bytearray, offset: int) -> "Word":
        """A word backed by the sixteen bytes of ``buffer`` at ``offset``."""
        if offset < 0:
            raise IndexError(f"word offset {offset} out of range")
        raw = memoryview(buffer)[offset:offset + XSM_WORD_SIZE]
        if len(raw) != XSM_WORD_SIZE:
            raise IndexError(f"word offset {offset} out of range")
        word = cls.__new__(cls)
        word._raw = raw
        return word

    @property
    def text(self) -> str:
        """The string held in the word, up to its first NUL byte."""
        return bytes(self._raw).split(b"\0", 1)[0].decode("latin-1")

    @property
    def raw(self) -> bytes:
        """All sixteen bytes of the word, including anything after the NUL."""
        return bytes(self._raw)

    @raw.setter
    def raw(self, data: bytes) -> None:
        if len(data) != XSM_WORD_SIZE:
            raise ValueError(f"a word takes exactly {XSM_WORD_SIZE} bytes")
        self._raw[:] = data

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Word({self.text!r})"

    def kind(self) -> WordType:
        """INTEGER if the word is an optional sign followed by digits only."""
        text = self.text
        if text[:1] in ("+", "-"):
            text = text[1:]
        if all(char in _DIGITS for char in text):
            return WordType.INTEGER
        return WordType.STRING

    def integer(self) -> int:
        """The leading integer of the word, or 0 if it has none."""
        return word_value(self.text)

    def store_integer(self, value: int) -> None:
        """Store a 32-bit integer in decimal; bytes after its NUL are left as they were."""
        wrapped = (int(value) - _INT_MIN) % _INT_RANGE + _INT_MIN
        data = str(wrapped).encode("ascii") + b"\0"
        self._raw[:len(data)] = data

    def store_string(self, text: str) -> None:
        """Store at most sixteen characters, padding the rest of the word with NUL bytes."""
        data = text.encode("latin-1", "replace").split(b"\0", 1)[0][:XSM_WORD_SIZE]
        self._raw[:] = data.ljust(XSM_WORD_SIZE, b"\0")

    def copy_from(self, other: "Word") -> None:
        """Copy all bytes of another word into this one."""
        self._raw[:] = bytes(other._raw)

    def encrypt(self) -> None:
        """Replace the word by the sum of its sixteen bytes taken as signed chars."""
        total = sum(byte - 256 if byte > 127 else byte for byte in self._raw)
        self.store_integer(total)